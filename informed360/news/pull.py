"""RSS/Atom feed fetching.

Retrieves public feeds without API keys and parses them into
``RawFeedItem`` records. Every fetch resolves to a ``FeedSuccess`` or a
``FeedFailure``; nothing raises past ``FeedClient.fetch``.
"""

from __future__ import annotations

import time
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Union
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from informed360.config import FeedConfig, get_config
from informed360.logging_setup import get_logger
from informed360.news.models import FeedSource, RawFeedItem

logger = get_logger("news.pull")

# Timeout for feed requests (seconds)
REQUEST_TIMEOUT = 15.0

# Only the head of each feed is considered
MAX_ITEMS_PER_FEED = 15

USER_AGENT = "Informed360Bot/1.0 (+https://informed360)"
ACCEPT = "application/rss+xml, application/xml;q=0.9,*/*;q=0.8"
READ_CHUNK_SIZE = 64 * 1024

ATOM = "{http://www.w3.org/2005/Atom}"
RSS1 = "{http://purl.org/rss/1.0/}"
CONTENT = "{http://purl.org/rss/1.0/modules/content/}"
MEDIA = "{http://search.yahoo.com/mrss/}"
DC = "{http://purl.org/dc/elements/1.1/}"
ITUNES = "{http://www.itunes.com/dtds/podcast-1.0.dtd}"
RDF = "{http://www.w3.org/1999/02/22-rdf-syntax-ns#}"

Opener = Callable[[str, Dict[str, str], float], bytes]


@dataclass(frozen=True)
class FeedSuccess:
    """Items parsed from one feed."""

    source: FeedSource
    items: List[RawFeedItem] = field(default_factory=list)
    feed_title: Optional[str] = None

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class FeedFailure:
    """A feed that could not be fetched or parsed."""

    source: FeedSource
    reason: str

    @property
    def ok(self) -> bool:
        return False


FeedResult = Union[FeedSuccess, FeedFailure]


@dataclass
class ParsedFeed:
    """Feed document reduced to its title and items."""

    title: Optional[str]
    items: List[RawFeedItem]


def _local_name(tag: object) -> str:
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def _text(element: Optional[ET.Element]) -> Optional[str]:
    """Stripped element text, None when absent or blank."""
    if element is None or element.text is None:
        return None
    text = element.text.strip()
    return text or None


def _first_text(parent: ET.Element, *tags: str) -> Optional[str]:
    """Text of the first child among ``tags`` that has any."""
    for tag in tags:
        value = _text(parent.find(tag))
        if value:
            return value
    return None


def _first_attr(parent: ET.Element, attr: str, *tags: str) -> Optional[str]:
    """Attribute of the first child among ``tags`` that carries it."""
    for tag in tags:
        for child in parent.findall(tag):
            value = (child.get(attr) or "").strip()
            if value:
                return value
    return None


def _item_image(item: ET.Element) -> Optional[str]:
    """Item-level ``<image>`` object (url child, bare text or itunes href)."""
    for tag in ("image", RSS1 + "image"):
        image = item.find(tag)
        if image is None:
            continue
        url = _first_text(image, "url", RSS1 + "url") or _text(image)
        if url:
            return url
        if image.get("href"):
            return image.get("href")
    return _first_attr(item, "href", ITUNES + "image")


def _parse_rss_item(item: ET.Element) -> RawFeedItem:
    """Parse an RSS 2.0 or RSS 1.0 (RDF) ``<item>``."""
    guid = _first_text(item, "guid")
    link = _first_text(item, "link", RSS1 + "link")
    if not link:
        link = item.get(RDF + "about")

    return RawFeedItem(
        title=_first_text(item, "title", RSS1 + "title", DC + "title"),
        link=link,
        guid=guid,
        enclosure_url=_first_attr(item, "url", "enclosure"),
        media_content_url=_first_attr(
            item, "url", MEDIA + "content", MEDIA + "group/" + MEDIA + "content", MEDIA + "thumbnail"
        ),
        image_url=_item_image(item),
        content=_first_text(item, CONTENT + "encoded"),
        summary=_first_text(item, "description", RSS1 + "description"),
        iso_date=_first_text(item, DC + "date"),
        pub_date=_first_text(item, "pubDate"),
    )


def _atom_link(entry: ET.Element, rel: str) -> Optional[str]:
    for link in entry.findall(ATOM + "link"):
        if link.get("rel", "alternate") == rel and link.get("href"):
            return link.get("href")
    return None


def _parse_atom_entry(entry: ET.Element) -> RawFeedItem:
    """Parse an Atom ``<entry>``."""
    return RawFeedItem(
        title=_first_text(entry, ATOM + "title"),
        link=_atom_link(entry, "alternate"),
        guid=_first_text(entry, ATOM + "id"),
        enclosure_url=_atom_link(entry, "enclosure"),
        media_content_url=_first_attr(
            entry, "url", MEDIA + "content", MEDIA + "group/" + MEDIA + "content", MEDIA + "thumbnail"
        ),
        image_url=_item_image(entry),
        content=_first_text(entry, ATOM + "content"),
        summary=_first_text(entry, ATOM + "summary"),
        iso_date=_first_text(entry, ATOM + "published", ATOM + "updated", DC + "date"),
        pub_date=None,
    )


def parse_feed(document: Union[str, bytes]) -> ParsedFeed:
    """Parse an RSS or Atom document.

    Raises:
        ET.ParseError: If the document is not well-formed XML.
    """
    root = ET.fromstring(document)

    if root.tag == ATOM + "feed":
        entries = root.findall(ATOM + "entry")
        return ParsedFeed(
            title=_first_text(root, ATOM + "title"),
            items=[_parse_atom_entry(entry) for entry in entries],
        )

    channel = root.find("channel")
    if channel is None:
        channel = root.find(RSS1 + "channel")
    title = _first_text(channel, "title", RSS1 + "title") if channel is not None else None

    items = [_parse_rss_item(el) for el in root.iter() if _local_name(el.tag) == "item"]
    return ParsedFeed(title=title, items=items)


def _http_get(url: str, headers: Dict[str, str], timeout: float) -> bytes:
    """Fetch a URL body with the standard library client.

    ``urlopen`` applies ``timeout`` to each socket operation only, so the
    body is read in chunks against an overall deadline.

    Raises:
        TimeoutError: If the whole fetch takes longer than ``timeout`` seconds.
    """
    deadline = time.monotonic() + timeout
    req = Request(url, headers=headers)
    chunks: List[bytes] = []

    with urlopen(req, timeout=timeout) as response:
        while True:
            if time.monotonic() > deadline:
                raise TimeoutError(f"Fetch exceeded {timeout}s")
            chunk = response.read(READ_CHUNK_SIZE)
            if not chunk:
                break
            chunks.append(chunk)

    return b"".join(chunks)


class FeedClient:
    """Long-lived feed client shared across aggregation runs.

    Holds only immutable settings, so one instance can serve every
    request for the lifetime of the process.
    """

    def __init__(
        self,
        timeout: float = REQUEST_TIMEOUT,
        max_items: int = MAX_ITEMS_PER_FEED,
        user_agent: str = USER_AGENT,
        opener: Optional[Opener] = None,
    ) -> None:
        self.timeout = timeout
        self.max_items = max_items
        self.headers = {"User-Agent": user_agent, "Accept": ACCEPT}
        self._opener: Opener = opener or _http_get

    @classmethod
    def from_config(cls, config: Optional[FeedConfig] = None) -> "FeedClient":
        """Build a client from feed configuration."""
        config = config or get_config().feeds
        return cls(
            timeout=config.timeout_seconds,
            max_items=config.max_items,
            user_agent=config.user_agent,
        )

    def fetch(self, source: FeedSource) -> FeedResult:
        """Fetch and parse one feed; failures come back as FeedFailure."""
        url = source.url
        started = time.monotonic()
        try:
            body = self._opener(url, dict(self.headers), self.timeout)
            if time.monotonic() - started > self.timeout:
                raise TimeoutError(f"Fetch exceeded {self.timeout}s")
            parsed = parse_feed(body)
        except HTTPError as e:
            return self._fail(source, f"HTTP error {e.code}")
        except URLError as e:
            return self._fail(source, f"URL error: {e.reason}")
        except TimeoutError:
            return self._fail(source, f"Timeout after {self.timeout}s")
        except ET.ParseError as e:
            return self._fail(source, f"XML parse error: {e}")
        except Exception as e:
            return self._fail(source, f"{type(e).__name__}: {e}")

        items = parsed.items[: self.max_items]
        logger.info(
            "Fetched %d items from %s",
            len(items),
            url,
            extra={"extra_fields": {"feed": url, "items": len(items)}},
        )
        return FeedSuccess(source=source, items=items, feed_title=parsed.title)

    def _fail(self, source: FeedSource, reason: str) -> FeedFailure:
        logger.info(
            "Skipping feed %s: %s",
            source.url,
            reason,
            extra={"extra_fields": {"feed": source.url, "reason": reason}},
        )
        return FeedFailure(source=source, reason=reason)

    def fetch_all(
        self,
        sources: Sequence[FeedSource],
        delay_between_requests: float = 0.05,
    ) -> List[FeedResult]:
        """Fetch every source in order, one result per source.

        Args:
            sources: Feeds to fetch.
            delay_between_requests: Seconds to wait between consecutive fetches.

        Returns:
            Results aligned with ``sources``.
        """
        results: List[FeedResult] = []

        for i, source in enumerate(sources):
            results.append(self.fetch(source))

            # Rate limiting
            if delay_between_requests > 0 and i < len(sources) - 1:
                time.sleep(delay_between_requests)

        failed = sum(1 for r in results if not r.ok)
        if failed:
            logger.info("%d of %d feeds failed this run", failed, len(results))
        return results


def successes(results: Iterable[FeedResult]) -> List[FeedSuccess]:
    """Keep only the successful results, in order."""
    return [r for r in results if isinstance(r, FeedSuccess)]
