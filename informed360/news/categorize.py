"""Keyword-rule categorization of headlines.

Rules are evaluated in order against the title and the first match wins,
so a headline mentioning both an IPO and a cricket sponsor lands in
``business``.
"""

from __future__ import annotations

import re
from typing import Optional, Pattern, Tuple

CATEGORIES: Tuple[str, ...] = ("business", "sports", "tech", "politics", "world", "general")
DEFAULT_CATEGORY = "general"


def _rule(category: str, *keywords: str) -> Tuple[str, Pattern[str]]:
    pattern = r"\b(?:" + "|".join(keywords) + r")\b"
    return category, re.compile(pattern, re.IGNORECASE)


CATEGORY_RULES: Tuple[Tuple[str, Pattern[str]], ...] = (
    _rule(
        "business",
        r"markets?", r"stocks?", r"shares?", r"sensex", r"nifty", r"ipo", r"profits?",
        r"revenue", r"earnings", r"economy", r"economic", r"gdp", r"inflation",
        r"banks?", r"banking", r"rbi", r"investors?", r"rupee", r"startup funding",
        r"merger", r"acquisition", r"tax(?:es)?", r"budget", r"trade",
    ),
    _rule(
        "sports",
        r"cricket", r"football", r"soccer", r"hockey", r"tennis", r"badminton",
        r"olympics?", r"ipl", r"fifa", r"world cup", r"tournament", r"match(?:es)?",
        r"league", r"wickets?", r"innings", r"medal", r"coach", r"athletes?",
    ),
    _rule(
        "tech",
        r"tech", r"technology", r"ai", r"artificial intelligence", r"software",
        r"smartphones?", r"iphone", r"android", r"apple", r"google", r"microsoft",
        r"openai", r"chips?", r"semiconductors?", r"cyber", r"internet", r"5g",
        r"apps?", r"startups?", r"robots?", r"satellite", r"isro",
    ),
    _rule(
        "politics",
        r"elections?", r"polls?", r"minister", r"parliament", r"lok sabha",
        r"rajya sabha", r"government", r"govt", r"bjp", r"congress", r"opposition",
        r"mps?", r"mlas?", r"vote", r"voters?", r"cabinet", r"chief minister",
        r"president", r"senate", r"party",
    ),
    _rule(
        "world",
        r"world", r"global", r"international", r"united nations", r"war",
        r"ukraine", r"russia", r"china", r"pakistan", r"israel", r"gaza", r"iran",
        # Abbreviations only in capitals, so the pronoun "us" stays out
        r"(?-i:US|UN)", r"u\.s", r"u\.n", r"europe", r"foreign", r"summit", r"border", r"nato",
    ),
)


def categorize(title: str, hint: Optional[str] = None) -> str:
    """Assign a category to ``title``.

    Args:
        title: Cleaned headline.
        hint: Category declared by the feed source, used only when no rule
            matches and it names a known category.

    Returns:
        One of ``CATEGORIES``.
    """
    for category, pattern in CATEGORY_RULES:
        if pattern.search(title or ""):
            return category

    if hint and hint.lower() in CATEGORIES:
        return hint.lower()
    return DEFAULT_CATEGORY
