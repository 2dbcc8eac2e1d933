"""Nox automation for Informed360 development tasks."""

import json
from pathlib import Path

import nox

# Default sessions to run
nox.options.sessions = ["lint", "test"]


@nox.session(python=["3.11", "3.12", "3.13"])
def test(session: nox.Session) -> None:
    """Run the test suite with coverage."""
    session.install("-e", ".[test]")
    session.run(
        "pytest",
        "--cov=informed360",
        "--cov-report=term-missing",
        "--cov-fail-under=70",
        "-q",
        *session.posargs,
    )


@nox.session(python="3.11")
def lint(session: nox.Session) -> None:
    """Run linting with ruff and black."""
    session.install("ruff", "black")
    session.run("ruff", "check", ".")
    session.run("black", "--check", ".")


@nox.session(python="3.11")
def typecheck(session: nox.Session) -> None:
    """Run type checking with mypy."""
    session.install("mypy", "pandas-stubs", "types-PyYAML")
    session.install("-e", ".")
    session.run("mypy", "informed360")


@nox.session(python=False)
def smoke(session: nox.Session) -> None:
    """Run a minimal CLI smoke test without virtualenv or network.

    Writes an empty feed list and runs each offline subcommand against it.
    """
    root = Path(".")

    smoke_dir = root / "runs" / "ci_smoke"
    smoke_dir.mkdir(parents=True, exist_ok=True)
    feeds = smoke_dir / "rss-feeds.json"
    feeds.write_text(json.dumps([]))

    for command in ("news", "topics", "mood"):
        session.run(
            "python",
            "-m",
            "informed360.cli.dashboard",
            command,
            "--feeds",
            str(feeds),
            "--out",
            str(smoke_dir / f"{command}.json"),
        )

    session.run(
        "python",
        "-m",
        "informed360.cli.dashboard",
        "digest",
        "--feeds",
        str(feeds),
        "--out",
        str(smoke_dir / "topics.csv"),
    )

    session.log("Smoke test passed!")


@nox.session(python=False)
def clean(session: nox.Session) -> None:
    """Clean up generated files and caches."""
    import shutil

    paths_to_remove = [
        ".pytest_cache",
        ".mypy_cache",
        ".ruff_cache",
        ".coverage",
        "htmlcov",
        ".nox",
        "dist",
        "build",
        "runs",
        "*.egg-info",
    ]

    for pattern in paths_to_remove:
        for path in Path(".").glob(pattern):
            session.log(f"Removing {path}")
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()
