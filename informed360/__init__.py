"""Informed360 - news dashboard backend.

Aggregates RSS/Atom feeds into a ranked, sentiment-scored article list
and derives trending topics from the aggregated titles.
"""

__version__ = "0.3.0"
