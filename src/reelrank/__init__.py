"""ReelRank - movie reviews, watchlists and review-derived rankings."""

__version__ = "0.1.0"
