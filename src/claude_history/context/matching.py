"""Fuzzy relevance scoring for session search."""

from collections.abc import Callable

from rapidfuzz import fuzz
from rapidfuzz.distance import LCSseq

# (corpus, query) -> score, or None when the query does not match
Scorer = Callable[[str, str], float | None]


def fuzzy_score(corpus: str, query: str) -> float | None:
    """Score ``query`` against ``corpus`` as a subsequence match.

    Matching is smart-case: case-insensitive unless the query contains an
    uppercase character. Every query character must appear in the corpus in
    order; the score then rewards queries that occur closely together.
    """
    if not query or not corpus:
        return None
    if query == query.lower():
        corpus = corpus.lower()
    if LCSseq.similarity(query, corpus) < len(query):
        return None
    return fuzz.partial_ratio(query, corpus)
