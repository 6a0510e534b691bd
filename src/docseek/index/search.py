"""Single-term query ranking."""

from __future__ import annotations

import math
from typing import Dict, List, Optional, Sequence

from docseek.models import Document, ScoredResult


def collect_raw_scores(docs: Sequence[Document], query: str) -> List[ScoredResult]:
    """One result per per-document index entry, scored by the term's frequency."""
    raw: List[ScoredResult] = []
    for doc in docs:
        for path, terms in doc.data.items():
            raw.append(ScoredResult(path=path, score=terms.get(query, 0.0)))
    return raw


def reference_score(raw: Sequence[ScoredResult]) -> float:
    """The divisor every raw score is normalized against: the first raw score."""
    return raw[0].score if raw else 0.0


def _ratio(numerator: float, denominator: float) -> float:
    if denominator == 0.0:
        return 0.0
    ratio = numerator / denominator
    return ratio if math.isfinite(ratio) else 0.0


def search(docs: Sequence[Document], query: str) -> List[ScoredResult]:
    """Rank ``docs`` for ``query``.

    Each path scores its raw term frequency divided by the first document's
    raw score. Degenerate ratios score ``0.0``. Only the first entry seen for
    a path is kept. Results are sorted by score, highest first, with ties in
    input order.
    """
    raw = collect_raw_scores(docs, query)
    divisor = reference_score(raw)

    normalized: Dict[str, float] = {}
    for entry in raw:
        if entry.path not in normalized:
            normalized[entry.path] = _ratio(entry.score, divisor)

    results = [ScoredResult(path=path, score=score) for path, score in normalized.items()]
    results.sort(key=lambda result: result.score, reverse=True)
    return results


def format_results(results: Sequence[ScoredResult]) -> List[str]:
    return [f"{rank}: {result.path}, {result.score}" for rank, result in enumerate(results, start=1)]


class Searcher:
    """High-level API to query a loaded index."""

    def __init__(self, docs: Sequence[Document]) -> None:
        self.docs = list(docs)

    def search(self, query: str, *, top_k: Optional[int] = None) -> List[ScoredResult]:
        results = search(self.docs, query)
        if top_k is not None:
            results = results[:top_k]
        return results
