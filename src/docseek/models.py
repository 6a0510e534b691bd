"""Core DocSeek data models."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

TermFrequency = Dict[str, float]
PerDocumentIndex = Dict[str, TermFrequency]

_NANOS_PER_SECOND = 1_000_000_000


@dataclass(frozen=True, slots=True)
class Document:
    """One indexed document and the time its index entry was produced."""

    path: str
    data: PerDocumentIndex
    last_modified: float

    @property
    def term_frequency(self) -> TermFrequency:
        """Term frequencies recorded under the document's own path."""
        return self.data.get(self.path, {})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data": {path: dict(terms) for path, terms in self.data.items()},
            "path": self.path,
            "last_modified": encode_timestamp(self.last_modified),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Document":
        """Rebuild a document from its snapshot form.

        Raises ValueError when the payload does not have the snapshot shape.
        """
        if not isinstance(payload, Mapping):
            raise ValueError(f"Expected an object, got {type(payload).__name__}")
        try:
            path = payload["path"]
            raw_data = payload["data"]
            raw_time = payload["last_modified"]
        except KeyError as exc:
            raise ValueError(f"Missing field {exc.args[0]!r}") from exc

        if not isinstance(path, str):
            raise ValueError("Field 'path' must be a string")
        if not isinstance(raw_data, Mapping):
            raise ValueError("Field 'data' must be an object")

        data: PerDocumentIndex = {}
        for key, terms in raw_data.items():
            if not isinstance(terms, Mapping):
                raise ValueError(f"Term frequencies for {key!r} must be an object")
            data[key] = {term: _as_score(term, score) for term, score in terms.items()}

        return cls(path=path, data=data, last_modified=decode_timestamp(raw_time))


@dataclass(frozen=True, slots=True)
class ScoredResult:
    """A document path paired with its ranking score.

    Two results are equal when they name the same path; the score is ignored.
    """

    path: str
    score: float = field(compare=False)


def encode_timestamp(timestamp: float) -> Dict[str, int]:
    """Split a POSIX timestamp into whole seconds and nanoseconds."""
    secs = math.floor(timestamp)
    nanos = round((timestamp - secs) * _NANOS_PER_SECOND)
    if nanos == _NANOS_PER_SECOND:
        secs, nanos = secs + 1, 0
    return {"secs_since_epoch": secs, "nanos_since_epoch": nanos}


def decode_timestamp(payload: Any) -> float:
    if not isinstance(payload, Mapping):
        raise ValueError("Field 'last_modified' must be an object")
    try:
        secs = payload["secs_since_epoch"]
        nanos = payload["nanos_since_epoch"]
    except KeyError as exc:
        raise ValueError(f"Missing timestamp field {exc.args[0]!r}") from exc
    if not all(isinstance(value, int) and not isinstance(value, bool) for value in (secs, nanos)):
        raise ValueError("Timestamp fields must be integers")
    return secs + nanos / _NANOS_PER_SECOND


def _as_score(term: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Score for term {term!r} must be a number")
    return float(value)
