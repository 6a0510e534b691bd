"""Document indexing pipeline."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

from docseek.ingestion.reader import read_document
from docseek.models import Document, TermFrequency
from docseek.utils.text import tokenize

LOGGER = logging.getLogger(__name__)

DocumentReader = Callable[[Path], str]


def index_terms(tokens: Sequence[str]) -> TermFrequency:
    """Map each term to its frequency score.

    The first occurrence of a term counts as a full ``1.0`` and each repeat
    adds ``1 / len(tokens)``, so a term seen ``k`` times scores
    ``1.0 + (k - 1) / n``. Existing snapshots rely on this weighting.
    """
    total = len(tokens)
    frequencies: TermFrequency = {}
    for term in tokens:
        if term in frequencies:
            frequencies[term] += 1.0 / total
        else:
            frequencies[term] = 1.0
    return frequencies


def build_document(path: Path | str, text: str, *, now: Optional[float] = None) -> Document:
    """Tokenize and index ``text`` as the document stored at ``path``."""
    key = str(path)
    return Document(
        path=key,
        data={key: index_terms(tokenize(text))},
        last_modified=time.time() if now is None else now,
    )


class Indexer:
    """Builds a fresh Document for every path it is given."""

    def __init__(
        self,
        reader: DocumentReader = read_document,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.reader = reader
        self.clock = clock

    def build(self, paths: Iterable[Path]) -> List[Document]:
        """Index all paths in order. Read failures propagate."""
        documents: List[Document] = []
        for path in paths:
            LOGGER.debug("Indexing %s", path)
            text = self.reader(Path(path))
            document = build_document(path, text, now=self.clock())
            LOGGER.debug("Indexed %s terms from %s", len(document.term_frequency), path)
            documents.append(document)

        LOGGER.info("Indexed %s documents", len(documents))
        return documents
