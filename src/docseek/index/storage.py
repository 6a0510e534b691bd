"""JSON snapshot persistence and the time-based index cache."""

from __future__ import annotations

import enum
import json
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple

from docseek.config import AppConfig
from docseek.exceptions import SnapshotError
from docseek.index.indexer import Indexer
from docseek.models import Document

LOGGER = logging.getLogger(__name__)


class CacheState(str, enum.Enum):
    ABSENT = "absent"
    STALE = "stale"
    FRESH = "fresh"


class SnapshotStore:
    """Reads and writes the whole index snapshot as one JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> List[Document]:
        try:
            raw = self.path.read_bytes()
        except OSError as exc:
            LOGGER.error("Failed to read snapshot %s: %s", self.path, exc)
            raise SnapshotError(f"Couldn't read snapshot {self.path}: {exc}", filepath=self.path) from exc

        try:
            # UnicodeDecodeError and json.JSONDecodeError are both ValueErrors
            payload = json.loads(raw.decode("utf-8"))
            if not isinstance(payload, list):
                raise ValueError(f"Expected a list of documents, got {type(payload).__name__}")
            return [Document.from_dict(item) for item in payload]
        except ValueError as exc:
            LOGGER.error("Malformed snapshot %s: %s", self.path, exc)
            raise SnapshotError(f"Malformed snapshot {self.path}: {exc}", filepath=self.path) from exc

    def save(self, documents: Iterable[Document]) -> None:
        """Replace the snapshot file with ``documents``."""
        payload = json.dumps([document.to_dict() for document in documents], indent=2)
        tmp_name: Optional[str] = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=self.path.name,
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                handle.write(payload)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            LOGGER.error("Failed to write snapshot %s: %s", self.path, exc)
            raise SnapshotError(f"Couldn't write snapshot {self.path}: {exc}", filepath=self.path) from exc


class IndexCache:
    """Loads the persisted index or rebuilds it once it is older than ``stale_after``."""

    def __init__(
        self,
        indexer: Optional[Indexer] = None,
        *,
        config: Optional[AppConfig] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.indexer = indexer or Indexer(clock=clock)
        self.config = config or AppConfig()
        self.clock = clock

    def store_for(self, directory: Path) -> SnapshotStore:
        return SnapshotStore(self.config.resolve_snapshot_path(directory))

    def is_stale(self, documents: List[Document]) -> bool:
        # An empty snapshot has no timestamp to trust.
        if not documents:
            return True
        age = self.clock() - documents[0].last_modified
        return age > self.config.stale_after

    def inspect(self, directory: Path) -> Tuple[CacheState, List[Document]]:
        """Read the snapshot once and classify it.

        The returned documents are empty when no snapshot exists.
        """
        store = self.store_for(directory)
        if not store.exists():
            return CacheState.ABSENT, []
        documents = store.load()
        return (CacheState.STALE if self.is_stale(documents) else CacheState.FRESH), documents

    def state(self, directory: Path) -> CacheState:
        state, _ = self.inspect(directory)
        return state

    def rebuild(self, directory: Path, candidate_paths: Iterable[Path]) -> List[Document]:
        """Index every candidate from scratch and replace the snapshot."""
        documents = self.indexer.build(candidate_paths)
        store = self.store_for(directory)
        store.save(documents)
        LOGGER.info("Saved %s documents to %s", len(documents), store.path)
        return documents

    def resolve(
        self, directory: Path, candidate_paths: Iterable[Path]
    ) -> Tuple[CacheState, List[Document]]:
        """Return the state the snapshot was found in and the index to search.

        A fresh snapshot is returned as stored and ``candidate_paths`` is not
        consumed. A missing or stale snapshot is rebuilt from the candidates.
        """
        state, documents = self.inspect(directory)
        if state is CacheState.FRESH:
            LOGGER.info("Using snapshot %s with %s documents", self.store_for(directory).path, len(documents))
            return state, documents
        return state, self.rebuild_for(state, directory, candidate_paths)

    def rebuild_for(
        self, state: CacheState, directory: Path, candidate_paths: Iterable[Path]
    ) -> List[Document]:
        """Rebuild after ``inspect`` found the snapshot absent or stale."""
        path = self.config.resolve_snapshot_path(directory)
        if state is CacheState.ABSENT:
            LOGGER.info("No snapshot at %s, indexing", path)
        else:
            LOGGER.info("Snapshot %s is older than %s seconds, reindexing", path, self.config.stale_after)
        return self.rebuild(directory, candidate_paths)

    def load_or_build(self, directory: Path, candidate_paths: Iterable[Path]) -> List[Document]:
        _, documents = self.resolve(directory, candidate_paths)
        return documents
