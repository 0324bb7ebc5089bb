"""Document store with linear cosine-similarity search."""
from __future__ import annotations

import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path
from typing import Literal

import numpy as np
from pydantic import TypeAdapter, ValidationError

from support_copilot.exceptions import StoreError
from support_copilot.models import Document, Relevance, SearchResult

logger = logging.getLogger(__name__)

ReingestPolicy = Literal["append", "replace"]

_DOCUMENT_LIST = TypeAdapter(list[Document])


def cosine_similarity(a: Sequence[float] | np.ndarray, b: Sequence[float] | np.ndarray) -> float:
    """Cosine of the angle between two vectors.

    Returns 0.0 when either vector has zero norm or the shapes differ.
    """
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape:
        return 0.0
    norm_a = np.linalg.norm(va)
    norm_b = np.linalg.norm(vb)
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    similarity = float(np.dot(va, vb) / (norm_a * norm_b))
    # Clamp to valid range (numerical precision issues)
    return max(-1.0, min(1.0, similarity))


class DocumentStore(ABC):
    """Repository of ingested documents with similarity search."""

    @abstractmethod
    def store(self, document: Document) -> None:
        """Add a document; atomic as seen by concurrent searchers."""

    @abstractmethod
    def count(self) -> int:
        """Return the number of stored documents."""

    @abstractmethod
    def documents(self) -> list[Document]:
        """Return a snapshot of the stored documents."""

    @abstractmethod
    def search(
        self,
        query_vector: Sequence[float] | np.ndarray,
        top_k: int = 5,
        min_score: float = 0.3,
    ) -> list[SearchResult]:
        """Return chunks ranked by cosine similarity to the query vector."""

    def close(self) -> None:
        """Close the store."""


def rank_chunks(
    documents: Sequence[Document],
    query_vector: Sequence[float] | np.ndarray,
    top_k: int,
    min_score: float,
) -> list[SearchResult]:
    """Score every embedded chunk, keep those at or above min_score, best first.

    Negative similarities never qualify, whatever min_score is.
    """
    if top_k <= 0:
        return []

    query = np.asarray(query_vector, dtype=np.float64)
    threshold = max(min_score, 0.0)
    results: list[SearchResult] = []
    for document in documents:
        for chunk in document.chunks:
            if not chunk.has_embedding:
                continue
            score = cosine_similarity(query, chunk.embedding)
            if score < threshold:
                continue
            results.append(
                SearchResult(
                    document=document,
                    chunk=chunk,
                    score=score,
                    relevance=Relevance.for_score(score),
                )
            )

    # sorted() is stable, so ties keep scan order
    results = sorted(results, key=lambda r: r.score, reverse=True)
    return results[:top_k]


class InMemoryDocumentStore(DocumentStore):
    """Documents held in a list guarded by a single lock.

    Documents are immutable, so search snapshots the list under the lock and
    scores outside it.
    """

    def __init__(self, reingest_policy: ReingestPolicy = "append"):
        self.reingest_policy = reingest_policy
        self._documents: list[Document] = []
        self._lock = threading.RLock()

    def store(self, document: Document) -> None:
        with self._lock:
            previous = self._documents
            kept = previous
            if self.reingest_policy == "replace":
                kept = [d for d in previous if d.source_path != document.source_path]
                if len(kept) != len(previous):
                    logger.info(
                        "Replacing %d document(s) for %s",
                        len(previous) - len(kept),
                        document.source_path,
                    )
            self._documents = [*kept, document]
            try:
                self._after_store()
            except StoreError:
                self._documents = previous
                raise

    def _after_store(self) -> None:
        """Hook run under the lock after each successful store."""

    def count(self) -> int:
        with self._lock:
            return len(self._documents)

    def documents(self) -> list[Document]:
        with self._lock:
            return list(self._documents)

    def search(
        self,
        query_vector: Sequence[float] | np.ndarray,
        top_k: int = 5,
        min_score: float = 0.3,
    ) -> list[SearchResult]:
        snapshot = self.documents()
        return rank_chunks(snapshot, query_vector, top_k=top_k, min_score=min_score)


class JsonDocumentStore(InMemoryDocumentStore):
    """In-memory store persisted to a JSON file after every write."""

    def __init__(self, path: str | Path, reingest_policy: ReingestPolicy = "append"):
        super().__init__(reingest_policy=reingest_policy)
        self.path = Path(path)
        self._documents = self._load()

    def _load(self) -> list[Document]:
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_bytes()
        except OSError as e:
            raise StoreError(f"Failed to read document store at {self.path}: {e}") from e
        if not raw.strip():
            return []
        try:
            documents = _DOCUMENT_LIST.validate_json(raw)
        except ValidationError as e:
            raise StoreError(
                f"Document store at {self.path} is corrupted: {e.error_count()} error(s)\n"
                "Remove the file and re-index to rebuild it."
            ) from e
        logger.debug("Loaded %d document(s) from %s", len(documents), self.path)
        return documents

    def _after_store(self) -> None:
        self._save()

    def _save(self) -> None:
        """Write the documents to a temp file and atomically replace the store file."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = _DOCUMENT_LIST.dump_json(self._documents)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".store-", suffix=".json")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(payload)
            os.replace(tmp_name, self.path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise StoreError(f"Failed to write document store at {self.path}: {e}") from e
