"""Pytest configuration and fixtures for support_copilot tests."""
from __future__ import annotations

import tempfile
from collections.abc import Callable, Iterator
from pathlib import Path

import numpy as np
import pytest

from support_copilot.config import SupportCopilotConfig
from support_copilot.embeddings import Embedder
from support_copilot.models import Chunk, Document, Ticket
from support_copilot.storage import InMemoryDocumentStore


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test data."""
    with tempfile.TemporaryDirectory() as tmp:
        yield Path(tmp)


@pytest.fixture
def mock_config(temp_dir: Path) -> SupportCopilotConfig:
    """Config rooted in temp_dir with no remote providers."""
    data_dir = temp_dir / "data"
    data_dir.mkdir()
    return SupportCopilotConfig(
        data_dir=data_dir,
        embedding_providers=[],
        generation_providers=[],
        embed_dimension=384,
        default_top_k=5,
        default_min_score=0.3,
        verbose=True,
    )


@pytest.fixture
def hash_embedder() -> Embedder:
    """Embedder with no providers, so every call uses the hash fallback."""
    return Embedder(embed_dimension=384)


@pytest.fixture
def memory_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def sample_vectors() -> list[np.ndarray]:
    """Create sample vectors for testing search operations."""
    vectors = []
    # Vector 0: [1, 0, 0, ...] - distinct
    v0 = np.zeros(384, dtype=np.float32)
    v0[0] = 1.0
    vectors.append(v0)

    # Vector 1: [1, 0.5, 0, ...] - similar to v0
    v1 = np.zeros(384, dtype=np.float32)
    v1[0] = 1.0
    v1[1] = 0.5
    vectors.append(v1)

    # Vector 2: [0, 1, 0, ...] - distinct
    v2 = np.zeros(384, dtype=np.float32)
    v2[1] = 1.0
    vectors.append(v2)

    # Vector 3: [0, 1, 0.3, ...] - similar to v2
    v3 = np.zeros(384, dtype=np.float32)
    v3[1] = 1.0
    v3[2] = 0.3
    vectors.append(v3)

    # Vector 4: [-1, 0, 0, ...] - opposite of v0
    v4 = np.zeros(384, dtype=np.float32)
    v4[0] = -1.0
    vectors.append(v4)

    return vectors


@pytest.fixture
def make_document() -> Callable[..., Document]:
    """Factory for documents whose chunks carry the given embeddings."""

    def _make(
        doc_id: str,
        embeddings: list[np.ndarray | list[float]],
        title: str | None = None,
        source_path: str | None = None,
    ) -> Document:
        chunks = [
            Chunk(
                id=f"{doc_id}_chunk_{i}",
                document_id=doc_id,
                ordinal=i,
                text=f"{doc_id} chunk {i}",
                embedding=[float(x) for x in vector],
                start_page=i // 2,
                end_page=i // 2 + 1,
            )
            for i, vector in enumerate(embeddings)
        ]
        return Document(
            id=doc_id,
            title=title or f"{doc_id}.md",
            source_path=source_path or f"/docs/{doc_id}.md",
            file_type=".md",
            content="\n\n".join(chunk.text for chunk in chunks),
            summary=f"{doc_id} summary",
            chunks=chunks,
        )

    return _make


@pytest.fixture
def network_ticket() -> Ticket:
    return Ticket(
        id="T-1",
        title="Network Issue",
        description="wifi down",
        category="Network",
        priority="high",
    )
