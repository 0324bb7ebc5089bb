"""Query service for support_copilot."""
from __future__ import annotations

from support_copilot.config import SupportCopilotConfig, get_config
from support_copilot.embeddings import Embedder
from support_copilot.exceptions import InvalidInputError
from support_copilot.models import SearchResult
from support_copilot.storage import DocumentStore, JsonDocumentStore


class QueryService:
    """Service for querying documents."""

    def __init__(
        self,
        store: DocumentStore | None = None,
        embedder: Embedder | None = None,
        config: SupportCopilotConfig | None = None,
    ):
        self.config = config or get_config()
        self.store = store or JsonDocumentStore(
            self.config.store_path, reingest_policy=self.config.reingest_policy
        )
        self.embedder = embedder or Embedder(embed_dimension=self.config.embed_dimension)

    def search(
        self,
        query: str,
        top_k: int | None = None,
        min_score: float | None = None,
    ) -> list[SearchResult]:
        """Search for chunks similar to the query.

        Args:
            query: The search query string.
            top_k: Number of results to return. Unset or 0 uses the config default (5).
            min_score: Minimum similarity. Unset or 0 uses the config default (0.3).
        """
        if not query or not query.strip():
            raise InvalidInputError("Query must not be empty")
        if top_k is not None and top_k < 0:
            raise InvalidInputError(f"top_k must not be negative, got {top_k}")

        top_k = top_k or self.config.default_top_k
        min_score = min_score or self.config.default_min_score

        query_vector = self.embedder.embed_single(query)
        return self.store.search(query_vector, top_k=top_k, min_score=min_score)

    def close(self) -> None:
        """Close the service."""
        self.store.close()
