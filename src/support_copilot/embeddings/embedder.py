"""Embedder: ordered provider chain with a deterministic fallback."""
from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

import numpy as np

from support_copilot.embeddings.providers import (
    DEFAULT_DIMENSION,
    EmbeddingProvider,
    HashEmbeddingProvider,
)
from support_copilot.exceptions import EmbeddingUnavailable

logger = logging.getLogger(__name__)


class Embedder:
    """Turns text into fixed-dimension vectors.

    Providers are tried in the configured order; the first one that
    succeeds wins. When every provider fails, or none is configured, the
    deterministic hash embedding is used, so embedding never fails.
    """

    def __init__(
        self,
        providers: Sequence[EmbeddingProvider] = (),
        embed_dimension: int = DEFAULT_DIMENSION,
    ):
        """Initialize the Embedder.

        Args:
            providers: Providers to try, in order.
            embed_dimension: Dimension D shared by every provider and the fallback.
        """
        if embed_dimension <= 0:
            raise ValueError("embed_dimension must be greater than 0")
        for provider in providers:
            if provider.dimension != embed_dimension:
                raise ValueError(
                    f"Provider {provider.name} has dimension {provider.dimension}, "
                    f"expected {embed_dimension}"
                )
        self.providers = list(providers)
        self._embed_dimension = embed_dimension
        self._fallback = HashEmbeddingProvider(embed_dimension)

    @property
    def dimension(self) -> int:
        """Return the embedding dimension."""
        return self._embed_dimension

    @property
    def provider_names(self) -> list[str]:
        return [provider.name for provider in self.providers]

    def embed_single(self, text: str) -> np.ndarray:
        """Generate an embedding for a single text."""
        for provider in self.providers:
            try:
                vector = provider.embed(text)
            except EmbeddingUnavailable as e:
                logger.warning("Embedding provider %s unavailable: %s", provider.name, e)
                continue
            logger.debug("Embedded %d chars with %s", len(text), provider.name)
            return vector

        if self.providers:
            logger.info("All embedding providers failed, using hash fallback")
        return self._fallback.embed(text)

    def embed(self, texts: list[str]) -> Iterator[np.ndarray]:
        """Generate embeddings for a list of texts."""
        for text in texts:
            yield self.embed_single(text)

    def close(self) -> None:
        """Close provider resources."""
        for provider in self.providers:
            provider.close()
