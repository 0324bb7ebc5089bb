"""Embedding providers tried in order by the Embedder."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import httpx
import numpy as np

from support_copilot.exceptions import EmbeddingUnavailable
from support_copilot.http_client import ProviderResponseError, build_client, post_json

DEFAULT_DIMENSION = 384  # bge-small-en-v1.5 / original hash fallback
DEFAULT_TIMEOUT = 20.0


def _to_vector(values: Any, dimension: int, source: str) -> np.ndarray:
    """Validate a provider payload as a finite vector of the expected dimension."""
    if not isinstance(values, (list, tuple, np.ndarray)) or len(values) == 0:
        raise EmbeddingUnavailable(f"{source} returned no embedding")
    try:
        vector = np.asarray(values, dtype=np.float32)
    except (TypeError, ValueError) as e:
        raise EmbeddingUnavailable(f"{source} returned a malformed embedding: {e}") from e
    if vector.shape != (dimension,):
        raise EmbeddingUnavailable(
            f"{source} returned dimension {vector.shape}, expected ({dimension},)"
        )
    if not np.all(np.isfinite(vector)):
        raise EmbeddingUnavailable(f"{source} returned non-finite values")
    return vector


class EmbeddingProvider(ABC):
    """A single embedding backend.

    Implementations raise EmbeddingUnavailable for every kind of failure so
    the Embedder can fall through to the next provider.
    """

    name: str = "provider"

    def __init__(self, dimension: int = DEFAULT_DIMENSION):
        self.dimension = dimension

    @abstractmethod
    def embed(self, text: str) -> np.ndarray:
        """Return a float32 vector of shape (dimension,)."""

    def close(self) -> None:
        """Release any held resources."""


class _HTTPEmbeddingProvider(EmbeddingProvider):
    """Shared plumbing for providers reached over HTTP."""

    def __init__(
        self,
        dimension: int = DEFAULT_DIMENSION,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
    ):
        super().__init__(dimension)
        self.timeout = timeout
        self._client = client

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = build_client(self.timeout)
        return self._client

    def _post(self, url: str, payload: dict[str, Any], headers: dict[str, str] | None = None) -> dict:
        try:
            return post_json(self.client, url, payload, headers)
        except httpx.TimeoutException as e:
            raise EmbeddingUnavailable(f"{self.name} timed out after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise EmbeddingUnavailable(
                f"{self.name} returned status {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ProviderResponseError) as e:
            raise EmbeddingUnavailable(f"{self.name} request failed: {e}") from e

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None


class OpenAIEmbeddingProvider(_HTTPEmbeddingProvider):
    """Remote embeddings from the OpenAI API."""

    name = "openai"
    DEFAULT_MODEL = "text-embedding-3-small"
    DEFAULT_BASE_URL = "https://api.openai.com/v1"

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        dimension: int = DEFAULT_DIMENSION,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
    ):
        super().__init__(dimension=dimension, timeout=timeout, client=client)
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")

    def embed(self, text: str) -> np.ndarray:
        data = self._post(
            f"{self.base_url}/embeddings",
            # text-embedding-3 models can shorten their output to the store's dimension
            {"input": text, "model": self.model, "dimensions": self.dimension},
            headers={"Authorization": f"Bearer {self.api_key}"},
        )
        if data.get("error"):
            raise EmbeddingUnavailable(f"openai error: {data['error']}")
        try:
            values = data["data"][0]["embedding"]
        except (KeyError, IndexError, TypeError) as e:
            raise EmbeddingUnavailable("openai response has no data[0].embedding") from e
        return _to_vector(values, self.dimension, self.name)


class LocalEmbeddingProvider(_HTTPEmbeddingProvider):
    """Embeddings from a locally hosted HTTP endpoint."""

    name = "local"

    def __init__(
        self,
        base_url: str,
        dimension: int = DEFAULT_DIMENSION,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
    ):
        super().__init__(dimension=dimension, timeout=timeout, client=client)
        self.base_url = base_url.rstrip("/")

    def embed(self, text: str) -> np.ndarray:
        data = self._post(f"{self.base_url}/embeddings", {"input": text})
        # Common shapes:
        #  - {"embedding": [...]}
        #  - {"data": [{"embedding": [...]}]} (OpenAI-compatible servers)
        values = data.get("embedding")
        if values is None:
            try:
                values = data["data"][0]["embedding"]
            except (KeyError, IndexError, TypeError) as e:
                raise EmbeddingUnavailable("local response has no embedding") from e
        return _to_vector(values, self.dimension, self.name)


class FastEmbedProvider(EmbeddingProvider):
    """In-process embeddings using fastembed, loaded on first use."""

    name = "fastembed"
    DEFAULT_MODEL = "BAAI/bge-small-en-v1.5"

    def __init__(self, model_name: str = DEFAULT_MODEL, dimension: int = DEFAULT_DIMENSION):
        super().__init__(dimension)
        self.model_name = model_name
        self._model = None

    def _load_model(self):
        """Lazy load the embedding model."""
        if self._model is None:
            try:
                from fastembed import TextEmbedding
            except ImportError as e:
                raise EmbeddingUnavailable(
                    f"Failed to load embedding backend: {e}. "
                    "Install fastembed: pip install 'support-copilot[fastembed]'"
                ) from e
            try:
                self._model = TextEmbedding(model_name=self.model_name)
            except Exception as e:  # model download or runtime initialisation
                raise EmbeddingUnavailable(f"Failed to load {self.model_name}: {e}") from e
        return self._model

    def embed(self, text: str) -> np.ndarray:
        model = self._load_model()
        try:
            values = next(iter(model.embed([text])))
        except Exception as e:
            raise EmbeddingUnavailable(f"fastembed failed: {e}") from e
        return _to_vector(values, self.dimension, self.name)


def text_hash(text: str) -> int:
    """Stable polynomial hash of the text's code points, modulo 1,000,000."""
    value = 0
    for char in text:
        value = (value * 31 + ord(char)) % 1_000_000
    return value


class HashEmbeddingProvider(EmbeddingProvider):
    """Deterministic pseudo-embedding with no external dependency.

    v[i] = 0.1 * sin(i + hash(text)). Identical text always yields a
    bit-identical vector; the provider never fails.
    """

    name = "hash"
    SCALE = 0.1

    def embed(self, text: str) -> np.ndarray:
        offset = text_hash(text)
        positions = np.arange(self.dimension, dtype=np.float64) + offset
        return (np.sin(positions) * self.SCALE).astype(np.float32)
