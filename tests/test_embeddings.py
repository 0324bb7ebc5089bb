"""Tests for embedding providers and the Embedder fallback chain."""
from __future__ import annotations

import json
import math

import httpx
import numpy as np
import pytest

from support_copilot.embeddings import (
    Embedder,
    EmbeddingProvider,
    HashEmbeddingProvider,
    LocalEmbeddingProvider,
    OpenAIEmbeddingProvider,
)
from support_copilot.embeddings.providers import FastEmbedProvider, text_hash
from support_copilot.exceptions import EmbeddingUnavailable


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


class _StaticProvider(EmbeddingProvider):
    name = "static"

    def __init__(self, value: float, dimension: int = 384):
        super().__init__(dimension)
        self.value = value
        self.calls = 0

    def embed(self, text: str) -> np.ndarray:
        self.calls += 1
        return np.full(self.dimension, self.value, dtype=np.float32)


class _FailingProvider(EmbeddingProvider):
    name = "failing"

    def __init__(self, dimension: int = 384):
        super().__init__(dimension)
        self.calls = 0

    def embed(self, text: str) -> np.ndarray:
        self.calls += 1
        raise EmbeddingUnavailable("backend down")


class TestHashEmbedding:
    """Tests for the deterministic hash fallback."""

    def test_text_hash_matches_polynomial(self):
        assert text_hash("") == 0
        assert text_hash("a") == 97
        assert text_hash("ab") == (97 * 31 + 98) % 1_000_000

    def test_vector_formula(self):
        vector = HashEmbeddingProvider(384).embed("ab")
        h = text_hash("ab")

        assert vector.shape == (384,)
        assert vector.dtype == np.float32
        assert vector[0] == pytest.approx(0.1 * math.sin(h), abs=1e-6)
        assert vector[10] == pytest.approx(0.1 * math.sin(10 + h), abs=1e-6)

    def test_same_text_gives_identical_vectors(self):
        provider = HashEmbeddingProvider(384)
        assert np.array_equal(provider.embed("printer jam"), provider.embed("printer jam"))

    def test_different_text_gives_different_vectors(self):
        provider = HashEmbeddingProvider(384)
        assert not np.array_equal(provider.embed("printer jam"), provider.embed("vpn drops"))


class TestEmbedder:
    """Tests for the Embedder class."""

    def test_no_providers_uses_hash(self, hash_embedder):
        vector = hash_embedder.embed_single("hello")
        assert np.array_equal(vector, HashEmbeddingProvider(384).embed("hello"))

    def test_first_successful_provider_wins(self):
        first = _StaticProvider(0.25)
        second = _StaticProvider(0.75)
        embedder = Embedder([first, second])

        vector = embedder.embed_single("hello")

        assert np.all(vector == 0.25)
        assert second.calls == 0

    def test_failing_provider_falls_through(self):
        failing = _FailingProvider()
        working = _StaticProvider(0.5)
        embedder = Embedder([failing, working])

        vector = embedder.embed_single("hello")

        assert failing.calls == 1
        assert np.all(vector == 0.5)

    def test_all_providers_failing_uses_hash(self, caplog):
        embedder = Embedder([_FailingProvider(), _FailingProvider()])

        with caplog.at_level("WARNING"):
            vector = embedder.embed_single("hello")

        assert np.array_equal(vector, HashEmbeddingProvider(384).embed("hello"))
        assert "unavailable" in caplog.text

    def test_embed_yields_one_vector_per_text(self, hash_embedder):
        vectors = list(hash_embedder.embed(["a", "b", "c"]))
        assert len(vectors) == 3
        assert all(v.shape == (384,) for v in vectors)

    def test_dimension_mismatch_is_rejected(self):
        with pytest.raises(ValueError, match="dimension"):
            Embedder([_StaticProvider(0.1, dimension=128)], embed_dimension=384)

    def test_provider_names(self):
        embedder = Embedder([_FailingProvider(), _StaticProvider(0.1)])
        assert embedder.provider_names == ["failing", "static"]


class TestOpenAIEmbeddingProvider:
    """Tests for the OpenAI provider over a mocked transport."""

    def test_successful_request(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"data": [{"embedding": [0.1] * 8}]})

        provider = OpenAIEmbeddingProvider(api_key="sk-test", dimension=8, client=_client(handler))

        vector = provider.embed("vpn drops")

        assert vector.shape == (8,)
        assert seen["url"] == "https://api.openai.com/v1/embeddings"
        assert seen["auth"] == "Bearer sk-test"
        assert seen["body"] == {
            "input": "vpn drops",
            "model": "text-embedding-3-small",
            "dimensions": 8,
        }

    def test_http_error_is_unavailable(self):
        provider = OpenAIEmbeddingProvider(
            api_key="sk-test",
            dimension=8,
            client=_client(lambda request: httpx.Response(401, json={"error": "bad key"})),
        )
        with pytest.raises(EmbeddingUnavailable, match="401"):
            provider.embed("text")

    def test_error_field_is_unavailable(self):
        provider = OpenAIEmbeddingProvider(
            api_key="sk-test",
            dimension=8,
            client=_client(lambda request: httpx.Response(200, json={"error": {"message": "quota"}})),
        )
        with pytest.raises(EmbeddingUnavailable, match="quota"):
            provider.embed("text")

    def test_wrong_dimension_is_unavailable(self):
        provider = OpenAIEmbeddingProvider(
            api_key="sk-test",
            dimension=8,
            client=_client(lambda request: httpx.Response(200, json={"data": [{"embedding": [0.1] * 4}]})),
        )
        with pytest.raises(EmbeddingUnavailable, match="dimension"):
            provider.embed("text")

    def test_timeout_is_unavailable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        provider = OpenAIEmbeddingProvider(api_key="sk-test", dimension=8, client=_client(handler))
        with pytest.raises(EmbeddingUnavailable, match="timed out"):
            provider.embed("text")


class TestLocalEmbeddingProvider:
    def test_accepts_flat_embedding_shape(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert str(request.url) == "http://localhost:1234/embeddings"
            return httpx.Response(200, json={"embedding": [0.2] * 8})

        provider = LocalEmbeddingProvider("http://localhost:1234/", dimension=8, client=_client(handler))

        assert np.allclose(provider.embed("text"), 0.2)

    def test_accepts_openai_compatible_shape(self):
        provider = LocalEmbeddingProvider(
            "http://localhost:1234",
            dimension=8,
            client=_client(lambda request: httpx.Response(200, json={"data": [{"embedding": [0.3] * 8}]})),
        )
        assert np.allclose(provider.embed("text"), 0.3)

    def test_non_json_body_is_unavailable(self):
        provider = LocalEmbeddingProvider(
            "http://localhost:1234",
            dimension=8,
            client=_client(lambda request: httpx.Response(200, text="<html>oops</html>")),
        )
        with pytest.raises(EmbeddingUnavailable):
            provider.embed("text")

    def test_connection_error_falls_back_through_embedder(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        provider = LocalEmbeddingProvider("http://localhost:1234", dimension=384, client=_client(handler))
        embedder = Embedder([provider])

        vector = embedder.embed_single("text")

        assert np.array_equal(vector, HashEmbeddingProvider(384).embed("text"))


class TestFastEmbedProvider:
    def test_missing_backend_is_unavailable(self, monkeypatch):
        import builtins

        real_import = builtins.__import__

        def fake_import(name, *args, **kwargs):
            if name == "fastembed":
                raise ImportError("No module named 'fastembed'")
            return real_import(name, *args, **kwargs)

        monkeypatch.setattr(builtins, "__import__", fake_import)

        with pytest.raises(EmbeddingUnavailable, match="fastembed"):
            FastEmbedProvider().embed("text")
