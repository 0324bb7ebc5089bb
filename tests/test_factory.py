"""Tests for ServiceFactory wiring."""
from __future__ import annotations

from support_copilot.config import SupportCopilotConfig
from support_copilot.embeddings import FastEmbedProvider, LocalEmbeddingProvider, OpenAIEmbeddingProvider
from support_copilot.llm import LocalChatProvider, OpenAIChatProvider
from support_copilot.services import ServiceFactory
from support_copilot.storage import JsonDocumentStore
from support_copilot.tickets import InMemoryTicketRepository


class TestServiceFactory:
    """Tests for the ServiceFactory class."""

    def test_providers_without_settings_are_skipped(self, temp_dir):
        config = SupportCopilotConfig(data_dir=temp_dir, openai_api_key=None, local_llm_url=None)
        factory = ServiceFactory(config=config)

        assert factory.create_embedding_providers() == []
        assert factory.create_generation_providers() == []

    def test_configured_providers_keep_order(self, temp_dir):
        config = SupportCopilotConfig(
            data_dir=temp_dir,
            openai_api_key="sk-test",
            local_llm_url="http://localhost:1234",
            embedding_providers=["local", "openai", "fastembed"],
            generation_providers=["local", "openai"],
        )
        factory = ServiceFactory(config=config)

        embedding = factory.create_embedding_providers()
        generation = factory.create_generation_providers()

        assert [type(p) for p in embedding] == [
            LocalEmbeddingProvider,
            OpenAIEmbeddingProvider,
            FastEmbedProvider,
        ]
        assert [type(p) for p in generation] == [LocalChatProvider, OpenAIChatProvider]
        assert all(p.dimension == 384 for p in embedding)

    def test_services_share_one_store(self, mock_config):
        factory = ServiceFactory(config=mock_config)

        index_service = factory.create_index_service()
        query_service = factory.create_query_service()
        solution_service = factory.create_solution_service(InMemoryTicketRepository())

        assert isinstance(index_service.store, JsonDocumentStore)
        assert index_service.store is query_service.store is solution_service.store
        assert solution_service.top_k == mock_config.default_top_k

    def test_indexed_documents_are_searchable(self, mock_config, temp_dir):
        factory = ServiceFactory(config=mock_config)
        path = temp_dir / "vpn.md"
        path.write_text("Reconnect the VPN client after sleep.")

        factory.create_index_service().ingest(path)
        results = factory.create_query_service().search("Reconnect the VPN client after sleep.")

        assert [r.document.title for r in results] == ["vpn.md"]
        assert mock_config.store_path.exists()

    def test_close_releases_provider_clients(self, temp_dir):
        config = SupportCopilotConfig(
            data_dir=temp_dir,
            openai_api_key="sk-test",
            local_llm_url="http://localhost:1234",
            embedding_providers=["openai", "local"],
            generation_providers=["openai", "local"],
        )
        factory = ServiceFactory(config=config)
        providers = [*factory.create_embedder().providers, *factory.create_synthesizer().providers]
        clients = [p.client for p in providers]

        factory.close()

        assert all(client.is_closed for client in clients)
        assert all(p._client is None for p in providers)

    def test_close_without_services_is_safe(self, mock_config):
        ServiceFactory(config=mock_config).close()
