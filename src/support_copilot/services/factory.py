"""Service factory for dependency injection."""
from __future__ import annotations

import logging
from pathlib import Path

from support_copilot.config import SupportCopilotConfig, get_config
from support_copilot.embeddings import (
    Embedder,
    EmbeddingProvider,
    FastEmbedProvider,
    LocalEmbeddingProvider,
    OpenAIEmbeddingProvider,
)
from support_copilot.llm import GenerationProvider, LocalChatProvider, OpenAIChatProvider
from support_copilot.services.index_service import IndexService
from support_copilot.services.query_service import QueryService
from support_copilot.services.solution_service import SolutionService
from support_copilot.storage import DocumentStore, JsonDocumentStore
from support_copilot.synthesis import SolutionSynthesizer
from support_copilot.tickets import TicketRepository

logger = logging.getLogger(__name__)


class ServiceFactory:
    """Factory for creating service instances with dependency injection.

    Providers whose settings are missing (no API key, no local URL) are left
    out of their chain rather than failing on every call.
    """

    def __init__(
        self,
        data_dir: Path | str | None = None,
        config: SupportCopilotConfig | None = None,
    ):
        """Initialize the service factory."""
        self._config = config or get_config(data_dir=data_dir)
        self._store: DocumentStore | None = None
        self._providers: list[EmbeddingProvider | GenerationProvider] = []

    @property
    def config(self) -> SupportCopilotConfig:
        return self._config

    def create_embedding_providers(self) -> list[EmbeddingProvider]:
        """Build the configured embedding providers, in order."""
        config = self._config
        providers: list[EmbeddingProvider] = []
        for name in config.embedding_providers:
            if name == "openai":
                if not config.openai_api_key:
                    logger.debug("Skipping openai embeddings: no API key configured")
                    continue
                providers.append(
                    OpenAIEmbeddingProvider(
                        api_key=config.openai_api_key,
                        model=config.openai_embed_model,
                        base_url=config.openai_base_url,
                        dimension=config.embed_dimension,
                        timeout=config.provider_timeout,
                    )
                )
            elif name == "local":
                if not config.local_llm_url:
                    logger.debug("Skipping local embeddings: no local URL configured")
                    continue
                providers.append(
                    LocalEmbeddingProvider(
                        base_url=config.local_llm_url,
                        dimension=config.embed_dimension,
                        timeout=config.provider_timeout,
                    )
                )
            elif name == "fastembed":
                providers.append(
                    FastEmbedProvider(
                        model_name=config.fastembed_model,
                        dimension=config.embed_dimension,
                    )
                )
        self._providers.extend(providers)
        return providers

    def create_generation_providers(self) -> list[GenerationProvider]:
        """Build the configured generative providers, in order."""
        config = self._config
        providers: list[GenerationProvider] = []
        for name in config.generation_providers:
            if name == "openai":
                if not config.openai_api_key:
                    logger.debug("Skipping openai generation: no API key configured")
                    continue
                providers.append(
                    OpenAIChatProvider(
                        api_key=config.openai_api_key,
                        model=config.openai_chat_model,
                        base_url=config.openai_base_url,
                        temperature=config.temperature,
                        timeout=config.provider_timeout,
                    )
                )
            elif name == "local":
                if not config.local_llm_url:
                    logger.debug("Skipping local generation: no local URL configured")
                    continue
                providers.append(
                    LocalChatProvider(
                        base_url=config.local_llm_url,
                        model=config.local_chat_model,
                        temperature=config.temperature,
                        timeout=config.provider_timeout,
                    )
                )
        self._providers.extend(providers)
        return providers

    def create_embedder(self) -> Embedder:
        """Create an Embedder configured from the app config."""
        return Embedder(
            providers=self.create_embedding_providers(),
            embed_dimension=self._config.embed_dimension,
        )

    def create_vector_store(self) -> DocumentStore:
        """Return the document store, shared by every service of this factory."""
        if self._store is None:
            self._store = JsonDocumentStore(
                self._config.store_path,
                reingest_policy=self._config.reingest_policy,
            )
        return self._store

    def create_synthesizer(self) -> SolutionSynthesizer:
        return SolutionSynthesizer(self.create_generation_providers())

    def create_index_service(self, embedder: Embedder | None = None) -> IndexService:
        return IndexService(
            store=self.create_vector_store(),
            embedder=embedder or self.create_embedder(),
            config=self._config,
        )

    def create_query_service(self, embedder: Embedder | None = None) -> QueryService:
        return QueryService(
            store=self.create_vector_store(),
            embedder=embedder or self.create_embedder(),
            config=self._config,
        )

    def create_solution_service(
        self,
        tickets: TicketRepository,
        embedder: Embedder | None = None,
    ) -> SolutionService:
        return SolutionService(
            store=self.create_vector_store(),
            embedder=embedder or self.create_embedder(),
            synthesizer=self.create_synthesizer(),
            tickets=tickets,
            top_k=self._config.default_top_k,
            min_score=self._config.default_min_score,
        )

    def close(self) -> None:
        """Close every provider created by this factory and the shared store."""
        for provider in self._providers:
            provider.close()
        self._providers.clear()
        if self._store is not None:
            self._store.close()


def get_service_factory(
    data_dir: Path | str | None = None,
    config: SupportCopilotConfig | None = None,
) -> ServiceFactory:
    """Create a ServiceFactory instance."""
    return ServiceFactory(data_dir=data_dir, config=config)
