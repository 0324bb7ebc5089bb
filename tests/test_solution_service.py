"""Tests for SolutionService."""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from support_copilot.exceptions import GenerationUnavailable, InvalidInputError, NotFoundError
from support_copilot.llm import GenerationProvider
from support_copilot.models import Relevance, SearchResult, Ticket
from support_copilot.services.solution_service import (
    SolutionService,
    aggregate_confidence,
    build_ticket_query,
)
from support_copilot.synthesis import SolutionSynthesizer
from support_copilot.tickets import InMemoryTicketRepository


@pytest.fixture
def failing_synthesizer() -> SolutionSynthesizer:
    provider = MagicMock(spec=GenerationProvider)
    provider.name = "offline"
    provider.generate.side_effect = GenerationUnavailable("connection refused")
    return SolutionSynthesizer([provider])


class TestHelpers:
    def test_build_ticket_query(self, network_ticket):
        assert build_ticket_query(network_ticket) == "Network Issue wifi down Network"

    def test_aggregate_confidence_is_mean(self, make_document, sample_vectors):
        document = make_document("d", [sample_vectors[0], sample_vectors[1]])
        results = [
            SearchResult(document=document, chunk=document.chunks[0], score=0.9, relevance=Relevance.HIGH),
            SearchResult(document=document, chunk=document.chunks[1], score=0.5, relevance=Relevance.LOW),
        ]
        assert aggregate_confidence(results) == pytest.approx(0.7)

    def test_aggregate_confidence_empty(self):
        assert aggregate_confidence([]) == 0.0


class TestSolutionService:
    """Tests for retrieval followed by synthesis."""

    @pytest.fixture
    def service(self, memory_store, hash_embedder, failing_synthesizer, network_ticket, make_document):
        query = build_ticket_query(network_ticket)
        memory_store.store(
            make_document("wifi", [hash_embedder.embed_single(query)], title="wifi-troubleshooting.md")
        )
        return SolutionService(
            store=memory_store,
            embedder=hash_embedder,
            synthesizer=failing_synthesizer,
            tickets=InMemoryTicketRepository([network_ticket]),
        )

    def test_network_ticket_gets_template_solutions(self, service):
        """With generation offline, the network templates cite the indexed document."""
        bundle = service.get_ticket_solutions("T-1")

        assert bundle.ticket_id == "T-1"
        assert 1 <= len(bundle.solutions) <= 3
        assert [s.confidence for s in bundle.solutions] == [0.85, 0.78]
        assert bundle.solutions[0].references == ["wifi-troubleshooting.md"]
        assert [r.document.id for r in bundle.document_sources] == ["wifi"]
        assert bundle.confidence == pytest.approx(1.0)

    def test_unknown_ticket(self, service):
        with pytest.raises(NotFoundError, match="missing"):
            service.get_ticket_solutions("missing")

    def test_no_matching_documents(self, hash_embedder, failing_synthesizer, network_ticket, memory_store):
        service = SolutionService(
            store=memory_store,
            embedder=hash_embedder,
            synthesizer=failing_synthesizer,
            tickets=InMemoryTicketRepository([network_ticket]),
        )

        bundle = service.get_ticket_solutions("T-1")

        assert bundle.document_sources == []
        assert bundle.confidence == 0.0
        assert bundle.solutions
        assert bundle.solutions[0].references == []

    def test_ticket_without_description_is_rejected(self, service):
        ticket = Ticket(id="T-9", title="Printer", description="")
        with pytest.raises(InvalidInputError, match="description"):
            service.solve_ticket(ticket)

    def test_search_uses_configured_limits(self, network_ticket, hash_embedder, failing_synthesizer):
        store = MagicMock()
        store.search.return_value = []
        service = SolutionService(
            store=store,
            embedder=hash_embedder,
            synthesizer=failing_synthesizer,
            tickets=InMemoryTicketRepository(),
            top_k=2,
            min_score=0.6,
        )

        service.solve_ticket(network_ticket)

        _, kwargs = store.search.call_args
        assert kwargs == {"top_k": 2, "min_score": 0.6}
