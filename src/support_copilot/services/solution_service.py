"""Ticket solution service: retrieval followed by synthesis."""
from __future__ import annotations

import logging
from collections.abc import Sequence

from support_copilot.embeddings import Embedder
from support_copilot.exceptions import NotFoundError
from support_copilot.models import SearchResult, Ticket, TicketSolutionBundle
from support_copilot.storage import DocumentStore
from support_copilot.synthesis import SolutionSynthesizer
from support_copilot.synthesis.synthesizer import validate_ticket
from support_copilot.tickets import TicketRepository

logger = logging.getLogger(__name__)

# Tuned for recall: loosely related material beats an empty result
DEFAULT_TOP_K = 5
DEFAULT_MIN_SCORE = 0.3


def build_ticket_query(ticket: Ticket) -> str:
    """Search text for a ticket: title, description and category."""
    return f"{ticket.title} {ticket.description} {ticket.category}"


def aggregate_confidence(results: Sequence[SearchResult]) -> float:
    """Mean score of the results, or 0.0 when there are none."""
    if not results:
        return 0.0
    return min(1.0, sum(result.score for result in results) / len(results))


class SolutionService:
    """Builds a TicketSolutionBundle for a ticket."""

    def __init__(
        self,
        store: DocumentStore,
        embedder: Embedder,
        synthesizer: SolutionSynthesizer,
        tickets: TicketRepository,
        top_k: int = DEFAULT_TOP_K,
        min_score: float = DEFAULT_MIN_SCORE,
    ):
        self.store = store
        self.embedder = embedder
        self.synthesizer = synthesizer
        self.tickets = tickets
        self.top_k = top_k
        self.min_score = min_score

    def get_ticket_solutions(self, ticket_id: str) -> TicketSolutionBundle:
        """Resolve a ticket and return its solutions.

        Raises:
            NotFoundError: If the ticket does not exist.
            InvalidInputError: If the ticket has no title or description.
        """
        ticket = self.tickets.get(ticket_id)
        if ticket is None:
            raise NotFoundError(f"Ticket not found: {ticket_id}")
        return self.solve_ticket(ticket)

    def solve_ticket(self, ticket: Ticket) -> TicketSolutionBundle:
        """Retrieve documentation for an already resolved ticket and synthesize solutions."""
        validate_ticket(ticket)
        query_vector = self.embedder.embed_single(build_ticket_query(ticket))
        results = self.store.search(query_vector, top_k=self.top_k, min_score=self.min_score)
        solutions = self.synthesizer.synthesize(ticket, results)
        confidence = aggregate_confidence(results)
        logger.debug(
            "Ticket %s: %d source(s), %d solution(s), confidence %.3f",
            ticket.id,
            len(results),
            len(solutions),
            confidence,
        )
        return TicketSolutionBundle(
            ticket_id=ticket.id,
            solutions=solutions,
            document_sources=results,
            confidence=confidence,
        )
