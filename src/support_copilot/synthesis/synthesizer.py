"""Solution synthesis with a generative tier and a rule-based tier."""
from __future__ import annotations

import logging
from collections.abc import Sequence

from support_copilot.exceptions import GenerationUnavailable, InvalidInputError
from support_copilot.llm import GenerationProvider
from support_copilot.models import SearchResult, SuggestedSolution, Ticket
from support_copilot.synthesis.fallback import fallback_solutions
from support_copilot.synthesis.parsing import parse_solutions
from support_copilot.synthesis.prompt import build_messages

logger = logging.getLogger(__name__)


def validate_ticket(ticket: Ticket) -> None:
    """Raise InvalidInputError when the ticket lacks a title or description."""
    missing = [name for name in ("title", "description") if not getattr(ticket, name).strip()]
    if missing:
        raise InvalidInputError(f"Ticket {ticket.id} is missing {', '.join(missing)}")


class SolutionSynthesizer:
    """Produces 1-3 suggested solutions for a ticket.

    Generative providers are tried in order; a failed call or an unparseable
    reply moves on to the next one. When none succeeds the category-keyed
    templates are returned, so a valid ticket always gets solutions.
    """

    def __init__(self, providers: Sequence[GenerationProvider] = ()):
        self.providers = list(providers)

    def synthesize(
        self,
        ticket: Ticket,
        results: Sequence[SearchResult],
    ) -> list[SuggestedSolution]:
        validate_ticket(ticket)
        if self.providers:
            messages = build_messages(ticket, results)
            for provider in self.providers:
                try:
                    solutions = parse_solutions(provider.generate(messages))
                except GenerationUnavailable as e:
                    logger.warning("Generation provider %s unavailable: %s", provider.name, e)
                    continue
                logger.info(
                    "Generated %d solution(s) for ticket %s with %s",
                    len(solutions),
                    ticket.id,
                    provider.name,
                )
                return solutions

        solutions = fallback_solutions(ticket, results)
        logger.info(
            "Using %d rule-based solution(s) for ticket %s", len(solutions), ticket.id
        )
        return solutions

    def close(self) -> None:
        for provider in self.providers:
            provider.close()
