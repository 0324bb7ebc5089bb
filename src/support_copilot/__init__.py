"""support_copilot - Document retrieval and solution synthesis for support tickets."""
from support_copilot.models import (
    Chunk,
    Document,
    SearchResult,
    SuggestedSolution,
    Ticket,
    TicketSolutionBundle,
)

__version__ = "0.1.0"

__all__ = [
    "Chunk",
    "Document",
    "SearchResult",
    "SuggestedSolution",
    "Ticket",
    "TicketSolutionBundle",
]
