"""Ticket repository collaborators.

Ticket CRUD lives elsewhere; this package only needs to resolve a ticket
id into a Ticket.
"""
from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from support_copilot.exceptions import InvalidInputError, NotFoundError
from support_copilot.models import Ticket

_TICKET_LIST = TypeAdapter(list[Ticket])


class TicketRepository(ABC):
    """Resolves ticket ids."""

    @abstractmethod
    def get(self, ticket_id: str) -> Ticket | None:
        """Return the ticket, or None if it does not exist."""


class InMemoryTicketRepository(TicketRepository):
    def __init__(self, tickets: Iterable[Ticket] = ()):
        self._tickets = {ticket.id: ticket for ticket in tickets}

    def add(self, ticket: Ticket) -> None:
        self._tickets[ticket.id] = ticket

    def get(self, ticket_id: str) -> Ticket | None:
        return self._tickets.get(ticket_id)


class JsonTicketRepository(InMemoryTicketRepository):
    """Tickets read from a JSON export: a list, or an object with a "tickets" list."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        super().__init__(self._load())

    def _load(self) -> list[Ticket]:
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise NotFoundError(f"Ticket file not found: {self.path}") from e
        except (OSError, json.JSONDecodeError) as e:
            raise InvalidInputError(f"Failed to read ticket file {self.path}: {e}") from e

        if isinstance(payload, dict):
            payload = payload.get("tickets", [])
        try:
            return _TICKET_LIST.validate_python(payload)
        except ValidationError as e:
            raise InvalidInputError(
                f"Ticket file {self.path} is malformed: {e.error_count()} error(s)"
            ) from e
