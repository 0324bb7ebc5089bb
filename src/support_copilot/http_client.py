"""Thin JSON-over-HTTP helper shared by the remote providers."""
from __future__ import annotations

from typing import Any

import httpx


class ProviderResponseError(ValueError):
    """The backend answered, but not with a usable JSON object."""


def build_client(timeout: float) -> httpx.Client:
    """Create an httpx client whose every request is bounded by ``timeout`` seconds."""
    return httpx.Client(timeout=httpx.Timeout(timeout))


def post_json(
    client: httpx.Client,
    url: str,
    payload: dict[str, Any],
    headers: dict[str, str] | None = None,
) -> dict[str, Any]:
    """POST a JSON payload and return the decoded JSON object.

    Raises:
        httpx.HTTPError: On network failures, timeouts and non-2xx statuses.
        ProviderResponseError: If the body is not a JSON object.
    """
    response = client.post(url, json=payload, headers=headers)
    response.raise_for_status()
    try:
        data = response.json()
    except ValueError as e:
        raise ProviderResponseError(f"Invalid JSON from {url}: {e}") from e
    if not isinstance(data, dict):
        raise ProviderResponseError(f"Expected a JSON object from {url}, got {type(data).__name__}")
    return data
