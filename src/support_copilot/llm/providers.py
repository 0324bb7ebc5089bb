"""Chat-completion providers for solution generation."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import httpx

from support_copilot.exceptions import GenerationUnavailable
from support_copilot.http_client import ProviderResponseError, build_client, post_json

DEFAULT_TIMEOUT = 20.0

Messages = list[dict[str, str]]


class GenerationProvider(ABC):
    """A single generative backend.

    Implementations raise GenerationUnavailable for every kind of failure.
    """

    name: str = "provider"

    @abstractmethod
    def generate(self, messages: Messages) -> str:
        """Return the assistant's raw text reply."""

    def close(self) -> None:
        """Release any held resources."""


def _message_content(data: dict[str, Any], source: str) -> str:
    # Common shapes:
    #  - {"choices":[{"message":{"role":"assistant","content":"..."}}]}
    #  - {"message":{"content":"..."}} or {"response":"..."} (Ollama-style servers)
    content: Any = None
    choices = data.get("choices")
    if isinstance(choices, list) and choices:
        message = choices[0].get("message") if isinstance(choices[0], dict) else None
        if isinstance(message, dict):
            content = message.get("content")
    elif isinstance(data.get("message"), dict):
        content = data["message"].get("content")
    elif "response" in data:
        content = data.get("response")

    if not isinstance(content, str) or not content.strip():
        raise GenerationUnavailable(f"no response content from {source}")
    return content


class _HTTPChatProvider(GenerationProvider):
    """OpenAI-compatible /chat/completions over HTTP."""

    def __init__(
        self,
        url: str,
        model: str,
        temperature: float = 0.7,
        timeout: float = DEFAULT_TIMEOUT,
        headers: dict[str, str] | None = None,
        client: httpx.Client | None = None,
    ):
        self.url = url
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self._headers = headers
        self._client = client

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = build_client(self.timeout)
        return self._client

    def generate(self, messages: Messages) -> str:
        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
        }
        try:
            data = post_json(self.client, self.url, payload, self._headers)
        except httpx.TimeoutException as e:
            raise GenerationUnavailable(f"{self.name} timed out after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise GenerationUnavailable(
                f"{self.name} returned status {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ProviderResponseError) as e:
            raise GenerationUnavailable(f"{self.name} request failed: {e}") from e
        return _message_content(data, self.name)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None


class OpenAIChatProvider(_HTTPChatProvider):
    """Remote generation through the OpenAI chat completions API."""

    name = "openai"
    DEFAULT_MODEL = "gpt-3.5-turbo"
    DEFAULT_BASE_URL = "https://api.openai.com/v1"

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        temperature: float = 0.7,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
    ):
        super().__init__(
            url=f"{base_url.rstrip('/')}/chat/completions",
            model=model,
            temperature=temperature,
            timeout=timeout,
            headers={"Authorization": f"Bearer {api_key}"},
            client=client,
        )


class LocalChatProvider(_HTTPChatProvider):
    """Generation through a locally hosted OpenAI-compatible endpoint."""

    name = "local"
    DEFAULT_MODEL = "local-model"

    def __init__(
        self,
        base_url: str,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.7,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
    ):
        super().__init__(
            url=f"{base_url.rstrip('/')}/v1/chat/completions",
            model=model,
            temperature=temperature,
            timeout=timeout,
            client=client,
        )
