"""Generative providers for support_copilot."""
from support_copilot.llm.providers import (
    GenerationProvider,
    LocalChatProvider,
    OpenAIChatProvider,
)

__all__ = ["GenerationProvider", "LocalChatProvider", "OpenAIChatProvider"]
