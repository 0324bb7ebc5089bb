"""Paragraph-based text chunking."""

from __future__ import annotations

import re

DEFAULT_MAX_WORDS = 500

_PARAGRAPH_BREAK_RE = re.compile(r"\n\s*\n")


def split_paragraphs(text: str) -> list[str]:
    """Split text on blank lines, dropping whitespace-only paragraphs."""
    paragraphs = (p.strip() for p in _PARAGRAPH_BREAK_RE.split(text))
    return [p for p in paragraphs if p]


def _word_count(text: str) -> int:
    return len(text.split())


def chunk_text(text: str, max_words: int = DEFAULT_MAX_WORDS) -> list[str]:
    """Group paragraphs into chunks of at most ``max_words`` words.

    Paragraphs are never split: a paragraph longer than ``max_words`` becomes
    a chunk of its own. Paragraphs inside a chunk are joined with a blank
    line, so the chunks read back in source order reproduce the paragraphs.

    Args:
        text: Plain text to chunk.
        max_words: Word bound per chunk.

    Returns:
        Chunk texts in source order; empty for blank input.
    """
    if max_words <= 0:
        raise ValueError("max_words must be greater than 0")

    chunks: list[str] = []
    buffer: list[str] = []
    buffer_words = 0

    for paragraph in split_paragraphs(text):
        words = _word_count(paragraph)
        if buffer and buffer_words + words > max_words:
            chunks.append("\n\n".join(buffer))
            buffer = []
            buffer_words = 0
        buffer.append(paragraph)
        buffer_words += words

    if buffer:
        chunks.append("\n\n".join(buffer))

    return chunks
