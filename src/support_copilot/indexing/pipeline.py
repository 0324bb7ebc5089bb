"""Ingestion pipeline: extract, chunk and embed files into Documents."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from support_copilot.exceptions import ExtractionError
from support_copilot.indexing.chunker import DEFAULT_MAX_WORDS, chunk_text
from support_copilot.indexing.extractors import Extractor, extract_text
from support_copilot.models import Chunk, Document

if TYPE_CHECKING:
    from support_copilot.embeddings import Embedder

logger = logging.getLogger(__name__)

SUMMARY_CHARS = 500

TAG_KEYWORDS = (
    "network",
    "hardware",
    "software",
    "security",
    "performance",
    "database",
    "server",
    "email",
    "printer",
    "wifi",
    "vpn",
    "windows",
    "linux",
    "troubleshooting",
    "installation",
)


@dataclass(frozen=True)
class FileWorkItem:
    """Represents one file scheduled for extraction."""

    sequence: int
    path: str
    file_type: str


@dataclass(frozen=True)
class ParsedFileResult:
    """Extraction and chunking output for a single source file."""

    work_item: FileWorkItem
    content: str = ""
    chunks: tuple[str, ...] = ()
    error: str | None = None

    @property
    def has_error(self) -> bool:
        return self.error is not None


def build_file_work_items(files: list[Path]) -> list[FileWorkItem]:
    """Build ordered work items from file scan output."""
    return [
        FileWorkItem(sequence=sequence, path=str(file_path), file_type=file_path.suffix.lower())
        for sequence, file_path in enumerate(files)
    ]


def parse_work_item(
    work_item: FileWorkItem,
    extractors: Mapping[str, Extractor] | None = None,
    max_words: int = DEFAULT_MAX_WORDS,
) -> ParsedFileResult:
    """Extract and chunk one file, capturing extraction errors in the result."""
    try:
        content = extract_text(Path(work_item.path), extractors)
    except ExtractionError as exc:
        return ParsedFileResult(work_item=work_item, error=str(exc))

    chunks = chunk_text(content, max_words=max_words)
    if not chunks:
        return ParsedFileResult(
            work_item=work_item,
            error=f"No text could be extracted from {work_item.path}",
        )
    return ParsedFileResult(work_item=work_item, content=content, chunks=tuple(chunks))


def parse_files(
    work_items: list[FileWorkItem],
    *,
    extractors: Mapping[str, Extractor] | None = None,
    max_words: int = DEFAULT_MAX_WORDS,
    max_workers: int = 1,
) -> list[ParsedFileResult]:
    """Parse work items, returning results in work-item order."""
    if not work_items:
        return []
    if max_workers <= 1:
        return [parse_work_item(item, extractors, max_words) for item in work_items]

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="extract") as executor:
        return list(
            executor.map(lambda item: parse_work_item(item, extractors, max_words), work_items)
        )


def summarize(content: str, limit: int = SUMMARY_CHARS) -> str:
    """Return the leading ``limit`` characters of the content."""
    if len(content) > limit:
        return content[:limit] + "..."
    return content


def extract_tags(content: str) -> list[str]:
    """Return the known support keywords that occur in the content."""
    lowered = content.lower()
    return [keyword for keyword in TAG_KEYWORDS if keyword in lowered]


def build_document(parsed: ParsedFileResult, embedder: Embedder) -> Document:
    """Embed the chunks of a parsed file and assemble its Document."""
    if parsed.has_error:
        raise ExtractionError(parsed.error)

    path = Path(parsed.work_item.path)
    document_id = uuid.uuid4().hex
    chunks: list[Chunk] = []
    for ordinal, (text, vector) in enumerate(zip(parsed.chunks, embedder.embed(list(parsed.chunks)))):
        chunks.append(
            Chunk(
                id=f"{document_id}_chunk_{ordinal}",
                document_id=document_id,
                ordinal=ordinal,
                text=text,
                embedding=[float(x) for x in vector],
                # Extractors return flat text, so pages are approximated
                # at two chunks per page.
                start_page=ordinal // 2,
                end_page=ordinal // 2 + 1,
            )
        )

    logger.debug("Built document %s from %s with %d chunk(s)", document_id, path, len(chunks))
    return Document(
        id=document_id,
        title=path.name,
        source_path=str(path),
        file_type=parsed.work_item.file_type,
        content=parsed.content,
        summary=summarize(parsed.content),
        tags=extract_tags(parsed.content),
        chunks=chunks,
    )
