"""Plain-text extraction, one pluggable function per file type."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from pathlib import Path

from support_copilot.exceptions import ExtractionError

logger = logging.getLogger(__name__)

Extractor = Callable[[Path], str]


def extract_plain_text(file_path: Path) -> str:
    """Read a markdown or text file as UTF-8."""
    try:
        text = file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ExtractionError(f"Failed to decode file {file_path}: {e}") from e
    except OSError as e:
        raise ExtractionError(f"Failed to read file {file_path}: {e}") from e
    return text.replace("\r\n", "\n").replace("\r", "\n")


def extract_pdf_text(file_path: Path) -> str:
    """Extract text from every page of a PDF, pages separated by blank lines."""
    from pypdf import PdfReader

    try:
        reader = PdfReader(str(file_path))
        pages = [page.extract_text() or "" for page in reader.pages]
    except Exception as e:  # malformed PDFs surface as arbitrary pypdf internals
        raise ExtractionError(f"Failed to read PDF {file_path}: {e}") from e

    logger.debug("Extracted %d page(s) from %s", len(pages), file_path)
    return "\n\n".join(page.strip() for page in pages if page.strip())


DEFAULT_EXTRACTORS: Mapping[str, Extractor] = {
    ".pdf": extract_pdf_text,
    ".md": extract_plain_text,
    ".txt": extract_plain_text,
}


def supported_extensions(extractors: Mapping[str, Extractor] | None = None) -> frozenset[str]:
    """Return the file extensions the given extractor table can handle."""
    return frozenset(extractors if extractors is not None else DEFAULT_EXTRACTORS)


def extract_text(
    file_path: Path,
    extractors: Mapping[str, Extractor] | None = None,
) -> str:
    """Dispatch to the extractor registered for the file's extension.

    Raises:
        ExtractionError: If the type is unsupported or extraction fails.
    """
    table = extractors if extractors is not None else DEFAULT_EXTRACTORS
    file_type = file_path.suffix.lower()
    extractor = table.get(file_type)
    if extractor is None:
        raise ExtractionError(f"Unsupported file type: {file_type or '<none>'}")
    return extractor(file_path)
