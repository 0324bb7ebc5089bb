"""Indexing module for support_copilot."""
from support_copilot.indexing.chunker import chunk_text
from support_copilot.indexing.extractors import DEFAULT_EXTRACTORS, extract_text
from support_copilot.indexing.file_scanner import scan_files

__all__ = ["DEFAULT_EXTRACTORS", "chunk_text", "extract_text", "scan_files"]
