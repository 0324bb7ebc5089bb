"""Index service for support_copilot."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path, PureWindowsPath

from support_copilot.config import SupportCopilotConfig, get_config
from support_copilot.embeddings import Embedder
from support_copilot.exceptions import (
    ExtractionError,
    InvalidInputError,
    NotFoundError,
    StoreError,
)
from support_copilot.indexing.extractors import (
    DEFAULT_EXTRACTORS,
    Extractor,
    supported_extensions,
)
from support_copilot.indexing.file_scanner import scan_files
from support_copilot.indexing.pipeline import (
    build_document,
    build_file_work_items,
    parse_files,
    parse_work_item,
)
from support_copilot.models import Document, IndexStats, IngestReport
from support_copilot.storage import DocumentStore, JsonDocumentStore

logger = logging.getLogger(__name__)


class IndexService:
    """Service for ingesting documentation into the document store."""

    def __init__(
        self,
        store: DocumentStore | None = None,
        embedder: Embedder | None = None,
        config: SupportCopilotConfig | None = None,
        extractors: Mapping[str, Extractor] | None = None,
    ):
        self.config = config or get_config()
        self.store = store or JsonDocumentStore(
            self.config.store_path, reingest_policy=self.config.reingest_policy
        )
        self.embedder = embedder or Embedder(embed_dimension=self.config.embed_dimension)
        self.extractors = dict(extractors if extractors is not None else DEFAULT_EXTRACTORS)

    @property
    def extensions(self) -> frozenset[str]:
        return supported_extensions(self.extractors)

    def ingest(self, path: str | Path) -> IngestReport:
        """Ingest a file, or every supported file below a directory.

        Unsupported files are skipped; files that fail extraction are
        reported as warnings and do not stop the batch.

        Raises:
            NotFoundError: If the path does not exist.
        """
        root = Path(path)
        if not root.exists():
            raise NotFoundError(f"Path does not exist: {root}")

        if root.is_file():
            files, skipped = ([root], []) if root.suffix.lower() in self.extensions else ([], [root])
        else:
            files, skipped = scan_files(root, extensions=self.extensions)

        report = IngestReport(skipped=[str(p) for p in skipped])
        parsed_files = parse_files(
            build_file_work_items(files),
            extractors=self.extractors,
            max_words=self.config.chunk_max_words,
            max_workers=self.config.ingest_workers,
        )
        for parsed in parsed_files:
            if parsed.has_error:
                logger.warning("Skipping %s: %s", parsed.work_item.path, parsed.error)
                report.warnings.append(f"Error processing {parsed.work_item.path}: {parsed.error}")
                continue
            document = build_document(parsed, self.embedder)
            self.store.store(document)
            report.documents.append(document)

        logger.info(
            "Indexed %d document(s) from %s (%d warning(s), %d skipped)",
            report.count,
            root,
            len(report.warnings),
            len(report.skipped),
        )
        return report

    def upload_document(self, filename: str, payload: bytes) -> Document:
        """Persist an uploaded file under the uploads directory and ingest it.

        Raises:
            InvalidInputError: If the file name or type is not acceptable.
            ExtractionError: If the saved file cannot be extracted; the file is removed.
            StoreError: If the upload cannot be written to the uploads directory.
        """
        # Uploaded names may carry client-side directories in either style
        name = PureWindowsPath(filename).name
        if not name or name in {".", ".."}:
            raise InvalidInputError(f"Invalid upload file name: {filename!r}")
        suffix = Path(name).suffix.lower()
        if suffix not in self.extensions:
            allowed = ", ".join(sorted(self.extensions))
            raise InvalidInputError(f"Unsupported file type {suffix or '<none>'}. Supported types: {allowed}")

        uploads_dir = self.config.uploads_dir
        target = uploads_dir / name
        try:
            uploads_dir.mkdir(parents=True, exist_ok=True)
            target.write_bytes(payload)
        except OSError as e:
            raise StoreError(f"Failed to save upload {target}: {e}") from e
        logger.info("Saved upload %s (%d bytes)", target, len(payload))

        work_item = build_file_work_items([target])[0]
        parsed = parse_work_item(work_item, self.extractors, self.config.chunk_max_words)
        if parsed.has_error:
            target.unlink(missing_ok=True)
            raise ExtractionError(parsed.error)
        document = build_document(parsed, self.embedder)
        self.store.store(document)
        return document

    def stats(self) -> IndexStats:
        """Return the number of indexed documents and chunks."""
        documents = self.store.documents()
        return IndexStats(
            indexed_documents=len(documents),
            indexed_chunks=sum(len(document.chunks) for document in documents),
        )

    def close(self) -> None:
        """Close the service."""
        self.store.close()
