"""File scanner for documentation folders."""

from __future__ import annotations

from pathlib import Path

# Default file extensions to ingest
DEFAULT_EXTENSIONS = frozenset({".pdf", ".md", ".txt"})

# Default exclusion patterns (directories and glob patterns)
DEFAULT_EXCLUDES = frozenset({
    ".git",
    ".venv",
    "venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".hg",
    ".svn",
    "*.egg-info",
    ".support_copilot",
})


def _should_exclude(path: Path, exclude_patterns: frozenset[str]) -> bool:
    """Check if path matches any exclusion pattern.

    Args:
        path: The file or directory path to check.
        exclude_patterns: Set of exclusion patterns.

    Returns:
        True if the path should be excluded, False otherwise.
    """
    parts = path.parts
    for pattern in exclude_patterns:
        if pattern.startswith("*"):
            # Handle glob patterns like *.egg-info
            suffix = pattern[1:]
            if any(part.endswith(suffix) for part in parts):
                return True
        elif pattern in parts:
            return True
    return False


def scan_files(
    root_path: Path,
    extensions: frozenset[str] | None = None,
    exclude_patterns: frozenset[str] | None = None,
) -> tuple[list[Path], list[Path]]:
    """Recursively scan a directory for ingestible files.

    Extension matching is case-insensitive.

    Args:
        root_path: Root directory to scan.
        extensions: File extensions to include (default: DEFAULT_EXTENSIONS).
        exclude_patterns: Patterns to exclude, added to DEFAULT_EXCLUDES.
            Only path components below root_path are matched.

    Returns:
        (supported, skipped) file lists, each sorted for deterministic ordering.
    """
    if extensions is None:
        extensions = DEFAULT_EXTENSIONS

    effective_excludes = DEFAULT_EXCLUDES.copy()
    if exclude_patterns:
        effective_excludes = effective_excludes | exclude_patterns

    supported: list[Path] = []
    skipped: list[Path] = []
    for path in root_path.rglob("*"):
        if not path.is_file():
            continue
        if _should_exclude(path.relative_to(root_path), effective_excludes):
            continue
        if path.suffix.lower() in extensions:
            supported.append(path)
        else:
            skipped.append(path)

    # Sort by string representation for consistent ordering
    supported.sort(key=lambda p: str(p))
    skipped.sort(key=lambda p: str(p))
    return supported, skipped
