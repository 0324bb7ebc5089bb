"""Configuration management."""
import json
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from support_copilot.exceptions import ConfigError

DATA_DIR_NAME = ".support_copilot"

KNOWN_EMBEDDING_PROVIDERS = frozenset({"openai", "local", "fastembed"})
KNOWN_GENERATION_PROVIDERS = frozenset({"openai", "local"})


def _get_default_data_dir(base_path: Path | None = None) -> Path:
    """Get the default data directory.

    Only returns a path if .support_copilot exists in the base_path.
    Raises ConfigError if not found.

    Args:
        base_path: Base path to search for .support_copilot. Defaults to cwd.

    Users must explicitly configure data_dir via:
    - SUPPORT_COPILOT_DATA_DIR environment variable
    - --data-dir CLI option
    - Passing data_dir to get_config()
    """
    search_path = base_path if base_path is not None else Path.cwd()
    data_dir = search_path / DATA_DIR_NAME
    if data_dir.exists() and data_dir.is_dir():
        return data_dir
    raise ConfigError(
        f"No {DATA_DIR_NAME} directory found. "
        "Please either:\n"
        "  1. Run 'sc init' to initialize a local .support_copilot directory, or\n"
        "  2. Set SUPPORT_COPILOT_DATA_DIR environment variable, or\n"
        "  3. Use --data-dir option"
    )


class SupportCopilotConfig(BaseSettings):
    """Configuration for the support copilot."""

    model_config = SettingsConfigDict(
        env_prefix="SUPPORT_COPILOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage settings
    data_dir: Path = Field(default_factory=_get_default_data_dir)
    store_name: str = "documents.json"
    uploads_dir_name: str = "uploads"
    reingest_policy: Literal["append", "replace"] = "append"

    # Embedding settings
    embed_dimension: int = Field(default=384, gt=0)
    embedding_providers: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["openai", "local"])
    fastembed_model: str = "BAAI/bge-small-en-v1.5"

    # Generation settings
    generation_providers: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["openai", "local"])
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)

    # Remote and local backends
    openai_api_key: str | None = None
    openai_base_url: str = "https://api.openai.com/v1"
    openai_embed_model: str = "text-embedding-3-small"
    openai_chat_model: str = "gpt-3.5-turbo"
    local_llm_url: str | None = None
    local_chat_model: str = "local-model"
    provider_timeout: float = Field(default=20.0, gt=0.0, le=120.0)

    # Indexing settings
    chunk_max_words: int = Field(default=500, gt=0)
    ingest_workers: int = Field(default=1, ge=1)

    # Search settings
    default_top_k: int = 5
    default_min_score: float = 0.3

    # Logging
    verbose: bool = False

    @field_validator("embedding_providers", "generation_providers", mode="before")
    @classmethod
    def split_provider_list(cls, v: Any) -> Any:
        """Accept a JSON list or a comma-separated string, e.g. ``openai,local``."""
        if isinstance(v, str):
            text = v.strip()
            if text.startswith("["):
                return json.loads(text)
            return [name for name in text.split(",") if name.strip()]
        return v

    @field_validator("embedding_providers")
    @classmethod
    def validate_embedding_providers(cls, v: list[str]) -> list[str]:
        """Normalize provider names and reject unknown ones."""
        names = [name.strip().lower() for name in v if name.strip()]
        unknown = set(names) - KNOWN_EMBEDDING_PROVIDERS
        if unknown:
            raise ValueError(f"unknown embedding providers: {sorted(unknown)}")
        return names

    @field_validator("generation_providers")
    @classmethod
    def validate_generation_providers(cls, v: list[str]) -> list[str]:
        """Normalize provider names and reject unknown ones."""
        names = [name.strip().lower() for name in v if name.strip()]
        unknown = set(names) - KNOWN_GENERATION_PROVIDERS
        if unknown:
            raise ValueError(f"unknown generation providers: {sorted(unknown)}")
        return names

    @property
    def store_path(self) -> Path:
        return self.data_dir / self.store_name

    @property
    def uploads_dir(self) -> Path:
        return self.data_dir / self.uploads_dir_name


@lru_cache
def _get_config_cached(data_dir: Path) -> SupportCopilotConfig:
    """Cached configuration lookup for explicit data_dir values."""
    return SupportCopilotConfig(data_dir=data_dir)


def get_config(
    data_dir: str | Path | None = None,
    clear_cache: bool = False,
    base_path: str | Path | None = None,
) -> SupportCopilotConfig:
    """Get configuration instance.

    Args:
        data_dir: Optional data directory to use. If provided, overrides default.
        clear_cache: If True, clear the cache before returning config.
        base_path: Optional directory to search for .support_copilot when
            data_dir is not given.

    Note: When data_dir is None, caching is disabled because the default
    resolution depends on the current working directory, which can change
    between invocations within the same process.
    """
    if clear_cache:
        _get_config_cached.cache_clear()

    # Don't cache when data_dir is None since default depends on env or cwd
    if data_dir is None:
        if base_path is not None:
            return SupportCopilotConfig(data_dir=_get_default_data_dir(Path(base_path)))
        return SupportCopilotConfig()

    return _get_config_cached(Path(data_dir))
