"""
Pagesmith configuration (``pagesmith.toml``).

Every section is optional; a missing file yields the defaults.
"""

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pagesmith.compiler.metadata import DEFAULT_METADATA_TTL
from pagesmith.themes.resolver import MAX_ALIAS_DEPTH

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "pagesmith.toml"

ENV_STORAGE_PATH = "PAGESMITH_STORAGE_PATH"
ENV_LOG_LEVEL = "PAGESMITH_LOG_LEVEL"


@dataclass
class StorageConfig:
    """Where section files and master stylesheets are written."""

    base_path: str = ".pagesmith/storage"
    base_url: str = "/storage"


@dataclass
class CacheConfig:
    metadata_ttl: int = DEFAULT_METADATA_TTL


@dataclass
class ResolverConfig:
    max_alias_depth: int = MAX_ALIAS_DEPTH


@dataclass
class LoggingConfig:
    level: str = "INFO"
    log_dir: str | None = ".pagesmith/logs"


@dataclass
class PagesmithConfig:
    storage: StorageConfig = field(default_factory=StorageConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    resolver: ResolverConfig = field(default_factory=ResolverConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    source: Path | None = None


def parse_config(data: dict[str, Any]) -> PagesmithConfig:
    storage_data = data.get("storage", {})
    cache_data = data.get("cache", {})
    resolver_data = data.get("resolver", {})
    logging_data = data.get("logging", {})

    storage = StorageConfig(
        base_path=storage_data.get("base_path", ".pagesmith/storage"),
        base_url=storage_data.get("base_url", "/storage"),
    )
    cache = CacheConfig(metadata_ttl=int(cache_data.get("metadata_ttl", DEFAULT_METADATA_TTL)))
    resolver = ResolverConfig(
        max_alias_depth=int(resolver_data.get("max_alias_depth", MAX_ALIAS_DEPTH)),
    )
    logging_config = LoggingConfig(
        level=str(logging_data.get("level", "INFO")).upper(),
        # An empty string disables the file log
        log_dir=logging_data.get("log_dir", ".pagesmith/logs") or None,
    )
    return PagesmithConfig(
        storage=storage,
        cache=cache,
        resolver=resolver,
        logging=logging_config,
    )


def load_config(path: Path | str | None = None) -> PagesmithConfig:
    """
    Load configuration, then apply environment overrides.

    Args:
        path: Config file; defaults to ``pagesmith.toml`` in the working directory

    Raises:
        tomllib.TOMLDecodeError: the file exists but is not valid TOML
    """
    config_path = Path(path) if path is not None else Path.cwd() / CONFIG_FILE_NAME
    if config_path.is_file():
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
        config = parse_config(data)
        config.source = config_path
    else:
        if path is not None:
            logger.warning(f"Config file not found: {config_path}, using defaults")
        config = PagesmithConfig()

    if storage_path := os.environ.get(ENV_STORAGE_PATH):
        config.storage.base_path = storage_path
    if log_level := os.environ.get(ENV_LOG_LEVEL):
        config.logging.level = log_level.upper()
    return config
