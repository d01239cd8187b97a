"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- SourceConfig: Where the changelog markdown is read from
- LinksConfig: Issue tracker / code host link rewriting and avatar host
- OutputConfig: Content store location for generated entries
- PaginationConfig: List view page size and route
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import os
from typing import Any

import yaml


SOURCE_ENV_VAR = "CHANGELOG_SOURCE"


@dataclass
class SourceConfig:
    """Configuration for reading the changelog document.

    Attributes:
        path: Local file path or http(s) URL of the changelog markdown
        timeout_seconds: HTTP request timeout when path is a URL
        retries: Number of retry attempts for failed HTTP requests
    """

    path: str = "changelog.md"
    timeout_seconds: float = 30.0
    retries: int = 2


@dataclass
class LinksConfig:
    """Configuration for inline reference rewriting.

    Attributes:
        issue_prefix: Ticket key prefix rewritten to tracker links (e.g. "PRFP")
        issue_tracker_url: Base URL that ticket keys are appended to
        code_host_issues_url: Base URL that "#<n>" references are appended to
        avatar_host: Host serving "<alias>.png" contributor avatars
    """

    issue_prefix: str = "PRFP"
    issue_tracker_url: str = "https://pianorhythm.myjetbrains.com/youtrack/issue"
    code_host_issues_url: str = "https://github.com/PianoRhythm/pianorhythm/issues"
    avatar_host: str = "github.com"


@dataclass
class OutputConfig:
    """Configuration for the generated content store.

    Attributes:
        generate_dir: Directory that is fully regenerated on every run
        authors_filename: Name of the author registry file inside generate_dir
        write_concurrency: Number of threads used to write entry files
    """

    generate_dir: str = "changelog/source"
    authors_filename: str = "authors.json"
    write_concurrency: int = 4


@dataclass
class PaginationConfig:
    """Configuration for list view pagination.

    Attributes:
        page_size: Number of entries shown per list page
        route_base_path: Route of the first list page
    """

    page_size: int = 20
    route_base_path: str = "/changelog"


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
        dir: Directory for the log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "changelog-feed.jsonl"
    dir: str = "logs"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    source: SourceConfig = field(default_factory=SourceConfig)
    links: LinksConfig = field(default_factory=LinksConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    pagination: PaginationConfig = field(default_factory=PaginationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults.

    The ``CHANGELOG_SOURCE`` environment variable, when set, overrides
    ``source.path`` from both the defaults and the file.
    """
    cfg = AppConfig()
    if path:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        cfg = _merge_config(cfg, raw)

    env_source = os.getenv(SOURCE_ENV_VAR)
    if env_source:
        cfg.source.path = env_source
    return cfg


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update({k: v for k, v in value.items() if k in data[key]})
        else:
            data[key] = value
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(
        source=SourceConfig(**data["source"]),
        links=LinksConfig(**data["links"]),
        output=OutputConfig(**data["output"]),
        pagination=PaginationConfig(**data["pagination"]),
        logging=LoggingConfig(**data["logging"]),
    )
