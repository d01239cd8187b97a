"""
Main pipeline orchestration for the changelog feed.

This module coordinates one regeneration run:
1. Read the changelog document (local file or URL)
2. Split it into release sections
3. Parse each section in document order, registering contributors
4. Assign same-day synthetic publish times
5. Replace the content store with the new entries and author registry
6. Load the entries back and attach list page links

All run state (author registry, publish time slots) is created inside
``run_pipeline`` and discarded with it. When the source cannot be read the
store is left untouched and the previous entries are returned instead.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from .config import AppConfig, LinksConfig
from .core.authors import AuthorRegistry
from .core.links import LinkRewriter
from .core.publish_time import PublishTimeRegistry
from .core.sections import parse_section
from .core.splitter import split_sections
from .core.types import LoadedEntry, ParsedSection, RunResult, SkippedSection
from .input.source import SourceError, read_source
from .output.materializer import EntryMaterializer
from .output.pagination import annotate_pagination, load_entries
from .utils.logging import log_event, setup_logging

TIME_SLOTS_EXHAUSTED = "time_slots_exhausted"


def build_link_rewriter(cfg: LinksConfig) -> LinkRewriter:
    return LinkRewriter(
        issue_prefix=cfg.issue_prefix,
        issue_tracker_url=cfg.issue_tracker_url,
        code_host_issues_url=cfg.code_host_issues_url,
    )


def build_sections(
    text: str,
    cfg: LinksConfig,
    logger: logging.Logger | None = None,
    progress: Progress | None = None,
) -> tuple[list[ParsedSection], list[SkippedSection], AuthorRegistry]:
    """Parse a whole changelog document into timestamped sections.

    Sections are processed strictly in document order because the publish
    time of a release depends on how many releases on the same date came
    before it.

    Args:
        text: Full changelog markdown
        cfg: Link rewriting configuration
        logger: Pipeline logger for skip events
        progress: Optional rich progress bar to advance per section

    Returns:
        Tuple of (accepted sections, skipped sections, author registry)
    """
    raw_sections = split_sections(text)
    links = build_link_rewriter(cfg)
    authors = AuthorRegistry()
    times = PublishTimeRegistry()
    task = progress.add_task("Parse sections", total=len(raw_sections)) if progress else None

    parsed: list[ParsedSection] = []
    skipped: list[SkippedSection] = []
    for raw in raw_sections:
        result = parse_section(raw, links, authors, avatar_host=cfg.avatar_host)
        if progress is not None and task is not None:
            progress.advance(task, 1)

        if result.section is None:
            skipped.append(
                SkippedSection(index=raw.index, heading=result.heading, reason=result.reason or "")
            )
            log_event(
                logger,
                "Skipping changelog section",
                level=logging.WARNING,
                event="section_skipped",
                index=raw.index,
                heading=result.heading,
                reason=result.reason,
            )
            continue

        section = result.section
        section.timestamp = times.allocate(section.date)
        if section.timestamp is None:
            skipped.append(
                SkippedSection(index=raw.index, heading=result.heading, reason=TIME_SLOTS_EXHAUSTED)
            )
            log_event(
                logger,
                "No publish time left for release date",
                level=logging.WARNING,
                event="section_skipped",
                index=raw.index,
                heading=result.heading,
                reason=TIME_SLOTS_EXHAUSTED,
                date=section.date.isoformat(),
            )
            continue
        parsed.append(section)

    return parsed, skipped, authors


def run_pipeline(cfg: AppConfig, show_progress: bool = False, console: Console | None = None) -> RunResult:
    """Run one regeneration of the changelog content store.

    Args:
        cfg: Application configuration
        show_progress: Whether to display a progress bar while parsing
        console: Rich console for progress output (creates default if None)

    Returns:
        RunResult describing written, skipped and loaded entries

    Raises:
        OSError: if writing the content store fails; the previous store
            contents are kept in that case
    """
    log_dir = Path(cfg.logging.dir) if cfg.logging.file else None
    logger = setup_logging(cfg.logging, log_dir)
    generate_dir = Path(cfg.output.generate_dir)

    log_event(
        logger,
        "Pipeline start",
        event="pipeline_start",
        source=cfg.source.path,
        output=str(generate_dir),
    )

    try:
        text = read_source(cfg.source)
    except SourceError as exc:
        log_event(
            logger,
            f"{exc}; reusing previously generated entries",
            level=logging.ERROR,
            event="source_unavailable",
            source=exc.location,
            error=exc.reason,
        )
        return RunResult(fallback=True, entries=_load_paginated(cfg), error=str(exc))

    if show_progress:
        progress = Progress(
            SpinnerColumn(),
            TextColumn("{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console or Console(),
        )
        with progress:
            parsed, skipped, authors = build_sections(text, cfg.links, logger, progress)
    else:
        parsed, skipped, authors = build_sections(text, cfg.links, logger)

    materializer = EntryMaterializer(
        generate_dir,
        authors_filename=cfg.output.authors_filename,
        write_concurrency=cfg.output.write_concurrency,
    )
    written = materializer.materialize(parsed, authors)
    entries = _load_paginated(cfg)

    log_event(
        logger,
        "Pipeline complete",
        event="pipeline_complete",
        written=len(written),
        skipped=len(skipped),
        authors=len(authors),
    )
    return RunResult(written=written, skipped=skipped, entries=entries)


def _load_paginated(cfg: AppConfig) -> list[LoadedEntry]:
    entries = load_entries(Path(cfg.output.generate_dir), cfg.pagination.route_base_path)
    return annotate_pagination(entries, cfg.pagination.page_size, cfg.pagination.route_base_path)
