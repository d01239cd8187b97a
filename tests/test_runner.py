"""End-to-end tests for one pipeline run."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from changelog_feed import runner
from changelog_feed.config import AppConfig, LinksConfig
from changelog_feed.output.materializer import EntryMaterializer


EXAMPLE = (
    "\n## 2.1.0 (2024-01-05)\n\nFixed [PRFP-9].\n\n## Committers: 1\n"
    "- Jane (@jane)(https://x/jane))\n\n## 2.0.0 (2024-01-05)\n\nInitial.\n"
)


def _config(tmp_path: Path, source: Path) -> AppConfig:
    cfg = AppConfig()
    cfg.source.path = str(source)
    cfg.output.generate_dir = str(tmp_path / "site" / "changelog" / "source")
    cfg.logging.console = False
    return cfg


def _write_source(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "changelog.md"
    path.write_text(text, encoding="utf-8")
    return path


def _store(cfg: AppConfig) -> Path:
    return Path(cfg.output.generate_dir)


def test_example_changelog(tmp_path: Path):
    cfg = _config(tmp_path, _write_source(tmp_path, EXAMPLE))

    result = runner.run_pipeline(cfg)

    assert not result.fallback
    assert [e.version for e in result.entries] == ["2.1.0", "2.0.0"]
    assert [e.date for e in result.entries] == ["2024-01-05T20:00", "2024-01-05T19:00"]
    assert result.entries[0].authors == ["jane"]
    assert "/PRFP-9)" in result.entries[0].body
    assert "Committers" not in result.entries[0].body
    authors = json.loads((_store(cfg) / "authors.json").read_text(encoding="utf-8"))
    assert list(authors) == ["jane"]


def test_zero_headings_yield_empty_store(tmp_path: Path):
    cfg = _config(tmp_path, _write_source(tmp_path, "# Changelog\n\nNothing yet.\n"))

    result = runner.run_pipeline(cfg)

    assert result.written == []
    assert result.entries == []
    assert json.loads((_store(cfg) / "authors.json").read_text(encoding="utf-8")) == {}


def test_undated_section_is_skipped_without_halting(tmp_path: Path):
    text = "## Unreleased\n\nWIP\n\n## 1.1.0 (2024-02-01)\n\nB\n\n## 1.0.0 (2024-01-01)\n\nA\n"
    cfg = _config(tmp_path, _write_source(tmp_path, text))

    result = runner.run_pipeline(cfg)

    assert [e.version for e in result.entries] == ["1.1.0", "1.0.0"]
    assert len(result.skipped) == 1
    assert result.skipped[0].heading == "Unreleased"
    assert result.skipped[0].reason == "missing_date"


def test_rerun_is_byte_identical(tmp_path: Path):
    cfg = _config(tmp_path, _write_source(tmp_path, EXAMPLE))

    runner.run_pipeline(cfg)
    first = {p.name: p.read_bytes() for p in _store(cfg).iterdir()}
    runner.run_pipeline(cfg)
    second = {p.name: p.read_bytes() for p in _store(cfg).iterdir()}

    assert first == second


def test_registry_does_not_leak_between_runs(tmp_path: Path):
    source = _write_source(tmp_path, EXAMPLE)
    cfg = _config(tmp_path, source)
    runner.run_pipeline(cfg)

    source.write_text("## 3.0.0 (2024-03-01)\n\nNo committers.\n", encoding="utf-8")
    runner.run_pipeline(cfg)

    authors = json.loads((_store(cfg) / "authors.json").read_text(encoding="utf-8"))
    assert authors == {}
    assert sorted(p.name for p in _store(cfg).iterdir()) == ["2024-03-01-3.0.0.md", "authors.json"]


def test_registry_converges_on_alias(tmp_path: Path):
    text = (
        "## 1.1.0 (2024-02-01)\n\nB\n\n## Committers: 1\n- Jane Doe (@jane)(https://x/jane))\n\n"
        "## 1.0.0 (2024-01-01)\n\nA\n\n## Committers: 1\n- J (@jane)(https://x/jane))\n"
    )
    cfg = _config(tmp_path, _write_source(tmp_path, text))

    runner.run_pipeline(cfg)

    authors = json.loads((_store(cfg) / "authors.json").read_text(encoding="utf-8"))
    assert list(authors) == ["jane"]


def test_byte_order_mark_keeps_newest_release(tmp_path: Path):
    source = tmp_path / "changelog.md"
    text = "\ufeff## 2.1.0 (2024-01-05)\n\nNewest.\n\n## 2.0.0 (2024-01-04)\n\nOld.\n"
    source.write_bytes(text.encode("utf-8"))
    cfg = _config(tmp_path, source)

    result = runner.run_pipeline(cfg)

    assert [e.version for e in result.entries] == ["2.1.0", "2.0.0"]
    assert result.skipped == []


def test_missing_source_falls_back_to_previous_entries(tmp_path: Path):
    source = _write_source(tmp_path, EXAMPLE)
    cfg = _config(tmp_path, source)
    runner.run_pipeline(cfg)
    before = {p.name: p.read_bytes() for p in _store(cfg).iterdir()}

    source.unlink()
    result = runner.run_pipeline(cfg)

    assert result.fallback
    assert result.error is not None
    assert result.written == []
    assert [e.version for e in result.entries] == ["2.1.0", "2.0.0"]
    assert {p.name: p.read_bytes() for p in _store(cfg).iterdir()} == before


def test_undecodable_source_falls_back(tmp_path: Path):
    source = tmp_path / "changelog.md"
    source.write_bytes(b"## 1.0.0 (2024-01-01)\n\xff\xfe\n")
    cfg = _config(tmp_path, source)

    result = runner.run_pipeline(cfg)

    assert result.fallback
    assert result.entries == []
    assert not _store(cfg).exists()


def test_write_failure_propagates(tmp_path: Path, monkeypatch):
    cfg = _config(tmp_path, _write_source(tmp_path, EXAMPLE))

    def broken(self, sections, registry):
        raise OSError("read-only file system")

    monkeypatch.setattr(EntryMaterializer, "materialize", broken)
    with pytest.raises(OSError):
        runner.run_pipeline(cfg)


def test_pagination_links_follow_page_size(tmp_path: Path):
    text = "".join(f"## 1.0.{i} (2024-01-{i + 1:02d})\n\nR{i}\n\n" for i in range(5))
    cfg = _config(tmp_path, _write_source(tmp_path, text))
    cfg.pagination.page_size = 2

    result = runner.run_pipeline(cfg)

    assert [e.list_page_link for e in result.entries] == [
        "/changelog",
        "/changelog",
        "/changelog/page/2",
        "/changelog/page/2",
        "/changelog/page/3",
    ]


def test_build_sections_drops_sections_past_hour_limit():
    text = "".join(f"## 1.0.{i} (2024-01-05)\n\nR{i}\n\n" for i in range(22))

    parsed, skipped, _ = runner.build_sections(text, LinksConfig())

    assert len(parsed) == 21
    assert parsed[0].timestamp == "2024-01-05T20:00"
    assert parsed[-1].timestamp == "2024-01-05T00:00"
    assert [(s.heading, s.reason) for s in skipped] == [("1.0.21 (2024-01-05)", "time_slots_exhausted")]
    assert len({p.timestamp for p in parsed}) == 21


def test_build_sections_show_progress(tmp_path: Path):
    cfg = _config(tmp_path, _write_source(tmp_path, EXAMPLE))

    result = runner.run_pipeline(cfg, show_progress=True)

    assert len(result.written) == 2
