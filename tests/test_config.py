"""Tests for YAML configuration loading."""

from pathlib import Path

from changelog_feed.config import AppConfig, load_config


def test_defaults_without_file(monkeypatch):
    monkeypatch.delenv("CHANGELOG_SOURCE", raising=False)

    cfg = load_config(None)

    assert cfg == AppConfig()
    assert cfg.pagination.page_size == 20
    assert cfg.links.issue_prefix == "PRFP"
    assert cfg.output.authors_filename == "authors.json"


def test_yaml_overrides_merge_onto_defaults(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("CHANGELOG_SOURCE", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text(
        "source:\n  path: docs/CHANGELOG.md\n"
        "links:\n  issue_prefix: ABC\n  unknown_key: ignored\n"
        "pagination:\n  page_size: 5\n"
        "unknown_section:\n  x: 1\n",
        encoding="utf-8",
    )

    cfg = load_config(str(path))

    assert cfg.source.path == "docs/CHANGELOG.md"
    assert cfg.source.retries == 2
    assert cfg.links.issue_prefix == "ABC"
    assert cfg.links.avatar_host == "github.com"
    assert cfg.pagination.page_size == 5
    assert cfg.pagination.route_base_path == "/changelog"


def test_empty_yaml_file_gives_defaults(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("CHANGELOG_SOURCE", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")

    assert load_config(str(path)) == AppConfig()


def test_env_var_overrides_source_path(tmp_path: Path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("source:\n  path: from-file.md\n", encoding="utf-8")
    monkeypatch.setenv("CHANGELOG_SOURCE", "https://example.com/CHANGELOG.md")

    cfg = load_config(str(path))

    assert cfg.source.path == "https://example.com/CHANGELOG.md"
