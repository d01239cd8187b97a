"""
Changelog Feed - republish a single changelog file as blog-style entries.

This package splits a hand-maintained changelog markdown document into one
entry per release (YAML frontmatter + markdown body), keeps a registry of
release contributors, and computes list page links for the generated entries.

Main entry point is the CLI via `changelog-feed run` command.

Example:
    $ changelog-feed run -s CHANGELOG.md -o changelog/source
"""

__all__ = ["__version__", "run_pipeline", "build_sections", "EntryMaterializer", "load_entries"]
__version__ = "0.1.0"

from .output.materializer import EntryMaterializer
from .output.pagination import load_entries
from .runner import build_sections, run_pipeline
