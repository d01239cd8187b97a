"""
Output stage: writing the content store and reading it back for pagination.
"""

from .materializer import EntryMaterializer, entry_filename, render_entry
from .pagination import annotate_pagination, latest_entry, load_entries

__all__ = [
    "EntryMaterializer",
    "annotate_pagination",
    "entry_filename",
    "latest_entry",
    "load_entries",
    "render_entry",
]
