"""Rewrite short issue references into markdown links."""

from __future__ import annotations

import re


class LinkRewriter:
    """Turns ``[PRFP-12]`` and ``[#7]`` into full markdown links.

    Only bare short forms are rewritten. A reference already followed by
    ``(`` is a complete link and is left alone, so ``rewrite`` is idempotent.
    """

    def __init__(self, issue_prefix: str, issue_tracker_url: str, code_host_issues_url: str):
        self.issue_prefix = issue_prefix
        self.issue_tracker_url = issue_tracker_url.rstrip("/")
        self.code_host_issues_url = code_host_issues_url.rstrip("/")
        self._ticket_re = re.compile(rf"\[({re.escape(issue_prefix)}-\d+)\](?!\()")
        self._issue_re = re.compile(r"\[(#\d+)\](?!\()")

    def rewrite(self, text: str) -> str:
        text = self._ticket_re.sub(
            lambda m: f"[{m.group(1)}]({self.issue_tracker_url}/{m.group(1)})", text
        )
        text = self._issue_re.sub(
            lambda m: f"[{m.group(1)}]({self.code_host_issues_url}/{m.group(1)})", text
        )
        return text
