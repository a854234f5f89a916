"""Parse unified diff text into structured hunks."""

from __future__ import annotations

import logging
import re
from typing import Any, List

from .generator import detect_language
from .hunks import UNKNOWN_PATH, DiffHunk, UnifiedDiff

__all__ = ["HUNK_HEADER", "extract_file_path", "parse_hunks", "parse_unified_diff"]

LOGGER = logging.getLogger(__name__)

HUNK_HEADER = re.compile(
    r"^@@ -(?P<old_start>\d+)(?:,(?P<old_count>\d+))? "
    r"\+(?P<new_start>\d+)(?:,(?P<new_count>\d+))? @@"
)
_FILE_HEADER = re.compile(r"^(?:---|\+\+\+)\s+(?:a/|b/)?(.+)$", re.MULTILINE)
_NULL_DEVICE = "/dev/null"


def _default_count(value: str | None) -> int:
    """Return the number of lines represented in a hunk header."""
    return int(value) if value is not None else 1


def _split_diff_lines(text: str) -> List[str]:
    """Split diff text on LF, dropping the empty tail left by a final newline."""
    lines = text.replace("\r\n", "\n").split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def extract_file_path(diff_text: str) -> str:
    """Return the target path named by the first ``---``/``+++`` header."""
    for match in _FILE_HEADER.finditer(diff_text):
        candidate = match.group(1).strip()
        if candidate and candidate != _NULL_DEVICE:
            return candidate
    return UNKNOWN_PATH


def parse_hunks(diff_text: str) -> List[DiffHunk]:
    """Scan diff text and collect every ``@@`` hunk in order.

    Context lines seen before the first removed/added line of a hunk land in
    ``context_before``; any later context lands in ``context_after``. Lines
    outside a hunk (file headers, ``diff --git`` banners, prose) are ignored.
    """
    hunks: List[DiffHunk] = []
    current: DiffHunk | None = None

    for line in _split_diff_lines(diff_text):
        match = HUNK_HEADER.match(line)
        if match:
            if current is not None:
                hunks.append(current)
            current = DiffHunk(
                old_start=int(match.group("old_start")),
                old_count=_default_count(match.group("old_count")),
                new_start=int(match.group("new_start")),
                new_count=_default_count(match.group("new_count")),
            )
            continue
        if current is None:
            continue

        if line.startswith("-"):
            current.old_lines.append(line[1:])
        elif line.startswith("+"):
            current.new_lines.append(line[1:])
        elif line.startswith(" ") or line == "":
            context = line[1:]
            if current.old_lines or current.new_lines:
                current.context_after.append(context)
            else:
                current.context_before.append(context)

    if current is not None:
        hunks.append(current)
    return hunks


def parse_unified_diff(diff_text: Any) -> UnifiedDiff | None:
    """Parse raw diff text into a :class:`UnifiedDiff`.

    Text without any hunk header yields an empty, no-op diff. ``None`` is
    only returned when ``diff_text`` is not text at all.
    """
    if not isinstance(diff_text, str):
        LOGGER.debug("Refusing to parse non-text diff payload of type %s", type(diff_text).__name__)
        return None

    hunks = parse_hunks(diff_text)
    file_path = extract_file_path(diff_text)
    if not hunks:
        LOGGER.debug("No hunk headers found in diff for %s", file_path)
    return UnifiedDiff(file_path=file_path, hunks=hunks, language=detect_language(file_path))
