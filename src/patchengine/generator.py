"""Generate hunk sequences from two text snapshots and render them as diff text."""

from __future__ import annotations

import logging
from typing import List, Mapping, Sequence

from .config import EngineConfig
from .hunks import PLAIN_TEXT, DiffHunk, UnifiedDiff

__all__ = [
    "LANGUAGE_BY_EXTENSION",
    "detect_language",
    "format_unified_diff",
    "generate_diff",
    "generate_hunks",
]

LOGGER = logging.getLogger(__name__)

LANGUAGE_BY_EXTENSION: Mapping[str, str] = {
    "ts": "typescript",
    "tsx": "typescript",
    "js": "javascript",
    "jsx": "javascript",
    "py": "python",
    "rs": "rust",
    "go": "go",
    "java": "java",
    "cpp": "cpp",
    "c": "c",
    "css": "css",
    "scss": "scss",
    "html": "html",
    "json": "json",
    "md": "markdown",
    "yaml": "yaml",
}


def detect_language(file_path: str, overrides: Mapping[str, str] | None = None) -> str:
    """Map a file extension onto a syntax-highlighting language tag."""
    name = file_path.rsplit("/", 1)[-1]
    if "." not in name:
        return PLAIN_TEXT
    extension = name.rsplit(".", 1)[-1].lower()
    if overrides and extension in overrides:
        return overrides[extension]
    return LANGUAGE_BY_EXTENSION.get(extension, PLAIN_TEXT)


def _line_at(lines: Sequence[str], index: int) -> str | None:
    return lines[index] if index < len(lines) else None


def generate_hunks(old_lines: Sequence[str], new_lines: Sequence[str], *, context_lines: int = 3) -> List[DiffHunk]:
    """Greedy line scan producing hunks that rebuild ``new_lines`` from ``old_lines``.

    Both cursors advance together over identical lines. On divergence the old
    cursor runs until its line reappears at the new cursor, then the new cursor
    runs until it meets the old cursor's line again. The result is not a
    minimal edit script but always replays exactly.
    """
    hunks: List[DiffHunk] = []
    i = j = 0

    while i < len(old_lines) or j < len(new_lines):
        if _line_at(old_lines, i) == _line_at(new_lines, j):
            i += 1
            j += 1
            continue

        old_start, new_start = i + 1, j + 1
        context_before = list(old_lines[max(0, i - context_lines) : i])
        removed: List[str] = []
        added: List[str] = []

        while i < len(old_lines) and old_lines[i] != _line_at(new_lines, j):
            removed.append(old_lines[i])
            i += 1
        while j < len(new_lines) and new_lines[j] != _line_at(old_lines, i):
            added.append(new_lines[j])
            j += 1

        hunks.append(
            DiffHunk(
                old_start=old_start,
                old_count=len(removed),
                new_start=new_start,
                new_count=len(added),
                old_lines=removed,
                new_lines=added,
                context_before=context_before,
            )
        )

    return hunks


def generate_diff(
    old_content: str,
    new_content: str,
    file_path: str,
    *,
    config: EngineConfig | None = None,
) -> UnifiedDiff:
    """Diff two full text bodies for ``file_path``."""
    settings = config or EngineConfig()
    hunks = generate_hunks(
        old_content.split("\n"),
        new_content.split("\n"),
        context_lines=settings.context_lines,
    )
    diff = UnifiedDiff(
        file_path=file_path,
        hunks=hunks,
        old_content=old_content,
        new_content=new_content,
        language=detect_language(file_path, settings.languages),
    )
    LOGGER.debug(
        "Generated %d hunk(s) for %s (+%d/-%d)",
        len(hunks),
        file_path,
        diff.additions,
        diff.deletions,
    )
    return diff


def format_unified_diff(diff: UnifiedDiff) -> str:
    """Render ``diff`` as unified diff text that :func:`parse_unified_diff` reads back."""
    lines = [f"--- a/{diff.file_path}", f"+++ b/{diff.file_path}"]
    for hunk in diff.hunks:
        lines.append(f"@@ -{hunk.old_start},{hunk.old_count} +{hunk.new_start},{hunk.new_count} @@")
        lines.extend(f" {line}" for line in hunk.context_before)
        lines.extend(f"-{line}" for line in hunk.old_lines)
        lines.extend(f"+{line}" for line in hunk.new_lines)
        lines.extend(f" {line}" for line in hunk.context_after)
    return "\n".join(lines)
