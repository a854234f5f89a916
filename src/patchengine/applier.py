"""Locate and rewrite hunk regions in text that may have drifted from the diff.

Each hunk is placed by the first strategy that succeeds:

1. ``positional``: the removed lines sit at the line number the hunk names
   (compared with surrounding whitespace ignored).
2. ``substring``: the removed lines, joined verbatim, occur somewhere else in
   the text; the first occurrence is replaced.
3. ``normalized``: a window of lines matches once every line is stripped; the
   replacement adopts the indentation of the window's first line.

Nothing here raises for a hunk that cannot be placed. Failures come back as an
:class:`ApplyError` on the result and the input text is returned untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Sequence, Tuple

from .hunks import DiffHunk

__all__ = [
    "ApplyError",
    "ApplyResult",
    "MatchStrategy",
    "apply_hunk",
    "apply_hunks",
]

LOGGER = logging.getLogger(__name__)

DEFAULT_PREVIEW_LINES = 3
DEFAULT_PREVIEW_WIDTH = 120


class MatchStrategy(str, Enum):
    """Strategy that located a hunk in the target text."""

    POSITIONAL = "positional"
    SUBSTRING = "substring"
    NORMALIZED = "normalized"


@dataclass(slots=True)
class ApplyError:
    """Recoverable failure to place a hunk in the target text."""

    message: str
    expected: Tuple[str, ...] = ()
    hunk_id: str | None = None
    hunk_index: int | None = None

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class ApplyResult:
    """Outcome of applying one or more hunks to a text buffer."""

    content: str
    strategies: Tuple[MatchStrategy, ...] = ()
    error: ApplyError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def strategy(self) -> MatchStrategy | None:
        """Strategy used by the most recently applied hunk."""
        return self.strategies[-1] if self.strategies else None


def _split(content: str) -> List[str]:
    return content.split("\n")


def _leading_whitespace(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]


def _window_matches(lines: Sequence[str], start: int, expected: Sequence[str]) -> bool:
    if start < 0 or start + len(expected) > len(lines):
        return False
    return all(lines[start + offset].strip() == want.strip() for offset, want in enumerate(expected))


def _splice(lines: Sequence[str], start: int, removed: int, replacement: Iterable[str]) -> str:
    return "\n".join([*lines[:start], *replacement, *lines[start + removed :]])


def _positional_anchors(hunk: DiffHunk, offset: int) -> List[int]:
    """Candidate zero-based start indices for a positional match.

    The header line number is tried first. Diffs written by ``diff -u`` count
    leading context into the header, so the index just past that context is a
    second candidate when the hunk removes lines. A pure insertion headed
    ``-0,0`` (new files, ``-U0`` prepends) is placed at the top of the text.
    """
    anchor = hunk.old_start - 1 + offset
    if not hunk.old_lines:
        return [max(anchor, 0)]
    anchors = [anchor]
    if hunk.context_before:
        anchors.append(anchor + len(hunk.context_before))
    return anchors


def _apply_positional(lines: List[str], hunk: DiffHunk, offset: int) -> str | None:
    for start in _positional_anchors(hunk, offset):
        if _window_matches(lines, start, hunk.old_lines):
            return _splice(lines, start, len(hunk.old_lines), hunk.new_lines)
    return None


def _apply_substring(content: str, hunk: DiffHunk) -> str | None:
    if not hunk.old_lines:
        return None
    needle = "\n".join(hunk.old_lines)
    if not needle:
        return None
    index = content.find(needle)
    if index == -1:
        return None
    return content[:index] + "\n".join(hunk.new_lines) + content[index + len(needle) :]


def _apply_normalized(lines: List[str], hunk: DiffHunk) -> str | None:
    if not hunk.old_lines:
        return None
    width = len(hunk.old_lines)
    for start in range(len(lines) - width + 1):
        if not _window_matches(lines, start, hunk.old_lines):
            continue
        indent = _leading_whitespace(lines[start])
        reindented = [indent + line.lstrip() for line in hunk.new_lines]
        return _splice(lines, start, width, reindented)
    return None


def _truncate(line: str, width: int) -> str:
    if width <= 0 or len(line) <= width:
        return line
    return line[: max(width - 3, 0)] + "..."


def _not_locatable(
    hunk: DiffHunk,
    *,
    preview_lines: int,
    preview_width: int,
) -> ApplyError:
    expected = tuple(_truncate(line, preview_width) for line in hunk.old_lines[:preview_lines])
    message = "Could not locate code to replace. Expected:\n" + "\n".join(expected) + "..."
    return ApplyError(message=message, expected=expected, hunk_id=hunk.id)


def apply_hunk(
    content: str,
    hunk: DiffHunk,
    *,
    offset: int = 0,
    preview_lines: int = DEFAULT_PREVIEW_LINES,
    preview_width: int = DEFAULT_PREVIEW_WIDTH,
) -> ApplyResult:
    """Apply ``hunk`` to ``content`` and return the rewritten text.

    ``offset`` shifts the hunk's stated line number, which lets callers track
    the drift introduced by hunks applied earlier in the same buffer. A hunk
    with neither removed nor added lines succeeds without touching the text
    and records no strategy. On failure the result carries ``content`` unchanged together with an
    :class:`ApplyError` listing the first expected lines.
    """
    if not hunk.old_lines and not hunk.new_lines:
        LOGGER.debug("Hunk %s has no body; leaving text unchanged", hunk.id)
        return ApplyResult(content=content)

    lines = _split(content)

    rewritten = _apply_positional(lines, hunk, offset)
    if rewritten is not None:
        LOGGER.debug("Hunk %s applied at stated position", hunk.id)
        return ApplyResult(content=rewritten, strategies=(MatchStrategy.POSITIONAL,))

    rewritten = _apply_substring(content, hunk)
    if rewritten is not None:
        LOGGER.debug("Hunk %s applied by substring search", hunk.id)
        return ApplyResult(content=rewritten, strategies=(MatchStrategy.SUBSTRING,))

    rewritten = _apply_normalized(lines, hunk)
    if rewritten is not None:
        LOGGER.debug("Hunk %s applied by whitespace-normalised search", hunk.id)
        return ApplyResult(content=rewritten, strategies=(MatchStrategy.NORMALIZED,))

    LOGGER.debug("Hunk %s could not be located", hunk.id)
    error = _not_locatable(hunk, preview_lines=preview_lines, preview_width=preview_width)
    return ApplyResult(content=content, error=error)


def apply_hunks(
    content: str,
    hunks: Iterable[DiffHunk],
    *,
    preview_lines: int = DEFAULT_PREVIEW_LINES,
    preview_width: int = DEFAULT_PREVIEW_WIDTH,
) -> ApplyResult:
    """Apply ``hunks`` in order against an accumulating buffer.

    Each hunk sees the text produced by the hunks before it. The first failure
    discards every earlier change and returns the original ``content``.
    """
    buffer = content
    offset = 0
    strategies: list[MatchStrategy] = []

    for index, hunk in enumerate(hunks):
        result = apply_hunk(
            buffer,
            hunk,
            offset=offset,
            preview_lines=preview_lines,
            preview_width=preview_width,
        )
        if result.error is not None:
            result.error.hunk_index = index
            return ApplyResult(content=content, strategies=tuple(strategies), error=result.error)
        buffer = result.content
        offset += hunk.line_delta
        if result.strategy is not None:
            strategies.append(result.strategy)

    return ApplyResult(content=buffer, strategies=tuple(strategies))
