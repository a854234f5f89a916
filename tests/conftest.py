from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from patchengine import DiffHunk  # noqa: E402


@pytest.fixture()
def make_hunk():
    """Build a hunk whose advisory counts follow the supplied line lists."""

    def _make(old_start: int, old_lines: list[str], new_lines: list[str], **extra) -> DiffHunk:
        return DiffHunk(
            old_start=old_start,
            old_count=len(old_lines),
            new_start=extra.pop("new_start", old_start),
            new_count=len(new_lines),
            old_lines=old_lines,
            new_lines=new_lines,
            **extra,
        )

    return _make
