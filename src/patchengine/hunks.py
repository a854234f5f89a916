"""Typed records describing hunks, diffs and edits tracked by the engine."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_PATH = "unknown"
PLAIN_TEXT = "plaintext"


def utc_now() -> datetime:
    """Return a timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


def new_hunk_id() -> str:
    return f"hunk-{uuid.uuid4().hex}"


def new_edit_id() -> str:
    return f"edit-{uuid.uuid4().hex}"


class RecordModel(BaseModel):
    """Base Pydantic model with strict field handling."""

    model_config = ConfigDict(extra="forbid", frozen=False)


class EditStatus(str, Enum):
    """Lifecycle states for a file edit."""

    PENDING = "pending"
    APPLYING = "applying"
    APPLIED = "applied"
    FAILED = "failed"
    REJECTED = "rejected"


TERMINAL_STATUSES = frozenset({EditStatus.APPLIED, EditStatus.FAILED, EditStatus.REJECTED})


class HunkChangeType(str, Enum):
    """Coarse classification of what a hunk does to its region."""

    ADD = "add"
    DELETE = "delete"
    MODIFY = "modify"


class DiffHunk(RecordModel):
    """One contiguous change region.

    ``old_count`` and ``new_count`` are advisory when the hunk was parsed from
    external text; consumers must rely on the length of ``old_lines`` and
    ``new_lines`` instead.
    """

    id: str = Field(default_factory=new_hunk_id)
    old_start: int = 1  # 1-indexed
    old_count: int = 0
    new_start: int = 1
    new_count: int = 0
    old_lines: List[str] = Field(default_factory=list)
    new_lines: List[str] = Field(default_factory=list)
    context_before: List[str] = Field(default_factory=list)
    context_after: List[str] = Field(default_factory=list)

    @property
    def change_type(self) -> HunkChangeType:
        if not self.old_lines:
            return HunkChangeType.ADD
        if not self.new_lines:
            return HunkChangeType.DELETE
        return HunkChangeType.MODIFY

    @property
    def line_delta(self) -> int:
        """Net number of lines the hunk adds to a buffer once applied."""
        return len(self.new_lines) - len(self.old_lines)


class DiffStats(RecordModel):
    """Line-level summary of a diff."""

    hunks: int = 0
    additions: int = 0
    deletions: int = 0


class UnifiedDiff(RecordModel):
    """One file's complete patch.

    ``old_content`` and ``new_content`` are only populated for diffs produced
    in-process by the generator; parsed diffs leave them empty.
    """

    file_path: str = UNKNOWN_PATH
    hunks: List[DiffHunk] = Field(default_factory=list)
    old_content: str = ""
    new_content: str = ""
    language: str = PLAIN_TEXT

    @property
    def additions(self) -> int:
        return sum(len(hunk.new_lines) for hunk in self.hunks)

    @property
    def deletions(self) -> int:
        return sum(len(hunk.old_lines) for hunk in self.hunks)

    @property
    def is_empty(self) -> bool:
        return not self.hunks

    def stats(self) -> DiffStats:
        return DiffStats(hunks=len(self.hunks), additions=self.additions, deletions=self.deletions)


class FileEdit(RecordModel):
    """A diff in flight through the edit lifecycle."""

    id: str = Field(default_factory=new_edit_id)
    file_path: str
    diff: UnifiedDiff
    status: EditStatus = EditStatus.PENDING
    error: Optional[str] = None
    result: Optional[str] = None
    timestamp: datetime = Field(default_factory=utc_now)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES
