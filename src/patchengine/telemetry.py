"""Structured telemetry records for the edit lifecycle."""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Tuple

from pydantic import Field

from .hunks import EditStatus, FileEdit, RecordModel, utc_now

__all__ = ["TELEMETRY_LOGGER", "EditEvent", "EditEventKind", "edit_event", "record_event"]

TELEMETRY_LOGGER = logging.getLogger("patchengine.telemetry")


class EditEventKind(str, Enum):
    """Lifecycle transitions reported on the telemetry logger."""

    SUBMITTED = "edit_submitted"
    APPLIED = "edit_applied"
    FAILED = "edit_failed"
    REJECTED = "edit_rejected"
    CLEARED = "edits_cleared"


class EditEvent(RecordModel):
    """One telemetry record. Fields that do not apply to an event stay unset."""

    event: EditEventKind
    timestamp: datetime = Field(default_factory=utc_now)
    edit_id: str | None = None
    file_path: str | None = None
    status: EditStatus | None = None
    hunks: int | None = None
    additions: int | None = None
    deletions: int | None = None
    strategies: Tuple[str, ...] | None = None
    hunk_id: str | None = None
    hunk_index: int | None = None
    expected: Tuple[str, ...] | None = None
    dropped: int | None = None


def edit_event(kind: EditEventKind, edit: FileEdit, **fields: Any) -> EditEvent:
    """Build an event describing ``edit`` as it stands after a transition."""
    return EditEvent(
        event=kind,
        edit_id=edit.id,
        file_path=edit.file_path,
        status=edit.status,
        **fields,
    )


def record_event(event: EditEvent) -> None:
    """Log ``event`` as a single line of compact JSON."""
    if not TELEMETRY_LOGGER.isEnabledFor(logging.INFO):
        return
    TELEMETRY_LOGGER.info(event.model_dump_json(exclude_none=True))
