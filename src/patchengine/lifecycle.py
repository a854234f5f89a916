"""Queue of pending file edits and their transition to applied, failed or rejected.

The manager is driven by a single editing session. It does no locking; hosts
that share one instance across threads must serialise calls themselves.
"""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Tuple

from .applier import ApplyResult, apply_hunks
from .config import EngineConfig
from .hunks import EditStatus, FileEdit, UnifiedDiff
from .telemetry import EditEvent, EditEventKind, edit_event, record_event

__all__ = ["EditLifecycleManager"]

LOGGER = logging.getLogger(__name__)


class EditLifecycleManager:
    """Own pending and applied edits for one editing session.

    Edits move ``pending -> applying -> applied | failed`` or
    ``pending -> rejected``. Failed and rejected edits stay in the pending
    queue so callers can inspect them, but they are never retried; a new
    edit must be submitted instead. Applied edits move to a separate archive.
    The manager never reads or writes files: callers supply current text and
    persist :attr:`FileEdit.result` once :meth:`apply` returns ``True``.
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config or EngineConfig()
        self._pending: Dict[str, FileEdit] = {}
        self._applied: Dict[str, FileEdit] = {}
        self._applying = False

    @property
    def pending(self) -> Tuple[FileEdit, ...]:
        return tuple(self._pending.values())

    @property
    def applied(self) -> Tuple[FileEdit, ...]:
        return tuple(self._applied.values())

    @property
    def is_applying(self) -> bool:
        return self._applying

    def _emit(self, event: EditEvent) -> None:
        if self.config.telemetry:
            record_event(event)

    def get(self, edit_id: str) -> FileEdit | None:
        """Return the edit with ``edit_id`` from either queue."""
        edit = self._pending.get(edit_id)
        if edit is None:
            edit = self._applied.get(edit_id)
        return edit

    def submit(self, file_path: str, diff: UnifiedDiff) -> str:
        """Queue ``diff`` as a pending edit of ``file_path`` and return its id."""
        edit = FileEdit(file_path=file_path, diff=diff)
        self._pending[edit.id] = edit
        self._emit(edit_event(EditEventKind.SUBMITTED, edit, **diff.stats().model_dump()))
        return edit.id

    def _pending_edit(self, edit_id: str) -> FileEdit | None:
        edit = self._pending.get(edit_id)
        if edit is None:
            LOGGER.debug("Ignoring unknown edit id %s", edit_id)
            return None
        if edit.status is not EditStatus.PENDING:
            LOGGER.debug("Ignoring edit %s in state %s", edit_id, edit.status.value)
            return None
        return edit

    def _run(self, edit: FileEdit, content: str | None) -> ApplyResult:
        base = content if content is not None else edit.diff.old_content
        return apply_hunks(
            base,
            edit.diff.hunks,
            preview_lines=self.config.preview_lines,
            preview_width=self.config.preview_width,
        )

    def preview(self, edit_id: str, content: str | None = None) -> ApplyResult | None:
        """Dry-run a pending edit without changing its state."""
        edit = self._pending_edit(edit_id)
        if edit is None:
            return None
        return self._run(edit, content)

    def apply(self, edit_id: str, content: str | None = None) -> bool:
        """Apply every hunk of a pending edit, all or nothing.

        ``content`` is the caller's current text for the file; the diff's
        ``old_content`` is used when it is omitted. Returns ``False`` for
        unknown or non-pending ids and for edits whose hunks cannot be placed.
        """
        edit = self._pending_edit(edit_id)
        if edit is None:
            return False

        edit.status = EditStatus.APPLYING
        self._applying = True
        try:
            outcome = self._run(edit, content)
        finally:
            self._applying = False

        if outcome.error is not None:
            edit.status = EditStatus.FAILED
            edit.error = outcome.error.message
            LOGGER.info("Edit %s for %s failed at hunk %s", edit.id, edit.file_path, outcome.error.hunk_index)
            self._emit(
                edit_event(
                    EditEventKind.FAILED,
                    edit,
                    hunk_id=outcome.error.hunk_id,
                    hunk_index=outcome.error.hunk_index,
                    expected=outcome.error.expected,
                )
            )
            return False

        edit.status = EditStatus.APPLIED
        edit.error = None
        edit.result = outcome.content
        del self._pending[edit.id]
        self._applied[edit.id] = edit
        self._emit(
            edit_event(
                EditEventKind.APPLIED,
                edit,
                strategies=tuple(strategy.value for strategy in outcome.strategies),
            )
        )
        return True

    def apply_all(self, contents: Mapping[str, str] | None = None) -> Tuple[int, int]:
        """Apply every pending edit in submission order.

        Each edit succeeds or fails on its own. When ``contents`` maps file
        paths to current text, an applied edit's result replaces that entry so
        later edits to the same file in this batch build on it.
        """
        working = dict(contents) if contents is not None else None
        queue = [edit for edit in self._pending.values() if edit.status is EditStatus.PENDING]
        succeeded = failed = 0
        for edit in queue:
            current = working.get(edit.file_path) if working is not None else None
            if self.apply(edit.id, current):
                succeeded += 1
                if working is not None and edit.file_path in working and edit.result is not None:
                    working[edit.file_path] = edit.result
            else:
                failed += 1
        return succeeded, failed

    def reject(self, edit_id: str) -> bool:
        """Mark a pending edit as rejected. Other states are left alone."""
        edit = self._pending_edit(edit_id)
        if edit is None:
            return False
        edit.status = EditStatus.REJECTED
        self._emit(edit_event(EditEventKind.REJECTED, edit))
        return True

    def reject_all(self) -> int:
        """Reject every pending edit and return how many were rejected."""
        return sum(1 for edit_id in list(self._pending) if self.reject(edit_id))

    def clear(self) -> None:
        """Forget all edits. Text already handed back to callers is unaffected."""
        dropped = len(self._pending) + len(self._applied)
        self._pending.clear()
        self._applied.clear()
        self._emit(EditEvent(event=EditEventKind.CLEARED, dropped=dropped))
