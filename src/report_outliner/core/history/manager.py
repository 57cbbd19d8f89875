"""Bounded undo history of whole-project snapshots.

History is a linear list of snapshots plus a cursor. ``commit`` appends a new
snapshot (dropping anything after the cursor and skipping exact repeats),
``replace_current`` overwrites the working copy of the current slot for
keystroke-level edits, and ``undo`` steps the cursor back.

Putting an old snapshot back into the live project usually triggers the same
write path as a normal edit. While that happens the manager is in the
``RESTORING`` state and ignores commits, so a restore never records itself as
a new edit.
"""

import enum
from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger

from report_outliner.config import MAX_HISTORY_LENGTH
from report_outliner.models.section import HistorySnapshot


class HistoryState(enum.Enum):
    EMPTY = "empty"
    ACTIVE = "active"
    RESTORING = "restoring"


class HistoryManager:
    """Linear undo history with a cursor."""

    def __init__(self, *, max_length: int = MAX_HISTORY_LENGTH) -> None:
        if max_length < 1:
            msg = f"max_length must be at least 1, got {max_length}"
            raise ValueError(msg)
        self.max_length = max_length
        self._snapshots: list[HistorySnapshot] = []
        self._cursor = -1
        # Uncommitted live edits to the current slot.
        self._working: HistorySnapshot | None = None
        self._restoring = False

    @property
    def state(self) -> HistoryState:
        if self._restoring:
            return HistoryState.RESTORING
        return HistoryState.ACTIVE if self._snapshots else HistoryState.EMPTY

    @property
    def snapshots(self) -> tuple[HistorySnapshot, ...]:
        return tuple(self._snapshots)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def current(self) -> HistorySnapshot | None:
        """The current slot, including any uncommitted live edits."""
        if self._working is not None:
            return self._working
        return self._snapshots[self._cursor] if self._snapshots else None

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0 and not self._restoring

    def commit(self, snapshot: HistorySnapshot) -> bool:
        """Record ``snapshot`` as a new undo step.

        Returns:
            True if a snapshot was appended, False if it repeated the current
            one or a restore is in progress.
        """
        if self._restoring:
            logger.debug("History commit suppressed during restore")
            return False

        self._working = None
        del self._snapshots[self._cursor + 1 :]

        if self._snapshots and self._snapshots[-1] == snapshot:
            self._cursor = len(self._snapshots) - 1
            return False

        self._snapshots.append(snapshot)
        if len(self._snapshots) > self.max_length:
            del self._snapshots[: len(self._snapshots) - self.max_length]
        self._cursor = len(self._snapshots) - 1
        return True

    def replace_current(self, snapshot: HistorySnapshot) -> None:
        """Update the current slot in place without adding an undo step."""
        if self._restoring:
            logger.debug("History update suppressed during restore")
            return
        if not self._snapshots:
            self._snapshots.append(snapshot)
            self._cursor = 0
            return
        self._working = snapshot

    def undo(self) -> HistorySnapshot | None:
        """Step back one snapshot and return it, or None if there is nothing to undo."""
        if not self.can_undo:
            return None
        self._working = None
        self._cursor -= 1
        return self._snapshots[self._cursor]

    @contextmanager
    def restoring(self) -> Iterator[None]:
        """Hold the RESTORING state while a snapshot is written back."""
        if self._restoring:
            msg = "A history restore is already in progress"
            raise RuntimeError(msg)
        self._restoring = True
        try:
            yield
        finally:
            self._restoring = False
