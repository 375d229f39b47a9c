# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""State machine turning polled snapshots into timing updates."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, Protocol

from vitellary.game.snapshot import Snapshot, decode
from vitellary.game.splits import DEFAULT_SPLITS, MilestoneEvent, SplitTable
from vitellary.logging import get_logger

if TYPE_CHECKING:
    from vitellary.game.revisions import RevisionDescriptor

logger = get_logger(__name__)

# Raw-form marker for "no value observed yet" (u32::MAX). The tracker itself
# keeps `None` instead, but callers that deal in raw u32 fields can use this.
UNSET = 0xFFFFFFFF


class GameObjectReader(Protocol):
    def read_object(self, length: int) -> bytes: ...


@dataclass(frozen=True)
class Update:
    time: timedelta
    event: MilestoneEvent | None = None


class StateTracker:
    """Holds the previous and current snapshot and emits one Update per poll."""

    def __init__(self, revision: RevisionDescriptor, splits: SplitTable = DEFAULT_SPLITS) -> None:
        self._revision = revision
        overrides = revision.suppression_rules()
        self._splits = splits if overrides is None else splits.with_suppressions(overrides)
        self._previous: Snapshot | None = None
        self._current: Snapshot | None = None

    @property
    def revision(self) -> RevisionDescriptor:
        return self._revision

    @property
    def previous(self) -> Snapshot | None:
        return self._previous

    @property
    def current(self) -> Snapshot | None:
        return self._current

    def update(self, process: GameObjectReader) -> Update:
        """Read and decode a fresh snapshot, then advance the state machine.

        Read and decode errors propagate before any tracker state changes.
        """
        data = process.read_object(self._revision.struct_size)
        return self.observe(decode(self._revision, data))

    def observe(self, snapshot: Snapshot) -> Update:
        if self._current is None:
            self._previous = self._current = snapshot
        else:
            self._previous, self._current = self._current, snapshot
        previous, current = self._previous, self._current
        assert previous is not None

        self._log_changes(previous, current)
        time = current.elapsed

        was_active = self._revision.is_active(previous.gamestate)
        is_active = self._revision.is_active(current.gamestate)
        if is_active and not was_active:
            return Update(time=timedelta(0), event=MilestoneEvent.NEW_GAME)
        if was_active and not is_active:
            return Update(time=time, event=MilestoneEvent.RESET)

        return Update(time=time, event=self._splits.evaluate(previous, current))

    @staticmethod
    def _log_changes(previous: Snapshot, current: Snapshot) -> None:
        if previous.room != current.room:
            logger.debug("room_changed", old=previous.room, new=current.room, time=str(current.elapsed))
        if previous.gamestate != current.gamestate:
            logger.debug(
                "gamestate_changed", old=previous.gamestate, new=current.gamestate, time=str(current.elapsed)
            )
        if previous.state != current.state:
            logger.debug("state_changed", old=previous.state, new=current.state, time=str(current.elapsed))
