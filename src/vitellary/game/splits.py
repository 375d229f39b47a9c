# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Milestone events and the split rules that detect them.

VVVVVV drives its cutscenes and story beats through ``Game::state``, a
script-like counter that walks through a known band of values whenever a
crew member is rescued or the game ends. A split fires when ``state`` enters
one of those bands. The bands are a little wider than the exact ticks so
small drift between game versions does not break them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from vitellary.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable

    from vitellary.game.snapshot import Snapshot

logger = get_logger(__name__)


class MilestoneEvent(str, Enum):
    NEW_GAME = "new_game"
    VERDIGRIS = "verdigris"
    VERMILION = "vermilion"
    VICTORIA = "victoria"
    VIOLET = "violet"
    VITELLARY = "vitellary"
    INTERMISSION_ONE = "intermission_one"
    INTERMISSION_TWO = "intermission_two"
    GAME_COMPLETE = "game_complete"
    RESET = "reset"

    @property
    def command(self) -> str:
        """LiveSplit One server command for this event."""
        if self is MilestoneEvent.NEW_GAME:
            return "start"
        if self is MilestoneEvent.RESET:
            return "reset"
        return "split"


@dataclass(frozen=True)
class SplitRule:
    """Fires ``event`` when ``state`` enters ``low..=high``."""

    event: MilestoneEvent
    low: int
    high: int

    def contains(self, state: int) -> bool:
        return self.low <= state <= self.high

    def crossed(self, previous: int, current: int) -> bool:
        return self.contains(current) and not self.contains(previous)


@dataclass(frozen=True)
class SuppressionRule:
    """Skip milestone evaluation for ``state`` unless the player is in one of ``rooms``."""

    state: int
    rooms: frozenset[tuple[int, int]]

    def suppresses(self, snapshot: Snapshot) -> bool:
        return snapshot.state == self.state and snapshot.room not in self.rooms


# `state` is set to 3006 one cycle before the switch case that jumps to the
# right cutscene, so Verdigris could fire a poll early. Only accept it in
# "Murdering Twinmaker" (115, 100) or the telejump room (113, 102).
VERDIGRIS_EARLY_STATE = SuppressionRule(state=3006, rooms=frozenset({(115, 100), (113, 102)}))


@dataclass(frozen=True)
class SplitTable:
    rules: tuple[SplitRule, ...]
    suppressions: tuple[SuppressionRule, ...] = ()

    def with_suppressions(self, suppressions: Iterable[SuppressionRule]) -> SplitTable:
        return SplitTable(rules=self.rules, suppressions=tuple(suppressions))

    def suppressed(self, current: Snapshot) -> bool:
        return any(rule.suppresses(current) for rule in self.suppressions)

    def evaluate(self, previous: Snapshot, current: Snapshot) -> MilestoneEvent | None:
        """Return the first rule whose range ``current.state`` just entered.

        Suppressed snapshots never produce an event.
        """
        if self.suppressed(current):
            logger.debug("state_ignored", state=current.state, room=current.room)
            return None
        for rule in self.rules:
            if rule.crossed(previous.state, current.state):
                return rule.event
        return None


DEFAULT_SPLITS = SplitTable(
    rules=(
        SplitRule(MilestoneEvent.VERDIGRIS, 3006, 3011),
        SplitRule(MilestoneEvent.VERMILION, 3060, 3065),
        SplitRule(MilestoneEvent.VICTORIA, 3040, 3045),
        SplitRule(MilestoneEvent.VIOLET, 4091, 4099),
        SplitRule(MilestoneEvent.VITELLARY, 3020, 3025),
        SplitRule(MilestoneEvent.INTERMISSION_ONE, 3085, 3087),
        SplitRule(MilestoneEvent.INTERMISSION_TWO, 3080, 3082),
        SplitRule(MilestoneEvent.GAME_COMPLETE, 3503, 3509),
    ),
    suppressions=(VERDIGRIS_EARLY_STATE,),
)
