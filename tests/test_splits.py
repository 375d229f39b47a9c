"""Tests for the split rule table."""

from __future__ import annotations

from datetime import timedelta

import pytest
from structlog.testing import capture_logs

from vitellary.game.snapshot import Snapshot
from vitellary.game.splits import DEFAULT_SPLITS, MilestoneEvent, SplitRule, SplitTable, SuppressionRule


def snap(state: int, room: tuple[int, int] = (0, 0)) -> Snapshot:
    return Snapshot(room=room, state=state, gamestate=0, elapsed=timedelta(0))


@pytest.mark.parametrize(
    ("event", "command"),
    [
        (MilestoneEvent.NEW_GAME, "start"),
        (MilestoneEvent.RESET, "reset"),
        (MilestoneEvent.VERDIGRIS, "split"),
        (MilestoneEvent.INTERMISSION_TWO, "split"),
        (MilestoneEvent.GAME_COMPLETE, "split"),
    ],
)
def test_event_commands(event: MilestoneEvent, command: str) -> None:
    assert event.command == command


def test_every_named_milestone_splits() -> None:
    splits = [e for e in MilestoneEvent if e.command == "split"]
    assert len(splits) == 8
    assert {rule.event for rule in DEFAULT_SPLITS.rules} == set(splits)


def test_rule_is_inclusive() -> None:
    rule = SplitRule(MilestoneEvent.VIOLET, 4091, 4099)
    assert rule.contains(4091)
    assert rule.contains(4099)
    assert not rule.contains(4090)
    assert not rule.contains(4100)


def test_entering_range_fires() -> None:
    assert DEFAULT_SPLITS.evaluate(snap(0), snap(3060)) is MilestoneEvent.VERMILION
    assert DEFAULT_SPLITS.evaluate(snap(3502), snap(3503)) is MilestoneEvent.GAME_COMPLETE


def test_staying_in_range_does_not_fire() -> None:
    assert DEFAULT_SPLITS.evaluate(snap(3060), snap(3061)) is None


def test_moving_between_ranges_fires_new_one() -> None:
    assert DEFAULT_SPLITS.evaluate(snap(3082), snap(3085)) is MilestoneEvent.INTERMISSION_ONE


def test_no_match() -> None:
    assert DEFAULT_SPLITS.evaluate(snap(0), snap(1000)) is None


def test_first_matching_rule_wins() -> None:
    table = SplitTable(
        rules=(
            SplitRule(MilestoneEvent.VICTORIA, 10, 20),
            SplitRule(MilestoneEvent.VIOLET, 15, 25),
        )
    )
    assert table.evaluate(snap(0), snap(16)) is MilestoneEvent.VICTORIA


def test_suppression_outside_whitelisted_rooms() -> None:
    assert DEFAULT_SPLITS.evaluate(snap(0), snap(3006, room=(114, 100))) is None


def test_suppressed_state_is_logged_by_evaluate() -> None:
    with capture_logs() as logs:
        DEFAULT_SPLITS.evaluate(snap(0), snap(3006, room=(114, 100)))

    assert [entry["event"] for entry in logs] == ["state_ignored"]
    assert logs[0]["logger"] == "vitellary.game.splits"
    assert logs[0]["room"] == (114, 100)


@pytest.mark.parametrize("room", [(115, 100), (113, 102)])
def test_suppression_allows_whitelisted_rooms(room: tuple[int, int]) -> None:
    assert DEFAULT_SPLITS.evaluate(snap(0), snap(3006, room=room)) is MilestoneEvent.VERDIGRIS


def test_suppression_only_applies_to_guarded_state() -> None:
    assert DEFAULT_SPLITS.evaluate(snap(0), snap(3007, room=(1, 1))) is MilestoneEvent.VERDIGRIS


def test_with_suppressions_replaces_rules() -> None:
    table = DEFAULT_SPLITS.with_suppressions([SuppressionRule(state=3060, rooms=frozenset())])
    assert table.evaluate(snap(0), snap(3060)) is None
    assert table.evaluate(snap(0), snap(3006, room=(9, 9))) is MilestoneEvent.VERDIGRIS
