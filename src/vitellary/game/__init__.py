# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Decoding VVVVVV's game state and turning it into timing events."""

from __future__ import annotations

from vitellary.game.revisions import RevisionDescriptor, RevisionTable, load_revisions
from vitellary.game.snapshot import Snapshot, Timer, decode
from vitellary.game.splits import DEFAULT_SPLITS, MilestoneEvent, SplitRule, SplitTable, SuppressionRule
from vitellary.game.tracker import StateTracker, Update

__all__ = [
    "DEFAULT_SPLITS",
    "MilestoneEvent",
    "RevisionDescriptor",
    "RevisionTable",
    "Snapshot",
    "SplitRule",
    "SplitTable",
    "StateTracker",
    "SuppressionRule",
    "Timer",
    "Update",
    "decode",
    "load_revisions",
]
