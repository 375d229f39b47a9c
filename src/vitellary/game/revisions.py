# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Per-revision layout of VVVVVV's ``Game`` object.

The layout of ``Game`` changes between builds, so every supported revision
carries the byte offsets of the fields we read and the total object size.
The table is produced offline by mining the VVVVVV history. Only mined
layouts may be shipped in ``revisions.json``, which is empty until one is
checked in; operators load the mining output with ``--revisions-file`` or
``VITELLARY_REVISIONS_FILE``. A revision missing from the table is refused,
never guessed.
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from importlib import resources
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from vitellary.errors import InvalidRevisionError, UnknownRevisionError
from vitellary.game.splits import SuppressionRule

U32_SIZE = 4
TIMER_SIZE = 4 * U32_SIZE

BUNDLED_TABLE = "revisions.json"


class FieldOffsets(BaseModel):
    """Byte offsets of the fields we decode, relative to the start of ``Game``."""

    model_config = ConfigDict(frozen=True)

    room_x: int = Field(ge=0)
    room_y: int = Field(ge=0)
    state: int = Field(ge=0)
    gamestate: int = Field(ge=0)
    timer: int = Field(ge=0)

    def spans(self) -> dict[str, tuple[int, int]]:
        return {
            "room_x": (self.room_x, U32_SIZE),
            "room_y": (self.room_y, U32_SIZE),
            "state": (self.state, U32_SIZE),
            "gamestate": (self.gamestate, U32_SIZE),
            "timer": (self.timer, TIMER_SIZE),
        }


class SuppressionConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    state: int
    rooms: tuple[tuple[int, int], ...]

    def to_rule(self) -> SuppressionRule:
        return SuppressionRule(state=self.state, rooms=frozenset(self.rooms))


class RevisionDescriptor(BaseModel):
    """Everything needed to decode ``Game`` for one build."""

    model_config = ConfigDict(frozen=True)

    struct_size: int = Field(gt=0)
    offsets: FieldOffsets
    active_states: frozenset[int]
    # None means "use the split table's own suppression rules".
    suppressions: tuple[SuppressionConfig, ...] | None = None

    @model_validator(mode="after")
    def _check_bounds(self) -> RevisionDescriptor:
        for name, (offset, width) in self.offsets.spans().items():
            if offset + width > self.struct_size:
                raise ValueError(
                    f"{name} at offset {offset} (+{width}) exceeds struct size {self.struct_size}"
                )
        return self

    def is_active(self, gamestate: int) -> bool:
        """Whether ``gamestate`` means a timed run is in progress."""
        return gamestate in self.active_states

    def suppression_rules(self) -> tuple[SuppressionRule, ...] | None:
        if self.suppressions is None:
            return None
        return tuple(s.to_rule() for s in self.suppressions)


class RevisionTable(Mapping[str, RevisionDescriptor]):
    """Immutable mapping of revision identifier to descriptor.

    Identifiers are release tags (``2.3.6``), ``master``, or full commit ids.
    Build it once at startup and hand it to whoever needs it.
    """

    def __init__(self, entries: Mapping[str, RevisionDescriptor]) -> None:
        self._entries = dict(entries)

    def __getitem__(self, name: str) -> RevisionDescriptor:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def resolve(self, name: str) -> RevisionDescriptor | None:
        return self._entries.get(name)

    def require(self, name: str) -> RevisionDescriptor:
        descriptor = self.resolve(name)
        if descriptor is None:
            raise UnknownRevisionError(name)
        return descriptor

    def names(self) -> list[str]:
        return sorted(self._entries)

    def merged(self, other: RevisionTable) -> RevisionTable:
        """Return a new table where ``other`` wins on conflicting names."""
        return RevisionTable({**self._entries, **other._entries})

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> RevisionTable:
        """Build a table from the mining tool's JSON document.

        The document holds a ``layouts`` list; each layout names every
        revision identifier that shares it.
        """
        entries: dict[str, RevisionDescriptor] = {}
        for index, layout in enumerate(data.get("layouts", [])):
            names = layout.get("names") or []
            if not names:
                raise InvalidRevisionError(f"layout #{index} has no names")
            fields = {k: v for k, v in layout.items() if k != "names"}
            try:
                descriptor = RevisionDescriptor.model_validate(fields)
            except ValidationError as exc:
                raise InvalidRevisionError(f"layout #{index} ({names[0]}): {exc}") from exc
            for name in names:
                if name in entries:
                    raise InvalidRevisionError(f"revision {name!r} listed twice")
                entries[name] = descriptor
        return cls(entries)

    @classmethod
    def from_file(cls, path: Path) -> RevisionTable:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise InvalidRevisionError(f"cannot load revision table {path}: {exc}") from exc
        return cls.from_data(data)

    @classmethod
    def bundled(cls) -> RevisionTable:
        """The revision table shipped with the package."""
        text = resources.files("vitellary.game").joinpath(BUNDLED_TABLE).read_text(encoding="utf-8")
        return cls.from_data(json.loads(text))


def load_revisions(extra: Path | None = None) -> RevisionTable:
    """Bundled table, optionally overlaid with an operator-supplied file."""
    table = RevisionTable.bundled()
    if extra is not None:
        table = table.merged(RevisionTable.from_file(extra))
    return table
