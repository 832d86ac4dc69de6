# -*- coding: utf-8 -*-
########################
# note_scheduler.py
########################
# Purpose:
# - Turn the note schedule into spawn actions at the right song time.
# - Replaces one delayed timer per note with a single sorted queue and an advancing cursor.
#
# Design notes:
# - Queue order is deterministic: sort by (start_time_seconds, schedule index).
# - due_actions(song_time_seconds) returns every spawn whose start time has been reached since
#   the last call, then moves the cursor past them. Each note is released exactly once per run.
# - reset() rewinds the cursor. Nothing scheduled before a reset can leak into the next run.
# - A long note yields SpawnShort followed by SpawnSustain for the same note.
#
########################
# Interfaces:
# Public dataclasses:
# - ScheduledSpawn(start_time_seconds: float, schedule_index: int, note: NoteSpec)
#
# Public classes:
# - class NoteScheduler
#   - __init__(schedule: Sequence[NoteSpec], constants: GameplayConstants)
#   - schedule() -> tuple[NoteSpec, ...]
#   - pending_count() -> int
#   - is_exhausted() -> bool
#   - next_start_time_seconds() -> Optional[float]
#   - reset() -> None
#   - due_notes(song_time_seconds: float) -> list[NoteSpec]
#   - due_actions(song_time_seconds: float) -> list[SpawnShort | SpawnSustain]
#
# Inputs:
# - The loaded schedule and song time from TimingModel.
#
# Outputs:
# - Spawn actions for game_reducer.reduce, in arrival order.
#
########################

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import List, Optional, Sequence, Tuple, Union

import entity_factory
import game_reducer
import gameplay_models

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduledSpawn:
    start_time_seconds: float
    schedule_index: int
    note: gameplay_models.NoteSpec


class NoteScheduler:
    def __init__(
        self,
        schedule: Sequence[gameplay_models.NoteSpec],
        constants: gameplay_models.GameplayConstants = gameplay_models.DEFAULT_CONSTANTS,
    ) -> None:
        self._schedule: Tuple[gameplay_models.NoteSpec, ...] = tuple(schedule)
        self._constants = constants
        self._queue: List[ScheduledSpawn] = sorted(
            (
                ScheduledSpawn(
                    start_time_seconds=float(note.start_time_seconds),
                    schedule_index=index,
                    note=note,
                )
                for index, note in enumerate(self._schedule)
            ),
            key=lambda item: (item.start_time_seconds, item.schedule_index),
        )
        self._cursor = 0

    def schedule(self) -> Tuple[gameplay_models.NoteSpec, ...]:
        return self._schedule

    def pending_count(self) -> int:
        return len(self._queue) - self._cursor

    def is_exhausted(self) -> bool:
        return self._cursor >= len(self._queue)

    def next_start_time_seconds(self) -> Optional[float]:
        if self.is_exhausted():
            return None
        return self._queue[self._cursor].start_time_seconds

    def reset(self) -> None:
        if self._cursor:
            logger.debug("spawn cursor rewound from %d", self._cursor)
        self._cursor = 0

    def due_notes(self, song_time_seconds: float) -> List[gameplay_models.NoteSpec]:
        song_time = float(song_time_seconds)
        due: List[gameplay_models.NoteSpec] = []
        while self._cursor < len(self._queue):
            scheduled = self._queue[self._cursor]
            if scheduled.start_time_seconds > song_time:
                break
            due.append(scheduled.note)
            self._cursor += 1
        return due

    def due_actions(
        self, song_time_seconds: float
    ) -> List[Union[game_reducer.SpawnShort, game_reducer.SpawnSustain]]:
        actions: List[Union[game_reducer.SpawnShort, game_reducer.SpawnSustain]] = []
        for note in self.due_notes(song_time_seconds):
            actions.append(game_reducer.SpawnShort(note))
            if entity_factory.is_long_note(note, self._constants):
                actions.append(game_reducer.SpawnSustain(note))
        return actions


def _run_unit_tests() -> None:
    def note(pitch: int, start: float, end: float) -> gameplay_models.NoteSpec:
        return gameplay_models.build_note_spec(
            is_player_note=True,
            instrument="piano",
            velocity=100,
            pitch=pitch,
            start_time_seconds=start,
            end_time_seconds=end,
        )

    schedule = [note(61, 1.0, 1.2), note(60, 0.5, 2.0), note(62, 1.0, 1.1)]
    scheduler = NoteScheduler(schedule)
    assert scheduler.next_start_time_seconds() == 0.5

    first = scheduler.due_actions(0.5)
    assert [type(action).__name__ for action in first] == ["SpawnShort", "SpawnSustain"]

    assert scheduler.due_actions(0.9) == []
    assert [n.pitch for n in scheduler.due_notes(1.0)] == [61, 62]
    assert scheduler.is_exhausted()

    scheduler.reset()
    assert scheduler.pending_count() == 3


if __name__ == "__main__":
    _run_unit_tests()
    print("note_scheduler.py: ok")
