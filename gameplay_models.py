# -*- coding: utf-8 -*-
########################
# gameplay_models.py
########################
# Purpose:
# - Core gameplay data models for the simulation core.
# - Defines the note schedule record, the two falling entity kinds, the gameplay constants,
#   and the single GameState value threaded through game_reducer.reduce.
#
# Design notes:
# - All models are frozen dataclasses. A transition builds new values with dataclasses.replace.
# - Sequences are tuples so a GameState can be compared and hashed by value.
# - Lane, color and input key are derived from pitch mod 4 through LANE_TABLE. Nothing else
#   is allowed to duplicate that mapping.
#
########################
# Interfaces:
# Public enums:
# - class NoteColor(enum.Enum): GREEN | RED | BLUE | YELLOW
# - class KeyId(enum.Enum): KEY_H | KEY_J | KEY_K | KEY_L
#   - from_text(text: str) -> KeyId
#
# Public exceptions:
# - class ScheduleError(ValueError)
#
# Public functions:
# - lane_for_pitch(pitch: int) -> tuple[int, NoteColor, KeyId]
# - build_note_spec(*, is_player_note, instrument, velocity, pitch, start_time_seconds, end_time_seconds) -> NoteSpec
#
# Public dataclasses:
# - GameplayConstants(judgement_line, step_size, interval_duration, tolerance, sustain_width,
#                     note_radius, long_note_threshold_seconds)
# - NoteSpec(is_player_note, instrument, velocity, pitch, start_time_seconds, end_time_seconds,
#            lane, color, input_key)
# - EntityId(id: str, spawn_tick: int)
# - ShortEntity(entity_id, lane, color, note, x_percent, y_position, radius)
# - SustainEntity(entity_id, lane, color, note, x_percent, y_position, length, width, played)
# - GameState(...)
#
# Inputs/Outputs:
# - These types are exchanged between entity_factory, kinematics, judge, score_ledger,
#   game_reducer, note_scheduler and gameplay_session.
#
########################

from __future__ import annotations

from dataclasses import dataclass
import enum
from typing import Tuple


class NoteColor(enum.Enum):
    GREEN = "green"
    RED = "red"
    BLUE = "blue"
    YELLOW = "yellow"


class KeyId(enum.Enum):
    KEY_H = "KeyH"
    KEY_J = "KeyJ"
    KEY_K = "KeyK"
    KEY_L = "KeyL"

    @classmethod
    def from_text(cls, text: str) -> "KeyId":
        """Accept a key code ("KeyH") or a bare letter ("h")."""
        normalized = str(text or "").strip()
        for key_id in cls:
            if normalized == key_id.value:
                return key_id
        if len(normalized) == 1:
            code = "Key" + normalized.upper()
            for key_id in cls:
                if code == key_id.value:
                    return key_id
        raise ValueError(f"Unknown gameplay key: {text!r}")


class ScheduleError(ValueError):
    """Raised when a note cannot be placed on one of the four lanes."""


# Index is pitch mod 4.
LANE_TABLE: Tuple[Tuple[NoteColor, KeyId], ...] = (
    (NoteColor.GREEN, KeyId.KEY_H),
    (NoteColor.RED, KeyId.KEY_J),
    (NoteColor.BLUE, KeyId.KEY_K),
    (NoteColor.YELLOW, KeyId.KEY_L),
)

LANE_COUNT = len(LANE_TABLE)


def lane_for_pitch(pitch: int) -> Tuple[int, NoteColor, KeyId]:
    pitch_value = int(pitch)
    if pitch_value < 0:
        raise ScheduleError(f"Invalid pitch: {pitch_value}")
    lane = pitch_value % LANE_COUNT
    color, key_id = LANE_TABLE[lane]
    return lane, color, key_id


@dataclass(frozen=True)
class GameplayConstants:
    judgement_line: float = 350.0
    step_size: float = 2.0
    interval_duration: float = 10.0
    tolerance: float = 20.0
    sustain_width: float = 15.0
    note_radius: float = 14.0
    long_note_threshold_seconds: float = 1.0


DEFAULT_CONSTANTS = GameplayConstants()


@dataclass(frozen=True)
class NoteSpec:
    is_player_note: bool
    instrument: str
    velocity: int
    pitch: int
    start_time_seconds: float
    end_time_seconds: float
    lane: int
    color: NoteColor
    input_key: KeyId

    @property
    def duration_seconds(self) -> float:
        return float(self.end_time_seconds) - float(self.start_time_seconds)


def build_note_spec(
    *,
    is_player_note: bool,
    instrument: str,
    velocity: int,
    pitch: int,
    start_time_seconds: float,
    end_time_seconds: float,
) -> NoteSpec:
    lane, color, input_key = lane_for_pitch(pitch)
    return NoteSpec(
        is_player_note=bool(is_player_note),
        instrument=str(instrument),
        velocity=int(velocity),
        pitch=int(pitch),
        start_time_seconds=float(start_time_seconds),
        end_time_seconds=float(end_time_seconds),
        lane=lane,
        color=color,
        input_key=input_key,
    )


@dataclass(frozen=True)
class EntityId:
    id: str
    spawn_tick: int


@dataclass(frozen=True)
class ShortEntity:
    entity_id: EntityId
    lane: int
    color: NoteColor
    note: NoteSpec
    x_percent: float
    y_position: float
    radius: float


@dataclass(frozen=True)
class SustainEntity:
    entity_id: EntityId
    lane: int
    color: NoteColor
    note: NoteSpec
    x_percent: float
    y_position: float
    length: float
    width: float
    played: bool = False


@dataclass(frozen=True)
class GameState:
    schedule: Tuple[NoteSpec, ...]
    constants: GameplayConstants = DEFAULT_CONSTANTS
    elapsed_ticks: int = 0
    short_entities: Tuple[ShortEntity, ...] = ()
    sustain_entities: Tuple[SustainEntity, ...] = ()
    # Transient: this reduction's exits only.
    resolved_short: Tuple[ShortEntity, ...] = ()
    missed_short: Tuple[ShortEntity, ...] = ()
    resolved_sustain: Tuple[SustainEntity, ...] = ()
    next_object_seq: int = 0
    notes_resolved: int = 0
    hit_count: int = 0
    miss_count: int = 0
    streak_count: int = 0
    multiplier: float = 1.0
    score: int = 0
    high_score: int = 0
    ended: bool = False

    @property
    def total_notes(self) -> int:
        return len(self.schedule)


def _run_unit_tests() -> None:
    assert lane_for_pitch(60) == (0, NoteColor.GREEN, KeyId.KEY_H)
    assert lane_for_pitch(63) == (3, NoteColor.YELLOW, KeyId.KEY_L)
    try:
        lane_for_pitch(-1)
    except ScheduleError:
        pass
    else:
        raise AssertionError("negative pitch must be rejected")

    assert KeyId.from_text("KeyJ") is KeyId.KEY_J
    assert KeyId.from_text("k") is KeyId.KEY_K

    note = build_note_spec(
        is_player_note=True,
        instrument="piano",
        velocity=90,
        pitch=62,
        start_time_seconds=1.0,
        end_time_seconds=2.5,
    )
    assert note.lane == 2
    assert note.input_key is KeyId.KEY_K
    assert abs(note.duration_seconds - 1.5) < 1e-9

    state = GameState(schedule=(note,))
    assert state.total_notes == 1
    assert state.multiplier == 1.0


if __name__ == "__main__":
    _run_unit_tests()
    print("gameplay_models.py: ok")
