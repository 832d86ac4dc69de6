# -*- coding: utf-8 -*-
########################
# entity_factory.py
########################
# Purpose:
# - Build spawn-time entities for a note: the falling marker and, for long notes, its sustain tail.
#
# Design notes:
# - Pure functions. The caller issues the EntityId; this module never counts.
# - Horizontal placement is a percentage of viewport width so renderers can scale freely.
# - The tail is placed above the marker so its leading edge starts at the marker spawn height.
#
########################
# Interfaces:
# Public functions:
# - is_long_note(note: NoteSpec, constants: GameplayConstants) -> bool
# - lane_x_percent(lane: int) -> float
# - spawn_short(note: NoteSpec, entity_id: EntityId, constants: GameplayConstants) -> ShortEntity
# - spawn_sustain(note: NoteSpec, entity_id: EntityId, constants: GameplayConstants) -> SustainEntity
#
########################

from __future__ import annotations

import gameplay_models

LANE_SPACING_PERCENT = 20.0


def is_long_note(note: gameplay_models.NoteSpec, constants: gameplay_models.GameplayConstants) -> bool:
    return note.duration_seconds > float(constants.long_note_threshold_seconds)


def lane_x_percent(lane: int) -> float:
    return (int(lane) + 1) * LANE_SPACING_PERCENT


def sustain_length(note: gameplay_models.NoteSpec, constants: gameplay_models.GameplayConstants) -> float:
    return note.duration_seconds * float(constants.step_size) * float(constants.interval_duration)


def spawn_short(
    note: gameplay_models.NoteSpec,
    entity_id: gameplay_models.EntityId,
    constants: gameplay_models.GameplayConstants,
) -> gameplay_models.ShortEntity:
    return gameplay_models.ShortEntity(
        entity_id=entity_id,
        lane=int(note.lane),
        color=note.color,
        note=note,
        x_percent=lane_x_percent(note.lane),
        y_position=0.0,
        radius=float(constants.note_radius),
    )


def spawn_sustain(
    note: gameplay_models.NoteSpec,
    entity_id: gameplay_models.EntityId,
    constants: gameplay_models.GameplayConstants,
) -> gameplay_models.SustainEntity:
    length = sustain_length(note, constants)
    width = float(constants.sustain_width)
    return gameplay_models.SustainEntity(
        entity_id=entity_id,
        lane=int(note.lane),
        color=note.color,
        note=note,
        x_percent=lane_x_percent(note.lane) - width / 4.0,
        y_position=-length,
        length=length,
        width=width,
        played=False,
    )


def _run_unit_tests() -> None:
    constants = gameplay_models.DEFAULT_CONSTANTS
    note = gameplay_models.build_note_spec(
        is_player_note=True,
        instrument="violin",
        velocity=100,
        pitch=61,
        start_time_seconds=3.0,
        end_time_seconds=4.5,
    )
    assert is_long_note(note, constants)

    marker = spawn_short(note, gameplay_models.EntityId(id="0", spawn_tick=300), constants)
    assert marker.x_percent == 40.0
    assert marker.y_position == 0.0
    assert marker.radius == constants.note_radius

    tail = spawn_sustain(note, gameplay_models.EntityId(id="1", spawn_tick=300), constants)
    assert abs(tail.length - 30.0) < 1e-9
    assert abs(tail.y_position + tail.length) < 1e-9
    assert abs(tail.x_percent - (40.0 - 15.0 / 4.0)) < 1e-9
    assert tail.played is False


if __name__ == "__main__":
    _run_unit_tests()
    print("entity_factory.py: ok")
