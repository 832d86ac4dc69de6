# -*- coding: utf-8 -*-
########################
# kinematics.py
########################
# Purpose:
# - Per-tick movement for falling markers and sustain tails.
#
# Design notes:
# - Pure functions returning new frozen values. No bound checks here; judge.py owns exits.
# - A tail starts shrinking once its leading edge (y + length) reaches the judgement line.
#   Length shrinks by one step per tick and lengths at or below SNAP_LENGTH become exactly 0.
#
########################
# Interfaces:
# Public functions:
# - advance_short(entity: ShortEntity, constants: GameplayConstants) -> ShortEntity
# - advance_sustain(tail: SustainEntity, constants: GameplayConstants) -> SustainEntity
#
########################

from __future__ import annotations

from dataclasses import replace

import gameplay_models

SNAP_LENGTH = 1.0


def advance_short(
    entity: gameplay_models.ShortEntity,
    constants: gameplay_models.GameplayConstants,
) -> gameplay_models.ShortEntity:
    return replace(entity, y_position=entity.y_position + float(constants.step_size))


def advance_sustain(
    tail: gameplay_models.SustainEntity,
    constants: gameplay_models.GameplayConstants,
) -> gameplay_models.SustainEntity:
    step = float(constants.step_size)
    next_y = tail.y_position + step

    if tail.y_position >= float(constants.judgement_line) - tail.length:
        new_length = max(tail.length - step, 0.0)
        if new_length <= SNAP_LENGTH:
            new_length = 0.0
        return replace(tail, y_position=next_y, length=new_length, played=True)

    return replace(tail, y_position=next_y)


def _run_unit_tests() -> None:
    constants = gameplay_models.DEFAULT_CONSTANTS
    note = gameplay_models.build_note_spec(
        is_player_note=False,
        instrument="piano",
        velocity=80,
        pitch=64,
        start_time_seconds=0.0,
        end_time_seconds=1.5,
    )
    entity_id = gameplay_models.EntityId(id="0", spawn_tick=0)

    marker = gameplay_models.ShortEntity(
        entity_id=entity_id, lane=0, color=note.color, note=note, x_percent=20.0, y_position=10.0, radius=14.0
    )
    assert advance_short(marker, constants).y_position == 12.0

    far_tail = gameplay_models.SustainEntity(
        entity_id=entity_id, lane=0, color=note.color, note=note, x_percent=16.25, y_position=0.0, length=30.0, width=15.0
    )
    moved = advance_sustain(far_tail, constants)
    assert moved.length == 30.0 and moved.played is False

    near_tail = replace(far_tail, y_position=320.0)
    shrunk = advance_sustain(near_tail, constants)
    assert shrunk.length == 28.0 and shrunk.played is True and shrunk.y_position == 322.0

    sliver = replace(far_tail, y_position=347.0, length=3.0)
    assert advance_sustain(sliver, constants).length == 0.0


if __name__ == "__main__":
    _run_unit_tests()
    print("kinematics.py: ok")
