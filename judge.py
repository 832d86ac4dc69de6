# -*- coding: utf-8 -*-
########################
# judge.py
########################
# Purpose:
# - Collision and expiry judgement for the tick path.
# - Key press judgement for the input path.
#
# Design notes:
# - Pure gameplay logic. Consumes entity tuples and returns partitions; never touches score.
# - Tick order is fixed:
#   1) expiry on the pre-tick position (y >= judgement line)
#   2) kinematics on what is still active
#   3) collision on the moved position (y > judgement line for markers,
#      y >= judgement line + length for tails)
#   An entity that expires is removed before it can move, so it cannot also collide.
# - A marker exit whose note is still marked as a player note was never hit: it is a miss.
# - A key press resolves every hittable marker for that key at once (chords in one lane window).
#
########################
# Interfaces:
# Public dataclasses:
# - TickJudgement(live_short, resolved_short, missed_short, live_sustain, resolved_sustain)
#   - short_exit_count -> int
# - InputJudgement(live_short, hits)
#
# Public functions:
# - is_expired(y_position: float, constants: GameplayConstants) -> bool
# - is_hittable(entity: ShortEntity, key_id: KeyId, constants: GameplayConstants) -> bool
# - judge_tick(short_entities, sustain_entities, constants) -> TickJudgement
# - judge_key_press(short_entities, key_id, constants) -> InputJudgement
#
# Inputs:
# - Live entities from GameState and the gameplay constants.
#
# Outputs:
# - Partitions consumed by game_reducer to rebuild GameState.
#
########################

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Sequence, Tuple

import gameplay_models
import kinematics


@dataclass(frozen=True)
class TickJudgement:
    live_short: Tuple[gameplay_models.ShortEntity, ...]
    resolved_short: Tuple[gameplay_models.ShortEntity, ...]
    missed_short: Tuple[gameplay_models.ShortEntity, ...]
    live_sustain: Tuple[gameplay_models.SustainEntity, ...]
    resolved_sustain: Tuple[gameplay_models.SustainEntity, ...]

    @property
    def short_exit_count(self) -> int:
        return len(self.resolved_short) + len(self.missed_short)


@dataclass(frozen=True)
class InputJudgement:
    live_short: Tuple[gameplay_models.ShortEntity, ...]
    hits: Tuple[gameplay_models.ShortEntity, ...]


def is_expired(y_position: float, constants: gameplay_models.GameplayConstants) -> bool:
    return float(y_position) >= float(constants.judgement_line)


def _short_collided(entity: gameplay_models.ShortEntity, constants: gameplay_models.GameplayConstants) -> bool:
    return entity.y_position > float(constants.judgement_line)


def _sustain_collided(tail: gameplay_models.SustainEntity, constants: gameplay_models.GameplayConstants) -> bool:
    return tail.y_position >= float(constants.judgement_line) + tail.length


def is_hittable(
    entity: gameplay_models.ShortEntity,
    key_id: gameplay_models.KeyId,
    constants: gameplay_models.GameplayConstants,
) -> bool:
    if not entity.note.is_player_note:
        return False
    if entity.note.input_key is not key_id:
        return False
    return abs(entity.y_position - float(constants.judgement_line)) <= float(constants.tolerance)


def judge_tick(
    short_entities: Sequence[gameplay_models.ShortEntity],
    sustain_entities: Sequence[gameplay_models.SustainEntity],
    constants: gameplay_models.GameplayConstants,
) -> TickJudgement:
    short_exits: List[gameplay_models.ShortEntity] = []
    live_short: List[gameplay_models.ShortEntity] = []

    for entity in short_entities:
        if is_expired(entity.y_position, constants):
            short_exits.append(entity)
            continue
        moved = kinematics.advance_short(entity, constants)
        if _short_collided(moved, constants):
            short_exits.append(moved)
        else:
            live_short.append(moved)

    resolved_sustain: List[gameplay_models.SustainEntity] = []
    live_sustain: List[gameplay_models.SustainEntity] = []

    for tail in sustain_entities:
        if is_expired(tail.y_position, constants):
            resolved_sustain.append(tail)
            continue
        moved_tail = kinematics.advance_sustain(tail, constants)
        if _sustain_collided(moved_tail, constants):
            resolved_sustain.append(moved_tail)
        else:
            live_sustain.append(moved_tail)

    missed_short = tuple(entity for entity in short_exits if entity.note.is_player_note)
    resolved_short = tuple(entity for entity in short_exits if not entity.note.is_player_note)

    return TickJudgement(
        live_short=tuple(live_short),
        resolved_short=resolved_short,
        missed_short=missed_short,
        live_sustain=tuple(live_sustain),
        resolved_sustain=tuple(resolved_sustain),
    )


def judge_key_press(
    short_entities: Sequence[gameplay_models.ShortEntity],
    key_id: gameplay_models.KeyId,
    constants: gameplay_models.GameplayConstants,
) -> InputJudgement:
    hits: List[gameplay_models.ShortEntity] = []
    live_short: List[gameplay_models.ShortEntity] = []

    for entity in short_entities:
        if is_hittable(entity, key_id, constants):
            # Cleared flag marks the note as scored for downstream consumers.
            hits.append(replace(entity, note=replace(entity.note, is_player_note=False)))
        else:
            live_short.append(entity)

    return InputJudgement(live_short=tuple(live_short), hits=tuple(hits))


def _run_unit_tests() -> None:
    constants = gameplay_models.DEFAULT_CONSTANTS

    def marker(entity_id: str, pitch: int, y_position: float, is_player_note: bool = True):
        note = gameplay_models.build_note_spec(
            is_player_note=is_player_note,
            instrument="piano",
            velocity=100,
            pitch=pitch,
            start_time_seconds=0.0,
            end_time_seconds=0.5,
        )
        return gameplay_models.ShortEntity(
            entity_id=gameplay_models.EntityId(id=entity_id, spawn_tick=0),
            lane=note.lane,
            color=note.color,
            note=note,
            x_percent=20.0,
            y_position=y_position,
            radius=14.0,
        )

    outcome = judge_tick([marker("0", 60, 350.0), marker("1", 60, 349.0), marker("2", 60, 348.0)], [], constants)
    assert [e.entity_id.id for e in outcome.missed_short] == ["0", "1"]
    assert [e.entity_id.id for e in outcome.live_short] == ["2"]
    assert outcome.live_short[0].y_position == 350.0

    pressed = judge_key_press([marker("0", 60, 340.0), marker("1", 61, 340.0), marker("2", 60, 300.0)], gameplay_models.KeyId.KEY_H, constants)
    assert [e.entity_id.id for e in pressed.hits] == ["0"]
    assert pressed.hits[0].note.is_player_note is False
    assert [e.entity_id.id for e in pressed.live_short] == ["1", "2"]

    background = judge_tick([marker("0", 60, 350.0, is_player_note=False)], [], constants)
    assert len(background.resolved_short) == 1 and not background.missed_short


if __name__ == "__main__":
    _run_unit_tests()
    print("judge.py: ok")
