# -*- coding: utf-8 -*-
########################
# game_reducer.py
########################
# Purpose:
# - The single state transition of the simulation core: reduce(state, action) -> state.
# - Defines the closed set of actions that drive it.
#
# Design notes:
# - Pure. Equal (state, action) pairs give equal results. Time only arrives through Tick.
# - Every reduction starts by clearing the transient exit lists of the previous reduction.
# - Entity ids come from state.next_object_seq and are never handed out twice, Reset included.
# - Each action applies one component:
#   - SpawnShort / SpawnSustain -> entity_factory
#   - Tick -> judge.judge_tick (kinematics inside) + score_ledger.apply_tick
#   - KeyPress -> judge.judge_key_press + score_ledger.apply_hits
#   - Reset -> initial values, keeping schedule, constants, high score and id sequence
#
########################
# Interfaces:
# Public dataclasses (actions):
# - Tick(elapsed_ticks: int)
# - KeyPress(key_id: KeyId)
# - SpawnShort(note: NoteSpec)
# - SpawnSustain(note: NoteSpec)
# - Reset()
#
# Public functions:
# - initial_state(schedule: Sequence[NoteSpec], constants: GameplayConstants = DEFAULT_CONSTANTS,
#                 *, high_score: int = 0) -> GameState
# - reduce(state: GameState, action: Action) -> GameState
#
########################

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence, Union

import entity_factory
import gameplay_models
import judge
import score_ledger


@dataclass(frozen=True)
class Tick:
    elapsed_ticks: int


@dataclass(frozen=True)
class KeyPress:
    key_id: gameplay_models.KeyId


@dataclass(frozen=True)
class SpawnShort:
    note: gameplay_models.NoteSpec


@dataclass(frozen=True)
class SpawnSustain:
    note: gameplay_models.NoteSpec


@dataclass(frozen=True)
class Reset:
    pass


Action = Union[Tick, KeyPress, SpawnShort, SpawnSustain, Reset]


def initial_state(
    schedule: Sequence[gameplay_models.NoteSpec],
    constants: gameplay_models.GameplayConstants = gameplay_models.DEFAULT_CONSTANTS,
    *,
    high_score: int = 0,
) -> gameplay_models.GameState:
    return gameplay_models.GameState(
        schedule=tuple(schedule),
        constants=constants,
        high_score=int(high_score),
    )


def _ledger_of(state: gameplay_models.GameState) -> score_ledger.LedgerState:
    return score_ledger.LedgerState(
        score=state.score,
        high_score=state.high_score,
        streak_count=state.streak_count,
        multiplier=state.multiplier,
        hit_count=state.hit_count,
        miss_count=state.miss_count,
    )


def _with_ledger(state: gameplay_models.GameState, ledger: score_ledger.LedgerState) -> gameplay_models.GameState:
    return replace(
        state,
        score=ledger.score,
        high_score=ledger.high_score,
        streak_count=ledger.streak_count,
        multiplier=ledger.multiplier,
        hit_count=ledger.hit_count,
        miss_count=ledger.miss_count,
    )


def _issue_entity_id(state: gameplay_models.GameState) -> gameplay_models.EntityId:
    return gameplay_models.EntityId(id=str(state.next_object_seq), spawn_tick=state.elapsed_ticks)


def _ended(state: gameplay_models.GameState, notes_resolved: int) -> bool:
    return state.ended or notes_resolved >= state.total_notes


def _apply_spawn_short(state: gameplay_models.GameState, action: SpawnShort) -> gameplay_models.GameState:
    entity = entity_factory.spawn_short(action.note, _issue_entity_id(state), state.constants)
    return replace(
        state,
        short_entities=state.short_entities + (entity,),
        next_object_seq=state.next_object_seq + 1,
    )


def _apply_spawn_sustain(state: gameplay_models.GameState, action: SpawnSustain) -> gameplay_models.GameState:
    tail = entity_factory.spawn_sustain(action.note, _issue_entity_id(state), state.constants)
    return replace(
        state,
        sustain_entities=state.sustain_entities + (tail,),
        next_object_seq=state.next_object_seq + 1,
    )


def _apply_tick(state: gameplay_models.GameState, action: Tick) -> gameplay_models.GameState:
    outcome = judge.judge_tick(state.short_entities, state.sustain_entities, state.constants)
    notes_resolved = state.notes_resolved + outcome.short_exit_count
    ledger = score_ledger.apply_tick(_ledger_of(state), len(outcome.missed_short))

    next_state = replace(
        state,
        elapsed_ticks=int(action.elapsed_ticks),
        short_entities=outcome.live_short,
        sustain_entities=outcome.live_sustain,
        resolved_short=outcome.resolved_short,
        missed_short=outcome.missed_short,
        resolved_sustain=outcome.resolved_sustain,
        notes_resolved=notes_resolved,
        ended=_ended(state, notes_resolved),
    )
    return _with_ledger(next_state, ledger)


def _apply_key_press(state: gameplay_models.GameState, action: KeyPress) -> gameplay_models.GameState:
    outcome = judge.judge_key_press(state.short_entities, action.key_id, state.constants)
    if not outcome.hits:
        return state

    notes_resolved = state.notes_resolved + len(outcome.hits)
    ledger = score_ledger.apply_hits(_ledger_of(state), len(outcome.hits))

    next_state = replace(
        state,
        short_entities=outcome.live_short,
        resolved_short=outcome.hits,
        notes_resolved=notes_resolved,
        ended=_ended(state, notes_resolved),
    )
    return _with_ledger(next_state, ledger)


def _apply_reset(state: gameplay_models.GameState, action: Reset) -> gameplay_models.GameState:
    fresh = initial_state(state.schedule, state.constants, high_score=state.high_score)
    return replace(fresh, next_object_seq=state.next_object_seq)


def reduce(state: gameplay_models.GameState, action: Action) -> gameplay_models.GameState:
    cleared = replace(state, resolved_short=(), missed_short=(), resolved_sustain=())

    if isinstance(action, Tick):
        return _apply_tick(cleared, action)
    if isinstance(action, KeyPress):
        return _apply_key_press(cleared, action)
    if isinstance(action, SpawnShort):
        return _apply_spawn_short(cleared, action)
    if isinstance(action, SpawnSustain):
        return _apply_spawn_sustain(cleared, action)
    if isinstance(action, Reset):
        return _apply_reset(cleared, action)
    raise TypeError(f"Unsupported action: {type(action).__name__}")


def _run_unit_tests() -> None:
    note = gameplay_models.build_note_spec(
        is_player_note=True,
        instrument="piano",
        velocity=100,
        pitch=60,
        start_time_seconds=2.0,
        end_time_seconds=2.3,
    )
    state = initial_state([note])
    state = reduce(state, SpawnShort(note))
    assert state.next_object_seq == 1
    assert state.short_entities[0].entity_id.id == "0"

    tick_index = 0
    while state.short_entities[0].y_position < 340.0:
        tick_index += 1
        state = reduce(state, Tick(tick_index))

    state = reduce(state, KeyPress(gameplay_models.KeyId.KEY_H))
    assert state.score == 1 and state.high_score == 1
    assert state.short_entities == ()
    assert state.resolved_short[0].note.is_player_note is False
    assert state.ended is True

    state = reduce(state, Tick(tick_index + 1))
    assert state.resolved_short == ()

    state = reduce(state, Reset())
    assert state.score == 0 and state.high_score == 1 and state.ended is False
    assert state.next_object_seq == 1


if __name__ == "__main__":
    _run_unit_tests()
    print("game_reducer.py: ok")
