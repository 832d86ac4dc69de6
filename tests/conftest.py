from dataclasses import replace
from typing import Callable

import pytest

import game_reducer
import gameplay_models


@pytest.fixture
def constants() -> gameplay_models.GameplayConstants:
    return gameplay_models.DEFAULT_CONSTANTS


@pytest.fixture
def make_note() -> Callable[..., gameplay_models.NoteSpec]:
    def _make(
        pitch: int = 60,
        start: float = 0.0,
        end: float = 0.3,
        is_player_note: bool = True,
        instrument: str = "piano",
    ) -> gameplay_models.NoteSpec:
        return gameplay_models.build_note_spec(
            is_player_note=is_player_note,
            instrument=instrument,
            velocity=100,
            pitch=pitch,
            start_time_seconds=start,
            end_time_seconds=end,
        )

    return _make


@pytest.fixture
def make_marker(make_note) -> Callable[..., gameplay_models.ShortEntity]:
    def _make(entity_id: str, y_position: float, pitch: int = 60, is_player_note: bool = True) -> gameplay_models.ShortEntity:
        note = make_note(pitch=pitch, is_player_note=is_player_note)
        return gameplay_models.ShortEntity(
            entity_id=gameplay_models.EntityId(id=entity_id, spawn_tick=0),
            lane=note.lane,
            color=note.color,
            note=note,
            x_percent=(note.lane + 1) * 20.0,
            y_position=y_position,
            radius=14.0,
        )

    return _make


@pytest.fixture
def tick_until() -> Callable[..., gameplay_models.GameState]:
    """Reduce Tick actions until predicate(state) holds; fails after max_ticks."""

    def _tick(state: gameplay_models.GameState, predicate, max_ticks: int = 1000) -> gameplay_models.GameState:
        for _ in range(max_ticks):
            if predicate(state):
                return state
            state = game_reducer.reduce(state, game_reducer.Tick(state.elapsed_ticks + 1))
        raise AssertionError("predicate never held")

    return _tick


@pytest.fixture
def with_markers() -> Callable[..., gameplay_models.GameState]:
    def _build(state: gameplay_models.GameState, *markers: gameplay_models.ShortEntity) -> gameplay_models.GameState:
        return replace(state, short_entities=tuple(markers), next_object_seq=len(markers))

    return _build
