import random
from dataclasses import replace

import pytest

import game_reducer
import gameplay_models

KEYS = list(gameplay_models.KeyId)


def _ids(entities):
    return {entity.entity_id.id for entity in entities}


def test_spawn_issues_sequential_ids(make_note) -> None:
    note = make_note(end=2.0)
    state = game_reducer.initial_state([note])
    state = game_reducer.reduce(state, game_reducer.Tick(7))
    state = game_reducer.reduce(state, game_reducer.SpawnShort(note))
    state = game_reducer.reduce(state, game_reducer.SpawnSustain(note))
    assert state.next_object_seq == 2
    assert state.short_entities[0].entity_id == gameplay_models.EntityId(id="0", spawn_tick=7)
    assert state.sustain_entities[0].entity_id == gameplay_models.EntityId(id="1", spawn_tick=7)


def test_scenario_hit_in_tolerance(make_note, tick_until) -> None:
    note = make_note(pitch=0, start=2.0, end=2.3)
    state = game_reducer.initial_state([note])
    state = game_reducer.reduce(state, game_reducer.SpawnShort(note))
    state = tick_until(state, lambda s: s.short_entities[0].y_position >= 340.0)

    state = game_reducer.reduce(state, game_reducer.KeyPress(gameplay_models.KeyId.KEY_H))

    assert state.score == 1
    assert state.short_entities == ()
    assert len(state.resolved_short) == 1
    assert state.resolved_short[0].note.is_player_note is False
    assert state.hit_count == 1


def test_scenario_no_press_misses(make_note, tick_until) -> None:
    note = make_note(pitch=0, start=2.0, end=2.3)
    state = game_reducer.initial_state([note, make_note(pitch=1)])
    state = replace(state, multiplier=1.8, streak_count=4)
    state = game_reducer.reduce(state, game_reducer.SpawnShort(note))

    state = tick_until(state, lambda s: s.missed_short)

    assert state.short_entities == ()
    assert _ids(state.missed_short) == {"0"}
    assert state.multiplier == 1.0
    assert state.streak_count == 0
    assert state.score == 0
    assert state.miss_count == 1
    assert state.ended is False


def test_scenario_long_note_tail_shrinks_to_zero(make_note, constants) -> None:
    note = make_note(pitch=2, start=0.0, end=1.5)
    state = game_reducer.initial_state([note])
    state = game_reducer.reduce(state, game_reducer.SpawnShort(note))
    state = game_reducer.reduce(state, game_reducer.SpawnSustain(note))
    assert len(state.short_entities) == 1 and len(state.sustain_entities) == 1
    initial_length = state.sustain_entities[0].length
    assert initial_length == pytest.approx(30.0)

    removed_tail = None
    for tick_index in range(1, 400):
        before = state.sustain_entities[0]
        state = game_reducer.reduce(state, game_reducer.Tick(tick_index))
        if state.resolved_sustain:
            removed_tail = state.resolved_sustain[0]
            break
        after = state.sustain_entities[0]
        if after.length < before.length:
            assert before.y_position >= constants.judgement_line - before.length
            assert after.played is True
        elif not before.played:
            assert after.length == initial_length
            assert after.played is False

    assert removed_tail is not None
    assert removed_tail.length == 0.0
    assert removed_tail.played is True


@pytest.mark.parametrize("press_pattern", [(), (True, True, True), (True, False, True)])
def test_scenario_all_notes_through_the_judge_ends_game(make_note, press_pattern) -> None:
    notes = [make_note(pitch=pitch) for pitch in (60, 61, 62)] + [make_note(pitch=63, is_player_note=False)]
    state = game_reducer.initial_state(notes)
    for note in notes:
        state = game_reducer.reduce(state, game_reducer.SpawnShort(note))

    tick_index = 0
    while state.short_entities[0].y_position < 340.0:
        tick_index += 1
        state = game_reducer.reduce(state, game_reducer.Tick(tick_index))

    for note, press in zip(notes, press_pattern):
        if press:
            state = game_reducer.reduce(state, game_reducer.KeyPress(note.input_key))
    assert state.ended is False

    while state.short_entities:
        tick_index += 1
        state = game_reducer.reduce(state, game_reducer.Tick(tick_index))

    assert state.notes_resolved == 4
    assert state.ended is True
    assert state.hit_count + state.miss_count == 3


def test_ended_stays_true_until_reset(make_note, tick_until) -> None:
    note = make_note(is_player_note=False)
    state = game_reducer.initial_state([note])
    state = game_reducer.reduce(state, game_reducer.SpawnShort(note))
    state = tick_until(state, lambda s: s.ended)
    state = game_reducer.reduce(state, game_reducer.Tick(state.elapsed_ticks + 1))
    assert state.ended is True
    state = game_reducer.reduce(state, game_reducer.Reset())
    assert state.ended is False


def test_ten_hits_step_multiplier_once(make_note, tick_until) -> None:
    note = make_note(pitch=60)
    state = game_reducer.initial_state([note] * 10)
    for _ in range(10):
        state = game_reducer.reduce(state, game_reducer.SpawnShort(note))
    state = tick_until(state, lambda s: s.short_entities[0].y_position >= 340.0)

    state = game_reducer.reduce(state, game_reducer.KeyPress(gameplay_models.KeyId.KEY_H))
    assert state.score == 10 and state.streak_count == 10
    assert state.multiplier == 1.0

    state = game_reducer.reduce(state, game_reducer.Tick(state.elapsed_ticks + 1))
    assert state.multiplier == pytest.approx(1.2)
    state = game_reducer.reduce(state, game_reducer.Tick(state.elapsed_ticks + 1))
    assert state.multiplier == pytest.approx(1.2)


def test_key_press_with_nothing_hittable_changes_nothing(make_note) -> None:
    note = make_note()
    state = game_reducer.initial_state([note])
    state = game_reducer.reduce(state, game_reducer.SpawnShort(note))
    after = game_reducer.reduce(state, game_reducer.KeyPress(gameplay_models.KeyId.KEY_H))
    assert after == state


def test_transient_lists_are_cleared_by_next_reduction(make_note, tick_until) -> None:
    note = make_note()
    state = game_reducer.initial_state([note, note])
    state = game_reducer.reduce(state, game_reducer.SpawnShort(note))
    state = tick_until(state, lambda s: s.missed_short)
    state = game_reducer.reduce(state, game_reducer.SpawnShort(note))
    assert state.missed_short == ()
    assert state.resolved_short == ()
    assert state.resolved_sustain == ()


def test_reset_restores_initial_values(make_note, tick_until) -> None:
    note = make_note(end=2.0)
    state = game_reducer.initial_state([note, note], high_score=3)
    state = game_reducer.reduce(state, game_reducer.SpawnShort(note))
    state = game_reducer.reduce(state, game_reducer.SpawnSustain(note))
    state = tick_until(state, lambda s: s.short_entities[0].y_position >= 340.0)
    state = game_reducer.reduce(state, game_reducer.KeyPress(gameplay_models.KeyId.KEY_H))
    state = replace(state, multiplier=2.4, streak_count=6)

    reset = game_reducer.reduce(state, game_reducer.Reset())

    assert reset.score == 0
    assert reset.multiplier == 1.0
    assert reset.streak_count == 0
    assert reset.short_entities == ()
    assert reset.sustain_entities == ()
    assert reset.elapsed_ticks == 0
    assert reset.notes_resolved == 0
    assert reset.high_score == 3
    assert reset.schedule == state.schedule
    assert reset.next_object_seq == state.next_object_seq


def test_reduce_is_deterministic(make_note) -> None:
    note = make_note(end=1.8)
    state = game_reducer.initial_state([note])
    for action in (game_reducer.SpawnShort(note), game_reducer.SpawnSustain(note), game_reducer.Tick(1)):
        first = game_reducer.reduce(state, action)
        second = game_reducer.reduce(state, action)
        assert first == second
        state = first


def test_unknown_action_is_rejected(make_note) -> None:
    state = game_reducer.initial_state([make_note()])
    with pytest.raises(TypeError):
        game_reducer.reduce(state, object())


def test_random_action_stream_keeps_invariants(make_note) -> None:
    rng = random.Random(1234)
    notes = [make_note(pitch=60 + rng.randrange(4), end=rng.choice([0.3, 1.5])) for _ in range(40)]
    state = game_reducer.initial_state(notes)
    tick_index = 0

    for _ in range(4000):
        roll = rng.random()
        if roll < 0.05:
            action = game_reducer.SpawnShort(rng.choice(notes))
        elif roll < 0.07:
            action = game_reducer.SpawnSustain(rng.choice(notes))
        elif roll < 0.25:
            action = game_reducer.KeyPress(rng.choice(KEYS))
        elif roll < 0.252:
            action = game_reducer.Reset()
        else:
            tick_index += 1
            action = game_reducer.Tick(tick_index)

        after = game_reducer.reduce(state, action)

        spawned = 1 if isinstance(action, (game_reducer.SpawnShort, game_reducer.SpawnSustain)) else 0
        assert after.next_object_seq == state.next_object_seq + spawned
        assert after.high_score >= state.high_score
        assert after.high_score >= after.score
        assert after.multiplier >= 1.0
        if after.missed_short:
            assert after.multiplier == 1.0

        live = _ids(after.short_entities)
        exits = [entity.entity_id.id for entity in after.resolved_short + after.missed_short]
        assert len(exits) == len(set(exits))
        assert not live & set(exits)
        assert not _ids(after.sustain_entities) & _ids(after.resolved_sustain)

        if isinstance(action, game_reducer.Tick):
            before_ids = _ids(state.short_entities)
            assert before_ids == live | set(exits)

        state = after
