import autoplay
import game_reducer
import gameplay_models
import gameplay_session


def test_perfect_autoplay_hits_every_player_note(make_note) -> None:
    schedule = [
        make_note(pitch=60, start=0.1),
        make_note(pitch=61, start=0.1),
        make_note(pitch=62, start=0.5, end=2.0),
        make_note(pitch=63, start=0.8, is_player_note=False),
    ]
    session = gameplay_session.GameplaySession(schedule, auto_player=autoplay.AutoPlayer(mode="perfect"))
    summary = session.run_until_end(max_ticks=2000)

    assert summary.ended is True
    assert summary.hit_count == 3
    assert summary.miss_count == 0
    assert summary.score == 3
    assert summary.notes_resolved == 4


def test_without_input_every_player_note_is_missed(make_note) -> None:
    schedule = [make_note(pitch=60, start=0.0), make_note(pitch=61, start=0.3)]
    frames = []
    session = gameplay_session.GameplaySession(schedule, frame_listener=frames.append)
    summary = session.run_until_end(max_ticks=2000)

    assert summary.ended is True
    assert summary.miss_count == 2
    assert summary.score == 0
    missed_ids = [entity.entity_id.id for frame in frames for entity in frame.missed_short]
    assert sorted(missed_ids) == ["0", "1"]


def test_spawn_happens_at_start_time(make_note) -> None:
    session = gameplay_session.GameplaySession([make_note(start=0.05)], tick_rate_ms=10)
    for _ in range(4):
        session.advance_tick()
    assert session.state.short_entities == ()

    frames = session.advance_tick()
    assert isinstance(frames[0].action, game_reducer.SpawnShort)
    assert isinstance(frames[-1].action, game_reducer.Tick)
    assert frames[-1].elapsed_ticks == 5
    assert len(session.state.short_entities) == 1


def test_reset_flushes_pending_spawns(make_note) -> None:
    schedule = [make_note(start=0.02), make_note(start=0.5)]
    session = gameplay_session.GameplaySession(schedule)
    for _ in range(10):
        session.advance_tick()
    assert len(session.state.short_entities) == 1

    frame = session.reset()
    assert isinstance(frame.action, game_reducer.Reset)
    assert session.timing_model.elapsed_ticks() == 0
    assert session.state.short_entities == ()

    session.advance_tick()
    session.advance_tick()
    spawned = session.state.short_entities
    assert len(spawned) == 1
    assert spawned[0].note.start_time_seconds == 0.02
    # ids keep counting after a reset
    assert spawned[0].entity_id.id == "1"


def test_manual_key_press_frame(make_note) -> None:
    session = gameplay_session.GameplaySession([make_note(pitch=61, start=0.0)])
    while not session.state.short_entities or session.state.short_entities[0].y_position < 335.0:
        session.advance_tick()

    frame = session.press_key(gameplay_models.KeyId.KEY_J)
    assert frame.score == 1
    assert frame.high_score == 1
    assert len(frame.resolved_short) == 1
    assert frame.ended is True


def test_late_autoplay_still_hits(make_note) -> None:
    session = gameplay_session.GameplaySession(
        [make_note(pitch=60, start=0.0), make_note(pitch=62, start=0.2)],
        auto_player=autoplay.AutoPlayer(mode="late"),
    )
    summary = session.run_until_end(max_ticks=2000)
    assert summary.hit_count == 2 and summary.miss_count == 0


def test_run_until_end_respects_max_ticks(make_note) -> None:
    session = gameplay_session.GameplaySession([make_note(start=10.0)])
    summary = session.run_until_end(max_ticks=50)
    assert summary.ended is False
    assert summary.elapsed_ticks == 50
