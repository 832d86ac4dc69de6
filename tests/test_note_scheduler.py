import game_reducer
import note_scheduler


def test_spawns_are_released_in_time_order(make_note) -> None:
    schedule = [make_note(pitch=60, start=2.0), make_note(pitch=61, start=1.0), make_note(pitch=62, start=2.0)]
    scheduler = note_scheduler.NoteScheduler(schedule)

    assert scheduler.due_notes(0.99) == []
    assert [note.pitch for note in scheduler.due_notes(1.0)] == [61]
    assert [note.pitch for note in scheduler.due_notes(5.0)] == [60, 62]
    assert scheduler.is_exhausted()
    assert scheduler.next_start_time_seconds() is None


def test_long_note_releases_short_then_sustain(make_note) -> None:
    note = make_note(start=0.5, end=2.0)
    scheduler = note_scheduler.NoteScheduler([note])
    actions = scheduler.due_actions(0.5)
    assert actions == [game_reducer.SpawnShort(note), game_reducer.SpawnSustain(note)]


def test_each_note_is_released_once_until_reset(make_note) -> None:
    scheduler = note_scheduler.NoteScheduler([make_note(start=0.1), make_note(start=0.2)])
    assert len(scheduler.due_actions(1.0)) == 2
    assert scheduler.due_actions(2.0) == []

    scheduler.reset()
    assert scheduler.pending_count() == 2
    assert scheduler.due_actions(0.1) == [game_reducer.SpawnShort(scheduler.schedule()[0])]
