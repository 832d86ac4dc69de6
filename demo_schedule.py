# demo_schedule.py
from __future__ import annotations

from typing import List

import gameplay_models

DEMO_INSTRUMENTS = ("piano", "violin", "flute", "trumpet")


def build_demo_schedule(*, difficulty: str) -> List[gameplay_models.NoteSpec]:
    normalized_difficulty = (difficulty or "easy").strip().lower() or "easy"

    if normalized_difficulty == "hard":
        step_interval_seconds = 0.40
        total_notes = 32
    elif normalized_difficulty == "medium":
        step_interval_seconds = 0.55
        total_notes = 24
    else:
        normalized_difficulty = "easy"
        step_interval_seconds = 0.75
        total_notes = 16

    lead_in_seconds = 2.0

    # Pitches walk all four lanes; every fifth note is held long enough to grow a tail.
    pitch_pattern = [
        60, 61, 62, 63,
        61, 60, 63, 62,
        60, 62, 61, 63,
        62, 63, 60, 61,
    ]

    notes: List[gameplay_models.NoteSpec] = []
    current_time_seconds = lead_in_seconds

    for note_index in range(total_notes):
        pitch = pitch_pattern[note_index % len(pitch_pattern)]
        hold_seconds = 1.5 if note_index % 5 == 4 else 0.3
        notes.append(
            gameplay_models.build_note_spec(
                is_player_note=True,
                instrument=DEMO_INSTRUMENTS[note_index % len(DEMO_INSTRUMENTS)],
                velocity=96,
                pitch=pitch,
                start_time_seconds=current_time_seconds,
                end_time_seconds=current_time_seconds + hold_seconds,
            )
        )

        # A background bass note under every fourth step, never scored.
        if note_index % 4 == 0:
            notes.append(
                gameplay_models.build_note_spec(
                    is_player_note=False,
                    instrument="bass-electric",
                    velocity=72,
                    pitch=pitch - 24,
                    start_time_seconds=current_time_seconds,
                    end_time_seconds=current_time_seconds + step_interval_seconds,
                )
            )

        # Insert a few deterministic chords on higher difficulties.
        if normalized_difficulty in ("medium", "hard") and note_index in (6, 14, 22):
            notes.append(
                gameplay_models.build_note_spec(
                    is_player_note=True,
                    instrument="piano",
                    velocity=96,
                    pitch=pitch + 2,
                    start_time_seconds=current_time_seconds,
                    end_time_seconds=current_time_seconds + 0.3,
                )
            )

        current_time_seconds += step_interval_seconds

    notes.sort(key=lambda note: (note.start_time_seconds, note.lane))
    return notes
