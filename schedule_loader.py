# -*- coding: utf-8 -*-
########################
# schedule_loader.py
########################
# Purpose:
# - Parse the tabular note schedule into gameplay_models.NoteSpec records.
# - Derive lane, color and key for each note through gameplay_models.lane_for_pitch.
#
########################
# Key Logic:
# - Input is CSV text with a header row and six columns, in this order:
#     user_played, instrument_name, velocity, pitch, start, end
# - user_played is "True" (any case) for notes the player must hit; anything else is background.
# - Blank lines are skipped. Row order is preserved; spawn ordering is note_scheduler's job.
# - Strict contract:
#   - A malformed row aborts the whole load. No partial schedules.
#   - end < start, start < 0, non-finite numbers, fractional velocity or pitch, and pitches
#     outside the lane table are malformed.
#
########################
# Interfaces:
# Public exceptions:
# - class ScheduleLoadError(Exception)
#
# Public functions:
# - parse_schedule_text(text: str, *, source_name: str = "<text>") -> list[NoteSpec]
# - load_schedule_file(schedule_path: pathlib.Path) -> list[NoteSpec]
#
# Inputs:
# - Schedule CSV text or a UTF-8 file path.
#
# Outputs:
# - Ordered list of NoteSpec, or ScheduleLoadError naming the source and line.
#
########################
# Smoke Tests:
#   - python schedule_loader.py
########################

from __future__ import annotations

import csv
import io
import logging
import math
from pathlib import Path
from typing import List, Sequence

import gameplay_models

logger = logging.getLogger(__name__)

EXPECTED_COLUMNS = ("user_played", "instrument_name", "velocity", "pitch", "start", "end")


class ScheduleLoadError(Exception):
    """Raised when a schedule cannot be read or one of its rows is malformed."""


def _parse_finite(text: str, *, column: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise ValueError(f"non-numeric {column}: {text!r}") from None
    if not math.isfinite(value):
        raise ValueError(f"{column} must be finite, got {text!r}")
    return value


def _parse_whole_number(text: str, *, column: str) -> int:
    # "90" and "90.0" are accepted; "60.5" is not truncated.
    value = _parse_finite(text, column=column)
    if not value.is_integer():
        raise ValueError(f"{column} must be a whole number, got {text!r}")
    return int(value)


def _parse_row(row: Sequence[str], *, source_name: str, line_number: int) -> gameplay_models.NoteSpec:
    if len(row) != len(EXPECTED_COLUMNS):
        raise ScheduleLoadError(
            f"{source_name}:{line_number}: expected {len(EXPECTED_COLUMNS)} columns, got {len(row)}"
        )

    user_played_text, instrument_name, velocity_text, pitch_text, start_text, end_text = (
        cell.strip() for cell in row
    )

    try:
        velocity = _parse_whole_number(velocity_text, column="velocity")
        pitch = _parse_whole_number(pitch_text, column="pitch")
        start_time_seconds = _parse_finite(start_text, column="start")
        end_time_seconds = _parse_finite(end_text, column="end")
    except ValueError as exc:
        raise ScheduleLoadError(f"{source_name}:{line_number}: {exc}") from exc

    if start_time_seconds < 0.0:
        raise ScheduleLoadError(f"{source_name}:{line_number}: start must be >= 0, got {start_time_seconds}")
    if end_time_seconds < start_time_seconds:
        raise ScheduleLoadError(
            f"{source_name}:{line_number}: end {end_time_seconds} is before start {start_time_seconds}"
        )

    try:
        return gameplay_models.build_note_spec(
            is_player_note=user_played_text.lower() == "true",
            instrument=instrument_name,
            velocity=velocity,
            pitch=pitch,
            start_time_seconds=start_time_seconds,
            end_time_seconds=end_time_seconds,
        )
    except gameplay_models.ScheduleError as exc:
        raise ScheduleLoadError(f"{source_name}:{line_number}: {exc}") from exc


def parse_schedule_text(text: str, *, source_name: str = "<text>") -> List[gameplay_models.NoteSpec]:
    reader = csv.reader(io.StringIO(str(text or "").strip()))
    notes: List[gameplay_models.NoteSpec] = []

    header_seen = False
    for row in reader:
        if not row or not any(cell.strip() for cell in row):
            continue
        if not header_seen:
            header_seen = True
            continue
        notes.append(_parse_row(row, source_name=source_name, line_number=reader.line_num))

    logger.debug("parsed %d notes from %s", len(notes), source_name)
    return notes


def load_schedule_file(schedule_path: Path) -> List[gameplay_models.NoteSpec]:
    path = Path(schedule_path)
    try:
        raw_text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ScheduleLoadError(f"Failed to read schedule file: {path}. Error: {exc}") from exc

    notes = parse_schedule_text(raw_text, source_name=str(path))
    logger.info("loaded schedule %s (%d notes)", path, len(notes))
    return notes


def _run_unit_tests() -> None:
    text = "\n".join(
        [
            "user_played,instrument_name,velocity,pitch,start,end",
            "True,piano,90,60,2.0,2.3",
            "",
            "False,bass-electric,70,43,2.5,4.0",
        ]
    )
    notes = parse_schedule_text(text)
    assert len(notes) == 2
    assert notes[0].is_player_note is True
    assert notes[0].input_key is gameplay_models.KeyId.KEY_H
    assert notes[1].lane == 3 and notes[1].is_player_note is False

    for bad_row in ("True,piano,90,60,2.0", "True,piano,loud,60,2.0,2.3", "True,piano,90,60,3.0,2.0", "True,piano,90,-4,1.0,2.0", "True,piano,90,inf,1.0,2.0", "True,piano,90,60,nan,2.0"):
        try:
            parse_schedule_text("header\n" + bad_row)
        except ScheduleLoadError:
            pass
        else:
            raise AssertionError(f"Expected ScheduleLoadError for {bad_row!r}")


if __name__ == "__main__":
    _run_unit_tests()
    print("schedule_loader.py: ok")
