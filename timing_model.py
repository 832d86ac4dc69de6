# -*- coding: utf-8 -*-
########################
# timing_model.py
########################
# Purpose:
# - Single source of truth for song timing in the gameplay session.
# - Counts fixed-rate ticks and converts the tick count into song time.
#
# Design notes:
# - Gameplay code must use TimingModel.song_time_seconds.
# - Keep this module pure and deterministic. No wall clock; ticks only advance when told to.
# - Song time is derived from the tick count, so it never drifts from what the reducer saw.
#
########################
# Interfaces:
# Public classes:
# - class TimingModel
#   - __init__(tick_rate_ms: int)
#   - tick_rate_ms() -> int
#   - elapsed_ticks() -> int
#   - song_time_seconds() -> float
#   - advance() -> int
#   - reset() -> None
#   - ticks_for_seconds(seconds: float) -> int
#
# Inputs:
# - tick_rate_ms from configuration (milliseconds per tick).
#
# Outputs:
# - Tick index for game_reducer.Tick and song time for NoteScheduler.
#
########################

from __future__ import annotations

import math


class TimingModel:
    def __init__(self, tick_rate_ms: int = 10) -> None:
        value = int(tick_rate_ms)
        if value <= 0:
            raise ValueError(f"tick_rate_ms must be positive, got {value}")
        self._tick_rate_ms = value
        self._elapsed_ticks = 0

    def tick_rate_ms(self) -> int:
        return int(self._tick_rate_ms)

    def elapsed_ticks(self) -> int:
        return int(self._elapsed_ticks)

    def song_time_seconds(self) -> float:
        return float(self._elapsed_ticks * self._tick_rate_ms) / 1000.0

    def advance(self) -> int:
        self._elapsed_ticks += 1
        return self._elapsed_ticks

    def reset(self) -> None:
        self._elapsed_ticks = 0

    def ticks_for_seconds(self, seconds: float) -> int:
        return int(math.ceil(float(seconds) * 1000.0 / float(self._tick_rate_ms)))


def _run_unit_tests() -> None:
    model = TimingModel(tick_rate_ms=10)
    assert model.song_time_seconds() == 0.0

    for _ in range(150):
        model.advance()
    assert model.elapsed_ticks() == 150
    assert abs(model.song_time_seconds() - 1.5) < 1e-9
    assert model.ticks_for_seconds(2.0) == 200

    model.reset()
    assert model.elapsed_ticks() == 0

    try:
        TimingModel(tick_rate_ms=0)
    except ValueError:
        pass
    else:
        raise AssertionError("zero tick rate must be rejected")


if __name__ == "__main__":
    _run_unit_tests()
    print("timing_model.py: ok")
