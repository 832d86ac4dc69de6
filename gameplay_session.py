# -*- coding: utf-8 -*-
########################
# gameplay_session.py
########################
# Purpose:
# - Gameplay driver for the simulation core.
# - Integrates TimingModel + NoteScheduler + game_reducer + optional AutoPlayer.
# - Folds actions through game_reducer.reduce in arrival order and publishes one FrameOutput
#   per reduction for view and audio collaborators.
#
# Design notes:
# - The session is the only stateful object. It owns the running GameState, the tick clock and
#   the spawn cursor; the reducer stays pure.
# - Tick loop order for one tick:
#   1) advance the tick clock
#   2) release spawn actions due at the new song time (short before sustain, schedule order)
#   3) reduce Tick
#   4) if an AutoPlayer is attached, reduce one KeyPress per key it asks for
# - reset() rewinds the clock and the spawn cursor before reducing Reset, so notes from a
#   previous run never spawn after a restart.
# - The core never stops ticking on its own. run_until_end stops once a frame reports ended.
# - Transient exit lists are only valid on the frame that carried them. Listeners must consume
#   every frame.
#
########################
# Interfaces:
# Public dataclasses:
# - FrameOutput(action, elapsed_ticks, song_time_seconds, short_entities, sustain_entities,
#               resolved_short, missed_short, resolved_sustain, score, multiplier, high_score, ended)
# - SessionSummary(elapsed_ticks, song_time_seconds, total_notes, notes_resolved, hit_count,
#                  miss_count, score, high_score, multiplier, ended)
#
# Public classes:
# - class GameplaySession
#   - __init__(schedule, *, constants, tick_rate_ms, auto_player=None, frame_listener=None)
#   - state -> GameState
#   - timing_model -> TimingModel
#   - note_scheduler -> NoteScheduler
#   - dispatch(action) -> FrameOutput
#   - advance_tick() -> list[FrameOutput]
#   - press_key(key_id: KeyId) -> FrameOutput
#   - reset() -> FrameOutput
#   - run_until_end(*, max_ticks: int) -> SessionSummary
#   - summary() -> SessionSummary
#
# Inputs:
# - Note schedule, gameplay constants and tick rate from config.
# - Key presses from an external input source or AutoPlayer.
#
# Outputs:
# - FrameOutput per reduction, passed to frame_listener and returned to the caller.
#
########################

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable, List, Optional, Sequence, Tuple

import autoplay
import game_reducer
import gameplay_models
import note_scheduler
import timing_model

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameOutput:
    action: game_reducer.Action
    elapsed_ticks: int
    song_time_seconds: float
    short_entities: Tuple[gameplay_models.ShortEntity, ...]
    sustain_entities: Tuple[gameplay_models.SustainEntity, ...]
    resolved_short: Tuple[gameplay_models.ShortEntity, ...]
    missed_short: Tuple[gameplay_models.ShortEntity, ...]
    resolved_sustain: Tuple[gameplay_models.SustainEntity, ...]
    score: int
    multiplier: float
    high_score: int
    ended: bool

    @classmethod
    def from_state(
        cls,
        state: gameplay_models.GameState,
        *,
        action: game_reducer.Action,
        song_time_seconds: float,
    ) -> "FrameOutput":
        return cls(
            action=action,
            elapsed_ticks=state.elapsed_ticks,
            song_time_seconds=float(song_time_seconds),
            short_entities=state.short_entities,
            sustain_entities=state.sustain_entities,
            resolved_short=state.resolved_short,
            missed_short=state.missed_short,
            resolved_sustain=state.resolved_sustain,
            score=state.score,
            multiplier=state.multiplier,
            high_score=state.high_score,
            ended=state.ended,
        )


@dataclass(frozen=True)
class SessionSummary:
    elapsed_ticks: int
    song_time_seconds: float
    total_notes: int
    notes_resolved: int
    hit_count: int
    miss_count: int
    score: int
    high_score: int
    multiplier: float
    ended: bool


class GameplaySession:
    def __init__(
        self,
        schedule: Sequence[gameplay_models.NoteSpec],
        *,
        constants: gameplay_models.GameplayConstants = gameplay_models.DEFAULT_CONSTANTS,
        tick_rate_ms: int = 10,
        auto_player: Optional[autoplay.AutoPlayer] = None,
        frame_listener: Optional[Callable[[FrameOutput], None]] = None,
    ) -> None:
        self._timing = timing_model.TimingModel(tick_rate_ms=tick_rate_ms)
        self._scheduler = note_scheduler.NoteScheduler(schedule, constants)
        self._state = game_reducer.initial_state(self._scheduler.schedule(), constants)
        self._auto_player = auto_player
        self._frame_listener = frame_listener

    @property
    def state(self) -> gameplay_models.GameState:
        return self._state

    @property
    def timing_model(self) -> timing_model.TimingModel:
        return self._timing

    @property
    def note_scheduler(self) -> note_scheduler.NoteScheduler:
        return self._scheduler

    # -----------------
    # Core operations
    # -----------------

    def dispatch(self, action: game_reducer.Action) -> FrameOutput:
        previous = self._state
        self._state = game_reducer.reduce(previous, action)

        if self._state.missed_short:
            logger.debug(
                "tick %d: %d missed (%s)",
                self._state.elapsed_ticks,
                len(self._state.missed_short),
                ", ".join(entity.entity_id.id for entity in self._state.missed_short),
            )
        if self._state.ended and not previous.ended:
            logger.info(
                "game ended at tick %d: score=%d high_score=%d",
                self._state.elapsed_ticks,
                self._state.score,
                self._state.high_score,
            )

        frame = FrameOutput.from_state(
            self._state,
            action=action,
            song_time_seconds=self._timing.song_time_seconds(),
        )
        if self._frame_listener is not None:
            self._frame_listener(frame)
        return frame

    def advance_tick(self) -> List[FrameOutput]:
        tick_index = self._timing.advance()
        frames: List[FrameOutput] = []

        for spawn_action in self._scheduler.due_actions(self._timing.song_time_seconds()):
            frames.append(self.dispatch(spawn_action))

        frames.append(self.dispatch(game_reducer.Tick(tick_index)))

        if self._auto_player is not None:
            for key_id in self._auto_player.keys_to_press(self._state):
                frames.append(self.dispatch(game_reducer.KeyPress(key_id)))

        return frames

    def press_key(self, key_id: gameplay_models.KeyId) -> FrameOutput:
        return self.dispatch(game_reducer.KeyPress(key_id))

    def reset(self) -> FrameOutput:
        logger.info("reset at tick %d (score=%d)", self._timing.elapsed_ticks(), self._state.score)
        self._timing.reset()
        self._scheduler.reset()
        return self.dispatch(game_reducer.Reset())

    def run_until_end(self, *, max_ticks: int) -> SessionSummary:
        limit = int(max_ticks)
        while not self._state.ended and self._timing.elapsed_ticks() < limit:
            self.advance_tick()
        if not self._state.ended:
            logger.warning("stopped after %d ticks before the schedule finished", limit)
        return self.summary()

    def summary(self) -> SessionSummary:
        return SessionSummary(
            elapsed_ticks=self._timing.elapsed_ticks(),
            song_time_seconds=self._timing.song_time_seconds(),
            total_notes=self._state.total_notes,
            notes_resolved=self._state.notes_resolved,
            hit_count=self._state.hit_count,
            miss_count=self._state.miss_count,
            score=self._state.score,
            high_score=self._state.high_score,
            multiplier=self._state.multiplier,
            ended=self._state.ended,
        )


def _run_unit_tests() -> None:
    note = gameplay_models.build_note_spec(
        is_player_note=True,
        instrument="piano",
        velocity=100,
        pitch=60,
        start_time_seconds=0.05,
        end_time_seconds=0.2,
    )
    frames: List[FrameOutput] = []
    session = GameplaySession([note], auto_player=autoplay.AutoPlayer(mode="perfect"), frame_listener=frames.append)
    summary = session.run_until_end(max_ticks=1000)
    assert summary.ended and summary.score == 1 and summary.miss_count == 0
    assert any(frame.resolved_short for frame in frames)

    session.reset()
    assert session.state.score == 0 and session.state.high_score == 1
    assert session.note_scheduler.pending_count() == 1


if __name__ == "__main__":
    _run_unit_tests()
    print("gameplay_session.py: ok")
