# -*- coding: utf-8 -*-
########################
# autoplay.py
########################
# Purpose:
# - Simulated player for headless runs and demos.
# - Decides which keys to press for the current GameState.
#
# Design notes:
# - Pure decision only. The session turns the returned keys into KeyPress actions.
# - Modes:
#   - "perfect": press as soon as a player marker is inside the tolerance window,
#     but no later than the last tick before it expires.
#   - "late": press only on the last tick before expiry (exercises the edge of the window).
#   - "off": never press.
#
########################
# Interfaces:
# Public classes:
# - class AutoPlayer
#   - __init__(*, mode: str = "perfect")
#   - mode -> str
#   - keys_to_press(state: GameState) -> list[KeyId]
#
########################

from __future__ import annotations

from typing import List

import gameplay_models
import judge

AUTOPLAY_MODES = ("perfect", "late", "off")


class AutoPlayer:
    def __init__(self, *, mode: str = "perfect") -> None:
        normalized = str(mode or "perfect").strip().lower()
        if normalized not in AUTOPLAY_MODES:
            normalized = "perfect"
        self._mode = normalized

    @property
    def mode(self) -> str:
        return self._mode

    def _wants(self, entity: gameplay_models.ShortEntity, constants: gameplay_models.GameplayConstants) -> bool:
        if not judge.is_hittable(entity, entity.note.input_key, constants):
            return False
        if self._mode == "perfect":
            return True
        # Next tick would put it on or past the line.
        return entity.y_position + float(constants.step_size) >= float(constants.judgement_line)

    def keys_to_press(self, state: gameplay_models.GameState) -> List[gameplay_models.KeyId]:
        if self._mode == "off":
            return []

        keys: List[gameplay_models.KeyId] = []
        for entity in state.short_entities:
            if not self._wants(entity, state.constants):
                continue
            if entity.note.input_key not in keys:
                keys.append(entity.note.input_key)
        return keys
