# -*- coding: utf-8 -*-
########################
# score_ledger.py
########################
# Purpose:
# - Score, streak and multiplier bookkeeping.
#
# Design notes:
# - Pure functions over a small frozen LedgerState. game_reducer copies the fields in and out
#   of GameState so the ledger never sees entities.
# - Hits are applied when a key press resolves entities. Misses and the multiplier step are
#   applied once per tick.
# - Multiplier ratchet: every STREAK_WINDOW streak units without a miss adds MULTIPLIER_STEP
#   (rounded to one decimal) and restarts the window. Any miss drops the multiplier to 1.0.
#
########################
# Interfaces:
# Public dataclasses:
# - LedgerState(score: int, high_score: int, streak_count: int, multiplier: float,
#               hit_count: int, miss_count: int)
#
# Public functions:
# - apply_hits(ledger: LedgerState, hit_total: int) -> LedgerState
# - apply_tick(ledger: LedgerState, miss_total: int) -> LedgerState
#
########################

from __future__ import annotations

from dataclasses import dataclass, replace

STREAK_WINDOW = 10
MULTIPLIER_STEP = 0.2
BASE_MULTIPLIER = 1.0


@dataclass(frozen=True)
class LedgerState:
    score: int = 0
    high_score: int = 0
    streak_count: int = 0
    multiplier: float = BASE_MULTIPLIER
    hit_count: int = 0
    miss_count: int = 0


def apply_hits(ledger: LedgerState, hit_total: int) -> LedgerState:
    hits = int(hit_total)
    if hits <= 0:
        return ledger

    score = ledger.score + hits
    return replace(
        ledger,
        score=score,
        high_score=max(ledger.high_score, score),
        streak_count=ledger.streak_count + hits,
        hit_count=ledger.hit_count + hits,
    )


def apply_tick(ledger: LedgerState, miss_total: int) -> LedgerState:
    misses = int(miss_total)
    if misses > 0:
        return replace(
            ledger,
            streak_count=0,
            multiplier=BASE_MULTIPLIER,
            miss_count=ledger.miss_count + misses,
        )

    if ledger.streak_count >= STREAK_WINDOW:
        return replace(
            ledger,
            streak_count=0,
            multiplier=round(ledger.multiplier + MULTIPLIER_STEP, 1),
        )

    return ledger


def _run_unit_tests() -> None:
    ledger = LedgerState()
    assert apply_hits(ledger, 0) is ledger

    ledger = apply_hits(ledger, 3)
    assert ledger.score == 3 and ledger.high_score == 3 and ledger.streak_count == 3

    ledger = apply_tick(ledger, 0)
    assert ledger.multiplier == 1.0

    ledger = apply_hits(ledger, 7)
    ledger = apply_tick(ledger, 0)
    assert ledger.multiplier == 1.2 and ledger.streak_count == 0

    ledger = apply_tick(ledger, 1)
    assert ledger.multiplier == 1.0 and ledger.miss_count == 1
    assert ledger.score == 10


if __name__ == "__main__":
    _run_unit_tests()
    print("score_ledger.py: ok")
