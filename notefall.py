"""
notefall.py

Headless entrypoint that runs the simulation core over a schedule and prints a JSON summary.

Integration
- Loads config and sets up logging
- Loads the schedule (CSV from --schedule or config, otherwise the demo schedule)
- Builds a GameplaySession with an optional AutoPlayer
- Ticks until the game ends or --max-ticks is reached
"""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

import autoplay
import config as config_module
import demo_schedule
import gameplay_models
import gameplay_session
import logging_setup
import schedule_loader

logger = logging.getLogger(__name__)

# Extra ticks after the last note so its marker and tail can fall past the line.
_TAIL_PADDING_SECONDS = 5.0


def _load_schedule(
    *,
    schedule_path_text: Optional[str],
    difficulty: str,
) -> List[gameplay_models.NoteSpec]:
    if schedule_path_text:
        return schedule_loader.load_schedule_file(Path(schedule_path_text))

    logger.info("no schedule path given, using demo schedule (%s)", difficulty)
    return demo_schedule.build_demo_schedule(difficulty=difficulty)


def _default_max_ticks(schedule: List[gameplay_models.NoteSpec], session: gameplay_session.GameplaySession) -> int:
    last_end_seconds = max((note.end_time_seconds for note in schedule), default=0.0)
    return session.timing_model.ticks_for_seconds(last_end_seconds + _TAIL_PADDING_SECONDS)


def main() -> int:
    argument_parser = argparse.ArgumentParser(description="Notefall headless simulation")
    argument_parser.add_argument("--schedule", default=None, help="CSV note schedule. Overrides config schedule.path.")
    argument_parser.add_argument("--difficulty", default="easy", help="Demo schedule difficulty: easy, medium or hard.")
    argument_parser.add_argument(
        "--autoplay",
        default="perfect",
        choices=list(autoplay.AUTOPLAY_MODES),
        help="Simulated player mode.",
    )
    argument_parser.add_argument("--max-ticks", type=int, default=None, help="Stop after this many ticks.")
    argument_parser.add_argument("--config", default=None, help="Explicit config JSON path.")
    argument_parser.add_argument("--quiet", action="store_true", help="Only log warnings and errors.")
    argument_parser.add_argument("--debug", action="store_true", help="Log every miss and reset.")
    parsed_args = argument_parser.parse_args()

    try:
        app_config, config_path = config_module.load_config(
            Path(parsed_args.config) if parsed_args.config else None
        )
    except (OSError, ValueError) as exception:
        print(json.dumps({"ok": False, "error": str(exception)}, ensure_ascii=False, indent=2))
        return 2

    logging_setup.setup_logging(parsed_args, config_level=app_config.logging.level)
    if config_path is not None:
        logger.info("config loaded from %s", config_path)

    try:
        schedule = _load_schedule(
            schedule_path_text=parsed_args.schedule or app_config.schedule.path,
            difficulty=str(parsed_args.difficulty),
        )
    except schedule_loader.ScheduleLoadError as exception:
        print(json.dumps({"ok": False, "error": str(exception)}, ensure_ascii=False, indent=2))
        return 2

    session = gameplay_session.GameplaySession(
        schedule,
        constants=app_config.gameplay_constants(),
        tick_rate_ms=app_config.gameplay.tick_rate_ms,
        auto_player=autoplay.AutoPlayer(mode=parsed_args.autoplay),
    )

    max_ticks = parsed_args.max_ticks if parsed_args.max_ticks is not None else _default_max_ticks(schedule, session)
    summary = session.run_until_end(max_ticks=max_ticks)

    output_payload = {
        "ok": True,
        "song_name": app_config.schedule.song_name,
        "autoplay": parsed_args.autoplay,
        "summary": asdict(summary),
    }
    print(json.dumps(output_payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
