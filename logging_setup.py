# -*- coding: utf-8 -*-
########################
# logging_setup.py
########################
# Purpose:
# - One-shot python logging configuration for the notefall CLI and headless sessions.
#
# Design notes:
# - Level priority, highest first:
#     1) env NOTEFALL_LOG_LEVEL
#     2) --debug, then --quiet, when present on the parsed args
#     3) logging.level from notefall_config.json
#     4) INFO
# - Unknown level names are ignored at every step, so a typo falls through to the next source.
# - If the root logger already has handlers (pytest, an embedding host), nothing is changed.
#
########################
# Interfaces:
# Public constants:
# - LOG_LEVEL_ENV = "NOTEFALL_LOG_LEVEL"
#
# Public functions:
# - resolve_log_level(args=None, *, config_level=None, env_level=None) -> int
# - setup_logging(args=None, *, config_level=None, name="notefall") -> None
#
########################

from __future__ import annotations

import logging
import os
from typing import Any, Optional

LOG_LEVEL_ENV = "NOTEFALL_LOG_LEVEL"

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"

_LEVELS_BY_NAME = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


def _level_from_name(level_name: Optional[str]) -> Optional[int]:
    normalized = str(level_name or "").strip().upper()
    return _LEVELS_BY_NAME.get(normalized)


def _flag(args: Any, flag_name: str) -> bool:
    return bool(getattr(args, flag_name, False)) if args is not None else False


def resolve_log_level(
    args: Any = None,
    *,
    config_level: Optional[str] = None,
    env_level: Optional[str] = None,
) -> int:
    from_env = _level_from_name(env_level)
    if from_env is not None:
        return from_env
    if _flag(args, "debug"):
        return logging.DEBUG
    if _flag(args, "quiet"):
        return logging.WARNING
    from_config = _level_from_name(config_level)
    if from_config is not None:
        return from_config
    return logging.INFO


def setup_logging(args: Any = None, *, config_level: Optional[str] = None, name: str = "notefall") -> None:
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    level = resolve_log_level(args, config_level=config_level, env_level=os.environ.get(LOG_LEVEL_ENV))
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    logging.getLogger(name).debug("logging initialized (level=%s)", logging.getLevelName(level))


def _run_unit_tests() -> None:
    class _Args:
        quiet = True
        debug = False

    assert resolve_log_level() == logging.INFO
    assert resolve_log_level(config_level="error") == logging.ERROR
    assert resolve_log_level(_Args(), config_level="DEBUG") == logging.WARNING
    assert resolve_log_level(_Args(), env_level="debug") == logging.DEBUG
    assert resolve_log_level(config_level="chatty") == logging.INFO


if __name__ == "__main__":
    _run_unit_tests()
    print("logging_setup.py: ok")
