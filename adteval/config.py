"""Runtime settings, read from the environment (and a ``.env`` file)."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .result import Err, Ok, Result

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off", ""})

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    """Evaluator and logging settings.

    log_level:
        Name of the level the CLI configures the root logger with.
    max_depth:
        Maximum nesting of ``Evaluator.evaluate`` calls before evaluation
        is aborted with ``EvalDepthError``.
    trace_dispatch:
        Log every method dispatch at DEBUG.
    """

    log_level: str = "WARNING"
    max_depth: int = 400
    trace_dispatch: bool = False

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)

    @classmethod
    def from_env(cls) -> Result["Settings", ValueError]:
        """Build settings from ``ADTEVAL_*`` variables after loading ``.env``."""
        load_dotenv()
        defaults = cls()

        level = os.getenv("ADTEVAL_LOG_LEVEL", defaults.log_level).strip().upper()
        if level not in _LEVELS:
            return Err(ValueError(f"ADTEVAL_LOG_LEVEL must be one of {_LEVELS}, got {level!r}"))

        raw_depth = os.getenv("ADTEVAL_MAX_DEPTH")
        if raw_depth is None:
            max_depth = defaults.max_depth
        else:
            digits = raw_depth.strip()
            # str.isdigit() is true for "²", which int() rejects
            max_depth = int(digits) if digits.isascii() and digits.isdigit() else 0
            if max_depth <= 0:
                return Err(
                    ValueError(f"ADTEVAL_MAX_DEPTH must be a positive integer, got {raw_depth!r}")
                )

        raw_trace = os.getenv("ADTEVAL_TRACE", "").strip().lower()
        if raw_trace in _TRUTHY:
            trace = True
        elif raw_trace in _FALSY:
            trace = False
        else:
            return Err(ValueError(f"ADTEVAL_TRACE must be a boolean flag, got {raw_trace!r}"))

        return Ok(cls(log_level=level, max_depth=max_depth, trace_dispatch=trace))
