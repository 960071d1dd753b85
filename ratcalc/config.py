"""Runtime settings, read from RATCALC_* environment variables (and .env via the CLI)."""

from __future__ import annotations

import logging
import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from ratcalc.evaluator import PowerLimits

ENV_PREFIX = "RATCALC_"

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class Settings(BaseModel):
    """Settings for a calculator session and its REPL."""
    prompt: str = "% "
    history_file: str = Field(default_factory=lambda: os.path.expanduser("~/.ratcalc_history"))
    use_history: bool = True
    display: Literal["infix", "structural"] = "infix"
    log_level: str = "WARNING"
    max_exponent: int = Field(default=2 ** 31 - 1, gt=0, description="Largest exponent magnitude reduced")
    max_power_bits: int = Field(default=1 << 20, gt=0, description="Size ceiling for exact powers, in bits of the larger of numerator and denominator")

    @field_validator('log_level')
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def power_limits(self) -> PowerLimits:
        return PowerLimits(max_exponent=self.max_exponent, max_bits=self.max_power_bits)

    def log_level_number(self) -> int:
        return getattr(logging, self.log_level)


def load_settings(environ: Optional[Mapping[str, str]] = None, **overrides) -> Settings:
    """Build Settings from ``RATCALC_<FIELD>`` variables, then apply non-None overrides."""
    environ = os.environ if environ is None else environ
    values = {}
    for field in Settings.model_fields:
        key = ENV_PREFIX + field.upper()
        if key in environ:
            values[field] = environ[key]
    values.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**values)
