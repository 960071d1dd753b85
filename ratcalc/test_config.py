import logging

import pytest
from pydantic import ValidationError

from ratcalc.config import Settings, load_settings


def test_defaults():
    s = Settings()
    assert s.prompt == "% "
    assert s.display == "infix"
    assert s.log_level == "WARNING"
    assert s.max_exponent == 2 ** 31 - 1
    assert s.history_file.endswith(".ratcalc_history")


def test_load_from_environment():
    env = {
        "RATCALC_PROMPT": "> ",
        "RATCALC_DISPLAY": "structural",
        "RATCALC_USE_HISTORY": "false",
        "RATCALC_MAX_EXPONENT": "1000",
        "RATCALC_LOG_LEVEL": "debug",
        "UNRELATED": "x",
    }
    s = load_settings(env)
    assert s.prompt == "> "
    assert s.display == "structural"
    assert s.use_history is False
    assert s.max_exponent == 1000
    assert s.log_level == "DEBUG"
    assert s.log_level_number() == logging.DEBUG


def test_overrides_beat_environment_and_none_is_ignored():
    env = {"RATCALC_DISPLAY": "structural", "RATCALC_LOG_LEVEL": "INFO"}
    s = load_settings(env, display="infix", log_level=None)
    assert s.display == "infix"
    assert s.log_level == "INFO"


def test_invalid_values_are_rejected():
    with pytest.raises(ValidationError):
        Settings(log_level="chatty")
    with pytest.raises(ValidationError):
        Settings(display="tree")
    with pytest.raises(ValidationError):
        load_settings({"RATCALC_MAX_POWER_BITS": "0"})


def test_power_limits_follow_settings():
    limits = Settings(max_exponent=7, max_power_bits=99).power_limits
    assert limits.max_exponent == 7
    assert limits.max_bits == 99
