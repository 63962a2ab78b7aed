# Area: Shared
"""
buzzer_quiz.settings — Game settings
====================================

Settings are read from an optional JSON config file and then
overridden by environment variables named BUZZER_QUIZ_<FIELD>, which
may also come from a .env file.

Example:
    BUZZER_QUIZ_TEAM_COUNT=3
    BUZZER_QUIZ_TIMEOUT_WAIT_FOR_BUZZES_MS=7000
"""

from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger("buzzer_quiz.settings")

ENV_PREFIX = "BUZZER_QUIZ_"


class Settings(BaseModel):
    """Tunable game parameters. Durations are in milliseconds."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    display_duration_category_ms: int = Field(3000, ge=1)
    display_duration_answer_ms: int = Field(5000, ge=1)
    timeout_wait_for_buzzes_ms: int = Field(5000, ge=1)
    timeout_wait_for_answer_ms: int = Field(5000, ge=1)
    duration_lockout_ms: int = Field(250, ge=1)
    wrong_answer_penalty_multiplier: float = Field(0.5, ge=0)
    allow_multiple_answers_to_same_question: bool = True
    team_money_when_game_should_end: int = Field(10000, ge=1)
    game_time_limit_ms: int = Field(600000, ge=1)
    team_count: int = Field(4, ge=1, le=9)
    clue_fetch_max_tries: int = Field(5, ge=1)
    log_file: str = "buzzer_quiz.log"


def env_overrides(environ: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Collect BUZZER_QUIZ_* variables that name a settings field."""
    environ = os.environ if environ is None else environ
    overrides = {}
    for field_name in Settings.model_fields:
        env_key = ENV_PREFIX + field_name.upper()
        if env_key in environ:
            overrides[field_name] = environ[env_key]
    return overrides


def load_settings(
    config_path: Optional[Union[str, Path]] = None,
    env_file: Optional[Union[str, Path]] = None,
) -> Settings:
    """
    Load settings from a JSON file and the environment.

    Args:
        config_path: JSON object with settings fields; skipped when missing
        env_file: .env file to load; searched from the working directory when None

    Raises:
        pydantic.ValidationError: If a value is out of range or unknown
        json.JSONDecodeError: If the config file is not valid JSON
    """
    dotenv_path = str(env_file) if env_file is not None else find_dotenv(usecwd=True)
    if dotenv_path:
        load_dotenv(dotenv_path)

    data: Dict[str, Any] = {}
    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        else:
            logger.warning(f"Config file not found: {path}")

    data.update(env_overrides())
    return Settings.model_validate(data)
