# Area: Game
"""
buzzer_quiz._game.clue — Clues and clue fetching
================================================

Clues come from an async clue source as raw records. Records that
fail validation (missing text, negative value, or a question that
refers to a picture or sound the audience cannot see or hear) are
skipped and another clue is requested.
"""

from __future__ import annotations
import json
import logging
import random
from pathlib import Path
from typing import Any, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..collaborators import ClueSource

logger = logging.getLogger("buzzer_quiz.clue")

DEFAULT_MAX_TRIES = 5

# Phrases that mark a clue needing media the game does not have
MULTIMEDIA_PHRASES = ("seen here", "heard here")


class Clue(BaseModel):
    """A single clue: the question read aloud and its expected answer."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    question: str = Field(min_length=1)
    answer: str = Field(min_length=1)
    category: str = Field(min_length=1)
    value: int = Field(ge=0)
    airdate: Optional[str] = None

    @field_validator("category", mode="before")
    @classmethod
    def _category_title(cls, value: Any) -> Any:
        # Some sources nest the category as {"title": ...}
        if isinstance(value, Mapping):
            return value.get("title")
        return value

    @field_validator("question")
    @classmethod
    def _no_multimedia(cls, value: str) -> str:
        lowered = value.lower()
        for phrase in MULTIMEDIA_PHRASES:
            if phrase in lowered:
                raise ValueError(f"question needs multimedia ({phrase!r})")
        return value


def placeholder_clue(tries: int) -> Clue:
    """Clue shown when no valid clue could be fetched."""
    text = f"couldn't fetch clue after {tries} tries"
    return Clue(question=text, answer=text, category="error", value=0)


async def fetch_clue_with_retries(source: ClueSource, max_tries: int = DEFAULT_MAX_TRIES) -> Clue:
    """
    Request clues until one is valid.

    Invalid records are logged and retried. Exceptions raised by the
    source are not caught.

    Returns:
        The first valid clue, or a placeholder after ``max_tries`` invalid ones
    """
    for try_number in range(1, max_tries + 1):
        raw = await source()
        try:
            return Clue.model_validate(raw)
        except ValidationError as e:
            reasons = "; ".join(err["msg"] for err in e.errors())
            logger.warning(f"Invalid clue on try {try_number}/{max_tries}: {reasons}")

    logger.error(f"No valid clue after {max_tries} tries, using placeholder")
    return placeholder_clue(max_tries)


class JsonFileClueSource:
    """Async clue source returning a random record from a JSON array file."""

    def __init__(self, path: Union[str, Path], rng: Optional[random.Random] = None):
        self.path = Path(path)
        with open(self.path, encoding="utf-8") as f:
            records = json.load(f)
        if not isinstance(records, list) or not records:
            raise ValueError(f"{self.path} must contain a non-empty JSON array of clues")
        self._records: List[Any] = records
        self._rng = rng or random.Random()

    def __len__(self) -> int:
        return len(self._records)

    async def __call__(self) -> Any:
        return self._rng.choice(self._records)
