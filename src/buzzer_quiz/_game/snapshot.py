# Area: Game
"""
buzzer_quiz._game.snapshot — Game snapshot models
=================================================

Serializable snapshot of a game in progress, handed to whatever
persists or displays saved games.
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import List, Sequence

from pydantic import BaseModel, Field

from .team import Team


class TeamSnapshot(BaseModel):
    name: str
    money: int
    state: str
    money_at_end_of_each_round: List[int] = Field(default_factory=list)


class GameSnapshot(BaseModel):
    state_name: str
    elapsed_game_time_ms: int
    rounds_played: int
    teams: List[TeamSnapshot]
    taken_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def ranking(self) -> List[TeamSnapshot]:
        """Teams ordered by money, highest first."""
        return sorted(self.teams, key=lambda team: team.money, reverse=True)


def build_snapshot(
    state_name: str, teams: Sequence[Team], elapsed_game_time_ms: float, rounds_played: int
) -> GameSnapshot:
    return GameSnapshot(
        state_name=state_name,
        elapsed_game_time_ms=int(elapsed_game_time_ms),
        rounds_played=rounds_played,
        teams=[
            TeamSnapshot(
                name=team.name,
                money=team.money,
                state=team.state.value,
                money_at_end_of_each_round=list(team.statistics.money_at_end_of_each_round),
            )
            for team in teams
        ],
    )
