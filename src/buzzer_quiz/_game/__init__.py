# Area: Game
"""
The quiz game built on the engine.

This package contains:
- Teams with buzz lockout and scoring
- Clues and clue fetching
- The Operator (game-phase hooks and guards)
- The game flow state table
- Game snapshots
"""

from .clue import Clue, JsonFileClueSource, fetch_clue_with_retries, placeholder_clue
from .flow import build_quiz_states
from .operator import Operator
from .snapshot import GameSnapshot, TeamSnapshot
from .team import Team, TeamState, TeamStatistics

__all__ = [
    "Clue",
    "JsonFileClueSource",
    "fetch_clue_with_retries",
    "placeholder_clue",
    "build_quiz_states",
    "Operator",
    "GameSnapshot",
    "TeamSnapshot",
    "Team",
    "TeamState",
    "TeamStatistics",
]
