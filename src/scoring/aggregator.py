"""
Per-player aggregation of game outcomes.

Outcomes from every tournament are folded into one PlayerAccumulator per
player name. The fold runs synchronously after all tournaments have been
ingested, so nothing here is shared across tasks.
"""

from dataclasses import dataclass

from src.ingestion.pgn_parser import GameOutcome, ResultKind
from src.scoring.points import score_outcome
from src.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


@dataclass
class PlayerAccumulator:
    name: str
    score: float = 0.0
    waffle_wins: int = 0
    waffle_losses: int = 0
    games_played: int = 0

    def add(self, outcome: GameOutcome) -> None:
        self.score += score_outcome(outcome)
        self.games_played += 1
        if outcome.result_kind == ResultKind.FLAG_WIN:
            self.waffle_wins += 1
        elif outcome.result_kind == ResultKind.FLAG_LOSS:
            self.waffle_losses += 1


class PlayerTable:
    """Mapping from player name to accumulator, in first-seen order."""

    def __init__(self):
        self._players: dict[str, PlayerAccumulator] = {}

    def get_or_insert_default(self, name: str) -> PlayerAccumulator:
        player = self._players.get(name)
        if player is None:
            player = PlayerAccumulator(name=name)
            self._players[name] = player
        return player

    def players(self) -> list[PlayerAccumulator]:
        return list(self._players.values())

    def __getitem__(self, name: str) -> PlayerAccumulator:
        return self._players[name]

    def __iter__(self):
        return iter(self._players.values())

    def __len__(self) -> int:
        return len(self._players)


def aggregate(outcomes, table: PlayerTable | None = None) -> PlayerTable:
    """
    Fold outcomes into per-player totals.

    Args:
        outcomes: Iterable of GameOutcome across all tournaments
        table: Existing table to extend (default: a new empty table)

    Returns:
        The PlayerTable holding every player seen
    """
    table = table if table is not None else PlayerTable()
    count = 0
    for outcome in outcomes:
        table.get_or_insert_default(outcome.player_name).add(outcome)
        count += 1

    logger.debug(f"Aggregated {count} outcomes into {len(table)} players")
    return table
