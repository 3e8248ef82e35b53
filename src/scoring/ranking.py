"""
Leaderboard and Achievement Podiums

The leaderboard orders players by score; the podiums pick the top players
for three achievement counters:
- Waffle Makers: most flag wins
- Most Waffled: most flag losses
- Most Committed: most games played

All orderings are stable, so ties keep the order in which players were
first seen. Ranks are positions, never shared.
"""

from dataclasses import dataclass
from enum import Enum

import pandas as pd

from src.config import PODIUM_SIZE
from src.scoring.aggregator import PlayerAccumulator

LEADERBOARD_COLUMNS = ['rank', 'player_name', 'score', 'score_delta', 'waffle_wins', 'waffle_losses', 'games_played']
PODIUM_COLUMNS = ['place', 'player_name', 'value']


class PodiumKey(str, Enum):
    WAFFLE_WINS = "waffle_wins"
    WAFFLE_LOSSES = "waffle_losses"
    GAMES_PLAYED = "games_played"


PODIUM_TITLES = {
    PodiumKey.WAFFLE_WINS: "Waffle Makers",
    PodiumKey.WAFFLE_LOSSES: "Most Waffled",
    PodiumKey.GAMES_PLAYED: "Most Committed",
}


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    player: PlayerAccumulator
    score_delta: float | None = None


@dataclass(frozen=True)
class PodiumEntry:
    place: int
    player: PlayerAccumulator
    value: int


def rank_leaderboard(players, previous_scores: dict[str, float] | None = None) -> list[LeaderboardEntry]:
    """
    Rank players by score, highest first.

    Args:
        players: Iterable of PlayerAccumulator in tie-break order
        previous_scores: Scores from an earlier run, by player name

    Returns:
        LeaderboardEntry list with ranks 1..N. When previous_scores is given,
        score_delta is the change since then (None for new players).
    """
    ordered = sorted(players, key=lambda p: p.score, reverse=True)

    entries = []
    for i, player in enumerate(ordered):
        delta = None
        if previous_scores is not None and player.name in previous_scores:
            delta = player.score - previous_scores[player.name]
        entries.append(LeaderboardEntry(rank=i + 1, player=player, score_delta=delta))
    return entries


def build_podium(players, key: PodiumKey | str, size: int = PODIUM_SIZE) -> list[PodiumEntry]:
    """Top `size` players by one counter (fewer if fewer players exist)."""
    attr = PodiumKey(key).value
    ordered = sorted(players, key=lambda p: getattr(p, attr), reverse=True)
    return [
        PodiumEntry(place=i + 1, player=player, value=getattr(player, attr))
        for i, player in enumerate(ordered[:size])
    ]


def build_podiums(players, size: int = PODIUM_SIZE) -> dict[PodiumKey, list[PodiumEntry]]:
    players = list(players)
    return {key: build_podium(players, key, size) for key in PodiumKey}


def score_snapshot(entries: list[LeaderboardEntry]) -> dict[str, float]:
    """Scores by player name, for computing the next run's deltas."""
    return {entry.player.name: entry.player.score for entry in entries}


def leaderboard_frame(entries: list[LeaderboardEntry]) -> pd.DataFrame:
    """Tabular view of the leaderboard for display and export."""
    rows = [
        {
            'rank': e.rank,
            'player_name': e.player.name,
            'score': e.player.score,
            'score_delta': e.score_delta,
            'waffle_wins': e.player.waffle_wins,
            'waffle_losses': e.player.waffle_losses,
            'games_played': e.player.games_played,
        }
        for e in entries
    ]
    return pd.DataFrame(rows, columns=LEADERBOARD_COLUMNS)


def podium_frame(entries: list[PodiumEntry]) -> pd.DataFrame:
    rows = [{'place': e.place, 'player_name': e.player.name, 'value': e.value} for e in entries]
    return pd.DataFrame(rows, columns=PODIUM_COLUMNS)
