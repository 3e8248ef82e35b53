"""
Point values for game outcomes.

Berserk raises the reward of a win but never softens a loss. A flag loss
costs more when the opponent went berserk; the loser's own berserk status
does not matter.
"""

from src.ingestion.pgn_parser import GameOutcome, ResultKind


def score_of(result_kind, berserk: bool, opponent_berserk: bool) -> float:
    """Points for one outcome; unrecognised kinds score 0."""
    try:
        kind = ResultKind(result_kind)
    except (ValueError, TypeError):
        return 0.0

    if kind == ResultKind.WIN:
        return 1.5 if berserk else 1.0
    if kind == ResultKind.LOSS:
        return -1.0
    if kind == ResultKind.FLAG_WIN:
        return 3.0 if berserk else 2.0
    if kind == ResultKind.FLAG_LOSS:
        return -3.0 if opponent_berserk else -2.0
    return 0.0


def score_outcome(outcome: GameOutcome) -> float:
    return score_of(outcome.result_kind, outcome.berserk, outcome.opponent_berserk)
