"""
Scoring and Ranking

Modules:
- points: Point value of a single game outcome
- aggregator: Per-player running totals
- ranking: Leaderboard and achievement podiums
"""


def __getattr__(name):
    """Lazy imports to avoid RuntimeWarning when running modules directly."""
    if name == "score_of":
        from src.scoring.points import score_of
        return score_of
    if name == "aggregate":
        from src.scoring.aggregator import aggregate
        return aggregate
    if name == "rank_leaderboard":
        from src.scoring.ranking import rank_leaderboard
        return rank_leaderboard
    if name == "build_podiums":
        from src.scoring.ranking import build_podiums
        return build_podiums
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
