"""
WAF-FLED Standings Pipeline

Resolves the series' tournaments, fetches every tournament's games
concurrently, then scores and ranks all players in one synchronous pass.
Each run starts from scratch; only the previous run's scores are kept, to
report how much each player moved.

Usage:
    python -m src.pipeline --once
    python -m src.pipeline --interval 300 --export data/processed
    OR
    from src.pipeline import run_once
    standings = run_once()
"""

import sys
from pathlib import Path

# Enable both `python src/pipeline.py` and `python -m src.pipeline` execution modes.
# This ensures src.config imports work regardless of how the script is invoked.
_project_root = str(Path(__file__).parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

import argparse
import asyncio
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone

from src.config import EXPORT_FOLDER, EXPORT_PATTERN, ConfigurationError, SeriesConfig, load_config
from src.ingestion.client import LichessClient
from src.ingestion.games import ingest_tournaments
from src.ingestion.pgn_parser import extract_outcomes
from src.ingestion.tournaments import Tournament, resolve_tournaments
from src.scoring.aggregator import aggregate
from src.scoring.ranking import (
    LeaderboardEntry,
    PodiumEntry,
    PodiumKey,
    build_podiums,
    leaderboard_frame,
    rank_leaderboard,
    score_snapshot,
)
from src.utils import atomic_write_csv, cleanup_old_files, setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


@dataclass
class Standings:
    """Everything the presentation layer needs from one run."""
    tournaments: list[Tournament] = field(default_factory=list)
    tournament_ids: list[str] = field(default_factory=list)
    leaderboard: list[LeaderboardEntry] = field(default_factory=list)
    podiums: dict[PodiumKey, list[PodiumEntry]] = field(default_factory=dict)
    games: int = 0
    skipped_games: int = 0
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def scores(self) -> dict[str, float]:
        return score_snapshot(self.leaderboard)


async def compute_standings(
    config: SeriesConfig,
    client,
    previous_scores: dict[str, float] | None = None,
) -> Standings:
    """
    Run the full pipeline against a retrieval client.

    Args:
        config: Series configuration
        client: Object providing async fetch_team_tournaments(slug) and
                fetch_tournament_games(id), both returning text
        previous_scores: Scores of the previous run, for score deltas

    Returns:
        Standings for all resolved tournaments
    """
    resolved = await resolve_tournaments(config, client)
    per_tournament = await ingest_tournaments(client, resolved.ids)

    # Everything below runs after the join
    blocks = [block for tournament_blocks in per_tournament for block in tournament_blocks]
    extraction = extract_outcomes(blocks)
    table = aggregate(extraction.outcomes)

    leaderboard = rank_leaderboard(table.players(), previous_scores)
    podiums = build_podiums(table.players(), size=config.podium_size)

    logger.info("Run summary:")
    logger.info(f"  Tournaments: {len(resolved.ids)} ({sum(1 for b in per_tournament if b)} with games)")
    logger.info(f"  Games: {len(blocks)} ({extraction.skipped} skipped)")
    logger.info(f"  Players: {len(table)}")

    return Standings(
        tournaments=resolved.tournaments,
        tournament_ids=resolved.ids,
        leaderboard=leaderboard,
        podiums=podiums,
        games=len(blocks) - extraction.skipped,
        skipped_games=extraction.skipped,
    )


async def _run_with_client(config: SeriesConfig, previous_scores) -> Standings:
    async with LichessClient(config.api_base) as client:
        return await compute_standings(config, client, previous_scores)


def run_once(config: SeriesConfig | None = None, previous_scores: dict[str, float] | None = None) -> Standings:
    """Open a Lichess session, compute standings, close the session."""
    config = config or load_config()
    return asyncio.run(_run_with_client(config, previous_scores))


def export_leaderboard(standings: Standings, folder: Path = EXPORT_FOLDER) -> Path:
    """
    Write the leaderboard to a timestamped CSV and drop older exports.

    Returns:
        Path to the new CSV file
    """
    stamp = standings.generated_at.strftime('%Y%m%d_%H%M%S')
    path = folder / f"leaderboard_{stamp}.csv"
    atomic_write_csv(leaderboard_frame(standings.leaderboard), path, index=False)
    cleanup_old_files(EXPORT_PATTERN, keep_file=path, folder=folder)
    logger.info(f"Exported leaderboard: {path}")
    return path


def log_standings(standings: Standings, top: int = 10) -> None:
    df = leaderboard_frame(standings.leaderboard)
    if df.empty:
        logger.info("No games found yet")
        return
    logger.info(f"Top {top} players:")
    logger.info("\n" + df.head(top).to_string(index=False))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compute WAF-FLED leaderboard and achievements")
    parser.add_argument("--once", action="store_true", help="Run a single refresh and exit")
    parser.add_argument("--interval", type=int, default=None, help="Seconds between refreshes (default: config)")
    parser.add_argument("--export", type=Path, default=None, help="Folder to write leaderboard CSV exports to")
    return parser


def main(argv=None) -> int:
    """CLI entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        if args.interval is not None:
            config = load_config(refresh_seconds=args.interval)
        else:
            config = load_config()
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    logger.info("=" * 60)
    logger.info(f"WAF-FLED standings for team '{config.team_slug}'")
    logger.info("=" * 60)

    previous_scores = None
    while True:
        standings = run_once(config, previous_scores)
        log_standings(standings)
        if args.export is not None:
            export_leaderboard(standings, args.export)

        if args.once:
            return 0

        previous_scores = standings.scores
        logger.info(f"Next refresh in {config.refresh_seconds}s")
        time.sleep(config.refresh_seconds)


if __name__ == "__main__":
    sys.exit(main())
