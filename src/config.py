"""
Central configuration for the WAF-FLED standings pipeline.

All shared constants and configuration values should be defined here
to avoid duplication and ensure consistency across modules. Code that
needs them at runtime receives an immutable SeriesConfig built by
load_config() instead of reading the module constants directly.
"""

import re
from dataclasses import dataclass
from pathlib import Path

# --- Project Paths ---
PROJECT_ROOT = Path(__file__).parent.parent
DATA_FOLDER = PROJECT_ROOT / "data"
EXPORT_FOLDER = DATA_FOLDER / "processed"

# --- Lichess Configuration ---
LICHESS_API_BASE = "https://lichess.org"
TEAM_SLUG = "world-antichess-front"

# Only team tournaments whose name fully matches this pattern belong to the series
NAME_PATTERN = r"^Weekly WAF-FLED \d+ Arena$"

# Tournaments that count even though the team feed does not list them
MANUAL_TOURNAMENTS = (
    "ZLfbxNcu",
    "Z2DuzTxs",
    "O4X6VErR",
    "HVMkt9VQ",
    "NmRTO3Nr",
    "wIUsm1em",
)

# Lichess tournament IDs are 8 alphanumeric characters
TOURNAMENT_ID_RE = re.compile(r"^[A-Za-z0-9]{8}$")

# --- Refresh Configuration ---
AUTO_REFRESH_SECONDS = 5 * 60  # 5 minutes

# --- Ranking Configuration ---
PODIUM_SIZE = 3

# Exports older than the newest one are removed
EXPORT_PATTERN = "leaderboard_*.csv"


class ConfigurationError(Exception):
    """Raised when the static configuration is unusable"""
    pass


@dataclass(frozen=True)
class SeriesConfig:
    """Immutable configuration value passed into the resolver and pipeline."""
    team_slug: str
    name_pattern: re.Pattern
    manual_tournament_ids: tuple[str, ...]
    refresh_seconds: int
    api_base: str
    podium_size: int = PODIUM_SIZE


def load_config(
    team_slug: str = TEAM_SLUG,
    name_pattern: str = NAME_PATTERN,
    manual_tournament_ids=MANUAL_TOURNAMENTS,
    refresh_seconds: int = AUTO_REFRESH_SECONDS,
    api_base: str = LICHESS_API_BASE,
    podium_size: int = PODIUM_SIZE,
) -> SeriesConfig:
    """
    Build and validate the series configuration.

    Args:
        team_slug: Lichess team whose tournament feed is scanned
        name_pattern: Regex a tournament name must fully match
        manual_tournament_ids: Tournament IDs always included
        refresh_seconds: Interval between pipeline runs in loop mode
        api_base: Base URL of the Lichess API
        podium_size: Number of places on each achievement podium

    Returns:
        Validated SeriesConfig

    Raises:
        ConfigurationError: If any value is malformed
    """
    if not team_slug or not team_slug.strip():
        raise ConfigurationError("Team slug must not be empty")

    try:
        compiled = re.compile(name_pattern)
    except re.error as e:
        raise ConfigurationError(f"Invalid tournament name pattern '{name_pattern}': {e}")

    bad_ids = [tid for tid in manual_tournament_ids if not isinstance(tid, str) or not TOURNAMENT_ID_RE.match(tid)]
    if bad_ids:
        raise ConfigurationError(f"Malformed manual tournament IDs: {bad_ids}")

    if refresh_seconds <= 0:
        raise ConfigurationError(f"Refresh interval must be positive, got {refresh_seconds}")

    if podium_size < 1:
        raise ConfigurationError(f"Podium size must be at least 1, got {podium_size}")

    return SeriesConfig(
        team_slug=team_slug.strip(),
        name_pattern=compiled,
        manual_tournament_ids=tuple(manual_tournament_ids),
        refresh_seconds=refresh_seconds,
        api_base=api_base.rstrip("/"),
        podium_size=podium_size,
    )
