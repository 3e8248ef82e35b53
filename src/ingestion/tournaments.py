"""
Tournament Resolver

Builds the set of tournament IDs the standings are computed from: the
manual allow-list from the configuration plus every team tournament whose
name matches the series pattern.

The team feed is normally newline-delimited JSON but some deployments
return a single JSON array, so both forms are accepted. A feed that cannot
be read at all never fails the run; the manual list is used on its own.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from src.config import SeriesConfig
from src.ingestion.client import RetrievalError
from src.utils import parse_timestamp, setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)

# Lichess numeric status codes
STATUS_CODES = {10: "created", 20: "started", 30: "finished"}


class TournamentStatus(str, Enum):
    CREATED = "created"
    STARTED = "started"
    FINISHED = "finished"

    @classmethod
    def parse(cls, value) -> "TournamentStatus":
        """Accept the string form or the Lichess numeric code (>= 30 is finished)."""
        if value is None:
            return cls.CREATED
        if isinstance(value, int) and not isinstance(value, bool):
            if value >= 30:
                return cls.FINISHED
            return cls(STATUS_CODES.get(value, "created"))
        return cls(str(value).strip().lower())


@dataclass(frozen=True)
class Tournament:
    id: str
    name: str
    starts_at: datetime
    finishes_at: datetime | None = None
    ends_at: datetime | None = None
    status: TournamentStatus = TournamentStatus.CREATED

    @property
    def end_time(self) -> datetime:
        return self.finishes_at or self.ends_at or self.starts_at

    def is_past(self, now: datetime | None = None) -> bool:
        """True once the tournament is finished or its end time has passed."""
        now = now or datetime.now(timezone.utc)
        return self.status == TournamentStatus.FINISHED or self.end_time < now


@dataclass
class ResolvedTournaments:
    """Tournaments discovered in the feed plus the deduplicated ingestion IDs."""
    tournaments: list[Tournament] = field(default_factory=list)
    ids: list[str] = field(default_factory=list)


def tournament_from_record(record) -> Tournament | None:
    """
    Build a Tournament from one feed record.

    Returns:
        Tournament, or None if the record is malformed
    """
    if not isinstance(record, dict):
        return None

    tid = record.get("id")
    name = record.get("name")
    if not isinstance(tid, str) or not tid or not isinstance(name, str) or not name:
        return None

    try:
        starts_at = parse_timestamp(record.get("startsAt"))
        if starts_at is None:
            return None
        return Tournament(
            id=tid,
            name=name,
            starts_at=starts_at,
            finishes_at=parse_timestamp(record.get("finishesAt")),
            ends_at=parse_timestamp(record.get("endsAt")),
            status=TournamentStatus.parse(record.get("status")),
        )
    except (ValueError, TypeError, OverflowError, OSError):
        return None


def _decode_records(text: str) -> list | None:
    """Decode a JSON array or NDJSON body; None if it is neither."""
    try:
        decoded = json.loads(text)
    except json.JSONDecodeError:
        decoded = None
    else:
        if isinstance(decoded, list):
            return decoded
        if isinstance(decoded, dict):
            return [decoded]
        return None

    records = []
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            records.append(json.loads(line))
        except json.JSONDecodeError:
            logger.debug(f"Skipping undecodable feed line: {line[:80]!r}")
    return records or None


def parse_tournament_feed(text: str) -> list[Tournament]:
    """
    Parse a team tournament feed into Tournament records.

    Args:
        text: Raw feed body (JSON array or newline-delimited JSON)

    Returns:
        List of well-formed tournaments in feed order (empty if the body is
        in neither form)
    """
    if not text or not text.strip():
        return []

    records = _decode_records(text.strip())
    if records is None:
        logger.warning("Tournament feed is neither a JSON array nor newline-delimited JSON")
        return []

    tournaments = []
    for record in records:
        tournament = tournament_from_record(record)
        if tournament is None:
            logger.debug(f"Skipping malformed feed entry: {str(record)[:80]}")
            continue
        tournaments.append(tournament)
    return tournaments


def merge_tournament_ids(manual_ids, discovered_ids) -> list[str]:
    """Union of both ID lists, manual first, first occurrence wins."""
    return list(dict.fromkeys([*manual_ids, *discovered_ids]))


async def resolve_tournaments(config: SeriesConfig, client) -> ResolvedTournaments:
    """
    Resolve the tournaments of the series.

    Args:
        config: Series configuration (pattern, team, manual IDs)
        client: Object with an async fetch_team_tournaments(team_slug) -> str

    Returns:
        ResolvedTournaments with the matching feed tournaments and the
        deduplicated ID list to ingest. Never raises for feed problems.
    """
    try:
        text = await client.fetch_team_tournaments(config.team_slug)
    except RetrievalError as e:
        logger.warning(f"Failed to fetch tournaments for team '{config.team_slug}': {e}")
        text = ""

    matching = [t for t in parse_tournament_feed(text) if config.name_pattern.fullmatch(t.name)]
    ids = merge_tournament_ids(config.manual_tournament_ids, (t.id for t in matching))

    logger.info(
        f"Resolved {len(ids)} tournaments "
        f"({len(config.manual_tournament_ids)} manual, {len(matching)} from team feed)"
    )
    return ResolvedTournaments(tournaments=matching, ids=ids)
