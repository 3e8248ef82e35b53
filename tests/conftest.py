"""
Shared fixtures: PGN game builder and an in-memory Lichess client.
"""

import json

import pytest

from src.ingestion.client import RetrievalError


def make_pgn(white="Alice", black="Bob", result="1-0", termination="Normal",
             white_berserk=False, black_berserk=False, event="Weekly WAF-FLED 12 Arena"):
    """Build a PGN game block the way Lichess exports it."""
    tags = [f'[Event "{event}"]', '[Site "https://lichess.org/abcdEFGH"]']
    if white is not None:
        tags.append(f'[White "{white}"]')
    if black is not None:
        tags.append(f'[Black "{black}"]')
    if result is not None:
        tags.append(f'[Result "{result}"]')
    tags.append('[WhiteElo "1500"]')
    tags.append('[BlackElo "1500"]')
    tags.append('[Variant "Antichess"]')
    if white_berserk:
        tags.append('[WhiteBerserk "1"]')
    if black_berserk:
        tags.append('[BlackBerserk "1"]')
    if termination is not None:
        tags.append(f'[Termination "{termination}"]')
    moves = f"1. e3 b5 2. Bxb5 {result or ''}".strip()
    return "\n".join(tags) + "\n\n" + moves + "\n"


def make_feed(records, ndjson=True):
    if ndjson:
        return "\n".join(json.dumps(r) for r in records) + "\n"
    return json.dumps(records)


def tournament_record(tid, name="Weekly WAF-FLED 1 Arena", starts_at=1_700_000_000_000, status=30, **extra):
    record = {"id": tid, "name": name, "startsAt": starts_at, "status": status}
    record.update(extra)
    return record


class FakeLichessClient:
    """
    In-memory stand-in for LichessClient.

    Values in `games` may be text, or an exception instance to raise.
    """

    def __init__(self, feed="", games=None, feed_error=None):
        self.feed = feed
        self.games = games or {}
        self.feed_error = feed_error
        self.requested = []

    async def fetch_team_tournaments(self, team_slug):
        if self.feed_error is not None:
            raise self.feed_error
        return self.feed

    async def fetch_tournament_games(self, tournament_id):
        self.requested.append(tournament_id)
        value = self.games.get(tournament_id, "")
        if isinstance(value, Exception):
            raise value
        return value


@pytest.fixture
def pgn():
    return make_pgn


@pytest.fixture
def feed():
    return make_feed


@pytest.fixture
def record():
    return tournament_record


@pytest.fixture
def fake_client():
    return FakeLichessClient


@pytest.fixture
def retrieval_error():
    return RetrievalError("HTTP 500")
