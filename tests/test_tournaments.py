"""
Tests for the tournament feed parser and resolver.
"""

import asyncio
from datetime import datetime, timedelta, timezone

from src.config import load_config
from src.ingestion.client import RetrievalError
from src.ingestion.tournaments import (
    Tournament,
    TournamentStatus,
    merge_tournament_ids,
    parse_tournament_feed,
    resolve_tournaments,
    tournament_from_record,
)

MANUAL = ("ZLfbxNcu", "Z2DuzTxs")


def config(manual=MANUAL):
    return load_config(manual_tournament_ids=manual)


class TestTournamentFromRecord:
    """Tests for tournament_from_record."""

    def test_epoch_millis(self, record):
        t = tournament_from_record(record("abcd1234", starts_at=1_700_000_000_000, finishesAt=1_700_003_600_000))
        assert t.starts_at == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
        assert t.finishes_at - t.starts_at == timedelta(hours=1)
        assert t.ends_at is None

    def test_iso_timestamp(self, record):
        t = tournament_from_record(record("abcd1234", starts_at="2024-03-01T18:00:00Z"))
        assert t.starts_at == datetime(2024, 3, 1, 18, tzinfo=timezone.utc)

    def test_numeric_status(self, record):
        assert tournament_from_record(record("a", status=10)).status == TournamentStatus.CREATED
        assert tournament_from_record(record("a", status=20)).status == TournamentStatus.STARTED
        assert tournament_from_record(record("a", status=30)).status == TournamentStatus.FINISHED

    def test_string_status(self, record):
        assert tournament_from_record(record("a", status="started")).status == TournamentStatus.STARTED

    def test_missing_status_defaults_to_created(self):
        t = tournament_from_record({"id": "a", "name": "n", "startsAt": 0})
        assert t.status == TournamentStatus.CREATED

    def test_malformed_records(self, record):
        assert tournament_from_record("not a dict") is None
        assert tournament_from_record({"name": "x", "startsAt": 0}) is None
        assert tournament_from_record({"id": "", "name": "x", "startsAt": 0}) is None
        assert tournament_from_record({"id": "a", "startsAt": 0}) is None
        assert tournament_from_record({"id": "a", "name": "x"}) is None
        assert tournament_from_record(record("a", starts_at="yesterday")) is None
        assert tournament_from_record(record("a", status="cancelled")) is None


class TestTournamentTiming:
    """Tests for end_time and is_past."""

    def test_end_time_prefers_finishes_at(self):
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        t = Tournament("a", "n", start, finishes_at=start + timedelta(hours=1), ends_at=start + timedelta(hours=2))
        assert t.end_time == start + timedelta(hours=1)

    def test_end_time_falls_back_to_start(self):
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert Tournament("a", "n", start).end_time == start

    def test_is_past(self):
        now = datetime(2024, 6, 1, tzinfo=timezone.utc)
        future = Tournament("a", "n", now + timedelta(days=1))
        past = Tournament("b", "n", now - timedelta(days=1))
        finished = Tournament("c", "n", now + timedelta(days=1), status=TournamentStatus.FINISHED)
        assert not future.is_past(now)
        assert past.is_past(now)
        assert finished.is_past(now)


class TestParseTournamentFeed:
    """Tests for parse_tournament_feed."""

    def test_ndjson(self, feed, record):
        text = feed([record("aaaaaaaa"), record("bbbbbbbb")])
        assert [t.id for t in parse_tournament_feed(text)] == ["aaaaaaaa", "bbbbbbbb"]

    def test_json_array(self, feed, record):
        text = feed([record("aaaaaaaa"), record("bbbbbbbb")], ndjson=False)
        assert [t.id for t in parse_tournament_feed(text)] == ["aaaaaaaa", "bbbbbbbb"]

    def test_single_object_line(self, feed, record):
        assert [t.id for t in parse_tournament_feed(feed([record("aaaaaaaa")]))] == ["aaaaaaaa"]

    def test_skips_malformed_entries(self, feed, record):
        text = feed([record("aaaaaaaa"), {"id": 5}, record("bbbbbbbb")]) + "{not json}\n"
        assert [t.id for t in parse_tournament_feed(text)] == ["aaaaaaaa", "bbbbbbbb"]

    def test_neither_form(self):
        assert parse_tournament_feed("<html>Too many requests</html>") == []
        assert parse_tournament_feed("42") == []

    def test_empty(self):
        assert parse_tournament_feed("") == []


class TestMergeTournamentIds:
    """Tests for merge_tournament_ids."""

    def test_overlap_is_deduplicated(self):
        ids = merge_tournament_ids(["A", "B"], ["B", "C", "A", "C"])
        assert ids == ["A", "B", "C"]
        assert len(ids) == len(set(ids))


class TestResolveTournaments:
    """Tests for resolve_tournaments."""

    def test_filters_by_series_name(self, fake_client, feed, record):
        client = fake_client(feed([
            record("aaaaaaaa", name="Weekly WAF-FLED 12 Arena"),
            record("bbbbbbbb", name="Weekly WAF-FLED Arena"),
            record("cccccccc", name="Daily Antichess Arena"),
            record("dddddddd", name="Weekly WAF-FLED 13 Arena Final"),
        ]))
        resolved = asyncio.run(resolve_tournaments(config(manual=()), client))
        assert resolved.ids == ["aaaaaaaa"]
        assert [t.name for t in resolved.tournaments] == ["Weekly WAF-FLED 12 Arena"]

    def test_trailing_newline_in_name_rejected(self, fake_client, feed, record):
        client = fake_client(feed([record("aaaaaaaa", name="Weekly WAF-FLED 7 Arena\n")]))
        resolved = asyncio.run(resolve_tournaments(config(manual=()), client))
        assert resolved.ids == []

    def test_union_with_manual_without_duplicates(self, fake_client, feed, record):
        client = fake_client(feed([
            record("ZLfbxNcu", name="Weekly WAF-FLED 1 Arena"),
            record("eeeeeeee", name="Weekly WAF-FLED 2 Arena"),
        ]))
        resolved = asyncio.run(resolve_tournaments(config(), client))
        assert sorted(resolved.ids) == sorted(["ZLfbxNcu", "Z2DuzTxs", "eeeeeeee"])
        assert len(resolved.ids) == len(set(resolved.ids))

    def test_feed_failure_yields_manual_list(self, fake_client):
        client = fake_client(feed_error=RetrievalError("connection refused"))
        resolved = asyncio.run(resolve_tournaments(config(), client))
        assert resolved.ids == list(MANUAL)
        assert resolved.tournaments == []

    def test_feed_failure_without_manual_list(self, fake_client):
        client = fake_client(feed_error=RetrievalError("connection refused"))
        resolved = asyncio.run(resolve_tournaments(config(manual=()), client))
        assert resolved.ids == []

    def test_garbage_feed_yields_manual_list(self, fake_client):
        resolved = asyncio.run(resolve_tournaments(config(), fake_client("<html></html>")))
        assert resolved.ids == list(MANUAL)
