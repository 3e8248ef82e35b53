"""
Data Ingestion

Modules:
- client: Async Lichess API client
- tournaments: Resolve the series' tournament IDs
- games: Fetch and split tournament PGN exports
- pgn_parser: Extract per-player outcomes from PGN game blocks
"""


def __getattr__(name):
    """Lazy imports to avoid RuntimeWarning when running modules directly."""
    if name == "LichessClient":
        from src.ingestion.client import LichessClient
        return LichessClient
    if name == "resolve_tournaments":
        from src.ingestion.tournaments import resolve_tournaments
        return resolve_tournaments
    if name == "ingest_tournaments":
        from src.ingestion.games import ingest_tournaments
        return ingest_tournaments
    if name == "extract_outcomes":
        from src.ingestion.pgn_parser import extract_outcomes
        return extract_outcomes
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
