"""
Game Ingestion

Retrieves each tournament's PGN export and cuts it into one text block per
game. Tournaments are fetched concurrently; a failure for one tournament
only empties that tournament's blocks.
"""

import asyncio
import re

from src.ingestion.client import RetrievalError
from src.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)

# Every game record opens with an [Event "..."] tag
GAME_START_RE = re.compile(r"\n(?=\[Event )")


def split_game_blocks(text: str) -> list[str]:
    """
    Split a concatenated PGN export into per-game blocks.

    The start-of-game marker stays attached to the block it opens.
    """
    if not text or not text.strip():
        return []
    return [block for block in GAME_START_RE.split(text.strip()) if block.strip()]


async def fetch_game_blocks(client, tournament_id: str) -> list[str]:
    """
    Fetch and split one tournament's games.

    Returns:
        Game blocks in export order; empty if the fetch fails
    """
    try:
        text = await client.fetch_tournament_games(tournament_id)
    except RetrievalError as e:
        logger.warning(f"Failed to fetch games for tournament {tournament_id}: {e}")
        return []

    blocks = split_game_blocks(text)
    logger.debug(f"Tournament {tournament_id}: {len(blocks)} games")
    return blocks


async def ingest_tournaments(client, tournament_ids) -> list[list[str]]:
    """
    Fetch every tournament concurrently and wait for all of them.

    Args:
        client: Object with an async fetch_tournament_games(id) -> str
        tournament_ids: IDs to ingest (already deduplicated)

    Returns:
        One list of game blocks per tournament, in the order of tournament_ids
    """
    tasks = [fetch_game_blocks(client, tid) for tid in tournament_ids]
    return list(await asyncio.gather(*tasks))
