"""
Lichess API Client

Thin async wrapper over aiohttp for the two calls the pipeline needs:
the team tournament feed and a tournament's PGN game export. Both return
raw text; every transport or HTTP failure is raised as RetrievalError so
callers can degrade to an empty result.

Usage:
    async with LichessClient() as client:
        feed = await client.fetch_team_tournaments("world-antichess-front")
        pgn = await client.fetch_tournament_games("ZLfbxNcu")
"""

import asyncio

import aiohttp

from src.config import LICHESS_API_BASE
from src.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


class RetrievalError(Exception):
    """Raised when a Lichess endpoint cannot be read"""
    pass


def build_headers(accept: str) -> dict[str, str]:
    return {
        "Accept": accept,
        "User-Agent": "waf-fled-standings/1.0",
    }


class LichessClient:
    """
    Async text client for the Lichess public API.

    A session is created on __aenter__ unless one is injected; an injected
    session is left open on exit since the caller owns it.
    """

    def __init__(self, base_url: str = LICHESS_API_BASE, session: aiohttp.ClientSession | None = None):
        self.base_url = base_url.rstrip("/")
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "LichessClient":
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        if self._owns_session:
            self._session = None

    async def fetch_text(self, path: str, accept: str) -> str:
        """
        GET a path relative to the API base and return the body as text.

        Raises:
            RetrievalError: On client errors, timeouts, non-2xx responses or undecodable bodies
        """
        if self._session is None:
            raise RetrievalError("Client session is not open; use 'async with LichessClient()'")

        url = f"{self.base_url}{path}"
        try:
            async with self._session.get(url, headers=build_headers(accept)) as resp:
                if resp.status >= 400:
                    raise RetrievalError(f"GET {url} returned HTTP {resp.status}")
                text = await resp.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise RetrievalError(f"GET {url} failed: {type(e).__name__}: {e}") from e
        except (UnicodeDecodeError, LookupError) as e:
            # Undecodable body or an unknown charset in Content-Type
            raise RetrievalError(f"GET {url} body could not be decoded: {type(e).__name__}: {e}") from e

        logger.debug(f"GET {url}: {len(text)} chars")
        return text

    async def fetch_team_tournaments(self, team_slug: str) -> str:
        """Team tournament feed (newline-delimited JSON, or a JSON array)."""
        return await self.fetch_text(f"/api/team/{team_slug}/tournaments", "application/x-ndjson")

    async def fetch_tournament_games(self, tournament_id: str) -> str:
        """Concatenated PGN export of every game played in a tournament."""
        return await self.fetch_text(f"/api/tournament/{tournament_id}/games", "application/x-chess-pgn")
