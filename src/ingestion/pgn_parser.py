"""
PGN Result Extractor

Turns one PGN game block into a pair of per-player GameOutcome records,
one for each colour. Only the tags the scoring rules need are read:
player names, berserk flags, termination and result.
"""

import re
from dataclasses import dataclass, field
from enum import Enum

from src.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)

# --- Tag Patterns ---
# [White "PlayerName"] (required)
WHITE_RE = re.compile(r'\[White "(.+?)"\]')
BLACK_RE = re.compile(r'\[Black "(.+?)"\]')

# [WhiteBerserk "1"] is only present when the player went berserk
WHITE_BERSERK_RE = re.compile(r'\[WhiteBerserk "1"\]')
BLACK_BERSERK_RE = re.compile(r'\[BlackBerserk "1"\]')

# [Termination "Time forfeit"] / [Termination "Normal"]
TERMINATION_RE = re.compile(r'\[Termination "(.+?)"\]')

# [Result "1-0"] / [Result "0-1"] / [Result "1/2-1/2"] / [Result "*"]
RESULT_RE = re.compile(r'\[Result "(.*?)"\]')

WHITE_WINS = "1-0"
BLACK_WINS = "0-1"
TIME_FORFEIT = "time forfeit"


class GameParseError(ValueError):
    """Raised when a game block lacks a required tag"""
    pass


class ResultKind(str, Enum):
    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"
    FLAG_WIN = "flag_win"
    FLAG_LOSS = "flag_loss"


# Decisive results reached on the clock
FLAGGED = {
    ResultKind.WIN: ResultKind.FLAG_WIN,
    ResultKind.LOSS: ResultKind.FLAG_LOSS,
}


@dataclass(frozen=True)
class GameOutcome:
    player_name: str
    result_kind: ResultKind
    berserk: bool = False
    opponent_berserk: bool = False


@dataclass
class ExtractionResult:
    outcomes: list[GameOutcome] = field(default_factory=list)
    skipped: int = 0


def _required_tag(pattern: re.Pattern, block: str, tag: str) -> str:
    m = pattern.search(block)
    if not m:
        raise GameParseError(f"Missing [{tag}] tag in game block: {block[:80]!r}")
    return m.group(1)


def base_results(block: str) -> tuple[ResultKind, ResultKind]:
    """
    Decide (white, black) results before clock adjustments.

    The Result tag is authoritative when present; otherwise the block text
    is searched for a decisive marker. No marker means a draw.
    """
    m = RESULT_RE.search(block)
    marker = m.group(1) if m else block

    if WHITE_WINS in marker:
        return ResultKind.WIN, ResultKind.LOSS
    if BLACK_WINS in marker:
        return ResultKind.LOSS, ResultKind.WIN
    return ResultKind.DRAW, ResultKind.DRAW


def parse_game_block(block: str) -> tuple[GameOutcome, GameOutcome]:
    """
    Parse one PGN game block into (white outcome, black outcome).

    Args:
        block: Raw PGN text of a single game

    Returns:
        Tuple of two GameOutcome records, white first

    Raises:
        GameParseError: If the White or Black tag is missing
    """
    white = _required_tag(WHITE_RE, block, "White")
    black = _required_tag(BLACK_RE, block, "Black")
    white_berserk = bool(WHITE_BERSERK_RE.search(block))
    black_berserk = bool(BLACK_BERSERK_RE.search(block))

    m_term = TERMINATION_RE.search(block)
    termination = m_term.group(1) if m_term else ""

    white_res, black_res = base_results(block)

    # Draws never become flag outcomes
    if TIME_FORFEIT in termination.lower():
        white_res = FLAGGED.get(white_res, white_res)
        black_res = FLAGGED.get(black_res, black_res)

    return (
        GameOutcome(white, white_res, berserk=white_berserk, opponent_berserk=black_berserk),
        GameOutcome(black, black_res, berserk=black_berserk, opponent_berserk=white_berserk),
    )


def extract_outcomes(blocks) -> ExtractionResult:
    """
    Parse every block, dropping the ones that cannot be parsed.

    Args:
        blocks: Iterable of raw game blocks

    Returns:
        ExtractionResult with all outcomes (two per parsed game) and the
        number of skipped blocks
    """
    result = ExtractionResult()
    for block in blocks:
        try:
            result.outcomes.extend(parse_game_block(block))
        except GameParseError as e:
            result.skipped += 1
            logger.warning(f"Skipping game block: {e}")
    return result
