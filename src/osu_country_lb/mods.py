"""Mod combination matching for leaderboard filters.

A mod string such as ``"hdhr"`` or ``"HRHDCL"`` is read as consecutive
two-letter acronyms. The classic scoring marker ``CL`` never takes part in a
comparison, so ``HDHR`` matches a score played with ``HD HR CL``.
"""
from __future__ import annotations

from typing import FrozenSet, Iterable, List, Optional, Sequence

from .errors import InvalidModsError, NoMatchingScoresError
from .layout import MAX_ROWS
from .logging_utils import get_logger
from .models import ScoreRecord

logger = get_logger(__name__)

CLASSIC_MOD = "CL"
KNOWN_MODS: FrozenSet[str] = frozenset({"HD", "HR", "DT", "NC", "FL", "EZ", "HT", "SO", "NF"})


def normalize_mods(mod_string: str) -> FrozenSet[str]:
    """Split into two-letter chunks and drop the classic marker.

    An odd trailing character is kept as its own chunk; validation rejects it.
    """
    upper = mod_string.upper()
    chunks = (upper[i:i + 2] for i in range(0, len(upper), 2))
    return frozenset(chunk for chunk in chunks if chunk != CLASSIC_MOD)


def validate_mods(tokens: Iterable[str]) -> List[str]:
    return sorted(token for token in set(tokens) if token != CLASSIC_MOD and token not in KNOWN_MODS)


def score_mods(score: ScoreRecord) -> FrozenSet[str]:
    return normalize_mods("".join(score.mods))


def filter_scores(scores: Sequence[ScoreRecord], requested: FrozenSet[str]) -> List[ScoreRecord]:
    return [score for score in scores if score_mods(score) == requested]


def select_scores(
    scores: Sequence[ScoreRecord],
    mod_string: Optional[str] = None,
    limit: int = MAX_ROWS,
) -> List[ScoreRecord]:
    """Apply an optional mod filter, then cap the list to ``limit`` rows.

    Raises InvalidModsError for unknown acronyms and NoMatchingScoresError
    when the filter leaves nothing.
    """
    if not mod_string:
        return list(scores[:limit])

    requested = normalize_mods(mod_string)
    invalid = validate_mods(requested)
    if invalid:
        raise InvalidModsError(invalid)

    matched = filter_scores(scores, requested)
    if not matched:
        raise NoMatchingScoresError(requested)
    logger.debug("Mod filter %s kept %d of %d scores", "".join(sorted(requested)), len(matched), len(scores))
    return matched[:limit]
