from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Tuple

Color = Tuple[int, int, int]

WHITE: Color = (255, 255, 255)
LIGHT_GRAY: Color = (239, 239, 239)  # #efefef
GOLD: Color = (255, 226, 76)  # #ffe24c
GREEN: Color = (115, 229, 57)  # #73e539
BLUE: Color = (57, 143, 230)  # #398fe6
PURPLE: Color = (186, 57, 230)  # #ba39e6
RED: Color = (230, 57, 57)  # #e63939

# Judgment dots use pure channel colors
OK_DOT: Color = (0, 255, 0)
MEH_DOT: Color = (255, 255, 0)
MISS_DOT: Color = (255, 0, 0)


@dataclass(frozen=True)
class RankStyle:
    display: str
    color: Color


RANK_STYLES: Dict[str, RankStyle] = {
    "XH": RankStyle("SS", LIGHT_GRAY),
    "X": RankStyle("SS", GOLD),
    "SH": RankStyle("S", LIGHT_GRAY),
    "S": RankStyle("S", GOLD),
    "A": RankStyle("A", GREEN),
    "B": RankStyle("B", BLUE),
    "C": RankStyle("C", PURPLE),
    "D": RankStyle("D", RED),
}
UNKNOWN_RANK = RankStyle("?", RED)


def rank_style(code: str) -> RankStyle:
    return RANK_STYLES.get(code, UNKNOWN_RANK)


def group_digits(value: int) -> str:
    digits = str(value)
    head = len(digits) % 3 or 3
    groups = [digits[:head]]
    groups.extend(digits[i:i + 3] for i in range(head, len(digits), 3))
    return ",".join(groups)


def format_score_line(total_score: int, combo: int, max_combo: str) -> str:
    return f"{group_digits(total_score)} ({combo}x / {max_combo}x)"


def format_accuracy(accuracy: float) -> str:
    return f"{accuracy * 100:.2f}%"


def _strip_leading_zero(part: str) -> str:
    if len(part) > 1 and part.startswith("0"):
        return part[1:]
    return part


def format_date(ended_at: str) -> str:
    """Turn ``2024-03-07T10:00:00Z`` into ``7. 3. 2024``.

    Anything that does not look like ``YYYY-MM-DDT...`` is returned as-is.
    """
    date, sep, _ = ended_at.partition("T")
    parts = date.split("-")
    if not sep or len(parts) != 3:
        return ended_at
    year, month, day = parts
    return f"{_strip_leading_zero(day)}. {_strip_leading_zero(month)}. {year}"


def mods_display(mods: Iterable[str]) -> str:
    return "".join(mods)
