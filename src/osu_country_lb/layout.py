"""Pixel geometry of the leaderboard card.

Every row is ROW_HEIGHT tall and stacked below a PADDING strip. Text is
positioned on three horizontal bands per row; right-aligned text is placed by
subtracting its measured width from the right anchor at draw time.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

PADDING = 15
CANVAS_WIDTH = 600
ROW_HEIGHT = 90
MAX_ROWS = 7

AVATAR_SIZE = 70
AVATAR_RADIUS = 10
TEXT_OFFSET_X = 80

TOP_BAND = 0.2
MIDDLE_BAND = 0.5
BOTTOM_BAND = 0.75

# Judgment count groups (ok, meh, miss) relative to the row center
JUDGMENT_OFFSETS: Tuple[int, int, int] = (-40, 10, 60)
JUDGMENT_TEXT_GAP = 10
JUDGMENT_DOT_RADIUS = 4.0
JUDGMENT_DOT_RISE = 4.2


@dataclass(frozen=True)
class RowLayout:
    index: int
    top: float
    avatar_box: Tuple[float, float, float, float]
    left_x: float
    right_x: float
    center_x: float
    top_band: float
    middle_band: float
    bottom_band: float

    def judgment_anchors(self) -> Tuple[float, float, float]:
        ok, meh, miss = JUDGMENT_OFFSETS
        return (self.center_x + ok, self.center_x + meh, self.center_x + miss)


def canvas_height(row_count: int) -> int:
    if row_count < 0:
        raise ValueError(f"row_count must be >= 0, got {row_count}")
    return PADDING + ROW_HEIGHT * row_count


def row_layout(index: int) -> RowLayout:
    top = PADDING + index * ROW_HEIGHT
    return RowLayout(
        index=index,
        top=top,
        avatar_box=(PADDING, top, PADDING + AVATAR_SIZE, top + AVATAR_SIZE),
        left_x=PADDING + TEXT_OFFSET_X,
        right_x=CANVAS_WIDTH - PADDING,
        center_x=CANVAS_WIDTH / 2,
        top_band=top + ROW_HEIGHT * TOP_BAND,
        middle_band=top + ROW_HEIGHT * MIDDLE_BAND,
        bottom_band=top + ROW_HEIGHT * BOTTOM_BAND,
    )


def right_aligned_x(anchor: float, text_width: float) -> float:
    return anchor - text_width
