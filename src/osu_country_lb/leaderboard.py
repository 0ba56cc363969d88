import functools
import math
import os
from dataclasses import dataclass
from io import BytesIO
from typing import Optional, Sequence, Tuple

from PIL import Image, ImageChops, ImageDraw, ImageFont, UnidentifiedImageError

from .errors import AvatarCountMismatchError, FontLoadError
from .formatting import (
    MEH_DOT,
    MISS_DOT,
    OK_DOT,
    WHITE,
    Color,
    format_accuracy,
    format_date,
    format_score_line,
    mods_display,
    rank_style,
)
from .layout import (
    AVATAR_RADIUS,
    CANVAS_WIDTH,
    JUDGMENT_DOT_RADIUS,
    JUDGMENT_DOT_RISE,
    JUDGMENT_TEXT_GAP,
    RowLayout,
    canvas_height,
    right_aligned_x,
    row_layout,
)
from .logging_utils import get_logger
from .models import Beatmap, ScoreRecord

logger = get_logger(__name__)

FONTS_DIR = os.path.join(os.path.dirname(__file__), "fonts")
REGULAR_FONT_FILE = "DejaVuSans.ttf"
BOLD_FONT_FILE = "DejaVuSans-Bold.ttf"
FONT_SIZE = 18
SMALL_FONT_SIZE = 14

BACKGROUND_COLOR = (0, 0, 0, 255)
BACKGROUND_OPACITY = 0.2


@dataclass(frozen=True)
class LeaderboardFonts:
    default: ImageFont.FreeTypeFont
    bold: ImageFont.FreeTypeFont
    small: ImageFont.FreeTypeFont


def _read_font(path: str) -> bytes:
    try:
        with open(path, "rb") as fp:
            return fp.read()
    except OSError as exc:
        raise FontLoadError(f"Failed to read font file {path}: {exc}") from exc


def _font(data: bytes, size: int) -> ImageFont.FreeTypeFont:
    # Loading from memory keeps Pillow from looking the file name up in system font dirs
    return ImageFont.truetype(BytesIO(data), size)


@functools.lru_cache(maxsize=None)
def load_fonts(fonts_dir: str = FONTS_DIR) -> LeaderboardFonts:
    """Load the regular and bold typefaces shipped with the package.

    The card cannot be drawn without them, so any failure is fatal.
    """
    regular = _read_font(os.path.join(fonts_dir, REGULAR_FONT_FILE))
    bold = _read_font(os.path.join(fonts_dir, BOLD_FONT_FILE))
    try:
        fonts = LeaderboardFonts(
            default=_font(regular, FONT_SIZE),
            bold=_font(bold, FONT_SIZE),
            small=_font(regular, SMALL_FONT_SIZE),
        )
    except OSError as exc:
        raise FontLoadError(f"Failed to load leaderboard fonts from {fonts_dir}: {exc}") from exc
    logger.debug("Loaded leaderboard fonts from %s", fonts_dir)
    return fonts


def decode_image(data: bytes) -> Optional[Image.Image]:
    """Decode raw image bytes, or return None when they are not an image."""
    if not data:
        return None
    try:
        with Image.open(BytesIO(data)) as image:
            return image.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        logger.debug("Could not decode %d image bytes: %s", len(data), exc)
        return None


def draw_background(canvas: Image.Image, cover: bytes) -> None:
    image = decode_image(cover)
    if image is None:
        logger.debug("No usable beatmap cover; skipping background wash")
        return

    canvas_w, canvas_h = canvas.size
    scale = max(canvas_w / image.width, canvas_h / image.height)
    scaled_w = max(1, math.ceil(image.width * scale))
    scaled_h = max(1, math.ceil(image.height * scale))
    scaled = image.resize((scaled_w, scaled_h), resample=Image.LANCZOS)

    # Center over the canvas; negative offsets crop the overflow
    wash = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    wash.paste(scaled, ((canvas_w - scaled_w) // 2, (canvas_h - scaled_h) // 2))
    alpha = wash.getchannel("A").point(lambda a: round(a * BACKGROUND_OPACITY))
    wash.putalpha(alpha)
    canvas.alpha_composite(wash)


def draw_avatar(canvas: Image.Image, avatar: bytes, box: Tuple[float, float, float, float]) -> None:
    image = decode_image(avatar)
    if image is None:
        logger.debug("Skipping undecodable avatar at %s", box)
        return
    x0, y0, x1, _ = (int(v) for v in box)
    size = x1 - x0
    resized = image.resize((size, size), resample=Image.LANCZOS)
    mask = Image.new("L", (size, size), 0)
    ImageDraw.Draw(mask).rounded_rectangle((0, 0, size - 1, size - 1), radius=AVATAR_RADIUS, fill=255)
    resized.putalpha(ImageChops.multiply(mask, resized.getchannel("A")))
    canvas.alpha_composite(resized, (x0, y0))


def draw_text(draw: ImageDraw.ImageDraw, x: float, y: float, text: str, font: ImageFont.FreeTypeFont, fill: Color = WHITE) -> None:
    # y is the baseline
    if text:
        draw.text((x, y), text, font=font, fill=fill, anchor="ls")


def draw_text_right(draw: ImageDraw.ImageDraw, anchor_x: float, y: float, text: str, font: ImageFont.FreeTypeFont, fill: Color = WHITE) -> None:
    width = draw.textlength(text, font=font)
    draw_text(draw, right_aligned_x(anchor_x, width), y, text, font, fill)


def draw_statistics(draw: ImageDraw.ImageDraw, font: ImageFont.FreeTypeFont, counts: Tuple[int, int, int], layout: RowLayout) -> None:
    y = layout.bottom_band
    for anchor, count, dot_color in zip(layout.judgment_anchors(), counts, (OK_DOT, MEH_DOT, MISS_DOT)):
        text = str(count)
        width = draw.textlength(text, font=font)
        draw_text(draw, anchor - width - JUDGMENT_TEXT_GAP, y, text, font)
        cy = y - JUDGMENT_DOT_RISE
        r = JUDGMENT_DOT_RADIUS
        draw.ellipse((anchor - r, cy - r, anchor + r, cy + r), fill=dot_color)


def draw_row(
    canvas: Image.Image,
    draw: ImageDraw.ImageDraw,
    fonts: LeaderboardFonts,
    layout: RowLayout,
    score: ScoreRecord,
    avatar: bytes,
    beatmap_max_combo: str,
) -> None:
    draw_avatar(canvas, avatar, layout.avatar_box)

    draw_text(draw, layout.left_x, layout.top_band, score.user.username, fonts.bold)
    draw_text_right(draw, layout.right_x, layout.top_band, mods_display(score.mods), fonts.default)

    draw_text(
        draw,
        layout.left_x,
        layout.middle_band,
        format_score_line(score.total_score, score.max_combo, beatmap_max_combo),
        fonts.default,
    )
    draw_text_right(draw, layout.right_x, layout.middle_band, format_accuracy(score.accuracy), fonts.default)

    draw_text_right(draw, layout.right_x, layout.bottom_band, format_date(score.ended_at), fonts.default)
    style = rank_style(score.rank)
    draw_text(draw, layout.left_x, layout.bottom_band, style.display, fonts.bold, style.color)
    draw_statistics(draw, fonts.small, score.statistics.counts(), layout)


def encode_png(canvas: Image.Image) -> bytes:
    buffer = BytesIO()
    canvas.save(buffer, format="PNG")
    return buffer.getvalue()


def generate_leaderboard(scores: Sequence[ScoreRecord], avatars: Sequence[bytes], beatmap: Beatmap) -> bytes:
    """Render the leaderboard card for ``scores`` and return it as PNG bytes.

    ``avatars[i]`` is the raw image for ``scores[i]``. Undecodable avatars and
    covers are left out of the picture; a missing font aborts the render.
    """
    if len(avatars) != len(scores):
        raise AvatarCountMismatchError(len(scores), len(avatars))
    fonts = load_fonts(FONTS_DIR)

    canvas = Image.new("RGBA", (CANVAS_WIDTH, canvas_height(len(scores))), BACKGROUND_COLOR)
    draw_background(canvas, beatmap.cover)

    draw = ImageDraw.Draw(canvas)
    for index, (score, avatar) in enumerate(zip(scores, avatars)):
        draw_row(canvas, draw, fonts, row_layout(index), score, avatar, beatmap.max_combo)

    data = encode_png(canvas)
    logger.info("Rendered leaderboard for beatmap %s: %d rows, %d bytes", beatmap.beatmap_id, len(scores), len(data))
    return data
