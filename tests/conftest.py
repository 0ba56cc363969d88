"""Shared fixtures for the leaderboard tests."""

from io import BytesIO
from typing import Callable, List, Tuple

import pytest
from PIL import Image

from osu_country_lb.models import Beatmap, ScoreRecord, ScoreUser, Statistics


def png_bytes(size: Tuple[int, int] = (16, 16), color=(200, 30, 30, 255)) -> bytes:
    buffer = BytesIO()
    Image.new("RGBA", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_score(
    username: str = "player",
    mods: Tuple[str, ...] = (),
    rank: str = "S",
    total_score: int = 1234567,
    statistics: Statistics = Statistics(ok=3, meh=1, miss=0),
) -> ScoreRecord:
    return ScoreRecord(
        total_score=total_score,
        max_combo=512,
        rank=rank,
        accuracy=0.98765,
        ended_at="2024-03-07T10:00:00Z",
        user=ScoreUser(username=username, avatar_url=f"https://a.ppy.sh/{username}"),
        mods=mods,
        statistics=statistics,
    )


@pytest.fixture
def image_bytes() -> Callable[..., bytes]:
    return png_bytes


@pytest.fixture
def score_factory() -> Callable[..., ScoreRecord]:
    return make_score


@pytest.fixture
def beatmap() -> Beatmap:
    return Beatmap(
        artist="Artist",
        title="Title",
        version="Insane",
        beatmapset_id="39804",
        beatmap_id="129891",
        max_combo="1337",
        cover=b"",
    )


@pytest.fixture
def three_scores() -> List[ScoreRecord]:
    return [
        make_score("alpha", ("HD", "HR", "CL"), "X"),
        make_score("bravo", ("HD",), "A", statistics=Statistics()),
        make_score("charlie", (), "Z"),
    ]
