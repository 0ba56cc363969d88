from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class Statistics:
    ok: Optional[int] = None
    meh: Optional[int] = None
    miss: Optional[int] = None

    def counts(self) -> Tuple[int, int, int]:
        """Judgment counts with unreported categories as 0."""
        return (self.ok or 0, self.meh or 0, self.miss or 0)


@dataclass(frozen=True)
class ScoreUser:
    username: str
    avatar_url: str = ""


@dataclass(frozen=True)
class ScoreRecord:
    total_score: int
    max_combo: int
    rank: str
    accuracy: float
    ended_at: str
    user: ScoreUser
    mods: Tuple[str, ...] = ()
    statistics: Statistics = field(default_factory=Statistics)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ScoreRecord":
        stats = data.get("statistics") or {}
        user = data.get("user") or {}
        return cls(
            total_score=int(data.get("legacy_total_score") or 0),
            max_combo=int(data.get("max_combo") or 0),
            rank=str(data.get("rank") or ""),
            accuracy=float(data.get("accuracy") or 0.0),
            ended_at=str(data.get("ended_at") or ""),
            user=ScoreUser(
                username=str(user.get("username") or "Unknown"),
                avatar_url=str(user.get("avatar_url") or ""),
            ),
            mods=tuple(str(m.get("acronym", "")) for m in data.get("mods") or []),
            statistics=Statistics(
                ok=stats.get("ok"),
                meh=stats.get("meh"),
                miss=stats.get("miss"),
            ),
        )


@dataclass(frozen=True)
class Beatmap:
    artist: str
    title: str
    version: str
    beatmapset_id: str
    beatmap_id: str
    max_combo: str
    cover: bytes = b""

    @classmethod
    def from_api(cls, data: Dict[str, Any], cover: bytes = b"") -> "Beatmap":
        # The v1 API returns every field as a string, max_combo included
        return cls(
            artist=str(data.get("artist", "")),
            title=str(data.get("title", "")),
            version=str(data.get("version", "")),
            beatmapset_id=str(data.get("beatmapset_id", "")),
            beatmap_id=str(data.get("beatmap_id", "")),
            max_combo=str(data.get("max_combo") or "0"),
            cover=cover,
        )

    @property
    def url(self) -> str:
        return f"https://osu.ppy.sh/beatmapsets/{self.beatmapset_id}#osu/{self.beatmap_id}"

    @property
    def cover_url(self) -> str:
        return f"https://assets.ppy.sh/beatmaps/{self.beatmapset_id}/covers/cover.jpg"
