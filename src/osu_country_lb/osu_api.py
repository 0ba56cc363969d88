from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import List, Optional, Sequence

import requests
from requests.adapters import HTTPAdapter

from .errors import ApiNotFound, ApiRequestFailed
from .logging_utils import get_logger
from .models import Beatmap, ScoreRecord

logger = get_logger(__name__)

WEB_BASE_URL = "https://osu.ppy.sh"
API_V1_BASE_URL = "https://osu.ppy.sh/api"
AVATAR_WORKERS = 7


class OsuApiClient:
    """Thin wrapper over the osu! website and v1 API endpoints the bot uses.

    Country leaderboards are only exposed to logged-in website sessions, so
    that call authenticates with the ``osu_session`` cookie and XSRF token.
    Everything else uses the v1 API key.
    """

    def __init__(
        self,
        osu_session: str,
        xsrf_token: str,
        api_key: str,
        session: Optional[requests.Session] = None,
        timeout: float = 10,
    ) -> None:
        self.osu_session = osu_session
        self.xsrf_token = xsrf_token
        self.api_key = api_key
        self.timeout = timeout
        if session is None:
            session = requests.Session()
            adapter = HTTPAdapter(pool_connections=AVATAR_WORKERS, pool_maxsize=AVATAR_WORKERS)
            session.mount("https://", adapter)
        self.session = session

    def _get(self, url: str, **kwargs) -> requests.Response:
        try:
            response = self.session.get(url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise ApiRequestFailed(f"GET {url.split('?')[0]} failed: {exc}") from exc
        return response

    def fetch_country_scores(self, beatmap_id: str, limit: int = 7) -> List[ScoreRecord]:
        url = f"{WEB_BASE_URL}/beatmaps/{beatmap_id}/scores"
        response = self._get(
            url,
            params={"mode": "osu", "type": "country", "limit": limit},
            headers={
                "Cookie": f"osu_session={self.osu_session}",
                "CSRF-TOKEN": self.xsrf_token,
            },
        )
        try:
            payload = response.json()
            scores = [ScoreRecord.from_api(item) for item in payload.get("scores", [])]
        except (ValueError, AttributeError, TypeError) as exc:
            logger.warning("Could not parse country scores for beatmap %s: %s", beatmap_id, exc)
            return []
        logger.info("Fetched %d country scores for beatmap %s", len(scores), beatmap_id)
        return scores

    def fetch_beatmap(self, beatmap_id: str) -> Beatmap:
        response = self._get(
            f"{API_V1_BASE_URL}/get_beatmaps",
            params={"k": self.api_key, "b": beatmap_id, "m": 0},
        )
        try:
            payload = response.json()
        except ValueError as exc:
            raise ApiRequestFailed(f"Invalid beatmap response for {beatmap_id}: {exc}") from exc
        if not payload:
            raise ApiNotFound(f"Beatmap {beatmap_id} not found.")

        beatmap = Beatmap.from_api(payload[0])
        return replace(beatmap, cover=self.fetch_image(beatmap.cover_url))

    def fetch_image(self, url: str) -> bytes:
        """Download raw image bytes; failures give empty bytes."""
        if not url:
            return b""
        try:
            return self._get(url).content
        except ApiRequestFailed as exc:
            logger.warning("Image download failed: %s", exc)
            return b""

    def fetch_avatars(self, scores: Sequence[ScoreRecord]) -> List[bytes]:
        if not scores:
            return []
        urls = [score.user.avatar_url for score in scores]
        with ThreadPoolExecutor(max_workers=min(AVATAR_WORKERS, len(urls))) as executor:
            # map() keeps the result order aligned with the scores
            return list(executor.map(self.fetch_image, urls))

    def fetch_recent_beatmap_id(self, user: str) -> str:
        response = self._get(
            f"{API_V1_BASE_URL}/get_user_recent",
            params={"k": self.api_key, "u": user, "m": 0, "limit": 1},
        )
        try:
            payload = response.json()
        except ValueError as exc:
            raise ApiRequestFailed(f"Invalid recent plays response for {user}: {exc}") from exc
        if not payload:
            raise ApiNotFound(f"No recent plays found for {user}.")
        return str(payload[0]["beatmap_id"])
