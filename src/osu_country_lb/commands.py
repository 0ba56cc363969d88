from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from .accounts import AccountStore
from .errors import (
    AccountAlreadyLinkedError,
    AccountNotLinkedError,
    AccountStoreError,
    ApiNotFound,
    ApiRequestFailed,
    InvalidModsError,
    NoMatchingScoresError,
    OsuApiError,
)
from .layout import MAX_ROWS
from .leaderboard import generate_leaderboard
from .logging_utils import get_logger
from .models import Beatmap, ScoreRecord
from .mods import select_scores
from .osu_api import OsuApiClient

logger = get_logger(__name__)

# The country endpoint returns at most 50 entries; filtering needs the full list
FILTER_FETCH_LIMIT = 50
ATTACHMENT_NAME = "lb.png"

UNKNOWN_ERROR = "An unknown error occured. Please try again later."
NOT_LINKED = "Failed to get user. Did you connect your osu! account with `!connect {osu_id}`?"

Renderer = Callable[[Sequence[ScoreRecord], Sequence[bytes], Beatmap], bytes]


@dataclass
class Reply:
    content: str
    image: Optional[bytes] = None
    filename: str = ATTACHMENT_NAME


def split_args(content: str) -> Tuple[str, List[str], Optional[str]]:
    """Split ``!cmd arg +MODS`` into the command, positional args and mods."""
    parts = content.split()
    if not parts:
        return "", [], None
    positional: List[str] = []
    mods: Optional[str] = None
    for part in parts[1:]:
        if part.startswith("+") and mods is None:
            mods = part[1:]
        else:
            positional.append(part)
    return parts[0].lower(), positional, mods


def beatmap_header(beatmap: Beatmap) -> str:
    return f"[**{beatmap.artist} - {beatmap.title} [{beatmap.version}]**](<{beatmap.url}>)\n"


class CommandHandler:
    def __init__(self, api: OsuApiClient, accounts: AccountStore, renderer: Renderer = generate_leaderboard) -> None:
        self.api = api
        self.accounts = accounts
        self.renderer = renderer
        self.commands = {
            "!cs": self.country_scores,
            "!rsc": self.recent_country_scores,
            "!connect": self.connect,
        }

    def handle(self, content: str, author_id: int, author_name: str) -> Optional[Reply]:
        """Answer a chat message, or return None when it is not a command."""
        command, args, mods = split_args(content)
        action = self.commands.get(command)
        if action is None:
            return None
        logger.info("%s from %s (%s)", command, author_name, author_id)
        try:
            return action(args, mods, author_id, author_name)
        except Exception:  # noqa: BLE001
            logger.exception("Command %r failed", content)
            return Reply(UNKNOWN_ERROR)

    def country_scores(self, args: List[str], mods: Optional[str], author_id: int, author_name: str) -> Reply:
        if not args:
            return Reply("Usage: !cs <beatmap_id> [+mods]")
        return self.leaderboard_reply(args[0], mods)

    def recent_country_scores(self, args: List[str], mods: Optional[str], author_id: int, author_name: str) -> Reply:
        if args:
            user = args[0]
        else:
            try:
                user = str(self.accounts.get_osu_id(author_id))
            except AccountNotLinkedError:
                return Reply(NOT_LINKED)
            except AccountStoreError as exc:
                return Reply(str(exc))

        try:
            beatmap_id = self.api.fetch_recent_beatmap_id(user)
        except ApiNotFound as exc:
            return Reply(str(exc))
        except OsuApiError:
            logger.exception("Could not fetch recent play for %s", user)
            return Reply(UNKNOWN_ERROR)
        return self.leaderboard_reply(beatmap_id, mods)

    def connect(self, args: List[str], mods: Optional[str], author_id: int, author_name: str) -> Reply:
        if not args:
            return Reply("Usage: !connect <osu_id>")
        try:
            osu_id = int(args[0])
        except ValueError:
            return Reply("Invalid osu! ID. Please provide a valid number.")
        try:
            self.accounts.link(author_id, author_name, osu_id)
        except AccountAlreadyLinkedError:
            return Reply("This Discord account is already connected to an osu! account")
        except AccountStoreError:
            return Reply(UNKNOWN_ERROR)
        return Reply("Successfully connected your osu! account")

    def leaderboard_reply(self, beatmap_id: str, mods: Optional[str]) -> Reply:
        limit = FILTER_FETCH_LIMIT if mods else MAX_ROWS
        try:
            scores = self.api.fetch_country_scores(beatmap_id, limit=limit)
        except ApiNotFound as exc:
            return Reply(str(exc))
        except ApiRequestFailed:
            return Reply("Failed to fetch scores. Check if the beatmap ID is correct.")

        try:
            scores = select_scores(scores, mods)
        except InvalidModsError as exc:
            return Reply(str(exc))
        except NoMatchingScoresError:
            return Reply("No scores found with the selected mods.")

        try:
            beatmap = self.api.fetch_beatmap(beatmap_id)
        except OsuApiError as exc:
            logger.warning("Beatmap lookup for %s failed: %s", beatmap_id, exc)
            return Reply("Failed to fetch beatmap info. Check if the beatmap ID is correct.")

        avatars = self.api.fetch_avatars(scores)
        image = self.renderer(scores, avatars, beatmap)
        return Reply(beatmap_header(beatmap), image=image)
