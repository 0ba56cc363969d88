from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List

from dotenv import load_dotenv

from .errors import ConfigError
from .logging_utils import get_logger

logger = get_logger(__name__)

DEFAULT_DATABASE_PATH = "database.db"


@dataclass
class Settings:
    bot_token: str
    osu_session: str
    xsrf_token: str
    osu_api_key: str
    database_path: str = DEFAULT_DATABASE_PATH


def load_settings(require_bot_token: bool = True) -> Settings:
    """Read settings from the environment, after loading a local .env file.

    The render CLI does not talk to Discord, so it can skip BOT_TOKEN.
    """
    load_dotenv()
    required = ["OSU_SESSION", "XSRF_TOKEN", "OSU_API_KEY"]
    if require_bot_token:
        required.insert(0, "BOT_TOKEN")
    missing: List[str] = [key for key in required if not os.getenv(key)]
    if missing:
        raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

    database_path = os.getenv("DATABASE_PATH") or DEFAULT_DATABASE_PATH
    logger.debug("Settings loaded, database at %s", database_path)
    return Settings(
        bot_token=os.getenv("BOT_TOKEN", ""),
        osu_session=os.environ["OSU_SESSION"],
        xsrf_token=os.environ["XSRF_TOKEN"],
        osu_api_key=os.environ["OSU_API_KEY"],
        database_path=database_path,
    )
