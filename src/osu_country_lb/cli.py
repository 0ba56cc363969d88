import argparse
import sys
from typing import List, Optional

from .accounts import AccountStore
from .commands import CommandHandler, FILTER_FETCH_LIMIT
from .config import load_settings
from .errors import ConfigError, InvalidModsError, NoMatchingScoresError, OsuApiError
from .layout import MAX_ROWS
from .leaderboard import generate_leaderboard
from .logging_utils import attach_library_logger, get_logger
from .mods import select_scores
from .osu_api import OsuApiClient

logger = get_logger(__name__)


def run_bot() -> int:
    from .bot import LeaderboardBot

    settings = load_settings()
    accounts = AccountStore(settings.database_path)
    accounts.initialize()
    api = OsuApiClient(settings.osu_session, settings.xsrf_token, settings.osu_api_key)
    bot = LeaderboardBot(CommandHandler(api, accounts))
    attach_library_logger("discord")
    try:
        bot.run(settings.bot_token, log_handler=None)
    finally:
        accounts.close()
    return 0


def render(beatmap_id: str, mods: Optional[str], output: str) -> int:
    settings = load_settings(require_bot_token=False)
    api = OsuApiClient(settings.osu_session, settings.xsrf_token, settings.osu_api_key)
    try:
        scores = api.fetch_country_scores(beatmap_id, limit=FILTER_FETCH_LIMIT if mods else MAX_ROWS)
        scores = select_scores(scores, mods)
        beatmap = api.fetch_beatmap(beatmap_id)
    except (OsuApiError, InvalidModsError, NoMatchingScoresError) as exc:
        logger.error("%s", exc)
        return 1
    image = generate_leaderboard(scores, api.fetch_avatars(scores), beatmap)
    with open(output, "wb") as fp:
        fp.write(image)
    logger.info("Wrote %s (%d rows)", output, len(scores))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="osu-country-lb", description="osu! country leaderboard bot")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("run", help="start the Discord bot")
    render_parser = sub.add_parser("render", help="render a beatmap's country leaderboard to a PNG file")
    render_parser.add_argument("beatmap_id")
    render_parser.add_argument("--mods", help="exact mod combination, e.g. HDHR")
    render_parser.add_argument("-o", "--output", default="lb.png")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    try:
        if args.command == "run":
            code = run_bot()
        else:
            code = render(args.beatmap_id, args.mods, args.output)
    except ConfigError as exc:
        logger.error("%s", exc)
        code = 2
    sys.exit(code)
