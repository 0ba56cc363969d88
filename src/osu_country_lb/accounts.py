import sqlite3
import threading
from typing import Optional

from .errors import AccountAlreadyLinkedError, AccountNotLinkedError, AccountStoreError
from .logging_utils import get_logger

logger = get_logger(__name__)


class AccountStore:
    """Discord user id -> osu! user id links, kept in a SQLite file."""

    def __init__(self, path: str) -> None:
        self.path = path
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.Lock()

    def initialize(self) -> None:
        with self._lock:
            if self._conn is not None:
                return
            try:
                conn = sqlite3.connect(self.path, check_same_thread=False)
                with conn:
                    conn.execute(
                        """CREATE TABLE IF NOT EXISTS users (
                            id INTEGER PRIMARY KEY,
                            name TEXT NOT NULL,
                            osu_id INTEGER NOT NULL
                        );"""
                    )
            except sqlite3.Error as exc:
                logger.exception("Error initializing account database %s", self.path)
                raise AccountStoreError(str(exc)) from exc
            self._conn = conn
            logger.info("Account database ready: %s", self.path)

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self.initialize()
        if self._conn is None:
            raise AccountStoreError(f"Account database {self.path} is closed")
        return self._conn

    def link(self, discord_id: int, name: str, osu_id: int) -> None:
        conn = self._connection()
        with self._lock:
            try:
                with conn:
                    conn.execute(
                        "INSERT INTO users (id, name, osu_id) VALUES (?, ?, ?)",
                        (discord_id, name, osu_id),
                    )
            except sqlite3.IntegrityError as exc:
                raise AccountAlreadyLinkedError(f"Discord user {discord_id} is already linked") from exc
            except sqlite3.Error as exc:
                logger.exception("Failed to link discord user %s", discord_id)
                raise AccountStoreError(str(exc)) from exc
        logger.info("Linked discord user %s (%s) to osu! id %s", discord_id, name, osu_id)

    def get_osu_id(self, discord_id: int) -> int:
        conn = self._connection()
        with self._lock:
            try:
                row = conn.execute("SELECT osu_id FROM users WHERE id = ?", (discord_id,)).fetchone()
            except sqlite3.Error as exc:
                logger.exception("Failed to look up discord user %s", discord_id)
                raise AccountStoreError(str(exc)) from exc
        if row is None:
            raise AccountNotLinkedError(f"Discord user {discord_id} has no linked osu! account")
        return int(row[0])

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
                logger.info("Account database closed")
