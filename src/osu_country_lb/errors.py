from __future__ import annotations

from typing import Iterable, List


class InvalidModsError(ValueError):
    """Requested mod combination contains acronyms outside the known set."""

    def __init__(self, invalid: Iterable[str]) -> None:
        self.invalid: List[str] = list(invalid)
        super().__init__(f"Invalid mods: {', '.join(self.invalid)}")


class NoMatchingScoresError(LookupError):
    def __init__(self, requested: Iterable[str]) -> None:
        self.requested = sorted(requested)
        super().__init__(f"No scores found with mods {''.join(self.requested)}")


class FontLoadError(RuntimeError):
    pass


class AvatarCountMismatchError(ValueError):
    def __init__(self, scores: int, avatars: int) -> None:
        self.scores = scores
        self.avatars = avatars
        super().__init__(f"Got {avatars} avatars for {scores} scores")


class OsuApiError(Exception):
    pass


class ApiRequestFailed(OsuApiError):
    pass


class ApiNotFound(OsuApiError):
    pass


class AccountStoreError(Exception):
    pass


class AccountNotLinkedError(AccountStoreError):
    pass


class AccountAlreadyLinkedError(AccountStoreError):
    pass


class ConfigError(RuntimeError):
    pass
