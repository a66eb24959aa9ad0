"""Exception types raised by the site generator."""

from __future__ import annotations


class SiteGenError(Exception):
    """Base class for all site generator errors."""


class ConfigError(SiteGenError):
    """Required configuration is missing or invalid."""


class DiscordAPIError(SiteGenError):
    """The Discord API answered with a non-success status."""

    def __init__(self, status_code: int, path: str, detail: str = "") -> None:
        self.status_code = status_code
        self.path = path
        self.detail = detail
        msg = f"Discord API returned {status_code} for {path}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)

    @property
    def not_found(self) -> bool:
        return self.status_code == 404
