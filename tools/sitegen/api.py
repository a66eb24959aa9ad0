"""Discord REST API client – async, single-shot HTTP fetcher."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .config import DiscordConfig
from .errors import DiscordAPIError

logger = logging.getLogger("sitegen.api")

# Discord caps every list endpoint used here at 100 items per page
PAGE_SIZE = 100


class DiscordAPI:
    """Thin wrapper around the Discord REST API for read-only access."""

    def __init__(
        self,
        cfg: DiscordConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.cfg = cfg or DiscordConfig.from_env()
        self._auth_headers = {"Authorization": f"Bot {self.cfg.token}"}
        self._client = httpx.AsyncClient(
            timeout=self.cfg.timeout,
            headers={"User-Agent": "DiscordBot (sitegen, 1.0)"},
            follow_redirects=True,
            transport=transport,
        )

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        url = f"{self.cfg.api_base}{path}"
        logger.debug("GET %s %s", path, params or "")
        resp = await self._client.get(url, params=params, headers=self._auth_headers)
        if resp.is_error:
            raise DiscordAPIError(resp.status_code, path, resp.text[:200])
        return resp.json()

    # ── public API ───────────────────────────────────────────────

    async def get_current_user(self) -> dict:
        """Fetch the bot user; doubles as a token check before the run starts."""
        return await self._get_json("/users/@me")

    async def get_channel(self, channel_id: str) -> dict:
        return await self._get_json(f"/channels/{channel_id}")

    async def get_message(self, channel_id: str, message_id: str) -> dict | None:
        """Fetch one message, or None if it was deleted."""
        try:
            return await self._get_json(f"/channels/{channel_id}/messages/{message_id}")
        except DiscordAPIError as exc:
            if exc.not_found:
                logger.debug("Message %s not found in %s", message_id, channel_id)
                return None
            raise

    async def get_messages(self, channel_id: str, limit: int = 50) -> list[dict]:
        """Fetch the latest `limit` messages of a channel, newest first."""
        messages: list[dict] = []
        before: str | None = None
        while len(messages) < limit:
            params: dict[str, Any] = {"limit": min(PAGE_SIZE, limit - len(messages))}
            if before:
                params["before"] = before
            page = await self._get_json(f"/channels/{channel_id}/messages", params)
            if not page:
                break
            messages.extend(page)
            if len(page) < params["limit"]:
                break
            before = page[-1]["id"]
        return messages

    async def get_active_threads(self, guild_id: str, parent_id: str | None = None) -> list[dict]:
        """Fetch the guild's active threads, optionally only those under `parent_id`."""
        data = await self._get_json(f"/guilds/{guild_id}/threads/active")
        threads = data.get("threads", []) if data else []
        if parent_id is not None:
            threads = [t for t in threads if t.get("parent_id") == parent_id]
        return threads

    async def get_archived_threads(self, channel_id: str) -> list[dict]:
        """Fetch every archived public thread of a channel, following pagination."""
        threads: list[dict] = []
        before: str | None = None
        while True:
            params: dict[str, Any] = {"limit": PAGE_SIZE}
            if before:
                params["before"] = before
            data = await self._get_json(f"/channels/{channel_id}/threads/archived/public", params)
            page = data.get("threads", []) if data else []
            threads.extend(page)
            if not data or not data.get("has_more") or not page:
                break
            before = page[-1].get("thread_metadata", {}).get("archive_timestamp")
            if not before:
                break
        return threads

    async def download(self, url: str) -> bytes:
        """Download an attachment from the CDN (no auth header is sent)."""
        resp = await self._client.get(url)
        resp.raise_for_status()
        return resp.content

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> DiscordAPI:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
