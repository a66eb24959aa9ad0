"""Shared fixtures: an in-memory Discord API served through httpx.MockTransport."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

import httpx
import pytest

from sitegen.config import DiscordConfig, OutputConfig, SiteGenConfig

API_BASE = "https://discord.test/api/v10"


def make_message(
    msg_id: str,
    content: str,
    *,
    bot: bool = False,
    timestamp: str = "2024-10-13T10:00:00+00:00",
    attachments: list[str] | None = None,
) -> dict:
    return {
        "id": msg_id,
        "content": content,
        "timestamp": timestamp,
        "author": {"id": "42", "username": "bot" if bot else "alice", "bot": bot},
        "attachments": [{"id": f"a{i}", "url": url} for i, url in enumerate(attachments or [])],
    }


@dataclass
class FakeDiscord:
    channels: dict[str, dict] = field(default_factory=dict)
    messages: dict[str, list[dict]] = field(default_factory=dict)  # newest first
    active_threads: dict[str, list[dict]] = field(default_factory=dict)  # guild id → threads
    archived_threads: dict[str, list[dict]] = field(default_factory=dict)
    files: dict[str, bytes] = field(default_factory=dict)
    broken_urls: set[str] = field(default_factory=set)
    archived_page_size: int | None = None  # defaults to the requested limit
    requests: list[httpx.Request] = field(default_factory=list)

    def downloads(self, url: str) -> int:
        return sum(1 for r in self.requests if str(r.url) == url)

    def _json(self, data: object, status: int = 200) -> httpx.Response:
        return httpx.Response(status, json=data)

    def _archived_page(self, channel_id: str, request: httpx.Request) -> httpx.Response:
        threads = self.archived_threads.get(channel_id, [])
        before = request.url.params.get("before")
        if before:
            stamps = [(t.get("thread_metadata") or {}).get("archive_timestamp") for t in threads]
            threads = threads[stamps.index(before) + 1:]
        size = self.archived_page_size or int(request.url.params.get("limit", 100))
        return self._json({"threads": threads[:size], "has_more": len(threads) > size})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        if not url.startswith(API_BASE):
            if url in self.broken_urls:
                return httpx.Response(500)
            if url in self.files:
                return httpx.Response(200, content=self.files[url])
            return httpx.Response(404)

        assert request.headers["Authorization"] == "Bot test-token"
        parts = request.url.path.split("/")[3:]  # drop "", "api", "v10"
        if parts == ["users", "@me"]:
            return self._json({"id": "1", "username": "sitegen-bot"})
        if parts[0] == "guilds" and parts[2:] == ["threads", "active"]:
            return self._json({"threads": self.active_threads.get(parts[1], []), "members": []})
        if parts[0] == "channels":
            cid = parts[1]
            if len(parts) == 2:
                if cid not in self.channels:
                    return self._json({"message": "Unknown Channel"}, 404)
                return self._json(self.channels[cid])
            if parts[2:] == ["threads", "archived", "public"]:
                return self._archived_page(cid, request)
            if parts[2] == "messages":
                msgs = self.messages.get(cid, [])
                if len(parts) == 4:
                    for msg in msgs:
                        if msg["id"] == parts[3]:
                            return self._json(msg)
                    return self._json({"message": "Unknown Message"}, 404)
                limit = int(request.url.params.get("limit", 50))
                before = request.url.params.get("before")
                if before:
                    ids = [m["id"] for m in msgs]
                    msgs = msgs[ids.index(before) + 1:]
                return self._json(msgs[:limit])
        return self._json({"message": "Not Found"}, 404)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def fake_discord() -> FakeDiscord:
    return FakeDiscord()


@pytest.fixture
def discord_cfg() -> DiscordConfig:
    return DiscordConfig(
        token="test-token",
        api_base=API_BASE,
        blog_channel_id="100",
        projects_forum_id="200",
    )


@pytest.fixture
def site_cfg(tmp_path: Path, discord_cfg: DiscordConfig) -> SiteGenConfig:
    return SiteGenConfig(discord=discord_cfg, output=OutputConfig(output_dir=tmp_path))


def read_json(path: Path) -> object:
    return json.loads(path.read_text(encoding="utf-8"))
