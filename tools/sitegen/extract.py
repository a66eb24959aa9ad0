"""Map raw Discord payloads into site records."""

from __future__ import annotations

from datetime import datetime, timezone

from .config import SiteGenConfig, TagStyle
from .models import (
    DEFAULT_BTN_TEXT,
    DEFAULT_DESC,
    DEFAULT_LINK,
    DEFAULT_VERSION,
    BlogEntry,
    ProjectSummary,
    ProjectUpdate,
    detail_filename,
    sanitize,  # noqa: F401 (re-exported)
)

DISCORD_EPOCH_MS = 1420070400000
BLOG_DELIMITER = "|"


# ── helpers ─────────────────────────────────────────────────────


def snowflake_to_dt(snowflake: str | int) -> datetime:
    ms = (int(snowflake) >> 22) + DISCORD_EPOCH_MS
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc)


def message_dt(message: dict) -> datetime:
    raw = message.get("timestamp")
    if raw:
        return datetime.fromisoformat(raw).astimezone(timezone.utc)
    return snowflake_to_dt(message["id"])


def thread_created_dt(thread: dict) -> datetime:
    raw = (thread.get("thread_metadata") or {}).get("create_timestamp")
    if raw:
        return datetime.fromisoformat(raw).astimezone(timezone.utc)
    return snowflake_to_dt(thread["id"])


def display_date(dt: datetime) -> str:
    return dt.strftime("%d/%m/%Y")


def iso_date(dt: datetime) -> str:
    return dt.strftime("%Y-%m-%d")


def is_bot(message: dict) -> bool:
    return bool((message.get("author") or {}).get("bot", False))


def parse_metadata(content: str) -> dict[str, str]:
    """Parse `Key: value` lines; only the first colon separates key from value."""
    data: dict[str, str] = {}
    for line in content.split("\n"):
        key, sep, value = line.partition(":")
        if sep:
            data[key.strip().lower()] = value.strip()
    return data


# ── blog ────────────────────────────────────────────────────────


def parse_blog_message(message: dict) -> BlogEntry | None:
    """Turn `Title | Tag | Desc [| Link]` into a BlogEntry.

    Messages from bots, without a pipe, or with fewer than three fields are
    not blog posts.
    """
    content = message.get("content") or ""
    if is_bot(message) or BLOG_DELIMITER not in content:
        return None
    parts = [p.strip() for p in content.split(BLOG_DELIMITER)]
    if len(parts) < 3:
        return None
    return BlogEntry(
        title=parts[0],
        tag=parts[1],
        desc=parts[2],
        link=(parts[3] if len(parts) > 3 else "") or DEFAULT_LINK,
        date=display_date(message_dt(message)),
    )


# ── projects ────────────────────────────────────────────────────


def resolve_tag_style(
    thread: dict,
    forum: dict,
    tag_styles: dict[str, TagStyle],
    default: TagStyle,
) -> TagStyle:
    """Look up the card style for the first tag applied to a forum thread."""
    applied = thread.get("applied_tags") or []
    if not applied:
        return default
    tag_names = {t.get("id"): t.get("name") for t in forum.get("available_tags") or []}
    name = tag_names.get(applied[0])
    if name is None:
        return default
    return tag_styles.get(name, default)


def build_project_summary(thread: dict, starter: dict, forum: dict, cfg: SiteGenConfig) -> ProjectSummary:
    meta = parse_metadata(starter.get("content") or "")
    tag_style = resolve_tag_style(thread, forum, cfg.tag_styles, cfg.default_tag_style)
    title = thread["name"]
    return ProjectSummary(
        title=title,
        version=meta.get("version") or DEFAULT_VERSION,
        date=meta.get("date") or iso_date(thread_created_dt(thread)),
        desc=meta.get("desc") or DEFAULT_DESC,
        link=meta.get("link") or DEFAULT_LINK,
        icon=tag_style.icon,
        style=tag_style.style,
        btn_text=meta.get("btntext") or DEFAULT_BTN_TEXT,
        detail_file=detail_filename(title),
    )


def split_update(message: dict) -> tuple[str, str]:
    """First line is the version label, the rest is the body."""
    lines = (message.get("content") or "").split("\n")
    return lines[0], "\n".join(lines[1:])


def first_attachment_url(message: dict) -> str | None:
    attachments = message.get("attachments") or []
    if not attachments:
        return None
    return attachments[0].get("url")


def build_project_update(message: dict, image_path: str | None = None) -> ProjectUpdate:
    version, body = split_update(message)
    if image_path:
        body += f"\n\n![Image]({image_path})"
    return ProjectUpdate(
        date=iso_date(message_dt(message)),
        version=version,
        content=body,
    )
