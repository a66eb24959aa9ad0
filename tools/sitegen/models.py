"""Records written to the site's JSON files."""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from typing import Any

from .config import DEFAULT_TAG_STYLE

DEFAULT_LINK = "#"
DEFAULT_VERSION = "V1.0"
DEFAULT_DESC = "Pas de description"
DEFAULT_BTN_TEXT = "VOIR"
DETAIL_SUFFIX = "_detail.json"

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def sanitize(name: str) -> str:
    """Lower-case and strip everything but ASCII letters and digits.

    "Focus PCSI" -> "focuspcsi". Distinct names can collapse to the same value.
    """
    return _NON_ALNUM_RE.sub("", name.lower())


def detail_filename(title: str) -> str:
    return f"{sanitize(title)}{DETAIL_SUFFIX}"


@dataclass
class BlogEntry:
    title: str
    tag: str
    desc: str
    link: str = DEFAULT_LINK
    date: str = ""
    image: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BlogEntry:
        return cls(
            title=data.get("title", ""),
            tag=data.get("tag", ""),
            desc=data.get("desc", ""),
            link=data.get("link") or DEFAULT_LINK,
            date=data.get("date", ""),
            image=data.get("image"),
        )


@dataclass
class ProjectSummary:
    title: str
    version: str = DEFAULT_VERSION
    date: str = ""
    desc: str = DEFAULT_DESC
    link: str = DEFAULT_LINK
    icon: str = ""
    style: str = ""
    btn_text: str = DEFAULT_BTN_TEXT
    detail_file: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "version": self.version,
            "date": self.date,
            "desc": self.desc,
            "link": self.link,
            "icon": self.icon,
            "style": self.style,
            "btnText": self.btn_text,
            "detailFile": self.detail_file,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProjectSummary:
        title = data.get("title", "")
        return cls(
            title=title,
            version=data.get("version") or DEFAULT_VERSION,
            date=data.get("date", ""),
            desc=data.get("desc") or DEFAULT_DESC,
            link=data.get("link") or DEFAULT_LINK,
            icon=data.get("icon") or DEFAULT_TAG_STYLE.icon,
            style=data.get("style") or DEFAULT_TAG_STYLE.style,
            btn_text=data.get("btnText") or DEFAULT_BTN_TEXT,
            detail_file=data.get("detailFile") or detail_filename(title),
        )


@dataclass
class ProjectUpdate:
    date: str
    version: str
    content: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProjectUpdate:
        return cls(
            date=data.get("date", ""),
            version=data.get("version", ""),
            content=data.get("content", ""),
        )


# ── identity keys ───────────────────────────────────────────────


def blog_key(entry: BlogEntry) -> str:
    return entry.title


def project_key(project: ProjectSummary) -> str:
    return project.title


def update_key(update: ProjectUpdate) -> str:
    # Free-form first line of the message; a reused label replaces the older update.
    return update.version
