"""Core generation logic – orchestrates API → extraction → merge → JSON."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from .api import DiscordAPI
from .config import SiteGenConfig
from .extract import (
    build_project_summary,
    build_project_update,
    first_attachment_url,
    is_bot,
    parse_blog_message,
)
from .models import (
    BlogEntry,
    ProjectSummary,
    ProjectUpdate,
    blog_key,
    project_key,
    update_key,
)
from .reconcile import load_records, merge
from .storage import ImageStore, write_json

logger = logging.getLogger("sitegen.core")

UPDATE_IMAGE_PREFIX = "update_"


class SiteGenerator:
    """Runs one full Discord → site JSON regeneration."""

    def __init__(self, cfg: SiteGenConfig | None = None, *, api: DiscordAPI | None = None) -> None:
        self.cfg = cfg or SiteGenConfig()
        self.api = api or DiscordAPI(self.cfg.discord)
        self.images = ImageStore(self.api, self.cfg.output, dry_run=self.cfg.dry_run)
        # Stats
        self.stats = {"blog": 0, "projects": 0, "updates": 0, "images": 0, "skipped": 0}

    def _write(self, path: Path, records: list) -> None:
        if self.cfg.dry_run:
            logger.info("[dry-run] would write %d records to %s", len(records), path.name)
            return
        write_json(path, records)

    # ── blog ─────────────────────────────────────────────────────

    async def build_blog(self) -> list[BlogEntry]:
        """Regenerate blog.json from the latest blog channel messages."""
        dc = self.cfg.discord
        messages = await self.api.get_messages(dc.blog_channel_id, limit=dc.blog_limit)
        fresh: list[BlogEntry] = []
        for msg in messages:
            entry = parse_blog_message(msg)
            if entry is None:
                self.stats["skipped"] += 1
                continue
            fresh.append(entry)

        previous = load_records(self.cfg.output.blog_file, BlogEntry.from_dict)
        entries = merge(fresh, previous, blog_key)
        self._write(self.cfg.output.blog_file, entries)
        self.stats["blog"] = len(entries)
        logger.info("Blog: %d fresh, %d total entries", len(fresh), len(entries))
        return entries

    # ── projects ─────────────────────────────────────────────────

    async def fetch_forum_threads(self, forum: dict) -> list[dict]:
        """Active threads of the forum followed by its archived ones, without duplicates."""
        forum_id = forum["id"]
        active = await self.api.get_active_threads(forum["guild_id"], parent_id=forum_id)
        archived = await self.api.get_archived_threads(forum_id)
        seen: set[str] = set()
        threads: list[dict] = []
        for thread in [*active, *archived]:
            if thread["id"] in seen:
                continue
            seen.add(thread["id"])
            threads.append(thread)
        return threads

    async def build_project_updates(self, thread: dict, starter_id: str) -> list[ProjectUpdate]:
        """Every reply in a thread (besides the starter and bots) is one update."""
        messages = await self.api.get_messages(thread["id"], limit=self.cfg.discord.thread_message_limit)
        updates: list[ProjectUpdate] = []
        for msg in messages:
            if msg["id"] == starter_id or is_bot(msg):
                continue
            image_path = None
            url = first_attachment_url(msg)
            if url and self.cfg.download_images:
                image_path = await self.images.save(url, msg["id"], UPDATE_IMAGE_PREFIX)
                self.stats["images"] = self.images.fetched
            updates.append(build_project_update(msg, image_path))
        return updates

    async def build_project(self, thread: dict, forum: dict) -> ProjectSummary | None:
        """Build one project card and regenerate its detail file."""
        if not thread.get("name"):
            return None
        # The starter message of a forum post shares the thread's id
        starter = await self.api.get_message(thread["id"], thread["id"])
        if starter is None:
            logger.warning("Thread %r has no starter message, skipping", thread["name"])
            return None

        summary = build_project_summary(thread, starter, forum, self.cfg)
        fresh = await self.build_project_updates(thread, starter["id"])

        detail_path = self.cfg.output.detail_file(summary.detail_file)
        previous = load_records(detail_path, ProjectUpdate.from_dict)
        updates = merge(fresh, previous, update_key)
        self._write(detail_path, updates)
        self.stats["updates"] += len(fresh)
        logger.debug("Project %r: %d updates (%d fresh)", summary.title, len(updates), len(fresh))
        return summary

    async def build_projects(self) -> list[ProjectSummary]:
        """Regenerate projects.json and every project's detail file."""
        forum = await self.api.get_channel(self.cfg.discord.projects_forum_id)
        threads = await self.fetch_forum_threads(forum)

        fresh: list[ProjectSummary] = []
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            TimeElapsedColumn(),
        ) as progress:
            task = progress.add_task("forum threads", total=len(threads))
            for thread in threads:
                summary = await self.build_project(thread, forum)
                if summary is None:
                    self.stats["skipped"] += 1
                else:
                    fresh.append(summary)
                progress.advance(task)

        previous = load_records(self.cfg.output.projects_file, ProjectSummary.from_dict)
        projects = merge(fresh, previous, project_key)
        self._write(self.cfg.output.projects_file, projects)
        self.stats["projects"] = len(projects)
        logger.info("Projects: %d fresh, %d total", len(fresh), len(projects))
        return projects

    # ── full run ─────────────────────────────────────────────────

    async def run(self) -> dict[str, int]:
        user = await self.api.get_current_user()
        logger.info("Logged in as %s", user.get("username", "?"))
        await self.build_blog()
        await self.build_projects()
        return self.stats

    # ── lifecycle ────────────────────────────────────────────────

    async def close(self) -> None:
        await self.api.close()

    async def __aenter__(self) -> SiteGenerator:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
