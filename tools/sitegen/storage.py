"""Local storage layer – download images and write the site's JSON files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable
from urllib.parse import urlsplit

import httpx

from .api import DiscordAPI
from .config import OutputConfig
from .errors import SiteGenError

logger = logging.getLogger("sitegen.storage")

DEFAULT_IMAGE_EXT = ".jpg"
PARTIAL_SUFFIX = ".part"


def image_filename(url: str, identifier: str, prefix: str = "") -> str:
    """Build `<prefix><identifier><ext>` using the URL's extension (query ignored)."""
    ext = Path(urlsplit(url).path).suffix or DEFAULT_IMAGE_EXT
    return f"{prefix}{identifier}{ext}"


class ImageStore:
    """Save attachment images into the site's image folder."""

    def __init__(self, api: DiscordAPI, cfg: OutputConfig | None = None, *, dry_run: bool = False) -> None:
        self.api = api
        self.cfg = cfg or OutputConfig.from_env()
        self.dry_run = dry_run
        self.fetched = 0

    def public_path(self, filename: str) -> str:
        return f"{self.cfg.image_dir_name}/{filename}"

    async def save(self, url: str, identifier: str, prefix: str = "") -> str | None:
        """Download `url` unless already on disk; return the path used by the site.

        Returns None when the download fails, the caller then leaves the image out.
        """
        filename = image_filename(url, identifier, prefix)
        local_path = self.cfg.image_dir / filename
        if local_path.exists():
            logger.debug("Image %s already downloaded", filename)
            return self.public_path(filename)
        if self.dry_run:
            logger.info("[dry-run] would download %s", filename)
            return None

        try:
            data = await self.api.download(url)
        except httpx.HTTPError as exc:
            logger.error("Image download failed for %s: %s", url, exc)
            return None
        self.fetched += 1

        local_path.parent.mkdir(parents=True, exist_ok=True)
        # Only a complete file may appear under the final name
        partial = local_path.with_name(local_path.name + PARTIAL_SUFFIX)
        partial.write_bytes(data)
        partial.replace(local_path)
        logger.debug("Saved %s (%d bytes)", local_path, len(data))
        return self.public_path(filename)


def write_json(path: Path, records: Iterable[Any]) -> int:
    """Write records as a pretty-printed JSON list; returns the record count."""
    payload = [rec.to_dict() for rec in records]
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        path.write_text(json.dumps(payload, indent=4, ensure_ascii=False) + "\n", encoding="utf-8")
    except OSError as exc:
        raise SiteGenError(f"Could not write {path}: {exc}") from exc
    logger.debug("Wrote %d records to %s", len(payload), path)
    return len(payload)
