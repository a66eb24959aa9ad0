"""Configuration and environment settings for the site generator."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ConfigError


@dataclass(frozen=True)
class TagStyle:
    """Font Awesome icon and CSS class used for a project card."""
    icon: str
    style: str


DEFAULT_TAG_STYLE = TagStyle(icon="fas fa-code", style="p-default")

# Forum tag name → card look
DEFAULT_TAG_STYLES: dict[str, TagStyle] = {
    "Web": TagStyle(icon="fas fa-globe", style="p-web"),
    "App": TagStyle(icon="fas fa-mobile", style="p-app"),
    "IA": TagStyle(icon="fas fa-eye", style="p-focus"),
    "3D": TagStyle(icon="fas fa-cube", style="p-mol"),
    "Music": TagStyle(icon="fa-brands fa-spotify", style="p-spot"),
}


@dataclass(frozen=True)
class DiscordConfig:
    """Discord REST API access and the channels to read from."""
    token: str = ""
    api_base: str = "https://discord.com/api/v10"
    timeout: float = 30.0
    blog_channel_id: str = ""
    projects_forum_id: str = ""
    blog_limit: int = 50  # latest messages read from the blog channel
    thread_message_limit: int = 100

    @classmethod
    def from_env(cls) -> DiscordConfig:
        return cls(
            token=os.getenv("DISCORD_TOKEN", ""),
            api_base=os.getenv("DISCORD_API_BASE", "https://discord.com/api/v10").rstrip("/"),
            blog_channel_id=os.getenv("BLOG_CHANNEL_ID", ""),
            projects_forum_id=os.getenv("PROJECTS_FORUM_ID", ""),
        )


@dataclass(frozen=True)
class OutputConfig:
    output_dir: Path = Path(".")
    image_dir_name: str = "img"

    @property
    def image_dir(self) -> Path:
        return self.output_dir / self.image_dir_name

    @property
    def blog_file(self) -> Path:
        return self.output_dir / "blog.json"

    @property
    def projects_file(self) -> Path:
        return self.output_dir / "projects.json"

    def detail_file(self, filename: str) -> Path:
        return self.output_dir / filename

    @classmethod
    def from_env(cls) -> OutputConfig:
        return cls(output_dir=Path(os.getenv("SITEGEN_OUTPUT_DIR", ".")))


@dataclass
class SiteGenConfig:
    discord: DiscordConfig = field(default_factory=DiscordConfig.from_env)
    output: OutputConfig = field(default_factory=OutputConfig.from_env)
    tag_styles: dict[str, TagStyle] = field(default_factory=lambda: dict(DEFAULT_TAG_STYLES))
    default_tag_style: TagStyle = DEFAULT_TAG_STYLE
    download_images: bool = True
    dry_run: bool = False

    def validate(self, *, require_forum: bool = True) -> None:
        required = [
            ("DISCORD_TOKEN", self.discord.token),
            ("BLOG_CHANNEL_ID", self.discord.blog_channel_id),
        ]
        if require_forum:
            required.append(("PROJECTS_FORUM_ID", self.discord.projects_forum_id))
        missing = [name for name, value in required if not value]
        if missing:
            raise ConfigError(f"Missing required setting(s): {', '.join(missing)}")
