"""CLI entry-point for the Discord site generator."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .api import DiscordAPI
from .config import DiscordConfig, OutputConfig, SiteGenConfig
from .errors import ConfigError
from .extract import parse_blog_message
from .generator import SiteGenerator

console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, console=console)],
    )
    # Suppress noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _print_stats(stats: dict) -> None:
    table = Table(title="Generation Summary", show_header=True, header_style="bold cyan")
    table.add_column("Metric", style="bold")
    table.add_column("Count", justify="right")
    for key, val in stats.items():
        table.add_row(key.capitalize(), str(val))
    console.print(table)


@click.group()
@click.option("--token", envvar="DISCORD_TOKEN", default="", help="Discord bot token")
@click.option("--blog-channel", envvar="BLOG_CHANNEL_ID", default="", help="ID of the blog text channel")
@click.option("--projects-forum", envvar="PROJECTS_FORUM_ID", default="", help="ID of the projects forum channel")
@click.option("--api-base", envvar="DISCORD_API_BASE", default="https://discord.com/api/v10", help="Discord API base URL")
@click.option(
    "--output-dir",
    envvar="SITEGEN_OUTPUT_DIR",
    default=".",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory receiving the JSON files and img/",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, **kwargs: object) -> None:
    """Discord Site Generator – build the website's JSON from Discord.

    Reads blog posts from a text channel and projects from a forum channel,
    merges them with the JSON files of the previous run and writes the result.
    """
    _setup_logging(bool(kwargs.pop("verbose")))
    ctx.ensure_object(dict)
    ctx.obj["discord_cfg"] = DiscordConfig(
        token=kwargs["token"],  # type: ignore[arg-type]
        api_base=str(kwargs["api_base"]).rstrip("/"),
        blog_channel_id=kwargs["blog_channel"],  # type: ignore[arg-type]
        projects_forum_id=kwargs["projects_forum"],  # type: ignore[arg-type]
    )
    ctx.obj["output_cfg"] = OutputConfig(output_dir=kwargs["output_dir"])  # type: ignore[arg-type]


def _make_config(
    ctx: click.Context,
    *,
    images: bool = True,
    dry_run: bool = False,
    blog_limit: int | None = None,
    require_forum: bool = True,
) -> SiteGenConfig:
    discord_cfg: DiscordConfig = ctx.obj["discord_cfg"]
    if blog_limit is not None:
        discord_cfg = replace(discord_cfg, blog_limit=blog_limit)
    cfg = SiteGenConfig(
        discord=discord_cfg,
        output=ctx.obj["output_cfg"],
        download_images=images,
        dry_run=dry_run,
    )
    try:
        cfg.validate(require_forum=require_forum)
    except ConfigError as exc:
        raise click.UsageError(str(exc)) from exc
    return cfg


# ─── Commands ────────────────────────────────────────────────────


@cli.command()
@click.option("--no-images", is_flag=True, help="Skip image downloads")
@click.option("--dry-run", is_flag=True, help="Fetch & extract without writing any file")
@click.option("--blog-limit", default=None, type=click.IntRange(min=1), help="Blog messages to read (default 50)")
@click.pass_context
def generate(ctx: click.Context, no_images: bool, dry_run: bool, blog_limit: int | None) -> None:
    """Regenerate blog.json, projects.json and every project detail file.

    Example: sitegen --output-dir site generate
    """
    cfg = _make_config(ctx, images=not no_images, dry_run=dry_run, blog_limit=blog_limit)

    async def _run() -> dict[str, int]:
        async with SiteGenerator(cfg) as gen:
            return await gen.run()

    console.print(f"[bold]Generating site content into [cyan]{cfg.output.output_dir}[/cyan]...[/bold]")
    stats = asyncio.run(_run())
    console.print("[green]✓[/green] Site content generated")
    _print_stats(stats)


@cli.command(name="preview-blog")
@click.option("--limit", default=10, type=click.IntRange(min=1), help="Number of messages to read")
@click.pass_context
def preview_blog(ctx: click.Context, limit: int) -> None:
    """Show the blog entries that would be extracted, without writing.

    Example: sitegen preview-blog --limit 5
    """
    cfg = _make_config(ctx, dry_run=True, require_forum=False)

    async def _fetch() -> list[dict]:
        async with DiscordAPI(cfg.discord) as api:
            return await api.get_messages(cfg.discord.blog_channel_id, limit=limit)

    messages = asyncio.run(_fetch())
    table = Table(title="Blog Preview", show_header=True, header_style="bold cyan")
    table.add_column("Date", style="bold")
    table.add_column("Title", max_width=40)
    table.add_column("Tag")
    table.add_column("Link")
    for msg in messages:
        entry = parse_blog_message(msg)
        if entry is None:
            continue
        table.add_row(entry.date, entry.title, entry.tag, entry.link)
    console.print(table)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
