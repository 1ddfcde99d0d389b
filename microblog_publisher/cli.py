"""Micro.blog Publisher CLI: publish notes and upload their images."""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from microblog_publisher import __version__
from microblog_publisher.core.commands import Publisher
from microblog_publisher.core.config import PublisherConfig
from microblog_publisher.core.models import ConfigError
from microblog_publisher.core.store import VaultStore

DEFAULT_CONFIG_PATH = Path.home() / ".microblog-publisher" / "config.yaml"


class ClickStatusDisplay:
    """Echoes progress messages to stderr."""

    def open(self) -> None:
        click.echo("Uploading to Micro.blog...", err=True)

    def set_status(self, message: str) -> None:
        click.echo(f"  {message}", err=True)

    def close(self) -> None:
        pass


def load_config(config_path: Optional[str]) -> PublisherConfig:
    """Load config from the given path, or the default path if it exists."""
    if config_path:
        return PublisherConfig.from_yaml(config_path)
    if DEFAULT_CONFIG_PATH.exists():
        return PublisherConfig.from_yaml(DEFAULT_CONFIG_PATH)
    return PublisherConfig()


@click.group()
@click.version_option(version=__version__, package_name="microblog-publisher")
@click.option("--config", "config_path", envvar="MICROBLOG_PUBLISHER_CONFIG",
              type=click.Path(dir_okay=False), help="Path to config.yaml.")
@click.option("--vault", "vault_path", envvar="MICROBLOG_PUBLISHER_VAULT", default=".",
              type=click.Path(file_okay=False, exists=True), help="Vault root directory.")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output.")
@click.pass_context
def main(ctx: click.Context, config_path: Optional[str], vault_path: str, verbose: bool) -> None:
    """Micro.blog Publisher: publish Obsidian notes to Micro.blog."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        config = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e))

    ctx.obj = Publisher(
        VaultStore(vault_path),
        config,
        status_display=ClickStatusDisplay,
        notify=click.echo,
    )


def _note_path(publisher: Publisher, note: str) -> Path:
    context = publisher.store.get_note(note)
    if context is None:
        raise click.ClickException(f"Note not found: {note}")
    return context.path


@main.command()
@click.argument("note")
@click.pass_obj
def publish(publisher: Publisher, note: str) -> None:
    """Publish NOTE, or update it if it was published before."""
    result = asyncio.run(publisher.publish_post(_note_path(publisher, note)))
    if result is None:
        sys.exit(1)
    click.echo(result.url)


@main.command("upload-images")
@click.argument("note")
@click.pass_obj
def upload_images(publisher: Publisher, note: str) -> None:
    """Upload the images embedded in NOTE and link them in place."""
    batch = asyncio.run(publisher.upload_images(_note_path(publisher, note)))
    if batch is None:
        sys.exit(1)
    for upload in batch.uploads:
        click.echo(f"{upload.original} -> {upload.uploaded_url}")


@main.command()
@click.pass_obj
def destinations(publisher: Publisher) -> None:
    """List the blogs this account can post to."""
    for dest in asyncio.run(publisher.list_destinations()):
        click.echo(f"{dest.uid}\t{dest.name}")


@main.command()
@click.pass_obj
def whoami(publisher: Publisher) -> None:
    """Show the Micro.blog username for the configured token."""
    username = asyncio.run(publisher.fetch_username())
    if not username:
        raise click.ClickException("No username returned for this token")
    click.echo(username)
