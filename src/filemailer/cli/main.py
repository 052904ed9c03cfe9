"""Main CLI interface for FileMailer using Click."""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from .. import __version__
from ..config import ConfigurationError, get_config_manager, reset_config_manager
from ..core import Dispatcher
from ..utils.logging import get_logger, setup_logging
from ..watcher import WatchSubscriptionError

console = Console()
logger = get_logger(__name__)


def wait_for_stop(prompt: str = "Press Enter to stop watching."):
    """Block until the operator presses Enter (or closes stdin / hits Ctrl-C)."""
    try:
        console.input(f"[dim]{prompt}[/dim]\n")
    except (EOFError, KeyboardInterrupt):
        pass


def _load_config(ctx):
    config_manager = get_config_manager(ctx.obj.get("config_path"), ctx.obj.get("config_name"))
    return config_manager, config_manager.load()


@click.group()
@click.version_option(version=__version__, prog_name="FileMailer")
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file",
)
@click.option(
    "--name",
    default="filemailer",
    show_default=True,
    help="Config file name (without extension) searched for when --config is not given",
)
@click.pass_context
def cli(ctx, config: Optional[Path], name: str):
    """
    FileMailer - mail new files from a folder to a list of addressees.

    Every file created in the watched folder whose extension matches the
    allow-list is sent as an attachment and then moved into the save folder.
    """
    reset_config_manager()
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["config_name"] = name


@cli.command()
@click.option(
    "--folder",
    type=click.Path(file_okay=False, path_type=Path),
    help="Watch this folder instead of the configured one",
)
@click.pass_context
def watch(ctx, folder: Optional[Path]):
    """
    Watch the folder and mail new files until Enter is pressed.
    """
    try:
        _, config = _load_config(ctx)
    except ConfigurationError as e:
        console.print(f"[bold red]✗ Configuration error:[/bold red] {e}")
        sys.exit(1)

    if folder is not None:
        config = config.model_copy(
            update={"watch": config.watch.model_copy(update={"folder": folder})}
        )

    setup_logging(
        level=config.logging.level,
        log_dir=config.logging.log_dir,
        max_bytes=config.logging.max_bytes,
        backup_count=config.logging.backup_count,
        console_enabled=config.logging.console_enabled,
        file_enabled=config.logging.file_enabled,
    )

    dispatcher = Dispatcher(config)
    try:
        dispatcher.start()
    except WatchSubscriptionError as e:
        console.print(f"[bold red]✗ Cannot watch folder:[/bold red] {e}")
        logger.error(f"Cannot watch folder: {e}")
        sys.exit(1)

    try:
        wait_for_stop()
    finally:
        dispatcher.stop()


@cli.group(name="config")
def config_group():
    """Inspect FileMailer configuration."""
    pass


@config_group.command(name="show")
@click.pass_context
def config_show(ctx):
    """Display current configuration (password hidden)."""
    console.print("\n[bold cyan]FileMailer Configuration[/bold cyan]\n")

    try:
        config_manager, config = _load_config(ctx)
    except ConfigurationError as e:
        console.print(f"[bold red]✗ Configuration error:[/bold red] {e}")
        sys.exit(1)

    console.print("[bold]Watch:[/bold]")
    console.print(f"  Folder: {config.watch.folder}")
    console.print(f"  Save Folder: {config.watch.save_path}")
    console.print(f"  File Types: {', '.join(config.watch.filetypes) or '(none)'}")
    console.print(f"  Settle Delay: {config.watch.settle_seconds}s")

    console.print("\n[bold]Email:[/bold]")
    console.print(f"  Sender: {config.email.sender}")
    console.print("  Addressees:")
    for address in config.email.addressees:
        console.print(f"    • {address}")

    console.print("\n[bold]SMTP:[/bold]")
    console.print(f"  Server: {config.smtp.host}:{config.smtp.port}")
    console.print(f"  Username: {config.smtp.username or '(none)'}")
    console.print(f"  Password: {'********' if config.smtp.password.get_secret_value() else '(none)'}")
    timeout = f"{config.smtp.timeout_seconds}s" if config.smtp.timeout_seconds else "none"
    console.print(f"  Timeout: {timeout}")
    console.print(f"  Verify Certificate: {config.smtp.verify_certificate}")

    console.print(f"\n[dim]Config file: {config_manager.config_path}[/dim]")


def main():
    """Console script entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
