"""Main CLI entry point for github-mirror command.

This module provides the Typer application that serves as the entry point
for the github-mirror command-line tool. It uses options on the main command
rather than subcommands for a simpler user experience.
"""

import logging
import os
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Optional, List

import typer

from src.cli.errors import InitError
from src.cli.init_command import InitCommand
from src.cli.models import ExitCode
from src.cli.output import OutputHandler
from src.cli.strip_command import StripCommand
from src.cli.sync_command import SyncCommand
from src.file_mapper.config_loader import ConfigLoader
from src.file_mapper.errors import ConfigError, FilesystemError

__version__ = "0.1.0"

DEFAULT_CONFIG_PATH = ".github-mirror/config.yaml"

# Create Typer app - no_args_is_help=False allows running without args
app = typer.Typer(
    name="github-mirror",
    help="""One-way mirror of GitHub Markdown files into a local folder tree.

QUICK START:
  github-mirror --init --namespace <user_or_org>   # Initialize
  github-mirror                                    # Sync now
  github-mirror --dry-run                          # Preview changes
  github-mirror --watch                            # Sync every sync_interval_hours
  github-mirror --strip                            # Remove annotations from mirrored files""",
    add_completion=False,
    rich_markup_mode=None,  # Disable Rich markup to avoid compatibility issues
    no_args_is_help=False,
)

# Module logger
logger = logging.getLogger(__name__)

# Help message for when no arguments provided
GETTING_STARTED_MESSAGE = """github-mirror                                       # Sync now

--init --namespace <user_or_org> [--base-folder F]  # Initialize
--dry-run                                           # Preview changes
--watch                                             # Keep syncing on an interval
--strip                                             # Remove annotations
--help                                              # Show all options

Example:
  github-mirror --init --namespace octocat --base-folder Projects

Set GITHUB_TOKEN (or github_token in .github-mirror/config.yaml) before syncing."""


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'src' namespace logger to avoid affecting third-party
    libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:  # verbosity >= 2
        level = logging.DEBUG

    # Configure app-specific logger (not root) to avoid affecting libraries
    app_logger = logging.getLogger("src")
    app_logger.setLevel(level)

    log_format = "%(asctime)s [%(levelname)8s] %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(log_format, datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        # Timestamped filename in local time
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"github-mirror_{timestamp}.log"

        file_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        file_formatter = logging.Formatter(file_format, datefmt=date_format)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


def _run_init(
    namespaces: List[str],
    repos: List[str],
    base_folder: str,
    config_path: str,
    verbosity: int,
    no_color: bool
) -> None:
    """Run initialization command."""
    _configure_logging(verbosity)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    try:
        output.info("Initializing mirror configuration...")
        output.info(f"  Base folder: {base_folder}")
        for namespace in namespaces:
            output.info(f"  Namespace: {namespace}")
        for repo in repos:
            output.info(f"  Repository: {repo}")

        init_cmd = InitCommand(config_path=config_path)

        with output.spinner("Validating namespace..."):
            init_cmd.run(namespaces=namespaces, base_folder=base_folder, repos=repos)

        output.success("Configuration initialized successfully")
        output.info(f"  Config file: {init_cmd.config_path}")
        output.info("")
        output.info("Next steps:")
        output.info(f"  1. Review {init_cmd.config_path}")
        output.info("  2. Run 'github-mirror' to start syncing")

        raise typer.Exit(ExitCode.SUCCESS)

    except InitError as e:
        logger.error(f"Initialization failed: {e}")
        output.error(f"Initialization failed: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    except typer.Exit:
        raise

    except Exception as e:
        logger.exception("Unexpected error during initialization")
        output.error(f"Unexpected error: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)


def _run_strip(
    config_path: str,
    dry_run: bool,
    verbosity: int,
    no_color: bool
) -> None:
    """Run the strip command against the configured base folder."""
    _configure_logging(verbosity)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    try:
        config = ConfigLoader.load(config_path)
    except (ConfigError, FilesystemError) as e:
        output.error(f"Failed to load config: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    summary = StripCommand().run(config, dry_run=dry_run)
    output.print_strip_summary(summary)

    if summary.failed:
        raise typer.Exit(ExitCode.PARTIAL_FAILURE)
    raise typer.Exit(ExitCode.SUCCESS)


def _watch_interval_seconds(config_path: str, fallback_hours: float) -> float:
    """Read sync_interval_hours from the config, keeping the last good value on error."""
    try:
        hours = ConfigLoader.load(config_path).sync_interval_hours
    except (ConfigError, FilesystemError) as e:
        logger.warning(f"Could not reload interval from config: {e}")
        hours = fallback_hours
    return hours * 3600


def _auto_sync_enabled(config_path: str) -> bool:
    """Whether the config asks for interval syncing without --watch."""
    try:
        return ConfigLoader.load(config_path).auto_sync
    except (ConfigError, FilesystemError):
        return False


def _run_sync(
    config_path: str,
    dry_run: bool,
    watch: bool,
    logdir: Optional[str],
    verbosity: int,
    no_color: bool
) -> None:
    """Run sync command once, or repeatedly with --watch."""
    _configure_logging(verbosity, logdir)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    state_dir = os.path.dirname(config_path)
    sync_cmd = SyncCommand(
        config_path=config_path,
        state_path=os.path.join(state_dir, "state.yaml"),
        lock_path=os.path.join(state_dir, "sync.lock"),
        output_handler=output,
    )

    if not watch and not dry_run and _auto_sync_enabled(config_path):
        logger.info("auto_sync is enabled - syncing every sync_interval_hours")
        watch = True

    if not watch:
        raise typer.Exit(sync_cmd.run(dry_run=dry_run))

    interval = _watch_interval_seconds(config_path, 1.0)
    try:
        while True:
            exit_code = sync_cmd.run(dry_run=dry_run)
            if exit_code == ExitCode.AUTH_ERROR:
                raise typer.Exit(exit_code)

            interval = _watch_interval_seconds(config_path, interval / 3600)
            output.info(f"Next sync in {interval / 3600:g} hour(s)")
            time.sleep(interval)
    except KeyboardInterrupt:
        output.print("\nStopped watching")
        raise typer.Exit(ExitCode.SUCCESS)


@app.command()
def main_command(
    init: bool = typer.Option(
        False,
        "--init",
        help="Initialize mirror configuration (requires --namespace or --repo)",
    ),
    namespaces: Optional[List[str]] = typer.Option(
        None,
        "--namespace",
        "-n",
        help="With --init: user or organization to mirror (can be used multiple times)",
        metavar="NAME",
    ),
    repos: Optional[List[str]] = typer.Option(
        None,
        "--repo",
        help="With --init: repository as owner/repo[@branch] (can be used multiple times)",
        metavar="OWNER/REPO",
    ),
    base_folder: str = typer.Option(
        "Projects",
        "--base-folder",
        help="With --init: folder that holds mirrored repositories",
        metavar="FOLDER",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "--dryrun",
        help="Preview changes without applying them",
    ),
    strip: bool = typer.Option(
        False,
        "--strip",
        help="Remove headers, banners and backlinks from mirrored files",
    ),
    watch: bool = typer.Option(
        False,
        "--watch",
        help="Keep running and sync every sync_interval_hours",
    ),
    config_path: str = typer.Option(
        DEFAULT_CONFIG_PATH,
        "--config",
        help="Path to the configuration file",
        metavar="PATH",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
) -> None:
    """One-way mirror of GitHub Markdown files into a local folder tree.

    \b
    QUICK START:
      github-mirror --init --namespace <user_or_org>   # Initialize
      github-mirror                                    # Sync now
      github-mirror --dry-run                          # Preview changes
      github-mirror --watch                            # Sync every sync_interval_hours
      github-mirror --strip                            # Remove annotations

    \b
    EXAMPLE:
      github-mirror --init --namespace octocat --repo octocat/hello-world@main

    NOTE:
      - Files are written to <base-folder>/<owner>/<repo>/<path>
      - Local edits to mirrored files are overwritten on the next sync
    """
    if version:
        typer.echo(f"github-mirror version {__version__}")
        raise typer.Exit()

    if init:
        if not namespaces and not repos:
            typer.echo("Error: --init requires at least one --namespace or --repo", err=True)
            typer.echo("")
            typer.echo("Example:")
            typer.echo("  github-mirror --init --namespace octocat --base-folder Projects")
            raise typer.Exit(ExitCode.GENERAL_ERROR)

        _run_init(namespaces or [], repos or [], base_folder, config_path, verbosity, no_color)
        return

    if namespaces or repos:
        typer.echo("Error: --namespace and --repo are only valid with --init", err=True)
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    if strip:
        _run_strip(config_path, dry_run, verbosity, no_color)
        return

    # Without any option and without a config, show getting started message
    has_sync_options = dry_run or watch or logdir is not None
    if not has_sync_options and verbosity == 0 and not no_color:
        if not os.path.exists(config_path):
            typer.echo(GETTING_STARTED_MESSAGE)
            raise typer.Exit()

    _run_sync(config_path, dry_run, watch, logdir, verbosity, no_color)


def main() -> None:
    """Main entry point for the CLI application.

    This function is called when the module is executed directly or
    when the console script is invoked.
    """
    app()


# Allow running as: python -m src.cli.main
if __name__ == "__main__":
    main()
