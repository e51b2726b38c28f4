"""Click-based CLI for the git poller."""

import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

import click

from .config import ConfigLoader
from .errors import GitPollerError
from .poller_logging import setup_logging
from .source_control import GitSourceControl


def common_options(f: Any) -> Any:
    """Common options for every command."""
    f = click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")(f)
    f = click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")(f)
    f = click.option(
        "--log-file", type=click.Path(dir_okay=False), help="Also log to this file"
    )(f)
    f = click.option(
        "--log-format",
        type=click.Choice(["text", "json"]),
        default="text",
        show_default=True,
        help="Log record format",
    )(f)
    f = click.option(
        "--config",
        "config_file",
        type=click.Path(exists=True, dir_okay=False),
        help="JSON or <git> XML configuration file",
    )(f)
    f = click.option("--repository", "-r", help="Remote repository URL")(f)
    f = click.option("--branch", "-b", help="Branch to track (default: master)")(f)
    f = click.option(
        "--working-directory",
        "-w",
        type=click.Path(file_okay=False),
        help="Local working copy directory",
    )(f)
    return f


def _build_source(
    config_file: str | None,
    verbose: bool,
    quiet: bool,
    log_file: str | None,
    log_format: str,
    **overrides: Any,
) -> GitSourceControl:
    setup_logging(
        verbose=verbose,
        quiet=quiet,
        log_file=Path(log_file) if log_file else None,
        log_format=log_format,
    )
    loader = ConfigLoader(Path(config_file) if config_file else None)
    config = loader.load(**overrides)
    return GitSourceControl(config, base_dir=loader.base_dir)


def _fail(error: GitPollerError) -> None:
    click.echo(error.format(use_color=sys.stderr.isatty()), err=True)
    sys.exit(1)


@click.group()
@click.version_option(version="1.0.0")
def cli() -> None:
    """Git source control poller for continuous integration builds."""


@cli.command()
@common_options
@click.option(
    "--from",
    "start",
    type=click.DateTime(formats=["%Y-%m-%dT%H:%M:%S", "%Y-%m-%d"]),
    required=True,
    help="Start of the window (inclusive, local time)",
)
@click.option(
    "--to",
    "end",
    type=click.DateTime(formats=["%Y-%m-%dT%H:%M:%S", "%Y-%m-%d"]),
    default=None,
    help="End of the window (inclusive, local time; default: now)",
)
@click.option("--json", "as_json", is_flag=True, help="Print changes as JSON")
def changes(
    config_file: str | None,
    repository: str | None,
    branch: str | None,
    working_directory: str | None,
    verbose: bool,
    quiet: bool,
    log_file: str | None,
    log_format: str,
    start: datetime,
    end: datetime | None,
    as_json: bool,
) -> None:
    """Poll the remote and list commits in the time window."""
    try:
        source = _build_source(
            config_file,
            verbose,
            quiet,
            log_file,
            log_format,
            repository=repository,
            branch=branch,
            working_directory=working_directory,
        )
        entries = source.get_changes(start, end or datetime.now())
    except GitPollerError as e:
        _fail(e)
        return

    if as_json:
        click.echo(json.dumps([entry.to_dict() for entry in entries], indent=2))
        return

    if not entries:
        if not quiet:
            click.echo("No changes detected")
        return

    for entry in entries:
        click.echo(
            f"{entry.sequence_number:>5}  {entry.commit_id[:10]:<10}  "
            f"{entry.timestamp.isoformat()}  {entry.author_name} <{entry.author_email}>  "
            f"{entry.message}"
        )


@cli.command()
@common_options
def sync(
    config_file: str | None,
    repository: str | None,
    branch: str | None,
    working_directory: str | None,
    verbose: bool,
    quiet: bool,
    log_file: str | None,
    log_format: str,
) -> None:
    """Clean, reset and merge the working copy with origin."""
    try:
        source = _build_source(
            config_file,
            verbose,
            quiet,
            log_file,
            log_format,
            repository=repository,
            branch=branch,
            working_directory=working_directory,
        )
        source.synchronize_working_copy()
    except GitPollerError as e:
        _fail(e)


@cli.command()
@common_options
@click.argument("label")
@click.option("--failed", is_flag=True, help="Report the build as failed (no tag)")
@click.option("--message", help="Tag message template containing {0}")
def tag(
    config_file: str | None,
    repository: str | None,
    branch: str | None,
    working_directory: str | None,
    verbose: bool,
    quiet: bool,
    log_file: str | None,
    log_format: str,
    label: str,
    failed: bool,
    message: str | None,
) -> None:
    """Tag a successful build LABEL and push tags."""
    try:
        source = _build_source(
            config_file,
            verbose,
            quiet,
            log_file,
            log_format,
            repository=repository,
            branch=branch,
            working_directory=working_directory,
            tag_commit_message=message,
        )
        source.tag_release(label, build_succeeded=not failed)
    except GitPollerError as e:
        _fail(e)


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
