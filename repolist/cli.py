"""CLI entry point — resolve options, fetch, filter, print."""

import logging
from pathlib import Path
from typing import Optional

import click
import typer

from . import __version__
from .config import find_defaults_file, load_defaults, resolve_config
from .engine import run_filters
from .errors import RepolistError
from .format import render, write_output
from .log import setup_logging
from .models import OutputMode
from .remote import fetch_repositories

logger = logging.getLogger(__name__)

PROFILE_URL = "https://github.com/{owner}"

app = typer.Typer(help="List and report on the repositories of a GitHub user or organization.")


def _fail(msg: str) -> None:
    """One line on stderr, exit 1 — used for every expected failure."""
    typer.echo(f"Error: {msg}", err=True)
    raise typer.Exit(1)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"repolist {__version__}")
        raise typer.Exit()


@app.command()
def main(
    owner: Optional[str] = typer.Argument(None, help="User or organization to list"),
    org: bool = typer.Option(False, "--org", help="Owner is an organization (informational only)"),
    limit: Optional[str] = typer.Option(None, "--limit", "-L", help="Maximum repositories to fetch (default: 100)"),
    visibility: Optional[str] = typer.Option(None, "--visibility", help="public, private or internal"),
    forks: Optional[bool] = typer.Option(None, "--forks/--no-forks", help="Include forked repositories (default: include)"),
    source: bool = typer.Option(False, "--source", help="Only repositories the owner created, not forks"),
    topics: Optional[str] = typer.Option(None, "--topics", "-t", help="Keep repos with a topic containing this text (case-insensitive)"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="console, json or csv (default: console)"),
    out_file: Optional[Path] = typer.Option(None, "--out-file", "-f", help="Write json/csv here instead of stdout"),
    web: bool = typer.Option(False, "--web", "-w", help="Open the owner's profile in the browser afterwards"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML file with option defaults"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
    version: bool = typer.Option(
        False, "--version", callback=_print_version, is_eager=True, help="Show version and exit"
    ),
) -> None:
    """Fetch OWNER's repositories with gh, filter them, and print a table, JSON or CSV."""
    setup_logging(verbose)
    try:
        defaults = load_defaults(find_defaults_file(config_path))
        config = resolve_config(
            owner,
            limit=limit,
            visibility=visibility,
            include_forks=forks,
            source_only=True if source else None,
            topics=topics,
            output=output,
            out_file=str(out_file) if out_file else None,
            is_org=org,
            defaults=defaults,
        )
        if config.is_org:
            logger.debug("%s treated as an organization", config.owner)
        repos = run_filters(fetch_repositories(config), config)
        text = render(repos, config.output_mode)
        if config.output_mode == OutputMode.CONSOLE:
            write_output(text, None)
        else:
            write_output(text, config.out_file)
    except RepolistError as e:
        _fail(str(e))

    if web:
        click.launch(PROFILE_URL.format(owner=config.owner))


def _main() -> None:
    app()


if __name__ == "__main__":
    _main()
