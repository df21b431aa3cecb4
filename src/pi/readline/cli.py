"""CLI entry point for pi-readline. Uses Click for argument parsing."""

from __future__ import annotations

import logging
import sys

import click

from pi.readline.errors import ReadlineError
from pi.readline.readline import Readline
from pi.readline.settings import apply_overrides, load_settings


@click.command()
@click.option("--prompt", default=None, help="Prompt shown before each line")
@click.option("--history-file", default=None, help="File committed lines are appended to")
@click.option("--history-size", type=click.IntRange(min=1), default=None, help="Maximum history entries")
@click.option("--settings", "settings_path", default=None, help="Path to a readline.json settings file")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default="warning",
    help="Log level for messages written to stderr",
)
def main(prompt, history_file, history_size, settings_path, log_level):
    """Read lines interactively and echo each one back."""
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    settings = apply_overrides(
        load_settings(settings_path),
        prompt=prompt,
        history_file=history_file,
        history_size=history_size,
    )

    try:
        readline = Readline.from_settings(settings)
        for line in readline.lines():
            click.echo(f"got: {line}")
    except (ReadlineError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
