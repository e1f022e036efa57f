"""CLI command for playing in the terminal."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from dragonsolitaire.playtest.session import PlaytestSession, SessionConfig

logger = logging.getLogger(__name__)


@click.command()
@click.option("--seed", type=int, default=None, help="Random seed for reproducibility")
@click.option("--debug", is_flag=True, help="Show the next dungeon and fate cards")
@click.option("--show-rules/--no-rules", default=True, help="Display rules at start")
@click.option(
    "--results",
    type=click.Path(),
    default=None,
    help="Append the session result as a JSON line to this file",
)
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(
    seed: int | None,
    debug: bool,
    show_rules: bool,
    results: str | None,
    verbose: bool,
):
    """Play Dragon Solitaire in the terminal."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)

    config = SessionConfig(seed=seed, debug=debug, show_rules=show_rules)
    session = PlaytestSession(config)

    try:
        result = session.run(output_fn=click.echo)
    except KeyboardInterrupt:
        click.echo("\n\nGame interrupted.")
        result = None

    if result and results:
        path = Path(results)
        with open(path, "a") as f:
            f.write(json.dumps(result.to_dict()) + "\n")
        click.echo(f"\nResult saved to {path}")

    click.echo("\nThanks for playing!")


if __name__ == "__main__":
    main()
