"""Hashtrack CLI entry point.

Track hashtags and read matching tweets from the Hashtrack service.
"""

from __future__ import annotations

import logging
from typing import Annotated

import typer

from hashtrack.commands import auth_cmd, tracks_cmd, tweets_cmd
from hashtrack.config import get_config
from hashtrack.context import AppContext
from hashtrack.exceptions import ConfigError
from hashtrack.utils.errors import handle_error

app = typer.Typer(
    name="hashtrack",
    help="CLI client for the Hashtrack hashtag-tracking service.",
    no_args_is_help=True,
)

# Register commands
app.command("login")(auth_cmd.login)
app.command("logout")(auth_cmd.logout)
app.command("status")(auth_cmd.status)
app.command("list")(tweets_cmd.list_tweets)
app.command("watch")(tweets_cmd.watch_tweets)
app.command("tracks")(tracks_cmd.list_tracks)
app.command("track")(tracks_cmd.create_track)
app.command("untrack")(tracks_cmd.remove_track)


@app.callback()
def main(
    ctx: typer.Context,
    endpoint: Annotated[str | None, typer.Option("--endpoint", "-e", help="The hashtrack service endpoint")] = None,
    config: Annotated[str | None, typer.Option("--config", "-c", help="The config file location")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose logging")] = False,
) -> None:
    """Hashtrack CLI: manage your session, tracked hashtags and tweet feeds."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    try:
        ctx.obj = AppContext(config=get_config(endpoint, config), verbose=verbose)
    except ConfigError as e:
        handle_error(e)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
