"""Main entry point for the shardcache command line.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
defines CLI commands, and delegates execution to the CommandHandler.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from typing_extensions import Annotated

# --- Core Layer ---
from shardcache.core.command_handler import CommandHandler

# --- Domain Layer ---
from shardcache.domain.exceptions import CacheError

# --- Infrastructure Layer ---
# Config
from shardcache.infrastructure.config.settings import (
    get_config,
    get_default_serializer,
    get_default_ttl,
    load_configuration,
)
# UI
from shardcache.infrastructure.cli.display import ConsoleDisplay
# Cache
from shardcache.infrastructure.cache.file_store import FileCacheStore
from shardcache.infrastructure.serialization.serializers import Serializer
# Monitoring
from shardcache.infrastructure.monitoring.logger_setup import DEFAULT_LOG_FORMAT, resolve_level, setup_logging

logger = logging.getLogger(__name__)


# --- Dependency Injection Container (Manual) ---

def create_dependencies(root: Optional[Path] = None, verbose: bool = False) -> Dict[str, Any]:
    """Creates and wires up all dependencies for one CLI invocation.

    This acts as the Composition Root.

    Raises:
        typer.Exit: If the store cannot be created from the configuration.
    """
    dependencies: Dict[str, Any] = {}

    # 1. Load Configuration First, then configure logging from it
    load_configuration()
    log_level = logging.DEBUG if verbose else resolve_level(get_config('logging.level'))
    setup_logging(
        log_level=log_level,
        log_format=get_config('logging.format', DEFAULT_LOG_FORMAT),
        log_file=get_config('logging.file'),
    )

    # 2. Instantiate Infrastructure Adapters
    dependencies['ui'] = ConsoleDisplay()
    try:
        dependencies['store'] = FileCacheStore(
            root=root,
            default_ttl=get_default_ttl(),
            default_serializer=get_default_serializer(),
        )
    except (CacheError, ValueError) as e:
        logger.error(f"Failed to initialize cache store: {e}", exc_info=True)
        dependencies['ui'].display_error(f"Cache initialization failed: {e}")
        raise typer.Exit(code=2)

    # 3. Instantiate Command Handler
    dependencies['command_handler'] = CommandHandler(
        store=dependencies['store'],
        ui=dependencies['ui'],
    )
    logger.debug("All dependencies initialized successfully.")
    return dependencies


# --- Typer App Definition ---
app = typer.Typer(
    name="shardcache",
    help="shardcache: inspect and manage a sharded filesystem key-value cache.",
    add_completion=False,
    no_args_is_help=True,
)


def _handler(ctx: typer.Context) -> CommandHandler:
    return ctx.obj['command_handler']


def _finish(succeeded: bool) -> None:
    if not succeeded:
        raise typer.Exit(code=1)


# --- CLI Commands ---

KeysArgument = Annotated[List[str], typer.Argument(help="One or more cache keys.")]


@app.command()
def put(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Cache key.")],
    value: Annotated[str, typer.Argument(help="Value to store (a string unless --parse-json).")],
    ttl: Annotated[Optional[int], typer.Option("--ttl", "-t", min=0, help="Time-to-live in seconds.")] = None,
    serializer: Annotated[
        Optional[str],
        typer.Option("--serializer", "-s", help=f"Serializer tag: {', '.join(Serializer.tags())}.")
    ] = None,
    parse_json: Annotated[bool, typer.Option("--parse-json", help="Decode VALUE as JSON before storing.")] = False,
):
    """Store a value under a key."""
    _finish(_handler(ctx).handle_put(key, value, ttl=ttl, serializer=serializer, parse_json=parse_json))


@app.command()
def get(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Cache key.")],
):
    """Print the value cached under a key. Exits with 1 on a miss."""
    _finish(_handler(ctx).handle_get(key))


@app.command()
def has(ctx: typer.Context, keys: KeysArgument):
    """Check that every key is cached. Exits with 1 otherwise."""
    _finish(_handler(ctx).handle_has(keys))


@app.command()
def invalidate(ctx: typer.Context, keys: KeysArgument):
    """Delete the entries for the given keys."""
    _finish(_handler(ctx).handle_invalidate(keys))


@app.command()
def clear(ctx: typer.Context):
    """Delete every entry under the cache root."""
    _finish(_handler(ctx).handle_clear())


@app.command()
def path(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Cache key.")],
):
    """Print the file a key is stored in."""
    _finish(_handler(ctx).handle_path(key))


@app.command()
def info(ctx: typer.Context):
    """Summarize the cache directory."""
    _finish(_handler(ctx).handle_info())


@app.callback()
def main_callback(
    ctx: typer.Context,
    root: Annotated[
        Optional[Path],
        typer.Option("--root", "-r", file_okay=False, help="Cache root directory. Defaults to the configured root.")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """Wire up the store before any command runs."""
    ctx.obj = create_dependencies(root=root, verbose=verbose)


# --- Main Execution Guard ---

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
