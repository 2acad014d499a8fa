"""Main CLI entry point for filecache.

Provides command-line access to a cache directory: reading and writing
entries, sweeping expired files, and running the simulated API fetcher.
"""

import json
import logging
import sys
import time
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from filecache.cache import CacheConfig, CacheStore
from filecache.fetch import (
    PRODUCTS_URL,
    USERS_URL,
    fetch_and_cache,
)

# Global console for Rich output
console = Console()

_MISSING = object()


def setup_logging(verbose: bool) -> None:
    """Route filecache logs to a Rich console handler."""
    package_logger = logging.getLogger("filecache")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    package_logger.addHandler(
        RichHandler(console=Console(stderr=True), show_path=False, markup=False)
    )
    package_logger.propagate = False


def load_config(
    config_path: Optional[str] = None,
    cache_dir: Optional[str] = None,
    ttl: Optional[int] = None,
    serializer: Optional[str] = None,
) -> CacheConfig:
    """Build configuration from multiple sources.

    Priority:
    1. Explicit CLI flags
    2. --config JSON file
    3. FILECACHE_* environment variables
    4. Defaults

    Raises:
        click.ClickException: If the config file cannot be read
    """
    if config_path:
        try:
            config = CacheConfig.load(Path(config_path))
        except (OSError, ValueError, TypeError) as e:
            raise click.ClickException(f"Invalid config file {config_path}: {e}")
    else:
        config = CacheConfig.from_env()

    if cache_dir:
        config.cache_dir = Path(cache_dir).expanduser()
    if ttl is not None:
        config.default_ttl = ttl
    if serializer:
        config.serializer = serializer

    return config


def open_store(ctx, clock=time.time) -> CacheStore:
    """Create a CacheStore from the CLI context configuration."""
    return CacheStore(config=ctx.obj["config"], clock=clock)


def format_value(value) -> str:
    """Render a cached value for terminal output."""
    if isinstance(value, (dict, list)):
        return json.dumps(value, indent=2, default=str)
    return str(value)


@click.group()
@click.option(
    "--cache-dir",
    "-C",
    type=click.Path(file_okay=False),
    help="Cache directory (default: FILECACHE_DIR env var or ./cache)",
)
@click.option("--ttl", type=click.IntRange(min=0), help="Default TTL in seconds")
@click.option(
    "--serializer",
    type=click.Choice(["pickle", "json", "joblib"]),
    help="Envelope serializer",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    help="JSON config file (replaces FILECACHE_* environment variables)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx, cache_dir, ttl, serializer, config_path, verbose):
    """filecache CLI - Inspect and maintain a file-backed TTL cache.

    Use --cache-dir/-C to choose the cache, or set FILECACHE_DIR.
    """
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config(config_path, cache_dir, ttl, serializer)


# ==================== Entry Commands ====================


@cli.command("get")
@click.argument("key")
@click.pass_context
def get_cmd(ctx, key):
    """Print the cached value for KEY (exit code 1 on a miss).

    Example:
        filecache get api_data_users
    """
    try:
        store = open_store(ctx)
        value = store.get(key, default=_MISSING)
    except Exception as e:
        console.print(f"[red]✗[/red] Error: {e}", style="red")
        sys.exit(1)

    if value is _MISSING:
        console.print(f"[yellow]Cache miss for '{key}'[/yellow]")
        sys.exit(1)

    click.echo(format_value(value))


@cli.command("put")
@click.argument("key")
@click.argument("value")
@click.option("--ttl", type=click.IntRange(min=0), help="TTL in seconds for this entry")
@click.option("--json", "as_json", is_flag=True, help="Parse VALUE as JSON")
@click.pass_context
def put_cmd(ctx, key, value, ttl, as_json):
    """Store VALUE under KEY.

    Example:
        filecache put greeting hello --ttl 60
        filecache put config '{"retries": 3}' --json
    """
    if as_json:
        try:
            value = json.loads(value)
        except json.JSONDecodeError as e:
            raise click.BadParameter(f"Not valid JSON: {e}", param_hint="VALUE")

    try:
        store = open_store(ctx)
        stored = store.put(key, value, ttl=ttl)
    except Exception as e:
        console.print(f"[red]✗[/red] Error: {e}", style="red")
        sys.exit(1)

    if not stored:
        console.print(f"[red]✗[/red] Failed to cache '{key}'", style="red")
        sys.exit(1)

    effective_ttl = store.default_ttl if ttl is None else ttl
    console.print(f"[green]✓[/green] Cached '{key}' for {effective_ttl}s")


@cli.command("delete")
@click.argument("key")
@click.pass_context
def delete_cmd(ctx, key):
    """Remove the entry for KEY (no-op if absent)."""
    try:
        store = open_store(ctx)
        removed = store.delete(key)
    except Exception as e:
        console.print(f"[red]✗[/red] Error: {e}", style="red")
        sys.exit(1)

    if removed:
        console.print(f"[green]✓[/green] Deleted '{key}'")
    else:
        console.print(f"[yellow]No cache entry for '{key}'[/yellow]")


@cli.command("status")
@click.argument("key")
@click.pass_context
def status_cmd(ctx, key):
    """Show on-disk status for KEY."""
    try:
        store = open_store(ctx)
        status = store.get_status(key)
    except Exception as e:
        console.print(f"[red]✗[/red] Error: {e}", style="red")
        sys.exit(1)

    if status is None:
        console.print(f"[yellow]No cache entry for '{key}'[/yellow]")
        sys.exit(1)

    table = Table(title=f"Cache entry '{key}'")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    for field, value in status.items():
        table.add_row(field, str(value))
    console.print(table)


# ==================== Maintenance Commands ====================


@cli.command("sweep")
@click.pass_context
def sweep_cmd(ctx):
    """Delete expired entries from the cache directory."""
    try:
        store = open_store(ctx)
        store.sweep()
    except Exception as e:
        console.print(f"[red]✗[/red] Error: {e}", style="red")
        sys.exit(1)

    removed = store.get_stats()["expired_removed"]
    console.print(f"[green]✓[/green] Sweep removed {removed} expired entries")


@cli.command("clear")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
def clear_cmd(ctx, yes):
    """Delete every entry in the cache directory."""
    config = ctx.obj["config"]
    if not yes:
        click.confirm(f"Delete all cache entries in {config.cache_dir}?", abort=True)

    try:
        store = open_store(ctx)
        removed = store.clear()
    except Exception as e:
        console.print(f"[red]✗[/red] Error: {e}", style="red")
        sys.exit(1)

    console.print(f"[green]✓[/green] Cleared {removed} entries")


@cli.command("stats")
@click.pass_context
def stats_cmd(ctx):
    """Show cache directory statistics."""
    try:
        store = open_store(ctx)
        stats = store.get_stats()
    except Exception as e:
        console.print(f"[red]✗[/red] Error: {e}", style="red")
        sys.exit(1)

    table = Table(title="Cache statistics")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", justify="right", style="green")
    for name in ("cache_dir", "serializer", "default_ttl", "entry_count"):
        table.add_row(name, str(stats[name]))
    console.print(table)


# ==================== API Commands ====================


@cli.command("fetch")
@click.argument("url")
@click.option("--ttl", type=click.IntRange(min=0), default=300, show_default=True)
@click.pass_context
def fetch_cmd(ctx, url, ttl):
    """Fetch URL from the simulated API, using the cache when possible.

    Example:
        filecache fetch https://example.com/api/users
    """
    try:
        store = open_store(ctx)
        result = fetch_and_cache(url, store, ttl=ttl)
    except Exception as e:
        console.print(f"[red]✗[/red] Error: {e}", style="red")
        sys.exit(1)

    if result.data is None:
        console.print(f"[red]✗[/red] API fetch failed for {url}", style="red")
        sys.exit(1)

    source = "cache" if result.from_cache else "API"
    console.print(f"[cyan]Retrieved from {source}:[/cyan] {url}")
    click.echo(format_value(result.data))


@cli.command("demo")
@click.option(
    "--advance",
    type=click.IntRange(min=0),
    default=305,
    show_default=True,
    help="Seconds to jump the clock forward before the final fetch",
)
@click.pass_context
def demo_cmd(ctx, advance):
    """Walk through fetch, cache hit, expiry and sweep without waiting.

    Users are cached for 300 seconds, so with the default --advance the
    final users request is fetched again.
    """
    offset = {"seconds": 0}

    def clock():
        return time.time() + offset["seconds"]

    try:
        store = open_store(ctx, clock=clock)

        steps = [
            ("First users request", USERS_URL),
            ("Second users request", USERS_URL),
            ("Products request", PRODUCTS_URL),
        ]
        for label, url in steps:
            result = fetch_and_cache(url, store, ttl=300)
            source = "cache" if result.from_cache else "API"
            console.print(f"[bold]{label}[/bold] ({source})")
            click.echo(format_value(result.data))

        offset["seconds"] = advance
        console.print(f"\n[dim]... {advance} seconds later ...[/dim]\n")

        result = fetch_and_cache(USERS_URL, store, ttl=300)
        source = "cache" if result.from_cache else "API"
        console.print(f"[bold]Users request after waiting[/bold] ({source})")
        click.echo(format_value(result.data))

        store.sweep()
        stats = store.get_stats()
    except Exception as e:
        console.print(f"[red]✗[/red] Error: {e}", style="red")
        sys.exit(1)

    console.print(
        f"\n[green]✓[/green] Demo complete: {stats['cache_hits']} hits, "
        f"{stats['cache_misses']} misses, {stats['expired_removed']} expired removed"
    )


if __name__ == "__main__":
    cli()
