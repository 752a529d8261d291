"""
Command line interface: ``nfhl_util <command> [options]``.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Callable, Coroutine, Optional, Tuple, TypeVar

import click

from nfhl_util import __version__
from nfhl_util.core.config import settings
from nfhl_util.core.download import DownloadReport, download_all
from nfhl_util.core.errors import NFHLUtilException
from nfhl_util.core.inventory import inventory_counties, inventory_states
from nfhl_util.core.logging_config import setup_logging
from nfhl_util.core.storage import load_inventory, save_inventory
from nfhl_util.integrations.fema.client import FEMAPortalClient

logger = logging.getLogger(__name__)

T = TypeVar("T")

POLITENESS_HELP = (
    "A coefficient used to spread out requests to FEMA's servers. Higher "
    "number = fewer threads / longer delay between requests. Accepted for "
    "forward compatibility; requests are currently always sequential."
)


def politeness_option(func: Callable[..., Any]) -> Callable[..., Any]:
    return click.option(
        "--politeness",
        type=click.IntRange(0, 255),
        default=255,
        show_default=True,
        help=POLITENESS_HELP,
    )(func)


def state_option(func: Callable[..., Any]) -> Callable[..., Any]:
    return click.option(
        "--state",
        "states",
        multiple=True,
        metavar="XX",
        help="Restrict to a state/territory postal abbreviation (repeatable).",
    )(func)


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine, turning nfhl_util errors into a clean CLI failure."""
    try:
        return asyncio.run(coro)
    except NFHLUtilException as e:
        logger.error(str(e), extra={"error": e.to_dict()})
        for suggestion in e.suggestions:
            logger.info(f"Suggestion: {suggestion}")
        raise click.ClickException(e.message) from e


@click.group()
@click.version_option(__version__, prog_name="nfhl_util")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help=f"Log level [default: {settings.log_level}]",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write logs to this file (rotated at 10MB).",
)
@click.option("--json-logs", is_flag=True, help="Write the log file as JSON lines.")
def main(log_level: Optional[str], log_file: Optional[Path], json_logs: bool) -> None:
    """A tool to inventory FEMA FIRM/NFHL files and layers."""
    setup_logging(log_level=log_level, log_file=log_file, json_logs=json_logs)


@main.command("states_inventory", no_args_is_help=True)
@click.option(
    "--outfile",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Where to save the inventory JSON file.",
)
@politeness_option
@state_option
def states_inventory_command(outfile: Path, politeness: int, states: Tuple[str, ...]) -> None:
    """Lists effective NFHL file urls for all states, keyed by 2-digit fips codes."""

    async def _run() -> int:
        async with FEMAPortalClient() as client:
            inventory = await inventory_states(client, states)
        save_inventory(outfile, inventory)
        return len(inventory)

    count = run(_run())
    click.echo(f"Wrote {count} states to {outfile}")


@main.command("counties_inventory", no_args_is_help=True)
@click.option(
    "--outfile",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Where to save the inventory JSON file.",
)
@politeness_option
@state_option
def counties_inventory_command(outfile: Path, politeness: int, states: Tuple[str, ...]) -> None:
    """Lists effective NFHL file urls for all counties, keyed by 5-digit fips codes."""

    async def _run() -> int:
        async with FEMAPortalClient() as client:
            inventory = await inventory_counties(client, states)
        save_inventory(outfile, inventory)
        return len(inventory)

    count = run(_run())
    click.echo(f"Wrote {count} counties to {outfile}")


@main.command("download_all", no_args_is_help=True)
@click.argument("inventory", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--cache-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help=f"Where to cache files [default: {settings.cache_dir}]",
)
@click.option(
    "--old-inventory",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="A previous inventory JSON file. Not supported yet; ignored.",
)
@click.option(
    "--delete",
    is_flag=True,
    help="Delete cache files no longer in the inventory. Not supported yet; ignored.",
)
@politeness_option
def download_all_command(
    inventory: Path,
    cache_dir: Optional[Path],
    old_inventory: Optional[Path],
    delete: bool,
    politeness: int,
) -> None:
    """Downloads effective NFHL files listed in an inventory into a cache directory."""
    if old_inventory is not None:
        logger.warning("--old-inventory is not supported yet and will be ignored")
    if delete:
        logger.warning("--delete is not supported yet; no cache files will be removed")

    target = cache_dir or settings.cache_dir

    async def _run() -> DownloadReport:
        entries = load_inventory(inventory)
        async with FEMAPortalClient() as client:
            return await download_all(entries, target, client)

    report = run(_run())
    click.echo(json.dumps(report.to_dict()))


if __name__ == "__main__":
    main()
