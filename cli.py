"""
Inventory Client — Interactive Terminal Menu.

Menu-driven client for the inventory management API.
All operations are sent to the inventory service over HTTP.

Usage:
    python cli.py
    python cli.py --base-url http://inventory.internal:8080
    python cli.py --output json
    python cli.py --verbose
    python cli.py --debug
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

import click
import structlog
from rich.console import Console

from modules.cli.client import close_api_client, get_api_client
from modules.cli.inventory import InventoryService
from modules.cli.prompts import Prompter
from modules.cli.render import Renderer
from modules.cli.shell import InventoryShell
from modules.core.config import OUTPUT_MODES, get_output_mode, validate_project_root
from modules.core.logging import get_logger, setup_logging

logger = get_logger(__name__)


async def run_shell(console: Console, output: str, base_url: str | None, timeout: float | None) -> None:
    """Run the interactive shell against a shared API client."""
    client = get_api_client(source="cli", base_url=base_url, timeout=timeout)
    logger.debug("Connecting to inventory service", base_url=client.base_url, timeout=client.timeout)

    shell = InventoryShell(
        service=InventoryService(client),
        prompter=Prompter(console),
        renderer=Renderer(console, output=output),
        console=console,
    )
    try:
        await shell.run()
    finally:
        await close_api_client()


@click.command()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output (INFO level logging).")
@click.option("--debug", "-d", is_flag=True, help="Enable debug output (DEBUG level logging).")
@click.option("--base-url", default=None, help="Inventory service URL (overrides config and INVENTORY_SERVER_URL).")
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), default=None, help="Request timeout in seconds.")
@click.option(
    "--output",
    "-o",
    type=click.Choice(OUTPUT_MODES),
    default=None,
    help="Render responses as tables or as pretty-printed JSON.",
)
def main(verbose: bool, debug: bool, base_url: str | None, timeout: float | None, output: str | None) -> None:
    """Inventory Management API Client."""
    validate_project_root()

    if debug:
        setup_logging(level="DEBUG", format_type="console")
    elif verbose:
        setup_logging(level="INFO", format_type="console")
    else:
        setup_logging(level="WARNING", format_type="console")

    structlog.contextvars.bind_contextvars(source="cli")

    logger.debug("Starting inventory client", debug=debug, verbose=verbose)

    console = Console(highlight=False)
    try:
        asyncio.run(run_shell(console, output or get_output_mode(), base_url, timeout))
    except KeyboardInterrupt:
        console.print("\nExiting client.", markup=False)


if __name__ == "__main__":
    main()
