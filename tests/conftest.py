"""
Shared Test Fixtures.

Every test runs from the project root with fresh configuration caches and
logs redirected to a temporary directory.
"""

import io
import logging
from pathlib import Path
from unittest.mock import patch

import pytest
import structlog
from rich.console import Console

from modules.core import config as config_module
from modules.core import logging as logging_module
from tests.helpers import FakeInventoryServer

PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture(autouse=True)
def project_env(monkeypatch, tmp_path):
    """Run from the project root with clean config, env and log state."""
    monkeypatch.chdir(PROJECT_ROOT)
    monkeypatch.delenv("INVENTORY_SERVER_URL", raising=False)
    monkeypatch.delenv("INVENTORY_TIMEOUT", raising=False)
    config_module.reset_config()
    logging_module._logging_config = None

    root_logger = logging.getLogger()
    saved_handlers = list(root_logger.handlers)
    saved_level = root_logger.level

    logs_dir = tmp_path / "logs"
    logs_dir.mkdir()
    with patch("modules.core.logging._get_logs_dir", return_value=logs_dir):
        yield

    for handler in list(root_logger.handlers):
        if handler not in saved_handlers:
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(saved_level)
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    config_module.reset_config()
    logging_module._logging_config = None


@pytest.fixture
def console() -> Console:
    """A console writing plain text to a buffer."""
    return Console(file=io.StringIO(), width=120, color_system=None, highlight=False)


@pytest.fixture
def server() -> FakeInventoryServer:
    return FakeInventoryServer()


@pytest.fixture
async def api_client(server):
    """APIClient wired to the fake inventory server."""
    from modules.cli.client import APIClient

    client = APIClient(source="cli", base_url="http://inventory.test", timeout=5, transport=server.transport)
    yield client
    await client.close()


@pytest.fixture
def service(api_client):
    from modules.cli.inventory import InventoryService

    return InventoryService(api_client)
