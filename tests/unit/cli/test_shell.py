"""
Unit Tests for InventoryShell.

Drives the menu loop with scripted operator input against the in-memory
inventory server.
"""

import httpx
import pytest

from modules.cli.prompts import Prompter
from modules.cli.render import Renderer
from modules.cli.shell import InventoryShell
from tests.helpers import console_output, scripted_input

LOGIN = ["1", "ops@example.com", "secret"]


@pytest.fixture
def make_shell(service, console):
    def build(lines: list[str], output: str = "table") -> InventoryShell:
        return InventoryShell(
            service=service,
            prompter=Prompter(console, scripted_input(lines)),
            renderer=Renderer(console, output=output),
            console=console,
        )

    return build


class TestLoggedOutMenu:
    """Tests for the logged-out state."""

    async def test_exit(self, make_shell, console, server):
        """Should print the banner and exit without any request."""
        await make_shell(["2"]).run()

        output = console_output(console)
        assert output.startswith("--- Inventory Management API Client ---")
        assert "You are not logged in." in output
        assert "Exiting client." in output
        assert server.requests == []

    async def test_invalid_choice(self, make_shell, console):
        await make_shell(["5", "2"]).run()

        assert "Invalid choice. Please select a valid option." in console_output(console)

    async def test_failed_login_stays_logged_out(self, make_shell, console, service):
        await make_shell(["1", "ops@example.com", "wrong", "2"]).run()

        output = console_output(console)
        assert "Login failed: server error: invalid credentials" in output
        assert "Login successful!" not in output
        assert output.count("You are not logged in.") == 2
        assert not service.is_authenticated

    async def test_login_then_logout(self, make_shell, console, service):
        await make_shell(LOGIN + ["9", "2"]).run()

        output = console_output(console)
        assert "Login successful!" in output
        assert "You are logged in." in output
        assert "Available Commands:" in output
        assert "8. Get Total Inventory Value" in output
        assert "You have been logged out." in output
        assert output.rstrip().endswith("Exiting client.")
        assert not service.is_authenticated

    async def test_unreachable_server(self, console):
        """Should report transport errors as a failed login."""
        from modules.cli.client import APIClient
        from modules.cli.inventory import InventoryService

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = APIClient(source="cli", base_url="http://inventory.test", transport=httpx.MockTransport(refuse))
        shell = InventoryShell(
            service=InventoryService(client),
            prompter=Prompter(console, scripted_input(LOGIN + ["2"])),
            renderer=Renderer(console),
            console=console,
        )

        await shell.run()
        await client.close()

        assert "Login failed: connection refused" in console_output(console)


class TestEndOfInput:

    async def test_eof_exits_cleanly(self, make_shell, console):
        """Should exit when input ends mid-session."""
        await make_shell(LOGIN).run()

        assert console_output(console).rstrip().endswith("Exiting client.")

    async def test_keyboard_interrupt_propagates(self, service, console):
        """Should leave Ctrl-C to the caller without printing the exit line."""

        def interrupted() -> str:
            raise KeyboardInterrupt

        shell = InventoryShell(
            service=service,
            prompter=Prompter(console, interrupted),
            renderer=Renderer(console),
            console=console,
        )

        with pytest.raises(KeyboardInterrupt):
            await shell.run()

        assert "Exiting client." not in console_output(console)


class TestLoggedInActions:
    """Tests for each logged-in menu action."""

    async def test_add_product(self, make_shell, console, server):
        await make_shell(LOGIN + ["1", "Widget", "abc", "49.99", "10", "9", "2"]).run()

        output = console_output(console)
        assert "-> Adding a new Product..." in output
        assert "Error: Please enter a valid number (e.g., 49.99)." in output
        assert "Product added successfully." in output
        assert server.products["1"] == {"id": "1", "name": "Widget", "price": 49.99, "quantity": 10}

    async def test_get_product(self, make_shell, console, server):
        server.add("Gadget", 12.5, 3)

        await make_shell(LOGIN + ["2", "1", "9", "2"]).run()

        output = console_output(console)
        assert "-> Getting a Product..." in output
        assert "Gadget" in output
        assert "$12.50" in output

    async def test_list_products(self, make_shell, console, server):
        server.add("Widget", 1.0, 1)
        server.add("Gadget", 2.0, 2)

        await make_shell(LOGIN + ["3", "9", "2"]).run()

        output = console_output(console)
        assert "-> Listing All Products..." in output
        assert "Widget" in output and "Gadget" in output

    async def test_list_empty_inventory(self, make_shell, console):
        await make_shell(LOGIN + ["3", "9", "2"]).run()

        assert "No products found in inventory." in console_output(console)

    async def test_sell_product(self, make_shell, console, server):
        server.add("Widget", 1.0, 10)

        await make_shell(LOGIN + ["4", "1", "3", "9", "2"]).run()

        assert "Sale processed successfully." in console_output(console)
        assert server.products["1"]["quantity"] == 7

    async def test_restock_product(self, make_shell, console, server):
        server.add("Widget", 1.0, 10)

        await make_shell(LOGIN + ["5", "1", "x", "5", "9", "2"]).run()

        output = console_output(console)
        assert "Error: Please enter a valid whole number." in output
        assert "Product restocked successfully." in output
        assert server.products["1"]["quantity"] == 15

    async def test_update_price(self, make_shell, console, server):
        server.add("Widget", 1.0, 10)

        await make_shell(LOGIN + ["6", "1", "2.75", "9", "2"]).run()

        assert "   Price updated" in console_output(console)
        assert server.products["1"]["price"] == 2.75

    async def test_delete_product(self, make_shell, console, server):
        server.add("Widget", 1.0, 10)

        await make_shell(LOGIN + ["7", "1", "9", "2"]).run()

        assert "   Product deleted" in console_output(console)
        assert server.products == {}

    async def test_inventory_value(self, make_shell, console, server):
        server.add("Widget", 2.5, 4)

        await make_shell(LOGIN + ["8", "9", "2"]).run()

        assert "   Total Inventory Value: $10.00" in console_output(console)

    async def test_inventory_value_as_json(self, make_shell, console, server):
        server.add("Widget", 2.5, 4)

        await make_shell(LOGIN + ["8", "9", "2"], output="json").run()

        assert '"inventory_value": 10.0' in console_output(console)

    async def test_json_output_shows_body_as_sent(self, make_shell, console, server):
        """Should print extra fields and empty objects exactly as the server returned them."""
        server.add("Widget", 1.0, 10)
        server.overrides[("GET", "/api/products/1")] = httpx.Response(
            200, json={"id": 1, "name": "Widget", "price": 1.0, "quantity": 10, "sku": "W-1"}
        )
        server.overrides[("DELETE", "/api/products/1")] = httpx.Response(200, json={})

        await make_shell(LOGIN + ["2", "1", "7", "1", "9", "2"], output="json").run()

        output = console_output(console)
        assert '"sku": "W-1"' in output
        assert '"id": 1,' in output
        assert "{}" in output
        assert "Product deleted successfully." not in output

    async def test_server_error_keeps_session(self, make_shell, console, service):
        """Should report the error and keep the logged-in menu."""
        await make_shell(LOGIN + ["2", "404", "9", "2"]).run()

        output = console_output(console)
        assert "An error occurred: server error: product not found" in output
        assert "You have been logged out." in output

    async def test_invalid_choice_while_logged_in(self, make_shell, console):
        await make_shell(LOGIN + ["0", "9", "2"]).run()

        assert "Invalid choice. Please select a valid option." in console_output(console)

    async def test_rejected_session_returns_to_login(self, make_shell, console, server, service):
        """Should drop back to the logged-out menu on 401."""
        server.overrides[("GET", "/api/products")] = httpx.Response(401, json={"error": "token expired"})

        await make_shell(LOGIN + ["3", "2"]).run()

        output = console_output(console)
        assert "An error occurred: server error: token expired" in output
        assert "Your session has ended. Please log in again." in output
        assert output.count("You are not logged in.") == 2
        assert not service.is_authenticated
