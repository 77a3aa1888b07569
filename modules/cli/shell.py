"""
Interactive Inventory Shell.

Two-state menu loop: a logged-out menu (login, exit) and a logged-in menu
with one entry per inventory operation. The shell only collects input and
renders results; every request goes through InventoryService.
"""

from collections.abc import Awaitable, Callable

import httpx
from rich.console import Console

from modules.cli.inventory import InventoryService
from modules.cli.prompts import Prompter
from modules.cli.render import Renderer
from modules.core.exceptions import AuthenticationError, InventoryClientError
from modules.core.logging import get_logger

logger = get_logger(__name__)

SEPARATOR = "-------------------------------------"

LOGGED_IN_MENU = (
    "1. Add Product",
    "2. Get Product by ID",
    "3. List All Products",
    "4. Sell Product",
    "5. Restock Product",
    "6. Update Product Price",
    "7. Delete Product",
    "8. Get Total Inventory Value",
    "9. Logout",
)

# Errors reported to the operator without leaving the menu loop
ACTION_ERRORS = (InventoryClientError, httpx.HTTPError)


class InventoryShell:
    """
    Menu-driven inventory client.

    Usage:
        shell = InventoryShell(service, Prompter(console), Renderer(console), console)
        await shell.run()
    """

    def __init__(
        self,
        service: InventoryService,
        prompter: Prompter,
        renderer: Renderer,
        console: Console,
    ):
        self.service = service
        self.prompter = prompter
        self.renderer = renderer
        self.console = console
        self._actions: dict[str, Callable[[], Awaitable[None]]] = {
            "1": self.add_product,
            "2": self.get_product,
            "3": self.list_products,
            "4": self.sell_product,
            "5": self.restock_product,
            "6": self.update_price,
            "7": self.delete_product,
            "8": self.inventory_value,
        }

    def _say(self, text: str) -> None:
        self.console.print(text, markup=False, highlight=False, soft_wrap=True)

    async def run(self) -> None:
        """Run until the operator exits or input ends. KeyboardInterrupt propagates."""
        self._say("--- Inventory Management API Client ---")
        try:
            while True:
                if self.service.is_authenticated:
                    await self.logged_in_loop()
                elif not await self.logged_out_loop():
                    return
        except EOFError:
            self._say("\nExiting client.")
            logger.info("Input closed, exiting")

    async def logged_out_loop(self) -> bool:
        """Return True once logged in, False when the operator chooses to exit."""
        while True:
            self._say(f"\n{SEPARATOR}")
            self._say("You are not logged in.")
            self._say("1. Login")
            self._say("2. Exit")
            choice = self.prompter.read_string("Enter your choice: ")

            if choice == "1":
                if await self.login():
                    self._say("\nLogin successful!")
                    return True
            elif choice == "2":
                self._say("Exiting client.")
                return False
            else:
                self._say("Invalid choice. Please select a valid option.")

    async def logged_in_loop(self) -> None:
        """Serve the logged-in menu until logout or the session is rejected."""
        self._say(f"\n{SEPARATOR}")
        self._say("You are logged in.")

        while self.service.is_authenticated:
            self._say("\nAvailable Commands:")
            for entry in LOGGED_IN_MENU:
                self._say(entry)
            choice = self.prompter.read_string("Enter your choice: ")

            if choice == "9":
                self.logout()
                return

            action = self._actions.get(choice)
            if action is None:
                self._say("Invalid choice. Please select a valid option.")
            else:
                await self._run_action(choice, action)
            self._say(SEPARATOR)

    async def _run_action(self, choice: str, action: Callable[[], Awaitable[None]]) -> None:
        try:
            await action()
        except AuthenticationError as e:
            logger.info("Action rejected, session ended", choice=choice, error=str(e))
            self.renderer.error(e)
            self._say("Your session has ended. Please log in again.")
        except ACTION_ERRORS as e:
            logger.info("Action failed", choice=choice, error=str(e))
            self.renderer.error(e)

    async def login(self) -> bool:
        self._say("\n-> Logging in...")
        email = self.prompter.read_string("   Enter Email: ")
        password = self.prompter.read_string("   Enter Password: ")
        try:
            await self.service.login(email, password)
        except ACTION_ERRORS as e:
            logger.info("Login failed", email=email, error=str(e))
            self.renderer.error(e, prefix="Login failed")
            return False
        return True

    def logout(self) -> None:
        self.service.logout()
        self._say("\nYou have been logged out.")

    async def add_product(self) -> None:
        self._say("\n-> Adding a new Product...")
        name = self.prompter.read_string("   Enter Name: ")
        price = self.prompter.read_float("   Enter Price: ")
        quantity = self.prompter.read_int("   Enter Quantity: ")
        reply = await self.service.add_product(name, price, quantity)
        self.renderer.product(reply, "Product added successfully.")

    async def get_product(self) -> None:
        self._say("\n-> Getting a Product...")
        product_id = self.prompter.read_string("   Enter Product ID: ")
        reply = await self.service.get_product(product_id)
        self.renderer.product(reply)

    async def list_products(self) -> None:
        self._say("\n-> Listing All Products...")
        reply = await self.service.list_products()
        self.renderer.products(reply)

    async def sell_product(self) -> None:
        self._say("\n-> Selling Product...")
        product_id = self.prompter.read_string("   Enter Product ID: ")
        quantity = self.prompter.read_int("   Enter Quantity to Sell: ")
        reply = await self.service.sell_product(product_id, quantity)
        self.renderer.product(reply, "Sale processed successfully.")

    async def restock_product(self) -> None:
        self._say("\n-> Restocking a Product...")
        product_id = self.prompter.read_string("   Enter Product ID: ")
        quantity = self.prompter.read_int("   Enter Quantity to Restock: ")
        reply = await self.service.restock_product(product_id, quantity)
        self.renderer.product(reply, "Product restocked successfully.")

    async def update_price(self) -> None:
        self._say("\n-> Updating Product Price...")
        product_id = self.prompter.read_string("   Enter Product ID: ")
        price = self.prompter.read_float("   Enter New Price: ")
        self.renderer.message(await self.service.update_price(product_id, price))

    async def delete_product(self) -> None:
        self._say("\n-> Deleting a Product...")
        product_id = self.prompter.read_string("   Enter Product ID to Delete: ")
        self.renderer.message(await self.service.delete_product(product_id))

    async def inventory_value(self) -> None:
        self._say("\n-> Getting Total Inventory Value...")
        self.renderer.inventory_value(await self.service.get_inventory_value())
