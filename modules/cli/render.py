"""
Response Rendering.

Renders inventory service results for the operator, either as typed
text/tables or as the server's response body pretty-printed as JSON.
"""

from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from modules.cli.models import Product, Reply


def format_price(value: float) -> str:
    return f"${value:.2f}"


class Renderer:
    """Print server responses in the selected output mode (table or json)."""

    def __init__(self, console: Console, output: str = "table"):
        self.console = console
        self.output = output

    @property
    def as_json(self) -> bool:
        return self.output == "json"

    def _plain(self, text: str) -> None:
        # Long server messages stay on one line regardless of console width
        self.console.print(text, markup=False, highlight=False, soft_wrap=True)

    def _header(self) -> None:
        self._plain("\n<- Server Response:")

    def _line(self, text: str) -> None:
        self._plain(f"   {text}")

    def _body(self, body: Any) -> None:
        """Print the response body as received."""
        if body is None:
            self._line("(empty response body)")
        elif isinstance(body, str):
            self._plain(body)
        else:
            self.console.print_json(data=body)

    def products_table(self, products: list[Product]) -> Table:
        table = Table(box=None, show_edge=False, pad_edge=False, padding=(0, 3, 0, 0))
        # Identifiers and names fold onto extra lines instead of being truncated
        table.add_column("ID", overflow="fold")
        table.add_column("NAME", overflow="fold")
        table.add_column("PRICE", justify="right", no_wrap=True)
        table.add_column("QUANTITY", justify="right", no_wrap=True)
        for product in products:
            table.add_row(
                escape(product.id),
                escape(product.name),
                format_price(product.price),
                str(product.quantity),
            )
        return table

    def message(self, reply: Reply[str]) -> None:
        self._header()
        if self.as_json:
            self._body(reply.body)
        else:
            self._line(reply.data)

    def product(self, reply: Reply[Product], message: str = "") -> None:
        """Render a single product, preceded by an optional success message."""
        self._header()
        if self.as_json:
            self._body(reply.body)
            return
        if message:
            self._line(message)
        self.console.print(self.products_table([reply.data]))

    def products(self, reply: Reply[list[Product]]) -> None:
        self._header()
        if self.as_json:
            self._body(reply.body)
        elif not reply.data:
            self._plain("No products found in inventory.")
        else:
            self.console.print(self.products_table(reply.data))

    def inventory_value(self, reply: Reply[float]) -> None:
        self._header()
        if self.as_json:
            self._body(reply.body)
        else:
            self._line(f"Total Inventory Value: {format_price(reply.data)}")

    def error(self, exc: BaseException, prefix: str = "An error occurred") -> None:
        self.console.print(f"[red]{escape(prefix)}: {escape(str(exc))}[/]", soft_wrap=True)
