"""
Test Helpers.

Scripted operator input, console capture and an in-memory inventory server.
"""

import json
from collections.abc import Callable, Iterable
from typing import Any

import httpx
from rich.console import Console


def console_output(console: Console) -> str:
    return console.file.getvalue()


def scripted_input(lines: Iterable[str]) -> Callable[[], str]:
    """Input function returning lines in order, then raising EOFError."""
    remaining = iter(lines)

    def read() -> str:
        try:
            return next(remaining)
        except StopIteration:
            raise EOFError from None

    return read


class FakeInventoryServer:
    """
    In-memory stand-in for the inventory service behind httpx.MockTransport.

    Records every request; routes follow the real service's contract.
    """

    def __init__(self, token: str = "tok-123"):
        self.token = token
        self.requests: list[httpx.Request] = []
        self.products: dict[str, dict[str, Any]] = {}
        self._next_id = 1
        self.overrides: dict[tuple[str, str], httpx.Response] = {}

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def add(self, name: str, price: float, quantity: int) -> dict[str, Any]:
        product = {"id": str(self._next_id), "name": name, "price": price, "quantity": quantity}
        self.products[product["id"]] = product
        self._next_id += 1
        return product

    def _authorized(self, request: httpx.Request) -> bool:
        return request.headers.get("Authorization") == f"Bearer {self.token}"

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        method, path = request.method, request.url.path

        override = self.overrides.get((method, path))
        if override is not None:
            return override

        if (method, path) == ("POST", "/login"):
            body = json.loads(request.content)
            if body.get("password") == "secret":
                return httpx.Response(200, json={"token": self.token})
            return httpx.Response(401, json={"error": "invalid credentials"})

        if not self._authorized(request):
            return httpx.Response(401, json={"error": "unauthorized"})

        if (method, path) == ("GET", "/api/inventory/value"):
            total = sum(p["price"] * p["quantity"] for p in self.products.values())
            return httpx.Response(200, json={"inventory_value": total})

        if path == "/api/products":
            if method == "GET":
                return httpx.Response(200, json=list(self.products.values()))
            body = json.loads(request.content)
            return httpx.Response(201, json=self.add(body["name"], body["price"], body["quantity"]))

        parts = path.removeprefix("/api/products/").split("/")
        product = self.products.get(parts[0])
        if product is None:
            return httpx.Response(404, json={"error": "product not found"})

        if len(parts) == 1 and method == "GET":
            return httpx.Response(200, json=product)
        if len(parts) == 1 and method == "DELETE":
            del self.products[parts[0]]
            return httpx.Response(200, json={"message": "Product deleted"})

        body = json.loads(request.content)
        action = parts[1]
        if action == "sell":
            if body["quantity"] > product["quantity"]:
                return httpx.Response(400, json={"error": "insufficient stock"})
            product["quantity"] -= body["quantity"]
        elif action == "restock":
            product["quantity"] += body["quantity"]
        elif action == "price":
            product["price"] = body["price"]
            return httpx.Response(200, json={"message": "Price updated"})
        return httpx.Response(200, json=product)


