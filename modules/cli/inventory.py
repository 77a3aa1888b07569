"""
Inventory Service.

One method per inventory service endpoint. Each method returns a Reply (typed
result plus the decoded response body) or raises an InventoryClientError
subclass; transport failures propagate as httpx.HTTPError.

Endpoints:
    POST   /login                       -> {"token": ...}
    POST   /api/products                -> Product
    GET    /api/products                -> [Product, ...]
    GET    /api/products/{id}           -> Product
    PATCH  /api/products/{id}/sell      -> Product
    PATCH  /api/products/{id}/restock   -> Product
    PATCH  /api/products/{id}/price     -> {"message": ...}
    DELETE /api/products/{id}           -> {"message": ...}
    GET    /api/inventory/value         -> {"inventory_value": ...}

Error bodies are {"error": "..."}.
"""

from typing import Any, NoReturn
from urllib.parse import quote

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from modules.cli.client import APIClient
from modules.cli.models import (
    ErrorResponse,
    InventoryValue,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    PriceChange,
    Product,
    ProductCreate,
    QuantityChange,
    Reply,
)
from modules.core.exceptions import AuthenticationError, ResponseDecodeError, ServerError
from modules.core.logging import get_logger

logger = get_logger(__name__)

PRODUCT_OK = (httpx.codes.OK, httpx.codes.CREATED)

_product_list = TypeAdapter(list[Product] | None)


def error_from_response(response: httpx.Response) -> ServerError:
    """Build the exception for a non-success response."""
    try:
        payload = ErrorResponse.model_validate_json(response.content)
    except ValidationError:
        payload = None

    if payload is not None and payload.error:
        message = f"server error: {payload.error}"
    else:
        message = f"unknown server error: {response.text}"

    if response.status_code == httpx.codes.UNAUTHORIZED:
        return AuthenticationError(message, response.status_code)
    return ServerError(message, response.status_code)


def decode(model: type[BaseModel], response: httpx.Response, what: str) -> Any:
    try:
        return model.model_validate_json(response.content)
    except ValidationError as e:
        raise ResponseDecodeError(f"failed to decode {what} response: {e}") from e


def response_body(response: httpx.Response) -> Any:
    """Decoded JSON body, the raw text when it is not JSON, or None when empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def product_path(product_id: str, action: str = "") -> str:
    path = f"/api/products/{quote(product_id, safe='')}"
    if action:
        path += f"/{action}"
    return path


class InventoryService:
    """
    Inventory operations over an authenticated APIClient.

    Operations that produce output return a Reply: the typed result plus the
    body exactly as the server sent it.

    Usage:
        service = InventoryService(get_api_client())
        await service.login("ops@example.com", "secret")
        reply = await service.list_products()
        reply.data   # list[Product]
        reply.body   # decoded JSON
    """

    def __init__(self, client: APIClient):
        self.client = client

    @property
    def is_authenticated(self) -> bool:
        return self.client.is_authenticated

    async def _send(self, method: str, path: str, payload: BaseModel | None = None) -> httpx.Response:
        kwargs: dict[str, Any] = {}
        if payload is not None:
            kwargs["json"] = payload.model_dump()
        return await self.client.request(method, path, **kwargs)

    def _raise_for(self, response: httpx.Response) -> NoReturn:
        error = error_from_response(response)
        if isinstance(error, AuthenticationError) and self.client.is_authenticated:
            logger.info("Session rejected by server, clearing token")
            self.client.clear_token()
        raise error

    async def _product_call(
        self,
        method: str,
        path: str,
        payload: BaseModel | None = None,
    ) -> Reply[Product]:
        response = await self._send(method, path, payload)
        if response.status_code not in PRODUCT_OK:
            self._raise_for(response)
        return Reply(decode(Product, response, "product"), response_body(response))

    async def _message_call(
        self,
        method: str,
        path: str,
        default: str,
        payload: BaseModel | None = None,
    ) -> Reply[str]:
        response = await self._send(method, path, payload)
        if response.status_code != httpx.codes.OK:
            self._raise_for(response)
        try:
            message = MessageResponse.model_validate_json(response.content).message
        except ValidationError:
            message = ""
        return Reply(message or default, response_body(response))

    async def login(self, email: str, password: str) -> None:
        """Exchange credentials for a session token and store it."""
        response = await self._send("POST", "/login", LoginRequest(email=email, password=password))
        if response.status_code != httpx.codes.OK:
            raise error_from_response(response)

        token = decode(LoginResponse, response, "login").token
        if not token:
            raise AuthenticationError("login response did not include a token", response.status_code)

        self.client.set_token(token)
        logger.info("Logged in", email=email)

    def logout(self) -> None:
        """Forget the session token. The server is not contacted."""
        self.client.clear_token()
        logger.info("Logged out")

    async def add_product(self, name: str, price: float, quantity: int) -> Reply[Product]:
        product = ProductCreate(name=name, price=price, quantity=quantity)
        return await self._product_call("POST", "/api/products", product)

    async def get_product(self, product_id: str) -> Reply[Product]:
        return await self._product_call("GET", product_path(product_id))

    async def list_products(self) -> Reply[list[Product]]:
        """List all products. A null body is treated as an empty inventory."""
        response = await self._send("GET", "/api/products")
        if response.status_code != httpx.codes.OK:
            self._raise_for(response)
        try:
            products = _product_list.validate_json(response.content)
        except ValidationError as e:
            raise ResponseDecodeError(f"failed to decode product list response: {e}") from e
        return Reply(products or [], response_body(response))

    async def sell_product(self, product_id: str, quantity: int) -> Reply[Product]:
        return await self._product_call("PATCH", product_path(product_id, "sell"), QuantityChange(quantity=quantity))

    async def restock_product(self, product_id: str, quantity: int) -> Reply[Product]:
        return await self._product_call(
            "PATCH", product_path(product_id, "restock"), QuantityChange(quantity=quantity)
        )

    async def update_price(self, product_id: str, price: float) -> Reply[str]:
        return await self._message_call(
            "PATCH",
            product_path(product_id, "price"),
            "Price updated successfully.",
            PriceChange(price=price),
        )

    async def delete_product(self, product_id: str) -> Reply[str]:
        return await self._message_call("DELETE", product_path(product_id), "Product deleted successfully.")

    async def get_inventory_value(self) -> Reply[float]:
        """Total value of all stock (sum of price * quantity, computed server-side)."""
        response = await self._send("GET", "/api/inventory/value")
        if response.status_code != httpx.codes.OK:
            self._raise_for(response)
        return Reply(decode(InventoryValue, response, "inventory value").value, response_body(response))
