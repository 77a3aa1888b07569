"""
Wire Models.

Pydantic models for inventory service request and response payloads.
"""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    """A product record owned by the inventory service."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    name: str
    price: float
    quantity: int


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    token: str = ""


class ProductCreate(BaseModel):
    name: str
    price: float
    quantity: int


class QuantityChange(BaseModel):
    quantity: int


class PriceChange(BaseModel):
    price: float


class MessageResponse(BaseModel):
    message: str = ""


class ErrorResponse(BaseModel):
    error: str = ""


class InventoryValue(BaseModel):
    value: float = Field(alias="inventory_value")


T = TypeVar("T")


@dataclass
class Reply(Generic[T]):
    """Typed result of a call together with the response body as the server sent it."""

    data: T
    body: Any = None
