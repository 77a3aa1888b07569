"""
Client Exceptions.

Raised by the inventory service layer and handled at the shell's action
boundary. Transport failures surface as httpx.HTTPError and are not wrapped.
"""


class InventoryClientError(Exception):
    """Base class for inventory client errors."""


class ServerError(InventoryClientError):
    """The server answered with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthenticationError(ServerError):
    """Credentials were rejected or the session token is no longer valid."""


class ResponseDecodeError(InventoryClientError):
    """A success response body did not match the expected shape."""
