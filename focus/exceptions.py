"""Exceptions raised by the API client and configuration layer."""
from typing import Optional


class FocusError(Exception):
    """Base class for all dashboard errors."""


class ConfigurationError(FocusError):
    """A required setting is missing or invalid."""


class ApiError(FocusError):
    """A request to the backend API failed."""

    def __init__(self, message: str, status_code: Optional[int] = None, url: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class NotFoundError(ApiError):
    """The backend answered 404."""


class TokenNotFoundError(NotFoundError):
    def __init__(self, token_id: str, url: Optional[str] = None):
        super().__init__("Token not found", status_code=404, url=url)
        self.token_id = token_id


class WalletNotFoundError(NotFoundError):
    def __init__(self, address: str, url: Optional[str] = None):
        super().__init__(f"Wallet {address} not found", status_code=404, url=url)
        self.address = address
