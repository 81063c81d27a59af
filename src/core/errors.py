# src/core/errors.py

from __future__ import annotations

from typing import Optional


class SearchError(Exception):
    """Base class for every failure a search can surface to the user."""

    default_message = "Search failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else self.default_message


class ValidationError(SearchError):
    """Malformed query input, rejected before any network call."""

    default_message = "Invalid search parameters"


class TransportError(SearchError):
    """Network failure or non-2xx response from the search endpoint."""

    default_message = "Could not reach the search service"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ParseError(SearchError):
    """Response body is not JSON, or not shaped enough to read offers from."""

    default_message = "Unexpected response from the search service"
