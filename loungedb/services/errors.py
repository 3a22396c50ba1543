from __future__ import annotations

from typing import Optional


class LoungeDBError(Exception):
    """Base class for errors raised by loungedb services."""


class FetchError(LoungeDBError):
    """A single outbound request failed (transport error or non-2xx status)."""

    def __init__(self, url: str, cause: BaseException) -> None:
        super().__init__(f"Error downloading {url}: {cause}")
        self.url = url
        self.cause = cause


class RecordParseError(LoungeDBError):
    """A persisted record could not be decoded as JSON."""

    def __init__(self, source: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(f"Error reading or parsing {source}: {cause}")
        self.source = source
        self.cause = cause


class AirportNotFound(LoungeDBError):
    def __init__(self, code: str) -> None:
        super().__init__(f"Airport not found: {code!r}")
        self.code = code


class QueryValidationError(LoungeDBError):
    """Malformed query input (e.g. non-numeric coordinates)."""
