"""
Exceptions raised by the DaData client.

All of them derive from DaDataError so callers can catch a single type.
"""


class DaDataError(Exception):
    """Base class for all client errors."""


class TransportError(DaDataError):
    """Network-level failure: DNS, connect, timeout, TLS."""


class DecodeError(DaDataError):
    """Response body is not valid JSON."""


class ApiError(DaDataError):
    """
    The API answered, but not with what we asked for.

    Raised for non-200 statuses and for successful responses whose
    envelope lacks the field an operation requires.
    """

    def __init__(
        self,
        message: str = "API error",
        status_code: int | None = None,
        detail: str | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.detail = detail
        super().__init__(str(self))

    def __str__(self) -> str:
        text = self.message
        if self.status_code is not None:
            text = f"{text} (HTTP {self.status_code})"
        if self.detail:
            text = f"{text}: {self.detail}"
        return text
