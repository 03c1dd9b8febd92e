"""Errors raised while fetching and emitting Mars rover images."""

from typing import Optional


class MarsImagesError(Exception):
    """Base class for all errors raised by this package."""


class NetworkError(MarsImagesError):
    """The request could not be sent or no response arrived."""


class HTTPStatusError(MarsImagesError):
    """The API answered with a status other than 200 OK."""

    def __init__(self, status_code: int, url: Optional[str] = None):
        self.status_code = status_code
        self.url = url
        message = f"bad response code: {status_code}"
        if url:
            message += f" ({url})"
        super().__init__(message)


class ReadError(MarsImagesError):
    """The response body was truncated or interrupted."""


class JSONParseError(MarsImagesError):
    """The response body is not valid JSON."""


class SerializationError(MarsImagesError):
    """The collected images could not be encoded for output."""
