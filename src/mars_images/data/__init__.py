"""Request values, caches and API clients for the Mars Photos API."""

from .cache import ImageCache, InMemoryImageCache, NoopImageCache
from .errors import (
    HTTPStatusError,
    JSONParseError,
    MarsImagesError,
    NetworkError,
    ReadError,
    SerializationError,
)
from .nasa_client import ImageClient, NASAImageClient, extract_image_urls
from .request import ImageRequest

__all__ = [
    "ImageRequest",
    "ImageCache",
    "NoopImageCache",
    "InMemoryImageCache",
    "ImageClient",
    "NASAImageClient",
    "extract_image_urls",
    "MarsImagesError",
    "NetworkError",
    "HTTPStatusError",
    "ReadError",
    "JSONParseError",
    "SerializationError",
]
