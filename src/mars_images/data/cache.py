"""
Image caches keyed by request.

The client consults a cache before calling the API. ``NoopImageCache``
keeps caching pluggable without committing to a policy;
``InMemoryImageCache`` memoizes results for the lifetime of the process.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from .request import ImageRequest

logger = logging.getLogger(__name__)


class ImageCache(ABC):
    """
    Base class for image caches.

    Implementations must return what was last put for an equal key,
    until it is overwritten.
    """

    @abstractmethod
    def get(self, key: ImageRequest) -> Tuple[Optional[List[str]], bool]:
        """
        Look up cached image URLs.

        Args:
            key: Request the images were fetched for

        Returns:
            ``(urls, True)`` on a hit, ``(None, False)`` on a miss
        """
        pass

    @abstractmethod
    def put(self, key: ImageRequest, value: List[str]) -> None:
        """
        Store image URLs for a request.

        Args:
            key: Request the images were fetched for
            value: Image URLs in API order
        """
        pass


class NoopImageCache(ImageCache):
    """Cache that never stores anything; every lookup misses."""

    def get(self, key: ImageRequest) -> Tuple[Optional[List[str]], bool]:
        return None, False

    def put(self, key: ImageRequest, value: List[str]) -> None:
        pass


class InMemoryImageCache(ImageCache):
    """Process-local cache with no expiry and no eviction."""

    def __init__(self):
        self._entries: Dict[ImageRequest, List[str]] = {}

    def get(self, key: ImageRequest) -> Tuple[Optional[List[str]], bool]:
        if key not in self._entries:
            logger.debug(f"Cache miss: {key.rover}/{key.camera} {key.earth_date}")
            return None, False
        logger.debug(f"Cache hit: {key.rover}/{key.camera} {key.earth_date}")
        return list(self._entries[key]), True

    def put(self, key: ImageRequest, value: List[str]) -> None:
        self._entries[key] = list(value)

    def clear(self):
        """Drop all cached entries."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: ImageRequest) -> bool:
        return key in self._entries
