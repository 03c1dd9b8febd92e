"""
NASA Mars Photos API client.

This module provides a client that lists rover image URLs for a single
Earth date, camera and rover, consulting an image cache before calling
the network.
"""

import logging
import re
from abc import ABC, abstractmethod
from itertools import islice
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from mars_images.utils.config import DEFAULT_API_URL, get_config

from .cache import ImageCache, NoopImageCache
from .errors import HTTPStatusError, JSONParseError, NetworkError, ReadError
from .request import ImageRequest

logger = logging.getLogger(__name__)

_API_KEY_PARAM = re.compile(r"(api_key=)[^&]*")


def _redact(url: str) -> str:
    """Hide the API key in a URL before it is logged or raised."""
    return _API_KEY_PARAM.sub(r"\1***", url)


def extract_image_urls(payload: Any, max_images: int) -> List[str]:
    """
    Pull ``photos[*].img_src`` out of a decoded API response.

    Parameters
    ----------
    payload : Any
        Decoded JSON body
    max_images : int
        Maximum number of URLs to return. Zero or negative returns nothing.

    Returns
    -------
    list of str
        The first ``max_images`` image URLs in document order. Photos
        without a string ``img_src`` are skipped; a missing or malformed
        ``photos`` array gives an empty list.

    Examples
    --------
    >>> extract_image_urls({"photos": [{"img_src": "a"}, {"img_src": "b"}]}, 1)
    ['a']
    """
    if max_images <= 0 or not isinstance(payload, dict):
        return []

    photos = payload.get("photos")
    if not isinstance(photos, list):
        return []

    urls = (
        photo["img_src"]
        for photo in photos
        if isinstance(photo, dict) and isinstance(photo.get("img_src"), str)
    )
    return list(islice(urls, max_images))


class ImageClient(ABC):
    """
    Base class for image clients.

    The aggregator only depends on this interface, so test doubles and
    other sources can stand in for the HTTP client.
    """

    @abstractmethod
    def get_images(self, request: ImageRequest) -> List[str]:
        """
        Fetch image URLs for one request.

        Args:
            request: Rover, camera, Earth date and image limit

        Returns:
            At most ``request.max_images`` image URLs in API order
        """
        pass

    def close(self):
        """Release any held resources."""

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()


class NASAImageClient(ImageClient):
    """
    Client for the NASA Mars Photos API.

    Checks the cache first; on a miss issues exactly one GET, validates
    the status, parses the body and truncates the result. Results fetched
    on a miss are written back to the cache.
    """

    # API endpoints
    MARS_PHOTOS_API = DEFAULT_API_URL

    def __init__(
        self,
        api_key: Optional[str] = None,
        cache: Optional[ImageCache] = None,
        base_url: Optional[str] = None,
        timeout: float = 30,
        max_retries: int = 0,
        backoff_factor: float = 1.0,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize Mars Photos client.

        Parameters
        ----------
        api_key : str, optional
            NASA API key. If not provided, reads NASA_API_KEY from the
            environment (or .env), falling back to DEMO_KEY.
            Get your key at https://api.nasa.gov/
        cache : ImageCache, optional
            Cache consulted before each request. Defaults to a no-op cache.
        base_url : str, optional
            API base URL. Defaults to the public Mars Photos API.
        timeout : float
            Request timeout in seconds
        max_retries : int
            Retry attempts for connection errors, 429 and 5xx responses.
            Zero (default) sends each request exactly once.
        backoff_factor : float
            Exponential backoff factor for retries (seconds)
        session : requests.Session, optional
            Session to send requests with. A new one is created if omitted.
        """
        if api_key is None:
            api_key = get_config().nasa_api_key

        self.api_key = api_key
        self.cache = cache if cache is not None else NoopImageCache()
        self.base_url = (base_url or self.MARS_PHOTOS_API).rstrip("/")
        self.timeout = timeout

        self.session = session if session is not None else requests.Session()
        if max_retries > 0:
            # Exhausted retries hand back the last response so the status
            # check below still reports it.
            retry_strategy = Retry(
                total=max_retries,
                backoff_factor=backoff_factor,
                status_forcelist=[429, 500, 502, 503, 504],
                allowed_methods=["GET"],
                raise_on_status=False,
            )
            adapter = HTTPAdapter(max_retries=retry_strategy)
            self.session.mount("http://", adapter)
            self.session.mount("https://", adapter)

        logger.info(f"Initialized Mars Photos client with API key: {self.api_key[:4]}...")

    def _photos_url(self, request: ImageRequest) -> str:
        return f"{self.base_url}/rovers/{request.rover}/photos"

    def _params(self, request: ImageRequest) -> Dict[str, str]:
        return {
            "camera": request.camera,
            "earth_date": request.earth_date,
            "api_key": self.api_key,
        }

    def build_url(self, request: ImageRequest) -> str:
        """
        Construct the full query URL for a request.

        Parameters
        ----------
        request : ImageRequest
            Query to build the URL for

        Returns
        -------
        str
            URL including the camera, earth_date and api_key parameters
        """
        prepared = requests.Request(
            "GET", self._photos_url(request), params=self._params(request)
        ).prepare()
        return prepared.url

    def _fetch_payload(self, request: ImageRequest) -> Any:
        """
        Send one GET and decode the JSON body.

        Raises
        ------
        NetworkError
            If the request could not be sent or timed out
        HTTPStatusError
            If the response status is not 200
        ReadError
            If the body could not be read completely
        JSONParseError
            If the body is not valid JSON
        """
        url = self.build_url(request)
        display_url = _redact(url)
        logger.debug(f"GET {display_url} for {request.camera} on {request.earth_date}")

        try:
            response = self.session.get(
                url,
                timeout=self.timeout,
                stream=True,
            )
        except requests.RequestException as e:
            logger.error(f"Request failed: {_redact(str(e))}")
            raise NetworkError(f"request to {display_url} failed: {_redact(str(e))}") from e

        try:
            if response.status_code != requests.codes.ok:
                logger.error(f"HTTP error {response.status_code} from {display_url}")
                raise HTTPStatusError(response.status_code, display_url)

            try:
                body = response.content
            except requests.RequestException as e:
                logger.error(f"Failed to read response body: {_redact(str(e))}")
                raise ReadError(f"failed to read response from {display_url}: {_redact(str(e))}") from e

            try:
                return response.json()
            except ValueError as e:
                logger.error(f"Malformed JSON from {display_url} ({len(body)} bytes)")
                raise JSONParseError(f"invalid JSON from {display_url}: {e}") from e
        finally:
            response.close()

    def get_images(self, request: ImageRequest) -> List[str]:
        """
        Fetch image URLs for one rover, camera and Earth date.

        Parameters
        ----------
        request : ImageRequest
            Query to run

        Returns
        -------
        list of str
            At most ``request.max_images`` image URLs in API order

        Examples
        --------
        >>> client = NASAImageClient()
        >>> urls = client.get_images(
        ...     ImageRequest("NAVCAM", "curiosity", "2016-04-02", 3)
        ... )
        """
        cached, found = self.cache.get(request)
        if found:
            logger.debug(f"Using cached images for {request.earth_date}")
            return cached

        payload = self._fetch_payload(request)
        images = extract_image_urls(payload, request.max_images)
        logger.info(
            f"Found {len(images)} {request.camera} images from {request.rover} "
            f"on {request.earth_date}"
        )

        self.cache.put(request, images)
        return images

    def close(self):
        """Close the session."""
        self.session.close()
