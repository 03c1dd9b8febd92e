"""
Per-day aggregation of Mars rover images.

Queries an image client once for each day of a lookback window ending
today and collects the results by Earth date.
"""

import logging
from datetime import date, timedelta
from typing import Dict, List, Optional

from tqdm import tqdm

from mars_images.data.nasa_client import ImageClient
from mars_images.data.request import ISO_DATE, ImageRequest
from mars_images.utils.config import FetchSettings

logger = logging.getLogger(__name__)


def lookback_dates(day_lookback: int, today: date) -> List[date]:
    """
    List the dates of a lookback window, newest first.

    Parameters
    ----------
    day_lookback : int
        Number of days in the window, including ``today``
    today : date
        Last day of the window

    Returns
    -------
    list of date
        ``today``, ``today - 1 day``, ... ``day_lookback`` entries

    Examples
    --------
    >>> lookback_dates(2, date(2024, 3, 1))
    [datetime.date(2024, 3, 1), datetime.date(2024, 2, 29)]
    """
    return [today - timedelta(days=i) for i in range(max(day_lookback, 0))]


def fetch_images(
    client: ImageClient,
    max_images: int,
    day_lookback: int,
    rover: str,
    camera: str,
    today: Optional[date] = None,
    show_progress: bool = False,
) -> Dict[str, List[str]]:
    """
    Collect image URLs for each day of a lookback window.

    ``max_images`` is passed through on each request; truncating to it is
    the client's job, so results are stored as returned.

    Parameters
    ----------
    client : ImageClient
        Client queried once per day
    max_images : int
        Maximum number of images kept per day
    day_lookback : int
        Number of days to query, including today
    rover : str
        Rover name
    camera : str
        Camera name
    today : date, optional
        Last day of the window. Captured once; defaults to the current date.
    show_progress : bool
        Whether to show a progress bar on stderr (default: False)

    Returns
    -------
    dict
        Mapping of Earth date (YYYY-MM-DD) -> list of image URLs

    Raises
    ------
    MarsImagesError
        The first client failure, unchanged. No partial mapping is returned.
    """
    if today is None:
        today = date.today()

    days = lookback_dates(day_lookback, today)
    logger.info(
        f"Fetching up to {max_images} {camera} images per day from {rover} "
        f"for {len(days)} days ending {today.strftime(ISO_DATE)}"
    )

    images_by_date: Dict[str, List[str]] = {}
    for day in tqdm(days, desc=f"{rover}/{camera}", unit="day", disable=not show_progress):
        request = ImageRequest.for_date(rover, camera, day, max_images)
        images_by_date[request.earth_date] = client.get_images(request)

    total_images = sum(len(urls) for urls in images_by_date.values())
    logger.info(
        f"Collected {total_images} images across "
        f"{len([urls for urls in images_by_date.values() if urls])} days"
    )
    return images_by_date


def fetch_images_for_settings(
    client: ImageClient,
    settings: FetchSettings,
    today: Optional[date] = None,
    show_progress: bool = False,
) -> Dict[str, List[str]]:
    """Run :func:`fetch_images` with the values of a ``FetchSettings``."""
    return fetch_images(
        client,
        max_images=settings.max_images,
        day_lookback=settings.day_lookback,
        rover=settings.rover,
        camera=settings.camera,
        today=today,
        show_progress=show_progress,
    )
