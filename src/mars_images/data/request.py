"""Request descriptor for a single Mars Photos API query."""

from dataclasses import dataclass
from datetime import date

ISO_DATE = "%Y-%m-%d"


@dataclass(frozen=True)
class ImageRequest:
    """
    One query against the Mars Photos API.

    Instances are immutable and hashable, so they double as cache keys.

    Parameters
    ----------
    camera : str
        Camera name (e.g., "NAVCAM", "FHAZ")
    rover : str
        Rover name (e.g., "curiosity")
    earth_date : str
        Earth date in YYYY-MM-DD format
    max_images : int
        Maximum number of image URLs to return
    """

    camera: str
    rover: str
    earth_date: str
    max_images: int

    @classmethod
    def for_date(
        cls,
        rover: str,
        camera: str,
        day: date,
        max_images: int,
    ) -> "ImageRequest":
        """Build a request for a calendar date."""
        return cls(
            camera=camera,
            rover=rover,
            earth_date=day.strftime(ISO_DATE),
            max_images=max_images,
        )
