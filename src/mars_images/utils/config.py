"""
Configuration and environment variable management.
"""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional
import logging

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_API_KEY = "DEMO_KEY"
DEFAULT_API_URL = "https://api.nasa.gov/mars-photos/api/v1"


@dataclass(frozen=True)
class FetchSettings:
    """
    Settings for one aggregation run.

    Parameters
    ----------
    max_images : int
        Maximum number of image URLs kept per day
    day_lookback : int
        Number of consecutive days, ending today, to query
    rover : str
        Rover name
    camera : str
        Camera name
    api_key : str
        NASA API key
    timeout : float
        Per-request timeout in seconds
    """

    max_images: int = 3
    day_lookback: int = 10
    rover: str = "curiosity"
    camera: str = "NAVCAM"
    api_key: str = DEFAULT_API_KEY
    timeout: float = 30.0


def _int_from_env(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from None


def _float_from_env(key: str, default: float) -> float:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{key} must be a number, got {raw!r}") from None


# FetchSettings field -> Config property it is read from
_ENV_PROPERTIES = {
    "max_images": "max_images",
    "day_lookback": "day_lookback",
    "rover": "rover",
    "camera": "camera",
    "api_key": "nasa_api_key",
    "timeout": "timeout",
}


class Config:
    """
    Configuration manager for the Mars image collector.

    Loads environment variables from .env file and provides
    convenient access to configuration values.
    """

    def __init__(self, env_file: Optional[Path] = None):
        """
        Initialize configuration.

        Parameters
        ----------
        env_file : Path, optional
            Path to .env file. If None, searches for .env in the current
            directory and its parents.
        """
        if env_file is None:
            current = Path.cwd()
            for parent in [current] + list(current.parents):
                env_path = parent / ".env"
                if env_path.exists():
                    env_file = env_path
                    break

        if env_file and Path(env_file).exists():
            load_dotenv(env_file)
            logger.info(f"Loaded environment from {env_file}")
        else:
            logger.debug("No .env file found - using environment variables only")

    # NASA API Configuration
    @property
    def nasa_api_key(self) -> str:
        """Get NASA API key from environment, falling back to DEMO_KEY."""
        key = os.getenv("NASA_API_KEY", "")
        if not key or key == "your_nasa_api_key_here":
            logger.warning("NASA_API_KEY not set - using the rate-limited DEMO_KEY")
            return DEFAULT_API_KEY
        return key

    @property
    def api_url(self) -> str:
        """Get Mars Photos API base URL."""
        return os.getenv("MARS_PHOTOS_API_URL", DEFAULT_API_URL)

    # Query settings
    @property
    def max_images(self) -> int:
        """Maximum number of images kept per day."""
        return _int_from_env("MARS_IMAGES_MAX_IMAGES", FetchSettings.max_images)

    @property
    def day_lookback(self) -> int:
        """Number of days to look back, including today."""
        return _int_from_env("MARS_IMAGES_DAY_LOOKBACK", FetchSettings.day_lookback)

    @property
    def rover(self) -> str:
        return os.getenv("MARS_IMAGES_ROVER", FetchSettings.rover)

    @property
    def camera(self) -> str:
        return os.getenv("MARS_IMAGES_CAMERA", FetchSettings.camera)

    @property
    def timeout(self) -> float:
        """Request timeout in seconds."""
        return _float_from_env("MARS_IMAGES_TIMEOUT", FetchSettings.timeout)

    def fetch_settings(self, **overrides) -> FetchSettings:
        """
        Build run settings from the environment.

        Parameters
        ----------
        **overrides
            Values taking precedence over the environment. ``None`` values
            are ignored, so unset command line flags can be passed through.
            The environment is only read for settings without an override.

        Returns
        -------
        FetchSettings
            Settings for one aggregation run

        Raises
        ------
        ValueError
            If an override names an unknown setting or an environment
            value needed for a setting is not a valid number
        """
        known = {f.name for f in fields(FetchSettings)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")

        given = {k: v for k, v in overrides.items() if v is not None}
        from_env = {
            name: getattr(self, _ENV_PROPERTIES[name])
            for name in known
            if name not in given
        }
        return FetchSettings(**from_env, **given)


# Global configuration instance
_config = None


def get_config(reload: bool = False) -> Config:
    """
    Get global configuration instance.

    Parameters
    ----------
    reload : bool
        Whether to reload configuration from .env file

    Returns
    -------
    Config
        Global configuration instance
    """
    global _config
    if _config is None or reload:
        _config = Config()
    return _config
