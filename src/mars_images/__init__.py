"""
Mars Rover Image Collector

Collects Mars rover photo URLs from NASA's Mars Photos API over a rolling
window of Earth days.
"""

from mars_images.__version__ import __version__

__all__ = ["__version__"]
