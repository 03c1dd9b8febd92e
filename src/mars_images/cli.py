#!/usr/bin/env python3
"""
Collect recent Mars rover image URLs from the NASA Mars Photos API.

Prints a JSON object mapping each Earth date of the lookback window to the
image URLs found for it.
"""

import argparse
import json
import logging
import sys
from typing import Dict, List, Optional, Sequence

from mars_images.aggregate import fetch_images_for_settings
from mars_images.data.cache import ImageCache, InMemoryImageCache, NoopImageCache
from mars_images.data.errors import MarsImagesError, SerializationError
from mars_images.data.nasa_client import NASAImageClient
from mars_images.utils.config import get_config

EXIT_FETCH_FAILED = 1
EXIT_ENCODE_FAILED = 2

CACHES = {
    "none": NoopImageCache,
    "memory": InMemoryImageCache,
}


def setup_logging(verbose: bool = False):
    """Set up logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def encode_images(images: Dict[str, List[str]], indent: Optional[int] = None) -> str:
    """
    Serialize collected images as JSON.

    Raises
    ------
    SerializationError
        If the mapping cannot be encoded
    """
    try:
        return json.dumps(images, indent=indent)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"failed to encode images: {e}") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Collect Mars rover image URLs for the last few Earth days",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Three NAVCAM images per day from Curiosity for the last 10 days
  mars-images

  # Front hazard camera, last 3 days, pretty printed
  mars-images --camera FHAZ --day-lookback 3 --indent 2

  # Use specific API key
  mars-images --api-key YOUR_KEY

Unset options fall back to MARS_IMAGES_* / NASA_API_KEY environment
variables (or a .env file).
        """,
    )

    parser.add_argument("--max-images", type=int, default=None, help="Maximum images per day (default: 3)")
    parser.add_argument("--day-lookback", type=int, default=None, help="Number of days to query, including today (default: 10)")
    parser.add_argument("--rover", type=str, default=None, help="Rover name (default: curiosity)")
    parser.add_argument("--camera", type=str, default=None, help="Camera name (default: NAVCAM)")
    parser.add_argument(
        "--api-key",
        type=str,
        default=None,
        help="NASA API key (or set NASA_API_KEY environment variable)",
    )
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds (default: 30)")
    parser.add_argument("--retries", type=int, default=0, help="Retries for 429/5xx responses (default: 0)")
    parser.add_argument(
        "--cache",
        choices=sorted(CACHES),
        default="none",
        help="Image cache used during the run (default: none)",
    )
    parser.add_argument("--indent", type=int, default=None, help="Indent the JSON output")
    parser.add_argument("--progress", action="store_true", help="Show a progress bar on stderr")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output (DEBUG level logging)",
    )
    return parser


def fail(message: str, code: int):
    print(f"error encountered: {message}", file=sys.stderr)
    sys.exit(code)


def main(argv: Optional[Sequence[str]] = None):
    """Main entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        config = get_config()
        settings = config.fetch_settings(
            max_images=args.max_images,
            day_lookback=args.day_lookback,
            rover=args.rover,
            camera=args.camera,
            api_key=args.api_key,
            timeout=args.timeout,
        )
        cache: ImageCache = CACHES[args.cache]()

        with NASAImageClient(
            api_key=settings.api_key,
            cache=cache,
            base_url=config.api_url,
            timeout=settings.timeout,
            max_retries=args.retries,
        ) as client:
            images = fetch_images_for_settings(client, settings, show_progress=args.progress)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(EXIT_FETCH_FAILED)
    except (MarsImagesError, ValueError) as e:
        logger.debug("Fetch failed", exc_info=True)
        fail(str(e), EXIT_FETCH_FAILED)

    try:
        output = encode_images(images, indent=args.indent)
    except SerializationError as e:
        fail(str(e), EXIT_ENCODE_FAILED)

    sys.stdout.write(output)
    sys.stdout.flush()


if __name__ == "__main__":
    main()
