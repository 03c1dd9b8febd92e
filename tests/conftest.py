"""Shared fixtures for the Mars image collector tests."""

from unittest.mock import MagicMock

import pytest

from mars_images.data.request import ImageRequest


def make_response(status_code=200, payload=None, json_error=None):
    """Build a mock ``requests.Response``."""
    response = MagicMock()
    response.status_code = status_code
    response.content = b"{}"
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload if payload is not None else {}
    return response


def photos_payload(*urls):
    return {
        "photos": [
            {"id": i, "img_src": url, "camera": {"name": "NAVCAM"}}
            for i, url in enumerate(urls)
        ]
    }


@pytest.fixture
def navcam_request():
    return ImageRequest(
        camera="NAVCAM",
        rover="curiosity",
        earth_date="2016-04-02",
        max_images=3,
    )


@pytest.fixture
def session():
    """Mock HTTP session answering with an empty photo list."""
    mock_session = MagicMock()
    mock_session.get.return_value = make_response(payload={"photos": []})
    return mock_session
