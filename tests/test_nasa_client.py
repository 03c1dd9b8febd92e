"""Tests for the Mars Photos API client."""

from unittest.mock import MagicMock, PropertyMock

import pytest
import requests

from mars_images.data import nasa_client
from mars_images.data.cache import InMemoryImageCache, NoopImageCache
from mars_images.data.errors import (
    HTTPStatusError,
    JSONParseError,
    NetworkError,
    ReadError,
)
from mars_images.data.nasa_client import NASAImageClient, extract_image_urls
from mars_images.data.request import ImageRequest
from tests.conftest import make_response, photos_payload


class TestExtractImageUrls:
    def test_truncates_to_max_images_in_document_order(self):
        payload = photos_payload("a", "b", "c", "d")

        assert extract_image_urls(payload, 3) == ["a", "b", "c"]

    def test_fewer_photos_than_max(self):
        assert extract_image_urls(photos_payload("a", "b"), 5) == ["a", "b"]

    @pytest.mark.parametrize("max_images", [0, -1])
    def test_non_positive_max_returns_nothing(self, max_images):
        assert extract_image_urls(photos_payload("a", "b"), max_images) == []

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"photos": []},
            {"photos": None},
            {"photos": {"img_src": "a"}},
            {"latest_photos": [{"img_src": "a"}]},
            [{"img_src": "a"}],
            "photos",
            None,
        ],
    )
    def test_missing_or_malformed_photos_is_empty(self, payload):
        assert extract_image_urls(payload, 3) == []

    def test_skips_photos_without_string_img_src(self):
        payload = {
            "photos": [
                {"id": 1},
                "not-a-photo",
                {"img_src": 42},
                {"img_src": "a"},
                {"img_src": "b"},
            ]
        }

        assert extract_image_urls(payload, 2) == ["a", "b"]


class TestNASAImageClient:
    def test_build_url(self, navcam_request):
        client = NASAImageClient(api_key="DEMO_KEY", session=MagicMock())

        assert client.build_url(navcam_request) == (
            "https://api.nasa.gov/mars-photos/api/v1/rovers/curiosity/photos"
            "?camera=NAVCAM&earth_date=2016-04-02&api_key=DEMO_KEY"
        )

    def test_build_url_encodes_query_values(self):
        client = NASAImageClient(api_key="k", session=MagicMock())
        request = ImageRequest("MAST CAM", "curiosity", "2016-04-02", 1)

        assert "camera=MAST+CAM" in client.build_url(request)

    def test_custom_base_url(self, navcam_request):
        client = NASAImageClient(
            api_key="k", base_url="http://localhost:8000/api/v1/", session=MagicMock()
        )

        assert client.build_url(navcam_request).startswith(
            "http://localhost:8000/api/v1/rovers/curiosity/photos?"
        )

    def test_get_images_sends_one_request(self, session, navcam_request):
        session.get.return_value = make_response(payload=photos_payload("a", "b", "c", "d"))
        client = NASAImageClient(api_key="secret", session=session, timeout=5)

        assert client.get_images(navcam_request) == ["a", "b", "c"]

        session.get.assert_called_once()
        args, kwargs = session.get.call_args
        assert args[0] == client.build_url(navcam_request)
        assert args[0] == (
            "https://api.nasa.gov/mars-photos/api/v1/rovers/curiosity/photos"
            "?camera=NAVCAM&earth_date=2016-04-02&api_key=secret"
        )
        assert "params" not in kwargs
        assert kwargs["timeout"] == 5

    def test_response_is_closed(self, session, navcam_request):
        response = make_response(payload=photos_payload("a"))
        session.get.return_value = response
        client = NASAImageClient(api_key="k", session=session)

        client.get_images(navcam_request)

        response.close.assert_called_once()

    def test_empty_photos_is_not_an_error(self, session, navcam_request):
        client = NASAImageClient(api_key="k", session=session)

        assert client.get_images(navcam_request) == []

    def test_zero_max_images(self, session):
        session.get.return_value = make_response(payload=photos_payload("a", "b"))
        client = NASAImageClient(api_key="k", session=session)

        request = ImageRequest("NAVCAM", "curiosity", "2016-04-02", 0)
        assert client.get_images(request) == []

    def test_cache_hit_skips_network(self, session, navcam_request):
        cache = InMemoryImageCache()
        cache.put(navcam_request, ["cached"])
        client = NASAImageClient(api_key="k", cache=cache, session=session)

        assert client.get_images(navcam_request) == ["cached"]
        session.get.assert_not_called()

    def test_cache_hit_does_not_write(self, session, navcam_request):
        cache = MagicMock()
        cache.get.return_value = (["cached"], True)
        client = NASAImageClient(api_key="k", cache=cache, session=session)

        assert client.get_images(navcam_request) == ["cached"]
        cache.put.assert_not_called()
        session.get.assert_not_called()

    def test_miss_writes_through_to_cache(self, session, navcam_request):
        session.get.return_value = make_response(payload=photos_payload("a", "b"))
        cache = InMemoryImageCache()
        client = NASAImageClient(api_key="k", cache=cache, session=session)

        assert client.get_images(navcam_request) == ["a", "b"]
        assert client.get_images(navcam_request) == ["a", "b"]

        assert session.get.call_count == 1
        assert cache.get(navcam_request) == (["a", "b"], True)

    def test_noop_cache_fetches_every_time(self, session, navcam_request):
        client = NASAImageClient(api_key="k", cache=NoopImageCache(), session=session)

        client.get_images(navcam_request)
        client.get_images(navcam_request)

        assert session.get.call_count == 2

    def test_default_cache_is_noop(self):
        client = NASAImageClient(api_key="k", session=MagicMock())

        assert isinstance(client.cache, NoopImageCache)

    @pytest.mark.parametrize("status_code", [400, 403, 404, 429, 500, 503])
    def test_non_200_raises_with_status(self, session, navcam_request, status_code):
        session.get.return_value = make_response(status_code=status_code)
        client = NASAImageClient(api_key="k", session=session)

        with pytest.raises(HTTPStatusError) as exc_info:
            client.get_images(navcam_request)

        assert exc_info.value.status_code == status_code
        assert str(status_code) in str(exc_info.value)
        session.get.assert_called_once()

    def test_non_200_is_not_cached(self, session, navcam_request):
        session.get.return_value = make_response(status_code=500)
        cache = InMemoryImageCache()
        client = NASAImageClient(api_key="k", cache=cache, session=session)

        with pytest.raises(HTTPStatusError):
            client.get_images(navcam_request)

        assert len(cache) == 0

    @pytest.mark.parametrize(
        "error",
        [
            requests.ConnectionError("Network error"),
            requests.Timeout("timed out"),
        ],
    )
    def test_transport_failure_raises_network_error(self, session, navcam_request, error):
        session.get.side_effect = error
        client = NASAImageClient(api_key="k", session=session)

        with pytest.raises(NetworkError) as exc_info:
            client.get_images(navcam_request)

        assert exc_info.value.__cause__ is error

    def test_network_error_hides_api_key(self, session, navcam_request):
        session.get.side_effect = requests.ConnectionError(
            "Max retries exceeded with url: /photos?camera=NAVCAM&api_key=topsecret"
        )
        client = NASAImageClient(api_key="topsecret", session=session)

        with pytest.raises(NetworkError) as exc_info:
            client.get_images(navcam_request)

        assert "topsecret" not in str(exc_info.value)
        assert "api_key=***" in str(exc_info.value)

    def test_interrupted_body_raises_read_error(self, session, navcam_request):
        response = make_response()
        type(response).content = PropertyMock(
            side_effect=requests.exceptions.ChunkedEncodingError("connection broken")
        )
        session.get.return_value = response
        client = NASAImageClient(api_key="k", session=session)

        with pytest.raises(ReadError):
            client.get_images(navcam_request)

        response.close.assert_called_once()

    def test_malformed_json_raises_parse_error(self, session, navcam_request):
        session.get.return_value = make_response(
            json_error=ValueError("Expecting value: line 1 column 1 (char 0)")
        )
        client = NASAImageClient(api_key="k", session=session)

        with pytest.raises(JSONParseError):
            client.get_images(navcam_request)

    def test_api_key_from_config(self, monkeypatch):
        config = MagicMock()
        config.nasa_api_key = "from-env"
        monkeypatch.setattr(nasa_client, "get_config", lambda: config)

        client = NASAImageClient(session=MagicMock())

        assert client.api_key == "from-env"

    def test_no_retries_by_default(self):
        session = MagicMock()
        NASAImageClient(api_key="k", session=session)

        session.mount.assert_not_called()

    def test_retries_mount_adapter(self):
        client = NASAImageClient(api_key="k", max_retries=2, session=requests.Session())

        retries = client.session.get_adapter("https://api.nasa.gov").max_retries
        assert retries.total == 2
        assert 503 in retries.status_forcelist
        assert retries.raise_on_status is False

    def test_context_manager_closes_session(self):
        session = MagicMock()

        with NASAImageClient(api_key="k", session=session) as client:
            assert client.session is session

        session.close.assert_called_once()
