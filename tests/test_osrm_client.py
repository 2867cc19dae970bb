import pytest
import requests

import routing.osrm_client as osrm_client
from routing.osrm_client import OSRMClient, OSRMError


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def json(self):
        return self.payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


@pytest.fixture
def client():
    return OSRMClient(base_url="http://osrm.test/", profile="driving", timeout=3)


@pytest.fixture
def captured_get(monkeypatch):
    calls = []

    def install(response):
        def fake_get(url, params=None, timeout=None):
            calls.append({"url": url, "params": params, "timeout": timeout})
            return response
        monkeypatch.setattr(osrm_client.requests, "get", fake_get)
        return calls

    return install


def test_format_coordinates_swaps_to_lng_lat(client):
    assert client.format_coordinates([(-26.0, 28.0), (-25.5, 28.5)]) == "28.0,-26.0;28.5,-25.5"


def test_compute_route_parses_geojson_geometry(client, captured_get):
    calls = captured_get(FakeResponse({
        "code": "Ok",
        "routes": [{
            "distance": 1234.5,
            "duration": 300.0,
            "geometry": {"type": "LineString", "coordinates": [[28.0, -26.0], [28.1, -26.05], [28.5, -25.5]]},
        }],
    }))

    result = client.compute_route([(-26.0, 28.0), (-25.5, 28.5)])

    assert result.geometry == [(-26.0, 28.0), (-26.05, 28.1), (-25.5, 28.5)]
    assert result.distance == 1234.5
    assert result.duration == 300.0

    assert calls[0]["url"] == "http://osrm.test/route/v1/driving/28.0,-26.0;28.5,-25.5"
    assert calls[0]["params"] == {"overview": "full", "geometries": "geojson"}
    assert calls[0]["timeout"] == 3


def test_compute_route_raises_on_osrm_error_code(client, captured_get):
    captured_get(FakeResponse({"code": "NoRoute", "message": "Impossible route between points"}))

    with pytest.raises(OSRMError, match="Impossible route"):
        client.compute_route([(0.0, 0.0), (0.0, 1.0)])


def test_compute_route_raises_when_no_routes(client, captured_get):
    captured_get(FakeResponse({"code": "Ok", "routes": []}))

    with pytest.raises(OSRMError):
        client.compute_route([(0.0, 0.0), (0.0, 1.0)])


def test_compute_route_raises_on_http_error(client, captured_get):
    captured_get(FakeResponse({}, status_code=503))

    with pytest.raises(requests.HTTPError):
        client.compute_route([(0.0, 0.0), (0.0, 1.0)])


def test_compute_route_needs_two_coordinates(client):
    with pytest.raises(ValueError):
        client.compute_route([(0.0, 0.0)])


def test_client_requires_base_url(monkeypatch):
    monkeypatch.setattr(osrm_client, "BASE_URL", None)
    with pytest.raises(ValueError):
        OSRMClient()


def test_client_reads_base_url_from_environment(monkeypatch):
    monkeypatch.setattr(osrm_client, "BASE_URL", "https://router.project-osrm.org")
    assert OSRMClient().base_url == "https://router.project-osrm.org"
