"""
Tests for the Wargaming encyclopedia client.

HTTP is mocked at the requests.Session level; retry waits are disabled.
"""
import pytest
import requests
from unittest.mock import Mock, patch
from tenacity import wait_none

from core.cache import UPSTREAM_ALL_KEY, upstream_vehicle_key
from core.exceptions import UpstreamSourceError
from core.wargaming_client import (
    WargamingClient,
    VEHICLE_FIELDS,
    _is_retryable_error,
    map_nation,
    map_vehicle_type,
    transform_vehicle,
)
from tests.mocks.cache_mocks import FakeScoreCache


WG_TANK = {
    "tank_id": 2849,
    "name": "T-34-85",
    "tier": 6,
    "type": "mediumTank",
    "nation": "ussr",
    "is_premium": False,
    "images": {"small_icon": "small.png", "big_icon": "big.png"},
    "description": "Soviet medium tank",
    "hp": 1050,
    "speed_forward": 54,
    "armor": {
        "hull": {"front": 45, "sides": 45, "rear": 40},
        "turret": {"front": 90, "sides": 75, "rear": 52},
    },
    "guns": [
        {"damage": [180, 300], "penetration": [120, 200], "rate": 10.2},
        {"damage": [165], "penetration": [145], "rate": 11.0},
    ],
    "engines": [{"power": 500}, {"power": 540}],
}


def _response(payload=None, status_code=200):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(
            f"{status_code} Error", response=response
        )
    return response


@pytest.fixture(autouse=True)
def no_retry_wait():
    with patch.object(WargamingClient._get.retry, "wait", wait_none()):
        yield


@pytest.fixture
def cache():
    return FakeScoreCache()


@pytest.fixture
def client(cache):
    client = WargamingClient(api_key="test-key", base_url="https://wg.example/wotb/", cache=cache)
    client.session = Mock()
    return client


class TestTransform:

    def test_transform_vehicle(self):
        vehicle = transform_vehicle(WG_TANK)

        assert vehicle["id"] == 2849
        assert vehicle["type"] == "mediumTank"
        assert vehicle["nation"] == "ussr"
        assert vehicle["health"] == 1050
        # Mean of first values, rounded half up: (180 + 165) / 2 = 172.5
        assert vehicle["gun_damage"] == 173
        assert vehicle["gun_penetration"] == 133
        assert vehicle["gun_rof"] == 10.6
        assert vehicle["mobility_power"] == 540
        assert vehicle["mobility_speed"] == 54
        assert (vehicle["armor_front"], vehicle["armor_side"], vehicle["armor_rear"]) == (90, 75, 52)
        assert vehicle["image_url"] == "big.png"

    def test_missing_guns_engines_and_armor(self):
        vehicle = transform_vehicle({
            "tank_id": 1, "name": "Prototype", "tier": 1, "type": "lightTank",
            "nation": "usa", "hp": 100, "speed_forward": 60,
            "guns": [], "engines": [], "images": {"small_icon": "s.png"},
        })

        assert vehicle["gun_damage"] == 0
        assert vehicle["gun_penetration"] == 0
        assert vehicle["gun_rof"] == 0.0
        assert vehicle["mobility_power"] == 0
        assert vehicle["armor_front"] == 0
        assert vehicle["image_url"] == "s.png"

    def test_type_and_nation_mapping(self):
        assert map_vehicle_type("AT-SPG") == "AT-SPG"
        assert map_vehicle_type("SPG") == "SPG"
        assert map_vehicle_type("wheeledTank") == "mediumTank"
        assert map_nation("japan") == "japan"
        assert map_nation("european") == "other"


class TestRetryPolicy:

    def test_retryable_errors(self):
        assert _is_retryable_error(requests.Timeout())
        assert _is_retryable_error(requests.ConnectionError())
        assert _is_retryable_error(requests.HTTPError(response=Mock(status_code=503)))

    def test_client_errors_are_not_retried(self):
        assert not _is_retryable_error(requests.HTTPError(response=Mock(status_code=404)))
        assert not _is_retryable_error(ValueError("bad json"))


class TestFetchAllVehicles:

    def test_fetch_and_cache(self, client, cache):
        client.session.get.return_value = _response({"status": "ok", "data": {"2849": WG_TANK}})

        vehicles = client.fetch_all_vehicles()

        assert [v["id"] for v in vehicles] == [2849]
        url = client.session.get.call_args.args[0]
        params = client.session.get.call_args.kwargs["params"]
        assert url == "https://wg.example/wotb/encyclopedia/vehicles/"
        assert params["application_id"] == "test-key"
        assert params["fields"] == VEHICLE_FIELDS
        assert cache.store[UPSTREAM_ALL_KEY] == vehicles
        assert cache.ttls[UPSTREAM_ALL_KEY] == 21600

    def test_cache_hit_skips_http(self, client, cache):
        cache.set(UPSTREAM_ALL_KEY, [{"id": 7}])

        assert client.fetch_all_vehicles() == [{"id": 7}]
        client.session.get.assert_not_called()

    def test_error_status(self, client):
        client.session.get.return_value = _response(
            {"status": "error", "error": {"message": "INVALID_APPLICATION_ID"}}
        )

        with pytest.raises(UpstreamSourceError, match="INVALID_APPLICATION_ID"):
            client.fetch_all_vehicles()

    def test_server_error_retried_then_raised(self, client):
        client.session.get.return_value = _response(status_code=503)

        with pytest.raises(UpstreamSourceError):
            client.fetch_all_vehicles()
        assert client.session.get.call_count == 3

    def test_timeout_recovers_on_retry(self, client):
        client.session.get.side_effect = [
            requests.Timeout("read timeout"),
            _response({"status": "ok", "data": {"2849": WG_TANK}}),
        ]

        assert len(client.fetch_all_vehicles()) == 1
        assert client.session.get.call_count == 2

    def test_client_error_not_retried(self, client):
        client.session.get.return_value = _response(status_code=403)

        with pytest.raises(UpstreamSourceError):
            client.fetch_all_vehicles()
        assert client.session.get.call_count == 1


class TestFetchVehicle:

    def test_found(self, client, cache):
        client.session.get.return_value = _response({"status": "ok", "data": {"2849": WG_TANK}})

        vehicle = client.fetch_vehicle(2849)

        assert vehicle["name"] == "T-34-85"
        assert client.session.get.call_args.kwargs["params"]["tank_id"] == 2849
        assert cache.store[upstream_vehicle_key(2849)] == vehicle
        assert cache.ttls[upstream_vehicle_key(2849)] == 3600

    def test_absent(self, client, cache):
        client.session.get.return_value = _response({"status": "ok", "data": {"99": None}})

        assert client.fetch_vehicle(99) is None
        assert upstream_vehicle_key(99) not in cache.store


class TestApiKeyAndLifecycle:

    def test_validate_api_key(self, client):
        client.session.get.return_value = _response({"status": "ok", "data": {}})
        assert client.validate_api_key() is True
        assert client.session.get.call_args.args[0].endswith("/encyclopedia/info/")

    def test_validate_api_key_failure(self, client):
        client.session.get.return_value = _response(status_code=401)
        assert client.validate_api_key() is False

    def test_context_manager_closes_session(self):
        with WargamingClient(api_key="k") as client:
            session = client.session = Mock()
        session.close.assert_called_once()
