"""Wargaming encyclopedia API client with connection reuse, retry logic and caching."""

import logging
import math
from typing import Optional, Dict, Any, List

import requests
from tenacity import (
    retry,
    stop_after_attempt,
    wait_fixed,
    retry_if_exception,
    before_sleep_log
)

from core.cache import UPSTREAM_ALL_KEY, upstream_vehicle_key
from core.exceptions import UpstreamSourceError
from core.scorer.models import VehicleType, Nation

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.wotblitz.eu/wotb"

VEHICLE_FIELDS = (
    "tank_id,name,tier,type,nation,is_premium,images,description,"
    "engines,guns,armor,speed_forward,hp"
)

ALL_VEHICLES_TTL_SECONDS = 6 * 60 * 60
VEHICLE_TTL_SECONDS = 60 * 60


def _is_retryable_error(exc: Exception) -> bool:
    """
    Determine if an exception is retryable.

    Only retries on:
    - Timeouts
    - Server errors (5xx)
    - Connection errors without a response

    Does NOT retry on client errors (4xx).
    """
    if isinstance(exc, requests.Timeout):
        return True

    if isinstance(exc, requests.HTTPError):
        response = getattr(exc, 'response', None)
        if response is not None:
            return response.status_code >= 500
        return True

    if isinstance(exc, requests.RequestException):
        response = getattr(exc, 'response', None)
        if response is not None and 400 <= response.status_code < 500:
            return False
        return True

    return False


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def map_vehicle_type(wg_type: Optional[str]) -> str:
    """Map an encyclopedia vehicle type; unknown types fall back to mediumTank."""
    try:
        return VehicleType(wg_type).value
    except ValueError:
        return VehicleType.MEDIUM.value


def map_nation(wg_nation: Optional[str]) -> str:
    try:
        return Nation(wg_nation).value
    except ValueError:
        return Nation.OTHER.value


def _max_armor(armor: Dict[str, Any], zone: str) -> int:
    hull = (armor.get("hull") or {}).get(zone) or 0
    turret = (armor.get("turret") or {}).get(zone) or 0
    return max(hull, turret)


def transform_vehicle(wg_vehicle: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert one encyclopedia entry into the vehicle row shape.

    Gun damage and penetration are the rounded mean of each gun's first
    value, rate of fire the mean rounded to 2 places; engine power is the
    best engine; each armor zone takes the thicker of hull and turret.
    """
    guns = wg_vehicle.get("guns") or []
    engines = wg_vehicle.get("engines") or []
    armor = wg_vehicle.get("armor") or {}
    images = wg_vehicle.get("images") or {}

    def first(values) -> float:
        return (values or [0])[0] or 0

    if guns:
        gun_damage = int(_round_half_up(sum(first(g.get("damage")) for g in guns) / len(guns)))
        gun_penetration = int(_round_half_up(sum(first(g.get("penetration")) for g in guns) / len(guns)))
        gun_rof = _round_half_up(sum((g.get("rate") or 0) for g in guns) / len(guns), 2)
    else:
        gun_damage, gun_penetration, gun_rof = 0, 0, 0.0

    mobility_power = max((e.get("power") or 0) for e in engines) if engines else 0

    return {
        "id": wg_vehicle["tank_id"],
        "name": wg_vehicle.get("name"),
        "tier": wg_vehicle.get("tier"),
        "type": map_vehicle_type(wg_vehicle.get("type")),
        "nation": map_nation(wg_vehicle.get("nation")),
        "is_premium": bool(wg_vehicle.get("is_premium")),
        "image_url": images.get("big_icon") or images.get("small_icon"),
        "description": wg_vehicle.get("description"),
        "health": wg_vehicle.get("hp") or 0,
        "armor_front": _max_armor(armor, "front"),
        "armor_side": _max_armor(armor, "sides"),
        "armor_rear": _max_armor(armor, "rear"),
        "gun_damage": gun_damage,
        "gun_penetration": gun_penetration,
        "gun_rof": gun_rof,
        "mobility_speed": wg_vehicle.get("speed_forward") or 0,
        "mobility_power": mobility_power,
    }


class WargamingClient:
    """
    Client for the Wargaming encyclopedia API.

    Responsibilities:
    - Own a requests.Session for connection reuse
    - Retry transient failures (timeouts, 5xx, connection errors)
    - Memoize transformed results in the score cache
    """

    def __init__(
        self,
        api_key: str = "",
        base_url: Optional[str] = None,
        request_timeout_seconds: int = 10,
        cache=None,
        cache_ttl_seconds: int = ALL_VEHICLES_TTL_SECONDS
    ):
        self.api_key = api_key
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.request_timeout_seconds = request_timeout_seconds
        self.cache = cache
        self.cache_ttl_seconds = cache_ttl_seconds

        self.session = requests.Session()

        logger.info(f"WargamingClient initialized: base_url={self.base_url}")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_fixed(1),
        retry=retry_if_exception(_is_retryable_error),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True
    )
    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        query = {"application_id": self.api_key}
        query.update(params or {})
        response = self.session.get(
            f"{self.base_url}{path}",
            params=query,
            timeout=self.request_timeout_seconds
        )
        response.raise_for_status()
        return response.json()

    def _fetch_encyclopedia(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        query = {"fields": VEHICLE_FIELDS}
        query.update(params or {})
        try:
            payload = self._get("/encyclopedia/vehicles/", query)
        except (requests.RequestException, ValueError) as e:
            raise UpstreamSourceError(f"Wargaming API request failed: {e}") from e

        status = payload.get("status")
        if status != "ok":
            error = payload.get("error") or {}
            raise UpstreamSourceError(
                f"Wargaming API error: status={status} {error.get('message', '')}".strip()
            )
        return payload.get("data") or {}

    def fetch_all_vehicles(self) -> List[Dict[str, Any]]:
        """
        Fetch and transform every vehicle of the encyclopedia.

        Raises:
            UpstreamSourceError: On HTTP/network failure or a non-ok status.
        """
        if self.cache:
            cached = self.cache.get(UPSTREAM_ALL_KEY)
            if cached:
                logger.info(f"Loaded {len(cached)} vehicles from cache")
                return cached

        logger.info("Fetching vehicles from the Wargaming API...")
        data = self._fetch_encyclopedia()
        vehicles = [transform_vehicle(v) for v in data.values() if v]

        if self.cache:
            self.cache.set(UPSTREAM_ALL_KEY, vehicles, self.cache_ttl_seconds)

        logger.info(f"Fetched {len(vehicles)} vehicles from the Wargaming API")
        return vehicles

    def fetch_vehicle(self, tank_id: int) -> Optional[Dict[str, Any]]:
        """Fetch one vehicle; None when the encyclopedia has no such tank."""
        cache_key = upstream_vehicle_key(tank_id)
        if self.cache:
            cached = self.cache.get(cache_key)
            if cached:
                return cached

        data = self._fetch_encyclopedia({"tank_id": tank_id})
        # Response keys are stringified tank ids
        entry = data.get(str(tank_id))
        if not entry:
            return None

        vehicle = transform_vehicle(entry)
        if self.cache:
            self.cache.set(cache_key, vehicle, VEHICLE_TTL_SECONDS)
        return vehicle

    def validate_api_key(self) -> bool:
        try:
            payload = self._get("/encyclopedia/info/")
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Wargaming API key validation failed: {e}")
            return False
        return payload.get("status") == "ok"

    def close(self):
        """Close the session and release resources."""
        self.session.close()
        logger.info("WargamingClient session closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
