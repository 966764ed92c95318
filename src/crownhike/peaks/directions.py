"""OpenRouteService walking directions client."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from crownhike.config import get_settings

logger = structlog.get_logger()


class DirectionsError(Exception):
    """The directions provider is unconfigured, unreachable or returned garbage."""


class RouteNotFound(DirectionsError):
    """The provider answered but has no route between the two points."""


@dataclass
class Route:
    path: list[tuple[float, float]]  # (lat, lng)
    distance_m: float
    duration_s: float


class DirectionsClient:
    """Thin async wrapper over the ORS /v2/directions/{profile}/geojson endpoint."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openrouteservice.org",
        profile: str = "foot-hiking",
        timeout: float = 15.0,
        snap_radius_m: int = 5000,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.profile = profile
        self.timeout = timeout
        self.snap_radius_m = snap_radius_m
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def route(self, start_lat: float, start_lng: float, end_lat: float, end_lng: float) -> Route:
        """
        Walking route from the start to the end point.

        The start may snap any distance to the path network; the end only
        within ``snap_radius_m`` so a summit is not routed to a far valley.

        Raises:
            RouteNotFound: If the provider returns no route.
            DirectionsError: On missing key, transport or HTTP errors.
        """
        if not self.configured:
            msg = "Server missing ORS key"
            raise DirectionsError(msg)

        url = f"{self.base_url}/v2/directions/{self.profile}/geojson"
        body = {
            # ORS takes [lng, lat]
            "coordinates": [[start_lng, start_lat], [end_lng, end_lat]],
            "radiuses": [-1, self.snap_radius_m],
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    url,
                    headers={"Authorization": self.api_key, "Content-Type": "application/json"},
                    json=body,
                )
                response.raise_for_status()
                payload: dict[str, Any] = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning("directions_http_error", status=e.response.status_code, body=e.response.text[:500])
            msg = f"Directions provider returned {e.response.status_code}"
            raise DirectionsError(msg) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("directions_request_failed", error=str(e))
            msg = "Failed to fetch route"
            raise DirectionsError(msg) from e

        return _parse_route(payload)


def _parse_route(payload: dict[str, Any]) -> Route:
    features = payload.get("features") or []
    if not features:
        msg = "Route not found"
        raise RouteNotFound(msg)
    try:
        feature = features[0]
        coords = feature["geometry"]["coordinates"]
        summary = feature["properties"]["summary"]
        return Route(
            path=[(float(p[1]), float(p[0])) for p in coords],
            distance_m=float(summary.get("distance", 0.0)),
            duration_s=float(summary.get("duration", 0.0)),
        )
    except (KeyError, IndexError, TypeError, ValueError) as e:
        msg = "Malformed directions response"
        raise DirectionsError(msg) from e


def get_directions_client() -> DirectionsClient:
    """FastAPI dependency; tests override it with a client on a mock transport."""
    settings = get_settings()
    return DirectionsClient(
        api_key=settings.ors_api_key,
        base_url=settings.ors_base_url,
        profile=settings.ors_profile,
        timeout=settings.ors_timeout_seconds,
        snap_radius_m=settings.ors_snap_radius_m,
    )
