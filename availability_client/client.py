"""
HTTP access to the slots API.

Every request carries the tenant header. Transport errors and 5xx responses
are retried (ClientConfig.retries times); anything still failing, plus 4xx
and undecodable bodies, surfaces as AvailabilityUnavailable.
"""

import logging
from typing import Any, Optional

import httpx

from .config import ClientConfig
from .exceptions import AvailabilityUnavailable
from .query import FullyBookedQuery, SlotQuery
from .retry import async_retry

logger = logging.getLogger(__name__)

TENANT_HEADER = "X-Tenant-Slug"
RETRYABLE = (httpx.TransportError, httpx.HTTPStatusError)


class AvailabilityClient:
    def __init__(self, config: ClientConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self._http = httpx.AsyncClient(
            base_url=config.base_url,
            headers={TENANT_HEADER: config.tenant_slug},
            timeout=config.timeout,
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()

    async def aclose(self):
        await self._http.aclose()

    async def _request(self, path: str, params: dict) -> httpx.Response:
        response = await self._http.get(path, params=params)
        if response.status_code >= 500:
            response.raise_for_status()
        return response

    async def _get_json(self, path: str, params: dict) -> Any:
        fetch = async_retry(
            max_attempts=self.config.retries + 1,
            delay=self.config.retry_delay,
            backoff=self.config.retry_backoff,
            exceptions=RETRYABLE,
        )(self._request)

        try:
            response = await fetch(path, params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            logger.warning("GET %s failed: %s", path, e)
            raise AvailabilityUnavailable(f"Unable to load availability: {e}") from e
        except ValueError as e:
            logger.warning("GET %s returned invalid JSON: %s", path, e)
            raise AvailabilityUnavailable("Unable to load availability: invalid response") from e

    async def get_slots(self, query: SlotQuery) -> dict:
        """GET /api/slots/ -> {"slots": [...], "message"?: str}"""
        data = await self._get_json("/api/slots/", query.to_params())
        if not isinstance(data, dict) or not isinstance(data.get("slots", []), list):
            raise AvailabilityUnavailable("Unable to load availability: unexpected response shape")
        return data

    async def get_fully_booked(self, query: FullyBookedQuery) -> list:
        data = await self._get_json("/api/slots/fully-booked/", query.to_params())
        if not isinstance(data, dict) or not isinstance(data.get("fullyBooked", []), list):
            raise AvailabilityUnavailable("Unable to load availability: unexpected response shape")
        return list(data.get("fullyBooked", []))
