"""Settings for the availability client."""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class ClientConfig:
    base_url: str
    tenant_slug: str
    salon_tz: str = "Europe/London"

    # Quiet period before a query is dispatched (seconds)
    debounce_seconds: float = 0.3

    # Freshness windows (seconds). Slots change fast, the month index less so.
    slots_ttl_seconds: float = 45.0
    fully_booked_ttl_seconds: float = 120.0

    # One automatic retry with backoff on transport errors and 5xx
    retries: int = 1
    retry_delay: float = 0.5
    retry_backoff: float = 2.0

    timeout: float = 10.0

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "ClientConfig":
        """Build a config from AVAILABILITY_* environment variables (.env honoured)."""
        load_dotenv(env_file)

        base_url = os.getenv("AVAILABILITY_BASE_URL")
        tenant_slug = os.getenv("AVAILABILITY_TENANT")
        if not base_url:
            raise ValueError("AVAILABILITY_BASE_URL not set")
        if not tenant_slug:
            raise ValueError("AVAILABILITY_TENANT not set")

        return cls(
            base_url=base_url,
            tenant_slug=tenant_slug,
            salon_tz=os.getenv("AVAILABILITY_SALON_TZ", cls.salon_tz),
            debounce_seconds=float(os.getenv("AVAILABILITY_DEBOUNCE_SECONDS", cls.debounce_seconds)),
            slots_ttl_seconds=float(os.getenv("AVAILABILITY_SLOTS_TTL", cls.slots_ttl_seconds)),
            fully_booked_ttl_seconds=float(
                os.getenv("AVAILABILITY_FULLY_BOOKED_TTL", cls.fully_booked_ttl_seconds)
            ),
            retries=int(os.getenv("AVAILABILITY_RETRIES", cls.retries)),
            timeout=float(os.getenv("AVAILABILITY_TIMEOUT", cls.timeout)),
        )
