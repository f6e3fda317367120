"""Parameter sets understood by the slots API."""

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class SlotQuery:
    service_id: Optional[int] = None
    date: Optional[date] = None
    variant_name: Optional[str] = None
    specialist_id: Optional[int] = None
    total_duration: Optional[int] = None
    any: bool = False

    @property
    def is_ready(self) -> bool:
        """True once service, a duration source and date are all present."""
        has_duration = bool(self.variant_name) or bool(self.total_duration)
        return bool(self.service_id) and has_duration and self.date is not None

    def cache_key(self) -> tuple:
        return (
            "slots",
            self.service_id,
            self.variant_name or None,
            self.date.isoformat() if self.date else None,
            self.specialist_id,
            self.total_duration,
            self.any,
        )

    def to_params(self) -> dict:
        params = {"serviceId": self.service_id, "date": self.date.isoformat()}
        if self.variant_name:
            params["variantName"] = self.variant_name
        if self.specialist_id is not None:
            params["specialistId"] = self.specialist_id
        if self.total_duration:
            params["totalDuration"] = self.total_duration
        if self.any:
            params["any"] = "true"
        return params


@dataclass(frozen=True)
class FullyBookedQuery:
    year: int
    month: int
    specialist_id: Optional[int] = None
    service_id: Optional[int] = None

    def cache_key(self) -> tuple:
        return ("fully-booked", self.year, self.month, self.specialist_id, self.service_id)

    def to_params(self) -> dict:
        params = {"year": self.year, "month": self.month}
        if self.specialist_id is not None:
            params["specialistId"] = self.specialist_id
        if self.service_id is not None:
            params["serviceId"] = self.service_id
        return params
