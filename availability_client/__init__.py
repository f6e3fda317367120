"""
Client-side availability query façade for the booking site.

Talks to the slots API over HTTP and adds what an interactive date picker
needs on top: debouncing, superseding of stale queries, required-parameter
gating, slot validation and a short-lived result cache.
"""

from .cache import TTLCache
from .client import AvailabilityClient
from .config import ClientConfig
from .exceptions import AvailabilityUnavailable, SlotValidationWarning
from .facade import AvailabilityFacade, AvailabilityResult, FullyBookedResult
from .query import FullyBookedQuery, SlotQuery

__all__ = [
    "AvailabilityClient",
    "AvailabilityFacade",
    "AvailabilityResult",
    "AvailabilityUnavailable",
    "ClientConfig",
    "FullyBookedQuery",
    "FullyBookedResult",
    "SlotQuery",
    "SlotValidationWarning",
    "TTLCache",
]
