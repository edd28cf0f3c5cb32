"""Food Security portal automation and household record extraction.

This package looks up ration card households on the Telangana ePDS portal
using Playwright browser automation.

Primary Classes:
    LookupService: Main entry point, one FSC number in, one outcome out
    PortalSession: Browser session driving the portal's search form
    RecordExtractor: Turns a results page snapshot into an outcome

Example Usage:
    from fsclookup.services.portal import LookupService

    service = LookupService()
    outcome = await service.lookup("FSC0000001234")
    if isinstance(outcome, Found):
        print(outcome.record.to_dict())
"""

from .errors import (
    CapacityError,
    ExtractionFailed,
    FormError,
    LaunchError,
    NavigationError,
    PortalError,
    ValidationError,
)
from .extractor import RecordExtractor
from .lookup import LookupService, get_lookup_service
from .session import PortalSession, SessionState

__all__ = [
    # Main classes
    "LookupService",
    "PortalSession",
    "RecordExtractor",
    "SessionState",
    "get_lookup_service",
    # Errors
    "PortalError",
    "ValidationError",
    "LaunchError",
    "NavigationError",
    "FormError",
    "ExtractionFailed",
    "CapacityError",
]
