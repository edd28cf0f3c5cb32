"""Error hierarchy for portal lookups.

ValidationError is the caller's fault. Launch, navigation and form errors
mean the portal (or the local browser) could not be driven to the results
page. ExtractionFailed means the results page was reached but its structure
was not recognised.
"""


class PortalError(Exception):
    """Base class for all lookup errors."""

    pass


class ValidationError(PortalError):
    """Identifier missing or blank."""

    pass


class LaunchError(PortalError):
    """Browser process could not be started."""

    pass


class NavigationError(PortalError):
    """Landing page, search link or a page transition failed."""

    pass


class FormError(PortalError):
    """Search input or search control never appeared."""

    pass


class ExtractionFailed(PortalError):
    """Results page structure could not be inspected."""

    pass


class CapacityError(PortalError):
    """No browser session slot became free within the queue timeout."""

    pass
