"""
Data models for ration card household lookups.

A HouseholdRecord is built fresh from one results page and lives only as
long as the response it is embedded in. Lookups resolve to exactly one
LookupOutcome variant: Found, NotFound or Failed.
"""

from dataclasses import dataclass, field
from typing import Any

from fsclookup.config.constants import FIELD_LABELS, NO_MEMBERS_LISTED, NOT_AVAILABLE


@dataclass(frozen=True)
class MemberEntry:
    """One row of the household members table.

    Attributes:
        sno: Serial number as printed in the first column
        name: Member name from the adjacent column
    """

    sno: str
    name: str

    def to_dict(self) -> dict[str, str]:
        return {"sno": self.sno, "name": self.name}


@dataclass
class HouseholdRecord:
    """Household record scraped from the portal's results table.

    Each field holds the trimmed cell text or NOT_AVAILABLE. ``members`` is
    either the list of member rows or the NO_MEMBERS_LISTED placeholder when
    the members table had no serial-numbered rows.
    """

    fsc_reference_no: str = NOT_AVAILABLE
    new_ration_card_no: str = NOT_AVAILABLE
    card_type: str = NOT_AVAILABLE
    application_status: str = NOT_AVAILABLE
    head_of_family: str = NOT_AVAILABLE
    district: str = NOT_AVAILABLE
    gas_connection: str = NOT_AVAILABLE
    members: list[MemberEntry] | str = NO_MEMBERS_LISTED

    @property
    def has_members(self) -> bool:
        """Whether any member rows were extracted."""
        return isinstance(self.members, list) and len(self.members) > 0

    def missing_fields(self) -> list[str]:
        """Names of scalar fields that resolved to NOT_AVAILABLE."""
        return [name for name in FIELD_LABELS if getattr(self, name) == NOT_AVAILABLE]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON shape published by the API."""
        if isinstance(self.members, list) and self.members:
            members: list[Any] = [m.to_dict() for m in self.members]
        else:
            members = [NO_MEMBERS_LISTED]

        return {
            "newRationCardNo": self.new_ration_card_no,
            "fscReferenceNo": self.fsc_reference_no,
            "cardType": self.card_type,
            "applicationStatus": self.application_status,
            "headOfFamily": self.head_of_family,
            "district": self.district,
            "gasConnection": self.gas_connection,
            "members": members,
        }


@dataclass(frozen=True)
class Found:
    """The portal returned a record."""

    record: HouseholdRecord


@dataclass(frozen=True)
class NotFound:
    """The query was well formed but the portal has no matching record."""

    reason: str


@dataclass(frozen=True)
class Failed:
    """The lookup could not be completed."""

    cause: Exception = field(compare=False)

    @property
    def error_type(self) -> str:
        return type(self.cause).__name__


LookupOutcome = Found | NotFound | Failed
