"""Data models for fsclookup."""

from fsclookup.models.household import (
    Failed,
    Found,
    HouseholdRecord,
    LookupOutcome,
    MemberEntry,
    NotFound,
)

__all__ = [
    "Failed",
    "Found",
    "HouseholdRecord",
    "LookupOutcome",
    "MemberEntry",
    "NotFound",
]
