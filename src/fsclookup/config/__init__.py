"""Configuration module for fsclookup."""

from fsclookup.config.constants import (
    ANCHOR_FIELDS,
    FIELD_LABELS,
    NO_MEMBERS_LISTED,
    NOT_AVAILABLE,
    NOT_FOUND_REASON,
    RESULTS_MARKER,
)
from fsclookup.config.settings import Config, get_config

__all__ = [
    "Config",
    "get_config",
    "ANCHOR_FIELDS",
    "FIELD_LABELS",
    "NO_MEMBERS_LISTED",
    "NOT_AVAILABLE",
    "NOT_FOUND_REASON",
    "RESULTS_MARKER",
]
