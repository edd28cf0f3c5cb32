"""Results-page extraction helpers.

Label resolution and member table matchers, all following the visible-text
policy described in base.py.
"""

from .base import TableMatcher, parse_html, select_table
from .labels import resolve_fields, resolve_label
from .members import (
    HeaderTextMatcher,
    LastTableMatcher,
    PrecedingHeadingMatcher,
    default_member_matchers,
    extract_member_rows,
    extract_members,
)

__all__ = [
    "TableMatcher",
    "parse_html",
    "select_table",
    "resolve_fields",
    "resolve_label",
    "HeaderTextMatcher",
    "LastTableMatcher",
    "PrecedingHeadingMatcher",
    "default_member_matchers",
    "extract_member_rows",
    "extract_members",
]
