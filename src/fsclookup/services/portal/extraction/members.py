"""Household member table extraction.

Some portal revisions title the members table "RATION CARD MEMBER DETAILS"
inside the table, some render the heading just above it, and some omit it.
The matcher chain below covers the three layouts in that order.
"""

import re

from bs4 import BeautifulSoup, Tag
from loguru import logger

from fsclookup.config.constants import MEMBER_SECTION_HEADING, NO_MEMBERS_LISTED
from fsclookup.models.household import MemberEntry

from .base import TableMatcher, cell_text, data_cells, own_rows, select_table

SERIAL_NUMBER_PATTERN = re.compile(r"^[0-9]+$")


def _names_heading(text: str, heading: str) -> bool:
    return heading.upper() in text.upper()


class HeaderTextMatcher(TableMatcher):
    """Table whose caption, header cells or first row name the members section.

    Only leaf tables (no nested tables) are considered, so a layout table
    wrapping the members table never wins.
    """

    def __init__(self, heading: str = MEMBER_SECTION_HEADING):
        self.heading = heading

    def get_matcher_name(self) -> str:
        return "header_text"

    def _header_text(self, table: Tag) -> str:
        parts: list[str] = []

        caption = table.find("caption")
        if caption is not None:
            parts.append(cell_text(caption))

        rows = table.find_all("tr")
        parts.extend(cell_text(th) for th in table.find_all("th"))
        if rows:
            parts.append(cell_text(rows[0]))

        return " ".join(parts)

    def match(self, soup: BeautifulSoup) -> Tag | None:
        for table in soup.find_all("table"):
            if table.find("table") is not None:
                continue
            if _names_heading(self._header_text(table), self.heading):
                return table
        return None


class PrecedingHeadingMatcher(TableMatcher):
    """First table following a text node that names the members section."""

    def __init__(self, heading: str = MEMBER_SECTION_HEADING):
        self.heading = heading

    def get_matcher_name(self) -> str:
        return "preceding_heading"

    def match(self, soup: BeautifulSoup) -> Tag | None:
        for node in soup.find_all(string=lambda s: s and _names_heading(s, self.heading)):
            table = node.find_next("table")
            if table is not None:
                return table
        return None


class LastTableMatcher(TableMatcher):
    """Last table in the document."""

    def get_matcher_name(self) -> str:
        return "last_table"

    def match(self, soup: BeautifulSoup) -> Tag | None:
        tables = soup.find_all("table")
        return tables[-1] if tables else None


def default_member_matchers() -> list[TableMatcher]:
    """Member table matchers in priority order."""
    return [HeaderTextMatcher(), PrecedingHeadingMatcher(), LastTableMatcher()]


def extract_member_rows(table: Tag) -> list[MemberEntry]:
    """Extract serial-numbered rows from a members table.

    Args:
        table: Members table element

    Returns:
        Member entries in document order
    """
    members: list[MemberEntry] = []

    for row in own_rows(table):
        cells = data_cells(row)
        if len(cells) <= 1:
            continue

        sno = cell_text(cells[0])
        if not SERIAL_NUMBER_PATTERN.match(sno):
            continue

        members.append(MemberEntry(sno=sno, name=cell_text(cells[1])))

    return members


def extract_members(
    soup: BeautifulSoup,
    matchers: list[TableMatcher] | None = None,
) -> list[MemberEntry] | str:
    """Locate the members table and extract its rows.

    Args:
        soup: Parsed results page
        matchers: Table matchers in priority order (defaults to
                 default_member_matchers())

    Returns:
        List of member entries, or NO_MEMBERS_LISTED if none were found
    """
    table = select_table(soup, matchers or default_member_matchers(), purpose="member")
    if table is None:
        return NO_MEMBERS_LISTED

    members = extract_member_rows(table)
    logger.debug(f"Extracted {len(members)} member row(s)")

    return members if members else NO_MEMBERS_LISTED
