"""Base table matcher and shared DOM helpers for results-page extraction.

================================================================================
                     EXTRACTION POLICY: VISIBLE TEXT ONLY
================================================================================

The portal's results page carries no stable element ids or classes. The only
signal that survives between portal revisions is the visible text: field
labels, section headings and the serial-number column of the members table.

All extraction here therefore:
1. Works on an HTML snapshot taken after the page settled (page.content())
2. Locates regions by visible text first, by document position second
3. Logs which matcher fired, so a portal markup change shows up in the logs
   as a fallback matcher taking over

A new portal layout should be handled by adding a TableMatcher to the chain,
not by special-casing an existing one.

================================================================================
"""

from abc import ABC, abstractmethod

from bs4 import BeautifulSoup, Tag
from loguru import logger

CELL_TAGS = ["td", "th"]


def parse_html(html: str) -> BeautifulSoup:
    """Parse a results page snapshot."""
    return BeautifulSoup(html, "html.parser")


def cell_text(cell: Tag) -> str:
    """Trimmed text content of a cell, including nested elements."""
    return cell.get_text().strip()


def row_cells(row: Tag) -> list[Tag]:
    """Direct td/th children of a table row."""
    return row.find_all(CELL_TAGS, recursive=False)


def data_cells(row: Tag) -> list[Tag]:
    """Direct td children of a table row. Header cells are not data."""
    return row.find_all("td", recursive=False)


def own_rows(table: Tag) -> list[Tag]:
    """Rows belonging to this table, excluding rows of nested tables."""
    return [row for row in table.find_all("tr") if row.find_parent("table") is table]


class TableMatcher(ABC):
    """Base class for locating a semantically named table in a results page.

    Matchers are tried in priority order by select_table(); the first one
    returning a table wins.

    Subclasses must implement:
        - get_matcher_name(): Return matcher identifier for logging
        - match(): Return the matching table or None

    Example implementation:
        class FirstTableMatcher(TableMatcher):
            def get_matcher_name(self) -> str:
                return "first_table"

            def match(self, soup: BeautifulSoup) -> Tag | None:
                return soup.find("table")
    """

    @abstractmethod
    def get_matcher_name(self) -> str:
        """Return identifier for this matcher.

        Used in logging.

        Returns:
            Matcher name (e.g., "header_text", "last_table")
        """
        pass

    @abstractmethod
    def match(self, soup: BeautifulSoup) -> Tag | None:
        """Locate the table this matcher is looking for.

        Args:
            soup: Parsed results page

        Returns:
            Matching table element or None
        """
        pass


def select_table(
    soup: BeautifulSoup,
    matchers: list[TableMatcher],
    *,
    purpose: str,
) -> Tag | None:
    """Run matchers in order and return the first table found.

    Args:
        soup: Parsed results page
        matchers: Matchers in priority order
        purpose: What the table is for (logging only)

    Returns:
        Selected table or None if no matcher fired
    """
    for matcher in matchers:
        table = matcher.match(soup)
        if table is not None:
            logger.info(f"[{matcher.get_matcher_name()}] matched {purpose} table")
            return table
        logger.debug(f"[{matcher.get_matcher_name()}] no {purpose} table")

    logger.warning(f"No matcher located a {purpose} table")
    return None
