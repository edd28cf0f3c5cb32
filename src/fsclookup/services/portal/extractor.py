"""Record extraction and outcome classification for the results page.

Usage:
    extractor = RecordExtractor()
    outcome = extractor.extract(await session.page_content())
    if isinstance(outcome, Found):
        print(outcome.record.to_dict())
"""

from bs4 import BeautifulSoup
from loguru import logger

from fsclookup.config.constants import (
    ANCHOR_FIELDS,
    FIELD_LABELS,
    NOT_AVAILABLE,
    NOT_FOUND_REASON,
    RESULTS_MARKER,
)
from fsclookup.models.household import (
    Failed,
    Found,
    HouseholdRecord,
    LookupOutcome,
    NotFound,
)

from .errors import ExtractionFailed
from .extraction import TableMatcher, extract_members, parse_html, resolve_fields


class RecordExtractor:
    """Turns a results page snapshot into a LookupOutcome.

    Classification:
    - NotFound when both anchor fields are NOT_AVAILABLE and the page has no
      results marker
    - Found otherwise, with whatever fields resolved (partial data is still a
      success, the portal omits fields inconsistently)
    - Failed(ExtractionFailed) when inspecting the page raises

    The extractor holds no per-page state, so one instance can be shared and
    extracting the same snapshot twice gives identical results.
    """

    def __init__(
        self,
        labels: dict[str, str] | None = None,
        member_matchers: list[TableMatcher] | None = None,
        results_marker: str = RESULTS_MARKER,
    ):
        """Initialize extractor.

        Args:
            labels: Field name -> visible label (defaults to FIELD_LABELS)
            member_matchers: Member table matchers in priority order
            results_marker: Text confirming a results section is present
        """
        self.labels = labels or FIELD_LABELS
        self.member_matchers = member_matchers
        self.results_marker = results_marker

    def extract(self, html: str) -> LookupOutcome:
        """Extract a household record from a results page snapshot.

        Args:
            html: Full page HTML

        Returns:
            Found, NotFound or Failed
        """
        try:
            soup = parse_html(html)
            return self._classify(soup)
        except Exception as e:
            logger.error(f"Results page inspection failed: {e}")
            return Failed(ExtractionFailed(f"Unrecognised results page: {e}"))

    def _classify(self, soup: BeautifulSoup) -> LookupOutcome:
        fields = resolve_fields(soup, self.labels)

        anchors_missing = all(
            fields.get(name, NOT_AVAILABLE) == NOT_AVAILABLE for name in ANCHOR_FIELDS
        )
        if anchors_missing and not self.has_results_marker(soup):
            logger.info("No anchor fields and no results marker - record not found")
            return NotFound(NOT_FOUND_REASON)

        record = HouseholdRecord(
            **{name: value for name, value in fields.items() if name in FIELD_LABELS},
            members=extract_members(soup, self.member_matchers),
        )

        missing = record.missing_fields()
        if missing:
            logger.info(f"Record found with missing fields: {', '.join(missing)}")
        else:
            logger.info("Record found with all fields")

        return Found(record)

    def has_results_marker(self, soup: BeautifulSoup) -> bool:
        """Whether the page text confirms a results section was rendered."""
        body = soup.body or soup
        return self.results_marker in body.get_text()
