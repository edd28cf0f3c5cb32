"""Label-to-value resolution for the results table.

The results page lays out each field as a row with a label cell followed by
a value cell, e.g. ``<td>Head of the Family</td><td>A. Ramu</td>``. Rows
holding only a label (section headings) are skipped.
"""

from bs4 import BeautifulSoup
from loguru import logger

from fsclookup.config.constants import FIELD_LABELS, NOT_AVAILABLE

from .base import cell_text, row_cells


def resolve_label(soup: BeautifulSoup, label: str) -> str:
    """Return the value cell text following the first cell containing label.

    Args:
        soup: Parsed results page
        label: Visible label text (substring match)

    Returns:
        Trimmed value text, or NOT_AVAILABLE if no labelled cell with a
        value cell exists
    """
    for cell in soup.find_all("td"):
        if label not in cell_text(cell):
            continue

        row = cell.parent
        if row is None or len(row_cells(row)) <= 1:
            continue

        value_cell = cell.find_next_sibling()
        if value_cell is None:
            logger.debug(f"Label '{label}' has no value cell")
            return NOT_AVAILABLE

        return cell_text(value_cell)

    logger.debug(f"Label '{label}' not found")
    return NOT_AVAILABLE


def resolve_fields(
    soup: BeautifulSoup,
    labels: dict[str, str] | None = None,
) -> dict[str, str]:
    """Resolve every field label on the page.

    Args:
        soup: Parsed results page
        labels: Field name -> label mapping (defaults to FIELD_LABELS)

    Returns:
        Field name -> value or NOT_AVAILABLE
    """
    labels = labels or FIELD_LABELS
    return {name: resolve_label(soup, label) for name, label in labels.items()}
