"""Shared fixtures for fsclookup unit tests.

Results page fixtures mirror the portal's ASP.NET layout: a layout table
wrapping a details table (label cell, value cell pairs) and a members table.
"""

import pytest

from fsclookup.config.settings import Config
from fsclookup.services.portal.errors import NavigationError

RESULTS_PAGE = """
<html>
<head><title>Ration Card Details</title></head>
<body>
<form id="form1">
<table id="tblLayout" width="100%">
  <tr><td>
    <table class="details">
      <tr><td colspan="4">RATION CARD DETAILS</td></tr>
      <tr>
        <td>FSC Reference No</td><td> FSC0000001234 </td>
        <td>New Ration Card No</td><td>TAP361500123456</td>
      </tr>
      <tr>
        <td>Card Type</td><td>FSC</td>
        <td>Application Status</td><td>Approved</td>
      </tr>
      <tr>
        <td>Head of the Family</td><td>A. Ramu</td>
        <td>District</td><td>Hyderabad</td>
      </tr>
      <tr><td>Gas Connection</td><td>Yes</td></tr>
    </table>
    <table class="members">
      <tr><th colspan="3">RATION CARD MEMBER DETAILS</th></tr>
      <tr><th>S No</th><th>Member Name</th><th>Relation</th></tr>
      <tr><td>1</td><td>A. Ramu</td><td>SELF</td></tr>
      <tr><td>2</td><td>B. Lakshmi</td><td>WIFE</td></tr>
    </table>
  </td></tr>
</table>
</form>
</body>
</html>
"""

NOT_FOUND_PAGE = """
<html>
<body>
<form id="form1">
  <table>
    <tr><td>Enter FSC Ref No</td><td><input type="text" name="txtFSCNo"/></td></tr>
    <tr><td colspan="2"><input type="submit" value="Search"/></td></tr>
  </table>
  <span id="lblMsg">No Records Found</span>
</form>
</body>
</html>
"""


class FakeSession:
    """Stand-in for PortalSession that records the steps it was driven through.

    Args:
        html: Snapshot returned by page_content()
        fail_at: Step name that raises ``error``
        error: Exception raised at ``fail_at``
        release_error: Exception raised by release()
    """

    def __init__(
        self,
        html: str = RESULTS_PAGE,
        fail_at: str | None = None,
        error: Exception | None = None,
        release_error: Exception | None = None,
    ):
        self.html = html
        self.fail_at = fail_at
        self.error = error or NavigationError("boom")
        self.release_error = release_error
        self.steps: list[str] = []
        self.submitted: str | None = None
        self.release_count = 0

    def _step(self, name: str) -> None:
        self.steps.append(name)
        if self.fail_at == name:
            raise self.error

    async def acquire(self) -> None:
        self._step("acquire")

    async def navigate_to_search_form(self) -> None:
        self._step("navigate_to_search_form")

    async def submit_query(self, identifier: str) -> None:
        self.submitted = identifier
        self._step("submit_query")

    async def await_results(self) -> None:
        self._step("await_results")

    async def page_content(self) -> str:
        self._step("page_content")
        return self.html

    async def release(self) -> None:
        self.release_count += 1
        if self.release_error:
            raise self.release_error


@pytest.fixture
def results_page() -> str:
    """Results page for FSC0000001234 with two members."""
    return RESULTS_PAGE


@pytest.fixture
def not_found_page() -> str:
    """Search form re-rendered with a 'no records' message."""
    return NOT_FOUND_PAGE


@pytest.fixture
def fake_session_cls() -> type[FakeSession]:
    """FakeSession class, for tests that build their own sessions."""
    return FakeSession


@pytest.fixture
def make_config():
    """Build a Config that ignores .env and waits as little as possible."""

    def _make(**overrides) -> Config:
        values = {
            "settle_delay_seconds": 0.0,
            "settle_poll_attempts": 2,
            "settle_poll_interval_seconds": 0.0,
            "session_queue_timeout_seconds": 5.0,
        }
        values.update(overrides)
        return Config(_env_file=None, **values)

    return _make
