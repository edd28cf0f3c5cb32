"""Unit tests for LookupService."""

import asyncio

import pytest

from fsclookup.config.constants import NOT_FOUND_REASON
from fsclookup.models.household import Failed, Found, MemberEntry, NotFound
from fsclookup.services.portal.errors import (
    CapacityError,
    ExtractionFailed,
    FormError,
    LaunchError,
    NavigationError,
    PortalError,
    ValidationError,
)
from fsclookup.services.portal.extraction import TableMatcher
from fsclookup.services.portal.extractor import RecordExtractor
from fsclookup.services.portal.lookup import LookupService


class SessionFactory:
    """Hands out sessions and remembers them for assertions."""

    def __init__(self, make_session):
        self.make_session = make_session
        self.sessions = []

    def __call__(self):
        session = self.make_session()
        self.sessions.append(session)
        return session


class TestValidation:
    """Test identifier validation."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("identifier", ["", "   ", "\t\n", None])
    async def test_blank_identifier_never_starts_session(
        self, identifier, fake_session_cls, make_config
    ):
        """Test blank identifiers are rejected before any session exists."""
        factory = SessionFactory(fake_session_cls)
        service = LookupService(make_config(), session_factory=factory)

        with pytest.raises(ValidationError):
            await service.lookup(identifier)

        assert factory.sessions == []
        assert service.get_stats()["outcomes"] == {"found": 0, "not_found": 0, "failed": 0}

    @pytest.mark.asyncio
    async def test_identifier_is_trimmed(self, fake_session_cls, make_config):
        """Test surrounding whitespace is stripped before submission."""
        factory = SessionFactory(fake_session_cls)
        service = LookupService(make_config(), session_factory=factory)

        await service.lookup("  FSC0000001234 ")

        assert factory.sessions[0].submitted == "FSC0000001234"


class TestOutcomes:
    """Test outcome classification and session teardown."""

    @pytest.mark.asyncio
    async def test_found_scenario(self, fake_session_cls, make_config):
        """Test the full flow returns Found and releases the session once."""
        factory = SessionFactory(fake_session_cls)
        service = LookupService(make_config(), session_factory=factory)

        outcome = await service.lookup("FSC0000001234")

        assert isinstance(outcome, Found)
        assert outcome.record.head_of_family == "A. Ramu"
        assert outcome.record.fsc_reference_no == "FSC0000001234"
        assert outcome.record.members == [
            MemberEntry(sno="1", name="A. Ramu"),
            MemberEntry(sno="2", name="B. Lakshmi"),
        ]

        session = factory.sessions[0]
        assert session.steps == [
            "acquire",
            "navigate_to_search_form",
            "submit_query",
            "await_results",
            "page_content",
        ]
        assert session.release_count == 1

    @pytest.mark.asyncio
    async def test_not_found_scenario(self, fake_session_cls, not_found_page, make_config):
        """Test a portal page without a record returns NotFound."""
        factory = SessionFactory(lambda: fake_session_cls(html=not_found_page))
        service = LookupService(make_config(), session_factory=factory)

        outcome = await service.lookup("FSC9999999999")

        assert outcome == NotFound(NOT_FOUND_REASON)
        assert factory.sessions[0].release_count == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "step, error",
        [
            ("acquire", LaunchError("Executable doesn't exist")),
            ("navigate_to_search_form", NavigationError("Search form link not found")),
            ("submit_query", FormError("Search input never appeared")),
            ("await_results", NavigationError("Results page did not settle")),
        ],
    )
    async def test_step_failure_is_failed_and_released(
        self, step, error, fake_session_cls, make_config
    ):
        """Test every failing step yields Failed(cause) and one release."""
        factory = SessionFactory(lambda: fake_session_cls(fail_at=step, error=error))
        service = LookupService(make_config(), session_factory=factory)

        outcome = await service.lookup("FSC0000001234")

        assert isinstance(outcome, Failed)
        assert outcome.cause is error
        session = factory.sessions[0]
        assert session.steps[-1] == step
        assert session.release_count == 1

    @pytest.mark.asyncio
    async def test_missing_search_link_scenario(self, fake_session_cls, make_config):
        """Test landing page without the search link fails with NavigationError."""
        factory = SessionFactory(
            lambda: fake_session_cls(
                fail_at="navigate_to_search_form",
                error=NavigationError("Search form link not found"),
            )
        )
        service = LookupService(make_config(), session_factory=factory)

        outcome = await service.lookup("FSC0000001234")

        assert isinstance(outcome, Failed)
        assert isinstance(outcome.cause, NavigationError)
        assert outcome.error_type == "NavigationError"
        assert factory.sessions[0].release_count == 1

    @pytest.mark.asyncio
    async def test_extraction_failure_is_failed_and_released(self, fake_session_cls, make_config):
        """Test an unrecognised page yields Failed(ExtractionFailed)."""

        class BrokenMatcher(TableMatcher):
            def get_matcher_name(self) -> str:
                return "broken"

            def match(self, soup):
                raise ValueError("unexpected layout")

        factory = SessionFactory(fake_session_cls)
        service = LookupService(
            make_config(),
            session_factory=factory,
            extractor=RecordExtractor(member_matchers=[BrokenMatcher()]),
        )

        outcome = await service.lookup("FSC0000001234")

        assert isinstance(outcome, Failed)
        assert isinstance(outcome.cause, ExtractionFailed)
        assert factory.sessions[0].release_count == 1

    @pytest.mark.asyncio
    async def test_unexpected_error_is_wrapped(self, fake_session_cls, make_config):
        """Test non-portal exceptions still produce Failed and a release."""
        factory = SessionFactory(
            lambda: fake_session_cls(fail_at="await_results", error=RuntimeError("loop closed"))
        )
        service = LookupService(make_config(), session_factory=factory)

        outcome = await service.lookup("FSC0000001234")

        assert isinstance(outcome, Failed)
        assert type(outcome.cause) is PortalError
        assert factory.sessions[0].release_count == 1

    @pytest.mark.asyncio
    async def test_teardown_error_does_not_mask_outcome(self, fake_session_cls, make_config):
        """Test a failing release is logged and the Found outcome kept."""
        factory = SessionFactory(
            lambda: fake_session_cls(release_error=RuntimeError("browser already gone"))
        )
        service = LookupService(make_config(), session_factory=factory)

        outcome = await service.lookup("FSC0000001234")

        assert isinstance(outcome, Found)
        assert factory.sessions[0].release_count == 1

    @pytest.mark.asyncio
    async def test_each_lookup_gets_its_own_session(self, fake_session_cls, make_config):
        """Test sessions are never reused across lookups."""
        factory = SessionFactory(fake_session_cls)
        service = LookupService(make_config(), session_factory=factory)

        await service.lookup("FSC0000001234")
        await service.lookup("FSC0000001234")

        assert len(factory.sessions) == 2
        assert factory.sessions[0] is not factory.sessions[1]
        assert all(s.release_count == 1 for s in factory.sessions)


class TestSessionPool:
    """Test bounded session concurrency."""

    @pytest.mark.asyncio
    async def test_queue_timeout_returns_capacity_error(self, fake_session_cls, make_config):
        """Test a lookup waiting too long for a slot fails with CapacityError."""
        gate = asyncio.Event()

        class BlockingSession(fake_session_cls):
            async def await_results(self) -> None:
                self._step("await_results")
                await gate.wait()

        factory = SessionFactory(BlockingSession)
        service = LookupService(
            make_config(max_concurrent_sessions=1, session_queue_timeout_seconds=0.05),
            session_factory=factory,
        )

        first = asyncio.create_task(service.lookup("FSC0000000001"))
        for _ in range(100):
            if service.get_stats()["active_sessions"] == 1:
                break
            await asyncio.sleep(0.001)

        second = await service.lookup("FSC0000000002")

        assert isinstance(second, Failed)
        assert isinstance(second.cause, CapacityError)
        assert len(factory.sessions) == 1

        gate.set()
        assert isinstance(await first, Found)
        assert factory.sessions[0].release_count == 1

    @pytest.mark.asyncio
    async def test_zero_queue_timeout_admits_free_slot(self, fake_session_cls, make_config):
        """Test a zero queue timeout still runs lookups while a slot is free."""
        factory = SessionFactory(fake_session_cls)
        service = LookupService(
            make_config(session_queue_timeout_seconds=0.0), session_factory=factory
        )

        outcome = await service.lookup("FSC0000001234")

        assert isinstance(outcome, Found)
        assert factory.sessions[0].release_count == 1

    @pytest.mark.asyncio
    async def test_zero_queue_timeout_busy_pool_keeps_slots(
        self, fake_session_cls, make_config
    ):
        """Test a rejected lookup does not hold on to a slot."""
        gate = asyncio.Event()

        class BlockingSession(fake_session_cls):
            async def await_results(self) -> None:
                self._step("await_results")
                await gate.wait()

        factory = SessionFactory(BlockingSession)
        service = LookupService(
            make_config(max_concurrent_sessions=1, session_queue_timeout_seconds=0.0),
            session_factory=factory,
        )

        first = asyncio.create_task(service.lookup("FSC0000000001"))
        for _ in range(100):
            if service.get_stats()["active_sessions"] == 1:
                break
            await asyncio.sleep(0.001)

        rejected = await service.lookup("FSC0000000002")
        gate.set()
        await first

        assert isinstance(rejected, Failed)
        assert isinstance(rejected.cause, CapacityError)
        assert isinstance(await service.lookup("FSC0000000003"), Found)
        assert service.get_stats()["waiting_requests"] == 0

    @pytest.mark.asyncio
    async def test_waiting_lookup_runs_when_slot_frees(self, fake_session_cls, make_config):
        """Test queued lookups proceed once a session is released."""
        gate = asyncio.Event()
        peak = {"active": 0}

        class BlockingSession(fake_session_cls):
            async def await_results(self) -> None:
                self._step("await_results")
                peak["active"] = max(peak["active"], service.get_stats()["active_sessions"])
                await gate.wait()

        factory = SessionFactory(BlockingSession)
        service = LookupService(
            make_config(max_concurrent_sessions=1, session_queue_timeout_seconds=5.0),
            session_factory=factory,
        )

        tasks = [
            asyncio.create_task(service.lookup(f"FSC000000000{i}")) for i in range(3)
        ]
        await asyncio.sleep(0.01)
        gate.set()
        outcomes = await asyncio.gather(*tasks)

        assert all(isinstance(o, Found) for o in outcomes)
        assert peak["active"] == 1
        assert len(factory.sessions) == 3

    @pytest.mark.asyncio
    async def test_stats_count_outcomes(self, fake_session_cls, not_found_page, make_config):
        """Test stats reflect outcomes and an idle pool."""
        pages = iter([None, not_found_page])

        def make_session():
            html = next(pages)
            return fake_session_cls() if html is None else fake_session_cls(html=html)

        service = LookupService(make_config(), session_factory=make_session)

        await service.lookup("FSC0000001234")
        await service.lookup("FSC9999999999")

        stats = service.get_stats()
        assert stats["active_sessions"] == 0
        assert stats["waiting_requests"] == 0
        assert stats["outcomes"] == {"found": 1, "not_found": 1, "failed": 0}
