"""
Lookup service: one FSC number in, one LookupOutcome out.

Composes a fresh PortalSession with the RecordExtractor for every request.
Browser sessions are capped by a semaphore; requests beyond the cap wait for
a free slot up to the configured queue timeout. No step is retried.
"""

import asyncio
from collections import Counter
from typing import Any, Callable

from loguru import logger

from fsclookup.config.settings import Config, get_config
from fsclookup.models.household import Failed, Found, LookupOutcome, NotFound

from .errors import CapacityError, PortalError, ValidationError
from .extractor import RecordExtractor
from .session import PortalSession


class LookupService:
    """Runs portal lookups with a bounded number of browser sessions."""

    def __init__(
        self,
        config: Config | None = None,
        session_factory: Callable[[], PortalSession] | None = None,
        extractor: RecordExtractor | None = None,
    ):
        """Initialize service.

        Args:
            config: Settings to use (defaults to the global configuration)
            session_factory: Creates a new session per lookup (defaults to
                            PortalSession with the same config)
            extractor: Record extractor (defaults to RecordExtractor())
        """
        self.config = config or get_config()
        self._session_factory = session_factory or (lambda: PortalSession(self.config))
        self.extractor = extractor or RecordExtractor()
        self._slots = asyncio.Semaphore(self.config.max_concurrent_sessions)
        self._active = 0
        self._waiting = 0
        self._outcomes: Counter[str] = Counter()

    async def lookup(self, identifier: str | None) -> LookupOutcome:
        """Look up the household record for an FSC reference number.

        Args:
            identifier: FSC reference number

        Returns:
            Found, NotFound or Failed

        Raises:
            ValidationError: If identifier is missing or blank (no session is
                started)
        """
        fsc_no = (identifier or "").strip()
        if not fsc_no:
            raise ValidationError("FSC number missing")

        self._waiting += 1
        try:
            has_slot = await self._take_slot()
        finally:
            self._waiting -= 1

        if not has_slot:
            logger.warning(
                f"No session slot free after {self.config.session_queue_timeout_seconds}s "
                f"for {fsc_no}"
            )
            return self._record(
                Failed(CapacityError("All browser sessions busy")), fsc_no
            )

        self._active += 1
        try:
            return self._record(await self._run_session(fsc_no), fsc_no)
        finally:
            self._active -= 1
            self._slots.release()

    async def _take_slot(self) -> bool:
        """Take a session slot, waiting at most the queue timeout.

        A free slot is taken without waiting, so a zero timeout still admits
        lookups while the pool has room. A waiter that times out is cancelled
        before it can hold a slot.

        Returns:
            True if a slot is now held, False on timeout
        """
        if not self._slots.locked():
            await self._slots.acquire()
            return True

        waiter = asyncio.ensure_future(self._slots.acquire())
        try:
            done, _ = await asyncio.wait(
                {waiter}, timeout=self.config.session_queue_timeout_seconds
            )
        except BaseException:
            if waiter.done() and not waiter.cancelled():
                self._slots.release()
            else:
                waiter.cancel()
            raise

        if waiter not in done:
            waiter.cancel()
            return False
        return True

    async def _run_session(self, fsc_no: str) -> LookupOutcome:
        """Drive one session to the results page and extract it.

        release() runs exactly once, whatever happens.
        """
        session = self._session_factory()
        try:
            await session.acquire()
            await session.navigate_to_search_form()
            await session.submit_query(fsc_no)
            await session.await_results()
            html = await session.page_content()
            return self.extractor.extract(html)

        except PortalError as e:
            logger.error(f"Lookup for {fsc_no} failed: {type(e).__name__}: {e}")
            return Failed(e)

        except Exception as e:
            logger.exception(f"Unexpected error during lookup for {fsc_no}")
            return Failed(PortalError(f"Unexpected error: {e}"))

        finally:
            try:
                await session.release()
            except Exception as e:
                logger.warning(f"Session teardown failed for {fsc_no}: {e}")

    def _record(self, outcome: LookupOutcome, fsc_no: str) -> LookupOutcome:
        if isinstance(outcome, Found):
            self._outcomes["found"] += 1
            logger.info(f"Lookup {fsc_no}: found")
        elif isinstance(outcome, NotFound):
            self._outcomes["not_found"] += 1
            logger.info(f"Lookup {fsc_no}: not found")
        else:
            self._outcomes["failed"] += 1
            logger.info(f"Lookup {fsc_no}: failed ({outcome.error_type})")
        return outcome

    def get_stats(self) -> dict[str, Any]:
        """Get session pool and outcome counters.

        Returns:
            Dictionary with active/waiting session counts and outcome totals
        """
        return {
            "max_sessions": self.config.max_concurrent_sessions,
            "active_sessions": self._active,
            "waiting_requests": self._waiting,
            "outcomes": {
                "found": self._outcomes["found"],
                "not_found": self._outcomes["not_found"],
                "failed": self._outcomes["failed"],
            },
        }


# Global service instance
_lookup_service: LookupService | None = None


def get_lookup_service() -> LookupService:
    """Get or create the global lookup service instance."""
    global _lookup_service
    if _lookup_service is None:
        _lookup_service = LookupService()
    return _lookup_service
