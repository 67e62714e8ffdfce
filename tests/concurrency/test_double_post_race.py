"""
Double-post race tests.

Two threads post the same entry at the same moment, each with its own
session.  Exactly one must succeed; the other must observe
``EntryNotPendingError``.  The entry is recognized in the ledger once.
"""

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from threading import Barrier

import pytest

from recognition_kernel.exceptions import EntryNotPendingError, InvalidStateError
from recognition_modules.amortization.entry_service import AmortizationEntryService
from recognition_modules.amortization.models import EntryStatus, ScheduleStatus

pytestmark = pytest.mark.slow_locks


def _post_from_thread(session_factory, ledger, clock, entry_id, barrier):
    session = session_factory()
    try:
        service = AmortizationEntryService(session, ledger=ledger, clock=clock)
        barrier.wait()
        try:
            service.post_entry(entry_id)
            return "posted"
        except InvalidStateError as exc:
            return exc
    finally:
        session.close()


class TestConcurrentPostEntry:

    @pytest.mark.parametrize("run", range(3))
    def test_exactly_one_post_succeeds(
        self, run, make_schedule, entry_service, session, session_factory,
        ledger, deterministic_clock,
    ):
        schedule = make_schedule(term=3, principal=Decimal("300"))
        entry_id = entry_service.find_by_schedule_id(schedule.id)[0].id
        # end the setup transaction before the writers start
        session.commit()

        barrier = Barrier(2)
        with ThreadPoolExecutor(max_workers=2) as pool:
            futures = [
                pool.submit(
                    _post_from_thread, session_factory, ledger,
                    deterministic_clock, entry_id, barrier,
                )
                for _ in range(2)
            ]
            outcomes = [f.result(timeout=60) for f in futures]

        successes = [o for o in outcomes if o == "posted"]
        failures = [o for o in outcomes if isinstance(o, InvalidStateError)]
        assert len(successes) == 1
        assert len(failures) == 1
        assert isinstance(failures[0], EntryNotPendingError)
        assert len(ledger) == 1

        session.expire_all()
        assert entry_service.find_by_id(entry_id).status is EntryStatus.POSTED
        session.commit()

    def test_parallel_posts_of_different_entries_complete_schedule(
        self, make_schedule, entry_service, schedule_service, session,
        session_factory, ledger, deterministic_clock,
    ):
        schedule = make_schedule(term=4, principal=Decimal("400"))
        entry_ids = [e.id for e in entry_service.find_by_schedule_id(schedule.id)]
        session.commit()

        barrier = Barrier(len(entry_ids))
        with ThreadPoolExecutor(max_workers=len(entry_ids)) as pool:
            futures = [
                pool.submit(
                    _post_from_thread, session_factory, ledger,
                    deterministic_clock, entry_id, barrier,
                )
                for entry_id in entry_ids
            ]
            outcomes = [f.result(timeout=60) for f in futures]

        assert outcomes == ["posted"] * 4
        session.expire_all()
        done = schedule_service.find_by_id(schedule.id)
        assert done.status is ScheduleStatus.COMPLETED
        assert done.completed_periods == 4
        session.commit()
