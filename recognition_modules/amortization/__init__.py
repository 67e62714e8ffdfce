"""
Amortization Module.

Schedules that recognize a principal amount over a fixed number of periods,
the entries generated from them, and the posting lifecycle of those entries.
"""

from recognition_modules.amortization.entry_service import AmortizationEntryService
from recognition_modules.amortization.ledger import (
    InMemoryLedger,
    LedgerPoster,
    LedgerReceipt,
    PostingRequest,
)
from recognition_modules.amortization.models import (
    AmortizationEntry,
    AmortizationSchedule,
    BatchPostingResult,
    EntryStatus,
    PostingFailure,
    ScheduleStatus,
    ScheduleType,
)
from recognition_modules.amortization.schedule_service import AmortizationScheduleService

__all__ = [
    "AmortizationEntry",
    "AmortizationEntryService",
    "AmortizationSchedule",
    "AmortizationScheduleService",
    "BatchPostingResult",
    "EntryStatus",
    "InMemoryLedger",
    "LedgerPoster",
    "LedgerReceipt",
    "PostingFailure",
    "PostingRequest",
    "ScheduleStatus",
    "ScheduleType",
]
