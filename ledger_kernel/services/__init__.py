"""Write-side services for the ledger kernel."""

from ledger_kernel.services.account_service import AccountService
from ledger_kernel.services.activity_log_service import (
    ActivityLogService,
    ActivitySummary,
)
from ledger_kernel.services.base import BaseService
from ledger_kernel.services.journal_service import JournalService
from ledger_kernel.services.sequence_service import (
    SequenceService,
    format_entry_number,
)

__all__ = [
    "AccountService",
    "ActivityLogService",
    "ActivitySummary",
    "BaseService",
    "JournalService",
    "SequenceService",
    "format_entry_number",
]
