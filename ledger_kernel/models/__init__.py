"""SQLAlchemy ORM models for the ledger kernel."""

from ledger_kernel.models.account import Account, AccountType, NormalBalance
from ledger_kernel.models.activity import ActivityLogEntry
from ledger_kernel.models.journal import JournalEntry, JournalLine
from ledger_kernel.models.sequence import SequenceCounter

__all__ = [
    "Account",
    "AccountType",
    "NormalBalance",
    "ActivityLogEntry",
    "JournalEntry",
    "JournalLine",
    "SequenceCounter",
]
