"""
Pure domain layer.

This module contains pure data transfer objects and domain logic
with NO dependencies on:
- ORM (SQLAlchemy)
- Database
- Time/clock (beyond the injectable Clock interface)
- I/O

All domain objects are immutable and deterministic.
"""

from ledger_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from ledger_kernel.domain.dtos import (
    AccountInfo,
    AccountType,
    ActivityRecord,
    JournalEntryRecord,
    LineSpec,
    NormalBalance,
    TrialBalanceRow,
    ValidatedEntry,
    coerce_lines,
    to_amount,
    to_cents,
)
from ledger_kernel.domain.ledger_validator import (
    DEFAULT_TOLERANCE,
    LedgerValidator,
    compute_trial_balance,
    split_net_balance,
    validate_entry,
)

__all__ = [
    # DTOs
    "AccountInfo",
    "AccountType",
    "ActivityRecord",
    "JournalEntryRecord",
    "LineSpec",
    "NormalBalance",
    "TrialBalanceRow",
    "ValidatedEntry",
    "coerce_lines",
    "to_amount",
    "to_cents",
    # Clock
    "Clock",
    "SystemClock",
    "DeterministicClock",
    # Validator
    "DEFAULT_TOLERANCE",
    "LedgerValidator",
    "compute_trial_balance",
    "split_net_balance",
    "validate_entry",
]
