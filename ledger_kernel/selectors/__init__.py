"""Read-only selectors for the ledger kernel."""

from ledger_kernel.selectors.account_selector import AccountSelector
from ledger_kernel.selectors.base import BaseSelector
from ledger_kernel.selectors.journal_selector import JournalSelector
from ledger_kernel.selectors.ledger_selector import AccountBalance, LedgerSelector

__all__ = [
    "AccountBalance",
    "AccountSelector",
    "BaseSelector",
    "JournalSelector",
    "LedgerSelector",
]
