"""
Ledger Reporting Module (``ledger_modules.reporting``).

Responsibility
--------------
Read-only module that turns the ledger into reports: the trial balance
(debit and credit columns per account, with totals) and a summary of
natural-side balances per account type with net income.

Architecture position
---------------------
**Modules layer** -- pure builders in ``statements.py`` plus a thin
``ReportingService`` that feeds them from kernel selectors.

Invariants enforced
-------------------
* No journal entries are created by this module.
* Every figure derives from stored journal lines (no stored balances).
"""

from ledger_modules.reporting.config import ReportingConfig
from ledger_modules.reporting.models import (
    AccountTypeSummary,
    ReportMetadata,
    ReportType,
    TrialBalanceLineItem,
    TrialBalanceReport,
)
from ledger_modules.reporting.service import ReportingService
from ledger_modules.reporting.statements import (
    build_trial_balance_report,
    render_to_dict,
    summarize_by_account_type,
)

__all__ = [
    "AccountTypeSummary",
    "ReportMetadata",
    "ReportType",
    "ReportingConfig",
    "ReportingService",
    "TrialBalanceLineItem",
    "TrialBalanceReport",
    "build_trial_balance_report",
    "render_to_dict",
    "summarize_by_account_type",
]
