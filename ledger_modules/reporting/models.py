"""
Reporting Domain Models (``ledger_modules.reporting.models``).

Responsibility
--------------
Frozen dataclass value objects for report outputs: the trial balance
report and the account type summary.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Built by
``statements.py`` and returned by ``ReportingService``.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
* All monetary fields use ``Decimal`` -- NEVER ``float``.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class ReportType(str, Enum):
    """Types of ledger reports."""

    TRIAL_BALANCE = "trial_balance"
    ACCOUNT_TYPE_SUMMARY = "account_type_summary"


@dataclass(frozen=True)
class ReportMetadata:
    """Metadata attached to every report."""

    report_type: ReportType
    entity_name: str
    currency: str
    generated_at: str  # ISO format timestamp from injected clock


@dataclass(frozen=True)
class TrialBalanceLineItem:
    """A single line in the trial balance."""

    account_id: int
    account_code: str
    account_name: str
    account_type: str  # "asset", "liability", "equity", "revenue", "expense"
    debit_balance: Decimal
    credit_balance: Decimal
    net_balance: Decimal  # Natural-balance-adjusted


@dataclass(frozen=True)
class TrialBalanceReport:
    """Complete trial balance report."""

    metadata: ReportMetadata
    lines: tuple[TrialBalanceLineItem, ...]
    total_debits: Decimal
    total_credits: Decimal
    is_balanced: bool


@dataclass(frozen=True)
class AccountTypeSummary:
    """
    Natural-side totals per account type.

    With every entry balanced, assets equal liabilities plus equity plus
    net income.
    """

    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal
    total_revenue: Decimal
    total_expenses: Decimal

    @property
    def net_income(self) -> Decimal:
        return self.total_revenue - self.total_expenses

    @property
    def equation_difference(self) -> Decimal:
        """assets - (liabilities + equity + net income); zero when balanced."""
        return self.total_assets - (
            self.total_liabilities + self.total_equity + self.net_income
        )
