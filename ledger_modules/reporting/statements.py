"""
Pure report transformation functions.

These functions turn trial balance rows into report value objects.
ZERO I/O. ZERO side effects.

All monetary values are Decimal. All inputs/outputs are frozen dataclasses.

Functions in this module follow the ledger_kernel/domain/ purity convention:
- No database access
- No clock access (the service passes a timestamped ReportMetadata)
- Deterministic: same inputs always produce same outputs
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from enum import Enum

from ledger_kernel.domain.dtos import AccountType, TrialBalanceRow
from ledger_modules.reporting.config import ReportingConfig
from ledger_modules.reporting.models import (
    AccountTypeSummary,
    ReportMetadata,
    TrialBalanceLineItem,
    TrialBalanceReport,
)

ZERO = Decimal("0")


def _quantum(precision: int) -> Decimal:
    return Decimal(1).scaleb(-precision)


def to_line_item(row: TrialBalanceRow) -> TrialBalanceLineItem:
    return TrialBalanceLineItem(
        account_id=row.account_id,
        account_code=row.account_code,
        account_name=row.account_name,
        account_type=row.account_type.value,
        debit_balance=row.debit_balance,
        credit_balance=row.credit_balance,
        net_balance=row.net_balance,
    )


# =========================================================================
# 1. TRIAL BALANCE
# =========================================================================


def build_trial_balance_report(
    rows: Iterable[TrialBalanceRow],
    config: ReportingConfig,
    metadata: ReportMetadata,
) -> TrialBalanceReport:
    """
    Build a trial balance report from computed rows.

    Zero rows are dropped unless config.include_zero_balances is set.
    Lines are ordered by account code.  The report is balanced when the
    debit and credit columns agree at the configured display precision.
    """
    kept = [
        row for row in rows
        if config.include_zero_balances or not row.is_zero
    ]
    items = tuple(
        to_line_item(row)
        for row in sorted(kept, key=lambda r: r.account_code)
    )

    total_debits = sum((item.debit_balance for item in items), ZERO)
    total_credits = sum((item.credit_balance for item in items), ZERO)

    quantum = _quantum(config.display_precision)
    is_balanced = total_debits.quantize(quantum) == total_credits.quantize(quantum)

    return TrialBalanceReport(
        metadata=metadata,
        lines=items,
        total_debits=total_debits,
        total_credits=total_credits,
        is_balanced=is_balanced,
    )


# =========================================================================
# 2. ACCOUNT TYPE SUMMARY
# =========================================================================


def summarize_by_account_type(rows: Iterable[TrialBalanceRow]) -> AccountTypeSummary:
    """Sum natural-side balances per account type."""
    totals = {account_type: ZERO for account_type in AccountType}
    for row in rows:
        totals[row.account_type] += row.net_balance

    return AccountTypeSummary(
        total_assets=totals[AccountType.ASSET],
        total_liabilities=totals[AccountType.LIABILITY],
        total_equity=totals[AccountType.EQUITY],
        total_revenue=totals[AccountType.REVENUE],
        total_expenses=totals[AccountType.EXPENSE],
    )


# =========================================================================
# Rendering
# =========================================================================


def render_to_dict(obj: object) -> dict | list | str | int | float | bool | None:
    """
    Convert any report dataclass to a plain dict for JSON serialization.

    Handles:
    - Decimal -> str (preserving precision)
    - date -> ISO format string
    - Enum -> .value
    - Nested frozen dataclasses -> nested dicts
    - Tuples -> lists
    - None preserved
    """
    if obj is None:
        return None
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (list, tuple)):
        return [render_to_dict(item) for item in obj]
    if isinstance(obj, dict):
        return {str(k): render_to_dict(v) for k, v in obj.items()}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        rendered = {
            f.name: render_to_dict(getattr(obj, f.name))
            for f in dataclasses.fields(obj)
        }
        if isinstance(obj, AccountTypeSummary):
            rendered["net_income"] = render_to_dict(obj.net_income)
        return rendered
    if isinstance(obj, (str, int, float, bool)):
        return obj
    return str(obj)
