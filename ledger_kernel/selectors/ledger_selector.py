"""
Module: ledger_kernel.selectors.ledger_selector
Responsibility: Read-only ledger queries -- all persisted lines, the trial
    balance, grand totals and single-account balances.  The ledger is a
    derived view over JournalLines; there are no stored balances anywhere.
Architecture position: Kernel > Selectors.  Feeds the pure
    compute_trial_balance() in domain/ledger_validator.py.

Invariants enforced:
    - Balances derive from journal_lines at query time.
    - total_debits_credits() returns equal totals whenever every stored
      entry went through JournalService (each entry balances within the
      tolerance, so the grand totals differ by at most the sum of those
      tolerances).

Failure modes:
    - AccountNotFoundError from account_balance() for an unknown account.
    - Empty results and zero totals when no entries exist.
"""

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import func, select

from ledger_kernel.domain.dtos import (
    AccountInfo,
    AccountType,
    LineSpec,
    TrialBalanceRow,
    to_amount,
)
from ledger_kernel.domain.ledger_validator import compute_trial_balance
from ledger_kernel.models.journal import JournalEntry, JournalLine
from ledger_kernel.selectors.account_selector import AccountSelector
from ledger_kernel.selectors.base import BaseSelector


@dataclass(frozen=True)
class AccountBalance:
    """Balance for a single account."""

    account: AccountInfo
    debit_total: Decimal
    credit_total: Decimal
    line_count: int

    @property
    def balance(self) -> Decimal:
        """Net balance on the account's natural side."""
        if self.account.account_type.is_debit_normal:
            return self.debit_total - self.credit_total
        return self.credit_total - self.debit_total


class LedgerSelector(BaseSelector[JournalLine]):
    """
    Selector for ledger queries.

    Non-goals:
        - No period or as-of-date filtering; the trial balance covers every
          stored entry.
    """

    def lines(self, account_id: int | None = None) -> list[LineSpec]:
        """All persisted lines in posting order, optionally for one account."""
        stmt = (
            select(JournalLine)
            .join(JournalEntry, JournalLine.journal_entry_id == JournalEntry.id)
            .order_by(JournalEntry.seq, JournalLine.line_seq)
        )
        if account_id is not None:
            stmt = stmt.where(JournalLine.account_id == account_id)
        return [
            LineSpec.from_model(line)
            for line in self.session.execute(stmt).scalars().all()
        ]

    def trial_balance(
        self,
        account_type: AccountType | str | None = None,
    ) -> list[TrialBalanceRow]:
        """
        One row per account (ordered by code), netted to its natural side.

        Accounts without lines appear with zero balances.
        """
        accounts = AccountSelector(self.session).list_accounts(account_type)
        return compute_trial_balance(accounts, self.lines())

    def total_debits_credits(self) -> tuple[Decimal, Decimal]:
        """Grand (total_debits, total_credits) over every stored line."""
        row = self.session.execute(
            select(
                func.coalesce(func.sum(JournalLine.debit), 0).label("debits"),
                func.coalesce(func.sum(JournalLine.credit), 0).label("credits"),
            )
        ).one()
        return to_amount(row.debits), to_amount(row.credits)

    def account_balance(self, account_id: int) -> AccountBalance:
        """
        Raises:
            AccountNotFoundError: unknown account_id.
        """
        account = AccountSelector(self.session).get(account_id)
        row = self.session.execute(
            select(
                func.coalesce(func.sum(JournalLine.debit), 0).label("debits"),
                func.coalesce(func.sum(JournalLine.credit), 0).label("credits"),
                func.count(JournalLine.id).label("line_count"),
            ).where(JournalLine.account_id == account_id)
        ).one()
        return AccountBalance(
            account=account,
            debit_total=to_amount(row.debits),
            credit_total=to_amount(row.credits),
            line_count=row.line_count,
        )

    def referenced_account_ids(self) -> set[int]:
        """Ids of accounts that carry at least one journal line."""
        return set(
            self.session.execute(
                select(JournalLine.account_id).distinct()
            ).scalars()
        )

