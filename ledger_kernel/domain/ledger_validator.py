"""
LedgerValidator -- Pure functional core for double-entry bookkeeping.

Responsibility:
    Decides whether a proposed set of journal lines may be posted, and
    derives trial-balance rows from posted lines. These are the only two
    computations in the ledger that carry a real invariant (debits equal
    credits); everything else in the kernel is storage around them.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    No database access, no clock, no logging. All inputs are arguments.

Invariants enforced:
    - An accepted entry has at least ``minimum_lines`` substantive lines.
    - No accepted line carries both a debit and a credit.
    - An accepted entry satisfies |total debits - total credits| <= tolerance.
    - Trial balance rows are netted to the account's natural side, so the
      row totals tie out whenever every posted entry was validated.

Failure modes:
    - InsufficientLinesError
    - LineHasBothDebitAndCreditError
    - UnbalancedEntryError
    All are raised synchronously and never logged here; the caller decides
    whether to re-prompt or abort.

Check order:
    line count, then dual-amount lines, then balance. A line carrying both
    amounts is reported as such even when it also unbalances the entry.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from decimal import Decimal
from typing import Any

from ledger_kernel.domain.dtos import (
    ZERO,
    AccountInfo,
    LineSpec,
    NormalBalance,
    TrialBalanceRow,
    ValidatedEntry,
    coerce_lines,
)
from ledger_kernel.exceptions import (
    InsufficientLinesError,
    LineHasBothDebitAndCreditError,
    UnbalancedEntryError,
)

DEFAULT_TOLERANCE = Decimal("0.01")
DEFAULT_MINIMUM_LINES = 2

LineInput = LineSpec | Mapping[str, Any]


def split_net_balance(
    total_debits: Decimal,
    total_credits: Decimal,
    normal_balance: NormalBalance,
) -> tuple[Decimal, Decimal]:
    """
    Net an account's debit and credit sums into (debit_balance, credit_balance).

    The net is computed on the natural side. A non-negative net lands on
    that side; a negative net lands on the opposite side as a positive
    amount. Exactly one of the two results is non-zero unless both are zero.
    """
    if normal_balance == NormalBalance.DEBIT:
        net = total_debits - total_credits
        if net >= ZERO:
            return net, ZERO
        return ZERO, -net

    net = total_credits - total_debits
    if net >= ZERO:
        return ZERO, net
    return -net, ZERO


class LedgerValidator:
    """
    Pure double-entry validator and trial-balance calculator.

    Contract:
        Stateless apart from its two settings. Every method is a pure
        function of its arguments; concurrent callers need no coordination.

    Guarantees:
        - validate_entry never mutates its input and never persists.
        - compute_trial_balance returns one row per account, in input order.

    Non-goals:
        - Does NOT check that account ids exist (the journal store does).
        - Does NOT sort or filter trial balance rows (reporting does).
    """

    def __init__(
        self,
        tolerance: Decimal = DEFAULT_TOLERANCE,
        minimum_lines: int = DEFAULT_MINIMUM_LINES,
    ):
        if tolerance < ZERO:
            raise ValueError("tolerance cannot be negative")
        if minimum_lines < 2:
            raise ValueError("a double-entry posting needs at least two lines")
        self.tolerance = tolerance
        self.minimum_lines = minimum_lines

    def validate_entry(self, lines: Iterable[LineInput]) -> ValidatedEntry:
        """
        Validate a proposed journal entry's lines.

        Preconditions:
            - lines are LineSpec instances or form-style mappings.

        Postconditions:
            - On success the returned entry holds only substantive lines and
              |total_debits - total_credits| <= tolerance.

        Raises:
            InsufficientLinesError: fewer than minimum_lines substantive lines.
            LineHasBothDebitAndCreditError: a line has debit > 0 and credit > 0.
            UnbalancedEntryError: totals differ by more than the tolerance.
        """
        valid_lines = tuple(line for line in coerce_lines(lines) if line.is_substantive)

        if len(valid_lines) < self.minimum_lines:
            raise InsufficientLinesError(len(valid_lines), self.minimum_lines)

        for index, line in enumerate(valid_lines):
            if line.has_both_sides:
                raise LineHasBothDebitAndCreditError(
                    index, line.account_id, line.debit, line.credit,
                )

        total_debits = sum((line.debit for line in valid_lines), ZERO)
        total_credits = sum((line.credit for line in valid_lines), ZERO)

        if abs(total_debits - total_credits) > self.tolerance:
            raise UnbalancedEntryError(total_debits, total_credits)

        return ValidatedEntry(
            lines=valid_lines,
            total_debits=total_debits,
            total_credits=total_credits,
            balanced=True,
        )

    def is_balanced(self, lines: Iterable[LineInput]) -> bool:
        """Running-total check used while an entry is still being edited."""
        line_list = coerce_lines(lines)
        total_debits = sum((line.debit for line in line_list), ZERO)
        total_credits = sum((line.credit for line in line_list), ZERO)
        return abs(total_debits - total_credits) <= self.tolerance

    def compute_trial_balance(
        self,
        accounts: Sequence[AccountInfo],
        all_lines: Iterable[LineInput],
    ) -> list[TrialBalanceRow]:
        """
        Derive one trial balance row per account from posted lines.

        Lines that reference an account missing from ``accounts`` are
        ignored. Accounts without lines still get a row, with both
        balances zero.
        """
        debit_sums: dict[int, Decimal] = {}
        credit_sums: dict[int, Decimal] = {}
        for line in coerce_lines(all_lines):
            if line.account_id is None:
                continue
            debit_sums[line.account_id] = debit_sums.get(line.account_id, ZERO) + line.debit
            credit_sums[line.account_id] = credit_sums.get(line.account_id, ZERO) + line.credit

        rows: list[TrialBalanceRow] = []
        for account in accounts:
            debit_balance, credit_balance = split_net_balance(
                debit_sums.get(account.account_id, ZERO),
                credit_sums.get(account.account_id, ZERO),
                account.normal_balance,
            )
            rows.append(
                TrialBalanceRow(
                    account_id=account.account_id,
                    account_code=account.code,
                    account_name=account.name,
                    account_type=account.account_type,
                    debit_balance=debit_balance,
                    credit_balance=credit_balance,
                )
            )
        return rows


_default_validator = LedgerValidator()


def validate_entry(lines: Iterable[LineInput]) -> ValidatedEntry:
    """Validate with the default tolerance (0.01) and minimum of two lines."""
    return _default_validator.validate_entry(lines)


def compute_trial_balance(
    accounts: Sequence[AccountInfo],
    all_lines: Iterable[LineInput],
) -> list[TrialBalanceRow]:
    """Compute a trial balance with the default validator."""
    return _default_validator.compute_trial_balance(accounts, all_lines)
