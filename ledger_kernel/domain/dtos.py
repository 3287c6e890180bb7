"""
DTOs -- Pure domain data transfer objects.

Responsibility:
    Defines the immutable records that flow between the ledger layers:
    AccountInfo (chart of accounts row), LineSpec (one debit/credit posting),
    ValidatedEntry (validator output), TrialBalanceRow (derived report row),
    JournalEntryRecord (persisted entry as seen by callers) and
    ActivityRecord (activity log row).

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Free of ORM dependencies, database access, and external services.
    from_model() class methods exist as boundary converters but are only
    invoked from the service and selector layers (never from domain logic).

Invariants enforced:
    - Monetary amounts are Decimal, never float (floats are converted through
      their string form so 0.1 stays 0.1).
    - LineSpec amounts are rounded half-up to whole cents, the scale the
      journal_lines columns store, so a validated entry reads back unchanged.
    - Line amounts are non-negative; the side is given by the field used.
    - Records handed to callers are frozen, so the store's rows can never be
      mutated through a returned value.

Failure modes:
    - ValueError on a LineSpec with a negative or non-numeric amount.
    - ValueError on an AccountInfo with an empty code or name.
    - ValueError on an unknown account type string.

Data flow:
    form input -> LineSpec -> ValidatedEntry -> JournalEntryRecord
    AccountInfo + LineSpec[] -> TrialBalanceRow[]
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ledger_kernel.models.account import Account as AccountModel
    from ledger_kernel.models.activity import ActivityLogEntry as ActivityModel
    from ledger_kernel.models.journal import JournalEntry as JournalEntryModel
    from ledger_kernel.models.journal import JournalLine as JournalLineModel

ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_amount(value: Any, name: str = "amount") -> Decimal:
    """
    Normalise a currency amount to Decimal.

    None and blank strings mean "no amount" (zero), matching how an empty
    debit or credit cell arrives from an entry form.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, bool):
        raise ValueError(f"{name} must be numeric, not bool")
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        if not value.strip():
            return ZERO
        try:
            amount = Decimal(value.strip())
        except InvalidOperation:
            raise ValueError(f"{name} is not a valid amount: {value!r}") from None
    else:
        raise ValueError(f"{name} must be numeric, not {type(value).__name__}")

    if not amount.is_finite():
        raise ValueError(f"{name} must be finite, got {amount}")
    return amount


def to_cents(amount: Decimal) -> Decimal:
    """Round half-up to two decimal places."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


class NormalBalance(str, Enum):
    """Side on which an account type naturally accumulates value."""

    DEBIT = "debit"
    CREDIT = "credit"


class AccountType(str, Enum):
    """
    Types of accounts in the chart of accounts.

    Contract:
        The type fixes the natural balance side:
        - ASSET, EXPENSE: debit increases the balance
        - LIABILITY, EQUITY, REVENUE: credit increases the balance

    Parsing is case-insensitive, so "Asset" (as shown in the UI) and
    "asset" are the same member.
    """

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"

    @classmethod
    def _missing_(cls, value: object) -> AccountType | None:
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        return None

    @property
    def normal_balance(self) -> NormalBalance:
        if self in (AccountType.ASSET, AccountType.EXPENSE):
            return NormalBalance.DEBIT
        return NormalBalance.CREDIT

    @property
    def is_debit_normal(self) -> bool:
        return self.normal_balance == NormalBalance.DEBIT


@dataclass(frozen=True)
class AccountInfo:
    """
    Snapshot of a chart of accounts row.

    This is the bridge between the Account ORM model and the pure
    computations. Selectors convert Account rows to AccountInfo before
    handing them to anything in the domain layer.
    """

    account_id: int
    code: str
    name: str
    account_type: AccountType

    def __post_init__(self) -> None:
        if not isinstance(self.account_type, AccountType):
            object.__setattr__(self, "account_type", AccountType(self.account_type))
        if not self.code or not self.code.strip():
            raise ValueError("Account code is required")
        if not self.name or not self.name.strip():
            raise ValueError("Account name is required")

    @property
    def normal_balance(self) -> NormalBalance:
        return self.account_type.normal_balance

    @classmethod
    def from_model(cls, model: AccountModel) -> AccountInfo:
        return cls(
            account_id=model.id,
            code=model.code,
            name=model.name,
            account_type=AccountType(model.account_type),
        )


@dataclass(frozen=True)
class LineSpec:
    """
    One debit or credit posting to an account.

    Contract:
        account_id may be None while a line is still being edited; such
        lines are dropped by the validator. debit and credit are both
        Decimal and non-negative.

    Guarantees:
        - Amounts are Decimal after construction, whatever was passed in.
        - Amounts carry exactly two decimal places.
        - Negative amounts are rejected here (ValueError).

    Non-goals:
        - Does NOT reject a line carrying both amounts. That rule is the
          validator's to report, with the offending values.
        - Does NOT check that account_id exists.
    """

    account_id: int | None
    debit: Decimal = ZERO
    credit: Decimal = ZERO
    entry_id: int | None = None

    def __post_init__(self) -> None:
        debit = to_cents(to_amount(self.debit, "debit"))
        credit = to_cents(to_amount(self.credit, "credit"))
        if debit < ZERO or credit < ZERO:
            raise ValueError("Line amounts must be non-negative")
        object.__setattr__(self, "debit", debit)
        object.__setattr__(self, "credit", credit)
        if self.account_id in ("", 0):
            object.__setattr__(self, "account_id", None)
        elif isinstance(self.account_id, str):
            object.__setattr__(self, "account_id", int(self.account_id))

    @property
    def is_substantive(self) -> bool:
        """True when the line names an account and carries an amount."""
        return self.account_id is not None and (self.debit > ZERO or self.credit > ZERO)

    @property
    def has_both_sides(self) -> bool:
        return self.debit > ZERO and self.credit > ZERO

    def with_entry(self, entry_id: int) -> LineSpec:
        return LineSpec(
            account_id=self.account_id,
            debit=self.debit,
            credit=self.credit,
            entry_id=entry_id,
        )

    @classmethod
    def debit_line(cls, account_id: int, amount: Decimal | int | str) -> LineSpec:
        return cls(account_id=account_id, debit=amount)

    @classmethod
    def credit_line(cls, account_id: int, amount: Decimal | int | str) -> LineSpec:
        return cls(account_id=account_id, credit=amount)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LineSpec:
        """
        Build a line from form-style input.

        Accepts either snake_case or camelCase keys (account_id/accountId,
        entry_id/entryId/je_id).
        """
        account_id = data.get("account_id", data.get("accountId"))
        entry_id = data.get("entry_id", data.get("entryId", data.get("je_id")))
        return cls(
            account_id=account_id,
            debit=data.get("debit"),
            credit=data.get("credit"),
            entry_id=entry_id,
        )

    @classmethod
    def from_model(cls, model: JournalLineModel) -> LineSpec:
        return cls(
            account_id=model.account_id,
            debit=model.debit,
            credit=model.credit,
            entry_id=model.journal_entry_id,
        )


def coerce_lines(lines: Any) -> list[LineSpec]:
    """Accept LineSpec objects or form-style mappings."""
    return [
        line if isinstance(line, LineSpec) else LineSpec.from_dict(line)
        for line in lines
    ]


@dataclass(frozen=True)
class ValidatedEntry:
    """
    Result of a successful entry validation.

    Contract:
        lines holds only the substantive lines, in submission order.
        balanced is always True; a failed validation raises instead of
        returning.
    """

    lines: tuple[LineSpec, ...]
    total_debits: Decimal
    total_credits: Decimal
    balanced: bool = True


@dataclass(frozen=True)
class TrialBalanceRow:
    """A single row of a trial balance: one account, netted to one side."""

    account_id: int
    account_code: str
    account_name: str
    account_type: AccountType
    debit_balance: Decimal
    credit_balance: Decimal

    @property
    def net_balance(self) -> Decimal:
        """Balance on the account's natural side (negative when contra)."""
        if self.account_type.is_debit_normal:
            return self.debit_balance - self.credit_balance
        return self.credit_balance - self.debit_balance

    @property
    def is_zero(self) -> bool:
        return self.debit_balance == ZERO and self.credit_balance == ZERO


@dataclass(frozen=True)
class JournalEntryRecord:
    """
    A persisted journal entry with its lines, as handed to callers.

    Contract:
        A detached, immutable copy. Changing the store requires going
        through JournalService; nothing here aliases an ORM row.
    """

    entry_id: int
    number: str
    entry_date: date
    description: str | None
    lines: tuple[LineSpec, ...] = ()

    @property
    def total_debits(self) -> Decimal:
        return sum((line.debit for line in self.lines), ZERO)

    @property
    def total_credits(self) -> Decimal:
        return sum((line.credit for line in self.lines), ZERO)

    @classmethod
    def from_model(cls, model: JournalEntryModel) -> JournalEntryRecord:
        return cls(
            entry_id=model.id,
            number=model.number,
            entry_date=model.entry_date,
            description=model.description,
            lines=tuple(LineSpec.from_model(line) for line in model.lines),
        )


@dataclass(frozen=True)
class ActivityRecord:
    """One activity log row as handed to callers."""

    activity_id: int
    occurred_at: datetime
    user_id: str
    username: str
    action: str
    entity_type: str
    description: str
    entity_id: str | None = None
    entity_name: str | None = None
    details: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    ip_address: str | None = None
    user_agent: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.details, MappingProxyType):
            object.__setattr__(self, "details", MappingProxyType(dict(self.details or {})))

    @classmethod
    def from_model(cls, model: ActivityModel) -> ActivityRecord:
        return cls(
            activity_id=model.id,
            occurred_at=model.occurred_at,
            user_id=model.user_id,
            username=model.username,
            action=model.action,
            entity_type=model.entity_type,
            description=model.description,
            entity_id=model.entity_id,
            entity_name=model.entity_name,
            details=dict(model.details or {}),
            ip_address=model.ip_address,
            user_agent=model.user_agent,
        )
