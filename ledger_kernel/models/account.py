"""
Module: ledger_kernel.models.account
Responsibility: ORM persistence for the Chart of Accounts (COA) -- the target
    of every journal line.
Architecture position: Kernel > Models.  May import from db/base.py and the
    domain enums only.

Invariants enforced:
    - Account.code is unique (uq_account_code).
    - account_type is stored as its lowercase value; callers rebuild the
      enum with AccountType(model.account_type).

Failure modes:
    - IntegrityError on a duplicate code that slipped past AccountService.
    - IntegrityError when deleting an account still referenced by lines
      (foreign key from journal_lines.account_id).

Audit relevance:
    Changing account_type after posting would alter the meaning of historical
    journal lines, so AccountService refuses type changes on referenced
    accounts.
"""

from sqlalchemy import Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ledger_kernel.db.base import TrackedBase
from ledger_kernel.domain.dtos import AccountType, NormalBalance

__all__ = ["Account", "AccountType", "NormalBalance"]


class Account(TrackedBase):
    """
    Chart of Accounts entry.

    Contract:
        Account.code is unique.  account_type fixes the normal balance side,
        so no separate normal_balance column is stored.
    """

    __tablename__ = "accounts"

    __table_args__ = (
        UniqueConstraint("code", name="uq_account_code"),
        Index("idx_account_type", "account_type"),
    )

    # Human-readable account number, e.g. "1000"
    code: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    account_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Account {self.code}: {self.name}>"
