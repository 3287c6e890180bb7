"""
Module: ledger_kernel.models.journal
Responsibility: ORM persistence for journal entries and journal lines -- the
    single source of financial truth in this system.
Architecture position: Kernel > Models.  May import from db/base.py only.
    MUST NOT import from services/, selectors/, domain/, or outer layers.

Invariants enforced:
    - Entry number uniqueness (uq_journal_entry_number) and sequence
      uniqueness (uq_journal_entry_seq).  Numbers are allocated by
      SequenceService and never reused.
    - Line amounts are non-negative and a line never carries both a debit and
      a credit (ck_journal_line_* CHECK constraints).
    - Lines die with their entry (ON DELETE CASCADE plus ORM delete-orphan).

Failure modes:
    - IntegrityError on a duplicate number, a negative amount, a dual-amount
      line, or a line pointing at a missing account.

Audit relevance:
    JournalEntry and JournalLine rows are the authoritative financial record.
    The trial balance and every report derive from these rows.  Balance is
    checked by LedgerValidator before a row is ever written.
"""

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_kernel.db.base import AMOUNT, TrackedBase

if TYPE_CHECKING:
    from ledger_kernel.models.account import Account


class JournalEntry(TrackedBase):
    """
    Journal entry header: number, date and description.

    Contract:
        number is the display identifier (JE001, JE002, ...); seq is the
        counter value it was formatted from.  The full line set is owned by
        the entry and replaced as a whole on update.
    """

    __tablename__ = "journal_entries"

    __table_args__ = (
        UniqueConstraint("number", name="uq_journal_entry_number"),
        UniqueConstraint("seq", name="uq_journal_entry_seq"),
        Index("idx_journal_entry_date", "entry_date"),
    )

    number: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )

    seq: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    entry_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )

    # Description/memo for the entry
    description: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
    )

    lines: Mapped[list["JournalLine"]] = relationship(
        back_populates="entry",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="JournalLine.line_seq",
    )

    def __repr__(self) -> str:
        return f"<JournalEntry {self.number} {self.entry_date}>"

    @property
    def total_debits(self) -> Decimal:
        return sum((line.debit for line in self.lines), Decimal("0"))

    @property
    def total_credits(self) -> Decimal:
        return sum((line.credit for line in self.lines), Decimal("0"))


class JournalLine(TrackedBase):
    """
    Individual debit or credit line within a journal entry.

    Guarantees:
        - debit >= 0 and credit >= 0, never both positive.
        - line_seq preserves the order the lines were submitted in.
    """

    __tablename__ = "journal_lines"

    __table_args__ = (
        CheckConstraint("debit >= 0", name="ck_journal_line_debit_non_negative"),
        CheckConstraint("credit >= 0", name="ck_journal_line_credit_non_negative"),
        CheckConstraint(
            "NOT (debit > 0 AND credit > 0)",
            name="ck_journal_line_single_side",
        ),
        Index("idx_line_entry", "journal_entry_id"),
        Index("idx_line_account", "account_id"),
    )

    journal_entry_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("journal_entries.id", ondelete="CASCADE"),
        nullable=False,
    )

    account_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("accounts.id"),
        nullable=False,
    )

    debit: Mapped[Decimal] = mapped_column(
        AMOUNT,
        nullable=False,
        default=Decimal("0"),
    )

    credit: Mapped[Decimal] = mapped_column(
        AMOUNT,
        nullable=False,
        default=Decimal("0"),
    )

    line_seq: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    entry: Mapped["JournalEntry"] = relationship(
        back_populates="lines",
    )

    account: Mapped["Account"] = relationship()

    def __repr__(self) -> str:
        return f"<JournalLine acct={self.account_id} dr={self.debit} cr={self.credit}>"
