"""
Module: ledger_kernel.selectors.journal_selector
Responsibility: Read-only queries over the Journal Entry Store -- single
    entry lookup, the newest-first listing with free-text search, date
    range queries and per-entry line retrieval.
Architecture position: Kernel > Selectors.

Failure modes:
    - JournalEntryNotFoundError from get_entry() and lines_for_entry() for
      an unknown id.  find_entry() returns None instead.
"""

from datetime import date

from sqlalchemy import func, or_, select
from sqlalchemy.orm import selectinload

from ledger_kernel.domain.dtos import JournalEntryRecord, LineSpec
from ledger_kernel.exceptions import JournalEntryNotFoundError
from ledger_kernel.models.journal import JournalEntry, JournalLine
from ledger_kernel.selectors.base import BaseSelector


class JournalSelector(BaseSelector[JournalEntry]):
    """
    Selector for journal entry queries.

    Listings are ordered newest entry number first, matching the journal
    entry page.
    """

    def _load(self, entry_id: int) -> JournalEntry | None:
        return self.session.execute(
            select(JournalEntry)
            .options(selectinload(JournalEntry.lines))
            .where(JournalEntry.id == entry_id)
        ).scalar_one_or_none()

    def get_entry(self, entry_id: int) -> JournalEntryRecord:
        entry = self._load(entry_id)
        if entry is None:
            raise JournalEntryNotFoundError(entry_id)
        return JournalEntryRecord.from_model(entry)

    def find_entry(self, entry_id: int) -> JournalEntryRecord | None:
        entry = self._load(entry_id)
        return JournalEntryRecord.from_model(entry) if entry else None

    def by_number(self, number: str) -> JournalEntryRecord | None:
        entry = self.session.execute(
            select(JournalEntry)
            .options(selectinload(JournalEntry.lines))
            .where(JournalEntry.number == number.strip())
        ).scalar_one_or_none()
        return JournalEntryRecord.from_model(entry) if entry else None

    def list_entries(self, search: str | None = None) -> list[JournalEntryRecord]:
        """
        All entries, newest first.

        search, when given, is a case-insensitive substring matched against
        the entry number and the description.
        """
        stmt = select(JournalEntry).options(selectinload(JournalEntry.lines))
        if search and search.strip():
            pattern = f"%{search.strip()}%"
            stmt = stmt.where(
                or_(
                    JournalEntry.number.ilike(pattern),
                    JournalEntry.description.ilike(pattern),
                )
            )
        stmt = stmt.order_by(JournalEntry.seq.desc())
        return [
            JournalEntryRecord.from_model(entry)
            for entry in self.session.execute(stmt).scalars().all()
        ]

    def entries_between(self, start_date: date, end_date: date) -> list[JournalEntryRecord]:
        """
        Entries dated within [start_date, end_date], oldest first.

        Preconditions: start_date <= end_date.
        """
        if start_date > end_date:
            raise ValueError("start_date must not be after end_date")
        stmt = (
            select(JournalEntry)
            .options(selectinload(JournalEntry.lines))
            .where(
                JournalEntry.entry_date >= start_date,
                JournalEntry.entry_date <= end_date,
            )
            .order_by(JournalEntry.entry_date, JournalEntry.seq)
        )
        return [
            JournalEntryRecord.from_model(entry)
            for entry in self.session.execute(stmt).scalars().all()
        ]

    def lines_for_entry(self, entry_id: int) -> list[LineSpec]:
        if self.session.get(JournalEntry, entry_id) is None:
            raise JournalEntryNotFoundError(entry_id)
        lines = self.session.execute(
            select(JournalLine)
            .where(JournalLine.journal_entry_id == entry_id)
            .order_by(JournalLine.line_seq)
        ).scalars().all()
        return [LineSpec.from_model(line) for line in lines]

    def count(self) -> int:
        return self.session.execute(select(func.count(JournalEntry.id))).scalar_one()
