"""
JournalService -- write side of the Journal Entry Store.

Responsibility:
    The only path by which journal entries reach the database.  Every
    create and every line replacement runs the lines through
    LedgerValidator first, then checks that each referenced account
    exists, then persists.  Entry numbers come from SequenceService.

Architecture position:
    Kernel > Services -- imperative shell around the pure validator.

Invariants enforced:
    - No partial save: nothing is added to the session until validation
      and the account check have both passed.
    - Every stored entry satisfies the balance rule within the configured
      tolerance and has at least the configured number of lines.
    - Lines are replaced as a whole on update; there is no single-line edit.
    - Entry numbers are never reused, even after the newest entry is deleted.

Failure modes:
    - InsufficientLinesError, LineHasBothDebitAndCreditError,
      UnbalancedEntryError from validation (logged as journal_entry_rejected
      and re-raised).
    - AccountNotFoundError when a line names an account that does not exist.
    - JournalEntryNotFoundError from update_entry/delete_entry.

Audit relevance:
    Each create, update and delete writes an activity record in the same
    transaction, and emits a structured log event bound to the entry's id
    and number.
"""

from collections.abc import Iterable
from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from ledger_kernel.config import LedgerConfig
from ledger_kernel.domain.clock import Clock
from ledger_kernel.domain.dtos import (
    JournalEntryRecord,
    ValidatedEntry,
    coerce_lines,
)
from ledger_kernel.domain.ledger_validator import LineInput
from ledger_kernel.exceptions import (
    AccountNotFoundError,
    EntryValidationError,
    JournalEntryNotFoundError,
)
from ledger_kernel.logging_config import bind_entry, get_logger
from ledger_kernel.models.account import Account
from ledger_kernel.models.journal import JournalEntry, JournalLine
from ledger_kernel.services.activity_log_service import ActivityLogService
from ledger_kernel.services.base import BaseService
from ledger_kernel.services.sequence_service import (
    SequenceService,
    format_entry_number,
)

logger = get_logger("services.journal")

ENTITY_TYPE = "journal_entry"


def _to_date(value: date | datetime | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip())
    raise ValueError(f"entry_date must be a date, got {type(value).__name__}")


class JournalService(BaseService[JournalEntry]):
    """
    Service for creating, replacing and deleting journal entries.

    Contract:
        Accepts LineSpec objects or form-style mappings for lines.
        Returns JournalEntryRecord DTOs, never ORM rows.

    Non-goals:
        - Does NOT commit; the caller's session_scope() does.
        - Does NOT provide listing or search (see JournalSelector).
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        config: LedgerConfig | None = None,
        activity_log: ActivityLogService | None = None,
    ):
        super().__init__(session)
        self._config = config or LedgerConfig()
        self._validator = self._config.validator()
        self._sequences = SequenceService(session)
        self._activity = activity_log or ActivityLogService(session, clock)

    def _get(self, entry_id: int) -> JournalEntry:
        entry = self.session.get(JournalEntry, entry_id)
        if entry is None:
            raise JournalEntryNotFoundError(entry_id)
        return entry

    def _validate(
        self,
        lines: Iterable[LineInput],
        entry_id: int | None = None,
    ) -> ValidatedEntry:
        """Run the validator and the account existence check."""
        specs = coerce_lines(lines)
        try:
            validated = self._validator.validate_entry(specs)
        except EntryValidationError as exc:
            logger.warning(
                "journal_entry_rejected",
                extra={
                    "entry_id": entry_id,
                    "kind": exc.kind,
                    "error_code": exc.code,
                    "reason": str(exc),
                    "line_count": len(specs),
                },
            )
            raise

        account_ids = {line.account_id for line in validated.lines}
        known = set(
            self.session.execute(
                select(Account.id).where(Account.id.in_(account_ids))
            ).scalars()
        )
        missing = sorted(account_ids - known)
        if missing:
            logger.warning(
                "journal_entry_rejected",
                extra={
                    "entry_id": entry_id,
                    "kind": "AccountNotFound",
                    "error_code": AccountNotFoundError.code,
                    "missing_account_ids": missing,
                },
            )
            raise AccountNotFoundError(missing[0])

        return validated

    @staticmethod
    def _build_lines(validated: ValidatedEntry) -> list[JournalLine]:
        return [
            JournalLine(
                account_id=line.account_id,
                debit=line.debit,
                credit=line.credit,
                line_seq=index,
            )
            for index, line in enumerate(validated.lines)
        ]

    def create_entry(
        self,
        entry_date: date | datetime | str,
        description: str | None,
        lines: Iterable[LineInput],
    ) -> JournalEntryRecord:
        """
        Validate and store a new journal entry.

        Preconditions:
            - Every substantive line names an existing account.

        Postconditions:
            - The entry holds exactly the validated (substantive) lines, in
              submission order, and the next unused entry number.

        Raises:
            EntryValidationError subclasses, AccountNotFoundError.
        """
        entry_date = _to_date(entry_date)
        validated = self._validate(lines)

        seq = self._sequences.next_value(SequenceService.JOURNAL_ENTRY)
        number = format_entry_number(
            seq,
            self._config.entry_number_prefix,
            self._config.entry_number_width,
        )

        entry = JournalEntry(
            number=number,
            seq=seq,
            entry_date=entry_date,
            description=description,
            lines=self._build_lines(validated),
        )
        self.session.add(entry)
        self.session.flush()

        record = JournalEntryRecord.from_model(entry)
        with bind_entry(record.entry_id, number):
            logger.info(
                "journal_entry_created",
                extra={
                    "entry_date": entry_date,
                    "line_count": len(record.lines),
                    "total_debits": validated.total_debits,
                    "total_credits": validated.total_credits,
                },
            )
        self._activity.log_activity(
            "create",
            ENTITY_TYPE,
            f"Created journal entry {number}",
            entity_id=record.entry_id,
            entity_name=number,
            details={
                "entry_date": entry_date.isoformat(),
                "line_count": len(record.lines),
                "total": str(validated.total_debits),
            },
        )
        return record

    def update_entry(
        self,
        entry_id: int,
        *,
        lines: Iterable[LineInput] | None = None,
        entry_date: date | datetime | str | None = None,
        description: str | None = None,
    ) -> JournalEntryRecord:
        """
        Change an entry's header and/or replace its full line set.

        The entry number never changes.  When lines are given they are
        validated exactly as on create, and the old lines are discarded only
        if the new set passes.

        Raises:
            JournalEntryNotFoundError, EntryValidationError subclasses,
            AccountNotFoundError.
        """
        entry = self._get(entry_id)
        validated = self._validate(lines, entry_id=entry_id) if lines is not None else None

        changed: list[str] = []
        if entry_date is not None:
            entry.entry_date = _to_date(entry_date)
            changed.append("entry_date")
        if description is not None:
            entry.description = description
            changed.append("description")
        if validated is not None:
            entry.lines = self._build_lines(validated)
            changed.append("lines")

        self.session.flush()
        record = JournalEntryRecord.from_model(entry)

        with bind_entry(entry_id, record.number):
            logger.info(
                "journal_entry_updated",
                extra={"fields": changed, "line_count": len(record.lines)},
            )
        self._activity.log_activity(
            "update",
            ENTITY_TYPE,
            f"Updated journal entry {record.number}",
            entity_id=entry_id,
            entity_name=record.number,
            details={"fields": changed},
        )
        return record

    def delete_entry(self, entry_id: int) -> None:
        """
        Remove an entry and all of its lines.

        Raises:
            JournalEntryNotFoundError: unknown entry_id.
        """
        entry = self._get(entry_id)
        number = entry.number
        line_count = len(entry.lines)

        self.session.delete(entry)
        self.session.flush()

        with bind_entry(entry_id, number):
            logger.info("journal_entry_deleted", extra={"line_count": line_count})
        self._activity.log_activity(
            "delete",
            ENTITY_TYPE,
            f"Deleted journal entry {number}",
            entity_id=entry_id,
            entity_name=number,
        )
