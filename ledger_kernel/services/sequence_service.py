"""
SequenceService -- monotonic sequence allocation via counter rows.

Responsibility:
    Provides strictly increasing sequence numbers for journal entries.
    A dedicated counter table holds the last value handed out per name;
    the journal entry number (JE001, JE002, ...) is formatted from it.

Architecture position:
    Kernel > Services -- imperative shell infrastructure.
    Called by JournalService when a new entry is created.

Invariants enforced:
    - Monotonicity: the counter row is the sole source of truth for the
      next value.  Deriving the next number from MAX(number) + 1 is
      forbidden, because deleting the newest entry would hand its number
      out again.
    - Transactional: the increment is only visible once the caller's
      transaction commits.  Rollback returns the value.

Audit relevance:
    Sequence allocation is logged at DEBUG level with sequence_name and
    value.  Entry numbers are never reused, so a number in an old report
    always identifies the same entry or a deleted one.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from ledger_kernel.logging_config import get_logger
from ledger_kernel.models.sequence import SequenceCounter

logger = get_logger("services.sequence")


def format_entry_number(seq: int, prefix: str = "JE", width: int = 3) -> str:
    """Format a sequence value as an entry number, e.g. 7 -> "JE007"."""
    if seq < 1:
        raise ValueError(f"Sequence value must be positive, got {seq}")
    return f"{prefix}{seq:0{width}d}"


class SequenceService:
    """
    Service for generating transactional sequence numbers.

    Contract:
        Accepts a sequence name and returns the next strictly-monotonic
        integer value.  The increment is committed only when the caller's
        transaction commits.

    Non-goals:
        - Does NOT call ``session.commit()`` -- caller controls boundaries.

    Usage:
        with session_scope() as session:
            seq = SequenceService(session).next_value("journal_entry")
    """

    # Well-known sequence names
    JOURNAL_ENTRY = "journal_entry"

    def __init__(self, session: Session):
        self._session = session

    def _counter(self, sequence_name: str) -> SequenceCounter | None:
        return self._session.execute(
            select(SequenceCounter)
            .where(SequenceCounter.name == sequence_name)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def next_value(self, sequence_name: str) -> int:
        """
        Get the next value for a named sequence.

        Preconditions:
            - ``sequence_name`` is a non-empty string.

        Postconditions:
            - Returns an integer > 0 strictly greater than any value
              previously returned for this name.
        """
        if not sequence_name:
            raise ValueError("sequence_name is required")

        counter = self._counter(sequence_name)
        if counter is None:
            counter = SequenceCounter(name=sequence_name, current_value=0)
            self._session.add(counter)

        counter.current_value += 1
        self._session.flush()
        logger.debug(
            "sequence_allocated",
            extra={"sequence_name": sequence_name, "value": counter.current_value},
        )
        return counter.current_value

    def current_value(self, sequence_name: str) -> int | None:
        """
        Get the current value of a sequence without incrementing.

        Returns:
            Current value, or None if the sequence has never been used.
        """
        counter = self._session.execute(
            select(SequenceCounter).where(SequenceCounter.name == sequence_name)
        ).scalar_one_or_none()

        return counter.current_value if counter else None

    def reset(self, sequence_name: str, value: int = 0) -> None:
        """
        Reset a sequence to a specific value.

        WARNING: Only for tests and data migration.  Resetting below a value
        already in use makes the next allocation collide with an existing
        entry number.
        """
        if value < 0:
            raise ValueError("Sequence value cannot be negative")

        counter = self._counter(sequence_name)
        if counter is None:
            counter = SequenceCounter(name=sequence_name, current_value=value)
            self._session.add(counter)
        else:
            counter.current_value = value

        self._session.flush()
        logger.warning(
            "sequence_reset",
            extra={"sequence_name": sequence_name, "value": value},
        )
