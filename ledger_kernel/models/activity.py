"""
Module: ledger_kernel.models.activity
Responsibility: ORM persistence for the user activity log -- who did what to
    which entity, and when.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - Append-only by convention: ActivityLogService only inserts rows.
    - occurred_at comes from the injected Clock, never from the database.
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ledger_kernel.db.base import Base


class ActivityLogEntry(Base):
    """One recorded user action."""

    __tablename__ = "activity_log"

    __table_args__ = (
        Index("idx_activity_occurred_at", "occurred_at"),
        Index("idx_activity_user", "user_id"),
        Index("idx_activity_entity", "entity_type", "entity_id"),
    )

    occurred_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    user_id: Mapped[str] = mapped_column(String(100), nullable=False)
    username: Mapped[str] = mapped_column(String(255), nullable=False)

    # e.g. "create", "update", "delete"
    action: Mapped[str] = mapped_column(String(50), nullable=False)

    # e.g. "journal_entry", "account"
    entity_type: Mapped[str] = mapped_column(String(50), nullable=False)

    entity_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    entity_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    description: Mapped[str] = mapped_column(Text, nullable=False)

    details: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(500), nullable=True)

    def __repr__(self) -> str:
        return f"<ActivityLogEntry {self.action} {self.entity_type}:{self.entity_id}>"
