"""
ActivityLogService -- append-only record of user actions.

Responsibility:
    Records who created, updated or deleted which ledger entity, and
    answers the activity page's queries: newest-first listing, filters by
    date range, user, entity type and action, free-text search, and a
    summary of recent activity.

Architecture position:
    Kernel > Services -- imperative shell.  AccountService and
    JournalService call log_activity() inside the same transaction as the
    change they describe.

Invariants enforced:
    - Timestamps come from the injected Clock and are stored in UTC.
    - Rows are only ever inserted; there is no update or delete path.

Failure modes:
    - ActivityNotFoundError from get_activity() for an unknown id.
    - ValueError from by_date_range() when start is after end.
"""

from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta, timezone
from types import MappingProxyType
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.dtos import ActivityRecord
from ledger_kernel.exceptions import ActivityNotFoundError
from ledger_kernel.logging_config import get_logger
from ledger_kernel.models.activity import ActivityLogEntry
from ledger_kernel.services.base import BaseService

logger = get_logger("services.activity_log")

SYSTEM_USER_ID = "system"
SYSTEM_USERNAME = "System User"

RECENT_ACTIVITY_COUNT = 5


@dataclass(frozen=True)
class ActivitySummary:
    """Counts shown at the top of the activity page."""

    total: int
    last_24_hours: int
    action_counts: Mapping[str, int]
    entity_type_counts: Mapping[str, int]
    most_active_user: str | None
    recent: tuple[ActivityRecord, ...]


def _as_utc(value: datetime) -> datetime:
    # Naive values are taken to be UTC already.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _range_start(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return _as_utc(value)
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def _range_end(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return _as_utc(value)
    return datetime.combine(value, time.max, tzinfo=timezone.utc)


class ActivityLogService(BaseService[ActivityLogEntry]):
    """Writes and queries the activity log."""

    def __init__(self, session: Session, clock: Clock | None = None):
        super().__init__(session)
        self._clock = clock or SystemClock()

    def _to_record(self, model: ActivityLogEntry) -> ActivityRecord:
        record = ActivityRecord.from_model(model)
        # SQLite hands back naive datetimes
        return replace(record, occurred_at=_as_utc(record.occurred_at))

    def _newest_first(self, stmt):
        return stmt.order_by(
            ActivityLogEntry.occurred_at.desc(),
            ActivityLogEntry.id.desc(),
        )

    def _fetch(self, stmt) -> list[ActivityRecord]:
        rows = self.session.execute(self._newest_first(stmt)).scalars().all()
        return [self._to_record(row) for row in rows]

    def log_activity(
        self,
        action: str,
        entity_type: str,
        description: str,
        *,
        entity_id: Any = None,
        entity_name: str | None = None,
        details: dict[str, Any] | None = None,
        user_id: str = SYSTEM_USER_ID,
        username: str = SYSTEM_USERNAME,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> ActivityRecord:
        """
        Append one activity record.

        entity_id is stored as text so that any entity key fits.
        details must be JSON-serialisable.
        """
        if not action:
            raise ValueError("action is required")
        if not entity_type:
            raise ValueError("entity_type is required")

        entry = ActivityLogEntry(
            occurred_at=self._clock.now(),
            user_id=user_id,
            username=username,
            action=action,
            entity_type=entity_type,
            entity_id=None if entity_id is None else str(entity_id),
            entity_name=entity_name,
            description=description,
            details=details,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        self.session.add(entry)
        self.session.flush()

        logger.info(
            "activity_logged",
            extra={
                "activity_id": entry.id,
                "action": action,
                "entity_type": entity_type,
                "entity_id": entry.entity_id,
                "user_id": user_id,
            },
        )
        return self._to_record(entry)

    def list_activities(self, limit: int | None = None) -> list[ActivityRecord]:
        """All activities, newest first."""
        stmt = select(ActivityLogEntry)
        if limit is not None:
            stmt = self._newest_first(stmt).limit(limit)
            rows = self.session.execute(stmt).scalars().all()
            return [self._to_record(row) for row in rows]
        return self._fetch(stmt)

    def get_activity(self, activity_id: int) -> ActivityRecord:
        entry = self.session.get(ActivityLogEntry, activity_id)
        if entry is None:
            raise ActivityNotFoundError(activity_id)
        return self._to_record(entry)

    def by_date_range(
        self,
        start: date | datetime,
        end: date | datetime,
    ) -> list[ActivityRecord]:
        """
        Activities between start and end, both inclusive.

        A plain date as ``end`` covers that whole day.
        """
        start_at = _range_start(start)
        end_at = _range_end(end)
        if start_at > end_at:
            raise ValueError("start must not be after end")
        return self._fetch(
            select(ActivityLogEntry).where(
                ActivityLogEntry.occurred_at >= start_at,
                ActivityLogEntry.occurred_at <= end_at,
            )
        )

    def by_user(self, user_id: str) -> list[ActivityRecord]:
        return self._fetch(
            select(ActivityLogEntry).where(ActivityLogEntry.user_id == user_id)
        )

    def by_entity_type(self, entity_type: str) -> list[ActivityRecord]:
        return self._fetch(
            select(ActivityLogEntry).where(
                func.lower(ActivityLogEntry.entity_type) == entity_type.lower()
            )
        )

    def by_action(self, action: str) -> list[ActivityRecord]:
        return self._fetch(
            select(ActivityLogEntry).where(
                func.lower(ActivityLogEntry.action) == action.lower()
            )
        )

    def search(self, query: str) -> list[ActivityRecord]:
        """
        Case-insensitive substring search over description, username,
        entity type, action and entity name.  A blank query matches all.
        """
        query = query.strip()
        stmt = select(ActivityLogEntry)
        if query:
            pattern = f"%{query}%"
            stmt = stmt.where(
                or_(
                    ActivityLogEntry.description.ilike(pattern),
                    ActivityLogEntry.username.ilike(pattern),
                    ActivityLogEntry.entity_type.ilike(pattern),
                    ActivityLogEntry.action.ilike(pattern),
                    ActivityLogEntry.entity_name.ilike(pattern),
                )
            )
        return self._fetch(stmt)

    def summary(self) -> ActivitySummary:
        activities = self.list_activities()
        cutoff = self._clock.now() - timedelta(hours=24)

        users = Counter(a.username for a in activities)
        most_active = users.most_common(1)[0][0] if users else None

        return ActivitySummary(
            total=len(activities),
            last_24_hours=sum(1 for a in activities if a.occurred_at >= cutoff),
            action_counts=MappingProxyType(Counter(a.action for a in activities)),
            entity_type_counts=MappingProxyType(
                Counter(a.entity_type for a in activities)
            ),
            most_active_user=most_active,
            recent=tuple(activities[:RECENT_ACTIVITY_COUNT]),
        )
