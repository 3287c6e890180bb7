"""
Reporting Module Service (``ledger_modules.reporting.service``).

Responsibility
--------------
Produces the trial balance report and the account type summary by
bridging ``LedgerSelector`` to the pure functions in ``statements.py``.
This is a **read-only** service: no journal entries are written.

Architecture position
---------------------
**Modules layer** -- thin glue.  Constructor: ``session`` + ``clock`` +
``config``.

Invariants enforced
-------------------
* Read-only -- no mutations to the journal.
* All monetary amounts use ``Decimal`` -- NEVER ``float``.
* Report metadata carries the generation timestamp from the injected clock.

Failure modes
-------------
* Selector query failure -> exception propagates (read-only, nothing to
  roll back).
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.logging_config import get_logger
from ledger_kernel.selectors.ledger_selector import LedgerSelector
from ledger_modules.reporting.config import ReportingConfig
from ledger_modules.reporting.models import (
    AccountTypeSummary,
    ReportMetadata,
    ReportType,
    TrialBalanceReport,
)
from ledger_modules.reporting.statements import (
    build_trial_balance_report,
    summarize_by_account_type,
)

logger = get_logger("modules.reporting.service")


class ReportingService:
    """
    Ledger report generation service.

    Guarantees
    ----------
    * Report generation delegates to pure functions in ``statements.py``;
      no financial logic lives in this class.
    * Clock is injectable for deterministic testing.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        config: ReportingConfig | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._config = config or ReportingConfig.with_defaults()
        self._ledger = LedgerSelector(session)

    def _build_metadata(self, report_type: ReportType) -> ReportMetadata:
        """Build report metadata with injected clock timestamp."""
        return ReportMetadata(
            report_type=report_type,
            entity_name=self._config.entity_name,
            currency=self._config.default_currency,
            generated_at=self._clock.now().isoformat(),
        )

    def trial_balance_report(self) -> TrialBalanceReport:
        rows = self._ledger.trial_balance()
        report = build_trial_balance_report(
            rows,
            self._config,
            self._build_metadata(ReportType.TRIAL_BALANCE),
        )
        logger.info(
            "trial_balance_generated",
            extra={
                "line_count": len(report.lines),
                "total_debits": report.total_debits,
                "total_credits": report.total_credits,
                "is_balanced": report.is_balanced,
            },
        )
        if not report.is_balanced:
            logger.error(
                "trial_balance_out_of_balance",
                extra={
                    "difference": report.total_debits - report.total_credits,
                },
            )
        return report

    def account_type_summary(self) -> AccountTypeSummary:
        summary = summarize_by_account_type(self._ledger.trial_balance())
        logger.info(
            "account_type_summary_generated",
            extra={"net_income": summary.net_income},
        )
        return summary
