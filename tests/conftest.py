"""
Pytest fixtures for the ledger kernel test suite.

Provides:
- A private in-memory SQLite database per test
- Services and selectors wired to the test session
- A small standard chart of accounts
- Structured log capture
"""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO

import pytest

from ledger_kernel.db.engine import (
    create_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from ledger_kernel.domain.clock import DeterministicClock
from ledger_kernel.domain.dtos import AccountType, LineSpec
from ledger_kernel.logging_config import (
    LedgerLogFormatter,
    configure_logging,
    reset_logging,
)
from ledger_kernel.selectors.account_selector import AccountSelector
from ledger_kernel.selectors.journal_selector import JournalSelector
from ledger_kernel.selectors.ledger_selector import LedgerSelector
from ledger_kernel.services.account_service import AccountService
from ledger_kernel.services.activity_log_service import ActivityLogService
from ledger_kernel.services.journal_service import JournalService


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture
def captured_logs():
    """
    Capture ledger_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, journal_service):
            journal_service.create_entry(...)
            logs = captured_logs()
            assert any(r["event"] == "journal_entry_created" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(LedgerLogFormatter())
    root = logging.getLogger("ledger_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database
# =============================================================================


@pytest.fixture
def engine():
    """A fresh in-memory database with all tables, discarded after the test."""
    eng = init_engine_from_url("sqlite://")
    create_tables()
    yield eng
    reset_engine()


@pytest.fixture
def session(engine):
    sess = get_session()
    yield sess
    sess.rollback()
    sess.close()


@pytest.fixture
def clock():
    return DeterministicClock()


# =============================================================================
# Services and selectors
# =============================================================================


@pytest.fixture
def activity_log(session, clock):
    return ActivityLogService(session, clock)


@pytest.fixture
def account_service(session, clock, activity_log):
    return AccountService(session, clock, activity_log=activity_log)


@pytest.fixture
def journal_service(session, clock, activity_log):
    return JournalService(session, clock, activity_log=activity_log)


@pytest.fixture
def account_selector(session):
    return AccountSelector(session)


@pytest.fixture
def journal_selector(session):
    return JournalSelector(session)


@pytest.fixture
def ledger_selector(session):
    return LedgerSelector(session)


# =============================================================================
# Test data
# =============================================================================


STANDARD_ACCOUNTS = (
    ("1000", "Cash", AccountType.ASSET),
    ("1200", "Accounts Receivable", AccountType.ASSET),
    ("2000", "Accounts Payable", AccountType.LIABILITY),
    ("3000", "Owner's Equity", AccountType.EQUITY),
    ("4000", "Sales Revenue", AccountType.REVENUE),
    ("5000", "Rent Expense", AccountType.EXPENSE),
)


@pytest.fixture
def standard_accounts(account_service) -> dict[str, int]:
    """Create the standard chart of accounts; returns code -> account_id."""
    return {
        code: account_service.create_account(code, name, account_type).account_id
        for code, name, account_type in STANDARD_ACCOUNTS
    }


@pytest.fixture
def post_entry(journal_service, standard_accounts):
    """
    Post a balanced two-line entry by account code.

    Usage::

        post_entry("1000", "4000", "250.00")  # Dr Cash / Cr Sales
    """

    def _post(
        debit_code: str,
        credit_code: str,
        amount: str | Decimal,
        description: str = "Test entry",
        entry_date: date = date(2024, 1, 15),
    ):
        return journal_service.create_entry(
            entry_date,
            description,
            [
                LineSpec.debit_line(standard_accounts[debit_code], amount),
                LineSpec.credit_line(standard_accounts[credit_code], amount),
            ],
        )

    return _post
