"""Tests for the pure report builders in ledger_modules.reporting.statements."""

import json
from decimal import Decimal

import pytest

from ledger_kernel.domain.dtos import AccountType, TrialBalanceRow
from ledger_modules.reporting.config import ReportingConfig
from ledger_modules.reporting.models import ReportMetadata, ReportType
from ledger_modules.reporting.statements import (
    build_trial_balance_report,
    render_to_dict,
    summarize_by_account_type,
)

METADATA = ReportMetadata(
    report_type=ReportType.TRIAL_BALANCE,
    entity_name="Test Co",
    currency="USD",
    generated_at="2024-01-01T12:00:00+00:00",
)


def _row(account_id, code, account_type, debit="0", credit="0") -> TrialBalanceRow:
    return TrialBalanceRow(
        account_id=account_id,
        account_code=code,
        account_name=f"Account {code}",
        account_type=account_type,
        debit_balance=Decimal(debit),
        credit_balance=Decimal(credit),
    )


ROWS = [
    _row(5, "5000", AccountType.EXPENSE, debit="400"),
    _row(1, "1000", AccountType.ASSET, debit="1350"),
    _row(2, "2000", AccountType.LIABILITY),
    _row(3, "3000", AccountType.EQUITY, credit="1000"),
    _row(4, "4000", AccountType.REVENUE, credit="750"),
]


class TestBuildTrialBalanceReport:

    def test_zero_rows_dropped_by_default(self):
        report = build_trial_balance_report(ROWS, ReportingConfig(), METADATA)
        assert [line.account_code for line in report.lines] == ["1000", "3000", "4000", "5000"]

    def test_zero_rows_kept_when_configured(self):
        config = ReportingConfig(include_zero_balances=True)
        report = build_trial_balance_report(ROWS, config, METADATA)
        assert len(report.lines) == 5

    def test_totals_and_balanced(self):
        report = build_trial_balance_report(ROWS, ReportingConfig(), METADATA)
        assert report.total_debits == Decimal("1750")
        assert report.total_credits == Decimal("1750")
        assert report.is_balanced

    def test_out_of_balance_detected(self):
        rows = ROWS + [_row(6, "1200", AccountType.ASSET, debit="0.05")]
        report = build_trial_balance_report(rows, ReportingConfig(), METADATA)
        assert not report.is_balanced

    def test_balanced_at_display_precision(self):
        rows = [
            _row(1, "1000", AccountType.ASSET, debit="10.004"),
            _row(2, "2000", AccountType.LIABILITY, credit="10.001"),
        ]
        assert build_trial_balance_report(rows, ReportingConfig(), METADATA).is_balanced
        strict = ReportingConfig(display_precision=3)
        assert not build_trial_balance_report(rows, strict, METADATA).is_balanced

    def test_line_items_carry_net_balance(self):
        rows = [_row(1, "1000", AccountType.ASSET, credit="30")]
        report = build_trial_balance_report(rows, ReportingConfig(), METADATA)
        item = report.lines[0]
        assert item.account_type == "asset"
        assert item.net_balance == Decimal("-30")


class TestSummarizeByAccountType:

    def test_totals(self):
        summary = summarize_by_account_type(ROWS)
        assert summary.total_assets == Decimal("1350")
        assert summary.total_liabilities == Decimal("0")
        assert summary.total_equity == Decimal("1000")
        assert summary.total_revenue == Decimal("750")
        assert summary.total_expenses == Decimal("400")
        assert summary.net_income == Decimal("350")

    def test_accounting_equation(self):
        assert summarize_by_account_type(ROWS).equation_difference == Decimal("0")

    def test_contra_balance_reduces_total(self):
        rows = [
            _row(1, "1000", AccountType.ASSET, debit="100"),
            _row(2, "1900", AccountType.ASSET, credit="20"),
        ]
        assert summarize_by_account_type(rows).total_assets == Decimal("80")


class TestRenderToDict:

    def test_report_is_json_serialisable(self):
        report = build_trial_balance_report(ROWS, ReportingConfig(), METADATA)
        rendered = render_to_dict(report)
        json.dumps(rendered)
        assert rendered["metadata"]["report_type"] == "trial_balance"
        assert rendered["total_debits"] == "1750"
        assert rendered["lines"][0]["account_code"] == "1000"

    def test_summary_includes_net_income(self):
        rendered = render_to_dict(summarize_by_account_type(ROWS))
        assert rendered["net_income"] == "350"


class TestReportingConfig:

    def test_defaults(self):
        config = ReportingConfig.with_defaults()
        assert config.default_currency == "USD"
        assert config.include_zero_balances is False

    def test_from_dict(self):
        config = ReportingConfig.from_dict({"entity_name": "Acme", "display_precision": 0})
        assert config.entity_name == "Acme"

    def test_unknown_key_rejected(self):
        with pytest.raises(ValueError):
            ReportingConfig.from_dict({"colour": "blue"})

    @pytest.mark.parametrize("kwargs", [{"display_precision": -1}, {"default_currency": "US"}])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            ReportingConfig(**kwargs)
