"""Tests for domain DTO construction and normalisation."""

from dataclasses import FrozenInstanceError
from datetime import date
from decimal import Decimal

import pytest

from ledger_kernel.domain.dtos import (
    AccountInfo,
    AccountType,
    ActivityRecord,
    JournalEntryRecord,
    LineSpec,
    NormalBalance,
    coerce_lines,
    to_amount,
    to_cents,
)


class TestToAmount:

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_is_zero(self, value):
        assert to_amount(value) == Decimal("0")

    def test_float_goes_through_str(self):
        assert to_amount(0.1) == Decimal("0.1")

    def test_to_cents_rounds_half_up(self):
        assert to_cents(Decimal("1.005")) == Decimal("1.01")
        assert to_cents(Decimal("1.004")) == Decimal("1.00")

    def test_string_amount(self):
        assert to_amount(" 12.50 ") == Decimal("12.50")

    def test_bool_rejected(self):
        with pytest.raises(ValueError):
            to_amount(True)

    def test_garbage_rejected(self):
        with pytest.raises(ValueError):
            to_amount("twelve")

    def test_non_finite_rejected(self):
        with pytest.raises(ValueError):
            to_amount(float("inf"))
        with pytest.raises(ValueError):
            to_amount("NaN")


class TestAccountType:

    @pytest.mark.parametrize("raw", ["Asset", "ASSET", "asset", " asset "])
    def test_case_insensitive(self, raw):
        assert AccountType(raw) is AccountType.ASSET

    def test_unknown_rejected(self):
        with pytest.raises(ValueError):
            AccountType("Contra")

    @pytest.mark.parametrize(
        "account_type,side",
        [
            (AccountType.ASSET, NormalBalance.DEBIT),
            (AccountType.EXPENSE, NormalBalance.DEBIT),
            (AccountType.LIABILITY, NormalBalance.CREDIT),
            (AccountType.EQUITY, NormalBalance.CREDIT),
            (AccountType.REVENUE, NormalBalance.CREDIT),
        ],
    )
    def test_normal_balance(self, account_type, side):
        assert account_type.normal_balance is side


class TestAccountInfo:

    def test_type_coerced_from_string(self):
        info = AccountInfo(1, "1000", "Cash", "Asset")
        assert info.account_type is AccountType.ASSET
        assert info.normal_balance is NormalBalance.DEBIT

    @pytest.mark.parametrize("code,name", [("", "Cash"), ("1000", ""), ("  ", "Cash")])
    def test_empty_code_or_name_rejected(self, code, name):
        with pytest.raises(ValueError):
            AccountInfo(1, code, name, AccountType.ASSET)

    def test_frozen(self):
        info = AccountInfo(1, "1000", "Cash", AccountType.ASSET)
        with pytest.raises(FrozenInstanceError):
            info.name = "Petty Cash"


class TestLineSpec:

    def test_amounts_normalised(self):
        line = LineSpec(account_id=1, debit=100, credit=None)
        assert line.debit == Decimal("100")
        assert line.credit == Decimal("0")

    def test_amounts_rounded_to_cents(self):
        line = LineSpec(account_id=1, debit="0.006", credit="2.004")
        assert line.debit == Decimal("0.01")
        assert line.credit == Decimal("2.00")
        assert line.debit.as_tuple().exponent == -2

    def test_float_sum_rounded_to_cents(self):
        assert LineSpec.debit_line(1, 0.1 + 0.2).debit == Decimal("0.30")

    def test_amount_rounding_to_zero_is_not_substantive(self):
        assert not LineSpec(account_id=1, debit="0.004").is_substantive

    def test_negative_amount_rejected(self):
        with pytest.raises(ValueError):
            LineSpec(account_id=1, debit=-5)

    def test_both_amounts_allowed_at_construction(self):
        line = LineSpec(account_id=1, debit=5, credit=5)
        assert line.has_both_sides

    def test_blank_account_becomes_none(self):
        assert LineSpec(account_id="", debit=1).account_id is None
        assert LineSpec(account_id="7", debit=1).account_id == 7

    def test_is_substantive(self):
        assert LineSpec(account_id=1, debit=1).is_substantive
        assert not LineSpec(account_id=1).is_substantive
        assert not LineSpec(account_id=None, credit=1).is_substantive

    def test_from_dict_key_aliases(self):
        line = LineSpec.from_dict({"accountId": 3, "credit": "9.99", "je_id": 12})
        assert line.account_id == 3
        assert line.credit == Decimal("9.99")
        assert line.entry_id == 12

    def test_with_entry(self):
        line = LineSpec.debit_line(1, "10").with_entry(4)
        assert line.entry_id == 4
        assert line.debit == Decimal("10")

    def test_coerce_lines_mixes_inputs(self):
        lines = coerce_lines([LineSpec.credit_line(2, 5), {"account_id": 1, "debit": 5}])
        assert all(isinstance(line, LineSpec) for line in lines)


class TestRecords:

    def test_entry_totals(self):
        record = JournalEntryRecord(
            entry_id=1,
            number="JE001",
            entry_date=date(2024, 1, 1),
            description="Opening",
            lines=(LineSpec.debit_line(1, "10.50"), LineSpec.credit_line(2, "10.50")),
        )
        assert record.total_debits == record.total_credits == Decimal("10.50")

    def test_activity_details_read_only(self):
        from datetime import datetime, timezone

        record = ActivityRecord(
            activity_id=1,
            occurred_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
            user_id="u1",
            username="Ann",
            action="create",
            entity_type="account",
            description="Created",
            details={"code": "1000"},
        )
        with pytest.raises(TypeError):
            record.details["code"] = "2000"
