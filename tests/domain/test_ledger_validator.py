"""
Tests for LedgerValidator.validate_entry.

Covers the substantive-line filter, the three rejection kinds and their
check order, the 0.01 tolerance, and the structured detail carried by each
error.
"""

from decimal import Decimal

import pytest

from ledger_kernel.domain.dtos import LineSpec
from ledger_kernel.domain.ledger_validator import (
    DEFAULT_TOLERANCE,
    LedgerValidator,
    validate_entry,
)
from ledger_kernel.exceptions import (
    EntryValidationError,
    InsufficientLinesError,
    LineHasBothDebitAndCreditError,
    UnbalancedEntryError,
)


def _line(account_id, debit=0, credit=0) -> LineSpec:
    return LineSpec(account_id=account_id, debit=debit, credit=credit)


class TestRejections:
    """The reference rejection cases."""

    def test_single_line_is_insufficient(self):
        with pytest.raises(InsufficientLinesError) as exc_info:
            validate_entry([_line(1, debit=100)])
        assert exc_info.value.kind == "InsufficientLines"
        assert exc_info.value.line_count == 1
        assert exc_info.value.minimum == 2

    def test_empty_entry_is_insufficient(self):
        with pytest.raises(InsufficientLinesError) as exc_info:
            validate_entry([])
        assert exc_info.value.line_count == 0

    def test_line_with_both_amounts_rejected(self):
        with pytest.raises(LineHasBothDebitAndCreditError) as exc_info:
            validate_entry([_line(1, debit=50, credit=50), _line(2, credit=50)])
        err = exc_info.value
        assert err.kind == "LineHasBothDebitAndCredit"
        assert err.line_index == 0
        assert err.account_id == 1
        assert err.debit == Decimal("50")
        assert err.credit == Decimal("50")

    def test_unbalanced_carries_totals(self):
        with pytest.raises(UnbalancedEntryError) as exc_info:
            validate_entry([_line(1, debit=100), _line(2, credit=90)])
        err = exc_info.value
        assert err.kind == "Unbalanced"
        assert err.total_debits == Decimal("100")
        assert err.total_credits == Decimal("90")
        assert err.difference == Decimal("10")

    def test_all_rejections_share_a_base(self):
        for lines in (
            [_line(1, debit=100)],
            [_line(1, debit=50, credit=50), _line(2, credit=50)],
            [_line(1, debit=100), _line(2, credit=90)],
        ):
            with pytest.raises(EntryValidationError):
                validate_entry(lines)


class TestAcceptance:

    def test_balanced_entry_accepted(self):
        result = validate_entry([_line(1, debit=100), _line(2, credit=100)])
        assert result.total_debits == Decimal("100")
        assert result.total_credits == Decimal("100")
        assert result.balanced is True
        assert len(result.lines) == 2

    def test_multi_line_entry_accepted(self):
        result = validate_entry([
            _line(1, debit="60.25"),
            _line(5, debit="39.75"),
            _line(2, credit="100.00"),
        ])
        assert result.total_debits == Decimal("100.00")
        assert len(result.lines) == 3

    def test_input_order_preserved(self):
        lines = [_line(3, credit=10), _line(1, debit=4), _line(2, debit=6)]
        result = validate_entry(lines)
        assert [line.account_id for line in result.lines] == [3, 1, 2]

    def test_float_rounding_absorbed(self):
        # 0.1 + 0.2 as floats is not 0.3, but amounts go through str()
        result = validate_entry([
            _line(1, debit=0.1),
            _line(2, debit=0.2),
            _line(3, credit=0.3),
        ])
        assert result.total_debits == result.total_credits == Decimal("0.3")

    def test_form_mappings_accepted(self):
        result = validate_entry([
            {"accountId": 1, "debit": 100, "credit": 0},
            {"accountId": 2, "debit": "", "credit": "100"},
        ])
        assert [line.account_id for line in result.lines] == [1, 2]
        assert result.total_credits == Decimal("100")

    def test_single_mapping_is_insufficient(self):
        with pytest.raises(InsufficientLinesError):
            validate_entry([{"accountId": 1, "debit": 100, "credit": 0}])


class TestTolerance:

    def test_difference_of_one_cent_accepted(self):
        result = validate_entry([_line(1, debit="100.01"), _line(2, credit="100.00")])
        assert result.balanced

    def test_difference_of_two_cents_rejected(self):
        with pytest.raises(UnbalancedEntryError):
            validate_entry([_line(1, debit="100.02"), _line(2, credit="100.00")])

    def test_sub_cent_amounts_rounded_before_balance_check(self):
        # 50 x 0.006 would sum to 0.300, but each line is stored as 0.01
        lines = [_line(1, debit="0.006") for _ in range(50)] + [_line(2, credit="0.30")]
        with pytest.raises(UnbalancedEntryError) as exc_info:
            validate_entry(lines)
        assert exc_info.value.total_debits == Decimal("0.50")

    def test_half_cent_rounds_up(self):
        result = validate_entry([_line(1, debit="10.005"), _line(2, credit="10.01")])
        assert result.lines[0].debit == Decimal("10.01")
        assert result.total_debits == result.total_credits

    def test_custom_tolerance(self):
        strict = LedgerValidator(tolerance=Decimal("0"))
        with pytest.raises(UnbalancedEntryError):
            strict.validate_entry([_line(1, debit="100.01"), _line(2, credit="100")])

    def test_default_tolerance_is_one_cent(self):
        assert DEFAULT_TOLERANCE == Decimal("0.01")

    def test_negative_tolerance_rejected(self):
        with pytest.raises(ValueError):
            LedgerValidator(tolerance=Decimal("-0.01"))

    def test_minimum_lines_below_two_rejected(self):
        with pytest.raises(ValueError):
            LedgerValidator(minimum_lines=1)


class TestSubstantiveLineFilter:
    """Blank rows from the entry form are dropped before counting."""

    def test_blank_rows_dropped(self):
        result = validate_entry([
            _line(1, debit=100),
            _line(None),
            _line(2, credit=100),
            _line(None),
        ])
        assert len(result.lines) == 2

    def test_blank_rows_do_not_count_toward_minimum(self):
        with pytest.raises(InsufficientLinesError) as exc_info:
            validate_entry([_line(1, debit=100), _line(None), _line(None)])
        assert exc_info.value.line_count == 1

    def test_zero_amount_line_with_account_dropped(self):
        with pytest.raises(InsufficientLinesError):
            validate_entry([_line(1, debit=100), _line(2)])

    def test_amount_without_account_dropped(self):
        with pytest.raises(InsufficientLinesError):
            validate_entry([_line(1, debit=100), _line(None, credit=100)])

    def test_form_style_dicts_accepted_via_from_dict(self):
        lines = [
            LineSpec.from_dict({"accountId": "1", "debit": "100", "credit": ""}),
            LineSpec.from_dict({"accountId": "", "debit": "", "credit": ""}),
            LineSpec.from_dict({"account_id": 2, "debit": None, "credit": 100}),
        ]
        result = validate_entry(lines)
        assert [line.account_id for line in result.lines] == [1, 2]


class TestCheckOrder:

    def test_line_count_checked_before_dual_amounts(self):
        with pytest.raises(InsufficientLinesError):
            validate_entry([_line(1, debit=50, credit=50)])

    def test_dual_amounts_checked_before_balance(self):
        # Unbalanced as well (100 vs 50), but the dual line is reported
        with pytest.raises(LineHasBothDebitAndCreditError):
            validate_entry([_line(1, debit=50, credit=50), _line(2, debit=50)])

    def test_reports_first_dual_line_index(self):
        with pytest.raises(LineHasBothDebitAndCreditError) as exc_info:
            validate_entry([
                _line(1, debit=10),
                _line(2, debit=5, credit=5),
                _line(3, debit=5, credit=5),
            ])
        assert exc_info.value.line_index == 1


class TestPurity:

    def test_input_not_mutated(self):
        lines = [_line(1, debit=100), _line(None), _line(2, credit=100)]
        snapshot = list(lines)
        validate_entry(lines)
        assert lines == snapshot

    def test_accepts_generator(self):
        result = validate_entry(line for line in [_line(1, debit=5), _line(2, credit=5)])
        assert result.total_debits == Decimal("5")

    def test_is_balanced_running_check(self):
        validator = LedgerValidator()
        assert validator.is_balanced([_line(1, debit=5), _line(2, credit=5)])
        assert not validator.is_balanced([_line(1, debit=5)])
        assert validator.is_balanced([])
