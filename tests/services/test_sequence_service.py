"""Tests for SequenceService and entry number formatting."""

import pytest

from ledger_kernel.services.sequence_service import SequenceService, format_entry_number


class TestSequenceService:

    def test_first_value_is_one(self, session):
        assert SequenceService(session).next_value("journal_entry") == 1

    def test_strictly_increasing(self, session):
        service = SequenceService(session)
        values = [service.next_value("journal_entry") for _ in range(5)]
        assert values == [1, 2, 3, 4, 5]

    def test_sequences_are_independent(self, session):
        service = SequenceService(session)
        service.next_value("a")
        service.next_value("a")
        assert service.next_value("b") == 1

    def test_current_value(self, session):
        service = SequenceService(session)
        assert service.current_value("journal_entry") is None
        service.next_value("journal_entry")
        assert service.current_value("journal_entry") == 1

    def test_reset(self, session):
        service = SequenceService(session)
        service.next_value("journal_entry")
        service.reset("journal_entry", 100)
        assert service.next_value("journal_entry") == 101

    def test_reset_creates_missing_sequence(self, session):
        service = SequenceService(session)
        service.reset("fresh", 10)
        assert service.current_value("fresh") == 10

    def test_empty_name_rejected(self, session):
        with pytest.raises(ValueError):
            SequenceService(session).next_value("")


class TestFormatEntryNumber:

    @pytest.mark.parametrize(
        "seq,expected",
        [(1, "JE001"), (42, "JE042"), (999, "JE999"), (1000, "JE1000")],
    )
    def test_default_format(self, seq, expected):
        assert format_entry_number(seq) == expected

    def test_custom_prefix_and_width(self):
        assert format_entry_number(7, prefix="GJ", width=5) == "GJ00007"

    def test_non_positive_rejected(self):
        with pytest.raises(ValueError):
            format_entry_number(0)
