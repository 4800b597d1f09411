"""
Tests for journal entries and the Journal ledger.
"""

from datetime import date
from decimal import Decimal

import pytest
from daybook.core.journal import (
    Journal,
    JournalEntry,
    Posting,
    create_entry_id,
    make_entry,
)


class TestJournalEntry:
    def test_make_entry_credits_and_debits(self):
        entry = make_entry("salary", date(2025, 1, 6), 1, "main", "salary_income", Decimal("2000"))

        assert entry.id == "cp:salary:2025-01-06:1"
        assert entry.kind == "salary"
        assert entry.amount == Decimal("2000")
        assert entry.postings[0] == Posting("main", Decimal("2000"))
        assert entry.postings[1] == Posting("salary_income", Decimal("-2000"))
        assert entry.get_accounts() == {"main", "salary_income"}
        assert entry.metadata["generator"] == 1

    def test_entry_must_be_zero_sum(self):
        with pytest.raises(ValueError, match="zero-sum"):
            JournalEntry(
                id="x",
                timestamp=date(2025, 1, 1),
                postings=(Posting("a", Decimal("1")), Posting("b", Decimal("-2"))),
            )

    def test_entry_needs_two_postings(self):
        with pytest.raises(ValueError, match="2 postings"):
            JournalEntry(id="x", timestamp=date(2025, 1, 1), postings=(Posting("a", Decimal("0")),))

    def test_posting_amount_must_be_decimal(self):
        with pytest.raises(ValueError):
            Posting("a", 1.0)  # type: ignore[arg-type]

    def test_entry_id_format(self):
        assert create_entry_id("tithe", date(2025, 12, 10), 3) == "cp:tithe:2025-12-10:3"


class TestJournal:
    @pytest.fixture
    def journal(self):
        journal = Journal()
        journal.post(make_entry("salary", date(2025, 1, 6), 0, "main", "salary_income", Decimal("2000")))
        journal.post(make_entry("transfer", date(2025, 1, 20), 1, "savings", "main", Decimal("500")))
        journal.post(make_entry("salary", date(2025, 2, 6), 0, "main", "salary_income", Decimal("2000")))
        return journal

    def test_duplicate_ids_rejected(self, journal):
        with pytest.raises(ValueError, match="Duplicate"):
            journal.post(make_entry("salary", date(2025, 1, 6), 0, "main", "salary_income", Decimal("1")))

    def test_balance(self, journal):
        assert journal.balance("main") == Decimal("3500")
        assert journal.balance("main", at=date(2025, 1, 31)) == Decimal("1500")
        assert journal.balance("unused") == 0

    def test_trial_balance_sums_to_zero(self, journal):
        trial = journal.trial_balance()
        assert trial == {
            "main": Decimal("3500"),
            "salary_income": Decimal("-4000"),
            "savings": Decimal("500"),
        }
        assert sum(trial.values()) == 0
        assert journal.validate_invariants() == []

    def test_queries(self, journal):
        assert len(journal.get_entries_by_account("savings")) == 1
        assert len(journal.get_entries_by_kind("salary")) == 2
        january = journal.get_entries_by_time_range(date(2025, 1, 1), date(2025, 1, 31))
        assert [e.id for e in january] == [
            "cp:salary:2025-01-06:0",
            "cp:transfer:2025-01-20:1",
        ]

    def test_to_frame(self, journal):
        frame = journal.to_frame()
        assert list(frame.columns) == ["date", "id", "kind", "credit", "debit", "amount"]
        assert len(frame) == 3
        assert frame.iloc[1]["credit"] == "savings"
        assert frame.iloc[1]["debit"] == "main"

    def test_empty_journal_frame(self):
        assert Journal().to_frame().empty
        assert len(Journal()) == 0
