"""
Tests for console reports and CSV export.
"""

from datetime import date
from decimal import Decimal

import pandas as pd
import pytest
from daybook.core.balances import normalize_opening_balances
from daybook.core.engine import simulate
from daybook.core.generators import Salary
from daybook.core.history import History
from daybook.reporting import (
    export_account_csv,
    render_report,
    render_snapshot,
    select_entries,
)


@pytest.fixture
def history():
    sheet = normalize_opening_balances({"main": Decimal("1234.5")})
    return simulate([Salary("1000", 15, "main")], sheet, date(2025, 1, 1), 45)


class TestSelectEntries:
    def test_selections(self, history):
        assert len(select_entries(history, "daily")) == 45
        assert [e.date for e in select_entries(history, "month-end")] == [date(2025, 1, 31)]
        assert [e.date for e in select_entries(history, "month-start")] == [date(2025, 2, 1)]
        assert [e.date for e in select_entries(history, "final")] == [date(2025, 2, 15)]

    def test_final_of_empty_history(self):
        assert select_entries(History([]), "final") == []

    def test_unknown_selection(self, history):
        with pytest.raises(ValueError, match="weekly"):
            select_entries(history, "weekly")


class TestRender:
    def test_snapshot_layout(self, history):
        text = render_snapshot(history.on(date(2025, 1, 31)), "£")
        lines = text.splitlines()

        assert lines[0] == "2025-01-31"
        names = [line.split()[0] for line in lines[1:]]
        assert names == sorted(names[:-1]) + ["total"]
        assert "£2,234.50" in text
        assert "-£1,000.00" in text
        assert lines[-1].split()[-1] == "£0.00"
        # amounts are right-aligned
        assert len({len(line) for line in lines[1:]}) == 1

    def test_report_joins_snapshots(self, history):
        report = render_report(history, "", "month-end")
        assert report.startswith("2025-01-31")
        assert "\n\n" not in report

        daily = render_report(history, "", "daily")
        assert daily.count("\n\n") == 44


def test_export_account_csv(history, tmp_path):
    out = export_account_csv(history, "main", tmp_path / "main.csv")

    frame = pd.read_csv(out, dtype=str)
    assert list(frame.columns) == ["date", "main"]
    assert len(frame) == 45
    assert frame.iloc[0].tolist() == ["2025-01-02", "1234.50"]
    assert frame.iloc[-1].tolist() == ["2025-02-15", "3234.50"]


def test_export_unknown_account(history, tmp_path):
    with pytest.raises(KeyError):
        export_account_csv(history, "ghost", tmp_path / "ghost.csv")
