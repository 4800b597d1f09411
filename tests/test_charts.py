"""
Tests for chart helpers.
"""

from datetime import date

import pytest
from daybook.charts import account_balances_chart, tidy_balances
from daybook.core.balances import normalize_opening_balances
from daybook.core.engine import simulate
from daybook.core.generators import Transfer


@pytest.fixture
def history():
    sheet = normalize_opening_balances({"main": 100, "savings": 0})
    return simulate([Transfer("10", 5, "main", "savings")], sheet, date(2025, 1, 1), 40)


def test_tidy_balances_long_format(history):
    tidy = tidy_balances(history, ["main", "savings"])

    assert list(tidy.columns) == ["date", "account", "balance"]
    assert len(tidy) == 80
    last_savings = tidy[tidy["account"] == "savings"]["balance"].iloc[-1]
    assert last_savings == pytest.approx(20.0)


def test_tidy_balances_unknown_account(history):
    with pytest.raises(KeyError, match="ghost"):
        tidy_balances(history, ["main", "ghost"])


def test_tidy_balances_empty_history():
    sheet = normalize_opening_balances({"main": 100})
    empty = simulate([], sheet, date(2025, 1, 1), 0)

    tidy = tidy_balances(empty, ["main"])

    assert list(tidy.columns) == ["date", "account", "balance"]
    assert tidy.empty


def test_account_balances_chart(history):
    pytest.importorskip("plotly")

    fig, tidy = account_balances_chart(history, ["main"], currency="€")

    assert len(fig.data) == 1
    assert fig.layout.yaxis.title.text == "Balance (€)"
    assert set(tidy["account"]) == {"main"}
