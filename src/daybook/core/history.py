"""
Simulation history: the ordered record of daily balance sheet snapshots.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from datetime import date, timedelta
from decimal import Decimal
from typing import NamedTuple, overload

import pandas as pd

from .balances import BalanceSheet
from .currency import ZERO
from .journal import Journal


class HistoryEntry(NamedTuple):
    """Balance sheet at the end of one simulated day."""

    date: date
    balances: BalanceSheet


def is_month_end(day: date) -> bool:
    return (day + timedelta(days=1)).day == 1


def is_month_start(day: date) -> bool:
    return day.day == 1


class History(Sequence[HistoryEntry]):
    """
    Ordered, read-only sequence of daily snapshots produced by one run.

    Besides the snapshots it keeps the run's journal, the start date the
    opening balances describe, and the tithe accumulator left at the end.

    **Example:**
        ```python
        history = Simulation.from_file("household.yaml").run(365)

        for entry in history.month_ends():
            print(entry.date, entry.balances["main"])

        history.account_series("main").tail()
        ```
    """

    def __init__(
        self,
        entries: Sequence[HistoryEntry],
        *,
        journal: Journal | None = None,
        start_date: date | None = None,
        accumulator: Decimal = ZERO,
    ):
        self._entries: tuple[HistoryEntry, ...] = tuple(entries)
        self.journal = journal if journal is not None else Journal()
        self.start_date = start_date
        self.accumulator = accumulator
        self._by_date = {entry.date: entry for entry in self._entries}

    @overload
    def __getitem__(self, index: int) -> HistoryEntry: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[HistoryEntry, ...]: ...

    def __getitem__(self, index):
        return self._entries[index]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(self._entries)

    @property
    def dates(self) -> list[date]:
        return [entry.date for entry in self._entries]

    def on(self, day: date) -> HistoryEntry:
        """
        Snapshot for a specific date.

        Raises:
            KeyError: If the date was not simulated
        """
        try:
            return self._by_date[day]
        except KeyError:
            raise KeyError(f"{day.isoformat()} is outside the simulated range") from None

    def final(self) -> HistoryEntry:
        """
        Snapshot for the last simulated day.

        Raises:
            IndexError: If nothing was simulated
        """
        if not self._entries:
            raise IndexError("history is empty")
        return self._entries[-1]

    def month_ends(self) -> list[HistoryEntry]:
        return [entry for entry in self._entries if is_month_end(entry.date)]

    def month_starts(self) -> list[HistoryEntry]:
        return [entry for entry in self._entries if is_month_start(entry.date)]

    def accounts(self) -> list[str]:
        """Sorted account names across all snapshots."""
        names: set[str] = set()
        for entry in self._entries:
            names.update(entry.balances)
        return sorted(names)

    def account_series(self, account: str) -> pd.Series:
        """
        Daily balances of one account as a Decimal-valued Series.

        Raises:
            KeyError: If the account does not appear in the history
        """
        if self._entries and account not in self._entries[0].balances:
            raise KeyError(f"unknown account '{account}'")
        index = pd.DatetimeIndex([pd.Timestamp(d) for d in self.dates], name="date")
        values = [entry.balances[account] for entry in self._entries]
        return pd.Series(values, index=index, name=account, dtype=object)

    def to_frame(self) -> pd.DataFrame:
        """One row per day, one Decimal-valued column per account."""
        columns = self.accounts()
        index = pd.DatetimeIndex([pd.Timestamp(d) for d in self.dates], name="date")
        data = {
            name: [entry.balances.get(name, ZERO) for entry in self._entries]
            for name in columns
        }
        return pd.DataFrame(data, index=index, columns=columns, dtype=object)

    def __repr__(self) -> str:
        if not self._entries:
            return "History(empty)"
        return (
            f"History({self._entries[0].date.isoformat()}..{self._entries[-1].date.isoformat()}, "
            f"days={len(self._entries)})"
        )
