"""
Console reports and tabular export for simulation histories.

Everything here reads a :class:`~daybook.core.history.History`; nothing feeds
back into the engine.
"""

from __future__ import annotations

from pathlib import Path

from .core.currency import format_amount, quantize
from .core.history import History, HistoryEntry

REPORT_CHOICES = ("daily", "month-end", "month-start", "final")


def select_entries(history: History, when: str = "month-end") -> list[HistoryEntry]:
    """
    Pick the snapshots a report shows.

    Args:
        history: Simulation history
        when: One of ``daily``, ``month-end``, ``month-start`` or ``final``

    Raises:
        ValueError: For an unknown ``when``
    """
    if when == "daily":
        return list(history)
    if when == "month-end":
        return history.month_ends()
    if when == "month-start":
        return history.month_starts()
    if when == "final":
        return [history.final()] if len(history) else []
    raise ValueError(f"Unsupported report selection: {when} (expected one of {REPORT_CHOICES})")


def render_snapshot(entry: HistoryEntry, symbol: str = "") -> str:
    """Render one day's balances, accounts sorted by name, with a total line."""
    balances = entry.balances
    width = max([len(name) for name in balances] + [len("total")])
    rendered = {name: format_amount(balances[name], symbol) for name in balances}
    total = format_amount(balances.total(), symbol)
    amount_width = max([len(v) for v in rendered.values()] + [len(total)])

    lines = [entry.date.isoformat()]
    for name in sorted(balances):
        lines.append(f"  {name:<{width}}  {rendered[name]:>{amount_width}}")
    lines.append(f"  {'total':<{width}}  {total:>{amount_width}}")
    return "\n".join(lines)


def render_report(history: History, symbol: str = "", when: str = "month-end") -> str:
    """Join the selected snapshots into a printable report."""
    return "\n\n".join(
        render_snapshot(entry, symbol) for entry in select_entries(history, when)
    )


def export_account_csv(history: History, account: str, path: str | Path) -> Path:
    """
    Write one account's daily balances to CSV.

    The file has a ``date`` column and a column named after the account,
    with amounts rendered to exactly 2 decimal places.

    Raises:
        KeyError: If the account does not appear in the history
    """
    series = history.account_series(account).map(lambda v: f"{quantize(v):.2f}")
    frame = series.to_frame()
    frame.index = frame.index.strftime("%Y-%m-%d")
    out = Path(path)
    frame.to_csv(out, index_label="date")
    return out
