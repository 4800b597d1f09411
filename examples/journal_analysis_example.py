#!/usr/bin/env python3
"""
Journal Analysis Example

This example demonstrates the journal that Daybook keeps for every run:
- One two-posting entry per balance movement
- Per-account reconciliation of opening balance, movements and final balance
- Time-range and per-kind queries over the audit trail
"""

from datetime import date

from daybook import Interest, Mortgage, Salary, Tithe, Transfer
from daybook import normalize_opening_balances, simulate


def main():
    """Run a two-year household projection and inspect its journal."""
    print("=== Daybook Journal Analysis Example ===\n")

    opening = normalize_opening_balances(
        {"main": 10000, "savings": 2500, "mortgage": -250000}
    )
    # Interest is charged before the payment on the 1st
    generators = [
        Salary(amount="3200", day=25, to_account="main"),
        Interest(rate="4.5", day=1, account="mortgage", income_account="mortgage_income"),
        Mortgage(
            deduction_amount="1150", deduction_day=1,
            from_account="main", to_account="mortgage",
        ),
        Transfer(amount="400", day=26, from_account="main", to_account="savings"),
        Tithe(percentage="10", day=28, from_account="main", to_account="charity_expenditure"),
    ]

    history = simulate(generators, opening, date(2025, 1, 1), days=730)
    journal = history.journal
    final = history.final().balances

    print(f"Simulated {len(history)} days, {len(journal)} journal entries\n")

    print("Reconciliation (opening + movements = final):")
    for account in sorted(opening):
        movement = journal.balance(account)
        print(f"  {account:<20} {opening[account]:>14} {movement:>+14} = {final[account]:>14}")

    print("\nEntries per kind:")
    for kind in ("salary", "interest", "mortgage", "transfer", "tithe"):
        print(f"  {kind:<10} {len(journal.get_entries_by_kind(kind))}")

    print("\nFirst quarter of 2026:")
    for entry in journal.get_entries_by_time_range(date(2026, 1, 1), date(2026, 3, 31)):
        print(f"  {entry.timestamp}  {entry.kind:<9} {entry.amount:>10}")

    print("\nJournal as a DataFrame:")
    print(journal.to_frame().tail())


if __name__ == "__main__":
    main()
