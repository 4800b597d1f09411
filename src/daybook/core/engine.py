"""
Daily simulation engine for Daybook.

The engine is a strict left fold over calendar days. :func:`step_day` turns
one day's balance sheet and tithe accumulator into the next day's, and
:func:`simulate` drives it across a fixed number of days, recording each
resulting sheet in a :class:`~daybook.core.history.History`.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal

from .balances import SALARY_INCOME, BalanceSheet
from .currency import ZERO, format_amount, quantize
from .errors import ConfigError, InvariantViolation, PositiveLiabilityError
from .generators import (
    Generator,
    Interest,
    Mortgage,
    Salary,
    Tithe,
    Transfer,
    describe,
)
from .history import History, HistoryEntry
from .journal import Journal, JournalEntry, make_entry

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")
TWELVE_HUNDRED = Decimal("1200")


@dataclass(frozen=True)
class StepResult:
    """
    Outcome of one simulated day.

    Attributes:
        balances: Balance sheet at the end of the day
        accumulator: Salary accumulated since the last positive tithe
        entries: Journal entries posted during the day, in application order
        fired: Indices of the generators that moved money
    """

    balances: BalanceSheet
    accumulator: Decimal
    entries: tuple[JournalEntry, ...] = ()
    fired: tuple[int, ...] = field(default=())


def is_balanced(balances: BalanceSheet) -> bool:
    """Zero-sum check: the sheet must total exactly zero."""
    return balances.total() == 0


def check_zero_sum(balances: BalanceSheet, day: date | None) -> None:
    """
    Raise if the sheet does not total exactly zero.

    The full account dump is logged before raising so it also reaches the log
    when the exception is handled upstream.

    Raises:
        InvariantViolation: If the total is not zero
    """
    if is_balanced(balances):
        return
    total = balances.total()
    when = day.isoformat() if day is not None else "opening"
    logger.error("Balance sheet does not sum to zero on %s (total %s)", when, total)
    for name in sorted(balances):
        logger.error("  %s: %s", name, balances[name])
    raise InvariantViolation(f"balances sum to {total}, expected 0", day, balances)


def check_accounts(generators: Sequence[Generator], balances: BalanceSheet) -> None:
    """
    Verify that every account referenced by a generator exists.

    Raises:
        ConfigError: Naming the first generator and account that are missing
    """
    for index, generator in enumerate(generators):
        for name in generator.accounts():
            balances.require(name, describe(generator, index))


def mortgage_deduction(
    deduction_amount: Decimal, from_balance: Decimal, to_balance: Decimal
) -> Decimal:
    """
    Clamp a mortgage payment.

    Never pays more than the contractual amount, the remaining liability
    (``-to_balance``) or the available balance, and never a negative amount.
    """
    return max(ZERO, min(deduction_amount, -to_balance, from_balance))


def monthly_interest(balance: Decimal, annual_rate: Decimal) -> Decimal:
    """One month of interest on ``balance`` at ``annual_rate`` percent, rounded to cents."""
    return quantize(balance * annual_rate / TWELVE_HUNDRED)


def tithe_amount(accumulator: Decimal, percentage: Decimal) -> Decimal:
    """``percentage`` percent of the accumulated salary, rounded to cents."""
    return quantize(accumulator * percentage / HUNDRED)


def step_day(
    generators: Sequence[Generator],
    balances: BalanceSheet,
    day: date,
    accumulator: Decimal = ZERO,
) -> StepResult:
    """
    Advance the balance sheet and accumulator by one calendar day.

    Generators whose trigger day equals ``day.day`` are applied in declaration
    order. Each one sees the balances left by those before it on the same day.
    ``balances`` is not modified; a new sheet is returned.

    Args:
        generators: Ordered generator set
        balances: Sheet at the end of the previous day
        day: The day being simulated (already advanced)
        accumulator: Salary accumulated since the last positive tithe

    Returns:
        StepResult with the new sheet, accumulator and journal entries

    Raises:
        ConfigError: If a firing generator references an unknown account
        PositiveLiabilityError: If a mortgage liability account is above zero
        InvariantViolation: If the resulting sheet does not sum to zero
    """
    working = balances.to_dict()
    entries: list[JournalEntry] = []
    fired: list[int] = []

    def lookup(name: str, context: str) -> Decimal:
        if name not in working:
            raise ConfigError(f"unknown account '{name}' (referenced by {context})")
        return working[name]

    def move(index: int, generator: Generator, credit: str, debit: str, amount: Decimal) -> None:
        context = describe(generator, index)
        lookup(credit, context)
        lookup(debit, context)
        working[credit] += amount
        working[debit] -= amount
        entries.append(make_entry(generator.kind, day, index, credit, debit, amount))
        fired.append(index)
        logger.debug(
            "%s %s: %s -> %s %s", day.isoformat(), context, debit, credit, amount
        )

    for index, generator in enumerate(generators):
        if not generator.fires_on(day):
            continue
        context = describe(generator, index)

        if isinstance(generator, Mortgage):
            to_balance = lookup(generator.to_account, context)
            from_balance = lookup(generator.from_account, context)
            if to_balance > 0:
                raise PositiveLiabilityError(
                    f"{context}: liability account '{generator.to_account}' "
                    f"has positive balance {to_balance}",
                    day,
                    working,
                    generator,
                )
            amount = mortgage_deduction(
                generator.deduction_amount, from_balance, to_balance
            )
            if amount > 0:
                move(index, generator, generator.to_account, generator.from_account, amount)

        elif isinstance(generator, Interest):
            interest = monthly_interest(lookup(generator.account, context), generator.rate)
            if interest != 0:
                move(index, generator, generator.account, generator.income_account, interest)

        elif isinstance(generator, Salary):
            move(index, generator, generator.to_account, SALARY_INCOME, generator.amount)
            accumulator += generator.amount

        elif isinstance(generator, Transfer):
            move(index, generator, generator.to_account, generator.from_account, generator.amount)

        elif isinstance(generator, Tithe):
            amount = tithe_amount(accumulator, generator.percentage)
            if amount > 0:
                move(index, generator, generator.to_account, generator.from_account, amount)
                accumulator = ZERO

        else:
            raise TypeError(f"unsupported generator type: {type(generator).__name__}")

    result = BalanceSheet(working)
    check_zero_sum(result, day)
    return StepResult(
        balances=result,
        accumulator=accumulator,
        entries=tuple(entries),
        fired=tuple(fired),
    )


def simulate(
    generators: Sequence[Generator],
    initial: BalanceSheet,
    start_date: date,
    days: int,
) -> History:
    """
    Run the daily step function for ``days`` consecutive days.

    The first simulated day is ``start_date + 1``; ``start_date`` itself is the
    day the opening balances describe. The tithe accumulator starts at zero.

    **Example:**
        ```python
        from datetime import date
        from daybook.core.balances import normalize_opening_balances
        from daybook.core.engine import simulate
        from daybook.core.generators import Salary

        sheet = normalize_opening_balances({"main": 100})
        history = simulate([Salary(2000, 6, "main")], sheet, date(2025, 1, 1), 30)
        history.final().balances["main"]  # Decimal("2100")
        ```

    Args:
        generators: Ordered generator set
        initial: Opening sheet; must already sum to zero
        start_date: Date the opening balances describe
        days: Number of days to simulate (0 yields an empty history)

    Returns:
        History with one entry per simulated day and the run's journal

    Raises:
        ConfigError: If ``days`` is negative or a generator account is missing
        InvariantViolation: If any sheet, including the opening one, is unbalanced
    """
    if isinstance(days, bool) or not isinstance(days, int):
        raise ConfigError(f"days must be an integer, got {days!r}")
    if days < 0:
        raise ConfigError(f"days must be >= 0, got {days}")

    generators = tuple(generators)
    check_accounts(generators, initial)
    check_zero_sum(initial, None)

    logger.info(
        "Simulating %d days from %s with %d generators",
        days,
        start_date.isoformat(),
        len(generators),
    )

    journal = Journal()
    entries: list[HistoryEntry] = []
    balances = initial
    accumulator = ZERO
    day = start_date
    for _ in range(days):
        day = day + timedelta(days=1)
        result = step_day(generators, balances, day, accumulator)
        for entry in result.entries:
            journal.post(entry)
        balances = result.balances
        accumulator = result.accumulator
        entries.append(HistoryEntry(day, balances))

    if entries:
        logger.info(
            "Simulation finished on %s: %d journal entries, accumulator %s",
            day.isoformat(),
            len(journal),
            format_amount(accumulator),
        )
    return History(
        entries,
        journal=journal,
        start_date=start_date,
        accumulator=accumulator,
    )
