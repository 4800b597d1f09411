"""
Error classes for Daybook.

This module defines the exception classes raised by the configuration loader,
the generator definitions and the simulation engine. None of them are retried:
a simulation is deterministic, so a failing run fails the same way every time.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from typing import Any


class ConfigError(Exception):
    """
    Configuration error during loading, validation or the first use of an account.

    **Common Causes:**
    - Malformed YAML/JSON documents (missing sections, wrong types)
    - Invalid generator parameters (day outside 1..31, negative amounts)
    - A generator referencing an account that does not exist
    - A negative number of days to simulate

    **Example Usage:**
        ```python
        from daybook.core.errors import ConfigError
        from daybook.core.generators import Salary

        try:
            Salary(amount="2000", day=42, to_account="main")
        except ConfigError as e:
            print(f"Configuration error: {e}")
        ```
    """

    pass


def format_balances(balances: Mapping[str, Decimal]) -> str:
    """Render every account and its balance, one per line, sorted by name."""
    if not balances:
        return "  (no accounts)"
    width = max(len(name) for name in balances)
    lines = [f"  {name:<{width}}  {balances[name]}" for name in sorted(balances)]
    total = sum(balances.values(), Decimal("0"))
    lines.append(f"  {'TOTAL':<{width}}  {total}")
    return "\n".join(lines)


class InvariantViolation(Exception):
    """
    Raised when the balance sheet breaks a bookkeeping invariant.

    The message always carries the full account dump for the offending day, so
    the failure can be diagnosed from the traceback alone.

    Attributes:
        day: Simulated date on which the violation was detected
        balances: Snapshot of every account balance at that point
    """

    def __init__(
        self, message: str, day: date | None, balances: Mapping[str, Decimal]
    ):
        self.day = day
        self.balances = dict(balances)
        super().__init__(self._fmt(message))

    def _fmt(self, msg: str) -> str:
        when = self.day.isoformat() if self.day is not None else "<opening>"
        return f"[{when}] {msg}\n{format_balances(self.balances)}"


class PositiveLiabilityError(InvariantViolation):
    """
    Raised when a mortgage generator finds its liability account above zero.

    Attributes:
        generator: The mortgage generator that fired
    """

    def __init__(
        self,
        message: str,
        day: date | None,
        balances: Mapping[str, Decimal],
        generator: Any = None,
    ):
        self.generator = generator
        super().__init__(message, day, balances)
