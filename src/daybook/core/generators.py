"""
Generator definitions for Daybook.

A generator is a recurring rule that fires on a fixed day of every month and
moves money between accounts. The set of variants is closed:

- :class:`Mortgage`: capped payment into a liability account
- :class:`Interest`: monthly accrual on an asset or liability balance
- :class:`Salary`: income deposit that also feeds the tithe accumulator
- :class:`Transfer`: unconditional move between two accounts
- :class:`Tithe`: percentage of the salary accumulated since the last tithe

Generators are frozen once built. Amounts are validated and converted to
Decimal when the instance is constructed, so an invalid rule fails at load
time rather than halfway through a simulation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, ClassVar, Union

from .balances import SALARY_INCOME
from .currency import to_decimal
from .errors import ConfigError
from .kinds import K

__all__ = [
    "Generator",
    "Interest",
    "Mortgage",
    "Salary",
    "Tithe",
    "Transfer",
    "generator_accounts",
]


def _check_day(owner: str, field_name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{owner}: '{field_name}' must be an integer day of month")
    if not 1 <= value <= 31:
        raise ConfigError(f"{owner}: '{field_name}' must be between 1 and 31, got {value}")
    return value


def _check_amount(owner: str, field_name: str, value: Any, *, signed: bool = False) -> Decimal:
    try:
        amount = to_decimal(value)
    except ValueError as exc:
        raise ConfigError(f"{owner}: '{field_name}' {exc}") from exc
    if not signed and amount < 0:
        raise ConfigError(f"{owner}: '{field_name}' must be >= 0, got {amount}")
    return amount


def _check_account(owner: str, field_name: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{owner}: '{field_name}' must be a non-empty account name")
    return value


def _check_distinct(owner: str, first: str, second: str) -> None:
    if first == second:
        raise ConfigError(f"{owner}: source and destination are both '{first}'")


class _GeneratorBase:
    """Shared behaviour; concrete variants are frozen dataclasses."""

    kind: ClassVar[str]

    @property
    def trigger_day(self) -> int:
        return self.day  # type: ignore[attr-defined]

    def fires_on(self, day: date) -> bool:
        """True when the day-of-month of ``day`` matches the trigger day."""
        return day.day == self.trigger_day

    def accounts(self) -> tuple[str, ...]:
        raise NotImplementedError

    def _set(self, name: str, value: Any) -> None:
        object.__setattr__(self, name, value)


@dataclass(frozen=True)
class Mortgage(_GeneratorBase):
    """
    Monthly mortgage payment (kind: 'mortgage').

    On ``deduction_day`` moves ``min(deduction_amount, remaining liability,
    available balance)`` from ``from_account`` into ``to_account``, floored at
    zero. ``to_account`` holds the outstanding loan as a negative balance.
    """

    kind: ClassVar[str] = K.MORTGAGE

    deduction_amount: Decimal
    deduction_day: int
    from_account: str
    to_account: str

    def __post_init__(self):
        owner = "mortgage"
        self._set("deduction_amount", _check_amount(owner, "deduction_amount", self.deduction_amount))
        _check_day(owner, "deduction_day", self.deduction_day)
        _check_account(owner, "from", self.from_account)
        _check_account(owner, "to", self.to_account)
        _check_distinct(owner, self.from_account, self.to_account)

    @property
    def trigger_day(self) -> int:
        return self.deduction_day

    def accounts(self) -> tuple[str, ...]:
        return (self.from_account, self.to_account)


@dataclass(frozen=True)
class Interest(_GeneratorBase):
    """
    Monthly interest accrual (kind: 'interest').

    ``rate`` is an annual percentage. On ``day`` the amount
    ``round(balance * rate / 1200, 2)`` is added to ``account`` and taken from
    ``income_account``. A negative balance accrues negative interest, so a
    loan grows. A zero rate never fires.
    """

    kind: ClassVar[str] = K.INTEREST

    rate: Decimal
    day: int
    account: str
    income_account: str

    def __post_init__(self):
        owner = "interest"
        self._set("rate", _check_amount(owner, "rate", self.rate, signed=True))
        _check_day(owner, "day", self.day)
        _check_account(owner, "account", self.account)
        _check_account(owner, "income_account", self.income_account)
        _check_distinct(owner, self.account, self.income_account)

    def fires_on(self, day: date) -> bool:
        return self.rate != 0 and super().fires_on(day)

    def accounts(self) -> tuple[str, ...]:
        return (self.account, self.income_account)


@dataclass(frozen=True)
class Salary(_GeneratorBase):
    """Monthly salary deposit (kind: 'salary'), paid out of ``salary_income``."""

    kind: ClassVar[str] = K.SALARY

    amount: Decimal
    day: int
    to_account: str

    def __post_init__(self):
        owner = "salary"
        self._set("amount", _check_amount(owner, "amount", self.amount))
        _check_day(owner, "day", self.day)
        _check_account(owner, "to", self.to_account)
        _check_distinct(owner, SALARY_INCOME, self.to_account)

    def accounts(self) -> tuple[str, ...]:
        return (SALARY_INCOME, self.to_account)


@dataclass(frozen=True)
class Transfer(_GeneratorBase):
    """Unclamped monthly transfer (kind: 'transfer')."""

    kind: ClassVar[str] = K.TRANSFER

    amount: Decimal
    day: int
    from_account: str
    to_account: str

    def __post_init__(self):
        owner = "transfer"
        self._set("amount", _check_amount(owner, "amount", self.amount))
        _check_day(owner, "day", self.day)
        _check_account(owner, "from", self.from_account)
        _check_account(owner, "to", self.to_account)
        _check_distinct(owner, self.from_account, self.to_account)

    def accounts(self) -> tuple[str, ...]:
        return (self.from_account, self.to_account)


@dataclass(frozen=True)
class Tithe(_GeneratorBase):
    """
    Monthly tithe (kind: 'tithe').

    Pays ``percentage`` percent of the salary accumulated since the last
    positive tithe, rounded to 2 decimal places.
    """

    kind: ClassVar[str] = K.TITHE

    percentage: Decimal
    day: int
    from_account: str
    to_account: str

    def __post_init__(self):
        owner = "tithe"
        pct = _check_amount(owner, "percentage", self.percentage)
        if pct > 100:
            raise ConfigError(f"{owner}: 'percentage' must be <= 100, got {pct}")
        self._set("percentage", pct)
        _check_day(owner, "day", self.day)
        _check_account(owner, "from", self.from_account)
        _check_account(owner, "to", self.to_account)
        _check_distinct(owner, self.from_account, self.to_account)

    def accounts(self) -> tuple[str, ...]:
        return (self.from_account, self.to_account)


Generator = Union[Mortgage, Interest, Salary, Transfer, Tithe]

GENERATOR_TYPES: dict[str, type] = {
    K.MORTGAGE: Mortgage,
    K.INTEREST: Interest,
    K.SALARY: Salary,
    K.TRANSFER: Transfer,
    K.TITHE: Tithe,
}


def describe(generator: Generator, index: int | None = None) -> str:
    """Short label used in error messages, e.g. ``generators[2] (tithe)``."""
    if index is None:
        return f"{generator.kind} generator"
    return f"generators[{index}] ({generator.kind})"


def generator_accounts(generators: tuple[Generator, ...] | list[Generator]) -> set[str]:
    """All account names referenced by a generator set."""
    names: set[str] = set()
    for generator in generators:
        names.update(generator.accounts())
    return names
