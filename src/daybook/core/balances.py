"""
Balance sheet value type and opening balance normalization.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from decimal import Decimal
from typing import Any

from .currency import ZERO, to_decimal
from .errors import ConfigError

SALARY_INCOME = "salary_income"
MORTGAGE_INCOME = "mortgage_income"
CHARITY_EXPENDITURE = "charity_expenditure"
OPENING_BALANCES = "opening_balances"

# Accounts that always exist, starting at zero, so every generator has a
# counter-account to post against.
WELL_KNOWN_ACCOUNTS: tuple[str, ...] = (
    SALARY_INCOME,
    MORTGAGE_INCOME,
    CHARITY_EXPENDITURE,
)


class BalanceSheet(Mapping[str, Decimal]):
    """
    Immutable mapping from account name to signed Decimal balance.

    Each simulated day produces a new sheet; a sheet is never changed after
    construction, so snapshots held in a History stay as they were recorded.
    Positive balances are assets, negative balances are liabilities or income
    sources, and a consistent sheet always totals exactly zero.
    """

    __slots__ = ("_balances",)

    def __init__(self, balances: Mapping[str, Any] | None = None):
        converted: dict[str, Decimal] = {}
        for name, value in (balances or {}).items():
            if not isinstance(name, str) or not name:
                raise ConfigError(f"account names must be non-empty strings: {name!r}")
            try:
                converted[name] = to_decimal(value)
            except ValueError as exc:
                raise ConfigError(f"account '{name}': {exc}") from exc
        self._balances = converted

    def __getitem__(self, name: str) -> Decimal:
        return self._balances[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._balances)

    def __len__(self) -> int:
        return len(self._balances)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, BalanceSheet):
            return self._balances == other._balances
        if isinstance(other, Mapping):
            return self._balances == dict(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def total(self) -> Decimal:
        """Sum of all balances; zero for a consistent sheet."""
        return sum(self._balances.values(), ZERO)

    def require(self, name: str, context: str = "") -> Decimal:
        """
        Look up an account that a generator needs.

        Raises:
            ConfigError: If the account does not exist
        """
        try:
            return self._balances[name]
        except KeyError:
            where = f" (referenced by {context})" if context else ""
            raise ConfigError(f"unknown account '{name}'{where}") from None

    def to_dict(self) -> dict[str, Decimal]:
        """Return a mutable copy of the balances."""
        return dict(self._balances)

    def __repr__(self) -> str:
        inner = ", ".join(f"{k!r}: {str(v)!r}" for k, v in sorted(self._balances.items()))
        return f"BalanceSheet({{{inner}}})"


def normalize_opening_balances(raw: Mapping[str, Any]) -> BalanceSheet:
    """
    Build the opening balance sheet so that it already totals zero.

    Missing well-known accounts are added at zero, then a synthetic
    ``opening_balances`` account takes the negated sum of everything else.
    An ``opening_balances`` entry already present in ``raw`` is ignored and
    recomputed. ``raw`` is not modified.

    **Example:**
        ```python
        sheet = normalize_opening_balances({"main": 100, "mortgage": -400})
        sheet["opening_balances"]  # Decimal("300")
        sheet.total()              # Decimal("0")
        ```
    """
    balances = BalanceSheet(raw).to_dict()
    for name in WELL_KNOWN_ACCOUNTS:
        balances.setdefault(name, ZERO)

    balances.pop(OPENING_BALANCES, None)
    balances[OPENING_BALANCES] = -sum(balances.values(), ZERO)
    return BalanceSheet(balances)
