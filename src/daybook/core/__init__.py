"""
Core module for Daybook.

This module contains the balance sheet, the generator definitions and the
daily simulation engine.
"""

from .balances import (
    CHARITY_EXPENDITURE,
    MORTGAGE_INCOME,
    OPENING_BALANCES,
    SALARY_INCOME,
    WELL_KNOWN_ACCOUNTS,
    BalanceSheet,
    normalize_opening_balances,
)
from .config import SimulationConfig, load_config
from .currency import RoundingPolicy, format_amount, quantize, to_decimal
from .engine import (
    StepResult,
    check_accounts,
    check_zero_sum,
    is_balanced,
    simulate,
    step_day,
)
from .errors import ConfigError, InvariantViolation, PositiveLiabilityError
from .generators import (
    GENERATOR_TYPES,
    Generator,
    Interest,
    Mortgage,
    Salary,
    Tithe,
    Transfer,
)
from .history import History, HistoryEntry
from .journal import Journal, JournalEntry, Posting
from .kinds import K
from .simulation import Simulation
from .validation import ValidationReport

__all__ = [
    # Errors
    "ConfigError",
    "InvariantViolation",
    "PositiveLiabilityError",
    # Balances
    "BalanceSheet",
    "normalize_opening_balances",
    "SALARY_INCOME",
    "MORTGAGE_INCOME",
    "CHARITY_EXPENDITURE",
    "OPENING_BALANCES",
    "WELL_KNOWN_ACCOUNTS",
    # Currency
    "RoundingPolicy",
    "quantize",
    "to_decimal",
    "format_amount",
    # Generators
    "K",
    "Generator",
    "GENERATOR_TYPES",
    "Mortgage",
    "Interest",
    "Salary",
    "Transfer",
    "Tithe",
    # Engine
    "StepResult",
    "step_day",
    "simulate",
    "is_balanced",
    "check_zero_sum",
    "check_accounts",
    # History and journal
    "History",
    "HistoryEntry",
    "Journal",
    "JournalEntry",
    "Posting",
    # Config
    "SimulationConfig",
    "load_config",
    "Simulation",
    "ValidationReport",
]
