"""
Daybook - Daily Balance Projection Engine

Daybook projects a set of named account balances forward one day at a time,
driven by a declarative list of recurring rules (mortgage payments, interest,
salary, transfers and tithes). Every balance movement is a two-sided journal
entry, so on every simulated day all balances sum to exactly zero; a day that
breaks this fails loudly with a full account dump.

Architecture Overview:
- **BalanceSheet**: Immutable mapping from account name to Decimal balance
- **Generators**: Frozen rule variants (Mortgage, Interest, Salary, Transfer, Tithe)
- **step_day**: Pure one-day transition of (balances, tithe accumulator)
- **simulate / Simulation**: Day-by-day driver producing a History
- **Journal**: Audit trail of every posting made during a run
- **Reporting & Charts**: Console reports, CSV export and Plotly charts

Quick Start:
    ```python
    from datetime import date
    from daybook import Mortgage, Salary, normalize_opening_balances, simulate

    opening = normalize_opening_balances({"main": 10000, "mortgage": -500000})
    generators = [
        Mortgage(deduction_amount="123.45", deduction_day=1,
                 from_account="main", to_account="mortgage"),
        Salary(amount="2000", day=6, to_account="main"),
    ]
    history = simulate(generators, opening, date(2025, 1, 1), days=6)
    history.final().balances["main"]  # Decimal("12000")
    ```

Or from a config file:
    ```python
    from daybook import Simulation

    history = Simulation.from_file("household.yaml").run(days=730)
    ```
"""

# Version information
__version__ = "0.1.0"
__author__ = "Daybook Team"
__description__ = "Daily balance projection engine with double-entry invariants"

from .core import (
    CHARITY_EXPENDITURE,
    GENERATOR_TYPES,
    MORTGAGE_INCOME,
    OPENING_BALANCES,
    SALARY_INCOME,
    BalanceSheet,
    ConfigError,
    Generator,
    History,
    HistoryEntry,
    Interest,
    InvariantViolation,
    Journal,
    JournalEntry,
    K,
    Mortgage,
    PositiveLiabilityError,
    Salary,
    Simulation,
    SimulationConfig,
    StepResult,
    Tithe,
    Transfer,
    ValidationReport,
    load_config,
    normalize_opening_balances,
    simulate,
    step_day,
)
from .reporting import export_account_csv, render_report, render_snapshot

__all__ = [
    # Core classes
    "BalanceSheet",
    "History",
    "HistoryEntry",
    "Journal",
    "JournalEntry",
    "Simulation",
    "SimulationConfig",
    "StepResult",
    "ValidationReport",
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
    "normalize_opening_balances",
    "step_day",
    "simulate",
    "load_config",
    # Well-known accounts
    "SALARY_INCOME",
    "MORTGAGE_INCOME",
    "CHARITY_EXPENDITURE",
    "OPENING_BALANCES",
    # Errors
    "ConfigError",
    "InvariantViolation",
    "PositiveLiabilityError",
    # Reporting
    "render_report",
    "render_snapshot",
    "export_account_csv",
    # Version info
    "__version__",
    "__author__",
    "__description__",
]
