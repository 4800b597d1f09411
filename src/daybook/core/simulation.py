"""
Simulation facade tying a loaded config to the daily engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .balances import BalanceSheet, normalize_opening_balances
from .config import SimulationConfig, load_config
from .engine import check_accounts, is_balanced, simulate
from .errors import ConfigError
from .generators import Interest, Mortgage, describe
from .history import History
from .validation import ValidationReport


@dataclass
class Simulation:
    """
    A configured simulation ready to run.

    This class owns a :class:`SimulationConfig` and the normalized opening
    balance sheet derived from it. Each call to :meth:`run` recomputes the
    full history from the start date; nothing is cached between runs.

    Attributes:
        config: Validated simulation input
        opening_balances: Opening sheet with well-known accounts and the
            synthetic ``opening_balances`` account added

    **Example:**
        ```python
        from daybook import Simulation

        sim = Simulation.from_file("household.yaml")
        history = sim.run(days=730)
        print(history.final().balances["main"])
        ```
    """

    config: SimulationConfig
    opening_balances: BalanceSheet = field(init=False)

    def __post_init__(self):
        self.opening_balances = normalize_opening_balances(self.config.accounts)

    @classmethod
    def from_config(cls, config: SimulationConfig) -> Simulation:
        return cls(config)

    @classmethod
    def from_file(cls, path: str | Path, *, format: str | None = None) -> Simulation:
        """Load a YAML/JSON config file and build a simulation from it."""
        return cls(load_config(path, format=format))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Simulation:
        return cls(load_config(data))

    @property
    def currency(self) -> str:
        return self.config.currency

    def run(self, days: int | None = None) -> History:
        """
        Simulate ``days`` days after the configured start date.

        Args:
            days: Number of days; defaults to the config's ``horizon_days``

        Raises:
            ConfigError: For negative day counts or missing accounts
            InvariantViolation: If any day's balances do not sum to zero
        """
        if days is None:
            days = self.config.horizon_days
        return simulate(
            self.config.generators,
            self.opening_balances,
            self.config.start_date,
            days,
        )

    def validate(self) -> ValidationReport:
        """Check the config without simulating it."""
        report = ValidationReport(
            source=self.config.source,
            accounts=sorted(self.opening_balances),
            generator_count=len(self.config.generators),
        )

        try:
            check_accounts(self.config.generators, self.opening_balances)
        except ConfigError as e:
            report.errors.append(str(e))
        if not is_balanced(self.opening_balances):
            report.errors.append(
                f"opening balances sum to {self.opening_balances.total()}"
            )

        for index, generator in enumerate(self.config.generators):
            label = describe(generator, index)
            if generator.trigger_day > 28:
                report.warnings.append(
                    f"{label} fires on day {generator.trigger_day}; "
                    "months without that day are skipped"
                )
            if isinstance(generator, Interest) and generator.rate == 0:
                report.warnings.append(f"{label} has a zero rate and never fires")
            if isinstance(generator, Mortgage):
                opening = self.opening_balances.get(generator.to_account)
                if opening is not None and opening > 0:
                    report.errors.append(
                        f"{label}: liability account '{generator.to_account}' "
                        f"opens with positive balance {opening}"
                    )

        if self.config.horizon_days == 0:
            report.warnings.append("horizon_days is 0; runs produce no history")

        return report
