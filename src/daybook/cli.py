"""
Command-line interface for Daybook.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from daybook import __version__
from daybook.core.errors import ConfigError, InvariantViolation
from daybook.core.simulation import Simulation
from daybook.reporting import REPORT_CHOICES, export_account_csv, render_report

EXAMPLE_CONFIG = """\
# Daybook example: a salaried household paying down a mortgage.
start_date: 2025-01-01
currency: "£"
horizon_days: 730

accounts:
  main: 10000.00
  savings: 2500.00
  mortgage: -250000.00

# Generators fire in this order when they share a day.
generators:
  - kind: salary
    amount: 3200.00
    day: 25
    to: main
  - kind: mortgage
    deduction_amount: 1150.00
    deduction_day: 1
    from: main
    to: mortgage
  - kind: interest
    rate: 4.5
    day: 1
    account: mortgage
    income_account: mortgage_income
  - kind: transfer
    amount: 400.00
    day: 26
    from: main
    to: savings
  - kind: tithe
    percentage: 10
    day: 28
    from: main
    to: charity_expenditure
"""

EXIT_CONFIG_ERROR = 1
EXIT_INVARIANT_VIOLATION = 3


def _load(args) -> Simulation:
    return Simulation.from_file(args.config)


def cmd_example(_) -> int:
    """Print a sample YAML config."""
    sys.stdout.write(EXAMPLE_CONFIG)
    return 0


def cmd_validate(args) -> int:
    """Validate a config file without simulating it."""
    sim = _load(args)
    report = sim.validate()
    if args.format == "json":
        json.dump(report.to_dict(), sys.stdout, indent=2, ensure_ascii=False)
        sys.stdout.write("\n")
    else:
        print(str(report))
    return report.get_exit_code()


def cmd_run(args) -> int:
    """Simulate and print balances."""
    sim = _load(args)
    history = sim.run(args.days)
    report = render_report(history, sim.currency, args.report)
    if report:
        print(report)
    return 0


def cmd_export(args) -> int:
    """Simulate and export one account's series to CSV or an HTML chart."""
    sim = _load(args)
    if args.account not in sim.opening_balances:
        raise ConfigError(f"unknown account '{args.account}'")
    history = sim.run(args.days)

    if args.format == "csv":
        export_account_csv(history, args.account, args.output)
    else:
        from daybook.charts import account_balances_chart, save_chart

        fig, _ = account_balances_chart(history, [args.account], sim.currency)
        save_chart(fig, args.output, format="html")

    print(f"Results saved to {args.output}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="daybook", description="Daybook - daily balance projection engine"
    )

    parser.add_argument("--version", action="version", version=f"Daybook {__version__}")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )

    subparsers = parser.add_subparsers(
        dest="cmd", required=True, help="Available commands"
    )

    # Example command
    example_parser = subparsers.add_parser("example", help="Print a sample YAML config")
    example_parser.set_defaults(func=cmd_example)

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a config file")
    validate_parser.add_argument(
        "-c", "--config", required=True, help="Config file (YAML or JSON)"
    )
    validate_parser.add_argument(
        "--format", choices=["human", "json"], default="human", help="Output format"
    )
    validate_parser.set_defaults(func=cmd_validate)

    # Run command
    run_parser = subparsers.add_parser("run", help="Simulate and print balances")
    run_parser.add_argument(
        "-c", "--config", required=True, help="Config file (YAML or JSON)"
    )
    run_parser.add_argument(
        "--days", type=int, default=None, help="Days to simulate (default: horizon_days)"
    )
    run_parser.add_argument(
        "--report",
        choices=REPORT_CHOICES,
        default="month-end",
        help="Which days to print (default: month-end)",
    )
    run_parser.set_defaults(func=cmd_run)

    # Export command
    export_parser = subparsers.add_parser(
        "export", help="Export one account's balances as CSV or an HTML chart"
    )
    export_parser.add_argument(
        "-c", "--config", required=True, help="Config file (YAML or JSON)"
    )
    export_parser.add_argument("--account", required=True, help="Account to export")
    export_parser.add_argument("-o", "--output", required=True, help="Output file")
    export_parser.add_argument(
        "--days", type=int, default=None, help="Days to simulate (default: horizon_days)"
    )
    export_parser.add_argument(
        "--format", choices=["csv", "html"], default="csv", help="Output format"
    )
    export_parser.set_defaults(func=cmd_export)

    return parser


def run(argv: list[str] | None = None) -> int:
    """Parse ``argv`` and execute the command, returning the exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return args.func(args)
    except (ConfigError, FileNotFoundError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except InvariantViolation as e:
        print(f"Invariant violation: {e}", file=sys.stderr)
        return EXIT_INVARIANT_VIOLATION


def main() -> None:
    """Main CLI entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
