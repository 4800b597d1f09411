"""Utilities for loading simulation configs from YAML/JSON sources."""

from __future__ import annotations

import json
import logging
import warnings
from collections.abc import Mapping
from copy import deepcopy
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from .balances import (
    CHARITY_EXPENDITURE,
    MORTGAGE_INCOME,
    OPENING_BALANCES,
    WELL_KNOWN_ACCOUNTS,
)
from .currency import to_decimal
from .errors import ConfigError
from .generators import GENERATOR_TYPES, Generator
from .kinds import K

__all__ = [
    "DEFAULT_CURRENCY",
    "DEFAULT_HORIZON_DAYS",
    "SimulationConfig",
    "load_config",
]

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "€"
DEFAULT_HORIZON_DAYS = 365

_TOP_LEVEL_KEYS = {"start_date", "currency", "horizon_days", "accounts", "generators"}

# kind -> (config key -> constructor argument, required keys, defaults)
_FIELDS: dict[str, tuple[dict[str, str], set[str], dict[str, str]]] = {
    K.MORTGAGE: (
        {
            "deduction_amount": "deduction_amount",
            "deduction_day": "deduction_day",
            "from": "from_account",
            "to": "to_account",
        },
        {"deduction_amount", "deduction_day", "from", "to"},
        {},
    ),
    K.INTEREST: (
        {
            "rate": "rate",
            "day": "day",
            "account": "account",
            "income_account": "income_account",
        },
        {"rate", "day", "account"},
        {"income_account": MORTGAGE_INCOME},
    ),
    K.SALARY: (
        {"amount": "amount", "day": "day", "to": "to_account"},
        {"amount", "day", "to"},
        {},
    ),
    K.TRANSFER: (
        {"amount": "amount", "day": "day", "from": "from_account", "to": "to_account"},
        {"amount", "day", "from", "to"},
        {},
    ),
    K.TITHE: (
        {"percentage": "percentage", "day": "day", "from": "from_account", "to": "to_account"},
        {"percentage", "day", "from"},
        {"to": CHARITY_EXPENDITURE},
    ),
}


@dataclass(frozen=True)
class SimulationConfig:
    """
    Validated simulation input.

    Attributes:
        accounts: Read-only opening balances as configured (not yet normalized)
        generators: Ordered generator set; order is the same-day application order
        start_date: Date the opening balances describe
        currency: Display symbol, used only when rendering amounts
        horizon_days: Default number of days to simulate
        source: Label of the document the config was read from
    """

    accounts: Mapping[str, Decimal]
    generators: tuple[Generator, ...]
    start_date: date
    currency: str = DEFAULT_CURRENCY
    horizon_days: int = DEFAULT_HORIZON_DAYS
    source: str = "<memory>"

    def __post_init__(self):
        object.__setattr__(self, "accounts", MappingProxyType(dict(self.accounts)))
        object.__setattr__(self, "generators", tuple(self.generators))


def load_config(
    source: str | Path | dict[str, Any], *, format: str | None = None
) -> SimulationConfig:
    """
    Parse a simulation config from YAML/JSON/dict.

    Generators may be written with an explicit ``kind`` key or as a single-key
    mapping whose key is the kind::

        generators:
          - kind: mortgage
            deduction_amount: 123.45
            deduction_day: 1
            from: main
            to: mortgage
          - salary: {amount: 2000, day: 6, to: main}

    Raises:
        FileNotFoundError: If ``source`` is a path that does not exist
        ConfigError: If the document is malformed or references unknown accounts
    """
    mapping, label = _read_source(source, format=format)

    unknown = sorted(set(mapping) - _TOP_LEVEL_KEYS)
    if unknown:
        raise ConfigError(f"{label}: unknown top-level keys: {', '.join(unknown)}")

    start_date = _coerce_date(mapping.get("start_date"), f"{label}::start_date")
    if start_date is None:
        raise ConfigError(f"{label}::start_date: 'start_date' is required")
    currency = mapping.get("currency", DEFAULT_CURRENCY)
    if not isinstance(currency, str):
        raise ConfigError(f"{label}::currency: expected a string")
    horizon_days = _coerce_days(mapping.get("horizon_days"), f"{label}::horizon_days")

    accounts = _normalize_accounts(mapping.get("accounts"), label)
    generators = _normalize_generators(mapping.get("generators"), label)
    _check_references(generators, accounts, label)
    logger.debug(
        "Loaded %s: %d accounts, %d generators", label, len(accounts), len(generators)
    )

    return SimulationConfig(
        accounts=accounts,
        generators=generators,
        start_date=start_date,
        currency=currency,
        horizon_days=DEFAULT_HORIZON_DAYS if horizon_days is None else horizon_days,
        source=label,
    )


def _read_source(
    source: str | Path | dict[str, Any], *, format: str | None
) -> tuple[dict[str, Any], str]:
    if isinstance(source, dict):
        return deepcopy(source), "<mapping>"

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(path)

    fmt = (format or path.suffix.lstrip(".")).lower()
    try:
        text = path.read_text(encoding="utf-8")
        if fmt in {"yaml", "yml", ""}:
            data = yaml.safe_load(text)
        elif fmt == "json":
            data = json.loads(text)
        else:
            raise ConfigError(f"Unsupported config format '{fmt}' for {path}")
    except (yaml.YAMLError, json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ConfigError(f"{path}: could not parse document: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping (source={path})")
    return data, str(path)


def _normalize_accounts(raw: Any, label: str) -> dict[str, Decimal]:
    ctx = f"{label}::accounts"
    if raw is None:
        raise ConfigError(f"{ctx}: 'accounts' is required (can be empty mapping)")
    data = _ensure_dict(raw, ctx)
    accounts: dict[str, Decimal] = {}
    for name, value in data.items():
        if not isinstance(name, str) or not name.strip():
            raise ConfigError(f"{ctx}: account names must be non-empty strings")
        if name == OPENING_BALANCES:
            raise ConfigError(f"{ctx}.{name}: '{OPENING_BALANCES}' is computed, not configured")
        try:
            accounts[name] = to_decimal(value)
        except ValueError as exc:
            raise ConfigError(f"{ctx}.{name}: {exc}") from exc
    return accounts


def _normalize_generators(raw: Any, label: str) -> tuple[Generator, ...]:
    entries = _ensure_list(raw, f"{label}::generators", allow_none=True)
    if entries is None:
        return ()

    generators: list[Generator] = []
    for idx, entry in enumerate(entries):
        ctx = f"{label}::generators[{idx}]"
        kind, params = _split_kind(_ensure_dict(entry, ctx), ctx)
        fields, required, defaults = _FIELDS[kind]

        unknown = sorted(set(params) - set(fields))
        if unknown:
            raise ConfigError(f"{ctx}: unknown fields for {kind}: {', '.join(unknown)}")
        missing = sorted(required - set(params))
        if missing:
            raise ConfigError(f"{ctx}: missing required fields for {kind}: {', '.join(missing)}")

        merged = {**defaults, **params}
        kwargs = {fields[key]: value for key, value in merged.items()}
        try:
            generator = GENERATOR_TYPES[kind](**kwargs)
        except ConfigError as exc:
            raise ConfigError(f"{ctx}: {exc}") from exc

        if generator.trigger_day > 28:
            warnings.warn(
                f"{ctx}: {kind} fires on day {generator.trigger_day} and will be "
                "skipped in months without that day",
                UserWarning,
                stacklevel=3,
            )
        generators.append(generator)
    return tuple(generators)


def _split_kind(data: dict[str, Any], ctx: str) -> tuple[str, dict[str, Any]]:
    if "kind" in data:
        kind = data.pop("kind")
        params = data
    elif len(data) == 1:
        kind, params = next(iter(data.items()))
        params = _ensure_dict(params, f"{ctx}.{kind}")
    else:
        raise ConfigError(f"{ctx}: expected a 'kind' key or a single-key mapping")

    if not isinstance(kind, str):
        raise ConfigError(f"{ctx}: kind must be a string")
    kind = kind.strip().lower()
    if kind not in _FIELDS:
        raise ConfigError(
            f"{ctx}: unknown generator kind '{kind}' (expected one of {', '.join(K.all_kinds())})"
        )
    return kind, params


def _check_references(
    generators: tuple[Generator, ...], accounts: dict[str, Decimal], label: str
) -> None:
    known = set(accounts) | set(WELL_KNOWN_ACCOUNTS)
    for idx, generator in enumerate(generators):
        for name in generator.accounts():
            if name not in known:
                raise ConfigError(
                    f"{label}::generators[{idx}]: {generator.kind} references unknown account '{name}'"
                )


def _coerce_date(value: Any, ctx: str) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError as exc:
            raise ConfigError(f"{ctx}: invalid ISO date '{value}'") from exc
    raise ConfigError(f"{ctx}: expected ISO date string")


def _coerce_days(value: Any, ctx: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{ctx}: expected an integer number of days")
    if value < 0:
        raise ConfigError(f"{ctx}: must be >= 0")
    return value


def _ensure_dict(value: Any, ctx: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{ctx}: expected a mapping")
    return deepcopy(value)


def _ensure_list(value: Any, ctx: str, *, allow_none: bool = False) -> list[Any] | None:
    if value is None:
        if allow_none:
            return None
        raise ConfigError(f"{ctx}: expected a list")
    if not isinstance(value, list):
        raise ConfigError(f"{ctx}: expected a list")
    return list(value)
