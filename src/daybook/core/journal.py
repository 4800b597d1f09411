"""
Double-entry journal for Daybook.

Every balance movement made by a generator is recorded as a two-posting
journal entry. Posting amounts are signed changes to the account balance:
the account that is credited gets ``+amount`` and the account that is debited
gets ``-amount``, so each entry sums to zero on its own.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

import pandas as pd

from .currency import ZERO


@dataclass(frozen=True)
class Posting:
    """
    A single posting in a journal entry.

    Attributes:
        account_id: Account name
        amount: Signed change applied to the account balance
    """

    account_id: str
    amount: Decimal

    def __post_init__(self):
        """Validate posting after initialization."""
        if not isinstance(self.amount, Decimal):
            raise ValueError("Amount must be a Decimal")

    def __str__(self) -> str:
        return f"{self.account_id}: {self.amount}"


@dataclass(frozen=True)
class JournalEntry:
    """
    A double-entry journal entry.

    Attributes:
        id: Unique transaction identifier
        timestamp: Simulated date of the movement
        postings: The two postings of this entry
        metadata: Generator kind and index that produced the entry
    """

    id: str
    timestamp: date
    postings: tuple[Posting, ...]
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate entry after initialization."""
        self._validate_two_posting()
        self._validate_zero_sum()

    def _validate_two_posting(self) -> None:
        if len(self.postings) != 2:
            raise ValueError(
                f"Entry {self.id} must have exactly 2 postings, got {len(self.postings)}"
            )

    def _validate_zero_sum(self) -> None:
        total = sum((p.amount for p in self.postings), ZERO)
        if total != 0:
            raise ValueError(f"Entry {self.id} is not zero-sum: {total}")

    @property
    def kind(self) -> str | None:
        return self.metadata.get("kind")

    @property
    def amount(self) -> Decimal:
        """Amount moved by this entry (the credited side)."""
        return self.postings[0].amount

    def get_accounts(self) -> set[str]:
        """Get all account IDs in this entry."""
        return {posting.account_id for posting in self.postings}

    def __str__(self) -> str:
        lines = [f"Entry {self.id} @ {self.timestamp}"]
        for posting in self.postings:
            lines.append(f"  {posting}")
        return "\n".join(lines)


def create_entry_id(kind: str, timestamp: date, sequence: int) -> str:
    """
    Create entry ID in format: cp:<kind>:<YYYY-MM-DD>:<sequence>.

    ``sequence`` is the generator's position in the configured list, which is
    unique within a day.
    """
    return f"cp:{kind}:{timestamp.isoformat()}:{sequence}"


def make_entry(
    kind: str,
    timestamp: date,
    sequence: int,
    credit: str,
    debit: str,
    amount: Decimal,
) -> JournalEntry:
    """Build the entry that moves ``amount`` out of ``debit`` into ``credit``."""
    return JournalEntry(
        id=create_entry_id(kind, timestamp, sequence),
        timestamp=timestamp,
        postings=(Posting(credit, amount), Posting(debit, -amount)),
        metadata={"kind": kind, "generator": sequence},
    )


class Journal:
    """
    Chronological record of every journal entry produced by a run.

    Attributes:
        entries: List of journal entries in posting order
    """

    def __init__(self, entries: list[JournalEntry] | None = None):
        self.entries: list[JournalEntry] = []
        self._ids: set[str] = set()
        for entry in entries or []:
            self.post(entry)

    def post(self, entry: JournalEntry) -> None:
        """
        Post a journal entry to the journal.

        Raises:
            ValueError: If entry is not zero-sum or its ID is already used
        """
        entry._validate_zero_sum()
        if entry.id in self._ids:
            raise ValueError(f"Duplicate transaction ID: {entry.id}")
        self.entries.append(entry)
        self._ids.add(entry.id)

    def balance(self, account_id: str, at: date | None = None) -> Decimal:
        """Net movement posted to an account, optionally up to and including ``at``."""
        movement = ZERO
        for entry in self.entries:
            if at is not None and entry.timestamp > at:
                continue
            for posting in entry.postings:
                if posting.account_id == account_id:
                    movement += posting.amount
        return movement

    def trial_balance(self, at: date | None = None) -> dict[str, Decimal]:
        """Net movement per account, optionally up to and including ``at``."""
        balances: dict[str, Decimal] = {}
        for entry in self.entries:
            if at is not None and entry.timestamp > at:
                continue
            for posting in entry.postings:
                balances[posting.account_id] = (
                    balances.get(posting.account_id, ZERO) + posting.amount
                )
        return balances

    def validate_invariants(self) -> list[str]:
        """Return a list of zero-sum failures (empty if all valid)."""
        errors = []
        for entry in self.entries:
            try:
                entry._validate_zero_sum()
            except ValueError as e:
                errors.append(f"Entry {entry.id}: {e}")
        return errors

    def get_entries_by_account(self, account_id: str) -> list[JournalEntry]:
        """Get all entries affecting a specific account."""
        return [
            entry
            for entry in self.entries
            if any(posting.account_id == account_id for posting in entry.postings)
        ]

    def get_entries_by_time_range(self, start: date, end: date) -> list[JournalEntry]:
        """Get entries within a time range (inclusive)."""
        return [entry for entry in self.entries if start <= entry.timestamp <= end]

    def get_entries_by_kind(self, kind: str) -> list[JournalEntry]:
        return [entry for entry in self.entries if entry.kind == kind]

    def to_frame(self) -> pd.DataFrame:
        """One row per entry: date, id, kind, credit, debit, amount."""
        rows = [
            {
                "date": pd.Timestamp(entry.timestamp),
                "id": entry.id,
                "kind": entry.kind,
                "credit": entry.postings[0].account_id,
                "debit": entry.postings[1].account_id,
                "amount": entry.amount,
            }
            for entry in self.entries
        ]
        return pd.DataFrame(
            rows, columns=["date", "id", "kind", "credit", "debit", "amount"]
        )

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def __repr__(self) -> str:
        return f"Journal(entries={len(self.entries)})"
