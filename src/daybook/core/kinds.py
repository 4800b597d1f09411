"""
Daybook generator kind constants.
"""


class K:
    MORTGAGE = "mortgage"  # capped monthly payment into a liability
    INTEREST = "interest"  # monthly accrual on a balance
    SALARY = "salary"  # monthly income, feeds the tithe accumulator
    TRANSFER = "transfer"  # unconditional monthly move
    TITHE = "tithe"  # percentage of salary since the last tithe

    @classmethod
    def all_kinds(cls) -> list[str]:
        """Enumerate all known kinds (for validation and docs)."""
        return [
            cls.MORTGAGE,
            cls.INTEREST,
            cls.SALARY,
            cls.TRANSFER,
            cls.TITHE,
        ]
