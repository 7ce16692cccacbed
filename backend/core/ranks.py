"""Static pay-grade tables used by the projection engine."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple


class Rank(str, Enum):
    S2 = "S2"  # second lieutenant
    S3 = "S3"  # first lieutenant
    S4 = "S4"  # captain
    M1 = "M1"  # major
    M2 = "M2"  # lieutenant colonel
    M3 = "M3"  # colonel


@dataclass(frozen=True)
class RankTable:
    """
    Ordered (code, value) pairs.

    Order is the promotion sequence, so lookups never depend on dict ordering.
    """

    entries: Tuple[Tuple[str, float], ...]

    def __iter__(self) -> Iterator[Tuple[str, float]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, code: object) -> bool:
        return any(entry_code == code for entry_code, _ in self.entries)

    @property
    def codes(self) -> List[str]:
        return [code for code, _ in self.entries]

    def value(self, code: str) -> float:
        for entry_code, value in self.entries:
            if entry_code == code:
                return value
        raise KeyError(code)

    def index(self, code: str) -> int:
        for idx, (entry_code, _) in enumerate(self.entries):
            if entry_code == code:
                return idx
        raise KeyError(code)

    def next_code(self, code: str) -> Optional[str]:
        """Code following `code`, or None at the terminal entry."""
        idx = self.index(code) + 1
        if idx < len(self.entries):
            return self.entries[idx][0]
        return None


# Monthly pay per grade (base pay + allowances), NT$
SALARY_TABLE = RankTable(
    entries=(
        (Rank.S2.value, 51000),
        (Rank.S3.value, 54000),
        (Rank.S4.value, 60000),
        (Rank.M1.value, 70000),
        (Rank.M2.value, 85000),
        (Rank.M3.value, 100000),
    )
)

# Years in grade before promotion to the next grade
PROMOTION_TABLE = RankTable(
    entries=(
        (Rank.S2.value, 3),
        (Rank.S3.value, 4),
        (Rank.S4.value, 7),
        (Rank.M1.value, 6),
        (Rank.M2.value, 6),
        (Rank.M3.value, math.inf),
    )
)


def describe_ranks(
    salary_table: RankTable = SALARY_TABLE,
    promotion_table: RankTable = PROMOTION_TABLE,
) -> List[dict]:
    """Rank rows in promotion order; an unbounded threshold becomes None."""
    rows: List[dict] = []
    for code, salary in salary_table:
        years = promotion_table.value(code) if code in promotion_table else None
        if years is not None and math.isinf(years):
            years = None
        rows.append({"code": code, "baseSalary": salary, "promotionYears": years})
    return rows


__all__ = [
    "Rank",
    "RankTable",
    "SALARY_TABLE",
    "PROMOTION_TABLE",
    "describe_ranks",
]
