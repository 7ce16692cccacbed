"""Asset paths under alternate return rates over a fixed income path."""

from __future__ import annotations

import math
from enum import Enum
from typing import Dict, Iterable, List, Sequence

from pydantic import BaseModel

from backend.core.projection import (
    MAX_SERVICE_YEARS,
    InvalidInputError,
    annual_contribution,
    compound,
    is_finite_number,
    round_half_up,
)

DEFAULT_LOW_RATE = 0.03  # deposits / low-risk bonds
DEFAULT_HIGH_RATE = 0.08  # equity ETFs


class Scenario(str, Enum):
    LOW = "low"
    BASE = "base"
    HIGH = "high"


class ScenarioSeries(BaseModel):
    scenario: Scenario
    rate: float
    assets: List[int]


def _accumulate(monthly_salaries: Sequence[float], savings_rate: float, rate: float) -> List[int]:
    asset = 0.0
    out: List[int] = []
    for monthly_salary in monthly_salaries:
        asset = compound(asset, rate, annual_contribution(monthly_salary, savings_rate))
        if not math.isfinite(asset):
            raise InvalidInputError([f"rate {rate}: assets exceed the representable range"])
        out.append(round_half_up(asset))
    return out


def compare_scenarios(
    monthly_salaries: Sequence[float],
    savings_rate: float,
    rates: Iterable[float],
) -> Dict[float, List[int]]:
    """
    Replay only the savings/compounding step at each rate.

    Salaries are reused as-is; promotions and salary growth are not modelled
    again, so every scenario shares the same income path.
    """
    monthly_salaries = list(monthly_salaries)
    rates = list(rates)
    errors: List[str] = []
    if len(monthly_salaries) > MAX_SERVICE_YEARS:
        errors.append(f"monthlySalaries may cover at most {MAX_SERVICE_YEARS} years")
    bad_salaries = [salary for salary in monthly_salaries if not is_finite_number(salary)]
    if bad_salaries:
        errors.append(f"monthlySalaries must be finite numbers, got {bad_salaries}")
    if not is_finite_number(savings_rate):
        errors.append("savingsRate must be a finite number")
    bad_rates = [rate for rate in rates if not is_finite_number(rate)]
    if bad_rates:
        errors.append(f"rates must be finite numbers, got {bad_rates}")
    if errors:
        raise InvalidInputError(errors)

    results: Dict[float, List[int]] = {}
    for rate in rates:
        if rate not in results:
            results[rate] = _accumulate(monthly_salaries, savings_rate, rate)
    return results


def build_comparison(
    monthly_salaries: Sequence[float],
    savings_rate: float,
    return_rate: float,
    low_rate: float = DEFAULT_LOW_RATE,
    high_rate: float = DEFAULT_HIGH_RATE,
) -> List[ScenarioSeries]:
    """Low / caller's / high return scenarios, in chart order."""
    labelled = [
        (Scenario.LOW, low_rate),
        (Scenario.BASE, return_rate),
        (Scenario.HIGH, high_rate),
    ]
    paths = compare_scenarios(monthly_salaries, savings_rate, [rate for _, rate in labelled])
    return [
        ScenarioSeries(scenario=scenario, rate=rate, assets=paths[rate])
        for scenario, rate in labelled
    ]


__all__ = [
    "DEFAULT_LOW_RATE",
    "DEFAULT_HIGH_RATE",
    "Scenario",
    "ScenarioSeries",
    "compare_scenarios",
    "build_comparison",
]
