from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from numbers import Real
from typing import List

from pydantic import BaseModel

from backend.core.ranks import PROMOTION_TABLE, SALARY_TABLE, RankTable

logger = logging.getLogger(__name__)

SALARY_GROWTH_RATE = 0.015
LOAN_TERM_MONTHS = 240
LOAN_PAYMENT_SHARE = 0.4
MAX_SERVICE_YEARS = 60


class InvalidInputError(ValueError):
    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


# -----------------------------
# Models
# -----------------------------


@dataclass(frozen=True)
class SimulationParams:
    start_rank: str
    service_years: int
    savings_rate: float  # fraction, 0.3 == 30%
    return_rate: float
    living_cost: float  # monthly
    loan_rate: float  # annual


@dataclass
class ProjectionState:
    current_rank: str
    current_asset: float = 0.0
    years_in_current_rank: int = 0


class ProjectionYear(BaseModel):
    year: int
    rank: str
    monthly_salary: int
    net_cash_flow: float  # annual
    cumulative_asset: int


class ProjectionResult(BaseModel):
    series: List[ProjectionYear]
    final_asset: int
    average_monthly_cash_flow: int
    max_affordable_loan: float

    @property
    def monthly_salaries(self) -> List[int]:
        return [row.monthly_salary for row in self.series]

    @property
    def cumulative_assets(self) -> List[int]:
        return [row.cumulative_asset for row in self.series]

    @property
    def ranks(self) -> List[str]:
        return [row.rank for row in self.series]


# -----------------------------
# Arithmetic helpers
# -----------------------------


def round_half_up(value: float) -> int:
    # .5 always goes up, also for negatives (-2.5 -> -2)
    return int(math.floor(value + 0.5))


def round_to_nearest_100(value: float) -> int:
    return round_half_up(value / 100) * 100


def annual_contribution(monthly_salary: float, savings_rate: float) -> float:
    return (monthly_salary * savings_rate) * 12


def compound(asset: float, rate: float, contribution: float) -> float:
    """Grow last year's balance, then add this year's contribution."""
    return asset * (1 + rate) + contribution


def max_affordable_loan(average_monthly_cash_flow: float, loan_rate: float) -> float:
    """
    Largest principal a payment of 40% of the monthly cash flow can amortize
    over 240 months:

        P = M * ((1 + r)^n - 1) / (r * (1 + r)^n)

    A zero rate reduces to M * n.
    """
    max_payment = average_monthly_cash_flow * LOAN_PAYMENT_SHARE
    monthly_rate = loan_rate / 12
    if monthly_rate == 0:
        return max_payment * LOAN_TERM_MONTHS

    factor = (1 + monthly_rate) ** LOAN_TERM_MONTHS
    return round_half_up(max_payment * (factor - 1) / (monthly_rate * factor))


# -----------------------------
# Validation
# -----------------------------


def is_finite_number(value: object) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def validate_params(
    params: SimulationParams,
    rank_table: RankTable = SALARY_TABLE,
    promotion_table: RankTable = PROMOTION_TABLE,
) -> None:
    errors: List[str] = []

    years = params.service_years
    if isinstance(years, bool) or not isinstance(years, int) or years < 1:
        errors.append("serviceYears must be a positive integer")
    elif years > MAX_SERVICE_YEARS:
        errors.append(f"serviceYears must be at most {MAX_SERVICE_YEARS}")

    for label, value in (
        ("savingsRate", params.savings_rate),
        ("returnRate", params.return_rate),
        ("loanRate", params.loan_rate),
    ):
        if not is_finite_number(value):
            errors.append(f"{label} must be a finite number")
        elif not 0 <= value <= 1:
            errors.append(f"{label} must be between 0 and 1")

    if not is_finite_number(params.living_cost) or params.living_cost < 0:
        errors.append("livingCost must be a finite, non-negative number")

    if params.start_rank not in rank_table:
        errors.append(f"unknown startRank {params.start_rank!r}")

    missing = [code for code in rank_table.codes if code not in promotion_table]
    if missing:
        errors.append(f"promotion table missing ranks {', '.join(missing)}")

    if errors:
        raise InvalidInputError(errors)


# -----------------------------
# Engine
# -----------------------------


def _promote(state: ProjectionState, promotion_table: RankTable, rank_table: RankTable) -> None:
    if state.years_in_current_rank < promotion_table.value(state.current_rank):
        return
    next_rank = rank_table.next_code(state.current_rank)
    if next_rank is None:
        return
    state.current_rank = next_rank
    state.years_in_current_rank = 0


def run_projection(
    params: SimulationParams,
    rank_table: RankTable = SALARY_TABLE,
    promotion_table: RankTable = PROMOTION_TABLE,
) -> ProjectionResult:
    """
    Project salary and savings year by year over the service horizon.

    Order of operations (per year):
      1) Promotion check, before this year's salary is set.
      2) Salary = grade pay * 1.015^(year - 1), rounded to the nearest 100.
         Growth follows total years served, not years in grade.
      3) Net cash flow = annual salary - annual living cost.
      4) Asset = last asset * (1 + return) + salary * savings rate * 12.
      5) One more year served in the current grade.
    """
    validate_params(params, rank_table, promotion_table)

    state = ProjectionState(current_rank=params.start_rank)
    logger.debug(
        "projecting %s years from %s (savings=%s, return=%s)",
        params.service_years,
        params.start_rank,
        params.savings_rate,
        params.return_rate,
    )

    series: List[ProjectionYear] = []
    for year in range(1, params.service_years + 1):
        previous_rank = state.current_rank
        _promote(state, promotion_table, rank_table)
        if state.current_rank != previous_rank:
            logger.debug("year %s: promoted %s -> %s", year, previous_rank, state.current_rank)

        growth = (1 + SALARY_GROWTH_RATE) ** (year - 1)
        monthly_salary = round_to_nearest_100(rank_table.value(state.current_rank) * growth)

        annual_salary = monthly_salary * 12
        net_cash_flow = annual_salary - params.living_cost * 12

        contribution = annual_contribution(monthly_salary, params.savings_rate)
        state.current_asset = compound(state.current_asset, params.return_rate, contribution)
        if not (math.isfinite(state.current_asset) and math.isfinite(net_cash_flow)):
            raise InvalidInputError([f"year {year}: amounts exceed the representable range"])

        series.append(
            ProjectionYear(
                year=year,
                rank=state.current_rank,
                monthly_salary=monthly_salary,
                net_cash_flow=net_cash_flow,
                cumulative_asset=round_half_up(state.current_asset),
            )
        )

        state.years_in_current_rank += 1

    average = sum(row.net_cash_flow for row in series) / params.service_years / 12
    if not math.isfinite(average):
        raise InvalidInputError(["average cash flow exceeds the representable range"])
    average_cash_flow = round_half_up(average)

    return ProjectionResult(
        series=series,
        final_asset=series[-1].cumulative_asset,
        average_monthly_cash_flow=average_cash_flow,
        max_affordable_loan=max_affordable_loan(average_cash_flow, params.loan_rate),
    )


__all__ = [
    "SALARY_GROWTH_RATE",
    "LOAN_TERM_MONTHS",
    "LOAN_PAYMENT_SHARE",
    "MAX_SERVICE_YEARS",
    "InvalidInputError",
    "SimulationParams",
    "ProjectionState",
    "ProjectionYear",
    "ProjectionResult",
    "round_half_up",
    "round_to_nearest_100",
    "annual_contribution",
    "compound",
    "max_affordable_loan",
    "is_finite_number",
    "validate_params",
    "run_projection",
]
