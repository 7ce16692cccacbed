"""Data contracts for the projection API (camelCase, rates in percent)."""

from __future__ import annotations

from numbers import Real
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, StrictInt

from backend.core.projection import InvalidInputError, ProjectionResult, SimulationParams
from backend.core.scenarios import ScenarioSeries


def _require_number(value: Any) -> Any:
    # lax float parsing would turn true into 1.0 and "30" into 30.0
    if value is not None and (isinstance(value, bool) or not isinstance(value, Real)):
        raise ValueError("must be a number")
    return value


Number = Annotated[float, BeforeValidator(_require_number)]


class PingResponse(BaseModel):
    message: str


class RankRow(BaseModel):
    code: str
    baseSalary: int
    promotionYears: Optional[int] = None


class ProjectionRequest(BaseModel):
    """Raw form inputs; every rate is a percentage (30 == 30%)."""

    model_config = ConfigDict(extra="forbid")

    startRank: Optional[str] = None
    serviceYears: Optional[StrictInt] = None
    savingsRate: Optional[Number] = None
    returnRate: Optional[Number] = None
    livingCost: Optional[Number] = None
    loanRate: Optional[Number] = None

    def to_params(self) -> SimulationParams:
        missing = [
            name
            for name in (
                "startRank",
                "serviceYears",
                "savingsRate",
                "returnRate",
                "livingCost",
                "loanRate",
            )
            if getattr(self, name) is None
        ]
        if missing:
            raise InvalidInputError([f"{name} is required" for name in missing])

        return SimulationParams(
            start_rank=self.startRank,
            service_years=self.serviceYears,
            savings_rate=self.savingsRate / 100,
            return_rate=self.returnRate / 100,
            living_cost=self.livingCost,
            loan_rate=self.loanRate / 100,
        )


class YearPoint(BaseModel):
    year: int
    rank: str
    monthlySalary: int
    netCashFlow: float
    cumulativeAsset: int


class SummaryDisplay(BaseModel):
    finalAsset: str
    averageMonthlyCashFlow: str
    maxAffordableLoan: str


class ScenarioPoint(BaseModel):
    scenario: str
    rate: float
    assets: List[int]


class ProjectionResponse(BaseModel):
    series: List[YearPoint]
    finalAsset: int
    averageMonthlyCashFlow: int
    maxAffordableLoan: float
    display: SummaryDisplay
    scenarios: List[ScenarioPoint]

    @classmethod
    def from_result(
        cls,
        result: ProjectionResult,
        scenarios: List[ScenarioSeries],
        display: SummaryDisplay,
    ) -> "ProjectionResponse":
        return cls(
            series=[
                YearPoint(
                    year=row.year,
                    rank=row.rank,
                    monthlySalary=row.monthly_salary,
                    netCashFlow=row.net_cash_flow,
                    cumulativeAsset=row.cumulative_asset,
                )
                for row in result.series
            ],
            finalAsset=result.final_asset,
            averageMonthlyCashFlow=result.average_monthly_cash_flow,
            maxAffordableLoan=result.max_affordable_loan,
            display=display,
            scenarios=[
                ScenarioPoint(scenario=item.scenario.value, rate=item.rate, assets=item.assets)
                for item in scenarios
            ],
        )


class ScenarioRequest(BaseModel):
    """Replay a salary path at several return rates (percentages)."""

    model_config = ConfigDict(extra="forbid")

    monthlySalaries: List[Number]
    savingsRate: Number
    rates: List[Number]


class ScenarioResponse(BaseModel):
    rate: float
    assets: List[int]
