from __future__ import annotations

import math
from math import isclose

import pytest

from backend.core.projection import (
    MAX_SERVICE_YEARS,
    InvalidInputError,
    SimulationParams,
    max_affordable_loan,
    round_half_up,
    round_to_nearest_100,
    run_projection,
)
from backend.core.ranks import PROMOTION_TABLE, SALARY_TABLE, RankTable


def make_params(**overrides) -> SimulationParams:
    values = dict(
        start_rank="S2",
        service_years=4,
        savings_rate=0.5,
        return_rate=0.0,
        living_cost=20000,
        loan_rate=0.0,
    )
    values.update(overrides)
    return SimulationParams(**values)


def test_series_length_matches_service_years():
    for years in (1, 4, 20, 35):
        result = run_projection(make_params(service_years=years))
        assert len(result.series) == years
        assert [row.year for row in result.series] == list(range(1, years + 1))


def test_first_year_salary_is_base_pay():
    result = run_projection(make_params(service_years=1))
    assert result.series[0].monthly_salary == 51000
    assert result.series[0].rank == "S2"


def test_salary_path_and_promotion_at_year_four():
    """
    S2 is promoted after 3 years in grade, so year 4 is paid at S3, still
    using four years of global growth: 54000 * 1.015^3 = 56466.6 -> 56500.
    """
    result = run_projection(make_params())

    assert result.ranks == ["S2", "S2", "S2", "S3"]
    assert result.monthly_salaries == [51000, 51800, 52500, 56500]


def test_net_cash_flow_and_assets_without_returns():
    result = run_projection(make_params())

    # salary * 12 - 20000 * 12
    assert [row.net_cash_flow for row in result.series] == [372000, 381600, 390000, 438000]
    # half of each year's salary is saved, nothing compounds
    assert result.cumulative_assets == [306000, 616800, 931800, 1270800]
    assert result.final_asset == 1270800
    assert result.average_monthly_cash_flow == 32950


def test_returns_compound_on_previous_balance():
    result = run_projection(make_params(service_years=2, return_rate=0.1))
    # 306000 * 1.1 + 310800
    assert result.cumulative_assets == [306000, 647400]


def test_zero_savings_and_zero_return_keep_assets_at_zero():
    result = run_projection(make_params(service_years=30, savings_rate=0.0, return_rate=0.0))
    assert all(row.cumulative_asset == 0 for row in result.series)
    assert result.final_asset == 0


def test_rank_never_regresses_or_skips():
    result = run_projection(make_params(service_years=40))
    indices = [SALARY_TABLE.index(rank) for rank in result.ranks]

    for prev, cur in zip(indices, indices[1:]):
        assert cur in (prev, prev + 1)

    # S2 x3, S3 x4, S4 x7, M1 x6, M2 x6, then M3 for good
    expected = ["S2"] * 3 + ["S3"] * 4 + ["S4"] * 7 + ["M1"] * 6 + ["M2"] * 6 + ["M3"] * 14
    assert result.ranks == expected


def test_terminal_rank_never_promotes():
    result = run_projection(make_params(start_rank="M3", service_years=25))
    assert set(result.ranks) == {"M3"}


def test_years_in_rank_start_at_zero_for_any_start_rank():
    # a captain starting mid-career still serves the full 7 years first
    result = run_projection(make_params(start_rank="S4", service_years=9))
    assert result.ranks == ["S4"] * 7 + ["M1"] * 2


def test_salary_growth_is_not_reset_by_promotion():
    result = run_projection(make_params(start_rank="M2", service_years=7))
    growth = 1.015 ** 6
    assert result.series[6].rank == "M3"
    assert result.series[6].monthly_salary == round_to_nearest_100(100000 * growth)


def test_zero_loan_rate_uses_straight_line_term():
    result = run_projection(make_params(loan_rate=0.0))

    expected = result.average_monthly_cash_flow * 0.4 * 240
    assert result.max_affordable_loan == expected
    assert math.isfinite(result.max_affordable_loan)
    assert isclose(result.max_affordable_loan, 3163200, abs_tol=1e-6)


def test_loan_affordability_matches_annuity_present_value():
    # 1000/month at 6% for 20 years is worth about 139,580.77 today
    assert isclose(max_affordable_loan(2500, 0.06), 139581, abs_tol=1)


def test_identical_inputs_give_identical_results():
    params = make_params(service_years=25, return_rate=0.05, loan_rate=0.021)
    first = run_projection(params)
    second = run_projection(params)
    assert first == second


def test_half_up_rounding():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(-2.5) == -2
    assert round_to_nearest_100(51750) == 51800
    assert round_to_nearest_100(52541.475) == 52500


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"service_years": 0}, "serviceYears"),
        ({"service_years": -3}, "serviceYears"),
        ({"savings_rate": float("nan")}, "savingsRate"),
        ({"return_rate": float("inf")}, "returnRate"),
        ({"loan_rate": float("nan")}, "loanRate"),
        ({"savings_rate": 1.5}, "savingsRate"),
        ({"living_cost": -1}, "livingCost"),
        ({"start_rank": "G1"}, "startRank"),
        ({"service_years": 61}, "serviceYears"),
        ({"service_years": True}, "serviceYears"),
        ({"service_years": "3"}, "serviceYears"),
        ({"savings_rate": "0.5"}, "savingsRate"),
        ({"return_rate": None}, "returnRate"),
        ({"living_cost": "20000"}, "livingCost"),
    ],
)
def test_invalid_inputs_fail_before_projecting(overrides, message):
    with pytest.raises(InvalidInputError) as excinfo:
        run_projection(make_params(**overrides))
    assert any(message in error for error in excinfo.value.errors)


def test_all_problems_are_reported_together():
    with pytest.raises(InvalidInputError) as excinfo:
        run_projection(make_params(service_years=0, start_rank="X"))
    assert len(excinfo.value.errors) == 2


def test_custom_tables_drive_promotion():
    salaries = RankTable(entries=(("A", 1000), ("B", 2000)))
    promotions = RankTable(entries=(("A", 1), ("B", math.inf)))

    result = run_projection(make_params(start_rank="A", service_years=3), salaries, promotions)

    assert result.ranks == ["A", "B", "B"]


def test_promotion_table_must_cover_every_rank():
    promotions = RankTable(entries=PROMOTION_TABLE.entries[:-1])
    with pytest.raises(InvalidInputError):
        run_projection(make_params(), SALARY_TABLE, promotions)


def test_longest_allowed_career_still_projects():
    params = make_params(service_years=MAX_SERVICE_YEARS, return_rate=1.0, savings_rate=1.0)
    result = run_projection(params)
    assert len(result.series) == MAX_SERVICE_YEARS
    assert math.isfinite(result.final_asset)


def test_unrepresentable_amounts_are_rejected():
    with pytest.raises(InvalidInputError):
        run_projection(make_params(living_cost=1e308))
