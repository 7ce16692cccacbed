"""HTTP routes for the Flask API."""

import logging
from http import HTTPStatus
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from backend.app.api.formatting import format_currency
from backend.core.projection import InvalidInputError, round_half_up, run_projection
from backend.core.ranks import describe_ranks
from backend.core.scenarios import build_comparison, compare_scenarios
from backend.schemas.projection import (
    PingResponse,
    ProjectionRequest,
    ProjectionResponse,
    RankRow,
    ScenarioRequest,
    ScenarioResponse,
    SummaryDisplay,
)

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    logger.warning("rejected payload: %s", exc.errors())
    detail = [
        {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
        for err in exc.errors()
    ]
    return jsonify({"detail": detail}), HTTPStatus.BAD_REQUEST


@api_bp.errorhandler(InvalidInputError)
def _handle_invalid_input(exc: InvalidInputError):
    logger.warning("invalid projection input: %s", exc)
    return jsonify({"detail": exc.errors, "message": str(exc)}), HTTPStatus.BAD_REQUEST


@api_bp.get("/ping")
def ping() -> Any:
    """Health-check endpoint."""
    return jsonify(PingResponse(message="pong").model_dump())


@api_bp.get("/ranks")
def ranks() -> Any:
    """Pay grades in promotion order, for the start-rank picker."""
    rows = [RankRow.model_validate(row) for row in describe_ranks()]
    return jsonify([row.model_dump() for row in rows])


@api_bp.post("/projection")
def projection() -> Any:
    """Salary/asset timeline plus the three-scenario comparison."""
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False)
    params = ProjectionRequest.model_validate(raw_payload).to_params()

    result = run_projection(params)
    scenarios = build_comparison(
        result.monthly_salaries,
        params.savings_rate,
        params.return_rate,
        low_rate=current_app.config["LOW_RETURN_RATE"],
        high_rate=current_app.config["HIGH_RETURN_RATE"],
    )
    logger.info(
        "projection %s x%s years -> final asset %s",
        params.start_rank,
        params.service_years,
        result.final_asset,
    )

    prefix = current_app.config["CURRENCY_PREFIX"]
    display = SummaryDisplay(
        finalAsset=format_currency(result.final_asset, prefix),
        averageMonthlyCashFlow=format_currency(result.average_monthly_cash_flow, prefix),
        maxAffordableLoan=format_currency(round_half_up(result.max_affordable_loan), prefix),
    )
    response = ProjectionResponse.from_result(result, scenarios, display)
    return jsonify(response.model_dump())


@api_bp.post("/scenarios")
def scenarios() -> Any:
    """Asset paths for a caller-supplied salary path at each return rate."""
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False)
    payload = ScenarioRequest.model_validate(raw_payload)

    paths = compare_scenarios(
        payload.monthlySalaries,
        payload.savingsRate / 100,
        [rate / 100 for rate in payload.rates],
    )
    response = [ScenarioResponse(rate=rate, assets=assets) for rate, assets in paths.items()]
    return jsonify([item.model_dump() for item in response])
