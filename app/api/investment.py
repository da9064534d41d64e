"""
Investment report API endpoint.

Fills in asset-type defaults for missing inputs, runs the simulation and
wraps the result as {success, data}.
"""

import logging
from typing import Optional, Tuple, Union
from datetime import date

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from app.calculations import dates
from app.calculations.cashflow import InvestmentParameters
from app.calculations.disbursement import AssetType
from app.calculations.investment import SimulationFailure, simulate
from app.config import Settings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter()


class InvestmentReportInput(BaseModel):
    """Request body for an investment report."""

    model_config = ConfigDict(populate_by_name=True)

    acquisition_price: float = Field(alias="acquisitionPrice")
    final_price: float = Field(alias="finalPrice")
    asset_type: str = Field(alias="assetType")

    # Optional, defaulted by asset type
    tenure: Optional[int] = None
    holding_period: Optional[int] = Field(default=None, alias="holdingPeriod")
    construction_completion_date: Optional[Union[date, int, float, str]] = Field(
        default=None, alias="constructionCompletionDate"
    )
    interest_rate: Optional[float] = Field(default=None, alias="interestRate")
    loan_percentage: Optional[float] = Field(default=None, alias="loanPercentage")


def build_parameters(
    inputs: InvestmentReportInput,
    settings: Settings,
    today: Optional[date] = None,
) -> Tuple[InvestmentParameters, Optional[str]]:
    """
    Apply request defaults.

    Returns:
        Simulation parameters and a warning when the construction date was
        not supplied
    """
    if today is None:
        today = dates.now()

    is_plot = inputs.asset_type == AssetType.plot.value
    warning = None

    if inputs.construction_completion_date is None:
        lead_years = (
            settings.default_plot_construction_lead_years
            if is_plot
            else settings.default_construction_lead_years
        )
        construction_date = dates.add_years(today, lead_years)
        warning = (
            "Construction completion date not provided, using default date "
            f"based on asset type: {inputs.asset_type}"
        )
        logger.info(f"Defaulted construction date to {construction_date.isoformat()}")
    else:
        construction_date = dates.parse_date(inputs.construction_completion_date)

    if inputs.holding_period is not None:
        holding_period = inputs.holding_period
    elif is_plot:
        holding_period = settings.default_plot_holding_period_years
    else:
        holding_period = settings.default_holding_period_years

    if inputs.loan_percentage is not None:
        loan_percentage = inputs.loan_percentage
    elif is_plot:
        loan_percentage = settings.default_plot_loan_percentage
    else:
        loan_percentage = settings.default_loan_percentage

    params = InvestmentParameters(
        acquisition_price=inputs.acquisition_price,
        tenure_years=(
            inputs.tenure if inputs.tenure is not None else settings.default_tenure_years
        ),
        holding_period_years=holding_period,
        construction_completion_date=construction_date,
        final_price=inputs.final_price,
        annual_interest_rate_percent=(
            inputs.interest_rate
            if inputs.interest_rate is not None
            else settings.default_interest_rate
        ),
        loan_percentage=loan_percentage,
        asset_type=inputs.asset_type,
    )
    return params, warning


def error_response(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "message": message},
    )


@router.post("/investmentReport")
async def investment_report(inputs: InvestmentReportInput):
    """
    Project monthly cash flows and return metrics for one property.

    Monthly amounts are signed from the buyer's side: other_cash_flow.value
    and net_cash_flow are negative for money paid out and positive for money
    received. builder_amount is a positive amount paid to the builder.
    """
    settings = get_settings()

    try:
        params, warning = build_parameters(inputs, settings)
    except ValueError as e:
        logger.error(f"Calculation error: {e}")
        return error_response(str(e))

    result = simulate(params)

    if isinstance(result, SimulationFailure):
        return error_response(result.message)

    response = {"success": True, "data": result.to_dict()}
    if warning:
        response["warning"] = warning
    return response


@router.get("/health")
async def health():
    """Liveness check."""
    return {
        "status": "ok",
        "message": f"{get_settings().app_name} is running",
    }
