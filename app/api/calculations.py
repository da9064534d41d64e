"""
Financial calculation API endpoints.

Stand-alone access to the IRR solver and the loan disbursement scheduler.
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date

from app.calculations import dates, irr
from app.calculations.disbursement import calculate_loan_disbursement, cap_quarters
from app.calculations.errors import SimulationError

router = APIRouter()

# A century of quarters
MAX_QUARTER_COUNT = 400


class IRRInput(BaseModel):
    """Input for IRR calculation."""

    cash_flows: List[float]
    guess: float = irr.DEFAULT_GUESS


class IRRResponse(BaseModel):
    """Response with IRR calculation. irr is null when unsolvable."""

    irr: Optional[float] = None
    profit: float
    npv_at_10_percent: float


@router.post("/irr", response_model=IRRResponse)
async def calculate_irr_endpoint(inputs: IRRInput):
    """Calculate IRR for monthly cash flows."""
    if not inputs.cash_flows:
        raise HTTPException(status_code=400, detail="At least one cash flow required")

    return IRRResponse(
        irr=irr.calculate_irr_monthly(inputs.cash_flows, inputs.guess),
        profit=sum(inputs.cash_flows),
        npv_at_10_percent=irr.calculate_npv(inputs.cash_flows, 0.10),
    )


class DisbursementInput(BaseModel):
    """Input for a loan disbursement schedule."""

    loan_amount: float
    asset_type: str
    quarter_count: Optional[int] = Field(default=None, ge=1, le=MAX_QUARTER_COUNT)
    quarter_dates: Optional[List[date]] = Field(default=None, max_length=MAX_QUARTER_COUNT)
    start_date: Optional[date] = None
    apply_asset_cap: bool = False


class DisbursementQuarter(BaseModel):
    quarter_date: date
    amount: float


class DisbursementResponse(BaseModel):
    """Scheduled disbursements and their total."""

    quarters: List[DisbursementQuarter]
    total: float


@router.post("/disbursement", response_model=DisbursementResponse)
async def calculate_disbursement(inputs: DisbursementInput):
    """Split a loan into quarterly disbursements."""
    if inputs.quarter_dates:
        quarters = sorted(inputs.quarter_dates)
    else:
        start = inputs.start_date or dates.now()
        count = inputs.quarter_count or 0
        quarters = [dates.add_months(start, 3 * (i + 1)) for i in range(count)]

    try:
        if inputs.apply_asset_cap:
            quarters = cap_quarters(quarters, inputs.asset_type)
        amounts = calculate_loan_disbursement(
            quarters, inputs.loan_amount, inputs.asset_type
        )
    except SimulationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return DisbursementResponse(
        quarters=[
            DisbursementQuarter(quarter_date=quarter, amount=amount)
            for quarter, amount in zip(quarters, amounts)
        ],
        total=round(sum(amounts), 2),
    )
