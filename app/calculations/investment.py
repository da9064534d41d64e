"""
Investment Report

Runs the monthly projection and reduces it to summary return metrics.
simulate() is the public entry point; it never raises for bad inputs and
returns a SimulationFailure instead.
"""

from typing import Dict, List, Optional, Tuple, Union
from datetime import date
from dataclasses import dataclass
import logging
import math

from app.calculations import irr
from app.calculations.amortization import (
    calculate_total_interest,
    calculate_total_principal,
)
from app.calculations.cashflow import (
    CashEventKind,
    CashFlowProjection,
    InvestmentParameters,
    MonthlyRow,
    generate_cash_flows,
)
from app.calculations.errors import SimulationError
from app.calculations.formatting import rows_to_dicts

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvestmentResult:
    """Summary metrics plus the monthly table for one simulation."""

    xirr: Optional[float]
    cashflows_yearly: Tuple[float, ...]
    booking_amount: float
    possession_amount: float
    charges_value: float
    charges_kind: CashEventKind
    amount_not_disbursed: float
    total_investment: float
    total_returns: float
    loan_balance: int
    cagr: float
    construction_completion_date: date
    equity_multiplier: Optional[float]
    monthly_cf: Tuple[MonthlyRow, ...]

    def to_dict(self) -> Dict:
        return {
            "xirr": self.xirr,
            "cashflows_yearly": [round(cf, 2) for cf in self.cashflows_yearly],
            "booking_amount": self.booking_amount,
            "possession_amount": self.possession_amount,
            "charges_value": self.charges_value,
            "charges_kind": self.charges_kind.value,
            "amount_not_disbursed": self.amount_not_disbursed,
            "total_investment": self.total_investment,
            "total_returns": self.total_returns,
            "loan_balance": self.loan_balance,
            "cagr": self.cagr,
            "construction_completion_date": self.construction_completion_date.isoformat(),
            "equity_multiplier": self.equity_multiplier,
            "monthly_cf": rows_to_dicts(self.monthly_cf),
        }


@dataclass(frozen=True)
class SimulationFailure:
    """Returned by simulate() when the inputs cannot be simulated."""

    error: str
    message: str

    def to_dict(self) -> Dict:
        return {"error": self.error, "message": self.message}


def calculate_xirr_percent(net_cash_flows: List[float]) -> Optional[float]:
    """Annualized IRR in percent (2 dp), or None when unavailable."""
    rate = irr.calculate_irr_monthly(net_cash_flows)
    if rate is None or not math.isfinite(rate) or rate == 0:
        return None
    return round(rate * 100, 2)


def calculate_equity_multiplier(
    total_investment: float, total_returns: float
) -> Optional[float]:
    """(investment + returns) / investment, rounded to 2 dp."""
    if total_investment == 0:
        return None
    return round((total_investment + total_returns) / total_investment, 2)


def summarize(
    params: InvestmentParameters, projection: CashFlowProjection
) -> InvestmentResult:
    """Reduce a projection to the investment report."""
    plan = projection.plan
    total_interest = calculate_total_interest(projection.rows)
    total_principal = calculate_total_principal(projection.rows)

    total_investment = int(plan.booking_amount + total_interest + total_principal)

    # Charge only counts as invested when paid before the sale
    if params.holding_period_years > plan.handover_period_years:
        total_investment += plan.statutory_charge

    total_returns = (
        params.final_price
        - params.acquisition_price
        - total_interest
        - plan.statutory_charge
    )

    return InvestmentResult(
        xirr=calculate_xirr_percent(projection.net_cash_flows),
        cashflows_yearly=projection.yearly_cash_flows,
        booking_amount=plan.booking_amount,
        possession_amount=plan.possession_amount,
        charges_value=plan.statutory_charge,
        charges_kind=plan.charge_kind,
        amount_not_disbursed=max(0.0, plan.loan_principal - projection.disbursed),
        total_investment=total_investment,
        total_returns=total_returns,
        loan_balance=math.ceil(projection.final_balance),
        cagr=irr.calculate_cagr(
            params.acquisition_price,
            params.final_price,
            params.holding_period_years,
        ),
        construction_completion_date=plan.handover_date,
        equity_multiplier=calculate_equity_multiplier(total_investment, total_returns),
        monthly_cf=projection.rows,
    )


def run_simulation(
    params: InvestmentParameters, booking_date: Optional[date] = None
) -> InvestmentResult:
    """
    Simulate the investment, raising on invalid inputs.

    Raises:
        SimulationError: If the parameters cannot be simulated
    """
    projection = generate_cash_flows(params, booking_date)
    return summarize(params, projection)


def simulate(
    params: InvestmentParameters, booking_date: Optional[date] = None
) -> Union[InvestmentResult, SimulationFailure]:
    """
    Simulate the investment.

    Args:
        params: Simulation inputs
        booking_date: Simulation start; defaults to today

    Returns:
        InvestmentResult, or SimulationFailure describing why it could not run
    """
    try:
        return run_simulation(params, booking_date)
    except SimulationError as e:
        logger.error(f"Simulation rejected: {type(e).__name__}: {e}")
        return SimulationFailure(error=type(e).__name__, message=str(e))
    except Exception as e:
        logger.exception("Simulation failed")
        return SimulationFailure(error=type(e).__name__, message=str(e))
