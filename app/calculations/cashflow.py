"""
Cash Flow Calculations

Month-by-month projection of a construction-linked property purchase: loan
tranches released quarterly, EMI servicing, one-off payments at booking and
handover, and the sale at the end of the holding period.

The projection is a fold over months. Each step takes an immutable LoopState
and returns the next one together with that month's row.
"""

from typing import List, Optional, Tuple
from datetime import date
from dataclasses import dataclass, replace
import enum
import math

from app.calculations import dates
from app.calculations.amortization import amortize_month
from app.calculations.disbursement import (
    calculate_loan_disbursement,
    cap_quarters,
    generate_quarter_dates,
    parse_asset_type,
    AssetType,
)
from app.calculations.errors import DegenerateSimulation

# Payment plan, as percentages of the acquisition price
BOOKING_PERCENT = 10.0
POSSESSION_PERCENT = 5.0
POSSESSION_CEILING_PERCENT = 90.0
BUILDER_CEILING_PERCENT = 85.0
TRANSFER_FEE_PERCENT = 2.0
STAMP_DUTY_PERCENT = 6.5

# Loan disbursement starts one quarter after booking
FIRST_DISBURSEMENT_OFFSET_MONTHS = 3
DECEMBER = 12


class CashEventKind(str, enum.Enum):
    """One-off cash movements outside the EMI."""
    down_payment = "down_payment"
    builder_upfront = "builder_upfront"
    possession = "possession"
    stamp_duty = "stamp_duty"
    transfer_fees = "transfer_fees"
    sale = "sale"
    loan_repayment = "loan_repayment"
    undisbursed_loan = "undisbursed_loan"


@dataclass(frozen=True)
class CashEvent:
    """A signed one-off cash movement (negative = outflow)."""

    kind: CashEventKind
    amount: float


@dataclass(frozen=True)
class InvestmentParameters:
    """Inputs for one property simulation."""

    acquisition_price: float
    tenure_years: int
    holding_period_years: int
    construction_completion_date: date
    final_price: float
    annual_interest_rate_percent: float
    loan_percentage: float
    asset_type: AssetType


@dataclass(frozen=True)
class SimulationPlan:
    """Quantities derived from the parameters before the monthly loop runs."""

    booking_date: date
    handover_date: date
    quarters: Tuple[date, ...]
    disbursements: Tuple[float, ...]
    loan_principal: float
    booking_amount: float
    possession_amount: float
    statutory_charge: float
    charge_kind: CashEventKind
    builder_upfront_amount: float
    handover_period_years: int
    total_months: int


@dataclass(frozen=True)
class MonthlyRow:
    """One simulated month."""

    label: str
    opening_balance: float
    emi: float
    interest: float
    principal: float
    closing_balance: float
    other_cash_flow: float
    builder_amount: float
    net_cash_flow: float
    events: Tuple[CashEvent, ...] = ()


@dataclass(frozen=True)
class LoopState:
    """Values carried from one month to the next."""

    balance: float = 0.0
    disbursed: float = 0.0
    quarter_index: int = 0
    yearly_emi: float = 0.0
    yearly_builder: float = 0.0
    handover_settled: bool = False
    charge_in_yearly: bool = False
    yearly_cash_flows: Tuple[float, ...] = ()


@dataclass(frozen=True)
class CashFlowProjection:
    """Output of the monthly loop."""

    plan: SimulationPlan
    rows: Tuple[MonthlyRow, ...]
    yearly_cash_flows: Tuple[float, ...]
    final_balance: float
    disbursed: float

    @property
    def net_cash_flows(self) -> List[float]:
        return [row.net_cash_flow for row in self.rows]


def _percent_of(price: float, percent: float) -> float:
    return price * percent / 100


def validate_parameters(params: InvestmentParameters) -> None:
    """
    Reject parameters that cannot produce a meaningful projection.

    Raises:
        DegenerateSimulation: Non-positive tenure, holding period or prices,
            or a loan percentage outside 0-100
    """
    if params.tenure_years is None or params.tenure_years <= 0:
        raise DegenerateSimulation("Loan tenure must be at least one year")
    if params.holding_period_years is None or params.holding_period_years <= 0:
        raise DegenerateSimulation("Holding period must be at least one year")
    if params.acquisition_price is None or params.acquisition_price <= 0:
        raise DegenerateSimulation("Acquisition price must be positive")
    if params.final_price is None or params.final_price <= 0:
        raise DegenerateSimulation("Final price must be positive")
    if params.loan_percentage is None or not 0 <= params.loan_percentage <= 100:
        raise DegenerateSimulation("Loan percentage must be between 0 and 100")


def build_plan(
    params: InvestmentParameters, booking_date: Optional[date] = None
) -> SimulationPlan:
    """
    Derive the disbursement schedule and one-off amounts.

    Args:
        params: Simulation inputs
        booking_date: Simulation start; defaults to today
    """
    validate_parameters(params)
    asset_type = parse_asset_type(params.asset_type)

    if booking_date is None:
        booking_date = dates.now()

    first_quarter = dates.add_months(booking_date, FIRST_DISBURSEMENT_OFFSET_MONTHS)

    # At least one full quarter must precede handover
    handover_date = params.construction_completion_date
    if dates.is_before(handover_date, first_quarter):
        handover_date = dates.add_years(first_quarter, 1)

    quarters = cap_quarters(
        generate_quarter_dates(first_quarter, handover_date), asset_type
    )

    price = params.acquisition_price
    loan_principal = _percent_of(price, params.loan_percentage)
    disbursements = calculate_loan_disbursement(quarters, loan_principal, asset_type)

    handover_period = dates.year(handover_date) - dates.year(booking_date)
    if handover_period >= params.holding_period_years:
        charge_kind = CashEventKind.transfer_fees
        statutory_charge = _percent_of(price, TRANSFER_FEE_PERCENT)
    else:
        charge_kind = CashEventKind.stamp_duty
        statutory_charge = _percent_of(price, STAMP_DUTY_PERCENT)

    possession_percent = min(
        POSSESSION_PERCENT, POSSESSION_CEILING_PERCENT - params.loan_percentage
    )
    builder_percent = max(0.0, BUILDER_CEILING_PERCENT - params.loan_percentage)

    return SimulationPlan(
        booking_date=booking_date,
        handover_date=handover_date,
        quarters=tuple(quarters),
        disbursements=tuple(disbursements),
        loan_principal=loan_principal,
        booking_amount=_percent_of(price, BOOKING_PERCENT),
        possession_amount=_percent_of(price, possession_percent),
        statutory_charge=statutory_charge,
        charge_kind=charge_kind,
        builder_upfront_amount=_percent_of(price, builder_percent),
        handover_period_years=handover_period,
        total_months=min(params.tenure_years, params.holding_period_years) * 12,
    )


def _release_tranche(
    state: LoopState, plan: SimulationPlan, current: date
) -> LoopState:
    index = state.quarter_index
    if index >= len(plan.quarters) or not dates.same_month(plan.quarters[index], current):
        return state

    amount = plan.disbursements[index]
    return replace(
        state,
        balance=state.balance + amount,
        disbursed=state.disbursed + amount,
        quarter_index=index + 1,
    )


def _handover_events(plan: SimulationPlan) -> List[CashEvent]:
    return [
        CashEvent(CashEventKind.possession, -plan.possession_amount),
        CashEvent(plan.charge_kind, -plan.statutory_charge),
    ]


def simulate_month(
    state: LoopState,
    month_index: int,
    params: InvestmentParameters,
    plan: SimulationPlan,
) -> Tuple[LoopState, MonthlyRow]:
    """
    Advance the projection by one month.

    Returns:
        The state after this month and the month's row
    """
    current = dates.add_months(plan.booking_date, month_index)
    is_last_month = month_index == plan.total_months - 1

    state = _release_tranche(state, plan, current)

    remaining_months = params.tenure_years * 12 - month_index
    instalment = amortize_month(
        state.balance, params.annual_interest_rate_percent, remaining_months
    )
    emi = instalment.emi if math.isfinite(instalment.emi) else 0.0

    events: List[CashEvent] = []
    builder_amount = 0.0
    handover_settled = state.handover_settled

    if month_index == 0:
        events.append(CashEvent(CashEventKind.down_payment, -plan.booking_amount))
        if plan.builder_upfront_amount:
            events.append(
                CashEvent(CashEventKind.builder_upfront, -plan.builder_upfront_amount)
            )
            builder_amount += plan.builder_upfront_amount

    if dates.same_month(current, plan.handover_date):
        events.extend(_handover_events(plan))
        builder_amount += plan.possession_amount
        handover_settled = True

    # Handover falls after the sale: settle it in the final month
    if is_last_month and not handover_settled:
        events.extend(_handover_events(plan))
        builder_amount += plan.possession_amount
        handover_settled = True

    if is_last_month:
        undisbursed = float(int(plan.loan_principal - state.disbursed))
        events.append(CashEvent(CashEventKind.sale, params.final_price))
        events.append(
            CashEvent(CashEventKind.loan_repayment, -instalment.closing_balance)
        )
        if undisbursed:
            events.append(CashEvent(CashEventKind.undisbursed_loan, -undisbursed))
        builder_amount += undisbursed

    other_cash_flow = sum(event.amount for event in events)

    row = MonthlyRow(
        label=dates.format_month_label(current),
        opening_balance=instalment.opening_balance,
        emi=instalment.emi,
        interest=instalment.interest,
        principal=instalment.principal,
        closing_balance=instalment.closing_balance,
        other_cash_flow=other_cash_flow,
        builder_amount=builder_amount,
        net_cash_flow=-emi + other_cash_flow,
        events=tuple(events),
    )

    yearly_emi = state.yearly_emi + emi
    yearly_builder = state.yearly_builder + builder_amount
    yearly_cash_flows = state.yearly_cash_flows
    charge_in_yearly = state.charge_in_yearly

    if dates.month(current) == DECEMBER:
        year_total = -(yearly_emi + yearly_builder)
        if not charge_in_yearly and dates.year(current) == dates.year(plan.handover_date):
            year_total -= plan.statutory_charge
            charge_in_yearly = True
        yearly_cash_flows = yearly_cash_flows + (year_total,)
        yearly_emi = 0.0
        yearly_builder = 0.0

    next_state = replace(
        state,
        balance=instalment.closing_balance,
        yearly_emi=yearly_emi,
        yearly_builder=yearly_builder,
        handover_settled=handover_settled,
        charge_in_yearly=charge_in_yearly,
        yearly_cash_flows=yearly_cash_flows,
    )
    return next_state, row


def reconcile_yearly_cash_flows(
    state: LoopState, params: InvestmentParameters, plan: SimulationPlan
) -> List[float]:
    """
    Close out the yearly buckets after the last simulated month.

    Flushes a partial final year, books the sale net of the loan payoff,
    charges the booking amount to the first year and the statutory charge to
    the last year if no December picked it up.
    """
    cash_flows = list(state.yearly_cash_flows)

    if state.yearly_emi > 0 or state.yearly_builder > 0:
        cash_flows.append(-(state.yearly_emi + state.yearly_builder))

    sale_proceeds = params.final_price - state.balance
    if not cash_flows:
        cash_flows.append(sale_proceeds)
    elif cash_flows[-1] != 0 or len(cash_flows) == 1:
        cash_flows[-1] += sale_proceeds
    else:
        cash_flows.pop()
        cash_flows[-1] += sale_proceeds

    cash_flows[0] -= plan.booking_amount

    if not state.charge_in_yearly:
        cash_flows[-1] -= plan.statutory_charge

    return [cf for cf in cash_flows if math.isfinite(cf)]


def generate_cash_flows(
    params: InvestmentParameters, booking_date: Optional[date] = None
) -> CashFlowProjection:
    """
    Run the monthly projection.

    Covers min(tenure, holding period) years starting at the booking month.

    Raises:
        DegenerateSimulation: Nothing to simulate
        InvalidScheduleInput: Loan cannot be scheduled
        UnsupportedAssetType: Unknown asset type
    """
    plan = build_plan(params, booking_date)

    state = LoopState()
    rows = []
    for month_index in range(plan.total_months):
        state, row = simulate_month(state, month_index, params, plan)
        rows.append(row)

    return CashFlowProjection(
        plan=plan,
        rows=tuple(rows),
        yearly_cash_flows=tuple(reconcile_yearly_cash_flows(state, params, plan)),
        final_balance=state.balance,
        disbursed=state.disbursed,
    )
