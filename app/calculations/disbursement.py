"""
Loan Disbursement Schedule

Splits a construction-linked loan into quarterly disbursements. Apartments
and villas front-load the release across construction years; plots release
half the loan in the first year.
"""

from typing import List, Sequence, Tuple
from datetime import date
import enum

from app.calculations.dates import add_months, is_before
from app.calculations.errors import InvalidScheduleInput, UnsupportedAssetType


class AssetType(str, enum.Enum):
    """Kind of property being purchased."""
    apartment = "apartment"
    villa = "villa"
    plot = "plot"


# (minimum quarter count, yearly release percentages)
CONSTRUCTION_PROFILES: Tuple[Tuple[int, Tuple[float, ...]], ...] = (
    (13, (40.0, 30.0, 15.0, 15.0)),
    (9, (70.0, 15.0, 15.0)),
    (5, (85.0, 15.0)),
    (0, (100.0,)),
)

# Plots release half the loan over the first four quarters
PLOT_FRONT_QUARTERS = 4
PLOT_FRONT_SHARE = 0.5

# Quarters beyond these caps are dropped from the schedule
MAX_QUARTERS = {
    AssetType.apartment: 16,
    AssetType.plot: 8,
    AssetType.villa: None,
}


def parse_asset_type(asset_type) -> AssetType:
    """
    Resolve an asset type value.

    Raises:
        InvalidScheduleInput: If no asset type was given
        UnsupportedAssetType: If the value is not a known asset type
    """
    if not asset_type:
        raise InvalidScheduleInput("Asset type is required")
    try:
        return AssetType(asset_type)
    except ValueError:
        raise UnsupportedAssetType(
            f"Invalid asset type {asset_type!r}. Use 'plot', 'apartment', or 'villa'."
        )


def generate_quarter_dates(first_quarter: date, handover_date: date) -> List[date]:
    """Generate quarterly dates from first_quarter, strictly before handover."""
    quarters = []
    quarter_date = first_quarter
    while is_before(quarter_date, handover_date):
        quarters.append(quarter_date)
        quarter_date = add_months(quarter_date, 3)
    return quarters


def cap_quarters(quarters: Sequence[date], asset_type) -> List[date]:
    """Drop trailing quarters past the asset type's disbursement window."""
    limit = MAX_QUARTERS[parse_asset_type(asset_type)]
    if limit is None:
        return list(quarters)
    return list(quarters[:limit])


def _construction_profile(num_quarters: int) -> Tuple[float, ...]:
    for min_quarters, percentages in CONSTRUCTION_PROFILES:
        if num_quarters >= min_quarters:
            return percentages
    return CONSTRUCTION_PROFILES[-1][1]


def _plot_disbursement(num_quarters: int, total_loan_amount: float) -> List[float]:
    if num_quarters <= PLOT_FRONT_QUARTERS:
        share = round(total_loan_amount / num_quarters, 2)
        return [share] * num_quarters

    front_share = round(
        total_loan_amount * PLOT_FRONT_SHARE / PLOT_FRONT_QUARTERS, 2
    )
    remaining_quarters = num_quarters - PLOT_FRONT_QUARTERS
    back_share = round(
        total_loan_amount * (1 - PLOT_FRONT_SHARE) / remaining_quarters, 2
    )
    return [front_share] * PLOT_FRONT_QUARTERS + [back_share] * remaining_quarters


def _construction_disbursement(
    num_quarters: int, total_loan_amount: float
) -> List[float]:
    percentages = _construction_profile(num_quarters)
    years = len(percentages)
    quarters_per_year = num_quarters // years
    remainder_quarters = num_quarters % years

    disbursement = []
    for i, percentage in enumerate(percentages):
        # Leftover quarters all land in the final year
        bucket_quarters = quarters_per_year
        if i == years - 1:
            bucket_quarters += remainder_quarters

        amount = round(total_loan_amount * percentage / 100 / bucket_quarters, 2)
        disbursement.extend([amount] * bucket_quarters)

    return disbursement


def calculate_loan_disbursement(
    quarters: Sequence[date], total_loan_amount: float, asset_type
) -> List[float]:
    """
    Calculate the loan amount released on each scheduled quarter.

    Args:
        quarters: Ordered quarter dates (only the count matters)
        total_loan_amount: Loan principal to disburse
        asset_type: apartment, villa or plot

    Returns:
        One amount per quarter, summing to the principal up to rounding

    Raises:
        InvalidScheduleInput: Empty quarter list or non-positive loan amount
        UnsupportedAssetType: Unknown asset type
    """
    if quarters is None or len(quarters) == 0:
        raise InvalidScheduleInput("At least one disbursement quarter is required")
    if not total_loan_amount or total_loan_amount <= 0:
        raise InvalidScheduleInput("Loan amount must be positive")

    asset = parse_asset_type(asset_type)
    num_quarters = len(quarters)

    if asset == AssetType.plot:
        return _plot_disbursement(num_quarters, total_loan_amount)
    return _construction_disbursement(num_quarters, total_loan_amount)
