"""
Loan Amortization Calculations

EMI and single-month amortization steps for a loan whose balance grows in
tranches. The EMI is recomputed every month against the then-current balance
and the then-remaining term.
"""

from typing import Iterable, NamedTuple


class Instalment(NamedTuple):
    """One month of loan servicing."""

    opening_balance: float
    emi: float
    interest: float
    principal: float
    closing_balance: float


def monthly_rate(annual_rate_percent: float) -> float:
    """Convert an annual percentage rate (8.5) to a monthly decimal rate."""
    return annual_rate_percent / 12 / 100


def calculate_payment(
    principal: float, annual_rate: float, amortization_months: int
) -> float:
    """
    Calculate monthly loan payment (EMI).

    Matches Excel's PMT() function.

    Args:
        principal: Outstanding loan balance
        annual_rate: Annual interest rate as decimal (e.g., 0.085 for 8.5%)
        amortization_months: Months left to repay the balance

    Returns:
        Monthly payment amount (positive number)
    """
    if principal <= 0:
        return 0.0
    if amortization_months <= 0:
        return 0.0

    rate = annual_rate / 12

    if rate == 0:
        return principal / amortization_months

    return principal * rate / (1 - (1 + rate) ** -amortization_months)


def amortize_month(
    balance: float, annual_rate_percent: float, remaining_months: int
) -> Instalment:
    """
    Service the loan for one month.

    Args:
        balance: Balance outstanding at the start of the month
        annual_rate_percent: Annual interest rate in percent
        remaining_months: Months left in the loan tenure, this one included
    """
    interest = balance * monthly_rate(annual_rate_percent)
    emi = calculate_payment(balance, annual_rate_percent / 100, remaining_months)
    principal = emi - interest
    closing = balance - principal

    return Instalment(
        opening_balance=balance,
        emi=emi,
        interest=interest,
        principal=principal,
        closing_balance=closing,
    )


def calculate_total_interest(rows: Iterable) -> float:
    """Sum interest paid across monthly rows."""
    return sum(row.interest for row in rows)


def calculate_total_principal(rows: Iterable) -> float:
    """Sum principal repaid across monthly rows."""
    return sum(row.principal for row in rows)
