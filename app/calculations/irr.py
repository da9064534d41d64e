"""
IRR and NPV Calculations

Implements IRR for monthly cash flows using Newton-Raphson. Flows are indexed
by month but discounted with an annual compounding exponent (i / 12), so the
solved rate is an annualized return.
"""

from typing import Optional, Sequence
import logging
import numpy as np

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 100
TOLERANCE = 1e-8
DEFAULT_GUESS = 0.05
PERIODS_PER_YEAR = 12


def _time_fractions(count: int) -> np.ndarray:
    return np.arange(count, dtype=float) / PERIODS_PER_YEAR


def calculate_npv(cash_flows: Sequence[float], rate: float) -> float:
    """
    Calculate NPV of monthly cash flows at an annual rate.

    Args:
        cash_flows: Monthly cash flows (negative = outflow, positive = inflow)
        rate: Annual discount rate (e.g., 0.10 for 10%)

    Returns:
        NPV value
    """
    values = np.asarray(cash_flows, dtype=float)
    years = _time_fractions(len(values))
    return float(np.sum(values / (1 + rate) ** years))


def _npv_derivative(cash_flows: Sequence[float], rate: float) -> float:
    """Derivative of NPV with respect to rate (for Newton-Raphson)."""
    values = np.asarray(cash_flows, dtype=float)
    years = _time_fractions(len(values))
    return float(-np.sum(years * values / (1 + rate) ** (years + 1)))


def calculate_irr_monthly(
    cash_flows: Sequence[float], guess: float = DEFAULT_GUESS
) -> Optional[float]:
    """
    Calculate IRR of monthly cash flows.

    Args:
        cash_flows: Monthly net cash flows, month 0 first
        guess: Initial guess for rate (default 0.05 = 5%)

    Returns:
        Annualized IRR as decimal, or None when no rate can be found
    """
    has_positive = any(cf > 0 for cf in cash_flows)
    has_negative = any(cf < 0 for cf in cash_flows)

    if not has_positive or not has_negative:
        return None

    rate = guess

    with np.errstate(all="ignore"):
        for _ in range(MAX_ITERATIONS):
            npv = calculate_npv(cash_flows, rate)
            dnpv = _npv_derivative(cash_flows, rate)

            if not np.isfinite(dnpv) or abs(dnpv) < TOLERANCE:
                logger.warning(f"IRR derivative too flat at rate {rate}")
                return None

            new_rate = rate - npv / dnpv

            if abs(new_rate - rate) < TOLERANCE:
                return new_rate

            rate = new_rate

    logger.warning(f"IRR did not converge after {MAX_ITERATIONS} iterations")
    return None


def calculate_cagr(
    start_value: float, end_value: float, years: float
) -> float:
    """Compound annual growth rate between two values."""
    return (end_value / start_value) ** (1 / years) - 1
