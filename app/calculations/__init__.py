"""
Cash Flow Calculation Engine

Core modules for projecting a leveraged, construction-linked property
purchase and measuring its returns.
"""

from app.calculations import (
    amortization,
    cashflow,
    dates,
    disbursement,
    formatting,
    investment,
    irr,
)

__all__ = [
    "amortization",
    "cashflow",
    "dates",
    "disbursement",
    "formatting",
    "investment",
    "irr",
]
