"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os
from datetime import date

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.calculations.cashflow import InvestmentParameters
from app.calculations.disbursement import AssetType


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "integration: marks integration tests")


@pytest.fixture
def booking_date():
    """Fixed booking date so projections are reproducible."""
    return date(2025, 1, 15)


@pytest.fixture
def apartment_params():
    """Apartment bought at 50L, sold at 80L after four years."""
    return InvestmentParameters(
        acquisition_price=5_000_000,
        tenure_years=20,
        holding_period_years=4,
        construction_completion_date=date(2029, 1, 15),
        final_price=8_000_000,
        annual_interest_rate_percent=8.5,
        loan_percentage=85,
        asset_type=AssetType.apartment,
    )


@pytest.fixture
def short_tenure_params():
    """Loan tenure equal to the holding period, handover after one year."""
    return InvestmentParameters(
        acquisition_price=5_000_000,
        tenure_years=2,
        holding_period_years=2,
        construction_completion_date=date(2026, 1, 15),
        final_price=6_000_000,
        annual_interest_rate_percent=9.0,
        loan_percentage=85,
        asset_type=AssetType.apartment,
    )


@pytest.fixture
def plot_params():
    """Plot with a long construction window and 75% financing."""
    return InvestmentParameters(
        acquisition_price=2_000_000,
        tenure_years=20,
        holding_period_years=3,
        construction_completion_date=date(2030, 1, 15),
        final_price=2_600_000,
        annual_interest_rate_percent=8.5,
        loan_percentage=75,
        asset_type=AssetType.plot,
    )
