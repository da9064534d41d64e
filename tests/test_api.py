"""
Tests for the investment report and calculation API endpoints.
"""

import pytest
from datetime import date
from fastapi.testclient import TestClient

from app.main import app
from app.api.investment import InvestmentReportInput, build_parameters
from app.config import Settings


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def report_body():
    """Apartment report request with every field supplied."""
    return {
        "acquisitionPrice": 5000000,
        "finalPrice": 8000000,
        "assetType": "apartment",
        "tenure": 20,
        "holdingPeriod": 4,
        "constructionCompletionDate": "2035-12-31",
        "interestRate": 8.5,
        "loanPercentage": 85,
    }


# ============================================================================
# HEALTH
# ============================================================================

class TestHealth:
    """Test liveness endpoints."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_api_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


# ============================================================================
# REQUEST DEFAULTS
# ============================================================================

class TestRequestDefaults:
    """Test defaulting of missing report inputs."""

    def test_apartment_defaults(self):
        inputs = InvestmentReportInput(
            acquisitionPrice=5000000, finalPrice=8000000, assetType="apartment"
        )
        params, warning = build_parameters(inputs, Settings(), today=date(2025, 1, 15))
        assert params.tenure_years == 20
        assert params.holding_period_years == 4
        assert params.annual_interest_rate_percent == 8.5
        assert params.loan_percentage == 85
        assert params.construction_completion_date == date(2029, 1, 15)
        assert "apartment" in warning

    def test_plot_defaults(self):
        inputs = InvestmentReportInput(
            acquisitionPrice=2000000, finalPrice=2600000, assetType="plot"
        )
        params, warning = build_parameters(inputs, Settings(), today=date(2025, 1, 15))
        assert params.holding_period_years == 3
        assert params.loan_percentage == 75
        assert params.construction_completion_date == date(2028, 1, 15)
        assert warning is not None

    def test_supplied_values_kept(self, report_body):
        inputs = InvestmentReportInput(**report_body)
        params, warning = build_parameters(inputs, Settings(), today=date(2025, 1, 15))
        assert params.construction_completion_date == date(2035, 12, 31)
        assert params.holding_period_years == 4
        assert warning is None

    def test_snake_case_fields_accepted(self):
        inputs = InvestmentReportInput(
            acquisition_price=1000000, final_price=1200000, asset_type="villa"
        )
        assert inputs.acquisition_price == 1000000


# ============================================================================
# INVESTMENT REPORT API TESTS
# ============================================================================

class TestInvestmentReportAPI:
    """Test the investment report endpoint."""

    def test_full_request(self, client, report_body):
        response = client.post("/api/investmentReport", json=report_body)
        assert response.status_code == 200
        payload = response.json()
        assert payload["success"] is True
        assert "warning" not in payload

        data = payload["data"]
        assert len(data["monthly_cf"]) == 48
        assert data["xirr"] is not None
        assert data["equity_multiplier"] > 1
        assert data["booking_amount"] == 500000
        assert data["construction_completion_date"] == "2035-12-31"

    def test_minimal_request_uses_defaults(self, client):
        response = client.post(
            "/api/investmentReport",
            json={
                "acquisitionPrice": 5000000,
                "finalPrice": 8000000,
                "assetType": "apartment",
            },
        )
        assert response.status_code == 200
        payload = response.json()
        assert payload["success"] is True
        assert "warning" in payload
        assert len(payload["data"]["monthly_cf"]) == 48

    def test_monthly_rows_are_numeric(self, client, report_body):
        data = client.post("/api/investmentReport", json=report_body).json()["data"]
        first = data["monthly_cf"][0]
        assert first["net_cash_flow"] == -500000
        assert isinstance(first["emi"], (int, float))
        assert first["other_cash_flow"]["components"] == ["down payment (-₹5,00,000)"]
        # Outflows carry a negative sign
        assert first["other_cash_flow"]["value"] == -500000

    def test_unix_timestamp_construction_date(self, client, report_body):
        report_body["constructionCompletionDate"] = 2082758400  # 2036-01-01 UTC
        response = client.post("/api/investmentReport", json=report_body)
        assert response.status_code == 200

    def test_unpadded_construction_date(self, client, report_body):
        report_body["constructionCompletionDate"] = "2029-3-5"
        response = client.post("/api/investmentReport", json=report_body)
        assert response.status_code == 200
        assert response.json()["data"]["construction_completion_date"] == "2029-03-05"

    def test_negative_final_price(self, client, report_body):
        report_body["finalPrice"] = -1000
        response = client.post("/api/investmentReport", json=report_body)
        assert response.status_code == 500
        assert response.json()["message"] == "Final price must be positive"

    def test_loan_percentage_above_hundred(self, client, report_body):
        report_body["loanPercentage"] = 150
        response = client.post("/api/investmentReport", json=report_body)
        assert response.status_code == 500
        assert "Loan percentage" in response.json()["message"]

    def test_unsupported_asset_type(self, client, report_body):
        report_body["assetType"] = "castle"
        response = client.post("/api/investmentReport", json=report_body)
        assert response.status_code == 500
        payload = response.json()
        assert payload["error"] == "Internal server error"
        assert "castle" in payload["message"]

    def test_zero_holding_period(self, client, report_body):
        report_body["holdingPeriod"] = 0
        response = client.post("/api/investmentReport", json=report_body)
        assert response.status_code == 500
        assert "Holding period" in response.json()["message"]

    def test_invalid_construction_date(self, client, report_body):
        report_body["constructionCompletionDate"] = "someday"
        response = client.post("/api/investmentReport", json=report_body)
        assert response.status_code == 500
        assert "message" in response.json()

    def test_missing_required_field(self, client):
        response = client.post("/api/investmentReport", json={"assetType": "plot"})
        assert response.status_code == 422


# ============================================================================
# CALCULATION API TESTS
# ============================================================================

class TestCalculationAPI:
    """Test stand-alone calculation endpoints."""

    def test_irr(self, client):
        response = client.post(
            "/api/calculate/irr", json={"cash_flows": [-100] + [0] * 11 + [110]}
        )
        assert response.status_code == 200
        data = response.json()
        assert abs(data["irr"] - 0.10) < 1e-6
        assert data["profit"] == 10

    def test_irr_unsolvable(self, client):
        response = client.post("/api/calculate/irr", json={"cash_flows": [10, 20]})
        assert response.status_code == 200
        assert response.json()["irr"] is None

    def test_irr_empty(self, client):
        response = client.post("/api/calculate/irr", json={"cash_flows": []})
        assert response.status_code == 400

    def test_disbursement_by_count(self, client):
        response = client.post(
            "/api/calculate/disbursement",
            json={
                "loan_amount": 1000000,
                "asset_type": "plot",
                "quarter_count": 4,
                "start_date": "2025-01-15",
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert [q["amount"] for q in data["quarters"]] == [250000.0] * 4
        assert data["quarters"][0]["quarter_date"] == "2025-04-15"
        assert data["total"] == 1000000

    def test_disbursement_with_cap(self, client):
        response = client.post(
            "/api/calculate/disbursement",
            json={
                "loan_amount": 1000000,
                "asset_type": "plot",
                "quarter_count": 12,
                "apply_asset_cap": True,
            },
        )
        assert response.status_code == 200
        assert len(response.json()["quarters"]) == 8

    def test_disbursement_unknown_asset(self, client):
        response = client.post(
            "/api/calculate/disbursement",
            json={"loan_amount": 1000000, "asset_type": "castle", "quarter_count": 4},
        )
        assert response.status_code == 400

    def test_disbursement_no_quarters(self, client):
        response = client.post(
            "/api/calculate/disbursement",
            json={"loan_amount": 1000000, "asset_type": "villa"},
        )
        assert response.status_code == 400

    def test_disbursement_quarter_count_bounded(self, client):
        response = client.post(
            "/api/calculate/disbursement",
            json={"loan_amount": 1000000, "asset_type": "villa", "quarter_count": 10**8},
        )
        assert response.status_code == 422
