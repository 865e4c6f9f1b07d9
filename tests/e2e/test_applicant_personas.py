"""
E2E tests for applicant personas: calculate a loan, then assess the applicant
against the computed payment, the way the application-tracking layer does
on submission.

Applicant personas:
- prime: Excellent credit, low DTI, long tenure, auto-approval expected
- new_hire: Prime profile but under 2 years in the job, LOW risk without auto-approval
- gig_worker: Self-employed with fair credit, MEDIUM risk
- stretched: Payment pushes DTI past 43%, manual review expected
- no_history: No credit file, income or employment on record, VERY_HIGH risk
"""

import pytest
from decimal import Decimal
from fastapi.testclient import TestClient


def calculate_then_assess(client: TestClient, loan: dict, applicant: dict) -> dict:
    calculation = client.post("/v1/loans/calculate", json=loan)
    assert calculation.status_code == 200

    monthly_payment = calculation.json()["monthly_payment"]
    assessment = client.post(
        "/v1/risk/assessment",
        json={"monthly_payment": monthly_payment, **applicant},
    )
    assert assessment.status_code == 200
    return assessment.json()


PRIME = {
    "credit_score": 790,
    "annual_income": "150000",
    "monthly_expenses": "1500",
    "employment_status": "FULL_TIME",
    "employment_years": 8,
    "requested_loan_amount": "25000",
}


@pytest.mark.integration
def test_prime_auto_approval(client: TestClient):
    """
    prime: $25k over 60 months at 6.5%
    Expected: LOW risk, eligible for auto-approval
    """
    data = calculate_then_assess(
        client,
        {"principal": "25000", "annual_rate_percent": "6.5", "term_months": 60, "start_date": "2024-05-01"},
        PRIME,
    )

    assert data["risk_level"] == "LOW"
    assert data["eligible_for_auto_approval"] is True, "prime should be auto-approvable"
    assert data["requires_manual_review"] is False


@pytest.mark.integration
def test_new_hire_loses_auto_approval(client: TestClient):
    """
    new_hire: same as prime with 1 year of tenure
    Expected: still LOW risk, but must go through review
    """
    data = calculate_then_assess(
        client,
        {"principal": "25000", "annual_rate_percent": "6.5", "term_months": 60, "start_date": "2024-05-01"},
        {**PRIME, "employment_years": 1},
    )

    assert data["risk_level"] == "LOW"
    assert data["risk_score"] == 10
    assert data["eligible_for_auto_approval"] is False


@pytest.mark.integration
def test_gig_worker_medium_risk(client: TestClient):
    """
    gig_worker: self-employed, credit 640, loan at 40% of income
    Expected: MEDIUM risk (20 credit + 10 employment + 8 loan/income)
    """
    data = calculate_then_assess(
        client,
        {"principal": "20000", "annual_rate_percent": "9.25", "term_months": 48, "start_date": "2024-05-01"},
        {
            "credit_score": 640,
            "annual_income": "50000",
            "monthly_expenses": "400",
            "employment_status": "SELF_EMPLOYED",
            "employment_years": 4,
            "requested_loan_amount": "20000",
        },
    )

    assert data["risk_level"] == "MEDIUM"
    assert data["risk_score"] == 38
    assert data["requires_manual_review"] is False
    assert data["eligible_for_auto_approval"] is False


@pytest.mark.integration
def test_stretched_borrower_manual_review(client: TestClient):
    """
    stretched: part-time, credit 680, expenses already high (DTI ~0.47)
    Expected: HIGH risk, manual review required
    """
    data = calculate_then_assess(
        client,
        {"principal": "30000", "annual_rate_percent": "12", "term_months": 36, "start_date": "2024-05-01"},
        {
            "credit_score": 680,
            "annual_income": "72000",
            "monthly_expenses": "1800",
            "employment_status": "PART_TIME",
            "employment_years": 3,
            "requested_loan_amount": "30000",
        },
    )

    assert data["debt_to_income_ratio"] is not None
    assert Decimal(data["debt_to_income_ratio"]) > Decimal("0.43")
    assert data["risk_level"] == "HIGH"
    assert data["requires_manual_review"] is True


@pytest.mark.integration
def test_no_history_very_high_risk(client: TestClient):
    """
    no_history: no credit score, income or employer on record
    Expected: VERY_HIGH risk (25 credit + 40 employment + 10 tenure), DTI undefined
    """
    data = calculate_then_assess(
        client,
        {"principal": "5000", "annual_rate_percent": "5.25", "term_months": 24, "start_date": "2024-05-01"},
        {"employment_years": 0, "requested_loan_amount": "5000"},
    )

    assert data["debt_to_income_ratio"] is None
    assert data["risk_score"] == 75
    assert data["risk_level"] == "VERY_HIGH"
    assert data["eligible_for_auto_approval"] is False
