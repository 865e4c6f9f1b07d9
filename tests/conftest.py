"""Pytest fixtures for testing"""

import pytest
from datetime import date
from decimal import Decimal
from fastapi.testclient import TestClient

from loan_engine.api.dependencies import get_calculation_cache
from loan_engine.api.main import create_app
from loan_engine.domain.amortization import LoanLimits
from loan_engine.domain.models import EmploymentStatus, LoanTerms, RiskProfile
from loan_engine.infrastructure.cache import CalculationCache


@pytest.fixture
def limits() -> LoanLimits:
    """Default bounds, independent of any .env on the test machine"""
    return LoanLimits(
        min_loan_amount=Decimal("1000.00"),
        max_loan_amount=Decimal("10000000.00"),
        max_interest_rate=Decimal("30.00"),
        min_term_months=1,
        max_term_months=480,
    )


@pytest.fixture
def standard_terms() -> LoanTerms:
    """$10,000 at 5% over 12 months"""
    return LoanTerms(
        principal=Decimal("10000.00"),
        annual_rate_percent=Decimal("5.00"),
        term_months=12,
        start_date=date(2024, 1, 15),
    )


@pytest.fixture
def cache() -> CalculationCache:
    return CalculationCache(max_size=16)


@pytest.fixture
def client(cache: CalculationCache) -> TestClient:
    """Create FastAPI test client with an isolated calculation cache"""
    app = create_app()
    app.dependency_overrides[get_calculation_cache] = lambda: cache
    return TestClient(app)


@pytest.fixture
def prime_profile() -> RiskProfile:
    """Strong applicant: DTI 0.20 on a $1,000 payment, 5 years full time"""
    return RiskProfile(
        credit_score=780,
        annual_income=Decimal("120000.00"),
        monthly_expenses=Decimal("1000.00"),
        employment_status=EmploymentStatus.FULL_TIME,
        employment_years=5,
        existing_debt=Decimal("0.00"),
        requested_loan_amount=Decimal("30000.00"),
    )


@pytest.fixture
def distressed_profile() -> RiskProfile:
    """Weak applicant: DTI 0.50 on a $1,500 payment, loan/income 0.6"""
    return RiskProfile(
        credit_score=550,
        annual_income=Decimal("60000.00"),
        monthly_expenses=Decimal("1000.00"),
        employment_status=EmploymentStatus.UNEMPLOYED,
        employment_years=0,
        existing_debt=Decimal("2500.00"),
        requested_loan_amount=Decimal("36000.00"),
    )
