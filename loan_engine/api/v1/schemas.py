"""Pydantic schemas for API request/response validation.

Monetary amounts, rates and ratios are Decimal and serialize as JSON
strings ("856.07", "0.2000").
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from loan_engine.domain.models import EmploymentStatus, RiskLevel


class CalculationRequest(BaseModel):
    """Request body for POST /v1/loans/calculate"""

    principal: Decimal = Field(..., description="Loan amount")
    annual_rate_percent: Decimal = Field(..., description="Annual interest rate in percent, e.g. 5.25")
    term_months: int = Field(..., description="Number of monthly payments")
    start_date: Optional[date] = Field(None, description="First payment date (default: today)")


class ScheduleEntrySchema(BaseModel):
    """Single payment in an amortization schedule"""

    payment_number: int
    payment_date: date
    payment_amount: Decimal
    principal_portion: Decimal
    interest_portion: Decimal
    remaining_balance: Decimal
    cumulative_interest: Decimal


class CalculationResponse(BaseModel):
    """Response for POST /v1/loans/calculate"""

    principal: Decimal
    annual_rate_percent: Decimal
    term_months: int
    monthly_payment: Decimal
    total_interest: Decimal
    total_payments: Decimal
    schedule: List[ScheduleEntrySchema]
    calculated_at: datetime


class AffordabilityRequest(BaseModel):
    """Request body for POST /v1/loans/affordability"""

    monthly_income: Decimal
    existing_debt: Optional[Decimal] = None
    annual_rate: Decimal
    term_months: int
    max_dti_ratio: Optional[Decimal] = Field(None, description="Defaults to the configured 0.43")


class AffordabilityResponse(BaseModel):
    max_loan_amount: Decimal


class SimpleInterestRequest(BaseModel):
    """Request body for POST /v1/loans/simple-interest"""

    principal: Decimal
    annual_rate: Decimal
    days: int


class SimpleInterestResponse(BaseModel):
    interest: Decimal


class RatesResponse(BaseModel):
    """Reference annual rates keyed by loan type"""

    rates: Dict[str, Decimal]


class AssessmentRequest(BaseModel):
    """Request body for POST /v1/risk/assessment"""

    monthly_payment: Decimal = Field(..., ge=0, description="Monthly payment from the loan calculation")
    credit_score: Optional[int] = Field(None, ge=300, le=850)
    annual_income: Optional[Decimal] = Field(None, ge=0)
    monthly_expenses: Optional[Decimal] = Field(None, ge=0)
    employment_status: Optional[EmploymentStatus] = None
    employment_years: Optional[int] = Field(None, ge=0)
    existing_debt: Optional[Decimal] = Field(None, ge=0)
    requested_loan_amount: Optional[Decimal] = Field(None, ge=0)


class AssessmentResponse(BaseModel):
    """Response for POST /v1/risk/assessment"""

    debt_to_income_ratio: Optional[Decimal] = None
    risk_score: int
    risk_level: RiskLevel
    requires_manual_review: bool
    eligible_for_auto_approval: bool
