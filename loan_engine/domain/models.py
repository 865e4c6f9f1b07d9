"""Domain models - immutable dataclasses representing loan calculations and applications"""

import enum
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Tuple

from loan_engine.domain.exceptions import ValidationError
from loan_engine.domain.money import DecimalLike, optional_money, to_money, to_rate


CREDIT_SCORE_MIN = 300
CREDIT_SCORE_MAX = 850


def _as_int(value) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value.strip())
    return None


def normalize_credit_score(value) -> Optional[int]:
    """Credit score as an int inside the bureau range, else None"""
    score = _as_int(value)
    if score is None or not CREDIT_SCORE_MIN <= score <= CREDIT_SCORE_MAX:
        return None
    return score


def normalize_employment_years(value) -> Optional[int]:
    """Whole years of tenure, None when missing or negative"""
    years = _as_int(value)
    if years is None or years < 0:
        return None
    return years


class EmploymentStatus(str, enum.Enum):
    FULL_TIME = "FULL_TIME"
    PART_TIME = "PART_TIME"
    SELF_EMPLOYED = "SELF_EMPLOYED"
    UNEMPLOYED = "UNEMPLOYED"
    RETIRED = "RETIRED"
    STUDENT = "STUDENT"


class RiskLevel(str, enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    VERY_HIGH = "VERY_HIGH"


class LoanType(str, enum.Enum):
    PERSONAL = "PERSONAL"
    AUTO = "AUTO"
    MORTGAGE = "MORTGAGE"
    BUSINESS = "BUSINESS"
    STUDENT = "STUDENT"
    HOME_EQUITY = "HOME_EQUITY"


class ApplicationStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    UNDER_REVIEW = "UNDER_REVIEW"
    ADDITIONAL_INFO_REQUIRED = "ADDITIONAL_INFO_REQUIRED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    WITHDRAWN = "WITHDRAWN"
    FUNDED = "FUNDED"

    @classmethod
    def terminal_statuses(cls) -> frozenset["ApplicationStatus"]:
        """Statuses where an application is no longer active."""
        return frozenset({cls.REJECTED, cls.WITHDRAWN, cls.FUNDED})

    @classmethod
    def valid_transitions(cls) -> dict["ApplicationStatus", frozenset["ApplicationStatus"]]:
        """Allowed status transitions in the application lifecycle."""
        return {
            cls.DRAFT: frozenset({cls.SUBMITTED, cls.WITHDRAWN}),
            cls.SUBMITTED: frozenset({cls.UNDER_REVIEW, cls.WITHDRAWN}),
            cls.UNDER_REVIEW: frozenset(
                {cls.APPROVED, cls.REJECTED, cls.ADDITIONAL_INFO_REQUIRED, cls.WITHDRAWN}
            ),
            cls.ADDITIONAL_INFO_REQUIRED: frozenset({cls.UNDER_REVIEW, cls.WITHDRAWN}),
            cls.APPROVED: frozenset({cls.FUNDED, cls.WITHDRAWN}),
            cls.REJECTED: frozenset(),
            cls.WITHDRAWN: frozenset(),
            cls.FUNDED: frozenset(),
        }


@dataclass(frozen=True)
class LoanTerms:
    """Principal, rate and term of a fixed-rate loan.

    Values are normalized on construction: principal to 2 fractional digits,
    annual rate to 4. Configured min/max bounds are enforced by the
    amortization engine, not here.
    """

    principal: Decimal
    annual_rate_percent: Decimal
    term_months: int
    start_date: Optional[date] = None

    def __post_init__(self):
        principal = to_money(self.principal, "principal")
        if principal <= 0:
            raise ValidationError("principal", "must be positive")

        rate = to_rate(self.annual_rate_percent, "annual_rate_percent")
        if rate < 0:
            raise ValidationError("annual_rate_percent", "cannot be negative")

        if self.term_months is None:
            raise ValidationError("term_months", "value is required")
        if isinstance(self.term_months, bool) or not isinstance(self.term_months, int):
            raise ValidationError("term_months", "must be a whole number of months")
        if self.term_months <= 0:
            raise ValidationError("term_months", "must be positive")

        # Frozen dataclass: normalized values have to go through object.__setattr__
        object.__setattr__(self, "principal", principal)
        object.__setattr__(self, "annual_rate_percent", rate)


@dataclass(frozen=True)
class AmortizationScheduleEntry:
    """Single monthly payment in an amortization schedule"""

    payment_number: int
    payment_date: date
    payment_amount: Decimal
    principal_portion: Decimal
    interest_portion: Decimal
    remaining_balance: Decimal
    cumulative_interest: Decimal


@dataclass(frozen=True)
class LoanCalculationResult:
    """Output of a schedule computation"""

    terms: LoanTerms
    monthly_payment: Decimal
    total_interest: Decimal
    total_payments: Decimal
    schedule: Tuple[AmortizationScheduleEntry, ...]
    calculated_at: datetime


@dataclass(frozen=True)
class RiskProfile:
    """Applicant financial attributes supplied per application.

    Every field is optional so incomplete applications can still be scored;
    missing data pushes the score up, never toward auto-approval.
    """

    credit_score: Optional[int] = None
    annual_income: Optional[Decimal] = None
    monthly_expenses: Optional[Decimal] = None
    employment_status: Optional[EmploymentStatus] = None
    employment_years: Optional[int] = None
    existing_debt: Optional[Decimal] = None
    requested_loan_amount: Optional[Decimal] = None

    @classmethod
    def build(
        cls,
        credit_score: Optional[int] = None,
        annual_income: Optional[DecimalLike] = None,
        monthly_expenses: Optional[DecimalLike] = None,
        employment_status: Optional[EmploymentStatus | str] = None,
        employment_years: Optional[int] = None,
        existing_debt: Optional[DecimalLike] = None,
        requested_loan_amount: Optional[DecimalLike] = None,
    ) -> "RiskProfile":
        """Build a profile from loosely typed input (strings, ints).

        An impossible credit score or tenure is dropped and scored as missing.
        """
        return cls(
            credit_score=normalize_credit_score(credit_score),
            annual_income=optional_money(annual_income, "annual_income"),
            monthly_expenses=optional_money(monthly_expenses, "monthly_expenses"),
            employment_status=EmploymentStatus(employment_status) if employment_status else None,
            employment_years=normalize_employment_years(employment_years),
            existing_debt=optional_money(existing_debt, "existing_debt"),
            requested_loan_amount=optional_money(requested_loan_amount, "requested_loan_amount"),
        )


@dataclass(frozen=True)
class RiskAssessment:
    """Output of risk assessment"""

    debt_to_income_ratio: Optional[Decimal]
    risk_score: int
    risk_level: RiskLevel
    requires_manual_review: bool
    eligible_for_auto_approval: bool


@dataclass(frozen=True)
class LoanApplication:
    """Loan application record as stored by the application-tracking layer.

    Plain data only; status changes go through loan_engine.domain.applications.
    """

    application_id: str
    terms: LoanTerms
    profile: RiskProfile
    loan_type: LoanType
    created_at: datetime
    status: ApplicationStatus = ApplicationStatus.DRAFT

    # Calculated at submission
    monthly_payment: Optional[Decimal] = None
    total_interest: Optional[Decimal] = None
    total_amount: Optional[Decimal] = None

    # Risk assessment
    debt_to_income_ratio: Optional[Decimal] = None
    risk_score: Optional[int] = None
    risk_level: Optional[RiskLevel] = None
    requires_manual_review: bool = False
    eligible_for_auto_approval: bool = False

    # Lifecycle timestamps
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    funded_at: Optional[datetime] = None
    withdrawn_at: Optional[datetime] = None

    review_notes: Optional[str] = None
    rejection_reason: Optional[str] = None
