"""Risk scoring engine - debt-to-income, risk points and auto-approval eligibility"""

from dataclasses import dataclass, field
from decimal import Decimal, localcontext
from typing import Dict, FrozenSet, Optional, Tuple

from loan_engine.domain.exceptions import ValidationError
from loan_engine.domain.models import (
    EmploymentStatus,
    RiskAssessment,
    RiskLevel,
    RiskProfile,
    normalize_credit_score,
    normalize_employment_years,
)
from loan_engine.domain.money import DecimalLike, round_money, round_ratio, to_money


def _default_employment_points() -> Dict[EmploymentStatus, int]:
    return {
        EmploymentStatus.UNEMPLOYED: 40,
        EmploymentStatus.PART_TIME: 15,
        EmploymentStatus.SELF_EMPLOYED: 10,
        EmploymentStatus.STUDENT: 20,
        EmploymentStatus.RETIRED: 5,
        EmploymentStatus.FULL_TIME: 0,
    }


@dataclass(frozen=True)
class RiskPolicy:
    """
    Point table and thresholds used to score an application.

    Bands are checked in order and the first match wins:
    - credit_score_bands: (upper bound, points), applies when score < bound
    - dti_bands / loan_to_income_bands: (lower bound, points), applies when ratio > bound
    - level_thresholds: (minimum points, level), applies when score >= minimum
    """

    missing_credit_score_points: int = 25
    credit_score_bands: Tuple[Tuple[int, int], ...] = ((600, 30), (650, 20), (700, 10))
    dti_bands: Tuple[Tuple[Decimal, int], ...] = (
        (Decimal("0.43"), 25),
        (Decimal("0.36"), 15),
        (Decimal("0.28"), 5),
    )
    employment_points: Dict[EmploymentStatus, int] = field(default_factory=_default_employment_points)
    short_tenure_years: int = 2
    short_tenure_points: int = 10
    loan_to_income_bands: Tuple[Tuple[Decimal, int], ...] = (
        (Decimal("0.5"), 15),
        (Decimal("0.3"), 8),
    )
    level_thresholds: Tuple[Tuple[int, RiskLevel], ...] = (
        (60, RiskLevel.VERY_HIGH),
        (40, RiskLevel.HIGH),
        (25, RiskLevel.MEDIUM),
    )
    manual_review_levels: FrozenSet[RiskLevel] = frozenset({RiskLevel.HIGH, RiskLevel.VERY_HIGH})

    # Auto-approval gate
    auto_approval_min_credit_score: int = 750
    auto_approval_max_dti: Decimal = Decimal("0.28")
    auto_approval_min_employment_years: int = 2

    @property
    def missing_employment_points(self) -> int:
        # Unknown employment scores as the worst status
        return max(self.employment_points.values())

    @property
    def malformed_expenses_points(self) -> int:
        return max(points for _, points in self.dti_bands)


DEFAULT_POLICY = RiskPolicy()


def _amount(value) -> Optional[Decimal]:
    """Parse a profile amount to cents, None when missing or unparseable"""
    if value is None:
        return None
    try:
        return to_money(value, "amount")
    except ValidationError:
        return None


def _employment_status(value) -> Optional[EmploymentStatus]:
    if value is None:
        return None
    try:
        return EmploymentStatus(value)
    except (ValueError, TypeError):
        return None


def has_malformed_expenses(profile: RiskProfile) -> bool:
    """Expenses were reported but are negative or unparseable"""
    if profile.monthly_expenses is None:
        return False
    expenses = _amount(profile.monthly_expenses)
    return expenses is None or expenses < 0


def calculate_debt_to_income(profile: RiskProfile, monthly_payment: Optional[DecimalLike]) -> Optional[Decimal]:
    """
    Debt-to-income ratio: (monthly payment + monthly expenses) / monthly income.

    Monthly income is annual income / 12 rounded to cents; the ratio is
    rounded half-up to 4 digits. Returns None when income is missing or not
    positive, when the payment is missing or negative, or when the reported
    expenses are malformed.
    """
    income = _amount(profile.annual_income)
    payment = _amount(monthly_payment)
    if income is None or income <= 0 or payment is None or payment < 0:
        return None
    if has_malformed_expenses(profile):
        return None

    monthly_income = round_money(income / 12)
    if monthly_income <= 0:
        return None

    obligations = payment
    if profile.monthly_expenses is not None:
        obligations += _amount(profile.monthly_expenses)

    with localcontext() as ctx:
        ctx.prec = 28
        return round_ratio(obligations / monthly_income)


def calculate_loan_to_income(profile: RiskProfile) -> Optional[Decimal]:
    """Requested loan amount over annual income, or None if either is unusable"""
    income = _amount(profile.annual_income)
    requested = _amount(profile.requested_loan_amount)
    if income is None or income <= 0 or requested is None or requested < 0:
        return None
    return round_ratio(requested / income)


def _points_below(value: int, bands: Tuple[Tuple[int, int], ...]) -> int:
    for bound, points in bands:
        if value < bound:
            return points
    return 0


def _points_above(value: Decimal, bands: Tuple[Tuple[Decimal, int], ...]) -> int:
    for bound, points in bands:
        if value > bound:
            return points
    return 0


def calculate_risk_score(
    profile: RiskProfile,
    debt_to_income: Optional[Decimal],
    policy: RiskPolicy = DEFAULT_POLICY,
) -> int:
    """
    Sum risk points from independent factors (higher = riskier).

    Factors:
    - Credit score: missing or outside 300-850 is treated as risky
    - Debt-to-income: skipped when undefined, top band when expenses are malformed
    - Employment status: missing scores as the worst status
    - Employment tenure: short tenure adds points
    - Loan-to-income: skipped when income or amount is unusable
    """
    points = 0

    # Credit score
    credit_score = normalize_credit_score(profile.credit_score)
    if credit_score is None:
        points += policy.missing_credit_score_points
    else:
        points += _points_below(credit_score, policy.credit_score_bands)

    # Debt-to-income
    if debt_to_income is not None:
        points += _points_above(debt_to_income, policy.dti_bands)
    elif has_malformed_expenses(profile):
        points += policy.malformed_expenses_points

    # Employment status
    status = _employment_status(profile.employment_status)
    if status is None:
        points += policy.missing_employment_points
    else:
        points += policy.employment_points.get(status, policy.missing_employment_points)

    # Employment tenure
    years = normalize_employment_years(profile.employment_years)
    if years is not None and years < policy.short_tenure_years:
        points += policy.short_tenure_points

    # Loan amount relative to income
    loan_to_income = calculate_loan_to_income(profile)
    if loan_to_income is not None:
        points += _points_above(loan_to_income, policy.loan_to_income_bands)

    return points


def determine_risk_level(score: int, policy: RiskPolicy = DEFAULT_POLICY) -> tuple[RiskLevel, bool]:
    """
    Map risk points to a level.

    Default bands:
    - >= 60: VERY_HIGH (manual review)
    - >= 40: HIGH (manual review)
    - >= 25: MEDIUM
    - else:  LOW

    Returns: (risk_level, requires_manual_review)
    """
    level = RiskLevel.LOW
    for minimum, candidate in policy.level_thresholds:
        if score >= minimum:
            level = candidate
            break
    return level, level in policy.manual_review_levels



def is_eligible_for_auto_approval(
    profile: RiskProfile,
    debt_to_income: Optional[Decimal],
    risk_level: RiskLevel,
    policy: RiskPolicy = DEFAULT_POLICY,
) -> bool:
    """
    Every condition must hold; any missing attribute disqualifies.

    Beyond the credit, DTI, employment and tenure gates, monthly expenses
    must have been reported: a DTI built from the payment alone understates
    the applicant's obligations.
    """
    credit_score = normalize_credit_score(profile.credit_score)
    years = normalize_employment_years(profile.employment_years)
    return (
        risk_level == RiskLevel.LOW
        and credit_score is not None
        and credit_score >= policy.auto_approval_min_credit_score
        and debt_to_income is not None
        and debt_to_income <= policy.auto_approval_max_dti
        and profile.monthly_expenses is not None
        and not has_malformed_expenses(profile)
        and _employment_status(profile.employment_status) == EmploymentStatus.FULL_TIME
        and years is not None
        and years >= policy.auto_approval_min_employment_years
    )


def assess(
    profile: RiskProfile,
    monthly_payment: Optional[DecimalLike],
    policy: RiskPolicy = DEFAULT_POLICY,
) -> RiskAssessment:
    """
    Main entry point: compute DTI, risk points, level and approval flags.

    Never raises on incomplete or malformed input. An unusable or negative
    monthly payment leaves DTI undefined, which also rules out auto-approval.
    """
    payment = _amount(monthly_payment)
    if payment is not None and payment < 0:
        payment = None

    dti = calculate_debt_to_income(profile, payment)
    score = calculate_risk_score(profile, dti, policy)
    risk_level, requires_manual_review = determine_risk_level(score, policy)

    return RiskAssessment(
        debt_to_income_ratio=dti,
        risk_score=score,
        risk_level=risk_level,
        requires_manual_review=requires_manual_review,
        eligible_for_auto_approval=is_eligible_for_auto_approval(profile, dti, risk_level, policy),
    )
