"""Application status workflow - transition rules and the submission side effect.

Records are immutable; every operation returns an updated copy. The
application-tracking layer owns storage of the returned record.
"""

import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional

from loan_engine.config import settings
from loan_engine.domain.amortization import LoanLimits, compute_schedule
from loan_engine.domain.exceptions import InvalidTransitionError
from loan_engine.domain.models import (
    ApplicationStatus,
    LoanApplication,
    LoanCalculationResult,
    LoanTerms,
    LoanType,
    RiskProfile,
)
from loan_engine.domain.scoring import DEFAULT_POLICY, RiskPolicy, assess


def _now() -> datetime:
    return datetime.now(timezone.utc)


def create_application(
    terms: LoanTerms,
    profile: RiskProfile,
    loan_type: LoanType = LoanType.PERSONAL,
    application_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> LoanApplication:
    """Start a new application in DRAFT"""
    return LoanApplication(
        application_id=application_id or str(uuid.uuid4()),
        terms=terms,
        profile=profile,
        loan_type=loan_type,
        created_at=now or _now(),
    )


def check_transition(current: ApplicationStatus, target: ApplicationStatus) -> None:
    """
    Raises:
        InvalidTransitionError: If target is not reachable from current
    """
    allowed = ApplicationStatus.valid_transitions().get(current, frozenset())
    if target not in allowed:
        raise InvalidTransitionError(
            f"Cannot transition from '{current.value}' to '{target.value}'. "
            f"Allowed: {sorted(s.value for s in allowed) if allowed else 'none (terminal status)'}."
        )


def transition(application: LoanApplication, target: ApplicationStatus, **changes) -> LoanApplication:
    """Move an application to target status after validating the edge"""
    check_transition(application.status, target)
    return replace(application, status=target, **changes)


def submit(
    application: LoanApplication,
    calculation: Optional[LoanCalculationResult] = None,
    policy: RiskPolicy = DEFAULT_POLICY,
    limits: Optional[LoanLimits] = None,
    now: Optional[datetime] = None,
) -> LoanApplication:
    """
    DRAFT -> SUBMITTED.

    Submission computes the repayment figures (unless a cached calculation
    for the same terms is passed in) and the risk assessment, and stores
    both on the returned record.

    Raises:
        InvalidTransitionError: If the application is not a draft
        ValidationError: If the loan terms are out of bounds
    """
    check_transition(application.status, ApplicationStatus.SUBMITTED)

    if calculation is None or calculation.terms != application.terms:
        calculation = compute_schedule(application.terms, limits)

    assessment = assess(application.profile, calculation.monthly_payment, policy)

    return transition(
        application,
        ApplicationStatus.SUBMITTED,
        submitted_at=now or _now(),
        monthly_payment=calculation.monthly_payment,
        total_interest=calculation.total_interest,
        total_amount=calculation.total_payments,
        debt_to_income_ratio=assessment.debt_to_income_ratio,
        risk_score=assessment.risk_score,
        risk_level=assessment.risk_level,
        requires_manual_review=assessment.requires_manual_review,
        eligible_for_auto_approval=assessment.eligible_for_auto_approval,
    )


def start_review(application: LoanApplication) -> LoanApplication:
    """SUBMITTED or ADDITIONAL_INFO_REQUIRED -> UNDER_REVIEW"""
    return transition(application, ApplicationStatus.UNDER_REVIEW)


def approve(application: LoanApplication, review_notes: Optional[str] = None, now: Optional[datetime] = None) -> LoanApplication:
    now = now or _now()
    return transition(
        application,
        ApplicationStatus.APPROVED,
        approved_at=now,
        reviewed_at=now,
        review_notes=review_notes,
    )


def reject(application: LoanApplication, rejection_reason: str, now: Optional[datetime] = None) -> LoanApplication:
    now = now or _now()
    return transition(
        application,
        ApplicationStatus.REJECTED,
        rejected_at=now,
        reviewed_at=now,
        rejection_reason=rejection_reason,
    )


def request_additional_info(
    application: LoanApplication, review_notes: Optional[str] = None, now: Optional[datetime] = None
) -> LoanApplication:
    return transition(
        application,
        ApplicationStatus.ADDITIONAL_INFO_REQUIRED,
        reviewed_at=now or _now(),
        review_notes=review_notes,
    )


def withdraw(application: LoanApplication, now: Optional[datetime] = None) -> LoanApplication:
    """Any pre-terminal status -> WITHDRAWN"""
    return transition(application, ApplicationStatus.WITHDRAWN, withdrawn_at=now or _now())


def fund(application: LoanApplication, now: Optional[datetime] = None) -> LoanApplication:
    """APPROVED -> FUNDED"""
    return transition(application, ApplicationStatus.FUNDED, funded_at=now or _now())


def application_age_days(application: LoanApplication, now: Optional[datetime] = None) -> int:
    """Whole days since submission, 0 if never submitted"""
    if application.submitted_at is None:
        return 0
    return ((now or _now()) - application.submitted_at).days


def is_overdue_for_review(application: LoanApplication, now: Optional[datetime] = None) -> bool:
    """Submitted or in review for longer than the configured review window"""
    return application_age_days(application, now) > settings.review_overdue_days and application.status in (
        ApplicationStatus.SUBMITTED,
        ApplicationStatus.UNDER_REVIEW,
    )
