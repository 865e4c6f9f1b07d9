"""POST /v1/risk/assessment - applicant risk classification endpoint"""

import time

from fastapi import APIRouter, Request

from loan_engine.api.dependencies import get_request_id
from loan_engine.api.v1.schemas import AssessmentRequest, AssessmentResponse
from loan_engine.domain.models import RiskProfile
from loan_engine.domain.scoring import assess
from loan_engine.infrastructure.observability.logging import log_assessment
from loan_engine.infrastructure.observability.metrics import record_assessment

router = APIRouter()


@router.post("/risk/assessment", response_model=AssessmentResponse)
def create_assessment(request_body: AssessmentRequest, request: Request):
    """
    Score an applicant against a computed monthly payment.

    Incomplete profiles are scored, not rejected: missing attributes raise
    the score and rule out auto-approval.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    profile = RiskProfile.build(
        credit_score=request_body.credit_score,
        annual_income=request_body.annual_income,
        monthly_expenses=request_body.monthly_expenses,
        employment_status=request_body.employment_status,
        employment_years=request_body.employment_years,
        existing_debt=request_body.existing_debt,
        requested_loan_amount=request_body.requested_loan_amount,
    )
    assessment = assess(profile, request_body.monthly_payment)

    duration_ms = (time.time() - start_time) * 1000
    record_assessment(assessment.risk_level.value, assessment.eligible_for_auto_approval)
    log_assessment(
        request_id,
        assessment.risk_score,
        assessment.risk_level.value,
        str(assessment.debt_to_income_ratio) if assessment.debt_to_income_ratio is not None else None,
        assessment.requires_manual_review,
        assessment.eligible_for_auto_approval,
        duration_ms,
    )

    return AssessmentResponse(
        debt_to_income_ratio=assessment.debt_to_income_ratio,
        risk_score=assessment.risk_score,
        risk_level=assessment.risk_level,
        requires_manual_review=assessment.requires_manual_review,
        eligible_for_auto_approval=assessment.eligible_for_auto_approval,
    )
