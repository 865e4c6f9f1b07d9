"""Loan calculator endpoints - schedule, affordability, simple interest, reference rates"""

import logging
import time
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Request

from loan_engine.api.dependencies import get_calculation_cache, get_loan_limits, get_request_id
from loan_engine.api.v1.schemas import (
    AffordabilityRequest,
    AffordabilityResponse,
    CalculationRequest,
    CalculationResponse,
    RatesResponse,
    ScheduleEntrySchema,
    SimpleInterestRequest,
    SimpleInterestResponse,
)
from loan_engine.domain.amortization import (
    LoanLimits,
    compute_schedule,
    current_interest_rates,
    max_affordable_loan,
    simple_interest,
)
from loan_engine.domain.exceptions import ValidationError
from loan_engine.domain.models import LoanTerms
from loan_engine.infrastructure.cache import CalculationCache
from loan_engine.infrastructure.observability.logging import log_calculation
from loan_engine.infrastructure.observability.metrics import record_calculation, record_validation_failure

router = APIRouter()


def validation_failed(error: ValidationError, request_id: str) -> HTTPException:
    """Translate a domain validation error into a 422 response"""
    record_validation_failure(error.field)
    logging.warning(f"Validation failed: {error}", extra={"request_id": request_id, "field": error.field})
    return HTTPException(status_code=422, detail={"field": error.field, "reason": error.reason})


@router.post("/loans/calculate", response_model=CalculationResponse)
def calculate_loan(
    request_body: CalculationRequest,
    request: Request,
    cache: CalculationCache = Depends(get_calculation_cache),
    limits: LoanLimits = Depends(get_loan_limits),
):
    """
    Compute monthly payment, totals and the full amortization schedule.

    Results are cached per (principal, rate, term, start date). A missing
    start date resolves to today before the cache lookup, so the first
    payment date never goes stale.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        terms = LoanTerms(
            principal=request_body.principal,
            annual_rate_percent=request_body.annual_rate_percent,
            term_months=request_body.term_months,
            start_date=request_body.start_date or date.today(),
        )
        result, cache_hit = cache.get_or_compute(terms, lambda t: compute_schedule(t, limits))
    except ValidationError as e:
        raise validation_failed(e, request_id)

    duration_ms = (time.time() - start_time) * 1000
    record_calculation(cache_hit, terms.term_months)
    log_calculation(
        request_id,
        str(terms.principal),
        str(terms.annual_rate_percent),
        terms.term_months,
        str(result.monthly_payment),
        cache_hit,
        duration_ms,
    )

    return CalculationResponse(
        principal=terms.principal,
        annual_rate_percent=terms.annual_rate_percent,
        term_months=terms.term_months,
        monthly_payment=result.monthly_payment,
        total_interest=result.total_interest,
        total_payments=result.total_payments,
        schedule=[
            ScheduleEntrySchema(
                payment_number=entry.payment_number,
                payment_date=entry.payment_date,
                payment_amount=entry.payment_amount,
                principal_portion=entry.principal_portion,
                interest_portion=entry.interest_portion,
                remaining_balance=entry.remaining_balance,
                cumulative_interest=entry.cumulative_interest,
            )
            for entry in result.schedule
        ],
        calculated_at=result.calculated_at,
    )


@router.post("/loans/affordability", response_model=AffordabilityResponse)
def calculate_affordability(
    request_body: AffordabilityRequest,
    request: Request,
    limits: LoanLimits = Depends(get_loan_limits),
):
    """Largest loan whose payment fits within the DTI limit"""
    try:
        amount = max_affordable_loan(
            request_body.monthly_income,
            request_body.existing_debt,
            request_body.annual_rate,
            request_body.term_months,
            request_body.max_dti_ratio,
            limits=limits,
        )
    except ValidationError as e:
        raise validation_failed(e, get_request_id(request))

    return AffordabilityResponse(max_loan_amount=amount)


@router.post("/loans/simple-interest", response_model=SimpleInterestResponse)
def calculate_simple_interest(
    request_body: SimpleInterestRequest,
    request: Request,
    limits: LoanLimits = Depends(get_loan_limits),
):
    try:
        interest = simple_interest(
            request_body.principal,
            request_body.annual_rate,
            request_body.days,
            limits=limits,
        )
    except ValidationError as e:
        raise validation_failed(e, get_request_id(request))

    return SimpleInterestResponse(interest=interest)


@router.get("/loans/rates", response_model=RatesResponse)
def get_rates():
    """Current reference rates by loan type"""
    return RatesResponse(rates={loan_type.value: rate for loan_type, rate in current_interest_rates().items()})
