"""Amortization engine - monthly payment, repayment schedule and affordability math"""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal, localcontext
from typing import Dict, List, Optional

from loan_engine.config import settings
from loan_engine.domain.exceptions import ValidationError
from loan_engine.domain.models import (
    AmortizationScheduleEntry,
    LoanCalculationResult,
    LoanTerms,
    LoanType,
)
from loan_engine.domain.money import (
    ZERO,
    DecimalLike,
    round_money,
    round_monthly_rate,
    round_ratio,
    to_decimal,
    to_money,
    to_rate,
)
from loan_engine.utils.date_utils import generate_payment_dates

# Digits carried through the annuity factor before the single final rounding
INTERNAL_PRECISION = 28

REFERENCE_RATES: Dict[LoanType, Decimal] = {
    LoanType.PERSONAL: Decimal("8.99"),
    LoanType.AUTO: Decimal("4.50"),
    LoanType.MORTGAGE: Decimal("6.75"),
    LoanType.BUSINESS: Decimal("9.25"),
    LoanType.STUDENT: Decimal("5.25"),
    LoanType.HOME_EQUITY: Decimal("7.50"),
}


@dataclass(frozen=True)
class LoanLimits:
    """Configured bounds every calculation is validated against"""

    min_loan_amount: Decimal
    max_loan_amount: Decimal
    max_interest_rate: Decimal
    min_term_months: int
    max_term_months: int

    @classmethod
    def from_settings(cls) -> "LoanLimits":
        return cls(
            min_loan_amount=settings.min_loan_amount,
            max_loan_amount=settings.max_loan_amount,
            max_interest_rate=settings.max_interest_rate,
            min_term_months=settings.min_term_months,
            max_term_months=settings.max_term_months,
        )


def validate_amount(amount: Decimal, field: str, limits: LoanLimits) -> None:
    if amount <= 0:
        raise ValidationError(field, "must be positive")
    if amount < limits.min_loan_amount:
        raise ValidationError(field, f"must be at least {limits.min_loan_amount}")
    if amount > limits.max_loan_amount:
        raise ValidationError(field, f"cannot exceed {limits.max_loan_amount}")


def validate_interest_rate(rate: Decimal, field: str, limits: LoanLimits) -> None:
    if rate < 0:
        raise ValidationError(field, "cannot be negative")
    if rate > limits.max_interest_rate:
        raise ValidationError(field, f"cannot exceed {limits.max_interest_rate}%")


def validate_term(term_months: int, field: str, limits: LoanLimits) -> None:
    if term_months is None:
        raise ValidationError(field, "value is required")
    if term_months < limits.min_term_months:
        raise ValidationError(field, f"must be at least {limits.min_term_months} months")
    if term_months > limits.max_term_months:
        raise ValidationError(field, f"cannot exceed {limits.max_term_months} months")


def validate_terms(terms: LoanTerms, limits: LoanLimits) -> None:
    """Reject terms outside the configured bounds before any math runs"""
    if terms is None:
        raise ValidationError("terms", "loan terms are required")
    validate_amount(terms.principal, "principal", limits)
    validate_interest_rate(terms.annual_rate_percent, "annual_rate_percent", limits)
    validate_term(terms.term_months, "term_months", limits)


def monthly_rate_from_annual(annual_rate_percent: Decimal) -> Decimal:
    """Convert an annual percentage rate to a monthly decimal rate (10 digits)"""
    with localcontext() as ctx:
        ctx.prec = INTERNAL_PRECISION
        return round_monthly_rate(annual_rate_percent / 100 / 12)


def calculate_monthly_payment(principal: Decimal, monthly_rate: Decimal, term_months: int) -> Decimal:
    """
    Level monthly payment that retires principal over term_months.

    Formula: P * [r(1+r)^n] / [(1+r)^n - 1]
    where P = principal, r = monthly rate, n = number of payments

    Zero rate degenerates to principal / n. The result is rounded half-up
    to cents exactly once.
    """
    if monthly_rate == 0:
        return round_money(principal / term_months)

    with localcontext() as ctx:
        ctx.prec = INTERNAL_PRECISION
        growth = (1 + monthly_rate) ** term_months
        payment = principal * (monthly_rate * growth) / (growth - 1)

    return round_money(payment)


def generate_amortization_schedule(
    principal: Decimal,
    monthly_rate: Decimal,
    monthly_payment: Decimal,
    term_months: int,
    start_date: date,
) -> List[AmortizationScheduleEntry]:
    """
    Build the payment-by-payment breakdown.

    Requirements:
    - Interest each month is the remaining balance times the monthly rate,
      rounded to cents
    - The final payment absorbs the accumulated rounding residue so the
      balance lands exactly on zero
    - Principal portions sum exactly to the original principal
    """
    schedule = []
    remaining_balance = principal
    cumulative_interest = ZERO

    payment_dates = generate_payment_dates(start_date, term_months)

    for payment_number, payment_date in enumerate(payment_dates, start=1):
        interest = round_money(remaining_balance * monthly_rate)
        principal_portion = monthly_payment - interest
        payment_amount = monthly_payment

        is_final = payment_number == term_months
        if (is_final and principal_portion != remaining_balance) or principal_portion > remaining_balance:
            principal_portion = remaining_balance
            payment_amount = principal_portion + interest

        remaining_balance = max(remaining_balance - principal_portion, ZERO)
        cumulative_interest += interest

        schedule.append(
            AmortizationScheduleEntry(
                payment_number=payment_number,
                payment_date=payment_date,
                payment_amount=payment_amount,
                principal_portion=principal_portion,
                interest_portion=interest,
                remaining_balance=remaining_balance,
                cumulative_interest=cumulative_interest,
            )
        )

    return schedule


def compute_schedule(
    terms: LoanTerms,
    limits: Optional[LoanLimits] = None,
) -> LoanCalculationResult:
    """
    Main entry point: validate terms, then compute payment, schedule and totals.

    Raises:
        ValidationError: If principal, rate or term is outside the configured bounds
    """
    limits = limits or LoanLimits.from_settings()
    validate_terms(terms, limits)

    monthly_rate = monthly_rate_from_annual(terms.annual_rate_percent)
    monthly_payment = calculate_monthly_payment(terms.principal, monthly_rate, terms.term_months)

    start_date = terms.start_date or date.today()
    schedule = generate_amortization_schedule(
        terms.principal, monthly_rate, monthly_payment, terms.term_months, start_date
    )

    total_payments = sum((entry.payment_amount for entry in schedule), ZERO)
    total_interest = total_payments - terms.principal

    return LoanCalculationResult(
        terms=terms,
        monthly_payment=monthly_payment,
        total_interest=total_interest,
        total_payments=total_payments,
        schedule=tuple(schedule),
        calculated_at=datetime.now(timezone.utc),
    )


def max_affordable_loan(
    monthly_income: DecimalLike,
    existing_debt: Optional[DecimalLike],
    annual_rate: DecimalLike,
    term_months: int,
    max_dti_ratio: Optional[DecimalLike] = None,
    limits: Optional[LoanLimits] = None,
) -> Decimal:
    """
    Largest principal whose payment stays within max_dti_ratio of income.

    The affordable payment is income * max_dti_ratio less existing monthly
    debt; the annuity formula is then inverted for that payment. Returns
    0.00 when nothing is affordable.
    """
    limits = limits or LoanLimits.from_settings()

    income = to_money(monthly_income, "monthly_income")
    if income <= 0:
        raise ValidationError("monthly_income", "must be positive")
    rate = to_rate(annual_rate, "annual_rate")
    validate_interest_rate(rate, "annual_rate", limits)
    validate_term(term_months, "term_months", limits)

    if max_dti_ratio is None:
        max_dti_ratio = settings.default_max_dti_ratio
    dti_limit = to_decimal(max_dti_ratio, "max_dti_ratio")
    if dti_limit <= 0:
        raise ValidationError("max_dti_ratio", "must be positive")

    max_payment = income * dti_limit
    if existing_debt is not None:
        debt = to_money(existing_debt, "existing_debt")
        if debt > 0:
            max_payment -= debt

    if max_payment <= 0:
        return ZERO

    monthly_rate = monthly_rate_from_annual(rate)
    if monthly_rate == 0:
        return round_money(max_payment * term_months)

    with localcontext() as ctx:
        ctx.prec = INTERNAL_PRECISION
        growth = (1 + monthly_rate) ** term_months
        principal = max_payment * (growth - 1) / (monthly_rate * growth)

    return round_money(principal)


def simple_interest(
    principal: DecimalLike,
    annual_rate: DecimalLike,
    days: int,
    limits: Optional[LoanLimits] = None,
) -> Decimal:
    """Simple (non-compounding) interest over a number of days, 365-day year"""
    limits = limits or LoanLimits.from_settings()

    amount = to_money(principal, "principal")
    validate_amount(amount, "principal", limits)
    rate = to_rate(annual_rate, "annual_rate")
    validate_interest_rate(rate, "annual_rate", limits)
    if days is None or days <= 0:
        raise ValidationError("days", "must be positive")

    with localcontext() as ctx:
        ctx.prec = INTERNAL_PRECISION
        interest = amount * (rate / 100 / 365) * days

    return round_money(interest)


def debt_to_income_ratio(
    monthly_payment: DecimalLike,
    monthly_income: DecimalLike,
    existing_debt: Optional[DecimalLike] = None,
) -> Decimal:
    """Monthly obligations (new payment plus existing debt) over monthly income, 4 digits"""
    payment = to_money(monthly_payment, "monthly_payment")
    income = to_money(monthly_income, "monthly_income")
    if income <= 0:
        raise ValidationError("monthly_income", "must be positive")

    total_debt = payment
    if existing_debt is not None:
        debt = to_money(existing_debt, "existing_debt")
        if debt > 0:
            total_debt += debt

    with localcontext() as ctx:
        ctx.prec = INTERNAL_PRECISION
        return round_ratio(total_debt / income)


def current_interest_rates() -> Dict[LoanType, Decimal]:
    """Reference annual rates by loan type"""
    return dict(REFERENCE_RATES)
