"""Dependency injection for FastAPI endpoints"""

from fastapi import Request

from loan_engine.config import settings
from loan_engine.domain.amortization import LoanLimits
from loan_engine.infrastructure.cache import CalculationCache

_calculation_cache = CalculationCache(max_size=settings.calculation_cache_size)


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_calculation_cache() -> CalculationCache:
    """Provide the process-wide calculation cache"""
    return _calculation_cache


def get_loan_limits() -> LoanLimits:
    """Provide configured loan bounds"""
    return LoanLimits.from_settings()
