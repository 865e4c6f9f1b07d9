"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from loan_engine.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_calculation(
    request_id: str,
    principal: str,
    annual_rate_percent: str,
    term_months: int,
    monthly_payment: str,
    cache_hit: bool,
    duration_ms: float,
) -> None:
    """Log structured schedule computation outcome"""
    logging.info(
        "Schedule computed",
        extra={
            "request_id": request_id,
            "step": "schedule_complete",
            "principal": principal,
            "annual_rate_percent": annual_rate_percent,
            "term_months": term_months,
            "monthly_payment": monthly_payment,
            "cache_hit": cache_hit,
            "duration_ms": duration_ms,
        },
    )


def log_assessment(
    request_id: str,
    risk_score: int,
    risk_level: str,
    debt_to_income_ratio: Optional[str],
    requires_manual_review: bool,
    eligible_for_auto_approval: bool,
    duration_ms: float,
) -> None:
    """Log structured risk assessment outcome for analysis"""
    logging.info(
        "Risk assessment completed",
        extra={
            "request_id": request_id,
            "step": "assessment_complete",
            "risk_score": risk_score,
            "risk_level": risk_level,
            "debt_to_income_ratio": debt_to_income_ratio,
            "requires_manual_review": requires_manual_review,
            "eligible_for_auto_approval": eligible_for_auto_approval,
            "duration_ms": duration_ms,
        },
    )
