"""Configuration management using Pydantic Settings"""

from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "loan-engine"
    log_level: str = "INFO"

    # Loan bounds
    min_loan_amount: Decimal = Decimal("1000.00")
    max_loan_amount: Decimal = Decimal("10000000.00")
    max_interest_rate: Decimal = Decimal("30.00")  # Annual percent
    min_term_months: int = 1
    max_term_months: int = 480  # 40 years

    # Affordability
    default_max_dti_ratio: Decimal = Decimal("0.43")

    # Calculation cache owned by the HTTP layer
    calculation_cache_size: int = 256

    # Review workflow
    review_overdue_days: int = 3


settings = Settings()
