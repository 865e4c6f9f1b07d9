"""Unit tests for payment date arithmetic"""

from datetime import date

from loan_engine.utils.date_utils import add_months, generate_payment_dates


def test_add_months_rolls_over_year():
    assert add_months(date(2024, 11, 15), 3) == date(2025, 2, 15)


def test_add_months_clamps_to_month_end():
    assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2024, 1, 31), 3) == date(2024, 4, 30)


def test_generate_payment_dates_anchor_on_start_day():
    """Each date is computed from the start, so a short month does not drag later ones"""
    dates = generate_payment_dates(date(2024, 1, 31), 4)
    assert dates == [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31), date(2024, 4, 30)]


def test_generate_payment_dates_empty():
    assert generate_payment_dates(date(2024, 1, 1), 0) == []


def test_add_months_from_leap_day():
    assert add_months(date(2024, 2, 29), 12) == date(2025, 2, 28)
    assert add_months(date(2024, 2, 29), 48) == date(2028, 2, 29)
