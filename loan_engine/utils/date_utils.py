"""Date manipulation utilities"""

from datetime import date
from typing import List

from dateutil.relativedelta import relativedelta


def add_months(from_date: date, months: int) -> date:
    """Add calendar months, clamping the day to the end of shorter months"""
    return from_date + relativedelta(months=months)


def generate_payment_dates(start: date, count: int) -> List[date]:
    """Generate monthly due dates, the first one falling on start"""
    return [start + relativedelta(months=i) for i in range(count)]
