"""Unit tests for the calculation cache"""

from datetime import date, timedelta
from decimal import Decimal

from loan_engine.domain.amortization import compute_schedule
from loan_engine.domain.models import LoanTerms
from loan_engine.infrastructure.cache import CalculationCache, cache_key


def terms(principal: str) -> LoanTerms:
    return LoanTerms(Decimal(principal), Decimal("5"), 12, date(2024, 1, 1))


def test_get_or_compute_caches_result(limits):
    cache = CalculationCache(max_size=4)
    calls = []

    def compute(t):
        calls.append(t)
        return compute_schedule(t, limits)

    first, hit_first = cache.get_or_compute(terms("10000"), compute)
    second, hit_second = cache.get_or_compute(terms("10000.00"), compute)

    assert hit_first is False
    assert hit_second is True
    assert second is first
    assert len(calls) == 1
    assert cache.hits == 1
    assert cache.misses == 1


def test_key_includes_start_date():
    a = LoanTerms(Decimal("10000"), Decimal("5"), 12, date(2024, 1, 1))
    b = LoanTerms(Decimal("10000"), Decimal("5"), 12, date(2024, 2, 1))
    assert cache_key(a) != cache_key(b)


def test_least_recently_used_entry_evicted(limits):
    cache = CalculationCache(max_size=2)
    for principal in ("1000", "2000"):
        cache.put(compute_schedule(terms(principal), limits))

    cache.get(terms("1000"))  # Touch so 2000 becomes oldest
    cache.put(compute_schedule(terms("3000"), limits))

    assert len(cache) == 2
    assert cache.get(terms("2000")) is None
    assert cache.get(terms("1000")) is not None
    assert cache.get(terms("3000")) is not None


def test_clear(limits):
    cache = CalculationCache()
    cache.put(compute_schedule(terms("1000"), limits))
    cache.clear()
    assert len(cache) == 0


def test_undated_terms_recomputed_on_a_later_day(limits, monkeypatch):
    cache = CalculationCache()
    undated = LoanTerms(Decimal("10000"), Decimal("5"), 12)
    first, _ = cache.get_or_compute(undated, lambda t: compute_schedule(t, limits))
    assert first.schedule[0].payment_date == date.today()

    later = date.today() + timedelta(days=40)

    class LaterDate(date):
        @classmethod
        def today(cls):
            return later

    monkeypatch.setattr("loan_engine.infrastructure.cache.date", LaterDate)
    monkeypatch.setattr("loan_engine.domain.amortization.date", LaterDate)

    second, hit = cache.get_or_compute(undated, lambda t: compute_schedule(t, limits))
    assert hit is False
    assert second.schedule[0].payment_date == later
