"""In-process cache for schedule computations, owned by the HTTP layer"""

import threading
from collections import OrderedDict
from datetime import date
from decimal import Decimal
from typing import Callable, Optional, Tuple

from loan_engine.domain.models import LoanCalculationResult, LoanTerms

CacheKey = Tuple[Decimal, Decimal, int, date]


def cache_key(terms: LoanTerms) -> CacheKey:
    # Undated terms start today and stop matching once the day changes
    start_date = terms.start_date or date.today()
    return (terms.principal, terms.annual_rate_percent, terms.term_months, start_date)


class CalculationCache:
    """
    Bounded LRU cache of LoanCalculationResult keyed by loan terms.

    The lock only guards the dict. Two threads missing on the same key both
    compute; results are identical so the second write is harmless.
    """

    def __init__(self, max_size: int = 256):
        self.max_size = max_size
        self._entries: "OrderedDict[CacheKey, LoanCalculationResult]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, terms: LoanTerms) -> Optional[LoanCalculationResult]:
        key = cache_key(terms)
        with self._lock:
            result = self._entries.get(key)
            if result is None:
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return result

    def put(self, result: LoanCalculationResult) -> None:
        key = cache_key(result.terms)
        with self._lock:
            self._entries[key] = result
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_size:
                self._entries.popitem(last=False)

    def get_or_compute(
        self,
        terms: LoanTerms,
        compute: Callable[[LoanTerms], LoanCalculationResult],
    ) -> Tuple[LoanCalculationResult, bool]:
        """Returns (result, cache_hit)"""
        cached = self.get(terms)
        if cached is not None:
            return cached, True
        result = compute(terms)
        self.put(result)
        return result, False

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
