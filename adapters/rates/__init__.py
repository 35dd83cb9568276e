"""환율 조회 어댑터"""

from adapters.rates.client import CurrencyRateClient
from adapters.rates.models import RateTable

__all__ = [
    "CurrencyRateClient",
    "RateTable",
]
