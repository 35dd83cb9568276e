"""
어댑터 레이어

외부 서비스(환율 API)와의 연동을 담당.
core.valuable.conversion.RateSource Protocol 기반으로 Mock 교체 가능.
"""

from adapters.rates import CurrencyRateClient, RateTable

__all__ = [
    "CurrencyRateClient",
    "RateTable",
]
