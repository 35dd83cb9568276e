"""
금액 타입

단일 통화 Money, 다중 통화 Valuable, 통화 카탈로그, 환산.

사용 예시:
```python
from core.valuable import CurrencyStore, Money, Valuable

currencies = CurrencyStore.builtin()
cash = Money.from_string("-$100.00", currencies)
shares = cash.split(3)            # 합계 보존 분할
total = Valuable.sum(shares)      # 다중 통화 합계
```
"""

from core.valuable.conversion import ExchangeBook, RateSource
from core.valuable.currency import Currency, CurrencyStore
from core.valuable.money import Money
from core.valuable.valuable import Valuable

__all__ = [
    "Currency",
    "CurrencyStore",
    "Money",
    "Valuable",
    "ExchangeBook",
    "RateSource",
]
