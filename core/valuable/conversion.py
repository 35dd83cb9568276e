"""
통화 환산

외부 환율 조회는 best-effort 협력자. 명시적인 환산 호출에서만 사용되며
원장 연산(균형 검증, 집계)은 환율을 절대 참조하지 않음.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Protocol

from core.valuable.currency import Currency
from core.valuable.money import Money

logger = logging.getLogger(__name__)


class RateSource(Protocol):
    """환율 공급자 인터페이스 (adapters.rates.CurrencyRateClient 등)"""

    def fetch_rate(self, from_code: str, to_code: str, on: date | None = None) -> Decimal:
        """1 from_code = ? to_code"""
        ...


class ExchangeBook:
    """환율 장부

    (from, to, date) 단위로 환율을 캐시. 캐시에 없으면 RateSource 조회.

    Args:
        source: 환율 공급자 (None이면 set_rate로 넣은 값만 사용)
    """

    def __init__(self, source: RateSource | None = None):
        self.source = source
        self._rates: dict[tuple[str, str, date], Decimal] = {}

    def set_rate(self, from_cur: Currency, to_cur: Currency, on: date, rate: Decimal) -> None:
        """환율 직접 등록 (수동 입력, 테스트)"""
        self._rates[(from_cur.code, to_cur.code, on)] = Decimal(rate)

    def get(self, from_cur: Currency, to_cur: Currency, on: date) -> Decimal:
        """환율 조회

        Raises:
            RateUnavailableError: 공급자 조회 실패
            KeyError: 공급자가 없고 캐시에도 없는 경우
        """
        if from_cur == to_cur:
            return Decimal(1)

        key = (from_cur.code, to_cur.code, on)
        cached = self._rates.get(key)
        if cached is not None:
            return cached

        if self.source is None:
            raise KeyError(f"등록된 환율이 없습니다: {from_cur.code}->{to_cur.code} @ {on}")

        rate = self.source.fetch_rate(from_cur.code, to_cur.code, on)
        self._rates[key] = rate
        logger.info(f"환율 조회: 1 {from_cur.code} = {rate} {to_cur.code} ({on})")
        return rate

    def convert(self, money: Money, to: Currency, on: date) -> Money:
        """Money를 to 통화로 환산"""
        rate = self.get(money.currency, to, on)
        return Money(money.amount * rate, to)
