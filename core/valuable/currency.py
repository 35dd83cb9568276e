"""
통화 카탈로그

통화(code, symbol, 표시 방식) 등록 및 조회.
Money는 Currency를 참조만 하며, 기호/코드 해석은 CurrencyStore 책임.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Iterator

from core.constants import BUILTIN_CURRENCIES
from core.errors import CurrencyNotFoundError
from core.types import CurrencyStyle

if TYPE_CHECKING:
    from core.valuable.money import Money

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Currency:
    """통화 (불변)

    동등성/해시는 code 기준. symbol, name, style은 표시용 부가 정보.
    """

    code: str
    symbol: str | None = field(default=None, compare=False)
    name: str | None = field(default=None, compare=False)
    style: CurrencyStyle = field(default=CurrencyStyle.SYMBOL, compare=False)

    @classmethod
    def create(
        cls,
        code: str,
        symbol: str | None = None,
        name: str | None = None,
        style: str | CurrencyStyle | None = None,
    ) -> "Currency":
        """Currency 생성 헬퍼

        style이 없으면 기호가 있을 때 SYMBOL, 없으면 CODE.
        """
        code = code.strip().upper()
        if not code or any(ch.isspace() for ch in code):
            raise ValueError(f"유효하지 않은 통화 코드입니다: {code!r}")
        if style is None:
            style = CurrencyStyle.SYMBOL if symbol else CurrencyStyle.CODE
        return cls(code=code, symbol=symbol or None, name=name, style=CurrencyStyle(style))

    @property
    def uses_symbol(self) -> bool:
        """기호 우선 표시 여부"""
        return self.style == CurrencyStyle.SYMBOL and self.symbol is not None

    def __str__(self) -> str:
        return f"{self.code} {self.symbol or ''} -- {self.name or ''}"


class CurrencyStore:
    """통화 카탈로그

    통화는 code 기준으로 한 번만 등록됨 (add_currency는 멱등).
    같은 기호를 여러 통화가 공유할 수 있으며 (¥: CNY, JPY),
    기호 조회는 먼저 등록된 통화를 반환.
    """

    def __init__(self, currencies: Iterable[Currency] = ()):
        self._currencies: list[Currency] = []
        for currency in currencies:
            self.add(currency)

    @classmethod
    def builtin(cls) -> "CurrencyStore":
        """기본 통화(USD, EUR, CNY, JPY, GBP)가 등록된 카탈로그"""
        return cls(
            Currency.create(code, symbol, name, style)
            for code, symbol, name, style in BUILTIN_CURRENCIES
        )

    def add(self, currency: Currency) -> Currency:
        """통화 등록 (이미 있으면 기존 통화 반환)"""
        for existing in self._currencies:
            if existing == currency:
                return existing
        self._currencies.append(currency)
        logger.debug(f"통화 등록: {currency.code}")
        return currency

    def add_currency(
        self,
        code: str,
        symbol: str | None = None,
        name: str | None = None,
        style: str | CurrencyStyle | None = None,
    ) -> Currency:
        return self.add(Currency.create(code, symbol, name, style))

    def by_code(self, code: str) -> Currency:
        """code로 조회 (대소문자 무시)

        Raises:
            CurrencyNotFoundError: 등록되지 않은 코드
        """
        wanted = code.strip().upper()
        for currency in self._currencies:
            if currency.code == wanted:
                return currency
        raise CurrencyNotFoundError(code)

    def by_symbol(self, symbol: str) -> Currency:
        """기호로 조회 (먼저 등록된 통화 우선)

        Raises:
            CurrencyNotFoundError: 등록되지 않은 기호
        """
        for currency in self._currencies:
            if currency.symbol == symbol:
                return currency
        raise CurrencyNotFoundError(symbol)

    def match_symbol_prefix(self, text: str) -> str | None:
        """text가 등록된 기호로 시작하면 그 기호 반환 (가장 긴 기호 우선)"""
        symbols = sorted(
            {c.symbol for c in self._currencies if c.symbol},
            key=len,
            reverse=True,
        )
        for symbol in symbols:
            if text.startswith(symbol):
                return symbol
        return None

    def is_unique_symbol(self, currency: Currency) -> bool:
        """기호가 이 통화 하나만 가리키는지 확인

        기호를 공유하는 통화는 표시 시 코드 접미 방식으로 대체해야
        다시 파싱했을 때 같은 통화로 돌아옴.
        """
        if currency.symbol is None:
            return False
        owners = [c for c in self._currencies if c.symbol == currency.symbol]
        return owners == [currency]

    def parse_money(self, text: str) -> Money:
        """금액 문자열 해석 (Money.from_string 위임)"""
        from core.valuable.money import Money

        return Money.from_string(text, self)

    def __iter__(self) -> Iterator[Currency]:
        return iter(self._currencies)

    def __len__(self) -> int:
        return len(self._currencies)

    def __contains__(self, currency: object) -> bool:
        return currency in self._currencies

    def __str__(self) -> str:
        lines = [f"    {c}" for c in sorted(self._currencies, key=lambda c: c.code)]
        return "\n".join(["currency", *lines])
