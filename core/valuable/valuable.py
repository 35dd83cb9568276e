"""
Valuable - 다중 통화 금액

통화 → 금액 매핑. 0이 된 항목은 변경 직후 즉시 제거되므로
is_zero()는 "모든 통화가 0"과 같은 의미.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable, Iterator

from core.constants import Defaults
from core.valuable.currency import Currency, CurrencyStore
from core.valuable.money import Money

if TYPE_CHECKING:
    from core.valuable.conversion import ExchangeBook


class Valuable:
    """다중 통화 금액 (currency → amount)

    거래 불균형 계산과 집계 결과에 사용. 입력 순서대로 통화를 유지.
    """

    __slots__ = ("_amounts",)

    def __init__(self, moneys: Iterable[Money] = ()):
        self._amounts: dict[Currency, Decimal] = {}
        for money in moneys:
            self.add_money(money)

    @classmethod
    def sum(cls, moneys: Iterable[Money]) -> "Valuable":
        """Money 시퀀스 합계"""
        return cls(moneys)

    def add_money(self, money: Money) -> None:
        """같은 통화 항목에 합산하거나 새 항목 추가 (0이면 제거)"""
        merged = self._amounts.get(money.currency, Decimal(0)) + money.amount
        if merged == 0:
            self._amounts.pop(money.currency, None)
        else:
            self._amounts[money.currency] = merged

    def add_valuable(self, other: "Valuable") -> None:
        for money in other.moneys():
            self.add_money(money)

    def copy(self) -> "Valuable":
        return Valuable(self.moneys())

    def moneys(self) -> Iterator[Money]:
        """0이 아닌 항목들 (입력 순서)"""
        for currency, amount in list(self._amounts.items()):
            yield Money(amount, currency)

    def get(self, currency: Currency) -> Money:
        """해당 통화 금액 (없으면 0)"""
        return Money(self._amounts.get(currency, Decimal(0)), currency)

    def currencies(self) -> list[Currency]:
        return list(self._amounts)

    def is_zero(self) -> bool:
        return not self._amounts

    def convert_to(self, to: Currency, on: date, book: ExchangeBook) -> "Valuable":
        """모든 항목을 to 통화로 환산해 합산"""
        return Valuable(book.convert(money, to, on) for money in self.moneys())

    # =========================================================================
    # 연산자
    # =========================================================================

    def __iter__(self) -> Iterator[Money]:
        return self.moneys()

    def __len__(self) -> int:
        return len(self._amounts)

    def __add__(self, other: "Valuable | Money") -> "Valuable":
        result = self.copy()
        result += other
        return result

    def __radd__(self, other: object) -> "Valuable":
        # sum() 시작값 0 지원
        if other == 0:
            return self.copy()
        return NotImplemented

    def __iadd__(self, other: "Valuable | Money") -> "Valuable":
        if isinstance(other, Money):
            self.add_money(other)
        elif isinstance(other, Valuable):
            self.add_valuable(other)
        else:
            return NotImplemented
        return self

    def __neg__(self) -> "Valuable":
        return Valuable(-money for money in self.moneys())

    def __sub__(self, other: "Valuable | Money") -> "Valuable":
        return self + (-other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Valuable):
            return NotImplemented
        return self._amounts == other._amounts

    __hash__ = None  # type: ignore[assignment]

    def display(
        self,
        currencies: CurrencyStore | None = None,
        dp: int = Defaults.DECIMAL_PLACES,
    ) -> str:
        """통화 코드 순으로 한 줄씩 표시 (비어 있으면 0.00)"""
        if not self._amounts:
            return f"{Decimal(0).quantize(Decimal(1).scaleb(-dp)):f}"
        return "\n".join(
            money.display(currencies, dp)
            for money in sorted(self.moneys(), key=lambda m: m.currency.code)
        )

    def __str__(self) -> str:
        return self.display()

    def __repr__(self) -> str:
        items = ", ".join(f"{c.code}={a}" for c, a in self._amounts.items())
        return f"Valuable({items})"
