"""
Money - 단일 통화 금액

Decimal 기반 정확한 금액 + 통화. 통화가 다른 Money 간 연산은
프로그래밍 오류(CurrencyMismatchError)이며, 다중 통화 합계는 Valuable 사용.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation, getcontext, localcontext
from typing import TYPE_CHECKING, Any

from core.constants import Defaults
from core.errors import CurrencyMismatchError, CurrencyNotFoundError, MoneyParseError
from core.valuable.currency import Currency, CurrencyStore

if TYPE_CHECKING:
    from core.valuable.conversion import ExchangeBook


def _unit(dp: int) -> Decimal:
    """dp 자리 최소 단위 (dp=2 → 0.01)"""
    return Decimal(1).scaleb(-dp)


def _precision(amount: Decimal, dp: int) -> int:
    """amount를 dp 자리까지 잘림 없이 담는 유효 자릿수"""
    return max(getcontext().prec, amount.adjusted() + dp + 3)


def _quantize(amount: Decimal, dp: int) -> Decimal:
    """dp 자리 round half to even (큰 금액도 InvalidOperation 없이)"""
    with localcontext() as ctx:
        ctx.prec = _precision(amount, dp)
        return amount.quantize(_unit(dp), rounding=ROUND_HALF_EVEN)


def _to_decimal(value: Any) -> Decimal:
    """Decimal 변환 (float은 정확도 손실 때문에 거부)"""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or isinstance(value, float):
        raise TypeError(f"금액은 Decimal/int/str만 허용됩니다: {value!r}")
    if isinstance(value, (int, str)):
        try:
            return Decimal(value)
        except InvalidOperation as e:
            raise MoneyParseError(str(value)) from e
    raise TypeError(f"금액은 Decimal/int/str만 허용됩니다: {value!r}")


@dataclass(frozen=True)
class Money:
    """단일 통화 금액 (불변)

    amount는 표시용 문자열이 아니라 정확한 Decimal 값을 그대로 보관.
    """

    amount: Decimal
    currency: Currency

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", _to_decimal(self.amount))

    # =========================================================================
    # 생성
    # =========================================================================

    @classmethod
    def zero(cls, currency: Currency) -> "Money":
        return cls(Decimal(0), currency)

    @classmethod
    def from_minor(
        cls, amount: int, currency: Currency, dp: int = Defaults.DECIMAL_PLACES
    ) -> "Money":
        """최소 단위 정수로 생성 (3026, dp=2 → 30.26)"""
        return cls(Decimal(amount).scaleb(-dp), currency)

    @classmethod
    def from_major(cls, amount: int, currency: Currency) -> "Money":
        """주 단위 정수로 생성 (30 → 30)"""
        return cls(Decimal(amount), currency)

    @classmethod
    def from_string(cls, text: str, currencies: CurrencyStore) -> "Money":
        """금액 문자열 해석

        지원 형식:
        - 기호 선행: "$100.00", "-$100", "€1000"
        - 코드 후행: "100.00 USD", "-100 usd"

        Raises:
            MoneyParseError: 형식 오류
            CurrencyNotFoundError: 등록되지 않은 기호/코드
        """
        body = text.strip()
        if not body:
            raise MoneyParseError(text, "빈 문자열")

        negative = body.startswith("-")
        if negative or body.startswith("+"):
            body = body[1:].strip()

        parts = body.split()
        if len(parts) == 1:
            # 1. 기호 선행 (예: -$100.00)
            token = parts[0]
            symbol = currencies.match_symbol_prefix(token)
            if symbol is None:
                head = token.lstrip("+-")
                leading = ""
                for ch in head:
                    if ch.isdigit() or ch == ".":
                        break
                    leading += ch
                if leading:
                    raise CurrencyNotFoundError(leading)
                raise MoneyParseError(text, "통화 없음")
            currency = currencies.by_symbol(symbol)
            amount_text = token[len(symbol):]
        elif len(parts) == 2:
            # 2. 코드 후행 (예: -100.00 USD)
            amount_text, code = parts
            currency = currencies.by_code(code)
        else:
            raise MoneyParseError(text)

        try:
            amount = Decimal(amount_text)
        except InvalidOperation as e:
            raise MoneyParseError(text) from e
        if not amount.is_finite():
            raise MoneyParseError(text, "유한한 숫자가 아님")

        return cls(-amount if negative else amount, currency)

    # =========================================================================
    # 연산
    # =========================================================================

    def _check_currency(self, other: "Money") -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Money와 연산할 수 없는 값입니다: {other!r}")
        if other.currency != self.currency:
            raise CurrencyMismatchError(self, other)

    def __add__(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(self.amount - other.amount, self.currency)

    def __neg__(self) -> "Money":
        return Money(-self.amount, self.currency)

    def __abs__(self) -> "Money":
        return Money(abs(self.amount), self.currency)

    def __truediv__(self, n: int) -> "Money":
        return self.div_by_int(n)

    def div_by_int(self, n: int) -> "Money":
        """정수 나눗셈 (표시 문자열이 아닌 Decimal 값 자체를 나눔)"""
        if isinstance(n, bool) or not isinstance(n, int):
            raise TypeError(f"정수로만 나눌 수 있습니다: {n!r}")
        if n == 0:
            raise ZeroDivisionError("0으로 나눌 수 없습니다")
        return Money(self.amount / Decimal(n), self.currency)

    def round(self, dp: int = Defaults.DECIMAL_PLACES) -> "Money":
        """dp 자리 반올림 (round half to even)"""
        return Money(_quantize(self.amount, dp), self.currency)

    def split(self, n: int, dp: int = Defaults.DECIMAL_PLACES) -> list["Money"]:
        """n등분 (합계 보존)

        share = round_half_even(amount / n, dp) 를 기본 몫으로 하고,
        나머지를 최소 단위(10^-dp)로 앞쪽 k개 몫에 하나씩 배분.
        결과 합계는 원금과 정확히 같고, 몫 간 차이는 최대 1 단위.

        Args:
            n: 분할 수 (1 이상)
            dp: 소수 자릿수

        Returns:
            n개의 Money (앞쪽 k개가 보정분을 받음)

        Raises:
            ValueError: n < 1 또는 amount가 dp 자리로 표현되지 않는 경우

        Example:
            >>> Money(Decimal("1.00"), usd).split(7)
            [0.15, 0.15, 0.14, 0.14, 0.14, 0.14, 0.14]
        """
        if isinstance(n, bool) or not isinstance(n, int) or n < 1:
            raise ValueError(f"분할 수는 1 이상의 정수여야 합니다: {n!r}")

        unit = _unit(dp)
        if self.amount != _quantize(self.amount, dp):
            raise ValueError(
                f"{self.amount}는 소수점 {dp}자리로 나눌 수 없습니다"
            )

        with localcontext() as ctx:
            ctx.prec = _precision(self.amount, dp)
            share = (self.amount / Decimal(n)).quantize(unit, rounding=ROUND_HALF_EVEN)
            remainder = self.amount - share * n
            step = unit if remainder >= 0 else -unit
            n_compensations = int(
                (abs(remainder) / unit).to_integral_value(rounding=ROUND_HALF_EVEN)
            )
            assert n_compensations <= n

            return [
                Money(share + step if i < n_compensations else share, self.currency)
                for i in range(n)
            ]

    def convert_to(self, to: Currency, on: date, book: ExchangeBook) -> "Money":
        """환율 환산 (명시적 호출 전용, ExchangeBook 경유)"""
        return book.convert(self, to, on)

    # =========================================================================
    # 상태/표시
    # =========================================================================

    def is_zero(self) -> bool:
        return self.amount == 0

    def is_negative(self) -> bool:
        return self.amount < 0

    def display(
        self,
        currencies: CurrencyStore | None = None,
        dp: int = Defaults.DECIMAL_PLACES,
    ) -> str:
        """표시 문자열

        - 기호 방식: "-$10.00"
        - 코드 방식: "-10.00 GBP"

        dp 자리 round half to even. currencies가 주어지면 기호가 유일한
        통화만 기호로 표시 (그 외에는 코드 접미).
        """
        rounded = _quantize(self.amount, dp)
        sign = "-" if rounded < 0 else ""
        magnitude = f"{rounded.copy_abs():f}"

        use_symbol = self.currency.uses_symbol
        if use_symbol and currencies is not None:
            use_symbol = currencies.is_unique_symbol(self.currency)

        if use_symbol:
            return f"{sign}{self.currency.symbol}{magnitude}"
        return f"{sign}{magnitude} {self.currency.code}"

    def __str__(self) -> str:
        return self.display()
