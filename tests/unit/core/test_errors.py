"""
core/errors.py 테스트

예외가 문맥 정보를 속성으로 보관하는지 확인
"""

from decimal import Decimal

import pytest

from core.errors import (
    AccountAmbiguousError,
    AccountNotFoundError,
    CurrencyMismatchError,
    CurrencyNotFoundError,
    LedgerError,
    MoneyParseError,
    RateUnavailableError,
    UnbalancedError,
)
from core.valuable import CurrencyStore, Money, Valuable


class TestHierarchy:
    """예외 계층 테스트"""

    @pytest.mark.parametrize(
        "exc",
        [
            AccountNotFoundError("x"),
            AccountAmbiguousError("x", ["a", "b"]),
            CurrencyNotFoundError("&"),
            MoneyParseError("abc"),
            RateUnavailableError("EUR", "USD", "timeout"),
        ],
    )
    def test_is_ledger_error(self, exc: Exception) -> None:
        """모든 예외는 LedgerError"""
        assert isinstance(exc, LedgerError)

    def test_money_parse_error_is_value_error(self) -> None:
        assert isinstance(MoneyParseError("abc"), ValueError)

    def test_currency_mismatch_is_type_error(self) -> None:
        """통화 불일치는 프로그래밍 오류"""
        assert isinstance(CurrencyMismatchError("a", "b"), TypeError)


class TestContext:
    """문맥 속성 테스트"""

    def test_ambiguous_candidates(self) -> None:
        exc = AccountAmbiguousError("dri", ["expense:drinks", "asset:drive"])

        assert exc.query == "dri"
        assert exc.candidates == ["expense:drinks", "asset:drive"]
        assert "expense:drinks" in str(exc)

    def test_currency_not_found_text(self) -> None:
        exc = CurrencyNotFoundError("&100")
        assert exc.text == "&100"

    def test_unbalanced_imbalance(self) -> None:
        usd = CurrencyStore.builtin().by_code("USD")
        imbalance = Valuable([Money(Decimal("5"), usd)])

        exc = UnbalancedError(imbalance, "Lunch")

        assert exc.imbalance == imbalance
        assert exc.description == "Lunch"
        assert "Lunch" in str(exc)
