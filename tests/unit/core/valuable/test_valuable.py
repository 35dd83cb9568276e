"""
core/valuable/valuable.py 테스트

다중 통화 합계와 0 항목 제거
"""

from decimal import Decimal

from core.valuable import Currency, CurrencyStore, Money, Valuable


class TestValuable:
    """Valuable 테스트"""

    def test_sum_merges_by_currency(self, usd: Currency, eur: Currency) -> None:
        total = Valuable.sum([Money("1", usd), Money("2", eur), Money("3", usd)])

        assert total.get(usd) == Money("4", usd)
        assert total.get(eur) == Money("2", eur)
        assert len(total) == 2

    def test_zero_entries_pruned(self, usd: Currency, eur: Currency) -> None:
        """0이 된 통화는 즉시 제거"""
        total = Valuable.sum([Money("5", usd), Money("1", eur), Money("-5", usd)])

        assert total.currencies() == [eur]
        assert not total.is_zero()

        total.add_money(Money("-1", eur))
        assert total.is_zero()
        assert len(total) == 0

    def test_get_missing_is_zero(self, usd: Currency) -> None:
        assert Valuable().get(usd) == Money("0", usd)

    def test_moneys_in_insertion_order(self, usd: Currency, eur: Currency) -> None:
        total = Valuable([Money("2", eur), Money("1", usd)])

        assert [m.currency.code for m in total.moneys()] == ["EUR", "USD"]

    def test_add_and_sub(self, usd: Currency, eur: Currency) -> None:
        a = Valuable([Money("1", usd)])
        b = Valuable([Money("2", eur), Money("1", usd)])

        assert (a + b).get(usd) == Money("2", usd)
        assert (b - a) == Valuable([Money("2", eur)])
        # 원본은 변경되지 않음
        assert a.get(usd) == Money("1", usd)

    def test_add_money(self, usd: Currency) -> None:
        assert (Valuable() + Money("1", usd)).get(usd) == Money("1", usd)

    def test_builtin_sum(self, usd: Currency) -> None:
        """sum() 시작값 0 지원"""
        total = sum([Valuable([Money("1", usd)]), Valuable([Money("2", usd)])])

        assert total == Valuable([Money("3", usd)])

    def test_neg(self, usd: Currency) -> None:
        assert -Valuable([Money("1", usd)]) == Valuable([Money("-1", usd)])

    def test_equality_ignores_order(self, usd: Currency, eur: Currency) -> None:
        a = Valuable([Money("1", usd), Money("2", eur)])
        b = Valuable([Money("2", eur), Money("1", usd)])

        assert a == b
        assert a != Valuable([Money("1", usd)])

    def test_copy_independent(self, usd: Currency) -> None:
        original = Valuable([Money("1", usd)])
        copied = original.copy()
        copied.add_money(Money("1", usd))

        assert original.get(usd).amount == Decimal("1")


class TestValuableDisplay:
    """display 테스트"""

    def test_empty(self) -> None:
        assert Valuable().display() == "0.00"
        assert Valuable().display(dp=3) == "0.000"

    def test_sorted_by_code(self, currencies: CurrencyStore, usd: Currency, eur: Currency) -> None:
        total = Valuable([Money("1", usd), Money("-2", eur)])

        assert total.display(currencies) == "-€2.00\n$1.00"

    def test_repr(self, usd: Currency) -> None:
        assert repr(Valuable([Money("1.5", usd)])) == "Valuable(USD=1.5)"
