"""
core/journal/query.py, core/journal/statement.py 테스트

조회 대수, 날짜별/거래별 집계, 손익계산서, 변경 감지
"""

from dataclasses import dataclass
from datetime import date

import pytest

from core.accn import Accn
from core.errors import StaleQueryError
from core.journal import And, ByAccount, ByAccounts, Journal, Query, Since, Until
from core.valuable import Currency, Money, Valuable

DAY0 = date(2020, 12, 31)
DAY1 = date(2021, 1, 1)
DAY2 = date(2021, 1, 2)
DAY3 = date(2021, 1, 3)
DAY4 = date(2021, 1, 4)


@dataclass
class Ledger:
    journal: Journal
    usd: Currency
    cash: Accn
    salary: Accn
    food: Accn
    lunch: Accn
    coffee: Accn

    def dollars(self, amount: str) -> Valuable:
        return Valuable([Money(amount, self.usd)])


@pytest.fixture
def ledger(journal: Journal, usd: Currency) -> Ledger:
    """1일 급여, 3일 점심/커피 (2일에는 거래 없음)"""
    cash = journal.resolve_or_create_account(["asset", "cash"])
    salary = journal.resolve_or_create_account(["income", "salary"])
    lunch = journal.resolve_or_create_account(["expense", "food", "lunch"])
    coffee = journal.resolve_or_create_account(["expense", "food", "coffee"])

    journal.new_transaction(DAY1, "Salary") \
        .with_posting(cash, Money("1000", usd)).with_posting(salary).build()
    journal.new_transaction(DAY3, "Lunch") \
        .with_posting(lunch, Money("10", usd)).with_posting(cash).build()
    journal.new_transaction(DAY3, "Coffee") \
        .with_posting(coffee, Money("5", usd)).with_posting(cash).build()

    return Ledger(
        journal=journal,
        usd=usd,
        cash=cash,
        salary=salary,
        food=journal.accns.parent(lunch),
        lunch=lunch,
        coffee=coffee,
    )


class TestQueryAlgebra:
    """Query 구성 테스트"""

    def test_new_is_all(self) -> None:
        assert Query.new() == Query.new()
        assert Query.new().since_bound() is None

    def test_fluent_builds_and(self, ledger: Ledger) -> None:
        query = Query.new().accn(ledger.cash).since(DAY1)

        assert query == And(ByAccount(ledger.cash), Since(DAY1))

    def test_tightest_bounds(self) -> None:
        """And는 더 좁은 경계를 전파"""
        query = Query.new().since(DAY1).since(DAY2).until(DAY4).until(DAY3)

        assert query.since_bound() == DAY2
        assert query.until_bound() == DAY3

    def test_bounds_from_either_side(self) -> None:
        query = And(Since(DAY1), Until(DAY3))

        assert query.since_bound() == DAY1
        assert query.until_bound() == DAY3


class TestFilters:
    """필터 테스트"""

    def test_by_account_includes_descendants(self, ledger: Ledger) -> None:
        total = ledger.journal.query_posting(Query.new().accn(ledger.food)).total()

        assert total == ledger.dollars("15")

    def test_by_accounts_union(self, ledger: Ledger) -> None:
        query = ByAccounts(frozenset({ledger.salary, ledger.food}))

        assert ledger.journal.query_posting(query).total() == ledger.dollars("-985")

    def test_and_intersects(self, ledger: Ledger) -> None:
        query = Query.new().accn(ledger.cash).since(DAY3)
        rows = list(ledger.journal.query_posting(query))

        assert [row.description for row in rows] == ["Lunch", "Coffee"]
        assert all(row.accn == ledger.cash for row in rows)

    def test_until_inclusive(self, ledger: Ledger) -> None:
        query = Query.new().accn(ledger.cash).until(DAY1)

        assert ledger.journal.query_posting(query).total() == ledger.dollars("1000")

    def test_all_matches_everything(self, ledger: Ledger) -> None:
        """전체 합계는 항상 0 (균형)"""
        querys = ledger.journal.query_posting()

        assert querys.count() == 6
        assert querys.total().is_zero()


class TestDailyAggregation:
    """날짜별 집계 테스트"""

    def test_daily_change_fills_gaps_within_bound(self, ledger: Ledger) -> None:
        query = Query.new().accn(ledger.cash).since(DAY1).until(DAY3)

        change = ledger.journal.query_posting(query).daily_change()

        assert list(change) == [DAY1, DAY2, DAY3]
        assert change[DAY1] == ledger.dollars("1000")
        assert change[DAY2].is_zero()
        assert change[DAY3] == ledger.dollars("-15")

    def test_daily_change_without_bounds_spans_postings(self, ledger: Ledger) -> None:
        change = ledger.journal.query_posting(Query.new().accn(ledger.cash)).daily_change()

        assert list(change) == [DAY1, DAY2, DAY3]

    def test_daily_change_explicit_bounds(self, ledger: Ledger) -> None:
        change = ledger.journal.query_posting(Query.new().accn(ledger.cash)).daily_change(DAY0, DAY4)

        assert list(change) == [DAY0, DAY1, DAY2, DAY3, DAY4]
        assert change[DAY0].is_zero()
        assert change[DAY4].is_zero()

    def test_daily_change_empty_without_bounds(self, journal: Journal) -> None:
        assert journal.query_posting().daily_change() == {}

    def test_daily_change_bound_without_postings(self, ledger: Ledger) -> None:
        query = Query.new().accn(ledger.cash).since(DAY2).until(DAY2)

        change = ledger.journal.query_posting(query).daily_change()

        assert list(change) == [DAY2]
        assert change[DAY2].is_zero()

    def test_daily_balance_carries_forward(self, ledger: Ledger) -> None:
        """거래 없는 날은 0 변동, 잔액은 이월"""
        query = Query.new().accn(ledger.cash).since(DAY1).until(DAY3)

        rows = ledger.journal.query_posting(query).daily_balance()

        assert [row.date for row in rows] == [DAY1, DAY2, DAY3]
        assert rows[1].change.is_zero()
        assert rows[1].balance == ledger.dollars("1000")
        assert rows[2].balance == ledger.dollars("985")

    def test_unsorted_commit_order(self, ledger: Ledger) -> None:
        """늦게 입력된 과거 거래도 날짜순으로 집계"""
        journal = ledger.journal
        journal.new_transaction(DAY0, "Gift") \
            .with_posting(ledger.cash, Money("1", ledger.usd)).with_posting(ledger.salary).build()

        rows = journal.query_posting(Query.new().accn(ledger.cash)).daily_balance()

        assert rows[0].date == DAY0
        assert rows[0].balance == ledger.dollars("1")
        assert rows[-1].balance == ledger.dollars("986")


class TestBalances:
    """거래별 잔액 테스트"""

    def test_one_row_per_transaction(self, ledger: Ledger) -> None:
        rows = ledger.journal.query_posting(Query.new().accn(ledger.cash)).balances()

        assert [(r.date, r.description) for r in rows] == [
            (DAY1, "Salary"), (DAY3, "Lunch"), (DAY3, "Coffee"),
        ]
        assert [r.balance for r in rows] == [
            ledger.dollars("1000"), ledger.dollars("990"), ledger.dollars("985"),
        ]

    def test_groups_postings_of_same_transaction(self, ledger: Ledger) -> None:
        """같은 거래의 여러 posting은 한 줄로 합산"""
        rows = ledger.journal.query_posting(Query.new().accn(ledger.food)).balances()

        assert len(rows) == 2
        assert rows[-1].balance == ledger.dollars("15")


class TestRegister:
    """posting별 장부 테스트"""

    def test_one_row_per_posting_with_account(self, ledger: Ledger) -> None:
        query = Query.new().accns([ledger.cash, ledger.food])
        rows = ledger.journal.query_posting(query).register()

        assert [(r.description, r.accn) for r in rows] == [
            ("Salary", ledger.cash),
            ("Lunch", ledger.lunch),
            ("Lunch", ledger.cash),
            ("Coffee", ledger.coffee),
            ("Coffee", ledger.cash),
        ]
        assert [r.change for r in rows] == [
            Money("1000", ledger.usd),
            Money("10", ledger.usd),
            Money("-10", ledger.usd),
            Money("5", ledger.usd),
            Money("-5", ledger.usd),
        ]
        assert [r.balance for r in rows] == [
            ledger.dollars("1000"),
            ledger.dollars("1010"),
            ledger.dollars("1000"),
            ledger.dollars("1005"),
            ledger.dollars("1000"),
        ]

    def test_sorted_by_date_before_accumulating(self, ledger: Ledger) -> None:
        """늦게 확정된 이른 날짜 거래도 날짜 위치에 누적"""
        ledger.journal.new_transaction(DAY2, "Refund") \
            .with_posting(ledger.cash, Money("3", ledger.usd)).with_posting(ledger.lunch).build()

        rows = ledger.journal.query_posting(Query.new().accn(ledger.cash)).register()

        assert [r.date for r in rows] == [DAY1, DAY2, DAY3, DAY3]
        assert [r.balance for r in rows] == [
            ledger.dollars("1000"),
            ledger.dollars("1003"),
            ledger.dollars("993"),
            ledger.dollars("988"),
        ]

    def test_empty(self, journal: Journal) -> None:
        assert journal.query_posting().register() == []


class TestTotalsByAccount:
    """계정별 합계 테스트"""

    def test_sorted_by_name(self, ledger: Ledger) -> None:
        totals = ledger.journal.query_posting(Query.new().accn(ledger.food)).totals_by_account()

        assert list(totals) == [ledger.coffee, ledger.lunch]
        assert totals[ledger.lunch] == ledger.dollars("10")


class TestIncomeStatement:
    """손익계산서 테스트"""

    def test_whole_period(self, ledger: Ledger) -> None:
        statement = ledger.journal.income_statement()

        assert statement.income == {ledger.salary: ledger.dollars("-1000")}
        assert statement.total_income == ledger.dollars("1000")
        assert statement.total_expense == ledger.dollars("15")
        assert statement.net == ledger.dollars("985")

    def test_bounded_period(self, ledger: Ledger) -> None:
        statement = ledger.journal.income_statement(since=DAY2)

        assert statement.income == {}
        assert statement.net == ledger.dollars("-15")


class TestStaleQuery:
    """변경 감지 테스트"""

    def test_reiterable_without_mutation(self, ledger: Ledger) -> None:
        querys = ledger.journal.query_posting(Query.new().accn(ledger.cash))

        assert querys.total() == querys.total()

    def test_mutation_invalidates(self, ledger: Ledger) -> None:
        querys = ledger.journal.query_posting(Query.new().accn(ledger.cash))
        ledger.journal.remove(ledger.journal.transactions()[0])

        with pytest.raises(StaleQueryError):
            querys.total()

    def test_mutation_during_iteration(self, ledger: Ledger) -> None:
        rows = iter(ledger.journal.query_posting())
        next(rows)
        ledger.journal.remove(ledger.journal.transactions()[-1])

        with pytest.raises(StaleQueryError):
            next(rows)

    def test_new_query_after_mutation(self, ledger: Ledger) -> None:
        ledger.journal.remove(ledger.journal.transactions()[0])

        assert ledger.journal.query_posting(Query.new().accn(ledger.cash)).total() == ledger.dollars("-15")
