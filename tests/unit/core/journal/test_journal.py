"""
core/journal/journal.py, core/journal/txn.py 테스트

거래 저장/삭제, 조회, 설정 기반 생성, revision
"""

from datetime import date
from uuid import uuid4

import pytest

from core.config.loader import LedgerConfig, parse_config
from core.errors import CurrencyNotFoundError, TransactionNotFoundError, UnbalancedError
from core.journal import Journal, Posting, PostingId, Transaction, Txn, TxnStore
from core.valuable import Currency, Money


def record_salary(journal: Journal, usd: Currency, day: date, amount: str = "1000") -> Transaction:
    cash = journal.resolve_or_create_account(["asset", "cash"])
    salary = journal.resolve_or_create_account(["income", "salary"])
    return (
        journal.new_transaction(day, "Salary")
        .with_posting(cash, Money(amount, usd))
        .with_posting(salary)
        .build()
    )


class TestTxnStore:
    """TxnStore 테스트"""

    def test_insert_rejects_unbalanced(self, journal: Journal, usd: Currency) -> None:
        """저장소 수준에서도 균형 검증 (아무것도 저장되지 않음)"""
        cash = journal.resolve_or_create_account(["asset", "cash"])
        txn = Txn(uuid4())
        transaction = Transaction(
            txn=txn,
            date=date(2021, 1, 1),
            description="bad",
            postings=(Posting(PostingId(uuid4()), txn, cash, Money("1", usd)),),
        )
        store = TxnStore()

        with pytest.raises(UnbalancedError):
            store.insert(transaction)

        assert len(store) == 0
        assert store.posting_count() == 0

    def test_remove_unknown(self) -> None:
        with pytest.raises(TransactionNotFoundError):
            TxnStore().remove(Txn(uuid4()))


class TestJournalCommit:
    """거래 확정/삭제 테스트"""

    def test_commit_stores_transaction(self, journal: Journal, usd: Currency) -> None:
        transaction = record_salary(journal, usd, date(2021, 1, 1))

        assert journal.transaction(transaction.txn) == transaction
        assert journal.transactions() == [transaction]
        assert journal.txn_ids() == [transaction.txn]
        assert len(list(journal.postings())) == 2

    def test_balance_invariant_for_every_transaction(self, journal: Journal, usd: Currency) -> None:
        for day in range(1, 5):
            record_salary(journal, usd, date(2021, 1, day), amount=f"{day}00.25")

        for transaction in journal.transactions():
            assert transaction.total().is_zero()

    def test_remove(self, journal: Journal, usd: Currency) -> None:
        """거래 삭제 시 posting도 삭제, 계정은 유지"""
        first = record_salary(journal, usd, date(2021, 1, 1))
        second = record_salary(journal, usd, date(2021, 1, 2))
        accounts_before = len(journal.accns)

        removed = journal.remove(first)

        assert removed == first
        assert journal.transactions() == [second]
        assert journal.txns.posting_count() == 2
        assert len(journal.accns) == accounts_before
        with pytest.raises(TransactionNotFoundError):
            journal.transaction(first.txn)

    def test_remove_by_id(self, journal: Journal, usd: Currency) -> None:
        transaction = record_salary(journal, usd, date(2021, 1, 1))

        journal.remove(transaction.txn)

        assert len(journal.txns) == 0

    def test_revision_increments(self, journal: Journal, usd: Currency) -> None:
        assert journal.revision == 0
        transaction = record_salary(journal, usd, date(2021, 1, 1))
        assert journal.revision == 1
        journal.remove(transaction)
        assert journal.revision == 2

    def test_rejected_commit_keeps_revision(self, journal: Journal, usd: Currency) -> None:
        cash = journal.resolve_or_create_account(["asset", "cash"])

        with pytest.raises(UnbalancedError):
            journal.new_transaction(date(2021, 1, 1), "x").with_posting(cash, Money("1", usd)).build()

        assert journal.revision == 0

    def test_payee_by_name(self, journal: Journal, usd: Currency) -> None:
        cash = journal.resolve_or_create_account(["asset", "cash"])
        food = journal.resolve_or_create_account(["expense", "food"])

        transaction = (
            journal.new_transaction(date(2021, 1, 1), "Dinner", payee="bob")
            .with_posting(food, Money("20", usd))
            .with_posting(cash)
            .build()
        )

        assert transaction.payee == journal.accns.find_contact("bob")


class TestJournalParsing:
    """금액 해석 테스트"""

    def test_parse_money(self, journal: Journal, usd: Currency) -> None:
        assert journal.parse_money("$3.50") == Money("3.50", usd)

    def test_bare_number_requires_default_currency(self, journal: Journal) -> None:
        with pytest.raises(ValueError):
            journal.parse_money("3.50")

    def test_bare_number_with_default_currency(self) -> None:
        journal = Journal(default_currency="eur")

        parsed = journal.parse_money("-3.50")
        assert parsed.currency.code == "EUR"
        assert str(parsed.amount) == "-3.50"

    def test_unknown_default_currency(self) -> None:
        with pytest.raises(CurrencyNotFoundError):
            Journal(default_currency="XYZ")

    def test_negative_decimal_places(self) -> None:
        with pytest.raises(ValueError):
            Journal(decimal_places=-1)


class TestFromConfig:
    """설정 기반 생성 테스트"""

    def test_defaults(self) -> None:
        journal = Journal.from_config(LedgerConfig())

        assert journal.decimal_places == 2
        assert journal.default_currency.code == "USD"
        assert journal.accns.separator == ":"

    def test_custom(self) -> None:
        config = parse_config(
            {
                "decimal_places": 0,
                "account_separator": "/",
                "default_currency": "KRW",
                "currencies": [{"code": "KRW", "symbol": "₩"}],
            }
        )

        journal = Journal.from_config(config)
        cash = journal.resolve_or_create_account(["asset", "cash"])

        assert journal.abs_name(cash) == "asset/cash"
        assert journal.parse_money("₩1000").currency.code == "KRW"
        assert journal.parse_money("1000").currency.code == "KRW"


class TestFormatting:
    """텍스트 출력 테스트"""

    def test_format_transaction(self, journal: Journal, usd: Currency) -> None:
        transaction = record_salary(journal, usd, date(2021, 1, 1))

        assert journal.format_transaction(transaction) == (
            "2021-01-01 Salary\n"
            "    asset:cash  $1000.00\n"
            "    income:salary  -$1000.00"
        )

    def test_str_joins_transactions(self, journal: Journal, usd: Currency) -> None:
        record_salary(journal, usd, date(2021, 1, 1))
        record_salary(journal, usd, date(2021, 1, 2))

        assert str(journal).count("Salary") == 2
        assert "\n\n2021-01-02 Salary" in str(journal)
