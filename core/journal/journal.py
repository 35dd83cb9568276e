"""
Journal - 원장 컨텍스트

계정 트리, 거래 저장소, 통화 카탈로그를 하나로 묶는 명시적 컨텍스트.
전역 상태 없이 생성 시점에 주입.

변경(거래 확정/삭제)마다 revision이 증가하며, 이전 revision에서 만든
PostingQuerys는 다음 사용 시 StaleQueryError.
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import TYPE_CHECKING, Iterable, Iterator, Sequence
from uuid import uuid4

from core.accn import Accn, AccnTree, Contact
from core.constants import Defaults
from core.journal.builder import TxnBuilder
from core.journal.extension.base import ExtensionFactory, PostingSink, chain
from core.journal.query import PostingQuerys, PostingRow, Query
from core.journal.statement import IncomeStatement
from core.journal.txn import Posting, PostingId, Transaction, Txn, TxnStore
from core.valuable import Currency, CurrencyStore, Money

if TYPE_CHECKING:
    from core.config.loader import LedgerConfig

logger = logging.getLogger(__name__)

_BARE_NUMBER = re.compile(r"[-+]?\d+(\.\d+)?")


class Journal:
    """원장

    Args:
        accns: 계정 트리 (기본: 새 트리)
        txns: 거래 저장소 (기본: 빈 저장소)
        currencies: 통화 카탈로그 (기본: 내장 통화)
        decimal_places: 분할/표시 소수 자릿수
        default_currency: 통화 표기가 없는 금액에 쓸 통화 (None이면 통화 필수)

    사용 예시:
    ```python
    journal = Journal()
    cash = journal.resolve_or_create_account(["asset", "cash"])
    salary = journal.resolve_or_create_account(["income", "salary"])

    journal.new_transaction(date(2021, 1, 1), "Salary") \\
        .with_posting(cash, journal.parse_money("1000.00 USD")) \\
        .with_posting(salary) \\
        .build()

    journal.query_posting(Query.new().accn(cash)).total()
    ```
    """

    def __init__(
        self,
        accns: AccnTree | None = None,
        txns: TxnStore | None = None,
        currencies: CurrencyStore | None = None,
        decimal_places: int = Defaults.DECIMAL_PLACES,
        default_currency: str | None = None,
    ):
        if decimal_places < 0:
            raise ValueError(f"decimal_places는 0 이상이어야 합니다: {decimal_places}")

        self.accns = accns if accns is not None else AccnTree()
        self.txns = txns if txns is not None else TxnStore()
        self.currencies = currencies if currencies is not None else CurrencyStore.builtin()
        self.decimal_places = decimal_places
        self.default_currency: Currency | None = (
            self.currencies.by_code(default_currency) if default_currency else None
        )
        self._revision = 0

    @classmethod
    def from_config(cls, config: LedgerConfig) -> Journal:
        """설정으로부터 원장 생성"""
        from core.config.loader import build_currency_store

        return cls(
            accns=AccnTree(separator=config.account_separator),
            currencies=build_currency_store(config),
            decimal_places=config.decimal_places,
            default_currency=config.default_currency,
        )

    @property
    def revision(self) -> int:
        return self._revision

    # =========================================================================
    # 입력
    # =========================================================================

    def resolve_or_create_account(self, segments: Sequence[str]) -> Accn:
        return self.accns.resolve_or_create_account(segments)

    def provision_contact(self, name: str) -> Contact:
        return self.accns.provision_contact(name)

    def parse_money(self, text: str) -> Money:
        """금액 문자열 해석 (통화 없는 숫자는 기본 통화)"""
        body = text.strip()
        if self.default_currency is not None and _BARE_NUMBER.fullmatch(body):
            return Money(body, self.default_currency)
        return Money.from_string(text, self.currencies)

    def new_transaction(
        self,
        date: date,
        description: str,
        payee: Contact | str | None = None,
        extensions: Iterable[ExtensionFactory] = (),
    ) -> PostingSink:
        """거래 빌더 생성

        Args:
            payee: 상대방 연락처 (이름이면 등록 후 사용)
            extensions: 빌더를 감쌀 extension (첫 번째가 가장 바깥)
        """
        if isinstance(payee, str):
            payee = self.provision_contact(payee)
        return chain(TxnBuilder(self, date, description, payee), extensions)

    def commit(
        self,
        date: date,
        description: str,
        postings: Sequence[tuple[Accn, Money]],
        payee: Contact | None = None,
    ) -> Transaction:
        """균형 잡힌 posting 목록을 거래로 저장 (TxnBuilder.build에서 호출)

        Raises:
            UnbalancedError: 통화별 합계가 0이 아님 (저장 안 됨)
        """
        txn = Txn(uuid4())
        transaction = Transaction(
            txn=txn,
            date=date,
            description=description,
            postings=tuple(
                Posting(id=PostingId(uuid4()), txn=txn, accn=accn, money=money)
                for accn, money in postings
            ),
            payee=payee,
        )
        self.txns.insert(transaction)
        self._revision += 1

        logger.debug(f"거래 확정: {date} '{description}' ({len(transaction.postings)} postings)")
        return transaction

    def remove(self, txn: Txn | Transaction) -> Transaction:
        """거래 삭제 (posting 포함, 계정은 유지)"""
        if isinstance(txn, Transaction):
            txn = txn.txn
        transaction = self.txns.remove(txn)
        self._revision += 1

        logger.debug(f"거래 삭제: {transaction.date} '{transaction.description}'")
        return transaction

    # =========================================================================
    # 조회
    # =========================================================================

    def transactions(self) -> list[Transaction]:
        """확정 순서"""
        return list(self.txns)

    def txn_ids(self) -> list[Txn]:
        return [t.txn for t in self.txns]

    def transaction(self, txn: Txn) -> Transaction:
        return self.txns.get(txn)

    def postings(self) -> Iterator[Posting]:
        return self.txns.postings()

    def posting_rows(self) -> Iterator[PostingRow]:
        for transaction in self.txns:
            for posting in transaction.postings:
                yield PostingRow(transaction.date, transaction.description, posting)

    def query_posting(self, query: Query | None = None) -> PostingQuerys:
        return PostingQuerys(self, query)

    def income_statement(self, since: date | None = None, until: date | None = None) -> IncomeStatement:
        """기간 손익 (수익/비용 계정별 합계와 순이익)"""
        query = Query.new()
        if since is not None:
            query = query.since(since)
        if until is not None:
            query = query.until(until)

        income = self.query_posting(query.accn(self.accns.income)).totals_by_account()
        expense = self.query_posting(query.accn(self.accns.expense)).totals_by_account()
        return IncomeStatement(since=since, until=until, income=income, expense=expense)

    def abs_name(self, accn: Accn) -> str:
        return self.accns.abs_name(accn)

    def format_transaction(self, transaction: Transaction) -> str:
        """거래 한 건을 텍스트로 (날짜 설명 + posting 줄)"""
        header = f"{transaction.date.isoformat()} {transaction.description}"
        if transaction.payee is not None:
            header += f" @{transaction.payee.name}"
        lines = [header]
        for posting in transaction.postings:
            amount = posting.money.display(self.currencies, self.decimal_places)
            lines.append(f"    {self.abs_name(posting.accn)}  {amount}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return "\n\n".join(self.format_transaction(t) for t in self.txns)
