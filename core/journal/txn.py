"""
거래/Posting 레코드와 저장소

Transaction과 Posting은 확정 후 불변. TxnStore는 거래 단위로만
추가/삭제하며 posting 테이블을 함께 갱신.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterator
from uuid import UUID

from core.accn import Accn, Contact
from core.errors import TransactionNotFoundError, UnbalancedError
from core.valuable import Money, Valuable


@dataclass(frozen=True)
class Txn:
    """거래 식별자"""

    id: UUID

    def __repr__(self) -> str:
        return f"Txn({self.id.hex[:8]})"


@dataclass(frozen=True)
class PostingId:
    """Posting 식별자"""

    id: UUID

    def __repr__(self) -> str:
        return f"PostingId({self.id.hex[:8]})"


@dataclass(frozen=True)
class Posting:
    """거래 한 줄 (계정, 금액)"""

    id: PostingId
    txn: Txn
    accn: Accn
    money: Money


@dataclass(frozen=True)
class Transaction:
    """확정된 거래

    postings는 입력 순서를 유지하며 통화별 합계가 항상 0.
    """

    txn: Txn
    date: date
    description: str
    postings: tuple[Posting, ...]
    payee: Contact | None = None

    def total(self) -> Valuable:
        return Valuable.sum(p.money for p in self.postings)

    def is_balanced(self) -> bool:
        return self.total().is_zero()

    def postings_of(self, accn: Accn) -> list[Posting]:
        return [p for p in self.postings if p.accn == accn]


class TxnStore:
    """거래 저장소 (확정 순서 유지)"""

    def __init__(self) -> None:
        self._txns: dict[Txn, Transaction] = {}
        self._postings: dict[PostingId, Posting] = {}

    def insert(self, transaction: Transaction) -> None:
        """거래와 posting 전체를 한 번에 저장

        검증이 모두 끝난 뒤에만 테이블을 갱신하므로 실패 시 아무것도 남지 않음.

        Raises:
            UnbalancedError: 통화별 합계가 0이 아님
            ValueError: 이미 저장된 거래
        """
        if transaction.txn in self._txns:
            raise ValueError(f"이미 저장된 거래입니다: {transaction.txn}")

        total = transaction.total()
        if not total.is_zero():
            raise UnbalancedError(total, transaction.description)

        self._txns[transaction.txn] = transaction
        for posting in transaction.postings:
            self._postings[posting.id] = posting

    def remove(self, txn: Txn) -> Transaction:
        """거래와 그 posting 삭제 (계정은 그대로)"""
        transaction = self._txns.pop(txn, None)
        if transaction is None:
            raise TransactionNotFoundError(txn)

        for posting in transaction.postings:
            del self._postings[posting.id]
        return transaction

    def get(self, txn: Txn) -> Transaction:
        try:
            return self._txns[txn]
        except KeyError:
            raise TransactionNotFoundError(txn) from None

    def posting(self, posting_id: PostingId) -> Posting:
        return self._postings[posting_id]

    def postings(self) -> Iterator[Posting]:
        """전체 posting (거래 확정 순서, 거래 내 입력 순서)"""
        for transaction in self._txns.values():
            yield from transaction.postings

    def posting_count(self) -> int:
        return len(self._postings)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(list(self._txns.values()))

    def __len__(self) -> int:
        return len(self._txns)

    def __contains__(self, txn: object) -> bool:
        return txn in self._txns
