"""
거래 빌더

상태 전이:
    BUILDING → COMMITTED  (균형 또는 추론 posting으로 균형 달성)
    BUILDING → REJECTED   (불균형 + 추론 posting 없음)

추론 posting(금액 없는 posting)은 거래당 하나만 허용되며, build 시점의
불균형을 통화별 posting으로 흡수.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Iterable, Sequence

from core.accn import Accn, Contact
from core.errors import (
    AccountNotFoundError,
    BuilderStateError,
    InferredPostingConflictError,
    UnbalancedError,
)
from core.types import BuilderState
from core.valuable import Money, Valuable

if TYPE_CHECKING:
    from core.journal.journal import Journal
    from core.journal.txn import Transaction

logger = logging.getLogger(__name__)


class TxnBuilder:
    """거래 빌더 (posting sink 체인의 가장 안쪽)

    Journal.new_transaction()으로 생성.

    사용 예시:
    ```python
    txn = (
        journal.new_transaction(date(2021, 1, 1), "Salary")
        .with_posting(cash, Money("1000.00", usd))
        .with_posting(salary)   # 추론 posting
        .build()
    )
    ```
    """

    def __init__(
        self,
        journal: Journal,
        date: date,
        description: str,
        payee: Contact | None = None,
    ):
        self.journal = journal
        self.date = date
        self.description = description
        self.payee = payee
        self.state = BuilderState.BUILDING

        self._postings: list[tuple[Accn, Money]] = []
        self._inferred: Accn | None = None

    def _ensure_building(self) -> None:
        if self.state != BuilderState.BUILDING:
            raise BuilderStateError(
                f"이미 {self.state.value} 상태인 빌더입니다: '{self.description}'"
            )

    def _ensure_known(self, accn: Accn) -> None:
        if accn not in self.journal.accns:
            raise AccountNotFoundError(repr(accn))

    # =========================================================================
    # Posting 추가
    # =========================================================================

    def with_posting(self, accn: Accn, money: Money | None = None) -> TxnBuilder:
        """posting 추가

        money가 None이면 추론 posting으로 지정.

        Raises:
            InferredPostingConflictError: 추론 posting을 두 번 지정
        """
        self._ensure_building()
        self._ensure_known(accn)

        if money is None:
            if self._inferred is not None:
                accns = self.journal.accns
                raise InferredPostingConflictError(
                    accns.abs_name(self._inferred), accns.abs_name(accn)
                )
            self._inferred = accn
        else:
            self._postings.append((accn, money))
        return self

    def with_posting_combined(self, accn: Accn, money: Money | None = None) -> TxnBuilder:
        """같은 (계정, 통화) posting이 있으면 합산, 없으면 추가"""
        if money is None:
            return self.with_posting(accn, None)

        self._ensure_building()
        self._ensure_known(accn)

        for i, (existing_accn, existing) in enumerate(self._postings):
            if existing_accn == accn and existing.currency == money.currency:
                self._postings[i] = (accn, existing + money)
                return self

        self._postings.append((accn, money))
        return self

    def with_moneys(self, accn: Accn, moneys: Iterable[Money]) -> TxnBuilder:
        """한 계정에 여러 통화 posting 추가"""
        for money in moneys:
            self.with_posting(accn, money)
        return self

    def with_tag(self, name: str, args: Sequence[str] = ()) -> TxnBuilder:
        """처리하는 extension이 없는 태그는 무시"""
        self._ensure_building()
        logger.warning(f"처리되지 않은 태그 무시: {name} {' '.join(args)}".rstrip())
        return self

    def parse_accn(self, segments: Sequence[str]) -> Accn:
        """텍스트 경로를 계정으로 변환 (없으면 생성)"""
        return self.journal.resolve_or_create_account(segments)

    # =========================================================================
    # 확정
    # =========================================================================

    def postings(self) -> list[tuple[Accn, Money]]:
        """명시적 posting 목록 (복사본)"""
        return list(self._postings)

    @property
    def inferred(self) -> Accn | None:
        return self._inferred

    def imbalance(self) -> Valuable:
        """명시적 posting 합계 (0이면 균형)"""
        return Valuable.sum(money for _, money in self._postings)

    def build(self) -> Transaction:
        """추론 후 거래 확정

        Raises:
            UnbalancedError: 불균형이고 추론 posting 없음 (REJECTED, 저장 안 됨)
            BuilderStateError: 이미 확정/거부된 빌더
        """
        self._ensure_building()

        postings = list(self._postings)
        imbalance = self.imbalance()

        if not imbalance.is_zero():
            if self._inferred is None:
                self.state = BuilderState.REJECTED
                logger.warning(f"불균형 거래 거부: '{self.description}' ({imbalance!r})")
                raise UnbalancedError(imbalance, self.description)

            postings.extend((self._inferred, -money) for money in imbalance.moneys())

        transaction = self.journal.commit(self.date, self.description, postings, self.payee)
        self.state = BuilderState.COMMITTED
        return transaction
