"""
비용 분할 extension

태그: split <party> [<party> ...]

build 시점에 모든 expense posting을 참여자 수로 분할 (Money.split).
금액 없는 (추론) expense posting은 다른 posting의 불균형을 금액으로 삼아 분할.
'me'(원장 소유자)의 몫은 원래 비용 계정에 남고, 다른 참여자의 몫은
그 연락처의 receivable 계정으로 이동 (받을 돈).

예) split me bob 으로 expense:food $10.01 →
    expense:food $5.01, asset:@bob:receivable $5.00
"""

from __future__ import annotations

import logging

from core.accn import Accn, Contact
from core.constants import Defaults
from core.journal.extension.base import Extension, PostingSink
from core.journal.txn import Transaction
from core.valuable import Money, Valuable

logger = logging.getLogger(__name__)


class SplitExtension(Extension):
    """expense posting 분할

    태그가 posting보다 늦게 올 수 있으므로 posting은 build까지 보관했다가
    입력 순서대로 안쪽 sink에 전달.
    """

    tag = "split"

    def __init__(self, inner: PostingSink):
        super().__init__(inner)
        # None은 원장 소유자(me)
        self.parties: list[Contact | None] = []
        self._pending: list[tuple[Accn, Money | None, bool]] = []

    def apply_tag(self, args: list[str]) -> None:
        if self.parties:
            raise ValueError("split 태그는 거래당 한 번만 지정할 수 있습니다")
        if not args:
            raise ValueError("split 태그에는 참여자가 하나 이상 필요합니다")

        names = [arg.removeprefix(Defaults.CONTACT_PREFIX) for arg in args]
        if len(set(names)) != len(names):
            raise ValueError(f"split 참여자가 중복되었습니다: {args}")

        self.parties = [
            None if name == Defaults.SELF_PARTY else self.journal.provision_contact(name)
            for name in names
        ]

    def with_posting(self, accn: Accn, money: Money | None = None) -> PostingSink:
        self._pending.append((accn, money, False))
        return self

    def with_posting_combined(self, accn: Accn, money: Money | None = None) -> PostingSink:
        self._pending.append((accn, money, True))
        return self

    def build(self) -> Transaction:
        tree = self.journal.accns
        dp = self.journal.decimal_places

        explicit = Valuable.sum(money for _, money, _ in self._pending if money is not None)
        n_inferred = sum(1 for _, money, _ in self._pending if money is None)

        for accn, money, combined in self._pending:
            if self.parties and tree.is_expense(accn):
                if money is not None:
                    self._forward_shares(accn, money, dp)
                    continue
                if n_inferred == 1:
                    # 추론 비용 posting: 명시적 posting 불균형을 먼저 채운 뒤 분할
                    for amount in (-explicit).moneys():
                        self._forward_shares(accn, amount, dp)
                    continue

            if combined:
                self.inner.with_posting_combined(accn, money)
            else:
                self.inner.with_posting(accn, money)

        if self.parties:
            logger.debug(f"비용 분할: '{self.description}' ({len(self.parties)}명)")
        return self.inner.build()

    def _forward_shares(self, accn: Accn, money: Money, dp: int) -> None:
        shares = money.split(len(self.parties), dp)
        for party, share in zip(self.parties, shares):
            target = accn if party is None else party.receivable
            self.inner.with_posting_combined(target, share)
