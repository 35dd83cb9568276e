"""
상대 날짜 extension

태그: date N  (거래 날짜를 N일 이동, 음수 가능, 거래당 한 번)
"""

from __future__ import annotations

from datetime import timedelta

from core.journal.extension.base import Extension, PostingSink
from core.journal.txn import Transaction


class RelativeDateExtension(Extension):
    tag = "date"

    def __init__(self, inner: PostingSink):
        super().__init__(inner)
        self.offset: int | None = None

    def apply_tag(self, args: list[str]) -> None:
        if self.offset is not None:
            raise ValueError("date 태그는 거래당 한 번만 지정할 수 있습니다")
        if len(args) != 1:
            raise ValueError(f"date 태그는 인자 하나(일 수)가 필요합니다: {args}")
        try:
            self.offset = int(args[0])
        except ValueError:
            raise ValueError(f"date 태그 인자가 정수가 아닙니다: {args[0]!r}") from None

    def build(self) -> Transaction:
        if self.offset:
            self.date = self.date + timedelta(days=self.offset)
        return self.inner.build()
