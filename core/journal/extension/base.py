"""
Posting sink 인터페이스와 extension 기본 클래스

extension은 안쪽 sink(다른 extension 또는 TxnBuilder)를 감싸고
with_posting/with_tag 호출을 전달하거나 가로채는 장식자.
자기 태그가 아닌 태그는 안쪽으로 전달하며, 최종적으로 TxnBuilder가
처리되지 않은 태그를 무시.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Callable, Iterable, Protocol, Sequence

from core.accn import Accn
from core.valuable import Money

if TYPE_CHECKING:
    from core.journal.journal import Journal
    from core.journal.txn import Transaction


class PostingSink(Protocol):
    """posting을 받는 객체 (TxnBuilder 또는 Extension)"""

    journal: Journal
    date: date
    description: str

    def with_posting(self, accn: Accn, money: Money | None = None) -> PostingSink:
        ...

    def with_posting_combined(self, accn: Accn, money: Money | None = None) -> PostingSink:
        ...

    def with_moneys(self, accn: Accn, moneys: Iterable[Money]) -> PostingSink:
        ...

    def with_tag(self, name: str, args: Sequence[str] = ()) -> PostingSink:
        ...

    def parse_accn(self, segments: Sequence[str]) -> Accn:
        ...

    def build(self) -> Transaction:
        ...


ExtensionFactory = Callable[[PostingSink], PostingSink]


class Extension:
    """extension 기본 클래스 (모든 호출을 안쪽 sink로 전달)

    하위 클래스는 tag와 apply_tag를 정의하고 필요한 호출만 재정의.
    """

    tag: str = ""

    def __init__(self, inner: PostingSink):
        self.inner = inner

    @property
    def journal(self) -> Journal:
        return self.inner.journal

    @property
    def date(self) -> date:
        return self.inner.date

    @date.setter
    def date(self, value: date) -> None:
        self.inner.date = value

    @property
    def description(self) -> str:
        return self.inner.description

    def with_posting(self, accn: Accn, money: Money | None = None) -> PostingSink:
        self.inner.with_posting(accn, money)
        return self

    def with_posting_combined(self, accn: Accn, money: Money | None = None) -> PostingSink:
        self.inner.with_posting_combined(accn, money)
        return self

    def with_moneys(self, accn: Accn, moneys: Iterable[Money]) -> PostingSink:
        for money in moneys:
            self.with_posting(accn, money)
        return self

    def with_tag(self, name: str, args: Sequence[str] = ()) -> PostingSink:
        if name == self.tag:
            self.apply_tag(list(args))
        else:
            self.inner.with_tag(name, args)
        return self

    def apply_tag(self, args: list[str]) -> None:
        raise NotImplementedError

    def parse_accn(self, segments: Sequence[str]) -> Accn:
        return self.inner.parse_accn(segments)

    def build(self) -> Transaction:
        return self.inner.build()


def chain(sink: PostingSink, extensions: Iterable[ExtensionFactory]) -> PostingSink:
    """sink를 extension들로 감싸기

    첫 번째 extension이 가장 바깥(호출을 가장 먼저 받음).
    """
    for factory in reversed(list(extensions)):
        sink = factory(sink)
    return sink
