"""
Posting 조회 대수와 집계

Query (불변, 조합 가능):
    All, ByAccount(accn), ByAccounts(accns), Since(date), Until(date), And(q1, q2)

PostingQuerys (집계):
    total, daily_change, daily_balance, balances, register, totals_by_account

날짜 기준 집계는 항상 날짜로 정렬(안정 정렬)한 뒤 그룹화.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from itertools import groupby
from typing import TYPE_CHECKING, Iterable, Iterator

from core.accn import Accn, AccnTree
from core.errors import StaleQueryError
from core.journal.txn import Posting, Txn
from core.valuable import Money, Valuable

if TYPE_CHECKING:
    from core.journal.journal import Journal


@dataclass(frozen=True)
class PostingRow:
    """거래 날짜/설명을 함께 가진 posting"""

    date: date
    description: str
    posting: Posting

    @property
    def txn(self) -> Txn:
        return self.posting.txn

    @property
    def accn(self) -> Accn:
        return self.posting.accn

    @property
    def money(self) -> Money:
        return self.posting.money


# =============================================================================
# Query 대수
# =============================================================================


class Query:
    """posting 필터 기본 클래스

    사용 예시:
    ```python
    query = Query.new().accn(cash).since(date(2021, 1, 1)).until(date(2021, 1, 31))
    journal.query_posting(query).daily_balance()
    ```
    """

    @staticmethod
    def new() -> Query:
        return All()

    def accn(self, accn: Accn) -> Query:
        return self & ByAccount(accn)

    def accns(self, accns: Iterable[Accn]) -> Query:
        return self & ByAccounts(frozenset(accns))

    def since(self, day: date) -> Query:
        return self & Since(day)

    def until(self, day: date) -> Query:
        return self & Until(day)

    def __and__(self, other: Query) -> Query:
        if isinstance(self, All):
            return other
        return And(self, other)

    def since_bound(self) -> date | None:
        """알려진 시작일 (없으면 None)"""
        return None

    def until_bound(self) -> date | None:
        """알려진 종료일 (없으면 None)"""
        return None

    def matches(self, row: PostingRow, tree: AccnTree) -> bool:
        raise NotImplementedError

    def filter(self, rows: Iterable[PostingRow], tree: AccnTree) -> Iterator[PostingRow]:
        return (row for row in rows if self.matches(row, tree))


@dataclass(frozen=True)
class All(Query):
    def matches(self, row: PostingRow, tree: AccnTree) -> bool:
        return True


@dataclass(frozen=True)
class ByAccount(Query):
    """계정 자신 또는 하위 계정의 posting"""

    target: Accn

    def matches(self, row: PostingRow, tree: AccnTree) -> bool:
        return tree.is_descendant_or_self(row.accn, self.target)


@dataclass(frozen=True)
class ByAccounts(Query):
    """여러 ByAccount의 합집합"""

    targets: frozenset[Accn] = field(default_factory=frozenset)

    def matches(self, row: PostingRow, tree: AccnTree) -> bool:
        return any(a in self.targets for a in tree.ancestors(row.accn))


@dataclass(frozen=True)
class Since(Query):
    """시작일 포함"""

    bound: date

    def since_bound(self) -> date | None:
        return self.bound

    def matches(self, row: PostingRow, tree: AccnTree) -> bool:
        return row.date >= self.bound


@dataclass(frozen=True)
class Until(Query):
    """종료일 포함"""

    bound: date

    def until_bound(self) -> date | None:
        return self.bound

    def matches(self, row: PostingRow, tree: AccnTree) -> bool:
        return row.date <= self.bound


@dataclass(frozen=True)
class And(Query):
    """두 조회 결과의 교집합 (더 좁은 since/until 경계를 전파)"""

    left: Query
    right: Query

    def since_bound(self) -> date | None:
        return _tightest(self.left.since_bound(), self.right.since_bound(), max)

    def until_bound(self) -> date | None:
        return _tightest(self.left.until_bound(), self.right.until_bound(), min)

    def matches(self, row: PostingRow, tree: AccnTree) -> bool:
        return self.left.matches(row, tree) and self.right.matches(row, tree)

    def filter(self, rows: Iterable[PostingRow], tree: AccnTree) -> Iterator[PostingRow]:
        rows = list(rows)
        left_ids = {row.posting.id for row in self.left.filter(rows, tree)}
        return (row for row in self.right.filter(rows, tree) if row.posting.id in left_ids)


def _tightest(a: date | None, b: date | None, pick) -> date | None:
    known = [d for d in (a, b) if d is not None]
    return pick(known) if known else None


def date_range(since: date, until: date) -> Iterator[date]:
    """since부터 until까지 (양 끝 포함)"""
    day = since
    while day <= until:
        yield day
        day += timedelta(days=1)


# =============================================================================
# 집계 결과
# =============================================================================


@dataclass(frozen=True)
class DailyBalance:
    date: date
    change: Valuable
    balance: Valuable


@dataclass(frozen=True)
class RegisterRow:
    """posting 단위 잔액 (계정별 장부 줄)"""

    date: date
    description: str
    txn: Txn
    accn: Accn
    change: Money
    balance: Valuable


@dataclass(frozen=True)
class BalanceRow:
    """거래 단위 잔액 (장부 보기)"""

    date: date
    description: str
    txn: Txn
    change: Valuable
    balance: Valuable


# =============================================================================
# 집계
# =============================================================================


class PostingQuerys:
    """조회 결과 집계기

    생성 이후 원장이 변경되면 다음 사용 시 StaleQueryError.
    재사용(반복 순회)은 자유.
    """

    def __init__(self, journal: Journal, query: Query | None = None):
        self.journal = journal
        self.query = query or Query.new()
        self._revision = journal.revision

    def _check(self) -> None:
        if self.journal.revision != self._revision:
            raise StaleQueryError(
                f"조회 생성 이후 원장이 변경되었습니다 "
                f"(revision {self._revision} → {self.journal.revision})"
            )

    def _guarded(self, rows: Iterable[PostingRow]) -> Iterator[PostingRow]:
        for row in rows:
            self._check()
            yield row

    def __iter__(self) -> Iterator[PostingRow]:
        self._check()
        rows = self.query.filter(self.journal.posting_rows(), self.journal.accns)
        return self._guarded(rows)

    def postings(self) -> list[Posting]:
        return [row.posting for row in self]

    def count(self) -> int:
        return sum(1 for _ in self)

    def total(self) -> Valuable:
        """전체 합계"""
        return Valuable.sum(row.money for row in self)

    def totals_by_account(self) -> dict[Accn, Valuable]:
        """계정별 합계 (절대 이름 순)"""
        totals: dict[Accn, Valuable] = {}
        for row in self:
            totals.setdefault(row.accn, Valuable()).add_money(row.money)

        tree = self.journal.accns
        return {
            accn: totals[accn]
            for accn in sorted(totals, key=tree.abs_name)
            if not totals[accn].is_zero()
        }

    def _bounds(self, since: date | None, until: date | None) -> tuple[date | None, date | None]:
        return (
            _tightest(since, self.query.since_bound(), max),
            _tightest(until, self.query.until_bound(), min),
        )

    def daily_change(self, since: date | None = None, until: date | None = None) -> dict[date, Valuable]:
        """날짜별 변동

        경계(인자 또는 조회에서 전파된 경계)가 알려진 경우 그 안의 모든 날짜를
        0 변동으로라도 포함. 경계가 없는 쪽은 posting의 최소/최대 날짜로 채움.
        """
        since, until = self._bounds(since, until)

        rows = [
            row for row in self
            if (since is None or row.date >= since) and (until is None or row.date <= until)
        ]
        rows.sort(key=lambda row: row.date)

        buckets = {
            day: Valuable.sum(row.money for row in group)
            for day, group in groupby(rows, key=lambda row: row.date)
        }

        if buckets:
            since = since or min(buckets)
            until = until or max(buckets)
        if since is None or until is None:
            return buckets

        return {day: buckets.get(day, Valuable()) for day in date_range(since, until)}

    def daily_balance(self, since: date | None = None, until: date | None = None) -> list[DailyBalance]:
        """날짜별 (변동, 누적 잔액)

        since 이전의 posting은 잔액에 포함하지 않음.
        """
        running = Valuable()
        result = []
        for day, change in sorted(self.daily_change(since, until).items()):
            running = running + change
            result.append(DailyBalance(date=day, change=change, balance=running))
        return result

    def balances(self) -> list[BalanceRow]:
        """거래별 (변동, 누적 잔액), 날짜순"""
        groups: dict[Txn, list[PostingRow]] = {}
        for row in self:
            groups.setdefault(row.txn, []).append(row)

        ordered = sorted(groups.values(), key=lambda rows: rows[0].date)

        running = Valuable()
        result = []
        for rows in ordered:
            change = Valuable.sum(row.money for row in rows)
            running = running + change
            first = rows[0]
            result.append(
                BalanceRow(
                    date=first.date,
                    description=first.description,
                    txn=first.txn,
                    change=change,
                    balance=running,
                )
            )
        return result

    def register(self) -> list[RegisterRow]:
        """posting별 (계정, 변동, 누적 잔액), 날짜순

        같은 날짜 안에서는 확정 순서와 거래 내 입력 순서 유지.
        """
        rows = sorted(self, key=lambda row: row.date)

        running = Valuable()
        result = []
        for row in rows:
            running = running + row.money
            result.append(
                RegisterRow(
                    date=row.date,
                    description=row.description,
                    txn=row.txn,
                    accn=row.accn,
                    change=row.money,
                    balance=running,
                )
            )
        return result
