"""
계정 트리 (AccnTree)

5개 최상위 분류(asset, liability, equity, income, expense)를 루트로 하는
계정 포레스트. 계정 데이터는 트리만 소유하며 외부에는 불투명한 Accn id만 노출.

- 자식 목록은 부모 → 자식 보조 인덱스로 관리 (삽입 순서 유지)
- 같은 부모 아래 같은 이름의 계정은 하나만 존재 (open-or-get)
- 계정은 삭제되지 않음
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator
from uuid import UUID, uuid4

from core.constants import Defaults
from core.errors import AccountAmbiguousError, AccountNotFoundError
from core.types import RootCategory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Accn:
    """계정 식별자 (불변)

    AccnTree만 생성. 이름/부모 등 데이터는 트리에서 조회.
    """

    id: UUID

    def __repr__(self) -> str:
        return f"Accn({self.id.hex[:8]})"


@dataclass
class AccnData:
    """계정 데이터 (트리 내부 전용)"""

    name: str
    parent: Accn | None


@dataclass(frozen=True)
class Contact:
    """거래 상대방

    처음 참조될 때 liability:@<name>:payable, asset:@<name>:receivable
    두 계정이 만들어지며 이후에는 같은 계정을 재사용.
    """

    name: str
    payable: Accn
    receivable: Accn


class AccnTree:
    """계정 트리

    Args:
        separator: 절대 이름 구분자 (기본 ":")

    사용 예시:
    ```python
    tree = AccnTree()
    cash = tree.resolve_or_create_account(["asset", "cash"])
    tree.abs_name(cash)  # "asset:cash"
    ```
    """

    def __init__(self, separator: str = Defaults.ACCOUNT_SEPARATOR):
        if not separator or any(ch.isspace() for ch in separator):
            raise ValueError(f"유효하지 않은 구분자입니다: {separator!r}")
        self.separator = separator

        self._data: dict[Accn, AccnData] = {}
        self._children: dict[Accn, list[Accn]] = {}
        self._contacts: dict[str, Contact] = {}

        # 루트는 이름으로 매번 찾지 않고 필드로 보관
        self.asset = self._open(RootCategory.ASSET.value, None)
        self.liability = self._open(RootCategory.LIABILITY.value, None)
        self.equity = self._open(RootCategory.EQUITY.value, None)
        self.income = self._open(RootCategory.INCOME.value, None)
        self.expense = self._open(RootCategory.EXPENSE.value, None)

        self._roots: dict[RootCategory, Accn] = {
            RootCategory.ASSET: self.asset,
            RootCategory.LIABILITY: self.liability,
            RootCategory.EQUITY: self.equity,
            RootCategory.INCOME: self.income,
            RootCategory.EXPENSE: self.expense,
        }

    def _open(self, name: str, parent: Accn | None) -> Accn:
        accn = Accn(uuid4())
        self._data[accn] = AccnData(name=name, parent=parent)
        self._children[accn] = []
        if parent is not None:
            self._children[parent].append(accn)
        return accn

    def _get(self, accn: Accn) -> AccnData:
        try:
            return self._data[accn]
        except KeyError:
            raise AccountNotFoundError(repr(accn)) from None

    def _check_name(self, name: str) -> str:
        if not name or name != name.strip():
            raise ValueError(f"유효하지 않은 계정 이름입니다: {name!r}")
        if self.separator in name:
            raise ValueError(f"계정 이름에 구분자 '{self.separator}'를 쓸 수 없습니다: {name!r}")
        return name

    # =========================================================================
    # 구조 탐색
    # =========================================================================

    def roots(self) -> list[Accn]:
        """최상위 계정 (asset, liability, equity, income, expense 순)"""
        return list(self._roots.values())

    def root(self, name: str | RootCategory) -> Accn | None:
        """이름으로 최상위 계정 조회 (대소문자 무시)"""
        try:
            category = RootCategory(name.lower() if isinstance(name, str) else name)
        except ValueError:
            return None
        return self._roots[category]

    def _canonical_root(self, name: str) -> Accn | None:
        """경로 해석용 루트 조회 (대소문자 구분, abs_name과 왕복 보장)"""
        accn = self.root(name)
        if accn is None or self._data[accn].name != name:
            return None
        return accn

    def name(self, accn: Accn) -> str:
        return self._get(accn).name

    def parent(self, accn: Accn) -> Accn | None:
        return self._get(accn).parent

    def children(self, accn: Accn) -> list[Accn]:
        self._get(accn)
        return list(self._children[accn])

    def child(self, parent: Accn, name: str) -> Accn | None:
        for accn in self.children(parent):
            if self._data[accn].name == name:
                return accn
        return None

    def ancestors(self, accn: Accn) -> Iterator[Accn]:
        """자기 자신부터 루트까지"""
        current: Accn | None = accn
        while current is not None:
            yield current
            current = self._get(current).parent

    def ancestors_exclusive(self, accn: Accn) -> Iterator[Accn]:
        """부모부터 루트까지 (자기 자신 제외)"""
        ancestors = self.ancestors(accn)
        next(ancestors)
        return ancestors

    def is_descendant_or_self(self, accn: Accn, ancestor: Accn) -> bool:
        return any(a == ancestor for a in self.ancestors(accn))

    def category_of(self, accn: Accn) -> RootCategory:
        """계정이 속한 최상위 분류"""
        *_, top = self.ancestors(accn)
        return RootCategory(self._data[top].name)

    def is_asset(self, accn: Accn) -> bool:
        return self.category_of(accn) == RootCategory.ASSET

    def is_liability(self, accn: Accn) -> bool:
        return self.category_of(accn) == RootCategory.LIABILITY

    def is_equity(self, accn: Accn) -> bool:
        return self.category_of(accn) == RootCategory.EQUITY

    def is_income(self, accn: Accn) -> bool:
        return self.category_of(accn) == RootCategory.INCOME

    def is_expense(self, accn: Accn) -> bool:
        return self.category_of(accn) == RootCategory.EXPENSE

    def path(self, accn: Accn) -> list[str]:
        """루트부터 자기 자신까지의 이름 목록"""
        names = [self._data[a].name for a in self.ancestors(accn)]
        names.reverse()
        return names

    def abs_name(self, accn: Accn, separator: str | None = None) -> str:
        """절대 이름 (예: expense:food:drinks)

        resolve_or_create_account(path)의 역함수.
        """
        return (separator or self.separator).join(self.path(accn))

    def accounts(self) -> Iterator[Accn]:
        """전체 계정 (전위 순회)"""
        stack = list(reversed(self.roots()))
        while stack:
            accn = stack.pop()
            yield accn
            stack.extend(reversed(self._children[accn]))

    def __contains__(self, accn: object) -> bool:
        return accn in self._data

    def __len__(self) -> int:
        return len(self._data)

    # =========================================================================
    # 생성
    # =========================================================================

    def open_or_create_child(self, parent: Accn, name: str) -> Accn:
        """자식 계정 열기 (있으면 기존 계정 반환, 없으면 생성)"""
        self._check_name(name)
        existing = self.child(parent, name)
        if existing is not None:
            return existing

        accn = self._open(name, parent)
        logger.debug(f"계정 생성: {self.abs_name(accn)}")
        return accn

    def resolve_or_create_account(self, segments: Iterable[str]) -> Accn:
        """경로로 계정 찾기 (중간 계정 포함 자동 생성)

        첫 세그먼트는 abs_name과 같은 표기의 최상위 분류 이름 (예: asset).
        '@'로 시작하는 세그먼트는 해당 이름의 연락처를 함께 등록.

        Raises:
            ValueError: 빈 경로 또는 잘못된 이름
            AccountNotFoundError: 알 수 없거나 표기가 다른 최상위 분류
        """
        names = list(segments)
        if not names:
            raise ValueError("계정 경로가 비어 있습니다")

        accn = self._canonical_root(names[0])
        if accn is None:
            raise AccountNotFoundError(names[0])

        for name in names[1:]:
            if name.startswith(Defaults.CONTACT_PREFIX) and len(name) > 1:
                self.provision_contact(name[len(Defaults.CONTACT_PREFIX):])
            accn = self.open_or_create_child(accn, name)
        return accn

    def resolve_path(self, path: str) -> Accn:
        """구분자로 이어진 문자열 경로로 계정 찾기/생성"""
        return self.resolve_or_create_account(path.split(self.separator))

    def find_account(self, segments: Iterable[str]) -> Accn:
        """경로로 기존 계정 조회 (생성하지 않음)

        Raises:
            AccountNotFoundError: 경로상 계정이 없는 경우
        """
        names = list(segments)
        joined = self.separator.join(names)
        accn = self._canonical_root(names[0]) if names else None
        if accn is None:
            raise AccountNotFoundError(joined)
        for name in names[1:]:
            accn = self.child(accn, name)
            if accn is None:
                raise AccountNotFoundError(joined)
        return accn

    # =========================================================================
    # 이름 조회
    # =========================================================================

    def find_by_exact_name(self, name: str) -> Accn:
        """이름이 정확히 같은 계정이 트리 전체에서 하나일 때만 성공

        Raises:
            AccountNotFoundError: 없음
            AccountAmbiguousError: 둘 이상 (후보 포함)
        """
        matches = [accn for accn in self.accounts() if self._data[accn].name == name]
        return self._exactly_one(name, matches)

    def find_by_name_contains(self, fragment: str) -> list[Accn]:
        """이름에 fragment가 포함된 계정 (대소문자 무시)"""
        needle = fragment.lower()
        return [
            accn for accn in self.accounts()
            if needle in self._data[accn].name.lower()
        ]

    def find_by_fuzzy_path(self, tokens: Iterable[str]) -> Iterator[Accn]:
        """위치별 부분 문자열 매칭 (core.accn.query.fuzzy_path_matches)"""
        from core.accn.query import fuzzy_path_matches

        return fuzzy_path_matches(self, list(tokens))

    def elders_of(self, accns: Iterable[Accn]) -> list[Accn]:
        """중첩된 계정 중 가장 바깥 계정만 (core.accn.query.elders)"""
        from core.accn.query import elders

        return elders(self, accns)

    def resolve_fuzzy(self, tokens: Iterable[str]) -> Accn:
        """퍼지 경로로 계정 하나 찾기

        매칭이 여러 개면 elders로 중첩을 제거한 뒤에도 하나여야 성공.

        Raises:
            AccountNotFoundError: 매칭 없음
            AccountAmbiguousError: 후보가 둘 이상
        """
        tokens = list(tokens)
        query = self.separator.join(tokens)
        matches = list(self.find_by_fuzzy_path(tokens))
        if len(matches) > 1:
            matches = self.elders_of(matches)
        return self._exactly_one(query, matches)

    def _exactly_one(self, query: str, matches: list[Accn]) -> Accn:
        if not matches:
            raise AccountNotFoundError(query)
        if len(matches) > 1:
            raise AccountAmbiguousError(query, [self.abs_name(a) for a in matches])
        return matches[0]

    # =========================================================================
    # 연락처
    # =========================================================================

    def provision_contact(self, name: str) -> Contact:
        """연락처 등록 (멱등)

        liability:@<name>:payable, asset:@<name>:receivable 계정 생성.
        """
        contact = self._contacts.get(name)
        if contact is not None:
            return contact

        self._check_name(name)
        node = f"{Defaults.CONTACT_PREFIX}{name}"
        payable = self.open_or_create_child(
            self.open_or_create_child(self.liability, node), Defaults.PAYABLE
        )
        receivable = self.open_or_create_child(
            self.open_or_create_child(self.asset, node), Defaults.RECEIVABLE
        )

        contact = Contact(name=name, payable=payable, receivable=receivable)
        self._contacts[name] = contact
        logger.debug(f"연락처 등록: {name}")
        return contact

    def find_contact(self, name: str) -> Contact | None:
        return self._contacts.get(name)

    def contacts(self) -> list[Contact]:
        return list(self._contacts.values())

    def __str__(self) -> str:
        accounts = sorted(self.abs_name(a) for a in self.accounts())
        contacts = sorted(self._contacts)
        return "\n".join(["Accounts:", *accounts, "", "Contacts:", *contacts])
