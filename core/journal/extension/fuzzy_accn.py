"""
퍼지 계정 이름 extension

태그: fuzzy_accn [recursive|deep] [root|root_only] [adds_accn]

- 옵션 없음: 경로 전체를 퍼지 경로 토큰으로 해석 (AccnTree.resolve_fuzzy)
- recursive: 세그먼트마다 자식 이름 부분 매칭으로 한 단계씩 내려감.
  자식 매칭이 하나가 아니면 adds_accn일 때 새 자식을 만들고,
  아니면 원래 경로 해석으로 넘김 (이름이 정확히 같은 자식이 있으면 그 자식)
- root: 첫 세그먼트(최상위 분류)만 부분 매칭
"""

from __future__ import annotations

import logging
from typing import Sequence

from core.accn import Accn
from core.constants import Defaults
from core.errors import AccountAmbiguousError, AccountNotFoundError
from core.journal.extension.base import Extension, PostingSink

logger = logging.getLogger(__name__)


class FuzzyAccnExtension(Extension):
    """계정 경로를 부분 문자열로 해석"""

    tag = "fuzzy_accn"

    def __init__(self, inner: PostingSink):
        super().__init__(inner)
        self.enabled = False
        self.recursive = False
        self.root_only = False
        self.adds_accn = False

    def apply_tag(self, args: list[str]) -> None:
        for option in args:
            if option in ("recursive", "deep"):
                self.recursive = True
            elif option in ("root", "root_only"):
                self.root_only = True
            elif option == "adds_accn":
                self.adds_accn = True
            else:
                raise ValueError(f"알 수 없는 fuzzy_accn 옵션: {option}")
        self.enabled = True

    def parse_accn(self, segments: Sequence[str]) -> Accn:
        if not self.enabled or not segments:
            return self.inner.parse_accn(segments)

        if self.recursive:
            return self._parse_deep(segments)
        if self.root_only:
            root = self._fuzzy_root(segments[0])
            tree = self.journal.accns
            return self.inner.parse_accn([tree.name(root), *segments[1:]])

        return self.journal.accns.resolve_fuzzy(segments)

    def _fuzzy_root(self, token: str) -> Accn:
        tree = self.journal.accns
        needle = token.lower()
        matches = [root for root in tree.roots() if needle in tree.name(root)]
        if not matches:
            raise AccountNotFoundError(token)
        if len(matches) > 1:
            raise AccountAmbiguousError(token, [tree.name(root) for root in matches])
        return matches[0]

    def _parse_deep(self, segments: Sequence[str]) -> Accn:
        tree = self.journal.accns
        root = self._fuzzy_root(segments[0])
        accn = root

        for name in segments[1:]:
            if name.startswith(Defaults.CONTACT_PREFIX) and len(name) > 1:
                self.journal.provision_contact(name[len(Defaults.CONTACT_PREFIX):])

            needle = name.lower()
            matches = [c for c in tree.children(accn) if needle in tree.name(c).lower()]
            exact = [c for c in matches if tree.name(c).lower() == needle]
            if exact:
                matches = exact
            if len(matches) == 1:
                accn = matches[0]
            elif self.adds_accn:
                accn = tree.open_or_create_child(accn, name)
            else:
                logger.debug(f"퍼지 해석 실패, 원래 경로로 처리: {tree.separator.join(segments)}")
                return self.inner.parse_accn([tree.name(root), *segments[1:]])

        return accn
