"""
계정 퍼지 조회

fuzzy_path_matches: 토큰 목록을 계정 경로의 마지막 N개 이름에 위치별로
    부분 문자열 매칭 (대소문자 무시)
elders: 서로 중첩된 계정 중 가장 바깥 계정만 남김

예) 토큰 ["a", "a"]는 경로 끝 두 이름이 각각 "a"를 포함하는 계정과 매칭.
    expense:a:aa, expense:a:aa:aab, expense:b:ba:bab 등.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Iterator

if TYPE_CHECKING:
    from core.accn.tree import Accn, AccnTree


def fuzzy_path_matches(tree: AccnTree, tokens: list[str]) -> Iterator[Accn]:
    """퍼지 경로 매칭 (전위 순회 순서로 지연 생성)

    루트부터 내려가며 이름 스택을 유지하고, 스택 끝 len(tokens)개 창이
    모두 채워졌을 때만 위치별로 비교. 따라서 깊이가 토큰 수보다 얕은
    계정은 매칭되지 않음.

    Raises:
        ValueError: 빈 토큰 목록
    """
    if not tokens:
        raise ValueError("퍼지 경로 토큰이 비어 있습니다")

    needles = [token.lower() for token in tokens]
    return _walk(tree, needles)


def _walk(tree: AccnTree, needles: list[str]) -> Iterator[Accn]:
    width = len(needles)
    names: list[str] = []
    # (계정, 퇴장 표시) 스택으로 재귀 없이 전위 순회
    stack: list[tuple[Accn, bool]] = [(root, False) for root in reversed(tree.roots())]

    while stack:
        accn, leaving = stack.pop()
        if leaving:
            names.pop()
            continue

        names.append(tree.name(accn).lower())
        stack.append((accn, True))
        stack.extend((child, False) for child in reversed(tree.children(accn)))

        if len(names) >= width and all(
            needle in name for needle, name in zip(needles, names[-width:])
        ):
            yield accn


def elders(tree: AccnTree, accns: Iterable[Accn]) -> list[Accn]:
    """조상이 같은 집합에 없는 계정만 (입력 순서, 중복 제거)

    트리 구조만 보며 이름은 비교하지 않음.
    """
    members = list(dict.fromkeys(accns))
    ids = set(members)
    return [
        accn for accn in members
        if not any(ancestor in ids for ancestor in tree.ancestors_exclusive(accn))
    ]
