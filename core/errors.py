"""
원장 엔진 예외 정의

조회/빌드 실패는 모두 복구 가능한 예외로 전달되며,
후보 목록/불균형 금액 등 문맥 정보를 속성으로 보관.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from core.valuable import Valuable


class LedgerError(Exception):
    """원장 엔진 예외 기본 클래스"""

    pass


class AccountNotFoundError(LedgerError):
    """계정 조회 결과 없음"""

    def __init__(self, query: str):
        self.query = query
        super().__init__(f"계정을 찾을 수 없습니다: {query}")


class AccountAmbiguousError(LedgerError):
    """계정 조회 결과가 둘 이상

    candidates에 후보 계정의 절대 이름 목록 보관.
    """

    def __init__(self, query: str, candidates: list[str]):
        self.query = query
        self.candidates = candidates
        joined = "\n ".join(candidates)
        super().__init__(
            f"'{query}'에 해당하는 계정이 유일하지 않습니다. 후보:\n {joined}"
        )


class CurrencyNotFoundError(LedgerError):
    """등록되지 않은 통화 기호/코드"""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"등록되지 않은 통화입니다: {text!r}")


class MoneyParseError(LedgerError, ValueError):
    """금액 문자열 형식 오류"""

    def __init__(self, text: str, reason: str = "형식 오류"):
        self.text = text
        super().__init__(f"금액을 해석할 수 없습니다 ({reason}): {text!r}")


class CurrencyMismatchError(LedgerError, TypeError):
    """서로 다른 통화 간 Money 연산 (프로그래밍 오류)"""

    def __init__(self, left: Any, right: Any):
        self.left = left
        self.right = right
        super().__init__(f"통화가 다른 금액은 연산할 수 없습니다: {left} / {right}")


class UnbalancedError(LedgerError):
    """거래 불균형 (추론 posting 없음)

    imbalance: 명시적 posting 합계 (0이 아닌 통화만 포함)
    """

    def __init__(self, imbalance: Valuable, description: str = ""):
        self.imbalance = imbalance
        self.description = description
        amounts = ", ".join(str(m) for m in imbalance.moneys())
        super().__init__(f"Unbalanced transaction '{description}': {amounts}")


class InferredPostingConflictError(LedgerError):
    """한 거래에 추론 posting이 두 개 이상 지정됨"""

    def __init__(self, first: str, second: str):
        self.first = first
        self.second = second
        super().__init__(
            f"추론 posting은 거래당 하나만 허용됩니다: {first}, {second}"
        )


class BuilderStateError(LedgerError):
    """이미 확정/거부된 빌더 재사용"""

    pass


class TransactionNotFoundError(LedgerError):
    """존재하지 않는 거래 참조"""

    def __init__(self, txn: Any):
        self.txn = txn
        super().__init__(f"거래를 찾을 수 없습니다: {txn}")


class StaleQueryError(LedgerError):
    """조회 생성 이후 원장이 변경됨"""

    pass


class RateUnavailableError(LedgerError):
    """환율 조회 실패 (외부 API)"""

    def __init__(self, from_code: str, to_code: str, reason: str):
        self.from_code = from_code
        self.to_code = to_code
        super().__init__(f"환율 조회 실패 {from_code}->{to_code}: {reason}")
