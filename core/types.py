"""
타입 정의 모듈

Enum 등 원장 엔진 전반에서 쓰는 핵심 타입 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from enum import Enum


class RootCategory(str, Enum):
    """최상위 계정 분류

    복식부기의 5대 계정 유형. AccnTree 생성 시 한 번씩만 만들어지며
    이동/삭제되지 않음.
    """

    ASSET = "asset"  # 자산
    LIABILITY = "liability"  # 부채
    EQUITY = "equity"  # 자본
    INCOME = "income"  # 수익
    EXPENSE = "expense"  # 비용


class CurrencyStyle(str, Enum):
    """통화 표시 방식"""

    SYMBOL = "symbol"  # $10.00
    CODE = "code"  # 10.00 GBP


class BuilderState(str, Enum):
    """거래 빌더 상태

    전이 규칙:
    - BUILDING → COMMITTED: 균형 검증 통과 후 저장
    - BUILDING → REJECTED: 불균형 (추론 posting 없음)
    """

    BUILDING = "BUILDING"
    COMMITTED = "COMMITTED"
    REJECTED = "REJECTED"
