"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → 프로젝트 루트)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class RateEndpoints:
    """환율 API 엔드포인트 (고정값)

    fawazahmed0/exchange-api (jsDelivr CDN). 날짜 태그 또는 latest 사용.
    """

    BASE_URL: str = "https://cdn.jsdelivr.net/npm/@fawazahmed0/currency-api"
    API_VERSION: str = "v1"


class Defaults:
    """기본값 상수"""

    DECIMAL_PLACES: int = 2
    ACCOUNT_SEPARATOR: str = ":"
    DEFAULT_CURRENCY: str = "USD"

    LOG_LEVEL: str = "INFO"
    HTTP_TIMEOUT_SEC: float = 10.0

    # 연락처 계정 이름 규칙: liability:@<name>:payable, asset:@<name>:receivable
    CONTACT_PREFIX: str = "@"
    PAYABLE: str = "payable"
    RECEIVABLE: str = "receivable"

    # 분할 태그에서 원장 소유자를 뜻하는 이름
    SELF_PARTY: str = "me"


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"

    # 설정 파일
    CONFIG_FILE: Path = CONFIG_DIR / "ledger.yaml"


# 기본 통화 목록 (code, symbol, name, style)
BUILTIN_CURRENCIES: list[tuple[str, str | None, str, str]] = [
    ("USD", "$", "US Dollar", "symbol"),
    ("EUR", "€", "Euro", "symbol"),
    ("CNY", "¥", "Chinese Yuan", "symbol"),
    ("JPY", "¥", "Japanese Yen", "symbol"),
    ("GBP", "£", "Pound Sterling", "symbol"),
]
