"""
pytest 공통 fixture 정의

통화 카탈로그, 계정 트리, 원장, 임시 설정 파일
"""

import tempfile
from pathlib import Path

import pytest

from core.accn import AccnTree
from core.journal import Journal
from core.valuable import Currency, CurrencyStore


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def currencies() -> CurrencyStore:
    """내장 통화 카탈로그 (USD, EUR, CNY, JPY, GBP)"""
    return CurrencyStore.builtin()


@pytest.fixture
def usd(currencies: CurrencyStore) -> Currency:
    return currencies.by_code("USD")


@pytest.fixture
def eur(currencies: CurrencyStore) -> Currency:
    return currencies.by_code("EUR")


@pytest.fixture
def tree() -> AccnTree:
    """빈 계정 트리 (루트 5개만 존재)"""
    return AccnTree()


@pytest.fixture
def journal(currencies: CurrencyStore) -> Journal:
    """빈 원장 (내장 통화)"""
    return Journal(currencies=currencies)


@pytest.fixture
def temp_config_file(temp_dir: Path) -> Path:
    """테스트용 ledger.yaml 파일 생성"""
    config_content = """# 테스트용 ledger.yaml
decimal_places: 2
account_separator: ":"
default_currency: usd

currencies:
  - code: KRW
    symbol: "₩"
    name: Korean Won
    style: symbol
  - code: CHF
    name: Swiss Franc

rates:
  base_url: https://rates.example.com/api
  timeout: 3

log_level: debug
"""
    config_path = temp_dir / "ledger.yaml"
    config_path.write_text(config_content, encoding="utf-8")
    return config_path


@pytest.fixture
def temp_config_file_invalid_style(temp_dir: Path) -> Path:
    """잘못된 style의 ledger.yaml 파일 생성"""
    config_content = """currencies:
  - code: KRW
    symbol: "₩"
    style: prefix
"""
    config_path = temp_dir / "ledger_invalid.yaml"
    config_path.write_text(config_content, encoding="utf-8")
    return config_path
