"""
설정 로더

ledger.yaml 로드 및 원장 컨텍스트 구성 요소 생성
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from core.constants import Defaults, Paths, RateEndpoints
from core.logging import parse_log_level
from core.types import CurrencyStyle
from core.valuable import Currency, CurrencyStore


@dataclass(frozen=True)
class CurrencyConfig:
    """사용자 정의 통화"""

    code: str
    symbol: str | None = None
    name: str | None = None
    style: CurrencyStyle | None = None


@dataclass(frozen=True)
class RatesConfig:
    """환율 API 설정"""

    base_url: str = RateEndpoints.BASE_URL
    timeout: float = Defaults.HTTP_TIMEOUT_SEC


@dataclass(frozen=True)
class LedgerConfig:
    """원장 설정 (ledger.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지
    """

    decimal_places: int = Defaults.DECIMAL_PLACES
    account_separator: str = Defaults.ACCOUNT_SEPARATOR
    default_currency: str = Defaults.DEFAULT_CURRENCY
    currencies: tuple[CurrencyConfig, ...] = ()
    rates: RatesConfig = RatesConfig()
    log_level: str = Defaults.LOG_LEVEL

    @property
    def log_level_value(self) -> int:
        """setup_logging에 넘길 logging 레벨 상수"""
        return parse_log_level(self.log_level)


class ConfigLoadError(Exception):
    """설정 로드 실패 예외"""

    pass


def load_config(path: Path | None = None) -> LedgerConfig:
    """ledger.yaml 파일 로드

    Args:
        path: 설정 파일 경로 (None이면 기본 경로, 기본 경로에 파일이 없으면 기본값)

    Returns:
        LedgerConfig 인스턴스

    Raises:
        ConfigLoadError: 지정한 파일이 없거나 형식이 잘못된 경우
        ValueError: 유효하지 않은 값
    """
    if path is None:
        path = Paths.CONFIG_FILE
        if not path.exists():
            return LedgerConfig()

    if not path.exists():
        raise ConfigLoadError(f"설정 파일을 찾을 수 없습니다: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"설정 파일 파싱 실패: {e}") from e

    if data is None:
        return LedgerConfig()
    if not isinstance(data, dict):
        raise ConfigLoadError(f"설정 파일 최상위는 매핑이어야 합니다: {path}")

    return parse_config(data)


def parse_config(data: dict[str, Any]) -> LedgerConfig:
    """dict를 LedgerConfig로 변환 (검증 포함)"""
    decimal_places = data.get("decimal_places", Defaults.DECIMAL_PLACES)
    if isinstance(decimal_places, bool) or not isinstance(decimal_places, int) or decimal_places < 0:
        raise ValueError(f"decimal_places는 0 이상의 정수여야 합니다: {decimal_places!r}")

    separator = data.get("account_separator", Defaults.ACCOUNT_SEPARATOR)
    if not isinstance(separator, str) or not separator or any(ch.isspace() for ch in separator):
        raise ValueError(f"유효하지 않은 account_separator입니다: {separator!r}")

    log_level = str(data.get("log_level", Defaults.LOG_LEVEL)).upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"유효하지 않은 log_level입니다: {log_level!r}")

    currencies = tuple(_parse_currency(item) for item in data.get("currencies") or [])

    rates_data = data.get("rates") or {}
    if not isinstance(rates_data, dict):
        raise ConfigLoadError("rates 설정은 매핑이어야 합니다")
    rates = RatesConfig(
        base_url=str(rates_data.get("base_url", RateEndpoints.BASE_URL)),
        timeout=float(rates_data.get("timeout", Defaults.HTTP_TIMEOUT_SEC)),
    )

    return LedgerConfig(
        decimal_places=decimal_places,
        account_separator=separator,
        default_currency=str(data.get("default_currency", Defaults.DEFAULT_CURRENCY)).upper(),
        currencies=currencies,
        rates=rates,
        log_level=log_level,
    )


def _parse_currency(item: Any) -> CurrencyConfig:
    if not isinstance(item, dict) or not item.get("code"):
        raise ConfigLoadError(f"통화 설정에 'code' 필드가 없습니다: {item!r}")

    style_str = item.get("style")
    style = None
    if style_str is not None:
        try:
            style = CurrencyStyle(style_str)
        except ValueError as e:
            valid_styles = [s.value for s in CurrencyStyle]
            raise ValueError(
                f"유효하지 않은 style입니다: '{style_str}'. "
                f"유효한 값: {valid_styles}"
            ) from e

    return CurrencyConfig(
        code=str(item["code"]),
        symbol=item.get("symbol"),
        name=item.get("name"),
        style=style,
    )


def build_currency_store(config: LedgerConfig) -> CurrencyStore:
    """설정의 통화를 먼저 등록한 뒤 내장 통화 추가

    같은 기호를 쓰는 통화가 여럿이면 먼저 등록된 쪽이 기호 해석을 가져감.
    """
    store = CurrencyStore(
        Currency.create(c.code, c.symbol, c.name, c.style) for c in config.currencies
    )
    for currency in CurrencyStore.builtin():
        store.add(currency)

    store.by_code(config.default_currency)
    return store
