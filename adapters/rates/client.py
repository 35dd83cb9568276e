"""
환율 REST 클라이언트

fawazahmed0/exchange-api (jsDelivr CDN) 조회. 인증 없음.
core.valuable.conversion.RateSource Protocol 준수.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any

import httpx
from pydantic import ValidationError

from adapters.rates.models import RateTable
from core.config.loader import RatesConfig
from core.constants import Defaults, RateEndpoints
from core.errors import RateUnavailableError

logger = logging.getLogger(__name__)


class CurrencyRateClient:
    """환율 REST 클라이언트

    모든 환율은 Decimal로 반환 (JSON float를 Decimal로 직접 파싱).

    Args:
        base_url: API 베이스 URL (버전 태그 앞부분)
        timeout: HTTP 요청 타임아웃 (초)

    사용 예시:
    ```python
    with CurrencyRateClient() as client:
        rate = client.fetch_rate("EUR", "USD", date(2024, 3, 6))
    ```
    """

    def __init__(
        self,
        base_url: str = RateEndpoints.BASE_URL,
        timeout: float = Defaults.HTTP_TIMEOUT_SEC,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client: httpx.Client | None = None

    @classmethod
    def from_config(cls, config: RatesConfig) -> "CurrencyRateClient":
        """설정(ledger.yaml의 rates 섹션)으로 생성"""
        return cls(base_url=config.base_url, timeout=config.timeout)

    def _get_client(self) -> httpx.Client:
        """HTTP 클라이언트 가져오기 (lazy initialization)"""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(timeout=self.timeout)
        return self._client

    def close(self) -> None:
        """HTTP 클라이언트 종료"""
        if self._client is not None and not self._client.is_closed:
            self._client.close()
        self._client = None

    def __enter__(self) -> "CurrencyRateClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def build_url(self, base: str, on: date | None = None) -> str:
        """환율표 URL 생성

        on이 없으면 latest 태그 사용.
        """
        tag = on.isoformat() if on is not None else "latest"
        return (
            f"{self.base_url}@{tag}/{RateEndpoints.API_VERSION}"
            f"/currencies/{base.lower()}.json"
        )

    def fetch_table(self, base: str, on: date | None = None) -> RateTable:
        """기준 통화의 환율표 조회

        Raises:
            RateUnavailableError: 네트워크 오류, 4xx/5xx, 응답 형식 오류
        """
        url = self.build_url(base, on)
        client = self._get_client()

        try:
            response = client.get(url)
        except httpx.HTTPError as e:
            logger.error(f"환율 요청 실패: {e}")
            raise RateUnavailableError(base, "*", str(e)) from e

        if response.status_code >= 400:
            logger.error(f"환율 API error: {response.status_code} ({url})")
            raise RateUnavailableError(base, "*", f"HTTP {response.status_code}")

        try:
            data = response.json(parse_float=Decimal)
            return RateTable.from_api(base, data)
        except (ValueError, ValidationError) as e:
            raise RateUnavailableError(base, "*", f"응답 형식 오류: {e}") from e

    def fetch_rate(self, from_code: str, to_code: str, on: date | None = None) -> Decimal:
        """1 from_code = ? to_code

        Raises:
            RateUnavailableError: 조회 실패 또는 대상 통화 누락
        """
        table = self.fetch_table(from_code, on)
        rate = table.rate_for(to_code)
        if rate is None:
            raise RateUnavailableError(from_code, to_code, "대상 통화 없음")

        logger.debug(f"환율: {from_code}->{to_code} = {rate} ({table.date})")
        return rate
