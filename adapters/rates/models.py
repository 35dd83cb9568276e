"""
환율 API 응답 스키마 (Pydantic)

currency-api 응답 형식:
    {"date": "2024-03-06", "eur": {"usd": 1.0854, "gbp": 0.8557, ...}}
"""

from datetime import date as date_type
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field


class RateTable(BaseModel):
    """기준 통화 하나에 대한 환율표"""

    date: date_type = Field(..., description="환율 기준일")
    base: str = Field(..., description="기준 통화 코드 (소문자)")
    rates: dict[str, Decimal] = Field(default_factory=dict, description="대상 통화별 환율")

    @classmethod
    def from_api(cls, base: str, data: dict[str, Any]) -> "RateTable":
        """API 응답에서 생성 (기준 통화 키 아래의 환율표를 평탄화)"""
        base = base.lower()
        return cls(date=data.get("date"), base=base, rates=data.get(base) or {})

    def rate_for(self, target: str) -> Decimal | None:
        return self.rates.get(target.lower())
