"""
손익계산서

수익 posting은 대변(음수)으로 기록되므로 표시할 때 부호를 뒤집음.
순이익 = 수익 - 비용
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from core.accn import Accn
from core.valuable import Valuable


@dataclass(frozen=True)
class IncomeStatement:
    since: date | None
    until: date | None
    income: dict[Accn, Valuable]
    expense: dict[Accn, Valuable]

    @property
    def total_income(self) -> Valuable:
        """수익 합계 (양수로 표시)"""
        return -sum(self.income.values(), Valuable())

    @property
    def total_expense(self) -> Valuable:
        return sum(self.expense.values(), Valuable())

    @property
    def net(self) -> Valuable:
        return self.total_income - self.total_expense
