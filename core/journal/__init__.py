"""
원장 (거래 저장소, 빌더, 조회)

사용 예시:
```python
from core.journal import Journal, Query

journal = Journal()
cash = journal.resolve_or_create_account(["asset", "cash"])
salary = journal.resolve_or_create_account(["income", "salary"])

journal.new_transaction(date(2021, 1, 1), "Salary") \\
    .with_posting(cash, journal.parse_money("$1000.00")) \\
    .with_posting(salary) \\
    .build()

for row in journal.query_posting(Query.new().accn(cash)).daily_balance():
    print(row.date, row.balance)
```
"""

from core.journal.builder import TxnBuilder
from core.journal.journal import Journal
from core.journal.query import (
    All,
    And,
    BalanceRow,
    ByAccount,
    ByAccounts,
    DailyBalance,
    PostingQuerys,
    PostingRow,
    Query,
    RegisterRow,
    Since,
    Until,
)
from core.journal.statement import IncomeStatement
from core.journal.txn import Posting, PostingId, Transaction, Txn, TxnStore

__all__ = [
    # 레코드
    "Txn",
    "PostingId",
    "Posting",
    "Transaction",
    "TxnStore",
    # 입력
    "Journal",
    "TxnBuilder",
    # 조회
    "Query",
    "All",
    "ByAccount",
    "ByAccounts",
    "Since",
    "Until",
    "And",
    "PostingRow",
    "PostingQuerys",
    "DailyBalance",
    "BalanceRow",
    "RegisterRow",
    "IncomeStatement",
]
