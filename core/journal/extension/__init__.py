"""
Posting 변환 extension

사용 예시:
```python
from core.journal.extension import SplitExtension, RelativeDateExtension

sink = journal.new_transaction(
    date(2021, 1, 1), "Dinner", extensions=[SplitExtension, RelativeDateExtension]
)
sink.with_tag("split", ["me", "bob"]).with_tag("date", ["-1"])
```
"""

from core.journal.extension.base import Extension, ExtensionFactory, PostingSink, chain
from core.journal.extension.fuzzy_accn import FuzzyAccnExtension
from core.journal.extension.relative_date import RelativeDateExtension
from core.journal.extension.split import SplitExtension

DEFAULT_EXTENSIONS: tuple[ExtensionFactory, ...] = (
    FuzzyAccnExtension,
    RelativeDateExtension,
    SplitExtension,
)

__all__ = [
    "DEFAULT_EXTENSIONS",
    "Extension",
    "ExtensionFactory",
    "FuzzyAccnExtension",
    "PostingSink",
    "RelativeDateExtension",
    "SplitExtension",
    "chain",
]
