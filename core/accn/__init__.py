"""
계정 트리

사용 예시:
```python
from core.accn import AccnTree

tree = AccnTree()
drinks = tree.resolve_or_create_account(["expense", "food", "drinks"])
tree.resolve_fuzzy(["foo", "dri"]) == drinks  # True
```
"""

from core.accn.query import elders, fuzzy_path_matches
from core.accn.tree import Accn, AccnTree, Contact

__all__ = [
    "Accn",
    "AccnTree",
    "Contact",
    "elders",
    "fuzzy_path_matches",
]
