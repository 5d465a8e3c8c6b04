from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional

from .errors import CategoryNotFound, InvalidInput
from .models import CategoryRule


class CategoryCatalog:
    """Fixed set of category rules, looked up by exact name."""

    def __init__(self, rules: Iterable[CategoryRule]):
        self._rules: List[CategoryRule] = list(rules)
        self._by_name: Dict[str, CategoryRule] = {}
        for rule in self._rules:
            if rule.name in self._by_name:
                raise InvalidInput(f"Duplicate category: {rule.name!r}")
            self._by_name[rule.name] = rule

    def lookup(self, name: str) -> Optional[CategoryRule]:
        return self._by_name.get(name)

    def require(self, name: str) -> CategoryRule:
        rule = self.lookup(name)
        if rule is None:
            raise CategoryNotFound(name)
        return rule

    def names(self) -> List[str]:
        return [r.name for r in self._rules]

    def __iter__(self) -> Iterator[CategoryRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name
