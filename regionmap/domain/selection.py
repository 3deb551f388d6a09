from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional

from regionmap.domain.regions import subregion_key


@dataclass(frozen=True)
class SelectionRecord:
    """A selected sub-region together with its parent's display name."""

    parent_id: str
    parent_name_primary: str
    child_name_primary: str
    child_name_secondary: str = ""

    @property
    def key(self) -> str:
        return subregion_key(self.parent_id, self.child_name_primary)

    def to_frontend_json(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "parentId": self.parent_id,
            "parentName": self.parent_name_primary,
            "childNamePrimary": self.child_name_primary,
            "childNameSecondary": self.child_name_secondary,
        }


class SelectionSnapshot(Mapping[str, SelectionRecord]):
    """Read-only, insertion-ordered view of the selection at one point in time."""

    __slots__ = ("_records",)

    def __init__(self, records: Optional[Mapping[str, SelectionRecord]] = None) -> None:
        self._records = MappingProxyType(dict(records or {}))

    def __getitem__(self, key: str) -> SelectionRecord:
        return self._records[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"SelectionSnapshot({list(self._records)!r})"
