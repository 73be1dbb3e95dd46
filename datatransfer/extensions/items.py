"""
Mapping-backed DataItem.
"""

from collections.abc import Mapping, Set
from typing import Any

from datatransfer.extensions.base import DataItem


class DictDataItem(DataItem):
    """
    DataItem over a plain dict.

    Nested mappings are exposed as DictDataItems and lists of mappings as
    lists of DictDataItems, so a sink can walk a document without knowing
    which source produced it.
    """

    def __init__(self, values: Mapping[str, Any]):
        self._values = dict(values)

    def field_names(self) -> Set[str]:
        # keys view: set-like, keeps document order for writers that care
        return self._values.keys()

    def get_value(self, name: str) -> Any | None:
        return _wrap(self._values.get(name))

    def to_dict(self) -> dict[str, Any]:
        return dict(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DictDataItem):
            return self._values == other._values
        return NotImplemented

    def __repr__(self) -> str:
        return f"DictDataItem({self._values!r})"


def _wrap(value: Any) -> Any:
    if isinstance(value, Mapping):
        return DictDataItem(value)
    if isinstance(value, list):
        return [_wrap(item) for item in value]
    return value


def to_plain(value: Any, include_nulls: bool = True) -> Any:
    """Convert a DataItem (or nested structure of them) back to plain Python values."""
    if isinstance(value, DataItem):
        result = {}
        for name in value.field_names():
            field_value = value.get_value(name)
            if field_value is None and not include_nulls:
                continue
            result[name] = to_plain(field_value, include_nulls)
        return result
    if isinstance(value, list):
        return [to_plain(item, include_nulls) for item in value]
    return value
