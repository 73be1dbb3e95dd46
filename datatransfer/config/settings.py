"""
Extension settings bag.

A SettingsBag is the only view of configuration an extension receives: the
section bound to its own ``SourceSettings`` or ``SinkSettings``. The core
never interprets it, apart from the few keys read by the conflict guard.

Keys are matched case-insensitively, the way hierarchical configuration
keys are. Typed accessors refuse to coerce values of the wrong type; the
only conversions performed are from the strings that flat configuration
sources (environment variables, ``key=value`` collections) always produce.
"""

from collections.abc import Iterator, Mapping
from typing import Any

from datatransfer.core.exceptions import ConfigurationError, SettingsTypeError

_TRUE = "true"
_FALSE = "false"


class SettingsBag(Mapping):
    """
    Immutable, case-insensitive, string-keyed settings view.

    Example:
        >>> bag = SettingsBag({"FilePath": "in.json", "Indented": "true"})
        >>> bag.get_str("filepath")
        'in.json'
        >>> bag.get_bool("Indented")
        True
    """

    def __init__(self, values: Mapping[str, Any] | None = None):
        self._values: dict[str, Any] = {}
        self._keys: dict[str, str] = {}

        for key, value in (values or {}).items():
            if not isinstance(key, str):
                msg = f"Setting keys must be strings, got {key!r}"
                raise ConfigurationError(msg)
            folded = key.casefold()
            if folded in self._keys:
                msg = f"Setting '{key}' is defined more than once"
                raise ConfigurationError(msg, details={"key": key})
            self._keys[folded] = key
            self._values[key] = value

    def __getitem__(self, key: str) -> Any:
        return self._values[self._keys[key.casefold()]]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.casefold() in self._keys

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"SettingsBag({self._values!r})"

    def get_str(self, key: str, default: str | None = None) -> str | None:
        value = self.get(key)
        if value is None:
            return default
        if not isinstance(value, str):
            raise SettingsTypeError(key, "a string", value)
        return value

    def get_int(self, key: str, default: int | None = None) -> int | None:
        value = self.get(key)
        if value is None:
            return default
        if isinstance(value, bool):
            raise SettingsTypeError(key, "an integer", value)
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            text = value.strip()
            if text.lstrip("+-").isdigit():
                return int(text)
        raise SettingsTypeError(key, "an integer", value)

    def get_bool(self, key: str, default: bool | None = None) -> bool | None:
        value = self.get(key)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            text = value.strip().lower()
            if text == _TRUE:
                return True
            if text == _FALSE:
                return False
        raise SettingsTypeError(key, "a boolean", value)

    def get_section(self, key: str) -> "SettingsBag | None":
        """Return a nested mapping as its own bag, or None when absent."""
        value = self.get(key)
        if value is None:
            return None
        if isinstance(value, SettingsBag):
            return value
        if isinstance(value, Mapping):
            return SettingsBag(value)
        raise SettingsTypeError(key, "a section", value)

    def get_list(self, key: str) -> list[Any] | None:
        value = self.get(key)
        if value is None:
            return None
        if isinstance(value, list | tuple):
            return list(value)
        raise SettingsTypeError(key, "a list", value)


EMPTY_SETTINGS = SettingsBag()
