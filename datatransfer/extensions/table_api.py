"""
Table API record mapping.

Shows what a sink has to do with the DataItems it receives: flatten each
record into a table entity, derive its keys, rename properties and drop the
ones the store reserves for itself.

Sink settings:
    ConnectionString / Table: Target table
    PartitionKeyFieldName: Source field used as PartitionKey (default "PartitionKey")
    RowKeyFieldName: Source field used as RowKey (default "RowKey")
    MaxConcurrentEntityWrites: Upper bound of concurrent entity writes
    WriteMode: Create (default), Replace or Merge
    PropertyRenames: [{From: id, To: entityId}, ...]
    IdPropertyRename: Deprecated shorthand for renaming "id"
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from datatransfer.config.settings import SettingsBag
from datatransfer.core.exceptions import ConfigurationError, SettingsTypeError
from datatransfer.extensions.base import DataItem

PARTITION_KEY = "PartitionKey"
ROW_KEY = "RowKey"

# Reserved by the Cosmos DB Table API; written only when renamed
RESERVED_PROPERTY_NAMES = frozenset({"id", "etag", "rid", "resourceid"})


class EntityWriteMode(Enum):
    """How entities are written to the table."""

    CREATE = "Create"  # Add new entities only, fail if one exists
    REPLACE = "Replace"  # Upsert, replacing existing entities
    MERGE = "Merge"  # Upsert, merging properties into existing entities

    @classmethod
    def parse(cls, value: str) -> EntityWriteMode:
        for mode in cls:
            if mode.value.lower() == value.strip().lower():
                return mode
        msg = f"Unknown WriteMode '{value}'. Expected one of: Create, Replace, Merge"
        raise ConfigurationError(msg, details={"setting": "WriteMode"})


@dataclass(frozen=True)
class PropertyRename:
    """Write source property ``from_name`` (case-insensitive) as ``to_name``."""

    from_name: str | None = None
    to_name: str | None = None


@dataclass
class TableApiSinkSettings:
    """Typed view of a Table API sink's SettingsBag."""

    connection_string: str | None = None
    table: str | None = None
    partition_key_field_name: str | None = None
    row_key_field_name: str | None = None
    max_concurrent_entity_writes: int | None = None
    write_mode: EntityWriteMode = EntityWriteMode.CREATE
    id_property_rename: str | None = None
    property_renames: list[PropertyRename] | None = field(default=None)

    @classmethod
    def from_settings(cls, settings: SettingsBag) -> TableApiSinkSettings:
        renames = None
        entries = settings.get_list("PropertyRenames")
        if entries is not None:
            renames = []
            for entry in entries:
                if not isinstance(entry, Mapping):
                    raise SettingsTypeError("PropertyRenames", "a list of sections", entry)
                section = SettingsBag(entry)
                renames.append(PropertyRename(section.get_str("From"), section.get_str("To")))

        write_mode = settings.get_str("WriteMode")

        result = cls(
            connection_string=settings.get_str("ConnectionString"),
            table=settings.get_str("Table"),
            partition_key_field_name=settings.get_str("PartitionKeyFieldName"),
            row_key_field_name=settings.get_str("RowKeyFieldName"),
            max_concurrent_entity_writes=settings.get_int("MaxConcurrentEntityWrites"),
            write_mode=EntityWriteMode.parse(write_mode) if write_mode else EntityWriteMode.CREATE,
            id_property_rename=settings.get_str("IdPropertyRename"),
            property_renames=renames,
        )
        result.validate()
        return result

    def validate(self) -> None:
        if self.max_concurrent_entity_writes is not None and self.max_concurrent_entity_writes < 1:
            msg = "MaxConcurrentEntityWrites must be at least 1"
            raise ConfigurationError(msg, details={"setting": "MaxConcurrentEntityWrites"})

    def effective_renames(self) -> dict[str, str]:
        """
        Merge PropertyRenames with the deprecated IdPropertyRename.

        PropertyRenames takes precedence for "id" when both are set. Entries
        with a blank source or target name are ignored.
        """
        renames: dict[str, str] = {}
        if self.id_property_rename and self.id_property_rename.strip():
            renames["id"] = self.id_property_rename

        for rename in self.property_renames or []:
            if not rename.from_name or not rename.from_name.strip():
                continue
            if not rename.to_name or not rename.to_name.strip():
                continue
            for existing in list(renames):
                if existing.lower() == rename.from_name.lower():
                    del renames[existing]
            renames[rename.from_name] = rename.to_name
        return renames


def to_table_entity(
    item: DataItem,
    partition_key_field_name: str | None = None,
    row_key_field_name: str | None = None,
    property_renames: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """
    Build a table entity from a DataItem.

    The partition and row key fields (matched case-insensitively) become
    string ``PartitionKey`` / ``RowKey`` values. Every other field is written
    under its renamed name when ``property_renames`` has an entry for it, and
    skipped when it is a reserved name with no rename.
    """
    partition_field = (partition_key_field_name or "").strip() or PARTITION_KEY
    row_field = (row_key_field_name or "").strip() or ROW_KEY

    entity: dict[str, Any] = {}
    for name in item.field_names():
        folded = name.lower()
        if folded == partition_field.lower():
            entity[PARTITION_KEY] = _key_value(item.get_value(name))
        elif folded == row_field.lower():
            entity[ROW_KEY] = _key_value(item.get_value(name))
        else:
            target = renamed_property(name, property_renames)
            if target is not None:
                entity[target] = item.get_value(name)
    return entity


def renamed_property(name: str, property_renames: Mapping[str, str] | None = None) -> str | None:
    """
    Name to write ``name`` under, or None when the property must be skipped.
    """
    for source_name, target in (property_renames or {}).items():
        if source_name.lower() == name.lower() and target and target.strip():
            return target

    if name.lower() in RESERVED_PROPERTY_NAMES:
        return None
    return name


def _key_value(value: Any) -> str | None:
    return None if value is None else str(value)
