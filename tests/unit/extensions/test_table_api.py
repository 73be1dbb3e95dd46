"""Tests for Table API entity mapping and sink settings."""

import pytest

from datatransfer.config import SettingsBag
from datatransfer.core import ConfigurationError, SettingsTypeError
from datatransfer.extensions import DictDataItem
from datatransfer.extensions.table_api import (
    EntityWriteMode,
    PropertyRename,
    TableApiSinkSettings,
    renamed_property,
    to_table_entity,
)


class TestToTableEntity:
    def test_string_property(self):
        entity = to_table_entity(DictDataItem({"Name": "Chris"}))
        assert entity == {"Name": "Chris"}

    def test_int_property_keeps_type(self):
        entity = to_table_entity(DictDataItem({"Number": 123}))
        assert entity["Number"] == 123

    @pytest.mark.parametrize(
        "record,partition_field,expected",
        [
            ({"PartitionKey": 123}, None, "123"),
            ({"MyID": 123}, "MyID", "123"),
            ({"PartitionKey": "WI"}, None, "WI"),
            ({"MyVal": "WI"}, "MyVal", "WI"),
        ],
    )
    def test_partition_key(self, record, partition_field, expected):
        entity = to_table_entity(DictDataItem(record), partition_field, None)
        assert entity == {"PartitionKey": expected}

    @pytest.mark.parametrize(
        "record,row_field,expected",
        [
            ({"RowKey": 123}, None, "123"),
            ({"MyKey": 123}, "MyKey", "123"),
            ({"RowKey": "WI"}, None, "WI"),
            ({"MyVal": "WI"}, "MyVal", "WI"),
        ],
    )
    def test_row_key(self, record, row_field, expected):
        entity = to_table_entity(DictDataItem(record), None, row_field)
        assert entity == {"RowKey": expected}

    def test_blank_field_names_use_defaults(self):
        entity = to_table_entity(DictDataItem({"PartitionKey": "WI", "RowKey": 123}), "", "")
        assert entity == {"PartitionKey": "WI", "RowKey": "123"}

    def test_custom_partition_and_row_fields(self):
        entity = to_table_entity(DictDataItem({"MyVal": "Tailspin", "ID": 456}), "MyVal", "ID")
        assert entity == {"PartitionKey": "Tailspin", "RowKey": "456"}

    def test_key_fields_match_case_insensitively(self):
        entity = to_table_entity(DictDataItem({"myval": "Tailspin"}), "MyVal", None)
        assert entity == {"PartitionKey": "Tailspin"}

    def test_null_key_value(self):
        entity = to_table_entity(DictDataItem({"PartitionKey": None}))
        assert entity == {"PartitionKey": None}

    def test_rename_id(self):
        entity = to_table_entity(
            DictDataItem({"id": "guid-123", "Name": "Test"}), None, None, {"id": "entityId"}
        )
        assert entity == {"entityId": "guid-123", "Name": "Test"}

    def test_reserved_id_skipped_without_rename(self):
        entity = to_table_entity(DictDataItem({"id": "guid-123", "Name": "Test"}))
        assert entity == {"Name": "Test"}

    def test_multiple_renames(self):
        entity = to_table_entity(
            DictDataItem({"id": "v1", "etag": "v2", "Name": "Test"}),
            None,
            None,
            {"id": "entityId", "etag": "entityEtag"},
        )
        assert entity == {"entityId": "v1", "entityEtag": "v2", "Name": "Test"}

    def test_rename_matches_case_insensitively(self):
        entity = to_table_entity(DictDataItem({"ID": "v1"}), None, None, {"id": "entityId"})
        assert entity == {"entityId": "v1"}

    def test_rename_of_ordinary_property(self):
        entity = to_table_entity(DictDataItem({"Name": "Test"}), None, None, {"name": "FullName"})
        assert entity == {"FullName": "Test"}


class TestRenamedProperty:
    @pytest.mark.parametrize(
        "name,expected",
        [("id", None), ("ETag", None), ("rid", None), ("ResourceId", None), ("_rid", "_rid")],
    )
    def test_reserved(self, name, expected):
        assert renamed_property(name) == expected

    def test_blank_target_is_ignored(self):
        assert renamed_property("id", {"id": "  "}) is None
        assert renamed_property("Name", {"Name": ""}) == "Name"


class TestEntityWriteMode:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("Create", EntityWriteMode.CREATE),
            ("replace", EntityWriteMode.REPLACE),
            (" MERGE ", EntityWriteMode.MERGE),
        ],
    )
    def test_parse(self, value, expected):
        assert EntityWriteMode.parse(value) is expected

    def test_parse_unknown(self):
        with pytest.raises(ConfigurationError, match="WriteMode"):
            EntityWriteMode.parse("Upsert")


class TestTableApiSinkSettings:
    def test_defaults(self):
        settings = TableApiSinkSettings.from_settings(SettingsBag())

        assert settings.write_mode is EntityWriteMode.CREATE
        assert settings.property_renames is None
        assert settings.effective_renames() == {}

    def test_from_settings(self):
        settings = TableApiSinkSettings.from_settings(
            SettingsBag(
                {
                    "ConnectionString": "cs",
                    "Table": "people",
                    "PartitionKeyFieldName": "State",
                    "RowKeyFieldName": "id",
                    "MaxConcurrentEntityWrites": "8",
                    "WriteMode": "Merge",
                    "PropertyRenames": [{"From": "etag", "To": "entityEtag"}],
                }
            )
        )

        assert settings.table == "people"
        assert settings.partition_key_field_name == "State"
        assert settings.max_concurrent_entity_writes == 8
        assert settings.write_mode is EntityWriteMode.MERGE
        assert settings.property_renames == [PropertyRename("etag", "entityEtag")]

    @pytest.mark.parametrize("value", [0, -1])
    def test_concurrency_must_be_positive(self, value):
        with pytest.raises(ConfigurationError, match="MaxConcurrentEntityWrites"):
            TableApiSinkSettings.from_settings(SettingsBag({"MaxConcurrentEntityWrites": value}))

    def test_property_renames_must_be_sections(self):
        with pytest.raises(SettingsTypeError):
            TableApiSinkSettings.from_settings(SettingsBag({"PropertyRenames": ["id"]}))

    def test_id_property_rename_alone(self):
        settings = TableApiSinkSettings(id_property_rename="entityId")
        assert settings.effective_renames() == {"id": "entityId"}

    def test_property_renames_win_over_id_property_rename(self):
        settings = TableApiSinkSettings(
            id_property_rename="legacyId",
            property_renames=[PropertyRename("ID", "entityId")],
        )
        assert settings.effective_renames() == {"ID": "entityId"}

    def test_blank_renames_are_ignored(self):
        settings = TableApiSinkSettings(
            id_property_rename=" ",
            property_renames=[PropertyRename("", "x"), PropertyRename("etag", None)],
        )
        assert settings.effective_renames() == {}

    def test_effective_renames_drive_entity_mapping(self):
        settings = TableApiSinkSettings.from_settings(
            SettingsBag({"IdPropertyRename": "entityId", "RowKeyFieldName": "Code"})
        )

        entity = to_table_entity(
            DictDataItem({"id": "1", "Code": 7, "Name": "x"}),
            settings.partition_key_field_name,
            settings.row_key_field_name,
            settings.effective_renames(),
        )

        assert entity == {"entityId": "1", "RowKey": "7", "Name": "x"}
