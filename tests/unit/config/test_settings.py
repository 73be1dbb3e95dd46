"""Tests for the case-insensitive, strictly typed SettingsBag."""

import pytest

from datatransfer.config import EMPTY_SETTINGS, SettingsBag
from datatransfer.core import ConfigurationError, SettingsTypeError


class TestLookup:
    def test_case_insensitive_access(self):
        bag = SettingsBag({"FilePath": "in.json"})

        assert bag["filepath"] == "in.json"
        assert bag.get("FILEPATH") == "in.json"
        assert "filePath" in bag

    def test_original_key_spelling_is_kept(self):
        bag = SettingsBag({"FilePath": "in.json"})
        assert list(bag) == ["FilePath"]

    def test_missing_key(self):
        bag = SettingsBag({"A": 1})

        assert bag.get("B") is None
        assert "B" not in bag
        with pytest.raises(KeyError):
            bag["B"]

    def test_non_string_membership(self):
        assert 1 not in SettingsBag({"1": "x"})

    def test_keys_differing_only_by_case_are_rejected(self):
        with pytest.raises(ConfigurationError, match="more than once"):
            SettingsBag({"Container": "a", "container": "b"})

    def test_non_string_keys_are_rejected(self):
        with pytest.raises(ConfigurationError):
            SettingsBag({1: "x"})

    def test_empty(self):
        assert len(EMPTY_SETTINGS) == 0
        assert dict(EMPTY_SETTINGS) == {}


class TestTypedAccessors:
    def test_get_str(self):
        bag = SettingsBag({"Name": "x"})

        assert bag.get_str("name") == "x"
        assert bag.get_str("missing") is None
        assert bag.get_str("missing", "fallback") == "fallback"

    def test_get_str_refuses_other_types(self):
        with pytest.raises(SettingsTypeError) as exc_info:
            SettingsBag({"Name": 5}).get_str("Name")

        assert exc_info.value.key == "Name"
        assert exc_info.value.value == 5

    @pytest.mark.parametrize("value,expected", [(7, 7), ("7", 7), (" -3 ", -3), ("+12", 12)])
    def test_get_int(self, value, expected):
        assert SettingsBag({"Count": value}).get_int("Count") == expected

    @pytest.mark.parametrize("value", [True, "seven", 1.5, "1.5", [1]])
    def test_get_int_refuses(self, value):
        with pytest.raises(SettingsTypeError):
            SettingsBag({"Count": value}).get_int("Count")

    def test_get_int_default(self):
        assert SettingsBag().get_int("Count", 10) == 10

    @pytest.mark.parametrize(
        "value,expected",
        [(True, True), (False, False), ("true", True), ("FALSE", False), (" True ", True)],
    )
    def test_get_bool(self, value, expected):
        assert SettingsBag({"Flag": value}).get_bool("flag") is expected

    @pytest.mark.parametrize("value", ["yes", "1", 1, 0, "on"])
    def test_get_bool_refuses(self, value):
        with pytest.raises(SettingsTypeError, match="a boolean"):
            SettingsBag({"Flag": value}).get_bool("Flag")

    def test_get_bool_default(self):
        assert SettingsBag().get_bool("Flag", False) is False
        assert SettingsBag().get_bool("Flag") is None

    def test_get_section(self):
        bag = SettingsBag({"Inner": {"Key": "v"}})

        section = bag.get_section("inner")

        assert isinstance(section, SettingsBag)
        assert section.get_str("key") == "v"
        assert bag.get_section("missing") is None

    def test_get_section_refuses_scalars(self):
        with pytest.raises(SettingsTypeError):
            SettingsBag({"Inner": "flat"}).get_section("Inner")

    def test_get_list(self):
        bag = SettingsBag({"Items": ({"a": 1},)})

        assert bag.get_list("items") == [{"a": 1}]
        assert bag.get_list("missing") is None
        with pytest.raises(SettingsTypeError):
            SettingsBag({"Items": "a,b"}).get_list("Items")
