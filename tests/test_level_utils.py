"""
Tests for the level version transforms and text-level helpers.

Upgrade/downgrade must:
    - Convert track data between pathData and angleData
    - Coerce "Enabled"/"Disabled" flags both ways
    - Pin versions to exactly 15/16 (upgrade) and 8 (downgrade)
    - Reorder keys (data key, settings, rest)
    - Never raise; failures come back as results with empty content
"""

import pytest
from adofai_core.examples import build_legacy_level, build_modern_level
from adofai_core.level_utils import (
    DOWNGRADE,
    UPGRADE,
    compress_level_text,
    downgrade_level,
    format_level_text,
    reorder_level,
    transform_level_text,
    upgrade_level,
)
from adofai_core.model import TransformMessage
from adofai_core.string_parser import parse


class TestReorder:
    """Canonical key order."""

    def test_data_key_then_settings_then_rest(self):
        doc = {"actions": [], "settings": {}, "decorations": [], "angleData": [0]}
        assert list(reorder_level(doc, "angleData")) == ["angleData", "settings", "actions", "decorations"]

    def test_other_keys_keep_relative_order(self):
        doc = {"z": 1, "pathData": "R", "a": 2, "settings": {}, "m": 3}
        assert list(reorder_level(doc, "pathData")) == ["pathData", "settings", "z", "a", "m"]

    def test_stale_opposite_key_goes_first(self):
        doc = {"settings": {}, "pathData": "", "actions": []}
        assert list(reorder_level(doc, "angleData")) == ["pathData", "settings", "actions"]

    def test_returns_new_mapping(self):
        doc = {"settings": {}, "angleData": []}
        assert reorder_level(doc, "angleData") is not doc


class TestUpgrade:
    """Legacy -> modern."""

    def test_path_data_becomes_angle_data(self):
        result = upgrade_level(build_legacy_level("RpJ"))
        assert result.success
        doc = parse(result.content)
        assert doc["angleData"] == [0, 15, 30]
        assert "pathData" not in doc

    def test_path_data_in_settings(self):
        level = {"settings": {"version": 5, "pathData": "UU"}}
        doc = parse(upgrade_level(level).content)
        assert doc["angleData"] == [90, 90]
        assert "pathData" not in doc["settings"]

    def test_existing_angle_data_wins(self):
        level = {"pathData": "RR", "angleData": [45], "settings": {"version": 10}}
        doc = parse(upgrade_level(level).content)
        assert doc["angleData"] == [45]

    def test_flags_coerced(self):
        doc = parse(upgrade_level(build_legacy_level()).content)
        settings = doc["settings"]
        assert settings["seizureWarning"] is False
        assert settings["loopBG"] is True
        assert settings["pulseOnFloor"] is True

    def test_other_flag_values_untouched(self):
        level = {"pathData": "R", "settings": {"version": 8, "lockRot": "Maybe", "artist": "Enabled"}}
        settings = parse(upgrade_level(level).content)["settings"]
        assert settings["lockRot"] == "Maybe"
        assert settings["artist"] == "Enabled"

    def test_legacy_compat_forced(self):
        level = build_legacy_level()
        level["settings"]["legacyFlash"] = "Disabled"
        level["settings"]["disableV15Features"] = "Enabled"
        settings = parse(upgrade_level(level).content)["settings"]
        assert settings["legacyFlash"] is True
        assert settings["legacyCamRelativeTo"] is True
        assert settings["legacySpriteTiles"] is True
        assert settings["legacyTween"] is True
        assert settings["disableV15Features"] is False

    @pytest.mark.parametrize("before,after", [(None, 15), (1, 15), (8, 15), (14, 15), (15, 16), (16, 16), (99, 16)])
    def test_version_bump(self, before, after):
        settings = {} if before is None else {"version": before}
        level = {"pathData": "R", "settings": settings}
        assert parse(upgrade_level(level).content)["settings"]["version"] == after

    def test_key_order(self):
        level = {"actions": [], "settings": {"version": 8}, "pathData": "R"}
        doc = parse(upgrade_level(level).content)
        assert list(doc) == ["angleData", "settings", "actions"]

    def test_tab_indented_output(self):
        content = upgrade_level({"pathData": "R", "settings": {"version": 8}}).content
        assert content.startswith('{\n\t"angleData": [\n\t\t0\n\t],\n\t"settings": {')

    def test_internal_error_reported(self):
        level = {"pathData": "R", "settings": {"version": "eight"}}
        result = upgrade_level(level)
        assert not result.success
        assert result.content == ""
        assert result.message.startswith("TypeError")

    def test_not_a_document(self):
        result = upgrade_level(None)
        assert not result.success
        assert result.message == TransformMessage.INVALID_DOCUMENT.value


class TestDowngrade:
    """Modern -> version 8."""

    def test_angle_data_becomes_path_data(self):
        result = downgrade_level(build_modern_level(4))
        assert result.success
        doc = parse(result.content)
        assert doc["pathData"] == "RpJE"
        assert "angleData" not in doc
        assert list(doc)[:2] == ["pathData", "settings"]

    def test_terminal_angle(self):
        level = {"angleData": [0, 999], "settings": {"version": 15}}
        assert parse(downgrade_level(level).content)["pathData"] == "R!"

    def test_flags_restored_and_compat_removed(self):
        settings = parse(downgrade_level(build_modern_level()).content)["settings"]
        assert settings["seizureWarning"] == "Disabled"
        assert settings["loopBG"] == "Enabled"
        for key in ("legacyFlash", "legacyCamRelativeTo", "legacySpriteTiles", "legacyTween", "disableV15Features"):
            assert key not in settings
        assert settings["version"] == 8

    def test_version_too_low(self):
        level = {"angleData": [0], "settings": {"version": 5}}
        result = downgrade_level(level)
        assert not result.success
        assert result.message == "versionTooLow"
        assert result.content == ""

    def test_missing_version_is_too_low(self):
        result = downgrade_level({"angleData": [0], "settings": {}})
        assert result.message == "versionTooLow"

    def test_angle_incompatible(self):
        level = {"angleData": [999, 13], "settings": {"version": 15}}
        result = downgrade_level(level)
        assert not result.success
        assert result.message == "angleIncompatible"
        assert result.content == ""

    def test_incompatible_angle_leaves_document_alone(self):
        level = {"angleData": [0, 7], "settings": {"version": 15, "loopBG": True}}
        downgrade_level(level)
        assert level == {"angleData": [0, 7], "settings": {"version": 15, "loopBG": True}}

    def test_angle_data_in_settings(self):
        level = {"settings": {"version": 12, "angleData": [180], "pathData": "old"}}
        doc = parse(downgrade_level(level).content)
        assert doc["pathData"] == "L"
        assert "angleData" not in doc["settings"]
        assert "pathData" not in doc["settings"]

    def test_no_track_data(self):
        doc = parse(downgrade_level({"settings": {"version": 10}}).content)
        assert doc == {"settings": {"version": 8}}

    def test_version_always_eight(self):
        level = {"angleData": [0], "settings": {"version": 16}}
        assert parse(downgrade_level(level).content)["settings"]["version"] == 8


class TestUpgradeDowngradeInverse:
    """Upgrade then downgrade returns a version-8 level to its track."""

    def test_rpj_round_trip(self):
        level = {"pathData": "RpJ", "settings": {"version": 8}}
        upgraded = upgrade_level(level)
        downgraded = downgrade_level(parse(upgraded.content))
        doc = parse(downgraded.content)
        assert doc["pathData"] == "RpJ"
        assert doc["settings"]["version"] == 8

    def test_flags_survive_round_trip(self):
        original = build_legacy_level()
        settings_before = dict(original["settings"])
        doc = parse(downgrade_level(parse(upgrade_level(original).content)).content)
        assert doc["settings"] == settings_before
        assert doc["actions"] == build_legacy_level()["actions"]

    def test_non_ascii_written_raw(self):
        level = {"pathData": "R", "settings": {"version": 8, "song": "夜に駆ける", "artist": "YOASOBI"}}
        upgraded = upgrade_level(level)
        assert '"song": "夜に駆ける"' in upgraded.content
        downgraded = downgrade_level(parse(upgraded.content))
        assert '"song": "夜に駆ける"' in downgraded.content
        assert "\\u" not in downgraded.content


class TestTextHelpers:
    """Whole-text operations used by the editor shell."""

    def test_format_level_text(self):
        result = format_level_text('{"settings":{"bpm":1},"actions":[{"floor":1}]}')
        assert result.success
        assert result.content == '{\n\t"settings": {\n\t\t"bpm": 1\n\t},\n\t"actions": [\n\t\t{"floor": 1}\n\t]\n}'

    def test_compress_level_text(self):
        result = compress_level_text('{\n\t"a": [1, 2],\n\t"b": "x"\n}')
        assert result.content == '{"a":[1,2],"b":"x"}'

    def test_compress_keeps_non_ascii_raw(self):
        result = compress_level_text('{"song": "café"}')
        assert result.content == '{"song":"café"}'

    def test_parse_failure(self):
        for result in (format_level_text("{"), compress_level_text("["), transform_level_text("{", UPGRADE)):
            assert not result.success
            assert result.message == "parseFailed"
            assert result.content == ""

    def test_transform_level_text_upgrade(self):
        text = '{"pathData": "RU", "settings": {"version": 8}, "actions": [{"floor": 1, "eventType": "Twirl"}]}'
        result = transform_level_text(text, UPGRADE)
        assert result.success
        assert result.content.startswith('{\n\t"angleData": [0,90],\n\t"settings": {')
        assert '\t\t{"floor": 1, "eventType": "Twirl"}' in result.content

    def test_transform_level_text_downgrade_failure(self):
        result = transform_level_text('{"angleData": [13], "settings": {"version": 15}}', DOWNGRADE)
        assert result.message == "angleIncompatible"

    def test_unknown_direction(self):
        with pytest.raises(ValueError):
            transform_level_text("{}", "sideways")
