"""Tests for config module: parsing, serialisation and validation."""
import json
from dataclasses import replace

import pytest

from keytag import ConfigError, TagConfig, check_config, load_config, validate_config
from keytag.config import (
    BaseOptions,
    BaseShape,
    CodeOptions,
    KeychainPlacement,
    NfcShape,
    TextAlign,
    TextPlacement,
)
from keytag.contracts import Material


def _with(config, **changes):
    return replace(config, base=replace(config.base, **changes))


class TestFromDict:
    def test_defaults(self):
        config = TagConfig.from_dict({})
        assert config == TagConfig()
        assert config.base.width == 60
        assert config.base.shape is BaseShape.ROUNDED_RECTANGLE

    def test_camel_case_keys_and_enums(self):
        config = TagConfig.from_dict(
            {
                "base": {
                    "cornerRadius": 2,
                    "textPlacement": "left",
                    "textAlign": "right",
                    "nfcIndentationShape": "square",
                    "keychainPlacement": "topLeft",
                    "hasNfcIndentation": True,
                },
                "code": {"margin": 5, "invert": True},
            }
        )
        assert config.base.corner_radius == 2.0
        assert isinstance(config.base.corner_radius, float)
        assert config.base.text_placement is TextPlacement.LEFT
        assert config.base.text_align is TextAlign.RIGHT
        assert config.base.nfc_indentation_shape is NfcShape.SQUARE
        assert config.base.keychain_placement is KeychainPlacement.TOP_LEFT
        assert config.base.has_nfc_indentation is True
        assert config.code == CodeOptions(margin=5.0, invert=True)

    def test_snake_case_keys(self):
        config = TagConfig.from_dict({"base": {"text_size": 6, "mirror_holes": True}})
        assert config.base.text_size == 6.0
        assert config.base.mirror_holes is True

    @pytest.mark.parametrize("value, expected", [("#102030", 0x102030), ("0xFF0000", 0xFF0000), (255, 255)])
    def test_colours(self, value, expected):
        assert TagConfig.from_dict({"baseColor": value}).base_color == expected

    def test_qrcode_color_is_detail_colour(self):
        config = TagConfig.from_dict({"qrcodeColor": "#abcdef"})
        assert config.detail_color == 0xABCDEF

    def test_material_colours_are_rgba(self):
        config = TagConfig(base_color=0x112233, detail_color=0x000000)
        assert config.material_colors[Material.BASE] == (0x11, 0x22, 0x33, 255)
        assert config.material_colors[Material.DETAIL] == (0, 0, 0, 255)

    def test_unknown_keys_are_ignored(self, caplog):
        config = TagConfig.from_dict({"base": {"sparkles": 3}, "theme": "dark"})
        assert config == TagConfig()
        assert "sparkles" in caplog.text
        assert "theme" in caplog.text

    def test_unknown_enum_value(self):
        with pytest.raises(ConfigError, match="textPlacement"):
            TagConfig.from_dict({"base": {"textPlacement": "diagonal"}})

    def test_non_numeric_value(self):
        with pytest.raises(ConfigError, match="width"):
            TagConfig.from_dict({"base": {"width": "wide"}})

    @pytest.mark.parametrize("value", ["false", 0, 1, None])
    def test_switches_must_be_booleans(self, value):
        with pytest.raises(ConfigError, match="hasBorder"):
            TagConfig.from_dict({"base": {"hasBorder": value}})

    def test_bad_colour(self):
        with pytest.raises(ConfigError, match="colour"):
            TagConfig.from_dict({"baseColor": "#zzzzzz"})

    def test_section_must_be_object(self):
        with pytest.raises(ConfigError, match="base"):
            TagConfig.from_dict({"base": [1, 2]})


class TestToDict:
    def test_camel_case_output(self, hello_config):
        data = hello_config.to_dict()
        assert data["base"]["textPlacement"] == "bottom"
        assert data["base"]["shape"] == "roundedRectangle"
        assert data["base"]["hasBorder"] is True
        assert data["code"] == {"margin": 2, "invert": False}
        json.dumps(data)

    def test_round_trip(self, full_config):
        config = _with(full_config, keychain_placement=KeychainPlacement.TOP_LEFT)
        assert TagConfig.from_dict(config.to_dict()) == config


class TestLoadConfig:
    def test_load(self, config_file):
        config = load_config(config_file)
        assert config.base.has_keychain_attachment is True
        assert config.base.text_message == "**Hello World**"
        assert config.base_color == 0xFFFFFF
        assert config.detail_color == 0x000000

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{ nope", encoding="utf-8")
        with pytest.raises(ConfigError, match="invalid JSON"):
            load_config(path)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)


class TestValidation:
    def test_valid_configs(self, hello_config, plain_config, full_config):
        for config in (hello_config, plain_config, full_config):
            assert validate_config(config) == []
            assert check_config(config) is config

    def test_non_positive_dimensions(self, plain_config):
        issues = validate_config(_with(plain_config, width=0, depth=-1))
        assert any("width" in issue for issue in issues)
        assert any("depth" in issue for issue in issues)

    def test_border_too_wide(self, hello_config):
        issues = validate_config(_with(hello_config, border_width=20))
        assert any("border width" in issue for issue in issues)

    def test_empty_label(self, hello_config):
        issues = validate_config(_with(hello_config, text_message="  \n "))
        assert issues == ["text is enabled but the message is empty"]

    def test_nfc_through_base(self, plain_config):
        config = _with(plain_config, has_nfc_indentation=True, nfc_indentation_depth=2)
        assert any("cut through" in issue for issue in validate_config(config))
        hidden = _with(config, nfc_indentation_hidden=True)
        assert not any("cut through" in issue for issue in validate_config(hidden))

    def test_nfc_too_large(self, plain_config):
        config = _with(plain_config, has_nfc_indentation=True, nfc_indentation_size=40)
        assert any("does not fit" in issue for issue in validate_config(config))

    def test_check_collects_every_issue(self, plain_config):
        config = replace(
            _with(plain_config, height=0, has_keychain_attachment=True, keychain_hole_diameter=0),
            code=CodeOptions(margin=-1),
        )
        with pytest.raises(ConfigError) as excinfo:
            check_config(config)
        assert len(excinfo.value.issues) >= 3
        assert isinstance(excinfo.value, ValueError)

    def test_disabled_features_not_checked(self):
        config = TagConfig(base=BaseOptions(has_border=False, border_width=-3, text_size=0))
        assert validate_config(config) == []
