"""Tests for configuration parsing and serialization."""

import json

import pytest

from dye_engine.config import (
    DEFAULT_CONFIG_PATH,
    Config,
    DyeColor,
    DyeColorConfig,
    Filter,
    FilterOperation,
    FilterTarget,
    FilterType,
    config_to_dict,
    dump_config,
    load_config,
    output_name,
    parse_config,
)
from dye_engine.engine import validate_filters
from dye_engine.errors import ConfigError


def sample_data():
    return {
        "colors": {
            "light_blue": {
                "rgb": [58, 179, 218],
                "allow_alpha": False,
                "filters": [
                    {"type": "pixel", "target": "saturation",
                     "operation": "set", "value": 0.2},
                    {"type": "image", "target": "contrast",
                     "operation": "multiply", "value": 2},
                ],
            },
            "red": {"rgb": [176, 46, 38]},
        }
    }


class TestParseConfig:
    def test_parses_all_fields(self):
        config = parse_config(sample_data())

        light_blue = config.colors[DyeColor.LIGHT_BLUE]
        assert light_blue.rgb == (58, 179, 218)
        assert light_blue.allow_alpha is False
        assert light_blue.filters == (
            Filter(FilterType.PIXEL, FilterTarget.SATURATION,
                   FilterOperation.SET, 0.2),
            Filter(FilterType.IMAGE, FilterTarget.CONTRAST,
                   FilterOperation.MULTIPLY, 2.0),
        )
        assert isinstance(light_blue.filters[1].value, float)

    def test_defaults(self):
        red = parse_config(sample_data()).colors[DyeColor.RED]
        assert red == DyeColorConfig(rgb=(176, 46, 38))
        assert red.allow_alpha is True
        assert red.filters == ()

    @pytest.mark.parametrize(
        "mutate, where",
        [
            (lambda d: d["colors"].update(teal={"rgb": [0, 0, 0]}), "colors.teal"),
            (lambda d: d["colors"]["red"].update(rgb=[1, 2]), "colors.red.rgb"),
            (lambda d: d["colors"]["red"].update(rgb=[1, 2, 256]), "colors.red.rgb"),
            (lambda d: d["colors"]["red"].update(rgb=[1, 2, 3.5]), "colors.red.rgb"),
            (lambda d: d["colors"]["red"].pop("rgb"), "colors.red"),
            (lambda d: d["colors"]["red"].update(allow_alpha="yes"),
             "colors.red.allow_alpha"),
            (lambda d: d["colors"]["light_blue"]["filters"][1].update(target="gamma"),
             "colors.light_blue.filters[1].target"),
            (lambda d: d["colors"]["light_blue"]["filters"][0].update(value="big"),
             "colors.light_blue.filters[0].value"),
            (lambda d: d["colors"]["light_blue"]["filters"][0].pop("type"),
             "colors.light_blue.filters[0]"),
        ],
    )
    def test_errors_name_the_offending_entry(self, mutate, where):
        data = sample_data()
        mutate(data)
        with pytest.raises(ConfigError) as excinfo:
            parse_config(data)
        assert str(excinfo.value).startswith(where)

    def test_rejects_missing_colors(self):
        with pytest.raises(ConfigError):
            parse_config({"colours": {}})
        with pytest.raises(ConfigError):
            parse_config([])

    def test_invalid_combinations_are_left_to_the_engine(self):
        data = sample_data()
        data["colors"]["red"]["filters"] = [
            {"type": "pixel", "target": "contrast", "operation": "add", "value": 1}]
        config = parse_config(data)
        assert config.colors[DyeColor.RED].filters[0].target is FilterTarget.CONTRAST


class TestSerialization:
    def test_default_fields_are_omitted(self):
        data = config_to_dict(parse_config(sample_data()))
        assert data["colors"]["red"] == {"rgb": [176, 46, 38]}
        assert data["colors"]["light_blue"]["allow_alpha"] is False
        assert data["colors"]["light_blue"]["filters"][1] == {
            "type": "image", "target": "contrast",
            "operation": "multiply", "value": 2.0,
        }

    def test_dump_and_load(self, tmp_path):
        config = parse_config(sample_data())
        path = tmp_path / "colors.json"
        dump_config(config, path)
        assert load_config(path) == config

    def test_load_rejects_bad_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{ not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="invalid JSON"):
            load_config(path)


class TestDyeColor:
    def test_sixteen_snake_case_names(self):
        assert len(DyeColor) == 16
        assert str(DyeColor.LIGHT_GRAY) == "light_gray"
        assert DyeColor("light_blue") is DyeColor.LIGHT_BLUE

    def test_output_name(self):
        assert output_name(DyeColor.LIGHT_BLUE, "png") == "light_blue_amethyst.png"
        assert output_name(DyeColor.RED, "zip") == "red_amethyst.zip"


class TestDefaultConfig:
    def test_covers_every_color_with_valid_filters(self):
        config = load_config()
        assert isinstance(config, Config)
        assert set(config.colors) == set(DyeColor)
        for color_config in config.colors.values():
            validate_filters(color_config.filters)

    def test_is_valid_json_file(self):
        data = json.loads(DEFAULT_CONFIG_PATH.read_text(encoding="utf-8"))
        assert sorted(data["colors"]) == sorted(c.value for c in DyeColor)
