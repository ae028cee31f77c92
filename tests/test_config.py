import pytest

from cpop.components.board_config import BoardConfig, GridShape, MatchRule, Ruleset
from cpop.components.tile import SpecialKind
from cpop.constants import DEFAULT_PALETTE


def test_defaults():
    config = BoardConfig()
    assert (config.rows, config.cols) == (8, 8)
    assert config.palette == DEFAULT_PALETTE
    assert config.match_rule is MatchRule.LINES
    assert config.ruleset.base_points == 10
    assert config.ruleset.combo_ceiling == 99
    assert config.min_match == 3


def test_hex_defaults_to_flood_and_rejects_lines():
    assert BoardConfig(shape=GridShape.HEX).match_rule is MatchRule.FLOOD
    assert BoardConfig(shape="hex").shape is GridShape.HEX
    with pytest.raises(ValueError):
        BoardConfig(shape=GridShape.HEX, match_rule=MatchRule.LINES)


@pytest.mark.parametrize("kwargs", [
    {"rows": 0},
    {"cols": -1},
    {"palette": ("red",)},
    {"palette": ("red", "red", "blue")},
    {"max_attempts": 0},
])
def test_invalid_board_config(kwargs):
    with pytest.raises(ValueError):
        BoardConfig(**kwargs)


def test_from_mapping_accepts_palette_size():
    config = BoardConfig.from_mapping({"rows": 6, "cols": 9, "palette": 3, "seed": 17})
    assert config.palette == ("red", "blue", "green")
    assert config.seed == 17
    assert config.cols == 9


def test_from_mapping_accepts_nested_ruleset():
    config = BoardConfig.from_mapping({"ruleset": {"four_match_special": "line-clear", "base_points": 5}})
    assert config.ruleset.four_match_special is SpecialKind.LINE_CLEAR
    assert config.ruleset.base_points == 5


def test_from_mapping_rejects_unknown_keys_and_bad_sizes():
    with pytest.raises(ValueError):
        BoardConfig.from_mapping({"rows": 8, "colour_count": 5})
    with pytest.raises(ValueError):
        BoardConfig.from_mapping({"palette": 9})


def test_ruleset_validation():
    with pytest.raises(ValueError):
        Ruleset(combo_ceiling=1)
    with pytest.raises(ValueError):
        Ruleset(base_points=-1)
    with pytest.raises(ValueError):
        Ruleset(four_match_special=SpecialKind.COLOR_BOMB)
