import pytest

from vibecoin.presets import PRESETS, build_config, get_preset, get_preset_info, list_presets


def test_all_presets_build():
    for name in list_presets():
        config = build_config(name)
        for key, value in PRESETS[name].config_overrides.items():
            assert getattr(config, key) == value


def test_standard_uses_defaults():
    config = build_config()
    assert config.k_factor == 32
    assert config.starting_elo == 1200
    assert config.matchmaking_range == 200


def test_lookup_normalises_name():
    assert get_preset("Competitive").name == "Competitive"
    assert get_preset("nope") is None


def test_overrides_win_over_preset():
    config = build_config("casual", k_factor=8, not_a_field=1)
    assert config.k_factor == 8
    assert config.matchmaking_range == 400
    assert not hasattr(config, "not_a_field")


def test_unknown_preset_lists_choices():
    with pytest.raises(ValueError, match="Available"):
        build_config("hardcore")


def test_preset_info():
    info = get_preset_info("blitz")
    assert info["overrides"]["challenge_expiry_hours"] == 1
    assert get_preset_info("missing") is None
