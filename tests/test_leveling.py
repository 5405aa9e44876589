import pytest

from vibecoin.engine.leveling import (
    LEVELS, LevelingConfig, LevelTier, Progression, calculate_level,
    calculate_xp_with_multipliers, format_xp, get_level_info, is_feature_unlocked,
    prestige_label, unlocks_up_to_level,
)


def test_level_table():
    assert len(LEVELS) == 50
    assert get_level_info(1).xp_required == 100
    assert get_level_info(10).tier == LevelTier.APPRENTICE
    assert get_level_info(10).total_xp_required == 1750
    assert get_level_info(50).total_xp_required == 54250
    assert get_level_info(99).level == 50


def test_new_player_is_level_one():
    level = calculate_level(0)
    assert level.level == 1
    assert level.tier == LevelTier.NOVICE
    assert level.xp_to_next == 100
    assert level.progress == 0


def test_completing_a_level_starts_the_next():
    assert calculate_level(99).level == 1
    assert calculate_level(100).level == 2
    assert calculate_level(100).current_xp == 0

    level = calculate_level(499)
    assert (level.level, level.current_xp, level.xp_to_next) == (5, 99, 1)

    level = calculate_level(500)
    assert level.level == 6
    assert level.tier == LevelTier.APPRENTICE
    assert level.xp_for_level == 250


def test_last_level_then_prestige():
    level = calculate_level(54249)
    assert (level.level, level.prestige, level.xp_to_next) == (50, 0, 1)
    assert level.tier == LevelTier.LEGEND

    level = calculate_level(54250 + 25_000)
    assert level.level == 50
    assert level.prestige == 2
    assert level.current_xp == 5000
    assert level.progress == 50.0


def test_prestige_size_is_configurable():
    assert calculate_level(54250 + 1000, LevelingConfig(prestige_xp=500)).prestige == 2


def test_negative_xp_is_level_one():
    assert calculate_level(-40).level == 1


def test_unlocks():
    assert unlocks_up_to_level(3) == ["Basic trading", "Watchlist", "Daily quests"]
    assert not is_feature_unlocked("Battle access", 9)
    assert is_feature_unlocked("Battle access", 10)
    assert not is_feature_unlocked("Time travel", 50)


def test_xp_multipliers_round_half_up():
    assert calculate_xp_with_multipliers(30) == 30
    assert calculate_xp_with_multipliers(30, staking_multiplier=1.5) == 45
    assert calculate_xp_with_multipliers(10, staking_multiplier=1.25) == 13
    assert calculate_xp_with_multipliers(100, streak_bonus=10) == 110
    assert calculate_xp_with_multipliers(10, staking_multiplier=2, event_multiplier=1.5) == 30


def test_formatting():
    assert format_xp(950) == "950"
    assert format_xp(1500) == "1.5K"
    assert format_xp(2_500_000) == "2.5M"
    assert prestige_label(0) is None
    assert prestige_label(3) == "Prestige 3"


def test_progression_adds_xp():
    progression = Progression()
    assert progression.add_xp("battle_win", staking_multiplier=1.5) == 45
    assert progression.add_xp("daily_login") == 10
    assert progression.total_xp == 55
    assert [e.source for e in progression.history] == ["daily_login", "battle_win"]
    assert progression.level.current_xp == 55


def test_progression_rejects_unknown_source():
    with pytest.raises(ValueError, match="Unknown XP source"):
        Progression().add_xp("time_travel")
    with pytest.raises(ValueError):
        Progression().add_custom_xp(-5, "refund")


def test_progression_history_is_capped():
    progression = Progression(LevelingConfig(history_limit=3))
    for _ in range(5):
        progression.add_xp("view_token")
    assert len(progression.history) == 3
    assert progression.total_xp == 10
    assert progression.history[0].timestamp == 4


def test_custom_reward_table():
    progression = Progression(LevelingConfig(xp_rewards={"battle_win": 100}))
    assert progression.add_xp("battle_win") == 100


def test_progression_round_trip():
    progression = Progression()
    progression.add_xp("complete_trade")
    progression.add_custom_xp(150, "quest", description="weekly-warrior")

    loaded = Progression.from_dict(progression.to_dict())
    assert loaded.total_xp == 165
    assert loaded.history == progression.history
    loaded.add_xp("share_profile")
    assert loaded.history[0].timestamp == 2
