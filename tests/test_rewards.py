from vibecoin.engine.rewards import (
    HAND_REWARDS, HandType, format_hand_name, get_reward, hand_tier,
)


def test_table_covers_every_hand_type():
    assert set(HAND_REWARDS) == set(HandType)


def test_discounts_track_strength():
    rewards = sorted(HAND_REWARDS.values(), key=lambda r: r.strength)
    discounts = [r.fee_discount for r in rewards]
    assert discounts == sorted(discounts)
    assert get_reward(HandType.ROYAL_FLUSH).fee_discount == 50
    assert get_reward(HandType.TWO_PAIR).fee_discount == 7
    assert get_reward(HandType.NO_HAND).fee_discount == 0


def test_hand_names():
    assert format_hand_name(HandType.FULL_HOUSE) == "Full House"
    assert format_hand_name(HandType.NO_HAND) == "No Hand"


def test_tiers():
    assert hand_tier(HandType.ROYAL_FLUSH) == "legendary"
    assert hand_tier(HandType.STRAIGHT_FLUSH) == "legendary"
    assert hand_tier(HandType.FULL_HOUSE) == "epic"
    assert hand_tier(HandType.STRAIGHT) == "rare"
    assert hand_tier(HandType.TWO_PAIR) == "uncommon"
    assert hand_tier(HandType.HIGH_CARD) == "common"
    assert hand_tier(HandType.NO_HAND) == "none"
