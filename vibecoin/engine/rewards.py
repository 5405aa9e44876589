"""
Reward table for poker hands.
Maps each hand type to its display name, fee discount and strength.
"""

from dataclasses import dataclass
from enum import Enum


class HandType(Enum):
    """Poker hand types, strongest first."""
    ROYAL_FLUSH = "royal-flush"
    STRAIGHT_FLUSH = "straight-flush"
    FOUR_OF_A_KIND = "four-of-a-kind"
    FULL_HOUSE = "full-house"
    FLUSH = "flush"
    STRAIGHT = "straight"
    THREE_OF_A_KIND = "three-of-a-kind"
    TWO_PAIR = "two-pair"
    PAIR = "pair"
    HIGH_CARD = "high-card"
    NO_HAND = "no-hand"


@dataclass(frozen=True)
class HandReward:
    name: str
    description: str
    fee_discount: int  # percent, 0-50
    strength: int      # 0-100


HAND_REWARDS = {
    HandType.ROYAL_FLUSH: HandReward(
        "Royal Flush", "5 tokens, same category, A-K-Q-J-10", 50, 100),
    HandType.STRAIGHT_FLUSH: HandReward(
        "Straight Flush", "5 sequential ranks, same category", 40, 90),
    HandType.FOUR_OF_A_KIND: HandReward(
        "Four of a Kind", "4 tokens with same rank", 35, 80),
    HandType.FULL_HOUSE: HandReward(
        "Full House", "3 of one rank + 2 of another", 25, 70),
    HandType.FLUSH: HandReward(
        "Flush", "5 tokens, same category", 20, 60),
    HandType.STRAIGHT: HandReward(
        "Straight", "5 sequential ranks", 15, 50),
    HandType.THREE_OF_A_KIND: HandReward(
        "Three of a Kind", "3 tokens with same rank", 10, 40),
    HandType.TWO_PAIR: HandReward(
        "Two Pair", "2 different pairs", 7, 30),
    HandType.PAIR: HandReward(
        "Pair", "2 tokens with same rank", 5, 20),
    HandType.HIGH_CARD: HandReward(
        "High Card", "Your highest ranked card", 2, 10),
    HandType.NO_HAND: HandReward(
        "No Hand", "Hold tokens to form a hand", 0, 0),
}

# (minimum strength, tier)
STRENGTH_TIERS = [
    (90, "legendary"),
    (70, "epic"),
    (50, "rare"),
    (30, "uncommon"),
    (10, "common"),
]


def get_reward(hand_type: HandType) -> HandReward:
    return HAND_REWARDS[hand_type]


def format_hand_name(hand_type: HandType) -> str:
    return HAND_REWARDS[hand_type].name


def hand_tier(hand_type: HandType) -> str:
    """Display tier for a hand, bucketed by strength."""
    strength = HAND_REWARDS[hand_type].strength
    for minimum, tier in STRENGTH_TIERS:
        if strength >= minimum:
            return tier
    return "none"


def hand_types_by_strength() -> list[HandType]:
    return sorted(HAND_REWARDS, key=lambda ht: HAND_REWARDS[ht].strength, reverse=True)
