"""
$VIBE staking tiers.
Stake size picks a tier (fee discount + XP multiplier); an optional lock
period multiplies both.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional


class StakingTier(Enum):
    NONE = "none"
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"


class LockDuration(Enum):
    NONE = "none"
    WEEK = "7d"
    MONTH = "30d"
    QUARTER = "90d"


@dataclass(frozen=True)
class TierConfig:
    tier: StakingTier
    name: str
    min_stake: float
    fee_discount: int     # percent
    xp_multiplier: float
    base_apy: float       # percent
    benefits: tuple = ()


@dataclass(frozen=True)
class LockConfig:
    duration: LockDuration
    label: str
    days: int
    bonus_multiplier: float
    description: str


# Lowest first
STAKING_TIERS = [
    TierConfig(StakingTier.NONE, "No Stake", 0, 0, 1.0, 0,
               ("Basic trading access",)),
    TierConfig(StakingTier.BRONZE, "Bronze", 100, 5, 1.1, 5,
               ("5% fee discount", "1.1x XP multiplier", "Bronze badge")),
    TierConfig(StakingTier.SILVER, "Silver", 500, 10, 1.25, 8,
               ("10% fee discount", "1.25x XP multiplier", "Silver badge", "Priority support")),
    TierConfig(StakingTier.GOLD, "Gold", 1000, 15, 1.5, 12,
               ("15% fee discount", "1.5x XP multiplier", "Gold badge",
                "Early access to features", "Exclusive airdrops")),
    TierConfig(StakingTier.PLATINUM, "Platinum", 5000, 25, 2.0, 18,
               ("25% fee discount", "2x XP multiplier", "Platinum badge", "VIP support",
                "Governance voting", "Premium tournaments", "Exclusive card backs")),
]

LOCK_DURATIONS = [
    LockConfig(LockDuration.NONE, "No Lock", 0, 1.0, "Unstake anytime, no bonus"),
    LockConfig(LockDuration.WEEK, "7 Days", 7, 1.1, "+10% bonus on all benefits"),
    LockConfig(LockDuration.MONTH, "30 Days", 30, 1.25, "+25% bonus on all benefits"),
    LockConfig(LockDuration.QUARTER, "90 Days", 90, 1.5, "+50% bonus on all benefits"),
]

# (minimum streak days, bonus percent, label), highest first
STREAK_BONUSES = [
    (365, 30, "1 Year+"),
    (180, 20, "6 Months+"),
    (90, 15, "3 Months+"),
    (30, 10, "1 Month+"),
    (7, 5, "1 Week+"),
]


@dataclass
class StakingPosition:
    amount: float
    tier: StakingTier
    lock_duration: LockDuration
    fee_discount: int
    xp_multiplier: float
    total_bonus: int
    locked_at: Optional[datetime] = None
    unlocks_at: Optional[datetime] = None
    is_locked: bool = False


def _now() -> datetime:
    return datetime.now(timezone.utc)


def round_half_up(value: float, digits: int = 0) -> float:
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def get_staking_tier(amount: float) -> TierConfig:
    """Highest tier whose minimum the stake meets."""
    for config in reversed(STAKING_TIERS):
        if amount >= config.min_stake:
            return config
    return STAKING_TIERS[0]


def get_tier_config(tier: StakingTier) -> TierConfig:
    return next((t for t in STAKING_TIERS if t.tier == tier), STAKING_TIERS[0])


def get_lock_config(duration: LockDuration) -> LockConfig:
    return next((l for l in LOCK_DURATIONS if l.duration == duration), LOCK_DURATIONS[0])


def calculate_staking_position(amount: float, lock_duration: LockDuration = LockDuration.NONE,
                               locked_at: datetime = None,
                               now: datetime = None) -> StakingPosition:
    """Staking position with tier benefits scaled by the lock bonus."""
    tier = get_staking_tier(amount)
    lock = get_lock_config(lock_duration)

    fee_discount = int(round_half_up(tier.fee_discount * lock.bonus_multiplier))
    xp_multiplier = round_half_up(tier.xp_multiplier * lock.bonus_multiplier, 2)

    unlocks_at = None
    is_locked = False
    if locked_at is not None and lock_duration != LockDuration.NONE:
        unlocks_at = locked_at + timedelta(days=lock.days)
        is_locked = (now or _now()) < unlocks_at

    return StakingPosition(
        amount=amount,
        tier=tier.tier,
        lock_duration=lock_duration,
        fee_discount=fee_discount,
        xp_multiplier=xp_multiplier,
        total_bonus=int(round_half_up((xp_multiplier - 1) * 100)),
        locked_at=locked_at,
        unlocks_at=unlocks_at,
        is_locked=is_locked,
    )


def time_until_unlock(unlocks_at: datetime, now: datetime = None) -> Optional[dict]:
    """Days/hours/minutes left on a lock, or None once unlocked."""
    now = now or _now()
    if now >= unlocks_at:
        return None
    seconds = int((unlocks_at - now).total_seconds())
    days, seconds = divmod(seconds, 86400)
    hours, seconds = divmod(seconds, 3600)
    return {"days": days, "hours": hours, "minutes": seconds // 60}


def format_unlock_time(remaining: dict) -> str:
    if remaining["days"] > 0:
        return f"{remaining['days']}d {remaining['hours']}h"
    if remaining["hours"] > 0:
        return f"{remaining['hours']}h {remaining['minutes']}m"
    return f"{remaining['minutes']}m"


def get_streak_bonus(streak_days: int) -> tuple[int, str]:
    for min_days, bonus, label in STREAK_BONUSES:
        if streak_days >= min_days:
            return bonus, label
    return 0, "No bonus"


def estimate_apy(tier: StakingTier, lock_duration: LockDuration) -> float:
    return round_half_up(get_tier_config(tier).base_apy * get_lock_config(lock_duration).bonus_multiplier, 1)


def get_next_tier(tier: StakingTier) -> Optional[TierConfig]:
    index = next((i for i, t in enumerate(STAKING_TIERS) if t.tier == tier), None)
    if index is None or index >= len(STAKING_TIERS) - 1:
        return None
    return STAKING_TIERS[index + 1]


def amount_to_next_tier(amount: float) -> float:
    next_tier = get_next_tier(get_staking_tier(amount).tier)
    if next_tier is None:
        return 0
    return max(0, next_tier.min_stake - amount)


def calculate_potential_rewards(amount: float) -> list[dict]:
    """What each paid tier offers and how much more stake it needs."""
    return [
        {
            "tier": t.tier,
            "fee_discount": t.fee_discount,
            "xp_multiplier": t.xp_multiplier,
            "additional_stake_needed": max(0, t.min_stake - amount),
        }
        for t in STAKING_TIERS if t.tier != StakingTier.NONE
    ]


def format_vibe_amount(amount: float) -> str:
    if amount >= 1_000_000:
        return f"{amount / 1_000_000:.2f}M"
    if amount >= 1000:
        return f"{amount / 1000:.2f}K"
    return f"{amount:,.0f}" if float(amount).is_integer() else f"{amount:,}"
