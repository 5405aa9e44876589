"""
Player levels and XP.

Fifty levels in seven tiers; each level must be completed with its own XP
requirement before the next one starts. Past level 50, every
`prestige_xp` earned adds a prestige.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .staking import round_half_up


class LevelTier(Enum):
    NOVICE = "Novice"
    APPRENTICE = "Apprentice"
    JOURNEYMAN = "Journeyman"
    EXPERT = "Expert"
    MASTER = "Master"
    GRANDMASTER = "Grandmaster"
    LEGEND = "Legend"


@dataclass(frozen=True)
class LevelInfo:
    level: int
    tier: LevelTier
    xp_required: int        # XP to complete this level
    total_xp_required: int  # cumulative XP to complete this level
    unlocks: tuple = ()


# (last level of the tier, tier, XP per level)
TIER_BANDS = [
    (5, LevelTier.NOVICE, 100),
    (10, LevelTier.APPRENTICE, 250),
    (20, LevelTier.JOURNEYMAN, 500),
    (30, LevelTier.EXPERT, 1000),
    (40, LevelTier.MASTER, 1500),
    (45, LevelTier.GRANDMASTER, 2000),
    (50, LevelTier.LEGEND, 2500),
]

LEVEL_UNLOCKS = {
    1: ("Basic trading", "Watchlist"),
    3: ("Daily quests",),
    5: ("Custom profile badge",),
    10: ("Weekly quests", "Battle access"),
    15: ("Tournament entry",),
    20: ("Gold card back", "Battle wagering"),
    25: ("Custom card backs",),
    30: ("Diamond card back", "Premium tournaments"),
    40: ("Legendary card back", "Title customization"),
    50: ("Prestige mode", "Exclusive cosmetics"),
}

XP_REWARDS = {
    # Daily
    "daily_login": 10,
    "view_token": 2,
    "add_watchlist": 5,
    "remove_watchlist": 0,
    # Trading
    "complete_trade": 15,
    "first_trade_of_day": 25,
    "large_trade": 50,
    # Battles
    "battle_win": 30,
    "battle_loss": 10,
    "battle_draw": 15,
    "tournament_win": 100,
    "tournament_participation": 25,
    # Achievements
    "achievement_common": 25,
    "achievement_rare": 50,
    "achievement_epic": 100,
    "achievement_legendary": 250,
    # Social
    "share_profile": 10,
    "referral_signup": 100,
    "referral_first_trade": 200,
    # Collection
    "complete_collection_set": 150,
    "unlock_card_back": 75,
}


def _build_levels() -> list[LevelInfo]:
    levels = []
    total = 0
    for level in range(1, TIER_BANDS[-1][0] + 1):
        _, tier, xp = next(band for band in TIER_BANDS if level <= band[0])
        total += xp
        levels.append(LevelInfo(level, tier, xp, total, LEVEL_UNLOCKS.get(level, ())))
    return levels


LEVELS = _build_levels()
MAX_LEVEL = len(LEVELS)


@dataclass
class LevelingConfig:
    """XP table and prestige size."""
    prestige_xp: int = 10_000
    xp_rewards: dict = field(default_factory=lambda: dict(XP_REWARDS))
    history_limit: int = 50


@dataclass
class UserLevel:
    level: int
    current_xp: int      # XP earned inside the current level (or prestige)
    xp_for_level: int    # XP that completes the current level (or prestige)
    total_xp: int
    tier: LevelTier
    prestige: int = 0

    @property
    def xp_to_next(self) -> int:
        return self.xp_for_level - self.current_xp

    @property
    def progress(self) -> float:
        """Percent of the way through the current level."""
        return self.current_xp / self.xp_for_level * 100


def get_level_info(level: int) -> LevelInfo:
    return LEVELS[min(max(level, 1), MAX_LEVEL) - 1]


def calculate_level(total_xp: int, config: LevelingConfig = None) -> UserLevel:
    config = config or LevelingConfig()
    total_xp = max(0, int(total_xp))

    completed = LEVELS[-1].total_xp_required
    if total_xp >= completed:
        over = total_xp - completed
        return UserLevel(
            level=MAX_LEVEL,
            current_xp=over % config.prestige_xp,
            xp_for_level=config.prestige_xp,
            total_xp=total_xp,
            tier=LEVELS[-1].tier,
            prestige=over // config.prestige_xp,
        )

    previous_total = 0
    for info in LEVELS:
        if total_xp < info.total_xp_required:
            return UserLevel(
                level=info.level,
                current_xp=total_xp - previous_total,
                xp_for_level=info.xp_required,
                total_xp=total_xp,
                tier=info.tier,
            )
        previous_total = info.total_xp_required


def unlocks_up_to_level(level: int) -> list[str]:
    return [feature for info in LEVELS if info.level <= level for feature in info.unlocks]


def feature_unlock_level(feature: str) -> Optional[int]:
    return next((info.level for info in LEVELS if feature in info.unlocks), None)


def is_feature_unlocked(feature: str, level: int) -> bool:
    unlock_level = feature_unlock_level(feature)
    return unlock_level is not None and level >= unlock_level


def calculate_xp_with_multipliers(base_xp: float, staking_multiplier: float = None,
                                  streak_bonus: float = None,
                                  event_multiplier: float = None) -> int:
    """
    Apply bonuses to a base XP amount.

    Args:
        base_xp: Unmodified XP
        staking_multiplier: Staking tier multiplier, e.g. 1.5
        streak_bonus: Extra percent, e.g. 10 for +10%
        event_multiplier: Limited-time event multiplier

    Returns:
        XP rounded half up
    """
    xp = base_xp
    if staking_multiplier:
        xp *= staking_multiplier
    if streak_bonus:
        xp *= 1 + streak_bonus / 100
    if event_multiplier:
        xp *= event_multiplier
    return int(round_half_up(xp))


def prestige_label(prestige: int) -> Optional[str]:
    return f"Prestige {prestige}" if prestige > 0 else None


def format_xp(xp: int) -> str:
    if xp >= 1_000_000:
        return f"{xp / 1_000_000:.1f}M"
    if xp >= 1000:
        return f"{xp / 1000:.1f}K"
    return str(xp)


# --- Progression ---

@dataclass
class XPEntry:
    source: str
    amount: int
    description: Optional[str] = None
    timestamp: int = 0  # sequence number


class Progression:
    """
    Running XP total for one player.

    Usage:
        progression = Progression()
        progression.add_xp("battle_win", staking_multiplier=1.5)
        progression.level.level
    """

    def __init__(self, config: LevelingConfig = None):
        self.config = config or LevelingConfig()
        self.total_xp = 0
        self.history: list[XPEntry] = []  # newest first
        self._counter = 0

    @property
    def level(self) -> UserLevel:
        return calculate_level(self.total_xp, self.config)

    def add_xp(self, source: str, staking_multiplier: float = None,
               streak_bonus: float = None, event_multiplier: float = None,
               description: str = None) -> int:
        """Award the XP listed for source. Returns the amount after bonuses."""
        if source not in self.config.xp_rewards:
            raise ValueError(f"Unknown XP source: {source}. "
                             f"Available: {sorted(self.config.xp_rewards)}")
        amount = calculate_xp_with_multipliers(self.config.xp_rewards[source],
                                               staking_multiplier, streak_bonus,
                                               event_multiplier)
        return self.add_custom_xp(amount, source, description)

    def add_custom_xp(self, amount: int, source: str, description: str = None) -> int:
        if amount < 0:
            raise ValueError(f"XP amount must be non-negative, got {amount}")
        self.total_xp += amount
        self.history.insert(0, XPEntry(source, amount, description, self._counter))
        del self.history[self.config.history_limit:]
        self._counter += 1
        return amount

    def to_dict(self) -> dict:
        return {
            "total_xp": self.total_xp,
            "history": [dict(e.__dict__) for e in self.history],
        }

    @classmethod
    def from_dict(cls, data: dict, config: LevelingConfig = None) -> "Progression":
        progression = cls(config)
        progression.total_xp = data.get("total_xp", 0)
        progression.history = [XPEntry(**e) for e in data.get("history", [])]
        del progression.history[progression.config.history_limit:]
        if progression.history:
            progression._counter = progression.history[0].timestamp + 1
        return progression
