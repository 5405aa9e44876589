"""
Daily and weekly quests.

Daily quests reset at 00:00 UTC, weekly quests on Monday 00:00 UTC.
A completed quest pays its XP once, when claimed.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Optional


class QuestType(Enum):
    DAILY = "daily"
    WEEKLY = "weekly"


class QuestStatus(Enum):
    AVAILABLE = "available"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CLAIMED = "claimed"


@dataclass(frozen=True)
class QuestDefinition:
    id: str
    type: QuestType
    category: str
    name: str
    description: str
    xp_reward: int
    action: str
    target: float


DAILY_QUESTS = [
    QuestDefinition("daily-explorer", QuestType.DAILY, "explorer", "Explorer",
                    "View 3 token pages", 25, "view_token", 3),
    QuestDefinition("daily-trader", QuestType.DAILY, "trader", "Trader",
                    "Complete 1 trade", 50, "complete_trade", 1),
    QuestDefinition("daily-curator", QuestType.DAILY, "curator", "Curator",
                    "Add 2 tokens to watchlist", 25, "add_watchlist", 2),
    QuestDefinition("daily-analyst", QuestType.DAILY, "analyst", "Analyst",
                    "Check the leaderboards", 15, "view_leaderboard", 1),
]

WEEKLY_QUESTS = [
    QuestDefinition("weekly-collector", QuestType.WEEKLY, "collector", "Collector",
                    "Hold 5+ different tokens", 100, "hold_tokens", 5),
    QuestDefinition("weekly-warrior", QuestType.WEEKLY, "warrior", "Warrior",
                    "Win 3 battles", 150, "battle_wins", 3),
    QuestDefinition("weekly-achiever", QuestType.WEEKLY, "achiever", "Achiever",
                    "Unlock 1 new badge", 100, "unlock_achievement", 1),
    QuestDefinition("weekly-volume", QuestType.WEEKLY, "trader", "Volume King",
                    "Trade $500+ total volume", 200, "trade_volume", 500),
]

QUESTS_BY_ID = {q.id: q for q in DAILY_QUESTS + WEEKLY_QUESTS}

ACTION_TO_QUESTS: dict[str, list[str]] = {}
for _quest in DAILY_QUESTS + WEEKLY_QUESTS:
    ACTION_TO_QUESTS.setdefault(_quest.action, []).append(_quest.id)

# (days below which the tier applies, bonus percent, badge), lowest first
STREAK_TIERS = [
    (3, 0, None),
    (7, 10, "3-Day Streak"),
    (14, 25, "Week Warrior"),
    (30, 50, "Fortnight Force"),
]
MAX_STREAK_BONUS = (100, "Monthly Master")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def day_key(now: datetime = None) -> str:
    """UTC date as YYYY-MM-DD."""
    return (now or _now()).astimezone(timezone.utc).date().isoformat()


def week_start_key(now: datetime = None) -> str:
    """Monday of the current UTC week as YYYY-MM-DD."""
    today = (now or _now()).astimezone(timezone.utc).date()
    return (today - timedelta(days=today.weekday())).isoformat()


def _next_midnight(day: date) -> datetime:
    return datetime(day.year, day.month, day.day, tzinfo=timezone.utc) + timedelta(days=1)


def time_until_daily_reset(now: datetime = None) -> timedelta:
    now = (now or _now()).astimezone(timezone.utc)
    return _next_midnight(now.date()) - now


def time_until_weekly_reset(now: datetime = None) -> timedelta:
    now = (now or _now()).astimezone(timezone.utc)
    sunday = now.date() + timedelta(days=6 - now.weekday())
    return _next_midnight(sunday) - now


def format_time_remaining(remaining: timedelta) -> str:
    """Days and hours when a day or more is left, else hours and minutes."""
    total_minutes = int(remaining.total_seconds() // 60)
    days, rest = divmod(total_minutes, 24 * 60)
    hours, minutes = divmod(rest, 60)
    if days > 0:
        return f"{days}d {hours}h"
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def calculate_streak_bonus(consecutive_days: int) -> int:
    """Percent XP bonus for a daily quest streak."""
    for below, bonus, _ in STREAK_TIERS:
        if consecutive_days < below:
            return bonus
    return MAX_STREAK_BONUS[0]


def streak_badge(consecutive_days: int) -> Optional[str]:
    for below, _, badge in STREAK_TIERS:
        if consecutive_days < below:
            return badge
    return MAX_STREAK_BONUS[1]


def total_available_xp() -> dict:
    return {
        "daily": sum(q.xp_reward for q in DAILY_QUESTS),
        "weekly": sum(q.xp_reward for q in WEEKLY_QUESTS),
    }


@dataclass
class QuestProgress:
    quest_id: str
    current_value: float = 0
    completed: bool = False
    claimed: bool = False
    completed_at: Optional[str] = None
    claimed_at: Optional[str] = None

    @property
    def status(self) -> QuestStatus:
        if self.claimed:
            return QuestStatus.CLAIMED
        if self.completed:
            return QuestStatus.COMPLETED
        if self.current_value > 0:
            return QuestStatus.IN_PROGRESS
        return QuestStatus.AVAILABLE


@dataclass
class QuestView:
    """A quest definition merged with the player's progress."""
    quest: QuestDefinition
    progress: float
    status: QuestStatus


@dataclass
class QuestPeriod:
    """Progress for one day's or one week's quests."""
    key: str  # day_key or week_start_key
    quests: list[QuestProgress] = field(default_factory=list)
    total_xp_earned: int = 0

    @classmethod
    def fresh(cls, key: str, definitions: list[QuestDefinition]) -> "QuestPeriod":
        return cls(key=key, quests=[QuestProgress(q.id) for q in definitions])

    def find(self, quest_id: str) -> Optional[QuestProgress]:
        return next((p for p in self.quests if p.quest_id == quest_id), None)


class QuestBoard:
    """
    Tracks one player's daily and weekly quests.

    Usage:
        board = QuestBoard()
        board.record("view_token")
        xp = board.claim("daily-explorer")
    """

    def __init__(self, now: datetime = None):
        now = now or _now()
        self.daily = QuestPeriod.fresh(day_key(now), DAILY_QUESTS)
        self.weekly = QuestPeriod.fresh(week_start_key(now), WEEKLY_QUESTS)

    def refresh(self, now: datetime = None) -> bool:
        """Start new periods whose day or week has passed. Returns True on any reset."""
        now = now or _now()
        reset = False
        if self.daily.key != day_key(now):
            self.daily = QuestPeriod.fresh(day_key(now), DAILY_QUESTS)
            reset = True
        if self.weekly.key != week_start_key(now):
            self.weekly = QuestPeriod.fresh(week_start_key(now), WEEKLY_QUESTS)
            reset = True
        return reset

    def _period(self, quest_id: str) -> QuestPeriod:
        quest = QUESTS_BY_ID.get(quest_id)
        if quest is None:
            raise ValueError(f"Unknown quest: {quest_id}. Available: {sorted(QUESTS_BY_ID)}")
        return self.daily if quest.type == QuestType.DAILY else self.weekly

    def update_progress(self, quest_id: str, value: float, now: datetime = None) -> QuestProgress:
        """Set a quest's progress to value. Claimed quests are left as they are."""
        now = now or _now()
        self.refresh(now)
        progress = self._period(quest_id).find(quest_id)
        if progress.claimed:
            return progress

        progress.current_value = value
        completed = value >= QUESTS_BY_ID[quest_id].target
        if completed and not progress.completed:
            progress.completed_at = now.isoformat()
        progress.completed = completed
        return progress

    def record(self, action: str, amount: float = 1, now: datetime = None) -> list[QuestProgress]:
        """Add amount to every quest driven by action."""
        now = now or _now()
        self.refresh(now)
        updated = []
        for quest_id in ACTION_TO_QUESTS.get(action, []):
            current = self._period(quest_id).find(quest_id).current_value
            updated.append(self.update_progress(quest_id, current + amount, now))
        return updated

    def claim(self, quest_id: str, now: datetime = None) -> int:
        """Claim a completed quest. Returns the XP earned, 0 if not claimable."""
        now = now or _now()
        self.refresh(now)
        period = self._period(quest_id)
        progress = period.find(quest_id)
        if not progress.completed or progress.claimed:
            return 0

        progress.claimed = True
        progress.claimed_at = now.isoformat()
        xp = QUESTS_BY_ID[quest_id].xp_reward
        period.total_xp_earned += xp
        return xp

    def quests(self, quest_type: QuestType = None) -> list[QuestView]:
        views = []
        for period, definitions in ((self.daily, DAILY_QUESTS), (self.weekly, WEEKLY_QUESTS)):
            for quest in definitions:
                if quest_type and quest.type != quest_type:
                    continue
                progress = period.find(quest.id) or QuestProgress(quest.id)
                views.append(QuestView(quest, progress.current_value, progress.status))
        return views

    def to_dict(self) -> dict:
        return {
            "daily": _period_to_dict(self.daily),
            "weekly": _period_to_dict(self.weekly),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "QuestBoard":
        board = cls.__new__(cls)
        board.daily = _period_from_dict(data["daily"], DAILY_QUESTS)
        board.weekly = _period_from_dict(data["weekly"], WEEKLY_QUESTS)
        return board


def _period_to_dict(period: QuestPeriod) -> dict:
    return {
        "key": period.key,
        "quests": [dict(p.__dict__) for p in period.quests],
        "total_xp_earned": period.total_xp_earned,
    }


def _period_from_dict(data: dict, definitions: list[QuestDefinition]) -> QuestPeriod:
    known = {q.id for q in definitions}
    period = QuestPeriod(
        key=data["key"],
        quests=[QuestProgress(**p) for p in data.get("quests", []) if p["quest_id"] in known],
        total_xp_earned=data.get("total_xp_earned", 0),
    )
    # Quests added since the period was saved start empty
    for quest in definitions:
        if period.find(quest.id) is None:
            period.quests.append(QuestProgress(quest.id))
    return period
