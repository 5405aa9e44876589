"""
Leaderboards for portfolio hands and arena ratings.

Rankings are built on pandas DataFrames and returned as plain entry rows.
"""

from dataclasses import dataclass, asdict
from typing import Optional

import pandas as pd

from .engine.battles import BattleStats, get_battle_rank
from .engine.cards import Holding
from .engine.hand_detector import evaluate_hand

MEDALS = {1: "🥇", 2: "🥈", 3: "🥉"}


@dataclass
class HandLeaderboardEntry:
    rank: int
    address: str
    hand_type: str
    hand_name: str
    strength: int
    card_total: int
    fee_discount: int
    cards: list[str]
    direction: str = "new"
    change: int = 0
    is_current_user: bool = False

    @property
    def medal(self) -> Optional[str]:
        return get_medal(self.rank)


@dataclass
class BattleLeaderboardEntry:
    rank: int
    address: str
    elo: int
    battle_rank: str
    wins: int
    losses: int
    win_rate: float
    best_win_streak: int

    @property
    def medal(self) -> Optional[str]:
        return get_medal(self.rank)


def get_rank_change(current: int, previous: int = None) -> tuple[str, int]:
    """Direction ("up", "down", "same" or "new") and size of a rank move."""
    if previous is None:
        return "new", 0
    if current < previous:
        return "up", previous - current
    if current > previous:
        return "down", current - previous
    return "same", 0


def format_rank(rank: int) -> str:
    if 11 <= rank % 100 <= 13:
        return f"{rank}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(rank % 10, "th")
    return f"{rank}{suffix}"


def get_medal(rank: int) -> Optional[str]:
    return MEDALS.get(rank)


def build_hand_leaderboard(portfolios: dict[str, list[Holding]],
                           previous_ranks: dict[str, int] = None,
                           current_user: str = None) -> list[HandLeaderboardEntry]:
    """
    Rank portfolios by the hand they form.

    Ordered by hand strength, then the total rank value of the cited cards,
    then address for a stable result.
    """
    previous_ranks = previous_ranks or {}
    rows = []
    for address, holdings in portfolios.items():
        hand = evaluate_hand(holdings)
        rows.append({
            "address": address,
            "hand_type": hand.type.value,
            "hand_name": hand.name,
            "strength": hand.strength,
            "card_total": hand.card_total,
            "fee_discount": hand.fee_discount,
            "cards": [str(c) for c in hand.cards],
        })
    if not rows:
        return []

    df = pd.DataFrame(rows).sort_values(
        ["strength", "card_total", "address"],
        ascending=[False, False, True],
    ).reset_index(drop=True)
    df["rank"] = df.index + 1

    entries = []
    for row in df.to_dict("records"):
        direction, change = get_rank_change(row["rank"], previous_ranks.get(row["address"]))
        entries.append(HandLeaderboardEntry(
            direction=direction,
            change=change,
            is_current_user=row["address"] == current_user,
            **row,
        ))
    return entries


def build_battle_leaderboard(stats: dict[str, BattleStats]) -> list[BattleLeaderboardEntry]:
    """Rank players by ELO, then wins."""
    rows = [
        {
            "address": address,
            "elo": s.elo,
            "battle_rank": get_battle_rank(s.elo).value,
            "wins": s.wins,
            "losses": s.losses,
            "win_rate": s.win_rate,
            "best_win_streak": s.best_win_streak,
        }
        for address, s in stats.items()
    ]
    if not rows:
        return []

    df = pd.DataFrame(rows).sort_values(
        ["elo", "wins", "address"],
        ascending=[False, False, True],
    ).reset_index(drop=True)
    df["rank"] = df.index + 1

    return [BattleLeaderboardEntry(**row) for row in df.to_dict("records")]


def leaderboard_frame(entries: list) -> pd.DataFrame:
    """Entries as a DataFrame indexed by rank."""
    if not entries:
        return pd.DataFrame()
    return pd.DataFrame([asdict(e) for e in entries]).set_index("rank")
