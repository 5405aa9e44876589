"""
Battle system: hand battles, card duels and tournaments.
ELO ratings, battle ranks, rewards and bracket generation.
"""

import random
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from .cards import Token
from .hand_detector import HandResult
from .rewards import get_reward
from .staking import round_half_up


class BattleType(Enum):
    HAND_BATTLE = "hand-battle"
    CARD_DUEL = "card-duel"
    TOURNAMENT = "tournament"


class BattleStatus(Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    DECLINED = "declined"
    EXPIRED = "expired"


class BattleResult(Enum):
    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"


class Outcome(Enum):
    PLAYER1 = "player1"
    PLAYER2 = "player2"
    DRAW = "draw"


class BattleRank(Enum):
    BRONZE = "Bronze"
    SILVER = "Silver"
    GOLD = "Gold"
    PLATINUM = "Platinum"
    DIAMOND = "Diamond"
    MASTER = "Master"
    GRANDMASTER = "Grandmaster"
    LEGEND = "Legend"


# Highest first
RANK_THRESHOLDS = [
    (2400, BattleRank.LEGEND),
    (2200, BattleRank.GRANDMASTER),
    (2000, BattleRank.MASTER),
    (1800, BattleRank.DIAMOND),
    (1600, BattleRank.PLATINUM),
    (1400, BattleRank.GOLD),
    (1200, BattleRank.SILVER),
    (0, BattleRank.BRONZE),
]

BYE = "BYE"


@dataclass
class BattleConfig:
    """Tuning values for ratings and rewards."""
    k_factor: int = 32
    starting_elo: int = 1200
    matchmaking_range: int = 200
    win_points: int = 25
    loss_points: int = 5
    draw_points: int = 5
    streak_bonus_per_win: int = 5
    streak_bonus_cap: int = 50
    streak_bonus_min: int = 3
    battle_expiry_minutes: int = 30
    challenge_expiry_hours: int = 24
    history_limit: int = 50
    event_limit: int = 200  # all arena events kept per player
    # streak length -> achievement unlocked on reaching it
    streak_achievements: dict = field(default_factory=lambda: {5: "Hot Streak", 10: "Unstoppable"})


@dataclass
class BattleWager:
    type: str = "none"  # "tokens", "points" or "none"
    amount: float = 0
    token_id: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.type != "none"


@dataclass
class BattlePlayer:
    address: str
    username: Optional[str] = None
    hand: Optional[HandResult] = None
    is_ready: bool = False


@dataclass
class Battle:
    id: str
    type: BattleType
    status: BattleStatus
    challenger: BattlePlayer
    opponent: BattlePlayer
    created_at: datetime
    expires_at: datetime
    wager: Optional[BattleWager] = None
    winner: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


@dataclass
class BattleStats:
    total_battles: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    win_rate: float = 0.0
    win_streak: int = 0
    best_win_streak: int = 0
    total_wagers_won: float = 0
    total_wagers_lost: float = 0
    rank: BattleRank = BattleRank.BRONZE
    elo: int = 0


@dataclass
class BattleRewards:
    elo_change: int = 0
    points_earned: int = 0
    xp_earned: int = 0
    wager_won: Optional[float] = None
    streak_bonus: Optional[int] = None
    achievements: list[str] = field(default_factory=list)


@dataclass
class Challenge:
    id: str
    sender: str
    recipient: str
    battle_type: BattleType
    created_at: datetime
    expires_at: datetime
    wager: Optional[BattleWager] = None
    message: Optional[str] = None
    status: BattleStatus = BattleStatus.PENDING

    def is_expired(self, now: datetime = None) -> bool:
        return (now or _now()) >= self.expires_at


@dataclass
class TournamentParticipant:
    address: str
    seed: int
    username: Optional[str] = None
    is_eliminated: bool = False
    wins: int = 0
    losses: int = 0


@dataclass
class TournamentMatch:
    id: str
    player1: Optional[str] = None
    player2: Optional[str] = None
    winner: Optional[str] = None


@dataclass
class TournamentRound:
    round: int
    matches: list[TournamentMatch]


@dataclass
class Tournament:
    id: str
    name: str
    description: str = ""
    format: str = "single-elimination"
    status: str = "registration"  # "registration", "in-progress", "completed"
    entry_fee: float = 0
    prize_pool: float = 0
    max_participants: int = 16
    participants: list[TournamentParticipant] = field(default_factory=list)
    brackets: list[TournamentRound] = field(default_factory=list)
    winner: Optional[str] = None

    @property
    def is_full(self) -> bool:
        return len(self.participants) >= self.max_participants


def _now() -> datetime:
    return datetime.now(timezone.utc)


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def get_battle_rank(elo: int) -> BattleRank:
    for min_elo, rank in RANK_THRESHOLDS:
        if elo >= min_elo:
            return rank
    return BattleRank.BRONZE


def expected_score(player_elo: float, opponent_elo: float) -> float:
    """Logistic expectation of the player beating the opponent."""
    return 1 / (1 + 10 ** ((opponent_elo - player_elo) / 400))


def calculate_elo_change(winner_elo: float, loser_elo: float, is_draw: bool = False,
                         k_factor: int = 32) -> tuple[int, int]:
    """
    ELO deltas for (winner, loser).

    On a draw the "winner" is simply the first player and both move
    toward 0.5. Halves round up, so -16.5 becomes -16.
    """
    expected_winner = expected_score(winner_elo, loser_elo)
    expected_loser = 1 - expected_winner

    if is_draw:
        return (int(round_half_up(k_factor * (0.5 - expected_winner))),
                int(round_half_up(k_factor * (0.5 - expected_loser))))

    return (int(round_half_up(k_factor * (1 - expected_winner))),
            int(round_half_up(k_factor * (0 - expected_loser))))


def compare_hands(hand1: HandResult, hand2: HandResult) -> Outcome:
    """Stronger hand wins; equal strength is a draw."""
    strength1 = get_reward(hand1.type).strength
    strength2 = get_reward(hand2.type).strength
    if strength1 > strength2:
        return Outcome.PLAYER1
    if strength2 > strength1:
        return Outcome.PLAYER2
    return Outcome.DRAW


def compare_cards(card1: Token, card2: Token) -> Outcome:
    """Card duel: score, then market cap, then 24h price change."""
    for attr in ("score", "market_cap", "price_change_24h"):
        a, b = getattr(card1, attr), getattr(card2, attr)
        if a > b:
            return Outcome.PLAYER1
        if b > a:
            return Outcome.PLAYER2
    return Outcome.DRAW


def calculate_battle_rewards(result: BattleResult, wager: Optional[BattleWager],
                             current_streak: int, opponent_elo: int, player_elo: int,
                             config: BattleConfig = None) -> BattleRewards:
    """
    Rewards for one finished battle, from the player's side.

    Args:
        result: Player's result
        wager: Battle wager, if any
        current_streak: Player's win streak including this battle
        opponent_elo: Opponent rating before the battle
        player_elo: Player rating before the battle
    """
    config = config or BattleConfig()
    rewards = BattleRewards()

    if result == BattleResult.DRAW:
        change, _ = calculate_elo_change(player_elo, opponent_elo, is_draw=True,
                                         k_factor=config.k_factor)
        rewards.elo_change = change
        rewards.points_earned = config.draw_points
        return rewards

    is_win = result == BattleResult.WIN
    winner_change, loser_change = calculate_elo_change(
        player_elo if is_win else opponent_elo,
        opponent_elo if is_win else player_elo,
        k_factor=config.k_factor,
    )
    rewards.elo_change = winner_change if is_win else loser_change
    rewards.points_earned = config.win_points if is_win else config.loss_points

    if is_win and current_streak >= config.streak_bonus_min:
        rewards.streak_bonus = min(current_streak * config.streak_bonus_per_win,
                                   config.streak_bonus_cap)
        rewards.points_earned += rewards.streak_bonus

    if wager and wager.is_active:
        rewards.wager_won = wager.amount if is_win else -wager.amount

    if is_win and current_streak in config.streak_achievements:
        rewards.achievements.append(config.streak_achievements[current_streak])

    return rewards


def generate_brackets(participants: list[str], rng: random.Random = None) -> list[TournamentRound]:
    """
    Single-elimination brackets.

    The field is padded with byes to a power of two and shuffled. Players
    drawn against a bye advance immediately; later rounds start empty.
    """
    if not participants:
        return []
    rng = rng or random.Random()

    size = 1
    while size < len(participants):
        size *= 2
    slots = list(participants) + [BYE] * (size - len(participants))
    rng.shuffle(slots)

    rounds = []
    current = slots
    round_num = 1
    while len(current) > 1:
        matches = []
        for i in range(0, len(current), 2):
            p1, p2 = current[i], current[i + 1]
            winner = None
            if p1 == BYE and p2 not in (None, BYE):
                winner = p2
            elif p2 == BYE and p1 not in (None, BYE):
                winner = p1
            matches.append(TournamentMatch(
                id=f"R{round_num}-M{i // 2 + 1}",
                player1=p1 if p1 != BYE else None,
                player2=p2 if p2 != BYE else None,
                winner=winner,
            ))
        rounds.append(TournamentRound(round=round_num, matches=matches))
        current = [None] * (len(current) // 2)
        round_num += 1

    return rounds


def create_challenge(sender: str, recipient: str, battle_type: BattleType,
                     wager: BattleWager = None, message: str = None,
                     config: BattleConfig = None, now: datetime = None) -> Challenge:
    config = config or BattleConfig()
    now = now or _now()
    return Challenge(
        id=new_id("challenge"),
        sender=sender,
        recipient=recipient,
        battle_type=battle_type,
        wager=wager,
        message=message,
        created_at=now,
        expires_at=now + timedelta(hours=config.challenge_expiry_hours),
    )
