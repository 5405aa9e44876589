"""
Arena session state for battles, challenges, matchmaking and tournaments,
plus the XP and quests a player earns along the way.

An ArenaSession holds one player's arena state. Callers own it and pass it
around explicitly; persistence goes through a SessionStore.

Usage:
    store = JsonSessionStore("arena_sessions")
    session = ArenaSession.load(store, "0x1234") or ArenaSession("0x1234")
    battle = session.start_battle("0xabcd", BattleType.HAND_BATTLE)
    rewards = session.complete_battle(battle.id, BattleResult.WIN, opponent_elo=1350)
    session.save(store)
"""

import json
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

from .engine.battles import (
    Battle, BattleConfig, BattlePlayer, BattleResult, BattleRewards, BattleStats,
    BattleStatus, BattleType, BattleWager, Challenge, Outcome, Tournament,
    TournamentParticipant, calculate_battle_rewards, compare_hands,
    create_challenge, get_battle_rank, new_id,
)
from .engine.cards import Holding
from .engine.hand_detector import HandResult, evaluate_hand
from .engine.history import ArenaHistory
from .engine.leveling import LevelingConfig, Progression, UserLevel
from .engine.quests import QuestBoard


BATTLE_XP_SOURCES = {
    BattleResult.WIN: "battle_win",
    BattleResult.LOSS: "battle_loss",
    BattleResult.DRAW: "battle_draw",
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _parse(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


# --- Persistence ---

class SessionStore:
    """Key-value store for serialized sessions."""

    def get(self, key: str) -> Optional[dict]:
        raise NotImplementedError

    def put(self, key: str, value: dict) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> bool:
        raise NotImplementedError

    def keys(self) -> list[str]:
        raise NotImplementedError


class MemorySessionStore(SessionStore):

    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Optional[dict]:
        raw = self._data.get(key)
        return json.loads(raw) if raw is not None else None

    def put(self, key: str, value: dict) -> None:
        # Stored as JSON text so callers never share mutable state with the store
        self._data[key] = json.dumps(value)

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def keys(self) -> list[str]:
        return list(self._data.keys())


_SAFE_KEY = re.compile(r"[A-Za-z0-9_.-]+")


class JsonSessionStore(SessionStore):
    """
    One JSON file per key under a directory.

    Keys become file names as-is, so only letters, digits, "_", "." and "-"
    are accepted. Anything else raises ValueError rather than being rewritten.
    """

    def __init__(self, directory: str):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.fullmatch(key) or key.strip(".") == "":
            raise ValueError(f"Invalid session key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[dict]:
        path = self._path(key)
        if not path.exists():
            return None
        with open(path) as f:
            return json.load(f)

    def put(self, key: str, value: dict) -> None:
        with open(self._path(key), 'w') as f:
            json.dump(value, f, indent=2)

    def delete(self, key: str) -> bool:
        path = self._path(key)
        if path.exists():
            path.unlink()
            return True
        return False

    def keys(self) -> list[str]:
        return sorted(p.stem for p in self.directory.glob("*.json"))


# --- Serialization helpers ---

def _wager_to_dict(wager: Optional[BattleWager]) -> Optional[dict]:
    if wager is None:
        return None
    return {"type": wager.type, "amount": wager.amount, "token_id": wager.token_id}


def _wager_from_dict(data: Optional[dict]) -> Optional[BattleWager]:
    return BattleWager(**data) if data else None


def _battle_to_dict(battle: Battle) -> dict:
    return {
        "id": battle.id,
        "type": battle.type.value,
        "status": battle.status.value,
        "challenger": {"address": battle.challenger.address,
                       "username": battle.challenger.username},
        "opponent": {"address": battle.opponent.address,
                     "username": battle.opponent.username},
        "wager": _wager_to_dict(battle.wager),
        "winner": battle.winner,
        "created_at": _iso(battle.created_at),
        "started_at": _iso(battle.started_at),
        "completed_at": _iso(battle.completed_at),
        "expires_at": _iso(battle.expires_at),
    }


def _battle_from_dict(data: dict) -> Battle:
    return Battle(
        id=data["id"],
        type=BattleType(data["type"]),
        status=BattleStatus(data["status"]),
        challenger=BattlePlayer(is_ready=True, **data["challenger"]),
        opponent=BattlePlayer(is_ready=True, **data["opponent"]),
        wager=_wager_from_dict(data.get("wager")),
        winner=data.get("winner"),
        created_at=_parse(data["created_at"]),
        started_at=_parse(data.get("started_at")),
        completed_at=_parse(data.get("completed_at")),
        expires_at=_parse(data["expires_at"]),
    )


def _challenge_to_dict(challenge: Challenge) -> dict:
    return {
        "id": challenge.id,
        "sender": challenge.sender,
        "recipient": challenge.recipient,
        "battle_type": challenge.battle_type.value,
        "wager": _wager_to_dict(challenge.wager),
        "message": challenge.message,
        "status": challenge.status.value,
        "created_at": _iso(challenge.created_at),
        "expires_at": _iso(challenge.expires_at),
    }


def _challenge_from_dict(data: dict) -> Challenge:
    return Challenge(
        id=data["id"],
        sender=data["sender"],
        recipient=data["recipient"],
        battle_type=BattleType(data["battle_type"]),
        wager=_wager_from_dict(data.get("wager")),
        message=data.get("message"),
        status=BattleStatus(data["status"]),
        created_at=_parse(data["created_at"]),
        expires_at=_parse(data["expires_at"]),
    )


# --- Session ---

class ArenaSession:
    """
    Tracks one player's arena state.
    """

    def __init__(self, address: str, username: str = None, config: BattleConfig = None,
                 leveling: LevelingConfig = None, xp_multiplier: float = 1.0):
        self.address = address
        self.username = username
        self.config = config or BattleConfig()
        self.xp_multiplier = xp_multiplier  # staking tier multiplier

        self.stats = BattleStats(elo=self.config.starting_elo,
                                 rank=get_battle_rank(self.config.starting_elo))
        self.active_battle: Optional[Battle] = None

        # Challenges received from / sent to other players
        self.pending_challenges: list[Challenge] = []
        self.sent_challenges: list[Challenge] = []

        self.enrolled_tournament_ids: list[str] = []
        self.history = ArenaHistory(address=address, max_events=self.config.event_limit)
        self.progression = Progression(leveling)
        self.quests = QuestBoard()

    @property
    def win_rate(self) -> float:
        return self.stats.win_rate

    @property
    def rank(self):
        return get_battle_rank(self.stats.elo)

    @property
    def level(self) -> UserLevel:
        return self.progression.level

    # Battles

    def start_battle(self, opponent: str, battle_type: BattleType,
                     wager: BattleWager = None, now: datetime = None) -> Battle:
        """Start a battle; it replaces any unfinished active battle."""
        now = now or _now()
        battle = Battle(
            id=new_id("battle"),
            type=battle_type,
            status=BattleStatus.IN_PROGRESS,
            challenger=BattlePlayer(address=self.address, username=self.username, is_ready=True),
            opponent=BattlePlayer(address=opponent, is_ready=True),
            wager=wager,
            created_at=now,
            started_at=now,
            expires_at=now + timedelta(minutes=self.config.battle_expiry_minutes),
        )
        self.active_battle = battle
        self.history.add_battle_start(battle.id, opponent, battle_type.value,
                                      wager=_wager_to_dict(wager))
        return battle

    def complete_battle(self, battle_id: str, result: BattleResult, opponent_elo: int,
                        now: datetime = None) -> Optional[BattleRewards]:
        """
        Finish the active battle and apply rewards.

        Returns None if battle_id is not the active battle.
        """
        battle = self.active_battle
        if battle is None or battle.id != battle_id:
            return None

        now = now or _now()
        stats = self.stats
        streak = stats.win_streak + 1 if result == BattleResult.WIN else 0
        elo_before = stats.elo

        rewards = calculate_battle_rewards(result, battle.wager, streak, opponent_elo,
                                           stats.elo, self.config)

        stats.total_battles += 1
        stats.elo = max(0, stats.elo + rewards.elo_change)

        if result == BattleResult.WIN:
            stats.wins += 1
            stats.win_streak += 1
            stats.best_win_streak = max(stats.best_win_streak, stats.win_streak)
            if rewards.wager_won and rewards.wager_won > 0:
                stats.total_wagers_won += rewards.wager_won
        elif result == BattleResult.LOSS:
            stats.losses += 1
            stats.win_streak = 0
            if rewards.wager_won and rewards.wager_won < 0:
                stats.total_wagers_lost += abs(rewards.wager_won)
        else:
            stats.draws += 1

        stats.win_rate = round(stats.wins / stats.total_battles * 100, 1)
        stats.rank = get_battle_rank(stats.elo)

        rewards.xp_earned = self.progression.add_xp(
            BATTLE_XP_SOURCES[result],
            staking_multiplier=self.xp_multiplier,
            description=f"Battle vs {battle.opponent.address}",
        )
        if result == BattleResult.WIN:
            self.quests.record("battle_wins", now=now)

        battle.status = BattleStatus.COMPLETED
        battle.completed_at = now
        if result == BattleResult.WIN:
            battle.winner = battle.challenger.address
        elif result == BattleResult.LOSS:
            battle.winner = battle.opponent.address

        self.history.add_battle_result(
            battle_id=battle.id,
            opponent=battle.opponent.address,
            result=result.value,
            elo_before=elo_before,
            elo_change=rewards.elo_change,
            points_earned=rewards.points_earned,
            xp_earned=rewards.xp_earned,
            wager_won=rewards.wager_won,
            achievements=rewards.achievements,
            completed_at=_iso(now),
        )
        self.history.trim_battles(self.config.history_limit)
        self.active_battle = None
        return rewards

    def cancel_battle(self, battle_id: str) -> bool:
        if self.active_battle and self.active_battle.id == battle_id:
            self.active_battle = None
            return True
        return False

    def hand_battle(self, my_holdings: list[Holding],
                    their_holdings: list[Holding]) -> tuple[BattleResult, HandResult, HandResult]:
        """Evaluate both portfolios and return the result from this player's side."""
        mine = evaluate_hand(my_holdings)
        theirs = evaluate_hand(their_holdings)
        outcome = compare_hands(mine, theirs)
        if outcome == Outcome.PLAYER1:
            result = BattleResult.WIN
        elif outcome == Outcome.PLAYER2:
            result = BattleResult.LOSS
        else:
            result = BattleResult.DRAW
        return result, mine, theirs

    def recent_battles(self, limit: int = 10) -> list:
        return self.history.recent_battles(limit)

    # Challenges

    def send_challenge(self, to: str, battle_type: BattleType, wager: BattleWager = None,
                       message: str = None, now: datetime = None) -> Challenge:
        challenge = create_challenge(self.address, to, battle_type, wager, message,
                                     config=self.config, now=now)
        self.sent_challenges.insert(0, challenge)
        self.history.add_challenge(challenge.id, "sent", to, battle_type.value)
        return challenge

    def receive_challenge(self, challenge: Challenge) -> bool:
        """Queue an incoming challenge. Returns False if it is not addressed to us."""
        if challenge.recipient != self.address:
            return False
        if any(c.id == challenge.id for c in self.pending_challenges):
            return False
        self.pending_challenges.insert(0, challenge)
        self.history.add_challenge(challenge.id, "received", challenge.sender,
                                   challenge.battle_type.value)
        return True

    def _find_pending(self, challenge_id: str) -> Optional[Challenge]:
        return next((c for c in self.pending_challenges if c.id == challenge_id), None)

    def accept_challenge(self, challenge_id: str, now: datetime = None) -> Optional[Battle]:
        """Accept a pending challenge and start its battle."""
        now = now or _now()
        challenge = self._find_pending(challenge_id)
        if challenge is None or challenge.status != BattleStatus.PENDING:
            return None
        if challenge.is_expired(now):
            challenge.status = BattleStatus.EXPIRED
            self.history.add_challenge(challenge.id, "expired", challenge.sender)
            return None

        challenge.status = BattleStatus.ACCEPTED
        self.history.add_challenge(challenge.id, "accepted", challenge.sender,
                                   challenge.battle_type.value)
        return self.start_battle(challenge.sender, challenge.battle_type, challenge.wager, now=now)

    def decline_challenge(self, challenge_id: str) -> bool:
        challenge = self._find_pending(challenge_id)
        if challenge is None or challenge.status != BattleStatus.PENDING:
            return False
        challenge.status = BattleStatus.DECLINED
        self.history.add_challenge(challenge.id, "declined", challenge.sender)
        return True

    def cancel_challenge(self, challenge_id: str) -> bool:
        before = len(self.sent_challenges)
        self.sent_challenges = [c for c in self.sent_challenges if c.id != challenge_id]
        return len(self.sent_challenges) < before

    def expire_challenges(self, now: datetime = None) -> int:
        """Mark overdue pending challenges as expired. Returns how many changed."""
        now = now or _now()
        expired = 0
        for challenge in self.pending_challenges:
            if challenge.status == BattleStatus.PENDING and challenge.is_expired(now):
                challenge.status = BattleStatus.EXPIRED
                self.history.add_challenge(challenge.id, "expired", challenge.sender)
                expired += 1
        return expired

    # Tournaments

    def enroll(self, tournament: Tournament) -> bool:
        if tournament.status != "registration":
            return False
        if tournament.is_full:
            return False
        if tournament.id in self.enrolled_tournament_ids:
            return False

        tournament.participants.append(TournamentParticipant(
            address=self.address,
            username=self.username,
            seed=len(tournament.participants) + 1,
        ))
        self.enrolled_tournament_ids.append(tournament.id)
        self.history.add_tournament(tournament.id, "enrolled", tournament.name)
        self.progression.add_xp("tournament_participation", staking_multiplier=self.xp_multiplier,
                                description=tournament.name)
        return True

    def withdraw(self, tournament: Tournament) -> bool:
        if tournament.id not in self.enrolled_tournament_ids:
            return False
        if tournament.status != "registration":
            return False
        tournament.participants = [p for p in tournament.participants
                                   if p.address != self.address]
        self.enrolled_tournament_ids.remove(tournament.id)
        self.history.add_tournament(tournament.id, "withdrawn", tournament.name)
        return True

    # Quests

    def claim_quest(self, quest_id: str, now: datetime = None) -> int:
        """Claim a completed quest and bank its XP. Returns the XP, 0 if not claimable."""
        xp = self.quests.claim(quest_id, now=now)
        if xp:
            self.progression.add_custom_xp(xp, "quest", description=quest_id)
        return xp

    # Persistence

    def to_dict(self) -> dict:
        stats = dict(self.stats.__dict__)
        stats["rank"] = self.stats.rank.value
        return {
            "address": self.address,
            "username": self.username,
            "stats": stats,
            "active_battle": _battle_to_dict(self.active_battle) if self.active_battle else None,
            "pending_challenges": [_challenge_to_dict(c) for c in self.pending_challenges],
            "sent_challenges": [_challenge_to_dict(c) for c in self.sent_challenges],
            "enrolled_tournament_ids": list(self.enrolled_tournament_ids),
            "history": self.history.to_dict(),
            "xp_multiplier": self.xp_multiplier,
            "progression": self.progression.to_dict(),
            "quests": self.quests.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict, config: BattleConfig = None,
                  leveling: LevelingConfig = None) -> "ArenaSession":
        session = cls(data["address"], data.get("username"), config, leveling,
                      xp_multiplier=data.get("xp_multiplier", 1.0))
        stats = dict(data["stats"])
        stats["rank"] = get_battle_rank(stats.get("elo", 0))
        session.stats = BattleStats(**stats)
        if data.get("active_battle"):
            session.active_battle = _battle_from_dict(data["active_battle"])
        session.pending_challenges = [_challenge_from_dict(c) for c in data.get("pending_challenges", [])]
        session.sent_challenges = [_challenge_from_dict(c) for c in data.get("sent_challenges", [])]
        session.enrolled_tournament_ids = list(data.get("enrolled_tournament_ids", []))
        if data.get("history"):
            session.history = ArenaHistory.from_dict(data["history"],
                                                     max_events=session.config.event_limit)
        if data.get("progression"):
            session.progression = Progression.from_dict(data["progression"], leveling)
        if data.get("quests"):
            session.quests = QuestBoard.from_dict(data["quests"])
        return session

    def save(self, store: SessionStore) -> None:
        store.put(self.address, self.to_dict())

    @classmethod
    def load(cls, store: SessionStore, address: str, config: BattleConfig = None,
             leveling: LevelingConfig = None) -> Optional["ArenaSession"]:
        data = store.get(address)
        if data is None:
            return None
        return cls.from_dict(data, config, leveling)


# --- Matchmaking ---

@dataclass
class QueueEntry:
    address: str
    elo: int
    battle_type: BattleType
    joined_at: datetime
    wager: Optional[BattleWager] = None


class Matchmaker:
    """Shared matchmaking queue pairing players of similar ELO."""

    def __init__(self):
        self.queue: list[QueueEntry] = []

    def is_searching(self, address: str) -> bool:
        return any(e.address == address for e in self.queue)

    def join(self, session: ArenaSession, battle_type: BattleType,
             wager: BattleWager = None, now: datetime = None) -> bool:
        if self.is_searching(session.address):
            return False
        self.queue.append(QueueEntry(
            address=session.address,
            elo=session.stats.elo,
            battle_type=battle_type,
            wager=wager,
            joined_at=now or _now(),
        ))
        session.history.add_matchmaking("joined", session.stats.elo)
        return True

    def leave(self, address: str) -> bool:
        before = len(self.queue)
        self.queue = [e for e in self.queue if e.address != address]
        return len(self.queue) < before

    def find_match(self, session: ArenaSession) -> Optional[QueueEntry]:
        """
        Oldest queued opponent for the same battle type within the session's
        matchmaking range. Both players leave the queue on a match.
        """
        own = next((e for e in self.queue if e.address == session.address), None)
        if own is None:
            return None

        match = next(
            (e for e in self.queue
             if e.address != session.address
             and e.battle_type == own.battle_type
             and abs(e.elo - own.elo) <= session.config.matchmaking_range),
            None,
        )
        if match:
            self.queue = [e for e in self.queue
                          if e.address not in (session.address, match.address)]
            session.history.add_matchmaking("matched", own.elo, opponent=match.address)
        return match
