"""
Arena history tracking.
Captures battles, challenges and tournament entries for a player.
"""

from dataclasses import dataclass, asdict
from typing import Optional
import json
from pathlib import Path


@dataclass
class ArenaEvent:
    """Single event in a player's arena history."""
    event_type: str  # "battle_result", "challenge", "tournament", "matchmaking", ...
    data: dict
    battle_id: Optional[str] = None
    timestamp: int = 0  # event sequence number


class ArenaHistory:
    """Captures the arena record of one player."""

    def __init__(self, address: str, max_events: int = None):
        self.events: list[ArenaEvent] = []
        self.metadata = {"address": address}
        self.max_events = max_events  # None keeps everything
        self._event_counter = 0

    def add_event(self, event_type: str, data: dict, battle_id: str = None):
        """Add an event to the history, dropping the oldest past max_events."""
        self.events.append(ArenaEvent(
            event_type=event_type,
            data=data,
            battle_id=battle_id,
            timestamp=self._event_counter
        ))
        self._event_counter += 1
        if self.max_events is not None and len(self.events) > self.max_events:
            del self.events[:len(self.events) - self.max_events]

    def add_battle_start(self, battle_id: str, opponent: str, battle_type: str,
                         wager: dict = None):
        self.add_event(
            event_type="battle_start",
            battle_id=battle_id,
            data={
                "opponent": opponent,
                "battle_type": battle_type,
                "wager": wager,
            }
        )

    def add_battle_result(self, battle_id: str, opponent: str, result: str,
                          elo_before: int, elo_change: int, points_earned: int,
                          xp_earned: int = None, wager_won: float = None, achievements: list = None,
                          completed_at: str = None):
        """Log a finished battle."""
        data = {
            "opponent": opponent,
            "result": result,
            "elo_before": elo_before,
            "elo_change": elo_change,
            "points_earned": points_earned,
            "completed_at": completed_at,
        }
        if xp_earned is not None:
            data["xp_earned"] = xp_earned
        if wager_won is not None:
            data["wager_won"] = wager_won
        if achievements:
            data["achievements"] = achievements

        self.add_event(event_type="battle_result", battle_id=battle_id, data=data)

    def add_challenge(self, challenge_id: str, action: str, counterpart: str,
                      battle_type: str = None):
        """Log a challenge being sent, received, accepted, declined or expired."""
        self.add_event(
            event_type="challenge",
            data={
                "challenge_id": challenge_id,
                "action": action,
                "counterpart": counterpart,
                "battle_type": battle_type,
            }
        )

    def add_tournament(self, tournament_id: str, action: str, name: str = None):
        self.add_event(
            event_type="tournament",
            data={
                "tournament_id": tournament_id,
                "action": action,
                "name": name,
            }
        )

    def add_matchmaking(self, action: str, elo: int, opponent: str = None):
        self.add_event(
            event_type="matchmaking",
            data={
                "action": action,
                "elo": elo,
                "opponent": opponent,
            }
        )

    def recent_battles(self, limit: int = 10) -> list[ArenaEvent]:
        """Finished battles, newest first."""
        results = [e for e in self.events if e.event_type == "battle_result"]
        return list(reversed(results))[:limit]

    def trim_battles(self, limit: int):
        """
        Drop the oldest battle results beyond limit, with their start events.

        Starts of battles that never finished are left alone.
        """
        kept = self.recent_battles(limit)
        keep = {id(e) for e in kept}
        kept_ids = {e.battle_id for e in kept}
        finished = {e.battle_id for e in self.events if e.event_type == "battle_result"}

        def survives(event: ArenaEvent) -> bool:
            if event.event_type == "battle_result":
                return id(event) in keep
            if event.event_type == "battle_start" and event.battle_id in finished:
                return event.battle_id in kept_ids
            return True

        self.events = [e for e in self.events if survives(e)]

    def to_dict(self) -> dict:
        """Convert to dict for JSON serialization."""
        return {
            "metadata": self.metadata,
            "events": [asdict(e) for e in self.events],
            "summary": self._generate_summary()
        }

    def _generate_summary(self) -> dict:
        battles = [e for e in self.events if e.event_type == "battle_result"]
        return {
            "battles": len(battles),
            "wins": sum(1 for e in battles if e.data.get("result") == "win"),
            "losses": sum(1 for e in battles if e.data.get("result") == "loss"),
            "draws": sum(1 for e in battles if e.data.get("result") == "draw"),
            "net_elo": sum(e.data.get("elo_change", 0) for e in battles),
            "points_earned": sum(e.data.get("points_earned", 0) for e in battles),
            "challenges": sum(1 for e in self.events if e.event_type == "challenge"),
            "tournaments_entered": sum(1 for e in self.events
                                       if e.event_type == "tournament"
                                       and e.data.get("action") == "enrolled"),
        }

    @classmethod
    def from_dict(cls, data: dict, max_events: int = None) -> "ArenaHistory":
        history = cls(address=data["metadata"]["address"], max_events=max_events)
        history.metadata = data["metadata"]
        for event_data in data["events"]:
            history.events.append(ArenaEvent(**event_data))
            history._event_counter = max(history._event_counter, event_data["timestamp"] + 1)
        if max_events is not None:
            history.events = history.events[-max_events:] if max_events else []
        return history

    def save(self, filepath: str):
        """Save history to JSON."""
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: str) -> 'ArenaHistory':
        """Load history from JSON."""
        with open(filepath) as f:
            return cls.from_dict(json.load(f))
