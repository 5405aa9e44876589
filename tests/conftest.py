from datetime import datetime, timezone

import pytest

from vibecoin.arena import ArenaSession
from vibecoin.engine.cards import Holding
from vibecoin.tokens import FixtureTokenSource

# A score inside each rank's band
RANK_SCORES = {
    "A": 96, "K": 91, "Q": 86, "J": 81, "10": 75, "9": 65, "8": 55,
    "7": 45, "6": 35, "5": 25, "4": 17, "3": 12, "2": 5,
}

SUIT_CATEGORIES = {"D": "AI", "S": "DeFi", "C": "Gaming", "H": "Creator"}


def hold(code: str) -> Holding:
    """Holding for a card code like "AS" or "10H"."""
    rank, suit = code[:-1], code[-1]
    return Holding(category=SUIT_CATEGORIES[suit], score=RANK_SCORES[rank], token_id=code)


def holds(codes: str) -> list[Holding]:
    return [hold(c) for c in codes.split()]


@pytest.fixture
def now():
    return datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def token_source():
    return FixtureTokenSource()


@pytest.fixture
def session():
    return ArenaSession("0xalice", "alice")


@pytest.fixture
def rival():
    return ArenaSession("0xbob", "bob")
