"""
Card mapping for the Vibecoin engine.
Turns token holdings into playing cards: category picks the suit,
composite score picks the rank.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Suit(Enum):
    DIAMONDS = "diamonds"
    HEARTS = "hearts"
    CLUBS = "clubs"
    SPADES = "spades"


CATEGORIES = ["AI", "DeFi", "Gaming", "Creator"]

CATEGORY_SUITS = {
    "AI": Suit.DIAMONDS,
    "DeFi": Suit.SPADES,
    "Gaming": Suit.CLUBS,
    "Creator": Suit.HEARTS,
}
DEFAULT_SUIT = Suit.DIAMONDS

RANKS = ["2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K", "A"]
RANK_VALUES = {rank: i + 2 for i, rank in enumerate(RANKS)}

# (inclusive lower bound, rank), checked top-down
SCORE_BANDS = [
    (95, "A"),
    (90, "K"),
    (85, "Q"),
    (80, "J"),
    (70, "10"),
    (60, "9"),
    (50, "8"),
    (40, "7"),
    (30, "6"),
    (20, "5"),
    (15, "4"),
    (10, "3"),
]

# Composite score weights
PRICE_WEIGHT = 0.4
VOLUME_WEIGHT = 0.3
HOLDERS_WEIGHT = 0.3


@dataclass(frozen=True)
class Holding:
    """One owned position: token category plus composite score."""
    category: str
    score: float
    token_id: Optional[str] = None


@dataclass(frozen=True)
class Card:
    rank: str
    rank_value: int
    suit: Suit
    holding: Holding

    @property
    def category(self) -> str:
        return self.holding.category

    def __str__(self) -> str:
        return f"{self.rank}{self.suit.value[0].upper()}"

    def __repr__(self) -> str:
        return self.__str__()


@dataclass
class Token:
    """A listed app token."""
    id: str
    name: str
    symbol: str
    category: str
    score: float
    price: float = 0.0
    price_change_24h: float = 0.0
    volume_24h: float = 0.0
    holders: int = 0
    market_cap: float = 0.0
    creator: str = ""
    description: str = ""

    def to_holding(self) -> Holding:
        return Holding(category=self.category, score=self.score, token_id=self.id)

    @property
    def card(self) -> Card:
        return holding_to_card(self.to_holding())

    @classmethod
    def from_dict(cls, data: dict) -> "Token":
        """Build from a listing record (camelCase keys, as served by the API)."""
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            symbol=data.get("symbol", ""),
            category=data.get("category", ""),
            score=data.get("score", 0),
            price=data.get("price", 0.0),
            price_change_24h=data.get("priceChange24h", 0.0),
            volume_24h=data.get("volume24h", 0.0),
            holders=data.get("holders", 0),
            market_cap=data.get("marketCap", 0.0),
            creator=data.get("creator", ""),
            description=data.get("description", ""),
        )


def suit_for_category(category: str) -> Suit:
    """Suit for a token category. Unknown categories fall back to diamonds."""
    return CATEGORY_SUITS.get(category, DEFAULT_SUIT)


def rank_from_score(score: float) -> str:
    """Rank for a 0-100 composite score; the highest matching band wins."""
    for lower_bound, rank in SCORE_BANDS:
        if score >= lower_bound:
            return rank
    return "2"


def holding_to_card(holding: Holding) -> Card:
    rank = rank_from_score(holding.score)
    return Card(
        rank=rank,
        rank_value=RANK_VALUES[rank],
        suit=suit_for_category(holding.category),
        holding=holding,
    )


def holdings_to_cards(holdings: list[Holding]) -> list[Card]:
    """Map holdings to cards, preserving order."""
    return [holding_to_card(h) for h in holdings]


def composite_score(price_change: float, volume: float, holders: float) -> float:
    """
    Weighted 0-100 score from three normalised sub-scores.

    Each input is expected on a 0-100 scale and is clamped into it.
    """
    def clamp(value: float) -> float:
        return max(0.0, min(100.0, float(value)))

    score = (PRICE_WEIGHT * clamp(price_change)
             + VOLUME_WEIGHT * clamp(volume)
             + HOLDERS_WEIGHT * clamp(holders))
    return round(score, 1)


def _band_floor(rank: str) -> float:
    for lower_bound, band_rank in SCORE_BANDS:
        if band_rank == rank:
            return lower_bound
    return 0


def full_deck() -> list[Card]:
    """The 52 canonical cards, each backed by a representative holding."""
    suit_categories = {suit: cat for cat, suit in CATEGORY_SUITS.items()}
    cards = []
    for suit in Suit:
        for rank in RANKS:
            holding = Holding(category=suit_categories[suit], score=_band_floor(rank),
                              token_id=f"{rank}-{suit.value}")
            cards.append(holding_to_card(holding))
    return cards
