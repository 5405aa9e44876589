"""
Card evolution.
A held token's card climbs or drops ranks with its price since purchase,
earns badges for how it was held, and picks up a visual effect.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from .cards import RANKS, RANK_VALUES, Card, Holding, holding_to_card


class Badge(Enum):
    OG = "og"
    DIAMOND_HANDS = "diamond-hands"
    WHALE = "whale"
    DEGEN = "degen"
    LUCKY = "lucky"
    PROPHET = "prophet"
    SURVIVOR = "survivor"
    MOONSHOT = "moonshot"


class CardEffect(Enum):
    NONE = "none"
    GLOW = "glow"
    HOLOGRAPHIC = "holographic"
    GOLDEN = "golden"
    FIRE = "fire"
    ICE = "ice"
    LEGENDARY = "legendary"


@dataclass(frozen=True)
class BadgeInfo:
    name: str
    description: str
    rarity: str


BADGES = {
    Badge.OG: BadgeInfo("OG", "Among the first 100 buyers", "rare"),
    Badge.DIAMOND_HANDS: BadgeInfo("Diamond Hands", "Held for 30+ days without selling", "epic"),
    Badge.WHALE: BadgeInfo("Whale", "Top 10 holder by value", "legendary"),
    Badge.DEGEN: BadgeInfo("Degen", "10+ trades on this token", "common"),
    Badge.LUCKY: BadgeInfo("Lucky", "Bought at all-time low", "epic"),
    Badge.PROPHET: BadgeInfo("Prophet", "Bought before 10x run", "legendary"),
    Badge.SURVIVOR: BadgeInfo("Survivor", "Held through 50%+ dip", "rare"),
    Badge.MOONSHOT: BadgeInfo("Moonshot", "Rode a 100x gain", "legendary"),
}


@dataclass
class EvolutionConfig:
    """Price multiples and holding thresholds that drive evolution."""
    # (minimum price multiple, rank change), highest first
    rank_up: list = field(default_factory=lambda: [(100, 5), (50, 4), (10, 3), (5, 2), (2, 1)])
    # (maximum price multiple, rank change), lowest first
    rank_down: list = field(default_factory=lambda: [(0.1, -3), (0.25, -2), (0.5, -1)])
    diamond_hands_days: int = 30
    degen_trades: int = 10
    whale_top_n: int = 10
    og_buyer_count: int = 100
    lucky_price_ratio: float = 1.05
    prophet_multiple: float = 10
    moonshot_multiple: float = 100
    glow_multiple: float = 2
    golden_multiple: float = 10
    fire_multiple: float = 25
    legendary_multiple: float = 100


@dataclass
class HoldingRecord:
    """How a player has held one token."""
    buy_price: float
    current_price: float
    hold_days: int = 0
    trade_count: int = 0
    buyer_rank: int = 0         # 1 = first buyer; 0 = unknown
    holder_rank: int = 0        # by value; 0 = unknown
    lowest_price_ratio: float = 0  # best buy price relative to the all-time low; 0 = unknown

    @property
    def price_multiple(self) -> float:
        return self.current_price / self.buy_price if self.buy_price > 0 else 1.0


@dataclass
class EvolutionEvent:
    type: str  # "rank-up", "rank-down", "badge-earned", "effect-gained"
    description: str
    old_value: Optional[str] = None
    new_value: Optional[str] = None


@dataclass
class CardEvolution:
    base_card: Card
    card: Card
    rank_change: int
    effect: CardEffect
    badges: list[Badge]
    price_multiple: float
    events: list[EvolutionEvent] = field(default_factory=list)


def calculate_rank_change(price_multiple: float, config: EvolutionConfig = None) -> int:
    config = config or EvolutionConfig()
    for threshold, change in config.rank_up:
        if price_multiple >= threshold:
            return change
    for threshold, change in config.rank_down:
        if price_multiple <= threshold:
            return change
    return 0


def evolve_rank(base_rank: str, change: int) -> str:
    """Move base_rank by change steps, clamped to 2..A."""
    index = RANKS.index(base_rank) + change
    return RANKS[min(max(index, 0), len(RANKS) - 1)]


def evolve_card(card: Card, change: int) -> Card:
    """Same holding and suit at the evolved rank."""
    rank = evolve_rank(card.rank, change)
    return replace(card, rank=rank, rank_value=RANK_VALUES[rank])


def get_card_effect(price_multiple: float, badges=(),
                    config: EvolutionConfig = None) -> CardEffect:
    config = config or EvolutionConfig()
    if Badge.MOONSHOT in badges:
        return CardEffect.LEGENDARY
    if Badge.DIAMOND_HANDS in badges and price_multiple >= config.golden_multiple:
        return CardEffect.GOLDEN

    if price_multiple >= config.legendary_multiple:
        return CardEffect.LEGENDARY
    if price_multiple >= config.fire_multiple:
        return CardEffect.FIRE
    if price_multiple >= config.golden_multiple:
        return CardEffect.GOLDEN
    if price_multiple >= config.glow_multiple:
        return CardEffect.GLOW

    if Badge.SURVIVOR in badges:
        return CardEffect.ICE
    return CardEffect.NONE


def check_badges(record: HoldingRecord, existing=(),
                 config: EvolutionConfig = None) -> list[Badge]:
    """Existing badges plus any newly earned, in award order."""
    config = config or EvolutionConfig()
    multiple = record.price_multiple
    earned = [
        (Badge.OG, 0 < record.buyer_rank <= config.og_buyer_count),
        (Badge.DIAMOND_HANDS, record.hold_days >= config.diamond_hands_days),
        (Badge.WHALE, 0 < record.holder_rank <= config.whale_top_n),
        (Badge.DEGEN, record.trade_count >= config.degen_trades),
        (Badge.PROPHET, multiple >= config.prophet_multiple),
        (Badge.LUCKY, 0 < record.lowest_price_ratio <= config.lucky_price_ratio),
        (Badge.MOONSHOT, multiple >= config.moonshot_multiple),
    ]

    badges = list(existing)
    for badge, unlocked in earned:
        if unlocked and badge not in badges:
            badges.append(badge)
    return badges


def calculate_evolution(holding: Holding, record: HoldingRecord, existing_badges=(),
                        previous: CardEvolution = None,
                        config: EvolutionConfig = None) -> CardEvolution:
    """
    Evolve the card for a holding and list what changed since previous.

    Args:
        holding: The held token
        record: Purchase and holding details
        existing_badges: Badges already earned on this holding
        previous: Last evolution state, if any
    """
    config = config or EvolutionConfig()
    base = holding_to_card(holding)
    multiple = record.price_multiple
    change = calculate_rank_change(multiple, config)
    evolved = evolve_card(base, change)
    badges = check_badges(record, existing_badges, config)
    effect = get_card_effect(multiple, badges, config)

    events = list(previous.events) if previous else []
    if previous and previous.card.rank != evolved.rank:
        if change > previous.rank_change:
            events.append(EvolutionEvent("rank-up",
                                         f"Card evolved from {previous.card.rank} to {evolved.rank}!",
                                         previous.card.rank, evolved.rank))
        else:
            events.append(EvolutionEvent("rank-down",
                                         f"Card devolved from {previous.card.rank} to {evolved.rank}",
                                         previous.card.rank, evolved.rank))

    for badge in badges:
        if badge not in existing_badges:
            info = BADGES[badge]
            events.append(EvolutionEvent("badge-earned",
                                         f"Earned {info.name} badge: {info.description}",
                                         new_value=badge.value))

    if previous and previous.effect != effect and effect != CardEffect.NONE:
        events.append(EvolutionEvent("effect-gained", f"Card gained {effect.value} effect!",
                                     previous.effect.value, effect.value))

    return CardEvolution(
        base_card=base,
        card=evolved,
        rank_change=change,
        effect=effect,
        badges=badges,
        price_multiple=multiple,
        events=events,
    )
