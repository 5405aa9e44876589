"""
Platform fee calculation.

Revenue streams:
1. Trading fee (1%), split between platform, creator and referrer
2. Graduation fee (2%) when a token graduates to a DEX
3. Launch fee (0.01 ETH, or free with a $VIBE stake)
4. Featured listing (0.1 ETH per day)

Fee rates are in basis points (1 bp = 0.01%).
"""

from dataclasses import dataclass, field

from .cards import Holding
from .hand_detector import HandResult, evaluate_hand

BPS = 10_000


@dataclass
class FeeConfig:
    """Fee schedule."""
    trading_platform_bps: int = 50
    trading_creator_bps: int = 30
    trading_referrer_bps: int = 20
    graduation_platform_bps: int = 100
    graduation_burn_bps: int = 100
    launch_fee: float = 0.01           # ETH
    launch_free_stake: float = 1000    # $VIBE staked for a free launch
    featured_per_day: float = 0.1      # ETH
    featured_per_week: float = 0.5     # ETH
    graduation_threshold: float = 69_000
    max_total_discount: int = 75
    # (minimum $VIBE stake, discount percent), highest first
    vibe_discounts: list = field(default_factory=lambda: [(1000, 50), (500, 25), (100, 10)])

    @property
    def trading_total_bps(self) -> int:
        return self.trading_platform_bps + self.trading_creator_bps + self.trading_referrer_bps


DEFAULT_FEE_CONFIG = FeeConfig()


@dataclass
class DiscountBreakdown:
    vibe_discount: int
    hand_discount: int
    total_discount: int


@dataclass
class FeeBreakdown:
    """Itemised fees for one trade."""
    side: str
    subtotal: float
    platform_fee: float
    creator_fee: float
    referrer_fee: float
    total_fees: float
    total: float
    platform_fee_percent: float
    creator_fee_percent: float
    referrer_fee_percent: float
    total_fee_percent: float
    vibe_discount: int
    hand_discount: int
    total_discount: int
    savings_amount: float
    hand: HandResult = None

    def to_dict(self) -> dict:
        data = {k: v for k, v in self.__dict__.items() if k != "hand"}
        if self.hand is not None:
            data["hand"] = self.hand.to_dict()
        return data


def get_vibe_discount(vibe_staked: float, config: FeeConfig = None) -> int:
    """Discount percent from a $VIBE stake."""
    config = config or DEFAULT_FEE_CONFIG
    for min_stake, discount in config.vibe_discounts:
        if vibe_staked >= min_stake:
            return discount
    return 0


def get_total_discount(vibe_staked: float, hand_discount: int,
                       config: FeeConfig = None) -> DiscountBreakdown:
    """Stake and hand discounts stack additively, capped."""
    config = config or DEFAULT_FEE_CONFIG
    vibe_discount = get_vibe_discount(vibe_staked, config)
    total = min(vibe_discount + hand_discount, config.max_total_discount)
    return DiscountBreakdown(vibe_discount, hand_discount, total)


def calculate_trade_fees(amount: float, price: float, side: str = "buy",
                         has_referrer: bool = False, vibe_staked: float = 0,
                         hand_discount: int = 0,
                         config: FeeConfig = None) -> FeeBreakdown:
    """
    Calculate the fee breakdown for a trade.

    Discounts apply to the platform share only; creator and referrer
    shares are never discounted. Without a referrer, the referrer share
    goes to the platform and is discounted with it.

    Args:
        amount: Token amount
        price: Price per token
        side: "buy" (pays subtotal + fees) or "sell" (receives subtotal - fees)
        has_referrer: Whether the trade carries a referrer
        vibe_staked: $VIBE staked by the trader
        hand_discount: Poker hand discount percent (0-50)
    """
    if side not in ("buy", "sell"):
        raise ValueError(f"Unknown trade side: {side}. Expected 'buy' or 'sell'")
    if amount < 0 or price < 0:
        raise ValueError(f"Trade amount and price must be non-negative (got {amount} @ {price})")

    config = config or DEFAULT_FEE_CONFIG
    subtotal = amount * price

    discounts = get_total_discount(vibe_staked, hand_discount, config)
    multiplier = (100 - discounts.total_discount) / 100

    # What the trader would pay with no discount, for the savings figure
    base_fee_amount = subtotal * config.trading_total_bps / BPS

    platform_bps = config.trading_platform_bps * multiplier
    creator_bps = config.trading_creator_bps
    referrer_bps = config.trading_referrer_bps if has_referrer else 0
    if not has_referrer:
        platform_bps += config.trading_referrer_bps * multiplier

    platform_fee = subtotal * platform_bps / BPS
    creator_fee = subtotal * creator_bps / BPS
    referrer_fee = subtotal * referrer_bps / BPS
    total_fees = platform_fee + creator_fee + referrer_fee

    total = subtotal + total_fees if side == "buy" else subtotal - total_fees

    return FeeBreakdown(
        side=side,
        subtotal=subtotal,
        platform_fee=platform_fee,
        creator_fee=creator_fee,
        referrer_fee=referrer_fee,
        total_fees=total_fees,
        total=total,
        platform_fee_percent=platform_bps / 100,
        creator_fee_percent=creator_bps / 100,
        referrer_fee_percent=referrer_bps / 100,
        total_fee_percent=(platform_bps + creator_bps + referrer_bps) / 100,
        vibe_discount=discounts.vibe_discount,
        hand_discount=discounts.hand_discount,
        total_discount=discounts.total_discount,
        savings_amount=base_fee_amount - total_fees,
    )


def trade_fees_for_holdings(amount: float, price: float, side: str,
                            holdings: list[Holding], **kwargs) -> FeeBreakdown:
    """Fees for a trade, discounted by the hand the trader's holdings form."""
    hand = evaluate_hand(holdings)
    breakdown = calculate_trade_fees(amount, price, side,
                                     hand_discount=hand.fee_discount, **kwargs)
    breakdown.hand = hand
    return breakdown


def calculate_graduation_fees(market_cap: float, config: FeeConfig = None) -> dict:
    config = config or DEFAULT_FEE_CONFIG
    platform_fee = market_cap * config.graduation_platform_bps / BPS
    burn_amount = market_cap * config.graduation_burn_bps / BPS
    return {
        "platform_fee": platform_fee,
        "burn_amount": burn_amount,
        "total_fee": platform_fee + burn_amount,
    }


def is_ready_to_graduate(market_cap: float, config: FeeConfig = None) -> bool:
    config = config or DEFAULT_FEE_CONFIG
    return market_cap >= config.graduation_threshold


def calculate_launch_fee(vibe_staked: float, config: FeeConfig = None) -> float:
    config = config or DEFAULT_FEE_CONFIG
    if vibe_staked >= config.launch_free_stake:
        return 0.0
    return config.launch_fee


def calculate_featured_fee(days: int, config: FeeConfig = None) -> float:
    """Featured listing cost; whole weeks use the weekly rate."""
    config = config or DEFAULT_FEE_CONFIG
    weeks, extra_days = divmod(max(0, days), 7)
    return round(weeks * config.featured_per_week + extra_days * config.featured_per_day, 4)


def format_fee(amount: float) -> str:
    if amount < 0.01:
        return "<$0.01"
    return f"${amount:.2f}"


def format_fee_percent(percent: float) -> str:
    return f"{percent:.2f}%"
