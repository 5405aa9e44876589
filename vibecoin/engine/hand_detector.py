"""
Hand detection for the Vibecoin engine.
Finds the strongest poker hand among a portfolio's cards.
"""

from dataclasses import dataclass

from .cards import Card, Holding, holdings_to_cards
from .rewards import HandType, get_reward

HAND_SIZE = 5
ROYAL_VALUES = [14, 13, 12, 11, 10]
WHEEL_VALUES = [5, 4, 3, 2, 14]


@dataclass(frozen=True)
class HandResult:
    """Result of hand detection."""
    type: HandType
    name: str
    description: str
    fee_discount: int
    strength: int
    cards: tuple[Card, ...] = ()  # Cards that form the hand, at most 5

    @property
    def card_total(self) -> int:
        """Sum of cited rank values, used to order equal-strength hands."""
        return sum(c.rank_value for c in self.cards)

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "name": self.name,
            "description": self.description,
            "fee_discount": self.fee_discount,
            "strength": self.strength,
            "cards": [str(c) for c in self.cards],
        }


def _without(cards: list[Card], used: list[Card]) -> list[Card]:
    # Identity, not equality: two holdings of the same token compare equal.
    used_ids = {id(c) for c in used}
    return [c for c in cards if id(c) not in used_ids]


def _group(cards: list[Card], key) -> dict:
    groups = {}
    for card in cards:
        groups.setdefault(key(card), []).append(card)
    return groups


class HandDetector:
    """Detects the best poker hand from a set of cards."""

    def detect(self, cards: list[Card]) -> HandResult:
        """Detect the best hand. Total: empty input gives NO_HAND."""
        if not cards:
            return self._make_result(HandType.NO_HAND, [])

        # Stable sort keeps input order among equal ranks
        ordered = sorted(cards, key=lambda c: c.rank_value, reverse=True)
        rank_groups = _group(ordered, lambda c: c.rank_value)  # descending rank order
        suit_groups = _group(ordered, lambda c: c.suit)
        flush_groups = [g for g in suit_groups.values() if len(g) >= HAND_SIZE]

        for suit_cards in flush_groups:
            royal = self._pick_values(suit_cards, ROYAL_VALUES)
            if royal:
                return self._make_result(HandType.ROYAL_FLUSH, royal)

        best_run = None
        for suit_cards in flush_groups:
            run = self._check_straight(suit_cards)
            if run and (best_run is None or run[0].rank_value > best_run[0].rank_value):
                best_run = run
        if best_run:
            return self._make_result(HandType.STRAIGHT_FLUSH, best_run)

        quads = self._of_a_kind(rank_groups, 4)
        if quads:
            kicker = _without(ordered, quads)[:1]
            return self._make_result(HandType.FOUR_OF_A_KIND, quads + kicker)

        trips = self._of_a_kind(rank_groups, 3)
        if trips:
            rest = _without(ordered, trips)
            pair = self._of_a_kind(_group(rest, lambda c: c.rank_value), 2)
            if pair:
                return self._make_result(HandType.FULL_HOUSE, trips + pair)

        if flush_groups:
            flush = max((g[:HAND_SIZE] for g in flush_groups),
                        key=lambda g: [c.rank_value for c in g])
            return self._make_result(HandType.FLUSH, flush)

        straight = self._check_straight(ordered)
        if straight:
            return self._make_result(HandType.STRAIGHT, straight)

        if trips:
            kickers = _without(ordered, trips)[:2]
            return self._make_result(HandType.THREE_OF_A_KIND, trips + kickers)

        pairs = [g[:2] for g in rank_groups.values() if len(g) >= 2]
        if len(pairs) >= 2:
            top_pairs = pairs[0] + pairs[1]
            kicker = _without(ordered, top_pairs)[:1]
            return self._make_result(HandType.TWO_PAIR, top_pairs + kicker)

        if pairs:
            kickers = _without(ordered, pairs[0])[:3]
            return self._make_result(HandType.PAIR, pairs[0] + kickers)

        return self._make_result(HandType.HIGH_CARD, ordered[:HAND_SIZE])

    def _of_a_kind(self, rank_groups: dict, n: int) -> list[Card]:
        """First n cards of the highest rank holding at least n cards."""
        for value in sorted(rank_groups, reverse=True):
            if len(rank_groups[value]) >= n:
                return rank_groups[value][:n]
        return []

    def _pick_values(self, cards: list[Card], values: list[int]) -> list[Card]:
        """One card per requested rank value, or [] if any is missing."""
        by_value = {}
        for card in cards:
            by_value.setdefault(card.rank_value, card)
        if not all(v in by_value for v in values):
            return []
        return [by_value[v] for v in values]

    def _check_straight(self, cards: list[Card]) -> list[Card]:
        """Highest 5-card run among cards sorted high to low; the wheel ranks lowest."""
        by_value = {}
        for card in cards:
            by_value.setdefault(card.rank_value, card)

        for top in sorted(by_value, reverse=True):
            run = [top - i for i in range(HAND_SIZE)]
            if all(v in by_value for v in run):
                return [by_value[v] for v in run]

        return self._pick_values(cards, WHEEL_VALUES)

    def _make_result(self, hand_type: HandType, cards: list[Card]) -> HandResult:
        reward = get_reward(hand_type)
        return HandResult(
            type=hand_type,
            name=reward.name,
            description=reward.description,
            fee_discount=reward.fee_discount,
            strength=reward.strength,
            cards=tuple(cards),
        )


def detect_hand(cards: list[Card]) -> HandResult:
    """Convenience function to detect a hand from cards."""
    return HandDetector().detect(cards)


def evaluate_hand(holdings: list[Holding]) -> HandResult:
    """Map holdings to cards and detect the best hand."""
    return HandDetector().detect(holdings_to_cards(holdings))


def get_hand_bonus(holdings: list[Holding]) -> tuple[int, HandResult]:
    """Fee discount earned by a portfolio, with the hand behind it."""
    hand = evaluate_hand(holdings)
    return hand.fee_discount, hand
