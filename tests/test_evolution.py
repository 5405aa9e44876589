from conftest import hold

from vibecoin.engine.cards import Suit, holding_to_card
from vibecoin.engine.evolution import (
    Badge, CardEffect, EvolutionConfig, HoldingRecord, calculate_evolution,
    calculate_rank_change, check_badges, evolve_card, evolve_rank, get_card_effect,
)
from vibecoin.engine.hand_detector import detect_hand
from vibecoin.engine.rewards import HandType


def test_rank_change_thresholds():
    multiples = [150, 60, 10, 5, 2, 1.5, 1, 0.5, 0.3, 0.25, 0.2, 0.1, 0.01]
    assert [calculate_rank_change(m) for m in multiples] == \
        [5, 4, 3, 2, 1, 0, 0, -1, -1, -2, -2, -3, -3]


def test_rank_change_uses_config():
    config = EvolutionConfig(rank_up=[(3, 1)], rank_down=[])
    assert calculate_rank_change(2.5, config) == 0
    assert calculate_rank_change(3, config) == 1
    assert calculate_rank_change(0.01, config) == 0


def test_evolve_rank_clamps():
    assert evolve_rank("10", 2) == "Q"
    assert evolve_rank("K", 3) == "A"
    assert evolve_rank("3", -3) == "2"


def test_evolved_card_keeps_suit():
    card = evolve_card(holding_to_card(hold("9H")), 2)
    assert str(card) == "JH"
    assert card.rank_value == 11
    assert card.suit == Suit.HEARTS


def test_card_effects():
    assert get_card_effect(1) == CardEffect.NONE
    assert get_card_effect(2) == CardEffect.GLOW
    assert get_card_effect(12) == CardEffect.GOLDEN
    assert get_card_effect(30) == CardEffect.FIRE
    assert get_card_effect(100) == CardEffect.LEGENDARY
    assert get_card_effect(1, [Badge.MOONSHOT]) == CardEffect.LEGENDARY
    assert get_card_effect(30, [Badge.DIAMOND_HANDS]) == CardEffect.GOLDEN
    assert get_card_effect(0.5, [Badge.SURVIVOR]) == CardEffect.ICE


def test_badges_are_awarded_once():
    record = HoldingRecord(buy_price=1, current_price=120, hold_days=45, trade_count=3,
                           buyer_rank=12, holder_rank=40, lowest_price_ratio=1.2)
    badges = check_badges(record)
    assert badges == [Badge.OG, Badge.DIAMOND_HANDS, Badge.PROPHET, Badge.MOONSHOT]
    assert check_badges(record, badges) == badges


def test_unknown_ranks_earn_nothing():
    assert check_badges(HoldingRecord(buy_price=1, current_price=1)) == []


def test_evolution_logs_changes():
    holding = hold("10S")
    first = calculate_evolution(holding, HoldingRecord(buy_price=1, current_price=12))
    assert str(first.base_card) == "10S"
    assert str(first.card) == "KS"
    assert first.rank_change == 3
    assert first.effect == CardEffect.GOLDEN
    assert first.badges == [Badge.PROPHET]
    assert [e.type for e in first.events] == ["badge-earned"]

    second = calculate_evolution(holding, HoldingRecord(buy_price=1, current_price=0.4),
                                 existing_badges=first.badges, previous=first)
    assert str(second.card) == "9S"
    assert second.effect == CardEffect.NONE
    assert second.badges == [Badge.PROPHET]
    assert [e.type for e in second.events] == ["badge-earned", "rank-down"]
    assert second.events[-1].old_value == "K"


def test_evolved_cards_form_hands():
    # Two pumped nines become jacks and join a held jack
    pumped = [calculate_evolution(hold(code), HoldingRecord(buy_price=1, current_price=5)).card
              for code in ("9S", "9H")]
    hand = detect_hand(pumped + [holding_to_card(hold("JC"))])
    assert hand.type == HandType.THREE_OF_A_KIND
