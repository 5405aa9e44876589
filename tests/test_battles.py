import random
from datetime import timedelta

import pytest

from conftest import holds

from vibecoin.engine.battles import (
    BattleConfig, BattleRank, BattleResult, BattleType, BattleWager, Outcome,
    calculate_battle_rewards, calculate_elo_change, compare_cards, compare_hands,
    create_challenge, expected_score, generate_brackets, get_battle_rank,
)
from vibecoin.engine.cards import Token
from vibecoin.engine.hand_detector import evaluate_hand


def test_rank_thresholds():
    assert get_battle_rank(0) == BattleRank.BRONZE
    assert get_battle_rank(1199) == BattleRank.BRONZE
    assert get_battle_rank(1200) == BattleRank.SILVER
    assert get_battle_rank(1850) == BattleRank.DIAMOND
    assert get_battle_rank(3000) == BattleRank.LEGEND


def test_expected_score_is_symmetric():
    assert expected_score(1200, 1200) == 0.5
    assert expected_score(1400, 1200) + expected_score(1200, 1400) == pytest.approx(1)


def test_elo_change_even_match():
    assert calculate_elo_change(1200, 1200) == (16, -16)
    assert calculate_elo_change(1200, 1200, is_draw=True) == (0, 0)


def test_upset_moves_more_points():
    upset, _ = calculate_elo_change(1000, 1400)
    expected, _ = calculate_elo_change(1400, 1000)
    assert upset > expected
    assert upset == 29


def test_k_factor_scales_change():
    assert calculate_elo_change(1200, 1200, k_factor=16) == (8, -8)


def test_elo_change_rounds_halves_up():
    # 0.5 and -0.5 round to 1 and 0; 1.5 and -1.5 round to 2 and -1
    assert calculate_elo_change(1200, 1200, k_factor=1) == (1, 0)
    assert calculate_elo_change(1200, 1200, k_factor=3) == (2, -1)
    assert calculate_elo_change(1200, 1200, k_factor=33) == (17, -16)


def test_win_rewards():
    rewards = calculate_battle_rewards(BattleResult.WIN, None, 1, 1200, 1200)
    assert rewards.elo_change == 16
    assert rewards.points_earned == 25
    assert rewards.streak_bonus is None
    assert rewards.wager_won is None


def test_streak_bonus_and_achievement():
    rewards = calculate_battle_rewards(BattleResult.WIN, None, 5, 1200, 1200)
    assert rewards.streak_bonus == 25
    assert rewards.points_earned == 50
    assert rewards.achievements == ["Hot Streak"]

    capped = calculate_battle_rewards(BattleResult.WIN, None, 12, 1200, 1200)
    assert capped.streak_bonus == 50


def test_loss_forfeits_wager():
    wager = BattleWager(type="points", amount=100)
    rewards = calculate_battle_rewards(BattleResult.LOSS, wager, 0, 1200, 1200)
    assert rewards.elo_change == -16
    assert rewards.points_earned == 5
    assert rewards.wager_won == -100


def test_draw_rewards():
    rewards = calculate_battle_rewards(BattleResult.DRAW, BattleWager(type="points", amount=5),
                                       0, 1200, 1200)
    assert rewards.elo_change == 0
    assert rewards.points_earned == 5
    assert rewards.wager_won is None


def test_config_changes_rewards():
    config = BattleConfig(k_factor=40, win_points=30)
    rewards = calculate_battle_rewards(BattleResult.WIN, None, 1, 1200, 1200, config)
    assert rewards.elo_change == 20
    assert rewards.points_earned == 30


def test_compare_hands_by_strength():
    flush = evaluate_hand(holds("AS 9S 7S 4S 2S"))
    pair = evaluate_hand(holds("JS JH 3C"))
    assert compare_hands(flush, pair) == Outcome.PLAYER1
    assert compare_hands(pair, flush) == Outcome.PLAYER2


def test_equal_strength_hands_draw():
    high = evaluate_hand(holds("AS KH 3C"))
    low = evaluate_hand(holds("2S 4H 6C"))
    assert compare_hands(high, low) == Outcome.DRAW


def test_compare_cards_tie_breaks():
    a = Token("a", "A", "A", "AI", score=80, market_cap=100, price_change_24h=1)
    b = Token("b", "B", "B", "AI", score=80, market_cap=100, price_change_24h=2)
    c = Token("c", "C", "C", "AI", score=70, market_cap=900)
    assert compare_cards(a, c) == Outcome.PLAYER1
    assert compare_cards(a, b) == Outcome.PLAYER2
    assert compare_cards(a, a) == Outcome.DRAW


def test_brackets_without_byes():
    rounds = generate_brackets(["p1", "p2", "p3", "p4"], rng=random.Random(1))
    assert [len(r.matches) for r in rounds] == [2, 1]
    first = rounds[0].matches
    assert sorted([m.player1 for m in first] + [m.player2 for m in first]) == ["p1", "p2", "p3", "p4"]
    assert all(m.winner is None for m in first)
    assert rounds[1].matches[0].id == "R2-M1"


def test_brackets_advance_byes():
    rounds = generate_brackets(["p1", "p2", "p3"], rng=random.Random(7))
    assert len(rounds) == 2
    winners = [m.winner for m in rounds[0].matches if m.winner]
    assert len(winners) == 1
    assert winners[0] in ("p1", "p2", "p3")


def test_brackets_for_empty_and_single_field():
    assert generate_brackets([]) == []
    assert generate_brackets(["solo"]) == []


def test_challenge_expiry(now):
    challenge = create_challenge("0xa", "0xb", BattleType.CARD_DUEL, now=now)
    assert challenge.expires_at == now + timedelta(hours=24)
    assert not challenge.is_expired(now + timedelta(hours=23))
    assert challenge.is_expired(now + timedelta(hours=24))
