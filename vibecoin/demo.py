#!/usr/bin/env python3
"""
Demo script for the Vibecoin engine.
Shows card mapping, hand detection, fee discounts, an arena battle and
player progression.

Run with: python -m vibecoin.demo
"""

import tempfile

from vibecoin.arena import ArenaSession, JsonSessionStore, Matchmaker
from vibecoin.engine.battles import BattleResult, BattleType
from vibecoin.engine.cards import Holding, holding_to_card
from vibecoin.engine.evolution import HoldingRecord, calculate_evolution
from vibecoin.engine.fees import calculate_trade_fees, format_fee, trade_fees_for_holdings
from vibecoin.engine.hand_detector import evaluate_hand
from vibecoin.engine.leveling import format_xp
from vibecoin.engine.quests import QuestType, format_time_remaining, time_until_weekly_reset
from vibecoin.engine.staking import (LockDuration, calculate_staking_position, estimate_apy,
                                     format_vibe_amount)
from vibecoin.leaderboards import build_hand_leaderboard, format_rank, leaderboard_frame
from vibecoin.presets import build_config
from vibecoin.simulator import Simulator
from vibecoin.tokens import load_token_source


def demo_card_mapping():
    """Demonstrate token to card mapping."""
    print("=" * 60)
    print("CARD MAPPING DEMO")
    print("=" * 60)

    source = load_token_source()
    for token in source.list_tokens()[:8]:
        print(f"  {token.name:<14} {token.category:<8} score {token.score:>5}  ->  {token.card}")


def demo_hand_detection():
    """Demonstrate hand detection."""
    print("\n" + "=" * 60)
    print("HAND DETECTION DEMO")
    print("=" * 60)

    test_portfolios = [
        # Pair
        [Holding("AI", 96), Holding("DeFi", 97), Holding("Gaming", 40)],
        # Flush
        [Holding("AI", s) for s in (96, 88, 70, 55, 20)],
        # Wheel straight
        [Holding("AI", 96), Holding("DeFi", 5), Holding("Gaming", 12),
         Holding("Creator", 17), Holding("AI", 22)],
        # Royal flush
        [Holding("Gaming", s) for s in (99, 90, 85, 80, 75)],
    ]

    for holdings in test_portfolios:
        hand = evaluate_hand(holdings)
        cards = [holding_to_card(h) for h in holdings]
        print(f"\nCards: {', '.join(str(c) for c in cards)}")
        print(f"  Hand: {hand.name} (strength {hand.strength})")
        print(f"  Cited: {', '.join(str(c) for c in hand.cards)}")
        print(f"  Fee discount: {hand.fee_discount}%")


def demo_fees():
    """Demonstrate fee discounts from hands and staking."""
    print("\n" + "=" * 60)
    print("FEES DEMO")
    print("=" * 60)

    base = calculate_trade_fees(1000, 0.05)
    print(f"\nNo discount: {format_fee(base.total_fees)} on {format_fee(base.subtotal)}")

    holdings = [Holding("AI", s) for s in (96, 88, 70, 55, 20)]
    breakdown = trade_fees_for_holdings(1000, 0.05, "buy", holdings, vibe_staked=500)
    print(f"With {breakdown.hand.name} and 500 VIBE staked: "
          f"{format_fee(breakdown.total_fees)} ({breakdown.total_discount}% off platform share)")
    print(f"  Saved: {format_fee(breakdown.savings_amount)}")

    position = calculate_staking_position(5000, LockDuration.MONTH)
    print(f"\nStaking {format_vibe_amount(position.amount)} for 30 days: "
          f"{position.tier.value} tier, {position.fee_discount}% fee discount, "
          f"{estimate_apy(position.tier, position.lock_duration)}% APY")


def demo_arena():
    """Demonstrate a battle between two sessions."""
    print("\n" + "=" * 60)
    print("ARENA DEMO")
    print("=" * 60)

    config = build_config("competitive")
    alice = ArenaSession("0xa11ce", "alice", config)
    bob = ArenaSession("0xb0b", "bob", config)

    matchmaker = Matchmaker()
    matchmaker.join(alice, BattleType.HAND_BATTLE)
    matchmaker.join(bob, BattleType.HAND_BATTLE)
    match = matchmaker.find_match(alice)
    print(f"\nMatched {alice.username} with {match.address}")

    alice_holdings = [Holding("AI", s) for s in (96, 88, 70, 55, 20)]
    bob_holdings = [Holding("DeFi", 97), Holding("Gaming", 96), Holding("Creator", 40)]
    result, mine, theirs = alice.hand_battle(alice_holdings, bob_holdings)
    print(f"  alice: {mine.name}  vs  bob: {theirs.name}  ->  {result.value}")

    battle = alice.start_battle(bob.address, BattleType.HAND_BATTLE)
    rewards = alice.complete_battle(battle.id, result, opponent_elo=bob.stats.elo)
    print(f"  ELO change: {rewards.elo_change:+d}, points: {rewards.points_earned}")
    print(f"  alice is now {alice.stats.elo} ({alice.stats.rank.value})")
    print(f"  XP earned: {rewards.xp_earned}, level {alice.level.level} "
          f"({alice.level.current_xp}/{alice.level.xp_for_level} XP)")

    with tempfile.TemporaryDirectory() as tmp:
        store = JsonSessionStore(tmp)
        alice.save(store)
        restored = ArenaSession.load(store, alice.address, config)
        print(f"  Reloaded session: {restored.stats.total_battles} battle(s), "
              f"{restored.win_rate}% win rate")

    board = build_hand_leaderboard({"0xa11ce": alice_holdings, "0xb0b": bob_holdings},
                                   current_user="0xa11ce")
    print("\nHand leaderboard:")
    for entry in board:
        print(f"  {format_rank(entry.rank):>4} {entry.address:<8} {entry.hand_name}")
    print(leaderboard_frame(board)[["address", "hand_name", "strength"]].to_string())


def demo_progression():
    """Demonstrate levels, quests and card evolution."""
    print("\n" + "=" * 60)
    print("PROGRESSION DEMO")
    print("=" * 60)

    staking = calculate_staking_position(1000, LockDuration.MONTH)
    session = ArenaSession("0xca401", "carol", xp_multiplier=staking.xp_multiplier)
    for result in (BattleResult.WIN, BattleResult.WIN, BattleResult.LOSS, BattleResult.WIN):
        battle = session.start_battle("0xb0b", BattleType.HAND_BATTLE)
        session.complete_battle(battle.id, result, opponent_elo=1200)

    print(f"\nStaking multiplier {session.xp_multiplier}x")
    for view in session.quests.quests(QuestType.WEEKLY):
        print(f"  {view.quest.name:<12} {view.progress:>5g}/{view.quest.target:<5g} {view.status.value}")
    print(f"  Claimed Warrior: +{session.claim_quest('weekly-warrior')} XP")

    level = session.level
    print(f"  Level {level.level} {level.tier.value}, {format_xp(level.total_xp)} XP total, "
          f"{level.progress:.0f}% to next")
    print(f"  Weekly reset in {format_time_remaining(time_until_weekly_reset())}")

    holding = Holding("Gaming", 65)
    for price in (1.0, 6.0, 0.3):
        evo = calculate_evolution(holding, HoldingRecord(buy_price=1.0, current_price=price))
        print(f"  {evo.base_card} at {price:g}x -> {evo.card} ({evo.effect.value})")


def demo_monte_carlo():
    """Demonstrate hand frequencies over random portfolios."""
    print("\n" + "=" * 60)
    print("MONTE CARLO SIMULATION (1000 portfolios)")
    print("=" * 60)

    sim = Simulator(seed=42)
    print(sim.run_batch(runs=1000, portfolio_size=7))


if __name__ == "__main__":
    demo_card_mapping()
    demo_hand_detection()
    demo_fees()
    demo_arena()
    demo_progression()
    demo_monte_carlo()

    print("\n" + "=" * 60)
    print("DEMO COMPLETE")
    print("=" * 60)
