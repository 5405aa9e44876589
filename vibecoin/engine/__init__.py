"""
Vibecoin engine components.
"""

from .cards import (Card, Holding, Token, Suit, RANKS, RANK_VALUES, CATEGORIES,
                    suit_for_category, rank_from_score, holdings_to_cards, composite_score)
from .rewards import HandType, HandReward, HAND_REWARDS, get_reward
from .hand_detector import HandResult, HandDetector, detect_hand, evaluate_hand, get_hand_bonus
from .fees import FeeConfig, FeeBreakdown, calculate_trade_fees, trade_fees_for_holdings
from .staking import StakingTier, LockDuration, get_staking_tier, calculate_staking_position
from .battles import (BattleConfig, BattleType, BattleResult, BattleRank, BattleStats,
                      Outcome, calculate_elo_change, compare_hands, get_battle_rank)
from .history import ArenaHistory
from .leveling import LevelingConfig, LevelTier, Progression, UserLevel, calculate_level
from .quests import QuestBoard, QuestStatus, QuestType
from .evolution import Badge, CardEffect, EvolutionConfig, HoldingRecord, calculate_evolution
