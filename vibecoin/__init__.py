"""
Vibecoin engine: token cards, poker hands and fee rewards.
"""

from .engine.cards import Card, Holding, Token, Suit, holding_to_card, holdings_to_cards
from .engine.rewards import HandType, HandReward, get_reward
from .engine.hand_detector import HandResult, HandDetector, detect_hand, evaluate_hand, get_hand_bonus
from .engine.leveling import Progression, calculate_level
from .engine.quests import QuestBoard
from .arena import ArenaSession, Matchmaker, MemorySessionStore, JsonSessionStore
from .presets import build_config, get_preset, list_presets
from .simulator import Simulator

__version__ = "0.1.0"
