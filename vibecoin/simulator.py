"""
Hand simulator.
Draws random portfolios and tallies which hands they form.
"""

import argparse
import random
from dataclasses import dataclass

import pandas as pd

from .engine.cards import Holding, full_deck
from .engine.hand_detector import HandResult, evaluate_hand
from .engine.rewards import HandType, get_reward, hand_types_by_strength
from .tokens import TokenSource, load_token_source


@dataclass
class RunSummary:
    """One random portfolio and the hand it forms."""
    holdings: list[Holding]
    hand: HandResult

    @property
    def fee_discount(self) -> int:
        return self.hand.fee_discount

    def __str__(self):
        cards = " ".join(str(c) for c in self.hand.cards) or "-"
        return f"{self.hand.name:<16} {cards:<20} -{self.fee_discount}% fees"

    def to_dict(self):
        return {
            "holdings": [h.token_id for h in self.holdings],
            "hand": self.hand.to_dict(),
            "fee_discount": self.fee_discount,
        }


@dataclass
class BatchResult:
    """Aggregated results from many random portfolios."""
    runs: int
    portfolio_size: int
    hand_distribution: dict[HandType, int]
    avg_discount: float
    avg_strength: float
    best_hand: HandType

    def __str__(self):
        lines = [
            f"{'='*50}",
            f"  BATCH RESULTS ({self.runs} portfolios of {self.portfolio_size})",
            f"{'='*50}",
            f"  Avg fee discount: {self.avg_discount:.1f}%",
            f"  Avg hand strength: {self.avg_strength:.1f}",
            f"  Best hand: {get_reward(self.best_hand).name}",
            "",
            "  Hand distribution:",
        ]

        for hand_type in hand_types_by_strength():
            count = self.hand_distribution.get(hand_type, 0)
            if not count:
                continue
            pct = count / self.runs * 100
            bar = "█" * int(pct / 2)
            lines.append(f"    {get_reward(hand_type).name:<16} {count:>5} ({pct:>5.1f}%) {bar}")

        lines.append(f"{'='*50}")
        return "\n".join(lines)

    def to_dict(self):
        return {
            "runs": self.runs,
            "portfolio_size": self.portfolio_size,
            "hand_distribution": {ht.value: n for ht, n in self.hand_distribution.items()},
            "avg_discount": self.avg_discount,
            "avg_strength": self.avg_strength,
            "best_hand": self.best_hand.value,
        }

    def to_frame(self) -> pd.DataFrame:
        """Hand distribution as a DataFrame, strongest hand first."""
        rows = []
        for hand_type in hand_types_by_strength():
            count = self.hand_distribution.get(hand_type, 0)
            reward = get_reward(hand_type)
            rows.append({
                "hand": reward.name,
                "count": count,
                "pct": count / self.runs * 100,
                "fee_discount": reward.fee_discount,
                "strength": reward.strength,
            })
        return pd.DataFrame(rows).set_index("hand")


class Simulator:
    """
    Monte Carlo hand simulator.

    Usage:
        sim = Simulator(seed=7)
        print(sim.run(portfolio_size=7))

        # Or run many:
        batch = sim.run_batch(runs=1000, portfolio_size=7)
        print(batch)
        batch.to_frame()

    With no source, portfolios are drawn from the 52-card deck.
    """

    def __init__(self, source: TokenSource = None, seed: int = None):
        self.source = source
        self.rng = random.Random(seed)
        if source is None:
            self._pool = [card.holding for card in full_deck()]
        else:
            self._pool = [token.to_holding() for token in source.list_tokens()]

    def _draw(self, portfolio_size: int) -> list[Holding]:
        if portfolio_size < 1:
            raise ValueError(f"portfolio_size must be at least 1, got {portfolio_size}")
        if portfolio_size > len(self._pool):
            raise ValueError(f"portfolio_size {portfolio_size} exceeds the "
                             f"{len(self._pool)} available holdings")
        return self.rng.sample(self._pool, portfolio_size)

    def run(self, portfolio_size: int = 5) -> RunSummary:
        holdings = self._draw(portfolio_size)
        return RunSummary(holdings=holdings, hand=evaluate_hand(holdings))

    def run_batch(self, runs: int = 100, portfolio_size: int = 5,
                  verbose: bool = False) -> BatchResult:
        """
        Draw many portfolios and aggregate their hands.

        Args:
            runs: Number of portfolios
            portfolio_size: Holdings per portfolio
            verbose: Print progress

        Returns:
            BatchResult with aggregated stats
        """
        if runs < 1:
            raise ValueError(f"runs must be at least 1, got {runs}")

        hand_distribution = {}
        total_discount = 0
        total_strength = 0
        best = None

        for i in range(runs):
            if verbose and (i + 1) % 100 == 0:
                print(f"  Run {i + 1}/{runs}...")

            summary = self.run(portfolio_size)
            hand = summary.hand

            hand_distribution[hand.type] = hand_distribution.get(hand.type, 0) + 1
            total_discount += hand.fee_discount
            total_strength += hand.strength
            if best is None or hand.strength > best.strength:
                best = hand

        return BatchResult(
            runs=runs,
            portfolio_size=portfolio_size,
            hand_distribution=hand_distribution,
            avg_discount=total_discount / runs,
            avg_strength=total_strength / runs,
            best_hand=best.type,
        )


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Simulate portfolio hands")
    parser.add_argument("--runs", type=int, default=1000, help="Number of portfolios")
    parser.add_argument("--size", type=int, default=5, help="Holdings per portfolio")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--deck", action="store_true",
                        help="Draw from the 52-card deck instead of the token fixture")
    parser.add_argument("--tokens", type=str, default=None, help="Token fixture JSON path")
    args = parser.parse_args()

    source = None if args.deck else load_token_source(args.tokens)
    sim = Simulator(source=source, seed=args.seed)
    batch = sim.run_batch(runs=args.runs, portfolio_size=args.size, verbose=True)
    print(batch)
    print()
    print(batch.to_frame().to_string())
