"""
Play whole games with a policy, for agent comparison and rule-variant tuning.

Usage (from project root, after installing in editable mode):
    python -m tarot_patience.simulate --agent greedy --games 20
"""
from __future__ import annotations

import argparse
import random
from dataclasses import dataclass, field
from typing import List

from .agents import AGENTS, Policy, make_agent
from .env import PatienceEnv, StepResult
from .moves import check_invariants
from .rules import PERMISSIVE_RULES, STRICT_RULES, RulesConfig


@dataclass
class GameSummary:
    seed: int
    won: bool
    moves: int
    steps: int
    placed: int


@dataclass
class BatchSummary:
    games: List[GameSummary] = field(default_factory=list)

    @property
    def wins(self) -> int:
        return sum(1 for g in self.games if g.won)

    @property
    def win_rate(self) -> float:
        return self.wins / float(len(self.games)) if self.games else 0.0

    @property
    def mean_moves(self) -> float:
        return sum(g.moves for g in self.games) / float(len(self.games)) if self.games else 0.0

    @property
    def mean_placed(self) -> float:
        return sum(g.placed for g in self.games) / float(len(self.games)) if self.games else 0.0


def play_game(
    policy: Policy,
    seed: int,
    rules: RulesConfig = STRICT_RULES,
    max_steps: int = 1_000,
    check: bool = False,
) -> GameSummary:
    """
    Play one game dealt from ``seed``. With ``check=True`` the board invariants
    are verified after every step.
    """
    env = PatienceEnv(rules=rules, max_steps=max_steps, rng=random.Random(seed))
    step: StepResult = env.reset()
    while not step.done:
        action = policy.act(step.obs, step.legal_actions_mask)
        step = env.step(action)
        if check:
            check_invariants(env.state)

    return GameSummary(
        seed=seed,
        won=step.info["won"],
        moves=step.info["moves"],
        steps=step.info["steps"],
        placed=step.info["placed"],
    )


def run_batch(
    agent_name: str,
    games: int,
    seed: int = 0,
    rules: RulesConfig = STRICT_RULES,
    max_steps: int = 1_000,
    check: bool = False,
) -> BatchSummary:
    """Play ``games`` games with seeds ``seed``, ``seed + 1``, ..."""
    summary = BatchSummary()
    for i in range(games):
        policy = make_agent(agent_name, seed=seed + i)
        summary.games.append(play_game(policy, seed + i, rules=rules, max_steps=max_steps, check=check))
    return summary


def main() -> None:
    parser = argparse.ArgumentParser(description="Play random or greedy patience games.")
    parser.add_argument("--agent", choices=sorted(AGENTS), default="random", help="Which policy plays.")
    parser.add_argument("--games", type=int, default=10, help="Number of games to play.")
    parser.add_argument("--seed", type=int, default=42, help="Seed of the first deal.")
    parser.add_argument("--permissive", action="store_true", help="Use the permissive rule variant.")
    args = parser.parse_args()

    rules = PERMISSIVE_RULES if args.permissive else STRICT_RULES
    summary = run_batch(args.agent, args.games, seed=args.seed, rules=rules)
    print(f"{args.agent}: games={args.games} wins={summary.wins} win_rate={summary.win_rate:.2%}")


if __name__ == "__main__":
    main()
