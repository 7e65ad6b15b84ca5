"""
Baseline agents and the generic policy interface.

The small ``Policy`` protocol is the contract used by the simulation harness:
``act(obs, legal_actions_mask) -> action_index`` over the action space of
``tarot_patience.env``.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, List, Protocol, Sequence

from .env import (
    ACTION_DISTRIBUTE,
    ACTION_MERGE,
    AUTO_PLACE_OFFSET,
    FROM_SLOT_OFFSET,
    NUM_ACTIONS,
    RUN_MOVE_OFFSET,
)


class Policy(Protocol):
    """Stateless or stateful decision policy working on flat observations."""

    def act(self, obs: Sequence[float], legal_actions_mask: Iterable[bool]) -> int:
        """
        Choose an action index given an observation and a boolean legal-action mask.

        Implementations must only return indices where ``legal_actions_mask[i]`` is
        true.
        """


def _legal_indices(legal_actions_mask: Iterable[bool]) -> List[int]:
    return [i for i, ok in enumerate(legal_actions_mask) if ok]


@dataclass
class RandomAgent:
    """
    Baseline policy that samples uniformly among legal actions.

    Usage:
        agent = RandomAgent(seed=42)
        action = agent.act(obs, legal_actions_mask)
    """

    seed: int | None = None

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    def act(self, obs: Sequence[float], legal_actions_mask: Iterable[bool]) -> int:
        """Pick a random legal action given an observation and a boolean mask."""
        legal_indices = _legal_indices(legal_actions_mask)
        if not legal_indices:
            raise ValueError("No legal actions available for RandomAgent")
        return self._rng.choice(legal_indices)


@dataclass
class GreedyAgent:
    """
    Rule-of-thumb policy, in priority order: merge the trumps, retire a card,
    move a run between columns, distribute, and only then take the Excuse
    back out of its slot. Ties are broken at random.
    """

    seed: int | None = None

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    def act(self, obs: Sequence[float], legal_actions_mask: Iterable[bool]) -> int:
        legal_indices = _legal_indices(legal_actions_mask)
        if not legal_indices:
            raise ValueError("No legal actions available for GreedyAgent")
        tiers = (
            [ACTION_MERGE],
            range(AUTO_PLACE_OFFSET, FROM_SLOT_OFFSET),
            range(RUN_MOVE_OFFSET, NUM_ACTIONS),
            [ACTION_DISTRIBUTE],
        )
        legal = set(legal_indices)
        for tier in tiers:
            candidates = [a for a in tier if a in legal]
            if candidates:
                return self._rng.choice(candidates)
        return self._rng.choice(legal_indices)


AGENTS = {
    "random": RandomAgent,
    "greedy": GreedyAgent,
}


def make_agent(name: str, seed: int | None = None) -> Policy:
    try:
        return AGENTS[name](seed=seed)
    except KeyError:
        raise ValueError(f"Unknown agent {name!r}; expected one of {sorted(AGENTS)}") from None


__all__ = ["Policy", "RandomAgent", "GreedyAgent", "AGENTS", "make_agent"]
