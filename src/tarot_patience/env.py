"""
Observation / action encoding and a Gym-like environment for the patience.

Action space (fixed size, NUM_ACTIONS = 145):
  - 0            : distribute
  - 1            : merge the trump foundations
  - 2..12        : auto-place the top card of column i
  - 13..23       : Excuse slot -> column i
  - 24..144      : column i -> column j (24 + i * 11 + j), moving the longest
                   run whose head fits column j

Observations are flat float32 numpy vectors:
  - 78 × 18 one-hot of every *visible* card's location (11 columns,
    6 foundations, Excuse slot). Face-down cards are not identified.
  - 11 face-down counts per column (scaled by the tallest initial column)
  - stock size (scaled by the initial stock size)
  - trumps-merged flag
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .board import NUM_COLUMNS, NUM_FOUNDATIONS, STOCK_SIZE, COLUMN_SIZES, BoardState, new_board
from .deck import NUM_CARDS, card_index
from .engine import (
    Outcome,
    Transition,
    try_auto_place,
    try_distribute,
    try_merge_trump_foundations,
)
from .moves import MOVE_FROM_SLOT, MOVE_RUN, Move, apply_move, run_starts
from .rules import (
    STRICT_RULES,
    RulesConfig,
    can_merge,
    can_place_on_column,
    eligible_columns,
    find_foundation,
)

ACTION_DISTRIBUTE: int = 0
ACTION_MERGE: int = 1
AUTO_PLACE_OFFSET: int = 2
FROM_SLOT_OFFSET: int = AUTO_PLACE_OFFSET + NUM_COLUMNS                  # 13
RUN_MOVE_OFFSET: int = FROM_SLOT_OFFSET + NUM_COLUMNS                    # 24
NUM_ACTIONS: int = RUN_MOVE_OFFSET + NUM_COLUMNS * NUM_COLUMNS           # 145

NUM_LOCATIONS: int = NUM_COLUMNS + NUM_FOUNDATIONS + 1                   # 18
EXCUSE_SLOT_LOCATION: int = NUM_COLUMNS + NUM_FOUNDATIONS
OBS_DIM: int = NUM_CARDS * NUM_LOCATIONS + NUM_COLUMNS + 2               # 1417

WIN_BONUS: float = 10.0


def run_move_action(source: int, target: int) -> int:
    return RUN_MOVE_OFFSET + source * NUM_COLUMNS + target


def describe_action(action: int) -> str:
    """Human-readable label for an action index (used in CLI traces)."""
    if action == ACTION_DISTRIBUTE:
        return "distribute"
    if action == ACTION_MERGE:
        return "merge"
    if AUTO_PLACE_OFFSET <= action < FROM_SLOT_OFFSET:
        return f"auto-place col{action - AUTO_PLACE_OFFSET}"
    if FROM_SLOT_OFFSET <= action < RUN_MOVE_OFFSET:
        return f"excuse -> col{action - FROM_SLOT_OFFSET}"
    if RUN_MOVE_OFFSET <= action < NUM_ACTIONS:
        src, dst = divmod(action - RUN_MOVE_OFFSET, NUM_COLUMNS)
        return f"col{src} -> col{dst}"
    raise ValueError(f"Invalid action {action}")


def encode_observation(state: BoardState) -> np.ndarray:
    """Flat observation vector of size OBS_DIM (see module docstring)."""
    grid = np.zeros((NUM_CARDS, NUM_LOCATIONS), dtype=np.float32)
    hidden = np.zeros(NUM_COLUMNS, dtype=np.float32)

    for ci, col in enumerate(state.columns):
        for card in col:
            if card.face_up:
                grid[card_index(card), ci] = 1.0
            else:
                hidden[ci] += 1.0
    for fi, pile in enumerate(state.foundations):
        for card in pile:
            grid[card_index(card), NUM_COLUMNS + fi] = 1.0
    if state.excuse_slot is not None:
        grid[card_index(state.excuse_slot), EXCUSE_SLOT_LOCATION] = 1.0

    extras = np.array(
        [len(state.stock) / float(STOCK_SIZE), 1.0 if state.trumps_merged else 0.0],
        dtype=np.float32,
    )
    return np.concatenate([grid.reshape(-1), hidden / float(max(COLUMN_SIZES)), extras])


def _can_auto_place(state: BoardState, column: int) -> bool:
    top = state.top(column)
    if top is None or not top.face_up:
        return False
    if top.is_excuse():
        return state.excuse_slot is None
    return find_foundation(top, state.foundations, state.trumps_merged) is not None


def legal_action_mask(state: BoardState, rules: RulesConfig = STRICT_RULES) -> List[bool]:
    """Boolean mask over the action space; all False once the game is over."""
    mask = [False] * NUM_ACTIONS
    if state.game_over:
        return mask
    mask[ACTION_DISTRIBUTE] = bool(state.stock) and bool(eligible_columns(state, rules))
    mask[ACTION_MERGE] = can_merge(state.foundations, state.trumps_merged)
    for i in range(NUM_COLUMNS):
        mask[AUTO_PLACE_OFFSET + i] = _can_auto_place(state, i)
        if state.excuse_slot is not None:
            mask[FROM_SLOT_OFFSET + i] = can_place_on_column(state.excuse_slot, state.columns[i], rules)
        for j in range(NUM_COLUMNS):
            if i != j and run_starts(state, i, j, rules):
                mask[run_move_action(i, j)] = True
    return mask


def apply_action(state: BoardState, action: int, rules: RulesConfig = STRICT_RULES) -> Transition:
    """Translate an action index into engine calls."""
    if action == ACTION_DISTRIBUTE:
        return try_distribute(state, rules)
    if action == ACTION_MERGE:
        return try_merge_trump_foundations(state)
    if AUTO_PLACE_OFFSET <= action < FROM_SLOT_OFFSET:
        return try_auto_place(state, action - AUTO_PLACE_OFFSET)
    if FROM_SLOT_OFFSET <= action < RUN_MOVE_OFFSET:
        return apply_move(state, Move(MOVE_FROM_SLOT, target=action - FROM_SLOT_OFFSET), rules)
    if RUN_MOVE_OFFSET <= action < NUM_ACTIONS:
        src, dst = divmod(action - RUN_MOVE_OFFSET, NUM_COLUMNS)
        starts = run_starts(state, src, dst, rules)
        if not starts:
            return Transition(state, Outcome.ILLEGAL_TARGET)
        return apply_move(state, Move(MOVE_RUN, source=src, card_index=starts[0], target=dst), rules)
    raise ValueError(f"Invalid action {action}")


@dataclass
class StepResult:
    """Container returned by PatienceEnv.step/reset."""

    obs: np.ndarray
    reward: float
    done: bool
    info: dict
    legal_actions_mask: List[bool]


class PatienceEnv:
    """
    Single-player patience environment (one game per episode).

    Public API (minimal, Gym-like but without external dependency):
      - reset() -> StepResult
      - step(action: int) -> StepResult

    Reward is the change in the number of retired cards (foundations + Excuse
    slot) over the step, so taking the Excuse back out costs 1; WIN_BONUS is
    added when the game is won. The episode ends on a win,
    when no action is legal, or after ``max_steps`` steps.
    """

    def __init__(
        self,
        rules: RulesConfig = STRICT_RULES,
        max_steps: int = 1_000,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.rules = rules
        self.max_steps = max_steps
        self.rng = rng or random.Random()
        self.state: Optional[BoardState] = None
        self._steps: int = 0

    def reset(self) -> StepResult:
        """Deal a new game and return the first decision point."""
        self.state = new_board(rng=self.rng)
        self._steps = 0
        return self._result(0.0, Outcome.ACCEPTED)

    def step(self, action: int) -> StepResult:
        if self.state is None:
            raise RuntimeError("Call reset() before step()")
        if not 0 <= action < NUM_ACTIONS:
            raise ValueError(f"Invalid action {action}")
        if not legal_action_mask(self.state, self.rules)[action]:
            raise ValueError(f"Illegal action {action} ({describe_action(action)})")

        before = self.state.placed_count()
        transition = apply_action(self.state, action, self.rules)
        self.state = transition.state
        self._steps += 1

        reward = float(self.state.placed_count() - before)
        if self.state.game_over:
            reward += WIN_BONUS
        return self._result(reward, transition.outcome)

    def _result(self, reward: float, outcome: Outcome) -> StepResult:
        state = self.state
        mask = legal_action_mask(state, self.rules)
        done = state.game_over or not any(mask) or self._steps >= self.max_steps
        info = {
            "won": state.game_over,
            "moves": state.moves,
            "steps": self._steps,
            "placed": state.placed_count(),
            "outcome": outcome.value,
        }
        return StepResult(
            obs=encode_observation(state),
            reward=reward,
            done=done,
            info=info,
            legal_actions_mask=mask,
        )


__all__ = [
    "ACTION_DISTRIBUTE",
    "ACTION_MERGE",
    "AUTO_PLACE_OFFSET",
    "FROM_SLOT_OFFSET",
    "RUN_MOVE_OFFSET",
    "NUM_ACTIONS",
    "OBS_DIM",
    "PatienceEnv",
    "StepResult",
    "apply_action",
    "describe_action",
    "encode_observation",
    "legal_action_mask",
    "run_move_action",
]
