from __future__ import annotations

from enum import Enum, unique

import numpy as np

from pokemon_mcts.action import Action
from pokemon_mcts.views import StateView


@unique
class BranchPolicy(str, Enum):
    """How a probabilistic resolution phase picks its outcome."""

    FIRST = "first"
    SAMPLE = "sample"


class Transition:
    """
    Advances a battle by one action through the engine's two phases:
    pre-action conditions, then post-turn conditions.

    With `BranchPolicy.FIRST` the first outcome of each phase is kept, which
    makes rollouts deterministic. With `BranchPolicy.SAMPLE` the pre-action
    outcome is drawn with the probabilities reported by the engine and the
    post-turn outcome uniformly.
    """

    def __init__(
        self,
        policy: BranchPolicy = BranchPolicy.FIRST,
        rng: np.random.Generator | None = None,
    ):
        self.policy = BranchPolicy(policy)
        self.rng = rng if rng is not None else np.random.default_rng()

    def apply(self, state: StateView, side: int, action: Action) -> StateView:
        pre_action = state.apply_pre_action_conditions(side, action, action.priority)
        if not pre_action:
            return state

        new_state = self._pick_weighted(pre_action)
        post_turn = new_state.apply_post_turn_conditions()
        if not post_turn:
            return new_state

        return self._pick_uniform(post_turn)

    def _pick_weighted(self, outcomes) -> StateView:
        if self.policy == BranchPolicy.FIRST or len(outcomes) == 1:
            return outcomes[0][1]

        weights = np.array([max(p, 0.0) for p, _ in outcomes], dtype=float)
        total = weights.sum()
        if total <= 0:
            return outcomes[self.rng.integers(len(outcomes))][1]
        return outcomes[self.rng.choice(len(outcomes), p=weights / total)][1]

    def _pick_uniform(self, states) -> StateView:
        if self.policy == BranchPolicy.FIRST or len(states) == 1:
            return states[0]
        return states[self.rng.integers(len(states))]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(policy={self.policy.value})"
