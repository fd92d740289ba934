from __future__ import annotations

import numpy as np

from pokemon_mcts.action import Action
from pokemon_mcts.catalog import legal_actions
from pokemon_mcts.loguru_logger import logger
from pokemon_mcts.node import NodeArena, SearchNode, evaluate
from pokemon_mcts.transition import Transition
from pokemon_mcts.views import StateView


def power_bonus(action: Action) -> float:
    """Move power scaled to roughly [0, 1]; 0 for switches and powerless moves."""
    if action.power is not None and action.power > 0:
        return action.power / 100.0
    return 0.0


def blended_score(average_reward: float, action: Action) -> float:
    return average_reward + power_bonus(action)


class ActionScorer:
    """
    Picks the final action once the search budget is spent.

    Each root action is scored by the average reward of its one-ply child
    plus a bonus for move power. Children that were never visited are
    evaluated directly.
    """

    def __init__(self, transition: Transition | None = None):
        self.transition = transition if transition is not None else Transition()

    def one_ply_child(
        self,
        state: StateView,
        side: int,
        action: Action,
        arena: NodeArena | None = None,
        root: SearchNode | None = None,
    ) -> SearchNode:
        if arena is not None and root is not None:
            child = arena.child(root, action)
            if child is not None:
                return child
        new_state = self.transition.apply(state, side, action)
        return SearchNode(state=new_state, perspective=side)

    def score(self, child: SearchNode, action: Action) -> float:
        if child.visits > 0:
            average_reward = child.value / child.visits
        else:
            average_reward = evaluate(child)
        return blended_score(average_reward, action)

    def score_actions(
        self,
        state: StateView,
        side: int,
        arena: NodeArena | None = None,
        root: SearchNode | None = None,
    ) -> list[tuple[Action, float]]:
        scored = []
        for action in legal_actions(state, side):
            child = self.one_ply_child(state, side, action, arena, root)
            scored.append((action, self.score(child, action)))
        return scored

    def best_action(
        self,
        state: StateView,
        side: int,
        arena: NodeArena | None = None,
        root: SearchNode | None = None,
        verbose: bool = False,
    ) -> Action | None:
        """The highest scoring action, first one on ties.

        Returns:
            None when `side` has no legal action.
        """
        scored = self.score_actions(state, side, arena, root)
        if not scored:
            logger.warning(f"No legal actions for side {side}, no action chosen.")
            return None

        scores = np.array([s for _, s in scored])
        best_index = int(np.argmax(scores))

        if verbose:
            for action, s in scored:
                logger.info(f"Action: {action}, Score: {s:.3f}")

        return scored[best_index][0]
