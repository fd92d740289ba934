# src/pokemon_mcts/planner.py

"""Monte Carlo Tree Search over battle snapshots.

Each iteration selects a node with UCT, estimates it with a uniform random
rollout and adds the reward to the node statistics. Every evaluation is made
from the root side's point of view, even though rollouts alternate sides.
"""

from __future__ import annotations

import math
import threading
from dataclasses import dataclass

import numpy as np

from pokemon_mcts.catalog import legal_actions
from pokemon_mcts.config import DEBUG, SearchConfig
from pokemon_mcts.loguru_logger import logger
from pokemon_mcts.node import NodeArena, SearchNode, TreePolicy, evaluate
from pokemon_mcts.transition import BranchPolicy, Transition
from pokemon_mcts.views import StateView


@dataclass
class SearchResult:
    root: SearchNode
    arena: NodeArena | None
    iterations: int
    cancelled: bool = False


class Planner:
    """Runs a fixed number of select / simulate / backpropagate iterations."""

    def __init__(
        self,
        config: SearchConfig | None = None,
        transition: Transition | None = None,
        rng: np.random.Generator | None = None,
    ):
        self.config = config if config is not None else SearchConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.transition = (
            transition
            if transition is not None
            else Transition(self.config.branch_policy, self.rng)
        )
        self.arena: NodeArena | None = None

    @property
    def keeps_tree(self) -> bool:
        return self.config.tree_policy == TreePolicy.ARENA

    @property
    def resamples(self) -> bool:
        """Stored children draw a fresh outcome on every descent (open loop)."""
        return self.keeps_tree and self.transition.policy == BranchPolicy.SAMPLE

    def new_root(self, state: StateView, side: int) -> SearchNode:
        """Create the root of a fresh search (and a fresh arena if needed)."""
        if self.keeps_tree:
            self.arena = NodeArena()
            return self.arena.add(state, side)
        self.arena = None
        return SearchNode(state=state, perspective=side)

    def search(
        self,
        state: StateView,
        side: int,
        cancel: threading.Event | None = None,
    ) -> SearchResult:
        """Search from `state` for `side`.

        Args:
            state: The current battle snapshot.
            side: The side to decide for.
            cancel: Checked before every iteration; once set the search stops.
        Returns:
            The root node, the arena (None with the ephemeral policy) and the
            number of completed iterations.
        """
        root = self.new_root(state, side)

        iterations = 0
        for _ in range(self.config.num_simulations):
            if cancel is not None and cancel.is_set():
                logger.debug(f"Search cancelled after {iterations} iterations.")
                return SearchResult(root, self.arena, iterations, cancelled=True)

            node = self.select(root)
            reward = self.simulate(node)
            self.backpropagate(node, reward)
            iterations += 1

        if DEBUG:
            logger.debug(
                f"Search done: {iterations} iterations, root visits={root.visits}, "
                f"root value={root.value:.2f}"
            )
        return SearchResult(root, self.arena, iterations)

    def select(self, node: SearchNode) -> SearchNode:
        """Descend from `node` by UCT until a leaf for this iteration."""
        while not node.is_terminal:
            # ln(0): every child of an unvisited node scores -inf.
            if node.visits == 0:
                break

            reused = self.arena is not None and self.arena.is_expanded(node)
            children = self.expand(node)
            if not children:
                break

            best_child = None
            best_score = -math.inf
            for child in children:
                score = self.uct_score(node, child)
                if score > best_score:
                    best_score = score
                    best_child = child

            if best_child is None:
                break
            if reused and self.resamples:
                best_child.state = self.transition.apply(
                    node.state, node.perspective, self.arena.action_to(best_child)
                )
            node = best_child
        return node

    def expand(self, node: SearchNode) -> list[SearchNode]:
        """One child per legal action of the node's side.

        In open loop the node's state is redrawn between visits, so the
        stored children are matched against the current legal actions.
        """
        expanded = self.arena is not None and self.arena.is_expanded(node)
        if expanded and not self.resamples:
            return self.arena.children_of(node)

        children = []
        for action in legal_actions(node.state, node.perspective):
            child = self.arena.child(node, action) if expanded else None
            if child is not None:
                children.append(child)
                continue
            new_state = self.transition.apply(node.state, node.perspective, action)
            if self.arena is not None:
                children.append(self.arena.add_child(node, action, new_state))
            else:
                children.append(SearchNode(state=new_state, perspective=node.perspective))

        if self.arena is not None:
            self.arena.mark_expanded(node)
        return children

    def uct_score(self, parent: SearchNode, child: SearchNode) -> float:
        if parent.visits == 0:
            return -math.inf
        exploitation = child.mean_value
        exploration = math.sqrt(math.log(parent.visits) / (child.visits + 1))
        return exploitation + self.config.exploration * exploration

    def simulate(self, node: SearchNode) -> float:
        """Random playout from `node`, evaluated for the node's perspective."""
        if node.is_terminal:
            return node.evaluate()

        state = node.state
        side = node.perspective
        depth = 0

        while not state.is_over() and depth < self.config.max_rollout_depth:
            actions = legal_actions(state, side)
            if not actions:
                break

            action = actions[self.rng.integers(len(actions))]
            state = self.transition.apply(state, side, action)
            side = 1 - side
            depth += 1

        return evaluate(SearchNode(state=state, perspective=node.perspective))

    def backpropagate(self, node: SearchNode, reward: float):
        if self.arena is None or node.index is None:
            node.update(reward)
            return
        for ancestor in self.arena.path_to_root(node):
            ancestor.update(reward)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(simulations={self.config.num_simulations}, "
            f"tree_policy={self.config.tree_policy.value})"
        )
