# src/pokemon_mcts/agents/search.py
"""This module defines the tree search agent."""

import threading

import numpy as np

from pokemon_mcts.action import Action
from pokemon_mcts.config import SearchConfig
from pokemon_mcts.executor import BoundedExecutor, TimeoutExceeded, WorkerFailure
from pokemon_mcts.loguru_logger import add_decision_log, decision_logger, logger
from pokemon_mcts.planner import Planner
from pokemon_mcts.scorer import ActionScorer
from pokemon_mcts.transition import Transition
from pokemon_mcts.views import StateView

from .base_agent import BaseAgent


class TreeSearchAgent(BaseAgent):
    """
    MCTS agent with a move-power tiebreak, bounded by a wall-clock deadline.

    Every decision starts a fresh search. Once the simulation budget is
    spent, each root action is scored by its one-ply average reward plus
    power / 100 and the best one is played.

    A decision that misses the deadline, or whose worker raises, is logged
    and re-raised: the host must treat it as a forfeit.
    """

    def __init__(self, name: str = "TreeSearch", config: SearchConfig | None = None):
        """
        Args:
            name: The name of the agent.
            config: Search settings. Defaults to `SearchConfig()`.
        """
        self.config = config if config is not None else SearchConfig()
        name = (
            f"{name}(sim={self.config.num_simulations}, "
            f"tree={self.config.tree_policy.value})"
        )
        super().__init__(name)
        self.executor = BoundedExecutor(self.config.deadline)

    def find_best_action(
        self,
        state: StateView,
        side: int,
        verbose: bool = False,
        cancel: threading.Event | None = None,
    ) -> Action | None:
        """Search then score, on the calling thread."""
        rng = np.random.default_rng(self.config.seed)
        transition = Transition(self.config.branch_policy, rng)

        planner = Planner(self.config, transition, rng)
        result = planner.search(state, side, cancel=cancel)
        if result.cancelled:
            # The caller has given up on this decision.
            return None

        if verbose:
            logger.info(
                f"[{self.name}] {result.iterations} iterations, "
                f"root visits: {result.root.visits}, "
                f"nodes: {len(result.arena) if result.arena is not None else 1}"
            )

        scorer = ActionScorer(transition)
        return scorer.best_action(
            state, side, arena=result.arena, root=result.root, verbose=verbose
        )

    def decide(
        self, state: StateView, side: int, verbose: bool = False
    ) -> Action | None:
        """Choose an action for `side` within the configured deadline.
        Returns:
            The chosen action, or None when `side` has no legal action.
        Raises:
            TimeoutExceeded: The deadline expired. The side forfeits.
            WorkerFailure: The search raised.
        """
        # Idempotent; also registers the sink inside joblib worker processes.
        add_decision_log(self.config.log_path)
        try:
            action, duration_ms = self.executor.run(
                self.find_best_action, state, side, verbose, side=side
            )
        except TimeoutExceeded:
            logger.error(f"Timeout! Team [{side + 1}] loses!")
            decision_logger.error(
                f"{self.name} side={side} TIMEOUT after {self.config.deadline}s: forfeits"
            )
            raise
        except WorkerFailure as e:
            logger.exception(f"Decision worker failed for side {side}")
            decision_logger.error(f"{self.name} side={side} FAILURE: {e.__cause__!r}")
            raise

        if action is None:
            decision_logger.warning(f"{self.name} side={side} NO_LEGAL_ACTIONS")
        else:
            decision_logger.info(
                f"{self.name} side={side} action={action} duration_ms={duration_ms:.0f}"
            )
        return action

    def get_action(
        self, state: StateView, side: int, verbose: bool = False
    ) -> Action | None:
        return self.decide(state, side, verbose=verbose)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}', config={self.config})"
