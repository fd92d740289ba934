import numpy as np

from pokemon_mcts.action import Action
from pokemon_mcts.catalog import legal_actions
from pokemon_mcts.views import StateView

from .base_agent import BaseAgent


class FirstAgent(BaseAgent):
    """Agent that always selects the first available action."""

    def __init__(self, name: str = "First"):
        super().__init__(name)

    def get_action(
        self, state: StateView, side: int, verbose: bool = False
    ) -> Action | None:
        """Return the first legal action."""
        actions = legal_actions(state, side)
        return actions[0] if actions else None


class RandomAgent(BaseAgent):
    """Agent that selects a random action from the available actions."""

    def __init__(self, name: str = "Random", seed: int | None = None):
        super().__init__(name)
        self.rng = np.random.default_rng(seed)

    def get_action(
        self, state: StateView, side: int, verbose: bool = False
    ) -> Action | None:
        """Return a random action."""
        actions = legal_actions(state, side)
        if not actions:
            return None
        return actions[self.rng.integers(len(actions))]


class RandomAttackAgent(RandomAgent):
    """Agent that selects a random attack action from the available actions."""

    def __init__(self, name: str = "RandomAttack", seed: int | None = None):
        super().__init__(name, seed)

    def get_action(
        self, state: StateView, side: int, verbose: bool = False
    ) -> Action | None:
        """Return a random attack action.
        If no attack actions are available, a random legal action is returned.
        """
        actions = legal_actions(state, side)
        attack_actions = [a for a in actions if a.is_attack] or actions
        if not attack_actions:
            return None
        return attack_actions[self.rng.integers(len(attack_actions))]
