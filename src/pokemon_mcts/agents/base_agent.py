import abc

from pokemon_mcts.action import Action
from pokemon_mcts.catalog import choose_replacement
from pokemon_mcts.views import StateView


class BaseAgent(abc.ABC):
    """Abstract base class for all agents."""

    def __init__(self, name: str):
        """Initialize the agent.
        Args:
            name: The name of the agent.
        """
        self.name = name

    @abc.abstractmethod
    def get_action(
        self, state: StateView, side: int, verbose: bool = False
    ) -> Action | None:
        """Get the action for the agent.
        This method must be implemented by subclasses.
        Args:
            state: The current battle snapshot.
            side: The side for which to get the action.
            verbose: Whether to log verbose output.
        Returns:
            The action to take, or None if the side cannot act.
        """
        raise NotImplementedError

    def choose_replacement(self, state: StateView, side: int) -> int | None:
        """Pick the roster slot sent in after the active fighter faints.
        Returns:
            The first non-fainted roster index, or None if nobody is left.
        """
        return choose_replacement(state, side)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"
