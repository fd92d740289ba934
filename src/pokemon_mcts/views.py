"""Read-only views of a battle, as exposed by the battle engine.

The search never mutates a view. Every transition asks the engine for new
views, so any engine can be plugged in by satisfying these protocols.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pokemon_mcts.action import Action


@runtime_checkable
class MoveView(Protocol):
    """A move known by a fighter."""

    @property
    def move_id(self) -> str: ...

    @property
    def power(self) -> int | None: ...

    @property
    def priority(self) -> int: ...


@runtime_checkable
class FighterView(Protocol):
    """A roster member."""

    @property
    def has_fainted(self) -> bool: ...

    @property
    def available_moves(self) -> Sequence[MoveView]:
        """Moves that can be used this turn, in move-slot order."""
        ...


@runtime_checkable
class TeamView(Protocol):
    """One side's roster."""

    @property
    def size(self) -> int: ...

    @property
    def active_index(self) -> int: ...

    def pokemon_at(self, index: int) -> FighterView: ...


@runtime_checkable
class StateView(Protocol):
    """Immutable snapshot of a whole battle."""

    def is_over(self) -> bool: ...

    def team_view(self, side: int) -> TeamView: ...

    def apply_pre_action_conditions(
        self, side: int, action: Action, priority: int
    ) -> Sequence[tuple[float, StateView]]:
        """Resolve `action` for `side` up to the end of the action.

        Returns:
            The possible outcomes as (probability, state) pairs. An empty
            sequence means nothing changed.
        """
        ...

    def apply_post_turn_conditions(self) -> Sequence[StateView]:
        """Resolve end-of-turn effects (weather, poison, ...).

        Returns:
            The possible resulting states. An empty sequence means nothing
            changed.
        """
        ...
