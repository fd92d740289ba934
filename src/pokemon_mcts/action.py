from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, auto, unique


class ActionError(Exception):
    """Raised when an action is built with fields that do not match its type."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@unique
class ActionType(IntEnum):
    """Enum for the different types of actions."""

    ATTACK = auto()
    SWITCH = auto()


@dataclass(frozen=True, slots=True)
class Action:
    """A decision for one side: use a move of the active fighter, or bring in
    a bench member.

    Actions are hashable so they can key the edges of the search tree.
    """

    action_type: ActionType
    move_id: str | None = None
    power: int | None = None
    priority: int = 0
    bench_index: int | None = None

    def __post_init__(self):
        if self.action_type == ActionType.ATTACK:
            if self.move_id is None:
                raise ActionError("An attack needs a move id.")
            if self.bench_index is not None:
                raise ActionError("An attack cannot reference a bench slot.")
        elif self.action_type == ActionType.SWITCH:
            if self.bench_index is None or self.bench_index < 0:
                raise ActionError(
                    f"Invalid bench index for switch: {self.bench_index}"
                )
            if self.move_id is not None:
                raise ActionError("A switch cannot reference a move.")

    def __str__(self) -> str:
        """Return a string representation of the action."""
        if self.action_type == ActionType.ATTACK:
            return f"AttackAction(move_id={self.move_id}, power={self.power})"
        if self.action_type == ActionType.SWITCH:
            return f"SwitchAction(bench_index={self.bench_index})"
        return "UnknownAction()"

    @property
    def is_attack(self) -> bool:
        return self.action_type == ActionType.ATTACK

    @property
    def is_switch(self) -> bool:
        return self.action_type == ActionType.SWITCH

    @classmethod
    def create_attack(
        cls, move_id: str, power: int | None = None, priority: int = 0
    ) -> Action:
        """Create an attack action."""
        return cls(
            action_type=ActionType.ATTACK,
            move_id=move_id,
            power=power,
            priority=priority,
        )

    @classmethod
    def create_switch(cls, bench_index: int) -> Action:
        """Create a switch action."""
        return cls(action_type=ActionType.SWITCH, bench_index=bench_index)
