from __future__ import annotations

from pokemon_mcts.action import Action
from pokemon_mcts.views import StateView


def legal_actions(state: StateView, side: int) -> list[Action]:
    """List the actions `side` may take in `state`.

    Usable attacks of the active fighter come first, in move order, followed
    by one switch per non-fainted, non-active roster slot, in roster order.
    An empty list only happens when the active fighter cannot attack and
    nobody is left on the bench.
    """
    team = state.team_view(side)
    active_index = team.active_index

    actions = [
        Action.create_attack(move.move_id, power=move.power, priority=move.priority)
        for move in team.pokemon_at(active_index).available_moves
    ]

    for index in range(team.size):
        if index != active_index and not team.pokemon_at(index).has_fainted:
            actions.append(Action.create_switch(bench_index=index))

    return actions


def choose_replacement(state: StateView, side: int) -> int | None:
    """Returns the first non-fainted roster index, or None if all have fainted."""
    team = state.team_view(side)
    for index in range(team.size):
        if not team.pokemon_at(index).has_fainted:
            return index
    return None
