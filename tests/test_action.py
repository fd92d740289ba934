# tests/test_action.py

import pytest

from pokemon_mcts.action import Action, ActionError, ActionType


def test_attack_action():
    """Tests the creation of an ATTACK action."""
    action = Action.create_attack("thunderbolt", power=90, priority=0)

    assert action.action_type == ActionType.ATTACK
    assert action.move_id == "thunderbolt"
    assert action.power == 90
    assert action.bench_index is None
    assert action.is_attack
    assert not action.is_switch
    assert str(action) == "AttackAction(move_id=thunderbolt, power=90)"


def test_attack_without_power():
    """Tests that an attack may carry no power attribute."""
    action = Action.create_attack("growl")
    assert action.power is None
    assert action.priority == 0


def test_switch_action():
    """Tests the creation of a SWITCH action."""
    action = Action.create_switch(bench_index=2)

    assert action.action_type == ActionType.SWITCH
    assert action.bench_index == 2
    assert action.move_id is None
    assert action.is_switch
    assert str(action) == "SwitchAction(bench_index=2)"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"action_type": ActionType.ATTACK},
        {"action_type": ActionType.ATTACK, "move_id": "ember", "bench_index": 1},
        {"action_type": ActionType.SWITCH},
        {"action_type": ActionType.SWITCH, "bench_index": -1},
        {"action_type": ActionType.SWITCH, "bench_index": 1, "move_id": "ember"},
    ],
)
def test_invalid_actions(kwargs):
    """Tests that malformed actions are rejected."""
    with pytest.raises(ActionError):
        Action(**kwargs)


def test_actions_are_hashable_values():
    """Tests that equal actions hash the same, so they can key tree edges."""
    a = Action.create_attack("ember", power=40)
    b = Action.create_attack("ember", power=40)

    assert a == b
    assert len({a, b, Action.create_switch(1)}) == 2
    assert Action.create_switch(1) != Action.create_switch(2)


def test_actions_are_immutable():
    action = Action.create_switch(1)
    with pytest.raises(AttributeError):
        action.bench_index = 2
