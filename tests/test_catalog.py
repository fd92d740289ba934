# tests/test_catalog.py

from pokemon_mcts.action import Action, ActionType
from pokemon_mcts.catalog import choose_replacement, legal_actions
from pokemon_mcts.snapshot import BattleSnapshot, FighterSnapshot, TeamSnapshot


def test_legal_actions_order(snapshot):
    """Tests that attacks come first in move order, then switches in roster order."""
    actions = legal_actions(snapshot, 0)

    assert actions == [
        Action.create_attack("thunderbolt", power=90),
        Action.create_attack("quick-attack", power=40, priority=1),
        Action.create_switch(1),
    ]


def test_no_switch_to_active_or_fainted(snapshot):
    """Tests that the active slot and fainted slots are never switch targets."""
    state = snapshot.with_active(0, 1)
    actions = legal_actions(state, 0)
    switch_targets = [a.bench_index for a in actions if a.action_type == ActionType.SWITCH]

    assert switch_targets == [0]
    assert [a.move_id for a in actions if a.is_attack] == ["ember"]


def test_fainted_active_can_only_switch(snapshot):
    state = snapshot.with_fainted(0)
    actions = legal_actions(state, 0)

    assert actions == [Action.create_switch(1)]


def test_opponent_actions(snapshot):
    actions = legal_actions(snapshot, 1)

    assert actions == [
        Action.create_attack("bubble", power=40),
        Action.create_switch(1),
    ]


def test_no_legal_actions():
    """Tests the degenerate case: no usable attack and nobody on the bench."""
    state = BattleSnapshot(
        teams=(
            TeamSnapshot((FighterSnapshot("Magikarp"),)),
            TeamSnapshot((FighterSnapshot("Piplup"),)),
        )
    )
    assert legal_actions(state, 0) == []


def test_choose_replacement(snapshot):
    assert choose_replacement(snapshot, 0) == 0
    assert choose_replacement(snapshot.with_fainted(0), 0) == 1

    all_down = snapshot.with_fainted(0, 0).with_fainted(0, 1)
    assert choose_replacement(all_down, 0) is None
