# tests/conftest.py

from __future__ import annotations

import time
from dataclasses import dataclass, replace

import pytest

from pokemon_mcts.action import Action
from pokemon_mcts.config import SearchConfig
from pokemon_mcts.loguru_logger import remove_decision_log
from pokemon_mcts.snapshot import (
    BattleSnapshot,
    FighterSnapshot,
    MoveSnapshot,
    TeamSnapshot,
)


@dataclass(frozen=True)
class ToyMove:
    move_id: str
    power: int | None = None
    priority: int = 0


@dataclass(frozen=True)
class ToyFighter:
    name: str
    hp: int
    moves: tuple[ToyMove, ...]

    @property
    def has_fainted(self) -> bool:
        return self.hp <= 0

    @property
    def available_moves(self) -> tuple[ToyMove, ...]:
        return () if self.has_fainted else self.moves


@dataclass(frozen=True)
class ToyTeam:
    fighters: tuple[ToyFighter, ...]
    active_index: int = 0

    @property
    def size(self) -> int:
        return len(self.fighters)

    def pokemon_at(self, index: int) -> ToyFighter:
        return self.fighters[index]


@dataclass(frozen=True)
class ToyDuel:
    """
    A minimal engine for tests: an attack removes `power` HP from the opposing
    active fighter (or misses, second branch). A fainted active fighter is
    replaced by the first standing team mate.
    """

    teams: tuple[ToyTeam, ToyTeam]

    def is_over(self) -> bool:
        return any(all(f.has_fainted for f in t.fighters) for t in self.teams)

    def team_view(self, side: int) -> ToyTeam:
        return self.teams[side]

    def apply_pre_action_conditions(self, side: int, action: Action, priority: int):
        teams = list(self.teams)
        if action.is_switch:
            teams[side] = replace(teams[side], active_index=action.bench_index)
            return [(1.0, ToyDuel(tuple(teams)))]

        target_side = 1 - side
        target_team = teams[target_side]
        fighters = list(target_team.fighters)
        target = fighters[target_team.active_index]
        fighters[target_team.active_index] = replace(
            target, hp=max(0, target.hp - (action.power or 0))
        )
        active_index = target_team.active_index
        if fighters[active_index].has_fainted:
            for i, f in enumerate(fighters):
                if not f.has_fainted:
                    active_index = i
                    break
        teams[target_side] = ToyTeam(tuple(fighters), active_index)
        return [(0.9, ToyDuel(tuple(teams))), (0.1, self)]

    def apply_post_turn_conditions(self):
        return []


def build_toy_duel(hp_scale: int = 1) -> ToyDuel:
    ash = ToyTeam(
        (
            ToyFighter(
                "Pikachu",
                100 * hp_scale,
                (ToyMove("thunderbolt", 90), ToyMove("quick-attack", 40, 1)),
            ),
            ToyFighter("Chimchar", 80 * hp_scale, (ToyMove("ember", 40),)),
        )
    )
    gary = ToyTeam(
        (
            ToyFighter(
                "Piplup", 100 * hp_scale, (ToyMove("bubble", 40), ToyMove("growl", None))
            ),
            ToyFighter("Bulbasaur", 90 * hp_scale, (ToyMove("vine-whip", 45),)),
        )
    )
    return ToyDuel((ash, gary))


@pytest.fixture
def toy_duel():
    """Fixture providing a fresh two-versus-two toy battle."""
    return build_toy_duel()


@pytest.fixture
def long_toy_duel():
    """Fixture providing a toy battle that lasts well past the rollout depth."""
    return build_toy_duel(hp_scale=20)


@pytest.fixture
def snapshot():
    """Fixture providing a scripted battle: Ash (Pikachu, Chimchar, fainted
    Turtwig) against Gary (Piplup, Bulbasaur)."""
    ash = TeamSnapshot(
        fighters=(
            FighterSnapshot(
                "Pikachu",
                moves=(
                    MoveSnapshot("thunderbolt", power=90),
                    MoveSnapshot("quick-attack", power=40, priority=1),
                ),
            ),
            FighterSnapshot("Chimchar", moves=(MoveSnapshot("ember", power=40),)),
            FighterSnapshot("Turtwig", moves=(MoveSnapshot("tackle", power=40),), fainted=True),
        )
    )
    gary = TeamSnapshot(
        fighters=(
            FighterSnapshot("Piplup", moves=(MoveSnapshot("bubble", power=40),)),
            FighterSnapshot("Bulbasaur", moves=(MoveSnapshot("vine-whip", power=45),)),
        )
    )
    return BattleSnapshot(teams=(ash, gary))


@pytest.fixture
def win_or_lose():
    """Fixture providing a root where 'finisher' wins at once and 'blunder'
    loses at once. Both moves have the same power."""
    finisher = Action.create_attack("finisher", power=60)
    blunder = Action.create_attack("blunder", power=60)
    root = BattleSnapshot(
        teams=(
            TeamSnapshot(
                (
                    FighterSnapshot(
                        "Pikachu",
                        moves=(
                            MoveSnapshot("blunder", power=60),
                            MoveSnapshot("finisher", power=60),
                        ),
                    ),
                )
            ),
            TeamSnapshot((FighterSnapshot("Piplup", moves=(MoveSnapshot("bubble", 40),)),)),
        )
    )
    won = root.with_fainted(1)
    lost = root.with_fainted(0)
    root = root.with_outcome(0, finisher, won).with_outcome(0, blunder, lost)
    return root, finisher, blunder


@pytest.fixture
def decision_log(tmp_path):
    """Fixture providing a fresh decision log path, closed after the test."""
    path = tmp_path / "agent.log"
    yield path
    remove_decision_log(path)


@pytest.fixture
def fast_config(decision_log):
    """Fixture providing a small, seeded search configuration."""
    return SearchConfig(num_simulations=30, seed=7, deadline=30.0, log_path=str(decision_log))


class SlowDuel:
    """Wraps a state so that every end-of-battle check takes a while."""

    def __init__(self, inner, delay=0.01):
        self.inner = inner
        self.delay = delay

    def is_over(self):
        time.sleep(self.delay)
        return self.inner.is_over()

    def team_view(self, side):
        return self.inner.team_view(side)

    def apply_pre_action_conditions(self, side, action, priority):
        return [
            (p, SlowDuel(s, self.delay))
            for p, s in self.inner.apply_pre_action_conditions(side, action, priority)
        ]

    def apply_post_turn_conditions(self):
        return [SlowDuel(s, self.delay) for s in self.inner.apply_post_turn_conditions()]


@pytest.fixture
def slow_duel():
    """Fixture providing a long toy battle whose queries are slow."""
    return SlowDuel(build_toy_duel(hp_scale=20))


@pytest.fixture
def read_log():
    """Fixture providing a reader that closes a decision log and returns its text."""

    def _read(path):
        remove_decision_log(path)
        return path.read_text()

    return _read
