# src/pokemon_mcts/snapshot.py

"""Scripted, immutable battle snapshots.

A `BattleSnapshot` satisfies the `StateView` protocol without any battle
mechanics: the outcome of an action is looked up in a table filled by the
caller. It is the reference adapter for engines that can precompute their
branches, and the building block for reproducible scenarios.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace

from pokemon_mcts.action import Action

Outcomes = tuple[tuple[float, "BattleSnapshot"], ...]


class SnapshotError(Exception):
    """Custom exception for malformed snapshots."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@dataclass(frozen=True, slots=True)
class MoveSnapshot:
    move_id: str
    power: int | None = None
    priority: int = 0


@dataclass(frozen=True, slots=True)
class FighterSnapshot:
    name: str
    moves: tuple[MoveSnapshot, ...] = ()
    fainted: bool = False

    @property
    def has_fainted(self) -> bool:
        return self.fainted

    @property
    def available_moves(self) -> tuple[MoveSnapshot, ...]:
        # A fainted fighter cannot act.
        if self.fainted:
            return ()
        return self.moves


@dataclass(frozen=True, slots=True)
class TeamSnapshot:
    fighters: tuple[FighterSnapshot, ...]
    active_index: int = 0

    def __post_init__(self):
        if not self.fighters:
            raise SnapshotError("A team needs at least one fighter.")
        if not (0 <= self.active_index < len(self.fighters)):
            raise SnapshotError(f"Invalid active index: {self.active_index}")

    @property
    def size(self) -> int:
        return len(self.fighters)

    @property
    def is_defeated(self) -> bool:
        """Returns True if every fighter of the team has fainted."""
        return all(f.fainted for f in self.fighters)

    def pokemon_at(self, index: int) -> FighterSnapshot:
        return self.fighters[index]

    def with_fainted(self, index: int) -> TeamSnapshot:
        fighters = list(self.fighters)
        fighters[index] = replace(fighters[index], fainted=True)
        return replace(self, fighters=tuple(fighters))

    @classmethod
    def from_def(cls, team_def: dict) -> TeamSnapshot:
        """Parses a dictionary definition to create a team.

        Example:
            {"active": 0, "team": [{"name": "Pikachu", "moves": [
                {"id": "thunderbolt", "power": 90}]}]}
        """
        fighters = []
        for f_def in team_def.get("team", []):
            if "name" not in f_def:
                raise SnapshotError(f"Fighter definition without a name: {f_def}")
            moves = tuple(
                MoveSnapshot(
                    move_id=m_def["id"],
                    power=m_def.get("power"),
                    priority=m_def.get("priority", 0),
                )
                for m_def in f_def.get("moves", [])
            )
            fighters.append(
                FighterSnapshot(
                    name=f_def["name"], moves=moves, fainted=f_def.get("fainted", False)
                )
            )
        return cls(fighters=tuple(fighters), active_index=team_def.get("active", 0))


@dataclass(frozen=True, slots=True, eq=False)
class BattleSnapshot:
    """
    Immutable battle state with a scripted transition table.

    - `outcomes` maps (side, action) to the pre-action outcomes.
    - `fallback` is used for any action missing from `outcomes`.
    - `post_turn` lists the end-of-turn outcomes of this state.
    Missing entries resolve to "nothing happens".
    """

    teams: tuple[TeamSnapshot, TeamSnapshot]
    over: bool = False
    outcomes: Mapping[tuple[int, Action], Outcomes] = field(default_factory=dict)
    fallback: Outcomes = ()
    post_turn: tuple[BattleSnapshot, ...] = ()

    def __post_init__(self):
        if len(self.teams) != 2:
            raise SnapshotError(f"A battle needs two teams, got {len(self.teams)}.")

    def is_over(self) -> bool:
        return self.over or any(team.is_defeated for team in self.teams)

    def team_view(self, side: int) -> TeamSnapshot:
        return self.teams[side]

    def apply_pre_action_conditions(
        self, side: int, action: Action, priority: int
    ) -> Outcomes:
        return self.outcomes.get((side, action), self.fallback)

    def apply_post_turn_conditions(self) -> tuple[BattleSnapshot, ...]:
        return self.post_turn

    def with_outcome(
        self,
        side: int,
        action: Action,
        *states: BattleSnapshot,
        probabilities: Sequence[float] | None = None,
    ) -> BattleSnapshot:
        """Returns a copy where `side` playing `action` leads to `states`."""
        outcomes = dict(self.outcomes)
        outcomes[(side, action)] = _pair(states, probabilities)
        return replace(self, outcomes=outcomes)

    def with_fallback(
        self, *states: BattleSnapshot, probabilities: Sequence[float] | None = None
    ) -> BattleSnapshot:
        return replace(self, fallback=_pair(states, probabilities))

    def with_post_turn(self, *states: BattleSnapshot) -> BattleSnapshot:
        return replace(self, post_turn=tuple(states))

    def with_fainted(self, side: int, index: int | None = None) -> BattleSnapshot:
        """Returns a copy without scripted transitions where a fighter of
        `side` (the active one by default) has fainted."""
        team = self.teams[side]
        if index is None:
            index = team.active_index
        teams = list(self.teams)
        teams[side] = team.with_fainted(index)
        return BattleSnapshot(teams=tuple(teams), over=self.over)

    def with_active(self, side: int, index: int) -> BattleSnapshot:
        """Returns a copy without scripted transitions where `index` is the
        active fighter of `side`."""
        teams = list(self.teams)
        teams[side] = replace(self.teams[side], active_index=index)
        return BattleSnapshot(teams=tuple(teams), over=self.over)

    def finished(self) -> BattleSnapshot:
        """Returns a copy without scripted transitions flagged as over."""
        return BattleSnapshot(teams=self.teams, over=True)

    @classmethod
    def from_def(cls, team_0_def: dict, team_1_def: dict) -> BattleSnapshot:
        return cls(
            teams=(TeamSnapshot.from_def(team_0_def), TeamSnapshot.from_def(team_1_def))
        )


def _pair(
    states: Sequence[BattleSnapshot], probabilities: Sequence[float] | None
) -> Outcomes:
    if probabilities is None:
        probabilities = [1.0 / len(states)] * len(states) if states else []
    if len(probabilities) != len(states):
        raise SnapshotError(
            f"Got {len(probabilities)} probabilities for {len(states)} outcomes."
        )
    return tuple(zip(probabilities, states))
