# src/pokemon_mcts/config.py

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Final

from dotenv import load_dotenv

from pokemon_mcts.node import TreePolicy
from pokemon_mcts.transition import BranchPolicy

load_dotenv()

_TRUTHY: Final[tuple[str, ...]] = ("True", "true", "1", "t", "y", "yes")

DEBUG = os.getenv("DEBUG") in _TRUTHY

EXPLORATION_CONSTANT: Final[float] = math.sqrt(2)
MAX_ROLLOUT_DEPTH: Final[int] = 10
NUM_SIMULATIONS: Final[int] = 100
DECISION_DEADLINE_SECONDS: Final[float] = 360.0  # 6 min per decision
DEFAULT_LOG_PATH: Final[str] = "agent.log"


class SearchConfigError(Exception):
    """Custom exception for invalid search settings."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@dataclass(frozen=True, slots=True)
class SearchConfig:
    """Settings of one tree search decision."""

    num_simulations: int = NUM_SIMULATIONS
    max_rollout_depth: int = MAX_ROLLOUT_DEPTH
    exploration: float = EXPLORATION_CONSTANT
    deadline: float = DECISION_DEADLINE_SECONDS
    tree_policy: TreePolicy = TreePolicy.ARENA
    branch_policy: BranchPolicy = BranchPolicy.FIRST
    seed: int | None = None
    log_path: str = DEFAULT_LOG_PATH

    def __post_init__(self):
        if self.num_simulations < 1:
            raise SearchConfigError(
                f"num_simulations must be positive, got {self.num_simulations}"
            )
        if self.max_rollout_depth < 0:
            raise SearchConfigError(
                f"max_rollout_depth cannot be negative, got {self.max_rollout_depth}"
            )
        if self.exploration < 0:
            raise SearchConfigError(
                f"exploration cannot be negative, got {self.exploration}"
            )
        if self.deadline <= 0:
            raise SearchConfigError(f"deadline must be positive, got {self.deadline}")
        try:
            object.__setattr__(self, "tree_policy", TreePolicy(self.tree_policy))
            object.__setattr__(self, "branch_policy", BranchPolicy(self.branch_policy))
        except ValueError as e:
            raise SearchConfigError(str(e)) from e

    @classmethod
    def from_env(cls, **overrides) -> SearchConfig:
        """Build a config from MCTS_* environment variables (and a .env file).

        Keyword arguments take precedence over the environment.
        """
        load_dotenv()
        values = {}
        for env_name, key, cast in (
            ("MCTS_SIMULATIONS", "num_simulations", int),
            ("MCTS_ROLLOUT_DEPTH", "max_rollout_depth", int),
            ("MCTS_EXPLORATION", "exploration", float),
            ("MCTS_DEADLINE_SECONDS", "deadline", float),
            ("MCTS_TREE_POLICY", "tree_policy", str),
            ("MCTS_BRANCH_POLICY", "branch_policy", str),
            ("MCTS_SEED", "seed", int),
            ("MCTS_LOG_PATH", "log_path", str),
        ):
            raw = os.getenv(env_name)
            if raw is None or raw == "":
                continue
            try:
                values[key] = cast(raw)
            except ValueError as e:
                raise SearchConfigError(f"Invalid value for {env_name}: {raw!r}") from e
        values.update(overrides)
        return cls(**values)
