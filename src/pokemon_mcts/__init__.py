# src/pokemon_mcts/__init__.py

"""Time-bounded Monte Carlo Tree Search agent for turn-based battles."""

# Re-export key components for easier access
from . import agents
from .action import Action, ActionError, ActionType
from .catalog import choose_replacement, legal_actions
from .config import SearchConfig, SearchConfigError
from .executor import BoundedExecutor, TimeoutExceeded, WorkerFailure
from .loguru_logger import logger
from .node import NodeArena, SearchNode, TreePolicy, evaluate
from .planner import Planner, SearchResult
from .scorer import ActionScorer, blended_score, power_bonus
from .snapshot import BattleSnapshot, FighterSnapshot, MoveSnapshot, TeamSnapshot
from .transition import BranchPolicy, Transition

# Define what gets imported with `from pokemon_mcts import *`
__all__ = [
    "Action",
    "ActionError",
    "ActionScorer",
    "ActionType",
    "BattleSnapshot",
    "BoundedExecutor",
    "BranchPolicy",
    "FighterSnapshot",
    "MoveSnapshot",
    "NodeArena",
    "Planner",
    "SearchConfig",
    "SearchConfigError",
    "SearchNode",
    "SearchResult",
    "TeamSnapshot",
    "TimeoutExceeded",
    "Transition",
    "TreePolicy",
    "WorkerFailure",
    "agents",
    "blended_score",
    "choose_replacement",
    "evaluate",
    "legal_actions",
    "logger",
    "power_bonus",
]
