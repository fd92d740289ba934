from .base_agent import BaseAgent
from .search import TreeSearchAgent
from .simple import FirstAgent, RandomAgent, RandomAttackAgent

__all__ = [
    "BaseAgent",
    "FirstAgent",
    "RandomAgent",
    "RandomAttackAgent",
    "TreeSearchAgent",
]
