"""Search nodes, their evaluation, and the arena that links them into a tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, unique

from pokemon_mcts.action import Action
from pokemon_mcts.views import StateView


@unique
class TreePolicy(str, Enum):
    """How nodes are kept between search iterations.

    EPHEMERAL: children are rebuilt on every expansion and only the selected
        node is updated, so statistics only accumulate at the root.
    ARENA: children are stored once in a `NodeArena` and rewards flow back up
        to the root, so repeated visits accumulate.
    """

    EPHEMERAL = "ephemeral"
    ARENA = "arena"


@dataclass(slots=True)
class SearchNode:
    """
    A battle snapshot seen from one side, with its MCTS statistics.

    Attributes:
        state: The battle snapshot.
        perspective: The side the node is evaluated for. Never flipped.
        visits: Number of rewards received.
        value: Sum of the rewards received.
        index: Position in the owning arena, None for free-standing nodes.
    """

    state: StateView
    perspective: int
    visits: int = 0
    value: float = 0.0
    index: int | None = None

    def __post_init__(self):
        if self.visits < 0:
            raise ValueError(f"visits cannot be negative, got {self.visits}")
        if self.visits == 0 and self.value != 0:
            raise ValueError(f"An unvisited node cannot hold value {self.value}")

    @property
    def is_terminal(self) -> bool:
        return self.state.is_over()

    @property
    def mean_value(self) -> float:
        """Average reward, 0.0 for unvisited nodes."""
        return self.value / self.visits if self.visits > 0 else 0.0

    def evaluate(self) -> float:
        return evaluate(self)

    def update(self, reward: float):
        self.visits += 1
        self.value += reward


def evaluate(node: SearchNode) -> float:
    """Terminal-only evaluation from the node's perspective.

    Returns:
        +1.0 if the battle is over and the perspective side's active fighter
        is still standing, -1.0 if it has fainted, 0.0 while the battle goes on.
    """
    state = node.state
    if not state.is_over():
        return 0.0
    team = state.team_view(node.perspective)
    if team.pokemon_at(team.active_index).has_fainted:
        return -1.0
    return 1.0


@dataclass
class NodeArena:
    """Flat storage for a search tree.

    Nodes are addressed by stable integer indices. The edge map is keyed by
    (parent index, action), so the same action from the same node always
    leads to the same child. `children` keeps the expansion order and
    `actions[i]` is the action that led to node `i`.
    """

    nodes: list[SearchNode] = field(default_factory=list)
    parents: list[int | None] = field(default_factory=list)
    actions: list[Action | None] = field(default_factory=list)
    edges: dict[tuple[int, Action], int] = field(default_factory=dict)
    children: dict[int, list[int]] = field(default_factory=dict)

    def add(
        self, state: StateView, perspective: int, parent: int | None = None
    ) -> SearchNode:
        node = SearchNode(state=state, perspective=perspective, index=len(self.nodes))
        self.nodes.append(node)
        self.parents.append(parent)
        self.actions.append(None)
        return node

    def add_child(
        self, parent: SearchNode, action: Action, state: StateView
    ) -> SearchNode:
        child = self.add(state, parent.perspective, parent=parent.index)
        self.actions[child.index] = action
        self.edges[(parent.index, action)] = child.index
        self.children.setdefault(parent.index, []).append(child.index)
        return child

    def mark_expanded(self, node: SearchNode):
        self.children.setdefault(node.index, [])

    def is_expanded(self, node: SearchNode) -> bool:
        return node.index in self.children

    def children_of(self, node: SearchNode) -> list[SearchNode]:
        return [self.nodes[i] for i in self.children.get(node.index, [])]

    def child(self, parent: SearchNode, action: Action) -> SearchNode | None:
        index = self.edges.get((parent.index, action))
        return self.nodes[index] if index is not None else None

    def action_to(self, node: SearchNode) -> Action | None:
        """The action leading from the parent to `node`, None for the root."""
        return self.actions[node.index]

    def parent(self, node: SearchNode) -> SearchNode | None:
        index = self.parents[node.index]
        return self.nodes[index] if index is not None else None

    def path_to_root(self, node: SearchNode) -> list[SearchNode]:
        """The node followed by its ancestors, root last."""
        path = []
        current: SearchNode | None = node
        while current is not None:
            path.append(current)
            current = self.parent(current)
        return path

    def __len__(self) -> int:
        return len(self.nodes)
