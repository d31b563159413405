"""Dependency graphs and the bisimulation-game instantiation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass
from enum import IntEnum

from bisimgame.core.enums import Side
from bisimgame.core.move import Move
from bisimgame.core.process import Action
from bisimgame.core.successors import SuccessorGenerator


class DependencyGraph(ABC):
    """Graph of nodes connected by hyper-edges, rooted at node ``0``."""

    __slots__ = ()

    @property
    def root(self) -> int:
        return 0

    @abstractmethod
    def get_hyper_edges(self, node: int) -> list[list[int]]:
        """Hyper-edges leaving *node*; each is the list of its target nodes."""

    def reachable_nodes(self) -> list[int]:
        """All nodes reachable from the root, in breadth-first order."""
        order = [self.root]
        seen = {self.root}
        queue = deque(order)
        while queue:
            node = queue.popleft()
            for edge in self.get_hyper_edges(node):
                for target in edge:
                    if target not in seen:
                        seen.add(target)
                        order.append(target)
                        queue.append(target)
        return order


class NodeKind(IntEnum):
    PAIR = 0  # Attacker to move
    ATTACK = 1  # Defender must answer


@dataclass(frozen=True, slots=True)
class DgNode:
    """Game configuration behind a dependency-graph node.

    For ``ATTACK`` nodes, *side* is where the Attacker moved and *action* is
    the label the Defender has to match on the other side.
    """

    kind: NodeKind
    left: int
    right: int
    side: Side | None = None
    action: Action | None = None


class BisimulationDependencyGraph(DependencyGraph):
    """Dependency graph of the bisimulation game for ``(left_id, right_id)``.

    Nodes are created lazily the first time an option leads to them, so ids
    follow discovery order.
    """

    __slots__ = (
        "_attacker_succ_gen",
        "_defender_succ_gen",
        "_nodes",
        "_index",
        "_attacker_options",
        "_defender_options",
    )

    def __init__(
        self,
        attacker_succ_gen: SuccessorGenerator,
        defender_succ_gen: SuccessorGenerator,
        left_id: int,
        right_id: int,
    ) -> None:
        self._attacker_succ_gen = attacker_succ_gen
        self._defender_succ_gen = defender_succ_gen
        self._nodes: list[DgNode] = []
        self._index: dict[DgNode, int] = {}
        self._attacker_options: dict[int, list[Move]] = {}
        self._defender_options: dict[int, list[Move]] = {}
        self._node_id(DgNode(NodeKind.PAIR, left_id, right_id))

    def __len__(self) -> int:
        return len(self._nodes)

    def node(self, node_id: int) -> DgNode:
        return self._nodes[node_id]

    def get_attacker_options(self, node_id: int) -> list[Move]:
        options = self._attacker_options.get(node_id)
        if options is None:
            options = self._compute_attacker_options(node_id)
            self._attacker_options[node_id] = options
        return list(options)

    def get_defender_options(self, node_id: int) -> list[Move]:
        options = self._defender_options.get(node_id)
        if options is None:
            options = self._compute_defender_options(node_id)
            self._defender_options[node_id] = options
        return list(options)

    def get_hyper_edges(self, node: int) -> list[list[int]]:
        if self._nodes[node].kind is NodeKind.PAIR:
            return [[move.next_node] for move in self.get_attacker_options(node)]
        return [[move.next_node for move in self.get_defender_options(node)]]

    # ── Internal ─────────────────────────────────────────────────────────

    def _node_id(self, node: DgNode) -> int:
        node_id = self._index.get(node)
        if node_id is None:
            node_id = len(self._nodes)
            self._nodes.append(node)
            self._index[node] = node_id
        return node_id

    def _compute_attacker_options(self, node_id: int) -> list[Move]:
        node = self._nodes[node_id]
        if node.kind is not NodeKind.PAIR:
            return []

        options: list[Move] = []
        for t in self._attacker_succ_gen.get_successors(node.left):
            attack = DgNode(
                NodeKind.ATTACK, t.target_process.id, node.right, Side.LEFT, t.action
            )
            options.append(
                Move(t.target_process, self._node_id(attack), t.action, Side.LEFT)
            )
        for t in self._attacker_succ_gen.get_successors(node.right):
            attack = DgNode(
                NodeKind.ATTACK, node.left, t.target_process.id, Side.RIGHT, t.action
            )
            options.append(
                Move(t.target_process, self._node_id(attack), t.action, Side.RIGHT)
            )
        return options

    def _compute_defender_options(self, node_id: int) -> list[Move]:
        node = self._nodes[node_id]
        if node.kind is not NodeKind.ATTACK:
            return []

        options: list[Move] = []
        if node.side is Side.LEFT:
            for t in self._defender_succ_gen.get_successors(node.right):
                if t.action != node.action:
                    continue
                pair = DgNode(NodeKind.PAIR, node.left, t.target_process.id)
                options.append(
                    Move(t.target_process, self._node_id(pair), t.action, Side.RIGHT)
                )
        else:
            for t in self._defender_succ_gen.get_successors(node.left):
                if t.action != node.action:
                    continue
                pair = DgNode(NodeKind.PAIR, t.target_process.id, node.right)
                options.append(
                    Move(t.target_process, self._node_id(pair), t.action, Side.LEFT)
                )
        return options
