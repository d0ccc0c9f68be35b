"""
Allocation Solution (genome) for the placement genetic algorithm.

An AllocationSolution maps every workload unit to exactly one resource node.
Units and nodes are addressed by their position in the engine's unit and node
lists, so the mapping is a fixed-size integer array and cloning is an array
copy.
"""

from typing import Dict, Any, List, Optional, Set, Sequence
from dataclasses import dataclass
import math

import numpy as np

from src.placement.core.descriptors import ResourceNode, WorkloadUnit


UNASSIGNED = -1


@dataclass(eq=False)
class AllocationSolution:
    """
    Candidate placement of all workload units.

    Attributes:
        assignment: Node position per unit position (UNASSIGNED when empty)
        active_nodes: Node positions hosting at least one unit, derived from
            assignment when not given
        fitness: Cached cost, lower is better (inf before evaluation)
        generation: Generation in which this solution was bred

    Two solutions are equal when they place every unit on the same node.
    """

    assignment: np.ndarray
    active_nodes: Optional[Set[int]] = None
    fitness: float = math.inf
    generation: int = 0

    def __post_init__(self):
        self.assignment = np.asarray(self.assignment, dtype=np.int64)
        if self.active_nodes is None:
            self.active_nodes = {int(n) for n in self.assignment.tolist() if n != UNASSIGNED}

    @classmethod
    def empty(cls, unit_count: int) -> "AllocationSolution":
        """Create a solution with no unit assigned yet."""
        return cls(assignment=np.full(unit_count, UNASSIGNED, dtype=np.int64))

    @classmethod
    def random(cls, unit_count: int, node_count: int, rng: np.random.Generator) -> "AllocationSolution":
        """Place every unit on an independently, uniformly chosen node."""
        solution = cls.empty(unit_count)
        if unit_count == 0:
            return solution

        for unit, node in enumerate(rng.integers(0, node_count, size=unit_count)):
            solution.allocate(unit, int(node))
        return solution

    @property
    def unit_count(self) -> int:
        return int(self.assignment.shape[0])

    @property
    def active_node_count(self) -> int:
        return len(self.active_nodes)

    @property
    def evaluated(self) -> bool:
        return not math.isinf(self.fitness)

    def node_of(self, unit: int) -> Optional[int]:
        """Node position hosting the unit, or None if it is unassigned."""
        node = int(self.assignment[unit])
        return None if node == UNASSIGNED else node

    def units_on(self, node: int) -> List[int]:
        return [int(u) for u in np.flatnonzero(self.assignment == node)]

    def is_complete(self) -> bool:
        """True when every unit has a node."""
        return bool(np.all(self.assignment != UNASSIGNED))

    def allocate(self, unit: int, node: int) -> None:
        """Assign an unassigned unit during construction."""
        self.assignment[unit] = node
        self.active_nodes.add(node)

    def reallocate(self, unit: int, node: int) -> None:
        """
        Move a unit to another node.

        The old node leaves the active set when this unit was its last
        occupant. Mapping and active set are updated together.
        """
        old_node = int(self.assignment[unit])
        self.assignment[unit] = node
        if old_node != UNASSIGNED and old_node != node and not np.any(self.assignment == old_node):
            self.active_nodes.discard(old_node)
        self.active_nodes.add(node)

    def clone(self) -> "AllocationSolution":
        """Independent copy of mapping, active set and fitness."""
        return AllocationSolution(
            assignment=self.assignment.copy(),
            active_nodes=set(self.active_nodes),
            fitness=self.fitness,
            generation=self.generation
        )

    def node_loads(self, demands: np.ndarray, node_count: int) -> np.ndarray:
        """Aggregate demand per node position, shape (node_count, 4)."""
        loads = np.zeros((node_count, demands.shape[1]), dtype=float)
        assigned = self.assignment != UNASSIGNED
        np.add.at(loads, self.assignment[assigned], demands[assigned])
        return loads

    def to_mapping(self, units: Sequence[WorkloadUnit], nodes: Sequence[ResourceNode]) -> Dict[int, int]:
        """Translate positions into a unit-id -> node-id mapping."""
        return {
            units[u].unit_id: nodes[n].node_id
            for u, n in enumerate(self.assignment.tolist())
            if n != UNASSIGNED
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "assignment": self.assignment.tolist(),
            "active_nodes": sorted(self.active_nodes),
            "fitness": self.fitness,
            "generation": self.generation
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AllocationSolution":
        return cls(
            assignment=np.array(data["assignment"], dtype=np.int64),
            fitness=data.get("fitness", math.inf),
            generation=data.get("generation", 0)
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AllocationSolution):
            return NotImplemented
        return bool(np.array_equal(self.assignment, other.assignment))

    def __lt__(self, other: "AllocationSolution") -> bool:
        """Compare solutions by fitness (for sorting)."""
        return self.fitness < other.fitness
