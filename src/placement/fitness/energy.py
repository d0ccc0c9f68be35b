"""
Energy-aware cost function for workload placement.

Scores a placement with four additive terms:

- overload: strong penalty for every dimension where a node's aggregate
  demand exceeds its capacity, relative to that capacity
- waste: lightly used nodes (average utilization under the threshold) are
  penalized in proportion to how empty they are; well used nodes pay a small
  amount for their residual idle capacity
- active nodes: a fixed cost for every powered-on node, the dominant energy
  term
- communication: for every pair of communicating units placed on different
  nodes, the communication weight times the node-id distance plus one,
  normalized by the number of unit pairs

Idle nodes are excluded from every per-node term.
"""

from typing import Dict, Any, List, Optional, Sequence

import numpy as np

from src.placement.core.config import FitnessWeights
from src.placement.core.communication import CommunicationModel
from src.placement.core.descriptors import (
    ResourceNode,
    WorkloadUnit,
    RESOURCE_DIMENSIONS,
    capacity_matrix,
    demand_matrix,
    node_identifiers
)
from src.placement.core.solution import AllocationSolution, UNASSIGNED
from src.placement.fitness.base import FitnessFunction, FitnessMetrics


class EnergyAwareFitness(FitnessFunction):
    """Composite consolidation cost over a fixed set of nodes and units."""

    def __init__(
        self,
        nodes: Sequence[ResourceNode],
        units: Sequence[WorkloadUnit],
        communication: CommunicationModel,
        weights: Optional[FitnessWeights] = None
    ):
        self.weights = weights or FitnessWeights()
        super().__init__(self.weights.model_dump())

        self.nodes = list(nodes)
        self.units = list(units)
        self.communication = communication

        self.capacities = capacity_matrix(self.nodes)
        self.demands = demand_matrix(self.units)
        self.node_ids = node_identifiers(self.nodes)

    def evaluate(self, solution: AllocationSolution) -> float:
        return float(sum(self._terms(solution).values()))

    def calculate_metrics(self, solution: AllocationSolution) -> FitnessMetrics:
        terms = self._terms(solution)
        loads = solution.node_loads(self.demands, len(self.nodes))

        per_node: List[Dict[str, Any]] = []
        for node in sorted(solution.active_nodes):
            utilization = loads[node] / self.capacities[node]
            per_node.append({
                "node_id": self.nodes[node].node_id,
                "units": [self.units[u].unit_id for u in solution.units_on(node)],
                "utilization": dict(zip(RESOURCE_DIMENSIONS, utilization.tolist())),
                "average_utilization": float(utilization.mean()),
                "overloaded": bool(np.any(loads[node] > self.capacities[node]))
            })

        return FitnessMetrics(
            score=float(sum(terms.values())),
            breakdown=terms,
            details={
                "active_nodes": per_node,
                "active_node_count": solution.active_node_count,
                "node_count": len(self.nodes)
            }
        )

    def _terms(self, solution: AllocationSolution) -> Dict[str, float]:
        active = np.array(sorted(solution.active_nodes), dtype=np.int64)
        loads = solution.node_loads(self.demands, len(self.nodes))[active]
        capacities = self.capacities[active]

        return {
            "overload": self._overload(loads, capacities),
            "waste": self._waste(loads, capacities),
            "active_nodes": self.weights.active_node * len(active),
            "communication": self.weights.communication * self.communication_cost(solution)
        }

    def _overload(self, loads: np.ndarray, capacities: np.ndarray) -> float:
        excess = np.maximum(loads - capacities, 0.0)
        return float(self.weights.overload * np.sum(excess / capacities))

    def _waste(self, loads: np.ndarray, capacities: np.ndarray) -> float:
        if loads.shape[0] == 0:
            return 0.0

        threshold = self.weights.low_utilization_threshold
        average_utilization = (loads / capacities).mean(axis=1)
        residual = (np.maximum(capacities - loads, 0.0) / capacities).mean(axis=1)

        penalties = np.where(
            average_utilization < threshold,
            self.weights.low_utilization * (threshold - average_utilization) / threshold,
            self.weights.residual_waste * residual
        )
        return float(np.sum(penalties))

    def communication_cost(self, solution: AllocationSolution) -> float:
        """Normalized communication cost, 0 for fewer than two units."""
        pair_count = self.communication.pair_count
        if pair_count == 0:
            return 0.0

        rows, cols = self.communication.pair_indices
        weights = self.communication.upper_weights()
        node_a = solution.assignment[rows]
        node_b = solution.assignment[cols]

        split = (
            (weights > 0)
            & (node_a != UNASSIGNED)
            & (node_b != UNASSIGNED)
            & (node_a != node_b)
        )
        if not np.any(split):
            return 0.0

        distance = np.abs(self.node_ids[node_a[split]] - self.node_ids[node_b[split]]) + 1
        return float(np.sum(weights[split] * distance) / pair_count)
