"""
Resource and Workload Descriptors.

This module defines the static inputs of a placement run: the physical hosts
(resource nodes) and the virtual machines (workload units) to be placed on
them. Both carry a vector over the same four resource dimensions.
"""

from typing import Dict, Any, List, Sequence
from dataclasses import dataclass
import math

import numpy as np


RESOURCE_DIMENSIONS = ("compute", "memory", "storage", "bandwidth")


def _check_non_negative(kind: str, identifier: int, values: Dict[str, float]) -> None:
    for name, value in values.items():
        if not math.isfinite(value):
            raise ValueError(f"{kind} {identifier}: {name} must be finite, got {value}")
        if value < 0:
            raise ValueError(f"{kind} {identifier}: {name} must be non-negative, got {value}")


@dataclass(frozen=True)
class ResourceNode:
    """
    A physical host with a fixed capacity on every resource dimension.

    Capacities must be strictly positive since every cost term is expressed
    relative to them.
    """

    node_id: int
    compute: float
    memory: float
    storage: float
    bandwidth: float

    def __post_init__(self):
        values = {name: getattr(self, name) for name in RESOURCE_DIMENSIONS}
        _check_non_negative("ResourceNode", self.node_id, values)
        for name, value in values.items():
            if value == 0:
                raise ValueError(f"ResourceNode {self.node_id}: {name} capacity must be positive")

    @property
    def capacity(self) -> np.ndarray:
        """Capacity vector ordered as RESOURCE_DIMENSIONS."""
        return np.array([getattr(self, name) for name in RESOURCE_DIMENSIONS], dtype=float)

    def to_dict(self) -> Dict[str, Any]:
        return {"node_id": self.node_id, **{name: getattr(self, name) for name in RESOURCE_DIMENSIONS}}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResourceNode":
        return cls(
            node_id=int(data["node_id"]),
            **{name: float(data[name]) for name in RESOURCE_DIMENSIONS}
        )


@dataclass(frozen=True)
class WorkloadUnit:
    """A virtual machine with a fixed demand on every resource dimension."""

    unit_id: int
    compute: float
    memory: float
    storage: float
    bandwidth: float

    def __post_init__(self):
        _check_non_negative(
            "WorkloadUnit",
            self.unit_id,
            {name: getattr(self, name) for name in RESOURCE_DIMENSIONS}
        )

    @property
    def demand(self) -> np.ndarray:
        """Demand vector ordered as RESOURCE_DIMENSIONS."""
        return np.array([getattr(self, name) for name in RESOURCE_DIMENSIONS], dtype=float)

    def to_dict(self) -> Dict[str, Any]:
        return {"unit_id": self.unit_id, **{name: getattr(self, name) for name in RESOURCE_DIMENSIONS}}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorkloadUnit":
        return cls(
            unit_id=int(data["unit_id"]),
            **{name: float(data[name]) for name in RESOURCE_DIMENSIONS}
        )


def capacity_matrix(nodes: Sequence[ResourceNode]) -> np.ndarray:
    """Stack node capacities into an (n_nodes, 4) array."""
    if not nodes:
        return np.zeros((0, len(RESOURCE_DIMENSIONS)), dtype=float)
    return np.vstack([node.capacity for node in nodes])


def demand_matrix(units: Sequence[WorkloadUnit]) -> np.ndarray:
    """Stack unit demands into an (n_units, 4) array."""
    if not units:
        return np.zeros((0, len(RESOURCE_DIMENSIONS)), dtype=float)
    return np.vstack([unit.demand for unit in units])


def node_identifiers(nodes: Sequence[ResourceNode]) -> np.ndarray:
    """Node ids in list order, used as the distance proxy between hosts."""
    return np.array([node.node_id for node in nodes], dtype=np.int64)


def check_unique_ids(units: List[WorkloadUnit], nodes: List[ResourceNode]) -> None:
    """Raise ValueError when two units or two nodes share an identifier."""
    unit_ids = [unit.unit_id for unit in units]
    if len(set(unit_ids)) != len(unit_ids):
        raise ValueError("Workload unit identifiers must be unique")

    node_ids = [node.node_id for node in nodes]
    if len(set(node_ids)) != len(node_ids):
        raise ValueError("Resource node identifiers must be unique")
