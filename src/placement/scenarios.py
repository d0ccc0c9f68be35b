"""
Placement scenarios.

Provides the reference datacenter (10 heterogeneous hosts, 20 virtual
machines) used for demonstrations and benchmarks, and JSON loading/saving of
arbitrary scenarios.
"""

from typing import List, Tuple, Dict, Any
from pathlib import Path
import json

from src.placement.core.descriptors import ResourceNode, WorkloadUnit


# (processing elements, MIPS per element, RAM MB, bandwidth Mbps, storage MB)
REFERENCE_HOSTS = [
    (4, 1000, 16384, 10000, 1000000),
    (2, 2000, 8192, 5000, 500000),
    (8, 1500, 32768, 20000, 2000000),
    (4, 1200, 16384, 10000, 1000000),
    (6, 1500, 24576, 15000, 1500000),
    (2, 1800, 8192, 5000, 500000),
    (8, 1400, 32768, 20000, 2000000),
    (4, 1600, 16384, 10000, 1000000),
    (6, 1300, 24576, 15000, 1500000),
    (4, 1100, 16384, 10000, 1000000),
]

# (MIPS per element, processing elements, RAM MB, bandwidth Mbps, image size MB)
REFERENCE_VMS = [
    (1000, 1, 2048, 1000, 100000),
    (1000, 1, 2048, 1000, 100000),
    (1500, 2, 4096, 2000, 200000),
    (1000, 1, 1024, 1000, 50000),
    (1200, 1, 2048, 1500, 150000),
    (1000, 1, 2048, 1000, 100000),
    (1500, 2, 4096, 2000, 200000),
    (1000, 1, 1024, 1000, 50000),
    (1800, 2, 4096, 2000, 200000),
    (1000, 1, 2048, 1000, 100000),
    (1200, 1, 3072, 1500, 150000),
    (1000, 1, 1024, 1000, 50000),
    (1500, 2, 4096, 2000, 200000),
    (1000, 1, 2048, 1000, 100000),
    (1600, 2, 4096, 2000, 200000),
    (1000, 1, 1024, 1000, 50000),
    (1200, 1, 2048, 1500, 150000),
    (1000, 1, 2048, 1000, 100000),
    (1500, 2, 4096, 2000, 200000),
    (1000, 1, 1024, 1000, 50000),
]


def create_reference_hosts() -> List[ResourceNode]:
    """Hosts of the reference datacenter; compute capacity is total MIPS."""
    return [
        ResourceNode(
            node_id=i,
            compute=float(pes * mips),
            memory=float(ram),
            storage=float(storage),
            bandwidth=float(bw)
        )
        for i, (pes, mips, ram, bw, storage) in enumerate(REFERENCE_HOSTS)
    ]


def create_reference_vms() -> List[WorkloadUnit]:
    """Virtual machines of the reference datacenter; compute demand is total MIPS."""
    return [
        WorkloadUnit(
            unit_id=i,
            compute=float(mips * pes),
            memory=float(ram),
            storage=float(size),
            bandwidth=float(bw)
        )
        for i, (mips, pes, ram, bw, size) in enumerate(REFERENCE_VMS)
    ]


def create_reference_datacenter() -> Tuple[List[WorkloadUnit], List[ResourceNode]]:
    """Return (units, nodes) of the reference datacenter."""
    return create_reference_vms(), create_reference_hosts()


def scenario_to_dict(units: List[WorkloadUnit], nodes: List[ResourceNode]) -> Dict[str, Any]:
    return {
        "units": [unit.to_dict() for unit in units],
        "nodes": [node.to_dict() for node in nodes]
    }


def scenario_from_dict(data: Dict[str, Any]) -> Tuple[List[WorkloadUnit], List[ResourceNode]]:
    units = [WorkloadUnit.from_dict(item) for item in data.get("units", [])]
    nodes = [ResourceNode.from_dict(item) for item in data.get("nodes", [])]
    return units, nodes


def save_scenario(filepath: str, units: List[WorkloadUnit], nodes: List[ResourceNode]) -> None:
    """Save a scenario to a JSON file."""
    with open(filepath, 'w') as f:
        json.dump(scenario_to_dict(units, nodes), f, indent=2)


def load_scenario(filepath: str) -> Tuple[List[WorkloadUnit], List[ResourceNode]]:
    """Load a scenario from a JSON file."""
    with open(Path(filepath), 'r') as f:
        data = json.load(f)
    return scenario_from_dict(data)
