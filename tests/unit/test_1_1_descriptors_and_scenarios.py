"""
Unit tests for resource/workload descriptors and scenarios.

Tests cover:
- Capacity and demand vectors
- Descriptor validation
- Reference datacenter contents
- Scenario JSON round trip
"""

import json

import numpy as np
import pytest

from src.placement.core.descriptors import (
    ResourceNode,
    WorkloadUnit,
    RESOURCE_DIMENSIONS,
    capacity_matrix,
    demand_matrix,
    check_unique_ids
)
from src.placement.scenarios import (
    create_reference_datacenter,
    load_scenario,
    save_scenario
)


class TestDescriptors:
    """Test suite for node and unit descriptors."""

    def test_capacity_vector_order(self):
        """Capacity follows RESOURCE_DIMENSIONS order."""
        node = ResourceNode(node_id=3, compute=1.0, memory=2.0, storage=3.0, bandwidth=4.0)

        assert RESOURCE_DIMENSIONS == ("compute", "memory", "storage", "bandwidth")
        np.testing.assert_array_equal(node.capacity, [1.0, 2.0, 3.0, 4.0])

    def test_demand_vector(self):
        unit = WorkloadUnit(unit_id=1, compute=10, memory=20, storage=30, bandwidth=40)
        np.testing.assert_array_equal(unit.demand, [10.0, 20.0, 30.0, 40.0])

    def test_zero_demand_allowed(self):
        unit = WorkloadUnit(unit_id=1, compute=0, memory=0, storage=0, bandwidth=0)
        assert unit.demand.sum() == 0

    def test_negative_demand_rejected(self):
        with pytest.raises(ValueError):
            WorkloadUnit(unit_id=1, compute=-1, memory=0, storage=0, bandwidth=0)

    def test_non_positive_capacity_rejected(self):
        with pytest.raises(ValueError):
            ResourceNode(node_id=0, compute=100, memory=0, storage=10, bandwidth=10)
        with pytest.raises(ValueError):
            ResourceNode(node_id=0, compute=100, memory=10, storage=-5, bandwidth=10)

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_values_rejected(self, value):
        with pytest.raises(ValueError):
            ResourceNode(node_id=0, compute=value, memory=10, storage=10, bandwidth=10)
        with pytest.raises(ValueError):
            WorkloadUnit(unit_id=0, compute=1, memory=1, storage=value, bandwidth=1)

    def test_descriptors_are_immutable(self):
        node = ResourceNode(node_id=0, compute=1, memory=1, storage=1, bandwidth=1)
        with pytest.raises(AttributeError):
            node.compute = 5

    def test_dict_round_trip(self):
        node = ResourceNode(node_id=7, compute=4000, memory=16384, storage=1e6, bandwidth=1e4)
        unit = WorkloadUnit(unit_id=2, compute=1000, memory=2048, storage=1e5, bandwidth=1e3)

        assert ResourceNode.from_dict(node.to_dict()) == node
        assert WorkloadUnit.from_dict(unit.to_dict()) == unit

    def test_stacked_matrices(self, small_nodes, small_units):
        assert capacity_matrix(small_nodes).shape == (4, 4)
        assert demand_matrix(small_units).shape == (6, 4)
        assert capacity_matrix([]).shape == (0, 4)
        assert demand_matrix([]).shape == (0, 4)

    def test_duplicate_identifiers_rejected(self, small_nodes, small_units):
        check_unique_ids(small_units, small_nodes)

        with pytest.raises(ValueError):
            check_unique_ids(small_units + [small_units[0]], small_nodes)
        with pytest.raises(ValueError):
            check_unique_ids(small_units, small_nodes + [small_nodes[1]])


class TestScenarios:
    """Test suite for the reference datacenter and scenario files."""

    def test_reference_datacenter_size(self):
        units, nodes = create_reference_datacenter()

        assert len(units) == 20
        assert len(nodes) == 10
        assert [n.node_id for n in nodes] == list(range(10))
        assert [u.unit_id for u in units] == list(range(20))

    def test_reference_compute_is_total_mips(self):
        units, nodes = create_reference_datacenter()

        # Host 0: 4 PEs x 1000 MIPS; host 2: 8 PEs x 1500 MIPS
        assert nodes[0].compute == 4000
        assert nodes[2].compute == 12000
        assert nodes[0].memory == 16384
        assert nodes[0].bandwidth == 10000
        assert nodes[0].storage == 1000000

        # VM 2: 1500 MIPS x 2 PEs
        assert units[2].compute == 3000
        assert units[2].memory == 4096
        assert units[2].bandwidth == 2000
        assert units[2].storage == 200000

    def test_reference_fits_in_datacenter(self):
        units, nodes = create_reference_datacenter()

        total_demand = demand_matrix(units).sum(axis=0)
        total_capacity = capacity_matrix(nodes).sum(axis=0)
        assert np.all(total_demand <= total_capacity)

    def test_save_and_load_scenario(self, tmp_path, small_units, small_nodes):
        path = tmp_path / "scenario.json"
        save_scenario(str(path), small_units, small_nodes)

        data = json.loads(path.read_text())
        assert len(data["units"]) == 6
        assert len(data["nodes"]) == 4

        units, nodes = load_scenario(str(path))
        assert units == small_units
        assert nodes == small_nodes
