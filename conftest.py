"""
PyTest configuration and fixtures for the placement optimizer.

This module provides shared test fixtures: small placement problems,
seeded generators, test configurations and API clients.
"""

import os
import sys
from typing import Generator, AsyncGenerator, List

import numpy as np
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

# Add project root to Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from main import app
from src.core.config import settings
from src.placement.core.config import PlacementConfig, create_test_config
from src.placement.core.descriptors import ResourceNode, WorkloadUnit


# Override settings for testing
settings.environment = "testing"


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded generator for reproducible operator tests."""
    return np.random.default_rng(1234)


@pytest.fixture
def test_config() -> PlacementConfig:
    """Small, seeded optimizer configuration."""
    return create_test_config()


@pytest.fixture
def small_nodes() -> List[ResourceNode]:
    """Four hosts, two large and two small."""
    return [
        ResourceNode(node_id=0, compute=4000, memory=16384, storage=1000000, bandwidth=10000),
        ResourceNode(node_id=1, compute=4000, memory=8192, storage=500000, bandwidth=5000),
        ResourceNode(node_id=2, compute=12000, memory=32768, storage=2000000, bandwidth=20000),
        ResourceNode(node_id=3, compute=2000, memory=8192, storage=500000, bandwidth=5000),
    ]


@pytest.fixture
def small_units() -> List[WorkloadUnit]:
    """Six virtual machines that fit comfortably on two hosts."""
    return [
        WorkloadUnit(unit_id=0, compute=1000, memory=2048, storage=100000, bandwidth=1000),
        WorkloadUnit(unit_id=1, compute=1000, memory=2048, storage=100000, bandwidth=1000),
        WorkloadUnit(unit_id=2, compute=3000, memory=4096, storage=200000, bandwidth=2000),
        WorkloadUnit(unit_id=3, compute=1000, memory=1024, storage=50000, bandwidth=1000),
        WorkloadUnit(unit_id=4, compute=1200, memory=2048, storage=150000, bandwidth=1500),
        WorkloadUnit(unit_id=5, compute=1000, memory=2048, storage=100000, bandwidth=1000),
    ]


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Create a test client."""
    with TestClient(app) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture
def optimization_payload() -> dict:
    """Small optimization request body."""
    return {
        "units": [
            {"unit_id": i, "compute": 1000, "memory": 2048, "storage": 100000, "bandwidth": 1000}
            for i in range(6)
        ],
        "nodes": [
            {"node_id": i, "compute": 4000, "memory": 16384, "storage": 1000000, "bandwidth": 10000}
            for i in range(4)
        ],
        "evolution": {
            "population_size": 10,
            "max_generations": 5,
            "crossover_rate": 0.8,
            "mutation_rate": 0.2,
            "tournament_size": 3
        },
        "random_seed": 7
    }
