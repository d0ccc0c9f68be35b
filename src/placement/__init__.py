"""
Energy-aware workload placement.

This package searches for an assignment of virtual machines to physical hosts
that keeps hosts within capacity while powering on as few of them as possible,
using a genetic algorithm with a consolidation-biased mutation operator.
"""

from src.placement.core import (
    PlacementConfig,
    EvolutionParameters,
    FitnessWeights,
    MutationSettings,
    LoggingConfig,
    ParallelizationConfig,
    create_default_config,
    create_test_config,
    create_production_config,
    ResourceNode,
    WorkloadUnit,
    CommunicationModel,
    AllocationSolution,
    Population,
    PlacementEngine,
    PlacementResult,
    optimize_placement
)
from src.placement.fitness import FitnessFunction, FitnessMetrics, EnergyAwareFitness
from src.placement.scenarios import create_reference_datacenter, load_scenario, save_scenario

__version__ = "1.0.0"

__all__ = [
    # Configuration
    "PlacementConfig",
    "EvolutionParameters",
    "FitnessWeights",
    "MutationSettings",
    "LoggingConfig",
    "ParallelizationConfig",
    "create_default_config",
    "create_test_config",
    "create_production_config",
    # Model
    "ResourceNode",
    "WorkloadUnit",
    "CommunicationModel",
    "AllocationSolution",
    "Population",
    # Engine
    "PlacementEngine",
    "PlacementResult",
    "optimize_placement",
    # Fitness
    "FitnessFunction",
    "FitnessMetrics",
    "EnergyAwareFitness",
    # Scenarios
    "create_reference_datacenter",
    "load_scenario",
    "save_scenario",
]
