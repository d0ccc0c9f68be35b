"""
Placement Core Module - Genetic Algorithm Components.

This module contains the core components of the placement optimizer,
including configuration, resource descriptors, the communication model,
the allocation genome, population management, variation operators and the
main evolution engine.
"""

from src.placement.core.config import (
    PlacementConfig,
    EvolutionParameters,
    FitnessWeights,
    MutationSettings,
    LoggingConfig,
    ParallelizationConfig,
    create_default_config,
    create_test_config,
    create_production_config
)

from src.placement.core.descriptors import (
    ResourceNode,
    WorkloadUnit,
    RESOURCE_DIMENSIONS
)

from src.placement.core.communication import (
    CommunicationModel,
    build_communication_matrix
)

from src.placement.core.solution import (
    AllocationSolution,
    UNASSIGNED
)

from src.placement.core.population import (
    Population,
    tournament_selection
)

from src.placement.core.operators import (
    uniform_crossover,
    consolidating_mutation,
    admissible_nodes
)

from src.placement.core.engine import (
    PlacementEngine,
    PlacementResult,
    optimize_placement
)

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

    # Descriptors
    "ResourceNode",
    "WorkloadUnit",
    "RESOURCE_DIMENSIONS",

    # Communication
    "CommunicationModel",
    "build_communication_matrix",

    # Genome and population
    "AllocationSolution",
    "UNASSIGNED",
    "Population",
    "tournament_selection",

    # Operators
    "uniform_crossover",
    "consolidating_mutation",
    "admissible_nodes",

    # Engine
    "PlacementEngine",
    "PlacementResult",
    "optimize_placement"
]
