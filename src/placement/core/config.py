"""
Placement Optimizer Configuration Module.

This module defines configuration classes for the placement genetic algorithm,
including evolution parameters, cost-function weights, and runtime settings.
"""

from typing import Optional, Dict, Any, Literal
from pydantic import BaseModel, Field, ConfigDict, model_validator
import json
import os


class EvolutionParameters(BaseModel):
    """Parameters controlling the genetic algorithm evolution process."""

    model_config = ConfigDict(validate_assignment=True)

    population_size: int = Field(
        default=50,
        ge=1,
        description="Number of individuals in the population"
    )
    max_generations: int = Field(
        default=20,
        ge=0,
        description="Number of generations to evolve"
    )
    crossover_rate: float = Field(
        default=0.8,
        ge=0.0,
        le=1.0,
        description="Probability of inheriting each unit's node from the first parent"
    )
    mutation_rate: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Probability of mutating a freshly bred child"
    )
    tournament_size: int = Field(
        default=3,
        ge=1,
        description="Number of draws in tournament selection"
    )

    @model_validator(mode="after")
    def validate_tournament_size(self) -> "EvolutionParameters":
        """Ensure the tournament is not larger than the population."""
        if self.tournament_size > self.population_size:
            raise ValueError(
                f"Tournament size ({self.tournament_size}) must not exceed "
                f"population size ({self.population_size})"
            )
        return self


class FitnessWeights(BaseModel):
    """Weights and thresholds of the energy-aware cost function."""

    overload: float = Field(default=10.0, ge=0.0, description="Per-dimension overload weight")
    low_utilization_threshold: float = Field(
        default=0.3,
        gt=0.0,
        le=1.0,
        description="Average utilization below which a node counts as lightly used"
    )
    low_utilization: float = Field(default=2.0, ge=0.0, description="Lightly-used node weight")
    residual_waste: float = Field(default=0.5, ge=0.0, description="Idle capacity weight on used nodes")
    active_node: float = Field(default=3.0, ge=0.0, description="Cost of each powered-on node")
    communication: float = Field(default=1.0, ge=0.0, description="Communication cost weight")


class MutationSettings(BaseModel):
    """Configuration of the consolidation-biased mutation operator."""

    consolidation_bias: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Probability of moving a unit onto an already occupied node"
    )


class LoggingConfig(BaseModel):
    """Configuration for logging and monitoring."""

    enable_logging: bool = Field(
        default=True,
        description="Enable evolution progress logging"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level"
    )
    log_interval: int = Field(
        default=5,
        ge=1,
        description="Generations between progress logs"
    )
    metrics_export: bool = Field(
        default=True,
        description="Emit progress metrics through logfire"
    )


class ParallelizationConfig(BaseModel):
    """Configuration for parallel fitness evaluation."""

    enable_parallel: bool = Field(
        default=False,
        description="Evaluate each generation's children on a thread pool"
    )
    num_workers: Optional[int] = Field(
        default=None,
        ge=1,
        description="Number of parallel workers (None for auto)"
    )


class PlacementConfig(BaseModel):
    """Main configuration class for the placement optimizer."""

    model_config = ConfigDict(
        validate_assignment=True,
        extra='forbid'
    )

    evolution: EvolutionParameters = Field(
        default_factory=EvolutionParameters,
        description="Evolution parameters"
    )
    fitness: FitnessWeights = Field(
        default_factory=FitnessWeights,
        description="Cost function weights"
    )
    mutation: MutationSettings = Field(
        default_factory=MutationSettings,
        description="Mutation operator settings"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging and monitoring configuration"
    )
    parallelization: ParallelizationConfig = Field(
        default_factory=ParallelizationConfig,
        description="Parallel processing configuration"
    )

    random_seed: Optional[int] = Field(
        default=None,
        description="Random seed for reproducibility"
    )

    @classmethod
    def from_env(cls) -> "PlacementConfig":
        """Create configuration from environment variables."""
        config_dict: Dict[str, Any] = {}

        if pop_size := os.getenv("PLACEMENT_POPULATION_SIZE"):
            config_dict.setdefault("evolution", {})["population_size"] = int(pop_size)
        if generations := os.getenv("PLACEMENT_MAX_GENERATIONS"):
            config_dict.setdefault("evolution", {})["max_generations"] = int(generations)
        if crossover_rate := os.getenv("PLACEMENT_CROSSOVER_RATE"):
            config_dict.setdefault("evolution", {})["crossover_rate"] = float(crossover_rate)
        if mutation_rate := os.getenv("PLACEMENT_MUTATION_RATE"):
            config_dict.setdefault("evolution", {})["mutation_rate"] = float(mutation_rate)
        if tournament_size := os.getenv("PLACEMENT_TOURNAMENT_SIZE"):
            config_dict.setdefault("evolution", {})["tournament_size"] = int(tournament_size)

        if num_workers := os.getenv("PLACEMENT_NUM_WORKERS"):
            config_dict.setdefault("parallelization", {})["num_workers"] = int(num_workers)
            config_dict["parallelization"]["enable_parallel"] = True

        if random_seed := os.getenv("PLACEMENT_RANDOM_SEED"):
            config_dict["random_seed"] = int(random_seed)

        return cls(**config_dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return self.model_dump()

    def save(self, filepath: str) -> None:
        """Save configuration to JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: str) -> "PlacementConfig":
        """Load configuration from JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)
        return cls(**data)


def create_default_config() -> PlacementConfig:
    """Configuration used by the reference datacenter demonstration."""
    return PlacementConfig()


def create_test_config() -> PlacementConfig:
    """Create a configuration suitable for testing (smaller, faster, seeded)."""
    return PlacementConfig(
        evolution=EvolutionParameters(
            population_size=12,
            max_generations=6,
            crossover_rate=0.8,
            mutation_rate=0.3,
            tournament_size=3
        ),
        logging=LoggingConfig(
            log_interval=1,
            metrics_export=False
        ),
        parallelization=ParallelizationConfig(
            enable_parallel=False
        ),
        random_seed=42
    )


def create_production_config() -> PlacementConfig:
    """Create a configuration suitable for larger clusters."""
    return PlacementConfig(
        evolution=EvolutionParameters(
            population_size=200,
            max_generations=150,
            crossover_rate=0.8,
            mutation_rate=0.2,
            tournament_size=4
        ),
        logging=LoggingConfig(
            log_interval=10,
            metrics_export=True
        ),
        parallelization=ParallelizationConfig(
            enable_parallel=True
        )
    )
