"""
Fitness functions for placement evaluation.
"""

from src.placement.fitness.base import (
    FitnessFunction,
    FitnessMetrics
)

from src.placement.fitness.energy import (
    EnergyAwareFitness
)

__all__ = [
    "FitnessFunction",
    "FitnessMetrics",
    "EnergyAwareFitness",
]
