"""
Base classes for fitness evaluation of placement solutions.

This module provides the abstract interface shared by cost functions that
score AllocationSolution instances. Lower scores are better.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, List, Optional
from dataclasses import dataclass

from src.placement.core.solution import AllocationSolution


@dataclass
class FitnessMetrics:
    """Overall cost of a solution with its per-term breakdown."""
    score: float
    breakdown: Dict[str, float]
    details: Dict[str, Any]


class FitnessFunction(ABC):
    """
    Abstract base class for placement cost functions.

    Implementations are pure: they read the solution and the static run
    inputs and never write to the solution. The caller stores the returned
    score into ``solution.fitness``.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}

    @abstractmethod
    def evaluate(self, solution: AllocationSolution) -> float:
        """
        Evaluate a placement and return its cost.

        Args:
            solution: The placement to evaluate

        Returns:
            Non-negative cost, lower is better
        """
        pass

    @abstractmethod
    def calculate_metrics(self, solution: AllocationSolution) -> FitnessMetrics:
        """
        Calculate the cost of a placement together with its breakdown.

        Args:
            solution: The placement to analyze

        Returns:
            Cost, per-term breakdown and per-node details
        """
        pass

    def evaluate_batch(self, solutions: List[AllocationSolution]) -> List[float]:
        """Evaluate several solutions, preserving order."""
        return [self.evaluate(solution) for solution in solutions]
