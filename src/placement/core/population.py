"""
Population Management for the placement genetic algorithm.

This module manages the ordered collection of AllocationSolution instances
that make up one generation, including random initialization, tournament
selection and summary statistics.
"""

from typing import List, Dict, Any, Optional
import statistics

import numpy as np

from src.placement.core.solution import AllocationSolution


def tournament_selection(
    solutions: List[AllocationSolution],
    tournament_size: int,
    rng: np.random.Generator
) -> AllocationSolution:
    """
    Select a parent by tournament.

    Draws ``tournament_size`` individuals uniformly with replacement and
    returns a clone of the one with the lowest fitness. On ties the earliest
    draw wins.

    Args:
        solutions: Current population
        tournament_size: Number of draws
        rng: Random number generator

    Returns:
        Independent clone of the tournament winner
    """
    best: Optional[AllocationSolution] = None
    for _ in range(tournament_size):
        candidate = solutions[int(rng.integers(len(solutions)))]
        if best is None or candidate.fitness < best.fitness:
            best = candidate
    return best.clone()


class Population:
    """
    One generation of candidate placements.

    A population is created once and then replaced as a whole; individual
    solutions are never swapped in or out of a live population.
    """

    def __init__(self, individuals: List[AllocationSolution], generation: int = 0):
        self.individuals = individuals
        self.generation = generation

    @classmethod
    def initialize_random(
        cls,
        size: int,
        unit_count: int,
        node_count: int,
        rng: np.random.Generator
    ) -> "Population":
        """Create ``size`` solutions with every unit on a uniformly random node."""
        individuals = [
            AllocationSolution.random(unit_count, node_count, rng)
            for _ in range(size)
        ]
        return cls(individuals, generation=0)

    def __len__(self) -> int:
        return len(self.individuals)

    def __iter__(self):
        return iter(self.individuals)

    def select_parent(self, tournament_size: int, rng: np.random.Generator) -> AllocationSolution:
        """Tournament-select a clone from this population."""
        return tournament_selection(self.individuals, tournament_size, rng)

    def best(self) -> AllocationSolution:
        """Lowest-fitness individual, earliest one on ties."""
        return min(self.individuals, key=lambda x: x.fitness)

    def calculate_statistics(self) -> Dict[str, Any]:
        """Calculate fitness statistics of the evaluated individuals."""
        fitnesses = [ind.fitness for ind in self.individuals if ind.evaluated]

        if not fitnesses:
            return {}

        active_counts = [ind.active_node_count for ind in self.individuals]
        return {
            "generation": self.generation,
            "population_size": len(self.individuals),
            "evaluated_count": len(fitnesses),
            "best_fitness": min(fitnesses),
            "worst_fitness": max(fitnesses),
            "avg_fitness": statistics.mean(fitnesses),
            "fitness_std": statistics.stdev(fitnesses) if len(fitnesses) > 1 else 0.0,
            "avg_active_nodes": statistics.mean(active_counts),
            "min_active_nodes": min(active_counts)
        }
