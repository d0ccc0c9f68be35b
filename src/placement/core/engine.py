"""
Genetic Algorithm Engine for energy-aware workload placement.

This module implements the generational loop that searches for a placement of
workload units onto resource nodes: random initialization, tournament
selection, uniform crossover, consolidating mutation, evaluation and
single-individual elitism, terminating after a fixed number of generations.
"""

from typing import List, Optional, Dict, Any, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
import logging
import multiprocessing

import logfire
import numpy as np

from src.placement.core.config import PlacementConfig
from src.placement.core.communication import CommunicationModel
from src.placement.core.descriptors import (
    ResourceNode,
    WorkloadUnit,
    capacity_matrix,
    check_unique_ids,
    demand_matrix
)
from src.placement.core.operators import uniform_crossover, consolidating_mutation
from src.placement.core.population import Population
from src.placement.core.solution import AllocationSolution
from src.placement.fitness.base import FitnessFunction
from src.placement.fitness.energy import EnergyAwareFitness


@dataclass
class PlacementResult:
    """Best placement found by a run, in identifier space."""

    assignments: Dict[int, int]
    active_node_count: int
    node_count: int
    fitness: float
    breakdown: Dict[str, float]
    generations: int
    evaluations: int
    history: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "assignments": self.assignments,
            "active_node_count": self.active_node_count,
            "node_count": self.node_count,
            "fitness": self.fitness,
            "breakdown": self.breakdown,
            "generations": self.generations,
            "evaluations": self.evaluations,
            "history": self.history
        }

    def format_report(self) -> str:
        """Human-readable allocation listing."""
        lines = ["Genetic algorithm allocation:", "-" * 60]
        for unit_id, node_id in sorted(self.assignments.items()):
            lines.append(f"  VM {unit_id} -> Host {node_id}")
        lines.append(f"  Active hosts: {self.active_node_count} of {self.node_count}")
        lines.append(f"  Fitness: {self.fitness:.4f}")
        return "\n".join(lines)


class PlacementEngine:
    """
    Main engine for running the placement genetic algorithm.

    All randomness flows through one ``numpy.random.Generator`` seeded from
    the configuration, so a run is reproducible from its seed, inputs and
    configuration alone.
    """

    def __init__(
        self,
        units: Sequence[WorkloadUnit],
        nodes: Sequence[ResourceNode],
        config: PlacementConfig,
        fitness_function: Optional[FitnessFunction] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the placement engine.

        Args:
            units: Workload units to place, in a fixed order
            nodes: Resource nodes available, in a fixed order
            config: Optimizer configuration
            fitness_function: Cost function override (defaults to EnergyAwareFitness)
            logger: Optional logger instance

        Raises:
            ValueError: If units exist but no node can host them, or ids repeat
        """
        self.units = list(units)
        self.nodes = list(nodes)
        self.config = config
        self.logger = logger or self._setup_logger()

        check_unique_ids(self.units, self.nodes)
        if self.units and not self.nodes:
            raise ValueError("At least one resource node is required to place workload units")

        self.rng = np.random.default_rng(config.random_seed)

        self.communication = CommunicationModel(len(self.units), self.rng)
        # Search draws start here on every run
        self._search_rng_state = self.rng.bit_generator.state
        self.fitness_function = fitness_function or EnergyAwareFitness(
            self.nodes,
            self.units,
            self.communication,
            config.fitness
        )
        self.demands = demand_matrix(self.units)
        self.capacities = capacity_matrix(self.nodes)

        # State tracking
        self.current_population: Optional[Population] = None
        self.best_solution: Optional[AllocationSolution] = None
        self.history: List[Dict[str, Any]] = []
        self.total_evaluations = 0
        self.start_time: Optional[datetime] = None

    def _reset(self) -> None:
        """Clear run state and rewind the generator to just after the communication draws."""
        self.rng.bit_generator.state = self._search_rng_state
        self.current_population = None
        self.best_solution = None
        self.history = []
        self.total_evaluations = 0

    def _setup_logger(self) -> logging.Logger:
        """Setup default logger."""
        logger = logging.getLogger("placement.engine")
        logger.setLevel(getattr(logging, self.config.logging.log_level))

        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        return logger

    def run(self) -> AllocationSolution:
        """
        Run the genetic algorithm.

        Every call starts from the same state, so repeated runs of one engine
        return the same result.

        Returns:
            Clone of the lowest-fitness solution seen across all generations
        """
        evolution = self.config.evolution

        with logfire.span("GA Placement",
                          population_size=evolution.population_size,
                          generations=evolution.max_generations,
                          units=len(self.units),
                          nodes=len(self.nodes)):

            self._reset()
            self.start_time = datetime.now()
            self.logger.info(
                f"Starting placement search: {len(self.units)} units, {len(self.nodes)} nodes, "
                f"population {evolution.population_size}, generations {evolution.max_generations}"
            )

            self.current_population = self._initialize_population()
            self._record_history()

            executor = self._create_executor()
            try:
                for generation in range(evolution.max_generations):
                    with logfire.span("Generation", generation=generation + 1):
                        self._create_next_generation(generation + 1, executor)
                        self._record_history()

                        if self._should_log(generation):
                            self._log_progress(generation + 1)
            finally:
                if executor:
                    executor.shutdown(wait=True)

            elapsed_time = datetime.now() - self.start_time
            self.logger.info(
                f"Placement search completed in {elapsed_time}: "
                f"best fitness {self.best_solution.fitness:.4f}, "
                f"{self.best_solution.active_node_count} active hosts"
            )

            return self.best_solution.clone()

    def _initialize_population(self) -> Population:
        """Create and evaluate the initial population."""
        with logfire.span("Initialize Population"):
            population = Population.initialize_random(
                self.config.evolution.population_size,
                len(self.units),
                len(self.nodes),
                self.rng
            )
            self._evaluate(population.individuals, None)
            self._update_best(population.individuals)

            self.logger.debug(f"Initialized population with {len(population)} individuals")
            return population

    def _create_next_generation(self, generation: int, executor: Optional[ThreadPoolExecutor]) -> None:
        """Breed, evaluate and install the next population."""
        evolution = self.config.evolution

        # Elitism: the global best survives unchanged
        elite = self.best_solution.clone()
        elite.generation = generation

        children = [
            self._breed(generation)
            for _ in range(evolution.population_size - 1)
        ]

        self._evaluate(children, executor)
        self._update_best(children)

        self.current_population = Population([elite] + children, generation=generation)

    def _breed(self, generation: int) -> AllocationSolution:
        """Produce one unevaluated child from the current population."""
        evolution = self.config.evolution
        population = self.current_population

        parent1 = population.select_parent(evolution.tournament_size, self.rng)
        parent2 = population.select_parent(evolution.tournament_size, self.rng)

        child = uniform_crossover(parent1, parent2, evolution.crossover_rate, self.rng)

        if self.rng.random() < evolution.mutation_rate:
            consolidating_mutation(
                child,
                self.demands,
                self.capacities,
                self.rng,
                self.config.mutation.consolidation_bias
            )

        child.generation = generation
        return child

    def _evaluate(
        self,
        solutions: List[AllocationSolution],
        executor: Optional[ThreadPoolExecutor]
    ) -> None:
        """Evaluate solutions and store each score on its solution."""
        if executor and len(solutions) > 1:
            scores = list(executor.map(self.fitness_function.evaluate, solutions))
        else:
            scores = self.fitness_function.evaluate_batch(solutions)

        for solution, score in zip(solutions, scores):
            solution.fitness = score

        self.total_evaluations += len(solutions)

    def _update_best(self, solutions: List[AllocationSolution]) -> None:
        """Replace the global best with a clone of any strictly better solution, in order."""
        for solution in solutions:
            if self.best_solution is None or solution.fitness < self.best_solution.fitness:
                self.best_solution = solution.clone()

    def _create_executor(self) -> Optional[ThreadPoolExecutor]:
        parallel = self.config.parallelization
        if not parallel.enable_parallel:
            return None
        num_workers = parallel.num_workers or multiprocessing.cpu_count()
        return ThreadPoolExecutor(max_workers=num_workers)

    def _should_log(self, generation: int) -> bool:
        if not self.config.logging.enable_logging:
            return False
        last = self.config.evolution.max_generations - 1
        return generation % self.config.logging.log_interval == 0 or generation == last

    def _record_history(self) -> None:
        """Record the best-so-far state after a generation resolves."""
        stats = self.current_population.calculate_statistics()
        self.history.append({
            "generation": self.current_population.generation,
            "best_fitness": self.best_solution.fitness,
            "best_active_nodes": self.best_solution.active_node_count,
            "population_best_fitness": stats.get("best_fitness"),
            "avg_fitness": stats.get("avg_fitness"),
            "worst_fitness": stats.get("worst_fitness"),
            "evaluations": self.total_evaluations
        })

    def _log_progress(self, generation: int) -> None:
        """Log evolution progress."""
        self.logger.info(
            f"Generation {generation}: "
            f"Best Fitness = {self.best_solution.fitness:.4f}, "
            f"Active Hosts = {self.best_solution.active_node_count}"
        )

        if self.config.logging.metrics_export:
            logfire.info(
                "Evolution Progress",
                evolution_generation=generation,
                best_fitness=self.best_solution.fitness,
                active_hosts=self.best_solution.active_node_count,
                evaluations=self.total_evaluations
            )

    def best_fitness_trajectory(self) -> List[float]:
        """Global-best fitness after initialization and after each generation."""
        return [entry["best_fitness"] for entry in self.history]

    def build_result(self, solution: AllocationSolution) -> PlacementResult:
        """Translate a solution into identifier space with its cost breakdown."""
        metrics = self.fitness_function.calculate_metrics(solution)
        return PlacementResult(
            assignments=solution.to_mapping(self.units, self.nodes),
            active_node_count=solution.active_node_count,
            node_count=len(self.nodes),
            fitness=solution.fitness,
            breakdown=metrics.breakdown,
            generations=self.config.evolution.max_generations,
            evaluations=self.total_evaluations,
            history=list(self.history)
        )


def optimize_placement(
    units: Sequence[WorkloadUnit],
    nodes: Sequence[ResourceNode],
    config: PlacementConfig
) -> PlacementResult:
    """Run one search and return its result."""
    engine = PlacementEngine(units, nodes, config)
    best = engine.run()
    return engine.build_result(best)
