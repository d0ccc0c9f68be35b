"""
Variation operators for the placement genetic algorithm.

Uniform crossover builds a child unit by unit from two parents. Mutation
moves one unit to another node that can take it without overload, preferring
nodes that already host other units so that emptied nodes can be powered off.
"""

import numpy as np

from src.placement.core.solution import AllocationSolution, UNASSIGNED


def uniform_crossover(
    parent1: AllocationSolution,
    parent2: AllocationSolution,
    crossover_rate: float,
    rng: np.random.Generator
) -> AllocationSolution:
    """
    Build a child by choosing each unit's node from one of two parents.

    For every unit one uniform draw is made: below ``crossover_rate`` the node
    comes from ``parent1``, otherwise from ``parent2``. A unit the chosen
    parent has no node for stays unassigned in the child.

    Args:
        parent1: First parent
        parent2: Second parent
        crossover_rate: Probability of inheriting from parent1
        rng: Random number generator

    Returns:
        New, unevaluated child
    """
    child = AllocationSolution.empty(parent1.unit_count)
    if child.unit_count == 0:
        return child

    from_first = rng.random(child.unit_count) < crossover_rate
    inherited = np.where(from_first, parent1.assignment, parent2.assignment)

    for unit, node in enumerate(inherited.tolist()):
        if node != UNASSIGNED:
            child.allocate(unit, node)

    return child


def admissible_nodes(
    solution: AllocationSolution,
    unit: int,
    demands: np.ndarray,
    capacities: np.ndarray
) -> np.ndarray:
    """
    Node positions that can host ``unit`` without exceeding any capacity.

    The unit's own contribution is left out of the load of the node it
    currently sits on.
    """
    others = solution.assignment.copy()
    others[unit] = UNASSIGNED
    other_loads = np.zeros_like(capacities)
    occupied = others != UNASSIGNED
    np.add.at(other_loads, others[occupied], demands[occupied])

    fits = np.all(other_loads + demands[unit] <= capacities, axis=1)
    return np.flatnonzero(fits)


def consolidating_mutation(
    solution: AllocationSolution,
    demands: np.ndarray,
    capacities: np.ndarray,
    rng: np.random.Generator,
    consolidation_bias: float = 0.7
) -> AllocationSolution:
    """
    Move one randomly chosen unit to an admissible node, in place.

    Admissible nodes are split into nodes occupied by other units and empty
    ones. When occupied candidates exist, one of them is chosen with
    probability ``consolidation_bias``; otherwise the target is drawn from all
    admissible nodes. Nothing changes when there are no units or no
    admissible node.

    Args:
        solution: Solution to mutate
        demands: Unit demand matrix, shape (n_units, 4)
        capacities: Node capacity matrix, shape (n_nodes, 4)
        rng: Random number generator
        consolidation_bias: Preference for already occupied nodes

    Returns:
        The same solution object
    """
    if solution.unit_count == 0:
        return solution

    unit = int(rng.integers(solution.unit_count))

    candidates = admissible_nodes(solution, unit, demands, capacities)
    if candidates.size == 0:
        return solution

    others = np.delete(solution.assignment, unit)
    occupied_by_others = np.isin(candidates, others[others != UNASSIGNED])
    occupied = candidates[occupied_by_others]

    if occupied.size > 0 and rng.random() < consolidation_bias:
        target = occupied[int(rng.integers(occupied.size))]
    else:
        target = candidates[int(rng.integers(candidates.size))]

    solution.reallocate(unit, int(target))
    return solution
