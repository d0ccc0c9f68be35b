"""
Communication Model for workload placement.

Builds the pairwise communication-intensity matrix between workload units.
Units that talk to each other are cheaper to co-locate, which the fitness
function rewards through its communication term.
"""

import numpy as np


MIN_INTENSITY = 0.1
MAX_INTENSITY = 1.0


def build_communication_matrix(unit_count: int, rng: np.random.Generator) -> np.ndarray:
    """
    Build an N x N communication-intensity matrix.

    Off-diagonal entries are drawn independently and uniformly from
    [0.1, 1.0) in row-major order; the diagonal is 0.0. Only the upper
    triangle is read by the fitness function, but the lower triangle is
    still drawn so the generator stream stays identical to a full build.

    Args:
        unit_count: Number of workload units
        rng: Random number generator

    Returns:
        Matrix of shape (unit_count, unit_count)
    """
    matrix = np.zeros((unit_count, unit_count), dtype=float)
    if unit_count < 2:
        return matrix

    off_diagonal = ~np.eye(unit_count, dtype=bool)
    draws = rng.random(unit_count * (unit_count - 1))
    # Boolean-mask assignment fills in row-major order
    matrix[off_diagonal] = MIN_INTENSITY + draws * (MAX_INTENSITY - MIN_INTENSITY)

    return matrix


class CommunicationModel:
    """Holds the communication matrix of one engine instance."""

    def __init__(self, unit_count: int, rng: np.random.Generator):
        self.unit_count = unit_count
        self.matrix = build_communication_matrix(unit_count, rng)
        self._pairs = np.triu_indices(unit_count, k=1)

    @property
    def pair_indices(self):
        """Row/column indices of every unordered pair (i < j)."""
        return self._pairs

    @property
    def pair_count(self) -> int:
        return self.unit_count * (self.unit_count - 1) // 2

    def upper_weights(self) -> np.ndarray:
        """Weights of every pair (i < j), aligned with pair_indices."""
        return self.matrix[self._pairs]
