"""Timestep vector helpers based on numpy."""

# clean

from typing import Iterable, List, Sequence

import numpy as np


def zeros(num_steps: int) -> np.ndarray:
    """Vector of zeros with one value per timestep."""
    return np.zeros(num_steps, dtype=float)


def sum_series(series: Iterable[Sequence[float]], num_steps: int) -> np.ndarray:
    """Sum a list of timestep series elementwise. An empty list gives a zero vector."""
    total = zeros(num_steps)
    for values in series:
        total = total + np.asarray(values, dtype=float)
    return total


def positive_part(values: np.ndarray) -> np.ndarray:
    """Replace negative values with zero."""
    return np.clip(values, 0.0, None)


def to_list(values: np.ndarray) -> List[float]:
    """Convert a numpy vector to a plain list of floats."""
    return [float(value) for value in values]
