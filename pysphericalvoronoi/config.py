"""Configuration for diagram construction."""

import math
import numbers
from dataclasses import dataclass

from pysphericalvoronoi.exceptions import ConfigurationError

DEFAULT_EPS = 1e-12


@dataclass(frozen=True)
class DiagramOptions:
    """
    Numerical options shared by the triangulation and the Voronoi diagram.

    Parameters
    ----------
    eps : float, default 1e-12
        Coplanarity tolerance handed to the hull step. Must be finite and > 0.
    """

    eps: float = DEFAULT_EPS

    def __post_init__(self):
        eps = self.eps
        if isinstance(eps, bool) or not isinstance(eps, numbers.Real):
            raise ConfigurationError(f"eps must be a real number, got {eps!r}")
        if not math.isfinite(eps) or eps <= 0:
            raise ConfigurationError(f"eps must be positive, got {eps!r}")
        object.__setattr__(self, "eps", float(eps))


def validate_steps(steps: int) -> int:
    """Return ``steps`` if it is a non-negative integer, else raise ConfigurationError."""
    if isinstance(steps, bool) or not isinstance(steps, numbers.Integral):
        raise ConfigurationError(f"steps must be an integer, got {steps!r}")
    if steps < 0:
        raise ConfigurationError(f"steps must be non-negative, got {steps}")
    return int(steps)
