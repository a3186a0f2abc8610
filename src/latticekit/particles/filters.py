"""
Filters applied while a bunch is populated from a distribution generator.

A loss-map study only needs the particles that will hit an aperture on the
first pass; a halo filter rejects the core of the generated distribution so
that those particles are never tracked.
"""

from abc import ABC, abstractmethod
import numpy as np


class BunchFilter(ABC):
    """Predicate on a 6D phase-space vector (x, xp, y, yp, ct, dp).

    ``filter_in_realspace`` selects whether ``apply`` receives real
    coordinates or the normalised coordinates produced by the generator.
    """

    def __init__(self, filter_in_realspace: bool = True):
        self.filter_in_realspace = filter_in_realspace

    @abstractmethod
    def apply(self, vector: np.ndarray) -> bool:
        """Return True to admit the vector into the bunch."""
        pass

    def __call__(self, vector: np.ndarray) -> bool:
        return self.apply(vector)


class HorizontalHaloParticleBunchFilter(BunchFilter):
    """Admit particles whose horizontal distance from the orbit exceeds the limit."""

    def __init__(self, limit: float = 0.0, orbit: float = 0.0, filter_in_realspace: bool = True):
        super().__init__(filter_in_realspace)
        self.limit = limit
        self.orbit = orbit

    def set_horizontal_limit(self, limit: float):
        self.limit = limit

    def set_horizontal_orbit(self, orbit: float):
        self.orbit = orbit

    def apply(self, vector: np.ndarray) -> bool:
        return bool(abs(vector[0] - self.orbit) > self.limit)


class VerticalHaloParticleBunchFilter(BunchFilter):
    """Admit particles whose vertical offset exceeds the limit."""

    def __init__(self, limit: float = 0.0, filter_in_realspace: bool = True):
        super().__init__(filter_in_realspace)
        self.limit = limit

    def set_vertical_limit(self, limit: float):
        self.limit = limit

    def apply(self, vector: np.ndarray) -> bool:
        return bool(abs(vector[2]) > self.limit)
