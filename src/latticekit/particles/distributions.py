"""
Beam descriptors and phase-space distribution generators.

Generators yield normalised 6-vectors; BeamData maps them to real
coordinates using the Twiss parameters, emittances, dispersion and
centroid of the beam.
"""

from ..models.base import PhysicsBaseModel
from enum import Enum
from pydantic import Field
from typing import Iterable, Iterator, Optional
import numpy as np


class DistributionType(str, Enum):
    """Available distribution generators."""
    NORMAL = "normal"
    UNIFORM = "uniform"
    ARRAY = "array"


class BeamData(PhysicsBaseModel):
    """Description of a beam at a point of the lattice.

    Example:
        >>> beam = BeamData(p0=7000.0, beta_x=100.0, beta_y=100.0, emit_x=1e-9, emit_y=1e-9)
        >>> real = beam.normalised_to_real([1, 0, 0, 0, 0, 0])
    """

    p0: float = Field(..., gt=0, description="Reference momentum (GeV/c)")
    charge: float = Field(1.0, description="Total bunch charge (number of particles)")

    beta_x: float = Field(1.0, gt=0, description="Horizontal beta function (m)")
    alpha_x: float = Field(0.0, description="Horizontal alpha function")
    emit_x: float = Field(0.0, ge=0, description="Horizontal geometric emittance (m)")
    beta_y: float = Field(1.0, gt=0, description="Vertical beta function (m)")
    alpha_y: float = Field(0.0, description="Vertical alpha function")
    emit_y: float = Field(0.0, ge=0, description="Vertical geometric emittance (m)")

    dx: float = Field(0.0, description="Horizontal dispersion (m)")
    dxp: float = Field(0.0, description="Horizontal dispersion derivative")
    dy: float = Field(0.0, description="Vertical dispersion (m)")
    dyp: float = Field(0.0, description="Vertical dispersion derivative")

    sig_dp: float = Field(0.0, ge=0, description="RMS relative momentum spread")
    sig_z: float = Field(0.0, ge=0, description="RMS bunch length (m)")

    x0: float = Field(0.0, description="Horizontal centroid (m)")
    xp0: float = Field(0.0, description="Horizontal centroid angle")
    y0: float = Field(0.0, description="Vertical centroid (m)")
    yp0: float = Field(0.0, description="Vertical centroid angle")
    ct0: float = Field(0.0, description="Longitudinal centroid (m)")

    def centroid(self) -> np.ndarray:
        return np.array([self.x0, self.xp0, self.y0, self.yp0, self.ct0, 0.0])

    def normalised_to_real(self, vector) -> np.ndarray:
        """Map a normalised 6-vector to real coordinates."""
        u = np.asarray(vector, dtype=float)
        sx, sy = np.sqrt(self.emit_x * self.beta_x), np.sqrt(self.emit_y * self.beta_y)
        dp = self.sig_dp * u[5]
        real = np.array([
            sx * u[0] + self.dx * dp,
            np.sqrt(self.emit_x / self.beta_x) * (u[1] - self.alpha_x * u[0]) + self.dxp * dp,
            sy * u[2] + self.dy * dp,
            np.sqrt(self.emit_y / self.beta_y) * (u[3] - self.alpha_y * u[2]) + self.dyp * dp,
            self.sig_z * u[4],
            dp,
        ])
        return real + self.centroid()

    def real_to_normalised(self, vector) -> np.ndarray:
        """Inverse of normalised_to_real; a plane with zero emittance or spread maps to zero."""
        r = np.asarray(vector, dtype=float) - self.centroid()
        dp = r[5]
        x, xp = r[0] - self.dx * dp, r[1] - self.dxp * dp
        y, yp = r[2] - self.dy * dp, r[3] - self.dyp * dp

        def _scale(value, sigma):
            return value / sigma if sigma > 0 else 0.0

        ux = _scale(x, np.sqrt(self.emit_x * self.beta_x))
        uy = _scale(y, np.sqrt(self.emit_y * self.beta_y))
        uxp = _scale(xp, np.sqrt(self.emit_x / self.beta_x)) + self.alpha_x * ux
        uyp = _scale(yp, np.sqrt(self.emit_y / self.beta_y)) + self.alpha_y * uy
        return np.array([ux, uxp, uy, uyp, _scale(r[4], self.sig_z), _scale(dp, self.sig_dp)])


class NormalDistributionGenerator:
    """Endless stream of normalised vectors with independent unit Gaussian coordinates."""

    def __init__(self, seed: Optional[int] = None):
        self._rng = np.random.default_rng(seed)

    def __iter__(self) -> Iterator[np.ndarray]:
        return self

    def __next__(self) -> np.ndarray:
        return self._rng.standard_normal(6)


class UniformDistributionGenerator:
    """Endless stream of normalised vectors uniform in [-sqrt(3), sqrt(3)], unit variance per coordinate."""

    def __init__(self, seed: Optional[int] = None):
        self._rng = np.random.default_rng(seed)

    def __iter__(self) -> Iterator[np.ndarray]:
        return self

    def __next__(self) -> np.ndarray:
        return self._rng.uniform(-np.sqrt(3.0), np.sqrt(3.0), 6)


class ArrayDistributionGenerator:
    """Finite stream replaying a fixed set of normalised vectors."""

    def __init__(self, vectors: Iterable):
        self._vectors = [np.asarray(v, dtype=float) for v in vectors]
        for v in self._vectors:
            if v.shape != (6,):
                raise ValueError(f"Phase-space vectors must have 6 coordinates, got shape {v.shape}")
        self._index = 0

    def __iter__(self) -> Iterator[np.ndarray]:
        return self

    def __next__(self) -> np.ndarray:
        if self._index >= len(self._vectors):
            raise StopIteration
        vector = self._vectors[self._index]
        self._index += 1
        return vector.copy()


def make_generator(kind: DistributionType, seed: Optional[int] = None, vectors: Optional[Iterable] = None):
    """Create a generator by type."""
    kind = DistributionType(kind)
    if kind == DistributionType.NORMAL:
        return NormalDistributionGenerator(seed)
    if kind == DistributionType.UNIFORM:
        return UniformDistributionGenerator(seed)
    if vectors is None:
        raise ValueError("An array distribution needs the vectors to replay")
    return ArrayDistributionGenerator(vectors)
