"""
Particle bunches.

A bunch is a set of macro-particles, each a 6D phase-space vector
(x, xp, y, yp, ct, dp), together with a reference particle and a charge
per macro-particle. Everything that depends on the species (particle mass,
charge, lifetime, stability) is delegated to a BunchSpecies variant:

- FixedSpecies: electron, positron, proton, antiproton and the muons, whose
  constants come from the species registry
- IonSpecies: an ion, carrying its own charge and mass
"""

from .distributions import BeamData
from .filters import BunchFilter
from .reference import ReferenceParticle
from .species import ParticleInfo, find_particle
from ..constants import MUON_LIFETIME, mass_kg_to_mev
from dataclasses import dataclass, field
from typing import Iterable, Iterator, MutableSequence, Optional, TextIO
import logging
import numpy as np

logger = logging.getLogger(__name__)

N_COORDINATES = 6
N_TALLIES = 6


@dataclass(frozen=True)
class FixedSpecies:
    """Species whose constants are tabulated in the registry."""
    label: str
    info: ParticleInfo
    lifetime: float = 0.0
    stable: bool = True
    has_tallies: bool = False

    @property
    def particle_charge(self) -> float:
        return self.info.charge

    @property
    def particle_mass(self) -> float:
        return self.info.mass

    @property
    def particle_mass_mev(self) -> float:
        return self.info.mass_mev

    def reference_info(self) -> ParticleInfo:
        return self.info


@dataclass(frozen=True)
class IonSpecies:
    """Ion with an explicit charge (elementary units) and mass (kg)."""
    charge: float
    mass: float
    label: str = "ion"
    lifetime: float = 0.0
    stable: bool = True
    has_tallies: bool = False

    def __post_init__(self):
        if self.mass < 0:
            raise ValueError(f"Ion mass must be non-negative, got {self.mass} kg")

    @property
    def particle_charge(self) -> float:
        return self.charge

    @property
    def particle_mass(self) -> float:
        return self.mass

    @property
    def particle_mass_mev(self) -> float:
        return mass_kg_to_mev(self.mass)

    def reference_info(self) -> ParticleInfo:
        return ParticleInfo(mass=self.mass, charge=self.charge)


ELECTRON = FixedSpecies("electron", find_particle("e"), has_tallies=True)
POSITRON = FixedSpecies("positron", find_particle("e+"), has_tallies=True)
PROTON = FixedSpecies("proton", find_particle("p"))
ANTIPROTON = FixedSpecies("antiproton", find_particle("pbar"))
MUON_MINUS = FixedSpecies("muon-", find_particle("muon-"), lifetime=MUON_LIFETIME, stable=False, has_tallies=True)
MUON_PLUS = FixedSpecies("muon+", find_particle("muon+"), lifetime=MUON_LIFETIME, stable=False, has_tallies=True)

BunchSpecies = FixedSpecies | IonSpecies


@dataclass
class ScatterTally:
    """Counters of scattering events, kept for diagnostics only."""
    label: str
    counts: list[int] = field(default_factory=lambda: [0] * N_TALLIES)

    def reset(self):
        self.counts = [0] * N_TALLIES

    def increment(self, index: int, amount: int = 1):
        self.counts[index] += amount

    def report(self):
        logger.info(f"{self.label.capitalize()} scatter tallies {' '.join(str(c) for c in self.counts)}")


def _as_vector(values) -> np.ndarray:
    vector = np.asarray(values, dtype=float)
    if vector.shape != (N_COORDINATES,):
        raise ValueError(f"Phase-space vectors must have {N_COORDINATES} coordinates, got shape {vector.shape}")
    return vector


class ParticleBunch:
    """A bunch of macro-particles of one species.

    The total charge is the charge per macro-particle times the number of
    macro-particles, so it follows the particle count as particles are added
    or lost.

    Construction:
        ParticleBunch(p0, qm, species)                      empty bunch
        ParticleBunch.from_particles(p0, q, list, species)  drains the list into the bunch
        ParticleBunch.from_stream(p0, q, stream, species)   reads whitespace text
        ParticleBunch.from_distribution(n, gen, beam, ...)  generated, optionally filtered
    """

    def __init__(self, momentum: float, charge_per_macro: float = 1.0, species: BunchSpecies = PROTON):
        self.species = species
        self.reference = ReferenceParticle(momentum, species=species.reference_info())
        self.charge_per_macro_particle = charge_per_macro
        self._particles: list[np.ndarray] = []
        self.tally = ScatterTally(species.label) if species.has_tallies else None

    @classmethod
    def from_particles(cls, momentum: float, total_charge: float, particles: MutableSequence,
                       species: BunchSpecies = PROTON) -> 'ParticleBunch':
        """Build a bunch that takes over the vectors in particles.

        The list is emptied and the bunch now owns the vectors. A source
        that cannot be emptied, such as a numpy array, raises TypeError.
        """
        if not isinstance(particles, MutableSequence):
            raise TypeError(f"Particles must be a list to be taken over, got {type(particles).__name__}")
        bunch = cls(momentum, total_charge, species)
        vectors = [_as_vector(p) for p in particles]
        particles.clear()
        bunch._particles = vectors
        bunch._set_total_charge(total_charge)
        return bunch

    @classmethod
    def from_stream(cls, momentum: float, total_charge: float, stream: TextIO,
                    species: BunchSpecies = PROTON) -> 'ParticleBunch':
        """Read one vector per line, six whitespace separated numbers; blank and '#' lines are skipped."""
        bunch = cls(momentum, total_charge, species)
        for line_number, line in enumerate(stream, start=1):
            text = line.strip()
            if not text or text.startswith('#'):
                continue
            try:
                bunch._particles.append(_as_vector([float(token) for token in text.split()]))
            except ValueError as e:
                raise ValueError(f"Line {line_number}: {e}") from e
        bunch._set_total_charge(total_charge)
        return bunch

    @classmethod
    def from_distribution(cls, n_particles: int, generator: Iterable, beam: BeamData,
                          bunch_filter: Optional[BunchFilter] = None,
                          species: BunchSpecies = PROTON,
                          max_candidates: Optional[int] = None) -> 'ParticleBunch':
        """Populate a bunch from a generator of normalised vectors.

        Candidates are tested in the space the filter asks for and stored in
        real coordinates. Population stops at n_particles or when the
        generator runs out; max_candidates caps the number of draws.
        """
        if n_particles < 0:
            raise ValueError(f"Number of particles must be non-negative, got {n_particles}")
        qm = beam.charge / n_particles if n_particles > 0 else beam.charge
        bunch = cls(beam.p0, qm, species)
        candidates = iter(generator)
        drawn = 0
        while len(bunch._particles) < n_particles:
            if max_candidates is not None and drawn >= max_candidates:
                logger.info(f"Stopped after {drawn} candidates with {len(bunch._particles)} of {n_particles} particles")
                break
            drawn += 1
            try:
                normalised = _as_vector(next(candidates))
            except StopIteration:
                logger.info(f"Generator exhausted after {len(bunch._particles)} of {n_particles} particles")
                break
            real = beam.normalised_to_real(normalised)
            if bunch_filter is not None:
                candidate = real if bunch_filter.filter_in_realspace else normalised
                if not bunch_filter.apply(candidate):
                    continue
            bunch._particles.append(real)
        return bunch

    def _set_total_charge(self, total_charge: float):
        n = len(self._particles)
        self.charge_per_macro_particle = total_charge / n if n > 0 else total_charge

    # Species-dependent surface
    def get_particle_charge(self) -> float:
        return self.species.particle_charge

    def get_particle_mass(self) -> float:
        return self.species.particle_mass

    def get_particle_mass_mev(self) -> float:
        return self.species.particle_mass_mev

    def get_particle_lifetime(self) -> float:
        return self.species.lifetime

    def is_stable(self) -> bool:
        return self.species.stable

    # Shared surface
    def get_total_charge(self) -> float:
        return self.charge_per_macro_particle * len(self._particles)

    def get_charge_sign(self) -> int:
        return self.reference.get_charge_sign()

    def get_reference_momentum(self) -> float:
        return self.reference.get_reference_momentum()

    def set_reference_momentum(self, p: float):
        self.reference.set_reference_momentum(p)

    def __len__(self):
        return len(self._particles)

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter(self._particles)

    def __getitem__(self, index: int) -> np.ndarray:
        return self._particles[index]

    def add_particle(self, vector):
        self._particles.append(_as_vector(vector))

    def as_array(self) -> np.ndarray:
        """Particles as an (N, 6) array, a copy."""
        if not self._particles:
            return np.empty((0, N_COORDINATES))
        return np.vstack(self._particles)

    def set_particles(self, array: np.ndarray):
        """Replace the particle coordinates, keeping their order."""
        array = np.asarray(array, dtype=float)
        if array.ndim != 2 or array.shape[1] != N_COORDINATES:
            raise ValueError(f"Expected an (N, {N_COORDINATES}) array, got shape {array.shape}")
        self._particles = [row.copy() for row in array]

    def centroid(self) -> np.ndarray:
        """Mean phase-space vector; zero for an empty bunch."""
        if not self._particles:
            return np.zeros(N_COORDINATES)
        return self.as_array().mean(axis=0)

    def write(self, stream: TextIO):
        """Write one vector per line in a form read back by from_stream."""
        for vector in self._particles:
            stream.write(' '.join(f"{value:.16e}" for value in vector) + '\n')

    # Scatter tallies, only for species that keep them
    def _require_tally(self) -> ScatterTally:
        if self.tally is None:
            raise AttributeError(f"{self.species.label} bunches keep no scatter tallies")
        return self.tally

    def set(self):
        """Reset the scatter tallies."""
        self._require_tally().reset()

    def report(self):
        """Log the scatter tallies."""
        self._require_tally().report()

    def __repr__(self):
        return (f"ParticleBunch(species={self.species.label}, n={len(self._particles)}, "
                f"p0={self.get_reference_momentum()}, Q={self.get_total_charge()})")


def electron_bunch(momentum: float, charge_per_macro: float = 1.0) -> ParticleBunch:
    return ParticleBunch(momentum, charge_per_macro, ELECTRON)


def proton_bunch(momentum: float, charge_per_macro: float = 1.0) -> ParticleBunch:
    return ParticleBunch(momentum, charge_per_macro, PROTON)


def muon_bunch(momentum: float, charge_per_macro: float = 1.0, negative: bool = True) -> ParticleBunch:
    return ParticleBunch(momentum, charge_per_macro, MUON_MINUS if negative else MUON_PLUS)


def ion_bunch(momentum: float, particle_charge: float, particle_mass: float,
              charge_per_macro: float = 1.0) -> ParticleBunch:
    return ParticleBunch(momentum, charge_per_macro, IonSpecies(particle_charge, particle_mass))
