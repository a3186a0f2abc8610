"""
Particle species registry.

The registry maps a species name to an immutable ParticleInfo holding the
rest mass and charge. It is filled once at import time and never mutated, so
it is safe to share between threads and between bunches.
"""

from ..constants import (
    ELECTRON_MASS, ELECTRON_MASS_MEV,
    PROTON_MASS, PROTON_MASS_MEV,
    MUON_MASS, MUON_MASS_MEV,
    mass_kg_to_mev,
)
from ..exceptions import UnknownSpecies
from ..models.base import PhysicsBaseModel
from pydantic import ConfigDict, Field
from types import MappingProxyType
from typing import Mapping, Optional


class ParticleInfo(PhysicsBaseModel):
    """Rest mass and charge of a particle species.

    Example:
        >>> info = ParticleInfo(mass=0.0, charge=1.0)
        >>> info.charge_sign
        1
    """

    model_config = ConfigDict(frozen=True)

    mass: float = Field(..., ge=0.0, description="Rest mass (kg)")
    charge: float = Field(..., description="Charge in units of the elementary charge")
    cached_mass_mev: Optional[float] = Field(None, ge=0.0, description="Rest mass (MeV/c^2), if tabulated")

    @property
    def mass_mev(self) -> float:
        """Rest mass in MeV/c^2, computed from the mass in kg when not tabulated."""
        if self.cached_mass_mev is not None:
            return self.cached_mass_mev
        return mass_kg_to_mev(self.mass)

    @property
    def charge_sign(self) -> int:
        """+1, -1 or 0, classified from the charge."""
        if self.charge > 0:
            return 1
        if self.charge < 0:
            return -1
        return 0


# Ultra-relativistic defaults used when only a charge sign is known
DEFAULT_POSITIVE = ParticleInfo(mass=0.0, charge=1.0, cached_mass_mev=0.0)
DEFAULT_NEGATIVE = ParticleInfo(mass=0.0, charge=-1.0, cached_mass_mev=0.0)
DEFAULT_NEUTRAL = ParticleInfo(mass=0.0, charge=0.0, cached_mass_mev=0.0)

ELECTRON = ParticleInfo(mass=ELECTRON_MASS, charge=-1.0, cached_mass_mev=ELECTRON_MASS_MEV)
POSITRON = ParticleInfo(mass=ELECTRON_MASS, charge=1.0, cached_mass_mev=ELECTRON_MASS_MEV)
PROTON = ParticleInfo(mass=PROTON_MASS, charge=1.0, cached_mass_mev=PROTON_MASS_MEV)
ANTIPROTON = ParticleInfo(mass=PROTON_MASS, charge=-1.0, cached_mass_mev=PROTON_MASS_MEV)
MUON_MINUS = ParticleInfo(mass=MUON_MASS, charge=-1.0, cached_mass_mev=MUON_MASS_MEV)
MUON_PLUS = ParticleInfo(mass=MUON_MASS, charge=1.0, cached_mass_mev=MUON_MASS_MEV)

PARTICLE_SPECIES: Mapping[str, ParticleInfo] = MappingProxyType({
    "": DEFAULT_POSITIVE,
    "e": ELECTRON,
    "e+": POSITRON,
    "p": PROTON,
    "pbar": ANTIPROTON,
    "p-": ANTIPROTON,
    "muon-": MUON_MINUS,
    "muon+": MUON_PLUS,
})


def find_particle(name: str) -> ParticleInfo:
    """Look up a species by name.

    Raises:
        UnknownSpecies: If the name is not in the registry
    """
    try:
        return PARTICLE_SPECIES[name]
    except KeyError:
        raise UnknownSpecies(name) from None


def default_species_for_charge(charge: float) -> ParticleInfo:
    """Zero-mass default species with the sign of charge."""
    if charge > 0:
        return DEFAULT_POSITIVE
    if charge < 0:
        return DEFAULT_NEGATIVE
    return DEFAULT_NEUTRAL
