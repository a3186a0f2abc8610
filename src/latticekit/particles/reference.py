"""
Reference particle shared by bunches and transfer maps.

The reference particle sits on the nominal orbit and anchors the relative
coordinates of a bunch: its momentum p0 (GeV/c), its time ct0 (m) and the
species it belongs to.
"""

from .species import ParticleInfo, default_species_for_charge
from ..exceptions import ContractViolation
from ..models.validators import validate_finite
from typing import Optional


class ReferenceParticle:
    """Reference momentum, reference time and species of a bunch.

    The species is either given explicitly or, when only a charge is known,
    one of the zero-mass defaults with the right charge sign. The species
    object is shared and never modified.

    Example:
        >>> ref = ReferenceParticle(5.0, charge=-1)
        >>> ref.increment_reference_momentum(-0.5)
        4.5
        >>> ref.get_charge_sign()
        -1
    """

    def __init__(self, momentum: float, charge: float = 1.0, species: Optional[ParticleInfo] = None):
        self._check_momentum(momentum)
        self._p0 = momentum
        self._ct0 = 0.0
        self._species = species if species is not None else default_species_for_charge(charge)

    @staticmethod
    def _check_momentum(p: float):
        if not p > 0:
            raise ContractViolation(f"Reference momentum must stay positive, got {p} GeV/c")

    @property
    def species(self) -> ParticleInfo:
        return self._species

    def get_reference_momentum(self) -> float:
        """Reference momentum in GeV/c."""
        return self._p0

    def set_reference_momentum(self, p: float):
        self._check_momentum(p)
        self._p0 = p

    def increment_reference_momentum(self, dp: float) -> float:
        """Add dp GeV/c to the reference momentum and return the new value."""
        self._check_momentum(self._p0 + dp)
        self._p0 += dp
        return self._p0

    def get_reference_time(self) -> float:
        """Reference time as ct in meters."""
        return self._ct0

    def set_reference_time(self, ct: float):
        self._ct0 = validate_finite(ct, "Reference time")

    def increment_reference_time(self, dct: float) -> float:
        self._ct0 = validate_finite(self._ct0 + dct, "Reference time")
        return self._ct0

    def set_charge_sign(self, q: float):
        """Rebind to the zero-mass default species with the sign of q."""
        self._species = default_species_for_charge(q)

    def get_charge_sign(self) -> int:
        return self._species.charge_sign

    def get_particle_charge(self) -> float:
        return self._species.charge

    def get_particle_mass(self) -> float:
        return self._species.mass

    def get_particle_mass_mev(self) -> float:
        return self._species.mass_mev

    def __repr__(self):
        return (f"ReferenceParticle(p0={self._p0}, ct0={self._ct0}, "
                f"charge={self._species.charge}, mass={self._species.mass})")
