"""
Tests for the particle species registry and the reference particle.
"""

import pytest
from pydantic import ValidationError

from latticekit.constants import PROTON_MASS, ELECTRON_MASS
from latticekit.exceptions import ContractViolation, UnknownSpecies
from latticekit.particles.species import (
    ParticleInfo,
    PARTICLE_SPECIES,
    find_particle,
    default_species_for_charge,
)
from latticekit.particles.reference import ReferenceParticle


class TestParticleSpecies:
    """Test lookups in the species registry."""

    def test_electron(self):
        electron = find_particle("e")
        assert electron.mass == pytest.approx(9.10938215e-31, abs=1e-9)
        assert electron.charge == -1
        assert electron.mass_mev == pytest.approx(0.510998910, abs=1e-9)

    def test_proton(self):
        proton = find_particle("p")
        assert proton.mass == pytest.approx(1.672621637e-27, abs=1e-6)
        assert proton.charge == 1
        assert proton.mass_mev == pytest.approx(938.272013, abs=1e-6)

    def test_antiproton_shares_proton_mass(self):
        pbar = find_particle("pbar")
        assert pbar.mass == find_particle("p").mass
        assert pbar.charge == -1
        assert find_particle("p-") is pbar

    def test_muons_and_positron(self):
        assert find_particle("muon-").charge == -1
        assert find_particle("muon+").charge == 1
        assert find_particle("muon+").mass_mev == pytest.approx(105.6583668)
        assert find_particle("e+").mass == ELECTRON_MASS
        assert find_particle("e+").charge == 1

    def test_default_species(self):
        default = find_particle("")
        assert default.mass == 0
        assert default.charge == 1

    def test_unknown_species(self):
        with pytest.raises(UnknownSpecies) as excinfo:
            find_particle("graviton")
        assert excinfo.value.name == "graviton"
        with pytest.raises(KeyError):
            find_particle("graviton")

    def test_registry_is_read_only(self):
        with pytest.raises(TypeError):
            PARTICLE_SPECIES["x"] = ParticleInfo(mass=0.0, charge=0.0)

    def test_particle_info_is_frozen(self):
        with pytest.raises(ValidationError):
            find_particle("p").charge = 2.0

    def test_mass_mev_computed_from_mass(self):
        info = ParticleInfo(mass=PROTON_MASS, charge=1.0)
        assert info.mass_mev == pytest.approx(938.272013, rel=1e-6)

    def test_charge_sign(self):
        assert ParticleInfo(mass=0.0, charge=82.0).charge_sign == 1
        assert ParticleInfo(mass=0.0, charge=-2.0).charge_sign == -1
        assert default_species_for_charge(0.0).charge_sign == 0


class TestReferenceParticle:
    """Test the reference momentum and time book-keeping."""

    def test_momentum(self):
        ref = ReferenceParticle(7000.0)
        assert ref.get_reference_momentum() == 7000.0
        ref.set_reference_momentum(450.0)
        assert ref.get_reference_momentum() == 450.0
        assert ref.increment_reference_momentum(50.0) == 500.0

    def test_momentum_must_stay_positive(self):
        with pytest.raises(ContractViolation):
            ReferenceParticle(0.0)
        ref = ReferenceParticle(1.0)
        with pytest.raises(ContractViolation):
            ref.set_reference_momentum(-1.0)
        with pytest.raises(ContractViolation):
            ref.increment_reference_momentum(-1.0)
        assert ref.get_reference_momentum() == 1.0

    def test_contract_violation_is_an_assertion(self):
        with pytest.raises(AssertionError):
            ReferenceParticle(-5.0)

    def test_reference_time(self):
        ref = ReferenceParticle(1.0)
        assert ref.get_reference_time() == 0.0
        ref.set_reference_time(2.0)
        assert ref.increment_reference_time(0.5) == 2.5
        with pytest.raises(ValueError):
            ref.set_reference_time(float("nan"))

    def test_charge_sign_fallback(self):
        """Without a species the zero-mass default with the charge sign is used."""
        ref = ReferenceParticle(1.0, charge=-3.0)
        assert ref.get_charge_sign() == -1
        assert ref.get_particle_charge() == -1
        assert ref.get_particle_mass() == 0
        assert ReferenceParticle(1.0, charge=0.0).get_charge_sign() == 0
        ref.set_charge_sign(2.0)
        assert ref.get_charge_sign() == 1

    def test_explicit_species(self):
        ref = ReferenceParticle(1.0, charge=1.0, species=find_particle("e"))
        assert ref.get_charge_sign() == -1
        assert ref.get_particle_mass() == ELECTRON_MASS
        assert ref.get_particle_mass_mev() == pytest.approx(0.510998910)
