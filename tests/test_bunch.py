"""
Tests for particle bunches, bunch filters and distribution generators.
"""

import io
import logging
import numpy as np
import pytest

from latticekit.constants import MUON_LIFETIME, PROTON_MASS
from latticekit.particles.bunch import (
    ParticleBunch,
    ELECTRON,
    PROTON,
    MUON_MINUS,
    IonSpecies,
    electron_bunch,
    proton_bunch,
    muon_bunch,
    ion_bunch,
)
from latticekit.particles.distributions import (
    BeamData,
    ArrayDistributionGenerator,
    NormalDistributionGenerator,
    UniformDistributionGenerator,
    DistributionType,
    make_generator,
)
from latticekit.particles.filters import (
    HorizontalHaloParticleBunchFilter,
    VerticalHaloParticleBunchFilter,
)


@pytest.fixture
def beam():
    return BeamData(p0=7000.0, charge=1.0e11, beta_x=100.0, beta_y=25.0,
                    emit_x=1.0e-8, emit_y=4.0e-8, sig_dp=1.0e-4, sig_z=0.1)


class TestBunchConstruction:
    """Test the construction paths of a bunch."""

    def test_from_particles_drains_source(self):
        particles = [np.zeros(6), np.full(6, 1e-3), np.full(6, -1e-3)]
        bunch = ParticleBunch.from_particles(450.0, 3.0e10, particles, PROTON)
        assert particles == []
        assert len(bunch) == 3
        assert bunch.get_total_charge() == pytest.approx(3.0e10)
        assert bunch.charge_per_macro_particle == pytest.approx(1.0e10)

    def test_from_particles_needs_a_list(self):
        """An array cannot be emptied, so it is refused instead of left full."""
        particles = np.zeros((3, 6))
        with pytest.raises(TypeError):
            ParticleBunch.from_particles(450.0, 3.0, particles, PROTON)
        assert particles.shape == (3, 6)

    def test_from_empty_particles_keeps_charge(self):
        bunch = ParticleBunch.from_particles(450.0, 5.0, [], PROTON)
        assert len(bunch) == 0
        assert bunch.charge_per_macro_particle == 5.0
        assert bunch.get_total_charge() == 0.0

    def test_empty_bunch(self):
        bunch = electron_bunch(5.0)
        assert len(bunch) == 0
        assert bunch.charge_per_macro_particle == 1.0
        bunch.add_particle([1e-3, 0, 0, 0, 0, 0])
        assert bunch.get_total_charge() == 1.0

    def test_bad_vector_rejected(self):
        with pytest.raises(ValueError):
            proton_bunch(1.0).add_particle([0.0, 0.0])

    def test_stream_round_trip(self):
        original = ParticleBunch.from_particles(
            1.0, 2.0, [[1e-3, 2e-5, -1e-3, 0.0, 0.01, 1e-4], [0.0] * 6], PROTON)
        stream = io.StringIO()
        original.write(stream)
        stream.seek(0)
        copy = ParticleBunch.from_stream(1.0, 2.0, stream, PROTON)
        assert len(copy) == 2
        np.testing.assert_allclose(copy.as_array(), original.as_array())

    def test_stream_skips_comments(self):
        stream = io.StringIO("# x xp y yp ct dp\n\n1 2 3 4 5 6\n")
        bunch = ParticleBunch.from_stream(1.0, 1.0, stream)
        assert len(bunch) == 1
        assert bunch[0][5] == 6.0

    def test_stream_format_error(self):
        with pytest.raises(ValueError, match="Line 1"):
            ParticleBunch.from_stream(1.0, 1.0, io.StringIO("1 2 3\n"))

    def test_centroid_and_arrays(self):
        bunch = ParticleBunch.from_particles(1.0, 1.0, [[2.0, 0, 0, 0, 0, 0], [0.0, 0, 4.0, 0, 0, 0]])
        np.testing.assert_allclose(bunch.centroid(), [1.0, 0, 2.0, 0, 0, 0])
        bunch.set_particles(np.zeros((2, 6)))
        np.testing.assert_allclose(bunch.centroid(), np.zeros(6))
        with pytest.raises(ValueError):
            bunch.set_particles(np.zeros((2, 5)))
        assert proton_bunch(1.0).as_array().shape == (0, 6)


class TestGeneratedBunch:
    """Test populating a bunch from a generator."""

    def test_normal_generation(self, beam):
        bunch = ParticleBunch.from_distribution(100, NormalDistributionGenerator(seed=1), beam)
        assert len(bunch) == 100
        assert bunch.charge_per_macro_particle == pytest.approx(1.0e9)
        assert bunch.get_reference_momentum() == 7000.0

    def test_filter_rejecting_everything(self, beam):
        """A filter that accepts nothing gives an empty bunch, not an error."""
        rejecting = HorizontalHaloParticleBunchFilter(limit=1.0e9)
        generator = ArrayDistributionGenerator(np.ones((20, 6)))
        bunch = ParticleBunch.from_distribution(10, generator, beam, rejecting)
        assert len(bunch) == 0

    def test_endless_generator_bounded(self, beam):
        rejecting = VerticalHaloParticleBunchFilter(limit=1.0e9)
        bunch = ParticleBunch.from_distribution(10, UniformDistributionGenerator(seed=3), beam,
                                                rejecting, max_candidates=50)
        assert len(bunch) == 0

    def test_generator_exhausted(self, beam):
        generator = ArrayDistributionGenerator([np.zeros(6)] * 3)
        bunch = ParticleBunch.from_distribution(10, generator, beam)
        assert len(bunch) == 3

    def test_particles_stored_in_real_space(self, beam):
        generator = ArrayDistributionGenerator([[1.0, 0, 0, 0, 0, 0]])
        bunch = ParticleBunch.from_distribution(1, generator, beam)
        assert bunch[0][0] == pytest.approx(np.sqrt(1.0e-8 * 100.0))

    def test_filter_space(self, beam):
        """The same limit admits a 2 sigma particle only when applied to normalised coordinates."""
        candidates = [[2.0, 0, 0, 0, 0, 0]]
        normalised = HorizontalHaloParticleBunchFilter(limit=1.5, filter_in_realspace=False)
        real = HorizontalHaloParticleBunchFilter(limit=1.5, filter_in_realspace=True)
        accepted = ParticleBunch.from_distribution(1, ArrayDistributionGenerator(candidates), beam, normalised)
        rejected = ParticleBunch.from_distribution(1, ArrayDistributionGenerator(candidates), beam, real)
        assert len(accepted) == 1
        assert len(rejected) == 0

    def test_generation_preserves_order(self, beam):
        candidates = [[float(i), 0, 0, 0, 0, 0] for i in range(5)]
        bunch = ParticleBunch.from_distribution(5, ArrayDistributionGenerator(candidates), beam)
        xs = [p[0] for p in bunch]
        assert xs == sorted(xs)

    def test_make_generator(self):
        assert isinstance(make_generator(DistributionType.NORMAL, seed=2), NormalDistributionGenerator)
        assert isinstance(make_generator("uniform"), UniformDistributionGenerator)
        with pytest.raises(ValueError):
            make_generator(DistributionType.ARRAY)


class TestBunchFilters:
    """Test the halo filters."""

    def test_horizontal_halo(self):
        halo = HorizontalHaloParticleBunchFilter()
        halo.set_horizontal_limit(1e-3)
        halo.set_horizontal_orbit(5e-4)
        assert halo.apply(np.array([2e-3, 0, 0, 0, 0, 0]))
        assert not halo.apply(np.array([1e-3, 0, 0, 0, 0, 0]))
        assert halo.apply(np.array([-1e-3, 0, 0, 0, 0, 0]))
        assert halo.filter_in_realspace

    def test_vertical_halo(self):
        halo = VerticalHaloParticleBunchFilter()
        halo.set_vertical_limit(1e-3)
        assert halo(np.array([0, 0, 2e-3, 0, 0, 0]))
        assert not halo(np.array([5e-2, 0, 0, 0, 0, 0]))


class TestBeamData:
    """Test the normalised/real coordinate transformation."""

    def test_round_trip(self, beam):
        beam = beam.model_copy(update={'alpha_x': -1.2, 'dx': 1.5, 'x0': 1e-3})
        u = np.array([0.5, -1.0, 2.0, 0.3, -0.7, 1.1])
        np.testing.assert_allclose(beam.real_to_normalised(beam.normalised_to_real(u)), u)

    def test_zero_emittance_plane(self):
        beam = BeamData(p0=1.0)
        np.testing.assert_allclose(beam.real_to_normalised(np.zeros(6)), np.zeros(6))


class TestSpeciesVariants:
    """Test the species-dependent properties of bunches."""

    def test_electron(self):
        bunch = electron_bunch(5.0)
        assert bunch.get_particle_charge() == -1
        assert bunch.get_charge_sign() == -1
        assert bunch.is_stable()
        assert bunch.get_particle_lifetime() == 0
        assert bunch.get_particle_mass_mev() == pytest.approx(0.510998910)

    def test_proton(self):
        bunch = proton_bunch(450.0)
        assert bunch.get_particle_charge() == 1
        assert bunch.get_particle_mass() == PROTON_MASS
        assert bunch.is_stable()

    def test_muon(self):
        bunch = muon_bunch(10.0)
        assert bunch.species is MUON_MINUS
        assert not bunch.is_stable()
        assert bunch.get_particle_lifetime() == MUON_LIFETIME
        assert muon_bunch(10.0, negative=False).get_particle_charge() == 1

    def test_ion(self):
        bunch = ion_bunch(2760.0, 82.0, 208 * PROTON_MASS)
        assert bunch.get_particle_charge() == 82.0
        assert bunch.get_particle_mass() == 208 * PROTON_MASS
        assert bunch.get_particle_mass_mev() == pytest.approx(208 * 938.272013, rel=1e-6)
        assert bunch.get_charge_sign() == 1
        assert bunch.is_stable()
        assert bunch.get_particle_lifetime() == 0

    def test_ion_species_validation(self):
        with pytest.raises(ValueError):
            IonSpecies(charge=1.0, mass=-1.0)

    def test_tallies(self, caplog):
        caplog.set_level(logging.INFO, logger="latticekit")
        bunch = electron_bunch(5.0)
        bunch.tally.increment(2, 4)
        bunch.report()
        assert "Electron scatter tallies 0 0 4 0 0 0" in caplog.text
        bunch.set()
        assert bunch.tally.counts == [0] * 6

    def test_no_tallies_for_protons(self):
        with pytest.raises(AttributeError):
            proton_bunch(1.0).set()
        assert ELECTRON.has_tallies and not PROTON.has_tallies
