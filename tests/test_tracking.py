"""
Tests for linear tracking through constructed models.
"""

import math
import numpy as np
import pytest

from latticekit.constants import magnetic_rigidity
from latticekit.exceptions import TrackingError
from latticekit.machine_portal import AcceleratorModel, Collimator, Drift, Quadrupole, Solenoid, SRot
from latticekit.particles.bunch import ParticleBunch, ELECTRON
from latticekit.simulators.tracking import ParticleTracker
from latticekit.utilities.mad_interface import MADInterface
from latticekit.utilities.tfs_table import DataTable


def bunch_of(*vectors, momentum=1.0, species=None):
    bunch = ParticleBunch(momentum) if species is None else ParticleBunch(momentum, species=species)
    for vector in vectors:
        bunch.add_particle(vector)
    return bunch


def model_of(*components):
    return AcceleratorModel(name="test", components=list(components),
                            component_frames=[None] * len(components))


def build(*rows, momentum=1.0):
    return MADInterface(DataTable.from_records(rows), momentum=momentum).construct_model()


class TestTracking:
    """Test single-component maps."""

    def test_drift(self):
        bunch = bunch_of([0.0, 1.0e-3, 0.0, -2.0e-3, 0.0, 0.0])
        ParticleTracker(model_of(Drift(name="D", length=2.0))).track(bunch)
        x, xp, y, yp, ct, dp = bunch[0]
        assert x == pytest.approx(2.0e-3)
        assert y == pytest.approx(-4.0e-3)
        assert xp == pytest.approx(1.0e-3)

    def test_empty_bunch(self):
        bunch = ParticleBunch(1.0)
        assert len(ParticleTracker(model_of(Drift(name="D", length=1.0))).track(bunch)) == 0

    def test_quadrupole_focuses_horizontally(self):
        k1, length = 1.0, 0.1
        quad = Quadrupole.with_strength("QF", length, magnetic_rigidity(1.0) * k1)
        bunch = bunch_of([1.0e-3, 0.0, 1.0e-3, 0.0, 0.0, 0.0])
        ParticleTracker(model_of(quad)).track(bunch)
        x, xp, y, yp, _, _ = bunch[0]
        assert x == pytest.approx(1.0e-3 * math.cos(length))
        assert xp == pytest.approx(-1.0e-3 * math.sin(length))
        assert y == pytest.approx(1.0e-3 * math.cosh(length))
        assert yp == pytest.approx(1.0e-3 * math.sinh(length))

    def test_quadrupole_chromatic(self):
        quad = Quadrupole.with_strength("QF", 0.1, magnetic_rigidity(1.0))
        bunch = bunch_of([1.0e-3, 0.0, 0.0, 0.0, 0.0, 0.0], [1.0e-3, 0.0, 0.0, 0.0, 0.0, 0.01])
        ParticleTracker(model_of(quad)).track(bunch)
        # Higher momentum particles are focused less
        assert abs(bunch[1][1]) < abs(bunch[0][1])

    def test_kickers(self):
        model = build(
            {"KEYWORD": "HKICKER", "NAME": "HK", "L": 0.0, "HKICK": 1.0e-4},
            {"KEYWORD": "VKICKER", "NAME": "VK", "L": 0.0, "VKICK": 2.0e-4},
        )
        bunch = bunch_of([0.0] * 6)
        ParticleTracker(model).track(bunch)
        assert bunch[0][1] == pytest.approx(1.0e-4)
        assert bunch[0][3] == pytest.approx(2.0e-4)

    def test_thick_kicker(self):
        model = build({"KEYWORD": "HKICKER", "NAME": "HK", "L": 2.0, "HKICK": 1.0e-4})
        bunch = bunch_of([0.0] * 6)
        ParticleTracker(model).track(bunch)
        assert bunch[0][1] == pytest.approx(1.0e-4)
        assert bunch[0][0] == pytest.approx(1.0e-4)

    def test_kick_scales_with_species_momentum(self):
        model = build({"KEYWORD": "HKICKER", "NAME": "HK", "L": 0.0, "HKICK": 1.0e-4})
        bunch = bunch_of([0.0] * 6, momentum=2.0)
        ParticleTracker(model).track(bunch)
        assert bunch[0][1] == pytest.approx(0.5e-4)

    def test_negative_species_kicked_the_other_way(self):
        model = build({"KEYWORD": "HKICKER", "NAME": "HK", "L": 0.0, "HKICK": 1.0e-4})
        bunch = bunch_of([0.0] * 6, species=ELECTRON)
        ParticleTracker(model).track(bunch)
        assert bunch[0][1] == pytest.approx(-1.0e-4)

    def test_thin_sextupole(self):
        model = build({"KEYWORD": "MULTIPOLE", "NAME": "MS", "L": 0.0, "K2L": 0.1})
        bunch = bunch_of([2.0e-3, 0.0, 0.0, 0.0, 0.0, 0.0])
        ParticleTracker(model).track(bunch)
        assert bunch[0][0] == pytest.approx(2.0e-3)
        assert bunch[0][1] == pytest.approx(-0.05 * (2.0e-3) ** 2)

    def test_srot(self):
        bunch = bunch_of([1.0e-3, 2.0e-4, 0.0, 0.0, 0.0, 0.0])
        ParticleTracker(model_of(SRot(name="ROT", angle=math.pi / 2))).track(bunch)
        x, xp, y, yp, _, _ = bunch[0]
        assert x == pytest.approx(0.0, abs=1e-15)
        assert y == pytest.approx(-1.0e-3)
        assert yp == pytest.approx(-2.0e-4)

    def test_solenoid_couples_planes(self):
        bunch = bunch_of([1.0e-3, 0.0, 0.0, 0.0, 0.0, 0.0])
        ParticleTracker(model_of(Solenoid(name="SOL", length=1.0, bz=2.0))).track(bunch)
        assert bunch[0][2] != 0.0
        assert bunch[0][3] != 0.0

    def test_unpowered_solenoid_is_a_drift(self):
        bunch = bunch_of([0.0, 1.0e-3, 0.0, 0.0, 0.0, 0.0])
        ParticleTracker(model_of(Solenoid(name="SOL", length=1.5))).track(bunch)
        assert bunch[0][0] == pytest.approx(1.5e-3)

    def test_longitudinal_coordinates_unchanged(self):
        bunch = bunch_of([1.0e-3, 0.0, 0.0, 0.0, 0.3, 1.0e-3])
        quad = Quadrupole.with_strength("QF", 0.5, 2.0)
        ParticleTracker(model_of(Drift(name="D", length=1.0), quad)).track(bunch)
        assert bunch[0][4] == 0.3
        assert bunch[0][5] == 1.0e-3


class TestStrictMode:
    """Test components without a transport map."""

    def test_unmapped_component_drifts(self):
        bunch = bunch_of([0.0, 1.0e-3, 0.0, 0.0, 0.0, 0.0])
        ParticleTracker(model_of(Collimator(name="TCP", length=1.0))).track(bunch)
        assert bunch[0][0] == pytest.approx(1.0e-3)

    def test_strict_raises(self):
        bunch = bunch_of([0.0] * 6)
        tracker = ParticleTracker(model_of(Collimator(name="TCP", length=1.0)), strict=True)
        with pytest.raises(TrackingError):
            tracker.track(bunch)

    def test_strict_allows_zero_length(self):
        bunch = bunch_of([0.0] * 6)
        model = build({"KEYWORD": "MARKER", "NAME": "M1", "L": 0.0},
                      {"KEYWORD": "DRIFT", "NAME": "D1", "L": 1.0})
        ParticleTracker(model, strict=True).track(bunch)
        assert np.all(bunch.as_array() == 0.0)
