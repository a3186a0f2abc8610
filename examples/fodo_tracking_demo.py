"""
Demonstration script for latticekit lattice construction and tracking.

Builds a FODO cell with a girder frame from MAD-style rows, prints the
component layout, and tracks a halo-filtered proton bunch through it.
"""

import logging

from latticekit.machine_portal import Quadrupole, SectorBend
from latticekit.particles import (
    BeamData,
    HorizontalHaloParticleBunchFilter,
    NormalDistributionGenerator,
    ParticleBunch,
)
from latticekit.simulators import ParticleTracker
from latticekit.utilities import DataTable, MADInterface, MADInterfaceConfig

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

MOMENTUM = 10.0  # GeV/c


def create_fodo_table():
    """Create the rows of one FODO cell, the focusing quadrupole mounted on a girder."""
    rows = [
        {"KEYWORD": "LINE", "NAME": "F_CELL"},
        {"KEYWORD": "LINE", "NAME": "G_GIRDER1"},
        {"KEYWORD": "QUADRUPOLE", "NAME": "QF", "L": 0.3, "K1L": 0.15},
        {"KEYWORD": "MONITOR", "NAME": "BPM1"},
        {"KEYWORD": "LINE", "NAME": "G_GIRDER1"},
        {"KEYWORD": "DRIFT", "NAME": "D1", "L": 0.5},
        {"KEYWORD": "SBEND", "NAME": "MB1", "L": 2.0, "ANGLE": 0.02},
        {"KEYWORD": "DRIFT", "NAME": "D2", "L": 0.5},
        {"KEYWORD": "QUADRUPOLE", "NAME": "QD", "L": 0.3, "K1L": -0.15},
        {"KEYWORD": "DRIFT", "NAME": "D3", "L": 0.5},
        {"KEYWORD": "SBEND", "NAME": "MB2", "L": 2.0, "ANGLE": 0.02},
        {"KEYWORD": "DRIFT", "NAME": "D4", "L": 0.5},
        {"KEYWORD": "LINE", "NAME": "F_CELL"},
    ]
    return DataTable.from_records(rows)


def build_model():
    """Build the FODO model and log its layout."""
    config = MADInterfaceConfig.defaults()
    config.log_statistics = True
    mad = MADInterface(create_fodo_table(), momentum=MOMENTUM, config=config)
    model = mad.construct_model()

    for component in model:
        logger.info(f"{component.get_component_lattice_position():8.3f} m  {component.get_type():<12} {component.name}")
    logger.info(f"Components on GIRDER1: {[c.name for c in model.components_in_frame('GIRDER1')]}")
    logger.info(f"Quadrupoles: {[q.name for q in model.extract_typed_elements(Quadrupole)]}")
    total_angle = sum(b.get_angle() for b in model.extract_typed_elements(SectorBend))
    logger.info(f"Total bending angle: {total_angle:.4f} rad")
    return model


def track_halo_bunch(model):
    """Track a bunch restricted to the horizontal halo through the model."""
    beam = BeamData(p0=MOMENTUM, charge=1.0e10, beta_x=10.0, beta_y=10.0,
                    emit_x=1.0e-8, emit_y=1.0e-8, sig_dp=1.0e-3)
    halo_filter = HorizontalHaloParticleBunchFilter(limit=2.0e-4)
    bunch = ParticleBunch.from_distribution(500, NormalDistributionGenerator(seed=1), beam,
                                            bunch_filter=halo_filter, max_candidates=100000)
    logger.info(f"Generated {len(bunch)} halo particles, total charge {bunch.get_total_charge():.3e}")

    logger.info(f"Centroid before: {bunch.centroid()}")
    ParticleTracker(model).track(bunch)
    logger.info(f"Centroid after:  {bunch.centroid()}")


def main():
    """Run the demonstration."""
    model = build_model()
    track_halo_bunch(model)


if __name__ == "__main__":
    main()
