"""
latticekit Particles - species, reference particle, bunches and their generation
"""

from latticekit.particles.species import ParticleInfo, PARTICLE_SPECIES, find_particle
from latticekit.particles.reference import ReferenceParticle
from latticekit.particles.filters import (
    BunchFilter,
    HorizontalHaloParticleBunchFilter,
    VerticalHaloParticleBunchFilter,
)
from latticekit.particles.distributions import (
    BeamData,
    DistributionType,
    NormalDistributionGenerator,
    UniformDistributionGenerator,
    ArrayDistributionGenerator,
    make_generator,
)
from latticekit.particles.bunch import (
    ParticleBunch,
    FixedSpecies,
    IonSpecies,
    ELECTRON,
    POSITRON,
    PROTON,
    ANTIPROTON,
    MUON_MINUS,
    MUON_PLUS,
    electron_bunch,
    proton_bunch,
    muon_bunch,
    ion_bunch,
)

__all__ = [
    'ParticleInfo',
    'PARTICLE_SPECIES',
    'find_particle',
    'ReferenceParticle',
    'BunchFilter',
    'HorizontalHaloParticleBunchFilter',
    'VerticalHaloParticleBunchFilter',
    'BeamData',
    'DistributionType',
    'NormalDistributionGenerator',
    'UniformDistributionGenerator',
    'ArrayDistributionGenerator',
    'make_generator',
    'ParticleBunch',
    'FixedSpecies',
    'IonSpecies',
    'ELECTRON',
    'POSITRON',
    'PROTON',
    'ANTIPROTON',
    'MUON_MINUS',
    'MUON_PLUS',
    'electron_bunch',
    'proton_bunch',
    'muon_bunch',
    'ion_bunch',
]
