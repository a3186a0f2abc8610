"""
latticekit - accelerator lattice construction from MAD tables

Builds an in-memory accelerator model from a MAD/TFS lattice table and
provides the particle bunches that are tracked through it.
"""

from .machine_portal import AcceleratorModel
from .particles import ParticleBunch, find_particle
from .utilities import MADInterface, MADInterfaceConfig

__version__ = "0.1.0"

__all__ = [
    'AcceleratorModel',
    'ParticleBunch',
    'find_particle',
    'MADInterface',
    'MADInterfaceConfig',
]
