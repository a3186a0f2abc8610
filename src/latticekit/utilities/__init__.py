"""
latticekit Utilities - lattice table reading and model construction
"""

from latticekit.utilities.tfs_table import DataTable, read_tfs_table
from latticekit.utilities.type_factory import ElementKeyword, TypeFactory, register_defaults
from latticekit.utilities.mad_interface import (
    MADInterface,
    MADInterfaceConfig,
    get_multipole_type,
    sr_energy_loss,
)

__all__ = [
    'DataTable',
    'read_tfs_table',
    'ElementKeyword',
    'TypeFactory',
    'register_defaults',
    'MADInterface',
    'MADInterfaceConfig',
    'get_multipole_type',
    'sr_energy_loss',
]
