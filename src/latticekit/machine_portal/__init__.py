"""
latticekit Machine Portal - accelerator components, frames and the assembled model
"""

from latticekit.machine_portal.element import Element, MultipoleField
from latticekit.machine_portal.drift import Drift
from latticekit.machine_portal.marker import Marker
from latticekit.machine_portal.bend import SectorBend, PoleFace
from latticekit.machine_portal.multipole import MultipoleMagnet, RectMultipole
from latticekit.machine_portal.quadrupole import Quadrupole, SkewQuadrupole
from latticekit.machine_portal.sextupole import Sextupole, SkewSextupole
from latticekit.machine_portal.octupole import Octupole
from latticekit.machine_portal.corrector import XCor, YCor
from latticekit.machine_portal.solenoid import Solenoid
from latticekit.machine_portal.rfcavity import SWRFStructure
from latticekit.machine_portal.crabcavity import CrabMarker, TransverseRFStructure
from latticekit.machine_portal.collimator import Collimator
from latticekit.machine_portal.hollow_electron_lens import HollowElectronLens
from latticekit.machine_portal.monitor import BPM, RMSProfileMonitor
from latticekit.machine_portal.srot import SRot
from latticekit.machine_portal.frame import Frame, FrameKind
from latticekit.machine_portal.model import AcceleratorModel, AcceleratorModelConstructor

__all__ = [
    'Element',
    'MultipoleField',
    'Drift',
    'Marker',
    'SectorBend',
    'PoleFace',
    'MultipoleMagnet',
    'RectMultipole',
    'Quadrupole',
    'SkewQuadrupole',
    'Sextupole',
    'SkewSextupole',
    'Octupole',
    'XCor',
    'YCor',
    'Solenoid',
    'SWRFStructure',
    'CrabMarker',
    'TransverseRFStructure',
    'Collimator',
    'HollowElectronLens',
    'BPM',
    'RMSProfileMonitor',
    'SRot',
    'Frame',
    'FrameKind',
    'AcceleratorModel',
    'AcceleratorModelConstructor',
]
