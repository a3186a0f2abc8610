"""
Row to component factory for lattice construction.

Each registered keyword maps to a constructor function taking a table, the
current magnetic rigidity and a row index, and returning zero or more
components. Strength columns are integrated MAD strengths (KnL) and are
turned into fields by scaling with the rigidity.

The default constructors are registered explicitly by ``register_defaults``,
which runs once when this module is imported.
"""

from ..constants import MHZ, MV, SPEED_OF_LIGHT, TWO_PI
from ..machine_portal.element import Element
from ..machine_portal.drift import Drift
from ..machine_portal.marker import Marker
from ..machine_portal.bend import SectorBend, PoleFace
from ..machine_portal.multipole import RectMultipole
from ..machine_portal.quadrupole import Quadrupole, SkewQuadrupole
from ..machine_portal.sextupole import Sextupole, SkewSextupole
from ..machine_portal.octupole import Octupole
from ..machine_portal.corrector import XCor, YCor
from ..machine_portal.solenoid import Solenoid
from ..machine_portal.rfcavity import SWRFStructure, half_wavelength
from ..machine_portal.crabcavity import CrabMarker, TransverseRFStructure
from ..machine_portal.collimator import Collimator
from ..machine_portal.hollow_electron_lens import HollowElectronLens
from ..machine_portal.monitor import BPM, RMSProfileMonitor
from ..models.validators import validate_bending_angle
from .tfs_table import DataTable
from enum import Enum
from typing import Callable, Dict, List
import logging
import math

logger = logging.getLogger(__name__)

ComponentConstructor = Callable[[DataTable, float, int], List[Element]]

NORMAL_COEFFICIENTS = ("K0L", "K1L", "K2L", "K3L", "K4L")
SKEW_COEFFICIENTS = ("KSL", "K1S", "K2S", "K3S", "K4S")

# Relative length error above which a rounded standing wave cavity is reported
CAVITY_LENGTH_TOLERANCE = 0.001


class ElementKeyword(str, Enum):
    """Keywords understood by the factory, plus the structural ones handled by the builder."""
    DRIFT = "DRIFT"
    RBEND = "RBEND"
    SBEND = "SBEND"
    QUADRUPOLE = "QUADRUPOLE"
    SKEWQUAD = "SKEWQUAD"
    SEXTUPOLE = "SEXTUPOLE"
    SKEWSEXT = "SKEWSEXT"
    OCTUPOLE = "OCTUPOLE"
    DECAPOLE = "DECAPOLE"
    MULTIPOLE = "MULTIPOLE"
    YCOR = "YCOR"
    XCOR = "XCOR"
    VKICKER = "VKICKER"
    HKICKER = "HKICKER"
    SOLENOID = "SOLENOID"
    RFCAVITY = "RFCAVITY"
    RFCAVITY_SINGLE_CELL = "RFCAVITY_SingleCell"
    CRABMARKER = "CRABMARKER"
    CRABRF = "CRABRF"
    COLLIMATOR = "COLLIMATOR"
    HEL = "HEL"
    MONITOR = "MONITOR"
    MARKER = "MARKER"
    LINE = "LINE"
    SROT = "SROT"
    NOTIMPLEMENTED = "NOTIMPLEMENTED"


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _check_thick(table: DataTable, row: int, keyword: str) -> bool:
    """Strengths per unit length need a non-zero length; warn and skip the row otherwise."""
    if table.get_d("L", row) == 0:
        logger.warning(f"Cannot make zero length {keyword} {table.get_s('NAME', row)}, skipping")
        return False
    return True


def make_drift(table: DataTable, brho: float, row: int) -> List[Element]:
    name = table.get_s("NAME", row)
    length = table.get_d("L", row)
    if length != 0:
        return [Drift(name=name, length=length)]
    return []


def _make_sector_bend(table: DataTable, brho: float, row: int) -> SectorBend:
    name = table.get_s("NAME", row)
    length = table.get_d("L", row)
    h = validate_bending_angle(table.get_d("ANGLE", row)) / length
    bend = SectorBend.from_field(name, length, h, brho * h)

    k1l = table.get_d("K1L", row)
    if k1l:
        bend.set_b1(brho * k1l / length)

    e1 = table.get_d("E1", row)
    e2 = table.get_d("E2", row)
    if e1 != 0 or e2 != 0:
        bend.set_pole_face_info(PoleFace(rotation=e1) if e1 != 0 else None,
                                PoleFace(rotation=e2) if e2 != 0 else None)
    return bend


def make_rbend(table: DataTable, brho: float, row: int) -> List[Element]:
    """Rectangular bend, modelled as a sector bend; the tilt is always applied."""
    if not _check_thick(table, row, "RBEND"):
        return []
    bend = _make_sector_bend(table, brho, row)
    bend.set_tilt(table.get_d("TILT", row))
    return [bend]


def make_sbend(table: DataTable, brho: float, row: int) -> List[Element]:
    """Sector bend with optional gradient, sextupole term, pole faces and tilt."""
    if not _check_thick(table, row, "SBEND"):
        return []
    bend = _make_sector_bend(table, brho, row)
    length = bend.length
    k2l = table.get_d("K2L", row)
    if k2l:
        bend.set_bn(2, brho * k2l / length / 2)
    tilt = table.get_d("TILT", row)
    if tilt:
        bend.set_tilt(tilt)
    return [bend]


def _single_strength_maker(magnet_class, column: str, keyword: str) -> ComponentConstructor:
    def make(table: DataTable, brho: float, row: int) -> List[Element]:
        if not _check_thick(table, row, keyword):
            return []
        length = table.get_d("L", row)
        strength = brho * table.get_d(column, row) / length
        return [magnet_class.with_strength(table.get_s("NAME", row), length, strength)]
    make.__name__ = f"make_{keyword.lower()}"
    make.__doc__ = f"{magnet_class.__name__} with strength rigidity * {column} / L."
    return make


make_quadrupole = _single_strength_maker(Quadrupole, "K1L", "QUADRUPOLE")
make_skew_quadrupole = _single_strength_maker(SkewQuadrupole, "K1L", "SKEWQUAD")
make_sextupole = _single_strength_maker(Sextupole, "K2L", "SEXTUPOLE")
make_skew_sextupole = _single_strength_maker(SkewSextupole, "K2L", "SKEWSEXT")
make_octupole = _single_strength_maker(Octupole, "K3L", "OCTUPOLE")


def make_multipole(table: DataTable, brho: float, row: int) -> List[Element]:
    """Generic multipole from the non-zero K0L..K4L.

    A zero length multipole is thin; its integrated strengths are then
    scaled with a unit length.
    """
    name = table.get_s("NAME", row)
    length = table.get_d("L", row)
    multipole = RectMultipole.with_main_field(name, length, 0, 1.0)
    field = multipole.get_field()
    # The dipole term only seeds the construction
    field.set_component(0, 0.0)

    scale_length = length if length != 0 else 1.0
    for n, column in enumerate(NORMAL_COEFFICIENTS):
        k = table.get_d(column, row)
        if k != 0:
            field.set_component(n, k * brho / scale_length / math.factorial(n))
    return [multipole]


def make_ycor(table: DataTable, brho: float, row: int) -> List[Element]:
    return [YCor(name=table.get_s("NAME", row), length=table.get_d("L", row))]


def make_xcor(table: DataTable, brho: float, row: int) -> List[Element]:
    return [XCor(name=table.get_s("NAME", row), length=table.get_d("L", row))]


def _kick_scale(brho: float, length: float) -> float:
    return brho / length if length > 0 else brho


def make_vkicker(table: DataTable, brho: float, row: int) -> List[Element]:
    length = table.get_d("L", row)
    kick = table.get_d("VKICK", row)
    return [YCor(name=table.get_s("NAME", row), length=length,
                 field_strength=_kick_scale(brho, length) * kick)]


def make_hkicker(table: DataTable, brho: float, row: int) -> List[Element]:
    """Horizontal kicker; a positive MAD kick needs a negative vertical field."""
    length = table.get_d("L", row)
    kick = table.get_d("HKICK", row)
    return [XCor(name=table.get_s("NAME", row), length=length,
                 field_strength=-_kick_scale(brho, length) * kick)]


def make_solenoid(table: DataTable, brho: float, row: int) -> List[Element]:
    if not _check_thick(table, row, "SOLENOID"):
        return []
    length = table.get_d("L", row)
    return [Solenoid(name=table.get_s("NAME", row), length=length,
                     bz=brho * table.get_d("KS", row) / length)]


def _cavity_parameters(table: DataTable, row: int):
    """Frequency (Hz), half wavelength (m), cosine-convention phase and voltage (V)."""
    frequency = table.get_d("FREQ", row) * MHZ
    phase = TWO_PI * (table.get_d("LAG", row) - 0.25)
    voltage = table.get_d("VOLT", row) * MV
    return frequency, half_wavelength(frequency), phase, voltage


def _check_cavity(table: DataTable, row: int, keyword: str) -> bool:
    if not _check_thick(table, row, keyword):
        return False
    if table.get_d("FREQ", row) <= 0:
        logger.warning(f"Cannot make {keyword} {table.get_s('NAME', row)} without a positive FREQ, skipping")
        return False
    if table.get_d("L", row) < 0:
        logger.warning(f"Cannot make {keyword} {table.get_s('NAME', row)} with a negative length, skipping")
        return False
    return True


def make_rf_cavity(table: DataTable, brho: float, row: int) -> List[Element]:
    """Standing wave cavity with an integer number of half wavelengths.

    The field is the voltage over the nominal row length, not the rounded
    structure length.
    """
    if not _check_cavity(table, row, "RFCAVITY"):
        return []
    name = table.get_s("NAME", row)
    length = table.get_d("L", row)
    frequency, lambda_over_2, phase, voltage = _cavity_parameters(table, row)
    ncells = _round_half_up(length / lambda_over_2)
    cells_length = ncells * lambda_over_2

    if abs(cells_length / length - 1) > CAVITY_LENGTH_TOLERANCE:
        logger.error(f"SW cavity length not valid ({length}, {cells_length}) for {name}")

    return [SWRFStructure.from_cells(name, ncells, frequency, voltage / length, phase)]


def make_rf_cavity_single_cell(table: DataTable, brho: float, row: int) -> List[Element]:
    """One half-wavelength cell followed by a drift filling the rest of the row length."""
    if not _check_cavity(table, row, "RFCAVITY_SingleCell"):
        return []
    name = table.get_s("NAME", row)
    length = table.get_d("L", row)
    frequency, lambda_over_2, phase, voltage = _cavity_parameters(table, row)

    if lambda_over_2 / length - 1 > CAVITY_LENGTH_TOLERANCE:
        logger.error(f"SW cavity length not valid ({length}, {lambda_over_2}) for {name}")

    components: List[Element] = [
        SWRFStructure.from_cells(name, 1, frequency, voltage / lambda_over_2, phase)
    ]
    drift_length = length - lambda_over_2
    if drift_length > 0:
        components.append(Drift(name=f"Drift_{name}", length=drift_length))
    return components


def make_crab_marker(table: DataTable, brho: float, row: int) -> List[Element]:
    return [CrabMarker(name=table.get_s("NAME", row), length=table.get_d("L", row),
                       mux=table.get_d("MUX", row), muy=table.get_d("MUY", row))]


def make_crab_rf(table: DataTable, brho: float, row: int) -> List[Element]:
    return [TransverseRFStructure(name=table.get_s("NAME", row), length=table.get_d("L", row))]


def make_collimator(table: DataTable, brho: float, row: int) -> List[Element]:
    return [Collimator(name=table.get_s("NAME", row), length=table.get_d("L", row))]


def make_hollow_electron_lens(table: DataTable, brho: float, row: int) -> List[Element]:
    return [HollowElectronLens(name=table.get_s("NAME", row), length=table.get_d("L", row))]


def make_monitor(table: DataTable, brho: float, row: int) -> List[Element]:
    """Wire scanners (names starting with WS) become profile monitors, the rest BPMs."""
    name = table.get_s("NAME", row)
    length = table.get_d("L", row)
    if name.startswith("WS"):
        return [RMSProfileMonitor(name=name, length=length)]
    return [BPM(name=name, length=length)]


def make_marker(table: DataTable, brho: float, row: int) -> List[Element]:
    return [Marker(name=table.get_s("NAME", row))]


class TypeFactory:
    """
    Registry of component constructors keyed by element keyword.

    The registry is shared by all builders. It is filled once by
    ``register_defaults`` and is read-only afterwards unless a caller
    registers extra keywords.
    """

    _constructors: Dict[str, ComponentConstructor] = {}

    @classmethod
    def register(cls, keyword: str, constructor: ComponentConstructor):
        """
        Register a constructor for a keyword.

        Args:
            keyword: Table keyword, as found in the KEYWORD column after overrides
            constructor: Function (table, brho, row) -> list of components
        """
        keyword = getattr(keyword, "value", keyword)
        if keyword in cls._constructors:
            logger.warning(f"Keyword '{keyword}' is already registered, overwriting")
        cls._constructors[keyword] = constructor
        logger.debug(f"Registered constructor {constructor.__name__} for {keyword}")

    @classmethod
    def unregister(cls, keyword: str):
        keyword = getattr(keyword, "value", keyword)
        if keyword in cls._constructors:
            del cls._constructors[keyword]
            logger.debug(f"Unregistered constructor for {keyword}")
        else:
            logger.warning(f"Keyword '{keyword}' not found in registry")

    @classmethod
    def is_registered(cls, keyword: str) -> bool:
        return keyword in cls._constructors

    @classmethod
    def list_keywords(cls) -> List[str]:
        return list(cls._constructors.keys())

    @classmethod
    def get_instance(cls, table: DataTable, brho: float, row: int) -> List[Element]:
        """
        Build the components for one row.

        Args:
            table: Row source
            brho: Magnetic rigidity (T.m) used to scale strengths
            row: Row index

        Returns:
            Components built for the row; empty if the keyword is not registered
        """
        keyword = table.get_s("KEYWORD", row)
        constructor = cls._constructors.get(keyword)
        if constructor is None:
            logger.warning(f"Could not make element {table.get_s('NAME', row)} type {keyword}")
            return []
        return constructor(table, brho, row)


DEFAULT_CONSTRUCTORS: Dict[ElementKeyword, ComponentConstructor] = {
    ElementKeyword.DRIFT: make_drift,
    ElementKeyword.RBEND: make_rbend,
    ElementKeyword.SBEND: make_sbend,
    ElementKeyword.QUADRUPOLE: make_quadrupole,
    ElementKeyword.SKEWQUAD: make_skew_quadrupole,
    ElementKeyword.SEXTUPOLE: make_sextupole,
    ElementKeyword.SKEWSEXT: make_skew_sextupole,
    ElementKeyword.OCTUPOLE: make_octupole,
    ElementKeyword.MULTIPOLE: make_multipole,
    ElementKeyword.YCOR: make_ycor,
    ElementKeyword.XCOR: make_xcor,
    ElementKeyword.VKICKER: make_vkicker,
    ElementKeyword.HKICKER: make_hkicker,
    ElementKeyword.SOLENOID: make_solenoid,
    ElementKeyword.RFCAVITY: make_rf_cavity,
    ElementKeyword.RFCAVITY_SINGLE_CELL: make_rf_cavity_single_cell,
    ElementKeyword.CRABMARKER: make_crab_marker,
    ElementKeyword.CRABRF: make_crab_rf,
    ElementKeyword.COLLIMATOR: make_collimator,
    ElementKeyword.HEL: make_hollow_electron_lens,
    ElementKeyword.MONITOR: make_monitor,
    ElementKeyword.MARKER: make_marker,
}


def register_defaults():
    """Register the built-in constructors."""
    for keyword, constructor in DEFAULT_CONSTRUCTORS.items():
        TypeFactory.register(keyword.value, constructor)


register_defaults()
