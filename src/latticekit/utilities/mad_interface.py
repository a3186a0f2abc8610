"""
Construction of an accelerator model from a MAD/TFS lattice table.

MADInterface reads the table row by row. Structural LINE rows open and close
frames, SROT rows insert a rotation, and every other row is passed through a
set of keyword overrides and then to the TypeFactory. Components are placed
at the running arc length. When synchrotron radiation is included, the
momentum is reduced after every bend and the rigidity used for the
following rows follows it.
"""

from ..constants import SR_CONSTANT, magnetic_rigidity
from ..exceptions import ContractViolation, FrameCodeError, LatticeSourceError
from ..machine_portal.frame import FrameKind
from ..machine_portal.model import AcceleratorModel, AcceleratorModelConstructor
from ..machine_portal.srot import SRot
from ..models.base import PhysicsBaseModel
from ..models.validators import validate_positive_momentum
from .tfs_table import DataTable, read_tfs_table
from .type_factory import ElementKeyword, NORMAL_COEFFICIENTS, SKEW_COEFFICIENTS, TypeFactory
from pathlib import Path
from pydantic import Field, field_validator
from typing import Any, Dict, Optional, Set
import logging
import os
import pandas as pd
import yaml

logger = logging.getLogger(__name__)

FRAME_LOG_INDENT = "----|"

MULTIPOLE_TYPES = (
    ElementKeyword.SBEND,
    ElementKeyword.QUADRUPOLE,
    ElementKeyword.SEXTUPOLE,
    ElementKeyword.OCTUPOLE,
    ElementKeyword.DECAPOLE,
)


def load_mad_defaults() -> Dict[str, Any]:
    """Load the default builder options from mad_defaults.yaml in utilities."""
    yaml_path = os.path.join(os.path.dirname(__file__), 'mad_defaults.yaml')
    if not os.path.exists(yaml_path):
        raise FileNotFoundError(f"mad_defaults.yaml not found at {yaml_path}")
    with open(yaml_path, 'r') as f:
        data = yaml.safe_load(f)
    return data


class MADInterfaceConfig(PhysicsBaseModel):
    """Options of the MAD lattice builder.

    Example:
        >>> config = MADInterfaceConfig.defaults()
        >>> config.include_sr = True
        >>> "KICKER" in config.treat_as_drift
        True
    """

    include_sr: bool = Field(False, description="Debit synchrotron radiation energy loss in bends")
    flat_lattice: bool = Field(False, description="Ignore LINE rows and build no frames")
    honour_mad_structure: bool = Field(False, description="Open frames for LINE names without a frame code")
    single_cell_rf: bool = Field(False, description="Build RF cavities as one cell plus a drift")
    log_frames: bool = Field(True, description="Log frame BEGIN/END events")
    log_statistics: bool = Field(False, description="Log component statistics after a build")
    particle_charge: float = Field(1.0, description="Particle charge used for the rigidity")
    treat_as_drift: Set[str] = Field(default_factory=set, description="Keywords built as drifts")
    ignore_zero_length: Set[str] = Field(default_factory=set, description="Keywords dropped when L = 0")

    @field_validator('particle_charge')
    @classmethod
    def validate_particle_charge(cls, v):
        if v == 0:
            raise ValueError("Particle charge must be non-zero to define a rigidity")
        return v

    @classmethod
    def defaults(cls) -> 'MADInterfaceConfig':
        return cls(**load_mad_defaults())

    @classmethod
    def from_yaml(cls, path: str | Path) -> 'MADInterfaceConfig':
        """Load options from a YAML file, on top of the defaults."""
        data = load_mad_defaults()
        with open(path, 'r') as f:
            data.update(yaml.safe_load(f) or {})
        return cls(**data)


def sr_energy_loss(h: float, length: float, energy: float) -> float:
    """Classical synchrotron radiation loss (GeV) in a bend of curvature h over length.

    The radiation constant is the electron one and the energy is taken as
    the momentum, so the estimate is for ultra-relativistic electrons.
    """
    return SR_CONSTANT * energy ** 4 * h * h * length


def get_multipole_type(table: DataTable, row: int) -> str:
    """
    Classify a MULTIPOLE row by its non-zero coefficients.

    Returns:
        DRIFT when all normal coefficients are zero, MULTIPOLE for a thin
        multipole, the single-order magnet keyword for a thick multipole with
        one coefficient, and NOTIMPLEMENTED for skew or mixed thick multipoles.
    """
    lowest = -1
    count = 0
    for n in reversed(range(len(NORMAL_COEFFICIENTS))):
        if table.get_d(NORMAL_COEFFICIENTS[n], row) != 0:
            count += 1
            lowest = n
        if table.has_col(SKEW_COEFFICIENTS[n]) and table.get_d(SKEW_COEFFICIENTS[n], row) != 0:
            logger.warning(f"Skew multipoles not implemented, skipping {table.get_s('NAME', row)}")
            return ElementKeyword.NOTIMPLEMENTED.value

    if count == 0:
        return ElementKeyword.DRIFT.value
    if table.get_d("L", row) == 0:
        return ElementKeyword.MULTIPOLE.value
    if count == 1:
        return MULTIPOLE_TYPES[lowest].value
    return ElementKeyword.NOTIMPLEMENTED.value


class MADInterface:
    """
    Builds an AcceleratorModel from a MAD/TFS table.

    The source is a path to a TFS file, a DataTable or a pandas DataFrame.
    KEYWORD cells are rewritten in place by the overrides, so a DataTable
    passed in directly is modified.

    Example:
        >>> mad = MADInterface("lattice.tfs", momentum=7000.0)
        >>> mad.config.include_sr = True
        >>> model = mad.construct_model()
    """

    def __init__(self, source=None, momentum: float = 1.0, config: Optional[MADInterfaceConfig] = None):
        self.config = config if config is not None else MADInterfaceConfig.defaults()
        self._source = None
        self._momentum = validate_positive_momentum(momentum)
        self._brho = self._rigidity(self._momentum)
        self._z = 0.0
        self._constructor: Optional[AcceleratorModelConstructor] = None
        self._line_stack: list[tuple[str, bool]] = []
        self._last_open_frames: list[str] = []
        if source is not None:
            self._source = self._check_source(source)

    @staticmethod
    def _check_source(source):
        """Check the source can be read; a file is only parsed when a model is built."""
        if isinstance(source, (str, Path)) and not Path(source).is_file():
            logger.error(f"MADInterface: ERROR opening or reading file {source}")
            raise LatticeSourceError(f"ERROR opening file {source}")
        if not isinstance(source, (str, Path, DataTable, pd.DataFrame)):
            raise LatticeSourceError(f"Unsupported lattice source {type(source).__name__}")
        return source

    @staticmethod
    def _load_table(source) -> DataTable:
        if isinstance(source, DataTable):
            return source
        if isinstance(source, pd.DataFrame):
            return DataTable(source, headers=getattr(source, 'headers', {}))
        return read_tfs_table(source)

    def _rigidity(self, momentum: float) -> float:
        return magnetic_rigidity(momentum, self.config.particle_charge)

    # Running state
    @property
    def momentum(self) -> float:
        """Momentum (GeV/c) after the last row processed."""
        return self._momentum

    @property
    def rigidity(self) -> float:
        return self._brho

    @property
    def arc_length(self) -> float:
        """Arc length (m) reached by the last component placed."""
        return self._z

    @property
    def open_frames(self) -> list[str]:
        """Frames left open by the build, outermost first."""
        if self._constructor is not None:
            return self._constructor.open_frames
        return list(self._last_open_frames)

    # Override tables
    def treat_type_as_drift(self, keyword: str):
        """Build rows of this keyword as drifts."""
        self.config.treat_as_drift.add(keyword)

    def ignore_zero_length_type(self, keyword: str):
        """Drop rows of this keyword when their length is zero."""
        self.config.ignore_zero_length.add(keyword)

    def type_overrides(self, table: DataTable, row: int):
        """Rewrite the KEYWORD of a row before it reaches the factory.

        The checks are made on the keyword as read, except the single-cell
        RF check which sees the result of the earlier rewrites.
        """
        keyword = table.get_s("KEYWORD", row)
        if keyword in self.config.treat_as_drift:
            table.set_s("KEYWORD", row, ElementKeyword.DRIFT.value)
        if keyword == "LCAV":
            table.set_s("KEYWORD", row, ElementKeyword.RFCAVITY.value)
        if keyword in ("RCOLLIMATOR", "ECOLLIMATOR"):
            table.set_s("KEYWORD", row, ElementKeyword.COLLIMATOR.value)
        if keyword == ElementKeyword.RBEND and table.get_d("K0L", row) != 0:
            table.set_s("KEYWORD", row, ElementKeyword.SBEND.value)
        if self.config.single_cell_rf and table.get_s("KEYWORD", row) == ElementKeyword.RFCAVITY:
            table.set_s("KEYWORD", row, ElementKeyword.RFCAVITY_SINGLE_CELL.value)
        if keyword == ElementKeyword.MULTIPOLE:
            table.set_s("KEYWORD", row, get_multipole_type(table, row))

    # Frames
    def _log_frame(self, message: str):
        if self.config.log_frames:
            depth = self._constructor.get_current_frame_depth()
            logger.info(f"{FRAME_LOG_INDENT * depth}{message}")

    def _construct_new_frame(self, name: str) -> bool:
        """Open a frame for a LINE name; return False when the name opens none."""
        if len(name) < 2 or name[1] != '_':
            if not self.config.honour_mad_structure:
                return False
            frame_name, kind = name, FrameKind.SEQUENCE
        else:
            kind = FrameKind.from_code(name[0])
            if kind is None:
                logger.error(f"Unknown frame character: {name}")
                raise FrameCodeError(f"Unknown frame character '{name[0]}' in LINE {name}")
            frame_name = name[2:]
            if not frame_name:
                raise FrameCodeError(f"LINE {name} has a frame code but no frame name")
        frame = self._constructor.new_frame(frame_name, kind, self._z)
        self._log_frame(f"{frame.name} BEGIN")
        return True

    def _end_frame(self, name: str, opened: bool):
        if not opened:
            return
        frame = self._constructor.end_frame(self._z)
        self._log_frame(f"{frame.name} END")

    def _handle_line(self, name: str):
        if self._line_stack and name == self._line_stack[-1][0]:
            _, opened = self._line_stack.pop()
            self._end_frame(name, opened)
        else:
            opened = self._construct_new_frame(name)
            self._line_stack.append((name, opened))

    # Construction
    def _place(self, component):
        component.set_component_lattice_position(self._z)
        self._constructor.append_component(component)
        self._z += component.get_length()

    def _build(self, table: DataTable):
        for i in range(table.length()):
            keyword = table.get_s("KEYWORD", i)
            length = table.get_d("L", i)

            if length == 0 and keyword in self.config.ignore_zero_length:
                logger.warning(f"Ignoring zero length {keyword}: {table.get_s('NAME', i)}")
                continue
            self.type_overrides(table, i)

            if keyword == ElementKeyword.LINE:
                if not self.config.flat_lattice:
                    self._handle_line(table.get_s("NAME", i))
                continue
            if keyword == ElementKeyword.SROT:
                self._place(SRot(name=table.get_s("NAME", i), angle=table.get_d("ANGLE", i)))
                continue

            components = TypeFactory.get_instance(table, self._brho, i)

            if self.config.include_sr and keyword in (ElementKeyword.SBEND, ElementKeyword.RBEND) and length != 0:
                momentum = self._momentum - sr_energy_loss(table.get_d("ANGLE", i) / length, length, self._momentum)
                if not momentum > 0:
                    raise ContractViolation(f"Synchrotron radiation in {table.get_s('NAME', i)} "
                                            f"drives the momentum to {momentum} GeV/c")
                self._momentum = momentum
                self._brho = self._rigidity(self._momentum)

            for component in components:
                self._place(component)

    def _model_name(self, table: DataTable) -> str:
        for key in ("SEQUENCE", "NAME"):
            if table.headers.get(key):
                return str(table.headers[key])
        if isinstance(self._source, (str, Path)):
            return Path(self._source).stem
        return "model"

    def _report(self):
        if not self.config.log_statistics:
            return
        self._constructor.report_statistics()
        logger.info(f"ARC distance from MAD file: {self._z}")
        if self.config.include_sr:
            logger.info(f"final momentum = {self._momentum} GeV")

    def _handoff(self) -> AcceleratorModel:
        self._last_open_frames = self._constructor.open_frames
        model = self._constructor.get_model()
        self._constructor = None
        self._line_stack = []
        return model

    def construct_model(self) -> AcceleratorModel:
        """
        Build a model from the whole source and hand it over.

        Any model in progress from append_model is discarded. The arc length
        starts from zero.

        Returns:
            The constructed model

        Raises:
            LatticeSourceError: If no readable source was given
            TableFormatError: If the source is malformed
            FrameCodeError: If a LINE name carries an unknown frame code
        """
        if self._source is None:
            raise LatticeSourceError("No lattice source given")
        table = self._load_table(self._source)
        if self._constructor is not None:
            logger.warning("Discarding the model in progress")
        self._constructor = AcceleratorModelConstructor(self._model_name(table))
        self._line_stack = []
        self._z = 0.0
        self._build(table)
        self._report()
        return self._handoff()

    def append_model(self, source, momentum: float):
        """
        Continue the model in progress with the rows of another source.

        The momentum is reset to the given value; the arc length and the open
        frames carry over. Call get_model() to take the result.
        """
        table = self._load_table(self._check_source(source))
        if self._constructor is None:
            self._constructor = AcceleratorModelConstructor(self._model_name(table))
            self._line_stack = []
            self._z = 0.0
        self._momentum = validate_positive_momentum(momentum)
        self._brho = self._rigidity(self._momentum)
        self._build(table)

    def get_model(self) -> AcceleratorModel:
        """Hand over the model in progress."""
        if self._constructor is None:
            raise ContractViolation("No model in progress; call append_model() first")
        self._report()
        return self._handoff()

    def get_model_constructor(self) -> AcceleratorModelConstructor:
        """The constructor of the model in progress."""
        if self._constructor is None:
            raise ContractViolation("No model in progress; call append_model() first")
        return self._constructor
