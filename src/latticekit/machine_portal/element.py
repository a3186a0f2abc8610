# Define the base class for accelerator components built by the lattice constructor.
# Every component has a name, a type tag and a length; the lattice position is
# assigned once the component is appended to a model.
# Current component types:
## Drift : Field-free space
## SectorBend : Dipole bending magnet with optional quadrupole/sextupole terms and pole faces
## Quadrupole, SkewQuadrupole : Quadrupole magnets
## Sextupole, SkewSextupole : Sextupole magnets
## Octupole : Octupole magnet
## RectMultipole : Generic multipole magnet
## XCor, YCor : Horizontal and vertical correctors
## Solenoid : Longitudinal field magnet
## SWRFStructure : Standing wave RF structure
## TransverseRFStructure : Transverse deflecting (crab) RF structure
## CrabMarker : Marker carrying phase advance annotations
## Collimator : Length-only absorber
## HollowElectronLens : Hollow electron lens
## BPM, RMSProfileMonitor : Diagnostics
## Marker : Zero-length marker
## SRot : Rotation about the beam axis

from pydantic import Field, field_validator, model_validator
from typing import Optional, List, Dict, Any
from ..models.base import PhysicsBaseModel
from ..models.validators import validate_element_name


class MultipoleField(PhysicsBaseModel):
    """Normal and skew multipole field components.

    Component ``n`` is the field coefficient of order ``n`` in T/m^n
    (n = 0 dipole, 1 quadrupole, 2 sextupole, ...).
    """

    normal: List[float] = Field(default_factory=list, description="Normal components (T/m^n)")
    skew: List[float] = Field(default_factory=list, description="Skew components (T/m^n)")

    def _components(self, skew: bool) -> List[float]:
        return self.skew if skew else self.normal

    def set_component(self, n: int, value: float, skew: bool = False):
        """Set the component of order n, growing the coefficient list if needed."""
        if n < 0:
            raise ValueError(f"Multipole order must be non-negative, got {n}")
        components = self._components(skew)
        while len(components) <= n:
            components.append(0.0)
        components[n] = value

    def get_component(self, n: int, skew: bool = False) -> float:
        """Get the component of order n (zero if never set)."""
        components = self._components(skew)
        return components[n] if n < len(components) else 0.0

    def highest_order(self) -> int:
        """Highest order with a non-zero coefficient, or -1 for an empty field."""
        orders = [n for n, b in enumerate(self.normal) if b != 0]
        orders += [n for n, b in enumerate(self.skew) if b != 0]
        return max(orders) if orders else -1

    def is_null(self) -> bool:
        return self.highest_order() < 0


class Element(PhysicsBaseModel):
    """Base class for accelerator components.

    Subclasses fix ``type`` through their field default; the base validator
    rejects any other value so that the tag always matches the class.
    """

    name: str = Field(..., min_length=1, description="Element name")
    type: str = Field(..., min_length=1, description="Element type")
    length: float = Field(default=0.0, description="Element length in meters, negative for MAD back-drifts")
    position: Optional[float] = Field(default=None, description="Lattice position (m) of the entrance")

    @field_validator('name')
    @classmethod
    def validate_name_format(cls, v):
        """Validate element name follows table naming conventions."""
        return validate_element_name(v)

    @model_validator(mode='after')
    def validate_type_matches_class(self):
        """Validate the type tag for concrete component classes."""
        type_field = type(self).model_fields['type']
        if not type_field.is_required() and self.type != type_field.default:
            raise ValueError(f"Type of a {type(self).__name__} element must be '{type_field.default}'.")
        return self

    def get_length(self) -> float:
        """Get the length of the element."""
        return self.length

    def get_type(self) -> str:
        """Get the type of the element."""
        return self.type

    def get_name(self) -> str:
        """Get the name of the element."""
        return self.name

    def set_component_lattice_position(self, position: float):
        """Set the arc-length position of the element entrance."""
        self.position = position

    def get_component_lattice_position(self) -> Optional[float]:
        """Get the arc-length position, None until the element is placed."""
        return self.position

    def check_consistency(self) -> bool:
        """Check if the element is consistent."""
        return self._check_element_specific_consistency()

    def _check_element_specific_consistency(self) -> bool:
        return True  # To be implemented by subclasses

    def __str__(self):
        """String representation of the element."""
        return f"{type(self).__name__}(name={self.name}, length={self.length}, position={self.position})"

    def __repr__(self):
        return self.__str__()

    # Convert element to yaml dictionary format.
    def to_yaml_dict(self) -> Dict[str, Any]:
        """Convert the element to a dictionary in the format:
        element_type:
              name: element_name
              length: number
              parameter_name: parameter_value
        """
        element_dict = super().to_yaml_dict()
        element_dict.pop('type')
        return {self.type: element_dict}
