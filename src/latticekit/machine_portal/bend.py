# Implementation of the sector bend element for the latticekit machine portal.
from .element import Element, MultipoleField
from ..models.base import PhysicsBaseModel
from pydantic import Field
from typing import Optional


class PoleFace(PhysicsBaseModel):
    """Pole face rotation at one end of a sector bend."""

    rotation: float = Field(0.0, description="Pole face rotation angle (radians)")
    fint: float = Field(0.0, description="Fringe field integral")
    hgap: float = Field(0.0, ge=0.0, description="Half gap height (m)")


class SectorBend(Element):
    """Sector bend with Pydantic validation.

    The main field B0 is stored alongside the geometric curvature h so that
    a bend can be powered off-momentum; the quadrupole and higher terms live
    in the multipole field.
    """
    type: str = Field(default='SectorBend', description="Element type")
    h: float = Field(0.0, description="Geometric curvature (1/m)")
    field: MultipoleField = Field(default_factory=MultipoleField, description="Field (B0 = dipole)")
    entrance_pole_face: Optional[PoleFace] = Field(None, description="Entrance pole face")
    exit_pole_face: Optional[PoleFace] = Field(None, description="Exit pole face")
    tilt: float = Field(0.0, description="Rotation about the beam axis (radians)")

    @classmethod
    def from_field(cls, name: str, length: float, h: float, b0: float) -> 'SectorBend':
        """Construct a bend of curvature h and main field b0 (T)."""
        bend = cls(name=name, length=length, h=h)
        bend.field.set_component(0, b0)
        return bend

    def get_b0(self) -> float:
        return self.field.get_component(0)

    def set_b1(self, b1: float):
        """Set the quadrupole gradient (T/m)."""
        self.field.set_component(1, b1)

    def get_b1(self) -> float:
        return self.field.get_component(1)

    def set_bn(self, n: int, bn: float):
        self.field.set_component(n, bn)

    def set_pole_face_info(self, entrance: Optional[PoleFace], exit: Optional[PoleFace]):
        self.entrance_pole_face = entrance
        self.exit_pole_face = exit

    def set_tilt(self, tilt: float):
        self.tilt = tilt

    def get_angle(self) -> float:
        """Geometric bending angle h * L (radians)."""
        return self.h * self.length

    def _check_element_specific_consistency(self) -> bool:
        return self.length != 0 or self.h == 0
