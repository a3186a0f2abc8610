# Implementation of the orbit corrector elements for the latticekit machine portal.
from .element import Element
from pydantic import Field


class XCor(Element):
    """Horizontal orbit corrector.

    The field is the vertical dipole field (T) that deflects the beam
    horizontally. A zero field is allowed and is the usual state on
    construction; the strength is set later by orbit correction.
    """
    type: str = Field(default='XCor', description="Element type")
    field_strength: float = Field(0.0, description="Dipole field (T)")

    def set_field_strength(self, b: float):
        self.field_strength = b

    def get_field_strength(self) -> float:
        return self.field_strength


class YCor(Element):
    """Vertical orbit corrector, field (T) deflecting the beam vertically."""
    type: str = Field(default='YCor', description="Element type")
    field_strength: float = Field(0.0, description="Dipole field (T)")

    def set_field_strength(self, b: float):
        self.field_strength = b

    def get_field_strength(self) -> float:
        return self.field_strength
