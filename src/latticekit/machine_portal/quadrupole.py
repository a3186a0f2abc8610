# Implementation of the quadrupole elements for the latticekit machine portal.
from .multipole import MultipoleMagnet
from pydantic import Field
from typing import ClassVar
import warnings


class Quadrupole(MultipoleMagnet):
    """Quadrupole element with Pydantic validation.

    A quadrupole magnet provides focusing/defocusing forces in one transverse
    direction and opposite forces in the perpendicular direction. The strength
    is the field gradient in T/m.
    """
    type: str = Field(default='Quadrupole', description="Element type")
    order: ClassVar[int] = 1

    def _check_element_specific_consistency(self) -> bool:
        """Quadrupole-specific consistency checks.

        A thick quadrupole needs a non-zero length for the gradient to be
        meaningful. Very large gradients only produce a warning.

        Returns:
            bool: True if consistent, False otherwise
        """
        if self.length == 0:
            return False
        if abs(self.strength) > 1000.0:  # T/m, well above superconducting magnets
            warnings.warn(f"Quadrupole {self.name} gradient {self.strength} T/m is very high")
        return True


class SkewQuadrupole(MultipoleMagnet):
    """Skew quadrupole, rotated by 45 degrees about the beam axis."""
    type: str = Field(default='SkewQuadrupole', description="Element type")
    order: ClassVar[int] = 1
    skew: ClassVar[bool] = True
