# Implementation of the sextupole elements for the latticekit machine portal.
from .multipole import MultipoleMagnet
from pydantic import Field
from typing import ClassVar


class Sextupole(MultipoleMagnet):
    """Sextupole element with Pydantic validation.

    A sextupole magnet provides nonlinear focusing forces for chromaticity correction
    and nonlinear dynamics control in beam optics. Strength in T/m^2.
    """
    type: str = Field(default='Sextupole', description="Element type")
    order: ClassVar[int] = 2


class SkewSextupole(MultipoleMagnet):
    """Skew sextupole, rotated by 30 degrees about the beam axis."""
    type: str = Field(default='SkewSextupole', description="Element type")
    order: ClassVar[int] = 2
    skew: ClassVar[bool] = True
