# Implementation of the octupole element for the latticekit machine portal.
from .multipole import MultipoleMagnet
from pydantic import Field
from typing import ClassVar


class Octupole(MultipoleMagnet):
    """Octupole element with Pydantic validation.

    An octupole magnet provides higher-order nonlinear corrections for
    advanced beam dynamics control and Landau damping. Strength in T/m^3.
    """
    type: str = Field(default='Octupole', description="Element type")
    order: ClassVar[int] = 3
