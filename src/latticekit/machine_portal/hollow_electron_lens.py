# Implementation of the hollow electron lens for the latticekit machine portal.
from .element import Element
from pydantic import Field


class HollowElectronLens(Element):
    """Hollow electron lens.

    All parameters default to zero; a lens built from a lattice table is a
    placeholder until its operating point is configured.
    """
    type: str = Field(default='HollowElectronLens', description="Element type")
    current: float = Field(0.0, description="Electron beam current (A)")
    electron_beta: float = Field(0.0, ge=0, description="Electron velocity / c")
    rigidity: float = Field(0.0, description="Proton beam rigidity (T.m)")
    rmin: float = Field(0.0, ge=0, description="Inner radius (m)")
    rmax: float = Field(0.0, ge=0, description="Outer radius (m)")
