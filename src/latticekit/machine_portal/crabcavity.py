# Implementation of the crab cavity elements for the latticekit machine portal.
from .element import Element
from pydantic import Field


class TransverseRFStructure(Element):
    """Transverse deflecting RF structure.

    Only the geometry is modelled; frequency and deflecting field default to
    zero until a dedicated crab cavity model sets them.
    """
    type: str = Field(default='TransverseRFStructure', description="Element type")
    frequency: float = Field(0.0, ge=0, description="RF frequency (Hz)")
    amplitude: float = Field(0.0, description="Peak deflecting field (V/m)")
    phase: float = Field(0.0, description="RF phase (radians)")


class CrabMarker(Element):
    """Zero-field marker carrying the phase advances at a crab cavity location.

    Used to annotate the lattice so that crab-crossing studies can look up the
    betatron phase between cavities.
    """
    type: str = Field(default='CrabMarker', description="Element type")
    mux: float = Field(0.0, description="Horizontal phase advance")
    muy: float = Field(0.0, description="Vertical phase advance")
