# Implementation of the solenoid element for the latticekit machine portal.
from .element import Element
from pydantic import Field


class Solenoid(Element):
    """Solenoid magnet with a uniform longitudinal field Bz (T)."""
    type: str = Field(default='Solenoid', description="Element type")
    bz: float = Field(0.0, description="Longitudinal field (T)")
