# Implementation of the standing wave RF structure for the latticekit machine portal.
from .element import Element
from ..constants import SPEED_OF_LIGHT
from pydantic import Field


class SWRFStructure(Element):
    """Standing wave RF structure with Pydantic validation.

    The physical length is an integer number of half wavelengths at the RF
    frequency, so it is derived from ``ncells`` and ``frequency`` rather than
    given directly.
    """
    type: str = Field(default='SWRFStructure', description="Element type")
    ncells: int = Field(..., ge=0, description="Number of half-wavelength cells")
    frequency: float = Field(..., gt=0, description="RF frequency (Hz)")
    amplitude: float = Field(0.0, description="Peak accelerating field (V/m)")
    phase: float = Field(0.0, description="RF phase (radians), cosine convention")

    @classmethod
    def from_cells(cls, name: str, ncells: int, frequency: float, amplitude: float, phase: float) -> 'SWRFStructure':
        length = ncells * half_wavelength(frequency)
        return cls(name=name, length=length, ncells=ncells, frequency=frequency,
                   amplitude=amplitude, phase=phase)

    def get_voltage(self) -> float:
        """Peak voltage (V) across the structure."""
        return self.amplitude * self.length


def half_wavelength(frequency: float) -> float:
    """Half of the free-space RF wavelength (m) at frequency (Hz)."""
    return SPEED_OF_LIGHT / frequency / 2
