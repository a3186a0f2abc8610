# Implementation of the drift element for the latticekit machine portal.
from .element import Element
from pydantic import Field, field_validator


class Drift(Element):
    """Field-free space. DRIFT rows with L = 0 produce no drift at all, so
    a constructed drift always has a length; a negative one is a MAD
    back-drift that steps the arc length back."""

    type: str = Field(default='Drift', description="Element type (always 'Drift')")
    length: float = Field(..., description="Drift length (m)")

    @field_validator('length')
    @classmethod
    def validate_length(cls, v):
        if v == 0:
            raise ValueError("Length of a drift element must be non-zero.")
        return v
