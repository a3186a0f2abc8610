# Implementation of the marker element for the latticekit machine portal.
from .element import Element
from pydantic import Field, field_validator


class Marker(Element):
    """Zero-length marker built from MARKER rows.

    It keeps a named location in the model so that it can be found again
    with ``AcceleratorModel.extract_typed_elements``; it takes no space and
    transports as nothing.
    """
    type: str = Field(default='Marker', description="Element type")

    @field_validator('length')
    @classmethod
    def validate_length(cls, v):
        if v != 0:
            raise ValueError("Length of a marker element must be zero.")
        return v
