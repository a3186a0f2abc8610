# Implementation of the rotation frame element for the latticekit machine portal.
from .element import Element
from pydantic import Field, field_validator


class SRot(Element):
    """Rotation of the reference frame about the beam axis.

    Zero-length; every component that follows is seen in the rotated frame.
    """
    type: str = Field(default='SRot', description="Element type")
    angle: float = Field(0.0, description="Rotation angle about s (radians)")

    @field_validator('length')
    @classmethod
    def validate_length(cls, v):
        if v != 0:
            raise ValueError("Length of an SRot element must be zero.")
        return v
