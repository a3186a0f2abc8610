# Implementation of the collimator element for the latticekit machine portal.
from .element import Element
from pydantic import Field


class Collimator(Element):
    """Collimator jaw block; only the length is known at construction."""
    type: str = Field(default='Collimator', description="Element type")
