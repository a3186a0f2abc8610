# Implementation of multipole magnets for the latticekit machine portal.
from .element import Element, MultipoleField
from pydantic import Field
from typing import ClassVar


class MultipoleMagnet(Element):
    """Base class for magnets whose field is a single multipole component.

    Subclasses set ``order`` and ``skew`` to select which component the
    ``strength`` refers to.
    """
    field: MultipoleField = Field(default_factory=MultipoleField, description="Multipole field")

    order: ClassVar[int] = 0
    skew: ClassVar[bool] = False

    @classmethod
    def with_strength(cls, name: str, length: float, strength: float):
        """Construct the magnet with its main component set to strength (T/m^n)."""
        magnet = cls(name=name, length=length)
        magnet.field.set_component(cls.order, strength, skew=cls.skew)
        return magnet

    @property
    def strength(self) -> float:
        return self.field.get_component(self.order, skew=self.skew)

    def set_strength(self, strength: float):
        self.field.set_component(self.order, strength, skew=self.skew)


class RectMultipole(Element):
    """Generic multipole magnet with rectangular geometry.

    The field is built from an arbitrary set of normal components. Zero length
    is allowed and denotes a thin multipole.
    """
    type: str = Field(default='RectMultipole', description="Element type")
    field: MultipoleField = Field(default_factory=MultipoleField, description="Multipole field")

    @classmethod
    def with_main_field(cls, name: str, length: float, n: int, bn: float) -> 'RectMultipole':
        """Construct with a single component of order n, as a starting point for scaling."""
        multipole = cls(name=name, length=length)
        multipole.field.set_component(n, bn)
        return multipole

    def get_field(self) -> MultipoleField:
        return self.field
