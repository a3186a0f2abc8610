"""
latticekit Pydantic Models Package

This package contains the Pydantic base model and physics validators shared by
components, particle descriptions and builder configuration.
"""

from .base import PhysicsBaseModel
from .validators import (
    validate_element_name, validate_finite, validate_positive_momentum,
    validate_bending_angle
)

__all__ = [
    'PhysicsBaseModel',
    'validate_element_name',
    'validate_finite',
    'validate_positive_momentum',
    'validate_bending_angle',
]
