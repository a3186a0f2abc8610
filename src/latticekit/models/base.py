"""
Base Pydantic models for the latticekit accelerator modelling framework.

This module provides foundational Pydantic model classes with physics-specific
configurations and utilities for type validation and serialization.
"""

from pydantic import BaseModel, ConfigDict
from typing import Dict, Any
import numpy as np


class PhysicsBaseModel(BaseModel):
    """
    Base Pydantic model for lattice components and builder options.

    Assignments are validated like construction, so a component strength or
    a builder option cannot be set to a value its field rejects. Unknown
    fields are errors, which catches misspelt option names in YAML files.

    Example:
        >>> class Aperture(PhysicsBaseModel):
        ...     half_width: float = Field(gt=0, description="Half width (m)")

        >>> aperture = Aperture(half_width=0.02)
        >>> aperture.half_width = -1.0
        Traceback (most recent call last):
        ...
        pydantic_core._pydantic_core.ValidationError: ...
    """

    model_config = ConfigDict(
        # Validation settings
        validate_assignment=True,        # Validate on attribute assignment
        extra="forbid",                  # Reject unknown fields for safety
        use_enum_values=True,            # Use enum values in serialization

        # Type handling
        arbitrary_types_allowed=True,    # Allow numpy arrays and custom types
    )

    def to_yaml_dict(self) -> Dict[str, Any]:
        """
        Convert to YAML-compatible dictionary.

        Sets are emitted as sorted lists and numpy scalars/arrays as plain
        Python numbers/lists so the result can be passed to ``yaml.safe_dump``.

        Returns:
            Dictionary suitable for YAML serialization
        """
        data = self.model_dump()

        def convert_numpy_types(obj):
            if isinstance(obj, np.ndarray):
                return obj.tolist()
            elif isinstance(obj, (np.float64, np.float32)):
                return float(obj)
            elif isinstance(obj, (np.int64, np.int32)):
                return int(obj)
            elif isinstance(obj, (set, frozenset)):
                return sorted(convert_numpy_types(item) for item in obj)
            elif isinstance(obj, dict):
                return {k: convert_numpy_types(v) for k, v in obj.items()}
            elif isinstance(obj, (list, tuple)):
                return [convert_numpy_types(item) for item in obj]
            return obj

        return convert_numpy_types(data)
