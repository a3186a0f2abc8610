"""
Custom validators for physics-specific constraints in latticekit.

This module provides specialized validation functions for accelerator physics
parameters, ensuring physical correctness of values read from lattice tables.
"""

from typing import Optional
import math


def validate_element_name(name: str) -> str:
    """
    Validate an element name read from a lattice table.

    MAD names may contain dots, dollar signs and other punctuation, so only
    emptiness and embedded whitespace are rejected.

    Args:
        name: Element name

    Returns:
        Validated name

    Raises:
        ValueError: If name is empty or contains whitespace
    """
    if not name:
        raise ValueError("Element name cannot be empty")
    if any(c.isspace() for c in name):
        raise ValueError(f"Element name '{name}' contains whitespace")
    return name


def validate_finite(value: Optional[float], what: str = "value") -> Optional[float]:
    """
    Validate that a numeric parameter is finite.

    Args:
        value: Number to check (can be None)
        what: Description used in the error message

    Returns:
        Validated value

    Raises:
        ValueError: If value is NaN or infinite
    """
    if value is not None and not math.isfinite(value):
        raise ValueError(f"{what} must be finite, got {value}")
    return value


def validate_positive_momentum(momentum: float) -> float:
    """
    Validate a reference momentum.

    Args:
        momentum: Momentum in GeV/c

    Returns:
        Validated momentum

    Raises:
        ValueError: If momentum is not strictly positive
    """
    if not momentum > 0:
        raise ValueError(f"Reference momentum must be positive, got {momentum} GeV/c")
    return momentum


def validate_bending_angle(angle: float) -> float:
    """
    Validate bending magnet angle.

    Args:
        angle: Bending angle in radians

    Returns:
        Validated angle

    Raises:
        ValueError: If angle seems unreasonably large
    """
    if abs(angle) > 4 * math.pi:  # More than 4π radians (2 full circles)
        raise ValueError(f"Bending angle {angle} rad seems unreasonably large (>{4*math.pi:.2f} rad)")
    return angle


