"""
Exception hierarchy for latticekit.

Data errors that abort a lattice construction derive from LatticeError.
Programming-contract violations derive from AssertionError so that they are
never mistaken for recoverable data problems.
"""


class LatticeError(Exception):
    """Base exception class for lattice construction errors."""
    pass


class LatticeSourceError(LatticeError):
    """Raised when the row source cannot be opened or read."""
    pass


class TableFormatError(LatticeError):
    """Raised when the row source is malformed."""
    pass


class MissingColumnError(LatticeError, KeyError):
    """Raised when a required column is absent from the row source."""

    def __init__(self, column: str):
        super().__init__(column)
        self.column = column

    def __str__(self):
        return f"Column '{self.column}' not found in table"


class FrameCodeError(LatticeError):
    """Raised when a LINE name carries an unknown frame code character."""
    pass


class UnknownSpecies(KeyError):
    """Raised when a particle species name is not in the registry."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self):
        return f"Unknown particle species '{self.name}'"


class ContractViolation(AssertionError):
    """Raised when a caller breaks a documented invariant."""
    pass


class TrackingError(LatticeError):
    """Raised when a bunch cannot be transported through a model."""
    pass
