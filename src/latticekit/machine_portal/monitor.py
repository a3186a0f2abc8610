# Implementation of the diagnostic elements for the latticekit machine portal.
from .element import Element
from pydantic import Field


class BPM(Element):
    """Beam position monitor.

    A diagnostic element used to measure the beam centroid. Typically has
    very small but non-zero length.
    """
    type: str = Field(default='BPM', description="Element type")


class RMSProfileMonitor(Element):
    """Profile monitor (wire scanner) measuring the RMS beam size."""
    type: str = Field(default='RMSProfileMonitor', description="Element type")
