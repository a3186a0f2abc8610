# Define the frames that group a contiguous run of components in an accelerator model.
# A frame mirrors a physical sub-assembly of the installation:
## SequenceFrame : Generic logical grouping
## SimpleMount : Simple support structure
## GirderMount : Girder carrying several magnets
## MagnetMover : Remotely movable magnet support
# Frames refer to their parent by index into the model's frame list, so the
# tree can be walked without holding references that outlive the model.

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class FrameKind(str, Enum):
    """Kinds of frame, keyed by the code letter used in LINE names."""
    SEQUENCE = "SequenceFrame"
    SIMPLE_MOUNT = "SimpleMount"
    GIRDER_MOUNT = "GirderMount"
    MAGNET_MOVER = "MagnetMover"

    @classmethod
    def from_code(cls, code: str) -> Optional['FrameKind']:
        """Return the kind for a frame code letter, or None if the letter is unknown."""
        return _FRAME_CODES.get(code)


_FRAME_CODES = {
    'F': FrameKind.SEQUENCE,
    'S': FrameKind.SIMPLE_MOUNT,
    'G': FrameKind.GIRDER_MOUNT,
    'M': FrameKind.MAGNET_MOVER,
}


@dataclass
class Frame:
    """A named scope in the model.

    ``components`` holds indices into the model's component list for the
    components appended directly to this frame; ``children`` holds indices
    into the model's frame list.
    """
    name: str
    kind: FrameKind = FrameKind.SEQUENCE
    parent: Optional[int] = None
    depth: int = 1
    start_position: float = 0.0
    end_position: Optional[float] = None
    components: list[int] = field(default_factory=list)
    children: list[int] = field(default_factory=list)

    def __post_init__(self):
        if not self.name:
            raise ValueError("Frame must have a name.")
        self.kind = FrameKind(self.kind)

    @property
    def is_closed(self) -> bool:
        return self.end_position is not None

    def get_length(self) -> float:
        """Arc length spanned by the frame, zero while it is still open."""
        if self.end_position is None:
            return 0.0
        return self.end_position - self.start_position

    def to_yaml_dict(self) -> dict:
        return {
            'name': self.name,
            'kind': self.kind.value,
            'depth': self.depth,
            'start_position': self.start_position,
            'end_position': self.end_position,
        }
