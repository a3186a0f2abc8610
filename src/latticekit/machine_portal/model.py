# Create the accelerator model assembled by the lattice constructor.
# The model is an ordered list of components, each tagged with its arc-length
# position, plus a flat list of frames describing how the components nest.
# AcceleratorModelConstructor owns the model while it is being built and hands
# it over with get_model(); after the handoff the constructor is empty.

from .element import Element
from .frame import Frame, FrameKind
from ..exceptions import ContractViolation
from dataclasses import dataclass, field
from collections import Counter
from fnmatch import fnmatchcase
from typing import Optional, Type, TypeVar
import logging

logger = logging.getLogger(__name__)

E = TypeVar('E', bound=Element)


@dataclass
class AcceleratorModel:
    """Class representing a constructed beamline.

    ``component_frames[i]`` is the index of the frame that was active when
    component ``i`` was appended, or None for the top level.
    """
    name: str = "model"
    components: list[Element] = field(default_factory=list)
    frames: list[Frame] = field(default_factory=list)
    component_frames: list[Optional[int]] = field(default_factory=list)

    def __len__(self):
        return len(self.components)

    def __iter__(self):
        return iter(self.components)

    def __getitem__(self, index: int) -> Element:
        return self.components[index]

    @property
    def total_length(self) -> float:
        """Sum of the lengths of all components."""
        return sum(component.get_length() for component in self.components)

    def extract_typed_elements(self, element_class: Type[E], name_pattern: str | None = None) -> list[E]:
        """Select components that are instances of element_class.

        Args:
            element_class: Component class to select (subclasses match too).
            name_pattern: Optional shell-style pattern the component name must match.

        Returns:
            Matching components in beamline order.
        """
        selected = []
        for component in self.components:
            if not isinstance(component, element_class):
                continue
            if name_pattern is not None and not fnmatchcase(component.name, name_pattern):
                continue
            selected.append(component)
        return selected

    def get_frame(self, name: str) -> Frame:
        """Get the first frame with the given name."""
        for frame in self.frames:
            if frame.name == name:
                return frame
        raise KeyError(f"Frame '{name}' does not exist in the model.")

    def _frame_indices_below(self, index: int) -> list[int]:
        indices = [index]
        for child in self.frames[index].children:
            indices.extend(self._frame_indices_below(child))
        return indices

    def components_in_frame(self, name: str) -> list[Element]:
        """Components inside the named frame, including those in nested frames."""
        frame = self.get_frame(name)
        inside = set(self._frame_indices_below(self.frames.index(frame)))
        return [component for component, owner in zip(self.components, self.component_frames)
                if owner in inside]

    def statistics(self) -> dict[str, int]:
        """Number of components per component type."""
        return dict(Counter(component.get_type() for component in self.components))

    def inconsistent_components(self) -> list[Element]:
        """Components whose own consistency check fails, in beamline order."""
        return [component for component in self.components if not component.check_consistency()]

    def report_statistics(self):
        """Log the component statistics, one line per type, and warn about inconsistent components."""
        stats = self.statistics()
        logger.info(f"Model '{self.name}': {len(self.components)} components, {len(self.frames)} frames")
        for component_type in sorted(stats):
            logger.info(f"{stats[component_type]:>8} {component_type}")
        for component in self.inconsistent_components():
            logger.warning(f"Inconsistent component {component}")

    def to_yaml_dict(self) -> dict:
        """Convert the model to YAML format.
        Structure: name, frames with their extent, then the components in order."""
        result: dict = {'name': self.name}
        if self.frames:
            result['frames'] = [frame.to_yaml_dict() for frame in self.frames]
        result['components'] = [component.to_yaml_dict() for component in self.components]
        return result


class AcceleratorModelConstructor:
    """Builds an AcceleratorModel one component and one frame at a time.

    Open frames are kept as a stack of indices into the model's frame list.
    The top of the stack is the frame that receives appended components.
    """

    def __init__(self, name: str = "model"):
        self._model: Optional[AcceleratorModel] = None
        self._frame_stack: list[int] = []
        self.new_model(name)

    def new_model(self, name: str = "model"):
        """Discard any model in progress and start an empty one."""
        self._model = AcceleratorModel(name=name)
        self._frame_stack = []

    @property
    def has_model(self) -> bool:
        return self._model is not None

    def _require_model(self) -> AcceleratorModel:
        if self._model is None:
            raise ContractViolation("No model in progress; call new_model() first")
        return self._model

    def get_current_frame_depth(self) -> int:
        """Number of frames currently open."""
        return len(self._frame_stack)

    def get_current_frame(self) -> Optional[Frame]:
        """The innermost open frame, or None at top level."""
        if not self._frame_stack:
            return None
        return self._require_model().frames[self._frame_stack[-1]]

    @property
    def open_frames(self) -> list[str]:
        """Names of the open frames, outermost first."""
        if self._model is None:
            return []
        return [self._model.frames[index].name for index in self._frame_stack]

    def new_frame(self, name: str, kind: FrameKind = FrameKind.SEQUENCE, position: float = 0.0) -> Frame:
        """Open a new frame nested in the current one and make it current."""
        model = self._require_model()
        parent = self._frame_stack[-1] if self._frame_stack else None
        frame = Frame(name=name, kind=kind, parent=parent,
                      depth=len(self._frame_stack) + 1, start_position=position)
        index = len(model.frames)
        model.frames.append(frame)
        if parent is not None:
            model.frames[parent].children.append(index)
        self._frame_stack.append(index)
        return frame

    def end_frame(self, position: Optional[float] = None) -> Frame:
        """Close the current frame and return it."""
        model = self._require_model()
        if not self._frame_stack:
            raise ContractViolation("end_frame() called with no open frame")
        frame = model.frames[self._frame_stack.pop()]
        frame.end_position = frame.start_position if position is None else position
        return frame

    def append_component(self, component: Element):
        """Append a component to the current frame."""
        model = self._require_model()
        owner = self._frame_stack[-1] if self._frame_stack else None
        if owner is not None:
            model.frames[owner].components.append(len(model.components))
        model.components.append(component)
        model.component_frames.append(owner)

    def report_statistics(self):
        self._require_model().report_statistics()

    def get_model(self) -> AcceleratorModel:
        """Hand over the model; the constructor holds no model afterwards."""
        model = self._require_model()
        if self._frame_stack:
            logger.warning(f"Model handed over with {len(self._frame_stack)} unclosed frame(s): "
                           f"{', '.join(self.open_frames)}")
        self._model = None
        self._frame_stack = []
        return model
