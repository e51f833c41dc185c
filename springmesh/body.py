"""
Bodies: named groups of nodes generated and placed as a unit.
"""

from enum import Enum
from typing import List, Sequence, Tuple, Union
import numpy as np
import logging
from .primitives import Node
from .errors import PlacementError

logger = logging.getLogger(__name__)


class PlacementState(Enum):
    FREE = "free"
    DRAGGING = "dragging"
    COMMITTED = "committed"
    DISCARDED = "discarded"


class Body:
    """A deformable mesh owning a set of node indices in a world's node arena."""

    def __init__(self, name: str, node_indices: Sequence[int], nodes: List[Node]):
        """
        Initialize a body over already-created nodes.

        Bounding offsets are taken from the reference positions and always
        include the body origin.

        Args:
            name: Body name
            node_indices: Indices of the owned nodes in the arena
            nodes: The node arena
        """
        self.name = name
        self._node_indices = tuple(int(i) for i in node_indices)
        self._nodes = nodes
        self.state = PlacementState.FREE

        self.x_bounds = (0.0, 0.0)
        self.y_bounds = (0.0, 0.0)
        for index in self._node_indices:
            x, y = nodes[index].reference_position
            self.x_bounds = (min(self.x_bounds[0], x), max(self.x_bounds[1], x))
            self.y_bounds = (min(self.y_bounds[0], y), max(self.y_bounds[1], y))

    def __repr__(self) -> str:
        return f"Body({self.name!r}, nodes={len(self._node_indices)}, state={self.state.value})"

    def __len__(self) -> int:
        return len(self._node_indices)

    @property
    def node_indices(self) -> Tuple[int, ...]:
        return self._node_indices

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """Bounding offsets as (min_x, max_x, min_y, max_y)."""
        return self.x_bounds + self.y_bounds

    def clamp_offset(self, offset: Union[Tuple[float, float], np.ndarray],
                     width: float, height: float) -> np.ndarray:
        """
        Clamp a placement offset so the bounding box stays inside [0, width] x [0, height].

        If the body is larger than the area, the far edge wins.
        """
        x, y = float(offset[0]), float(offset[1])

        x = max(0.0, x + self.x_bounds[0]) - self.x_bounds[0]
        x = min(width, x + self.x_bounds[1]) - self.x_bounds[1]

        y = max(0.0, y + self.y_bounds[0]) - self.y_bounds[0]
        y = min(height, y + self.y_bounds[1]) - self.y_bounds[1]

        return np.array([x, y], dtype=np.float64)

    def _require_placeable(self) -> None:
        if self.state is PlacementState.DISCARDED:
            raise PlacementError(f"Body {self.name!r} was discarded by a world clear")
        if self.state is PlacementState.COMMITTED:
            raise PlacementError(f"Body {self.name!r} is already committed")

    def translate_to(self, offset: Union[Tuple[float, float], np.ndarray]) -> None:
        """
        Move every node to its reference position plus offset.

        Raises:
            PlacementError: If the body has already been committed or was discarded
        """
        self._require_placeable()

        for index in self._node_indices:
            self._nodes[index].translate_to(offset)
        self.state = PlacementState.DRAGGING

    def place_at(self, pointer: Union[Tuple[float, float], np.ndarray],
                 width: float, height: float) -> np.ndarray:
        """Clamp a pointer position to the area and move the body there."""
        offset = self.clamp_offset(pointer, width, height)
        self.translate_to(offset)
        return offset

    def commit(self) -> None:
        """Freeze the current placement as every node's reference position."""
        self._require_placeable()

        for index in self._node_indices:
            self._nodes[index].commit_reference()
        self.state = PlacementState.COMMITTED
        logger.debug(f"Committed body {self.name!r}")

    def detach(self) -> None:
        """Drop the link to the node arena; the body can no longer be placed."""
        self._nodes = None
        self.state = PlacementState.DISCARDED

    def positions(self) -> np.ndarray:
        """Current positions of the owned nodes, in ownership order."""
        if self.state is PlacementState.DISCARDED:
            raise PlacementError(f"Body {self.name!r} was discarded by a world clear")
        if not self._node_indices:
            return np.zeros((0, 2))
        return np.array([self._nodes[i].position for i in self._node_indices])
