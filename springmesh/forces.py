"""
Force generators for the spring-mesh simulation.
"""

from typing import List, Tuple
import numbers
import numpy as np
import logging
from .primitives import Node
from .errors import ConfigurationError, DegenerateGeometryError

logger = logging.getLogger(__name__)

MIN_DISTANCE = 1e-9


class ForceGenerator:
    """Base class for force generators."""

    def apply_force(self, nodes: List[Node], min_distance: float = MIN_DISTANCE,
                    strict: bool = False) -> None:
        """Accumulate accelerations on nodes."""
        raise NotImplementedError


class Spring(ForceGenerator):
    """Linear spring between two nodes: f = (|d| - rest_length) * stiffness."""

    def __init__(self, node1: int, node2: int, rest_length: float, stiffness: float):
        """
        Initialize a spring between two node indices.

        Index bounds are checked by the world that owns the nodes; the
        spring itself only rejects self-loops and negative parameters.

        Args:
            node1: Index of the first endpoint
            node2: Index of the second endpoint
            rest_length: Length at which the spring exerts no force
            stiffness: Spring constant

        Raises:
            IndexError: If an index is not a non-negative integer or both endpoints are equal
            ConfigurationError: If rest length or stiffness is negative
        """
        for index in (node1, node2):
            if isinstance(index, bool) or not isinstance(index, numbers.Integral):
                raise IndexError(f"Spring endpoints must be integers, got {index!r}")
        node1, node2 = int(node1), int(node2)
        if node1 < 0 or node2 < 0:
            raise IndexError(f"Spring endpoints must be non-negative, got ({node1}, {node2})")
        if node1 == node2:
            raise IndexError(f"Spring endpoints must be distinct, got ({node1}, {node2})")
        if not rest_length >= 0:
            raise ConfigurationError(f"Rest length must be non-negative, got {rest_length}")
        if not stiffness >= 0:
            raise ConfigurationError(f"Stiffness must be non-negative, got {stiffness}")

        self._node1 = node1
        self._node2 = node2
        self._rest_length = float(rest_length)
        self._stiffness = float(stiffness)

    @property
    def node1(self) -> int:
        return self._node1

    @property
    def node2(self) -> int:
        return self._node2

    @property
    def rest_length(self) -> float:
        return self._rest_length

    @property
    def stiffness(self) -> float:
        return self._stiffness

    def __repr__(self) -> str:
        return (f"Spring({self._node1}, {self._node2}, rest_length={self._rest_length:.3f}, "
                f"stiffness={self._stiffness:.3f})")

    def length(self, nodes: List[Node]) -> float:
        """Current distance between the endpoints."""
        return float(np.linalg.norm(nodes[self._node1].position - nodes[self._node2].position))

    def extension(self, nodes: List[Node]) -> float:
        """Current length minus rest length; positive when stretched."""
        return self.length(nodes) - self._rest_length

    def force_on_endpoints(self, nodes: List[Node], min_distance: float = MIN_DISTANCE,
                           strict: bool = False) -> Tuple[np.ndarray, np.ndarray]:
        """
        Compute the accelerations this spring exerts on its endpoints.

        Args:
            nodes: Node arena the endpoint indices refer to
            min_distance: Below this endpoint separation the direction is undefined
            strict: Raise instead of skipping coincident endpoints

        Returns:
            Tuple of (acceleration on node1, acceleration on node2)

        Raises:
            DegenerateGeometryError: If strict and the endpoints coincide
        """
        displacement = nodes[self._node1].position - nodes[self._node2].position
        distance = np.linalg.norm(displacement)

        if distance == 0 or distance < min_distance:
            if strict:
                raise DegenerateGeometryError(self._node1, self._node2, float(distance))
            logger.debug(f"Skipping spring ({self._node1}, {self._node2}): endpoints coincide")
            return np.zeros(2), np.zeros(2)

        force = (distance - self._rest_length) * self._stiffness
        pull = displacement * force / distance
        return -pull, pull

    def apply_force(self, nodes: List[Node], min_distance: float = MIN_DISTANCE,
                    strict: bool = False) -> None:
        """Apply equal and opposite accelerations to both endpoints."""
        accel1, accel2 = self.force_on_endpoints(nodes, min_distance, strict)
        nodes[self._node1].apply_impulse_like_force(accel1[0], accel1[1])
        nodes[self._node2].apply_impulse_like_force(accel2[0], accel2[1])
