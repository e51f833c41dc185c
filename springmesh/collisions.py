"""
Node-node collision detection and penetration resolution.
"""

from typing import List, Optional
import numpy as np
import logging
from .primitives import Node
from .errors import ConfigurationError, DegenerateGeometryError

logger = logging.getLogger(__name__)


class CollisionInfo:
    """Information about one resolved node-node overlap."""

    def __init__(self, index1: int, index2: int, displacement: np.ndarray,
                 distance: float, penetration: float):
        """
        Initialize collision information.

        Args:
            index1: Index of the first node (lower index of the pair)
            index2: Index of the second node
            displacement: position(index1) - position(index2) before correction
            distance: Length of the displacement
            penetration: Overlap depth, 2 * radius - distance
        """
        self.index1 = index1
        self.index2 = index2
        self.displacement = displacement
        self.distance = distance
        self.penetration = penetration

    def __repr__(self) -> str:
        return (f"CollisionInfo({self.index1}, {self.index2}, "
                f"penetration={self.penetration:.4f})")


class CollisionResolver:
    """All-pairs collision pass treating nodes as equal-radius circles."""

    def __init__(self, radius: float, min_distance: float = 1e-9, strict: bool = False):
        """
        Initialize collision resolver.

        Args:
            radius: Radius of every node
            min_distance: Pairs closer than this have no defined separation axis
            strict: Raise for coincident pairs instead of skipping them

        Raises:
            ConfigurationError: If radius is negative or min_distance is not positive
        """
        if radius < 0:
            raise ConfigurationError("Node radius must be non-negative")
        if not min_distance > 0:
            raise ConfigurationError("Minimum distance must be positive")

        self.radius = float(radius)
        self.min_distance = float(min_distance)
        self.strict = strict

    def check_pair(self, nodes: List[Node], i: int, j: int) -> Optional[CollisionInfo]:
        """Return overlap information for nodes i and j, or None if they are apart."""
        displacement = nodes[i].position - nodes[j].position
        distance = float(np.linalg.norm(displacement))
        contact_distance = 2 * self.radius

        if distance >= contact_distance:
            return None

        if distance == 0 or distance < self.min_distance:
            if self.strict:
                raise DegenerateGeometryError(i, j, distance)
            logger.debug(f"Skipping collision ({i}, {j}): nodes coincide")
            return None

        return CollisionInfo(i, j, displacement, distance, contact_distance - distance)

    def resolve_pair(self, nodes: List[Node], collision: CollisionInfo) -> None:
        """Push both nodes apart along their displacement, zeroing their velocities."""
        correction = collision.displacement * collision.penetration / collision.distance
        nodes[collision.index1].resolve_penetration(correction[0], correction[1])
        nodes[collision.index2].resolve_penetration(-correction[0], -correction[1])

    def resolve_collisions(self, nodes: List[Node]) -> List[CollisionInfo]:
        """
        Scan every unordered pair in lexicographic order and resolve overlaps.

        Corrections are applied as soon as a pair is found, so later pairs
        see already-corrected positions. For three or more mutually
        overlapping nodes the result depends on index order.

        Returns:
            Collisions resolved during this pass, in resolution order
        """
        collisions = []
        count = len(nodes)
        for i in range(count):
            for j in range(i + 1, count):
                collision = self.check_pair(nodes, i, j)
                if collision:
                    self.resolve_pair(nodes, collision)
                    collisions.append(collision)
        return collisions
