"""
Point-mass nodes for the spring-mesh simulator.
"""

from typing import List, Tuple, Union
import numpy as np
import logging

logger = logging.getLogger(__name__)


class Node:
    """A unit point mass with a reference (anchor) position."""

    def __init__(self, position: Union[List[float], np.ndarray],
                 gravity: float = 0.0):
        """
        Initialize a node at rest.

        Args:
            position: Initial position [x, y], also used as reference position
            gravity: Initial pending acceleration along y

        Raises:
            ValueError: If position is not a finite 2D coordinate
        """
        position = np.array(position, dtype=np.float64)
        if position.shape != (2,) or not np.all(np.isfinite(position)):
            raise ValueError(f"Node position must be a finite [x, y] pair, got {position}")

        self.position = position
        self.reference_position = position.copy()
        self.velocity = np.zeros(2, dtype=np.float64)
        self.pending_acceleration = np.array([0.0, gravity], dtype=np.float64)

    def __repr__(self) -> str:
        return (f"Node(position=({self.position[0]:.3f}, {self.position[1]:.3f}), "
                f"velocity=({self.velocity[0]:.3f}, {self.velocity[1]:.3f}))")

    def apply_impulse_like_force(self, ax: float, ay: float) -> None:
        """Accumulate an acceleration for this step (mass is 1, so force = acceleration)."""
        self.pending_acceleration[0] += ax
        self.pending_acceleration[1] += ay

    def integrate(self, dt: float, damping: float, gravity: float,
                  width: float, height: float, radius: float) -> None:
        """
        Advance the node by one explicit step and confine it to the walls.

        The damping factor scales only this step's velocity increment.
        After the wall clamp the pending acceleration is reset to gravity,
        so it is already present when the next spring pass starts.

        Args:
            dt: Time step
            damping: Multiplier applied to the velocity increment
            gravity: Acceleration along +y for the next step
            width: Simulation area width
            height: Simulation area height
            radius: Node radius, walls sit at radius and dimension - radius
        """
        self.velocity += self.pending_acceleration * damping * dt
        self.position += self.velocity * dt

        self.position[0] = max(radius, min(self.position[0], width - radius))
        self.position[1] = max(radius, min(self.position[1], height - radius))

        self.pending_acceleration[0] = 0.0
        self.pending_acceleration[1] = gravity

    def resolve_penetration(self, dx: float, dy: float) -> None:
        """Hard positional correction: stop the node and shift it by (dx, dy)."""
        self.velocity.fill(0.0)
        self.position[0] += dx
        self.position[1] += dy

    def translate_to(self, base_offset: Union[Tuple[float, float], np.ndarray]) -> None:
        """Place the node at its reference position shifted by base_offset."""
        self.position = self.reference_position + np.asarray(base_offset, dtype=np.float64)

    def commit_reference(self) -> None:
        """Freeze the current position as the new reference position."""
        self.reference_position = self.position.copy()

    def reset_to_reference(self, gravity: float = 0.0) -> None:
        """Return to the reference position and discard all motion."""
        self.position = self.reference_position.copy()
        self.velocity.fill(0.0)
        self.pending_acceleration[0] = 0.0
        self.pending_acceleration[1] = gravity

    def get_speed(self) -> float:
        return float(np.linalg.norm(self.velocity))

    def get_kinetic_energy(self) -> float:
        """Calculate kinetic energy: 0.5 * v^2 for a unit mass."""
        return 0.5 * float(np.dot(self.velocity, self.velocity))
