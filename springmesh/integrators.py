"""
Numerical integration schemes for the spring-mesh simulation.
"""

from typing import List
from .primitives import Node


class Integrator:
    """Base class for numerical integrators."""

    def integrate(self, nodes: List[Node], dt: float, damping: float, gravity: float,
                  width: float, height: float, radius: float) -> None:
        """
        Integrate all nodes forward by time step dt.

        Args:
            nodes: Nodes to integrate, with this step's accelerations accumulated
            dt: Time step
            damping: Multiplier applied to each velocity increment
            gravity: Acceleration along +y seeded for the next step
            width: Simulation area width
            height: Simulation area height
            radius: Node radius used for the wall clamp
        """
        raise NotImplementedError


class DampedEulerIntegrator(Integrator):
    """Explicit Euler with a damped velocity increment and wall clamping."""

    def integrate(self, nodes: List[Node], dt: float, damping: float, gravity: float,
                  width: float, height: float, radius: float) -> None:
        """Velocity first, then position, then clamp, then reseed gravity."""
        for node in nodes:
            node.integrate(dt, damping, gravity, width, height, radius)
