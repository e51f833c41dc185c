"""
Exception types raised by the spring-mesh simulator.
"""


class SimulationError(Exception):
    """Base class for simulator errors."""


class ConfigurationError(SimulationError, ValueError):
    """Raised when simulation or generator parameters are invalid."""


class DegenerateGeometryError(SimulationError, ArithmeticError):
    """Raised when two nodes coincide and a direction cannot be computed."""

    def __init__(self, index1: int, index2: int, distance: float):
        super().__init__(
            f"Nodes {index1} and {index2} are {distance:.3g} apart, "
            f"direction is undefined"
        )
        self.index1 = index1
        self.index2 = index2
        self.distance = distance


class PlacementError(SimulationError):
    """Raised when a committed body is moved again."""
