"""
2D Spring-Mesh Simulator Package

Deformable bodies built from unit point masses and linear springs, with
gravity, wall confinement and node-node collision.
"""

__version__ = "1.0.0"

from .engine import World, SimulationConfig
from .primitives import Node
from .forces import Spring
from .body import Body, PlacementState
from .generators import MeshTopology, polygon_layers, polygon_mesh, box_mesh
from .errors import (SimulationError, ConfigurationError,
                     DegenerateGeometryError, PlacementError)
from .io import ConfigLoader

__all__ = [
    'World',
    'SimulationConfig',
    'Node',
    'Spring',
    'Body',
    'PlacementState',
    'MeshTopology',
    'polygon_layers',
    'polygon_mesh',
    'box_mesh',
    'SimulationError',
    'ConfigurationError',
    'DegenerateGeometryError',
    'PlacementError',
    'ConfigLoader',
]
