"""
Procedural mesh generators.

Each generator returns node coordinates relative to the body's own origin
together with spring connectivity. Spring endpoints are global indices:
the caller passes the current size of its node arena as ``offset`` and
must append the generated nodes in order, immediately afterwards.
"""

from dataclasses import dataclass, field
from typing import List, Tuple
import math
import numpy as np
import logging
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

SpringSpec = Tuple[int, int, float, float]


@dataclass
class MeshTopology:
    """Generated node coordinates and spring connectivity for one body."""
    kind: str
    positions: np.ndarray
    springs: List[SpringSpec] = field(default_factory=list)
    offset: int = 0

    @property
    def node_count(self) -> int:
        return len(self.positions)

    @property
    def spring_count(self) -> int:
        return len(self.springs)


def _require_count(name: str, value, minimum: int = 1) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    try:
        as_float = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from exc
    if not as_float.is_integer():
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if as_float < minimum:
        raise ConfigurationError(f"{name} must be at least {minimum}, got {value!r}")
    return int(as_float)


def _require_non_negative(name: str, value, allow_zero: bool = True) -> float:
    try:
        as_float = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(as_float):
        raise ConfigurationError(f"{name} must be finite, got {value!r}")
    if as_float < 0 or (as_float == 0 and not allow_zero):
        bound = "non-negative" if allow_zero else "positive"
        raise ConfigurationError(f"{name} must be {bound}, got {value!r}")
    return as_float


def polygon_layers(layers: int, sides: int) -> List[List[Tuple[float, float]]]:
    """
    Unit-scaled node coordinates of a concentric polygon, grouped by layer.

    Layer 0 is the centre node. Layer l holds l * sides nodes: one spoke
    per side at angle 2*pi*k/sides and radius l, followed by l - 1 points
    linearly interpolated towards the next spoke.
    """
    layers = _require_count("layers", layers)
    sides = _require_count("sides", sides)

    result = [[(0.0, 0.0)]]
    for layer in range(1, layers):
        layer_points = []
        for spoke in range(sides):
            angle = spoke / sides * 2 * math.pi
            next_angle = (spoke + 1) / sides * 2 * math.pi
            last_spoke = (math.cos(angle) * layer, math.sin(angle) * layer)
            next_spoke = (math.cos(next_angle) * layer, math.sin(next_angle) * layer)

            layer_points.append(last_spoke)
            for between in range(1, layer):
                weight = between / layer
                layer_points.append((
                    last_spoke[0] * (1 - weight) + next_spoke[0] * weight,
                    last_spoke[1] * (1 - weight) + next_spoke[1] * weight,
                ))
        result.append(layer_points)
    return result


def polygon_mesh(layers: int, sides: int, layer_separation: float,
                 stiffness: float, offset: int = 0) -> MeshTopology:
    """
    Generate a concentric polygon mesh.

    Every node of layer l >= 1 gets a ring spring to its successor in the
    same layer and one or two springs to the previous layer, chosen from
    the proportional index n * (l - 1) / l. Layer 1 always maps to index 0,
    which ties each of its nodes to the centre.

    Args:
        layers: Number of layers including the centre node
        sides: Number of polygon sides
        layer_separation: Distance between consecutive layers
        stiffness: Stiffness of every generated spring
        offset: Global index of the first generated node

    Returns:
        MeshTopology with global spring indices

    Raises:
        ConfigurationError: If any parameter is out of range
    """
    layers = _require_count("layers", layers)
    sides = _require_count("sides", sides)
    if layers > 1 and sides < 2:
        raise ConfigurationError(f"A polygon with more than one layer needs at least 2 sides, got {sides}")
    separation = _require_non_negative("layer_separation", layer_separation)
    stiffness = _require_non_negative("stiffness", stiffness)
    offset = _require_count("offset", offset, minimum=0)

    points = [point for layer_points in polygon_layers(layers, sides) for point in layer_points]
    positions = np.array(points, dtype=np.float64) * separation

    ring_length = 2 * math.sin(math.pi / sides) * separation
    springs = []

    previous_start = offset
    previous_count = 1
    current_start = offset + 1
    for layer in range(1, layers):
        layer_count = layer * sides
        for n in range(layer_count):
            node = current_start + n
            springs.append((node, current_start + (n + 1) % layer_count, ring_length, stiffness))

            lower, remainder = divmod(n * (layer - 1), layer)
            if remainder == 0:
                springs.append((node, previous_start + lower, separation, stiffness))
            else:
                upper = (lower + 1) % previous_count
                springs.append((node, previous_start + upper, separation, stiffness))
                springs.append((node, previous_start + lower, separation, stiffness))

        previous_start = current_start
        previous_count = layer_count
        current_start += layer_count

    logger.debug(f"Generated polygon mesh: {len(positions)} nodes, {len(springs)} springs")
    return MeshTopology("polygon", positions, springs, offset)


def box_mesh(width: int, height: int, unit: float, stiffness: float,
             offset: int = 0) -> MeshTopology:
    """
    Generate a cross-braced rectangular grid centred on the origin.

    Nodes are laid out row by row. Each node below the top row is tied to
    the node above it, and to its left neighbour when not in the left
    column; every interior cell also gets both diagonals.

    Raises:
        ConfigurationError: If any parameter is out of range
    """
    width = _require_count("width", width)
    height = _require_count("height", height)
    unit = _require_non_negative("unit", unit, allow_zero=False)
    stiffness = _require_non_negative("stiffness", stiffness)
    offset = _require_count("offset", offset, minimum=0)

    diagonal = unit * math.sqrt(2)
    positions = np.zeros((width * height, 2), dtype=np.float64)
    springs = []

    index = offset
    for row in range(height):
        for col in range(width):
            positions[index - offset] = (
                unit * col - unit / 2 * (width - 1),
                unit * row - unit / 2 * (height - 1),
            )

            if row != 0:
                springs.append((index, index - width, unit, stiffness))
                if col != 0:
                    springs.append((index, index - width - 1, diagonal, stiffness))
                    springs.append((index - 1, index - width, diagonal, stiffness))
            if col != 0:
                springs.append((index, index - 1, unit, stiffness))

            index += 1

    logger.debug(f"Generated box mesh: {len(positions)} nodes, {len(springs)} springs")
    return MeshTopology("box", positions, springs, offset)
