"""
Simulation world coordinating nodes, springs, bodies and the step loop.
"""

from typing import List, Dict, Optional, Any, Sequence, Tuple
import math
import numpy as np
import logging
from .primitives import Node
from .forces import Spring
from .integrators import Integrator, DampedEulerIntegrator
from .collisions import CollisionResolver
from .body import Body
from .generators import MeshTopology, polygon_mesh, box_mesh
from .errors import ConfigurationError, DegenerateGeometryError

logger = logging.getLogger(__name__)


class SimulationConfig:
    """Physical constants and area bounds for a simulation world."""

    def __init__(self, node_radius: float = 5.0, damping: float = 0.99,
                 gravity: float = 10.0, dt: float = 0.01,
                 width: float = 800.0, height: float = 600.0,
                 min_distance: float = 1e-9, strict: bool = False,
                 max_velocity: float = 1e4):
        """
        Initialize simulation constants.

        Args:
            node_radius: Radius of every node, used for walls and collisions
            damping: Multiplier applied to each step's velocity increment
            gravity: Acceleration along +y (screen coordinates, y grows downwards)
            dt: Fixed time step
            width: Simulation area width
            height: Simulation area height
            min_distance: Separation below which a direction is undefined
            strict: Raise DegenerateGeometryError instead of skipping coincident nodes
            max_velocity: Speed above which a warning is logged after a step

        Raises:
            ConfigurationError: If any value is out of range
        """
        values = {
            'node_radius': node_radius, 'damping': damping, 'gravity': gravity,
            'dt': dt, 'width': width, 'height': height,
            'min_distance': min_distance, 'max_velocity': max_velocity,
        }
        for name, value in values.items():
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise ConfigurationError(f"{name} must be finite, got {value!r}")

        if dt <= 0:
            raise ConfigurationError("Time step must be positive")
        if node_radius < 0:
            raise ConfigurationError("Node radius must be non-negative")
        if damping < 0:
            raise ConfigurationError("Damping must be non-negative")
        if not min_distance > 0:
            raise ConfigurationError("Minimum distance must be positive")
        if not isinstance(strict, bool):
            raise ConfigurationError(f"strict must be true or false, got {strict!r}")
        if max_velocity <= 0:
            raise ConfigurationError("Maximum velocity must be positive")
        if width < 2 * node_radius or height < 2 * node_radius:
            raise ConfigurationError(
                f"Area {width}x{height} is too small for nodes of radius {node_radius}")

        self.node_radius = float(node_radius)
        self.damping = float(damping)
        self.gravity = float(gravity)
        self.dt = float(dt)
        self.width = float(width)
        self.height = float(height)
        self.min_distance = float(min_distance)
        self.strict = strict
        self.max_velocity = float(max_velocity)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'node_radius': self.node_radius,
            'damping': self.damping,
            'gravity': self.gravity,
            'dt': self.dt,
            'width': self.width,
            'height': self.height,
            'min_distance': self.min_distance,
            'strict': self.strict,
            'max_velocity': self.max_velocity,
        }

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> 'SimulationConfig':
        """Build a config from a mapping, rejecting unknown keys."""
        known = set(cls().to_dict())
        unknown = set(values) - known
        if unknown:
            raise ConfigurationError(f"Unknown simulation settings: {sorted(unknown)}")
        return cls(**values)


class World:
    """Owns the node arena, the spring list and the bodies built from them."""

    def __init__(self, config: Optional[SimulationConfig] = None,
                 integrator: Optional[Integrator] = None):
        """
        Initialize an empty world.

        Args:
            config: Simulation constants, defaults to SimulationConfig()
            integrator: Integration scheme, defaults to DampedEulerIntegrator
        """
        self.config = config if config is not None else SimulationConfig()
        self.integrator = integrator if integrator is not None else DampedEulerIntegrator()
        self.collision_resolver = CollisionResolver(
            self.config.node_radius, self.config.min_distance, self.config.strict)

        self.nodes: List[Node] = []
        self.springs: List[Spring] = []
        self.bodies: List[Body] = []

        self.time = 0.0
        self.step_count = 0
        self.collision_count = 0
        self.max_penetration = 0.0

        logger.info(f"World initialized: {self.config.width}x{self.config.height}, "
                    f"dt={self.config.dt}, gravity={self.config.gravity}")

    def add_node(self, x: float, y: float) -> int:
        """Append a node to the arena and return its index."""
        self.nodes.append(Node([x, y], gravity=self.config.gravity))
        index = len(self.nodes) - 1
        logger.debug(f"Added node {index} at ({x}, {y})")
        return index

    def add_spring(self, node1: int, node2: int, rest_length: float,
                   stiffness: float) -> Spring:
        """
        Connect two existing nodes with a spring.

        Raises:
            IndexError: If an endpoint is outside the node arena or both are equal
            ConfigurationError: If rest length or stiffness is negative
        """
        spring = Spring(node1, node2, rest_length, stiffness)
        count = len(self.nodes)
        for index in (spring.node1, spring.node2):
            if index >= count:
                raise IndexError(f"Spring endpoint {index} outside node arena of size {count}")

        self.springs.append(spring)
        return spring

    def add_mesh(self, topology: MeshTopology, name: Optional[str] = None) -> Body:
        """
        Register a generated mesh as a new body.

        The topology must have been generated with offset equal to the
        current arena size. All springs are validated before any node is
        appended.

        Raises:
            ValueError: If the topology offset does not match the arena size
            IndexError: If a spring references a node outside the new arena
        """
        start = len(self.nodes)
        if topology.offset != start:
            raise ValueError(f"Topology generated for offset {topology.offset}, "
                             f"but the arena holds {start} nodes")

        end = start + topology.node_count
        springs = []
        for node1, node2, rest_length, stiffness in topology.springs:
            for index in (node1, node2):
                if not 0 <= index < end:
                    raise IndexError(f"Spring endpoint {index} outside node arena of size {end}")
            springs.append(Spring(node1, node2, rest_length, stiffness))

        for x, y in topology.positions:
            self.nodes.append(Node([x, y], gravity=self.config.gravity))
        self.springs.extend(springs)

        name = name or f"{topology.kind}_{len(self.bodies)}"
        body = Body(name, range(start, end), self.nodes)
        self.bodies.append(body)

        logger.info(f"Added body {name!r}: {topology.node_count} nodes, "
                    f"{topology.spring_count} springs")
        return body

    def add_polygon(self, layers: int, sides: int, layer_separation: float,
                    stiffness: float, name: Optional[str] = None) -> Body:
        """Generate a concentric polygon mesh and register it as a body."""
        topology = polygon_mesh(layers, sides, layer_separation, stiffness,
                                offset=len(self.nodes))
        return self.add_mesh(topology, name)

    def add_box(self, width: int, height: int, unit: float, stiffness: float,
                name: Optional[str] = None) -> Body:
        """Generate a cross-braced grid mesh and register it as a body."""
        topology = box_mesh(width, height, unit, stiffness, offset=len(self.nodes))
        return self.add_mesh(topology, name)

    def get_body(self, name: str) -> Optional[Body]:
        return next((body for body in self.bodies if body.name == name), None)

    def place_body(self, body: Body, pointer: Sequence[float]) -> np.ndarray:
        """Move a body towards a pointer position, kept inside the area."""
        return body.place_at(pointer, self.config.width, self.config.height)

    def step(self) -> None:
        """
        Advance the simulation by one fixed time step.

        A step either completes or leaves every node as it was: if a
        degenerate spring or collision pair aborts it in strict mode, node
        state is restored before the error propagates.

        Raises:
            DegenerateGeometryError: If strict and two nodes coincide
        """
        config = self.config
        snapshot = self._snapshot_nodes()
        try:
            for spring in self.springs:
                spring.apply_force(self.nodes, config.min_distance, config.strict)

            self.integrator.integrate(self.nodes, config.dt, config.damping, config.gravity,
                                      config.width, config.height, config.node_radius)

            collisions = self.collision_resolver.resolve_collisions(self.nodes)
        except DegenerateGeometryError:
            self._restore_nodes(snapshot)
            logger.error("Step aborted on degenerate geometry, node state restored")
            raise

        if collisions:
            self.collision_count += len(collisions)
            self.max_penetration = max(self.max_penetration,
                                       max(c.penetration for c in collisions))

        self._validate_simulation_state()

        self.time += config.dt
        self.step_count += 1

    def _snapshot_nodes(self) -> List[Tuple[np.ndarray, np.ndarray, np.ndarray]]:
        return [(node.position.copy(), node.velocity.copy(), node.pending_acceleration.copy())
                for node in self.nodes]

    def _restore_nodes(self, snapshot: List[Tuple[np.ndarray, np.ndarray, np.ndarray]]) -> None:
        for node, (position, velocity, pending) in zip(self.nodes, snapshot):
            node.position = position
            node.velocity = velocity
            node.pending_acceleration = pending

    def step_n(self, n_steps: int) -> None:
        """Advance simulation by n steps."""
        for _ in range(n_steps):
            self.step()

    def stop(self) -> None:
        """Return every node to its reference state and reset the clock."""
        for node in self.nodes:
            node.reset_to_reference(self.config.gravity)
        self.time = 0.0
        self.step_count = 0
        self.collision_count = 0
        self.max_penetration = 0.0
        logger.info("Simulation stopped, nodes reset to reference positions")

    def clear(self) -> None:
        """Discard all nodes, springs and bodies; previously returned bodies are detached."""
        for body in self.bodies:
            body.detach()
        self.nodes.clear()
        self.springs.clear()
        self.bodies.clear()
        self.time = 0.0
        self.step_count = 0
        self.collision_count = 0
        self.max_penetration = 0.0
        logger.info("World cleared")

    def node_positions(self) -> np.ndarray:
        """Copy of all node positions as an (N, 2) array."""
        if not self.nodes:
            return np.zeros((0, 2))
        return np.array([node.position for node in self.nodes])

    def spring_segments(self) -> np.ndarray:
        """Copy of all spring endpoint positions as an (M, 2, 2) array."""
        if not self.springs:
            return np.zeros((0, 2, 2))
        return np.array([(self.nodes[s.node1].position, self.nodes[s.node2].position)
                         for s in self.springs])

    def get_state(self) -> Dict[str, Any]:
        """Get a plain snapshot of the simulation state."""
        return {
            'time': self.time,
            'step_count': self.step_count,
            'nodes': [self._serialize_node(node) for node in self.nodes],
            'springs': [self._serialize_spring(spring) for spring in self.springs],
            'bodies': [{'name': body.name, 'state': body.state.value,
                        'nodes': list(body.node_indices)} for body in self.bodies],
        }

    def _serialize_node(self, node: Node) -> Dict[str, Any]:
        return {
            'position': node.position.tolist(),
            'reference_position': node.reference_position.tolist(),
            'velocity': node.velocity.tolist(),
        }

    def _serialize_spring(self, spring: Spring) -> Dict[str, Any]:
        return {
            'nodes': [spring.node1, spring.node2],
            'rest_length': spring.rest_length,
            'stiffness': spring.stiffness,
        }

    def _validate_simulation_state(self) -> None:
        """Validate simulation state and warn about potential issues."""
        for index, node in enumerate(self.nodes):
            if np.any(np.isnan(node.position)) or np.any(np.isnan(node.velocity)):
                logger.error(f"NaN detected in node {index}")

            speed = node.get_speed()
            if speed > self.config.max_velocity:
                logger.warning(f"Node {index} has extreme velocity: {speed}")

    def get_debug_info(self) -> Dict[str, Any]:
        """Get debugging information."""
        return {
            'time': self.time,
            'dt': self.config.dt,
            'step_count': self.step_count,
            'node_count': len(self.nodes),
            'spring_count': len(self.springs),
            'body_count': len(self.bodies),
            'collision_count': self.collision_count,
            'max_penetration': self.max_penetration,
            'kinetic_energy': sum(node.get_kinetic_energy() for node in self.nodes),
        }
