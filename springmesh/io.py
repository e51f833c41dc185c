"""
Scene configuration loading for the spring-mesh simulator.
"""

from typing import Dict, Any
import json
import logging
import os
import yaml
from .engine import SimulationConfig, World
from .body import Body
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Load scene configuration from JSON/YAML files."""

    @staticmethod
    def load_config(config_path: str) -> Dict[str, Any]:
        """
        Load configuration from file.

        Args:
            config_path: Path to configuration file (.json, .yaml or .yml)

        Returns:
            Configuration dictionary

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If the format is unsupported or the top level is not a mapping
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        ext = os.path.splitext(config_path)[1].lower()

        with open(config_path, 'r') as f:
            if ext == '.json':
                config = json.load(f)
            elif ext in ['.yaml', '.yml']:
                config = yaml.safe_load(f)
            else:
                raise ConfigurationError(f"Unsupported config format: {ext}")

        if config is None:
            config = {}
        if not isinstance(config, dict):
            raise ConfigurationError(f"Configuration in {config_path} must be a mapping")

        logger.info(f"Loaded configuration from {config_path}")
        return config

    @staticmethod
    def create_world_from_config(config: Dict[str, Any]) -> World:
        """
        Create a world from configuration.

        Expected layout::

            simulation: {node_radius, damping, gravity, dt, width, height, ...}
            bodies:
              - {type: polygon, layers, sides, layer_separation, stiffness,
                 name, position: [x, y]}
              - {type: box, width, height, unit, stiffness, name, position}

        Bodies with a position are placed there (clamped to the area) and
        committed; bodies without one stay free at the origin.

        Args:
            config: Configuration dictionary

        Returns:
            Configured World instance
        """
        world = World(SimulationConfig.from_dict(config.get('simulation') or {}))

        for body_config in config.get('bodies') or []:
            body = ConfigLoader._create_body_from_config(world, body_config)
            if 'position' in body_config:
                world.place_body(body, body_config['position'])
                body.commit()

        logger.info(f"Created world from configuration with {len(world.bodies)} bodies")
        return world

    @staticmethod
    def load_world(config_path: str) -> World:
        """Load a configuration file and build its world."""
        return ConfigLoader.create_world_from_config(ConfigLoader.load_config(config_path))

    @staticmethod
    def _create_body_from_config(world: World, body_config: Dict[str, Any]) -> Body:
        """Create a body from configuration."""
        body_type = body_config.get('type')
        name = body_config.get('name')

        try:
            if body_type == 'polygon':
                return world.add_polygon(
                    layers=body_config['layers'],
                    sides=body_config['sides'],
                    layer_separation=body_config['layer_separation'],
                    stiffness=body_config['stiffness'],
                    name=name,
                )
            elif body_type == 'box':
                return world.add_box(
                    width=body_config['width'],
                    height=body_config['height'],
                    unit=body_config['unit'],
                    stiffness=body_config['stiffness'],
                    name=name,
                )
        except KeyError as exc:
            raise ConfigurationError(f"Missing {exc.args[0]!r} for {body_type} body") from exc

        raise ConfigurationError(f"Unknown body type: {body_type}")
