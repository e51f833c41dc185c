import matplotlib

matplotlib.use("Agg")

import pytest

from springmesh import SimulationConfig, World


@pytest.fixture
def config():
    return SimulationConfig(node_radius=5.0, damping=0.99, gravity=10.0, dt=0.01,
                            width=800.0, height=600.0)


@pytest.fixture
def world(config):
    return World(config)


@pytest.fixture
def weightless_world():
    return World(SimulationConfig(gravity=0.0, damping=1.0, dt=0.01, width=800.0, height=600.0))
