import math

import numpy as np
import pytest

from springmesh import ConfigurationError, box_mesh, polygon_layers, polygon_mesh


def endpoints(topology):
    return [(i, j) for i, j, _, _ in topology.springs]


def test_box_2x2_connectivity():
    mesh = box_mesh(2, 2, 1.0, stiffness=3.0)

    assert mesh.node_count == 4
    np.testing.assert_allclose(mesh.positions, [
        [-0.5, -0.5], [0.5, -0.5],
        [-0.5, 0.5], [0.5, 0.5],
    ])
    # two horizontals, two verticals and both diagonals of the single cell
    assert endpoints(mesh) == [(1, 0), (2, 0), (3, 1), (3, 0), (2, 1), (3, 2)]
    assert mesh.spring_count == 6

    lengths = {(i, j): rest for i, j, rest, _ in mesh.springs}
    assert lengths[(1, 0)] == pytest.approx(1.0)
    assert lengths[(2, 0)] == pytest.approx(1.0)
    assert lengths[(3, 0)] == pytest.approx(math.sqrt(2))
    assert lengths[(2, 1)] == pytest.approx(math.sqrt(2))
    assert all(stiffness == 3.0 for *_, stiffness in mesh.springs)


@pytest.mark.parametrize("width, height", [(1, 1), (3, 1), (1, 4), (3, 4), (5, 5)])
def test_box_spring_count(width, height):
    mesh = box_mesh(width, height, 10.0, 1.0)
    expected = width * (height - 1) + height * (width - 1) + 2 * (width - 1) * (height - 1)
    assert mesh.node_count == width * height
    assert mesh.spring_count == expected


def test_box_is_centred_on_origin():
    mesh = box_mesh(3, 4, 10.0, 1.0)
    np.testing.assert_allclose(mesh.positions.mean(axis=0), [0.0, 0.0], atol=1e-12)
    assert mesh.positions[:, 0].min() == pytest.approx(-10.0)
    assert mesh.positions[:, 1].max() == pytest.approx(15.0)


def test_box_springs_match_node_distances():
    mesh = box_mesh(4, 3, 7.0, 1.0)
    for i, j, rest, _ in mesh.springs:
        distance = np.linalg.norm(mesh.positions[i] - mesh.positions[j])
        assert distance == pytest.approx(rest)


def test_box_offset_shifts_spring_indices():
    base = box_mesh(2, 2, 1.0, 1.0)
    shifted = box_mesh(2, 2, 1.0, 1.0, offset=7)
    assert shifted.offset == 7
    assert endpoints(shifted) == [(i + 7, j + 7) for i, j in endpoints(base)]
    np.testing.assert_allclose(shifted.positions, base.positions)


def test_polygon_layers_geometry():
    layers = polygon_layers(3, 4)
    assert [len(layer) for layer in layers] == [1, 4, 8]
    assert layers[0] == [(0.0, 0.0)]
    np.testing.assert_allclose(layers[1], [[1, 0], [0, 1], [-1, 0], [0, -1]], atol=1e-12)
    # spoke then the midpoint towards the next spoke
    np.testing.assert_allclose(layers[2][0], [2.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(layers[2][1], [1.0, 1.0], atol=1e-12)
    np.testing.assert_allclose(layers[2][2], [0.0, 2.0], atol=1e-12)


def test_polygon_two_layers_four_sides():
    mesh = polygon_mesh(2, 4, layer_separation=10.0, stiffness=2.0)

    assert mesh.node_count == 5
    np.testing.assert_allclose(mesh.positions[0], [0.0, 0.0])
    np.testing.assert_allclose(mesh.positions[1], [10.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(mesh.positions[2], [0.0, 10.0], atol=1e-12)

    ring = [(1, 2), (2, 3), (3, 4), (4, 1)]
    spokes = [(1, 0), (2, 0), (3, 0), (4, 0)]
    assert endpoints(mesh) == [pair for pairs in zip(ring, spokes) for pair in pairs]
    assert mesh.spring_count == 8

    ring_length = 2 * math.sin(math.pi / 4) * 10.0
    for i, j, rest, stiffness in mesh.springs:
        assert stiffness == 2.0
        assert rest == pytest.approx(10.0 if j == 0 else ring_length)


def test_every_first_layer_node_is_tied_to_centre_once():
    mesh = polygon_mesh(2, 6, 5.0, 1.0)
    for node in range(1, 7):
        inter_layer = [j for i, j in endpoints(mesh) if i == node and j == 0]
        assert inter_layer == [0]


def test_polygon_three_layers_inter_layer_rule():
    mesh = polygon_mesh(3, 4, 1.0, 1.0)
    assert mesh.node_count == 13
    # layer 1: 4 ring + 4 spokes; layer 2: 8 ring + 4 aligned + 4 * 2 split
    assert mesh.spring_count == 28

    from_node = {}
    for i, j in endpoints(mesh):
        from_node.setdefault(i, []).append(j)

    # layer 2 starts at index 5, layer 1 at index 1
    assert from_node[5] == [6, 1]          # n=0, proportional index 0
    assert from_node[6] == [7, 2, 1]       # n=1, between layer-1 nodes 0 and 1
    assert from_node[7] == [8, 2]          # n=2, proportional index 1
    assert from_node[12] == [5, 1, 4]      # n=7, ceil wraps to layer-1 node 0


def test_polygon_ring_springs_match_node_distances():
    mesh = polygon_mesh(4, 5, 12.0, 1.0)
    for i, j, rest, _ in mesh.springs:
        if rest != pytest.approx(12.0):
            distance = np.linalg.norm(mesh.positions[i] - mesh.positions[j])
            assert distance == pytest.approx(rest)


def test_polygon_single_layer_is_one_node():
    mesh = polygon_mesh(1, 5, 10.0, 1.0)
    assert mesh.node_count == 1
    assert mesh.springs == []


def test_polygon_offset_shifts_spring_indices():
    mesh = polygon_mesh(2, 3, 1.0, 1.0, offset=4)
    assert endpoints(mesh) == [(5, 6), (5, 4), (6, 7), (6, 4), (7, 5), (7, 4)]


@pytest.mark.parametrize("kwargs", [
    dict(layers=0, sides=4, layer_separation=1.0, stiffness=1.0),
    dict(layers=3, sides=0, layer_separation=1.0, stiffness=1.0),
    dict(layers=3, sides=1, layer_separation=1.0, stiffness=1.0),
    dict(layers=2.5, sides=4, layer_separation=1.0, stiffness=1.0),
    dict(layers=True, sides=4, layer_separation=1.0, stiffness=1.0),
    dict(layers=3, sides=4, layer_separation=-1.0, stiffness=1.0),
    dict(layers=3, sides=4, layer_separation=1.0, stiffness=-2.0),
    dict(layers=3, sides=4, layer_separation=float("inf"), stiffness=1.0),
    dict(layers="3", sides=4, layer_separation=1.0, stiffness="stiff"),
])
def test_polygon_rejects_invalid_parameters(kwargs):
    with pytest.raises(ConfigurationError):
        polygon_mesh(**kwargs)


@pytest.mark.parametrize("kwargs", [
    dict(width=0, height=2, unit=1.0, stiffness=1.0),
    dict(width=2, height=-1, unit=1.0, stiffness=1.0),
    dict(width=2, height=2, unit=0.0, stiffness=1.0),
    dict(width=2, height=2, unit=1.0, stiffness=-1.0),
    dict(width=2, height=2, unit=1.0, stiffness=1.0, offset=-3),
])
def test_box_rejects_invalid_parameters(kwargs):
    with pytest.raises(ConfigurationError):
        box_mesh(**kwargs)


def test_whole_number_floats_are_accepted():
    mesh = box_mesh(2.0, 3.0, 1.0, 1.0)
    assert mesh.node_count == 6
