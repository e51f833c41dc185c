import numpy as np
import pytest

from springmesh import Body, PlacementError, PlacementState


def test_bounds_cover_reference_positions_and_origin(world):
    box = world.add_box(2, 2, 10.0, 1.0)
    assert box.bounds == (-5.0, 5.0, -5.0, 5.0)

    polygon = world.add_polygon(3, 4, 10.0, 1.0)
    min_x, max_x, min_y, max_y = polygon.bounds
    assert (min_x, max_x) == pytest.approx((-20.0, 20.0))
    assert (min_y, max_y) == pytest.approx((-20.0, 20.0))


def test_bounds_always_include_origin(world):
    index = world.add_node(30.0, 40.0)
    body = Body("single", [index], world.nodes)
    assert body.bounds == (0.0, 30.0, 0.0, 40.0)


def test_translate_moves_all_nodes_relative_to_reference(world):
    body = world.add_box(2, 2, 10.0, 1.0)
    reference = body.positions()
    body.translate_to((100.0, 50.0))
    np.testing.assert_allclose(body.positions(), reference + [100.0, 50.0])
    assert body.state is PlacementState.DRAGGING

    body.translate_to((200.0, 60.0))
    np.testing.assert_allclose(body.positions(), reference + [200.0, 60.0])


@pytest.mark.parametrize("pointer, expected", [
    ((400.0, 300.0), (400.0, 300.0)),
    ((0.0, 0.0), (5.0, 5.0)),
    ((1000.0, -50.0), (795.0, 5.0)),
    ((-10.0, 900.0), (5.0, 595.0)),
])
def test_clamp_offset_keeps_bounding_box_inside(world, pointer, expected):
    body = world.add_box(2, 2, 10.0, 1.0)
    offset = body.clamp_offset(pointer, 800.0, 600.0)
    assert tuple(offset) == pytest.approx(expected)


def test_place_at_uses_world_area(world):
    body = world.add_box(3, 3, 10.0, 1.0)
    offset = world.place_body(body, (-100.0, -100.0))
    assert tuple(offset) == pytest.approx((10.0, 10.0))
    positions = body.positions()
    assert positions[:, 0].min() == pytest.approx(0.0)
    assert positions[:, 1].min() == pytest.approx(0.0)


def test_commit_freezes_reference_and_locks_body(world):
    body = world.add_box(2, 2, 10.0, 1.0)
    world.place_body(body, (100.0, 100.0))
    body.commit()

    assert body.state is PlacementState.COMMITTED
    for index in body.node_indices:
        node = world.nodes[index]
        assert node.reference_position.tolist() == node.position.tolist()

    with pytest.raises(PlacementError):
        body.translate_to((0.0, 0.0))
    with pytest.raises(PlacementError):
        body.commit()


def test_commit_without_dragging_keeps_generated_positions(world):
    body = world.add_polygon(2, 4, 10.0, 1.0)
    before = body.positions()
    body.commit()
    np.testing.assert_allclose(body.positions(), before)
    assert body.state is PlacementState.COMMITTED


def test_body_names_default_to_kind_and_order(world):
    first = world.add_polygon(2, 4, 10.0, 1.0)
    second = world.add_box(2, 2, 10.0, 1.0, name="crate")
    third = world.add_box(2, 2, 10.0, 1.0)
    assert first.name == "polygon_0"
    assert second.name == "crate"
    assert third.name == "box_2"
    assert len(third) == 4
