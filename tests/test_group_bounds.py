# File: tests/test_group_bounds.py
"""
Tests for group bounding rectangles.
"""

import pytest

from staadmesh.core.models import GroupBox, Pedestal, PlanSnapshot
from staadmesh.pipeline import compute_model
from staadmesh.spatial.group_bounds import compute_bounding_box, compute_group_boxes


@pytest.fixture
def model():
    pedestal = Pedestal(id=1, x=2.0, z=2.0, length=1.0, width=0.5)
    snapshot = PlanSnapshot(
        length=4.0, width=4.0, mesh=0.5, plate_thickness=1.0, pedestals=[pedestal]
    )
    return compute_model(snapshot)


def test_moment_box(model):
    boxes = model.group_boxes[0]

    assert boxes.pedestal_id == 1
    assert boxes.moment == GroupBox(x=1.5, y=1.5, width=1.0, height=1.0)


def test_shear_boxes(model):
    boxes = model.group_boxes[0]

    assert boxes.one_way_shear == GroupBox(x=0.5, y=0.5, width=3.0, height=3.0)
    assert boxes.two_way_shear == GroupBox(x=1.0, y=1.0, width=2.0, height=2.0)


def test_box_is_independent_of_plate_orientation(model):
    flipped = compute_model(model.snapshot.model_copy(update={"orientation": "up"}))

    assert flipped.group_boxes == model.group_boxes


def test_empty_plate_set_has_no_box(model):
    plates_by_id = {p.id: p for p in model.plates}
    nodes_by_id = {n.id: n for n in model.nodes}

    assert compute_bounding_box([], plates_by_id, nodes_by_id) is None


def test_single_plate_box(model):
    plates_by_id = {p.id: p for p in model.plates}
    nodes_by_id = {n.id: n for n in model.nodes}

    box = compute_bounding_box([1], plates_by_id, nodes_by_id)

    assert box == GroupBox(x=0.0, y=0.0, width=0.5, height=0.5)


def test_one_box_set_per_pedestal():
    pedestals = [
        Pedestal(id=3, x=1.0, z=1.0, length=0.5, width=0.5),
        Pedestal(id=7, x=3.0, z=3.0, length=0.1, width=0.1),
    ]
    snapshot = PlanSnapshot(length=4.0, width=4.0, mesh=0.5, pedestals=pedestals)
    model = compute_model(snapshot)

    boxes = compute_group_boxes(model.groups, model.plates, model.nodes)

    assert [b.pedestal_id for b in boxes] == [3, 7]
    assert boxes[1].moment is None
    assert boxes[0].moment is not None
