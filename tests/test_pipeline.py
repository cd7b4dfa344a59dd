# File: tests/test_pipeline.py
"""
End-to-end scenarios through compute_model().
"""

from datetime import date

import pytest

from staadmesh import Pedestal, PlanSnapshot, compute_model, export_staad
from staadmesh.core.models import NodeKind


def test_plain_plan_scenario():
    """
    WHAT IS THIS TEST?
    ==================
    6 x 4 plan, 0.2 mesh, no pedestals, zero height.

    EXPECTED:
    - 31 x 21 grid lines, 651 nodes, 600 plates, 0 members
    - no groups
    """
    model = compute_model(PlanSnapshot(length=6.0, width=4.0, mesh=0.2))

    assert len(model.grid.x_lines) == 31
    assert len(model.grid.z_lines) == 21
    assert len(model.nodes) == 651
    assert len(model.plates) == 600
    assert len(model.members) == 0
    assert model.groups.is_empty()
    assert model.group_boxes == ()
    assert model.last_plate_id == 600
    assert model.summary() == "Nodes: 651 · Plates: 600 · Members: 0"


def test_single_pedestal_scenario():
    """
    Pedestal at (3, 2), 0.5 x 0.3, height 0.5, thickness 0.3, mesh 0.2.

    The 0.5 length covers round(2.5) = 3 plate widths around grid index 15,
    which the floor/ceil range turns into cells 13..16. The 0.3 width covers
    cells 9..10 around index 10.
    """
    pedestal = Pedestal(id=1, x=3.0, z=2.0, length=0.5, width=0.3)
    snapshot = PlanSnapshot(
        length=6.0,
        width=4.0,
        mesh=0.2,
        pedestal_height=0.5,
        plate_thickness=0.3,
        pedestals=[pedestal],
    )
    model = compute_model(snapshot)

    assert len(model.members) == 1
    assert len(model.pedestal_nodes) == 1
    assert model.pedestal_nodes[0].y == 0.5

    member = model.members[0]
    surface = {n.id: n for n in model.surface_nodes}[member.start_node]
    assert (surface.x, surface.z) == pytest.approx((3.0, 2.0))
    assert member.end_node == model.pedestal_nodes[0].id

    expected = {zi * 30 + xi + 1 for xi in range(13, 17) for zi in range(9, 11)}
    assert set(model.groups.moment) == expected
    assert len(model.groups.moment) == 8
    assert set(model.groups.moment) <= set(model.groups.one_way_shear)
    assert set(model.groups.moment) <= set(model.groups.two_way_shear)


def test_pedestal_outside_plan_gets_no_member():
    """
    A pedestal outside the plan is clamped onto the edge grid line, but its
    own center matches no surface node, so it gets no member.
    """
    pedestal = Pedestal(id=1, x=6.05, z=2.0, length=0.5, width=0.3)
    snapshot = PlanSnapshot(
        length=6.0, width=4.0, mesh=0.2, pedestal_height=0.5, pedestals=[pedestal]
    )
    model = compute_model(snapshot)

    assert len(model.members) == 0
    assert len(model.nodes) == 651
    text = export_staad(model, date(2026, 10, 19))
    assert "MEMBER" not in text


def test_unaligned_pedestal_inside_plan_scenario():
    """
    WHAT IS THIS TEST?
    ==================
    x = 0.0014999 lies inside the plan. The grid line cut at that center is
    snapped to 0.0015, which keys to 2 mm, while the center itself keys to
    1 mm. The pedestal gets no member and nothing raises.
    """
    pedestal = Pedestal(id=1, x=0.0014999, z=2.0, length=0.5, width=0.3)
    snapshot = PlanSnapshot(
        length=6.0, width=4.0, mesh=0.2, pedestal_height=0.5, pedestals=[pedestal]
    )
    model = compute_model(snapshot)

    assert 0.0 <= pedestal.x <= snapshot.length
    assert len(model.members) == 0
    assert model.pedestal_nodes == []
    assert len(model.nodes) == len(model.grid.x_lines) * len(model.grid.z_lines)
    text = export_staad(model, date(2026, 10, 19))
    assert "MEMBER" not in text


def test_node_count_formula():
    pedestals = [
        Pedestal(id=1, x=1.0, z=1.0, length=0.5, width=0.5),
        Pedestal(id=2, x=2.5, z=3.0, length=0.5, width=0.5),
        Pedestal(id=3, x=9.0, z=1.0, length=0.5, width=0.5),
    ]
    snapshot = PlanSnapshot(
        length=5.0, width=4.0, mesh=0.5, pedestal_height=0.75, pedestals=pedestals
    )
    model = compute_model(snapshot)

    nx, nz = len(model.grid.x_lines), len(model.grid.z_lines)
    assert len(model.nodes) == nx * nz + 2
    assert len(model.plates) == (nx - 1) * (nz - 1)
    assert [m.pedestal.id for m in model.members] == [1, 2]


def test_invariants_hold():
    pedestals = [
        Pedestal(id=1, x=0.73, z=1.21, length=0.6, width=0.45),
        Pedestal(id=2, x=3.9, z=0.0, length=1.1, width=0.3),
    ]
    snapshot = PlanSnapshot(
        length=4.5,
        width=2.5,
        mesh=0.3,
        pedestal_height=0.6,
        plate_thickness=0.45,
        orientation="up",
        pedestals=pedestals,
    )
    model = compute_model(snapshot)

    surface_ids = {n.id for n in model.surface_nodes}
    pedestal_ids = {n.id for n in model.pedestal_nodes}
    plate_ids = {p.id for p in model.plates}

    for plate in model.plates:
        assert set(plate.nodes) <= surface_ids
    for member in model.members:
        assert member.start_node in surface_ids
        assert member.end_node in pedestal_ids
    for ids in (model.groups.moment, model.groups.one_way_shear, model.groups.two_way_shear):
        assert set(ids) <= plate_ids
        assert list(ids) == sorted(ids)


def test_recompute_after_input_change():
    base = PlanSnapshot(length=2.0, width=2.0, mesh=0.5)
    changed = base.model_copy(update={"mesh": 0.25})

    assert len(compute_model(base).plates) == 16
    assert len(compute_model(changed).plates) == 64
