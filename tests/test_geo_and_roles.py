from participium.utils.geo import cluster_points, grid_cell, grid_size_for_zoom
from participium.utils.roles import (
    RoleKind,
    capabilities_for_roles,
    role_kind,
)


def test_grid_size_shrinks_with_zoom():
    assert grid_size_for_zoom(3) == 1.0
    assert grid_size_for_zoom(8) == 0.5
    assert grid_size_for_zoom(10) == 0.1
    assert grid_size_for_zoom(11) == 0.05
    assert grid_size_for_zoom(12) == 0.01


def test_grid_cell_is_south_west_corner():
    assert grid_cell(45.0703, 7.6869, 1.0) == (45.0, 7.0)
    assert grid_cell(45.0703, 7.6869, 0.01) == (45.07, 7.68)


def test_cluster_points_groups_and_orders():
    points = [
        (3, 45.07, 7.68),
        (1, 45.05, 7.66),
        (2, 44.5, 7.2),
    ]
    clusters = cluster_points(points, 1.0)

    assert [c.cluster_id for c in clusters] == ["cluster_45.0_7.0", "cluster_44.0_7.0"]
    biggest = clusters[0]
    assert biggest.report_ids == [1, 3]
    assert biggest.report_count == 2
    assert abs(biggest.latitude - 45.06) < 1e-9
    assert abs(biggest.longitude - 7.67) < 1e-9


def test_role_kinds():
    assert role_kind("Citizen") is RoleKind.CITIZEN
    assert role_kind("External Maintainer") is RoleKind.EXTERNAL
    assert role_kind("Municipal Public Relations Officer") is RoleKind.PUBLIC_RELATIONS
    assert role_kind("Technical Manager") is RoleKind.TECHNICAL
    assert role_kind("Road Maintenance Technician") is RoleKind.TECHNICAL
    assert role_kind("Administrator") is RoleKind.ADMINISTRATOR


def test_capabilities_merge_across_roles():
    pro = capabilities_for_roles(["Municipal Public Relations Officer"])
    assert pro.can_approve and pro.can_view_pending
    assert not pro.can_work_reports
    assert pro.can_view_delegations and not pro.can_delegate

    external = capabilities_for_roles(["External Maintainer"])
    assert external.is_external and not external.can_delegate
    assert not external.can_view_delegations

    merged = capabilities_for_roles(["Citizen", "Technical Assistant"])
    assert merged.can_work_reports and merged.can_delegate
    assert not merged.can_approve

    assert not any(vars(capabilities_for_roles([])).values())
