import pytest

from participium.crud import CategoryRoleRepository, ReportRepository, UserRepository
from participium.errors import ConflictError
from participium.models.report import ReportCategory, ReportStatus
from participium.utils.geo import BoundingBox

from helpers import (
    EXTERNAL,
    MILAN,
    MOLE_ANTONELLIANA,
    PIAZZA_CASTELLO,
    PORTA_NUOVA,
    ROAD_TECH,
    build_session,
    make_report,
    make_user,
    map_category,
)


def test_create_report_starts_pending(db_session):
    citizen = make_user(db_session, "alice")
    repo = ReportRepository(db_session)

    report = repo.create_report(
        reporter_id=citizen.id,
        title="Broken bench",
        description="Slats missing",
        category=ReportCategory.ROADS,
        latitude=PIAZZA_CASTELLO[0],
        longitude=PIAZZA_CASTELLO[1],
    )

    assert report.id is not None
    assert report.status == ReportStatus.PENDING_APPROVAL.value
    assert report.version == 1
    assert (report.latitude, report.longitude) == PIAZZA_CASTELLO
    assert repo.find_report_by_id(report.id).title == "Broken bench"
    assert repo.find_report_by_id(9999) is None


def test_find_all_reports_filters_and_orders_newest_first(db_session):
    first = make_report(db_session, title="First")
    second = make_report(db_session, title="Second", category=ReportCategory.WASTE)
    make_report(db_session, title="Third", status=ReportStatus.ASSIGNED)
    repo = ReportRepository(db_session)

    pending = repo.find_all_reports(status=ReportStatus.PENDING_APPROVAL)
    assert [r.id for r in pending] == [second.id, first.id]

    waste = repo.find_all_reports(category="Waste")
    assert [r.title for r in waste] == ["Second"]
    assert len(repo.find_all_reports()) == 3


def test_find_by_assignee_and_external_assignee(db_session):
    staff = make_user(db_session, "bob", ROAD_TECH)
    maintainer = make_user(db_session, "max", EXTERNAL, department="External Service Providers")
    not_external = make_user(db_session, "carl", ROAD_TECH)
    mine = make_report(db_session, status=ReportStatus.ASSIGNED, assignee=staff, external_assignee=maintainer)
    make_report(db_session, status=ReportStatus.ASSIGNED, assignee=staff, external_assignee=not_external)
    repo = ReportRepository(db_session)

    assert len(repo.find_by_assignee_id(staff.id)) == 2
    assert repo.find_by_assignee_id(staff.id, status=ReportStatus.IN_PROGRESS) == []
    assert [r.id for r in repo.find_by_external_assignee_id(maintainer.id)] == [mine.id]
    # Only users holding the External Maintainer role count as external assignees
    assert repo.find_by_external_assignee_id(not_external.id) == []


def test_map_reports_hide_pending_and_rejected(db_session):
    citizen = make_user(db_session, "alice")
    visible = make_report(db_session, reporter=citizen, status=ReportStatus.ASSIGNED)
    anonymous = make_report(
        db_session, reporter=citizen, status=ReportStatus.RESOLVED, is_anonymous=True
    )
    make_report(db_session, status=ReportStatus.PENDING_APPROVAL)
    make_report(db_session, status=ReportStatus.REJECTED, rejection_reason="Duplicate")

    results = {r.id: r for r in ReportRepository(db_session).get_approved_reports_for_map()}

    assert set(results) == {visible.id, anonymous.id}
    assert results[visible.id].reporter_name == "Alice Tester"
    assert results[anonymous.id].reporter_name == "Anonymous"


def test_map_reports_respect_bounding_box_and_category(db_session):
    inside = make_report(db_session, status=ReportStatus.ASSIGNED, location=MOLE_ANTONELLIANA)
    make_report(db_session, status=ReportStatus.ASSIGNED, location=MILAN)
    make_report(
        db_session,
        status=ReportStatus.ASSIGNED,
        location=PORTA_NUOVA,
        category=ReportCategory.WASTE,
    )
    repo = ReportRepository(db_session)
    turin = BoundingBox(min_lat=45.0, max_lat=45.1, min_lng=7.6, max_lng=7.8)

    assert len(repo.get_approved_reports_for_map(turin)) == 2
    roads = repo.get_approved_reports_for_map(turin, ReportCategory.ROADS)
    assert [r.id for r in roads] == [inside.id]


def test_clustered_reports(db_session):
    a = make_report(db_session, status=ReportStatus.ASSIGNED, location=PIAZZA_CASTELLO)
    b = make_report(db_session, status=ReportStatus.IN_PROGRESS, location=MOLE_ANTONELLIANA)
    c = make_report(db_session, status=ReportStatus.ASSIGNED, location=MILAN)
    make_report(db_session, status=ReportStatus.PENDING_APPROVAL, location=PORTA_NUOVA)

    clusters = ReportRepository(db_session).get_clustered_reports(zoom=5)

    assert [cl.cluster_id for cl in clusters] == ["cluster_45.0_7.0", "cluster_45.0_9.0"]
    assert clusters[0].report_ids == sorted([a.id, b.id])
    assert clusters[0].report_count == 2
    assert clusters[1].report_ids == [c.id]
    assert clusters[1].location.latitude == pytest.approx(MILAN[0])


def test_find_reports_by_address(db_session):
    match = make_report(db_session, status=ReportStatus.ASSIGNED, address="Via Roma 1, Torino")
    make_report(db_session, status=ReportStatus.PENDING_APPROVAL, address="Via Roma 3, Torino")
    make_report(db_session, status=ReportStatus.ASSIGNED, address="Corso Francia 10")

    found = ReportRepository(db_session).find_reports_by_address("via roma")
    assert [r.id for r in found] == [match.id]


def test_count_open_reports_by_assignee(db_session):
    busy = make_user(db_session, "busy", ROAD_TECH)
    idle = make_user(db_session, "idle", ROAD_TECH)
    make_report(db_session, status=ReportStatus.ASSIGNED, assignee=busy)
    make_report(db_session, status=ReportStatus.SUSPENDED, assignee=busy)
    make_report(db_session, status=ReportStatus.RESOLVED, assignee=busy)

    counts = ReportRepository(db_session).count_open_reports_by_assignee([busy.id, idle.id])
    assert counts == {busy.id: 2, idle.id: 0}


def test_category_role_lookup(db_session):
    mapping = map_category(db_session, ReportCategory.ROADS, ROAD_TECH)
    repo = CategoryRoleRepository(db_session)

    assert repo.find_role_id_by_category(ReportCategory.ROADS) == mapping.role_id
    assert repo.find_role_id_by_category("Waste") is None
    assert repo.find_mapping_by_category("Roads and Urban Furnishings").role.name == ROAD_TECH
    assert repo.find_mapping_by_category(ReportCategory.WASTE) is None


def test_find_users_by_role_skips_inactive(db_session):
    active = make_user(db_session, "active", ROAD_TECH)
    make_user(db_session, "gone", ROAD_TECH, is_active=False)
    role_id = active.user_roles[0].department_role.role_id

    users = UserRepository(db_session).find_users_by_role_id(role_id)
    assert [u.id for u in users] == [active.id]


def test_concurrent_save_raises_conflict(tmp_path):
    url = f"sqlite:///{tmp_path / 'race.db'}"
    first = build_session(url)
    second = build_session(url)
    try:
        report_id = make_report(first).id
        mine = ReportRepository(first).find_report_by_id(report_id)
        theirs = ReportRepository(second).find_report_by_id(report_id)

        mine.title = "Updated first"
        ReportRepository(first).save(mine)

        theirs.title = "Updated second"
        with pytest.raises(ConflictError):
            ReportRepository(second).save(theirs)

        second.expire_all()
        assert ReportRepository(second).find_report_by_id(report_id).title == "Updated first"
    finally:
        first.close()
        second.close()
