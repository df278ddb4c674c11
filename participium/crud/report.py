# participium/crud/report.py
"""
Report persistence and geo queries.
"""

from typing import Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.orm.exc import StaleDataError

from participium.errors import ConflictError
from participium.models import DepartmentRole, Report, Role, User, UserRole
from participium.models.report import HIDDEN_FROM_MAP, OPEN_STATUSES, ReportStatus
from participium.schemas.report import ClusteredReportResponse, MapReportResponse
from participium.services import mapper_service
from participium.utils.geo import BoundingBox, cluster_points, grid_size_for_zoom
from participium.utils.roles import SystemRole


def _value(enum_or_str) -> Optional[str]:
    if enum_or_str is None:
        return None
    return getattr(enum_or_str, "value", enum_or_str)


class ReportRepository:
    def __init__(self, db: Session):
        self.db = db

    # ======================
    # QUERY HELPERS
    # ======================

    def _base_query(self):
        return (
            self.db.query(Report)
            .options(selectinload(Report.photos), selectinload(Report.reporter))
        )

    @staticmethod
    def _filter(query, status=None, category=None):
        if status:
            query = query.filter(Report.status == _value(status))
        if category:
            query = query.filter(Report.category == _value(category))
        return query

    @staticmethod
    def _within_bounding_box(query, bbox: Optional[BoundingBox]):
        if bbox is None:
            return query
        return query.filter(
            Report.latitude.between(bbox.min_lat, bbox.max_lat),
            Report.longitude.between(bbox.min_lng, bbox.max_lng),
        )

    @staticmethod
    def _newest_first(query):
        return query.order_by(Report.created_at.desc(), Report.id.desc())

    # ======================
    # CRUD
    # ======================

    def create_report(
        self,
        *,
        reporter_id: Optional[int],
        title: str,
        description: str,
        category: str,
        latitude: float,
        longitude: float,
        address: Optional[str] = None,
        is_anonymous: bool = False,
    ) -> Report:
        report = Report(
            reporter_id=reporter_id,
            title=title,
            description=description,
            category=_value(category),
            latitude=latitude,
            longitude=longitude,
            address=address,
            is_anonymous=is_anonymous,
            status=ReportStatus.PENDING_APPROVAL.value,
        )
        self.db.add(report)
        self.db.commit()
        self.db.refresh(report)
        return report

    def find_report_by_id(self, report_id: int) -> Optional[Report]:
        return self._base_query().filter(Report.id == report_id).first()

    def find_all_reports(self, status=None, category=None) -> List[Report]:
        query = self._filter(self._base_query(), status, category)
        return self._newest_first(query).all()

    def find_by_assignee_id(self, user_id: int, status=None, category=None) -> List[Report]:
        query = self._base_query().filter(Report.assignee_id == user_id)
        query = self._filter(query, status, category)
        return self._newest_first(query).all()

    def find_by_external_assignee_id(self, user_id: int, status=None) -> List[Report]:
        """Reports delegated to ``user_id``, provided that user is an External Maintainer."""
        query = (
            self._base_query()
            .join(User, User.id == Report.external_assignee_id)
            .join(UserRole, UserRole.user_id == User.id)
            .join(DepartmentRole, DepartmentRole.id == UserRole.department_role_id)
            .join(Role, Role.id == DepartmentRole.role_id)
            .filter(
                Report.external_assignee_id == user_id,
                Role.name == SystemRole.EXTERNAL_MAINTAINER.value,
            )
        )
        query = self._filter(query, status)
        return self._newest_first(query).distinct().all()

    def find_reports_by_address(self, address: str) -> List[Report]:
        pattern = f"%{address.strip()}%"
        query = self._base_query().filter(
            Report.address.isnot(None),
            Report.address.ilike(pattern),
            Report.status.notin_([s.value for s in HIDDEN_FROM_MAP]),
        )
        return self._newest_first(query).all()

    def save(self, report: Report) -> Report:
        """
        Persist changes to a report.

        The version column turns a lost concurrent update into a ConflictError.
        """
        try:
            self.db.add(report)
            self.db.commit()
        except StaleDataError:
            self.db.rollback()
            raise ConflictError(
                f"Report {report.id} was modified by another request. Reload and try again."
            )
        self.db.refresh(report)
        return report

    def count_open_reports_by_assignee(self, user_ids: Iterable[int]) -> Dict[int, int]:
        ids = list(user_ids)
        if not ids:
            return {}
        rows = (
            self.db.query(Report.assignee_id, func.count(Report.id))
            .filter(
                Report.assignee_id.in_(ids),
                Report.status.in_([s.value for s in OPEN_STATUSES]),
            )
            .group_by(Report.assignee_id)
            .all()
        )
        counts = {user_id: 0 for user_id in ids}
        counts.update({assignee_id: int(count) for assignee_id, count in rows})
        return counts

    # ======================
    # MAP
    # ======================

    def _visible_on_map(self, bbox: Optional[BoundingBox], category=None):
        query = self.db.query(Report).filter(
            Report.status.notin_([s.value for s in HIDDEN_FROM_MAP])
        )
        query = self._within_bounding_box(query, bbox)
        return self._filter(query, category=category)

    def get_approved_reports_for_map(
        self,
        bbox: Optional[BoundingBox] = None,
        category=None,
    ) -> List[MapReportResponse]:
        query = self._visible_on_map(bbox, category).options(selectinload(Report.reporter))
        reports = self._newest_first(query).all()
        return [mapper_service.map_report_to_map_response(r) for r in reports]

    def get_clustered_reports(
        self,
        zoom: float,
        bbox: Optional[BoundingBox] = None,
        category=None,
    ) -> List[ClusteredReportResponse]:
        rows = (
            self._visible_on_map(bbox, category)
            .with_entities(Report.id, Report.latitude, Report.longitude)
            .all()
        )
        clusters = cluster_points(rows, grid_size_for_zoom(zoom))
        return [mapper_service.map_cluster_to_response(c) for c in clusters]
