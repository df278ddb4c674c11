# participium/services/report_service.py
"""
Report Service Layer
Lifecycle of citizen reports: submission, approval, assignment,
work transitions, delegation, internal comments and messages.
"""

import logging
import math
from typing import Any, List, Mapping, Optional, Union

from sqlalchemy.orm import Session

from participium.config import settings
from participium.crud import (
    CategoryRoleRepository,
    CommentRepository,
    CompanyRepository,
    MessageRepository,
    PhotoRepository,
    ReportRepository,
    UserRepository,
)
from participium.errors import (
    BadRequestError,
    InsufficientRightsError,
    NotFoundError,
    UnauthorizedError,
)
from participium.models import Report, ReportCategory, ReportStatus, User
from participium.schemas.comment import CommentResponse, MessageResponse
from participium.schemas.report import (
    ClusteredReportResponse,
    CreateReportRequest,
    MapReportResponse,
    ReportResponse,
)
from participium.services import mapper_service, notification_service
from participium.services.geofence import validate_location
from participium.services.photo_validation import validate_photos
from participium.services.staff_balancer import StaffLoadBalancer
from participium.services.storage_service import StorageService
from participium.utils.geo import BoundingBox
from participium.utils.roles import (
    SystemRole,
    capabilities_for,
    get_user_role_names,
    user_has_role,
)
from participium.utils.time_utils import utcnow

logger = logging.getLogger(__name__)


ALLOWED_TRANSITIONS = {
    ReportStatus.PENDING_APPROVAL: {ReportStatus.ASSIGNED, ReportStatus.REJECTED},
    ReportStatus.ASSIGNED: {ReportStatus.IN_PROGRESS, ReportStatus.SUSPENDED, ReportStatus.RESOLVED},
    ReportStatus.IN_PROGRESS: {ReportStatus.SUSPENDED, ReportStatus.RESOLVED},
    ReportStatus.SUSPENDED: {ReportStatus.IN_PROGRESS, ReportStatus.RESOLVED},
    ReportStatus.RESOLVED: set(),
    ReportStatus.REJECTED: set(),
}

# Targets handled by whoever works the report (assignee, delegate, technical staff)
WORK_STATUSES = (ReportStatus.IN_PROGRESS, ReportStatus.SUSPENDED, ReportStatus.RESOLVED)

MAX_TEXT_LENGTH = 2000


def _payload_value(payload: Optional[Mapping[str, Any]], *keys: str):
    if not payload:
        return None
    for key in keys:
        value = payload.get(key)
        if value is not None:
            return value
    return None


def _status_value(status) -> Optional[str]:
    return getattr(status, "value", status) or None


def parse_report_id(report_id) -> int:
    """Accept ints and numeric strings; anything else is a bad request."""
    if isinstance(report_id, bool):
        raise BadRequestError("Invalid report ID")
    if isinstance(report_id, float):
        if math.isnan(report_id) or not report_id.is_integer():
            raise BadRequestError("Invalid report ID")
        return int(report_id)
    try:
        return int(report_id)
    except (TypeError, ValueError):
        raise BadRequestError("Invalid report ID")


def validate_text(content: Optional[str], label: str) -> str:
    """Trim and bound comment / message text."""
    text = (content or "").strip()
    if not text:
        raise BadRequestError(f"{label} content cannot be empty")
    if len(text) > MAX_TEXT_LENGTH:
        raise BadRequestError(f"{label} content cannot exceed {MAX_TEXT_LENGTH} characters")
    return text


class ReportService:
    """
    Collaborators default to database-backed implementations built on ``db``;
    pass replacements to isolate the lifecycle logic in tests.
    """

    def __init__(
        self,
        db: Session,
        *,
        reports: Optional[ReportRepository] = None,
        users: Optional[UserRepository] = None,
        companies: Optional[CompanyRepository] = None,
        category_roles: Optional[CategoryRoleRepository] = None,
        comments: Optional[CommentRepository] = None,
        messages: Optional[MessageRepository] = None,
        photos: Optional[PhotoRepository] = None,
        staff_balancer: Optional[StaffLoadBalancer] = None,
        storage: Optional[StorageService] = None,
        notifications=notification_service,
    ):
        self.db = db
        self.reports = reports or ReportRepository(db)
        self.users = users or UserRepository(db)
        self.companies = companies or CompanyRepository(db)
        self.category_roles = category_roles or CategoryRoleRepository(db)
        self.comments = comments or CommentRepository(db)
        self.messages = messages or MessageRepository(db)
        self.photos = photos or PhotoRepository(db)
        self.staff_balancer = staff_balancer or StaffLoadBalancer(
            db, users=self.users, reports=self.reports
        )
        self.storage = storage or StorageService()
        self.notifications = notifications

    # ======================
    # LOOKUP HELPERS
    # ======================

    def _get_report(self, report_id) -> Report:
        report = self.reports.find_report_by_id(parse_report_id(report_id))
        if not report:
            raise NotFoundError("Report not found")
        return report

    def _get_user(self, user_id: int) -> User:
        user = self.users.find_user_by_id(user_id)
        if not user:
            raise UnauthorizedError("User not found")
        return user

    def _get_user_with_roles(self, user_id: int) -> User:
        user = self._get_user(user_id)
        if not get_user_role_names(user):
            raise UnauthorizedError("User has no roles assigned")
        return user

    def _require_pro(self, user: User, action: str) -> None:
        if not capabilities_for(user).can_approve:
            raise InsufficientRightsError(
                f"Only Municipal Public Relations Officers can {action} reports"
            )

    def _notify(self, user_id: Optional[int], report: Report, content: str) -> None:
        if user_id is None:
            return
        self.notifications.create_notification(
            self.db,
            user_id=user_id,
            report_id=report.id,
            content=content,
        )
        self.db.commit()

    def _notify_status_change(self, report: Report) -> None:
        content = f'Your report "{report.title}" is now {report.status}'
        if report.status == ReportStatus.REJECTED.value and report.rejection_reason:
            content += f": {report.rejection_reason}"
        self._notify(report.reporter_id, report, content)

    # ======================
    # SUBMISSION
    # ======================

    def create_report(self, request: CreateReportRequest, reporter_id: Optional[int]) -> ReportResponse:
        """
        Validate and persist a new report in Pending Approval.

        Photos are uploaded after the row exists; if that fails the stored
        blobs are removed and the original error propagates.
        """
        validate_location(request.location)
        photo_uris = validate_photos(request.photos)

        report = self.reports.create_report(
            reporter_id=reporter_id,
            title=request.title,
            description=request.description,
            category=request.category,
            latitude=request.location.latitude,
            longitude=request.location.longitude,
            address=request.address,
            is_anonymous=request.is_anonymous,
        )

        try:
            urls = [self.storage.upload_photo(uri, report.id) for uri in photo_uris]
            self.photos.save_photos_for_report(report.id, urls)
        except Exception:
            try:
                self.storage.delete_report_photos(report.id)
            except Exception as cleanup_error:
                logger.warning(
                    "Photo cleanup failed for report %s: %s", report.id, cleanup_error
                )
            raise

        self.db.refresh(report)
        logger.info("Report %s created by user %s", report.id, reporter_id)
        return mapper_service.map_report_to_response(report)

    # ======================
    # STATUS TRANSITIONS
    # ======================

    def update_report_status(
        self,
        report_id,
        new_status,
        payload: Optional[Mapping[str, Any]] = None,
        user_id: Optional[int] = None,
    ) -> ReportResponse:
        """Single entry point for status changes, dispatched by target status."""
        try:
            target = ReportStatus(new_status)
        except ValueError:
            raise BadRequestError(f"Invalid status: {new_status}")

        if target is ReportStatus.ASSIGNED:
            category = _payload_value(payload, "category")
            return self.approve_report(report_id, user_id, category)
        if target is ReportStatus.REJECTED:
            reason = _payload_value(payload, "reason", "rejectionReason", "rejection_reason")
            return self.reject_report(report_id, reason, user_id)
        if target in WORK_STATUSES:
            return self._change_work_status(report_id, target, user_id)

        raise BadRequestError(f"Cannot change status to {target.value}")

    def approve_report(self, report_id, user_id: int, category: Optional[str] = None) -> ReportResponse:
        report_id = parse_report_id(report_id)
        user = self._get_user(user_id)
        self._require_pro(user, "approve")

        report = self._get_report(report_id)
        if report.status != ReportStatus.PENDING_APPROVAL.value:
            raise BadRequestError(
                f"Cannot approve report with status {report.status}. "
                "Only reports with status Pending Approval can be approved."
            )

        target_category = report.category
        if category:
            try:
                target_category = ReportCategory(category).value
            except ValueError:
                raise BadRequestError(f"Invalid category: {category}")

        role_id = self.category_roles.find_role_id_by_category(target_category)
        if role_id is None:
            raise BadRequestError(f"No role mapping found for category: {target_category}.")

        staff = self.staff_balancer.find_available_staff_by_role_id(role_id)
        if staff is None:
            raise BadRequestError(
                f"No available technical staff found for category: {target_category}. "
                "All staff members may be overloaded or the role has no assigned users."
            )

        report.category = target_category
        report.status = ReportStatus.ASSIGNED.value
        report.assignee_id = staff.id
        report.rejection_reason = None
        report.updated_at = utcnow()
        self.reports.save(report)

        logger.info("Report %s approved by %s and assigned to %s", report.id, user.id, staff.id)
        self._notify_status_change(report)
        return mapper_service.map_report_to_response(report)

    def reject_report(self, report_id, reason: Optional[str], user_id: int) -> ReportResponse:
        report_id = parse_report_id(report_id)
        user = self._get_user(user_id)
        self._require_pro(user, "reject")

        report = self._get_report(report_id)

        reason = (reason or "").strip()
        if not reason:
            raise BadRequestError("Rejection reason is required")

        if report.status != ReportStatus.PENDING_APPROVAL.value:
            raise BadRequestError(
                f"Cannot reject report with status {report.status}. "
                "Only reports with status Pending Approval can be rejected."
            )

        report.status = ReportStatus.REJECTED.value
        report.rejection_reason = reason
        report.updated_at = utcnow()
        self.reports.save(report)

        logger.info("Report %s rejected by %s", report.id, user.id)
        self._notify_status_change(report)
        return mapper_service.map_report_to_response(report)

    def resolve_report(self, report_id, user_id: int) -> ReportResponse:
        return self._change_work_status(report_id, ReportStatus.RESOLVED, user_id)

    def _can_work(self, user: User, report: Report) -> bool:
        if user.id in (report.assignee_id, report.external_assignee_id):
            return True
        return capabilities_for(user).can_work_reports

    def _change_work_status(self, report_id, target: ReportStatus, user_id: int) -> ReportResponse:
        report = self._get_report(report_id)
        user = self._get_user(user_id)
        if not self._can_work(user, report):
            raise InsufficientRightsError(
                "Only the assigned staff member or technical staff can update this report"
            )

        current = ReportStatus(report.status)
        if target not in ALLOWED_TRANSITIONS[current]:
            raise BadRequestError(f"Cannot change status from {current.value} to {target.value}")

        report.status = target.value
        report.updated_at = utcnow()
        self.reports.save(report)

        logger.info("Report %s moved %s -> %s by %s", report.id, current.value, target.value, user.id)
        self._notify_status_change(report)
        return mapper_service.map_report_to_response(report)

    # ======================
    # DELEGATION
    # ======================

    def assign_to_external_maintainer(
        self,
        report_id,
        external_assignee_id: int,
        user_id: int,
    ) -> ReportResponse:
        report = self._get_report(report_id)
        user = self._get_user(user_id)
        if not capabilities_for(user).can_delegate:
            raise InsufficientRightsError(
                "Only technical staff can assign reports to external maintainers"
            )

        if report.status != ReportStatus.ASSIGNED.value:
            raise BadRequestError(
                f"Cannot assign report with status {report.status} to an external maintainer. "
                "Only reports with status Assigned can be delegated."
            )

        maintainer = self.users.find_user_by_id(external_assignee_id)
        if not maintainer:
            raise NotFoundError("External maintainer not found")
        if not user_has_role(maintainer, SystemRole.EXTERNAL_MAINTAINER.value):
            raise BadRequestError("The selected user is not an External Maintainer")
        if maintainer.company_id is None:
            raise BadRequestError("The selected External Maintainer has no associated company")

        company = self.companies.find_by_id(maintainer.company_id)
        if not company:
            raise BadRequestError("The External Maintainer's company could not be found")
        if company.category != report.category:
            raise BadRequestError(
                f"Company {company.name} handles {company.category} reports, "
                f"not {report.category}"
            )

        report.external_assignee_id = maintainer.id
        report.updated_at = utcnow()
        self.reports.save(report)

        logger.info("Report %s delegated to external maintainer %s by %s", report.id, maintainer.id, user.id)
        self._notify(
            maintainer.id,
            report,
            f'Report "{report.title}" has been assigned to you',
        )
        return mapper_service.map_report_to_response(report)

    # ======================
    # LISTING
    # ======================

    def get_all_reports(self, user_id: int, status=None, category=None) -> List[ReportResponse]:
        user = self._get_user_with_roles(user_id)
        can_view_pending = capabilities_for(user).can_view_pending

        if _status_value(status) == ReportStatus.PENDING_APPROVAL.value and not can_view_pending:
            raise InsufficientRightsError(
                "Only Municipal Public Relations Officers can view pending reports"
            )

        reports = self.reports.find_all_reports(status, category)
        if not status and not can_view_pending:
            reports = [r for r in reports if r.status != ReportStatus.PENDING_APPROVAL.value]
        return [mapper_service.map_report_to_response(r) for r in reports]

    def get_my_assigned_reports(self, user_id: int, status=None, category=None) -> List[ReportResponse]:
        user = self._get_user_with_roles(user_id)
        if user_has_role(user, SystemRole.EXTERNAL_MAINTAINER.value):
            reports = self.reports.find_by_external_assignee_id(user.id, status)
        else:
            reports = self.reports.find_by_assignee_id(user.id, status, category)
        return [mapper_service.map_report_to_response(r) for r in reports]

    def get_assigned_reports_to_external_maintainer(self, external_id: int, status=None) -> List[ReportResponse]:
        reports = self.reports.find_by_external_assignee_id(external_id, status)
        return [mapper_service.map_report_to_response(r) for r in reports]

    def get_report_by_id(self, report_id) -> ReportResponse:
        return mapper_service.map_report_to_response(self._get_report(report_id))

    def get_report_by_address(self, address: Optional[str]) -> List[ReportResponse]:
        if not address or not address.strip():
            raise BadRequestError("Address query parameter is required")
        reports = self.reports.find_reports_by_address(address)
        return [mapper_service.map_report_to_response(r) for r in reports]

    @staticmethod
    def get_all_categories() -> List[str]:
        return [category.value for category in ReportCategory]

    def get_map_reports(
        self,
        zoom: Optional[float] = None,
        bbox: Optional[BoundingBox] = None,
        category=None,
    ) -> Union[List[MapReportResponse], List[ClusteredReportResponse]]:
        """
        Individual reports when zoomed in past the threshold (or zoom unset),
        grid clusters otherwise.
        """
        if zoom is None or zoom > settings.MAP_CLUSTER_ZOOM_THRESHOLD:
            return self.reports.get_approved_reports_for_map(bbox, category)
        return self.reports.get_clustered_reports(zoom, bbox, category)

    # ======================
    # INTERNAL COMMENTS
    # ======================

    def get_internal_comments(self, report_id) -> List[CommentResponse]:
        report = self._get_report(report_id)
        comments = self.comments.get_comments_by_report_id(report.id)
        return [mapper_service.map_comment_to_response(c) for c in comments]

    def add_internal_comment(self, report_id, author_id: int, content: str) -> CommentResponse:
        text = validate_text(content, "Comment")
        report = self._get_report(report_id)
        comment = self.comments.create_comment(report.id, author_id, text)
        return mapper_service.map_comment_to_response(comment)

    def delete_internal_comment(self, report_id, comment_id: int, user_id: int) -> None:
        report = self._get_report(report_id)
        comment = self.comments.find_comment_by_id(comment_id)
        if not comment:
            raise NotFoundError("Comment not found")
        if comment.report_id != report.id:
            raise BadRequestError("Comment does not belong to this report")
        if comment.author_id != user_id:
            raise InsufficientRightsError("You can only delete your own comments")
        self.comments.delete_comment(comment)

    # ======================
    # MESSAGES
    # ======================

    @staticmethod
    def _is_participant(report: Report, user_id: int) -> bool:
        return user_id is not None and user_id in (report.assignee_id, report.reporter_id)

    def send_message(self, report_id, sender_id: int, content: str) -> MessageResponse:
        text = validate_text(content, "Message")
        report = self._get_report(report_id)
        if not self._is_participant(report, sender_id):
            raise InsufficientRightsError(
                "Only the reporter or the assigned staff member can send messages on this report"
            )

        message = self.messages.create_message(report.id, sender_id, text)

        recipient_id = report.assignee_id if sender_id == report.reporter_id else report.reporter_id
        if recipient_id != sender_id:
            self._notify(
                recipient_id,
                report,
                f'You have a new message for report "{report.title}"',
            )
        return mapper_service.map_message_to_response(message)

    def get_messages(self, report_id, user_id: int) -> List[MessageResponse]:
        report = self._get_report(report_id)
        if not self._is_participant(report, user_id):
            raise InsufficientRightsError(
                "Only the reporter or the assigned staff member can read messages on this report"
            )
        messages = self.messages.get_messages_by_report_id(report.id)
        return [mapper_service.map_message_to_response(m) for m in messages]
