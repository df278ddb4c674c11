# participium/services/mapper_service.py
"""
Entity -> response DTO conversion.
"""

from typing import Optional

from participium.errors import AppError
from participium.models import Comment, Message, Notification, Report
from participium.schemas.base import ErrorDTO
from participium.schemas.comment import AuthorResponse, CommentResponse, MessageResponse
from participium.schemas.notification import NotificationResponse
from participium.schemas.report import (
    ClusteredReportResponse,
    Location,
    MapReportResponse,
    PhotoResponse,
    ReportResponse,
)
from participium.utils.geo import Cluster
from participium.utils.roles import get_user_role_names

ANONYMOUS_NAME = "Anonymous"


def _location(report: Report) -> Location:
    return Location(latitude=report.latitude, longitude=report.longitude)


def map_report_to_response(report: Report) -> ReportResponse:
    return ReportResponse(
        id=report.id,
        reporter_id=report.reporter_id,
        title=report.title,
        description=report.description,
        category=report.category,
        location=_location(report),
        address=report.address,
        photos=[PhotoResponse.model_validate(photo) for photo in report.photos],
        is_anonymous=report.is_anonymous,
        status=report.status,
        rejection_reason=report.rejection_reason,
        assignee_id=report.assignee_id,
        external_assignee_id=report.external_assignee_id,
        created_at=report.created_at,
        updated_at=report.updated_at,
    )


def reporter_display_name(report: Report) -> str:
    if report.is_anonymous or report.reporter is None:
        return ANONYMOUS_NAME
    return report.reporter.full_name or report.reporter.username


def map_report_to_map_response(report: Report) -> MapReportResponse:
    return MapReportResponse(
        id=report.id,
        title=report.title,
        category=report.category,
        location=_location(report),
        address=report.address,
        status=report.status,
        reporter_name=reporter_display_name(report),
        is_anonymous=report.is_anonymous,
        created_at=report.created_at,
    )


def map_cluster_to_response(cluster: Cluster) -> ClusteredReportResponse:
    return ClusteredReportResponse(
        cluster_id=cluster.cluster_id,
        location=Location(latitude=cluster.latitude, longitude=cluster.longitude),
        report_count=cluster.report_count,
        report_ids=cluster.report_ids,
    )


def map_author(user) -> Optional[AuthorResponse]:
    if user is None:
        return None
    role_names = get_user_role_names(user)
    return AuthorResponse(
        id=user.id,
        username=user.username,
        first_name=user.first_name,
        last_name=user.last_name,
        role=role_names[0] if role_names else "",
    )


def map_comment_to_response(comment: Comment) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        report_id=comment.report_id,
        author=map_author(comment.author),
        content=comment.content,
        created_at=comment.created_at,
    )


def map_message_to_response(message: Message) -> MessageResponse:
    return MessageResponse(
        id=message.id,
        report_id=message.report_id,
        author=map_author(message.sender),
        content=message.content,
        created_at=message.created_at,
    )


def map_notification_to_response(notification: Notification) -> NotificationResponse:
    return NotificationResponse.model_validate(notification)


def create_error_dto(error: AppError) -> ErrorDTO:
    return ErrorDTO(code=error.code, name=error.name, message=error.message)
