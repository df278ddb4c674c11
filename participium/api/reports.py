from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query, Response, status

from participium.api.deps import (
    get_report_service,
    require_delegation_viewer,
    require_internal_staff,
)
from participium.models import User
from participium.models.report import ReportCategory, ReportStatus
from participium.schemas.comment import (
    CommentResponse,
    CreateCommentRequest,
    CreateMessageRequest,
    MessageResponse,
)
from participium.schemas.report import (
    AssignExternalRequest,
    ClusteredReportResponse,
    CreateReportRequest,
    MapReportResponse,
    ReportResponse,
    UpdateReportStatusRequest,
)
from participium.services.geofence import validate_bounding_box, validate_zoom_level
from participium.services.report_service import ReportService
from participium.utils.roles import SystemRole
from participium.utils.security import get_current_user, require_roles

router = APIRouter(prefix="/api/reports", tags=["Reports"])


# ======================
# CATALOG / MAP
# ======================

@router.get("/categories", response_model=List[str])
def get_categories(service: ReportService = Depends(get_report_service)):
    return service.get_all_categories()


@router.get(
    "/map",
    response_model=Union[List[MapReportResponse], List[ClusteredReportResponse]],
)
def get_map_reports(
    zoom: Optional[float] = Query(None),
    min_lat: Optional[float] = Query(None, alias="minLat"),
    max_lat: Optional[float] = Query(None, alias="maxLat"),
    min_lng: Optional[float] = Query(None, alias="minLng"),
    max_lng: Optional[float] = Query(None, alias="maxLng"),
    category: Optional[ReportCategory] = Query(None),
    current_user: User = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
):
    """Individual reports when zoomed in (or zoom omitted), grid clusters otherwise."""
    zoom = validate_zoom_level(zoom)
    bbox = validate_bounding_box(min_lat, max_lat, min_lng, max_lng)
    return service.get_map_reports(zoom=zoom, bbox=bbox, category=category)


@router.get("/search", response_model=List[ReportResponse])
def search_reports_by_address(
    address: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
):
    return service.get_report_by_address(address)


# ======================
# SUBMISSION / LISTING
# ======================

@router.post("/", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
def create_report(
    request: CreateReportRequest,
    current_user: User = Depends(require_roles(SystemRole.CITIZEN.value)),
    service: ReportService = Depends(get_report_service),
):
    return service.create_report(request, current_user.id)


@router.get("/", response_model=List[ReportResponse])
def get_reports(
    report_status: Optional[ReportStatus] = Query(None, alias="status"),
    category: Optional[ReportCategory] = Query(None),
    current_user: User = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
):
    return service.get_all_reports(current_user.id, report_status, category)


@router.get("/assigned/me", response_model=List[ReportResponse])
def get_my_assigned_reports(
    report_status: Optional[ReportStatus] = Query(None, alias="status"),
    category: Optional[ReportCategory] = Query(None),
    current_user: User = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
):
    return service.get_my_assigned_reports(current_user.id, report_status, category)


@router.get("/assigned/external/{external_id}", response_model=List[ReportResponse])
def get_reports_assigned_to_external_maintainer(
    external_id: int,
    report_status: Optional[ReportStatus] = Query(None, alias="status"),
    current_user: User = Depends(require_delegation_viewer),
    service: ReportService = Depends(get_report_service),
):
    return service.get_assigned_reports_to_external_maintainer(external_id, report_status)


@router.get("/{report_id}", response_model=ReportResponse)
def get_report(
    report_id: int,
    current_user: User = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
):
    return service.get_report_by_id(report_id)


# ======================
# LIFECYCLE
# ======================

@router.put("/{report_id}/status", response_model=ReportResponse)
def update_report_status(
    report_id: int,
    body: UpdateReportStatusRequest,
    current_user: User = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
):
    payload = {"category": body.category, "reason": body.reason}
    return service.update_report_status(report_id, body.new_status, payload, current_user.id)


@router.patch("/{report_id}/assign-external", response_model=ReportResponse)
def assign_to_external_maintainer(
    report_id: int,
    body: AssignExternalRequest,
    current_user: User = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
):
    return service.assign_to_external_maintainer(report_id, body.external_assignee_id, current_user.id)


# ======================
# INTERNAL COMMENTS
# ======================

@router.get("/{report_id}/internal-comments", response_model=List[CommentResponse])
def get_internal_comments(
    report_id: int,
    current_user: User = Depends(require_internal_staff),
    service: ReportService = Depends(get_report_service),
):
    return service.get_internal_comments(report_id)


@router.post(
    "/{report_id}/internal-comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_internal_comment(
    report_id: int,
    body: CreateCommentRequest,
    current_user: User = Depends(require_internal_staff),
    service: ReportService = Depends(get_report_service),
):
    return service.add_internal_comment(report_id, current_user.id, body.content)


@router.delete(
    "/{report_id}/internal-comments/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_internal_comment(
    report_id: int,
    comment_id: int,
    current_user: User = Depends(require_internal_staff),
    service: ReportService = Depends(get_report_service),
):
    service.delete_internal_comment(report_id, comment_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ======================
# MESSAGES
# ======================

@router.get("/{report_id}/messages", response_model=List[MessageResponse])
def get_messages(
    report_id: int,
    current_user: User = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
):
    return service.get_messages(report_id, current_user.id)


@router.post(
    "/{report_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
def send_message(
    report_id: int,
    body: CreateMessageRequest,
    current_user: User = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
):
    return service.send_message(report_id, current_user.id, body.content)
