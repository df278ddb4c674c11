# participium/schemas/report.py
"""
Report request/response models.
Field names are snake_case in Python and camelCase in JSON.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import AliasChoices, Field

from participium.models.report import ReportCategory, ReportStatus
from participium.schemas.base import CamelModel


# ======================
# SHARED
# ======================

class Location(CamelModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class PhotoResponse(CamelModel):
    id: int
    report_id: int
    storage_url: str
    created_at: Optional[datetime] = None


# ======================
# REQUESTS
# ======================

class CreateReportRequest(CamelModel):
    """Citizen submission. Location and photos are checked by the service."""
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=5000)
    category: ReportCategory
    location: Optional[Location] = None
    address: Optional[str] = Field(None, max_length=500)
    photos: Any = None
    is_anonymous: bool = False


class UpdateReportStatusRequest(CamelModel):
    new_status: ReportStatus = Field(
        ...,
        validation_alias=AliasChoices("newStatus", "status", "new_status"),
    )
    # Approval: optional category override
    category: Optional[str] = None
    # Rejection
    reason: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("reason", "rejectionReason", "rejection_reason"),
    )


class AssignExternalRequest(CamelModel):
    external_assignee_id: int


# ======================
# RESPONSES
# ======================

class ReportResponse(CamelModel):
    id: int
    reporter_id: Optional[int] = None
    title: str
    description: str
    category: ReportCategory
    location: Location
    address: Optional[str] = None
    photos: List[PhotoResponse] = Field(default_factory=list)
    is_anonymous: bool
    status: ReportStatus
    rejection_reason: Optional[str] = None
    assignee_id: Optional[int] = None
    external_assignee_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MapReportResponse(CamelModel):
    id: int
    title: str
    category: ReportCategory
    location: Location
    address: Optional[str] = None
    status: ReportStatus
    reporter_name: str
    is_anonymous: bool
    created_at: Optional[datetime] = None


class ClusteredReportResponse(CamelModel):
    cluster_id: str
    location: Location
    report_count: int
    report_ids: List[int]
