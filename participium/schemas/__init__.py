# participium/schemas/__init__.py

from .base import CamelModel, ErrorDTO
from .auth import LoginRequest, Token, UserResponse
from .report import (
    Location,
    PhotoResponse,
    CreateReportRequest,
    UpdateReportStatusRequest,
    AssignExternalRequest,
    ReportResponse,
    MapReportResponse,
    ClusteredReportResponse,
)
from .comment import (
    AuthorResponse,
    CreateCommentRequest,
    CreateMessageRequest,
    CommentResponse,
    MessageResponse,
)
from .notification import NotificationResponse, UnreadCountResponse

__all__ = [
    "CamelModel",
    "ErrorDTO",
    "LoginRequest",
    "Token",
    "UserResponse",
    "Location",
    "PhotoResponse",
    "CreateReportRequest",
    "UpdateReportStatusRequest",
    "AssignExternalRequest",
    "ReportResponse",
    "MapReportResponse",
    "ClusteredReportResponse",
    "AuthorResponse",
    "CreateCommentRequest",
    "CreateMessageRequest",
    "CommentResponse",
    "MessageResponse",
    "NotificationResponse",
    "UnreadCountResponse",
]
