# participium/models/__init__.py
# Import models in dependency order
from .company import Company
from .user import Role, Department, DepartmentRole, User, UserRole
from .category_role import CategoryRole
from .report import Report, Photo, ReportCategory, ReportStatus
from .comment import Comment
from .message import Message
from .notification import Notification

__all__ = [
    "Company",
    "Role",
    "Department",
    "DepartmentRole",
    "User",
    "UserRole",
    "CategoryRole",
    "Report",
    "Photo",
    "ReportCategory",
    "ReportStatus",
    "Comment",
    "Message",
    "Notification",
]
