"""Repositories. Each takes a SQLAlchemy Session in its constructor."""

from .category_role import CategoryRoleRepository
from .comment import CommentRepository
from .company import CompanyRepository
from .message import MessageRepository
from .photo import PhotoRepository
from .report import ReportRepository
from .user import UserRepository

__all__ = [
    "CategoryRoleRepository",
    "CommentRepository",
    "CompanyRepository",
    "MessageRepository",
    "PhotoRepository",
    "ReportRepository",
    "UserRepository",
]
