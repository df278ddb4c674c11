from typing import Callable

from fastapi import Depends
from sqlalchemy.orm import Session

from participium.database import get_db
from participium.errors import InsufficientRightsError
from participium.models import User
from participium.services.report_service import ReportService
from participium.utils.roles import capabilities_for
from participium.utils.security import get_current_user


def get_report_service(db: Session = Depends(get_db)) -> ReportService:
    return ReportService(db)


def require_capability(capability: str, message: str) -> Callable[..., User]:
    """Dependency factory: the current user's roles must grant ``capability``."""

    def dependency(current_user: User = Depends(get_current_user)) -> User:
        if not getattr(capabilities_for(current_user), capability):
            raise InsufficientRightsError(message)
        return current_user

    return dependency


require_internal_staff = require_capability(
    "can_comment_internally",
    "Internal comments are restricted to municipality and maintenance staff",
)

require_delegation_viewer = require_capability(
    "can_view_delegations",
    "Access restricted to technical staff and public relations officers",
)
