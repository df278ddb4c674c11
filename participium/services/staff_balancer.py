import logging
from typing import Optional

from sqlalchemy.orm import Session

from participium.config import settings
from participium.crud import ReportRepository, UserRepository
from participium.models import User

logger = logging.getLogger(__name__)


class StaffLoadBalancer:
    """Pick the least loaded active member of a technical role."""

    def __init__(
        self,
        db: Session,
        *,
        users: Optional[UserRepository] = None,
        reports: Optional[ReportRepository] = None,
        max_open_reports: Optional[int] = None,
    ):
        self.users = users or UserRepository(db)
        self.reports = reports or ReportRepository(db)
        self.max_open_reports = (
            max_open_reports if max_open_reports is not None else settings.MAX_OPEN_REPORTS_PER_STAFF
        )

    def find_available_staff_by_role_id(self, role_id: int) -> Optional[User]:
        candidates = self.users.find_users_by_role_id(role_id)
        if not candidates:
            return None

        loads = self.reports.count_open_reports_by_assignee(user.id for user in candidates)
        if self.max_open_reports is not None:
            candidates = [u for u in candidates if loads.get(u.id, 0) < self.max_open_reports]
            if not candidates:
                logger.info("All staff for role %s are at capacity", role_id)
                return None

        return min(candidates, key=lambda u: (loads.get(u.id, 0), u.id))
