from typing import List, Optional

from sqlalchemy.orm import Session

from participium.models import DepartmentRole, User, UserRole


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_user_by_id(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def find_user_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def find_users_by_role_id(self, role_id: int, active_only: bool = True) -> List[User]:
        """Users holding ``role_id`` in any department."""
        query = (
            self.db.query(User)
            .join(UserRole, UserRole.user_id == User.id)
            .join(DepartmentRole, DepartmentRole.id == UserRole.department_role_id)
            .filter(DepartmentRole.role_id == role_id)
        )
        if active_only:
            query = query.filter(User.is_active.is_(True))
        return query.order_by(User.id).distinct().all()
