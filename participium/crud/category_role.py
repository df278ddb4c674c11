# participium/crud/category_role.py
"""
Category -> responsible role mapping.
"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from participium.models import CategoryRole


def _value(category) -> str:
    return getattr(category, "value", category)


class CategoryRoleRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_role_id_by_category(self, category) -> Optional[int]:
        """
        Find the technical role responsible for a report category.

        Returns:
            Role ID or None when the category has no mapping
        """
        row = (
            self.db.query(CategoryRole.role_id)
            .filter(CategoryRole.category == _value(category))
            .first()
        )
        return row[0] if row else None

    def find_mapping_by_category(self, category) -> Optional[CategoryRole]:
        return (
            self.db.query(CategoryRole)
            .options(joinedload(CategoryRole.role))
            .filter(CategoryRole.category == _value(category))
            .first()
        )
