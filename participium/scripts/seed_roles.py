"""
Seed the role catalog and the category -> role mapping.

Idempotent: existing rows are left alone, missing ones are created.
Set ADMIN_USERNAME and ADMIN_PASSWORD (optionally ADMIN_EMAIL) to also
create the first Administrator account.

    python -m participium.scripts.seed_roles
"""

import logging
import os
import sys
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from participium import models
from participium.crud import CategoryRoleRepository
from participium.database import Base, SessionLocal, engine
from participium.logging_config import setup_logging
from participium.models.report import ReportCategory
from participium.utils.roles import SystemRole
from participium.utils.security import get_password_hash

logger = logging.getLogger(__name__)


ORGANIZATION = "Organization"
EXTERNAL_PROVIDERS = "External Service Providers"

# department -> roles held inside it
DEPARTMENT_ROLES: Dict[str, List[str]] = {
    ORGANIZATION: [
        SystemRole.ADMINISTRATOR.value,
        SystemRole.CITIZEN.value,
        SystemRole.PUBLIC_RELATIONS_OFFICER.value,
    ],
    EXTERNAL_PROVIDERS: [SystemRole.EXTERNAL_MAINTAINER.value],
    "Water and Sewer Department": ["Water Network Technician", "Sewer System Technician"],
    "Urban Planning Department": ["Accessibility Technician"],
    "Public Lighting Department": ["Public Lighting Technician"],
    "Environment Department": ["Waste Management Technician", "Parks Maintenance Technician"],
    "Mobility and Traffic Department": ["Traffic Systems Technician"],
    "Public Works Department": [
        SystemRole.DEPARTMENT_DIRECTOR.value,
        "Road Maintenance Technician",
        "Technical Manager",
        "Technical Assistant",
    ],
}

CATEGORY_ROLES: List[Tuple[ReportCategory, str]] = [
    (ReportCategory.WATER_SUPPLY, "Water Network Technician"),
    (ReportCategory.ARCHITECTURAL_BARRIERS, "Accessibility Technician"),
    (ReportCategory.SEWER_SYSTEM, "Sewer System Technician"),
    (ReportCategory.PUBLIC_LIGHTING, "Public Lighting Technician"),
    (ReportCategory.WASTE, "Waste Management Technician"),
    (ReportCategory.ROAD_SIGNS, "Traffic Systems Technician"),
    (ReportCategory.ROADS, "Road Maintenance Technician"),
    (ReportCategory.GREEN_AREAS, "Parks Maintenance Technician"),
    (ReportCategory.OTHER, "Technical Assistant"),
]


def _get_or_create(db: Session, model, **fields):
    instance = db.query(model).filter_by(**fields).first()
    if instance:
        return instance, False
    instance = model(**fields)
    db.add(instance)
    db.flush()
    return instance, True


def seed(db: Session) -> Dict[str, int]:
    created = {"roles": 0, "departments": 0, "department_roles": 0, "category_roles": 0}
    roles_by_name = {}

    for department_name, role_names in DEPARTMENT_ROLES.items():
        department, is_new = _get_or_create(db, models.Department, name=department_name)
        created["departments"] += int(is_new)
        for role_name in role_names:
            role, is_new = _get_or_create(db, models.Role, name=role_name)
            created["roles"] += int(is_new)
            roles_by_name[role_name] = role
            _, is_new = _get_or_create(
                db, models.DepartmentRole, department_id=department.id, role_id=role.id
            )
            created["department_roles"] += int(is_new)

    mappings = CategoryRoleRepository(db)
    for category, role_name in CATEGORY_ROLES:
        if mappings.find_mapping_by_category(category):
            continue
        db.add(models.CategoryRole(category=category.value, role_id=roles_by_name[role_name].id))
        created["category_roles"] += 1

    db.commit()
    return created


def seed_admin(db: Session, username: str, password: str, email: str) -> Optional[models.User]:
    """Create the first Administrator account; None if the username is taken."""
    if len(password) < 8:
        raise ValueError("ADMIN_PASSWORD must be at least 8 characters.")
    if db.query(models.User).filter(models.User.username == username).first():
        return None

    link = (
        db.query(models.DepartmentRole)
        .join(models.Role, models.Role.id == models.DepartmentRole.role_id)
        .filter(models.Role.name == SystemRole.ADMINISTRATOR.value)
        .first()
    )
    if link is None:
        raise ValueError("Administrator role missing; run the role seed first.")

    user = models.User(
        username=username,
        first_name="System",
        last_name="Administrator",
        email=email,
        password_hash=get_password_hash(password),
        is_active=True,
    )
    db.add(user)
    db.flush()
    db.add(models.UserRole(user_id=user.id, department_role_id=link.id))
    db.commit()
    return user


def main() -> int:
    setup_logging()
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        created = seed(db)
        logger.info("Seed complete: %s", created)

        username = os.getenv("ADMIN_USERNAME", "").strip()
        password = os.getenv("ADMIN_PASSWORD", "")
        if username and password:
            email = os.getenv("ADMIN_EMAIL", f"{username}@participium.local").strip()
            if seed_admin(db, username, password, email):
                logger.info("Administrator %s created", username)
            else:
                logger.info("Administrator %s already exists", username)
        return 0
    except Exception:
        db.rollback()
        logger.exception("Seeding failed")
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
