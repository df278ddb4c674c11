"""Shared builders for test data."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from participium import models
from participium.database import Base
from participium.models.report import ReportCategory, ReportStatus

# 1x1 transparent PNG
PNG_DATA_URI = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)

PIAZZA_CASTELLO = (45.0703393, 7.6869005)
MOLE_ANTONELLIANA = (45.0692403, 7.6932941)
PORTA_NUOVA = (45.0625748, 7.6782069)
MILAN = (45.464, 9.19)
SUPERGA = (45.0804, 7.7672)
MIRAFIORI_SUD = (45.0150, 7.6250)

PRO = "Municipal Public Relations Officer"
CITIZEN = "Citizen"
EXTERNAL = "External Maintainer"
ROAD_TECH = "Road Maintenance Technician"
TECH_MANAGER = "Technical Manager"


def build_session(url: str = "sqlite://"):
    if url == "sqlite://":
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(url, connect_args={"check_same_thread": False})
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    return SessionLocal()


def _department_role(db, role_name: str, department_name: str) -> models.DepartmentRole:
    role = db.query(models.Role).filter(models.Role.name == role_name).first()
    if not role:
        role = models.Role(name=role_name)
        db.add(role)
        db.flush()
    department = db.query(models.Department).filter(models.Department.name == department_name).first()
    if not department:
        department = models.Department(name=department_name)
        db.add(department)
        db.flush()
    link = db.query(models.DepartmentRole).filter(
        models.DepartmentRole.role_id == role.id,
        models.DepartmentRole.department_id == department.id,
    ).first()
    if not link:
        link = models.DepartmentRole(role_id=role.id, department_id=department.id)
        db.add(link)
        db.flush()
    return link


def make_user(
    db,
    username: str,
    role_name: Optional[str] = CITIZEN,
    *,
    department: str = "Organization",
    company: Optional[models.Company] = None,
    is_active: bool = True,
) -> models.User:
    user = models.User(
        username=username,
        first_name=username.title(),
        last_name="Tester",
        email=f"{username}@participium.test",
        password_hash="hash",
        company_id=company.id if company else None,
        is_active=is_active,
    )
    db.add(user)
    db.flush()
    if role_name:
        link = _department_role(db, role_name, department)
        db.add(models.UserRole(user_id=user.id, department_role_id=link.id))
    db.commit()
    db.refresh(user)
    return user


def make_company(db, name: str, category: ReportCategory) -> models.Company:
    company = models.Company(name=name, category=category.value)
    db.add(company)
    db.commit()
    db.refresh(company)
    return company


def map_category(db, category: ReportCategory, role_name: str) -> models.CategoryRole:
    link = _department_role(db, role_name, "Public Works Department")
    mapping = models.CategoryRole(category=category.value, role_id=link.role_id)
    db.add(mapping)
    db.commit()
    return mapping


def make_report(
    db,
    *,
    reporter: Optional[models.User] = None,
    title: str = "Pothole",
    category: ReportCategory = ReportCategory.ROADS,
    status: ReportStatus = ReportStatus.PENDING_APPROVAL,
    location=PIAZZA_CASTELLO,
    address: Optional[str] = None,
    is_anonymous: bool = False,
    assignee: Optional[models.User] = None,
    external_assignee: Optional[models.User] = None,
    rejection_reason: Optional[str] = None,
) -> models.Report:
    report = models.Report(
        reporter_id=reporter.id if reporter else None,
        title=title,
        description=f"{title} description",
        category=category.value,
        latitude=location[0],
        longitude=location[1],
        address=address,
        is_anonymous=is_anonymous,
        status=status.value,
        assignee_id=assignee.id if assignee else None,
        external_assignee_id=external_assignee.id if external_assignee else None,
        rejection_reason=rejection_reason,
    )
    db.add(report)
    db.commit()
    db.refresh(report)
    return report
