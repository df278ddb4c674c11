# participium/models/report.py
import enum

from sqlalchemy import Column, Integer, String, Text, Boolean, Float, ForeignKey, TIMESTAMP
from sqlalchemy.orm import relationship

from participium.database import Base
from participium.utils.time_utils import utcnow


class ReportCategory(str, enum.Enum):
    WATER_SUPPLY = "Water Supply - Drinking Water"
    ARCHITECTURAL_BARRIERS = "Architectural Barriers"
    SEWER_SYSTEM = "Sewer System"
    PUBLIC_LIGHTING = "Public Lighting"
    WASTE = "Waste"
    ROAD_SIGNS = "Road Signs and Traffic Lights"
    ROADS = "Roads and Urban Furnishings"
    GREEN_AREAS = "Public Green Areas and Playgrounds"
    OTHER = "Other"


class ReportStatus(str, enum.Enum):
    PENDING_APPROVAL = "Pending Approval"
    ASSIGNED = "Assigned"
    IN_PROGRESS = "In Progress"
    SUSPENDED = "Suspended"
    REJECTED = "Rejected"
    RESOLVED = "Resolved"


# Statuses that count towards a staff member's workload
OPEN_STATUSES = (ReportStatus.ASSIGNED, ReportStatus.IN_PROGRESS, ReportStatus.SUSPENDED)

# Statuses hidden from the public map
HIDDEN_FROM_MAP = (ReportStatus.PENDING_APPROVAL, ReportStatus.REJECTED)


class Report(Base):
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, index=True)
    reporter_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(60), nullable=False, index=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    address = Column(String(500), nullable=True)
    is_anonymous = Column(Boolean, default=False, nullable=False)
    status = Column(String(30), nullable=False, default=ReportStatus.PENDING_APPROVAL.value, index=True)
    rejection_reason = Column(Text, nullable=True)
    assignee_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    external_assignee_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    version = Column(Integer, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(TIMESTAMP(timezone=True), default=utcnow, nullable=False)

    reporter = relationship("User", foreign_keys=[reporter_id])
    assignee = relationship("User", foreign_keys=[assignee_id])
    external_assignee = relationship("User", foreign_keys=[external_assignee_id])
    photos = relationship(
        "Photo",
        back_populates="report",
        cascade="all, delete-orphan",
        order_by="Photo.id",
        lazy="selectin",
    )
    comments = relationship("Comment", back_populates="report", cascade="all, delete-orphan")
    messages = relationship("Message", back_populates="report", cascade="all, delete-orphan")

    # A losing concurrent UPDATE matches zero rows and raises StaleDataError
    __mapper_args__ = {"version_id_col": version}

class Photo(Base):
    __tablename__ = "photos"

    id = Column(Integer, primary_key=True, index=True)
    report_id = Column(Integer, ForeignKey("reports.id", ondelete="CASCADE"), nullable=False, index=True)
    storage_url = Column(Text, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), default=utcnow, nullable=False)

    report = relationship("Report", back_populates="photos")
