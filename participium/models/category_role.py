from sqlalchemy import Column, Integer, String, ForeignKey, TIMESTAMP
from sqlalchemy.orm import relationship

from participium.database import Base
from participium.utils.time_utils import utcnow


class CategoryRole(Base):
    """Which technical role handles reports of a given category."""
    __tablename__ = "category_roles"

    id = Column(Integer, primary_key=True, index=True)
    category = Column(String(60), unique=True, nullable=False)
    role_id = Column(Integer, ForeignKey("roles.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), default=utcnow)

    role = relationship("Role")
