from sqlalchemy import Column, Integer, Text, ForeignKey, TIMESTAMP
from sqlalchemy.orm import relationship

from participium.database import Base
from participium.utils.time_utils import utcnow


class Comment(Base):
    """Internal staff comment; never shown to the reporter."""
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    report_id = Column(Integer, ForeignKey("reports.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), default=utcnow, nullable=False)

    report = relationship("Report", back_populates="comments")
    author = relationship("User", lazy="joined")
