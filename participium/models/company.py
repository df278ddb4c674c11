from sqlalchemy import Column, Integer, String

from participium.database import Base


class Company(Base):
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), unique=True, nullable=False)
    # One ReportCategory value; reports of this category may be delegated to the company
    category = Column(String(60), nullable=False)
