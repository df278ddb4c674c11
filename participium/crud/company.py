from typing import Optional

from sqlalchemy.orm import Session

from participium.models import Company


class CompanyRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, company_id: int) -> Optional[Company]:
        return self.db.query(Company).filter(Company.id == company_id).first()
