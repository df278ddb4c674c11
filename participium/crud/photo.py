from typing import List

from sqlalchemy.orm import Session

from participium.models import Photo


class PhotoRepository:
    def __init__(self, db: Session):
        self.db = db

    def save_photos_for_report(self, report_id: int, storage_urls: List[str]) -> List[Photo]:
        photos = [Photo(report_id=report_id, storage_url=url) for url in storage_urls]
        try:
            self.db.add_all(photos)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return photos

    def get_photos_by_report_id(self, report_id: int) -> List[Photo]:
        return (
            self.db.query(Photo)
            .filter(Photo.report_id == report_id)
            .order_by(Photo.id)
            .all()
        )
