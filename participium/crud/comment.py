from typing import List, Optional

from sqlalchemy.orm import Session

from participium.models import Comment


class CommentRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_comments_by_report_id(self, report_id: int) -> List[Comment]:
        return (
            self.db.query(Comment)
            .filter(Comment.report_id == report_id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
            .all()
        )

    def find_comment_by_id(self, comment_id: int) -> Optional[Comment]:
        return self.db.query(Comment).filter(Comment.id == comment_id).first()

    def create_comment(self, report_id: int, author_id: int, content: str) -> Comment:
        comment = Comment(report_id=report_id, author_id=author_id, content=content)
        self.db.add(comment)
        self.db.commit()
        self.db.refresh(comment)
        return comment

    def delete_comment(self, comment: Comment) -> None:
        self.db.delete(comment)
        self.db.commit()
