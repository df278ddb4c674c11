from typing import List

from sqlalchemy.orm import Session

from participium.models import Message


class MessageRepository:
    def __init__(self, db: Session):
        self.db = db

    def create_message(self, report_id: int, sender_id: int, content: str) -> Message:
        message = Message(report_id=report_id, sender_id=sender_id, content=content)
        self.db.add(message)
        self.db.commit()
        self.db.refresh(message)
        return message

    def get_messages_by_report_id(self, report_id: int) -> List[Message]:
        return (
            self.db.query(Message)
            .filter(Message.report_id == report_id)
            .order_by(Message.created_at.asc(), Message.id.asc())
            .all()
        )
