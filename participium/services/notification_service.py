from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from participium.models.notification import Notification

logger = logging.getLogger(__name__)


def list_user_notifications(
    db: Session,
    *,
    user_id: int,
    unread_only: bool = False,
    limit: int = 50,
) -> List[Notification]:
    query = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        query = query.filter(Notification.is_read.is_(False))
    return query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit).all()


def mark_as_read(
    db: Session,
    *,
    user_id: int,
    notification_id: int,
) -> Optional[Notification]:
    notification = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.user_id == user_id,
    ).first()
    if not notification:
        return None
    notification.is_read = True
    db.commit()
    return notification


def mark_all_as_read(db: Session, *, user_id: int) -> int:
    updated = db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.is_read.is_(False),
    ).update({"is_read": True}, synchronize_session=False)
    db.commit()
    return int(updated)


def get_unread_count(db: Session, *, user_id: int) -> int:
    return db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.is_read.is_(False),
    ).count()


def create_notification(
    db: Session,
    *,
    user_id: int,
    report_id: Optional[int],
    content: str,
) -> Notification:
    """Add an in-app notification; the caller commits."""
    notification = Notification(
        user_id=user_id,
        report_id=report_id,
        content=content,
    )
    db.add(notification)
    db.flush()
    logger.debug("Notification queued for user %s (report_id=%s)", user_id, report_id)
    return notification
