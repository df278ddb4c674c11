from participium.services import notification_service

from helpers import make_report, make_user


def test_notification_service_crud_flow(db_session):
    user = make_user(db_session, "notify")
    report = make_report(db_session, reporter=user)
    notification_service.create_notification(
        db_session, user_id=user.id, report_id=report.id, content="Approved"
    )
    notification_service.create_notification(
        db_session, user_id=user.id, report_id=None, content="Welcome"
    )
    db_session.commit()

    unread = notification_service.list_user_notifications(
        db_session,
        user_id=user.id,
        unread_only=True,
        limit=50,
    )
    assert len(unread) == 2
    assert notification_service.get_unread_count(db_session, user_id=user.id) == 2

    one = notification_service.mark_as_read(
        db_session,
        user_id=user.id,
        notification_id=unread[0].id,
    )
    assert one is not None
    assert one.is_read is True
    assert notification_service.get_unread_count(db_session, user_id=user.id) == 1

    updated = notification_service.mark_all_as_read(db_session, user_id=user.id)
    assert updated == 1
    assert notification_service.get_unread_count(db_session, user_id=user.id) == 0


def test_mark_as_read_ignores_other_users_notifications(db_session):
    owner = make_user(db_session, "owner")
    intruder = make_user(db_session, "intruder")
    notification = notification_service.create_notification(
        db_session, user_id=owner.id, report_id=None, content="Private"
    )
    db_session.commit()

    assert notification_service.mark_as_read(
        db_session, user_id=intruder.id, notification_id=notification.id
    ) is None
    assert notification_service.get_unread_count(db_session, user_id=owner.id) == 1
