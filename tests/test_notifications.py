import pytest
from sqlalchemy import select
from proconnect.crud import notification as notif_crud
from proconnect.crud.connection import send_connection_request
from proconnect.crud.message import send_message
from proconnect.core.events import ConnectionRequested, DomainEvent
from proconnect.core.exceptions import NotFoundError, UnauthorizedError
from proconnect.models.notification import Notification
from proconnect.schemas.enums import NotificationType, RelatedModel


async def _read_flag(db_session, notif_id):
    result = await db_session.execute(select(Notification.read).where(Notification.id == notif_id))
    return result.scalar_one_or_none()


@pytest.mark.asyncio
async def test_record_event_only_stages_notification(db_session, alice, bob):
    bob_id = bob.id
    notification = await notif_crud.record_event(db_session, ConnectionRequested(
        actor_id=alice.id,
        actor_name=alice.name,
        connection_id="conn-1",
        recipient_id=bob_id,
    ))

    assert notification.type == NotificationType.CONNECTION_REQUEST.value
    assert notification.related_model == RelatedModel.CONNECTION.value
    assert notification.content == "Alice sent you a connection request"

    # Nothing is durable until the publisher commits
    await db_session.rollback()
    assert await notif_crud.get_unread_notification_count(db_session, bob_id) == 0


@pytest.mark.asyncio
async def test_record_event_rejects_unknown_events(db_session, alice):
    with pytest.raises(TypeError):
        await notif_crud.record_event(db_session, DomainEvent(actor_id=alice.id, actor_name=alice.name))


@pytest.mark.asyncio
async def test_notifications_newest_first_with_sender(db_session, alice, bob, carol):
    await send_connection_request(db_session, alice, bob.id)
    await send_message(db_session, carol, bob.id, "hello")

    notifications = await notif_crud.get_user_notifications(db_session, bob.id)

    assert [n.type for n in notifications] == [
        NotificationType.MESSAGE.value,
        NotificationType.CONNECTION_REQUEST.value,
    ]
    assert notifications[0].sender.name == "Carol"
    assert await notif_crud.get_unread_notification_count(db_session, bob.id) == 2


@pytest.mark.asyncio
async def test_mark_as_read(db_session, alice, bob):
    await send_connection_request(db_session, alice, bob.id)
    [notification] = await notif_crud.get_user_notifications(db_session, bob.id)

    updated = await notif_crud.mark_as_read(db_session, notification.id, bob.id)

    assert updated.read is True
    assert await _read_flag(db_session, notification.id) is True


@pytest.mark.asyncio
async def test_mark_as_read_checks_owner(db_session, alice, bob):
    await send_connection_request(db_session, alice, bob.id)
    [notification] = await notif_crud.get_user_notifications(db_session, bob.id)

    with pytest.raises(UnauthorizedError):
        await notif_crud.mark_as_read(db_session, notification.id, alice.id)
    with pytest.raises(NotFoundError):
        await notif_crud.mark_as_read(db_session, "missing-notification", bob.id)

    assert await _read_flag(db_session, notification.id) is False


@pytest.mark.asyncio
async def test_mark_all_as_read(db_session, alice, bob, carol):
    await send_connection_request(db_session, alice, bob.id)
    await send_connection_request(db_session, carol, bob.id)
    await send_message(db_session, bob, alice.id, "hi")

    assert await notif_crud.mark_all_as_read(db_session, bob.id) == 2

    assert await notif_crud.get_unread_notification_count(db_session, bob.id) == 0
    # Other users' notifications are untouched
    assert await notif_crud.get_unread_notification_count(db_session, alice.id) == 1


@pytest.mark.asyncio
async def test_delete_notification(db_session, alice, bob):
    await send_connection_request(db_session, alice, bob.id)
    [notification] = await notif_crud.get_user_notifications(db_session, bob.id)
    notif_id = notification.id

    with pytest.raises(UnauthorizedError):
        await notif_crud.delete_notification(db_session, notif_id, alice.id)

    await notif_crud.delete_notification(db_session, notif_id, bob.id)

    assert await _read_flag(db_session, notif_id) is None
    with pytest.raises(NotFoundError):
        await notif_crud.delete_notification(db_session, notif_id, bob.id)
