"""
Domain events published by the connection lifecycle and messaging components.

Publishers hand an event to `proconnect.crud.notification.record_event` inside
their own unit of work; the resulting notification is committed together with
the change that caused it.
"""

from pydantic import BaseModel


class DomainEvent(BaseModel):
    actor_id: str
    actor_name: str


class ConnectionRequested(DomainEvent):
    connection_id: str
    recipient_id: str


class ConnectionAccepted(DomainEvent):
    connection_id: str
    requester_id: str


class MessageSent(DomainEvent):
    message_id: str
    recipient_id: str
    content: str
