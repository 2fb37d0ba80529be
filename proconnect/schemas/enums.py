"""
Enumeration definitions for fixed options stored as plain strings.
"""

from enum import Enum


class ConnectionStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"


class NotificationType(str, Enum):
    CONNECTION_REQUEST = "connection_request"
    CONNECTION_ACCEPTED = "connection_accepted"
    MESSAGE = "message"


class RelatedModel(str, Enum):
    """Entity a notification's related_id points at"""
    CONNECTION = "Connection"
    MESSAGE = "Message"
