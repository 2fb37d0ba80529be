"""
Models package initialization
"""

from .user import User, UserConnection
from .connection import Connection
from .message import Message
from .notification import Notification
from .post_comment import PostComment
from .post import Post, PostLike

__all__ = [
    "User", "UserConnection", "Connection", "Message", "Notification",
    "Post", "PostLike", "PostComment",
]
