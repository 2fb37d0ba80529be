"""
Machine-readable error codes returned alongside the human readable `detail`.
"""

# Generic
NOT_FOUND_ERROR = "NOT_FOUND"
NOT_AUTHORIZED = "NOT_AUTHORIZED"
INVALID_OPERATION = "INVALID_OPERATION"
CONFLICT_ERROR = "CONFLICT"
DATABASE_ERROR = "DATABASE_ERROR"

# Users / auth
USER_NOT_FOUND = "USER_NOT_FOUND"
USER_ALREADY_EXISTS = "USER_ALREADY_EXISTS"
INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
ACCOUNT_DEACTIVATED = "ACCOUNT_DEACTIVATED"

# Connections
CONNECTION_NOT_FOUND = "CONNECTION_NOT_FOUND"
CONNECTION_SELF_REQUEST = "CONNECTION_SELF_REQUEST"
CONNECTION_ALREADY_EXISTS = "CONNECTION_ALREADY_EXISTS"
CONNECTION_NOT_PENDING = "CONNECTION_NOT_PENDING"
CONNECTION_PERMISSION_DENIED = "CONNECTION_PERMISSION_DENIED"

# Messages
RECIPIENT_NOT_FOUND = "RECIPIENT_NOT_FOUND"
MESSAGE_SELF_SEND = "MESSAGE_SELF_SEND"

# Notifications
NOTIFICATION_NOT_FOUND = "NOTIFICATION_NOT_FOUND"
NOTIFICATION_PERMISSION_DENIED = "NOTIFICATION_PERMISSION_DENIED"

# Posts / comments
POST_NOT_FOUND = "POST_NOT_FOUND"
POST_UPDATE_PERMISSION_DENIED = "POST_UPDATE_PERMISSION_DENIED"
POST_DELETE_PERMISSION_DENIED = "POST_DELETE_PERMISSION_DENIED"
COMMENT_NOT_FOUND = "COMMENT_NOT_FOUND"
COMMENT_DELETE_PERMISSION_DENIED = "COMMENT_DELETE_PERMISSION_DENIED"
