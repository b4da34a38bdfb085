from .auth import AdminLoginRequest, StatusMessage, AdminStatus
from .admin import (
    UserSummary,
    ChatSummary,
    MessageSummary,
    DashboardStats,
    UserListResponse,
    ChatListResponse,
    MessageListResponse,
    StatsResponse,
)

__all__ = [
    "AdminLoginRequest",
    "StatusMessage",
    "AdminStatus",
    "UserSummary",
    "ChatSummary",
    "MessageSummary",
    "DashboardStats",
    "UserListResponse",
    "ChatListResponse",
    "MessageListResponse",
    "StatsResponse",
]
