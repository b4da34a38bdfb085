from .admin import AdminService, get_admin_service, bucket_messages_by_day

__all__ = [
    "AdminService",
    "get_admin_service",
    "bucket_messages_by_day",
]
