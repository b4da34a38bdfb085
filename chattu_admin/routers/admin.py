from fastapi import APIRouter, Depends, Response

from ..auth import AdminSessionIssuer, get_session_issuer, require_admin
from ..services.admin import AdminService, get_admin_service
from ..schemas.auth import AdminLoginRequest, StatusMessage, AdminStatus
from ..schemas.admin import (
    UserListResponse,
    ChatListResponse,
    MessageListResponse,
    StatsResponse,
)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/verify", response_model=StatusMessage)
async def admin_login(
    request: AdminLoginRequest,
    response: Response,
    issuer: AdminSessionIssuer = Depends(get_session_issuer),
):
    """Login with the admin secret key."""
    token = issuer.login(request.secret_key)
    issuer.set_cookie(response, token)
    return StatusMessage(success=True, message="Admin Login Successful")


@router.get("/logout", response_model=StatusMessage)
async def admin_logout(
    response: Response,
    issuer: AdminSessionIssuer = Depends(get_session_issuer),
):
    """Clear the admin session cookie."""
    issuer.logout(response)
    return StatusMessage(success=True, message="Admin Logout Successful")


@router.get("", response_model=AdminStatus)
async def get_admin_data(session: str = Depends(require_admin)):
    """Confirm the current admin session."""
    return AdminStatus(admin=True)


@router.get("/users", response_model=UserListResponse)
async def get_all_users(
    service: AdminService = Depends(get_admin_service),
    session: str = Depends(require_admin),
):
    """List all users with group and friend counts."""
    users = await service.list_users()
    return UserListResponse(users=users)


@router.get("/chats", response_model=ChatListResponse)
async def get_all_chats(
    service: AdminService = Depends(get_admin_service),
    session: str = Depends(require_admin),
):
    """List all chats with members and message counts."""
    chats = await service.list_chats()
    return ChatListResponse(chats=chats)


@router.get("/messages", response_model=MessageListResponse)
async def get_all_messages(
    service: AdminService = Depends(get_admin_service),
    session: str = Depends(require_admin),
):
    """List all messages with sender info."""
    messages = await service.list_messages()
    return MessageListResponse(message=messages)


@router.get("/stats", response_model=StatsResponse)
async def get_dashboard_stats(
    service: AdminService = Depends(get_admin_service),
    session: str = Depends(require_admin),
):
    """Get dashboard statistics."""
    stats = await service.dashboard_stats()
    return StatsResponse(stats=stats)
