"""Admin dashboard response schemas.

Field aliases keep the wire names the admin frontend reads (`_id`,
camelCase counters).
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AdminModel(BaseModel):
    """Base for admin schemas: populated by field name, serialized by alias."""
    model_config = ConfigDict(populate_by_name=True)


class UserSummary(AdminModel):
    """User with group-membership and direct-chat counts."""
    id: int = Field(alias="_id")
    name: str
    username: str
    avatar: Optional[str] = None
    groups: int = 0
    friends: int = 0


class CreatorBrief(AdminModel):
    name: str = "None"
    avatar: str = ""


class MemberBrief(AdminModel):
    id: int = Field(alias="_id")
    name: str
    avatar: Optional[str] = None


class ChatSummary(AdminModel):
    """Chat with resolved members and message count."""
    id: int = Field(alias="_id")
    name: Optional[str] = None
    group_chat: bool = Field(alias="groupChat")
    creator: CreatorBrief
    avatar: List[Optional[str]]  # Up to 3 member avatars, in member order
    members: List[MemberBrief]
    total_members: int = Field(alias="totalMembers")
    total_messages: int = Field(alias="totalMessages")


class AttachmentBrief(AdminModel):
    public_id: str
    url: str


class SenderBrief(AdminModel):
    id: Optional[int] = Field(default=None, alias="_id")
    name: Optional[str] = None
    avatar: Optional[str] = None


class MessageSummary(AdminModel):
    """Message with sender info and the parent chat's group flag."""
    id: int = Field(alias="_id")
    attachments: List[AttachmentBrief] = []
    content: str = ""
    created_at: datetime = Field(alias="createdAt")
    chat: int
    group_chat: bool = Field(alias="groupChat")
    sender: SenderBrief


class DashboardStats(AdminModel):
    """Headline counts plus per-day message volume for the trailing week."""
    groups_count: int = Field(alias="groupsCount")
    users_count: int = Field(alias="usersCount")
    messages_count: int = Field(alias="messagesCount")
    total_chats_count: int = Field(alias="totalChatsCount")
    messages: List[int]  # Oldest day first, last element is today


class UserListResponse(BaseModel):
    success: bool = True
    users: List[UserSummary]


class ChatListResponse(BaseModel):
    success: bool = True
    chats: List[ChatSummary]


class MessageListResponse(BaseModel):
    success: bool = True
    message: List[MessageSummary]


class StatsResponse(BaseModel):
    success: bool = True
    stats: DashboardStats
