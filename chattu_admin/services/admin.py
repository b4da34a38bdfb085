"""
Admin Service - cross-collection aggregation for the admin dashboard.

Joins users, chats and messages into denormalized summaries and buckets the
last week of messages into per-day counts. Store failures are never caught
here; they propagate to the API error handlers.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Iterable, List, Optional, Sequence, TypeVar

from fastapi import Request

from ..db import User, Chat, Message
from ..schemas.admin import (
    UserSummary,
    CreatorBrief,
    MemberBrief,
    ChatSummary,
    AttachmentBrief,
    SenderBrief,
    MessageSummary,
    DashboardStats,
)
from ..store import ChatStore

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

HISTOGRAM_DAYS = 7
AVATAR_STACK_SIZE = 3
DAY = timedelta(days=1)


# =============================================================================
# Projections
# =============================================================================

def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes; the SQLite store drops tzinfo on read."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_user_summary(user: User, groups: int, friends: int) -> UserSummary:
    return UserSummary(
        id=user.id,
        name=user.name,
        username=user.username,
        avatar=user.avatar_url,
        groups=groups,
        friends=friends,
    )


def to_creator_brief(creator: Optional[User]) -> CreatorBrief:
    """Creator display info; direct chats and deleted creators fall back to defaults."""
    if creator is None:
        return CreatorBrief(name="None", avatar="")
    return CreatorBrief(
        name=creator.name if creator.name else "None",
        avatar=creator.avatar_url if creator.avatar_url else "",
    )


def to_chat_summary(chat: Chat, total_messages: int) -> ChatSummary:
    members = chat.members
    return ChatSummary(
        id=chat.id,
        name=chat.name,
        group_chat=chat.is_group,
        creator=to_creator_brief(chat.creator),
        avatar=[member.avatar_url for member in members[:AVATAR_STACK_SIZE]],
        members=[
            MemberBrief(id=member.id, name=member.name, avatar=member.avatar_url)
            for member in members
        ],
        total_members=len(members),
        total_messages=total_messages,
    )


def to_message_summary(message: Message) -> MessageSummary:
    sender = message.sender
    if sender is None:
        sender_brief = SenderBrief()
    else:
        sender_brief = SenderBrief(id=sender.id, name=sender.name, avatar=sender.avatar_url)

    return MessageSummary(
        id=message.id,
        attachments=[
            AttachmentBrief(public_id=a.public_id, url=a.url)
            for a in message.attachments
        ],
        content=message.content or "",
        created_at=as_utc(message.created_at),
        chat=message.chat_id,
        group_chat=message.chat.is_group,
        sender=sender_brief,
    )


# =============================================================================
# Histogram
# =============================================================================

def bucket_messages_by_day(
    timestamps: Iterable[datetime],
    today: datetime,
    days: int = HISTOGRAM_DAYS,
) -> List[int]:
    """Count messages per day for the `days` days ending at `today`.

    Index 0 is the oldest day, the last index is today. A message's bucket is
    `days - 1 - floor((today - created_at) / 1 day)`. Ages outside the window
    are clamped: anything `days` or more days old (which the inclusive window
    start can produce) lands in the oldest bucket, and future timestamps land
    in today's bucket, so the result always sums to the number of timestamps.

    Naive timestamps are taken to be UTC.
    """
    today = as_utc(today)

    buckets = [0] * days
    for created_at in timestamps:
        age = (today - as_utc(created_at)) // DAY
        age = min(max(age, 0), days - 1)
        buckets[days - 1 - age] += 1
    return buckets


# =============================================================================
# Service
# =============================================================================

class AdminService:
    """Aggregates store records into admin dashboard views."""

    def __init__(self, store: ChatStore, max_concurrency: int = 10):
        self.store = store
        self.max_concurrency = max(1, max_concurrency)

    async def _fan_out(
        self,
        items: Sequence[T],
        transform: Callable[[T], Awaitable[R]],
    ) -> List[R]:
        """Apply `transform` to every item with bounded concurrency, keeping order."""
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def bounded(item: T) -> R:
            async with semaphore:
                return await transform(item)

        return list(await asyncio.gather(*(bounded(item) for item in items)))

    async def list_users(self) -> List[UserSummary]:
        """All users with their group and direct chat counts."""
        users = await self.store.find_users()

        async def summarize(user: User) -> UserSummary:
            groups, friends = await asyncio.gather(
                self.store.count_chats(is_group=True, member_id=user.id),
                self.store.count_chats(is_group=False, member_id=user.id),
            )
            return to_user_summary(user, groups, friends)

        summaries = await self._fan_out(users, summarize)
        logger.info(f"Listed {len(summaries)} users")
        return summaries

    async def list_chats(self) -> List[ChatSummary]:
        """All chats with resolved members, creator and message counts."""
        chats = await self.store.find_chats()

        async def summarize(chat: Chat) -> ChatSummary:
            total_messages = await self.store.count_messages(chat_id=chat.id)
            return to_chat_summary(chat, total_messages)

        summaries = await self._fan_out(chats, summarize)
        logger.info(f"Listed {len(summaries)} chats")
        return summaries

    async def list_messages(self) -> List[MessageSummary]:
        """All messages with sender info and chat group flag."""
        messages = await self.store.find_messages()
        summaries = [to_message_summary(message) for message in messages]
        logger.info(f"Listed {len(summaries)} messages")
        return summaries

    async def dashboard_stats(self, now: Optional[datetime] = None) -> DashboardStats:
        """Headline counts and the trailing 7-day message histogram."""
        today = now or datetime.now(timezone.utc)
        window_start = today - timedelta(days=HISTOGRAM_DAYS)

        groups_count, users_count, messages_count, total_chats_count, timestamps = await asyncio.gather(
            self.store.count_chats(is_group=True),
            self.store.count_users(),
            self.store.count_messages(),
            self.store.count_chats(),
            self.store.find_message_timestamps(window_start, today),
        )

        return DashboardStats(
            groups_count=groups_count,
            users_count=users_count,
            messages_count=messages_count,
            total_chats_count=total_chats_count,
            messages=bucket_messages_by_day(timestamps, today),
        )


def get_admin_service(request: Request) -> AdminService:
    """FastAPI dependency returning the app's admin service."""
    return request.app.state.admin_service
