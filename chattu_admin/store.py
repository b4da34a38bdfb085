"""
Chat Store - async read access to the users, chats and messages collections.

Each call opens its own SQLAlchemy session and runs in the threadpool, so
independent calls issued with asyncio.gather overlap instead of queueing
behind one another.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional, TypeVar

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, selectinload

from .db import User, Chat, ChatMember, Message
from .errors import StoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ChatStore:
    """Read-only queries over users, chats and messages."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    async def _run(self, query: Callable[[Session], T]) -> T:
        return await run_in_threadpool(self._execute, query)

    def _execute(self, query: Callable[[Session], T]) -> T:
        try:
            with self._session_factory() as db:
                return query(db)
        except SQLAlchemyError as e:
            logger.error(f"Store query failed: {e}")
            raise StoreError(f"Data store error: {e.__class__.__name__}") from e

    # -------------------------------------------------------------------------
    # Counts
    # -------------------------------------------------------------------------

    async def count_users(self) -> int:
        return await self._run(
            lambda db: db.scalar(select(func.count(User.id))) or 0
        )

    async def count_chats(
        self,
        is_group: Optional[bool] = None,
        member_id: Optional[int] = None,
    ) -> int:
        """Count chats, optionally restricted by group flag and/or membership."""
        stmt = select(func.count(Chat.id))
        if is_group is not None:
            stmt = stmt.where(Chat.is_group == is_group)
        if member_id is not None:
            stmt = stmt.where(Chat.memberships.any(ChatMember.user_id == member_id))
        return await self._run(lambda db: db.scalar(stmt) or 0)

    async def count_messages(self, chat_id: Optional[int] = None) -> int:
        stmt = select(func.count(Message.id))
        if chat_id is not None:
            stmt = stmt.where(Message.chat_id == chat_id)
        return await self._run(lambda db: db.scalar(stmt) or 0)

    # -------------------------------------------------------------------------
    # Finds
    # -------------------------------------------------------------------------

    async def find_users(self) -> List[User]:
        stmt = select(User).order_by(User.id)
        return await self._run(lambda db: list(db.scalars(stmt)))

    async def find_chats(self) -> List[Chat]:
        """All chats with members (in join order) and creator loaded."""
        stmt = (
            select(Chat)
            .options(
                selectinload(Chat.memberships).selectinload(ChatMember.user),
                selectinload(Chat.creator),
            )
            .order_by(Chat.id)
        )
        return await self._run(lambda db: list(db.scalars(stmt)))

    async def find_messages(self) -> List[Message]:
        """All messages with sender, parent chat and attachments loaded."""
        stmt = (
            select(Message)
            .options(
                selectinload(Message.sender),
                selectinload(Message.chat),
                selectinload(Message.attachments),
            )
            .order_by(Message.id)
        )
        return await self._run(lambda db: list(db.scalars(stmt)))

    async def find_message_timestamps(self, since: datetime, until: datetime) -> List[datetime]:
        """Creation times of messages in the inclusive range [since, until]."""
        stmt = (
            select(Message.created_at)
            .where(Message.created_at >= since, Message.created_at <= until)
        )
        return await self._run(lambda db: list(db.scalars(stmt)))
