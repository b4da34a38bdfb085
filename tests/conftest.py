"""Shared fixtures for the admin API tests."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from chattu_admin.config import Settings
from chattu_admin.db import User, Chat, ChatMember, Message, Attachment, create_session_factory
from chattu_admin.main import create_app
from chattu_admin.services.admin import AdminService
from chattu_admin.store import ChatStore

ADMIN_SECRET = "S3cr3t"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'chattu.db'}",
        create_tables=True,
        admin_secret_key=ADMIN_SECRET,
        jwt_secret="test-jwt-secret",
        cookie_secure=False,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_client(client):
    """Client holding a valid admin session cookie."""
    res = client.post("/api/admin/verify", json={"secretKey": ADMIN_SECRET})
    assert res.status_code == 200
    return client


@pytest.fixture
def db(app):
    session = create_session_factory(app.state.engine)()
    yield session
    session.close()


@pytest.fixture
def store(app):
    return ChatStore(create_session_factory(app.state.engine))


@pytest.fixture
def service(store):
    return AdminService(store, max_concurrency=2)


@pytest.fixture
def now():
    return datetime.now(timezone.utc)


def make_user(db, name, username, avatar_url=None):
    user = User(name=name, username=username, avatar_url=avatar_url)
    db.add(user)
    db.flush()
    return user


def make_chat(db, members, name=None, is_group=False, creator=None):
    chat = Chat(name=name, is_group=is_group, creator_id=creator.id if creator else None)
    db.add(chat)
    db.flush()
    for position, member in enumerate(members):
        db.add(ChatMember(chat_id=chat.id, user_id=member.id, position=position))
    db.flush()
    return chat


def make_message(db, chat, sender, content="hello", created_at=None, attachments=()):
    message = Message(
        chat_id=chat.id,
        sender_id=sender.id if sender else None,
        content=content,
        created_at=created_at or datetime.now(timezone.utc),
    )
    db.add(message)
    db.flush()
    for position, (public_id, url) in enumerate(attachments):
        db.add(Attachment(message_id=message.id, public_id=public_id, url=url, position=position))
    db.flush()
    return message


@pytest.fixture
def seeded(db, now):
    """Four users, two direct chats and two group chats with a few messages."""
    alice = make_user(db, "Alice", "alice", "https://cdn.test/alice.png")
    bob = make_user(db, "Bob", "bob", "https://cdn.test/bob.png")
    carol = make_user(db, "Carol", "carol", "https://cdn.test/carol.png")
    dave = make_user(db, "Dave", "dave")

    alice_bob = make_chat(db, [alice, bob])
    alice_carol = make_chat(db, [alice, carol])
    book_club = make_chat(db, [alice, bob, carol, dave], name="Book Club", is_group=True, creator=alice)
    orphaned = make_chat(db, [carol, dave], name="Orphaned", is_group=True)

    make_message(db, alice_bob, alice, "hi bob", now - timedelta(hours=1))
    make_message(db, alice_bob, bob, "hi alice", now - timedelta(minutes=30))
    make_message(db, book_club, carol, "", now - timedelta(days=2, hours=1),
                 attachments=[("att-1", "https://cdn.test/att-1.jpg")])
    make_message(db, book_club, dave, "chapter 3?", now - timedelta(days=10))
    db.commit()

    return {
        "users": {"alice": alice, "bob": bob, "carol": carol, "dave": dave},
        "chats": {
            "alice_bob": alice_bob,
            "alice_carol": alice_carol,
            "book_club": book_club,
            "orphaned": orphaned,
        },
    }
