import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from collections.abc import Callable, Generator
from datetime import datetime, timezone
from itertools import count

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tododeck.api.errors import JSONAPI_CONTENT_TYPE
from tododeck.auth.dependencies import RequestContext
from tododeck.auth.utils import create_access_token, hash_password
from tododeck.database.connection import Base, get_db
from tododeck.main import app
from tododeck.models.category import Category
from tododeck.models.todo import Todo
from tododeck.models.user import User

PASSWORD = "correct horse battery staple"
PASSWORD_HASH = hash_password(PASSWORD)


@pytest.fixture
def session_factory() -> Generator[sessionmaker, None, None]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(
        autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
    )
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory: sessionmaker) -> Generator[Session, None, None]:
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory: sessionmaker) -> Generator[TestClient, None, None]:
    def override_get_db():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _create_user(db: Session, email: str) -> User:
    user = User(email=email, hashed_password=PASSWORD_HASH)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def user(db: Session) -> User:
    return _create_user(db, "tester@example.com")


@pytest.fixture
def other_user(db: Session) -> User:
    return _create_user(db, "someone.else@example.com")


@pytest.fixture
def now() -> datetime:
    return datetime.now(timezone.utc)


@pytest.fixture
def context(user: User, now: datetime) -> RequestContext:
    return RequestContext(user_id=user.id, now=now)


@pytest.fixture
def headers(user: User) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {create_access_token(user.id)}",
        "Content-Type": JSONAPI_CONTENT_TYPE,
    }


@pytest.fixture
def make_todo(db: Session, user: User) -> Callable[..., Todo]:
    sequence = count(1)

    def _make_todo(owner: User | None = None, **fields) -> Todo:
        n = next(sequence)
        fields.setdefault("name", f"Todo {n}")
        fields.setdefault("notes", f"Notes {n}")
        todo = Todo(user_id=(owner or user).id, **fields)
        db.add(todo)
        db.commit()
        db.refresh(todo)
        return todo

    return _make_todo


@pytest.fixture
def make_category(db: Session, user: User) -> Callable[..., Category]:
    sequence = count(1)

    def _make_category(owner: User | None = None, **fields) -> Category:
        n = next(sequence)
        fields.setdefault("name", f"Category {n}")
        fields.setdefault("sort_order", n)
        category = Category(user_id=(owner or user).id, **fields)
        db.add(category)
        db.commit()
        db.refresh(category)
        return category

    return _make_category


@pytest.fixture
def password() -> str:
    return PASSWORD
