"""Shared fixtures: a throwaway SQLite database per test and a TestClient wired to it."""
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from gamereview.config import settings
from gamereview.constants import ModerationStatus, UserRole
from gamereview.database import get_db
from gamereview.main import app
from gamereview.models import Base, Company, Game, Review, Tag, User
from gamereview.services.auth import create_access_token, get_password_hash
from gamereview.utils import generate_id

PASSWORD = "secret123"
# Hashing is slow, do it once for every fixture user
PASSWORD_HASH = get_password_hash(PASSWORD)


@pytest.fixture
def password():
    return PASSWORD


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def moderation_defaults(monkeypatch):
    monkeypatch.setattr(settings, "auto_approve_games", False)
    monkeypatch.setattr(settings, "auto_approve_reviews", False)
    monkeypatch.setattr(settings, "rating_scope", "approved")
    monkeypatch.setattr(settings, "min_comment_length", 1)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make(username: str, role: UserRole = UserRole.USER) -> User:
        user = User(
            id=generate_id(),
            username=username,
            email=f"{username}@example.com",
            hashed_password=PASSWORD_HASH,
            role=role.value,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def user(make_user):
    return make_user("player_x")


@pytest.fixture
def other_user(make_user):
    return make_user("player_y")


@pytest.fixture
def admin(make_user):
    return make_user("boss", role=UserRole.ADMIN)


@pytest.fixture
def company(db):
    company = Company(id=generate_id(), name="Nintendo", founded_year=1889)
    db.add(company)
    db.commit()
    db.refresh(company)
    return company


@pytest.fixture
def tag(db):
    tag = Tag(id=generate_id(), name="Singleplayer")
    db.add(tag)
    db.commit()
    db.refresh(tag)
    return tag


@pytest.fixture
def make_game(db, company):
    def _make(
        creator: User,
        title: str = "Game A",
        status: ModerationStatus = ModerationStatus.APPROVED,
        genre: str | None = "RPG",
        created_at=None,
    ) -> Game:
        game = Game(
            id=generate_id(),
            title=title,
            author="Some Studio Lead",
            genre=genre,
            release_date=date(2021, 5, 1),
            status=status.value,
            company_id=company.id,
            created_by_id=creator.id,
        )
        if created_at is not None:
            game.created_at = created_at
        db.add(game)
        db.commit()
        db.refresh(game)
        return game

    return _make


@pytest.fixture
def make_review(db):
    def _make(
        author: User,
        game: Game,
        rating: int,
        status: ModerationStatus = ModerationStatus.APPROVED,
        created_at=None,
    ) -> Review:
        review = Review(
            id=generate_id(),
            user_id=author.id,
            game_id=game.id,
            rating=rating,
            comment="Solid game",
            status=status.value,
        )
        if created_at is not None:
            review.created_at = created_at
        db.add(review)
        db.commit()
        db.refresh(review)
        return review

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}

    return _headers
