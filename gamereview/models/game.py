"""Game, Company and Tag models."""
from sqlalchemy import Column, String, Integer, Float, Date, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship

from gamereview.constants import ModerationStatus
from gamereview.models.base import Base
from gamereview.utils import utcnow


class Company(Base):
    __tablename__ = "companies"

    id = Column(String(36), primary_key=True, index=True)
    name = Column(String(256), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    founded_year = Column(Integer, nullable=True)
    website = Column(String(512), nullable=True)
    logo_url = Column(String(512), nullable=True)
    headquarters = Column(String(256), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    games = relationship("Game", back_populates="company")


class Tag(Base):
    __tablename__ = "tags"

    id = Column(String(36), primary_key=True, index=True)
    name = Column(String(64), unique=True, nullable=False, index=True)

    games = relationship("GameTag", back_populates="tag", cascade="all, delete-orphan")


class Game(Base):
    __tablename__ = "games"

    id = Column(String(36), primary_key=True, index=True)
    title = Column(String(512), nullable=False, index=True)
    author = Column(String(256), nullable=False)
    composer = Column(String(256), nullable=True)
    description = Column(Text, nullable=True)
    genre = Column(String(64), nullable=True, index=True)
    release_date = Column(Date, nullable=True)
    cover_image = Column(String(512), nullable=True)
    status = Column(String(16), nullable=False, default=ModerationStatus.PENDING.value, index=True)
    average_rating = Column(Float, nullable=False, default=0.0)
    review_count = Column(Integer, nullable=False, default=0)
    company_id = Column(String(36), ForeignKey("companies.id", ondelete="SET NULL"), nullable=True)
    created_by_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)

    company = relationship("Company", back_populates="games")
    created_by = relationship("User", back_populates="games")
    reviews = relationship("Review", back_populates="game", cascade="all, delete-orphan")
    tags = relationship("GameTag", back_populates="game", cascade="all, delete-orphan")


class GameTag(Base):
    __tablename__ = "game_tags"

    game_id = Column(String(36), ForeignKey("games.id", ondelete="CASCADE"), primary_key=True)
    tag_id = Column(String(36), ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True)

    game = relationship("Game", back_populates="tags")
    tag = relationship("Tag", back_populates="games")
