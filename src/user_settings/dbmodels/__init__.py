"""
Database models for the user settings service (authoritative ORM definitions).

This module defines the SQLAlchemy Base with a naming convention for stable
Alembic autogenerate diffs, and exposes `target_metadata` for Alembic.
"""

import enum
from datetime import datetime
from uuid import uuid4

from sqlalchemy import (
    DateTime,
    Enum,
    ForeignKeyConstraint,
    Index,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# Naming convention for deterministic constraint/index names in Alembic diffs
naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def new_id() -> str:
    """Generate a primary key for a new row."""
    return str(uuid4())


class Base(DeclarativeBase):
    """Base class for all database models with type checking support."""

    metadata = MetaData(naming_convention=naming_convention)


class UserRole(enum.Enum):
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


class Users(Base):
    __tablename__ = "users"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="users_pkey"),
    )

    id: Mapped[str] = mapped_column(String(64), default=new_id)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role"),
        nullable=False,
        server_default=UserRole.MEMBER.value,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), nullable=False, server_default=text("CURRENT_TIMESTAMP")
    )

    settings: Mapped[list["Settings"]] = relationship(
        "Settings",
        uselist=True,
        foreign_keys="[Settings.user_id]",
        back_populates="user",
    )


class Settings(Base):
    __tablename__ = "settings"
    __table_args__ = (
        ForeignKeyConstraint(
            ["user_id"], ["users.id"], ondelete="CASCADE", name="settings_user_id_fkey"
        ),
        PrimaryKeyConstraint("id", name="settings_pkey"),
        # Upserts target this constraint; one row per (user, key)
        UniqueConstraint("user_id", "key", name="settings_user_id_key_key"),
        Index("idx_settings_user", "user_id"),
    )

    id: Mapped[str] = mapped_column(String(64), default=new_id)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    key: Mapped[str] = mapped_column(String(255), nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(True), nullable=False, server_default=text("CURRENT_TIMESTAMP")
    )
    # Caller-supplied actor id, not constrained to existing users
    updated_by: Mapped[str | None] = mapped_column(String(64))

    user: Mapped["Users"] = relationship(
        "Users", foreign_keys=[user_id], back_populates="settings"
    )


target_metadata = Base.metadata

__all__ = ["Base", "Settings", "UserRole", "Users", "new_id", "target_metadata"]
