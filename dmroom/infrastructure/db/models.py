from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ...core.domain.values import NO_LOG_ID
from .base import Base


class Users(Base):
    __tablename__ = "users"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)


class UserRelationships(Base):
    """Directed relationship; a negative value means from_id blocks to_id."""
    __tablename__ = "user_relationships"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    from_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    to_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    relationship: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("from_id", "to_id", name="uq_user_relationship_pair"),
    )


class DirectMessageRooms(Base):
    __tablename__ = "direct_message_rooms"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    start_inclusive_log_id: Mapped[int] = mapped_column(Integer, nullable=False, default=NO_LOG_ID)
    # Canonical unordered pair (low <= high); the unique key makes first contact race-safe
    user_low_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    user_high_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_low_id", "user_high_id", name="uq_direct_message_room_pair"),
    )


class DirectMessageRoomMemberships(Base):
    __tablename__ = "direct_message_room_memberships"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    room_id: Mapped[int] = mapped_column(Integer, ForeignKey("direct_message_rooms.id"), index=True, nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    hide_log_id: Mapped[int] = mapped_column(Integer, nullable=False, default=NO_LOG_ID)

    __table_args__ = (
        UniqueConstraint("room_id", "user_id", name="uq_direct_message_membership"),
    )


class DirectMessageLogs(Base):
    __tablename__ = "direct_message_logs"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    room_id: Mapped[int] = mapped_column(Integer, ForeignKey("direct_message_rooms.id"), index=True, nullable=False)
    member_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    # seconds since epoch
    date: Mapped[int] = mapped_column(Integer, nullable=False)
    is_html: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_liked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # ids are the global ordering key and must never be reused, even after deletes
    __table_args__ = {"sqlite_autoincrement": True}


class Notifications(Base):
    __tablename__ = "notifications"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[int] = mapped_column(Integer, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
