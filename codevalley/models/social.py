"""Guilds, notifications and community events."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlalchemy.orm import relationship

from codevalley.models.base import GUID, Base, JSONMap, new_id
from codevalley.models.user import FriendshipStatus, User


def _now() -> datetime:
    return datetime.now()


def _enum(enum_cls: type[enum.Enum]) -> sa.Enum:
    return sa.Enum(
        enum_cls,
        values_callable=lambda members: [m.value for m in members],
        name=enum_cls.__name__.lower(),
    )


def _user_fk(**kwargs: Any) -> sa.Column:
    return sa.Column(GUID(), sa.ForeignKey("users.id"), nullable=False, **kwargs)


class GuildRole(str, enum.Enum):
    OWNER = "owner"
    OFFICER = "officer"
    MEMBER = "member"


class NotificationType(str, enum.Enum):
    QUEST = "quest"
    FRIEND = "friend"
    ACHIEVEMENT = "achievement"
    SYSTEM = "system"
    NPC = "npc"
    EVENT = "event"


class EventType(str, enum.Enum):
    HACKATHON = "hackathon"
    FESTIVAL = "festival"
    COMPETITION = "competition"
    SEASONAL = "seasonal"


class ParticipantStatus(str, enum.Enum):
    JOINED = "joined"
    COMPLETED = "completed"
    DROPPED = "dropped"


class Guild(Base):
    __tablename__ = "guilds"

    id = sa.Column(GUID(), primary_key=True, default=new_id)
    name = sa.Column(sa.String(191), nullable=False, unique=True)
    description = sa.Column(sa.Text)
    owner_id = _user_fk(index=True)
    max_members = sa.Column(sa.Integer, default=20)
    level = sa.Column(sa.Integer, default=1)
    exp = sa.Column(sa.Integer, default=0)
    icon_url = sa.Column(sa.String(255), default="")
    is_public = sa.Column(sa.Boolean, default=True)
    created_at = sa.Column(sa.DateTime, default=_now)
    updated_at = sa.Column(sa.DateTime, default=_now, onupdate=_now)

    owner = relationship(User, foreign_keys=[owner_id])
    members = relationship("GuildMember", back_populates="guild")


class GuildMember(Base):
    __tablename__ = "guild_members"

    id = sa.Column(GUID(), primary_key=True, default=new_id)
    guild_id = sa.Column(GUID(), sa.ForeignKey("guilds.id"), nullable=False, index=True)
    user_id = _user_fk(index=True)
    role = sa.Column(_enum(GuildRole), default=GuildRole.MEMBER)
    joined_at = sa.Column(sa.DateTime)

    guild = relationship(Guild, back_populates="members")
    user = relationship(User)


class GuildInvitation(Base):
    __tablename__ = "guild_invitations"

    id = sa.Column(GUID(), primary_key=True, default=new_id)
    guild_id = sa.Column(GUID(), sa.ForeignKey("guilds.id"), nullable=False, index=True)
    inviter_id = _user_fk(index=True)
    invitee_id = _user_fk(index=True)
    status = sa.Column(_enum(FriendshipStatus), default=FriendshipStatus.PENDING)
    created_at = sa.Column(sa.DateTime, default=_now)
    updated_at = sa.Column(sa.DateTime, default=_now, onupdate=_now)

    guild = relationship(Guild)
    inviter = relationship(User, foreign_keys=[inviter_id])
    invitee = relationship(User, foreign_keys=[invitee_id])


class Notification(Base):
    __tablename__ = "notifications"

    id = sa.Column(GUID(), primary_key=True, default=new_id)
    user_id = _user_fk(index=True)
    type = sa.Column(_enum(NotificationType), nullable=False)
    title = sa.Column(sa.String(255), nullable=False)
    message = sa.Column(sa.Text)
    is_read = sa.Column(sa.Boolean, default=False)
    data = sa.Column(JSONMap(), default=dict)
    created_at = sa.Column(sa.DateTime, default=_now)

    user = relationship(User)


class Event(Base):
    __tablename__ = "events"

    id = sa.Column(GUID(), primary_key=True, default=new_id)
    name = sa.Column(sa.String(191), nullable=False, index=True)
    description = sa.Column(sa.Text)
    type = sa.Column(_enum(EventType), nullable=False)
    start_date = sa.Column(sa.DateTime, nullable=False, index=True)
    end_date = sa.Column(sa.DateTime, nullable=False, index=True)
    requirements = sa.Column(JSONMap(), default=dict)
    rewards = sa.Column(JSONMap(), default=dict)
    max_participants = sa.Column(sa.Integer, default=-1)  # -1 means unlimited
    is_active = sa.Column(sa.Boolean, default=True)
    created_at = sa.Column(sa.DateTime, default=_now)
    updated_at = sa.Column(sa.DateTime, default=_now, onupdate=_now)

    participants = relationship("EventParticipant", back_populates="event")


class EventParticipant(Base):
    __tablename__ = "event_participants"

    id = sa.Column(GUID(), primary_key=True, default=new_id)
    user_id = _user_fk(index=True)
    event_id = sa.Column(GUID(), sa.ForeignKey("events.id"), nullable=False, index=True)
    status = sa.Column(_enum(ParticipantStatus), default=ParticipantStatus.JOINED)
    score = sa.Column(sa.Integer, default=0)
    joined_at = sa.Column(sa.DateTime)
    completed_at = sa.Column(sa.DateTime, nullable=True)

    user = relationship(User)
    event = relationship(Event, back_populates="participants")