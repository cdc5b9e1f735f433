"""Users, friendships, presence, statistics and login rewards.

Also holds the small column builders shared by the other model modules.
"""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlalchemy.orm import relationship

from codevalley.models.base import GUID, Base, new_id


def _now() -> datetime:
    return datetime.now()


def _enum(enum_cls: type[enum.Enum]) -> sa.Enum:
    return sa.Enum(
        enum_cls,
        values_callable=lambda members: [m.value for m in members],
        name=enum_cls.__name__.lower(),
    )


def _pk() -> sa.Column:
    return sa.Column(GUID(), primary_key=True, default=new_id)


def _fk(table: str, **kwargs: Any) -> sa.Column:
    return sa.Column(GUID(), sa.ForeignKey(f"{table}.id"), nullable=False, **kwargs)


def _user_fk(**kwargs: Any) -> sa.Column:
    return _fk("users", **kwargs)


def _created() -> sa.Column:
    return sa.Column(sa.DateTime, default=_now)


def _updated() -> sa.Column:
    return sa.Column(sa.DateTime, default=_now, onupdate=_now)


def _counter(default: int = 0, **kwargs: Any) -> sa.Column:
    return sa.Column(sa.Integer, default=default, **kwargs)


def _flag(default: bool) -> sa.Column:
    return sa.Column(sa.Boolean, default=default)


def _url() -> sa.Column:
    return sa.Column(sa.String(255), default="")


def _text() -> sa.Column:
    return sa.Column(sa.Text)


def _required_str(length: int = 255, **kwargs: Any) -> sa.Column:
    return sa.Column(sa.String(length), nullable=False, **kwargs)


def _iso(moment: datetime | None) -> str | None:
    return moment.isoformat() if moment else None


class UserRole(str, enum.Enum):
    PLAYER = "player"
    ADMIN = "admin"


class FriendshipStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    BLOCKED = "blocked"


@dataclass
class UserResponse:
    """Public view of a user, without the password hash."""

    id: uuid.UUID
    email: str
    username: str
    bio: str
    avatar_url: str
    exp: int
    level: int
    coins: int
    role: UserRole
    created_at: datetime | None
    updated_at: datetime | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "email": self.email,
            "username": self.username,
            "bio": self.bio,
            "avatar_url": self.avatar_url,
            "exp": self.exp,
            "level": self.level,
            "coins": self.coins,
            "role": self.role.value if isinstance(self.role, enum.Enum) else self.role,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


class User(Base):
    __tablename__ = "users"
    _serialize_exclude = frozenset({"password_hash"})

    id = _pk()
    email = _required_str(191, unique=True)
    username = _required_str(191, unique=True)
    password_hash = _required_str()
    bio = sa.Column(sa.Text, default="")
    avatar_url = _url()
    exp = _counter()
    level = _counter(1)
    coins = _counter(100)
    role = sa.Column(_enum(UserRole), default=UserRole.PLAYER)
    created_at = _created()
    updated_at = _updated()

    def to_response(self) -> UserResponse:
        return UserResponse(
            id=self.id,
            email=self.email,
            username=self.username,
            bio=self.bio or "",
            avatar_url=self.avatar_url or "",
            exp=self.exp,
            level=self.level,
            coins=self.coins,
            role=self.role,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class Friendship(Base):
    __tablename__ = "friendships"

    id = _pk()
    requester_id = _user_fk(index=True)
    addressee_id = _user_fk(index=True)
    status = sa.Column(_enum(FriendshipStatus), default=FriendshipStatus.PENDING)
    created_at = _created()
    updated_at = _updated()

    requester = relationship(User, foreign_keys=[requester_id])
    addressee = relationship(User, foreign_keys=[addressee_id])


class OnlineUser(Base):
    __tablename__ = "online_users"

    id = _pk()
    user_id = _user_fk(unique=True)
    last_seen = sa.Column(sa.DateTime)
    is_online = _flag(True)
    socket_id = sa.Column(sa.String(191), index=True, default="")

    user = relationship(User)


class UserStatistics(Base):
    __tablename__ = "user_statistics"

    id = _pk()
    user_id = _user_fk(unique=True)
    total_play_time = _counter()  # minutes
    quests_completed = _counter()
    tasks_completed = _counter()
    coins_earned = _counter()
    coins_spent = _counter()
    friends_count = _counter()
    games_played = _counter()
    games_won = _counter()
    items_crafted = _counter()
    tutorials_completed = _counter()
    login_streak = _counter()
    last_active = sa.Column(sa.DateTime)
    created_at = _created()
    updated_at = _updated()

    user = relationship(User)


class DailyStatistics(Base):
    __tablename__ = "daily_statistics"

    id = _pk()
    user_id = _user_fk(index=True)
    date = sa.Column(sa.Date, nullable=False, index=True)
    play_time = _counter()  # minutes
    quests_completed = _counter()
    tasks_completed = _counter()
    coins_earned = _counter()
    exp_gained = _counter()

    user = relationship(User)


class DailyReward(Base):
    __tablename__ = "daily_rewards"

    id = _pk()
    day = sa.Column(sa.Integer, nullable=False, index=True)  # day of month or streak day
    reward_coins = _counter()
    reward_exp = _counter()
    bonus_item = _url()
    is_active = _flag(True)
    created_at = _created()
    updated_at = _updated()


class UserDailyReward(Base):
    __tablename__ = "user_daily_rewards"

    id = _pk()
    user_id = _user_fk(index=True)
    daily_reward_id = _fk("daily_rewards", index=True)
    claimed_at = sa.Column(sa.DateTime)
    date = sa.Column(sa.Date, nullable=False, index=True)

    user = relationship(User)
    daily_reward = relationship(DailyReward)


class LoginStreak(Base):
    __tablename__ = "login_streaks"

    id = _pk()
    user_id = _user_fk(unique=True)
    current_streak = _counter()
    longest_streak = _counter()
    last_login_date = sa.Column(sa.Date)
    updated_at = _updated()

    user = relationship(User)