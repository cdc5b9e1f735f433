"""Quests, daily tasks, story milestones and code battles."""

from __future__ import annotations

import enum

import sqlalchemy as sa
from sqlalchemy.orm import backref, relationship

from codevalley.models.base import Base, JSONMap
from codevalley.models.user import (
    User,
    _counter,
    _created,
    _enum,
    _fk,
    _flag,
    _pk,
    _required_str,
    _text,
    _updated,
    _user_fk,
)


class QuestStatus(str, enum.Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class BattleDifficulty(str, enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class BattleStatus(str, enum.Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class Quest(Base):
    __tablename__ = "quests"

    id = _pk()
    title = _required_str()
    description = _text()
    reward_coins = _counter()
    reward_exp = _counter()
    required_items = sa.Column(JSONMap(), default=dict)  # item name -> quantity
    is_repeatable = _flag(False)
    is_active = _flag(True)
    created_at = _created()
    updated_at = _updated()

    user_progress = relationship("UserQuestProgress", back_populates="quest")


class UserQuestProgress(Base):
    __tablename__ = "user_quest_progresses"

    id = _pk()
    user_id = _user_fk(index=True)
    quest_id = _fk("quests", index=True)
    status = sa.Column(_enum(QuestStatus), default=QuestStatus.NOT_STARTED)
    progress_data = sa.Column(JSONMap(), default=dict)
    started_at = sa.Column(sa.DateTime, nullable=True)
    completed_at = sa.Column(sa.DateTime, nullable=True)

    user = relationship(User, backref=backref("quest_progress"))
    quest = relationship(Quest, back_populates="user_progress")


class DailyTask(Base):
    __tablename__ = "daily_tasks"

    id = _pk()
    task_name = _required_str()
    task_type = _required_str()
    description = _text()
    reward_exp = _counter()
    reward_coins = _counter()
    date = sa.Column(sa.Date, nullable=False)
    is_active = _flag(True)
    created_at = _created()
    updated_at = _updated()

    user_progress = relationship("UserDailyTaskProgress", back_populates="daily_task")


class UserDailyTaskProgress(Base):
    __tablename__ = "user_daily_task_progresses"

    id = _pk()
    user_id = _user_fk(index=True)
    daily_task_id = _fk("daily_tasks", index=True)
    completed_at = sa.Column(sa.DateTime, nullable=True)
    date = sa.Column(sa.Date, nullable=False)

    user = relationship(User, backref=backref("daily_task_progress"))
    daily_task = relationship(DailyTask, back_populates="user_progress")


class StoryProgress(Base):
    __tablename__ = "story_progresses"

    id = _pk()
    user_id = _user_fk(index=True)
    chapter = sa.Column(sa.Integer, nullable=False)
    milestone = _required_str()
    is_completed = _flag(False)
    unlocked_at = sa.Column(sa.DateTime, nullable=True)

    user = relationship(User, backref=backref("story_progress"))


class CodeBattle(Base):
    __tablename__ = "code_battles"

    id = _pk()
    user_id = _user_fk(index=True)
    challenge_name = _required_str()
    difficulty = sa.Column(_enum(BattleDifficulty), nullable=False)
    status = sa.Column(_enum(BattleStatus), default=BattleStatus.IN_PROGRESS)
    score = _counter()
    started_at = sa.Column(sa.DateTime)
    completed_at = sa.Column(sa.DateTime, nullable=True)

    user = relationship(User, backref=backref("code_battles"))