"""Achievements, badges, skills and tutorials."""

from __future__ import annotations

import enum

import sqlalchemy as sa
from sqlalchemy.orm import backref, relationship

from codevalley.models.base import Base, JSONList, JSONMap
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
    _url,
    _user_fk,
)


class BadgeType(str, enum.Enum):
    ACHIEVEMENT = "achievement"
    EVENT = "event"
    SPECIAL = "special"
    SEASONAL = "seasonal"


class BadgeRarity(str, enum.Enum):
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class SkillCategory(str, enum.Enum):
    PROGRAMMING = "programming"
    DEBUGGING = "debugging"
    OPTIMIZATION = "optimization"
    SOCIAL = "social"
    ECONOMIC = "economic"


class TutorialCategory(str, enum.Enum):
    BASICS = "basics"
    ADVANCED = "advanced"
    FRAMEWORK = "framework"
    ALGORITHM = "algorithm"
    BEST_PRACTICE = "best_practice"


class TutorialStatus(str, enum.Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


def _json_map() -> sa.Column:
    return sa.Column(JSONMap(), default=dict)


def _id_list() -> sa.Column:
    return sa.Column(JSONList(as_uuid=True), default=list)


class Achievement(Base):
    __tablename__ = "achievements"

    id = _pk()
    title = _required_str()
    description = _text()
    reward_coins = _counter()
    reward_exp = _counter()
    conditions = _json_map()
    icon_url = _url()
    is_active = _flag(True)
    created_at = _created()
    updated_at = _updated()

    user_achievements = relationship("UserAchievement", back_populates="achievement")


class UserAchievement(Base):
    __tablename__ = "user_achievements"

    id = _pk()
    user_id = _user_fk(index=True)
    achievement_id = _fk("achievements", index=True)
    unlocked_at = sa.Column(sa.DateTime)

    user = relationship(User, backref=backref("achievements"))
    achievement = relationship(Achievement, back_populates="user_achievements")


class Badge(Base):
    __tablename__ = "badges"

    id = _pk()
    name = _required_str(191, index=True)
    description = _text()
    type = sa.Column(_enum(BadgeType), nullable=False)
    rarity = sa.Column(_enum(BadgeRarity), default=BadgeRarity.COMMON)
    icon_url = _url()
    conditions = _json_map()
    is_active = _flag(True)
    created_at = _created()
    updated_at = _updated()

    user_badges = relationship("UserBadge", back_populates="badge")


class UserBadge(Base):
    __tablename__ = "user_badges"

    id = _pk()
    user_id = _user_fk(index=True)
    badge_id = _fk("badges", index=True)
    earned_at = sa.Column(sa.DateTime)

    user = relationship(User)
    badge = relationship(Badge, back_populates="user_badges")


class Skill(Base):
    __tablename__ = "skills"

    id = _pk()
    name = _required_str(191, index=True)
    description = _text()
    category = sa.Column(_enum(SkillCategory), nullable=False)
    max_level = _counter(10)
    base_cost = _counter(100)
    effects = _json_map()
    icon_url = _url()
    prerequisites = _id_list()
    is_active = _flag(True)
    created_at = _created()
    updated_at = _updated()

    user_skills = relationship("UserSkill", back_populates="skill")


class UserSkill(Base):
    __tablename__ = "user_skills"

    id = _pk()
    user_id = _user_fk(index=True)
    skill_id = _fk("skills", index=True)
    level = _counter(1)
    unlocked_at = sa.Column(sa.DateTime)

    user = relationship(User)
    skill = relationship(Skill, back_populates="user_skills")


class Tutorial(Base):
    __tablename__ = "tutorials"

    id = _pk()
    title = _required_str(191, index=True)
    description = _text()
    category = sa.Column(_enum(TutorialCategory), nullable=False)
    content = _json_map()
    prerequisites = _id_list()
    required_level = _counter(1)
    reward_exp = _counter()
    estimated_time = _counter(30)  # minutes
    is_active = _flag(True)
    created_at = _created()
    updated_at = _updated()

    user_progress = relationship("UserTutorialProgress", back_populates="tutorial")


class UserTutorialProgress(Base):
    __tablename__ = "user_tutorial_progresses"

    id = _pk()
    user_id = _user_fk(index=True)
    tutorial_id = _fk("tutorials", index=True)
    status = sa.Column(_enum(TutorialStatus), default=TutorialStatus.NOT_STARTED)
    progress = _counter()  # percentage
    started_at = sa.Column(sa.DateTime, nullable=True)
    completed_at = sa.Column(sa.DateTime, nullable=True)

    user = relationship(User)
    tutorial = relationship(Tutorial, back_populates="user_progress")