"""Maps, positions, world objects, the game clock and code farms."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlalchemy.orm import relationship

from codevalley.models.base import GUID, Base, JSONMap, new_id
from codevalley.models.npc import NPC
from codevalley.models.user import User


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


def _map_fk(**kwargs: Any) -> sa.Column:
    return sa.Column(GUID(), sa.ForeignKey("maps.id"), nullable=False, **kwargs)


def _npc_fk(**kwargs: Any) -> sa.Column:
    return sa.Column(GUID(), sa.ForeignKey("npcs.id"), nullable=False, **kwargs)


class MapType(str, enum.Enum):
    VILLAGE = "village"
    CODE_MINE = "code_mine"
    DATA_FARM = "data_farm"
    OFFICE = "office"
    LIBRARY = "library"
    LAB = "lab"


class ObjectType(str, enum.Enum):
    TREE = "tree"
    ROCK = "rock"
    CHEST = "chest"
    SERVER = "server"
    WORKSTATION = "workstation"
    CODE_BLOCK = "code_block"
    BUG_HIVE = "bug_hive"


class Map(Base):
    __tablename__ = "maps"

    id = sa.Column(GUID(), primary_key=True, default=new_id)
    name = sa.Column(sa.String(191), nullable=False, unique=True)
    type = sa.Column(_enum(MapType), nullable=False)
    width = sa.Column(sa.Integer, nullable=False)
    height = sa.Column(sa.Integer, nullable=False)
    layout = sa.Column(JSONMap(), default=dict)
    description = sa.Column(sa.Text)
    is_active = sa.Column(sa.Boolean, default=True)
    created_at = sa.Column(sa.DateTime, default=_now)
    updated_at = sa.Column(sa.DateTime, default=_now, onupdate=_now)

    player_positions = relationship("PlayerPosition", back_populates="map")
    world_objects = relationship("WorldObject", back_populates="map")
    npc_positions = relationship("NPCPosition", back_populates="map")


class PlayerPosition(Base):
    __tablename__ = "player_positions"

    id = sa.Column(GUID(), primary_key=True, default=new_id)
    user_id = _user_fk(unique=True)
    map_id = _map_fk(index=True)
    pos_x = sa.Column(sa.Integer, nullable=False)
    pos_y = sa.Column(sa.Integer, nullable=False)
    direction = sa.Column(sa.String(16), default="down")  # up, down, left, right
    last_moved = sa.Column(sa.DateTime)
    updated_at = sa.Column(sa.DateTime, default=_now, onupdate=_now)

    user = relationship(User)
    map = relationship(Map, back_populates="player_positions")


class WorldObject(Base):
    __tablename__ = "world_objects"

    id = sa.Column(GUID(), primary_key=True, default=new_id)
    map_id = _map_fk(index=True)
    object_type = sa.Column(_enum(ObjectType), nullable=False)
    pos_x = sa.Column(sa.Integer, nullable=False)
    pos_y = sa.Column(sa.Integer, nullable=False)
    state = sa.Column(JSONMap(), default=dict)
    is_active = sa.Column(sa.Boolean, default=True)
    created_at = sa.Column(sa.DateTime, default=_now)
    updated_at = sa.Column(sa.DateTime, default=_now, onupdate=_now)

    map = relationship(Map, back_populates="world_objects")


class NPCPosition(Base):
    __tablename__ = "npc_positions"

    id = sa.Column(GUID(), primary_key=True, default=new_id)
    npc_id = _npc_fk(index=True)
    map_id = _map_fk(index=True)
    pos_x = sa.Column(sa.Integer, nullable=False)
    pos_y = sa.Column(sa.Integer, nullable=False)
    direction = sa.Column(sa.String(16), default="down")
    updated_at = sa.Column(sa.DateTime, default=_now, onupdate=_now)

    npc = relationship(NPC)
    map = relationship(Map, back_populates="npc_positions")


class NPCSchedule(Base):
    __tablename__ = "npc_schedules"

    id = sa.Column(GUID(), primary_key=True, default=new_id)
    npc_id = _npc_fk(index=True)
    day_of_week = sa.Column(sa.Integer, nullable=False)  # 0-6, Sunday first
    time_of_day = sa.Column(sa.Integer, nullable=False)  # 0-2359, 24-hour clock
    map_id = _map_fk()
    pos_x = sa.Column(sa.Integer, nullable=False)
    pos_y = sa.Column(sa.Integer, nullable=False)
    action = sa.Column(sa.String(64), default="")  # work, rest, patrol, ...
    created_at = sa.Column(sa.DateTime, default=_now)

    npc = relationship(NPC)
    map = relationship(Map)


class GameClock(Base):
    __tablename__ = "game_clocks"

    id = sa.Column(GUID(), primary_key=True, default=new_id)
    game_year = sa.Column(sa.Integer, default=1)
    game_season = sa.Column(sa.String(16), default="spring")  # spring, summer, fall, winter
    game_day = sa.Column(sa.Integer, default=1)
    game_hour = sa.Column(sa.Integer, default=6)
    game_minute = sa.Column(sa.Integer, default=0)
    is_paused = sa.Column(sa.Boolean, default=False)
    time_scale = sa.Column(sa.Float, default=1.0)  # 1.0 is normal speed
    updated_at = sa.Column(sa.DateTime, default=_now, onupdate=_now)


class CodeFarm(Base):
    __tablename__ = "code_farms"

    id = sa.Column(GUID(), primary_key=True, default=new_id)
    user_id = _user_fk(index=True)
    plot_x = sa.Column(sa.Integer, nullable=False)
    plot_y = sa.Column(sa.Integer, nullable=False)
    code_type = sa.Column(sa.String(64), default="")  # algorithm, function, class, ...
    planted_at = sa.Column(sa.DateTime, nullable=True)
    last_watered = sa.Column(sa.DateTime, nullable=True)
    harvest_at = sa.Column(sa.DateTime, nullable=True)
    growth_stage = sa.Column(sa.Integer, default=0)  # 0-4
    quality = sa.Column(sa.String(16), default="normal")  # normal, silver, gold, iridium
    created_at = sa.Column(sa.DateTime, default=_now)
    updated_at = sa.Column(sa.DateTime, default=_now, onupdate=_now)

    user = relationship(User)