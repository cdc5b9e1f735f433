"""Non-player characters and the player's relations with them."""

from __future__ import annotations

import enum

import sqlalchemy as sa
from sqlalchemy.orm import relationship

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


class NPCRole(str, enum.Enum):
    MENTOR = "mentor"
    CLIENT = "client"
    VILLAGER = "villager"


class NPC(Base):
    __tablename__ = "npcs"

    id = _pk()
    name = _required_str()
    role = sa.Column(_enum(NPCRole), nullable=False)
    dialogue = _text()
    location = _required_str()
    avatar_url = _url()
    quests_given = sa.Column(JSONList(as_uuid=True), default=list)
    is_active = _flag(True)
    created_at = _created()
    updated_at = _updated()


class NPCRelationship(Base):
    __tablename__ = "npc_relationships"

    id = _pk()
    user_id = _user_fk(index=True)
    npc_id = _fk("npcs", index=True)
    friendship_level = _counter()
    last_interaction = sa.Column(sa.DateTime)
    total_interactions = _counter()
    gifts_given = _counter()

    user = relationship(User)
    npc = relationship(NPC)


class NPCInteraction(Base):
    __tablename__ = "npc_interactions"

    id = _pk()
    user_id = _user_fk(index=True)
    npc_id = _fk("npcs", index=True)
    interaction_type = _required_str(64)  # talk, gift, quest
    data = sa.Column(JSONMap(), default=dict)
    created_at = _created()

    user = relationship(User)
    npc = relationship(NPC)