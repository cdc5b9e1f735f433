import uuid

import pytest
import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from codevalley.models.base import Base
from codevalley.models.npc import NPC, NPCInteraction, NPCRelationship, NPCRole
from codevalley.models.user import User


@pytest.fixture
def session():
    engine = sa.create_engine("sqlite://")
    Base.metadata.create_all(engine)
    with Session(engine) as db:
        yield db
    engine.dispose()


def _user(name):
    return User(email=f"{name}@example.com", username=name, password_hash="placeholder")


def _npc(name="Ada", role=NPCRole.MENTOR):
    return NPC(name=name, role=role, location="village")


def test_npc_defaults():
    npc = _npc()
    assert npc.quests_given == []
    assert npc.is_active is True
    assert npc.avatar_url == ""
    assert isinstance(npc.id, uuid.UUID)


def test_relationship_counters_start_at_zero():
    rel = NPCRelationship()
    assert rel.friendship_level == 0
    assert rel.total_interactions == 0
    assert rel.gifts_given == 0


def test_role_stored_as_text(session):
    npc = _npc(role=NPCRole.VILLAGER)
    session.add(npc)
    session.commit()
    raw = session.execute(sa.text("SELECT role FROM npcs")).scalar_one()
    assert raw == "villager"
    session.expire_all()
    assert session.get(NPC, npc.id).role is NPCRole.VILLAGER


def test_quests_given_round_trip(session):
    quest_ids = [uuid.uuid4(), uuid.uuid4()]
    npc = _npc()
    npc.quests_given = quest_ids
    session.add(npc)
    session.commit()
    session.expire_all()
    assert session.get(NPC, npc.id).quests_given == quest_ids


def test_to_dict_serialises_quest_ids():
    quest_id = uuid.uuid4()
    npc = NPC(name="Grace", role=NPCRole.CLIENT, location="office", quests_given=[quest_id])
    data = npc.to_dict()
    assert data["quests_given"] == [str(quest_id)]
    assert data["role"] == "client"


def test_relationship_links_user_and_npc(session):
    user = _user("frank")
    npc = _npc()
    rel = NPCRelationship(user=user, npc=npc, friendship_level=4)
    session.add(rel)
    session.commit()
    session.expire_all()
    loaded = session.get(NPCRelationship, rel.id)
    assert loaded.npc.name == "Ada"
    assert loaded.user.username == "frank"
    assert loaded.friendship_level == 4


def test_interaction_data_round_trip(session):
    interaction = NPCInteraction(
        user=_user("gina"), npc=_npc(), interaction_type="gift", data={"item": "coffee"}
    )
    session.add(interaction)
    session.commit()
    session.expire_all()
    loaded = session.get(NPCInteraction, interaction.id)
    assert loaded.interaction_type == "gift"
    assert loaded.data == {"item": "coffee"}


def test_interaction_requires_type(session):
    session.add(NPCInteraction(user=_user("hank"), npc=_npc()))
    with pytest.raises(IntegrityError):
        session.flush()