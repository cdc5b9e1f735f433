import uuid
from datetime import datetime

import pytest
import sqlalchemy as sa
from sqlalchemy.orm import Session

from codevalley.models.base import Base
from codevalley.models.npc import NPC, NPCRole
from codevalley.models.user import User
from codevalley.models.world import (
    CodeFarm,
    GameClock,
    Map,
    MapType,
    NPCPosition,
    NPCSchedule,
    ObjectType,
    PlayerPosition,
    WorldObject,
)


@pytest.fixture
def engine(tmp_path):
    engine = sa.create_engine(f"sqlite:///{tmp_path / 'world.db'}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


def _user():
    return User(email="farmer@example.com", username="farmer", password_hash="password")


def _map(**overrides):
    values = dict(name="village", type=MapType.VILLAGE, width=40, height=30)
    values.update(overrides)
    return Map(**values)


def test_map_type_values():
    assert [t.value for t in MapType] == [
        "village",
        "code_mine",
        "data_farm",
        "office",
        "library",
        "lab",
    ]
    assert MapType("lab") is MapType.LAB
    with pytest.raises(ValueError):
        MapType("castle")


def test_object_type_values():
    assert [t.value for t in ObjectType] == [
        "tree",
        "rock",
        "chest",
        "server",
        "workstation",
        "code_block",
        "bug_hive",
    ]
    assert ObjectType("bug_hive") is ObjectType.BUG_HIVE
    with pytest.raises(ValueError):
        ObjectType("cave")


def test_map_defaults_and_fresh_ids():
    first = _map()
    second = _map(name="mine", type=MapType.CODE_MINE)
    assert first.is_active is True
    assert first.layout == {}
    assert isinstance(first.id, uuid.UUID)
    assert first.id != second.id


def test_positions_face_down_by_default():
    player = PlayerPosition(user_id=uuid.uuid4(), map_id=uuid.uuid4(), pos_x=1, pos_y=2)
    npc = NPCPosition(npc_id=uuid.uuid4(), map_id=uuid.uuid4(), pos_x=3, pos_y=4)
    assert player.direction == "down"
    assert npc.direction == "down"


def test_game_clock_defaults():
    clock = GameClock()
    assert clock.game_year == 1
    assert clock.game_season == "spring"
    assert clock.game_day == 1
    assert clock.game_hour == 6
    assert clock.game_minute == 0
    assert clock.is_paused is False
    assert clock.time_scale == 1.0


def test_code_farm_defaults():
    farm = CodeFarm(user_id=uuid.uuid4(), plot_x=0, plot_y=0)
    assert farm.growth_stage == 0
    assert farm.quality == "normal"
    assert farm.planted_at is None
    assert farm.harvest_at is None


def test_map_layout_and_objects_round_trip(engine):
    layout = {"tiles": [[0, 1], [1, 0]], "spawn": {"x": 2, "y": 3}}
    with Session(engine) as session:
        world_map = _map(name="mine", type=MapType.CODE_MINE, layout=layout)
        world_map.world_objects.append(
            WorldObject(object_type=ObjectType.CHEST, pos_x=5, pos_y=6, state={"locked": True})
        )
        session.add(world_map)
        session.commit()
        map_id = world_map.id

    with Session(engine) as session:
        loaded = session.get(Map, map_id)
        assert loaded.layout == layout
        assert loaded.type is MapType.CODE_MINE
        assert [obj.object_type for obj in loaded.world_objects] == [ObjectType.CHEST]
        assert loaded.world_objects[0].state == {"locked": True}


def test_player_position_links_user_and_map(engine):
    with Session(engine) as session:
        user = _user()
        world_map = _map()
        session.add_all([user, world_map])
        session.flush()
        session.add(PlayerPosition(user_id=user.id, map_id=world_map.id, pos_x=7, pos_y=8))
        session.commit()
        map_id = world_map.id

    with Session(engine) as session:
        loaded = session.get(Map, map_id)
        assert len(loaded.player_positions) == 1
        position = loaded.player_positions[0]
        assert position.user.username == "farmer"
        assert (position.pos_x, position.pos_y) == (7, 8)
        assert position.direction == "down"


def test_npc_schedule_and_position_round_trip(engine):
    with Session(engine) as session:
        npc = NPC(name="Grace", role=NPCRole.MENTOR, location="office")
        world_map = _map(name="office", type=MapType.OFFICE)
        session.add_all([npc, world_map])
        session.flush()
        session.add(
            NPCSchedule(
                npc_id=npc.id,
                map_id=world_map.id,
                day_of_week=1,
                time_of_day=930,
                pos_x=2,
                pos_y=3,
                action="work",
            )
        )
        session.add(NPCPosition(npc_id=npc.id, map_id=world_map.id, pos_x=2, pos_y=3))
        session.commit()

    with Session(engine) as session:
        schedule = session.scalars(sa.select(NPCSchedule)).one()
        assert schedule.npc.name == "Grace"
        assert schedule.map.name == "office"
        assert schedule.action == "work"
        world_map = session.scalars(sa.select(Map)).one()
        assert [p.npc.name for p in world_map.npc_positions] == ["Grace"]


def test_code_farm_times_round_trip(engine):
    planted = datetime(2024, 3, 1, 9, 30)
    with Session(engine) as session:
        user = _user()
        session.add(user)
        session.flush()
        session.add(CodeFarm(user_id=user.id, plot_x=1, plot_y=2, code_type="function", planted_at=planted))
        session.commit()

    with Session(engine) as session:
        farm = session.scalars(sa.select(CodeFarm)).one()
        assert farm.planted_at == planted
        assert farm.code_type == "function"
        assert farm.user.email == "farmer@example.com"


def test_game_clock_persists_defaults(engine):
    with Session(engine) as session:
        session.add(GameClock())
        session.commit()
    with Session(engine) as session:
        clock = session.scalars(sa.select(GameClock)).one()
        assert clock.game_season == "spring"
        assert clock.time_scale == 1.0
        assert clock.is_paused is False


def test_world_object_to_dict():
    obj = WorldObject(map_id=uuid.uuid4(), object_type=ObjectType.BUG_HIVE, pos_x=1, pos_y=1)
    data = obj.to_dict()
    assert data["object_type"] == "bug_hive"
    assert data["id"] == str(obj.id)
    assert data["state"] == {}
    assert data["is_active"] is True