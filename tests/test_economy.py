import uuid

import pytest
import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from codevalley.models.base import Base
from codevalley.models.economy import (
    CraftingRecipe,
    CraftingSession,
    CraftingStatus,
    GameSessionStatus,
    Inventory,
    ItemType,
    MarketplaceItemStatus,
    MarketplaceListing,
    MarketplaceTransaction,
    MiniGame,
    MiniGameSession,
    MiniGameType,
    ShopItem,
    ShopItemType,
    UserPurchase,
)
from codevalley.models.quest import BattleDifficulty
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


def test_shop_item_defaults_from_schema():
    item = ShopItem(name="Keyboard", price=50, item_type=ShopItemType.TOOL)
    assert item.stock == -1
    assert item.is_available is True
    assert isinstance(item.id, uuid.UUID)


def test_recipe_and_minigame_defaults():
    recipe = CraftingRecipe(name="Compiler", result_item="binary")
    game = MiniGame(name="Quiz", type=MiniGameType.QUIZ, difficulty=BattleDifficulty.EASY)
    assert recipe.crafting_time == 60
    assert game.time_limit == 300
    assert recipe.required_items == {}
    assert game.config == {}


def test_ids_are_unique():
    first = Inventory(item_name="a", item_type=ItemType.CODE)
    second = Inventory(item_name="a", item_type=ItemType.CODE)
    assert first.id != second.id


def test_unknown_keyword_rejected():
    with pytest.raises(TypeError):
        Inventory(item_name="a", item_type=ItemType.TOOL, colour="red")


def test_inventory_round_trip_and_backref(session):
    user = _user("alice")
    item = Inventory(user=user, item_name="Debugger", quantity=3, item_type=ItemType.TOOL)
    session.add(item)
    session.commit()
    raw = session.execute(sa.text("SELECT item_type FROM inventories")).scalar_one()
    assert raw == "tool"
    session.expire_all()
    loaded = session.get(Inventory, item.id)
    assert loaded.item_type is ItemType.TOOL
    assert loaded.quantity == 3
    assert loaded.user_id == user.id
    assert [i.id for i in user.inventory] == [item.id]


def test_inventory_requires_item_type(session):
    user = _user("bob")
    session.add(user)
    session.flush()
    session.add(Inventory(user_id=user.id, item_name="Thing", item_type=None))
    with pytest.raises(IntegrityError):
        session.flush()


def test_inventory_to_dict():
    item = Inventory(item_name="Snippet", item_type=ItemType.SNIPPET)
    data = item.to_dict()
    assert data["item_type"] == "snippet"
    assert data["item_name"] == "Snippet"
    assert data["id"] == str(item.id)


def test_purchase_links_shop_item(session):
    user = _user("carol")
    shop_item = ShopItem(name="Theme", price=25, item_type=ShopItemType.COSMETIC)
    purchase = UserPurchase(user=user, shop_item=shop_item, total_price=25)
    session.add(purchase)
    session.commit()
    session.expire_all()
    loaded = session.get(UserPurchase, purchase.id)
    assert loaded.shop_item.name == "Theme"
    assert loaded.shop_item.item_type is ShopItemType.COSMETIC
    assert loaded.total_price == 25


def test_marketplace_transaction_buyer_and_seller(session):
    seller = _user("seller")
    buyer = _user("buyer")
    listing = MarketplaceListing(
        seller=seller, item_name="Regex", price=10, item_type=ItemType.CODE
    )
    assert listing.status is MarketplaceItemStatus.ACTIVE
    deal = MarketplaceTransaction(
        listing=listing, buyer=buyer, seller=seller, quantity=2, total_price=20
    )
    session.add(deal)
    session.commit()
    session.expire_all()
    loaded = session.get(MarketplaceTransaction, deal.id)
    assert loaded.buyer.username == "buyer"
    assert loaded.seller.username == "seller"
    assert loaded.listing.seller_id == seller.id


def test_recipe_required_items_round_trip(session):
    recipe = CraftingRecipe(
        name="Framework", result_item="app", required_items={"code": 2, "snippet": 5}
    )
    crafting = CraftingSession(user=_user("dave"), recipe=recipe)
    session.add(crafting)
    session.commit()
    session.expire_all()
    loaded = session.get(CraftingRecipe, recipe.id)
    assert loaded.required_items == {"code": 2, "snippet": 5}
    assert loaded.crafting_sessions[0].status is CraftingStatus.IN_PROGRESS


def test_session_data_null_reads_as_empty_dict(session):
    game = MiniGame(name="Puzzle", type=MiniGameType.PUZZLE, difficulty=BattleDifficulty.HARD)
    played = MiniGameSession(user=_user("erin"), mini_game=game, session_data=None)
    session.add(played)
    session.commit()
    session.expire_all()
    loaded = session.get(MiniGameSession, played.id)
    assert loaded.session_data == {}
    assert loaded.status is GameSessionStatus.ACTIVE
    assert loaded.mini_game.difficulty is BattleDifficulty.HARD