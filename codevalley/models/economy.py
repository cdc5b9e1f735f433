"""Inventory, shop, marketplace, crafting and mini-games."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlalchemy.orm import backref, relationship

from codevalley.models.base import GUID, Base, JSONMap, new_id
from codevalley.models.quest import BattleDifficulty
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


class ItemType(str, enum.Enum):
    TOOL = "tool"
    CODE = "code"
    SNIPPET = "snippet"
    RESOURCE = "resource"


class ShopItemType(str, enum.Enum):
    TOOL = "tool"
    UPGRADE = "upgrade"
    COSMETIC = "cosmetic"
    RESOURCE = "resource"
    SKILL = "skill"


class MarketplaceItemStatus(str, enum.Enum):
    ACTIVE = "active"
    SOLD = "sold"
    EXPIRED = "expired"


class CraftingStatus(str, enum.Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class MiniGameType(str, enum.Enum):
    QUIZ = "quiz"
    PUZZLE = "puzzle"
    REGEX = "regex"
    ALGORITHM = "algorithm"


class GameSessionStatus(str, enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMEOUT = "timeout"


class Inventory(Base):
    __tablename__ = "inventories"

    id = sa.Column(GUID(), primary_key=True, default=new_id)
    user_id = _user_fk(index=True)
    item_name = sa.Column(sa.String(255), nullable=False)
    quantity = sa.Column(sa.Integer, default=1)
    item_type = sa.Column(_enum(ItemType), nullable=False)
    created_at = sa.Column(sa.DateTime, default=_now)
    updated_at = sa.Column(sa.DateTime, default=_now, onupdate=_now)

    user = relationship(User, backref=backref("inventory"))


class ShopItem(Base):
    __tablename__ = "shop_items"

    id = sa.Column(GUID(), primary_key=True, default=new_id)
    name = sa.Column(sa.String(191), nullable=False, index=True)
    description = sa.Column(sa.Text)
    price = sa.Column(sa.Integer, nullable=False)
    item_type = sa.Column(_enum(ShopItemType), nullable=False)
    icon_url = sa.Column(sa.String(255), default="")
    is_available = sa.Column(sa.Boolean, default=True)
    stock = sa.Column(sa.Integer, default=-1)  # -1 means unlimited
    created_at = sa.Column(sa.DateTime, default=_now)
    updated_at = sa.Column(sa.DateTime, default=_now, onupdate=_now)


class UserPurchase(Base):
    __tablename__ = "user_purchases"

    id = sa.Column(GUID(), primary_key=True, default=new_id)
    user_id = _user_fk(index=True)
    shop_item_id = sa.Column(
        GUID(), sa.ForeignKey("shop_items.id"), nullable=False, index=True
    )
    quantity = sa.Column(sa.Integer, default=1)
    total_price = sa.Column(sa.Integer, nullable=False)
    purchased_at = sa.Column(sa.DateTime)

    user = relationship(User)
    shop_item = relationship(ShopItem)


class MarketplaceListing(Base):
    __tablename__ = "marketplace_listings"

    id = sa.Column(GUID(), primary_key=True, default=new_id)
    seller_id = _user_fk(index=True)
    item_name = sa.Column(sa.String(191), nullable=False, index=True)
    description = sa.Column(sa.Text)
    price = sa.Column(sa.Integer, nullable=False)
    quantity = sa.Column(sa.Integer, default=1)
    item_type = sa.Column(_enum(ItemType), nullable=False)
    status = sa.Column(
        _enum(MarketplaceItemStatus), default=MarketplaceItemStatus.ACTIVE
    )
    expires_at = sa.Column(sa.DateTime)
    created_at = sa.Column(sa.DateTime, default=_now)
    updated_at = sa.Column(sa.DateTime, default=_now, onupdate=_now)

    seller = relationship(User, foreign_keys=[seller_id])


class MarketplaceTransaction(Base):
    __tablename__ = "marketplace_transactions"

    id = sa.Column(GUID(), primary_key=True, default=new_id)
    listing_id = sa.Column(
        GUID(), sa.ForeignKey("marketplace_listings.id"), nullable=False, index=True
    )
    buyer_id = _user_fk(index=True)
    seller_id = _user_fk(index=True)
    quantity = sa.Column(sa.Integer, nullable=False)
    total_price = sa.Column(sa.Integer, nullable=False)
    created_at = sa.Column(sa.DateTime, default=_now)

    listing = relationship(MarketplaceListing)
    buyer = relationship(User, foreign_keys=[buyer_id])
    seller = relationship(User, foreign_keys=[seller_id])


class CraftingRecipe(Base):
    __tablename__ = "crafting_recipes"

    id = sa.Column(GUID(), primary_key=True, default=new_id)
    name = sa.Column(sa.String(191), nullable=False, index=True)
    description = sa.Column(sa.Text)
    required_items = sa.Column(JSONMap(), default=dict)  # item name -> quantity
    result_item = sa.Column(sa.String(255), nullable=False)
    result_quantity = sa.Column(sa.Integer, default=1)
    crafting_time = sa.Column(sa.Integer, default=60)  # seconds
    required_level = sa.Column(sa.Integer, default=1)
    is_active = sa.Column(sa.Boolean, default=True)
    created_at = sa.Column(sa.DateTime, default=_now)
    updated_at = sa.Column(sa.DateTime, default=_now, onupdate=_now)

    crafting_sessions = relationship("CraftingSession", back_populates="recipe")


class CraftingSession(Base):
    __tablename__ = "crafting_sessions"

    id = sa.Column(GUID(), primary_key=True, default=new_id)
    user_id = _user_fk(index=True)
    recipe_id = sa.Column(
        GUID(), sa.ForeignKey("crafting_recipes.id"), nullable=False, index=True
    )
    status = sa.Column(_enum(CraftingStatus), default=CraftingStatus.IN_PROGRESS)
    started_at = sa.Column(sa.DateTime)
    completed_at = sa.Column(sa.DateTime, nullable=True)

    user = relationship(User)
    recipe = relationship(CraftingRecipe, back_populates="crafting_sessions")


class MiniGame(Base):
    __tablename__ = "mini_games"

    id = sa.Column(GUID(), primary_key=True, default=new_id)
    name = sa.Column(sa.String(191), nullable=False, index=True)
    description = sa.Column(sa.Text)
    type = sa.Column(_enum(MiniGameType), nullable=False)
    difficulty = sa.Column(_enum(BattleDifficulty), nullable=False)
    config = sa.Column(JSONMap(), default=dict)
    reward_coins = sa.Column(sa.Integer, default=0)
    reward_exp = sa.Column(sa.Integer, default=0)
    time_limit = sa.Column(sa.Integer, default=300)  # seconds
    is_active = sa.Column(sa.Boolean, default=True)
    created_at = sa.Column(sa.DateTime, default=_now)
    updated_at = sa.Column(sa.DateTime, default=_now, onupdate=_now)

    game_sessions = relationship("MiniGameSession", back_populates="mini_game")


class MiniGameSession(Base):
    __tablename__ = "mini_game_sessions"

    id = sa.Column(GUID(), primary_key=True, default=new_id)
    user_id = _user_fk(index=True)
    mini_game_id = sa.Column(
        GUID(), sa.ForeignKey("mini_games.id"), nullable=False, index=True
    )
    status = sa.Column(_enum(GameSessionStatus), default=GameSessionStatus.ACTIVE)
    score = sa.Column(sa.Integer, default=0)
    started_at = sa.Column(sa.DateTime)
    completed_at = sa.Column(sa.DateTime, nullable=True)
    session_data = sa.Column(JSONMap(), default=dict)

    user = relationship(User)
    mini_game = relationship(MiniGame, back_populates="game_sessions")