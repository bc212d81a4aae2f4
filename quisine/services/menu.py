"""Menu mutation engine.

Every write targets the smallest row it can: a category is addressed by its
id inside the tenant's menu, an item by (item id, category id, tenant) in a
single statement, so an edit to one item can never land on a same-named item
in another category and never rewrites the rest of the menu.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Callable, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from quisine.core.clock import utcnow
from quisine.core.errors import NotFoundError
from quisine.models.menu import Menu
from quisine.models.menu_category import MenuCategory
from quisine.models.menu_item import MenuItem
from quisine.models.menu_item_modifier import MenuItemModifier
from quisine.schemas.menu import ItemFields, ModifierIn

logger = logging.getLogger(__name__)
MENU_PREFIX = "[MENU]"

# Zero-argument callable that stores the uploaded image and returns its public URL.
ImageUploader = Callable[[], str]


def _money(value: Any) -> float:
    if value is None:
        return 0.0
    return float(value)


def modifier_to_dict(modifier: MenuItemModifier) -> dict:
    return {
        "id": modifier.id,
        "name": modifier.name,
        "price": _money(modifier.price),
        "on": bool(modifier.default_on),
    }


def item_to_dict(item: MenuItem) -> dict:
    return {
        "id": item.id,
        "category_id": item.category_id,
        "name": item.name,
        "image_url": item.image_url,
        "base_price": _money(item.base_price),
        "description": item.description,
        "prep_time": item.prep_time,
        "available": bool(item.available),
        "modifiers": [modifier_to_dict(modifier) for modifier in item.modifiers],
    }


def category_to_dict(category: MenuCategory) -> dict:
    return {
        "id": category.id,
        "name": category.name,
        "description": category.description,
        "items": [item_to_dict(item) for item in category.items],
    }


def menu_to_dict(menu: Menu) -> dict:
    return {
        "id": menu.id,
        "tenant_id": menu.tenant_id,
        "categories": [category_to_dict(category) for category in menu.categories],
    }


def create_empty_menu(db: Session, tenant_id: str) -> Menu:
    """Stage an empty menu for ``tenant_id``; the caller owns the commit."""
    menu = Menu(tenant_id=tenant_id)
    db.add(menu)
    db.flush()
    return menu


def _menu_query(db: Session, tenant_id: str):
    return (
        db.query(Menu)
        .options(
            selectinload(Menu.categories)
            .selectinload(MenuCategory.items)
            .selectinload(MenuItem.modifiers)
        )
        .filter(Menu.tenant_id == tenant_id)
    )


def find_menu(db: Session, tenant_id: str) -> Optional[Menu]:
    return _menu_query(db, tenant_id).first()


def get_or_create_menu(db: Session, tenant_id: str) -> Menu:
    menu = find_menu(db, tenant_id)
    if menu is not None:
        return menu

    logger.warning("%s menu missing, creating empty one tenant_id=%s", MENU_PREFIX, tenant_id)
    try:
        create_empty_menu(db, tenant_id)
        db.commit()
    except IntegrityError:
        # a concurrent request created it first
        db.rollback()
    return _menu_query(db, tenant_id).one()


def _tenant_category_ids(tenant_id: str):
    return (
        select(MenuCategory.id)
        .join(Menu, Menu.id == MenuCategory.menu_id)
        .where(Menu.tenant_id == tenant_id)
    )


def _get_category(db: Session, tenant_id: str, category_id: int) -> MenuCategory:
    category = (
        db.query(MenuCategory)
        .join(Menu, Menu.id == MenuCategory.menu_id)
        .filter(MenuCategory.id == category_id, Menu.tenant_id == tenant_id)
        .first()
    )
    if category is None:
        raise NotFoundError("Category")
    return category


def _next_position(db: Session, column, *filters) -> int:
    current = db.query(func.max(column)).filter(*filters).scalar()
    return 0 if current is None else int(current) + 1


def _build_modifiers(modifiers: list[ModifierIn]) -> list[MenuItemModifier]:
    return [
        MenuItemModifier(
            name=modifier.name,
            price=Decimal(str(modifier.price)),
            default_on=modifier.on,
            position=index,
        )
        for index, modifier in enumerate(modifiers)
    ]


# =========================
# CATEGORIES
# =========================
def add_category(db: Session, tenant_id: str, name: str, description: Optional[str] = None) -> Menu:
    menu = db.query(Menu).filter(Menu.tenant_id == tenant_id).first()
    if menu is None:
        raise NotFoundError("Menu")

    category = MenuCategory(
        menu_id=menu.id,
        name=name,
        description=description,
        position=_next_position(db, MenuCategory.position, MenuCategory.menu_id == menu.id),
    )
    db.add(category)
    db.commit()
    logger.info("%s category added tenant_id=%s category_id=%s", MENU_PREFIX, tenant_id, category.id)

    db.expire_all()
    return _menu_query(db, tenant_id).one()


def delete_category(db: Session, tenant_id: str, category_id: int) -> None:
    """Remove the category and everything under it. Unknown ids are a no-op."""
    target = _tenant_category_ids(tenant_id).where(MenuCategory.id == category_id)
    item_ids = select(MenuItem.id).where(MenuItem.category_id.in_(target))

    db.execute(
        delete(MenuItemModifier)
        .where(MenuItemModifier.item_id.in_(item_ids))
        .execution_options(synchronize_session=False)
    )
    db.execute(
        delete(MenuItem)
        .where(MenuItem.category_id.in_(target))
        .execution_options(synchronize_session=False)
    )
    result = db.execute(
        delete(MenuCategory)
        .where(MenuCategory.id.in_(target))
        .execution_options(synchronize_session=False)
    )
    db.commit()
    logger.info(
        "%s category delete tenant_id=%s category_id=%s removed=%s",
        MENU_PREFIX,
        tenant_id,
        category_id,
        result.rowcount,
    )


# =========================
# ITEMS
# =========================
def add_item(
    db: Session,
    tenant_id: str,
    category_id: int,
    fields: ItemFields,
    upload_image: Optional[ImageUploader] = None,
) -> MenuItem:
    category = _get_category(db, tenant_id, category_id)

    # upload first: a failed upload must leave the menu untouched
    image_url = upload_image() if upload_image is not None else None

    item = MenuItem(
        category_id=category.id,
        name=fields.name,
        base_price=Decimal(str(fields.base_price or 0)),
        description=fields.description,
        prep_time=fields.prep_time,
        image_url=image_url,
        available=True,
        position=_next_position(db, MenuItem.position, MenuItem.category_id == category.id),
    )
    item.modifiers = _build_modifiers(fields.modifiers or [])
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info(
        "%s item added tenant_id=%s category_id=%s item_id=%s",
        MENU_PREFIX,
        tenant_id,
        category.id,
        item.id,
    )
    return item


def _item_match(tenant_id: str, category_id: int, item_id: int):
    return (
        MenuItem.id == item_id,
        MenuItem.category_id == category_id,
        MenuItem.category_id.in_(_tenant_category_ids(tenant_id)),
    )


def _get_item(db: Session, tenant_id: str, category_id: int, item_id: int) -> MenuItem:
    item = db.query(MenuItem).filter(*_item_match(tenant_id, category_id, item_id)).first()
    if item is None:
        raise NotFoundError("Item")
    return item


def update_item(
    db: Session,
    tenant_id: str,
    category_id: int,
    item_id: int,
    fields: ItemFields,
    upload_image: Optional[ImageUploader] = None,
) -> MenuItem:
    """Selective update; ``image_url`` only changes when a new image was uploaded."""
    values: dict[str, Any] = {}
    if fields.name is not None:
        values["name"] = fields.name
    if fields.base_price is not None:
        values["base_price"] = Decimal(str(fields.base_price))
    if fields.description is not None:
        values["description"] = fields.description
    if fields.prep_time is not None:
        values["prep_time"] = fields.prep_time

    # Existence check first so an unknown item never costs an upload.
    _get_item(db, tenant_id, category_id, item_id)
    if upload_image is not None:
        values["image_url"] = upload_image()

    values["updated_at"] = utcnow()
    result = db.execute(
        update(MenuItem)
        .where(*_item_match(tenant_id, category_id, item_id))
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    # the item may have been deleted while the image was uploading
    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError("Item")

    if fields.modifiers is not None:
        db.execute(
            delete(MenuItemModifier)
            .where(MenuItemModifier.item_id == item_id)
            .execution_options(synchronize_session=False)
        )
        for modifier in _build_modifiers(fields.modifiers):
            modifier.item_id = item_id
            db.add(modifier)

    db.commit()
    db.expire_all()
    logger.info(
        "%s item updated tenant_id=%s category_id=%s item_id=%s fields=%s",
        MENU_PREFIX,
        tenant_id,
        category_id,
        item_id,
        sorted(values),
    )
    return _get_item(db, tenant_id, category_id, item_id)


def delete_item(db: Session, tenant_id: str, category_id: int, item_id: int) -> None:
    """Idempotent: deleting an unknown item succeeds silently."""
    matched = select(MenuItem.id).where(*_item_match(tenant_id, category_id, item_id))
    db.execute(
        delete(MenuItemModifier)
        .where(MenuItemModifier.item_id.in_(matched))
        .execution_options(synchronize_session=False)
    )
    result = db.execute(
        delete(MenuItem)
        .where(*_item_match(tenant_id, category_id, item_id))
        .execution_options(synchronize_session=False)
    )
    db.commit()
    logger.info(
        "%s item delete tenant_id=%s category_id=%s item_id=%s removed=%s",
        MENU_PREFIX,
        tenant_id,
        category_id,
        item_id,
        result.rowcount,
    )


def set_availability(db: Session, tenant_id: str, category_id: int, item_id: int, available: bool) -> MenuItem:
    result = db.execute(
        update(MenuItem)
        .where(*_item_match(tenant_id, category_id, item_id))
        .values(available=available, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError("Item")
    db.commit()
    db.expire_all()
    return _get_item(db, tenant_id, category_id, item_id)
