#!/usr/bin/env python3
"""Wipe the database and load demo shops, menus, orders and expenses."""
from __future__ import annotations

import argparse
import random
import sys
from datetime import timedelta
from decimal import Decimal
from pathlib import Path
from uuid import uuid4

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from quisine.core.clock import utcnow  # noqa: E402
from quisine.core.config import IS_DEV  # noqa: E402
from quisine.core.database import Base, SessionLocal, engine  # noqa: E402
from quisine.models import (  # noqa: E402
    Expense,
    Menu,
    MenuCategory,
    MenuItem,
    MenuItemModifier,
    Order,
    OrderItem,
    Shop,
    StaffMember,
)
from quisine.services.auth import hash_password  # noqa: E402

DEMO_PASSWORD = "password123"

UNSPLASH = "https://images.unsplash.com"

DEMO_SHOPS = [
    {
        "username": "burgeradmin",
        "email": "admin@bunandbeef.tn",
        "shop_name": "Bun & Beef",
        "address": "Rue du Lac Lochness, Les Berges du Lac 2, Tunis",
        "contact_phone": "+216 20 123 456",
        "primary_color": "#ea580c",
        "secondary_color": "#1e293b",
        "logo": f"{UNSPLASH}/photo-1561758033-d89a9ad46330?w=200&q=80",
        "cover": f"{UNSPLASH}/photo-1550547660-d9450f859349?w=1200&q=80",
        "staff": [("Ahmed", "1234", "Manager"), ("Sarah", "0000", "Waiter"), ("Chef Karim", "1111", "Kitchen")],
        "menu": [
            (
                "Gourmet Burgers",
                [
                    ("Le Tunisien", 22.0, "Grilled patty, harissa mayo, grilled peppers, cheddar.", 15,
                     f"{UNSPLASH}/photo-1568901346375-23c9450c58cd?w=500&q=80",
                     [("Extra Cheese", 2.5), ("Double Patty", 6.0)]),
                    ("Truffle Smash", 28.5, "Smashed beef, truffle oil, caramelized onions.", 15,
                     f"{UNSPLASH}/photo-1529692236671-f1f6cf9683ba?w=500&q=80", []),
                ],
            ),
            (
                "Boissons",
                [
                    ("Citronnade", 6.0, None, 5, f"{UNSPLASH}/photo-1541167760496-1628856ab772?w=500&q=80", []),
                    ("Coca Cola", 3.5, None, 2, f"{UNSPLASH}/photo-1541167760496-1628856ab772?w=500&q=80", []),
                ],
            ),
        ],
        "history": True,
    },
    {
        "username": "sushiadmin",
        "email": "chef@origami.tn",
        "shop_name": "Origami Sushi Bar",
        "address": "Avenue Habib Bourguiba, La Marsa",
        "contact_phone": "+216 55 987 654",
        "primary_color": "#be123c",
        "secondary_color": "#000000",
        "logo": f"{UNSPLASH}/photo-1579871494447-9811cf80d66c?w=200&q=80",
        "cover": f"{UNSPLASH}/photo-1553621042-f6e147245754?w=1200&q=80",
        "staff": [("Myriam", "9999", "Manager"), ("Youssef", "5555", "Waiter")],
        "menu": [],
        "history": False,
    },
    {
        "username": "tunisianadmin",
        "email": "contact@lesfaxien.tn",
        "shop_name": "Le Sfaxien Authentique",
        "address": "Bab Bhar, Medina, Tunis",
        "contact_phone": "+216 71 111 222",
        "primary_color": "#059669",
        "secondary_color": "#fcd34d",
        "logo": f"{UNSPLASH}/photo-1541518763669-27fef04b14ea?w=200&q=80",
        "cover": f"{UNSPLASH}/photo-1590779033100-9f60a05a013d?w=1200&q=80",
        "staff": [("Hedi", "1010", "Manager")],
        "menu": [
            (
                "Plats Traditionnels",
                [
                    ("Couscous Royal", 35.0, "Lamb, chicken, merguez, and seasonal vegetables.", 30,
                     f"{UNSPLASH}/premium_photo-1664472637341-3ec829d1f4df?w=500&q=80", [("Extra Merguez", 4.0)]),
                    ("Ojja Merguez", 18.0, "Spicy tomato stew with fresh merguez and eggs.", 20,
                     f"{UNSPLASH}/photo-1572449043416-55f4685c9bb7?w=500&q=80", []),
                ],
            ),
            (
                "Entrées",
                [
                    ("Brik à l'oeuf", 4.5, "Crispy pastry with egg, tuna, and parsley.", 10,
                     f"{UNSPLASH}/photo-1589302168068-964664d93dc0?w=500&q=80", [("Extra Cheese", 1.0)]),
                ],
            ),
        ],
        "history": True,
    },
]

HISTORY_STATUSES = ["completed", "completed", "completed", "cancelled"]
HISTORY_EXPENSE_CATEGORIES = ["Supplies", "Rent", "Salaries", "Utilities"]


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Drop the database and load demo data.")
    parser.add_argument("--days", type=int, default=10, help="Days of order history")
    parser.add_argument("--seed", type=int, default=None, help="Random generator seed")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Allow running outside the DEV environment",
    )
    return parser.parse_args()


def _wipe(db) -> None:
    for model in (OrderItem, Order, Expense, MenuItemModifier, MenuItem, MenuCategory, Menu, StaffMember, Shop):
        db.query(model).delete(synchronize_session=False)
    db.commit()


def _create_shop(db, demo: dict, password_hash: str) -> Shop:
    tenant_id = uuid4().hex
    shop = Shop(
        tenant_id=tenant_id,
        username=demo["username"],
        email=demo["email"],
        password_hash=password_hash,
        shop_name=demo["shop_name"],
        address=demo["address"],
        contact_phone=demo["contact_phone"],
        primary_color=demo["primary_color"],
        secondary_color=demo["secondary_color"],
        logo=demo["logo"],
        cover=demo["cover"],
    )
    shop.staff = [StaffMember(name=name, pin=pin, role=role) for name, pin, role in demo["staff"]]
    db.add(shop)

    menu = Menu(tenant_id=tenant_id)
    for category_position, (category_name, items) in enumerate(demo["menu"]):
        category = MenuCategory(name=category_name, position=category_position)
        for item_position, (name, price, description, prep_time, image_url, modifiers) in enumerate(items):
            item = MenuItem(
                name=name,
                base_price=Decimal(str(price)),
                description=description,
                prep_time=prep_time,
                image_url=image_url,
                available=True,
                position=item_position,
            )
            item.modifiers = [
                MenuItemModifier(name=mod_name, price=Decimal(str(mod_price)), default_on=True, position=index)
                for index, (mod_name, mod_price) in enumerate(modifiers)
            ]
            category.items.append(item)
        menu.categories.append(category)
    db.add(menu)
    db.flush()
    return shop


def _generate_history(db, tenant_id: str, days: int, rng: random.Random) -> int:
    now = utcnow()
    created = 0
    for offset in range(days):
        day = now - timedelta(days=offset)
        for _ in range(rng.randint(3, 7)):
            amount = Decimal(str(round(rng.uniform(20, 70), 2)))
            order = Order(
                tenant_id=tenant_id,
                table_number=rng.randint(1, 15),
                total=amount,
                status=rng.choice(HISTORY_STATUSES),
                created_at=day,
                updated_at=day,
            )
            order.order_items = [
                OrderItem(tenant_id=tenant_id, name="Random Dish", quantity=1, unit_price=amount, modifiers=[])
            ]
            db.add(order)
            created += 1

        if offset % 2 == 0:
            db.add(
                Expense(
                    tenant_id=tenant_id,
                    title="Vegetable Supply" if offset % 4 == 0 else "Daily Maintenance",
                    amount=Decimal(str(round(rng.uniform(50, 150), 2))),
                    category=rng.choice(HISTORY_EXPENSE_CATEGORIES),
                    date=day,
                )
            )
    return created


def main() -> int:
    args = parse_args()

    if not IS_DEV and not args.force:
        print("Seeding is disabled outside the DEV environment. Use --force.")
        return 1

    Base.metadata.create_all(bind=engine)
    rng = random.Random(args.seed)
    password_hash = hash_password(DEMO_PASSWORD)

    db = SessionLocal()
    try:
        _wipe(db)
        summary = []
        for demo in DEMO_SHOPS:
            shop = _create_shop(db, demo, password_hash)
            orders = _generate_history(db, shop.tenant_id, args.days, rng) if demo["history"] else 0
            summary.append((shop.shop_name, shop.tenant_id, shop.email, orders))
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

    for shop_name, tenant_id, email, orders in summary:
        print(f"Shop: {shop_name} | tenant={tenant_id} | email={email} | orders={orders}")
    print(f"Password for every demo account: {DEMO_PASSWORD}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
