#!/usr/bin/env python3
"""
Seed script to create demo tables, menu and settings
"""

import asyncio
from decimal import Decimal


async def seed_demo_data():
    """Seed demo data for development"""
    from sqlalchemy import select, func

    from robs.database import SessionLocal, engine, Base
    from robs.models.menu import MenuItem
    from robs.models.table import Table, TableStatus
    from robs.services.settings import get_restaurant_settings

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with SessionLocal() as db:
        # Check if demo data already exists
        result = await db.execute(select(func.count(Table.id)))
        if result.scalar():
            print("Demo data already exists. Skipping...")
            return

        print("Creating restaurant settings...")
        settings = await get_restaurant_settings(db)
        settings.restaurant_name = "Spice Route"

        print("Creating tables...")
        capacities = [2, 2, 4, 4, 4, 4, 6, 6, 8, 10]
        for number, capacity in enumerate(capacities, start=1):
            db.add(Table(number=number, capacity=capacity, status=TableStatus.FREE, is_primary=False))

        print("Creating menu items...")

        # Create menu items
        menu_items = [
            # Starters
            {"name": "Paneer Tikka", "description": "Char-grilled cottage cheese with peppers and onion", "price": "220.00", "category": "Starters"},
            {"name": "Veg Samosa", "description": "Two crisp pastries filled with spiced potato", "price": "60.00", "category": "Starters"},
            {"name": "Chicken 65", "description": "Spicy deep-fried chicken with curry leaves", "price": "260.00", "category": "Starters"},
            {"name": "Hara Bhara Kabab", "description": "Spinach and pea patties", "price": "180.00", "category": "Starters"},

            # Mains
            {"name": "Butter Chicken", "description": "Tandoori chicken in tomato butter gravy", "price": "340.00", "category": "Mains"},
            {"name": "Dal Makhani", "description": "Black lentils slow-cooked overnight", "price": "240.00", "category": "Mains"},
            {"name": "Palak Paneer", "description": "Cottage cheese in spinach gravy", "price": "260.00", "category": "Mains"},
            {"name": "Veg Thali", "description": "Two curries, dal, rice, roti, salad and dessert", "price": "300.00", "category": "Mains"},
            {"name": "Chicken Biryani", "description": "Dum-cooked basmati rice with chicken and raita", "price": "320.00", "category": "Mains"},

            # Breads
            {"name": "Butter Naan", "description": "Tandoor-baked leavened bread", "price": "50.00", "category": "Breads"},
            {"name": "Tandoori Roti", "description": "Whole wheat bread from the tandoor", "price": "30.00", "category": "Breads"},
            {"name": "Garlic Naan", "description": "Naan with garlic and coriander", "price": "70.00", "category": "Breads"},

            # Desserts
            {"name": "Gulab Jamun", "description": "Two milk dumplings in rose syrup", "price": "90.00", "category": "Desserts"},
            {"name": "Rasmalai", "description": "Cottage cheese discs in saffron milk", "price": "120.00", "category": "Desserts"},

            # Drinks
            {"name": "Masala Chai", "description": "Spiced milk tea", "price": "40.00", "category": "Drinks"},
            {"name": "Sweet Lassi", "description": "Chilled yoghurt drink", "price": "80.00", "category": "Drinks"},
            {"name": "Fresh Lime Soda", "description": "Sweet or salted", "price": "70.00", "category": "Drinks"},
        ]

        for sort_order, item_data in enumerate(menu_items):
            db.add(
                MenuItem(
                    name=item_data["name"],
                    description=item_data["description"],
                    price=Decimal(item_data["price"]),
                    category=item_data["category"],
                    is_available=True,
                    sort_order=sort_order,
                )
            )

        await db.commit()

        print(f"""
Demo data created successfully!

Restaurant: {settings.restaurant_name}
  Tax: {settings.tax_rate}% ({"enabled" if settings.tax_enabled else "disabled"})
  Currency: {settings.currency}

Tables: {len(capacities)} created
Menu: {len(menu_items)} items created
""")


if __name__ == "__main__":
    asyncio.run(seed_demo_data())
