"""
Database setup script
"""
import asyncio
from datetime import datetime, timedelta

from truckhub.database import engine, Base, AsyncSessionLocal
from truckhub.models import (
    User, Organization, FoodTruck, Location, InventoryItem,
    ProteinInventory, ProteinType, Order, OrderStatus, Review,
)
from truckhub.api.auth import get_password_hash
from truckhub.services.aggregation import compute_dashboard_stats
from truckhub.utils.helpers import format_currency, generate_order_number, utc_today


async def setup_database():
    """Create tables and seed a demo truck"""
    print("Creating database tables...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    print("Tables created")

    async with AsyncSessionLocal() as session:
        owner = User(
            email="demo@truckhub.io",
            first_name="Rosa",
            last_name="Medina",
            hashed_password=get_password_hash("demo1234"),
        )
        session.add(owner)
        await session.flush()

        org = Organization(name="Medina Street Eats", owner_id=owner.id)
        session.add(org)
        await session.flush()

        truck = FoodTruck(
            organization_id=org.id,
            name="La Rosa Taqueria",
            cuisine="Mexican",
            description="Tacos, burritos and bowls",
        )
        session.add(truck)
        await session.flush()

        downtown = Location(
            truck_id=truck.id,
            name="Downtown Plaza",
            address="100 Main St",
            latitude=37.7749,
            longitude=-122.4194,
            is_active=True,
        )
        session.add_all([
            downtown,
            Location(truck_id=truck.id, name="Brewery Row", address="42 Hops Ave"),
        ])

        session.add_all([
            InventoryItem(truck_id=truck.id, name="Tortillas", category="bread",
                          current_stock=40, unit="dozen", low_stock_threshold=50, cost=3.25),
            InventoryItem(truck_id=truck.id, name="Salsa Verde", category="sauces",
                          current_stock=12, unit="quarts", low_stock_threshold=4, cost=6.00),
            ProteinInventory(truck_id=truck.id, protein_type=ProteinType.PORK,
                             allocated_amount=50, current_stock=8, used_amount=42, cost_per_unit=4.10),
            ProteinInventory(truck_id=truck.id, protein_type=ProteinType.BEEF,
                             allocated_amount=40, current_stock=30, used_amount=10, cost_per_unit=6.75),
            ProteinInventory(truck_id=truck.id, protein_type=ProteinType.CHICKEN,
                             allocated_amount=45, current_stock=25, used_amount=20, cost_per_unit=3.20),
        ])
        await session.flush()

        now = datetime.utcnow()
        orders = [
            Order(truck_id=truck.id, order_number=generate_order_number(), customer_name="Alex",
                  items=[{"name": "Carnitas Taco", "quantity": 2, "price": 4.00},
                         {"name": "Horchata", "quantity": 1, "price": 3.00}],
                  total_amount=11.00, status=OrderStatus.COMPLETED.value,
                  location_id=downtown.id, created_at=now),
            Order(truck_id=truck.id, order_number=generate_order_number(), customer_name="Sam",
                  items=[{"name": "Carne Asada Burrito", "quantity": 1, "price": 12.00}],
                  total_amount=12.00, status=OrderStatus.PREPARING.value,
                  location_id=downtown.id, created_at=now),
            Order(truck_id=truck.id, order_number=generate_order_number(), customer_name="Jordan",
                  items=[{"name": "Chicken Rice Bowl", "quantity": 2, "price": 11.50}],
                  total_amount=23.00, status=OrderStatus.COMPLETED.value,
                  location_id=downtown.id, created_at=now - timedelta(days=1)),
        ]
        reviews = [
            Review(truck_id=truck.id, customer_name="Alex", rating=5, comment="Best carnitas in town"),
            Review(truck_id=truck.id, customer_name="Jordan", rating=4, comment="Great bowl, long line"),
        ]
        session.add_all(orders + reviews)
        await session.commit()

        stats = compute_dashboard_stats(orders, reviews, [downtown], day=utc_today())
        print("Seed data created")
        print(f"  Today's sales: {format_currency(stats.today_sales)} ({stats.orders_today} orders)")

    print("\nDatabase setup complete!")
    print("\nDefault login:")
    print("  Email: demo@truckhub.io")
    print("  Password: demo1234")


if __name__ == "__main__":
    asyncio.run(setup_database())
