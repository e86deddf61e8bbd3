"""
Main FastAPI application
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import select

from truckhub.config import get_settings
from truckhub.database import engine, Base, AsyncSessionLocal
from truckhub.models import MenuItem, ProteinType
from truckhub.services.cache import ResourceCache
from truckhub.utils.logger import get_logger
from truckhub.api import auth, organizations, food_truck, locations, inventory
from truckhub.api import protein_inventory, menu_items, orders, reviews, dashboard

settings = get_settings()
get_logger("truckhub")
logger = logging.getLogger(__name__)

# (name, category, protein, lbs per serving, price)
DEFAULT_MENU = [
    ("Carnitas Taco", "tacos", ProteinType.PORK, 0.25, 4.00),
    ("Al Pastor Taco", "tacos", ProteinType.PORK, 0.25, 4.00),
    ("Carne Asada Taco", "tacos", ProteinType.BEEF, 0.25, 4.50),
    ("Pollo Asado Taco", "tacos", ProteinType.CHICKEN, 0.25, 3.75),
    ("Carnitas Burrito", "burritos", ProteinType.PORK, 0.5, 11.00),
    ("Carne Asada Burrito", "burritos", ProteinType.BEEF, 0.5, 12.00),
    ("Chicken Burrito", "burritos", ProteinType.CHICKEN, 0.5, 10.50),
    ("Beef Rice Bowl", "bowls", ProteinType.BEEF, 0.4, 12.50),
    ("Chicken Rice Bowl", "bowls", ProteinType.CHICKEN, 0.4, 11.50),
    ("Chips & Salsa", "sides", None, None, 3.50),
    ("Horchata", "drinks", None, None, 3.00),
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")

    # Seed menu catalog if empty
    async with AsyncSessionLocal() as session:
        existing = await session.execute(select(MenuItem))
        if not existing.scalars().first():
            for name, category, protein, amount, price in DEFAULT_MENU:
                session.add(MenuItem(
                    name=name,
                    category=category,
                    protein_type=protein,
                    protein_amount=amount,
                    price=price,
                ))
            await session.commit()
            logger.info(f"Seeded {len(DEFAULT_MENU)} menu items")

    yield

    app.state.cache.clear()
    await engine.dispose()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)
app.state.cache = ResourceCache(ttl_seconds=settings.CACHE_TTL_SECONDS)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(organizations.router, prefix="/api", tags=["Organization"])
app.include_router(food_truck.router, prefix="/api/food-truck", tags=["Food Truck"])
app.include_router(locations.router, prefix="/api/locations", tags=["Locations"])
app.include_router(inventory.router, prefix="/api/inventory", tags=["Inventory"])
app.include_router(protein_inventory.router, prefix="/api/protein-inventory", tags=["Protein Inventory"])
app.include_router(menu_items.router, prefix="/api/menu-items", tags=["Menu"])
app.include_router(orders.router, prefix="/api/orders", tags=["Orders"])
app.include_router(reviews.router, prefix="/api/reviews", tags=["Reviews"])
app.include_router(dashboard.router, prefix="/api/dashboard-stats", tags=["Dashboard"])


@app.get("/")
async def root():
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "truckhub.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
