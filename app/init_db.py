import logging

from .database import AsyncSessionLocal, Base, engine

logger = logging.getLogger(__name__)

async def get_db():
    db = AsyncSessionLocal()
    try:
        yield db
    finally:
        await db.close()

async def create_tables():
    """
    Create all tables on the configured engine. Only used when
    AUTO_CREATE_TABLES is set; deployed databases are migrated with alembic.
    """
    # Register every mapped class on Base.metadata
    import app.models  # noqa: F401

    logger.info("Creating database tables")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

async def bootstrap_database():
    """Create tables and seed the default counseling categories."""
    from app.services.category_service import seed_default_categories

    await create_tables()
    async with AsyncSessionLocal() as db:
        created = await seed_default_categories(db)
    logger.info(f"Database bootstrap complete, {created} default categories added")
