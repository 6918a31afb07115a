from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from app.config import settings
import logging

logger = logging.getLogger(__name__)

SQLALCHEMY_DATABASE_URL = settings.sqlalchemy_database_url

# Log the connection string (mask password for safety)
masked_url = SQLALCHEMY_DATABASE_URL
db_password = settings.db_password.get_secret_value()
if db_password:
    masked_url = masked_url.replace(db_password, "*****")
logger.info(f"SQLAlchemy DB URL: {masked_url}")

engine = create_async_engine(SQLALCHEMY_DATABASE_URL)

# Services read attributes after commit, so keep them loaded
AsyncSessionLocal = async_sessionmaker(
    autoflush=False, bind=engine, class_=AsyncSession, expire_on_commit=False
)

Base = declarative_base()

# JSONB on Postgres, plain JSON elsewhere (sqlite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")
