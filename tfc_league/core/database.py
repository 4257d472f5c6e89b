import os
from sqlmodel import SQLModel, Session
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy import create_engine as create_sync_engine

from tfc_league.core.config import DB_PATH, DATABASE_URL, ASYNC_DATABASE_URL, SQL_ECHO

# Ensure the default SQLite file exists (prevents async context errors)
if DATABASE_URL.startswith("sqlite:///") and DB_PATH in DATABASE_URL and not os.path.exists(DB_PATH):
    print("📂 Database file not found. Creating a new one...")
    open(DB_PATH, 'a').close()

# --- Engines ---
engine = create_async_engine(ASYNC_DATABASE_URL, echo=SQL_ECHO, future=True)            # Async (startup)
sync_engine = create_sync_engine(DATABASE_URL, echo=SQL_ECHO, future=True)              # Sync (routes/seeding)


# --- Initialize DB tables ---
async def init_db():
    """Create tables asynchronously if they don't exist."""
    # Import models so every table is registered on SQLModel.metadata
    from tfc_league import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


# --- Sync session for seeding/scripts ---
def get_sync_session():
    return Session(sync_engine)


# --- Request-scoped sync session (used in routes) ---
def get_session():
    with Session(sync_engine) as session:
        yield session
