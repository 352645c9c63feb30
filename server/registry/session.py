# server/registry/session.py
import os
from pathlib import Path
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

REGISTRY_URL = os.getenv("REGISTRY_DATABASE_URL", "sqlite+aiosqlite:///./data/registry.db")

registry_engine: AsyncEngine = create_async_engine(
    REGISTRY_URL, future=True, echo=os.getenv("SQL_ECHO", "0") == "1"
)
RegistrySessionLocal = sessionmaker(
    bind=registry_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

def ensure_sqlite_dir(db_url: str = REGISTRY_URL) -> None:
    """SQLite will not create missing parent folders for a file database."""
    url = make_url(db_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

async def get_registry_session():
    async with RegistrySessionLocal() as session:
        yield session
