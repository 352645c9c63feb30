# server/main.py
import logging
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from registry.models import Base as RegistryBase
from registry.session import RegistrySessionLocal, ensure_sqlite_dir, registry_engine
from utils.connections_file import sync_connections_from_file

from routes.connections import router as connections_router
from routes.proxy import router as proxy_router

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- startup ---
    # 1) ensure registry tables
    ensure_sqlite_dir()
    async with registry_engine.begin() as conn:
        await conn.run_sync(RegistryBase.metadata.create_all)

    # 2) pick up connections added to userdata/connections.json by hand
    async with RegistrySessionLocal() as session:
        added = await sync_connections_from_file(session)
    if added:
        logger.info("Imported %d connection(s) from file", added)

    yield  # --- application runs here ---

    # --- shutdown ---
    await registry_engine.dispose()

app = FastAPI(title="Bot API proxy", lifespan=lifespan)

# CORS for the browser UI
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()],
    allow_credentials=True,
    allow_headers=["*"],
    allow_methods=["*"],
)

# Routers
app.include_router(connections_router, prefix="/api")
app.include_router(proxy_router,       prefix="/api")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")), reload=True)
