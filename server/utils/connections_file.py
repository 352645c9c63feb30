# server/utils/connections_file.py
"""
Keeps a JSON copy of the connection registry on disk (userdata/connections.json)
so connections survive a wiped database and can be seeded by hand.
"""
from __future__ import annotations
import asyncio
import json
import logging
import os
from pathlib import Path
from sqlalchemy.ext.asyncio import AsyncSession
from registry.api import ValidationError, create_connection, list_connections

logger = logging.getLogger(__name__)

CONNECTIONS_PATH = Path(os.getenv("CONNECTIONS_FILE", "./userdata/connections.json"))


def _read_file(path: Path) -> list[dict]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError("connections file must hold a JSON list")
    return data


def _write_file(path: Path, connections: list[dict]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(connections, indent=2), encoding="utf-8")
    tmp.replace(path)


async def save_connections_to_file(db: AsyncSession, path: Path | None = None) -> None:
    path = path or CONNECTIONS_PATH
    try:
        connections = await list_connections(db, include_secret=True)
        await asyncio.to_thread(_write_file, path, connections)
    except OSError as e:
        logger.error("Failed to save connections to %s: %s", path, e)


async def sync_connections_from_file(db: AsyncSession, path: Path | None = None) -> int:
    """
    Register every connection from the file whose name isn't known yet,
    then rewrite the file from the registry. Returns how many were added.
    """
    path = path or CONNECTIONS_PATH
    try:
        entries = await asyncio.to_thread(_read_file, path)
    except (OSError, ValueError) as e:
        # missing or unreadable: the registry wins
        logger.info("No usable connections file at %s (%s), writing registry to it", path, e)
        await save_connections_to_file(db, path)
        return 0

    known = {c["name"] for c in await list_connections(db)}
    added = 0
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        name = entry.get("name")
        if isinstance(name, str) and name.strip() in known:
            continue
        try:
            await create_connection(
                db,
                name=name,
                api_url=entry.get("api_url") or entry.get("apiUrl"),
                username=entry.get("username"),
                password=entry.get("password"),
                is_active=entry.get("is_active", entry.get("isActive", True)),
            )
        except ValidationError as e:
            logger.warning("Skipping connection %r from %s: %s", entry.get("name"), path, e)
            continue
        known.add(name.strip())
        added += 1
        logger.info("Synced connection from filesystem: %s", name)

    await save_connections_to_file(db, path)
    return added
