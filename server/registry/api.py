# server/registry/api.py
from __future__ import annotations
from typing import Optional
from urllib.parse import urlparse
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from .models import BotConnection


class ValidationError(ValueError):
    """Raised when a connection can't be registered with the given fields."""
    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


def connection_to_dict(row: BotConnection, include_secret: bool = False) -> dict:
    out = {
        "id": row.id,
        "name": row.name,
        "apiUrl": row.api_url,
        "username": row.username,
        "isActive": bool(row.is_active),
        "createdAt": str(row.created_at) if row.created_at else None,
    }
    if include_secret:
        out["password"] = row.password
    else:
        out["hasPassword"] = bool(row.password)
    return out


def _require_text(field: str, value) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field, "must be a non-empty string")
    return value.strip()


def normalize_api_url(url: str) -> str:
    # only one trailing slash is dropped, like the bot UI does
    return url[:-1] if url.endswith("/") else url


async def list_connections(db: AsyncSession, include_secret: bool = False) -> list[dict]:
    res = await db.execute(
        select(BotConnection).order_by(BotConnection.created_at.desc(), BotConnection.id.desc())
    )
    return [connection_to_dict(row, include_secret=include_secret) for row in res.scalars()]


async def create_connection(
    db: AsyncSession,
    name: str,
    api_url: str,
    username: str,
    password: str,
    is_active: bool = True,
) -> BotConnection:
    name = _require_text("name", name)
    api_url = _require_text("api_url", api_url)
    username = _require_text("username", username)
    if not isinstance(password, str) or password == "":
        raise ValidationError("password", "must be a non-empty string")

    parsed = urlparse(api_url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationError("api_url", "must be an http(s) URL")

    conn = BotConnection(
        name=name,
        api_url=normalize_api_url(api_url),
        username=username,
        password=password,
        is_active=True if is_active is None else bool(is_active),
    )
    db.add(conn)
    await db.commit()
    await db.refresh(conn)
    return conn


async def get_connection(db: AsyncSession, conn_id: int) -> Optional[BotConnection]:
    return await db.get(BotConnection, conn_id)


async def delete_connection(db: AsyncSession, conn_id: int) -> bool:
    row = await db.get(BotConnection, conn_id)
    if row is None:
        return False
    await db.delete(row)
    await db.commit()
    return True
