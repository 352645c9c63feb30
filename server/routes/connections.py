# server/routes/connections.py
from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession
from registry.session import get_registry_session
from registry.api import (
    ValidationError,
    connection_to_dict,
    create_connection,
    delete_connection,
    get_connection,
    list_connections,
)
from registry.schemas import ConnectionCreate
from utils.connections_file import save_connections_to_file

router = APIRouter()

@router.get("/freqtrade/connections")
async def get_connections(reg: AsyncSession = Depends(get_registry_session)):
    return await list_connections(reg)


@router.post("/freqtrade/connections", status_code=201)
async def register_bot(payload: ConnectionCreate, reg: AsyncSession = Depends(get_registry_session)):
    try:
        conn = await create_connection(
            reg,
            name=payload.name,
            api_url=payload.api_url,
            username=payload.username,
            password=payload.password,
            is_active=payload.is_active,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    await save_connections_to_file(reg)
    return connection_to_dict(conn)


@router.get("/freqtrade/connections/{connection_id}")
async def get_one_connection(connection_id: int, reg: AsyncSession = Depends(get_registry_session)):
    conn = await get_connection(reg, connection_id)
    if not conn:
        raise HTTPException(status_code=404, detail="connection not found")
    return connection_to_dict(conn)


@router.delete("/freqtrade/connections/{connection_id}", status_code=204)
async def remove_connection(connection_id: int, reg: AsyncSession = Depends(get_registry_session)):
    """Deleting an id that doesn't exist is fine, the result is the same."""
    if await delete_connection(reg, connection_id):
        await save_connections_to_file(reg)
    return Response(status_code=204)
