# server/registry/schemas.py
from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field


class ConnectionCreate(BaseModel):
    """Body of POST /freqtrade/connections; camelCase like the UI sends, snake_case also accepted."""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    api_url: str = Field(..., alias="apiUrl", examples=["http://localhost:8080"])
    username: str
    password: str
    is_active: bool = Field(True, alias="isActive")
