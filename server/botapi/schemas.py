# server/botapi/schemas.py
from __future__ import annotations
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class BacktestRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    project_name: str = Field(..., alias="projectName")
    timerange: Optional[str] = Field(None, examples=["20240101-20240301"])
    timeframe: Optional[str] = Field(None, examples=["5m"])

    def to_remote(self) -> dict:
        """Body sent to the bot as-is (camelCase keys, unset fields left out)."""
        return self.model_dump(by_alias=True, exclude_none=True)
