from __future__ import annotations

from pydantic import BaseModel, Field


class ServiceOut(BaseModel):
    """Wire shape of one registry entry; field names are part of the HTTP contract."""

    Name: str = Field(..., description="Advertised service name")
    Addr: str = Field(..., description="Advertised service address")
