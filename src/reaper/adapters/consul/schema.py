"""Pydantic models describing the Consul HTTP API payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ConsulBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class CatalogNodePayload(ConsulBaseModel):
    node: str = Field(alias="Node")
    address: str | None = Field(default=None, alias="Address")
    datacenter: str | None = Field(default=None, alias="Datacenter")
