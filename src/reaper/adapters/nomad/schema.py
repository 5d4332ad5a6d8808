"""Pydantic models describing the Nomad HTTP API payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class NomadBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class NodeListStubPayload(NomadBaseModel):
    id: str = Field(alias="ID")
    name: str = Field(alias="Name")
    status: str | None = Field(default=None, alias="Status")


class AllocationListStubPayload(NomadBaseModel):
    id: str = Field(alias="ID")
    node_id: str | None = Field(default=None, alias="NodeID")
    client_status: str | None = Field(default=None, alias="ClientStatus")
