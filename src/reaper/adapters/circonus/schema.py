"""Pydantic models describing the Circonus API v2 payloads.

Only the fields the reconciliation reads are declared; everything else is kept as
model extras so that a fetched object can be written back without losing data.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CirconusBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class MetricPayload(CirconusBaseModel):
    name: str
    status: str


class CheckBundlePayload(CirconusBaseModel):
    cid: str = Field(alias="_cid")
    target: str
    metrics: list[MetricPayload] = Field(default_factory=list[MetricPayload])


class CheckBundleMetricsPayload(CirconusBaseModel):
    cid: str = Field(alias="_cid")
    metrics: list[MetricPayload] = Field(default_factory=list[MetricPayload])


class MetricSearchPayload(CirconusBaseModel):
    cid: str = Field(alias="_cid")
    check_bundle_cid: str = Field(alias="_check_bundle")
    metric_name: str = Field(alias="_metric_name")
