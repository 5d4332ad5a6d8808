"""Public interface for the Nomad adapter."""

from __future__ import annotations

from .client import NomadAPIError, NomadClient
from .schema import AllocationListStubPayload, NodeListStubPayload

__all__ = ["AllocationListStubPayload", "NodeListStubPayload", "NomadAPIError", "NomadClient"]
