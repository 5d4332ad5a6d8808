"""Port for the service catalog whose members are considered live hosts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from reaper.domain.model import Host


@runtime_checkable
class ServiceCatalog(Protocol):
    def list_hosts(self, *, allow_stale: bool = True) -> list[Host]: ...


__all__ = ["ServiceCatalog"]
