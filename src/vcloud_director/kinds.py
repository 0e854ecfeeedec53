"""Registry mapping vCloud short type names to known resource kinds."""

from __future__ import annotations

from enum import Enum


class ResourceKind(str, Enum):
    """Resource kinds the client knows by name."""

    ORG = "org"
    ORG_LIST = "orgList"
    VDC = "vdc"
    VAPP = "vApp"
    VAPP_TEMPLATE = "vAppTemplate"
    VM = "vm"
    CATALOG = "catalog"
    CATALOG_ITEM = "catalogItem"
    MEDIA = "media"
    NETWORK = "orgVdcNetwork"
    EDGE_GATEWAY = "edgeGateway"
    TASK = "task"
    SESSION = "session"
    QUERY_LIST = "queryList"
    USER = "user"
    GROUP = "group"
    ROLE = "role"
    GENERIC = "generic"


_REGISTRY: dict[str, ResourceKind] = {
    kind.value.lower(): kind for kind in ResourceKind if kind is not ResourceKind.GENERIC
}


def register_kind(short_type: str, kind: ResourceKind) -> None:
    """Map an additional short type name (case-insensitive) onto ``kind``."""
    _REGISTRY[short_type.lower()] = kind


def kind_for(short_type: str | None) -> ResourceKind:
    """Return the registered kind for ``short_type`` or ``ResourceKind.GENERIC``."""
    if not short_type:
        return ResourceKind.GENERIC
    return _REGISTRY.get(short_type.lower(), ResourceKind.GENERIC)
