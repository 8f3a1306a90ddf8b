"""Core syscatalog data models."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Tuple


@dataclass(frozen=True, slots=True)
class ComponentRecord:
    """One installed package as reported by the rpm query."""

    name: str
    epoch: str
    version: str
    release: str
    arch: str
    installtime: str
    buildtime: str
    vendor: str
    buildhost: str
    sigpgp: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class SystemCatalogEntry:
    """Package list of a single ingested system."""

    system_id: str
    components: Tuple[ComponentRecord, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "systemid": self.system_id,
            "components": [component.to_dict() for component in self.components],
        }
