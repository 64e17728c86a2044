"""Configuration record types."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

__all__ = [
    "GlobalConfig",
    "VaultConfig",
]


@dataclass
class GlobalConfig:
    """Installation-wide settings stored at ``<root>/config.yaml``.

    Attributes
    ----------
    version : str
        Schema/format version tag
    owner : str
        Administrative owner of the installation
    """

    version: str = ""
    owner: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"version": self.version, "owner": self.owner}


@dataclass
class VaultConfig:
    """Metadata for one vault, stored at ``<root>/vaults/<name>/vault.yaml``.

    Attributes
    ----------
    name : str
        Vault identifier, expected to match the vault directory name
    description : str
        Free-form description; empty means unset
    members : list[str]
        Principals with access, in insertion order. Duplicates are kept.
    created_at : str
        Creation timestamp
    updated_at : str
        Last modification timestamp; empty means never updated
    """

    name: str = ""
    description: str = ""
    members: list[str] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return fields in record order, dropping empty optional ones."""
        data: dict[str, Any] = {"name": self.name}
        if self.description:
            data["description"] = self.description
        data["members"] = list(self.members)
        data["created_at"] = self.created_at
        if self.updated_at:
            data["updated_at"] = self.updated_at
        return data

    def has_member(self, member: str) -> bool:
        return member in self.members

    def with_member(self, member: str) -> VaultConfig:
        """Return a copy with ``member`` appended if not already present."""
        if member in self.members:
            return replace(self, members=list(self.members))
        return replace(self, members=[*self.members, member])

    def without_member(self, member: str) -> VaultConfig:
        """Return a copy with every occurrence of ``member`` removed."""
        return replace(self, members=[m for m in self.members if m != member])
