"""Deterministic YAML serialization for configuration records.

Provides:
- Fixed key ordering per record type
- Omission of empty optional fields on encode
- String-preserving decode: scalars keep their source text, so a version
  written as ``1.0`` reads back as ``"1.0"`` rather than a float
- Unknown keys ignored on decode, duplicate keys rejected
- Only the first document of a multi-document stream is read
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any

import yaml
from yaml.constructor import ConstructorError

from .errors import DeserializationError, SerializationError
from .models import GlobalConfig, VaultConfig

__all__ = [
    "GLOBAL_CONFIG_KEY_ORDER",
    "VAULT_CONFIG_KEY_ORDER",
    "decode_global_config",
    "decode_vault_config",
    "encode_global_config",
    "encode_vault_config",
    "parse_record",
]

GLOBAL_CONFIG_KEY_ORDER = ["version", "owner"]

VAULT_CONFIG_KEY_ORDER = [
    "name",
    "description",
    "members",
    "created_at",
    "updated_at",
]

_NULL_TAG = "tag:yaml.org,2002:null"
_STR_TAG = "tag:yaml.org,2002:str"

# NEL is folded to a space inside single-quoted and plain scalars
_NEL = "\x85"


class _RecordLoader(yaml.SafeLoader):
    """SafeLoader that resolves plain scalars to str, except null."""

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[Any, Any]:
        seen: set[Any] = set()
        for key_node, _ in node.value:
            key = self.construct_object(key_node, deep=deep)
            if not isinstance(key, Hashable):
                continue
            if key in seen:
                raise ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    f"mapping key {key!r} already defined",
                    key_node.start_mark,
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


_RecordLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag == _NULL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


class _RecordDumper(yaml.SafeDumper):
    """SafeDumper that double-quotes strings containing NEL."""


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    if _NEL in data:
        return dumper.represent_scalar(_STR_TAG, data, style='"')
    return dumper.represent_str(data)


_RecordDumper.add_representer(str, _represent_str)


def _ordered(data: dict[str, Any], key_order: list[str]) -> dict[str, Any]:
    return {key: data[key] for key in key_order if key in data}


def _dump(data: dict[str, Any], kind: str) -> bytes:
    try:
        text = yaml.dump(
            data,
            Dumper=_RecordDumper,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )
    except yaml.YAMLError as exc:
        raise SerializationError(f"Cannot encode {kind}: {exc}") from exc
    return text.encode("utf-8")


def _require_str(value: Any, key: str, kind: str) -> str:
    if not isinstance(value, str):
        raise SerializationError(f"{kind} field '{key}' must be str, got {type(value).__name__}")
    return value


def encode_global_config(cfg: GlobalConfig) -> bytes:
    """Encode global config to YAML bytes.

    Raises
    ------
    SerializationError
        If a field holds a non-string value
    """
    for key in GLOBAL_CONFIG_KEY_ORDER:
        _require_str(getattr(cfg, key), key, "global config")
    return _dump(_ordered(cfg.to_dict(), GLOBAL_CONFIG_KEY_ORDER), "global config")


def encode_vault_config(cfg: VaultConfig) -> bytes:
    """Encode vault config to YAML bytes.

    ``description`` and ``updated_at`` are left out when empty.

    Raises
    ------
    SerializationError
        If a field holds a value of the wrong type
    """
    for key in ("name", "description", "created_at", "updated_at"):
        _require_str(getattr(cfg, key), key, "vault config")

    if not isinstance(cfg.members, (list, tuple)):
        raise SerializationError(
            f"vault config field 'members' must be a list, got {type(cfg.members).__name__}"
        )
    for member in cfg.members:
        _require_str(member, "members", "vault config")

    return _dump(_ordered(cfg.to_dict(), VAULT_CONFIG_KEY_ORDER), "vault config")


def parse_record(data: bytes | str) -> dict[str, Any]:
    """Parse a YAML document into a mapping.

    Parameters
    ----------
    data
        Raw file content

    Returns
    -------
    dict[str, Any]
        Parsed mapping (empty for an empty document)

    Raises
    ------
    DeserializationError
        If content is not UTF-8, not valid YAML, or not a mapping
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DeserializationError(f"Content is not valid UTF-8: {exc}") from exc

    documents = yaml.load_all(data, Loader=_RecordLoader)  # noqa: S506
    try:
        parsed = next(documents, None)
    except yaml.YAMLError as exc:
        raise DeserializationError(f"Invalid YAML: {exc}") from exc
    finally:
        documents.close()

    if parsed is None:
        return {}

    if not isinstance(parsed, dict):
        raise DeserializationError(f"Record must be a mapping, got: {type(parsed).__name__}")

    return parsed


def _get_str(record: dict[str, Any], key: str) -> str:
    value = record.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DeserializationError(f"Field '{key}' must be a string, got: {type(value).__name__}")
    return value


def _get_str_list(record: dict[str, Any], key: str) -> list[str]:
    value = record.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise DeserializationError(f"Field '{key}' must be a list, got: {type(value).__name__}")

    items = []
    for item in value:
        if not isinstance(item, str):
            raise DeserializationError(
                f"Field '{key}' must contain only strings, got: {type(item).__name__}"
            )
        items.append(item)
    return items


def decode_global_config(data: bytes | str) -> GlobalConfig:
    """Decode YAML content into a GlobalConfig.

    Raises
    ------
    DeserializationError
        If content is malformed or a field has the wrong shape
    """
    record = parse_record(data)
    return GlobalConfig(
        version=_get_str(record, "version"),
        owner=_get_str(record, "owner"),
    )


def decode_vault_config(data: bytes | str) -> VaultConfig:
    """Decode YAML content into a VaultConfig.

    Raises
    ------
    DeserializationError
        If content is malformed or a field has the wrong shape
    """
    record = parse_record(data)
    return VaultConfig(
        name=_get_str(record, "name"),
        description=_get_str(record, "description"),
        members=_get_str_list(record, "members"),
        created_at=_get_str(record, "created_at"),
        updated_at=_get_str(record, "updated_at"),
    )
