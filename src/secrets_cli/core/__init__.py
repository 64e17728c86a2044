"""Core components: paths, records, serialization, stores and vault index."""

from .config_store import load_config, load_vault_config, save_config, save_vault_config
from .errors import (
    DeserializationError,
    InvalidVaultNameError,
    NotFoundError,
    ReadError,
    SecretsConfigError,
    SecretsInitError,
    SerializationError,
    WriteError,
)
from .models import GlobalConfig, VaultConfig
from .paths import (
    global_config_path,
    is_valid_vault_name,
    keys_dir,
    validate_vault_name,
    vault_config_path,
    vault_dir,
    vaults_dir,
)
from .secrets_dir import SecretsDir, find_secrets_dir
from .secrets_init import create_vault, init_secrets_dir, touch_vault, verify_layout
from .vault_index import list_vaults, vault_exists
from .yaml_serializer import (
    decode_global_config,
    decode_vault_config,
    encode_global_config,
    encode_vault_config,
)

__all__ = [
    # Errors
    "DeserializationError",
    # Records
    "GlobalConfig",
    "InvalidVaultNameError",
    "NotFoundError",
    "ReadError",
    # Root handle
    "SecretsConfigError",
    "SecretsDir",
    "SecretsInitError",
    "SerializationError",
    "VaultConfig",
    "WriteError",
    # Layout init
    "create_vault",
    # Serializer
    "decode_global_config",
    "decode_vault_config",
    "encode_global_config",
    "encode_vault_config",
    "find_secrets_dir",
    # Paths
    "global_config_path",
    "init_secrets_dir",
    "is_valid_vault_name",
    "keys_dir",
    # Vault index
    "list_vaults",
    # Stores
    "load_config",
    "load_vault_config",
    "save_config",
    "save_vault_config",
    "touch_vault",
    "validate_vault_name",
    "vault_config_path",
    "vault_dir",
    "vault_exists",
    "vaults_dir",
    "verify_layout",
]
