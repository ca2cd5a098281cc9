"""
Credential resolution for the OCI Signer Python SDK
"""

from .types import CredentialOverrides, EnvironmentOverrides

from .key_loader import (
    load_private_key,
    parse_private_key,
    read_key_file,
    is_pem_content,
    MIN_RSA_KEY_SIZE,
)

from .config_loader import (
    load_ini_source,
    read_ini_source,
    DEFAULT_PROFILE,
)

from .config import (
    OciConfig,
    OciConfigBuilder,
    resolve_credential,
    overrides_from_env,
    ENV_OVERRIDE_VARS,
    CONFIG_ENV_VAR,
)

__all__ = [
    # Types
    'CredentialOverrides',
    'EnvironmentOverrides',
    'OciConfig',
    'OciConfigBuilder',
    # Key loading
    'load_private_key',
    'parse_private_key',
    'read_key_file',
    'is_pem_content',
    'MIN_RSA_KEY_SIZE',
    # INI loading
    'load_ini_source',
    'read_ini_source',
    'DEFAULT_PROFILE',
    # Resolution
    'resolve_credential',
    'overrides_from_env',
    'ENV_OVERRIDE_VARS',
    'CONFIG_ENV_VAR',
]
