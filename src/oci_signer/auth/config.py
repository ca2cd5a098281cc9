"""
OCI credential configuration and resolution

This module merges credential fields from an INI configuration, environment
variables and programmatic overrides into a single validated OciConfig.
Every field is resolved on its own: overrides outrank INI values, and an
override for one field never hides the INI value of another.
"""

import os
import re
import logging
from dataclasses import dataclass, field, fields, replace
from typing import Mapping, Optional

from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from ..exceptions import ConfigError, EnvError
from .config_loader import DEFAULT_PROFILE, load_ini_source
from .key_loader import load_private_key
from .types import CredentialOverrides, EnvironmentOverrides

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ('user_id', 'tenancy_id', 'region', 'fingerprint', 'private_key')

CONFIG_ENV_VAR = 'OCI_CONFIG'

ENV_OVERRIDE_VARS = {
    'user_id': 'OCI_USER_ID',
    'tenancy_id': 'OCI_TENANCY_ID',
    'region': 'OCI_REGION',
    'fingerprint': 'OCI_FINGERPRINT',
    'private_key': 'OCI_PRIVATE_KEY',
    'compartment_id': 'OCI_COMPARTMENT_ID',
    'passphrase': 'OCI_PRIVATE_KEY_PASSPHRASE',
}

FINGERPRINT_PATTERN = re.compile(r'^[0-9a-fA-F]{2}(:[0-9a-fA-F]{2})*$')


@dataclass(frozen=True)
class OciConfig:
    """
    Resolved OCI credential

    Immutable once built and safe to share between threads. The private key is
    kept out of ``repr`` so the credential can be logged.

    Attributes:
        user_id: User OCID
        tenancy_id: Tenancy OCID
        region: Region identifier
        fingerprint: Public key fingerprint
        private_key: Loaded RSA private key
        compartment_id: Compartment OCID, defaults to tenancy_id
    """
    user_id: str
    tenancy_id: str
    region: str
    fingerprint: str
    private_key: RSAPrivateKey = field(repr=False)
    compartment_id: Optional[str] = None

    def __post_init__(self):
        """Validate the credential and default the compartment"""
        missing = [
            name for name in ('user_id', 'tenancy_id', 'region', 'fingerprint')
            if not isinstance(getattr(self, name), str) or not getattr(self, name)
        ]
        if missing:
            raise ConfigError(
                f"Credential fields must be non-empty: {', '.join(missing)}",
                "MISSING_FIELDS",
                missing_fields=missing
            )

        if not isinstance(self.private_key, RSAPrivateKey):
            raise ConfigError(
                "private_key must be a loaded RSA private key",
                "INVALID_PRIVATE_KEY",
                missing_fields=['private_key']
            )

        if not self.compartment_id:
            object.__setattr__(self, 'compartment_id', self.tenancy_id)

    @property
    def key_id(self) -> str:
        """Key identifier used in the Authorization header."""
        return f"{self.tenancy_id}/{self.user_id}/{self.fingerprint}"

    def with_compartment(self, compartment_id: str) -> 'OciConfig':
        """Return a copy of this credential targeting another compartment."""
        return replace(self, compartment_id=compartment_id)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None,
                 profile: str = DEFAULT_PROFILE) -> 'OciConfig':
        """
        Resolve a credential from ``OCI_*`` environment variables.

        ``OCI_CONFIG`` (file path or INI content) provides base values and the
        individual variables (``OCI_USER_ID``, ``OCI_PRIVATE_KEY``, ...)
        override them.

        Args:
            environ: Environment mapping (defaults to os.environ)
            profile: INI profile to read from OCI_CONFIG

        Returns:
            OciConfig: Resolved credential
        """
        env = os.environ if environ is None else environ
        return resolve_credential(
            _config_source_from_env(env),
            overrides_from_env(env),
            profile=profile
        )

    @classmethod
    def builder(cls) -> 'OciConfigBuilder':
        """Start a fluent credential builder."""
        return OciConfigBuilder()


def _config_source_from_env(env: Mapping[str, str]) -> Optional[str]:
    value = env.get(CONFIG_ENV_VAR)
    if value is None:
        return None
    if not value.strip():
        raise EnvError(
            f"{CONFIG_ENV_VAR} is set but empty",
            field_name=CONFIG_ENV_VAR
        )
    return value


def overrides_from_env(environ: Optional[Mapping[str, str]] = None) -> EnvironmentOverrides:
    """
    Read individual credential overrides from environment variables.

    Unset variables are None. Variables that are set but empty are kept as ""
    so resolution reports them instead of silently falling back.

    Args:
        environ: Environment mapping (defaults to os.environ)

    Returns:
        EnvironmentOverrides: Overrides found in the environment
    """
    env = os.environ if environ is None else environ
    return EnvironmentOverrides(**{
        field_name: env.get(var_name)
        for field_name, var_name in ENV_OVERRIDE_VARS.items()
    })


def _validate_override(field_name: str, value: str, from_env: bool = False) -> str:
    if not isinstance(value, str) or not value.strip():
        details = {"env_var": ENV_OVERRIDE_VARS[field_name]} if from_env else None
        raise EnvError(
            f"Override for {field_name} is present but empty",
            field_name=field_name,
            details=details
        )

    # Passphrases are used exactly as given
    if field_name == 'passphrase':
        return value

    value = value.strip()
    if field_name == 'fingerprint' and not FINGERPRINT_PATTERN.match(value):
        raise EnvError(
            f"Override for fingerprint is malformed: expected colon-separated hex pairs, got '{value}'",
            "MALFORMED_OVERRIDE",
            field_name=field_name
        )
    return value


def resolve_credential(ini_source: Optional[str] = None,
                       *overrides: CredentialOverrides,
                       profile: str = DEFAULT_PROFILE) -> OciConfig:
    """
    Merge credential sources into a validated OciConfig.

    Args:
        ini_source: INI file path or INI content providing base values
        *overrides: Override sources, highest priority first
        profile: INI profile name

    Returns:
        OciConfig: Resolved credential

    Raises:
        EnvError: If an override is present but empty or malformed
        IniError: If the INI source cannot be parsed
        ConfigError: If a required field is missing after merging
        PrivateKeyError: If the selected private key cannot be loaded
    """
    # Overrides are checked before anything is merged
    checked = []
    for source in overrides:
        values = {}
        from_env = isinstance(source, EnvironmentOverrides)
        for f in fields(CredentialOverrides):
            value = getattr(source, f.name)
            if value is not None:
                values[f.name] = _validate_override(f.name, value, from_env)
        checked.append(values)

    base = load_ini_source(ini_source, profile) if ini_source is not None else CredentialOverrides()

    merged = {}
    for f in fields(CredentialOverrides):
        for values in checked:
            if f.name in values:
                merged[f.name] = values[f.name]
                break
        else:
            ini_value = getattr(base, f.name)
            # compartment_id never comes from the INI file
            if ini_value and f.name != 'compartment_id':
                merged[f.name] = ini_value

    missing = [name for name in REQUIRED_FIELDS if not merged.get(name)]
    if missing:
        raise ConfigError(
            f"Missing required credential fields: {', '.join(missing)} "
            f"(set them in the OCI config or as overrides)",
            "MISSING_FIELDS",
            missing_fields=missing
        )

    private_key = load_private_key(merged['private_key'], merged.get('passphrase'))

    config = OciConfig(
        user_id=merged['user_id'],
        tenancy_id=merged['tenancy_id'],
        region=merged['region'],
        fingerprint=merged['fingerprint'],
        private_key=private_key,
        compartment_id=merged.get('compartment_id'),
    )

    logger.info(f"Resolved OCI credential for tenancy {config.tenancy_id} in region {config.region}")
    return config


class OciConfigBuilder:
    """
    Builder for OciConfig with fluent API

    Setters only record values; nothing is read or validated until build().
    Precedence: builder setters > environment (with_env) > INI config.
    """

    def __init__(self):
        self._config_source: Optional[str] = None
        self._profile: str = DEFAULT_PROFILE
        self._overrides = CredentialOverrides()
        self._environ: Optional[Mapping[str, str]] = None
        self._use_env = False

    def config(self, source: str, profile: str = DEFAULT_PROFILE) -> 'OciConfigBuilder':
        """
        Use an INI configuration as the base source.

        Args:
            source: File path (e.g. ~/.oci/config) or INI content
            profile: Profile name

        Returns:
            OciConfigBuilder: Self for method chaining
        """
        self._config_source = source
        self._profile = profile
        return self

    def profile(self, profile: str) -> 'OciConfigBuilder':
        """Select the INI profile, including for OCI_CONFIG under with_env()."""
        self._profile = profile
        return self

    def user_id(self, user_id: str) -> 'OciConfigBuilder':
        self._overrides.user_id = user_id
        return self

    def tenancy_id(self, tenancy_id: str) -> 'OciConfigBuilder':
        self._overrides.tenancy_id = tenancy_id
        return self

    def region(self, region: str) -> 'OciConfigBuilder':
        self._overrides.region = region
        return self

    def fingerprint(self, fingerprint: str) -> 'OciConfigBuilder':
        self._overrides.fingerprint = fingerprint
        return self

    def private_key(self, private_key: str) -> 'OciConfigBuilder':
        """
        Set the private key reference.

        Args:
            private_key: File path or inline PEM content

        Returns:
            OciConfigBuilder: Self for method chaining
        """
        self._overrides.private_key = private_key
        return self

    def passphrase(self, passphrase: str) -> 'OciConfigBuilder':
        self._overrides.passphrase = passphrase
        return self

    def compartment_id(self, compartment_id: str) -> 'OciConfigBuilder':
        self._overrides.compartment_id = compartment_id
        return self

    def with_env(self, environ: Optional[Mapping[str, str]] = None) -> 'OciConfigBuilder':
        """
        Layer ``OCI_*`` environment variables between the setters and the INI.

        ``OCI_CONFIG`` is used as the INI source when config() was not called.

        Args:
            environ: Environment mapping (defaults to os.environ at build time)

        Returns:
            OciConfigBuilder: Self for method chaining
        """
        self._use_env = True
        self._environ = environ
        return self

    def build(self) -> OciConfig:
        """
        Resolve the configured sources.

        Returns:
            OciConfig: Resolved credential

        Raises:
            CredentialError: If resolution fails
        """
        sources = [replace(self._overrides)]
        ini_source = self._config_source

        if self._use_env:
            env = os.environ if self._environ is None else self._environ
            sources.append(overrides_from_env(env))
            if ini_source is None:
                ini_source = _config_source_from_env(env)

        return resolve_credential(ini_source, *sources, profile=self._profile)
