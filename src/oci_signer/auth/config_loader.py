"""
INI configuration loading for OCI credentials

Reads the ``~/.oci/config`` style INI format from a file path or from raw INI
text and extracts the credential fields that are present.
"""

import configparser
import logging
from typing import Optional

from ..exceptions import ConfigError, IniError
from .key_loader import expand_path
from .types import CredentialOverrides

logger = logging.getLogger(__name__)

DEFAULT_PROFILE = "DEFAULT"

# INI key -> CredentialOverrides field
INI_FIELD_MAP = {
    'user': 'user_id',
    'tenancy': 'tenancy_id',
    'region': 'region',
    'fingerprint': 'fingerprint',
    'key_file': 'private_key',
    'pass_phrase': 'passphrase',
}


def _new_parser() -> configparser.ConfigParser:
    # Values such as key paths may contain '%'
    return configparser.ConfigParser(interpolation=None)


def parse_ini_content(ini_content: str, source_name: str = "<string>") -> configparser.ConfigParser:
    """
    Parse INI text.

    Args:
        ini_content: INI formatted text
        source_name: Name used in error messages

    Returns:
        configparser.ConfigParser: Parsed configuration

    Raises:
        IniError: If the text is not valid INI
    """
    parser = _new_parser()
    try:
        parser.read_string(ini_content, source=source_name)
    except configparser.Error as e:
        raise IniError(
            f"Failed to parse INI content: {e}",
            "INI_PARSE_ERROR",
            {"source": source_name}
        ) from e
    return parser


def read_ini_source(source: str) -> configparser.ConfigParser:
    """
    Parse an INI source that is either an existing file path or INI text.

    Args:
        source: File path or INI content

    Returns:
        configparser.ConfigParser: Parsed configuration

    Raises:
        IniError: If the file cannot be read or the content is not valid INI
    """
    if not isinstance(source, str) or not source.strip():
        raise IniError("INI source cannot be empty", "EMPTY_INI_SOURCE")

    # Multi-line text is always content; otherwise check for an existing file
    if '\n' not in source.strip():
        path = expand_path(source)
        if path.is_file():
            logger.debug(f"Reading OCI config file: {path}")
            try:
                with open(path, 'r', encoding='utf-8') as f:
                    content = f.read()
            except (OSError, UnicodeDecodeError) as e:
                raise IniError(
                    f"Failed to read INI file: {e}",
                    "INI_FILE_UNREADABLE",
                    {"path": str(path)}
                ) from e
            return parse_ini_content(content, str(path))

        if not source.lstrip().startswith('['):
            raise IniError(
                f"INI source is neither an existing file nor INI content: {source}",
                "INI_SOURCE_NOT_FOUND",
                {"source": source}
            )

    return parse_ini_content(source)


def load_ini_source(source: str, profile: str = DEFAULT_PROFILE) -> CredentialOverrides:
    """
    Extract credential fields from an INI source.

    Only keys present in the profile are returned; missing ones stay None so
    that the resolver can complete them from other sources. Named profiles
    inherit values from ``[DEFAULT]``.

    Args:
        source: File path or INI content
        profile: Profile (section) name

    Returns:
        CredentialOverrides: Fields found in the profile

    Raises:
        IniError: If the source cannot be parsed
        ConfigError: If the profile does not exist
    """
    parser = read_ini_source(source)

    if profile == DEFAULT_PROFILE:
        section = parser.defaults()
    elif parser.has_section(profile):
        section = parser[profile]
    else:
        raise ConfigError(
            f"Profile '{profile}' not found in OCI config",
            "PROFILE_NOT_FOUND",
            details={"profile": profile, "available_profiles": [DEFAULT_PROFILE] + parser.sections()}
        )

    values = {}
    for ini_key, field_name in INI_FIELD_MAP.items():
        value = section.get(ini_key)
        if value is not None:
            values[field_name] = value.strip()

    logger.debug(f"Loaded OCI config profile '{profile}' with keys: {sorted(values)}")
    return CredentialOverrides(**values)
