"""
Type definitions for OCI credential resolution
"""

from dataclasses import dataclass, fields
from typing import Optional


@dataclass
class CredentialOverrides:
    """
    One credential source with every field optional

    None means the source does not provide the field. An empty string means
    the source provides it but the value is blank, which the resolver rejects.

    Attributes:
        user_id: User OCID
        tenancy_id: Tenancy OCID
        region: Region identifier (e.g. ap-seoul-1)
        fingerprint: Public key fingerprint (colon-separated hex pairs)
        private_key: Key reference, a file path or inline PEM content
        compartment_id: Compartment OCID
        passphrase: Passphrase for an encrypted private key
    """
    user_id: Optional[str] = None
    tenancy_id: Optional[str] = None
    region: Optional[str] = None
    fingerprint: Optional[str] = None
    private_key: Optional[str] = None
    compartment_id: Optional[str] = None
    passphrase: Optional[str] = None

    def __repr__(self) -> str:
        present = [f.name for f in fields(self) if getattr(self, f.name) is not None]
        return f"CredentialOverrides(fields={present})"

    def is_empty(self) -> bool:
        """Check whether the source provides no fields at all."""
        return all(getattr(self, f.name) is None for f in fields(self))


class EnvironmentOverrides(CredentialOverrides):
    """Overrides read from ``OCI_*`` environment variables."""
    pass
