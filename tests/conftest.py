"""
Shared fixtures for the OCI Signer SDK test suite
"""

import pytest

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from oci_signer.auth.config import ENV_OVERRIDE_VARS, CONFIG_ENV_VAR, OciConfig

TEST_DATE = "Thu, 05 Jan 2014 21:31:40 GMT"


def pem_bytes(private_key, private_format=serialization.PrivateFormat.PKCS8,
              encryption=None) -> str:
    """Serialize a private key to PEM text."""
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=private_format,
        encryption_algorithm=encryption or serialization.NoEncryption()
    ).decode('ascii')


def make_ini(profile: str = "DEFAULT", **values) -> str:
    """Build INI text with one profile section."""
    lines = [f"[{profile}]"]
    lines.extend(f"{key}={value}" for key, value in values.items())
    return "\n".join(lines) + "\n"


@pytest.fixture(autouse=True)
def clean_oci_environment(monkeypatch):
    """Keep the developer's own OCI_* variables out of the tests."""
    for var_name in list(ENV_OVERRIDE_VARS.values()) + [CONFIG_ENV_VAR]:
        monkeypatch.delenv(var_name, raising=False)


@pytest.fixture(scope="session")
def rsa_private_key():
    """2048-bit RSA key shared by the whole session."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def pkcs8_pem(rsa_private_key):
    """Test key as PKCS#8 PEM (BEGIN PRIVATE KEY)."""
    return pem_bytes(rsa_private_key)


@pytest.fixture(scope="session")
def pkcs1_pem(rsa_private_key):
    """Test key as PKCS#1 PEM (BEGIN RSA PRIVATE KEY)."""
    return pem_bytes(rsa_private_key, serialization.PrivateFormat.TraditionalOpenSSL)


@pytest.fixture
def key_file(tmp_path, pkcs8_pem):
    """Test key written to a file."""
    path = tmp_path / "oci_api_key.pem"
    path.write_text(pkcs8_pem)
    return path


@pytest.fixture
def ini_content(key_file):
    """Complete DEFAULT profile pointing at the test key file."""
    return make_ini(
        user="ocid1.user.oc1..ini",
        tenancy="ocid1.tenancy.oc1..ini",
        region="ap-seoul-1",
        fingerprint="aa:bb:cc:dd:ee:ff",
        key_file=str(key_file),
    )


@pytest.fixture
def ini_file(tmp_path, ini_content):
    """Complete OCI config file."""
    path = tmp_path / "config"
    path.write_text(ini_content)
    return path


@pytest.fixture
def oci_config(rsa_private_key):
    """Credential matching the documented GET scenario."""
    return OciConfig(
        user_id="u1",
        tenancy_id="t1",
        region="r1",
        fingerprint="aa:bb",
        private_key=rsa_private_key,
    )
