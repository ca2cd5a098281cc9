"""
Unit tests for INI loading and credential resolution
"""

import dataclasses

import pytest

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from oci_signer.auth.config import (
    OciConfig,
    OciConfigBuilder,
    resolve_credential,
    overrides_from_env,
)
from oci_signer.auth.config_loader import load_ini_source, read_ini_source
from oci_signer.auth.types import CredentialOverrides, EnvironmentOverrides
from oci_signer.exceptions import (
    ConfigError,
    EnvError,
    IniError,
    PrivateKeyError,
    CredentialError,
)

from conftest import make_ini, pem_bytes


class TestIniLoader:
    """Test INI source parsing"""

    def test_load_from_content(self, ini_content, key_file):
        """Test extracting fields from INI text"""
        values = load_ini_source(ini_content)

        assert values.user_id == "ocid1.user.oc1..ini"
        assert values.tenancy_id == "ocid1.tenancy.oc1..ini"
        assert values.region == "ap-seoul-1"
        assert values.fingerprint == "aa:bb:cc:dd:ee:ff"
        assert values.private_key == str(key_file)
        assert values.compartment_id is None
        assert values.passphrase is None

    def test_load_from_file(self, ini_file):
        """Test extracting fields from an INI file path"""
        values = load_ini_source(str(ini_file))
        assert values.region == "ap-seoul-1"

    def test_missing_keys_stay_absent(self):
        """Test that keys missing from the profile are None"""
        values = load_ini_source(make_ini(region="us-ashburn-1"))

        assert values.region == "us-ashburn-1"
        assert values.user_id is None
        assert values.private_key is None

    def test_values_are_stripped(self):
        """Test that surrounding whitespace is removed"""
        values = load_ini_source("[DEFAULT]\nregion =   eu-frankfurt-1   \n")
        assert values.region == "eu-frankfurt-1"

    def test_named_profile_inherits_default(self):
        """Test that a named profile falls back to [DEFAULT] keys"""
        content = make_ini(user="default-user", tenancy="tenancy-1") + "[ADMIN]\nuser=admin-user\n"

        values = load_ini_source(content, profile="ADMIN")
        assert values.user_id == "admin-user"
        assert values.tenancy_id == "tenancy-1"

    def test_missing_profile(self, ini_content):
        """Test that an unknown profile raises ConfigError"""
        with pytest.raises(ConfigError, match="NONEXISTENT") as exc_info:
            load_ini_source(ini_content, profile="NONEXISTENT")
        assert exc_info.value.error_code == "PROFILE_NOT_FOUND"

    def test_malformed_content(self):
        """Test that malformed INI text raises IniError"""
        with pytest.raises(IniError) as exc_info:
            load_ini_source("user=no-section\nregion=r1\n")
        assert exc_info.value.error_code == "INI_PARSE_ERROR"

    def test_duplicate_keys_rejected(self):
        """Test that duplicate keys in a section raise IniError"""
        with pytest.raises(IniError):
            load_ini_source("[DEFAULT]\nuser=a\nuser=b\n")

    def test_percent_signs_kept_verbatim(self):
        """Test that values are not interpolated"""
        values = load_ini_source("[DEFAULT]\nkey_file=/keys/%(home)s/key.pem\n")
        assert values.private_key == "/keys/%(home)s/key.pem"

    def test_nonexistent_path(self):
        """Test that a single-line source naming no file raises IniError"""
        with pytest.raises(IniError) as exc_info:
            read_ini_source("/nonexistent/.oci/config")
        assert exc_info.value.error_code == "INI_SOURCE_NOT_FOUND"

    def test_empty_source(self):
        """Test that an empty source raises IniError"""
        with pytest.raises(IniError):
            read_ini_source("   ")


class TestResolveCredential:
    """Test merging INI values and overrides"""

    def test_resolve_from_ini_only(self, ini_content, rsa_private_key):
        """Test a credential built entirely from the INI"""
        config = resolve_credential(ini_content)

        assert config.user_id == "ocid1.user.oc1..ini"
        assert config.tenancy_id == "ocid1.tenancy.oc1..ini"
        assert config.region == "ap-seoul-1"
        assert config.fingerprint == "aa:bb:cc:dd:ee:ff"
        assert isinstance(config.private_key, RSAPrivateKey)
        assert config.private_key.private_numbers() == rsa_private_key.private_numbers()

    def test_compartment_defaults_to_tenancy(self, ini_content):
        """Test that compartment_id falls back to tenancy_id"""
        config = resolve_credential(ini_content)
        assert config.compartment_id == config.tenancy_id

    def test_compartment_override(self, ini_content):
        """Test an explicit compartment"""
        config = resolve_credential(ini_content, CredentialOverrides(compartment_id="ocid1.compartment.oc1..x"))
        assert config.compartment_id == "ocid1.compartment.oc1..x"
        assert config.tenancy_id == "ocid1.tenancy.oc1..ini"

    def test_compartment_never_read_from_ini(self, ini_content):
        """Test that a compartment key in the INI is ignored"""
        config = resolve_credential(ini_content + "compartment_id=ocid1.compartment.oc1..ini\n")
        assert config.compartment_id == config.tenancy_id

    def test_override_wins_per_field(self, ini_content):
        """Test that one override replaces only its own field"""
        config = resolve_credential(ini_content, CredentialOverrides(region="us-phoenix-1"))

        assert config.region == "us-phoenix-1"
        assert config.user_id == "ocid1.user.oc1..ini"
        assert config.fingerprint == "aa:bb:cc:dd:ee:ff"

    def test_all_overrides_win(self, ini_content, pkcs1_pem):
        """Test that every override beats the INI value"""
        overrides = CredentialOverrides(
            user_id="u-override",
            tenancy_id="t-override",
            region="r-override",
            fingerprint="11:22",
            private_key=pkcs1_pem,
        )
        config = resolve_credential(ini_content, overrides)

        assert config.user_id == "u-override"
        assert config.tenancy_id == "t-override"
        assert config.region == "r-override"
        assert config.fingerprint == "11:22"
        assert config.key_id == "t-override/u-override/11:22"

    def test_first_override_source_wins(self, ini_content):
        """Test that earlier override sources outrank later ones"""
        config = resolve_credential(
            ini_content,
            CredentialOverrides(region="first"),
            CredentialOverrides(region="second", user_id="second-user"),
        )

        assert config.region == "first"
        assert config.user_id == "second-user"

    def test_overrides_without_ini(self, pkcs8_pem):
        """Test resolution from overrides alone"""
        config = resolve_credential(None, CredentialOverrides(
            user_id="u1", tenancy_id="t1", region="r1", fingerprint="aa:bb", private_key=pkcs8_pem
        ))
        assert config.key_id == "t1/u1/aa:bb"

    def test_missing_field_named(self, key_file):
        """Test that a field missing everywhere is named in the error"""
        content = make_ini(user="u", tenancy="t", fingerprint="aa:bb", key_file=str(key_file))

        with pytest.raises(ConfigError, match="region") as exc_info:
            resolve_credential(content)
        assert exc_info.value.missing_fields == ["region"]

    def test_all_missing_fields_listed(self):
        """Test that every missing field is reported"""
        with pytest.raises(ConfigError) as exc_info:
            resolve_credential(None)
        assert exc_info.value.missing_fields == [
            "user_id", "tenancy_id", "region", "fingerprint", "private_key"
        ]

    def test_blank_ini_value_is_missing(self, ini_content):
        """Test that an empty INI value counts as missing"""
        content = ini_content.replace("region=ap-seoul-1", "region=")

        with pytest.raises(ConfigError) as exc_info:
            resolve_credential(content)
        assert exc_info.value.missing_fields == ["region"]

    def test_empty_override_rejected(self, ini_content):
        """Test that a present but empty override raises EnvError"""
        with pytest.raises(EnvError) as exc_info:
            resolve_credential(ini_content, CredentialOverrides(region=""))
        assert exc_info.value.field_name == "region"

    def test_whitespace_override_rejected(self, ini_content):
        """Test that a whitespace-only override raises EnvError"""
        with pytest.raises(EnvError):
            resolve_credential(ini_content, CredentialOverrides(user_id="   "))

    def test_malformed_fingerprint_override(self, ini_content):
        """Test that a malformed fingerprint override raises EnvError"""
        with pytest.raises(EnvError) as exc_info:
            resolve_credential(ini_content, CredentialOverrides(fingerprint="not-a-fingerprint"))
        assert exc_info.value.error_code == "MALFORMED_OVERRIDE"

    def test_malformed_ini_is_ini_error(self):
        """Test that a parse failure is distinguishable from a missing field"""
        with pytest.raises(IniError) as exc_info:
            resolve_credential("[DEFAULT\nuser=u\n")

        assert not isinstance(exc_info.value, ConfigError)
        assert isinstance(exc_info.value, CredentialError)

    def test_unloadable_key(self, ini_content):
        """Test that a missing key file raises PrivateKeyError"""
        with pytest.raises(PrivateKeyError):
            resolve_credential(ini_content, CredentialOverrides(private_key="/nonexistent/key.pem"))

    def test_only_winning_key_is_loaded(self, pkcs8_pem):
        """Test that an overridden INI key file is never read"""
        content = make_ini(
            user="u", tenancy="t", region="r", fingerprint="aa:bb",
            key_file="/nonexistent/key.pem"
        )
        config = resolve_credential(content, CredentialOverrides(private_key=pkcs8_pem))
        assert isinstance(config.private_key, RSAPrivateKey)

    def test_encrypted_key_passphrase_from_ini(self, tmp_path, rsa_private_key):
        """Test that pass_phrase is applied to an encrypted key file"""
        key_path = tmp_path / "encrypted.pem"
        key_path.write_text(pem_bytes(
            rsa_private_key, encryption=serialization.BestAvailableEncryption(b"hunter2")
        ))
        content = make_ini(
            user="u", tenancy="t", region="r", fingerprint="aa:bb",
            key_file=str(key_path), pass_phrase="hunter2"
        )

        config = resolve_credential(content)
        assert config.private_key.private_numbers() == rsa_private_key.private_numbers()

    def test_passphrase_override_kept_verbatim(self, rsa_private_key):
        """Test that surrounding spaces in a passphrase override are preserved"""
        encrypted = pem_bytes(
            rsa_private_key, encryption=serialization.BestAvailableEncryption(b" pass phrase ")
        )

        config = resolve_credential(None, CredentialOverrides(
            user_id="u1", tenancy_id="t1", region="r1", fingerprint="aa:bb",
            private_key=encrypted, passphrase=" pass phrase "
        ))
        assert config.private_key.private_numbers() == rsa_private_key.private_numbers()

    def test_blank_passphrase_override_rejected(self, ini_content):
        """Test that a whitespace-only passphrase is still rejected"""
        with pytest.raises(EnvError) as exc_info:
            resolve_credential(ini_content, CredentialOverrides(passphrase="  "))
        assert exc_info.value.field_name == "passphrase"


class TestOciConfig:
    """Test the resolved credential type"""

    def test_key_id(self, oci_config):
        """Test key identifier format"""
        assert oci_config.key_id == "t1/u1/aa:bb"

    def test_immutable(self, oci_config):
        """Test that the credential cannot be modified"""
        with pytest.raises(dataclasses.FrozenInstanceError):
            oci_config.region = "elsewhere"

    def test_repr_hides_private_key(self, oci_config):
        """Test that repr does not expose the key"""
        assert "private_key" not in repr(oci_config)
        assert "u1" in repr(oci_config)

    def test_with_compartment(self, oci_config):
        """Test retargeting a compartment"""
        other = oci_config.with_compartment("c2")

        assert other.compartment_id == "c2"
        assert oci_config.compartment_id == "t1"
        assert other.private_key is oci_config.private_key

    def test_empty_field_rejected(self, rsa_private_key):
        """Test direct construction with an empty field"""
        with pytest.raises(ConfigError) as exc_info:
            OciConfig(user_id="", tenancy_id="t", region="r", fingerprint="aa", private_key=rsa_private_key)
        assert exc_info.value.missing_fields == ["user_id"]

    def test_non_key_rejected(self):
        """Test direct construction with a key reference instead of a key"""
        with pytest.raises(ConfigError):
            OciConfig(user_id="u", tenancy_id="t", region="r", fingerprint="aa", private_key="/path/key.pem")


class TestEnvironment:
    """Test environment variable overrides"""

    def test_overrides_from_env(self):
        """Test reading OCI_* variables"""
        overrides = overrides_from_env({"OCI_REGION": "r-env", "OCI_USER_ID": "u-env"})

        assert overrides.region == "r-env"
        assert overrides.user_id == "u-env"
        assert overrides.tenancy_id is None

    def test_unset_environment_is_empty(self):
        """Test that no variables means no overrides"""
        assert overrides_from_env({}).is_empty()

    def test_from_env_passphrase_with_spaces(self, rsa_private_key):
        """Test OCI_PRIVATE_KEY_PASSPHRASE with surrounding spaces"""
        encrypted = pem_bytes(
            rsa_private_key, encryption=serialization.BestAvailableEncryption(b" pass phrase ")
        )

        config = OciConfig.from_env({
            "OCI_USER_ID": "u1",
            "OCI_TENANCY_ID": "t1",
            "OCI_REGION": "r1",
            "OCI_FINGERPRINT": "aa:bb",
            "OCI_PRIVATE_KEY": encrypted,
            "OCI_PRIVATE_KEY_PASSPHRASE": " pass phrase ",
        })
        assert config.private_key.private_numbers() == rsa_private_key.private_numbers()

    def test_env_overrides_type(self):
        """Test that environment overrides are marked as such"""
        assert isinstance(overrides_from_env({}), EnvironmentOverrides)

    def test_from_env_with_config_content(self, ini_content):
        """Test OCI_CONFIG as INI content plus an override"""
        config = OciConfig.from_env({
            "OCI_CONFIG": ini_content,
            "OCI_REGION": "sa-saopaulo-1",
        })

        assert config.region == "sa-saopaulo-1"
        assert config.user_id == "ocid1.user.oc1..ini"

    def test_from_env_with_config_path(self, ini_file):
        """Test OCI_CONFIG as a file path"""
        config = OciConfig.from_env({"OCI_CONFIG": str(ini_file)})
        assert config.region == "ap-seoul-1"

    def test_from_env_inline_key(self, pkcs8_pem):
        """Test a full credential from individual variables"""
        config = OciConfig.from_env({
            "OCI_USER_ID": "u1",
            "OCI_TENANCY_ID": "t1",
            "OCI_REGION": "r1",
            "OCI_FINGERPRINT": "aa:bb",
            "OCI_PRIVATE_KEY": pkcs8_pem,
            "OCI_COMPARTMENT_ID": "c1",
        })

        assert config.key_id == "t1/u1/aa:bb"
        assert config.compartment_id == "c1"

    def test_from_env_empty_variable(self, ini_content):
        """Test that a set but empty variable raises EnvError"""
        with pytest.raises(EnvError) as exc_info:
            OciConfig.from_env({"OCI_CONFIG": ini_content, "OCI_REGION": ""})

        assert exc_info.value.field_name == "region"
        assert exc_info.value.details["env_var"] == "OCI_REGION"

    def test_from_env_empty_config_variable(self):
        """Test that an empty OCI_CONFIG raises EnvError"""
        with pytest.raises(EnvError):
            OciConfig.from_env({"OCI_CONFIG": ""})

    def test_from_env_nothing_set(self):
        """Test that an empty environment reports missing fields"""
        with pytest.raises(ConfigError) as exc_info:
            OciConfig.from_env({})
        assert len(exc_info.value.missing_fields) == 5

    def test_from_env_reads_process_environment(self, monkeypatch, ini_file):
        """Test the os.environ default"""
        monkeypatch.setenv("OCI_CONFIG", str(ini_file))
        monkeypatch.setenv("OCI_REGION", "me-dubai-1")

        config = OciConfig.from_env()
        assert config.region == "me-dubai-1"


class TestOciConfigBuilder:
    """Test the fluent credential builder"""

    def test_builder_from_config(self, ini_content):
        """Test building from an INI source"""
        config = OciConfig.builder().config(ini_content).build()
        assert config.region == "ap-seoul-1"

    def test_setters_win_over_env_and_ini(self, ini_content):
        """Test precedence: setters > environment > INI"""
        config = (
            OciConfigBuilder()
            .config(ini_content)
            .with_env({"OCI_REGION": "r-env", "OCI_USER_ID": "u-env"})
            .region("r-setter")
            .build()
        )

        assert config.region == "r-setter"
        assert config.user_id == "u-env"
        assert config.tenancy_id == "ocid1.tenancy.oc1..ini"

    def test_env_ignored_without_with_env(self, monkeypatch, ini_content):
        """Test that the environment is not consulted by default"""
        monkeypatch.setenv("OCI_REGION", "r-env")

        config = OciConfigBuilder().config(ini_content).build()
        assert config.region == "ap-seoul-1"

    def test_with_env_uses_oci_config(self, ini_file):
        """Test OCI_CONFIG as the INI source under with_env()"""
        config = OciConfigBuilder().with_env({"OCI_CONFIG": str(ini_file)}).build()
        assert config.region == "ap-seoul-1"

    def test_explicit_config_beats_oci_config(self, ini_content):
        """Test that config() takes the place of OCI_CONFIG"""
        other = make_ini(region="elsewhere")
        config = (
            OciConfigBuilder()
            .config(ini_content)
            .with_env({"OCI_CONFIG": other})
            .build()
        )
        assert config.region == "ap-seoul-1"

    def test_profile_selection(self, ini_content):
        """Test building from a named profile"""
        content = ini_content + "[STAGING]\nregion=eu-amsterdam-1\n"

        config = OciConfigBuilder().config(content, profile="STAGING").build()
        assert config.region == "eu-amsterdam-1"
        assert config.user_id == "ocid1.user.oc1..ini"

    def test_builder_private_key_and_compartment(self, pkcs8_pem):
        """Test building entirely from setters"""
        config = (
            OciConfigBuilder()
            .user_id("u1")
            .tenancy_id("t1")
            .region("r1")
            .fingerprint("aa:bb")
            .private_key(pkcs8_pem)
            .compartment_id("c1")
            .build()
        )

        assert config.key_id == "t1/u1/aa:bb"
        assert config.compartment_id == "c1"

    def test_builder_reusable(self, ini_content):
        """Test that build() can be called more than once"""
        builder = OciConfigBuilder().config(ini_content)
        first, second = builder.build(), builder.build()

        assert first.key_id == second.key_id
        assert first.private_key is not second.private_key

    def test_builder_empty_setter(self, ini_content):
        """Test that an empty setter value raises EnvError"""
        with pytest.raises(EnvError):
            OciConfigBuilder().config(ini_content).region("").build()

    def test_builder_empty_setter_names_no_env_var(self, ini_content):
        """Test that setter errors do not point at an environment variable"""
        with pytest.raises(EnvError) as exc_info:
            OciConfigBuilder().config(ini_content).with_env({}).user_id(" ").build()

        assert exc_info.value.field_name == "user_id"
        assert "env_var" not in exc_info.value.details

    def test_builder_passphrase_kept_verbatim(self, rsa_private_key):
        """Test a passphrase with surrounding spaces set on the builder"""
        encrypted = pem_bytes(
            rsa_private_key, encryption=serialization.BestAvailableEncryption(b" pass phrase ")
        )

        config = (
            OciConfigBuilder()
            .user_id("u1")
            .tenancy_id("t1")
            .region("r1")
            .fingerprint("aa:bb")
            .private_key(encrypted)
            .passphrase(" pass phrase ")
            .build()
        )
        assert config.private_key.private_numbers() == rsa_private_key.private_numbers()
