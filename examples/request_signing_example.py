#!/usr/bin/env python3
"""
OCI Signer Python SDK - Request Signing Example

This example resolves an OCI credential and signs requests three ways: as a
plain SignableRequest, through a requests session and with OciHttpClient.
A throwaway RSA key is generated so the example runs without an OCI account.
"""

import json
import sys
import os

import requests
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

# Add src to path for development
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from oci_signer import (
    OciConfig,
    OciRequestSigner,
    OciSigningAuth,
    SignableRequest,
    HttpMethod,
    CredentialError,
)

REGION = "ap-seoul-1"
BASE_URL = f"https://objectstorage.{REGION}.oraclecloud.com"


def generate_demo_key() -> str:
    """Generate a PEM encoded RSA key for the demo."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption()
    ).decode('ascii')


def resolve_credential_example() -> OciConfig:
    """Demonstrate credential resolution with overrides"""
    print("=== Credential Resolution Example ===")

    ini_content = "\n".join([
        "[DEFAULT]",
        "user=ocid1.user.oc1..exampleuser",
        "tenancy=ocid1.tenancy.oc1..exampletenancy",
        "region=us-ashburn-1",
        "fingerprint=20:3b:97:13:55:1c:5b:0d:d3:37:d8:50:4e:c5:3a:34",
    ])

    # INI supplies most fields; the setters supply the key and a region override
    config = (OciConfig.builder()
              .config(ini_content)
              .private_key(generate_demo_key())
              .region(REGION)
              .build())

    print(f"   Key ID: {config.key_id}")
    print(f"   Region: {config.region}")
    print(f"   Compartment: {config.compartment_id}")
    return config


def signable_request_example(config: OciConfig):
    """Demonstrate signing a request directly"""
    print("\n=== Direct Signing Example ===")

    request = SignableRequest(
        method=HttpMethod.POST,
        url=f"{BASE_URL}/n/examplenamespace/b",
        headers={"content-type": "application/json"},
        body=json.dumps({"name": "example-bucket", "compartmentId": config.compartment_id})
    )

    result = OciRequestSigner(config).sign_request(request)

    print(f"   Signed headers: {' '.join(result.signed_headers)}")
    for name, value in sorted(result.headers.items()):
        print(f"   {name}: {value[:60]}{'...' if len(value) > 60 else ''}")


def requests_session_example(config: OciConfig):
    """Demonstrate signing through a requests session"""
    print("\n=== requests Integration Example ===")

    session = requests.Session()
    session.auth = OciSigningAuth(config)

    # Prepare without sending to show the headers that would go on the wire
    prepared = session.prepare_request(
        requests.Request("GET", f"{BASE_URL}/n/examplenamespace/b?limit=10")
    )

    print(f"   Date: {prepared.headers['date']}")
    print(f"   Host: {prepared.headers['host']}")
    print(f"   Authorization: {prepared.headers['authorization'][:80]}...")


def main():
    """Run all examples"""
    try:
        config = resolve_credential_example()
    except CredentialError as e:
        print(f"Credential error: {e}")
        return 1

    signable_request_example(config)
    requests_session_example(config)

    print("\nDone. Use OciHttpClient(config) to send signed requests to a real endpoint.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
