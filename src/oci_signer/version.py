"""Version information for the OCI Signer Python SDK"""

__version__ = "0.1.0"
