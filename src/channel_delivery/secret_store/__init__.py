"""
Package: secret_store
Description: Secret-backed configuration for the bridge backend.
"""

from .loader import SecretConfigLoader

__all__ = ["SecretConfigLoader"]
