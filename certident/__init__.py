"""OIDC identity extraction, principals and server helpers for a code-signing CA."""

__version__ = "0.1.0"