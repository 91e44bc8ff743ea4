"""OIDC issuers, the principals they authenticate, and a pool that routes
tokens to the matching issuer."""

from __future__ import annotations

import base64
import binascii
import json
import re
from abc import ABC, abstractmethod
from typing import Any


class MalformedTokenError(ValueError):
    """The token is not a well-formed JWT."""


class Principal(ABC):
    """An authenticated identity taken from an OIDC ID token."""

    @abstractmethod
    def name(self) -> str:
        """The email or subject of the token; the proof of possession signs it."""


class Issuer(ABC):
    """An OIDC issuer that can authenticate tokens it issued."""

    @abstractmethod
    def match(self, url: str) -> bool:
        """Whether this issuer handles tokens from the given issuer URL."""

    @abstractmethod
    def authenticate(self, token: str, *args: Any) -> Principal:
        """Verify a token and return its principal."""


class IssuerPool(list):
    """An ordered collection of issuers; the first match authenticates."""

    def authenticate(self, token: str, *args: Any) -> Principal:
        url = extract_issuer_url(token)
        for issuer in self:
            if issuer.match(url):
                return issuer.authenticate(token, *args)
        raise LookupError(
            f"failed to match issuer URL {url} from token with any configured providers"
        )


_RAW_URL_ALPHABET = re.compile(r"^[A-Za-z0-9_-]*$")


def _decode_raw_url(segment: str) -> bytes:
    if not _RAW_URL_ALPHABET.match(segment):
        raise ValueError("illegal base64 data")
    padded = segment + "=" * (-len(segment) % 4)
    return base64.urlsafe_b64decode(padded)


def extract_issuer_url(token: str) -> str:
    """Read the unverified "iss" claim from a compact JWT."""
    parts = token.split(".")
    if len(parts) != 3:
        raise MalformedTokenError(
            f"oidc: malformed jwt, expected 3 parts got {len(parts)}"
        )
    try:
        raw = _decode_raw_url(parts[1])
    except (ValueError, binascii.Error) as exc:
        raise MalformedTokenError(f"oidc: malformed jwt payload: {exc}") from exc
    try:
        payload = json.loads(raw)
    except ValueError as exc:
        raise MalformedTokenError(f"oidc: failed to unmarshal claims: {exc}") from exc
    if not isinstance(payload, dict):
        raise MalformedTokenError(
            "oidc: failed to unmarshal claims: payload is not a JSON object"
        )
    issuer = payload.get("iss")
    if issuer is None:
        return ""
    if not isinstance(issuer, str):
        raise MalformedTokenError(
            "oidc: failed to unmarshal claims: iss is not a string"
        )
    return issuer