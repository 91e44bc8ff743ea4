"""Principals for SPIFFE identities."""

from __future__ import annotations

import re
from dataclasses import dataclass

from certident.identity.issuerpool import Principal
from certident.oauthflow import IDToken

_SCHEME_PREFIX = "spiffe://"
_TRUST_DOMAIN_CHARS = re.compile(r"^[a-z0-9._-]+$")
_SEGMENT_CHARS = re.compile(r"^[A-Za-z0-9._-]+$")


@dataclass(frozen=True)
class SpiffePrincipal(Principal):
    """A workload identified by its SPIFFE ID."""

    id: str
    issuer: str

    def name(self) -> str:
        return self.id


def _check_trust_domain_name(name: str) -> str:
    if not name:
        raise ValueError("trust domain is missing")
    if not _TRUST_DOMAIN_CHARS.match(name):
        raise ValueError(
            "trust domain characters are limited to lowercase letters, "
            "numbers, dots, dashes, and underscores"
        )
    return name


def _parse_id(value: str) -> tuple[str, str]:
    if not value:
        raise ValueError("cannot be empty")
    if not value.startswith(_SCHEME_PREFIX):
        raise ValueError("scheme is missing or invalid")
    rest = value[len(_SCHEME_PREFIX):]
    trust_domain, sep, path = rest.partition("/")
    _check_trust_domain_name(trust_domain)
    if not sep:
        return trust_domain, ""
    segments = path.split("/")
    if segments[-1] == "":
        raise ValueError("path cannot have a trailing slash")
    for segment in segments:
        if segment == "":
            raise ValueError("path cannot contain empty segments")
        if segment in (".", ".."):
            raise ValueError("path cannot contain dot segments")
        if not _SEGMENT_CHARS.match(segment):
            raise ValueError(
                "path segment characters are limited to letters, numbers, "
                "dots, dashes, and underscores"
            )
    return trust_domain, "/" + path


def _parse_trust_domain(value: str) -> str:
    if not value:
        raise ValueError("trust domain is missing")
    if "://" in value:
        return _parse_id(value)[0]
    return _check_trust_domain_name(value)


def validate_spiffe_id(spiffe_id: str, trust_domain: str) -> None:
    """Check that a SPIFFE ID is well formed and belongs to the trust domain."""
    try:
        expected = _parse_trust_domain(trust_domain)
    except ValueError as exc:
        raise ValueError(
            f"unable to parse trust domain from configuration {trust_domain}: {exc}"
        ) from exc
    try:
        actual, _ = _parse_id(spiffe_id)
    except ValueError as exc:
        raise ValueError(f"invalid spiffe ID provided: {spiffe_id}") from exc
    if actual != expected:
        raise ValueError(
            f"spiffe ID trust domain {actual} doesn't match configured "
            f"trust domain {trust_domain}"
        )


def principal_from_id_token(
    token: IDToken, trust_domain: str | None
) -> SpiffePrincipal:
    """Create a principal from a verified token; ``trust_domain`` is the issuer's
    configured SPIFFE trust domain, or None when the issuer is not configured."""
    if trust_domain is None:
        raise ValueError("invalid configuration for OIDC ID Token issuer")
    validate_spiffe_id(token.subject, trust_domain)
    return SpiffePrincipal(id=token.subject, issuer=token.issuer)