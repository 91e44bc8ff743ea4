"""Principals whose identity is a URI under a configured domain."""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import SplitResult, urlsplit

from certident.identity.issuerpool import Principal
from certident.oauthflow import IDToken

_LOCAL_ATOM = r"[\w!#$%&'*+/=?^`{|}~-]+"
_EMAIL = re.compile(
    rf'^(?:{_LOCAL_ATOM}(?:\.{_LOCAL_ATOM})*|"(?:[^"\\]|\\.)*")'
    r"@(?:(?:[^\W_]|[^\W_][\w-]*[^\W_])\.)+(?:[^\W\d_]|[^\W_][\w-]*[^\W_])\.?$"
)
_CONTROL = re.compile(r"[\x00-\x1f\x7f]")


@dataclass(frozen=True)
class URIPrincipal(Principal):
    """An identity given as a URI."""

    issuer: str
    uri: str

    def name(self) -> str:
        return self.uri


def is_email(value: str) -> bool:
    """Whether the value looks like an e-mail address."""
    return bool(_EMAIL.match(value))


def _parse_url(value: str) -> SplitResult:
    if _CONTROL.search(value):
        raise ValueError(f'parse "{value}": net/url: invalid control character in URL')
    if value.startswith(":"):
        raise ValueError(f'parse "{value}": missing protocol scheme')
    parsed = urlsplit(value)
    host = parsed.netloc.rpartition("@")[2]
    if not host.startswith("["):
        _, colon, port = host.rpartition(":")
        if colon and not port.isdigit() and port != "":
            raise ValueError(f'parse "{value}": invalid port ":{port}" after host')
    return parsed


def _hostname(parsed: SplitResult) -> str:
    host = parsed.netloc.rpartition("@")[2]
    if host.startswith("["):
        end = host.find("]")
        return host[1:end] if end != -1 else host[1:]
    name, colon, port = host.rpartition(":")
    if colon and (port == "" or port.isdigit()):
        return name
    return host


def principal_from_id_token(token: IDToken, subject_domain: str | None) -> URIPrincipal:
    """Create a principal from a verified token whose subject is a URI; its scheme
    and host must match ``subject_domain``, the issuer's configured domain, or
    None when the issuer is not configured."""
    subject = token.subject
    if subject_domain is None:
        raise ValueError("invalid configuration for OIDC ID Token issuer")
    if is_email(subject):
        raise ValueError("uri subject should not be an email address")
    subject_url = _parse_url(subject)
    domain_url = _parse_url(subject_domain)
    if subject_url.scheme != domain_url.scheme:
        raise ValueError(
            f"subject URI scheme ({subject_url.scheme}) must match expected "
            f"domain URI scheme ({domain_url.scheme})"
        )
    subject_host = _hostname(subject_url)
    domain_host = _hostname(domain_url)
    if subject_host != domain_host:
        raise ValueError(
            f"subject hostname ({subject_host}) must match expected domain ({domain_host})"
        )
    return URIPrincipal(issuer=token.issuer, uri=subject)