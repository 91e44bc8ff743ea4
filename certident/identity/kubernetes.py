"""Principals for Kubernetes service account tokens."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from certident.identity.issuerpool import Principal
from certident.oauthflow import ClaimsError, IDToken

_KUBERNETES_URI_PREFIX = "https://kubernetes.io/namespaces/"


@dataclass(frozen=True)
class KubernetesPrincipal(Principal):
    """A Kubernetes service account identified by its token."""

    subject: str
    issuer: str
    uri: str

    def name(self) -> str:
        return self.subject


def _object(value: Any, what: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ClaimsError(f"json: cannot unmarshal {what} into an object")
    return value


def _string(value: Any, what: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ClaimsError(f"json: cannot unmarshal {what} into a string")
    return value


def kubernetes_uri(token: IDToken) -> str:
    """Build the service account URI from the token's "kubernetes.io" claims."""
    claims = _object(token.claims(), "claims")
    kubernetes = _object(claims.get("kubernetes.io"), "kubernetes.io claim")
    namespace = _string(kubernetes.get("namespace"), "namespace claim")
    pod = _object(kubernetes.get("pod"), "pod claim")
    _string(pod.get("name"), "pod name claim")
    _string(pod.get("uid"), "pod uid claim")
    account = _object(kubernetes.get("serviceaccount"), "serviceaccount claim")
    account_name = _string(account.get("name"), "serviceaccount name claim")
    _string(account.get("uid"), "serviceaccount uid claim")
    return f"{_KUBERNETES_URI_PREFIX}{namespace}/serviceaccounts/{account_name}"


def principal_from_id_token(token: IDToken) -> KubernetesPrincipal:
    """Create a principal from a verified Kubernetes ID token."""
    uri = kubernetes_uri(token)
    return KubernetesPrincipal(subject=token.subject, issuer=token.issuer, uri=uri)