import json

import pytest

from certident.identity.issuerpool import Principal
from certident.identity.kubernetes import (
    KubernetesPrincipal,
    kubernetes_uri,
    principal_from_id_token,
)
from certident.oauthflow import ClaimsError, IDToken

CLAIMS = {
    "aud": ["sigstore"],
    "iss": "https://iss.example.com",
    "kubernetes.io": {
        "namespace": "foo",
        "pod": {"name": "bar", "uid": "2ff0bae1-6b8a-445b-ae03-1f8d2a08d031"},
        "serviceaccount": {
            "name": "baz",
            "uid": "5cb6264f-e283-4365-9a1f-d5a15090527e",
        },
    },
    "sub": "system:serviceaccount:foo:baz",
}


def _token(claims, subject=None):
    return IDToken(
        issuer=claims["iss"],
        subject=subject if subject is not None else claims["sub"],
        raw_claims=json.dumps(claims),
    )


def test_principal_from_id_token():
    principal = principal_from_id_token(_token(CLAIMS))
    assert principal == KubernetesPrincipal(
        issuer="https://iss.example.com",
        subject="system:serviceaccount:foo:baz",
        uri="https://kubernetes.io/namespaces/foo/serviceaccounts/baz",
    )
    assert isinstance(principal, Principal)


def test_name():
    principal = principal_from_id_token(_token(CLAIMS))
    assert principal.name() == "system:serviceaccount:foo:baz"


def test_name_uses_token_subject():
    principal = principal_from_id_token(_token(CLAIMS, subject="subject"))
    assert principal.name() == "subject"


def test_kubernetes_uri():
    assert (
        kubernetes_uri(_token(CLAIMS))
        == "https://kubernetes.io/namespaces/foo/serviceaccounts/baz"
    )


def test_missing_kubernetes_claims_give_empty_parts():
    token = IDToken(issuer="https://iss.example.com", subject="s", raw_claims="{}")
    assert kubernetes_uri(token) == "https://kubernetes.io/namespaces//serviceaccounts/"


def test_claims_not_set():
    token = IDToken(issuer="https://iss.example.com", subject="s")
    with pytest.raises(ClaimsError, match="oidc: claims not set"):
        principal_from_id_token(token)


def test_wrong_claim_type():
    claims = dict(CLAIMS, **{"kubernetes.io": "oops"})
    with pytest.raises(ClaimsError):
        principal_from_id_token(_token(claims))


def test_wrong_namespace_type():
    claims = dict(CLAIMS, **{"kubernetes.io": {"namespace": 5}})
    with pytest.raises(ClaimsError):
        kubernetes_uri(_token(claims))