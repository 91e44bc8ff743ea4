import pytest

from certident.identity.uri import URIPrincipal, is_email, principal_from_id_token
from certident.oauthflow import IDToken

ISSUER = "https://accounts.example.com"
DOMAIN = "https://example.com"


def _token(subject):
    return IDToken(issuer=ISSUER, subject=subject)


def test_authenticate_name():
    principal = principal_from_id_token(_token("https://example.com/users/1"), DOMAIN)
    assert principal.name() == "https://example.com/users/1"
    assert principal == URIPrincipal(issuer=ISSUER, uri="https://example.com/users/1")


def test_port_is_ignored_for_host_match():
    subject = "https://example.com:8443/users/1"
    assert principal_from_id_token(_token(subject), DOMAIN).name() == subject


def test_unconfigured_issuer():
    with pytest.raises(ValueError, match="invalid configuration for OIDC ID Token issuer"):
        principal_from_id_token(_token("https://example.com/users/1"), None)


def test_email_subject_rejected():
    with pytest.raises(ValueError, match="uri subject should not be an email address"):
        principal_from_id_token(_token("alice@example.com"), DOMAIN)


def test_scheme_mismatch():
    with pytest.raises(ValueError, match=r"subject URI scheme \(http\) must match"):
        principal_from_id_token(_token("http://example.com/users/1"), DOMAIN)


def test_host_mismatch():
    with pytest.raises(ValueError, match=r"subject hostname \(other.example.com\)"):
        principal_from_id_token(_token("https://other.example.com/users/1"), DOMAIN)


def test_control_character_rejected():
    with pytest.raises(ValueError, match="invalid control character"):
        principal_from_id_token(_token("https://example.com/\nusers"), DOMAIN)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("alice@example.com", True),
        ("first.last@mail.example.com", True),
        ("https://example.com/users/1", False),
        ("alice", False),
        ("alice@", False),
        ("alice@localhost", False),
    ],
)
def test_is_email(value, expected):
    assert is_email(value) is expected