"""Principals identified by a username scoped to a configured domain."""

from __future__ import annotations

from dataclasses import dataclass

from certident.identity.issuerpool import Principal
from certident.identity.uri import is_email
from certident.oauthflow import IDToken


@dataclass(frozen=True)
class UsernamePrincipal(Principal):
    """A username together with its "username!domain" identity."""

    issuer: str
    username: str
    un_identity: str

    def name(self) -> str:
        return self.username


def principal_from_id_token(
    token: IDToken, subject_domain: str | None
) -> UsernamePrincipal:
    """Create a principal from a verified token whose subject is a username;
    ``subject_domain`` is the issuer's configured domain, or None when the
    issuer is not configured."""
    username = token.subject
    if "!" in username:
        raise ValueError("username cannot contain ! character")
    if is_email(username):
        raise ValueError("uri subject should not be an email address")
    if subject_domain is None:
        raise ValueError("invalid configuration for OIDC ID Token issuer")
    return UsernamePrincipal(
        issuer=token.issuer,
        username=username,
        un_identity=f"{username}!{subject_domain}",
    )