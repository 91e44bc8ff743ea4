"""Issuer pools and principals built from verified OIDC identity tokens."""