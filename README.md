# certident

Helpers for turning verified OIDC identity tokens into signing identities, as
used by a code-signing certificate authority, plus a few server-side pieces:
status errors, version information and a request body size limit.

## Install

```
pip install certident
```

For running the tests:

```
pip install "certident[test]"
pytest
```

## Modules

- `certident.oauthflow`
  - `IDToken(issuer, subject, raw_claims)`: a token whose signature has already
    been checked; `claims()` decodes `raw_claims` as JSON and raises
    `ClaimsError` when they are absent or malformed.
  - `email_from_id_token(token)` returns `(email, verified)` and raises
    `ClaimsError("token missing email claim")` when there is no email.
  - `issuer_from_id_token(token, claim_json_path)` returns `token.issuer` for an
    empty path, otherwise the claim selected by a JSONPath expression
    (`$.a.b`, `$['a']`, `$.list[0]`, `$.*`), formatted as text. A bad path or a
    missing key raises `JSONPathError`.
- `certident.identity.issuerpool`
  - `Principal` and `Issuer` are abstract base classes: a principal has
    `name()`; an issuer has `match(url)` and `authenticate(token, *args)`.
  - `IssuerPool` is a list of issuers. `authenticate(token, *args)` reads the
    token's issuer URL and hands the token to the first issuer that matches,
    raising `LookupError` when none does.
  - `extract_issuer_url(token)` reads the `iss` claim from a compact JWT
    without verifying it; it raises `MalformedTokenError` for bad input.
- `certident.identity.kubernetes`: `principal_from_id_token(token)` builds a
  `KubernetesPrincipal` whose `uri` is
  `https://kubernetes.io/namespaces/<namespace>/serviceaccounts/<name>`, taken
  from the `kubernetes.io` claim (`kubernetes_uri(token)`).
- `certident.identity.spiffe`: `principal_from_id_token(token, trust_domain)`
  builds a `SpiffePrincipal` after `validate_spiffe_id` has checked that the
  subject is a well-formed SPIFFE ID in the configured trust domain.
- `certident.identity.uri`: `principal_from_id_token(token, subject_domain)`
  builds a `URIPrincipal` when the subject is a URI whose scheme and host match
  `subject_domain`; e-mail-shaped subjects are refused (`is_email(value)`).
- `certident.identity.username`: `principal_from_id_token(token, subject_domain)`
  builds a `UsernamePrincipal` with the identity `username!domain`; subjects
  containing `!` or shaped like an e-mail address are refused.

  For the spiffe, uri and username functions, passing `None` for the domain
  means the issuer is not configured, and a `ValueError` is raised.
- `certident.server.errors`: the client-facing message constants,
  `StatusCode`, `GRPCStatusError` (shown as
  `rpc error: code = <Code> desc = <message>`) and
  `handle_fulcio_grpc_error(metadata, code, err, message, **fields)`, which
  logs the full error and returns a `GRPCStatusError` carrying only the client
  message.
- `certident.server.version`: `version_info()` returns a frozen `Info`;
  `str(info)` is an aligned text table and `info.json_string()` is indented
  JSON.
- `certident.server.max_bytes`: `with_max_bytes(app, n)` wraps a WSGI app so
  that reading more than `n` bytes from `wsgi.input` raises `RequestTooLarge`;
  the wrapped app decides how to answer, for example with a 400.
- `certident.log`: `configure_logger(log_type)` (`"prod"` gives JSON lines on
  stderr, anything else a readable debug log on stdout), `create_cli_logger()`
  (messages only, on stderr) and `context_logger(metadata)`, which tags log
  records with `requestID` when the request metadata holds exactly one
  `x-request-id` value.

## Example

```python
from certident.oauthflow import IDToken, email_from_id_token
from certident.identity.username import principal_from_id_token

token = IDToken(
    issuer="https://issuer.example.com",
    raw_claims=b'{"email": "alice@example.com", "email_verified": true}',
)
email, verified = email_from_id_token(token)   # ("alice@example.com", True)

alice = IDToken(issuer="https://accounts.example.com", subject="alice")
principal = principal_from_id_token(alice, "example.com")
principal.name()        # "alice"
principal.un_identity   # "alice!example.com"
```

## What it does not do

- It does not verify token signatures or fetch issuer keys: an `IDToken` is
  taken as already verified, and `IssuerPool` only routes to `Issuer`
  implementations that you supply.
- It does not issue, sign or embed anything into certificates, and it keeps no
  certificate authority, transparency log client or storage.
- It has no server or command of its own; the pieces in `certident.server`
  are meant to be used inside your own service.