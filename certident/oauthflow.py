"""Claim extraction from verified OIDC ID tokens."""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any


class ClaimsError(ValueError):
    """The token's claims are absent, malformed or lack a required value."""


class JSONPathError(ValueError):
    """A JSONPath expression is invalid or does not select a value."""


@dataclass
class IDToken:
    """A verified OIDC ID token with its raw JSON claims."""

    issuer: str = ""
    subject: str = ""
    raw_claims: bytes | str | None = None

    def claims(self) -> Any:
        """Decode the token's claims."""
        if self.raw_claims is None:
            raise ClaimsError("oidc: claims not set")
        try:
            return json.loads(self.raw_claims)
        except json.JSONDecodeError as exc:
            if exc.pos >= len(exc.doc.rstrip()):
                raise ClaimsError("unexpected end of JSON input") from exc
            raise ClaimsError(f"invalid JSON: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise ClaimsError(f"invalid JSON: {exc}") from exc


def _claims_object(token: IDToken) -> dict[str, Any]:
    claims = token.claims()
    if not isinstance(claims, dict):
        raise ClaimsError("json: cannot unmarshal claims into an object")
    return claims


def email_from_id_token(token: IDToken) -> tuple[str, bool]:
    """Return the token's email claim and whether it is verified."""
    claims = _claims_object(token)
    email = claims.get("email")
    if email is None:
        email = ""
    if not isinstance(email, str):
        raise ClaimsError("json: cannot unmarshal email claim into a string")
    verified = claims.get("email_verified")
    if verified is None:
        verified = False
    if not isinstance(verified, bool):
        raise ClaimsError("json: cannot unmarshal email_verified claim into a bool")
    if email == "":
        raise ClaimsError("token missing email claim")
    return email, verified


def issuer_from_id_token(token: IDToken, claim_json_path: str) -> str:
    """Return the token issuer, or the claim selected by a JSONPath expression."""
    if claim_json_path == "":
        return token.issuer
    claims = token.claims()
    result = _select(claims, _parse_path(claim_json_path))
    return _format_value(result)


_STEP = re.compile(
    r"""\.(?P<name>[A-Za-z_$][\w$-]*)"""
    r"""|\.(?P<dotstar>\*)"""
    r"""|\[\s*(?:(?P<index>-?\d+)|'(?P<sq>[^']*)'|"(?P<dq>[^"]*)"|(?P<star>\*))\s*\]"""
)

_Step = tuple[str, Any]


def _parse_path(path: str) -> list[_Step]:
    if not path.startswith("$"):
        raise JSONPathError(f"unexpected {path[:1]!r} at position 0 in path {path}")
    steps: list[_Step] = []
    pos = 1
    while pos < len(path):
        match = _STEP.match(path, pos)
        if match is None:
            raise JSONPathError(
                f"unexpected {path[pos]!r} at position {pos} in path {path}"
            )
        if match["name"] is not None:
            steps.append(("key", match["name"]))
        elif match["sq"] is not None:
            steps.append(("key", match["sq"]))
        elif match["dq"] is not None:
            steps.append(("key", match["dq"]))
        elif match["index"] is not None:
            steps.append(("index", int(match["index"])))
        else:
            steps.append(("wildcard", None))
        pos = match.end()
    return steps


def _select(value: Any, steps: list[_Step]) -> Any:
    if not steps:
        return value
    (kind, arg), rest = steps[0], steps[1:]
    if kind == "wildcard":
        if isinstance(value, dict):
            children = [value[key] for key in sorted(value)]
        elif isinstance(value, list):
            children = value
        else:
            raise JSONPathError(f"unsupported value type {_go_type(value)} for *")
        results = []
        for child in children:
            try:
                results.append(_select(child, rest))
            except JSONPathError:
                continue
        return results
    if kind == "key":
        if not isinstance(value, dict):
            raise JSONPathError(
                f"unsupported value type {_go_type(value)} for key {arg}"
            )
        if arg not in value:
            raise JSONPathError(f"unknown key {arg}")
        return _select(value[arg], rest)
    if not isinstance(value, list):
        raise JSONPathError(f"unsupported value type {_go_type(value)} for index {arg}")
    index = arg if arg >= 0 else len(value) + arg
    if not 0 <= index < len(value):
        raise JSONPathError(f"index {arg} out of bounds")
    return _select(value[index], rest)


def _go_type(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "float64"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "[]interface {}"
    return "map[string]interface {}"


def _format_float(number: float) -> str:
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "+Inf" if number > 0 else "-Inf"
    if number == 0:
        return "-0" if math.copysign(1.0, number) < 0 else "0"
    decimal = Decimal(repr(number)).normalize()
    sign, digit_tuple, exponent = decimal.as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    exp10 = len(digits) + int(exponent) - 1
    if -4 <= exp10 < 6:
        return format(decimal, "f")
    mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
    exp_sign = "-" if exp10 < 0 else "+"
    return f"{'-' if sign else ''}{mantissa}e{exp_sign}{abs(exp10):02d}"


def _format_value(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        try:
            return _format_float(float(value))
        except OverflowError:
            return str(value)
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return "[" + " ".join(_format_value(item) for item in value) + "]"
    if isinstance(value, dict):
        items = " ".join(
            f"{key}:{_format_value(value[key])}" for key in sorted(value)
        )
        return f"map[{items}]"
    return str(value)