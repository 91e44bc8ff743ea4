"""Client-facing error messages and gRPC-style status errors."""

from __future__ import annotations

import enum
from collections.abc import Mapping, Sequence
from typing import Any

from certident.log import context_logger

INVALID_SIGNATURE = "The signature supplied in the request could not be verified"
INVALID_PUBLIC_KEY = "The public key supplied in the request could not be parsed"
INVALID_CSR = "The certificate signing request could not be parsed"
FAILED_TO_ENTER_CERT_IN_CTL = "Error entering certificate in CTL"
FAILED_TO_MARSHAL_SCT = "Error marshaling signed certificate timestamp"
FAILED_TO_MARSHAL_CERT = "Error marshaling code signing certificate"
INSECURE_PUBLIC_KEY = "The public key supplied in the request is insecure"
INVALID_CREDENTIALS = "There was an error processing the credentials for this request"
INVALID_IDENTITY_TOKEN = "There was an error processing the identity token"
GENERIC_CA_ERROR = "error communicating with CA backend"
RETRIEVE_TRUST_BUNDLE_CA_ERROR = "error retrieving trust bundle from CA backend"
MARSHALING_CERTIFICATE_CHAIN_BUNDLE_CA_ERROR = (
    "error marshaling the certificate chain of the bundle"
)
LOADING_FULCIO_CONFIGURATION_ERROR = "error loading fulcio configuration"


class StatusCode(enum.IntEnum):
    """gRPC status codes."""

    OK = 0
    CANCELLED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15
    UNAUTHENTICATED = 16

    def __str__(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    StatusCode.OK: "OK",
    StatusCode.CANCELLED: "Canceled",
    StatusCode.UNKNOWN: "Unknown",
    StatusCode.INVALID_ARGUMENT: "InvalidArgument",
    StatusCode.DEADLINE_EXCEEDED: "DeadlineExceeded",
    StatusCode.NOT_FOUND: "NotFound",
    StatusCode.ALREADY_EXISTS: "AlreadyExists",
    StatusCode.PERMISSION_DENIED: "PermissionDenied",
    StatusCode.RESOURCE_EXHAUSTED: "ResourceExhausted",
    StatusCode.FAILED_PRECONDITION: "FailedPrecondition",
    StatusCode.ABORTED: "Aborted",
    StatusCode.OUT_OF_RANGE: "OutOfRange",
    StatusCode.UNIMPLEMENTED: "Unimplemented",
    StatusCode.INTERNAL: "Internal",
    StatusCode.UNAVAILABLE: "Unavailable",
    StatusCode.DATA_LOSS: "DataLoss",
    StatusCode.UNAUTHENTICATED: "Unauthenticated",
}


class GRPCStatusError(Exception):
    """An error carrying a status code and a message safe to show clients."""

    def __init__(self, code: StatusCode, message: str) -> None:
        super().__init__(code, message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"rpc error: code = {self.code} desc = {self.message}"


def handle_fulcio_grpc_error(
    metadata: Mapping[str, str | Sequence[str]] | None,
    code: StatusCode,
    err: Any,
    message: str,
    **kwargs: Any,
) -> GRPCStatusError:
    """Log the internal error in full and return the status error for the client."""
    fields = {"code": str(code), "clientMessage": message, "error": str(err), **kwargs}
    context_logger(metadata).error("returning with error", extra={"fields": fields})
    status = GRPCStatusError(code, message)
    if isinstance(err, BaseException):
        status.__cause__ = err
    return status