import json

import pytest

from certident.log import configure_logger
from certident.server.errors import (
    GENERIC_CA_ERROR,
    INVALID_PUBLIC_KEY,
    RETRIEVE_TRUST_BUNDLE_CA_ERROR,
    GRPCStatusError,
    StatusCode,
    handle_fulcio_grpc_error,
)


@pytest.fixture(autouse=True)
def _prod_logging():
    configure_logger("prod")
    yield
    configure_logger("dev")


def test_trust_bundle_error_message():
    err = handle_fulcio_grpc_error(
        None, StatusCode.INTERNAL, RuntimeError("boom"), RETRIEVE_TRUST_BUNDLE_CA_ERROR
    )
    assert str(err) == (
        "rpc error: code = Internal desc = error retrieving trust bundle from CA backend"
    )
    assert err.code is StatusCode.INTERNAL


def test_generic_ca_error_message():
    err = handle_fulcio_grpc_error(
        None, StatusCode.INTERNAL, RuntimeError("x"), GENERIC_CA_ERROR
    )
    assert str(err) == "rpc error: code = Internal desc = error communicating with CA backend"


def test_cause_is_kept():
    cause = ValueError("bad key")
    err = handle_fulcio_grpc_error(
        None, StatusCode.INVALID_ARGUMENT, cause, INVALID_PUBLIC_KEY
    )
    assert err.__cause__ is cause
    assert err.message == INVALID_PUBLIC_KEY
    with pytest.raises(GRPCStatusError) as excinfo:
        raise err
    assert excinfo.value.code is StatusCode.INVALID_ARGUMENT


def test_error_is_logged_with_fields(capsys):
    handle_fulcio_grpc_error(
        {"x-request-id": ["req-1"]},
        StatusCode.INVALID_ARGUMENT,
        RuntimeError("boom"),
        INVALID_PUBLIC_KEY,
        issuer="https://issuer.example.com",
    )
    entry = json.loads(capsys.readouterr().err)
    assert entry["message"] == "returning with error"
    assert entry["clientMessage"] == INVALID_PUBLIC_KEY
    assert entry["error"] == "boom"
    assert entry["code"] == "InvalidArgument"
    assert entry["issuer"] == "https://issuer.example.com"
    assert entry["requestID"] == "req-1"


def test_status_code_names():
    assert StatusCode(3) is StatusCode.INVALID_ARGUMENT
    err = handle_fulcio_grpc_error(
        None, StatusCode.UNIMPLEMENTED, RuntimeError("nope"), "unimplemented"
    )
    assert str(err) == "rpc error: code = Unimplemented desc = unimplemented"
    assert str(err.code) == "Unimplemented"
    invalid = handle_fulcio_grpc_error(
        None, StatusCode(3), RuntimeError("bad"), INVALID_PUBLIC_KEY
    )
    assert str(invalid.code) == "InvalidArgument"
    assert int(invalid.code) == 3