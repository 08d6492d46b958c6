"""Tests for br_common.errors and br_common.response."""

import pytest

from src.br_common.errors import (
    AppError,
    ErrorKind,
    cash_instrument_required,
    instrument_not_found,
    internal_error,
    invalid_order_request,
    no_market_data,
    order_not_cancellable,
    order_not_found,
    order_not_owned,
    rate_limited,
    transient_failure,
    user_not_found,
    validation_failed,
)
from src.br_common.response import ApiResponse, error_response, success_response


class TestAppError:
    def test_is_exception(self) -> None:
        err = AppError(ErrorKind.INTERNAL, 9004, "boom")
        assert isinstance(err, Exception)
        assert str(err) == "boom"

    @pytest.mark.parametrize(
        ("kind", "status"),
        [
            (ErrorKind.NOT_FOUND, 404),
            (ErrorKind.BUSINESS_RULE, 422),
            (ErrorKind.VALIDATION, 400),
            (ErrorKind.RATE_LIMITED, 429),
            (ErrorKind.TRANSIENT, 503),
            (ErrorKind.INTERNAL, 500),
        ],
    )
    def test_http_status_follows_kind(self, kind: ErrorKind, status: int) -> None:
        assert AppError(kind, 1, "x").http_status == status

    def test_repr_names_kind_and_code(self) -> None:
        err = order_not_found(7)
        assert "NOT_FOUND" in repr(err)
        assert "4001" in repr(err)


class TestFactories:
    def test_user_not_found(self) -> None:
        err = user_not_found(42)
        assert err.kind == ErrorKind.NOT_FOUND
        assert err.code == 1001
        assert "42" in err.message

    def test_instrument_not_found(self) -> None:
        err = instrument_not_found(3)
        assert err.kind == ErrorKind.NOT_FOUND
        assert err.code == 3001

    def test_no_market_data_is_business_rule(self) -> None:
        err = no_market_data("GGAL")
        assert err.kind == ErrorKind.BUSINESS_RULE
        assert "GGAL" in err.message

    def test_cash_instrument_required(self) -> None:
        err = cash_instrument_required("CASH_IN", 66)
        assert err.kind == ErrorKind.BUSINESS_RULE
        assert err.code == 4002
        assert "66" in err.message

    def test_order_not_owned_does_not_leak_details(self) -> None:
        err = order_not_owned()
        assert err.message == "Order not found or not owned by user"
        assert err.http_status == 422

    def test_order_not_cancellable_names_status(self) -> None:
        err = order_not_cancellable("FILLED")
        assert err.message == "Only NEW orders can be cancelled. Current status: FILLED"

    def test_invalid_order_request(self) -> None:
        err = invalid_order_request("bad")
        assert err.code == 4005
        assert err.kind == ErrorKind.BUSINESS_RULE

    def test_system_errors(self) -> None:
        assert validation_failed("x").http_status == 400
        assert rate_limited().http_status == 429
        assert transient_failure("lock").http_status == 503
        assert internal_error().http_status == 500


class TestApiResponse:
    def test_success_response(self) -> None:
        resp = success_response({"id": 1}, "req_abc")
        assert resp.code == 0
        assert resp.message == "success"
        assert resp.data == {"id": 1}
        assert resp.request_id == "req_abc"

    def test_error_response(self) -> None:
        resp = error_response(4001, "Order with ID 9 not found")
        assert resp.code == 4001
        assert resp.data is None
        assert resp.request_id.startswith("req_")

    def test_default_envelope(self) -> None:
        resp = ApiResponse()
        assert resp.code == 0
        assert resp.timestamp
