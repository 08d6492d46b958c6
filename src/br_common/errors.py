"""Unified error type and error-code catalogue.

A single closed error type, ``AppError``, carries an ``ErrorKind``; the HTTP
status is derived from the kind so the boundary layer never inspects
subclasses.

Error code ranges:
  1xxx: User
  3xxx: Instrument / market data
  4xxx: Order
  9xxx: System
"""

from enum import Enum


class ErrorKind(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    BUSINESS_RULE = "BUSINESS_RULE"
    VALIDATION = "VALIDATION"
    RATE_LIMITED = "RATE_LIMITED"
    TRANSIENT = "TRANSIENT"
    INTERNAL = "INTERNAL"


_HTTP_STATUS: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.BUSINESS_RULE: 422,
    ErrorKind.VALIDATION: 400,
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.TRANSIENT: 503,
    ErrorKind.INTERNAL: 500,
}


class AppError(Exception):
    """Application error tagged with a kind and a stable numeric code."""

    def __init__(self, kind: ErrorKind, code: int, message: str) -> None:
        self.kind = kind
        self.code = code
        self.message = message
        super().__init__(message)

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS[self.kind]

    def __repr__(self) -> str:
        return f"AppError(kind={self.kind.value}, code={self.code}, message={self.message!r})"


# --- 1xxx: User ---

def user_not_found(user_id: int) -> AppError:
    return AppError(ErrorKind.NOT_FOUND, 1001, f"User with ID {user_id} not found")


# --- 3xxx: Instrument / market data ---

def instrument_not_found(instrument_id: int) -> AppError:
    return AppError(ErrorKind.NOT_FOUND, 3001, f"Instrument with ID {instrument_id} not found")


def no_market_data(ticker: str) -> AppError:
    return AppError(
        ErrorKind.BUSINESS_RULE, 3002, f"No market data available for instrument {ticker}"
    )


# --- 4xxx: Order ---

def order_not_found(order_id: int) -> AppError:
    return AppError(ErrorKind.NOT_FOUND, 4001, f"Order with ID {order_id} not found")


def cash_instrument_required(side: str, cash_instrument_id: int) -> AppError:
    return AppError(
        ErrorKind.BUSINESS_RULE,
        4002,
        f"{side} operations must use the cash instrument (ID {cash_instrument_id})",
    )


def order_not_owned() -> AppError:
    return AppError(ErrorKind.BUSINESS_RULE, 4003, "Order not found or not owned by user")


def order_not_cancellable(status: str) -> AppError:
    return AppError(
        ErrorKind.BUSINESS_RULE,
        4004,
        f"Only NEW orders can be cancelled. Current status: {status}",
    )


def invalid_order_request(detail: str) -> AppError:
    return AppError(ErrorKind.BUSINESS_RULE, 4005, f"Invalid order: {detail}")


def cash_instrument_not_tradable(side: str) -> AppError:
    return AppError(
        ErrorKind.BUSINESS_RULE,
        4006,
        f"{side} operations cannot target the cash instrument; use CASH_IN or CASH_OUT",
    )


# --- 9xxx: System ---

def validation_failed(detail: str) -> AppError:
    return AppError(ErrorKind.VALIDATION, 9001, detail)


def rate_limited() -> AppError:
    return AppError(ErrorKind.RATE_LIMITED, 9002, "Rate limit exceeded")


def transient_failure(detail: str) -> AppError:
    return AppError(ErrorKind.TRANSIENT, 9003, f"Temporarily unavailable: {detail}")


def internal_error(detail: str = "Internal server error") -> AppError:
    return AppError(ErrorKind.INTERNAL, 9004, detail)
