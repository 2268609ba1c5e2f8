"""Typed failures raised by the price repository and return calculator."""

from __future__ import annotations


class CryptoCalcError(ValueError):
    """Base class for every expected, recoverable failure."""


# --- Load-time data errors ---


class PriceDataError(CryptoCalcError):
    """Malformed data supplied to the repository. Prior state is kept."""


class InvalidObservation(PriceDataError):
    pass


class InvalidDate(PriceDataError):
    pass


class InvalidPrice(PriceDataError):
    pass


# --- Query-time errors ---


class CalculationError(CryptoCalcError):
    """A query that cannot produce an investment result."""


class UnknownSymbol(CalculationError):
    def __init__(self, symbol: object) -> None:
        self.symbol = symbol
        super().__init__(f"Unknown symbol: {symbol!r}")


class InvalidAmount(CalculationError):
    def __init__(self, amount: object) -> None:
        self.amount = amount
        super().__init__(f"Amount must be a positive number, got {amount!r}")


class NoHistoricalData(CalculationError):
    def __init__(self, symbol: str, purchase_date: object) -> None:
        self.symbol = symbol
        self.purchase_date = purchase_date
        super().__init__("No historical data available for the selected date.")


class NoCurrentPrice(CalculationError):
    def __init__(self, symbol: str) -> None:
        self.symbol = symbol
        super().__init__(f"No current price set for {symbol}.")


class DivisionByZero(CalculationError):
    """Historical price of zero reached the calculator.

    Means the repository's load-time validation was bypassed.
    """

    def __init__(self, symbol: str, purchase_date: object) -> None:
        self.symbol = symbol
        self.purchase_date = purchase_date
        super().__init__(
            f"Historical price for {symbol} on {purchase_date} is zero"
        )


class ResultOverflow(CalculationError):
    """A computed value is not a finite number."""

    def __init__(self, symbol: str, field: str) -> None:
        self.symbol = symbol
        self.field = field
        super().__init__(f"{field} for {symbol} is too large to represent")
