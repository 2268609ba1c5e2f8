"""Return calculation for a hypothetical past purchase."""

from __future__ import annotations

import logging
import math
from typing import Any

from cryptocalc.dates import parse_date
from cryptocalc.errors import (
    CalculationError,
    DivisionByZero,
    InvalidAmount,
    NoCurrentPrice,
    NoHistoricalData,
    ResultOverflow,
)
from cryptocalc.models import InvestmentQuery, InvestmentResult, normalize_symbol
from cryptocalc.repository import PriceRepository

logger = logging.getLogger(__name__)


def asset_amount(amount_usd: float, historical_price: float) -> float:
    """Units of the asset bought with ``amount_usd`` at ``historical_price``."""
    return amount_usd / historical_price


def current_value(asset_units: float, current_price: float) -> float:
    return asset_units * current_price


def profit_loss(current_value_usd: float, amount_usd: float) -> float:
    """Signed gain (positive) or loss (negative) in USD."""
    return current_value_usd - amount_usd


def profit_loss_pct(profit_loss_usd: float, amount_usd: float) -> float:
    """Signed return as a percentage (72.5 = 72.5%)."""
    return (profit_loss_usd / amount_usd) * 100


def validate_amount(amount: Any) -> float:
    if isinstance(amount, bool):
        raise InvalidAmount(amount)
    try:
        value = float(amount)
    except (TypeError, ValueError, OverflowError) as exc:
        raise InvalidAmount(amount) from exc
    if not math.isfinite(value) or value <= 0:
        raise InvalidAmount(amount)
    return value


def calculate(repository: PriceRepository, query: InvestmentQuery) -> InvestmentResult:
    """Value a purchase of ``query.amount_usd`` on ``query.purchase_date`` today.

    Reads the repository only. Raises a CalculationError subclass
    (UnknownSymbol, InvalidAmount, NoHistoricalData, NoCurrentPrice,
    DivisionByZero, ResultOverflow) or InvalidDate for an unparseable
    purchase date. Never returns a result holding inf or nan.
    """
    try:
        symbol = normalize_symbol(query.symbol)
        amount = validate_amount(query.amount_usd)
        purchase_date = parse_date(query.purchase_date)

        observation = repository.find_observation(symbol, purchase_date)
        if observation is None:
            raise NoHistoricalData(symbol, purchase_date)

        price_now = repository.current_price(symbol)
        if price_now is None:
            raise NoCurrentPrice(symbol)
    except CalculationError as exc:
        logger.debug("Rejected query %r: %s", query, exc)
        raise

    if observation.price == 0:
        logger.error(
            "Zero historical price for %s on %s; repository invariant violated",
            symbol,
            observation.date.isoformat(),
        )
        raise DivisionByZero(symbol, purchase_date)

    units = asset_amount(amount, observation.price)
    if not math.isfinite(units):
        logger.error(
            "Historical price %r for %s on %s yields a non-finite quantity",
            observation.price,
            symbol,
            observation.date.isoformat(),
        )
        raise DivisionByZero(symbol, purchase_date)

    value = current_value(units, price_now)
    pl = profit_loss(value, amount)
    pct = profit_loss_pct(pl, amount)
    for field, number in (
        ("current_value_usd", value),
        ("profit_loss_usd", pl),
        ("profit_loss_pct", pct),
    ):
        if not math.isfinite(number):
            logger.debug("Non-finite %s for %r", field, query)
            raise ResultOverflow(symbol, field)

    return InvestmentResult(
        symbol=symbol,
        purchase_date=purchase_date,
        purchase_price=observation.price,
        current_price=price_now,
        amount_usd=amount,
        asset_amount_purchased=units,
        current_value_usd=value,
        profit_loss_usd=pl,
        profit_loss_pct=pct,
    )
