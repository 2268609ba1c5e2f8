"""In-memory store of historical price series and current prices."""

from __future__ import annotations

import logging
import math
import threading
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any

from cryptocalc.dates import canonical_key, parse_date
from cryptocalc.errors import InvalidObservation, InvalidPrice, PriceDataError
from cryptocalc.models import Granularity, PriceObservation, normalize_symbol

logger = logging.getLogger(__name__)

DateKey = tuple[int, int, int]


def _parse_price(value: Any, error_cls: type[PriceDataError]) -> float:
    """Coerce a number or numeric string to a finite, positive float."""
    if isinstance(value, bool):
        raise error_cls(f"Price must be numeric, got {value!r}")
    try:
        price = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise error_cls(f"Price must be numeric, got {value!r}") from exc
    if not math.isfinite(price):
        raise error_cls(f"Price must be finite, got {value!r}")
    if price <= 0:
        raise error_cls(f"Price must be positive, got {value!r}")
    return price


def parse_observation(raw: Any) -> PriceObservation:
    """Build a validated observation from a pair, a mapping or an observation.

    Raises InvalidDate for unparseable dates and InvalidObservation for
    anything else that is malformed.
    """
    if isinstance(raw, PriceObservation):
        date_value, price_value = raw.date, raw.price
    elif isinstance(raw, Mapping):
        try:
            date_value, price_value = raw["date"], raw["price"]
        except KeyError as exc:
            raise InvalidObservation(
                f"Observation is missing {exc.args[0]!r}: {raw!r}"
            ) from exc
    elif isinstance(raw, (tuple, list)) and len(raw) == 2:
        date_value, price_value = raw
    else:
        raise InvalidObservation(f"Unrecognised observation: {raw!r}")

    return PriceObservation(
        date=parse_date(date_value),
        price=_parse_price(price_value, InvalidObservation),
    )


class PriceRepository:
    """Historical series and current prices, keyed by asset symbol.

    Lookups compare canonical (year, month, day) keys, so a series stored
    as "03/01/2024" matches a query for "2024-03-01". With
    ``Granularity.MONTHLY`` both sides collapse to the 1st of the month.
    """

    def __init__(self, granularity: Granularity = Granularity.DAILY) -> None:
        self.granularity = granularity
        self._series: dict[str, dict[DateKey, PriceObservation]] = {}
        self._current: dict[str, float] = {}
        self._lock = threading.RLock()

    def _key(self, d: date) -> DateKey:
        return canonical_key(d, self.granularity)

    # --- Writers ---

    def load_series(self, symbol: str, observations: Iterable[Any]) -> int:
        """Replace the series for ``symbol``. Returns the number stored.

        The whole input is validated before anything is replaced.
        """
        code = normalize_symbol(symbol)
        index: dict[DateKey, PriceObservation] = {}
        for raw in observations:
            obs = parse_observation(raw)
            key = self._key(obs.date)
            if key in index:
                raise InvalidObservation(
                    f"Duplicate observation for {code} on {obs.date.isoformat()} "
                    f"(conflicts with {index[key].date.isoformat()})"
                )
            index[key] = obs

        with self._lock:
            self._series[code] = index
        logger.debug("Loaded %d observations for %s", len(index), code)
        return len(index)

    def set_current_price(self, symbol: str, price: Any) -> None:
        code = normalize_symbol(symbol)
        value = _parse_price(price, InvalidPrice)
        with self._lock:
            self._current[code] = value

    def set_current_prices(self, prices: Mapping[str, Any]) -> None:
        """Validate every entry, then apply them together."""
        parsed = {
            normalize_symbol(sym): _parse_price(p, InvalidPrice)
            for sym, p in prices.items()
        }
        with self._lock:
            self._current.update(parsed)

    # --- Readers ---

    def find_observation(self, symbol: str, when: Any) -> PriceObservation | None:
        """Observation on the same canonical date as ``when``, or None."""
        code = normalize_symbol(symbol)
        key = self._key(parse_date(when))
        with self._lock:
            series = self._series.get(code)
            if series is None:
                return None
            return series.get(key)

    def current_price(self, symbol: str) -> float | None:
        code = normalize_symbol(symbol)
        with self._lock:
            return self._current.get(code)

    def series(self, symbol: str) -> list[PriceObservation]:
        """Chronologically sorted copy of the stored series."""
        code = normalize_symbol(symbol)
        with self._lock:
            observations = list(self._series.get(code, {}).values())
        return sorted(observations, key=lambda o: o.date)

    def symbols_loaded(self) -> list[str]:
        with self._lock:
            return sorted(self._series)
