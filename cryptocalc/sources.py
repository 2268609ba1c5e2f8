"""Loading historical price series from local files or over HTTP.

Each series is a JSON array of ``{"date": "MM/DD/YYYY", "price": number}``
records, one file per asset (``btc.json``, ``ether.json``, ...).

Data flow per symbol when fetching over HTTP:
    1. Check cache (skip if fresh)
    2. Fetch ``<base_url>/<data_file>``
    3. On HTTP failure, fall back to a stale cache entry
    4. Save responses whose records all validate to cache
"""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import httpx

from cryptocalc import cache
from cryptocalc.errors import InvalidObservation
from cryptocalc.models import ASSET_REGISTRY, Granularity, default_current_prices
from cryptocalc.repository import PriceRepository, parse_observation

logger = logging.getLogger(__name__)

SeriesPairs = list[tuple[Any, Any]]


def parse_series_payload(payload: Any) -> SeriesPairs:
    """Turn decoded JSON into (date_text, price) pairs."""
    if not isinstance(payload, list):
        raise InvalidObservation(
            f"Price series must be a JSON array, got {type(payload).__name__}"
        )
    pairs: SeriesPairs = []
    for record in payload:
        if not isinstance(record, dict) or "date" not in record or "price" not in record:
            raise InvalidObservation(f"Malformed price record: {record!r}")
        pairs.append((record["date"], record["price"]))
    return pairs


def load_series_file(path: Path) -> SeriesPairs:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise InvalidObservation(f"{path.name} is not valid JSON: {exc}") from exc
    return parse_series_payload(payload)


def load_series_dir(directory: Path, symbols: list[str]) -> dict[str, SeriesPairs]:
    """Read ``<directory>/<data_file>`` for each symbol."""
    result: dict[str, SeriesPairs] = {}
    for symbol in symbols:
        path = directory / ASSET_REGISTRY[symbol].data_file
        if not path.exists():
            raise FileNotFoundError(f"No price file for {symbol}: {path}")
        result[symbol] = load_series_file(path)
    return result


async def fetch_series(
    client: httpx.AsyncClient,
    base_url: str,
    symbol: str,
    force_refresh: bool = False,
) -> tuple[SeriesPairs, list[str]]:
    """Fetch one symbol's series. Returns (pairs, warnings)."""
    warnings: list[str] = []

    if not force_refresh:
        cached = cache.load_series_cache(symbol)
        if cached is not None and not cache.is_series_stale(cached):
            logger.debug("Using cached series for %s", symbol)
            return parse_series_payload(cached.records), warnings

    url = f"{base_url.rstrip('/')}/{ASSET_REGISTRY[symbol].data_file}"
    try:
        resp = await client.get(url)
        resp.raise_for_status()
        records = resp.json()
    except httpx.HTTPError as exc:
        logger.warning("Failed to fetch %s: %s", url, exc)
        stale = cache.load_series_cache(symbol)
        if stale is None:
            raise
        warnings.append(f"Using stale cached price data for {symbol}.")
        return parse_series_payload(stale.records), warnings
    except json.JSONDecodeError as exc:
        raise InvalidObservation(f"{url} did not return valid JSON: {exc}") from exc

    pairs = parse_series_payload(records)
    for pair in pairs:
        parse_observation(pair)
    cache.save_series_cache(
        cache.SeriesCacheEntry(
            symbol=symbol,
            source=url,
            last_updated=datetime.now(timezone.utc),
            records=records,
        )
    )
    return pairs, warnings


async def fetch_all_series(
    client: httpx.AsyncClient,
    base_url: str,
    symbols: list[str],
    force_refresh: bool = False,
) -> tuple[dict[str, SeriesPairs], list[str]]:
    """Fetch every symbol's series in parallel.

    Returns ({symbol: pairs}, aggregated_warnings).
    """
    results = await asyncio.gather(
        *(fetch_series(client, base_url, s, force_refresh) for s in symbols)
    )

    all_series: dict[str, SeriesPairs] = {}
    all_warnings: list[str] = []
    for symbol, (pairs, warns) in zip(symbols, results, strict=True):
        all_series[symbol] = pairs
        all_warnings.extend(warns)
    return all_series, all_warnings


def build_repository(
    series: dict[str, SeriesPairs],
    current_prices: dict[str, float] | None = None,
    granularity: Granularity = Granularity.DAILY,
) -> PriceRepository:
    """Populate a fresh repository. Missing current prices use registry defaults."""
    repo = PriceRepository(granularity=granularity)
    for symbol, pairs in series.items():
        repo.load_series(symbol, pairs)
    prices = default_current_prices()
    prices.update(current_prices or {})
    repo.set_current_prices(prices)
    return repo
