"""CLI entry point for cryptocalc."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click
import httpx

from cryptocalc import cache, calculator, formatters, sources
from cryptocalc.errors import CryptoCalcError
from cryptocalc.models import (
    SUPPORTED_SYMBOLS,
    Granularity,
    InvestmentQuery,
    normalize_symbol,
)

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


async def _load_data(
    symbol: str,
    data_dir: Path | None,
    data_url: str | None,
    force_refresh: bool,
) -> tuple[dict[str, sources.SeriesPairs], list[str]]:
    if data_dir is not None:
        return sources.load_series_dir(data_dir, [symbol]), []

    assert data_url is not None
    async with httpx.AsyncClient(timeout=30.0) as client:
        return await sources.fetch_all_series(
            client, data_url, [symbol], force_refresh
        )


@click.command()
@click.option(
    "--symbol",
    default="BTC",
    help=f"Asset to value ({', '.join(SUPPORTED_SYMBOLS)})",
)
@click.option(
    "--purchase-date",
    required=False,
    help="Purchase date (YYYY-MM-DD or MM/DD/YYYY)",
)
@click.option("--amount", required=False, type=float, help="Amount invested in USD")
@click.option(
    "--current-price",
    type=float,
    default=None,
    help="Override the asset's current USD price",
)
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="CRYPTOCALC_DATA_DIR",
    help="Directory holding <symbol>.json price files",
)
@click.option(
    "--data-url",
    envvar="CRYPTOCALC_DATA_URL",
    help="Base URL serving <symbol>.json price files",
)
@click.option(
    "--granularity",
    default=Granularity.DAILY.value,
    type=click.Choice([g.value for g in Granularity]),
    help=(
        "Match purchase dates by exact day or by month (default: daily). "
        "Use monthly for files dated on the 1st of each month (MM/01/YYYY)."
    ),
)
@click.option(
    "--output",
    "output_format",
    default="table",
    type=click.Choice(["table", "json", "csv"]),
    help="Output format",
)
@click.option(
    "--cache-status",
    "show_cache_status",
    is_flag=True,
    help="Show cached price files and freshness",
)
@click.option("--refresh-cache", is_flag=True, help="Force refresh of cached price data")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(
    symbol: str,
    purchase_date: str | None,
    amount: float | None,
    current_price: float | None,
    data_dir: Path | None,
    data_url: str | None,
    granularity: str,
    output_format: str,
    show_cache_status: bool,
    refresh_cache: bool,
    verbose: bool,
) -> None:
    """Crypto Investment Calculator.

    Estimates the profit or loss of a hypothetical cryptocurrency purchase
    made on a past date, valued at the asset's current price.
    """
    _configure_logging(verbose)

    if show_cache_status:
        entries = cache.cache_status()
        if not entries:
            click.echo("No cache files found.")
        else:
            click.echo("Cache files:")
            for e in entries:
                state = "stale" if e["stale"] else "fresh"
                click.echo(
                    f"  {e['file']:20s}  {e['records']:>6d} records  "
                    f"{e['size_bytes']:>8d} bytes  {state}"
                )
            click.echo(f"\nCache directory: {cache.CACHE_DIR}")
        return

    if refresh_cache and not purchase_date:
        count = cache.clear_cache()
        click.echo(f"Cleared {count} cache file(s).")
        return

    if not purchase_date and amount is None:
        click.echo(click.get_current_context().get_help())
        return

    missing = []
    if not purchase_date:
        missing.append("--purchase-date")
    if amount is None:
        missing.append("--amount")
    if missing:
        click.echo(f"Error: Missing required options: {', '.join(missing)}", err=True)
        sys.exit(1)

    if data_dir is None and not data_url:
        click.echo("Error: Provide --data-dir or --data-url.", err=True)
        sys.exit(1)

    try:
        query = InvestmentQuery(
            symbol=symbol,
            purchase_date=purchase_date,  # type: ignore[arg-type]
            amount_usd=amount,  # type: ignore[arg-type]
        )
        code = normalize_symbol(symbol)
        calculator.validate_amount(amount)

        series, warnings = asyncio.run(
            _load_data(code, data_dir, data_url, refresh_cache)
        )
        overrides = {code: current_price} if current_price is not None else None
        repo = sources.build_repository(series, overrides, Granularity(granularity))
        result = calculator.calculate(repo, query)
    except (CryptoCalcError, httpx.HTTPError, OSError) as exc:
        logger.debug("Calculation failed", exc_info=True)
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if output_format == "json":
        click.echo(formatters.format_json(result, warnings))
    elif output_format == "csv":
        click.echo(formatters.format_csv(result), nl=False)
    else:
        click.echo(formatters.format_table(result), nl=False)
        for w in warnings:
            click.echo(f"  ⚠ {w}")


if __name__ == "__main__":
    main()
