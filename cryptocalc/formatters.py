"""Output formatters for table, JSON, and CSV."""

from __future__ import annotations

import csv
import io
import json
from typing import Any

from rich import box
from rich.console import Console
from rich.table import Table

from cryptocalc.models import ASSET_REGISTRY, InvestmentResult


def _fmt_usd(value: float) -> str:
    """Dollar amount with thousands separators and 2 decimals."""
    if value < 0:
        return f"-${abs(value):,.2f}"
    return f"${value:,.2f}"


def _fmt_pct(val: float) -> str:
    """Format a percentage value (72.5 = 72.5%) with sign and 2 decimals."""
    if val > 0:
        return f"+{val:.2f}%"
    return f"{val:.2f}%"


def _fmt_units(value: float, symbol: str) -> str:
    return f"{value:.8f} {symbol}"


def _pl_label(result: InvestmentResult) -> str:
    return "Profit" if result.is_profit else "Loss"


def format_table(result: InvestmentResult) -> str:
    """Format a result as a Rich table rendered to string."""
    buf = io.StringIO()
    rich_console = Console(file=buf, width=100, no_color=True)

    info = ASSET_REGISTRY.get(result.symbol)
    name = f"{info.name} ({result.symbol})" if info else result.symbol
    header = (
        f"Crypto Investment Calculator\n"
        f"============================\n"
        f"Asset: {name}\n"
        f"Purchase date: {result.purchase_date.isoformat()}\n"
    )

    table = Table(box=box.SIMPLE_HEAD, pad_edge=False, show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Amount invested", _fmt_usd(result.amount_usd))
    table.add_row("Purchase price", _fmt_usd(result.purchase_price))
    table.add_row("Current price", _fmt_usd(result.current_price))
    table.add_row("Amount purchased", _fmt_units(result.asset_amount_purchased, result.symbol))
    table.add_row("Current value", _fmt_usd(result.current_value_usd))
    table.add_row(_pl_label(result), _fmt_usd(result.profit_loss_usd))
    table.add_row(f"{_pl_label(result)} %", _fmt_pct(result.profit_loss_pct))

    rich_console.print(header, end="")
    rich_console.print(table)
    return buf.getvalue()


def format_json(result: InvestmentResult, warnings: list[str] | None = None) -> str:
    """Format a result as JSON. Values keep full precision."""
    data: dict[str, Any] = {
        "symbol": result.symbol,
        "purchase_date": result.purchase_date.isoformat(),
        "purchase_price": result.purchase_price,
        "current_price": result.current_price,
        "amount_usd": result.amount_usd,
        "asset_amount_purchased": result.asset_amount_purchased,
        "current_value_usd": result.current_value_usd,
        "profit_loss_usd": result.profit_loss_usd,
        "profit_loss_pct": result.profit_loss_pct,
        "outcome": _pl_label(result).lower(),
    }
    if warnings:
        data["warnings"] = warnings
    return json.dumps(data, indent=2)


CSV_FIELDS = [
    "symbol",
    "purchase_date",
    "purchase_price",
    "current_price",
    "amount_usd",
    "asset_amount_purchased",
    "current_value_usd",
    "profit_loss_usd",
    "profit_loss_pct",
]


def format_csv(result: InvestmentResult) -> str:
    """Format a result as a one-row CSV."""
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=CSV_FIELDS)
    writer.writeheader()
    writer.writerow({
        "symbol": result.symbol,
        "purchase_date": result.purchase_date.isoformat(),
        "purchase_price": f"{result.purchase_price:.2f}",
        "current_price": f"{result.current_price:.2f}",
        "amount_usd": f"{result.amount_usd:.2f}",
        "asset_amount_purchased": f"{result.asset_amount_purchased:.8f}",
        "current_value_usd": f"{result.current_value_usd:.2f}",
        "profit_loss_usd": f"{result.profit_loss_usd:.2f}",
        "profit_loss_pct": f"{result.profit_loss_pct:.2f}",
    })
    return buf.getvalue()
