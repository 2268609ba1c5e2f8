"""Data models for price observations, queries and investment results."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date

from cryptocalc.errors import UnknownSymbol


@dataclass(slots=True, frozen=True)
class AssetInfo:
    code: str
    name: str
    data_file: str
    default_price: float


class Granularity(enum.Enum):
    DAILY = "daily"
    MONTHLY = "monthly"  # every date collapses to the 1st of its month


@dataclass(slots=True, frozen=True)
class PriceObservation:
    date: date
    price: float


@dataclass(slots=True, frozen=True)
class InvestmentQuery:
    symbol: str
    purchase_date: date | str
    amount_usd: float


@dataclass(slots=True, frozen=True)
class InvestmentResult:
    symbol: str
    purchase_date: date
    purchase_price: float
    current_price: float
    amount_usd: float
    asset_amount_purchased: float
    current_value_usd: float
    profit_loss_usd: float
    profit_loss_pct: float

    @property
    def is_profit(self) -> bool:
        return self.profit_loss_usd >= 0


# --- Asset registry ---

def _build_asset_registry() -> dict[str, AssetInfo]:
    entries = [
        AssetInfo("BTC", "Bitcoin", "btc.json", 69000.0),
        AssetInfo("ETHER", "Ethereum", "ether.json", 2523.0),
        AssetInfo("SOL", "Solana", "sol.json", 175.0),
        AssetInfo("BNB", "BNB", "bnb.json", 595.0),
    ]
    return {e.code: e for e in entries}


ASSET_REGISTRY = _build_asset_registry()
SUPPORTED_SYMBOLS = list(ASSET_REGISTRY.keys())


def normalize_symbol(raw: object) -> str:
    """Upper-case a symbol and check it against the registry."""
    if not isinstance(raw, str):
        raise UnknownSymbol(raw)
    code = raw.strip().upper()
    if code not in ASSET_REGISTRY:
        raise UnknownSymbol(raw)
    return code


def default_current_prices() -> dict[str, float]:
    return {code: info.default_price for code, info in ASSET_REGISTRY.items()}
