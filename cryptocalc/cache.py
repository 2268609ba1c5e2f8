"""File-based caching for downloaded price series.

Cache layout:
    ~/.cryptocalc/cache/
        series_BTC.json
        series_SOL.json
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path

CACHE_DIR = Path.home() / ".cryptocalc" / "cache"
SERIES_STALENESS_DAYS = 1


@dataclass(slots=True)
class SeriesCacheEntry:
    symbol: str
    source: str
    last_updated: datetime
    records: list[dict]  # raw {"date": ..., "price": ...} records


def _ensure_cache_dir() -> None:
    CACHE_DIR.mkdir(parents=True, exist_ok=True)


def _series_path(symbol: str) -> Path:
    return CACHE_DIR / f"series_{symbol}.json"


def load_series_cache(symbol: str) -> SeriesCacheEntry | None:
    path = _series_path(symbol)
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text())
        return SeriesCacheEntry(
            symbol=data["symbol"],
            source=data["source"],
            last_updated=datetime.fromisoformat(data["last_updated"]),
            records=data["records"],
        )
    except (json.JSONDecodeError, KeyError, TypeError, ValueError):
        return None


def save_series_cache(entry: SeriesCacheEntry) -> None:
    _ensure_cache_dir()
    data = {
        "symbol": entry.symbol,
        "source": entry.source,
        "last_updated": entry.last_updated.isoformat(),
        "records": entry.records,
    }
    _series_path(entry.symbol).write_text(json.dumps(data, indent=2))


def is_series_stale(entry: SeriesCacheEntry) -> bool:
    last = entry.last_updated
    if last.tzinfo is None:
        last = last.replace(tzinfo=timezone.utc)
    age = datetime.now(timezone.utc) - last
    return age > timedelta(days=SERIES_STALENESS_DAYS)


# --- Cache management ---

def cache_status() -> list[dict]:
    """Describe each cached series file for --cache-status."""
    _ensure_cache_dir()
    results = []
    for path in sorted(CACHE_DIR.glob("series_*.json")):
        stat = path.stat()
        entry = load_series_cache(path.stem.removeprefix("series_"))
        results.append({
            "file": path.name,
            "path": str(path),
            "size_bytes": stat.st_size,
            "records": len(entry.records) if entry else 0,
            "stale": is_series_stale(entry) if entry else True,
            "modified": datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc).isoformat(),
        })
    return results


def clear_cache() -> int:
    """Delete all cached series. Returns count of files removed."""
    if not CACHE_DIR.exists():
        return 0
    count = 0
    for path in CACHE_DIR.glob("series_*.json"):
        path.unlink()
        count += 1
    return count
