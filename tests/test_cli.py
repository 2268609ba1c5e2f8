"""Tests for CLI entry point."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from cryptocalc.cli import main

SERIES = {"BTC": [("01/01/2024", 40000), ("02/01/2024", 42500)]}


@pytest.fixture(autouse=True)
def no_env(monkeypatch):
    monkeypatch.delenv("CRYPTOCALC_DATA_DIR", raising=False)
    monkeypatch.delenv("CRYPTOCALC_DATA_URL", raising=False)


def _args(*extra: str) -> list[str]:
    return [
        "--purchase-date",
        "2024-01-01",
        "--amount",
        "1000",
        "--data-url",
        "https://prices.example.test/data",
        *extra,
    ]


class TestCliValidation:
    def test_missing_required(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["--purchase-date", "2024-01-01"])
        assert result.exit_code != 0
        assert "Missing required" in result.output

    def test_no_data_source(self) -> None:
        runner = CliRunner()
        result = runner.invoke(
            main, ["--purchase-date", "2024-01-01", "--amount", "100"]
        )
        assert result.exit_code != 0
        assert "--data-dir or --data-url" in result.output

    def test_zero_amount(self) -> None:
        runner = CliRunner()
        result = runner.invoke(
            main,
            [
                "--purchase-date",
                "2024-01-01",
                "--amount",
                "0",
                "--data-url",
                "https://prices.example.test/data",
            ],
        )
        assert result.exit_code != 0
        assert "positive" in result.output

    def test_unknown_symbol(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, _args("--symbol", "DOGE"))
        assert result.exit_code != 0
        assert "Unknown symbol" in result.output

    @patch("cryptocalc.cli._load_data", new_callable=AsyncMock)
    def test_invalid_date(self, mock_load: AsyncMock) -> None:
        mock_load.return_value = (SERIES, [])
        runner = CliRunner()
        result = runner.invoke(
            main,
            [
                "--purchase-date",
                "not-a-date",
                "--amount",
                "100",
                "--data-url",
                "https://prices.example.test/data",
            ],
        )
        assert result.exit_code != 0
        assert "Invalid date" in result.output

    @patch("cryptocalc.cli._load_data", new_callable=AsyncMock)
    def test_no_historical_data(self, mock_load: AsyncMock) -> None:
        mock_load.return_value = (SERIES, [])
        runner = CliRunner()
        result = runner.invoke(
            main,
            [
                "--purchase-date",
                "2024-01-15",
                "--amount",
                "100",
                "--data-url",
                "https://prices.example.test/data",
            ],
        )
        assert result.exit_code != 0
        assert "No historical data available" in result.output


class TestCliOutput:
    @patch("cryptocalc.cli._load_data", new_callable=AsyncMock)
    def test_table_output(self, mock_load: AsyncMock) -> None:
        mock_load.return_value = (SERIES, ["Using stale cached price data for BTC."])
        runner = CliRunner()
        result = runner.invoke(main, _args())
        assert result.exit_code == 0
        assert "Crypto Investment Calculator" in result.output
        assert "$1,725.00" in result.output
        assert "stale" in result.output

    @patch("cryptocalc.cli._load_data", new_callable=AsyncMock)
    def test_json_output(self, mock_load: AsyncMock) -> None:
        mock_load.return_value = (SERIES, [])
        runner = CliRunner()
        result = runner.invoke(main, _args("--output", "json"))
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["profit_loss_usd"] == pytest.approx(725.0)
        assert data["profit_loss_pct"] == pytest.approx(72.5)

    @patch("cryptocalc.cli._load_data", new_callable=AsyncMock)
    def test_current_price_override(self, mock_load: AsyncMock) -> None:
        mock_load.return_value = (SERIES, [])
        runner = CliRunner()
        result = runner.invoke(
            main, _args("--current-price", "30000", "--output", "json")
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["profit_loss_pct"] == pytest.approx(-25.0)
        assert data["outcome"] == "loss"

    @patch("cryptocalc.cli._load_data", new_callable=AsyncMock)
    def test_csv_output(self, mock_load: AsyncMock) -> None:
        mock_load.return_value = (SERIES, [])
        runner = CliRunner()
        result = runner.invoke(main, _args("--output", "csv"))
        assert result.exit_code == 0
        assert result.output.startswith("symbol,")

    @patch("cryptocalc.cli._load_data", new_callable=AsyncMock)
    def test_monthly_granularity(self, mock_load: AsyncMock) -> None:
        mock_load.return_value = (SERIES, [])
        runner = CliRunner()
        result = runner.invoke(
            main,
            [
                "--purchase-date",
                "2024-02-17",
                "--amount",
                "1000",
                "--data-url",
                "https://prices.example.test/data",
                "--granularity",
                "monthly",
                "--output",
                "json",
            ],
        )
        assert result.exit_code == 0
        assert json.loads(result.output)["purchase_price"] == 42500.0

    def test_data_dir(self, tmp_path) -> None:  # type: ignore[no-untyped-def]
        (tmp_path / "sol.json").write_text(
            json.dumps([{"date": "03/01/2024", "price": 125}])
        )
        runner = CliRunner()
        result = runner.invoke(
            main,
            [
                "--symbol",
                "sol",
                "--purchase-date",
                "03/01/2024",
                "--amount",
                "500",
                "--data-dir",
                str(tmp_path),
                "--output",
                "json",
            ],
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["symbol"] == "SOL"
        assert data["asset_amount_purchased"] == pytest.approx(4.0)
        assert data["current_value_usd"] == pytest.approx(700.0)

    def test_data_dir_missing_file(self, tmp_path) -> None:  # type: ignore[no-untyped-def]
        runner = CliRunner()
        result = runner.invoke(
            main,
            [
                "--purchase-date",
                "2024-01-01",
                "--amount",
                "500",
                "--data-dir",
                str(tmp_path),
            ],
        )
        assert result.exit_code != 0
        assert "No price file for BTC" in result.output


class TestCliCache:
    def test_cache_status(self, tmp_path, monkeypatch) -> None:  # type: ignore[no-untyped-def]
        monkeypatch.setattr("cryptocalc.cache.CACHE_DIR", tmp_path)
        runner = CliRunner()
        result = runner.invoke(main, ["--cache-status"])
        assert result.exit_code == 0
        assert "No cache files found." in result.output

    def test_refresh_cache(self, tmp_path, monkeypatch) -> None:  # type: ignore[no-untyped-def]
        monkeypatch.setattr("cryptocalc.cache.CACHE_DIR", tmp_path)
        (tmp_path / "series_BTC.json").write_text("{}")
        runner = CliRunner()
        result = runner.invoke(main, ["--refresh-cache"])
        assert result.exit_code == 0
        assert "Cleared 1" in result.output

    def test_help(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Crypto Investment Calculator" in result.output

    def test_no_args_shows_help(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, [])
        assert result.exit_code == 0
        assert "--purchase-date" in result.output

    def test_help_mentions_monthly_files(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["--help"], terminal_width=200)
        assert result.exit_code == 0
        assert "MM/01/YYYY" in result.output
