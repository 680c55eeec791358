"""Tests for the price-history command line."""

import logging
from datetime import timedelta
from unittest.mock import Mock, patch

import pytest
from sqlalchemy import create_engine, text

from price_history import cli
from price_history.ingestion.sources.base_source import BasePriceSource
from price_history.shared.db.storage import open_store
from price_history.shared.exceptions import FetchFailure, InvalidPrice
from price_history.shared.observation import PriceObservation
from price_history.shared.utils import utc_now


@pytest.fixture
def db_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'history.db'}"


def _source(price=None, error: Exception | None = None) -> Mock:
    source = Mock(spec=BasePriceSource)
    if error is not None:
        source.get_price.side_effect = error
    else:
        source.get_price.return_value = price
    return source


def _seed(db_url: str, *rows: tuple[float, int, int, int]) -> None:
    """Insert (price, days_ago, hour, minute) rows relative to now."""
    now = utc_now()
    with open_store(db_url) as store:
        for price, days_ago, hour, minute in rows:
            ts = (now - timedelta(days=days_ago)).replace(hour=hour, minute=minute)
            store.insert(PriceObservation.create("BTC", "GBP", price, ts))


def _stored_count(db_url: str) -> int:
    with open_store(db_url) as store:
        return store.count()


def _create_mismatched_table(db_url: str) -> None:
    engine = create_engine(db_url)
    with engine.begin() as conn:
        conn.execute(text("CREATE TABLE price_entries (id INTEGER PRIMARY KEY)"))
    engine.dispose()


class TestUsage:
    def test_no_arguments(self, capsys):
        assert cli.main([]) == 2
        err = capsys.readouterr().err
        assert "record" in err and "stats" in err

    def test_unknown_subcommand(self, capsys):
        assert cli.main(["frobnicate"]) == 2
        err = capsys.readouterr().err
        assert "Valid subcommands: record, stats" in err

    def test_usage_error_does_not_touch_store(self, tmp_path):
        db_path = tmp_path / "never.db"
        assert cli.main(["--database-url", f"sqlite:///{db_path}", "bogus"]) == 2
        assert not db_path.exists()

    def test_non_positive_limit(self, db_url, capsys):
        assert cli.main(["--database-url", db_url, "stats", "--limit", "0"]) == 2
        assert "--limit" in capsys.readouterr().err


class TestRecordCommand:
    def test_record_ok(self, db_url, capsys):
        source = _source(51234.5)

        assert cli.main(["--database-url", db_url, "record"], source=source) == 0

        out = capsys.readouterr().out
        assert "Record: OK" in out
        assert out.startswith("-- START ")
        assert "-- END " in out
        source.get_price.assert_called_once_with("BTC", "GBP")
        assert _stored_count(db_url) == 1

    def test_record_custom_pair(self, db_url):
        source = _source(2500.0)

        cli.main(["--database-url", db_url, "record", "--asset", "eth", "--currency", "usd"], source)

        source.get_price.assert_called_once_with("eth", "usd")
        with open_store(db_url) as store:
            [obs] = store.query()
        assert (obs.asset, obs.currency, obs.price) == ("ETH", "USD", 2500.0)

    @pytest.mark.parametrize(
        "error", [FetchFailure("unreachable"), InvalidPrice("No GBP price in quote")]
    )
    def test_fetch_errors_store_nothing(self, db_url, capsys, error):
        assert cli.main(["--database-url", db_url, "record"], source=_source(error=error)) == 1

        assert "Record: OK" not in capsys.readouterr().out
        assert _stored_count(db_url) == 0

    def test_negative_price_stores_nothing(self, db_url):
        assert cli.main(["--database-url", db_url, "record"], source=_source(-3.0)) == 1
        assert _stored_count(db_url) == 0

    def test_default_source_is_coingecko(self, db_url):
        with patch.object(cli, "CoinGeckoPriceSource") as source_cls:
            source_cls.return_value.get_price.return_value = 1.0
            assert cli.main(["--database-url", db_url, "record"]) == 0
        source_cls.assert_called_once_with()

    def test_store_unavailable(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        source = _source(1.0)

        url = f"sqlite:///{blocker / 'history.db'}"
        assert cli.main(["--database-url", url, "record"], source=source) == 1
        source.get_price.assert_not_called()

    def test_database_error_after_open(self, db_url, capsys, caplog):
        _create_mismatched_table(db_url)

        assert cli.main(["--database-url", db_url, "record"], source=_source(1.0)) == 1

        assert "Record: OK" not in capsys.readouterr().out
        assert "Price store unavailable" in caplog.text

    def test_verbose_shows_component_debug(self, db_url, caplog):
        assert cli.main(["-v", "--database-url", db_url, "record"], source=_source(1.0)) == 0

        assert any(
            record.name == "price_history.SQLPriceStore" and record.levelno == logging.DEBUG
            for record in caplog.records
        )


class TestStatsCommand:
    def test_stats_window(self, db_url, capsys):
        _seed(
            db_url,
            (100.0, 1, 9, 0),
            (200.0, 2, 9, 0),
            (300.0, 3, 9, 0),
            (50.0, 1, 0, 0),
            (1.0, 40, 5, 5),  # outside the default 10-day window
        )

        assert cli.main(["--database-url", db_url, "stats", "--limit", "2"]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert lines[1:-1] == [
            "[Last 10 days] Best 2 mins to buy BTC (UTC):",
            "0:0 = Avg. 50 (price 50 - Max 50)",
            "9:0 = Avg. 200 (price 100 - Max 300)",
            "[Last 10 days] Worst 2 mins to buy BTC (UTC):",
            "9:0 = Avg. 200 (price 100 - Max 300)",
            "0:0 = Avg. 50 (price 50 - Max 50)",
        ]

    def test_explicit_days(self, db_url, capsys):
        _seed(db_url, (1.0, 40, 5, 5))

        cli.main(["--database-url", db_url, "stats", "60"])

        out = capsys.readouterr().out
        assert "[Last 60 days] Best 60 mins to buy BTC (UTC):" in out
        assert "5:5 = Avg. 1 (price 1 - Max 1)" in out

    def test_unparsable_days_same_as_omitted(self, db_url, capsys):
        _seed(db_url, (10.0, 2, 3, 30), (20.0, 20, 4, 0))

        cli.main(["--database-url", db_url, "stats"])
        omitted = capsys.readouterr().out.splitlines()[1:-1]
        cli.main(["--database-url", db_url, "stats", "abc"])
        garbage = capsys.readouterr().out.splitlines()[1:-1]

        assert garbage == omitted
        assert omitted[0].startswith("[Last 10 days]")

    def test_all_time(self, db_url, capsys):
        _seed(db_url, (1.0, 40, 5, 5), (2.0, 1, 6, 0))

        cli.main(["--database-url", db_url, "stats", "--all-time", "--limit", "5"])

        out = capsys.readouterr().out
        assert "[All time] Best 5 mins to buy BTC (UTC):" in out
        assert "[All time] Worst 5 mins to buy BTC (UTC):" in out
        assert out.count("5:5 = Avg. 1") == 2

    def test_stats_does_not_write(self, db_url):
        _seed(db_url, (1.0, 1, 1, 1))
        cli.main(["--database-url", db_url, "stats"])
        assert _stored_count(db_url) == 1

    def test_huge_days_covers_all_history(self, db_url, capsys):
        _seed(db_url, (1.0, 400, 5, 5))

        assert cli.main(["--database-url", db_url, "stats", "1000000"]) == 0

        out = capsys.readouterr().out
        assert "[Last 1000000 days] Best 60 mins to buy BTC (UTC):" in out
        assert "5:5 = Avg. 1 (price 1 - Max 1)" in out

    def test_database_error_after_open(self, db_url, caplog):
        _create_mismatched_table(db_url)

        assert cli.main(["--database-url", db_url, "stats"]) == 1
        assert "Price store unavailable" in caplog.text

    def test_failure_message_names_stats(self, db_url, caplog):
        with patch.object(cli, "build_report", side_effect=ValueError("bad window")):
            assert cli.main(["--database-url", db_url, "stats"]) == 1

        assert "Stats failed: bad window" in caplog.text
        assert "Record failed" not in caplog.text
