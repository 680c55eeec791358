"""CoinGecko spot price source.

Fetches the current market data of a single coin from the public CoinGecko
REST API and reduces it to a ``PriceQuote``.

API Reference:
    Base URL: https://api.coingecko.com/api/v3
    Coin:     GET /coins/{id}
    Response: {"market_data": {"current_price": {"gbp": 51234.0, "usd": ...}}}
    No authentication required for the public endpoint.

Requests are single attempts. Scheduling another attempt is left to whatever
runs the recorder (cron, systemd timer).

Example:
    >>> from price_history.ingestion.sources.coingecko_source import CoinGeckoPriceSource
    >>>
    >>> source = CoinGeckoPriceSource()
    >>> source.get_price("BTC", "GBP")
    51234.0
"""

from pathlib import Path

import requests

from price_history.ingestion.sources.base_source import BasePriceSource, PriceQuote
from price_history.shared.config import Config
from price_history.shared.exceptions import FetchFailure


class CoinGeckoPriceSource(BasePriceSource):
    """Price source backed by the CoinGecko ``/coins/{id}`` endpoint."""

    SOURCE_NAME = "coingecko"

    COIN_ENDPOINT = "/coins/{coin_id}"
    PING_ENDPOINT = "/ping"

    # Only market data is needed; everything else is switched off
    QUERY_PARAMS: dict[str, str] = {
        "localization": "false",
        "tickers": "false",
        "market_data": "true",
        "community_data": "false",
        "developer_data": "false",
        "sparkline": "false",
    }

    # Ticker symbol -> CoinGecko coin id
    COIN_IDS: dict[str, str] = {
        "BTC": "bitcoin",
        "ETH": "ethereum",
        "LTC": "litecoin",
        "XRP": "ripple",
        "ADA": "cardano",
        "SOL": "solana",
        "DOGE": "dogecoin",
    }

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        log_file: Path | None = None,
    ) -> None:
        """Initialize the CoinGecko source.

        Args:
            base_url: API root (default: Config.COINGECKO_API_URL).
            timeout: Request timeout in seconds (default: Config.REQUEST_TIMEOUT).
            log_file: Optional path for file-based logging.
        """
        super().__init__(log_file=log_file)
        self.base_url = (base_url or Config.COINGECKO_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else Config.REQUEST_TIMEOUT
        self._session = self._build_session()

    @classmethod
    def coin_id(cls, asset: str) -> str:
        """CoinGecko id for a ticker symbol; unknown symbols are used lower-cased."""
        return cls.COIN_IDS.get(asset.upper(), asset.lower())

    # ------------------------------------------------------------------
    # BasePriceSource interface
    # ------------------------------------------------------------------

    def get_quote(self, asset: str, currency: str) -> PriceQuote:
        """Fetch the current CoinGecko quote for ``asset``.

        Args:
            asset: Ticker symbol (e.g. "BTC") or CoinGecko id.
            currency: Currency code the caller is interested in; used for logging.

        Returns:
            PriceQuote with every currency price present in the response.

        Raises:
            FetchFailure: On transport errors, non-2xx status or non-JSON body.
        """
        url = f"{self.base_url}{self.COIN_ENDPOINT.format(coin_id=self.coin_id(asset))}"
        self.logger.info("Fetching %s/%s price from %s", asset, currency.upper(), url)

        try:
            response = self._session.get(url, params=self.QUERY_PARAMS, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            self.logger.error("CoinGecko request failed: %s", e)
            raise FetchFailure(f"CoinGecko request failed: {e}") from e
        except ValueError as e:
            self.logger.error("CoinGecko returned a non-JSON body: %s", e)
            raise FetchFailure(f"CoinGecko returned an unparsable payload: {e}") from e

        return self._parse_quote(asset, payload)

    def health_check(self) -> bool:
        """Verify the CoinGecko API is reachable.

        Returns:
            True if ``/ping`` responds with HTTP 200, False otherwise.
        """
        try:
            response = self._session.get(f"{self.base_url}{self.PING_ENDPOINT}", timeout=10)
            return bool(response.status_code == 200)
        except requests.RequestException as e:
            self.logger.error("CoinGecko health check failed: %s", e)
            return False

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _parse_quote(self, asset: str, payload: object) -> PriceQuote:
        """Reduce a ``/coins/{id}`` payload to a PriceQuote.

        Missing sections yield an empty quote, so the caller gets InvalidPrice
        when asking for the currency rather than a KeyError here.
        """
        if not isinstance(payload, dict):
            raise FetchFailure(f"Unexpected CoinGecko payload type: {type(payload).__name__}")

        market_data = payload.get("market_data")
        if not isinstance(market_data, dict):
            market_data = {}
        current_price = market_data.get("current_price")
        if not isinstance(current_price, dict):
            current_price = {}

        return PriceQuote(
            asset=asset.upper(),
            prices={str(code).lower(): value for code, value in current_price.items()},
        )

    def _build_session(self) -> requests.Session:
        session = requests.Session()
        session.headers.update(
            {
                "User-Agent": "price-history/0.1",
                "Accept": "application/json",
            }
        )
        return session
